"""Core domain models for customid.

All domain objects are Pydantic BaseModel classes. A format is built fresh
from its persisted records whenever it is needed and never mutated; every
editing helper returns a new ``IdFormat``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from customid.core.elements import (
    ElementType,
    IdElement,
    new_element,
)
from customid.core.generator import generate, preview
from customid.core.ordering import move_element, normalize_sort_order, sort_elements
from customid.core.validator import build_pattern, validate


class FormatError(ValueError):
    """Raised when a set of records cannot form a well-formed format."""


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class IdFormat(BaseModel):
    """An ordered list of elements defining how identifiers are built.

    At most one SEQUENCE element is allowed. The check lives here, at
    construction, so ``generate`` and ``validate`` stay total.
    """

    elements: list[IdElement] = Field(default_factory=list)

    @model_validator(mode="after")
    def _single_sequence(self) -> IdFormat:
        count = sum(
            1 for el in self.elements if el.element_type == ElementType.SEQUENCE
        )
        if count > 1:
            raise ValueError(
                f"Only one sequence element is allowed, found {count}"
            )
        return self

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]] | None) -> IdFormat:
        """Build a format from persisted ``{elementType, config, sortOrder}`` records.

        Raises:
            FormatError: If a record has an unknown element type or the
                records hold more than one SEQUENCE element.
        """
        try:
            return cls.model_validate({"elements": list(records or [])})
        except ValidationError as exc:
            raise FormatError(str(exc)) from exc

    def to_records(self) -> list[dict[str, Any]]:
        """Return the persisted shape, camelCase keys, in stored order."""
        return [el.model_dump(by_alias=True, mode="json") for el in self.elements]

    @property
    def is_empty(self) -> bool:
        return not self.elements

    @property
    def has_sequence(self) -> bool:
        return any(el.element_type == ElementType.SEQUENCE for el in self.elements)

    def ordered(self) -> list[IdElement]:
        return sort_elements(self.elements)

    # -- editing -----------------------------------------------------------

    def normalized(self) -> IdFormat:
        """Return a copy with contiguous zero-based sort orders."""
        return IdFormat(elements=normalize_sort_order(self.elements))

    def append(self, element_type: ElementType | str) -> IdFormat:
        """Return a copy with a new element of *element_type* at the end.

        Raises:
            FormatError: If adding a second SEQUENCE element.
        """
        element_type = ElementType(element_type)
        if element_type == ElementType.SEQUENCE and self.has_sequence:
            raise FormatError("Only one sequence element is allowed")
        element = new_element(element_type, sort_order=len(self.elements))
        return IdFormat(elements=[*self.elements, element])

    def remove(self, index: int) -> IdFormat:
        """Return a normalized copy without the element at sorted position *index*.

        Raises:
            FormatError: If *index* is not a position in the format.
        """
        ordered = self.ordered()
        if not 0 <= index < len(ordered):
            raise FormatError(
                f"No element at position {index} (format has {len(ordered)})"
            )
        del ordered[index]
        return IdFormat(elements=normalize_sort_order(ordered))

    def move(self, old_index: int, new_index: int) -> IdFormat:
        return IdFormat(elements=move_element(self.elements, old_index, new_index))

    # -- engine ------------------------------------------------------------

    def generate(self, counter_value: int = 1, **kwargs: Any) -> str:
        return generate(self.elements, counter_value, **kwargs)

    def preview(self, current_counter: int, **kwargs: Any) -> str | None:
        return preview(self.elements, current_counter, **kwargs)

    def validate_id(self, candidate: str) -> bool:
        return validate(candidate, self.elements)

    def pattern(self) -> str | None:
        """Anchored recognition pattern, or None when any string is accepted."""
        if self.is_empty:
            return None
        return build_pattern(self.elements)


# ---------------------------------------------------------------------------
# Runtime configuration and state
# ---------------------------------------------------------------------------


class EngineConfig(BaseModel):
    """Configuration for callers of the engine."""

    max_attempts: int = 5
    timezone: str = "UTC"  # "local" uses the host zone
    log_level: str = "INFO"
    json_logs: bool = False


class CounterState(BaseModel):
    """Per-key monotonic counters, as an external store would hold them."""

    next_value: dict[str, int] = Field(default_factory=dict)
