"""Element vocabulary of the custom identifier format language.

Each element type is its own Pydantic model carrying only its own config.
``IdElement`` is the tagged union over all of them, keyed by ``elementType``.
Every variant knows how to render itself and which pattern nodes it
contributes; the generator and validator both dispatch through these two
methods and nothing else.

Records use the persisted camelCase shape::

    {"elementType": "SEQUENCE", "config": {"padding": 4}, "sortOrder": 1}
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from customid.core.pattern import (
    DIGIT,
    HEX,
    CharRunNode,
    DateToken,
    LiteralNode,
    PatternNode,
    UuidNode,
    tokenize_datetime_format,
)
from customid.core.random_source import RandomSource, uuid4_from

MIN_PADDING = 1
MAX_PADDING = 10


class ElementType(StrEnum):
    FIXED_TEXT = "FIXED_TEXT"
    RANDOM_20BIT = "RANDOM_20BIT"
    RANDOM_32BIT = "RANDOM_32BIT"
    RANDOM_6DIGIT = "RANDOM_6DIGIT"
    RANDOM_9DIGIT = "RANDOM_9DIGIT"
    GUID = "GUID"
    DATETIME = "DATETIME"
    SEQUENCE = "SEQUENCE"


@dataclass
class RenderContext:
    """Inputs shared by every element during one generation call."""

    counter_value: int
    random_source: RandomSource
    now: datetime


# ---------------------------------------------------------------------------
# Per-type configuration
# ---------------------------------------------------------------------------


class NoConfig(BaseModel):
    """Config for element types that take no options."""

    model_config = ConfigDict(extra="ignore")


class FixedTextConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _text_or_default(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""


class DateTimeConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: str = "YYYY"

    @field_validator("format", mode="before")
    @classmethod
    def _format_or_default(cls, v: Any) -> str:
        # An empty format falls back too; it would render nothing.
        return v if isinstance(v, str) and v else "YYYY"


class SequenceConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    padding: int = MIN_PADDING

    @field_validator("padding", mode="before")
    @classmethod
    def _clamp_padding(cls, v: Any) -> int:
        if isinstance(v, bool):
            return MIN_PADDING
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        elif isinstance(v, str):
            try:
                v = int(v.strip())
            except ValueError:
                return MIN_PADDING
        if not isinstance(v, int):
            return MIN_PADDING
        return max(MIN_PADDING, min(MAX_PADDING, v))


# ---------------------------------------------------------------------------
# Element variants
# ---------------------------------------------------------------------------


class _BaseElement(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    sort_order: int

    @field_validator("config", mode="before", check_fields=False)
    @classmethod
    def _mapping_or_empty(cls, v: Any) -> Any:
        if isinstance(v, BaseModel):
            return v.model_dump()
        return v if isinstance(v, dict) else {}

    def render(self, ctx: RenderContext) -> str:
        raise NotImplementedError

    def fragments(self) -> list[PatternNode]:
        raise NotImplementedError


class FixedTextElement(_BaseElement):
    element_type: Literal["FIXED_TEXT"] = "FIXED_TEXT"
    config: FixedTextConfig = Field(default_factory=FixedTextConfig)

    def render(self, ctx: RenderContext) -> str:
        return self.config.value

    def fragments(self) -> list[PatternNode]:
        if not self.config.value:
            return []
        return [LiteralNode(self.config.value)]


class Random20BitElement(_BaseElement):
    """Five hex digits (20 random bits)."""

    element_type: Literal["RANDOM_20BIT"] = "RANDOM_20BIT"
    config: NoConfig = Field(default_factory=NoConfig)

    def render(self, ctx: RenderContext) -> str:
        return f"{ctx.random_source.randbits(20):05X}"

    def fragments(self) -> list[PatternNode]:
        return [CharRunNode(HEX, 5, 5)]


class Random32BitElement(_BaseElement):
    """Eight hex digits (32 random bits)."""

    element_type: Literal["RANDOM_32BIT"] = "RANDOM_32BIT"
    config: NoConfig = Field(default_factory=NoConfig)

    def render(self, ctx: RenderContext) -> str:
        return f"{ctx.random_source.randbits(32):08X}"

    def fragments(self) -> list[PatternNode]:
        return [CharRunNode(HEX, 8, 8)]


class Random6DigitElement(_BaseElement):
    element_type: Literal["RANDOM_6DIGIT"] = "RANDOM_6DIGIT"
    config: NoConfig = Field(default_factory=NoConfig)

    def render(self, ctx: RenderContext) -> str:
        return str(ctx.random_source.randint(100_000, 999_999))

    def fragments(self) -> list[PatternNode]:
        return [CharRunNode(DIGIT, 6, 6)]


class Random9DigitElement(_BaseElement):
    element_type: Literal["RANDOM_9DIGIT"] = "RANDOM_9DIGIT"
    config: NoConfig = Field(default_factory=NoConfig)

    def render(self, ctx: RenderContext) -> str:
        return str(ctx.random_source.randint(100_000_000, 999_999_999))

    def fragments(self) -> list[PatternNode]:
        return [CharRunNode(DIGIT, 9, 9)]


class GuidElement(_BaseElement):
    element_type: Literal["GUID"] = "GUID"
    config: NoConfig = Field(default_factory=NoConfig)

    def render(self, ctx: RenderContext) -> str:
        return str(uuid4_from(ctx.random_source))

    def fragments(self) -> list[PatternNode]:
        return [UuidNode()]


class DateTimeElement(_BaseElement):
    """Current date with ``YYYY``, ``MM`` and ``DD`` substituted."""

    element_type: Literal["DATETIME"] = "DATETIME"
    config: DateTimeConfig = Field(default_factory=DateTimeConfig)

    def render(self, ctx: RenderContext) -> str:
        return "".join(
            part.render(ctx.now) if isinstance(part, DateToken) else part
            for part in tokenize_datetime_format(self.config.format)
        )

    def fragments(self) -> list[PatternNode]:
        return [
            CharRunNode(DIGIT, part.width, part.width)
            if isinstance(part, DateToken)
            else LiteralNode(part)
            for part in tokenize_datetime_format(self.config.format)
        ]


class SequenceElement(_BaseElement):
    """The counter value, left-zero-padded to at least ``padding`` digits.

    The pattern has no upper bound on length, so a sequence immediately
    followed by another digit-producing element can absorb its digits.
    """

    element_type: Literal["SEQUENCE"] = "SEQUENCE"
    config: SequenceConfig = Field(default_factory=SequenceConfig)

    def render(self, ctx: RenderContext) -> str:
        return str(max(ctx.counter_value, 0)).zfill(self.config.padding)

    def fragments(self) -> list[PatternNode]:
        return [CharRunNode(DIGIT, self.config.padding, None)]


# ---------------------------------------------------------------------------
# Tagged union
# ---------------------------------------------------------------------------


def _element_tag(value: Any) -> str | None:
    if isinstance(value, dict):
        tag = value.get("elementType", value.get("element_type"))
    else:
        tag = getattr(value, "element_type", None)
    return str(tag) if tag is not None else None


IdElement = Annotated[
    Union[
        Annotated[FixedTextElement, Tag(ElementType.FIXED_TEXT.value)],
        Annotated[Random20BitElement, Tag(ElementType.RANDOM_20BIT.value)],
        Annotated[Random32BitElement, Tag(ElementType.RANDOM_32BIT.value)],
        Annotated[Random6DigitElement, Tag(ElementType.RANDOM_6DIGIT.value)],
        Annotated[Random9DigitElement, Tag(ElementType.RANDOM_9DIGIT.value)],
        Annotated[GuidElement, Tag(ElementType.GUID.value)],
        Annotated[DateTimeElement, Tag(ElementType.DATETIME.value)],
        Annotated[SequenceElement, Tag(ElementType.SEQUENCE.value)],
    ],
    Discriminator(_element_tag),
]

ELEMENT_CLASSES: dict[ElementType, type[_BaseElement]] = {
    ElementType.FIXED_TEXT: FixedTextElement,
    ElementType.RANDOM_20BIT: Random20BitElement,
    ElementType.RANDOM_32BIT: Random32BitElement,
    ElementType.RANDOM_6DIGIT: Random6DigitElement,
    ElementType.RANDOM_9DIGIT: Random9DigitElement,
    ElementType.GUID: GuidElement,
    ElementType.DATETIME: DateTimeElement,
    ElementType.SEQUENCE: SequenceElement,
}

# Config a freshly added element starts with in the format editor.
EDITOR_DEFAULTS: dict[ElementType, dict[str, Any]] = {
    ElementType.SEQUENCE: {"padding": 4},
    ElementType.DATETIME: {"format": "YYYY"},
}

_element_adapter: TypeAdapter[IdElement] = TypeAdapter(IdElement)


def parse_element(record: dict[str, Any] | BaseModel) -> IdElement:
    """Validate one persisted record into its element variant.

    Raises:
        pydantic.ValidationError: If ``elementType`` is missing or unknown.
    """
    return _element_adapter.validate_python(record)


def new_element(element_type: ElementType | str, sort_order: int) -> IdElement:
    """Create an element of *element_type* with the editor's starting config."""
    element_type = ElementType(element_type)
    cls = ELEMENT_CLASSES[element_type]
    return cls(
        sort_order=sort_order,
        config=EDITOR_DEFAULTS.get(element_type, {}),
    )
