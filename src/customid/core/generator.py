"""Render an ordered element list plus a counter value into an identifier."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from customid.core.elements import IdElement, RenderContext
from customid.core.ordering import sort_elements
from customid.core.random_source import RandomSource, SystemRandomSource, uuid4_from

logger = logging.getLogger(__name__)

_system_random = SystemRandomSource()


def generate(
    elements: Sequence[IdElement],
    counter_value: int = 1,
    *,
    random_source: RandomSource | None = None,
    now: datetime | None = None,
) -> str:
    """Generate an identifier from *elements*.

    Args:
        elements: Format elements in any order; they are stably sorted by
            ``sort_order`` before rendering.
        counter_value: Consumed only by SEQUENCE elements.
        random_source: Source for random and GUID elements. Defaults to OS
            entropy.
        now: Timestamp for DATETIME elements. Defaults to the current UTC time.

    Returns:
        The rendered elements concatenated without separator, or a fresh
        random UUID when *elements* is empty.
    """
    source = random_source or _system_random

    if not elements:
        return str(uuid4_from(source))

    ctx = RenderContext(
        counter_value=counter_value,
        random_source=source,
        now=now or datetime.now(UTC),
    )
    result = "".join(el.render(ctx) for el in sort_elements(elements))
    logger.debug(
        "Generated identifier %r from %d elements (counter=%d)",
        result,
        len(elements),
        counter_value,
    )
    return result


def preview(
    elements: Sequence[IdElement],
    current_counter: int,
    *,
    random_source: RandomSource | None = None,
    now: datetime | None = None,
) -> str | None:
    """Show what the next identifier would look like.

    Renders with ``current_counter + 1``, the value the next created item
    would receive. Returns None for an empty format, where a random UUID
    would be used instead.
    """
    if not elements:
        return None
    return generate(
        elements,
        current_counter + 1,
        random_source=random_source,
        now=now,
    )
