"""Recognize exactly the identifiers a format can generate."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from customid.core.elements import IdElement
from customid.core.ordering import sort_elements
from customid.core.pattern import PatternNode, render_pattern

logger = logging.getLogger(__name__)


def pattern_nodes(elements: Sequence[IdElement]) -> list[PatternNode]:
    """Concatenate the pattern nodes of *elements* in rendering order."""
    nodes: list[PatternNode] = []
    for el in sort_elements(elements):
        nodes.extend(el.fragments())
    return nodes


def build_pattern(elements: Sequence[IdElement]) -> str:
    """Return the anchored recognition pattern for *elements* as text."""
    return render_pattern(pattern_nodes(elements))


def compile_pattern(elements: Sequence[IdElement]) -> re.Pattern[str] | None:
    """Compile the recognizer for *elements*.

    Compiled with ``re.ASCII`` so ``\\d`` matches only ``0-9``, the digits the
    generator emits. Returns None if the composite pattern fails to compile.
    That should not happen with correct escaping, so it is logged as an error.
    """
    source = build_pattern(elements)
    try:
        return re.compile(source, re.ASCII)
    except re.error:
        logger.error(
            "Custom ID pattern failed to compile: %r", source, exc_info=True
        )
        return None


def validate(candidate: str, elements: Sequence[IdElement]) -> bool:
    """Return True if *candidate* could have been generated from *elements*.

    Any string is accepted when *elements* is empty.
    """
    if not elements:
        return True

    pattern = compile_pattern(elements)
    if pattern is None:
        return False
    return pattern.fullmatch(candidate) is not None
