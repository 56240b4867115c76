"""Typed pattern fragments and their rendering to ``re`` syntax.

Every element contributes a list of nodes; the validator concatenates them
and renders the whole composite in one place. Keeping literal escaping and
date-token handling here means both can be tested without compiling a full
recognizer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

HEX = "[0-9A-Fa-f]"
DIGIT = r"\d"

UUID_PATTERN = (
    "[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[1-5][0-9A-Fa-f]{3}"
    "-[89ABab][0-9A-Fa-f]{3}-[0-9A-Fa-f]{12}"
)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralNode:
    """Text that must appear verbatim."""

    text: str


@dataclass(frozen=True)
class CharRunNode:
    """A run of characters from *charset*; ``max_len=None`` means unbounded."""

    charset: str
    min_len: int
    max_len: int | None = None


@dataclass(frozen=True)
class UuidNode:
    """A textual RFC 4122 UUID (8-4-4-4-12, version and variant constrained)."""


PatternNode = LiteralNode | CharRunNode | UuidNode


# ---------------------------------------------------------------------------
# Date tokens
# ---------------------------------------------------------------------------


class DateToken(StrEnum):
    YEAR = "YYYY"
    MONTH = "MM"
    DAY = "DD"

    @property
    def width(self) -> int:
        return len(self.value)

    def render(self, now: datetime) -> str:
        if self is DateToken.YEAR:
            return f"{now.year:04d}"
        if self is DateToken.MONTH:
            return f"{now.month:02d}"
        return f"{now.day:02d}"


# Longest token first so "YYYY" is never read as two shorter tokens.
_TOKENS = sorted(DateToken, key=lambda t: -len(t.value))


def tokenize_datetime_format(fmt: str) -> list[str | DateToken]:
    """Split a DATETIME format into literal chunks and date tokens.

    Scans left to right; every occurrence of ``YYYY``, ``MM`` and ``DD`` is a
    token, everything else is literal text. Adjacent literal characters are
    merged into one chunk.
    """
    parts: list[str | DateToken] = []
    literal: list[str] = []
    i = 0
    while i < len(fmt):
        for token in _TOKENS:
            if fmt.startswith(token.value, i):
                if literal:
                    parts.append("".join(literal))
                    literal = []
                parts.append(token)
                i += len(token.value)
                break
        else:
            literal.append(fmt[i])
            i += 1
    if literal:
        parts.append("".join(literal))
    return parts


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def escape_literal(text: str) -> str:
    """Escape *text* so every character matches itself."""
    return re.escape(text)


def render_node(node: PatternNode) -> str:
    """Render a single node to ``re`` syntax."""
    if isinstance(node, LiteralNode):
        return escape_literal(node.text)
    if isinstance(node, CharRunNode):
        if node.max_len is None:
            return f"{node.charset}{{{node.min_len},}}"
        if node.max_len == node.min_len:
            return f"{node.charset}{{{node.min_len}}}"
        return f"{node.charset}{{{node.min_len},{node.max_len}}}"
    if isinstance(node, UuidNode):
        return UUID_PATTERN
    raise TypeError(f"Unknown pattern node: {node!r}")


def render_pattern(nodes: list[PatternNode], anchored: bool = True) -> str:
    """Concatenate rendered nodes, optionally anchored at both string ends.

    ``\\A``/``\\Z`` are used rather than ``^``/``$`` because ``$`` also
    matches before a trailing newline.
    """
    body = "".join(render_node(node) for node in nodes)
    if anchored:
        return rf"\A{body}\Z"
    return body
