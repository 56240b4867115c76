"""Stable ordering and sort-order normalization of format elements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from customid.core.elements import IdElement


def sort_elements(elements: Iterable[IdElement]) -> list[IdElement]:
    """Return *elements* ascending by ``sort_order``.

    ``sorted`` is stable, so elements sharing a sort order keep their input
    order. Generator and validator both order through this function.
    """
    return sorted(elements, key=lambda el: el.sort_order)


def normalize_sort_order(elements: Iterable[IdElement]) -> list[IdElement]:
    """Return copies of *elements* re-indexed to contiguous ``0..n-1``.

    Gaps and duplicate sort orders left by inserts, removals or reordering
    collapse into a canonical sequence. The inputs are not mutated.
    """
    return [
        el.model_copy(update={"sort_order": index})
        for index, el in enumerate(sort_elements(elements))
    ]


def move_element(elements: Sequence[IdElement], old_index: int, new_index: int) -> list[IdElement]:
    """Move the element at *old_index* to *new_index* and re-index.

    Indices refer to positions in the sorted list and are clamped into
    range, so a drag past either end lands on that end.
    """
    ordered = sort_elements(elements)
    if not ordered:
        return []
    last = len(ordered) - 1
    old_index = max(0, min(last, old_index))
    new_index = max(0, min(last, new_index))
    ordered.insert(new_index, ordered.pop(old_index))
    return [
        el.model_copy(update={"sort_order": index})
        for index, el in enumerate(ordered)
    ]
