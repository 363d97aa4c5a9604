"""
Merge sort used for every ordered view of the leaderboard.

Works on any iterable (the traversal list, dict views, generators) and
never mutates its input.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from leaderboard.models.record import compare_records

T = TypeVar("T")


def merge_sort(items: Iterable[T], compare: Callable[[T, T], int] | None = None) -> list[T]:
    """Return a new list holding *items* in *compare* order.

    Stable: elements that compare equal keep their original relative
    order.  *compare* defaults to the leaderboard record order.
    """
    if compare is None:
        compare = compare_records
    return _sort(list(items), compare)


def _sort(seq: list[T], compare: Callable[[T, T], int]) -> list[T]:
    if len(seq) <= 1:
        return seq
    mid = len(seq) // 2
    left = _sort(seq[:mid], compare)
    right = _sort(seq[mid:], compare)
    return _merge(left, right, compare)


def _merge(left: list[T], right: list[T], compare: Callable[[T, T], int]) -> list[T]:
    merged: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # <= keeps the left element on ties
        if compare(left[i], right[j]) <= 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged
