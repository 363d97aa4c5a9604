"""
Singly linked list of records.

A throwaway view rebuilt from the lookup table before each display
refresh; it never decides what the store contains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from leaderboard.models.record import Record


@dataclass
class _Link:
    record: Record
    next: Optional[_Link] = None


@dataclass
class TraversalList:
    """Append-only linked sequence with O(1) tail insertion."""

    _head: Optional[_Link] = field(default=None, repr=False)
    _tail: Optional[_Link] = field(default=None, repr=False)
    _size: int = 0

    def add(self, record: Record) -> None:
        link = _Link(record)
        if self._tail is None:
            self._head = self._tail = link
        else:
            self._tail.next = link
            self._tail = link
        self._size += 1

    def add_all(self, records: Iterable[Record]) -> None:
        for record in records:
            self.add(record)

    def clear(self) -> None:
        self._head = self._tail = None
        self._size = 0

    def to_sequence(self) -> list[Record]:
        return list(self)

    def __iter__(self) -> Iterator[Record]:
        link = self._head
        while link is not None:
            yield link.record
            link = link.next

    def __len__(self) -> int:
        return self._size
