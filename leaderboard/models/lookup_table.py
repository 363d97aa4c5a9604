"""
Composite-key lookup table.

The canonical home of every :class:`Record`.  Keys are built with
:func:`composite_key`, so a ``(player, game)`` pair can only ever map to
one record.  The name index and traversal list are rebuilt from
:meth:`LookupTable.values` and are never consulted to decide whether a
record exists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator

from leaderboard.models.record import Record, composite_key


@dataclass
class LookupTable:
    """Hash map of composite key -> Record."""

    _records: dict[str, Record] = field(default_factory=dict, repr=False)

    # ── Point operations ────────────────────────────────────────────────

    def put(self, record: Record) -> bool:
        """Insert or overwrite *record*.  Returns True if the key was new."""
        key = record.key
        is_new = key not in self._records
        self._records[key] = record
        return is_new

    def get(self, player: str, game: str) -> Record | None:
        return self._records.get(composite_key(player, game))

    def remove(self, player: str, game: str) -> Record | None:
        return self._records.pop(composite_key(player, game), None)

    # ── Bulk removal ────────────────────────────────────────────────────

    def remove_all_by_player(self, name: str) -> int:
        """Drop every record belonging to player *name*."""
        return self._remove_where(lambda r: r.player == name)

    def remove_all_by_game(self, name: str) -> int:
        """Drop every record in game *name*."""
        return self._remove_where(lambda r: r.game == name)

    def _remove_where(self, predicate: Callable[[Record], bool]) -> int:
        # Build the survivors first and swap in one assignment so a
        # failing predicate leaves the table untouched.
        survivors = {k: r for k, r in self._records.items() if not predicate(r)}
        removed = len(self._records) - len(survivors)
        self._records = survivors
        return removed

    def replace_all(self, records: Iterable[Record]) -> int:
        """Replace the whole table; later duplicates win.

        Returns the number of distinct keys loaded.
        """
        fresh: dict[str, Record] = {}
        for record in records:
            fresh[record.key] = record
        self._records = fresh
        return len(fresh)

    def clear(self) -> None:
        self._records = {}

    # ── Queries ─────────────────────────────────────────────────────────

    def values(self) -> list[Record]:
        """Return all records (insertion order, not leaderboard order)."""
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.values())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, tuple) and len(item) == 2:
            return composite_key(*item) in self._records
        return False
