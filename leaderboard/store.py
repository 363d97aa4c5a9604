"""
Leaderboard store.

Composes the three record structures behind one object:

- :class:`LookupTable`, the single source of truth keyed by
  ``(player, game)``
- :class:`NameIndex`, a search tree by player name, rebuilt after every
  mutation
- :class:`TraversalList`, the flat view rebuilt before every listing

Every mutation updates the lookup table first, then rebuilds the
derived views from it, then (with ``autosave``) rewrites the backing
file.  The store is single-threaded; callers sharing it across threads
must guard the whole object with one lock.
"""

from __future__ import annotations

import datetime
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from leaderboard.config import SCORES_FILE
from leaderboard.errors import NotFound, PersistenceError
from leaderboard.models.lookup_table import LookupTable
from leaderboard.models.name_index import NameIndex
from leaderboard.models.record import Record
from leaderboard.models.traversal_list import TraversalList
from leaderboard.persistence import SkippedLine, read_records, write_records
from leaderboard.utils.functions import (
    clamp_score,
    coerce_date,
    coerce_int,
    validate_name,
)
from leaderboard.utils.sorting import merge_sort

logger = logging.getLogger(__name__)


# ── Result types ────────────────────────────────────────────────────────────


class SubmitStatus(Enum):
    CREATED = auto()
    UPDATED = auto()
    UNCHANGED = auto()


class NegativePolicy(Enum):
    """What :meth:`Store.modify` does when the result would drop below zero."""
    CLAMP = auto()
    ABORT = auto()


@dataclass(frozen=True)
class SubmitResult:
    status: SubmitStatus
    record: Record
    clamped: bool = False   # a negative score was raised to zero
    saved: bool = False


@dataclass(frozen=True)
class ModifyPreview:
    """Outcome of a score change, computed without committing it."""

    player: str
    game: str
    current: int
    delta: int

    @property
    def proposed(self) -> int:
        """The unclamped result."""
        return self.current + self.delta

    @property
    def negative(self) -> bool:
        return self.proposed < 0

    @property
    def score(self) -> int:
        """The result as it would be stored under CLAMP."""
        return clamp_score(self.proposed)[0]


@dataclass(frozen=True)
class ModifyResult:
    score: int
    previous: int
    negative: bool
    applied: bool
    saved: bool = False


@dataclass(frozen=True)
class LoadReport:
    loaded: int
    skipped: list[SkippedLine] = field(default_factory=list)


# ── Store ───────────────────────────────────────────────────────────────────


@dataclass
class Store:
    """In-memory leaderboard with optional file backing.

    ``path=None`` keeps everything in memory; ``load`` and ``save`` then
    do nothing.
    """

    path: Optional[str] = None
    autosave: bool = True
    last_error: Optional[PersistenceError] = field(default=None, init=False)

    _table: LookupTable = field(default_factory=LookupTable, init=False, repr=False)
    _names: NameIndex = field(default_factory=NameIndex, init=False, repr=False)
    _rows: TraversalList = field(default_factory=TraversalList, init=False, repr=False)
    _players: Counter = field(default_factory=Counter, init=False, repr=False)
    _games: Counter = field(default_factory=Counter, init=False, repr=False)

    @classmethod
    def from_config(cls, path: Optional[str] = None, autosave: bool = True) -> Store:
        """Build a store on *path* (default ``SCORES_FILE``) and load it."""
        store = cls(path=path if path is not None else SCORES_FILE, autosave=autosave)
        store.load()
        return store

    # ── Submission ──────────────────────────────────────────────────────

    def submit(
        self,
        player: str,
        game: str,
        score: int | str,
        recorded_on: datetime.date | str | None = None,
    ) -> SubmitResult:
        """Record *score* for *player* in *game*.

        Creates the record if the pair is new, updates score and date if
        the score differs, and does nothing if it is the same.  Negative
        scores are stored as zero and flagged on the result.
        """
        player = validate_name(player, "player")
        game = validate_name(game, "game")
        value, clamped = clamp_score(coerce_int(score, "score"))
        day = coerce_date(recorded_on)
        if clamped:
            logger.debug("Clamped negative score for %s/%s to %d", player, game, value)

        record = self._table.get(player, game)
        if record is None:
            record = Record(player=player, game=game, score=value, recorded_on=day)
            self._table.put(record)
            self._remember(record)
            status = SubmitStatus.CREATED
        elif record.score != value:
            record.score = value
            record.recorded_on = day
            status = SubmitStatus.UPDATED
        else:
            return SubmitResult(SubmitStatus.UNCHANGED, record.copy(), clamped)

        self._sync_views()
        return SubmitResult(status, record.copy(), clamped, self._autosave())

    # ── Score changes ───────────────────────────────────────────────────

    def preview_modify(self, player: str, game: str, delta: int | str) -> ModifyPreview:
        """Work out what :meth:`modify` would do, without changing anything."""
        record = self._require(player, game)
        return ModifyPreview(
            player=record.player,
            game=record.game,
            current=record.score,
            delta=coerce_int(delta, "delta"),
        )

    def modify(
        self,
        player: str,
        game: str,
        delta: int | str,
        on_negative: NegativePolicy = NegativePolicy.ABORT,
        recorded_on: datetime.date | str | None = None,
    ) -> ModifyResult:
        """Add *delta* to an existing score.

        If the result would be negative, *on_negative* decides: CLAMP
        stores zero, ABORT leaves the record as it is.  A changed score
        also takes the new date (today by default).
        """
        preview = self.preview_modify(player, game, delta)
        current = preview.current
        if preview.negative and on_negative is NegativePolicy.ABORT:
            return ModifyResult(score=current, previous=current, negative=True, applied=False)

        day = coerce_date(recorded_on)
        new_score = preview.score
        if new_score == current:
            return ModifyResult(score=current, previous=current, negative=preview.negative, applied=True)

        record = self._table.get(preview.player, preview.game)
        record.score = new_score
        record.recorded_on = day
        self._sync_views()
        return ModifyResult(
            score=new_score,
            previous=current,
            negative=preview.negative,
            applied=True,
            saved=self._autosave(),
        )

    def set_to_zero(
        self,
        player: str,
        game: str,
        recorded_on: datetime.date | str | None = None,
    ) -> bool:
        """Reset a score to zero.  Returns False if it already was."""
        record = self._require(player, game)
        if record.score == 0:
            return False
        record.score = 0
        record.recorded_on = coerce_date(recorded_on)
        self._sync_views()
        self._autosave()
        return True

    # ── Deletion ────────────────────────────────────────────────────────

    def delete_record(self, player: str, game: str) -> bool:
        player = validate_name(player, "player")
        game = validate_name(game, "game")
        record = self._table.remove(player, game)
        if record is None:
            return False
        self._forget(record)
        self._sync_views()
        self._autosave()
        return True

    def delete_player(self, name: str) -> int:
        """Remove every record for player *name*; returns how many."""
        name = validate_name(name, "player")
        if name not in self._players:
            raise NotFound(f"unknown player {name!r}")
        removed = self._table.remove_all_by_player(name)
        self._rebuild_known()
        self._sync_views()
        self._autosave()
        return removed

    def delete_game(self, name: str) -> int:
        """Remove every record in game *name*; returns how many.

        Players left without any record drop out of ``known_players``.
        """
        name = validate_name(name, "game")
        if name not in self._games:
            raise NotFound(f"unknown game {name!r}")
        removed = self._table.remove_all_by_game(name)
        self._rebuild_known()
        self._sync_views()
        self._autosave()
        return removed

    # ── Queries ─────────────────────────────────────────────────────────

    def list(self, game: Optional[str] = None) -> list[Record]:
        """All records in leaderboard order, optionally for one game only."""
        rows = self._refresh_rows()
        if game is not None:
            game = validate_name(game, "game")
            rows = [r for r in rows if r.game == game]
        return [r.copy() for r in merge_sort(rows)]

    def search_by_player(self, name: str) -> list[Record]:
        """Every record whose player matches *name*, ignoring case."""
        needle = validate_name(name, "player").casefold()
        rows = [r for r in self._refresh_rows() if r.player.casefold() == needle]
        return [r.copy() for r in merge_sort(rows)]

    def find_by_name(self, name: str) -> Record | None:
        """Look *name* up in the name index.

        The index keeps one record per exact player name (the one
        inserted last), so use :meth:`search_by_player` to see all of a
        player's games.
        """
        record = self._names.find_by_name(validate_name(name, "player"))
        return record.copy() if record is not None else None

    def players_between(self, low: str, high: str) -> list[str]:
        """Known player names in the inclusive range ``[low, high]``."""
        return self._names.names_between(low, high)

    def get(self, player: str, game: str) -> Record | None:
        record = self._table.get(validate_name(player, "player"), validate_name(game, "game"))
        return record.copy() if record is not None else None

    def top_score(self, game: Optional[str] = None) -> int:
        """Highest score overall or within *game*; 0 when empty."""
        rows = self.list(game)
        return rows[0].score if rows else 0

    def rank(self, player: str, game: str) -> int:
        """1-based position of the record within its game, or 0 if absent."""
        player = validate_name(player, "player")
        for position, record in enumerate(self.list(game), start=1):
            if record.player == player:
                return position
        return 0

    @property
    def known_players(self) -> list[str]:
        return sorted(self._players)

    @property
    def known_games(self) -> list[str]:
        return sorted(self._games)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, item: object) -> bool:
        return item in self._table

    # ── Persistence ─────────────────────────────────────────────────────

    def load(self) -> LoadReport:
        """Replace the in-memory contents with the backing file.

        Never raises: an unreadable file leaves the store empty and the
        error in ``last_error``; malformed lines are skipped.
        """
        if self.path is None:
            return LoadReport(loaded=len(self._table))
        try:
            records, skipped = read_records(self.path)
        except PersistenceError as exc:
            logger.error("Could not load scores, starting empty: %s", exc)
            self.last_error = exc
            records, skipped = [], []
        else:
            self.last_error = None

        self._table.replace_all(records)
        self._rebuild_known()
        self._sync_views()
        return LoadReport(loaded=len(self._table), skipped=skipped)

    def save(self) -> None:
        """Rewrite the backing file.  Raises PersistenceError on failure."""
        if self.path is None:
            return
        write_records(self.path, self._table.values())
        self.last_error = None

    def _autosave(self) -> bool:
        if not self.autosave or self.path is None:
            return False
        try:
            self.save()
        except PersistenceError as exc:
            # In-memory state stays as is; the next successful save catches up.
            logger.warning("Autosave failed: %s", exc)
            self.last_error = exc
            return False
        return True

    # ── Internal bookkeeping ────────────────────────────────────────────

    def _require(self, player: str, game: str) -> Record:
        player = validate_name(player, "player")
        game = validate_name(game, "game")
        record = self._table.get(player, game)
        if record is None:
            raise NotFound(f"no score for {player!r} in {game!r}")
        return record

    def _remember(self, record: Record) -> None:
        self._players[record.player] += 1
        self._games[record.game] += 1

    def _forget(self, record: Record) -> None:
        for known, name in ((self._players, record.player), (self._games, record.game)):
            known[name] -= 1
            if known[name] <= 0:
                del known[name]

    def _rebuild_known(self) -> None:
        self._players = Counter(r.player for r in self._table.values())
        self._games = Counter(r.game for r in self._table.values())

    def _sync_views(self) -> None:
        self._names.clear()
        for record in self._table.values():
            self._names.insert(record)
        self._refresh_rows()

    def _refresh_rows(self) -> list[Record]:
        self._rows.clear()
        self._rows.add_all(self._table.values())
        return self._rows.to_sequence()
