"""
Score record model.

A :class:`Record` is one player's score in one game.  The store keeps at
most one record per ``(player, game)`` pair, addressed by the composite
key built by :func:`composite_key`.

Ordering policy (used for every display, search and saved file):

- score, highest first
- recorded date, most recent first
- player name, ascending

Two records that differ only by game compare equal.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, replace

from leaderboard.config import KEY_DELIMITER


def composite_key(player: str, game: str) -> str:
    """Return the unique lookup key for a ``(player, game)`` pair."""
    return f"{player}{KEY_DELIMITER}{game}"


# ── Record ──────────────────────────────────────────────────────────────────


@dataclass
class Record:
    """A single player/game score entry."""

    player: str
    game: str
    score: int
    recorded_on: datetime.date

    @property
    def key(self) -> str:
        return composite_key(self.player, self.game)

    def copy(self) -> Record:
        """Return a detached copy safe to hand to callers."""
        return replace(self)

    def as_tuple(self) -> tuple[str, str, int, datetime.date]:
        return (self.player, self.game, self.score, self.recorded_on)

    def __str__(self) -> str:
        return f"{self.player} - {self.game} - {self.score} - {self.recorded_on.isoformat()}"


# ── Ordering ────────────────────────────────────────────────────────────────


def compare_records(a: Record, b: Record) -> int:
    """Three-way compare *a* and *b* under the leaderboard order.

    Returns -1 if *a* ranks first, 1 if *b* ranks first, 0 if score,
    date and player name all tie.
    """
    if a.score != b.score:
        return -1 if a.score > b.score else 1
    if a.recorded_on != b.recorded_on:
        return -1 if a.recorded_on > b.recorded_on else 1
    if a.player != b.player:
        return -1 if a.player < b.player else 1
    return 0
