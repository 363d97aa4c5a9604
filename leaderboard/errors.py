"""
Error taxonomy for the leaderboard store.

A negative modification result is not an error: it is reported through
the ``negative`` flag on :class:`~leaderboard.store.ModifyPreview` and
:class:`~leaderboard.store.ModifyResult` and resolved by the caller via
:class:`~leaderboard.store.NegativePolicy`.
"""

from __future__ import annotations


class LeaderboardError(Exception):
    """Base class for every error raised by the store."""


class ValidationError(LeaderboardError, ValueError):
    """Empty, malformed or non-numeric input."""


class NotFound(LeaderboardError, LookupError):
    """An operation addressed a record, player or game that does not exist."""


class PersistenceError(LeaderboardError):
    """Reading or writing the backing file failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
