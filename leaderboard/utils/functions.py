"""
Input coercion and validation helpers for the leaderboard store.

Every public :class:`~leaderboard.store.Store` operation funnels its
arguments through these so that malformed input is rejected with a
:class:`~leaderboard.errors.ValidationError` before any structure is
touched.
"""

from __future__ import annotations

import datetime
import re

from leaderboard.config import FORBIDDEN_NAME_CHARS, MIN_SCORE
from leaderboard.errors import ValidationError

_INT_RE = re.compile(r"-?[0-9]+")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


# ── Names ───────────────────────────────────────────────────────────────────


def validate_name(value: object, field: str = "name") -> str:
    """Return *value* stripped of surrounding whitespace.

    Raises ValidationError for non-strings, blank names, and names
    containing a field separator or line break (the file format cannot
    represent those).
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string, got {type(value).__name__}")
    name = value.strip()
    if not name:
        raise ValidationError(f"{field} must not be empty")
    bad = [ch for ch in FORBIDDEN_NAME_CHARS if ch in name]
    if bad:
        raise ValidationError(f"{field} {name!r} contains a forbidden character {bad[0]!r}")
    return name


# ── Numbers ─────────────────────────────────────────────────────────────────


def coerce_int(value: object, field: str = "score") -> int:
    """Convert *value* to ``int``.

    Accepts ints and plain base-10 strings: ASCII digits with an
    optional leading minus, surrounding whitespace allowed.  Signs like
    ``+7``, underscores, booleans and floats are rejected.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _INT_RE.fullmatch(text):
            raise ValidationError(f"{field} must be a number, got {value!r}")
        return int(text, 10)
    raise ValidationError(f"{field} must be an integer, got {type(value).__name__}")


def clamp_score(value: int) -> tuple[int, bool]:
    """Clamp *value* to the minimum score.

    Returns ``(score, clamped)`` where *clamped* is True if the input
    was below the minimum.
    """
    if value < MIN_SCORE:
        return MIN_SCORE, True
    return value, False


# ── Dates ───────────────────────────────────────────────────────────────────


def coerce_date(value: object = None) -> datetime.date:
    """Return a calendar date; ``None`` means today."""
    if value is None:
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _DATE_RE.fullmatch(text):
            try:
                return datetime.date.fromisoformat(text)
            except ValueError:
                pass  # shaped right but not a real day, e.g. 2024-02-30
        raise ValidationError(f"date must be YYYY-MM-DD, got {value!r}")
    raise ValidationError(f"date must be a date, got {type(value).__name__}")
