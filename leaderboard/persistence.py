"""
Flat-file persistence for the leaderboard.

One record per line::

    player,score,date,game

``score`` is a non-negative base-10 integer and ``date`` is ISO-8601
(``YYYY-MM-DD``).  Names cannot contain commas or line breaks; the store
rejects such names on input so every stored record survives a round
trip.

Loading is best-effort: a malformed line is logged and skipped, the
rest of the file still loads.  Saving always rewrites the whole file.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from typing import Iterable

from leaderboard.config import (
    FIELD_COUNT,
    FIELD_SEPARATOR,
    FILE_ENCODING,
    MIN_SCORE,
    NEW_FILE_MODE,
)
from leaderboard.errors import PersistenceError, ValidationError
from leaderboard.models.record import Record
from leaderboard.utils.functions import coerce_date, coerce_int, validate_name
from leaderboard.utils.sorting import merge_sort

logger = logging.getLogger(__name__)

SkippedLine = tuple[int, str]  # (1-based line number, reason)


# ── Line codec ──────────────────────────────────────────────────────────────


def encode_record(record: Record) -> str:
    """Render *record* as a single line (without the trailing newline)."""
    fields = (
        validate_name(record.player, "player"),
        str(record.score),
        record.recorded_on.isoformat(),
        validate_name(record.game, "game"),
    )
    return FIELD_SEPARATOR.join(fields)


def decode_line(line: str) -> Record:
    """Parse one line into a :class:`Record`.

    Raises ValidationError describing the first problem found.
    """
    parts = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if len(parts) != FIELD_COUNT:
        raise ValidationError(f"expected {FIELD_COUNT} fields, got {len(parts)}")
    player_text, score_text, date_text, game_text = parts
    score = coerce_int(score_text, "score")
    if score < MIN_SCORE:
        raise ValidationError(f"score must not be negative, got {score}")
    return Record(
        player=validate_name(player_text, "player"),
        game=validate_name(game_text, "game"),
        score=score,
        recorded_on=coerce_date(date_text),
    )


def _decode_bytes(raw: bytes) -> str:
    # Decoded per line so one bad byte only costs its own line
    try:
        return raw.decode(FILE_ENCODING)
    except UnicodeDecodeError as exc:
        raise ValidationError(f"line is not valid {FILE_ENCODING}: {exc.reason}") from None


# ── File I/O ────────────────────────────────────────────────────────────────


def read_records(path: str) -> tuple[list[Record], list[SkippedLine]]:
    """Read every well-formed record from *path*.

    Returns ``(records, skipped)``.  A missing file yields two empty
    lists.  Raises PersistenceError if the file exists but cannot be
    read.
    """
    records: list[Record] = []
    skipped: list[SkippedLine] = []
    if not os.path.exists(path):
        logger.debug("No scores file at %s; starting empty", path)
        return records, skipped

    try:
        with open(path, "rb") as fh:
            for lineno, raw in enumerate(fh, start=1):
                if not raw.strip():
                    continue
                try:
                    records.append(decode_line(_decode_bytes(raw)))
                except ValidationError as exc:
                    logger.warning("Skipping line %d of %s: %s", lineno, path, exc)
                    skipped.append((lineno, str(exc)))
    except OSError as exc:
        raise PersistenceError(f"could not read {path}: {exc}", path=path) from exc

    logger.debug("Read %d record(s) from %s (%d skipped)", len(records), path, len(skipped))
    return records, skipped


def write_records(path: str, records: Iterable[Record]) -> int:
    """Rewrite *path* with *records* in leaderboard order.

    The data goes to a temporary file in the same directory which then
    replaces *path*.  Returns the number of lines written.
    """
    lines = [encode_record(r) + "\n" for r in merge_sort(records)]
    dir_name = os.path.dirname(path) or "."
    temp_path = None
    try:
        os.makedirs(dir_name, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=dir_name, prefix=".scores.", text=True)
        with os.fdopen(fd, "w", encoding=FILE_ENCODING, newline="\n") as fh:
            fh.writelines(lines)
        # mkstemp creates 0600; keep the mode the file already had
        mode = os.stat(path).st_mode if os.path.exists(path) else NEW_FILE_MODE
        os.chmod(temp_path, stat.S_IMODE(mode))
        os.replace(temp_path, path)
    except OSError as exc:
        raise PersistenceError(f"could not write {path}: {exc}", path=path) from exc
    finally:
        if temp_path is not None and os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.debug("Could not remove temp file %s", temp_path)

    logger.debug("Wrote %d record(s) to %s", len(lines), path)
    return len(lines)
