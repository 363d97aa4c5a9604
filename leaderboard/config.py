"""
Configuration constants for the leaderboard record store.

Values mirror the flat ``scores.txt`` file written by the original
desktop leaderboard, extended with a game column.
"""

import os

# ---------------------------------------------------------------------------
# Backing file
# ---------------------------------------------------------------------------
SCORES_FILE: str = os.getenv("LEADERBOARD_SCORES_FILE", "scores.txt")
FILE_ENCODING: str = "utf-8"
NEW_FILE_MODE: int = 0o644  # permissions for a freshly created scores file

# ---------------------------------------------------------------------------
# Line format:  player,score,date,game
# ---------------------------------------------------------------------------
FIELD_SEPARATOR: str = ","
FIELD_COUNT: int = 4

# Characters that would break a line apart if written into a name field
FORBIDDEN_NAME_CHARS: str = ",\r\n"

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
KEY_DELIMITER: str = "::GAME::"  # player + KEY_DELIMITER + game
MIN_SCORE: int = 0
