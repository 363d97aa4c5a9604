"""
Leaderboard record store
In-memory player/game scores with flat-file persistence.
"""

__version__ = "1.0.0"

from .errors import LeaderboardError, NotFound, PersistenceError, ValidationError
from .models.record import Record, compare_records
from .store import (
    LoadReport,
    ModifyPreview,
    ModifyResult,
    NegativePolicy,
    Store,
    SubmitResult,
    SubmitStatus,
)
from .utils.sorting import merge_sort

__all__ = [
    "LeaderboardError",
    "LoadReport",
    "ModifyPreview",
    "ModifyResult",
    "NegativePolicy",
    "NotFound",
    "PersistenceError",
    "Record",
    "Store",
    "SubmitResult",
    "SubmitStatus",
    "ValidationError",
    "compare_records",
    "merge_sort",
]
