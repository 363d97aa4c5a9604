"""Utility functions and helpers."""

from .functions import (
    clamp_score,
    coerce_date,
    coerce_int,
    validate_name,
)
from .sorting import merge_sort

__all__ = [
    "clamp_score",
    "coerce_date",
    "coerce_int",
    "validate_name",
    "merge_sort",
]
