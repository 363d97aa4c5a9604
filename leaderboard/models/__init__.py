from leaderboard.models.record import Record, compare_records, composite_key
from leaderboard.models.lookup_table import LookupTable
from leaderboard.models.name_index import NameIndex
from leaderboard.models.traversal_list import TraversalList

__all__ = [
    "Record", "compare_records", "composite_key",
    "LookupTable",
    "NameIndex",
    "TraversalList",
]
