"""
Unit tests for the leaderboard record structures.

Covers the record ordering, the composite-key lookup table, the
name-keyed search tree, the linked traversal list, and the input
coercion helpers.
"""

import datetime

import pytest

from leaderboard.config import KEY_DELIMITER, MIN_SCORE
from leaderboard.errors import ValidationError
from leaderboard.models.lookup_table import LookupTable
from leaderboard.models.name_index import NameIndex
from leaderboard.models.record import Record, compare_records, composite_key
from leaderboard.models.traversal_list import TraversalList
from leaderboard.utils.functions import (
    clamp_score,
    coerce_date,
    coerce_int,
    validate_name,
)


D1 = datetime.date(2024, 1, 1)
D2 = datetime.date(2024, 1, 2)


def rec(player, score=10, day=D1, game="Chess"):
    return Record(player=player, game=game, score=score, recorded_on=day)


# ── Record ──────────────────────────────────────────────────────────────────


class TestRecord:
    def test_composite_key(self):
        assert composite_key("Ann", "Chess") == f"Ann{KEY_DELIMITER}Chess"
        assert rec("Ann").key == "Ann::GAME::Chess"

    def test_copy_is_detached(self):
        original = rec("Ann")
        clone = original.copy()
        clone.score = 99
        assert original.score == 10
        assert clone == rec("Ann", score=99)

    def test_str_display_line(self):
        assert str(rec("Ann", 10)) == "Ann - Chess - 10 - 2024-01-01"


class TestCompareRecords:
    def test_higher_score_first(self):
        assert compare_records(rec("Ann", 20), rec("Bob", 10)) == -1
        assert compare_records(rec("Ann", 10), rec("Bob", 20)) == 1

    def test_newer_date_breaks_score_tie(self):
        assert compare_records(rec("Zed", 10, D2), rec("Ann", 10, D1)) == -1
        assert compare_records(rec("Ann", 10, D1), rec("Zed", 10, D2)) == 1

    def test_name_breaks_score_and_date_tie(self):
        assert compare_records(rec("Ann"), rec("Bob")) == -1
        assert compare_records(rec("Bob"), rec("Ann")) == 1

    def test_equal_when_only_game_differs(self):
        a = rec("Ann", game="Chess")
        b = rec("Ann", game="Go")
        assert compare_records(a, b) == 0
        assert a != b


# ── Lookup table ────────────────────────────────────────────────────────────


class TestLookupTable:
    def test_put_reports_new_key(self):
        table = LookupTable()
        assert table.put(rec("Ann")) is True
        assert table.put(rec("Ann", score=50)) is False
        assert len(table) == 1
        assert table.get("Ann", "Chess").score == 50

    def test_get_missing(self):
        assert LookupTable().get("Ann", "Chess") is None

    def test_remove(self):
        table = LookupTable()
        table.put(rec("Ann"))
        removed = table.remove("Ann", "Chess")
        assert removed.player == "Ann"
        assert table.remove("Ann", "Chess") is None
        assert len(table) == 0

    def test_contains_pair(self):
        table = LookupTable()
        table.put(rec("Ann"))
        assert ("Ann", "Chess") in table
        assert ("Ann", "Go") not in table
        assert "Ann" not in table

    def test_remove_all_by_player(self):
        table = LookupTable()
        table.put(rec("Ann", game="Chess"))
        table.put(rec("Ann", game="Go"))
        table.put(rec("Bob", game="Chess"))
        assert table.remove_all_by_player("Ann") == 2
        assert [r.player for r in table.values()] == ["Bob"]

    def test_remove_all_by_game(self):
        table = LookupTable()
        table.put(rec("Ann", game="Chess"))
        table.put(rec("Ann", game="Go"))
        table.put(rec("Bob", game="Chess"))
        assert table.remove_all_by_game("Chess") == 2
        assert [r.game for r in table.values()] == ["Go"]

    def test_remove_all_unknown_is_zero(self):
        table = LookupTable()
        table.put(rec("Ann"))
        assert table.remove_all_by_player("Nobody") == 0
        assert len(table) == 1

    def test_bulk_removal_is_all_or_nothing(self):
        table = LookupTable()
        table.put(rec("Ann", game="Chess"))
        table.put(rec("Bob", game="Chess"))

        calls = []

        def flaky(record):
            calls.append(record)
            if len(calls) == 2:
                raise RuntimeError("boom")
            return True

        with pytest.raises(RuntimeError):
            table._remove_where(flaky)
        assert len(table) == 2

    def test_replace_all_last_duplicate_wins(self):
        table = LookupTable()
        table.put(rec("Old"))
        loaded = table.replace_all([rec("Ann", 1), rec("Ann", 2), rec("Bob", 3)])
        assert loaded == 2
        assert table.get("Ann", "Chess").score == 2
        assert table.get("Old", "Chess") is None


# ── Name index ──────────────────────────────────────────────────────────────


class TestNameIndex:
    def _build(self, *names):
        index = NameIndex()
        for name in names:
            index.insert(rec(name))
        return index

    def test_insert_and_find(self):
        index = self._build("Mia", "Ann", "Zed")
        assert index.find_by_name("Ann").player == "Ann"
        assert index.find_by_name("Bob") is None
        assert len(index) == 3

    def test_same_name_replaces_payload(self):
        index = NameIndex()
        index.insert(rec("Ann", game="Chess"))
        index.insert(rec("Ann", game="Go"))
        assert len(index) == 1
        assert index.find_by_name("Ann").game == "Go"

    def test_names_in_order(self):
        index = self._build("Mia", "Ann", "Zed", "Bob", "Pat")
        assert index.names() == ["Ann", "Bob", "Mia", "Pat", "Zed"]

    def test_delete_leaf(self):
        index = self._build("Mia", "Ann", "Zed")
        assert index.delete("Ann") is True
        assert index.names() == ["Mia", "Zed"]

    def test_delete_one_child(self):
        index = self._build("Mia", "Ann", "Bob")
        assert index.delete("Ann") is True
        assert index.names() == ["Bob", "Mia"]

    def test_delete_two_children_promotes_successor(self):
        index = self._build("Mia", "Dan", "Zed", "Bob", "Kim", "Jon", "Lee")
        assert index.delete("Dan") is True
        assert index.names() == ["Bob", "Jon", "Kim", "Lee", "Mia", "Zed"]
        assert index.find_by_name("Jon").player == "Jon"
        assert len(index) == 6

    def test_delete_root(self):
        index = self._build("Mia", "Ann", "Zed")
        assert index.delete("Mia") is True
        assert index.names() == ["Ann", "Zed"]
        assert index.delete("Ann") and index.delete("Zed")
        assert index.names() == []
        assert len(index) == 0

    def test_delete_missing(self):
        index = self._build("Mia")
        assert index.delete("Ann") is False
        assert len(index) == 1

    def test_names_between_inclusive(self):
        index = self._build("Mia", "Ann", "Zed", "Bob", "Pat", "Kim")
        assert index.names_between("Bob", "Pat") == ["Bob", "Kim", "Mia", "Pat"]
        assert index.names_between("C", "L") == ["Kim"]
        assert index.names_between("X", "Y") == []

    def test_clear(self):
        index = self._build("Mia", "Ann")
        index.clear()
        assert len(index) == 0
        assert "Mia" not in index

    def test_sorted_insertion_does_not_recurse(self):
        # A degenerate (list-shaped) tree deeper than the recursion limit
        names = [f"p{i:05d}" for i in range(1500)]
        index = self._build(*names)
        assert index.delete("p00000") is True
        assert index.names()[:2] == ["p00001", "p00002"]
        assert len(index.names_between("p01490", "p01499")) == 10


# ── Traversal list ──────────────────────────────────────────────────────────


class TestTraversalList:
    def test_add_preserves_order(self):
        rows = TraversalList()
        rows.add(rec("Ann"))
        rows.add(rec("Bob"))
        assert [r.player for r in rows.to_sequence()] == ["Ann", "Bob"]
        assert len(rows) == 2

    def test_add_all_and_clear(self):
        rows = TraversalList()
        rows.add_all(rec(n) for n in ("Ann", "Bob", "Cat"))
        assert [r.player for r in rows] == ["Ann", "Bob", "Cat"]
        rows.clear()
        assert rows.to_sequence() == []
        assert len(rows) == 0
        rows.add(rec("Dan"))
        assert [r.player for r in rows] == ["Dan"]


# ── Input helpers ───────────────────────────────────────────────────────────


class TestValidateName:
    def test_strips(self):
        assert validate_name("  Ann ") == "Ann"

    @pytest.mark.parametrize("bad", ["", "   ", "A,nn", "An\nn", "Ann\rX", None, 5])
    def test_rejects(self, bad):
        with pytest.raises(ValidationError):
            validate_name(bad)


class TestCoercion:
    def test_coerce_int_accepts_numeric_strings(self):
        assert coerce_int("  500") == 500
        assert coerce_int("-3") == -3
        assert coerce_int(7) == 7

    @pytest.mark.parametrize("bad", ["abc", "", "1.5", 1.5, True, None, "1_000", "+7", "0x10"])
    def test_coerce_int_rejects(self, bad):
        with pytest.raises(ValidationError):
            coerce_int(bad)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            coerce_int("x")

    def test_clamp_score(self):
        assert clamp_score(-5) == (MIN_SCORE, True)
        assert clamp_score(0) == (0, False)
        assert clamp_score(12) == (12, False)

    def test_coerce_date(self):
        assert coerce_date("2024-01-02") == D2
        assert coerce_date(D1) == D1
        assert coerce_date(datetime.datetime(2024, 1, 2, 13, 0)) == D2
        assert coerce_date(None) == datetime.date.today()

    def test_coerce_date_rejects_garbage(self):
        with pytest.raises(ValidationError):
            coerce_date("yesterday")
        with pytest.raises(ValidationError):
            coerce_date(20240101)
        with pytest.raises(ValidationError):
            coerce_date("20240102")
