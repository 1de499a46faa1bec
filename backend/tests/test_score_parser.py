"""
Tests for score-form normalisation and stored score parsing.
"""

import pytest

from pickleball_engine.exceptions import InvalidScore
from pickleball_engine.models.score import SetScore
from pickleball_engine.services.score_parser import (
    parse_score,
    parse_score_string,
    parse_set_inputs,
)


class TestParseSetInputs:

    def test_string_rows(self):
        rows = [
            {"player1": "6", "player2": "4"},
            {"player1": "6", "player2": "6", "player1_tiebreak": "7", "player2_tiebreak": "5"},
        ]
        assert parse_set_inputs(rows) == [SetScore(6, 4), SetScore(6, 6, 7, 5)]

    def test_int_rows(self):
        assert parse_set_inputs([{"player1": 6, "player2": 1}]) == [SetScore(6, 1)]

    def test_trailing_blank_rows_dropped(self):
        rows = [
            {"player1": "6", "player2": "4"},
            {"player1": "", "player2": ""},
            {"player1": None, "player2": None},
        ]
        assert parse_set_inputs(rows) == [SetScore(6, 4)]

    def test_blank_row_between_sets_kept(self):
        rows = [
            {"player1": "6", "player2": "4"},
            {"player1": "", "player2": ""},
            {"player1": "6", "player2": "3"},
        ]
        assert parse_set_inputs(rows) == [SetScore(6, 4), SetScore(), SetScore(6, 3)]

    def test_all_errors_reported(self):
        rows = [
            {"player1": "six", "player2": "4"},
            {"player1": "6", "player2": ""},
        ]
        with pytest.raises(InvalidScore) as exc_info:
            parse_set_inputs(rows)
        assert len(exc_info.value.errors) == 2
        assert "Set 1 player 1 games" in exc_info.value.errors[0]
        assert exc_info.value.errors[1] == "Set 2: enter games for both sides"

    def test_booleans_rejected(self):
        with pytest.raises(InvalidScore):
            parse_set_inputs([{"player1": True, "player2": 3}])

    def test_non_mapping_rows_rejected(self):
        with pytest.raises(InvalidScore) as exc_info:
            parse_set_inputs([[6, 4], {"player1": "6", "player2": "3"}, "6-2"])
        assert exc_info.value.errors == [
            "Set 1: expected a row of named fields, got list",
            "Set 3: expected a row of named fields, got str",
        ]


class TestParseScoreString:

    def test_single_set(self):
        assert parse_score_string("6-4") == [SetScore(6, 4)]

    def test_space_and_comma_separated(self):
        assert parse_score_string("6-3 4-6") == [SetScore(6, 3), SetScore(4, 6)]
        assert parse_score_string("6-3, 4-6") == [SetScore(6, 3), SetScore(4, 6)]

    def test_tiebreak_notation(self):
        assert parse_score_string("6-4, 6-6(10-8)") == [SetScore(6, 4), SetScore(6, 6, 10, 8)]

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "6-4 x", "6:4"])
    def test_unparseable(self, raw):
        assert parse_score_string(raw) is None


class TestParseScore:

    def test_none_and_empty(self):
        assert parse_score(None) is None
        assert parse_score("") is None
        assert parse_score({}) is None

    def test_plain_string(self):
        assert parse_score("6-2 6-1") == [SetScore(6, 2), SetScore(6, 1)]

    def test_sets_blob(self):
        blob = {"sets": [{"player1": "6", "player2": "2"}, {"player1": "", "player2": ""}]}
        assert parse_score(blob) == [SetScore(6, 2)]

    def test_bad_sets_blob(self):
        assert parse_score({"sets": [{"player1": "x", "player2": "2"}]}) is None

    def test_display_blob(self):
        assert parse_score({"display": "6-4 6-3"}) == [SetScore(6, 4), SetScore(6, 3)]

    def test_score_key(self):
        assert parse_score({"score": "7-5"}) == [SetScore(7, 5)]

    def test_list_pair_sets_blob(self):
        assert parse_score({"sets": [[6, 4], [6, 3]]}) is None
