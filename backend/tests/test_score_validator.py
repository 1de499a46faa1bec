"""
Tests for score validation: every violation is collected in one pass.
"""

import pytest

from pickleball_engine.exceptions import InvalidScore
from pickleball_engine.models.score import MatchFormat, SetScore
from pickleball_engine.services.score_validator import (
    GAMES_OUT_OF_RANGE,
    IMPOSSIBLE_SCORE,
    INCOMPLETE_SET,
    NO_SETS,
    SET_AFTER_MATCH_DECIDED,
    SET_SKIPPED,
    TIEBREAK_INCOMPLETE,
    TIEBREAK_NOT_ALLOWED,
    TIEBREAK_OUT_OF_RANGE,
    TIEBREAK_REQUIRED,
    TOO_MANY_SETS,
    validate,
    validate_or_raise,
)

FMT = MatchFormat()


def _codes(result):
    return [v.code for v in result.violations]


class TestValidScores:

    def test_straight_sets(self):
        result = validate([SetScore(6, 3), SetScore(6, 4)], FMT)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_three_sets_with_super_tiebreak(self):
        result = validate([SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 10, 8)], FMT)
        assert result.is_valid

    def test_trailing_blank_rows_ignored(self):
        result = validate([SetScore(6, 3), SetScore(6, 4), SetScore()], FMT)
        assert result.is_valid

    def test_walkover_skips_checks(self):
        result = validate([SetScore(9, 9)], FMT, walkover=True)
        assert result.is_valid

    def test_in_progress_last_set_only_warns(self):
        result = validate([SetScore(6, 4), SetScore(3, 2)], FMT)
        assert result.is_valid
        assert [v.code for v in result.warning_violations] == [INCOMPLETE_SET]
        assert result.warning_violations[0].set_number == 2

    def test_unfinished_super_tiebreak_warns_with_target(self):
        result = validate([SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 9, 7)], FMT)
        assert result.is_valid
        assert "tiebreak to 10" in result.warnings[0]


class TestSetRange:

    def test_no_sets(self):
        result = validate([], FMT)
        assert not result.is_valid
        assert _codes(result) == [NO_SETS]
        assert result.errors == ["At least one set score is required"]

    def test_no_sets_allowed_for_retirement(self):
        assert validate([], FMT, retired=True).is_valid

    def test_games_out_of_range(self):
        result = validate([SetScore(8, 3)], FMT)
        assert _codes(result) == [GAMES_OUT_OF_RANGE]
        assert result.errors[0] == "Set 1: game counts must be between 0 and 7 (got 8-3)"

    def test_negative_games(self):
        result = validate([SetScore(-1, 6)], FMT)
        assert GAMES_OUT_OF_RANGE in _codes(result)

    def test_too_many_sets(self):
        sets = [SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 10, 8), SetScore(6, 2)]
        result = validate(sets, FMT)
        assert TOO_MANY_SETS in _codes(result)
        assert SET_AFTER_MATCH_DECIDED in _codes(result)


class TestImpossibleScores:

    def test_seven_three(self):
        result = validate([SetScore(7, 3)], FMT)
        assert _codes(result) == [IMPOSSIBLE_SCORE]

    def test_seven_six_must_carry_tiebreak(self):
        result = validate([SetScore(7, 6)], FMT)
        assert _codes(result) == [IMPOSSIBLE_SCORE]
        assert "6-6 with tiebreak points" in result.errors[0]

    def test_seven_five_is_fine(self):
        assert validate([SetScore(7, 5), SetScore(6, 1)], FMT).is_valid


class TestTiebreakPoints:

    def test_required_at_six_all(self):
        result = validate([SetScore(6, 6)], FMT)
        assert _codes(result) == [TIEBREAK_REQUIRED]

    def test_retired_last_set_may_lack_tiebreak(self):
        result = validate([SetScore(6, 4), SetScore(6, 6)], FMT, retired=True)
        assert result.is_valid

    def test_retired_earlier_set_still_needs_tiebreak(self):
        result = validate([SetScore(6, 6), SetScore(2, 1)], FMT, retired=True)
        assert TIEBREAK_REQUIRED in _codes(result)

    def test_both_sides_required(self):
        result = validate([SetScore(6, 6, 7, None)], FMT)
        assert TIEBREAK_INCOMPLETE in _codes(result)

    def test_not_allowed_outside_six_all(self):
        result = validate([SetScore(6, 4, 7, 5)], FMT)
        assert TIEBREAK_NOT_ALLOWED in _codes(result)

    def test_negative_points(self):
        result = validate([SetScore(6, 6, -1, 7)], FMT)
        assert TIEBREAK_OUT_OF_RANGE in _codes(result)

    @pytest.mark.parametrize("t1, t2", [(20, 3), (8, 2), (3, 12)])
    def test_regular_tiebreak_overshoot(self, t1, t2):
        result = validate([SetScore(6, 6, t1, t2), SetScore(6, 4)], FMT)
        assert not result.is_valid
        assert _codes(result) == [TIEBREAK_OUT_OF_RANGE]
        assert result.violations[0].set_number == 1

    @pytest.mark.parametrize("t1, t2", [(25, 0), (11, 5), (4, 14)])
    def test_super_tiebreak_overshoot(self, t1, t2):
        result = validate([SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, t1, t2)], FMT)
        assert _codes(result) == [TIEBREAK_OUT_OF_RANGE]
        assert "tiebreak to 10" in result.errors[0]
        assert result.violations[0].set_number == 3

    @pytest.mark.parametrize("t1, t2", [(7, 0), (7, 5), (9, 7), (16, 14), (5, 7)])
    def test_possible_regular_tiebreaks(self, t1, t2):
        assert validate([SetScore(6, 6, t1, t2), SetScore(6, 4)], FMT).is_valid

    @pytest.mark.parametrize("t1, t2", [(10, 0), (10, 8), (12, 10), (8, 10)])
    def test_possible_super_tiebreaks(self, t1, t2):
        assert validate([SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, t1, t2)], FMT).is_valid

    def test_seven_point_target_does_not_apply_to_deciding_set(self):
        # 9-3 overshoots a tiebreak to 7 but is still short of 10
        result = validate([SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 9, 3)], FMT)
        assert TIEBREAK_OUT_OF_RANGE not in _codes(result)


class TestSequence:

    def test_set_after_match_decided(self):
        result = validate([SetScore(6, 4), SetScore(6, 3), SetScore(6, 2)], FMT)
        assert _codes(result) == [SET_AFTER_MATCH_DECIDED]
        assert result.violations[0].set_number == 3

    def test_incomplete_set_before_later_sets(self):
        result = validate([SetScore(3, 2), SetScore(6, 4)], FMT)
        assert _codes(result) == [SET_SKIPPED]
        assert result.violations[0].set_number == 1

    def test_blank_row_between_sets(self):
        result = validate([SetScore(6, 4), SetScore(), SetScore(6, 3)], FMT)
        assert _codes(result) == [SET_SKIPPED]
        assert result.violations[0].set_number == 2

    def test_all_violations_collected(self):
        result = validate([SetScore(8, 3), SetScore(6, 4, 7, 5)], FMT)
        assert GAMES_OUT_OF_RANGE in _codes(result)
        assert TIEBREAK_NOT_ALLOWED in _codes(result)
        assert len(result.errors) == 2


class TestValidateOrRaise:

    def test_raises_with_every_error(self):
        with pytest.raises(InvalidScore) as exc_info:
            validate_or_raise([SetScore(8, 3), SetScore(7, 3)], FMT)
        err = exc_info.value
        assert len(err.errors) == 2
        assert err.to_dict()["code"] == "INVALID_SCORE"
        assert err.to_dict()["errors"] == err.errors

    def test_returns_result_when_valid(self):
        result = validate_or_raise([SetScore(6, 3), SetScore(6, 4)], FMT)
        assert result.is_valid
