"""
Tests for match resolution: winners, canonical score labels, retirements
and walkovers.
"""

import pytest

from pickleball_engine.exceptions import WinnerRequired
from pickleball_engine.models.score import (
    PLAYER1,
    PLAYER2,
    MatchFormat,
    MatchState,
    SetScore,
)
from pickleball_engine.services.match_resolver import (
    count_sets,
    format_score,
    match_winner,
    resolve,
)

FMT = MatchFormat()


class TestCompletedMatches:

    def test_straight_sets(self):
        result = resolve([SetScore(6, 3), SetScore(6, 4)], FMT)
        assert result.winner == PLAYER1
        assert result.loser == PLAYER2
        assert result.final_score_label == "6-3, 6-4"
        assert result.state == MatchState.WINNER_DETERMINED
        assert (result.player1_sets, result.player2_sets) == (2, 0)
        assert result.is_terminal

    def test_three_sets_with_super_tiebreak(self):
        sets = [SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 10, 8)]
        result = resolve(sets, FMT)
        assert result.winner == PLAYER1
        assert result.final_score_label == "6-4, 4-6, 6-6(10-8)"
        assert (result.player1_sets, result.player2_sets) == (2, 1)

    def test_regular_tiebreak_label(self):
        result = resolve([SetScore(6, 6, 7, 5), SetScore(6, 4)], FMT)
        assert result.final_score_label == "7-6(7), 6-4"

    def test_regular_tiebreak_label_for_player2(self):
        result = resolve([SetScore(6, 6, 9, 11), SetScore(2, 6)], FMT)
        assert result.winner == PLAYER2
        assert result.final_score_label == "6-7(11), 2-6"

    def test_sets_after_decision_dropped(self):
        result = resolve([SetScore(6, 3), SetScore(6, 4), SetScore(6, 1)], FMT)
        assert len(result.sets) == 2
        assert result.final_score_label == "6-3, 6-4"

    def test_trailing_blank_rows_dropped(self):
        result = resolve([SetScore(6, 3), SetScore(6, 4), SetScore()], FMT)
        assert len(result.sets) == 2

    def test_manual_winner_ignored_when_score_decides(self):
        result = resolve([SetScore(6, 3), SetScore(6, 4)], FMT, manual_winner=PLAYER2)
        assert result.winner == PLAYER1

    def test_resolution_is_repeatable(self):
        sets = [SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 10, 8)]
        assert resolve(sets, FMT) == resolve(sets, FMT)


class TestIncompleteMatches:

    def test_in_progress(self):
        result = resolve([SetScore(6, 4), SetScore(3, 2)], FMT)
        assert result.winner is None
        assert result.state == MatchState.INCOMPLETE
        assert result.final_score_label == "6-4, 3-2"
        assert not result.is_terminal

    def test_no_sets(self):
        result = resolve([], FMT)
        assert result.state == MatchState.INCOMPLETE
        assert result.final_score_label == ""


class TestRetirement:

    def test_retired_in_second_set(self):
        result = resolve([SetScore(6, 4), SetScore(2, 1)], FMT, retired=True, manual_winner=PLAYER2)
        assert result.winner == PLAYER2
        assert result.final_score_label == "RET"
        assert result.retired
        assert result.retired_at_set_index == 2
        assert result.state == MatchState.RETIRED
        assert len(result.sets) == 2
        assert result.player1_sets == 1

    def test_retired_mid_first_set(self):
        result = resolve([SetScore(3, 5)], FMT, retired=True, manual_winner=PLAYER2)
        assert result.winner == PLAYER2
        assert result.final_score_label == "RET"
        assert result.retired_at_set_index == 1
        with pytest.raises(WinnerRequired):
            resolve([SetScore(3, 5)], FMT, retired=True)

    def test_retired_in_first_set(self):
        result = resolve([SetScore(3, 2), SetScore()], FMT, retired=True, manual_winner=PLAYER1)
        assert result.retired_at_set_index == 1
        assert len(result.sets) == 1

    def test_retired_before_play(self):
        result = resolve([], FMT, retired=True, manual_winner=PLAYER1)
        assert result.retired_at_set_index is None
        assert result.sets == ()
        assert result.is_terminal

    def test_retired_requires_winner(self):
        with pytest.raises(WinnerRequired):
            resolve([SetScore(6, 4), SetScore(2, 1)], FMT, retired=True)


class TestWalkover:

    def test_walkover(self):
        result = resolve([SetScore(6, 0)], FMT, walkover=True, manual_winner=PLAYER2)
        assert result.winner == PLAYER2
        assert result.final_score_label == "W.O."
        assert result.sets == ()
        assert result.state == MatchState.WALKOVER

    def test_walkover_requires_winner(self):
        with pytest.raises(WinnerRequired):
            resolve([], FMT, walkover=True)


class TestBadFlags:

    def test_retired_and_walkover_rejected(self):
        with pytest.raises(ValueError):
            resolve([], FMT, retired=True, walkover=True, manual_winner=PLAYER1)

    def test_unknown_manual_winner_rejected(self):
        with pytest.raises(ValueError):
            resolve([], FMT, retired=True, manual_winner="player3")


class TestHelpers:

    def test_count_sets_stops_at_decision(self):
        count = count_sets([SetScore(6, 3), SetScore(6, 4), SetScore(0, 6)], FMT)
        assert (count.player1, count.player2) == (2, 0)
        assert count.winner == PLAYER1
        assert count.decided_at == 1

    def test_match_winner(self):
        assert match_winner([SetScore(3, 6), SetScore(4, 6)], FMT) == PLAYER2
        assert match_winner([SetScore(3, 6)], FMT) is None

    def test_format_score_skips_blank_sets(self):
        assert format_score([SetScore(6, 3), SetScore(), SetScore(6, 4)], FMT) == "6-3, 6-4"

    def test_best_of_five(self):
        fmt = MatchFormat(sets_to_win=3)
        sets = [SetScore(6, 3), SetScore(3, 6), SetScore(6, 4), SetScore(4, 6), SetScore(6, 6, 12, 10)]
        result = resolve(sets, fmt)
        assert result.winner == PLAYER1
        assert result.final_score_label == "6-3, 3-6, 6-4, 4-6, 6-6(12-10)"
