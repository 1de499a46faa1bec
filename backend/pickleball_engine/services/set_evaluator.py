"""
Set Evaluator: single source of truth for "who won this set".

Every score form, the validator, the resolver and the rankings aggregator
call into this module. Do NOT re-implement set rules elsewhere.

Rules (games_per_set = G):
- 0-0 is incomplete.
- Regular set: G+ games with a 2-game margin, or G+1 against G-1 (7-5).
- Tiebreak: only at G-G. Target is the format's deciding tiebreak points
  (super tiebreak, 10) on the last possible set, otherwise 7. Win by 2,
  no upper bound. A missing tiebreak field leaves the set open.

Inputs are assumed to be bounded by the Score Validator.
"""
from typing import Optional

from pickleball_engine.models.score import PLAYER1, PLAYER2, MatchFormat, SetScore, Side


def is_deciding_set(set_index: int, fmt: MatchFormat) -> bool:
    """True when set_index (zero-based) is the numerically last possible set of the format."""
    return set_index == fmt.deciding_set_index


def tiebreak_target(set_index: int, fmt: MatchFormat) -> int:
    if is_deciding_set(set_index, fmt):
        return fmt.deciding_tiebreak_points
    return fmt.tiebreak_points


def is_tiebreak_set(p1_games: int, p2_games: int, fmt: MatchFormat) -> bool:
    return p1_games == fmt.games_per_set and p2_games == fmt.games_per_set


def _tiebreak_winner(p1_points: int, p2_points: int, target: int) -> Optional[Side]:
    if p1_points >= target and p1_points - p2_points >= 2:
        return PLAYER1
    if p2_points >= target and p2_points - p1_points >= 2:
        return PLAYER2
    return None


def _games_winner(leader: int, trailer: int, games_per_set: int) -> bool:
    if leader >= games_per_set and leader - trailer >= 2:
        return True
    return leader == games_per_set + 1 and trailer == games_per_set - 1


def evaluate_set(
    p1_games: int,
    p2_games: int,
    set_index: int,
    fmt: MatchFormat,
    p1_tiebreak: Optional[int] = None,
    p2_tiebreak: Optional[int] = None,
) -> Optional[Side]:
    """Return the set winner, or None while the set is still open."""
    if p1_games == 0 and p2_games == 0:
        return None

    if is_tiebreak_set(p1_games, p2_games, fmt):
        if p1_tiebreak is None or p2_tiebreak is None:
            return None
        return _tiebreak_winner(p1_tiebreak, p2_tiebreak, tiebreak_target(set_index, fmt))

    if _games_winner(p1_games, p2_games, fmt.games_per_set):
        return PLAYER1
    if _games_winner(p2_games, p1_games, fmt.games_per_set):
        return PLAYER2
    return None


def evaluate_set_score(set_score: SetScore, set_index: int, fmt: MatchFormat) -> Optional[Side]:
    return evaluate_set(
        set_score.player1_games,
        set_score.player2_games,
        set_index,
        fmt,
        set_score.player1_tiebreak_points,
        set_score.player2_tiebreak_points,
    )


def is_set_complete(set_score: SetScore, set_index: int, fmt: MatchFormat) -> bool:
    return evaluate_set_score(set_score, set_index, fmt) is not None
