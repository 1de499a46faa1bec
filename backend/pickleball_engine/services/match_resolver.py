"""
Match Resolver: turns validated set scores plus match flags into a MatchResult.

State machine:
    INCOMPLETE -> WINNER_DETERMINED | RETIRED | WALKOVER   (terminal)

Guarantees:
    - Pure: same inputs, structurally equal MatchResult
    - Sets entered after the match was decided are dropped
    - Retired / walkover results always carry an explicit winner
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pickleball_engine.exceptions import WinnerRequired
from pickleball_engine.models.score import (
    PLAYER1,
    PLAYER2,
    RETIRED_LABEL,
    WALKOVER_LABEL,
    MatchFormat,
    MatchResult,
    MatchState,
    SetScore,
    Side,
)
from pickleball_engine.services.set_evaluator import (
    evaluate_set_score,
    is_deciding_set,
    is_tiebreak_set,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetCount:
    player1: int
    player2: int
    winner: Optional[Side]
    decided_at: Optional[int]  # zero-based index of the set that decided the match


def count_sets(sets: Sequence[SetScore], fmt: MatchFormat) -> SetCount:
    """Count set wins in order, stopping once a side reaches sets_to_win."""
    p1 = 0
    p2 = 0
    for index, set_score in enumerate(sets):
        set_winner = evaluate_set_score(set_score, index, fmt)
        if set_winner == PLAYER1:
            p1 += 1
        elif set_winner == PLAYER2:
            p2 += 1
        if p1 >= fmt.sets_to_win:
            return SetCount(p1, p2, PLAYER1, index)
        if p2 >= fmt.sets_to_win:
            return SetCount(p1, p2, PLAYER2, index)
    return SetCount(p1, p2, None, None)


def match_winner(sets: Sequence[SetScore], fmt: MatchFormat) -> Optional[Side]:
    return count_sets(sets, fmt).winner


def format_set(set_score: SetScore, set_index: int, fmt: MatchFormat) -> str:
    g1 = set_score.player1_games
    g2 = set_score.player2_games
    if not (is_tiebreak_set(g1, g2, fmt) and set_score.has_tiebreak):
        return f"{g1}-{g2}"

    t1 = set_score.player1_tiebreak_points
    t2 = set_score.player2_tiebreak_points
    if is_deciding_set(set_index, fmt):
        # Super tiebreak: raw games, both point totals
        return f"{g1}-{g2}({t1}-{t2})"

    winner = evaluate_set_score(set_score, set_index, fmt)
    if winner is None:
        return f"{g1}-{g2}"
    # Regular tiebreak: winner credited the extra game, winner's points only
    if winner == PLAYER1:
        return f"{g1 + 1}-{g2}({max(t1, t2)})"
    return f"{g1}-{g2 + 1}({max(t1, t2)})"


def format_score(sets: Sequence[SetScore], fmt: MatchFormat) -> str:
    """Canonical score string, e.g. "6-4, 7-6(7)" or "6-4, 4-6, 6-6(10-8)"."""
    parts: List[str] = []
    for index, set_score in enumerate(sets):
        if not set_score.has_data:
            continue
        parts.append(format_set(set_score, index, fmt))
    return ", ".join(parts)


def _last_set_with_data(sets: Sequence[SetScore]) -> Optional[int]:
    last: Optional[int] = None
    for index, set_score in enumerate(sets):
        if set_score.has_data:
            last = index + 1
    return last


def _check_manual_winner(manual_winner: Optional[str]) -> Optional[Side]:
    if manual_winner is None:
        return None
    if manual_winner not in (PLAYER1, PLAYER2):
        raise ValueError(f"manual_winner must be 'player1' or 'player2', got {manual_winner!r}")
    return manual_winner  # type: ignore[return-value]


def resolve(
    sets: Sequence[SetScore],
    fmt: MatchFormat,
    retired: bool = False,
    walkover: bool = False,
    manual_winner: Optional[str] = None,
) -> MatchResult:
    """
    Resolve a match from its sets and flags.

    Raises:
        WinnerRequired: retired/walkover without manual_winner
        ValueError: retired and walkover both set, or an unknown manual_winner
    """
    if retired and walkover:
        raise ValueError("retired and walkover are mutually exclusive")

    chosen = _check_manual_winner(manual_winner)

    if walkover:
        if chosen is None:
            raise WinnerRequired("A winner must be selected for a walkover")
        logger.info("Walkover resolved: winner=%s", chosen)
        return MatchResult(
            sets=(),
            winner=chosen,
            final_score_label=WALKOVER_LABEL,
            walkover=True,
            state=MatchState.WALKOVER,
        )

    count = count_sets(sets, fmt)
    kept: Tuple[SetScore, ...] = tuple(sets)
    if count.decided_at is not None and count.decided_at + 1 < len(kept):
        logger.debug(
            "Dropping %d set(s) entered after the match was decided at set %d",
            len(kept) - count.decided_at - 1,
            count.decided_at + 1,
        )
        kept = kept[: count.decided_at + 1]

    # Score forms submit fixed rows; trailing blank rows are not sets
    last_with_data = _last_set_with_data(kept)
    kept = kept[:last_with_data] if last_with_data else ()

    if retired:
        if chosen is None:
            raise WinnerRequired("A winner must be selected for a retired match")
        retired_at = last_with_data
        logger.info("Retirement resolved: winner=%s retired_at_set=%s", chosen, retired_at)
        return MatchResult(
            sets=kept,
            winner=chosen,
            final_score_label=RETIRED_LABEL,
            retired=True,
            retired_at_set_index=retired_at,
            state=MatchState.RETIRED,
            player1_sets=count.player1,
            player2_sets=count.player2,
        )

    if chosen is not None and chosen != count.winner:
        logger.debug("Ignoring manual winner %s for a match decided by score", chosen)

    state = MatchState.WINNER_DETERMINED if count.winner else MatchState.INCOMPLETE
    result = MatchResult(
        sets=kept,
        winner=count.winner,
        final_score_label=format_score(kept, fmt),
        state=state,
        player1_sets=count.player1,
        player2_sets=count.player2,
    )
    if result.winner:
        logger.info("Match resolved: winner=%s score=%s", result.winner, result.final_score_label)
    return result
