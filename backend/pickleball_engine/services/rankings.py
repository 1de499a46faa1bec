"""
Rankings Aggregator: round-robin / pool standings.

Recomputed from scratch on every call from the authoritative match list;
no incremental state survives between calls.

Ordering (descending priority):
    1. wins
    2. set difference (sets won - sets lost)
    3. game difference (games won - games lost)
    4. participant input order
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pickleball_engine import config
from pickleball_engine.models.bracket import STATUS_COMPLETED, BracketMatch, Participant
from pickleball_engine.models.ranking import RankingRow

logger = logging.getLogger(__name__)


def _sort_key(row: RankingRow, order: Dict[str, int]):
    return (-row.wins, -row.set_difference, -row.game_difference, order[row.participant.id])


def _contributes(match: BracketMatch, rows: Dict[str, RankingRow]) -> bool:
    if match.status != STATUS_COMPLETED or match.winner_id is None:
        return False
    if match.participant1_id not in rows or match.participant2_id not in rows:
        logger.debug("Skipping match %s: participant outside this table", match.id)
        return False
    if match.winner_id not in (match.participant1_id, match.participant2_id):
        logger.warning("Skipping match %s: winner %s did not play", match.id, match.winner_id)
        return False
    return True


def _accumulate_sets(match: BracketMatch, rows: Dict[str, RankingRow]) -> None:
    result = match.result
    if result is None:
        return
    row1 = rows[match.participant1_id]
    row2 = rows[match.participant2_id]

    row1.sets_won += result.player1_sets
    row1.sets_lost += result.player2_sets
    row2.sets_won += result.player2_sets
    row2.sets_lost += result.player1_sets

    # Walkovers carry no sets; retirements carry only the sets actually played
    for set_score in result.sets:
        row1.games_won += set_score.player1_games
        row1.games_lost += set_score.player2_games
        row2.games_won += set_score.player2_games
        row2.games_lost += set_score.player1_games


def _push_streak(streaks: Dict[str, tuple], participant_id: str, outcome: str) -> None:
    kind, count = streaks.get(participant_id, ("", 0))
    streaks[participant_id] = (outcome, count + 1) if kind == outcome else (outcome, 1)


def compute_rankings(
    participants: Sequence[Participant],
    matches: Sequence[BracketMatch],
    points_for_win: Optional[int] = None,
    points_for_loss: Optional[int] = None,
) -> List[RankingRow]:
    """
    Build the ordered standings table.

    Only completed matches with a winner between two listed participants
    contribute. ``matches`` is taken to be in chronological order for streaks.
    """
    win_points = config.POINTS_FOR_WIN if points_for_win is None else points_for_win
    loss_points = config.POINTS_FOR_LOSS if points_for_loss is None else points_for_loss

    order: Dict[str, int] = {}
    rows: Dict[str, RankingRow] = {}
    for index, participant in enumerate(participants):
        if participant.id in rows:
            raise ValueError(f"Duplicate participant id: {participant.id}")
        order[participant.id] = index
        rows[participant.id] = RankingRow(participant=participant)

    streaks: Dict[str, tuple] = {}
    counted = 0
    for match in matches:
        if not _contributes(match, rows):
            continue
        loser_id = match.loser_id

        winner_row = rows[match.winner_id]
        loser_row = rows[loser_id]
        winner_row.played += 1
        loser_row.played += 1
        winner_row.wins += 1
        loser_row.losses += 1
        _push_streak(streaks, match.winner_id, "W")
        _push_streak(streaks, loser_id, "L")

        _accumulate_sets(match, rows)
        counted += 1

    table = list(rows.values())
    for row in table:
        row.points = row.wins * win_points + row.losses * loss_points
        kind, count = streaks.get(row.participant.id, ("", 0))
        row.streak = f"{kind}{count}" if count else ""

    table.sort(key=lambda row: _sort_key(row, order))
    for position, row in enumerate(table, start=1):
        row.position = position

    logger.debug("Rankings computed: %d participants, %d matches counted", len(table), counted)
    return table


def select_playoff_qualifiers(rows: Sequence[RankingRow], count: Optional[int] = None) -> List[RankingRow]:
    """Top ``count`` rows of an ordered table; empty when fewer than two would qualify."""
    limit = config.PLAYOFF_QUALIFIERS if count is None else count
    qualified = list(rows[: max(limit, 0)])
    if len(qualified) < 2:
        return []
    return qualified
