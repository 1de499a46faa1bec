"""
Standings endpoint. The table is recomputed from the posted matches on
every request.
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from pickleball_engine.models.ranking import RankingRow
from pickleball_engine.routes.brackets import BracketMatchIn, ParticipantIn
from pickleball_engine.services.rankings import compute_rankings, select_playoff_qualifiers
from pickleball_engine.utils.http_errors import bad_input

router = APIRouter()


class RankingsRequest(BaseModel):
    participants: List[ParticipantIn]
    matches: List[BracketMatchIn] = []
    points_for_win: Optional[int] = None
    points_for_loss: Optional[int] = None
    qualifiers: Optional[int] = None


class RankingRowOut(BaseModel):
    position: int
    participant_id: str
    name: str
    seed: Optional[int] = None
    played: int
    wins: int
    losses: int
    sets_won: int
    sets_lost: int
    set_difference: int
    games_won: int
    games_lost: int
    game_difference: int
    points: int
    streak: str


class RankingsResponse(BaseModel):
    rows: List[RankingRowOut]
    qualified_participant_ids: List[str]


def _row_to_out(row: RankingRow) -> RankingRowOut:
    return RankingRowOut(
        position=row.position,
        participant_id=row.participant.id,
        name=row.participant.name,
        seed=row.participant.seed,
        played=row.played,
        wins=row.wins,
        losses=row.losses,
        sets_won=row.sets_won,
        sets_lost=row.sets_lost,
        set_difference=row.set_difference,
        games_won=row.games_won,
        games_lost=row.games_lost,
        game_difference=row.game_difference,
        points=row.points,
        streak=row.streak,
    )


@router.post("/rankings", response_model=RankingsResponse)
def rankings(payload: RankingsRequest) -> RankingsResponse:
    """Ordered standings: wins, set difference, game difference, then input order."""
    participants = [p.to_participant() for p in payload.participants]
    matches = [m.to_bracket_match() for m in payload.matches]
    try:
        table = compute_rankings(
            participants,
            matches,
            points_for_win=payload.points_for_win,
            points_for_loss=payload.points_for_loss,
        )
    except ValueError as e:
        raise bad_input(str(e))

    qualified = select_playoff_qualifiers(table, payload.qualifiers)
    return RankingsResponse(
        rows=[_row_to_out(r) for r in table],
        qualified_participant_ids=[r.participant.id for r in qualified],
    )
