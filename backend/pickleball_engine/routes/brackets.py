"""
Bracket endpoints: generation, advancement, round state.
Stateless: the caller sends the matches it holds and persists what comes back.
AlreadyCompleted / SlotConflict return 409 so the caller can re-read and retry its write.
"""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from pickleball_engine.exceptions import ScoringError, WinnerRequired
from pickleball_engine.models.bracket import BracketMatch, Participant, SlotUpdate
from pickleball_engine.routes.scoring import MatchResultOut, MatchScoreIn, SideName, resolve_score, result_to_out
from pickleball_engine.services.bracket_builder import build_single_elimination
from pickleball_engine.services.bracket_progression import (
    advance,
    advance_bye,
    current_round,
    is_round_active,
    is_round_resolved,
)
from pickleball_engine.services.round_robin import build_round_robin
from pickleball_engine.utils.http_errors import bad_input, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()

MatchStatusName = Literal["scheduled", "in_progress", "completed"]


class ParticipantIn(BaseModel):
    id: str
    name: str
    seed: Optional[int] = None

    def to_participant(self) -> Participant:
        return Participant(id=self.id, name=self.name, seed=self.seed)


class BracketMatchIn(BaseModel):
    id: str
    round_number: int
    match_number: int = 1
    participant1_id: Optional[str] = None
    participant2_id: Optional[str] = None
    winner_id: Optional[str] = None
    next_match_id: Optional[str] = None
    next_match_position: Optional[SideName] = None
    loser_next_match_id: Optional[str] = None
    loser_next_match_position: Optional[SideName] = None
    status: MatchStatusName = "scheduled"
    is_bye: bool = False
    score: Optional[MatchScoreIn] = None

    def to_bracket_match(self) -> BracketMatch:
        return BracketMatch(
            id=self.id,
            round_number=self.round_number,
            match_number=self.match_number,
            participant1_id=self.participant1_id,
            participant2_id=self.participant2_id,
            winner_id=self.winner_id,
            result=resolve_score(self.score) if self.score is not None else None,
            next_match_id=self.next_match_id,
            next_match_position=self.next_match_position,
            loser_next_match_id=self.loser_next_match_id,
            loser_next_match_position=self.loser_next_match_position,
            status=self.status,
            is_bye=self.is_bye,
        )


class BracketMatchOut(BaseModel):
    id: str
    round_number: int
    match_number: int
    participant1_id: Optional[str] = None
    participant2_id: Optional[str] = None
    winner_id: Optional[str] = None
    result: Optional[MatchResultOut] = None
    next_match_id: Optional[str] = None
    next_match_position: Optional[SideName] = None
    loser_next_match_id: Optional[str] = None
    loser_next_match_position: Optional[SideName] = None
    status: str
    is_bye: bool


class SlotUpdateOut(BaseModel):
    match_id: str
    position: SideName
    participant_id: str


def match_to_out(m: BracketMatch) -> BracketMatchOut:
    return BracketMatchOut(
        id=m.id,
        round_number=m.round_number,
        match_number=m.match_number,
        participant1_id=m.participant1_id,
        participant2_id=m.participant2_id,
        winner_id=m.winner_id,
        result=result_to_out(m.result) if m.result is not None else None,
        next_match_id=m.next_match_id,
        next_match_position=m.next_match_position,
        loser_next_match_id=m.loser_next_match_id,
        loser_next_match_position=m.loser_next_match_position,
        status=m.status,
        is_bye=m.is_bye,
    )


def _slot_to_out(update: Optional[SlotUpdate]) -> Optional[SlotUpdateOut]:
    if update is None:
        return None
    return SlotUpdateOut(
        match_id=update.match_id,
        position=update.position,
        participant_id=update.participant_id,
    )


# ── Generation ───────────────────────────────────────────────────────────

class GenerateBracketRequest(BaseModel):
    participants: List[ParticipantIn]
    third_place_match: bool = False


class RoundRobinRequest(BaseModel):
    participants: List[ParticipantIn]
    pool_label: str = "RR"


@router.post("/brackets/generate", response_model=List[BracketMatchOut])
def generate_bracket(payload: GenerateBracketRequest) -> List[BracketMatchOut]:
    """Single-elimination bracket with byes already advanced."""
    try:
        matches = build_single_elimination(
            [p.to_participant() for p in payload.participants],
            third_place_match=payload.third_place_match,
        )
    except ValueError as e:
        raise bad_input(str(e))
    return [match_to_out(m) for m in matches]


@router.post("/brackets/round-robin", response_model=List[BracketMatchOut])
def generate_round_robin(payload: RoundRobinRequest) -> List[BracketMatchOut]:
    try:
        matches = build_round_robin(
            [p.to_participant() for p in payload.participants],
            pool_label=payload.pool_label,
        )
    except ValueError as e:
        raise bad_input(str(e))
    return [match_to_out(m) for m in matches]


# ── Advancement ──────────────────────────────────────────────────────────

class AdvanceRequest(BaseModel):
    match: BracketMatchIn
    score: Optional[MatchScoreIn] = None  # omitted for byes
    next_match: Optional[BracketMatchIn] = None
    loser_next_match: Optional[BracketMatchIn] = None


class AdvanceResponse(BaseModel):
    match: BracketMatchOut
    next_match_slot_update: Optional[SlotUpdateOut] = None
    loser_slot_update: Optional[SlotUpdateOut] = None
    next_match: Optional[BracketMatchOut] = None
    loser_next_match: Optional[BracketMatchOut] = None


@router.post("/brackets/advance", response_model=AdvanceResponse)
def advance_match(payload: AdvanceRequest) -> AdvanceResponse:
    """Finalize a match and compute the downstream slot placements."""
    match = payload.match.to_bracket_match()
    next_match = payload.next_match.to_bracket_match() if payload.next_match else None
    loser_next = payload.loser_next_match.to_bracket_match() if payload.loser_next_match else None

    try:
        if payload.score is None:
            if len(match.participants) != 1:
                raise WinnerRequired(f"Match {match.id} needs a score to advance")
            outcome = advance_bye(match, next_match)
        else:
            result = resolve_score(payload.score)
            outcome = advance(match, result, next_match, loser_next)
    except ScoringError as e:
        logger.warning("Advance rejected for %s: %s", match.id, e.code)
        raise to_http_exception(e)
    except ValueError as e:
        raise bad_input(str(e))

    return AdvanceResponse(
        match=match_to_out(outcome.updated_match),
        next_match_slot_update=_slot_to_out(outcome.next_match_slot_update),
        loser_slot_update=_slot_to_out(outcome.loser_slot_update),
        next_match=match_to_out(outcome.updated_next_match) if outcome.updated_next_match else None,
        loser_next_match=match_to_out(outcome.updated_loser_match) if outcome.updated_loser_match else None,
    )


# ── Round state ──────────────────────────────────────────────────────────

class RoundStateRequest(BaseModel):
    matches: List[BracketMatchIn]


class RoundState(BaseModel):
    round_number: int
    active: bool
    resolved: bool


class RoundStateResponse(BaseModel):
    current_round: Optional[int] = None
    rounds: List[RoundState]


@router.post("/brackets/rounds", response_model=RoundStateResponse)
def round_state(payload: RoundStateRequest) -> RoundStateResponse:
    """Active / resolved flags per round, for display layers."""
    matches = [m.to_bracket_match() for m in payload.matches]
    rounds = [
        RoundState(
            round_number=r,
            active=is_round_active(matches, r),
            resolved=is_round_resolved(matches, r),
        )
        for r in sorted({m.round_number for m in matches})
    ]
    return RoundStateResponse(current_round=current_round(matches), rounds=rounds)
