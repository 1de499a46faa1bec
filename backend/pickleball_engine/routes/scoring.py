"""
Scoring endpoints: set evaluation, score validation, match resolution.
Stateless: every request carries the full score; nothing is stored.
"""
import logging
from typing import Dict, List, Literal, Optional, Union

from fastapi import APIRouter
from pydantic import BaseModel

from pickleball_engine import config
from pickleball_engine.exceptions import InvalidScore, ScoringError
from pickleball_engine.models.score import MatchFormat, MatchResult, SetScore
from pickleball_engine.services.match_resolver import resolve
from pickleball_engine.services.score_parser import parse_set_inputs
from pickleball_engine.services.score_validator import ValidationResult, validate, validate_or_raise
from pickleball_engine.services.set_evaluator import evaluate_set_score
from pickleball_engine.utils.http_errors import bad_input, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()

SideName = Literal["player1", "player2"]

# A score-form row as typed: {"player1": "6", "player2": "", "player1_tiebreak": ...}
RawSetRow = Dict[str, Union[int, str, None]]


# ── Request models ───────────────────────────────────────────────────────

class SetScoreIn(BaseModel):
    player1_games: int = 0
    player2_games: int = 0
    player1_tiebreak_points: Optional[int] = None
    player2_tiebreak_points: Optional[int] = None

    def to_set_score(self) -> SetScore:
        return SetScore(
            player1_games=self.player1_games,
            player2_games=self.player2_games,
            player1_tiebreak_points=self.player1_tiebreak_points,
            player2_tiebreak_points=self.player2_tiebreak_points,
        )


class MatchFormatIn(BaseModel):
    sets_to_win: int = config.DEFAULT_SETS_TO_WIN
    games_per_set: int = config.DEFAULT_GAMES_PER_SET
    deciding_tiebreak_points: int = config.DEFAULT_DECIDING_TIEBREAK_POINTS

    def to_format(self) -> MatchFormat:
        try:
            return MatchFormat(
                sets_to_win=self.sets_to_win,
                games_per_set=self.games_per_set,
                deciding_tiebreak_points=self.deciding_tiebreak_points,
            )
        except ValueError as e:
            raise bad_input(str(e))


def to_match_format(fmt_in: Optional[MatchFormatIn]) -> MatchFormat:
    if fmt_in is None:
        return config.default_match_format()
    return fmt_in.to_format()


def submitted_sets(sets: List[SetScoreIn], rows: Optional[List[RawSetRow]]) -> List[SetScore]:
    """Typed sets, or raw score-form rows normalised here before reaching the engine."""
    if rows is None:
        return [s.to_set_score() for s in sets]
    if sets:
        raise bad_input("Send either sets or rows, not both")
    try:
        return parse_set_inputs(rows)
    except InvalidScore as e:
        logger.info("Score form rejected: %d problem(s)", len(e.errors))
        raise to_http_exception(e)


class MatchScoreIn(BaseModel):
    """A submitted score: sets (or raw form rows) plus retirement / walkover flags."""
    sets: List[SetScoreIn] = []
    rows: Optional[List[RawSetRow]] = None
    format: Optional[MatchFormatIn] = None
    retired: bool = False
    walkover: bool = False
    manual_winner: Optional[SideName] = None

    def set_scores(self) -> List[SetScore]:
        return submitted_sets(self.sets, self.rows)


class EvaluateSetRequest(BaseModel):
    score: SetScoreIn
    set_index: int = 0
    format: Optional[MatchFormatIn] = None


class ValidateRequest(BaseModel):
    sets: List[SetScoreIn] = []
    rows: Optional[List[RawSetRow]] = None
    format: Optional[MatchFormatIn] = None
    walkover: bool = False
    retired: bool = False


# ── Response models ──────────────────────────────────────────────────────

class EvaluateSetResponse(BaseModel):
    winner: Optional[SideName] = None
    complete: bool


class ViolationOut(BaseModel):
    code: str
    message: str
    set_number: Optional[int] = None


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    violations: List[ViolationOut]


class MatchResultOut(BaseModel):
    sets: List[SetScoreIn]
    winner: Optional[SideName] = None
    final_score_label: str
    retired: bool
    retired_at_set_index: Optional[int] = None
    walkover: bool
    state: str
    player1_sets: int
    player2_sets: int
    is_terminal: bool


def _validation_response(result: ValidationResult) -> ValidationResponse:
    return ValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
        violations=[
            ViolationOut(code=v.code, message=v.message, set_number=v.set_number)
            for v in result.violations
        ],
    )


def result_to_out(result: MatchResult) -> MatchResultOut:
    return MatchResultOut(
        sets=[
            SetScoreIn(
                player1_games=s.player1_games,
                player2_games=s.player2_games,
                player1_tiebreak_points=s.player1_tiebreak_points,
                player2_tiebreak_points=s.player2_tiebreak_points,
            )
            for s in result.sets
        ],
        winner=result.winner,
        final_score_label=result.final_score_label,
        retired=result.retired,
        retired_at_set_index=result.retired_at_set_index,
        walkover=result.walkover,
        state=result.state.value,
        player1_sets=result.player1_sets,
        player2_sets=result.player2_sets,
        is_terminal=result.is_terminal,
    )


def resolve_score(payload: MatchScoreIn) -> MatchResult:
    """Validate then resolve a submitted score; engine errors become HTTP errors."""
    fmt = to_match_format(payload.format)
    sets = payload.set_scores()
    if payload.retired and payload.walkover:
        raise bad_input("retired and walkover are mutually exclusive")
    try:
        validate_or_raise(sets, fmt, walkover=payload.walkover, retired=payload.retired)
        return resolve(
            sets,
            fmt,
            retired=payload.retired,
            walkover=payload.walkover,
            manual_winner=payload.manual_winner,
        )
    except ScoringError as e:
        logger.info("Score rejected: %s", e.code)
        raise to_http_exception(e)


# ── Endpoints ────────────────────────────────────────────────────────────

@router.post("/scoring/evaluate-set", response_model=EvaluateSetResponse)
def evaluate_set_endpoint(payload: EvaluateSetRequest) -> EvaluateSetResponse:
    """Winner of a single set, or null while the set is open."""
    winner = evaluate_set_score(payload.score.to_set_score(), payload.set_index, to_match_format(payload.format))
    return EvaluateSetResponse(winner=winner, complete=winner is not None)


@router.post("/scoring/validate", response_model=ValidationResponse)
def validate_endpoint(payload: ValidateRequest) -> ValidationResponse:
    """Every violation in one pass. Always 200 for well-formed input; check is_valid."""
    if payload.retired and payload.walkover:
        raise bad_input("retired and walkover are mutually exclusive")
    sets = submitted_sets(payload.sets, payload.rows)
    result = validate(
        sets,
        to_match_format(payload.format),
        walkover=payload.walkover,
        retired=payload.retired,
    )
    return _validation_response(result)


@router.post("/scoring/resolve", response_model=MatchResultOut)
def resolve_endpoint(payload: MatchScoreIn) -> MatchResultOut:
    """Resolve a submitted score into a canonical result. An undecided score returns state=incomplete."""
    return result_to_out(resolve_score(payload))
