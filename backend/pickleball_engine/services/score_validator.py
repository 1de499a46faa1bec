"""
Score Validator: legality checks for an ordered list of set scores.

All violations are collected (no fail-fast) so a score form can show every
problem in one pass. Walkover matches skip validation entirely.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pickleball_engine.exceptions import InvalidScore
from pickleball_engine.models.score import MatchFormat, SetScore
from pickleball_engine.services.match_resolver import count_sets
from pickleball_engine.services.set_evaluator import (
    evaluate_set_score,
    is_tiebreak_set,
    tiebreak_target,
)

logger = logging.getLogger(__name__)

# Violation codes
NO_SETS = "NO_SETS"
TOO_MANY_SETS = "TOO_MANY_SETS"
GAMES_OUT_OF_RANGE = "GAMES_OUT_OF_RANGE"
IMPOSSIBLE_SCORE = "IMPOSSIBLE_SCORE"
TIEBREAK_REQUIRED = "TIEBREAK_REQUIRED"
TIEBREAK_INCOMPLETE = "TIEBREAK_INCOMPLETE"
TIEBREAK_NOT_ALLOWED = "TIEBREAK_NOT_ALLOWED"
TIEBREAK_OUT_OF_RANGE = "TIEBREAK_OUT_OF_RANGE"
SET_SKIPPED = "SET_SKIPPED"
SET_AFTER_MATCH_DECIDED = "SET_AFTER_MATCH_DECIDED"
INCOMPLETE_SET = "INCOMPLETE_SET"  # warning only


@dataclass(frozen=True)
class ScoreViolation:
    code: str
    message: str
    set_number: Optional[int] = None  # one-based


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    violations: List[ScoreViolation] = field(default_factory=list)
    warning_violations: List[ScoreViolation] = field(default_factory=list)


class _Collector:
    def __init__(self):
        self.errors: List[ScoreViolation] = []
        self.warnings: List[ScoreViolation] = []

    def error(self, code: str, message: str, set_number: Optional[int] = None) -> None:
        self.errors.append(ScoreViolation(code=code, message=message, set_number=set_number))

    def warn(self, code: str, message: str, set_number: Optional[int] = None) -> None:
        self.warnings.append(ScoreViolation(code=code, message=message, set_number=set_number))

    def result(self) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=[v.message for v in self.errors],
            warnings=[v.message for v in self.warnings],
            violations=list(self.errors),
            warning_violations=list(self.warnings),
        )


def _trim_trailing_blank(sets: Sequence[SetScore]) -> List[SetScore]:
    trimmed = list(sets)
    while trimmed and not trimmed[-1].has_data:
        trimmed.pop()
    return trimmed


def _check_set(
    set_score: SetScore,
    index: int,
    fmt: MatchFormat,
    out: _Collector,
    tiebreak_optional: bool = False,
) -> bool:
    """Per-set checks. Returns False when the games are out of range."""
    n = index + 1
    g1 = set_score.player1_games
    g2 = set_score.player2_games
    gps = fmt.games_per_set

    if min(g1, g2) < 0 or max(g1, g2) > fmt.max_games:
        out.error(
            GAMES_OUT_OF_RANGE,
            f"Set {n}: game counts must be between 0 and {fmt.max_games} (got {g1}-{g2})",
            n,
        )
        in_range = False
    else:
        in_range = True

    t1 = set_score.player1_tiebreak_points
    t2 = set_score.player2_tiebreak_points

    if is_tiebreak_set(g1, g2, fmt):
        if t1 is None and t2 is None:
            # A retirement can happen before the tiebreak starts
            if not tiebreak_optional:
                out.error(
                    TIEBREAK_REQUIRED,
                    f"Set {n}: tiebreak points are required at {gps}-{gps}",
                    n,
                )
        elif t1 is None or t2 is None:
            out.error(
                TIEBREAK_INCOMPLETE,
                f"Set {n}: tiebreak points must be entered for both sides",
                n,
            )
    elif set_score.has_any_tiebreak:
        out.error(
            TIEBREAK_NOT_ALLOWED,
            f"Set {n}: tiebreak points are only allowed at {gps}-{gps} (got {g1}-{g2})",
            n,
        )

    if (t1 is not None and t1 < 0) or (t2 is not None and t2 < 0):
        out.error(TIEBREAK_OUT_OF_RANGE, f"Set {n}: tiebreak points cannot be negative", n)
    elif is_tiebreak_set(g1, g2, fmt) and set_score.has_tiebreak:
        # Play stops once a side reaches the target two clear; past the target the margin is exactly 2
        target = tiebreak_target(index, fmt)
        high = max(t1, t2)
        low = min(t1, t2)
        if high > target and high - low > 2:
            out.error(
                TIEBREAK_OUT_OF_RANGE,
                f"Set {n}: tiebreak {t1}-{t2} is not possible in a tiebreak to {target} "
                f"(past {target} the winning margin is exactly 2)",
                n,
            )

    if in_range and not is_tiebreak_set(g1, g2, fmt):
        high = max(g1, g2)
        low = min(g1, g2)
        if high == fmt.max_games and low != gps - 1:
            if low == gps:
                message = (
                    f"Set {n}: {high}-{low} must be recorded as {gps}-{gps} with tiebreak points"
                )
            else:
                message = (
                    f"Set {n}: {high}-{low} is not a possible score; "
                    f"the set ends at {gps}-{low}"
                )
            out.error(IMPOSSIBLE_SCORE, message, n)

    return in_range


def validate(
    sets: Sequence[SetScore],
    fmt: MatchFormat,
    walkover: bool = False,
    retired: bool = False,
) -> ValidationResult:
    """Validate an ordered list of set scores against the match format.

    A retirement may come before any set was scored, so an empty score is
    only an error for matches that were not retired.
    """
    out = _Collector()
    if walkover:
        return out.result()

    trimmed = _trim_trailing_blank(sets)
    if not trimmed:
        if not retired:
            out.error(NO_SETS, "At least one set score is required")
        return out.result()

    if len(trimmed) > fmt.max_sets:
        out.error(
            TOO_MANY_SETS,
            f"A best-of-{fmt.max_sets} match has at most {fmt.max_sets} sets (got {len(trimmed)})",
        )

    final_index = len(trimmed) - 1
    bounded = [
        _check_set(s, i, fmt, out, tiebreak_optional=retired and i == final_index)
        for i, s in enumerate(trimmed)
    ]
    if not all(bounded):
        # Set evaluation assumes bounded inputs
        logger.debug("Skipping sequence checks: %d set(s) out of range", bounded.count(False))
        return out.result()

    count = count_sets(trimmed, fmt)
    played = trimmed if count.decided_at is None else trimmed[: count.decided_at + 1]

    if count.decided_at is not None:
        for index in range(count.decided_at + 1, len(trimmed)):
            if trimmed[index].has_data:
                out.error(
                    SET_AFTER_MATCH_DECIDED,
                    f"Set {index + 1}: the match was already decided after set {count.decided_at + 1}",
                    index + 1,
                )

    for index, set_score in enumerate(played[:-1]):
        if evaluate_set_score(set_score, index, fmt) is None:
            out.error(
                SET_SKIPPED,
                f"Set {index + 1}: set is not complete but later sets were entered",
                index + 1,
            )

    last_index = len(played) - 1
    last = played[last_index]
    if evaluate_set_score(last, last_index, fmt) is None:
        if is_tiebreak_set(last.player1_games, last.player2_games, fmt) and last.has_tiebreak:
            target = tiebreak_target(last_index, fmt)
            message = f"Set {last_index + 1}: tiebreak to {target} (win by 2) is not finished"
        else:
            message = f"Set {last_index + 1}: set is not complete; expected only for in-progress or retired matches"
        out.warn(INCOMPLETE_SET, message, last_index + 1)

    return out.result()


def validate_or_raise(
    sets: Sequence[SetScore],
    fmt: MatchFormat,
    walkover: bool = False,
    retired: bool = False,
) -> ValidationResult:
    """Validate and raise InvalidScore carrying every violation on failure."""
    result = validate(sets, fmt, walkover=walkover, retired=retired)
    if not result.is_valid:
        raise InvalidScore(result.errors, result.violations)
    return result
