"""
Score input normalisation at the form boundary.

Score forms hand over loosely typed rows: strings that may be blank,
ints, or None. These are turned into strict SetScore values before they
reach the engine; the engine itself never sees blank-string sentinels.

Supports:
  [{"player1": "6", "player2": "4"}, {"player1": "", "player2": ""}]
      -> [SetScore(6, 4)]                     (blank rows dropped)
  "6-4, 6-6(10-8)"                           -> display strings, full tiebreak notation
  {"sets": [...]} / {"display": "6-4 6-3"}   -> stored score blobs
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pickleball_engine.exceptions import InvalidScore
from pickleball_engine.models.score import SetScore

RawValue = Union[str, int, None]

_SET_PATTERN = re.compile(r"^(\d+)-(\d+)(?:\((\d+)-(\d+)\))?$")


def _to_int(value: RawValue, label: str, errors: List[str]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        errors.append(f"{label}: expected a number, got {value!r}")
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        errors.append(f"{label}: expected a number, got {text!r}")
        return None


def parse_set_row(row: Mapping[str, RawValue], set_number: int, errors: List[str]) -> Optional[SetScore]:
    """Normalise one form row. Returns None for a fully blank or unreadable row."""
    if not isinstance(row, Mapping):
        errors.append(f"Set {set_number}: expected a row of named fields, got {type(row).__name__}")
        return None
    seen = len(errors)
    p1 =_to_int(row.get("player1"), f"Set {set_number} player 1 games", errors)
    p2 = _to_int(row.get("player2"), f"Set {set_number} player 2 games", errors)
    t1 = _to_int(row.get("player1_tiebreak"), f"Set {set_number} player 1 tiebreak", errors)
    t2 = _to_int(row.get("player2_tiebreak"), f"Set {set_number} player 2 tiebreak", errors)

    if len(errors) > seen:
        return None
    if p1 is None and p2 is None and t1 is None and t2 is None:
        return None
    if p1 is None or p2 is None:
        errors.append(f"Set {set_number}: enter games for both sides")
        return None
    return SetScore(
        player1_games=p1,
        player2_games=p2,
        player1_tiebreak_points=t1,
        player2_tiebreak_points=t2,
    )


def parse_set_inputs(rows: Sequence[Mapping[str, RawValue]]) -> List[SetScore]:
    """
    Normalise raw score-form rows into SetScore values.

    Trailing blank rows are dropped. A blank row between filled rows is kept
    as an empty set so the validator can report the gap.

    Raises:
        InvalidScore: non-numeric input or a half-filled row (all problems at once)
    """
    errors: List[str] = []
    parsed: List[Optional[SetScore]] = [
        parse_set_row(row, index + 1, errors) for index, row in enumerate(rows)
    ]
    if errors:
        raise InvalidScore(errors)

    while parsed and parsed[-1] is None:
        parsed.pop()
    return [s if s is not None else SetScore() for s in parsed]


def parse_score_string(raw: str) -> Optional[List[SetScore]]:
    """Parse strings like '6-4', '6-3 4-6', '6-4, 6-6(10-8)'. Returns None on parse failure."""
    normalized = raw.replace(",", " ").strip()
    parts = normalized.split()
    if not parts:
        return None

    sets: List[SetScore] = []
    for part in parts:
        match = _SET_PATTERN.match(part)
        if not match:
            return None
        g1, g2, t1, t2 = match.groups()
        sets.append(
            SetScore(
                player1_games=int(g1),
                player2_games=int(g2),
                player1_tiebreak_points=int(t1) if t1 is not None else None,
                player2_tiebreak_points=int(t2) if t2 is not None else None,
            )
        )
    return sets


def parse_score(score_json: Optional[Union[str, Dict[str, Any]]]) -> Optional[List[SetScore]]:
    """Parse a stored score blob into sets. Returns None if the score cannot be parsed."""
    if not score_json:
        return None

    if isinstance(score_json, str):
        raw = score_json
    elif isinstance(score_json, dict):
        if "sets" in score_json and isinstance(score_json["sets"], list):
            try:
                return parse_set_inputs(score_json["sets"])
            except InvalidScore:
                return None
        raw = str(score_json.get("display") or score_json.get("score") or "")
    else:
        return None

    if not raw.strip():
        return None
    return parse_score_string(raw.strip())
