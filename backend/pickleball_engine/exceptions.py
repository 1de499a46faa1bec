"""
Scoring engine error taxonomy.

Every error carries a stable ``code`` and a ``to_dict()`` payload so callers
(score forms, bracket views, the HTTP layer) can render their own messages.
"""
from typing import Any, Dict, List, Optional, Sequence


class ScoringError(Exception):
    code = "SCORING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidScore(ScoringError):
    """Game or tiebreak values out of range or inconsistent. Carries every violation found."""

    code = "INVALID_SCORE"

    def __init__(self, errors: Sequence[str], violations: Optional[Sequence[Any]] = None):
        self.errors: List[str] = list(errors)
        self.violations = list(violations or [])
        super().__init__("; ".join(self.errors) or "Invalid score")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = list(self.errors)
        return payload


class WinnerRequired(ScoringError):
    code = "WINNER_REQUIRED"

    def __init__(self, message: str = "A winner must be selected for a retired or walkover match"):
        super().__init__(message)


class AlreadyCompleted(ScoringError):
    code = "ALREADY_COMPLETED"

    def __init__(self, match_id: str):
        super().__init__(f"Match {match_id} is already completed")
        self.match_id = match_id

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["match_id"] = self.match_id
        return payload


class SlotConflict(ScoringError):
    code = "SLOT_CONFLICT"

    def __init__(
        self,
        match_id: str,
        incoming: str,
        position: Optional[str] = None,
        existing: Optional[str] = None,
    ):
        if position:
            message = (
                f"Match {match_id} slot {position} already holds {existing}; "
                f"cannot place {incoming}"
            )
        else:
            message = f"Match {match_id} has no open slot for {incoming}"
        super().__init__(message)
        self.match_id = match_id
        self.position = position
        self.existing = existing
        self.incoming = incoming

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            match_id=self.match_id,
            position=self.position,
            existing=self.existing,
            incoming=self.incoming,
        )
        return payload
