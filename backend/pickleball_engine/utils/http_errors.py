"""
Engine error -> HTTP mapping.

- 422: InvalidScore, WinnerRequired, malformed formats (caller must fix input)
- 409: AlreadyCompleted, SlotConflict (state race; caller re-reads and decides)
"""

from fastapi import HTTPException

from pickleball_engine.exceptions import (
    AlreadyCompleted,
    InvalidScore,
    ScoringError,
    SlotConflict,
    WinnerRequired,
)

_STATUS_BY_ERROR = {
    InvalidScore: 422,
    WinnerRequired: 422,
    AlreadyCompleted: 409,
    SlotConflict: 409,
}


def to_http_exception(exc: ScoringError) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(type(exc), 400)
    return HTTPException(status_code=status_code, detail=exc.to_dict())


def bad_input(message: str) -> HTTPException:
    return HTTPException(status_code=422, detail={"code": "INVALID_INPUT", "message": message})
