import os
from typing import List

from dotenv import load_dotenv

from pickleball_engine.models.score import MatchFormat

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


DEFAULT_GAMES_PER_SET = _int_env("DEFAULT_GAMES_PER_SET", 6)
DEFAULT_SETS_TO_WIN = _int_env("DEFAULT_SETS_TO_WIN", 2)
DEFAULT_DECIDING_TIEBREAK_POINTS = _int_env("DEFAULT_DECIDING_TIEBREAK_POINTS", 10)

# Standings points (informational column; ordering is by wins)
POINTS_FOR_WIN = _int_env("POINTS_FOR_WIN", 3)
POINTS_FOR_LOSS = _int_env("POINTS_FOR_LOSS", 0)

PLAYOFF_QUALIFIERS = _int_env("PLAYOFF_QUALIFIERS", 4)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    extra = os.getenv("CORS_ORIGINS", "")
    if extra:
        origins.extend(o.strip() for o in extra.split(",") if o.strip())
    return origins


def default_match_format() -> MatchFormat:
    """MatchFormat built from the environment defaults."""
    return MatchFormat(
        sets_to_win=DEFAULT_SETS_TO_WIN,
        games_per_set=DEFAULT_GAMES_PER_SET,
        deciding_tiebreak_points=DEFAULT_DECIDING_TIEBREAK_POINTS,
    )
