from pickleball_engine.models.bracket import (
    AdvanceResult,
    BracketMatch,
    Participant,
    SlotUpdate,
)
from pickleball_engine.models.ranking import RankingRow
from pickleball_engine.models.score import (
    MatchFormat,
    MatchResult,
    MatchState,
    SetScore,
    Side,
)

__all__ = [
    "SetScore",
    "MatchFormat",
    "MatchResult",
    "MatchState",
    "Side",
    "Participant",
    "BracketMatch",
    "SlotUpdate",
    "AdvanceResult",
    "RankingRow",
]
