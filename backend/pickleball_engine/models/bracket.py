from dataclasses import dataclass
from typing import List, Optional

from pickleball_engine.models.score import PLAYER1, PLAYER2, MatchResult, Side

STATUS_SCHEDULED = "scheduled"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

# Placeholder shown by display layers for an unresolved slot
TBD = "TBD"


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    seed: Optional[int] = None


@dataclass
class BracketMatch:
    """
    One match in a bracket or pool.

    winner_id / result / status are written once, by advancement.
    next_match_position / loser_next_match_position pin the slot in the
    downstream match; when None the first open slot is used.
    """
    id: str
    round_number: int
    match_number: int = 1
    participant1_id: Optional[str] = None
    participant2_id: Optional[str] = None
    winner_id: Optional[str] = None
    result: Optional[MatchResult] = None
    next_match_id: Optional[str] = None
    next_match_position: Optional[Side] = None
    loser_next_match_id: Optional[str] = None
    loser_next_match_position: Optional[Side] = None
    status: str = STATUS_SCHEDULED
    is_bye: bool = False

    @property
    def slots_resolved(self) -> bool:
        return _is_real(self.participant1_id) and _is_real(self.participant2_id)

    @property
    def participants(self) -> List[str]:
        return [p for p in (self.participant1_id, self.participant2_id) if _is_real(p)]

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    def participant_for(self, side: Side) -> Optional[str]:
        return self.participant1_id if side == PLAYER1 else self.participant2_id

    def side_of(self, participant_id: str) -> Optional[Side]:
        if participant_id == self.participant1_id:
            return PLAYER1
        if participant_id == self.participant2_id:
            return PLAYER2
        return None

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None or not self.slots_resolved:
            return None
        return self.participant2_id if self.winner_id == self.participant1_id else self.participant1_id


def _is_real(participant_id: Optional[str]) -> bool:
    return bool(participant_id) and participant_id != TBD


@dataclass(frozen=True)
class SlotUpdate:
    """A participant placement the caller applies to a downstream match."""
    match_id: str
    position: Side
    participant_id: str


@dataclass(frozen=True)
class AdvanceResult:
    updated_match: BracketMatch
    next_match_slot_update: Optional[SlotUpdate] = None
    loser_slot_update: Optional[SlotUpdate] = None
    updated_next_match: Optional[BracketMatch] = None
    updated_loser_match: Optional[BracketMatch] = None
