"""
Bracket Progression: when a match is finalized, place its winner (and, for
consolation / third-place wiring, its loser) into the downstream match slot.

Inputs are never mutated; updated copies are returned alongside the
SlotUpdate the caller persists. Races are reported, not resolved:
    - AlreadyCompleted: the match already has a result
    - SlotConflict:     the downstream slot holds a different participant
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from pickleball_engine.exceptions import AlreadyCompleted, SlotConflict, WinnerRequired
from pickleball_engine.models.bracket import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_SCHEDULED,
    TBD,
    AdvanceResult,
    BracketMatch,
    SlotUpdate,
)
from pickleball_engine.models.score import PLAYER1, PLAYER2, MatchResult, Side, other_side

logger = logging.getLogger(__name__)


def _is_open(participant_id: Optional[str]) -> bool:
    return not participant_id or participant_id == TBD


def _parity_position(match: BracketMatch) -> Side:
    # Standard wiring: odd match numbers feed player1, even feed player2
    return PLAYER1 if match.match_number % 2 == 1 else PLAYER2


def _resolve_position(
    source: BracketMatch,
    target_id: str,
    pinned: Optional[Side],
    participant_id: str,
    target: Optional[BracketMatch],
) -> Side:
    if target is not None and target.id != target_id:
        raise ValueError(f"Match {source.id} feeds {target_id}, got downstream match {target.id}")

    if pinned is not None:
        if target is not None:
            existing = target.participant_for(pinned)
            if not _is_open(existing) and existing != participant_id:
                raise SlotConflict(target_id, participant_id, position=pinned, existing=existing)
        return pinned

    if target is None:
        return _parity_position(source)

    already = target.side_of(participant_id)
    if already is not None:
        return already
    if _is_open(target.participant1_id):
        return PLAYER1
    if _is_open(target.participant2_id):
        return PLAYER2
    raise SlotConflict(target_id, participant_id)


def apply_slot_update(match: BracketMatch, update: SlotUpdate) -> BracketMatch:
    """Return a copy of match with the update's slot filled."""
    if match.id != update.match_id:
        raise ValueError(f"Slot update for {update.match_id} applied to {match.id}")
    if update.position == PLAYER1:
        return replace(match, participant1_id=update.participant_id)
    return replace(match, participant2_id=update.participant_id)


def _place(
    source: BracketMatch,
    target_id: Optional[str],
    pinned: Optional[Side],
    participant_id: Optional[str],
    target: Optional[BracketMatch],
):
    if not target_id or participant_id is None:
        return None, None
    position = _resolve_position(source, target_id, pinned, participant_id, target)
    update = SlotUpdate(match_id=target_id, position=position, participant_id=participant_id)
    updated_target = apply_slot_update(target, update) if target is not None else None
    logger.debug("Placing %s into %s.%s (from %s)", participant_id, target_id, position, source.id)
    return update, updated_target


def advance(
    match: BracketMatch,
    result: MatchResult,
    next_match: Optional[BracketMatch] = None,
    loser_next_match: Optional[BracketMatch] = None,
) -> AdvanceResult:
    """
    Write the result onto the match and compute downstream placements.

    Raises:
        AlreadyCompleted: match was already advanced
        WinnerRequired:   result has no winner (not terminal)
        SlotConflict:     downstream slot already taken by someone else
    """
    if match.is_completed:
        raise AlreadyCompleted(match.id)
    if result.winner is None:
        raise WinnerRequired(f"Match {match.id} result has no winner; only finished matches advance")

    winner_id = match.participant_for(result.winner)
    if _is_open(winner_id):
        raise ValueError(f"Match {match.id} has no participant in slot {result.winner}")
    loser_id = match.participant_for(other_side(result.winner))

    next_update, updated_next = _place(
        match, match.next_match_id, match.next_match_position, winner_id, next_match
    )
    loser_update, updated_loser = _place(
        match,
        match.loser_next_match_id,
        match.loser_next_match_position,
        None if _is_open(loser_id) else loser_id,
        loser_next_match,
    )

    updated = replace(match, result=result, winner_id=winner_id, status=STATUS_COMPLETED)
    logger.info(
        "Match %s completed: winner=%s score=%s",
        match.id,
        winner_id,
        result.final_score_label,
    )
    return AdvanceResult(
        updated_match=updated,
        next_match_slot_update=next_update,
        loser_slot_update=loser_update,
        updated_next_match=updated_next,
        updated_loser_match=updated_loser,
    )


def advance_bye(match: BracketMatch, next_match: Optional[BracketMatch] = None) -> AdvanceResult:
    """Auto-advance the sole participant of a bye match. No Match Resolver involved."""
    if match.is_completed:
        raise AlreadyCompleted(match.id)
    present = match.participants
    if len(present) != 1:
        raise ValueError(f"Match {match.id} is not a bye: {len(present)} participant(s)")

    winner_id = present[0]
    next_update, updated_next = _place(
        match, match.next_match_id, match.next_match_position, winner_id, next_match
    )
    updated = replace(match, winner_id=winner_id, status=STATUS_COMPLETED, is_bye=True)
    logger.info("Bye %s: %s advances", match.id, winner_id)
    return AdvanceResult(
        updated_match=updated,
        next_match_slot_update=next_update,
        updated_next_match=updated_next,
    )


def resolve_byes(matches: Sequence[BracketMatch]) -> List[BracketMatch]:
    """
    Auto-advance every pending bye in a bracket and return the updated list.

    Deterministic: processes by (round_number, match_number). Idempotent:
    completed byes are left alone.
    """
    by_id: Dict[str, BracketMatch] = {m.id: m for m in matches}
    order = sorted(by_id.values(), key=lambda m: (m.round_number, m.match_number))

    for candidate in order:
        current = by_id[candidate.id]
        if current.is_completed or not current.is_bye:
            continue
        next_match = by_id.get(current.next_match_id) if current.next_match_id else None
        outcome = advance_bye(current, next_match)
        by_id[current.id] = outcome.updated_match
        if outcome.updated_next_match is not None:
            by_id[outcome.updated_next_match.id] = outcome.updated_next_match

    return [by_id[m.id] for m in matches]


def _round_matches(matches: Sequence[BracketMatch], round_number: int) -> List[BracketMatch]:
    return [m for m in matches if m.round_number == round_number]


def is_round_active(matches: Sequence[BracketMatch], round_number: int) -> bool:
    """A round is active when a match is in progress, or scheduled with both slots resolved."""
    for m in _round_matches(matches, round_number):
        if m.status == STATUS_IN_PROGRESS:
            return True
        if m.status == STATUS_SCHEDULED and m.slots_resolved:
            return True
    return False


def is_round_resolved(matches: Sequence[BracketMatch], round_number: int) -> bool:
    in_round = _round_matches(matches, round_number)
    return bool(in_round) and all(m.status == STATUS_COMPLETED for m in in_round)


def current_round(matches: Sequence[BracketMatch]) -> Optional[int]:
    """Lowest active round number, or None when nothing is playable."""
    for round_number in sorted({m.round_number for m in matches}):
        if is_round_active(matches, round_number):
            return round_number
    return None
