"""
Single-elimination bracket generation.

Seeds are laid out in bracket-fold order so that, if chalk holds, seed 1
meets seed 2 only in the final. When the field is not a power of two the
top seeds receive byes; bye matches are auto-advanced before returning.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pickleball_engine.models.bracket import BracketMatch, Participant
from pickleball_engine.models.score import PLAYER1, PLAYER2
from pickleball_engine.services.bracket_progression import resolve_byes

logger = logging.getLogger(__name__)

THIRD_PLACE_MATCH_ID = "3RD"


def bracket_fold_positions(n: int) -> List[int]:
    """Standard bracket-fold positions for *n* entries.

    Returns a flat list of seed numbers in bracket position order.
    Consecutive pairs indicate which seeds meet in round 1:
      4-entry  -> [1, 4, 2, 3]       -> (1v4), (2v3)
      8-entry  -> [1, 8, 4, 5, ...]   -> (1v8), (4v5), ...
    """
    if n == 2:
        return [1, 2]

    half = bracket_fold_positions(n // 2)

    expanded: List[int] = []
    for s in half:
        expanded.append(s)
        expanded.append(n + 1 - s)

    mid = len(expanded) // 2
    top = expanded[:mid]
    bot = expanded[mid:]
    if len(bot) >= 4:
        bot = bot[:-4] + bot[-2:] + bot[-4:-2]

    return top + bot


def bracket_size(participant_count: int) -> int:
    """Smallest power of two that holds every participant."""
    size = 2
    while size < participant_count:
        size *= 2
    return size


def seed_order(participants: Sequence[Participant]) -> List[Participant]:
    """Seeded participants first (ascending seed), unseeded after in input order."""
    indexed = list(enumerate(participants))
    indexed.sort(key=lambda item: (item[1].seed is None, item[1].seed or 0, item[0]))
    return [p for _, p in indexed]


def match_id(round_number: int, match_number: int) -> str:
    return f"R{round_number}M{match_number}"


def build_single_elimination(
    participants: Sequence[Participant],
    third_place_match: bool = False,
) -> List[BracketMatch]:
    """Build a wired single-elimination bracket. Byes are already advanced."""
    if len(participants) < 2:
        raise ValueError(f"A bracket needs at least 2 participants, got {len(participants)}")

    ids = [p.id for p in participants]
    if len(set(ids)) != len(ids):
        raise ValueError("Participant ids must be unique")

    ordered = seed_order(participants)
    size = bracket_size(len(ordered))
    rounds = size.bit_length() - 1
    by_seed: Dict[int, Participant] = {i + 1: p for i, p in enumerate(ordered)}

    positions = bracket_fold_positions(size)
    matches: List[BracketMatch] = []

    for round_number in range(1, rounds + 1):
        matches_in_round = size >> round_number
        for number in range(1, matches_in_round + 1):
            is_final = round_number == rounds
            p1: Optional[str] = None
            p2: Optional[str] = None
            is_bye = False
            if round_number == 1:
                seed_a = positions[2 * number - 2]
                seed_b = positions[2 * number - 1]
                a = by_seed.get(seed_a)
                b = by_seed.get(seed_b)
                p1 = a.id if a else None
                p2 = b.id if b else None
                is_bye = a is None or b is None

            matches.append(
                BracketMatch(
                    id=match_id(round_number, number),
                    round_number=round_number,
                    match_number=number,
                    participant1_id=p1,
                    participant2_id=p2,
                    next_match_id=None if is_final else match_id(round_number + 1, (number + 1) // 2),
                    next_match_position=None if is_final else (PLAYER1 if number % 2 == 1 else PLAYER2),
                    is_bye=is_bye,
                )
            )

    if third_place_match and rounds >= 2:
        semifinal_round = rounds - 1
        for m in matches:
            if m.round_number == semifinal_round:
                m.loser_next_match_id = THIRD_PLACE_MATCH_ID
                m.loser_next_match_position = PLAYER1 if m.match_number % 2 == 1 else PLAYER2
        matches.append(
            BracketMatch(
                id=THIRD_PLACE_MATCH_ID,
                round_number=rounds,
                match_number=2,
            )
        )

    byes = sum(1 for m in matches if m.is_bye)
    logger.info(
        "Built single-elimination bracket: %d participants, size %d, %d rounds, %d byes",
        len(ordered),
        size,
        rounds,
        byes,
    )
    return resolve_byes(matches)
