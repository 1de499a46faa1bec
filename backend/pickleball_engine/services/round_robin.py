"""
Round Robin match generation for pools and leagues.

Every participant meets every other participant once. Pool size 4 uses a
fixed preset with 1v2 in the last round; other sizes use the circle method
(odd sizes sit one participant out per round).
"""

from typing import List, Sequence, Tuple

from pickleball_engine.models.bracket import BracketMatch, Participant


def rr_pairings_by_round(pool_size: int) -> List[Tuple[int, int, int, int]]:
    """
    Round-robin pairings. Returns list of (round_index, sequence_in_round, idx_a, idx_b).
    idx_a, idx_b are 0-based pool positions.

    Pool size 4 uses exact preset order (1v2 last):
    - Round 1: 1v4, 2v3  -> (0,3), (1,2)
    - Round 2: 1v3, 2v4  -> (0,2), (1,3)
    - Round 3: 1v2, 3v4  -> (0,1), (2,3)
    """
    if pool_size < 2:
        return []

    if pool_size == 4:
        return [
            (1, 1, 0, 3),
            (1, 2, 1, 2),
            (2, 1, 0, 2),
            (2, 2, 1, 3),
            (3, 1, 0, 1),
            (3, 2, 2, 3),
        ]

    n = pool_size
    n2 = n + 1 if n % 2 == 1 else n
    half = n2 // 2
    bye_idx = n if n % 2 == 1 else -1

    result: List[Tuple[int, int, int, int]] = []
    positions = list(range(n2))

    for round_num in range(1, n2):
        seq = 0
        for i in range(half):
            a, b = positions[i], positions[n2 - 1 - i]
            if a == bye_idx or b == bye_idx:
                continue
            seq += 1
            result.append((round_num, seq, min(a, b), max(a, b)))
        # Circle: keep 0 fixed, rotate the rest
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]

    return result


def build_round_robin(participants: Sequence[Participant], pool_label: str = "RR") -> List[BracketMatch]:
    """Pool matches in round order, ids like ``RR-R1M2``. No downstream wiring."""
    ids = [p.id for p in participants]
    if len(set(ids)) != len(ids):
        raise ValueError("Participant ids must be unique")

    matches: List[BracketMatch] = []
    for round_index, seq, idx_a, idx_b in rr_pairings_by_round(len(participants)):
        matches.append(
            BracketMatch(
                id=f"{pool_label}-R{round_index}M{seq}",
                round_number=round_index,
                match_number=seq,
                participant1_id=participants[idx_a].id,
                participant2_id=participants[idx_b].id,
            )
        )
    return matches
