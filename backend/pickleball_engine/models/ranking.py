from dataclasses import dataclass

from pickleball_engine.models.bracket import Participant


@dataclass
class RankingRow:
    """Derived standings row. Rebuilt on every ranking request, never persisted."""
    participant: Participant
    played: int = 0
    wins: int = 0
    losses: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    points: int = 0
    position: int = 0
    streak: str = ""  # "W3" / "L1" / ""

    @property
    def set_difference(self) -> int:
        return self.sets_won - self.sets_lost

    @property
    def game_difference(self) -> int:
        return self.games_won - self.games_lost
