from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Tuple

Side = Literal["player1", "player2"]

PLAYER1: Side = "player1"
PLAYER2: Side = "player2"

REGULAR_TIEBREAK_POINTS = 7
SUPER_TIEBREAK_POINTS = 10

ALLOWED_SETS_TO_WIN = (1, 2, 3)
ALLOWED_GAMES_PER_SET = (4, 6)
ALLOWED_DECIDING_TIEBREAK_POINTS = (REGULAR_TIEBREAK_POINTS, SUPER_TIEBREAK_POINTS)


def other_side(side: Side) -> Side:
    return PLAYER2 if side == PLAYER1 else PLAYER1


@dataclass(frozen=True)
class SetScore:
    """One set as entered on a score form. Tiebreak points only when games are tied at the threshold."""
    player1_games: int = 0
    player2_games: int = 0
    player1_tiebreak_points: Optional[int] = None
    player2_tiebreak_points: Optional[int] = None

    @property
    def has_tiebreak(self) -> bool:
        return self.player1_tiebreak_points is not None and self.player2_tiebreak_points is not None

    @property
    def has_any_tiebreak(self) -> bool:
        return self.player1_tiebreak_points is not None or self.player2_tiebreak_points is not None

    @property
    def has_data(self) -> bool:
        return bool(
            self.player1_games
            or self.player2_games
            or self.player1_tiebreak_points
            or self.player2_tiebreak_points
        )


@dataclass(frozen=True)
class MatchFormat:
    sets_to_win: int = 2  # 1 | 2 | 3 (best of 1 / 3 / 5)
    games_per_set: int = 6  # 6 standard | 4 short set
    deciding_tiebreak_points: int = SUPER_TIEBREAK_POINTS
    tiebreak_points: int = REGULAR_TIEBREAK_POINTS

    def __post_init__(self):
        if self.sets_to_win not in ALLOWED_SETS_TO_WIN:
            raise ValueError(f"sets_to_win must be one of {ALLOWED_SETS_TO_WIN}, got {self.sets_to_win}")
        if self.games_per_set not in ALLOWED_GAMES_PER_SET:
            raise ValueError(f"games_per_set must be one of {ALLOWED_GAMES_PER_SET}, got {self.games_per_set}")
        if self.deciding_tiebreak_points not in ALLOWED_DECIDING_TIEBREAK_POINTS:
            raise ValueError(
                f"deciding_tiebreak_points must be one of {ALLOWED_DECIDING_TIEBREAK_POINTS}, "
                f"got {self.deciding_tiebreak_points}"
            )

    @property
    def max_sets(self) -> int:
        return 2 * self.sets_to_win - 1

    @property
    def deciding_set_index(self) -> int:
        """Zero-based index of the last possible set."""
        return self.max_sets - 1

    @property
    def max_games(self) -> int:
        return self.games_per_set + 1


class MatchState(str, Enum):
    INCOMPLETE = "incomplete"
    WINNER_DETERMINED = "winner_determined"
    RETIRED = "retired"
    WALKOVER = "walkover"


RETIRED_LABEL = "RET"
WALKOVER_LABEL = "W.O."


@dataclass(frozen=True)
class MatchResult:
    sets: Tuple[SetScore, ...] = ()
    winner: Optional[Side] = None
    final_score_label: str = ""
    retired: bool = False
    retired_at_set_index: Optional[int] = None  # one-based
    walkover: bool = False
    state: MatchState = MatchState.INCOMPLETE
    player1_sets: int = 0
    player2_sets: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None or self.retired or self.walkover

    @property
    def loser(self) -> Optional[Side]:
        return other_side(self.winner) if self.winner else None
