"""Core enumerations shared by the board, move generator and engine."""

from enum import Enum, IntEnum


class Direction(IntEnum):
    """Offsets between square indices; index 0 is a8 and 63 is h1."""

    N = -8
    S = 8
    E = 1
    W = -1
    NE = -7
    NW = -9
    SE = 9
    SW = 7

    def is_westwards(self) -> bool:
        """True if stepping this way moves towards the a-file."""
        return self in (Direction.NW, Direction.SW, Direction.W)

    def is_eastwards(self) -> bool:
        """True if stepping this way moves towards the h-file."""
        return self in (Direction.NE, Direction.SE, Direction.E)


class Player(IntEnum):
    """Side to move; the value is the sign used for evaluation."""

    WHITE = 1
    BLACK = -1

    def opponent(self) -> "Player":
        return Player(-self.value)


class Status(Enum):
    """Outcome of a game."""

    UNDECIDED = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3


class Piece(IntEnum):
    """Pieces as signed integers: positive for white, negative for black."""

    EMPTY = 0
    WP = 1
    WN = 2
    WB = 3
    WR = 4
    WQ = 5
    WK = 6
    BP = -1
    BN = -2
    BB = -3
    BR = -4
    BQ = -5
    BK = -6


class SearchType(Enum):
    """How the engine budgets its search."""

    INFINITE = 0
    FIXED_DEPTH = 1
    TIME_PER_MOVE = 2
    TIME_PER_GAME = 3
    PONDER = 4
    MATE = 5