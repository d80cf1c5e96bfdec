"""Piece-square tables and distance tables used by the evaluation."""

from __future__ import annotations

from sohamchess.types import Piece


def _parse(rows: str) -> list[list[int]]:
    return [[int(value) for value in line.split()] for line in rows.strip().splitlines()]


def _mirrored(half_rows: str) -> tuple[int, ...]:
    """Build a 64-square table from left halves that mirror onto the right."""
    values: list[int] = []
    for half in _parse(half_rows):
        values.extend(half + half[::-1])
    return tuple(values)


def _full(rows: str) -> tuple[int, ...]:
    return tuple(value for row in _parse(rows) for value in row)


def _centre_offset(coordinate: int) -> int:
    return 3 - coordinate if coordinate < 4 else coordinate - 4


# Tables are laid out from white's point of view, index 0 being a8.
# Order: pawn, knight, bishop, rook, queen, king (middle game).
_PAWN = _mirrored(
    """
      0    0    0    0
     50   50   50   50
     10   10   20   30
      5    5   10   25
      0    0    0   20
      5   -5  -10    0
      5   10   10  -20
      0    0    0    0
    """
)

_KNIGHT = _mirrored(
    """
    -50  -40  -30  -30
    -40  -20    0    0
    -30    0   10   15
    -30    5   15   20
    -30    0   15   20
    -30    5   10   15
    -40  -20    0    5
    -50  -40  -30  -30
    """
)

_BISHOP = _mirrored(
    """
    -20  -10  -10  -10
    -10    0    0    0
    -10    0    5   10
    -10    5    5   10
    -10    0   10   10
    -10   10   10   10
    -10    5    0    0
    -20  -10  -10  -10
    """
)

_ROOK = _mirrored(
    """
      0    0    0    0
      5   10   10   10
     -5    0    0    0
     -5    0    0    0
     -5    0    0    0
     -5    0    0    0
     -5    0    0    0
      0    0    0    5
    """
)

# The queen table is not left-right symmetric, so it is given whole.
_QUEEN = _full(
    """
    -20  -10  -10   -5   -5  -10  -10  -20
    -10    0    0    0    0    0    0  -10
    -10    0    5    5    5    5    0  -10
     -5    0    5    5    5    5    0   -5
      0    0    5    5    5    5    0   -5
    -10    5    5    5    5    5    0  -10
    -10    0    5    0    0    0    0  -10
    -20  -10  -10   -5   -5  -10  -10  -20
    """
)

_KING_MIDDLE = _mirrored(
    """
    -30  -40  -40  -50
    -30  -40  -40  -50
    -30  -40  -40  -50
    -30  -40  -40  -50
    -20  -30  -30  -40
    -10  -20  -20  -20
     20   20    0    0
     20   30   10    0
    """
)

PIECE_SQUARE_TABLES: tuple[tuple[int, ...], ...] = (
    _PAWN,
    _KNIGHT,
    _BISHOP,
    _ROOK,
    _QUEEN,
    _KING_MIDDLE,
)

KING_ENDGAME_TABLE: tuple[int, ...] = _mirrored(
    """
    -50  -40  -30  -20
    -30  -20  -10    0
    -30  -10   20   30
    -30  -10   30   40
    -30  -10   30   40
    -30  -10   20   30
    -30  -30    0    0
    -50  -30  -30  -30
    """
)

CENTER_MANHATTAN_DISTANCE: tuple[int, ...] = tuple(
    _centre_offset(sq % 8) + _centre_offset(sq // 8) for sq in range(64)
)

CENTER_DISTANCE: tuple[int, ...] = tuple(
    max(_centre_offset(sq % 8), _centre_offset(sq // 8)) for sq in range(64)
)


def piece_square_value(piece: int, sq: int) -> int:
    """Positional bonus of a piece on a square, signed for its colour."""
    if piece == Piece.EMPTY:
        return 0
    table = PIECE_SQUARE_TABLES[abs(piece) - 1]
    if piece > 0:
        return table[sq]
    return -table[63 - sq]