import pytest

from sohamchess.knowledge import PIECE_SQUARE_TABLES, piece_square_value
from sohamchess.types import Piece


def test_every_square_has_a_value_for_every_piece():
    values = [
        piece_square_value(Piece(kind), sq)
        for kind in range(-6, 7)
        for sq in range(64)
    ]
    assert len(values) == 13 * 64
    assert all(-50 <= value <= 50 for value in values)


def test_empty_square_has_no_value():
    assert all(piece_square_value(Piece.EMPTY, sq) == 0 for sq in range(64))


@pytest.mark.parametrize("kind", [1, 2, 3, 4, 5, 6])
def test_black_value_is_rotated_negation(kind):
    for sq in range(64):
        assert piece_square_value(Piece(kind), sq) == -piece_square_value(
            Piece(-kind), 63 - sq
        )


def test_white_value_reads_table():
    for kind in range(1, 7):
        for sq in range(64):
            assert piece_square_value(Piece(kind), sq) == PIECE_SQUARE_TABLES[kind - 1][sq]


def test_pinned_values():
    assert piece_square_value(Piece.WP, 8) == 50
    assert piece_square_value(Piece.WK, 62) == 30


def test_pinned_corner_values():
    assert piece_square_value(Piece.WN, 0) == -50
    assert piece_square_value(Piece.BN, 63) == 50
    assert piece_square_value(Piece.WB, 63) == -20


def test_queen_table_is_asymmetric():
    assert piece_square_value(Piece.WQ, 32) == 0
    assert piece_square_value(Piece.WQ, 39) == -5
    assert piece_square_value(Piece.BQ, 24) == 5
    assert piece_square_value(Piece.WQ, 46) == 0
    assert piece_square_value(Piece.WQ, 41) == 5