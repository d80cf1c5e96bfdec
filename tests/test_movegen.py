import pytest

from sohamchess.board import Board, Move, sq2idx
from sohamchess.movegen import (
    divide,
    generate_legal_moves,
    generate_pseudo_moves,
    is_in_check,
    is_in_threat,
    list_san,
    mark_threats,
    perft,
)
from sohamchess.types import Piece, Player

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


def board_from(fen):
    board = Board()
    board.load_fen(fen)
    return board


def test_startpos_legal_move_count():
    assert len(generate_legal_moves(Board())) == 20


def test_perft_startpos_depth_two():
    assert perft(Board(), 2) == 400


def test_kiwipete_depth_one():
    assert perft(board_from(KIWIPETE), 1) == 48


def test_perft_zero_depth_is_one():
    assert perft(Board(), 0) == 1


def test_perft_one_matches_legal_list():
    board = board_from(KIWIPETE)
    assert perft(board, 1) == len(generate_legal_moves(board))


def test_divide_sums_to_perft_and_restores_board():
    board = Board()
    before = board.to_fen()
    counts = divide(board, 2)
    assert sum(counts.values()) == perft(board, 2)
    assert list(counts) == sorted(counts)
    assert board.to_fen() == before


def test_legal_moves_are_subset_of_pseudo_moves():
    board = board_from(KIWIPETE)
    pseudo = generate_pseudo_moves(board)
    for move in generate_legal_moves(board):
        assert move in pseudo


def test_generation_does_not_change_position():
    board = board_from(KIWIPETE)
    before = board.to_fen()
    generate_legal_moves(board)
    assert board.to_fen() == before


def test_fools_mate_is_checkmate():
    board = board_from(FOOLS_MATE)
    assert is_in_check(board, Player.WHITE) is True
    assert generate_legal_moves(board) == []
    assert board.turn == Player.WHITE


def test_startpos_not_in_check():
    board = Board()
    assert is_in_check(board, Player.WHITE) is False
    assert is_in_check(board, Player.BLACK) is False
    assert board.turn == Player.WHITE


def test_is_in_threat_pawn_push_squares():
    board = Board()
    assert is_in_threat(board, sq2idx("e", "4")) is True
    assert is_in_threat(board, sq2idx("e", "5")) is False


def test_en_passant_capture_generated_and_played():
    board = board_from("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
    ep = Move(sq2idx("e", "5"), sq2idx("d", "6"), enpassant=True)
    legal = generate_legal_moves(board)
    assert ep in legal
    move = legal[legal.index(ep)]
    board.make_move(move)
    assert board[sq2idx("d", "5")] == Piece.EMPTY
    assert board[sq2idx("d", "6")] == Piece.WP


def test_castling_through_attacked_square_is_illegal():
    board = board_from("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    kingside = Move(60, 62, castling=True)
    queenside = Move(60, 58, castling=True)
    assert kingside in generate_pseudo_moves(board)
    legal = generate_legal_moves(board)
    assert kingside not in legal
    assert queenside in legal


@pytest.mark.parametrize(
    "fen, origin, promotions",
    [
        ("8/P7/8/8/8/8/8/k6K w - - 0 1", ("a", "7"),
         {Piece.WQ, Piece.WR, Piece.WB, Piece.WN}),
        ("k6K/8/8/8/8/8/p7/8 b - - 0 1", ("a", "2"),
         {Piece.BQ, Piece.BR, Piece.BB, Piece.BN}),
    ],
)
def test_promotions(fen, origin, promotions):
    board = board_from(fen)
    start = sq2idx(*origin)
    found = {m.promotion for m in generate_legal_moves(board) if m.from_sq == start}
    assert found == promotions


def test_special_moves_ordered_first():
    board = board_from(KIWIPETE)
    flags = [
        board[m.to_sq] != Piece.EMPTY
        or m.promotion != Piece.EMPTY
        or m.enpassant
        or m.castling
        for m in generate_legal_moves(board)
    ]
    assert True in flags
    assert flags == sorted(flags, reverse=True)


def test_knight_in_corner():
    board = board_from("4k3/8/8/8/8/8/8/N3K3 w - - 0 1")
    start = sq2idx("a", "1")
    targets = {m.to_sq for m in generate_pseudo_moves(board) if m.from_sq == start}
    assert targets == {sq2idx("b", "3"), sq2idx("c", "2")}


def test_rook_slides_do_not_wrap():
    board = board_from("4k3/8/8/8/7R/8/8/4K3 w - - 0 1")
    start = sq2idx("h", "4")
    for move in generate_pseudo_moves(board):
        if move.from_sq == start:
            same_rank = move.to_sq // 8 == start // 8
            same_file = move.to_sq % 8 == start % 8
            assert same_rank or same_file


def test_mark_threats_flips_turn_on_copy():
    board = Board()
    other = mark_threats(board)
    assert other.turn == Player.BLACK
    assert board.turn == Player.WHITE
    assert other.squares == board.squares


def test_list_san_names_castling():
    board = board_from("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
    legal = generate_legal_moves(board)
    names = list_san(board, legal)
    assert len(names) == len(legal)
    assert "O-O" in names
    assert board.to_fen() == "4k3/8/8/8/8/8/8/4K2R w K - 0 1"