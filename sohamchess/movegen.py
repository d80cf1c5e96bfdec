"""Pseudo-legal and legal move generation, perft and attack queries."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from sohamchess.board import (
    Board,
    Move,
    friendly,
    hostile,
    idx2sq,
    in_board,
    isnt_1,
    isnt_8,
    isnt_a,
    isnt_h,
    piece2char,
)
from sohamchess.types import Direction, Piece, Player

_N, _S, _E, _W = Direction.N, Direction.S, Direction.E, Direction.W
_NE, _NW, _SE, _SW = Direction.NE, Direction.NW, Direction.SE, Direction.SW

_WHITE_PROMOTIONS = (Piece.WQ, Piece.WR, Piece.WB, Piece.WN)
_BLACK_PROMOTIONS = (Piece.BQ, Piece.BR, Piece.BB, Piece.BN)

# Edge guards a king step must pass, in generation order.
_KING_STEPS = (
    ((isnt_1,), _S),
    ((isnt_8,), _N),
    ((isnt_h,), _E),
    ((isnt_a,), _W),
    ((isnt_1, isnt_h), _SE),
    ((isnt_1, isnt_a), _SW),
    ((isnt_8, isnt_h), _NE),
    ((isnt_8, isnt_a), _NW),
)

# (guard on file and rank, offset) for each knight jump, in generation order.
_KNIGHT_JUMPS = (
    (lambda f, r: r > 1 and f != 0, _N + _NW),
    (lambda f, r: r > 1 and f != 7, _N + _NE),
    (lambda f, r: f > 1 and r != 0, _W + _NW),
    (lambda f, r: f > 1 and r != 7, _W + _SW),
    (lambda f, r: f < 6 and r != 0, _E + _NE),
    (lambda f, r: f < 6 and r != 7, _E + _SE),
    (lambda f, r: r < 6 and f != 0, _S + _SW),
    (lambda f, r: r < 6 and f != 7, _S + _SE),
)

_DIAGONALS = (_NW, _NE, _SW, _SE)
_ORTHOGONALS = (_N, _S, _E, _W)

# Squares that must not be attacked for each castling move.
_CASTLING_PATHS = {
    (60, 62): (60, 61, 62),
    (4, 6): (4, 5, 6),
    (60, 58): (60, 59, 58),
    (4, 2): (4, 3, 2),
}


def _move_or_capture(squares: list[Piece], sq: int, offset: int) -> Iterator[Move]:
    if not friendly(squares[sq], squares[sq + offset]):
        yield Move(sq, sq + offset)


def _slide(
    squares: list[Piece], sq: int, dirs: Sequence[Direction]
) -> Iterator[Move]:
    for d in dirs:
        west, east = d.is_westwards(), d.is_eastwards()
        if (west and not isnt_a(sq)) or (east and not isnt_h(sq)):
            continue
        dest = sq + d
        while in_board(dest) and not friendly(squares[sq], squares[dest]):
            yield Move(sq, dest)
            if hostile(squares[sq], squares[dest]):
                break
            if (west and not isnt_a(dest)) or (east and not isnt_h(dest)):
                break
            dest += d


def _pawn_moves(board: Board, sq: int, piece: Piece) -> Iterator[Move]:
    squares = board.squares
    rank = sq // 8
    if board.turn == Player.BLACK:
        fwd, left, right = _S, _SW, _SE
        rel_rank = 7 - rank
        promotions = _BLACK_PROMOTIONS
    else:
        fwd, left, right = _N, _NW, _NE
        rel_rank = rank
        promotions = _WHITE_PROMOTIONS
    if rel_rank == 0:
        return

    def advance(dest: int) -> Iterator[Move]:
        if rel_rank == 1:
            for promo in promotions:
                yield Move(sq, dest, promo)
        else:
            yield Move(sq, dest)

    if board.empty(sq + fwd):
        yield from advance(sq + fwd)
        if rel_rank == 6 and board.empty(sq + 2 * fwd):
            yield Move(sq, sq + 2 * fwd)
    if isnt_a(sq) and hostile(piece, squares[sq + left]):
        yield from advance(sq + left)
    if isnt_h(sq) and hostile(piece, squares[sq + right]):
        yield from advance(sq + right)
    if rel_rank == 3:
        if sq + left == board.enpassant_sq_idx:
            yield Move(sq, sq + left, enpassant=True)
        elif sq + right == board.enpassant_sq_idx:
            yield Move(sq, sq + right, enpassant=True)


def _castling_moves(board: Board) -> Iterator[Move]:
    rights = board.castling_rights
    empty = board.empty
    if board.turn == Player.WHITE:
        if rights[0] and empty(61) and empty(62):
            yield Move(60, 62, castling=True)
        if rights[1] and empty(57) and empty(58) and empty(59):
            yield Move(60, 58, castling=True)
    else:
        if rights[2] and empty(5) and empty(6):
            yield Move(4, 6, castling=True)
        if rights[3] and empty(1) and empty(2) and empty(3):
            yield Move(4, 2, castling=True)


def _pseudo_moves(board: Board) -> Iterator[Move]:
    squares = board.squares
    for sq, piece in enumerate(squares):
        if piece == Piece.EMPTY or hostile(piece, board.turn):
            continue
        kind = abs(piece)
        file, rank = sq % 8, sq // 8
        if kind == Piece.WK:
            for guards, offset in _KING_STEPS:
                if all(guard(sq) for guard in guards):
                    yield from _move_or_capture(squares, sq, offset)
        elif kind == Piece.WP:
            yield from _pawn_moves(board, sq, piece)
        elif kind == Piece.WN:
            for guard, offset in _KNIGHT_JUMPS:
                if guard(file, rank):
                    yield from _move_or_capture(squares, sq, offset)
        if kind in (Piece.WB, Piece.WQ):
            yield from _slide(squares, sq, _DIAGONALS)
        if kind in (Piece.WR, Piece.WQ):
            yield from _slide(squares, sq, _ORTHOGONALS)
    yield from _castling_moves(board)


def generate_pseudo_moves(board: Board) -> list[Move]:
    """Moves for the side to move, ignoring whether the king is left in check."""
    return list(_pseudo_moves(board))


def _castling_attacked(temp: Board, move: Move) -> bool:
    path = _CASTLING_PATHS.get((move.from_sq, move.to_sq))
    if path is None:
        return False
    temp.change_turn()
    try:
        threats = {m.to_sq for m in _pseudo_moves(temp)}
    finally:
        temp.change_turn()
    return any(sq in threats for sq in path)


def generate_legal_moves(board: Board) -> list[Move]:
    """Legal moves, with captures, promotions and special moves first."""
    temp = board.copy()
    king = board.white_king if board.turn == Player.WHITE else board.black_king
    special: list[Move] = []
    quiet: list[Move] = []
    for move in _pseudo_moves(board):
        if move.castling:
            if _castling_attacked(temp, move):
                continue
        else:
            target = move.to_sq if move.from_sq == king else king
            temp.make_move(move)
            try:
                exposed = is_in_threat(temp, target)
            finally:
                temp.unmake_move(move)
            if exposed:
                continue
        is_special = (
            temp.squares[move.to_sq] != Piece.EMPTY
            or move.promotion != Piece.EMPTY
            or move.enpassant
            or move.castling
        )
        (special if is_special else quiet).append(move)
    return special + quiet


def perft(board: Board, depth: int) -> int:
    """Number of leaf positions reachable in exactly depth plies."""
    if depth <= 0:
        return 1
    legal = generate_legal_moves(board)
    if depth == 1:
        return len(legal)
    nodes = 0
    for move in legal:
        board.make_move(move)
        try:
            king = board.white_king if board.turn == Player.WHITE else board.black_king
            if not is_in_threat(board, king):
                nodes += perft(board, depth - 1)
        finally:
            board.unmake_move(move)
    return nodes


def divide(board: Board, depth: int) -> dict[str, int]:
    """Perft node counts below each legal move, keyed and ordered by UCI text."""
    counts: dict[str, int] = {}
    for move in generate_legal_moves(board):
        board.make_move(move)
        try:
            nodes = perft(board, depth - 1)
        finally:
            board.unmake_move(move)
        counts[board.to_uci(move)] = nodes
    return dict(sorted(counts.items()))


def is_in_threat(board: Board, sq: int) -> bool:
    """True if the side to move has a pseudo-legal move onto the square."""
    return any(move.to_sq == sq for move in _pseudo_moves(board))


def is_in_check(board: Board, player: Player) -> bool:
    """True if the given player's king is attacked."""
    king = board.white_king if player == Player.WHITE else board.black_king
    if board.turn != player:
        return is_in_threat(board, king)
    board.change_turn()
    try:
        return is_in_threat(board, king)
    finally:
        board.change_turn()


def mark_threats(board: Board) -> Board:
    """A copy of the position with the other side to move."""
    temp = board.copy()
    temp.change_turn()
    return temp


def list_san(board: Board, moves: Sequence[Move]) -> list[str]:
    """Algebraic names for moves from the current position."""
    names: list[str] = []
    squares = board.squares
    for move in moves:
        if move.castling:
            pair = (move.from_sq, move.to_sq)
            if pair in ((4, 6), (60, 62)):
                names.append("O-O")
            elif pair in ((4, 2), (60, 58)):
                names.append("O-O-O")
            else:
                names.append("")
            continue

        letter = piece2char(squares[move.from_sq]).upper()
        san = "" if letter == "P" else letter
        from_file = from_rank = False
        for other in moves:
            if (other.from_sq, other.to_sq) == (move.from_sq, move.to_sq):
                continue
            if squares[other.from_sq] != squares[move.from_sq]:
                continue
            if other.from_sq // 8 == move.from_sq // 8:
                from_file = True
            if other.from_sq % 8 == move.from_sq % 8:
                from_rank = True
            if from_file or from_rank:
                break
        origin = idx2sq(move.from_sq)
        if from_file:
            san += origin[0]
        if from_rank:
            san += origin[1]
        if not board.empty(move.to_sq) or move.enpassant:
            san += "x"
        san += idx2sq(move.to_sq)
        if move.promotion != Piece.EMPTY:
            san += "=" + piece2char(move.promotion).upper()

        board.change_turn()
        try:
            king = board.white_king if board.turn == Player.WHITE else board.black_king
            if is_in_threat(board, king):
                san += "+"
        finally:
            board.change_turn()
        names.append(san)
    return names