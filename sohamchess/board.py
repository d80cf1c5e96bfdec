"""Board representation, FEN handling and move making."""

from __future__ import annotations

from dataclasses import dataclass, field

from sohamchess.types import Direction, Piece, Player

PIECE_CHARS = "kqrbnp.PNBRQK"
STARTPOS = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
FILES = "abcdefgh"
RANKS = "12345678"
DIGITS = "0123456789"

_YELLOW = "\x1b[33m"
_CYAN = "\x1b[36m"
_RESET = "\x1b[0m"

# (king from, king to) -> (rook from, rook to, rook piece)
_CASTLING_ROOKS = {
    (4, 6): (7, 5, Piece.BR),
    (4, 2): (0, 3, Piece.BR),
    (60, 62): (63, 61, Piece.WR),
    (60, 58): (56, 59, Piece.WR),
}


class FenError(ValueError):
    """Raised when a FEN string cannot be parsed."""


def sq2idx(file: str, rank: str) -> int:
    """Index of the square named by a file letter and a rank digit."""
    return (ord(file) - ord("a")) + (7 - (ord(rank) - ord("1"))) * 8


def idx2sq(idx: int) -> str:
    """Algebraic name of a square index."""
    if not in_board(idx):
        raise ValueError(f"square index out of range: {idx}")
    return FILES[idx % 8] + str(8 - idx // 8)


def char2piece(char: str) -> Piece:
    """Piece for a FEN letter; anything unknown is empty."""
    pos = PIECE_CHARS.find(char) if len(char) == 1 else -1
    return Piece(pos - 6) if pos >= 0 else Piece.EMPTY


def piece2char(piece: int) -> str:
    """FEN letter for a piece, '.' for an empty square."""
    return PIECE_CHARS[int(piece) + 6]


def friendly(a: int, b: int) -> bool:
    return a * b > 0


def hostile(a: int, b: int) -> bool:
    return a * b < 0


def in_board(idx: int) -> bool:
    return 0 <= idx < 64


def isnt_h(idx: int) -> bool:
    return idx % 8 != 7


def isnt_a(idx: int) -> bool:
    return idx % 8 != 0


def isnt_8(idx: int) -> bool:
    return idx // 8 != 0


def isnt_1(idx: int) -> bool:
    return idx // 8 != 7


def _is_square_name(text: str) -> bool:
    return len(text) == 2 and text[0] in FILES and text[1] in RANKS


@dataclass
class Move:
    """A move plus the state needed to take it back."""

    from_sq: int = 0
    to_sq: int = 0
    promotion: Piece = Piece.EMPTY
    captured: Piece = field(default=Piece.EMPTY, compare=False)
    enpassant: bool = False
    castling: bool = False
    castling_rights: tuple[bool, ...] = field(
        default=(False, False, False, False), compare=False, repr=False
    )
    enpassant_sq_idx: int = field(default=-1, compare=False, repr=False)
    fifty: int = field(default=0, compare=False, repr=False)

    def __str__(self) -> str:
        text = (
            f"move: {idx2sq(self.from_sq)}{idx2sq(self.to_sq)} "
            f"{piece2char(self.captured)}{piece2char(self.promotion)}"
        )
        if self.castling:
            text += " castling"
        if self.enpassant:
            text += " enpassant"
        return text


class Board:
    """A chess position: squares, side to move, rights and counters."""

    def __init__(self) -> None:
        self.squares: list[Piece] = [Piece.EMPTY] * 64
        self.enpassant_sq_idx = -1
        self.fifty = 0
        self.moves = 1
        self.white_king = -1
        self.black_king = -1
        self.castling_rights = [False] * 4
        self.turn = Player.WHITE
        self.load_startpos()

    def __getitem__(self, idx: int) -> Piece:
        return self.squares[idx]

    def copy(self) -> Board:
        other = Board.__new__(Board)
        other.squares = list(self.squares)
        other.enpassant_sq_idx = self.enpassant_sq_idx
        other.fifty = self.fifty
        other.moves = self.moves
        other.white_king = self.white_king
        other.black_king = self.black_king
        other.castling_rights = list(self.castling_rights)
        other.turn = self.turn
        return other

    def piece_color(self, sq: int) -> int:
        """1 for a white piece on the square, -1 otherwise."""
        if not in_board(sq):
            raise IndexError(f"square index out of range: {sq}")
        piece = self.squares[sq]
        return 1 if piece > 0 else -1

    def sq_color(self, sq: int) -> int:
        """1 for a light square, 0 for a dark one."""
        return int(sq % 2 == (sq // 8) % 2)

    def render(self, sq: str = "", flipped: bool = False) -> str:
        """Draw the board as coloured text, optionally marking a square or move."""
        if len(sq) in (4, 5):
            sq = sq[2:4]
        if sq:
            if not _is_square_name(sq):
                raise ValueError(f"not a square: {sq!r}")
            sq_idx = sq2idx(sq[0], sq[1])
        else:
            sq_idx = -1
        cells = self.squares[::-1] if flipped else self.squares
        if flipped and sq_idx >= 0:
            sq_idx = 63 - sq_idx
        files = FILES[::-1] if flipped else FILES
        ranks = RANKS if flipped else RANKS[::-1]

        out = ["\n ", "".join(f" {f}" for f in files), "\n"]
        for row, rank in enumerate(ranks):
            out.append(f"{rank}|")
            for col, piece in enumerate(cells[row * 8:row * 8 + 8]):
                colour = _YELLOW if piece > 0 else _CYAN
                if piece == Piece.EMPTY:
                    glyph = "." if col % 2 == row % 2 else " "
                else:
                    glyph = piece2char(piece)
                out.append(f"{colour}{glyph}{_RESET}|")
            if sq_idx >= 0 and sq_idx // 8 == row:
                out.append("<")
            out.append("\n")
        if sq_idx >= 0:
            out.append(" " + "".join(" ^" if sq_idx % 8 == c else "  " for c in range(8)))
        out.append("\n")
        return "".join(out)

    def change_turn(self) -> None:
        self.turn = self.turn.opponent()

    def make_uci_move(self, text: str) -> Move | None:
        """Play a move given in coordinate notation; return it, or None if malformed."""
        if len(text) not in (4, 5):
            return None
        if not (_is_square_name(text[0:2]) and _is_square_name(text[2:4])):
            return None
        move = Move(sq2idx(text[0], text[1]), sq2idx(text[2], text[3]))
        if len(text) == 5:
            letter = text[4].upper() if self.turn == Player.WHITE else text[4].lower()
            move.promotion = char2piece(letter)
        move.castling = (
            move.from_sq == self.white_king and text in ("e1g1", "e1c1")
        ) or (move.from_sq == self.black_king and text in ("e8g8", "e8c8"))
        move.enpassant = (
            abs(self.squares[move.from_sq]) == Piece.WP
            and self.enpassant_sq_idx == move.to_sq
        )
        self.make_move(move)
        return move

    def make_move(self, move: Move) -> None:
        """Play a move, storing in it what is needed to undo it."""
        sq = self.squares
        rights = self.castling_rights
        frm, to = move.from_sq, move.to_sq

        move.castling_rights = tuple(rights)
        move.enpassant_sq_idx = self.enpassant_sq_idx
        move.fifty = self.fifty

        mover = sq[frm]
        target = sq[to]

        if target != Piece.EMPTY or abs(mover) == Piece.WP:
            self.fifty = 0
        else:
            self.fifty += 1

        if mover == Piece.WK:
            rights[0] = rights[1] = False
            self.white_king = to
        elif mover == Piece.BK:
            rights[2] = rights[3] = False
            self.black_king = to
        if mover == Piece.WR or target == Piece.WR:
            if frm == 63 or to == 63:
                rights[0] = False
            elif frm == 56 or to == 56:
                rights[1] = False
        if mover == Piece.BR or target == Piece.BR:
            if frm == 7 or to == 7:
                rights[2] = False
            elif frm == 0 or to == 0:
                rights[3] = False

        if mover == Piece.WP and to - frm == 2 * Direction.N:
            self.enpassant_sq_idx = frm + Direction.N
        elif mover == Piece.BP and to - frm == 2 * Direction.S:
            self.enpassant_sq_idx = frm + Direction.S
        else:
            self.enpassant_sq_idx = -1

        sq[to] = mover if move.promotion == Piece.EMPTY else move.promotion
        sq[frm] = move.captured
        move.captured = target

        if move.castling:
            rook = _CASTLING_ROOKS.get((frm, to))
            if rook is not None:
                rook_from, rook_to, piece = rook
                sq[rook_from] = Piece.EMPTY
                sq[rook_to] = piece
        elif move.enpassant:
            sq[to + self.turn * Direction.S] = Piece.EMPTY

        self.change_turn()
        self.moves += 1

    def unmake_move(self, move: Move) -> None:
        """Take back a move previously played with make_move."""
        sq = self.squares
        frm, to = move.from_sq, move.to_sq

        self.castling_rights = list(move.castling_rights)
        self.enpassant_sq_idx = move.enpassant_sq_idx
        self.fifty = move.fifty

        if sq[to] == Piece.WK:
            self.white_king = frm
        if sq[to] == Piece.BK:
            self.black_king = frm

        vacated = sq[frm]
        if move.promotion == Piece.EMPTY:
            sq[frm] = sq[to]
        else:
            sq[frm] = Piece.WP if self.turn == Player.BLACK else Piece.BP
        sq[to] = move.captured
        move.captured = vacated

        if move.castling:
            rook = _CASTLING_ROOKS.get((frm, to))
            if rook is not None:
                rook_from, rook_to, piece = rook
                sq[rook_from] = piece
                sq[rook_to] = Piece.EMPTY
        elif move.enpassant:
            sq[to + self.turn * Direction.N] = (
                Piece.WP if self.turn == Player.WHITE else Piece.BP
            )

        self.change_turn()
        self.moves -= 1

    def load_fen(self, fen: str) -> None:
        """Set up the position from a FEN string; the board is unchanged on error."""
        squares = [Piece.EMPTY] * 64
        part = p = 0
        turn = Player.WHITE
        rights = [False] * 4
        ep = ""
        fifty = moves = 0

        for x in fen:
            if x == " ":
                part += 1
                p = 0
            elif part == 0:
                if p > 63:
                    raise FenError("too many squares in piece placement")
                if x in DIGITS:
                    p += int(x)
                    if p > 64:
                        raise FenError("too many squares in piece placement")
                elif x != "/":
                    squares[p] = char2piece(x)
                    p += 1
            elif part == 1:
                turn = Player.WHITE if x == "w" else Player.BLACK
            elif part == 2:
                if x in "KQkq":
                    rights["KQkq".index(x)] = True
            elif part == 3:
                if x != "-":
                    ep += x
            elif part in (4, 5):
                if x not in DIGITS:
                    raise FenError(f"bad counter digit: {x!r}")
                if part == 4:
                    fifty = fifty * 10 + int(x)
                else:
                    moves = moves * 10 + int(x)

        if part <= 1:
            raise FenError("missing side to move")
        if ep and not _is_square_name(ep):
            raise FenError(f"bad en passant square: {ep!r}")
        white_kings = [i for i, piece in enumerate(squares) if piece == Piece.WK]
        black_kings = [i for i, piece in enumerate(squares) if piece == Piece.BK]
        if not white_kings or not black_kings:
            raise FenError("both kings must be on the board")

        self.squares = squares
        self.turn = turn
        self.castling_rights = rights
        self.enpassant_sq_idx = sq2idx(ep[0], ep[1]) if ep else -1
        self.fifty = fifty
        self.moves = moves
        self.white_king = white_kings[-1]
        self.black_king = black_kings[-1]

    def _castling_field(self) -> str:
        return "".join(c for c, ok in zip("KQkq", self.castling_rights) if ok)

    def to_fen(self) -> str:
        out: list[str] = []
        blanks = 0
        for i, piece in enumerate(self.squares):
            if piece == Piece.EMPTY:
                blanks += 1
            if blanks and (piece != Piece.EMPTY or not isnt_h(i)):
                out.append(str(blanks))
                blanks = 0
            if piece != Piece.EMPTY:
                out.append(piece2char(piece))
            if not isnt_h(i) and i != 63:
                out.append("/")
        side = "w" if self.turn == Player.WHITE else "b"
        castling = self._castling_field() or "-"
        ep = idx2sq(self.enpassant_sq_idx) if self.enpassant_sq_idx >= 0 else "-"
        return f"{''.join(out)} {side} {castling} {ep} {self.fifty} {self.moves}"

    def to_uci(self, move: Move) -> str:
        uci = idx2sq(move.from_sq) + idx2sq(move.to_sq)
        if move.promotion != Piece.EMPTY:
            uci += piece2char(move.promotion)
        return uci

    def to_san(self, move: Move) -> str:
        """Long-form algebraic notation of a move not yet played."""
        if move.castling:
            if (move.from_sq, move.to_sq) in ((4, 6), (60, 62)):
                return "O-O"
            if (move.from_sq, move.to_sq) in ((4, 2), (60, 58)):
                return "O-O-O"
            return ""
        piece = abs(self.squares[move.from_sq])
        san = ""
        if piece not in (Piece.WP, Piece.EMPTY):
            san = piece2char(piece)
        san += idx2sq(move.from_sq)
        if not self.empty(move.to_sq) or move.enpassant:
            san += "x"
        san += idx2sq(move.to_sq)
        if move.promotion != Piece.EMPTY:
            san += "=" + piece2char(move.promotion).upper()
        return san

    def load_startpos(self) -> None:
        self.load_fen(STARTPOS)

    def empty(self, idx: int) -> bool:
        return self.squares[idx] == Piece.EMPTY

    def pos_hash(self) -> str:
        """Key identifying the position for repetition detection."""
        cells = "".join(piece2char(piece) for piece in self.squares)
        side = "w" if self.turn == Player.WHITE else "b"
        ep = idx2sq(self.enpassant_sq_idx) if self.enpassant_sq_idx >= 0 else "-"
        return f"{cells}|{side}|{self._castling_field()}|{ep}"