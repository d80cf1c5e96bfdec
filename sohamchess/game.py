"""A game of chess: move history, navigation, result detection and opponents."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import replace
from typing import TextIO

from sohamchess.ai import AI
from sohamchess.board import Board, Move, hostile
from sohamchess.movegen import generate_legal_moves, is_in_check
from sohamchess.types import Piece, Player, SearchType, Status

MAX_PLIES = 500


class Game:
    """A position together with the moves that led to it."""

    def __init__(self) -> None:
        self.board = Board()
        self.movelist: list[Move] = []
        self.ply = 0
        self.end = 0
        self.result = Status.UNDECIDED
        self.white_alive: Counter[Piece] = Counter()
        self.black_alive: Counter[Piece] = Counter()
        self.transpositions: Counter[str] = Counter()
        self.ai_movetime = 3000
        self.ai_output: TextIO | None = None
        self.new_game()

    def _find_move(self, text: str) -> Move:
        for move in generate_legal_moves(self.board):
            if text in (self.board.to_uci(move), self.board.to_san(move)):
                return move
        raise ValueError(f"illegal move: {text!r}")

    def make_move(self, move: Move | str) -> bool:
        """Play a move, dropping any moves after the current ply.

        Returns False if the game is too long or the move is a null move.
        A move given as text must be a legal move in UCI or long algebraic form.
        """
        move = self._find_move(move) if isinstance(move, str) else replace(move)
        if self.end > MAX_PLIES or move.from_sq == move.to_sq:
            return False

        if self.ply != self.end:
            del self.movelist[self.ply:]
            self.end = self.ply

        self.board.make_move(move)
        self.movelist.append(move)
        captured = move.captured
        if captured != Piece.EMPTY:
            alive = self.black_alive if hostile(captured, Piece.WK) else self.white_alive
            if alive[captured]:
                alive[captured] -= 1
                if not alive[captured]:
                    del alive[captured]
        if captured != Piece.EMPTY or abs(self.board[move.to_sq]) == Piece.WP:
            self.transpositions.clear()

        self.ply += 1
        self.end += 1
        self.transpositions[self.board.pos_hash()] += 1
        self.result = self.get_result()
        return True

    def prev(self) -> None:
        """Step back one ply, if possible."""
        if self.ply > 0:
            self.ply -= 1
            self.board.unmake_move(self.movelist[self.ply])

    def next(self) -> None:
        """Step forward one ply, if possible."""
        if self.ply < self.end:
            self.board.make_move(self.movelist[self.ply])
            self.ply += 1

    def format_movelist(self) -> str:
        """One line per move: number, algebraic name and move details."""
        return "\n".join(
            f"{number} {self.board.to_san(move)}    {move}"
            for number, move in enumerate(self.movelist, start=1)
        )

    def pgn(self) -> str:
        """Move text of the whole game; the current ply is kept."""
        start = self.ply
        self.seek(0)
        parts: list[str] = []
        for _ in range(self.end):
            prefix = f"{self.ply // 2 + 1}." if self.ply % 2 == 0 else ""
            parts.append(f"{prefix}{self.board.to_san(self.movelist[self.ply])} ")
            self.next()
        self.seek(start)
        return "".join(parts)

    def seek(self, n: int) -> None:
        """Move through the history to ply n, clamped to the game's range."""
        while self.ply < n and self.ply < self.end:
            self.next()
        while self.ply > n and self.ply > 0:
            self.prev()

    def random_move(self) -> Move:
        """A random legal move, or a null move if there is none."""
        legal = generate_legal_moves(self.board)
        return random.choice(legal) if legal else Move()

    def ai_move(self) -> tuple[Move, int]:
        """The engine's choice of move and its score."""
        ai = AI(self.board, self.ai_output)
        ai.search_type = SearchType.TIME_PER_MOVE
        ai.mtime = self.ai_movetime
        return ai.search(self.transpositions)

    def get_result(self) -> Status:
        """The outcome so far; once decided it does not change."""
        if self.result != Status.UNDECIDED:
            return self.result
        board = self.board
        if not generate_legal_moves(board):
            if is_in_check(board, board.turn):
                return Status.BLACK_WINS if board.turn == Player.WHITE else Status.WHITE_WINS
            return Status.DRAW

        if board.fifty >= 100:
            return Status.DRAW

        w_size = self.white_alive.total()
        b_size = self.black_alive.total()
        if w_size == 1 and b_size == 1:
            return Status.DRAW
        if w_size == 1 and b_size == 2 and (
            self.black_alive[Piece.BB] or self.black_alive[Piece.BN]
        ):
            return Status.DRAW
        if b_size == 1 and w_size == 2 and (
            self.white_alive[Piece.WB] or self.white_alive[Piece.WN]
        ):
            return Status.DRAW

        if self.transpositions[board.pos_hash()] == 3:
            return Status.DRAW
        return Status.UNDECIDED

    def new_game(self) -> None:
        """Reset to the starting position with an empty history."""
        self.ply = self.end = 0
        self.movelist.clear()
        self.board.load_startpos()
        self.update_alive()
        self.result = Status.UNDECIDED
        self.transpositions.clear()

    def load_fen(self, fen: str) -> None:
        """Start a new game from a FEN position; raises FenError if it is invalid."""
        self.new_game()
        self.board.load_fen(fen)
        self.update_alive()
        self.result = self.get_result()

    def update_alive(self) -> None:
        """Recount the pieces of each side on the board."""
        self.white_alive = Counter(p for p in self.board.squares if p > 0)
        self.black_alive = Counter(p for p in self.board.squares if p < 0)