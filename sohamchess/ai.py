"""Alpha-beta search engine with iterative deepening."""

from __future__ import annotations

import sys
import time
from collections.abc import Mapping
from typing import TextIO

from sohamchess.board import Board, Move
from sohamchess.knowledge import (
    CENTER_MANHATTAN_DISTANCE,
    KING_ENDGAME_TABLE,
    piece_square_value,
)
from sohamchess.movegen import generate_legal_moves, is_in_check
from sohamchess.types import Piece, Player, SearchType

MATE_SCORE = 1_000_000
INT_MAX = 2**31 - 1
_WORST = -100_000_000
# Depth taken off for null-move and late-move reductions.
_REDUCTION = 1

# Indexed by piece + 6.
_PIECE_VALUES = (-10000, -900, -500, -300, -250, -100, 0, 100, 250, 300, 500, 900, 10000)


def get_mate_score(score: int) -> int:
    """Moves to mate encoded in a score: positive if winning, negative if losing, else 0."""
    if score > MATE_SCORE // 2:
        return MATE_SCORE - score
    if score < -MATE_SCORE // 2:
        return -MATE_SCORE - score
    return 0


def format_score(score: int) -> str:
    """Score in the form used on 'info' lines."""
    mate = get_mate_score(score)
    if mate == 0:
        return f" score cp {score}"
    return f" score mate {mate}"


class AI:
    """Search engine working on its own copy of a position."""

    def __init__(self, board: Board, out: TextIO | None = None) -> None:
        self.board = board.copy()
        self.out = out if out is not None else sys.stdout
        self.wtime = 30000
        self.btime = 30000
        self.winc = 0
        self.binc = 0
        self.mtime = 1000
        self.max_depth = 100
        self.search_type = SearchType.TIME_PER_GAME
        self.debug = ""

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def set_clock(self, wtime: int, btime: int, winc: int, binc: int) -> None:
        self.wtime, self.btime, self.winc, self.binc = wtime, btime, winc, binc

    def search(
        self, transpositions: Mapping[str, int] | None = None
    ) -> tuple[Move, int]:
        """Best move and its score, avoiding moves that repeat a position too often."""
        seen = transpositions if transpositions is not None else {}
        best_score = _WORST
        best_move = Move()
        temp = self.board.copy()
        movelist = self.iterative_search()
        for allowed in (1, 0):
            for score, move in movelist:
                temp.make_move(move)
                repeats = seen.get(temp.pos_hash(), 0)
                temp.unmake_move(move)
                if repeats > allowed:
                    continue
                if score > best_score:
                    best_score, best_move = score, move
            if best_move.from_sq != best_move.to_sq:
                break
        self._say(
            f"info bestmove: {best_score} = {self.board.to_san(best_move)}"
            f" out of {len(movelist)}"
        )
        return best_move, best_score

    def _time_budget(self) -> int:
        board = self.board
        if board.turn == Player.WHITE:
            budget = self.wtime + self.winc
        else:
            budget = self.btime + self.binc
        if self.search_type == SearchType.FIXED_DEPTH:
            self._say(f"info using maxdepth: {self.max_depth}")
            return INT_MAX
        if self.search_type == SearchType.TIME_PER_MOVE:
            self._say(f"info using movetime: {self.mtime}")
            return self.mtime
        if self.search_type == SearchType.TIME_PER_GAME:
            percentage = 1.0
            budget = int(budget * min((percentage + board.moves / 116.4) / 50, percentage))
            self._say(f"info using time: {budget}")
            return budget
        self._say(f"info using infinite: {INT_MAX}")
        return INT_MAX

    def iterative_search(self) -> list[tuple[int, Move]]:
        """Score every root move, deepening until time or depth runs out."""
        board = self.board
        max_search_time = self._time_budget()
        time_taken = time_taken_depth = 0

        legalmoves: list[list] = [[0, move] for move in generate_legal_moves(board)]
        bestmoves: list[list] = []

        depth = 1
        while time_taken * 2 < max_search_time and depth <= self.max_depth:
            tempmoves = bestmoves
            bestmoves = []
            if not legalmoves:
                break

            if self.search_type != SearchType.MATE and len(legalmoves) == 1:
                bestmoves.append(legalmoves[0])
                break

            # A mate was found: keep only the mating moves.
            if get_mate_score(legalmoves[0][0]) > 0:
                bestmoves = [m for m in legalmoves if get_mate_score(m[0]) > 0]
                break

            if get_mate_score(legalmoves[-1][0]) < 0:
                if get_mate_score(legalmoves[0][0]) == 0:
                    bestmoves = [m for m in legalmoves if get_mate_score(m[0]) == 0]
                    if bestmoves:
                        legalmoves = [list(m) for m in bestmoves]
                else:
                    # Every move loses; searching deeper changes nothing.
                    bestmoves = list(legalmoves)
                    break

            mate_score = -MATE_SCORE
            for score_move in legalmoves:
                move = score_move[1]
                board.make_move(move)
                began = time.perf_counter()
                score = -self.alphabeta(depth, mate_score, MATE_SCORE)
                diff = int((time.perf_counter() - began) * 1000)
                board.unmake_move(move)

                time_taken += diff
                if time_taken >= max_search_time and len(bestmoves) > 1:
                    bestmoves.extend(tempmoves)
                    break
                score_move[0] = score
                if get_mate_score(score) > 0:
                    mate_score = score
                self._say(
                    f"info depth {depth}{format_score(score)} nodes 1 time {diff}"
                    f" pv {board.to_uci(move)}"
                )
                bestmoves.append([score, move])

            legalmoves.sort(key=lambda m: m[0], reverse=True)

            self._say(
                f"info searched depth {depth}{format_score(bestmoves[0][0])}"
                f" time {time_taken - time_taken_depth}"
                f" best {board.to_uci(bestmoves[0][1])}"
            )
            time_taken_depth = time_taken
            depth += 1

        self._say(f"info total time: {time_taken}")

        if self.search_type == SearchType.MATE:
            mate = get_mate_score(bestmoves[0][0]) if bestmoves else 0
            self.debug = str(depth - 2 + mate)

        return [(score, move) for score, move in bestmoves]

    def _evaluate_parts(self) -> tuple[int, int]:
        board = self.board
        material = positional = queens = 0
        for sq, piece in enumerate(board.squares):
            if abs(piece) == Piece.WQ:
                queens += 1
            material += _PIECE_VALUES[piece + 6]
            if piece:
                positional += piece_square_value(piece, sq)

        if queens == 0:  # assume the endgame is near
            white_king, black_king = board.white_king, board.black_king
            positional += (
                KING_ENDGAME_TABLE[white_king] - KING_ENDGAME_TABLE[63 - black_king]
            )
            cmd = (
                CENTER_MANHATTAN_DISTANCE[white_king]
                if material > 0
                else CENTER_MANHATTAN_DISTANCE[63 - black_king]
            )
            distance = abs(black_king // 8 - white_king // 8) + abs(
                black_king % 8 - white_king % 8
            )
            positional += 5 * cmd + 2 * (14 - distance)
        return material, positional

    def evaluate(self) -> int:
        """Static score from white's point of view."""
        material, positional = self._evaluate_parts()
        return material + positional

    def print_eval(self) -> int:
        """Write the evaluation breakdown and return the static score."""
        material, positional = self._evaluate_parts()
        board = self.board
        self._say(f"fen: {board.to_fen()}")
        self._say(f"material: {material}")
        self._say(f"position: {positional}")
        self._say(f"is in check: {int(is_in_check(board, board.turn))}")
        return material + positional

    def negamax(self, depth: int) -> int:
        """Plain fixed-depth negamax score for the side to move."""
        board = self.board
        if depth == 0:
            return self.evaluate() * board.turn
        best = -MATE_SCORE
        legals = generate_legal_moves(board)
        for move in legals:
            board.make_move(move)
            score = -self.negamax(depth - 1)
            board.unmake_move(move)
            best = max(best, score)
        if not legals:
            return -MATE_SCORE + depth if is_in_check(board, board.turn) else 0
        return best

    def alphabeta(self, depth: int, alpha: int, beta: int) -> int:
        """Alpha-beta search with check extension, null-move and late-move reductions."""
        board = self.board
        in_check = is_in_check(board, board.turn)
        extra = 1 if in_check else 0

        # Mate distance pruning.
        alpha = max(alpha, -MATE_SCORE + board.moves)
        beta = min(beta, MATE_SCORE - board.moves - 1)
        if alpha >= beta:
            return alpha

        if depth <= 0 or depth > 50:
            return self.quiesce(0, alpha, beta)
        best = -MATE_SCORE
        legals = generate_legal_moves(board)
        late_moves = len(legals) // 2 + 1

        if not in_check:
            board.change_turn()
            score = -self.alphabeta(depth + extra - _REDUCTION, -beta, -alpha)
            board.change_turn()
            if score >= beta:
                return score

        for searched, move in enumerate(legals):
            board.make_move(move)
            if searched < late_moves:
                score = -self.alphabeta(depth + extra - 1, -beta, -alpha)
            else:
                reduced = depth + extra - 1 - _REDUCTION
                score = -self.alphabeta(reduced, -beta, -alpha)
                if score >= alpha:
                    score = -self.alphabeta(depth + extra - 1, -beta, -alpha)
            board.unmake_move(move)
            if score >= beta:
                return score
            alpha = max(alpha, score)
            best = max(best, score)

        if not legals:
            return -MATE_SCORE + depth if in_check else 0
        return best

    def quiesce(self, depth: int, alpha: int, beta: int) -> int:
        """Search captures only until the position is quiet."""
        board = self.board
        stand_pat = self.evaluate() * board.turn
        if stand_pat >= beta:
            return beta
        if depth > 5:
            return stand_pat
        alpha = max(alpha, stand_pat)

        legals = generate_legal_moves(board)
        for move in legals:
            if board.empty(move.to_sq):
                continue
            board.make_move(move)
            score = -self.quiesce(depth + 1, -beta, -alpha)
            board.unmake_move(move)
            if score >= beta:
                return score
            alpha = max(alpha, score)
        if not legals:
            return -MATE_SCORE + depth if is_in_check(board, board.turn) else 0
        return alpha