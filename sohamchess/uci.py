"""Universal Chess Interface front end for the engine."""

from __future__ import annotations

import sys
from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Callable, TextIO

from sohamchess.ai import AI
from sohamchess.board import Board, FenError
from sohamchess.game import Game
from sohamchess.movegen import divide, generate_legal_moves, generate_pseudo_moves
from sohamchess.types import SearchType

ENGINE_NAME = "sohamchess"


def _next_int(tokens: Iterator[str]) -> int | None:
    token = next(tokens, None)
    try:
        return int(token) if token is not None else None
    except ValueError:
        return None


class UciEngine:
    """Reads UCI commands line by line and writes replies."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.ai = AI(Board(), self.out)
        self.transpositions: Counter[str] = Counter()
        self.debug_mode = False

        def ignore(args: list[str]) -> None:
            return None

        self._handlers: dict[str, Callable[[list[str]], None]] = {
            "uci": self._uci,
            "ucinewgame": ignore,
            "position": self._position,
            "go": self._go,
            "stop": ignore,
            "ponderhit": ignore,
            "debug": self._debug,
            "isready": self._isready,
            "setoption": ignore,
            "register": ignore,
            "d": self._display,
            "pseudo": self._pseudo,
            "legal": self._legal,
            "perft": self._perft,
            "divide": self._perft,
            "debugmoves": self._debugmoves,
            "eval": self._eval,
        }

    @property
    def board(self) -> Board:
        return self.ai.board

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def handle(self, line: str) -> bool:
        """Process one command; return False when the engine should stop."""
        tokens = line.split()
        if not tokens:
            return True
        command, args = tokens[0], tokens[1:]
        if command == "quit":
            return False
        handler = self._handlers.get(command)
        if handler is None:
            self._say(f"Invalid command: {line}")
        else:
            handler(args)
        return True

    def run(self, lines: Iterable[str]) -> None:
        """Process commands until input ends or 'quit' is read."""
        for line in lines:
            if not self.handle(line.rstrip("\r\n")):
                break

    def _uci(self, args: list[str]) -> None:
        self._say(f"id name {ENGINE_NAME}")
        self._say(f"id author the {ENGINE_NAME} developers")
        self._say("uciok")

    def _isready(self, args: list[str]) -> None:
        self._say("readyok")

    def _debug(self, args: list[str]) -> None:
        self.debug_mode = bool(args) and args[0] == "on"

    def _apply_moves(self, tokens: Iterable[str]) -> None:
        for token in tokens:
            if self.board.make_uci_move(token) is None:
                break
            self.transpositions[self.board.pos_hash()] += 1

    def _position(self, args: list[str]) -> None:
        self.transpositions.clear()
        tokens = iter(args)
        kind = next(tokens, None)
        token: str | None = kind
        if kind == "fen":
            fields: list[str] = []
            token = None
            for item in tokens:
                if item == "moves":
                    token = item
                    break
                fields.append(item)
            try:
                self.board.load_fen(" ".join(fields))
            except FenError as exc:
                self._say(f"info string {exc}")
                return
        elif kind == "startpos":
            self.board.load_startpos()
            token = next(tokens, None)
        if token == "moves":
            self._apply_moves(tokens)

    def _go(self, args: list[str]) -> None:
        ai = self.ai
        ai.search_type = SearchType.TIME_PER_GAME
        ai.set_clock(30000, 30000, 0, 0)
        ai.max_depth = 100
        tokens = iter(args)
        for token in tokens:
            if token == "ponder":
                ai.search_type = SearchType.PONDER
            elif token in ("wtime", "btime", "winc", "binc"):
                value = _next_int(tokens)
                if value is not None:
                    setattr(ai, token, value)
            elif token == "depth":
                value = _next_int(tokens)
                if value is not None:
                    ai.max_depth = value
                ai.search_type = SearchType.FIXED_DEPTH
            elif token == "mate":
                ai.search_type = SearchType.MATE
            elif token == "movetime":
                value = _next_int(tokens)
                if value is not None:
                    ai.mtime = value
                ai.search_type = SearchType.TIME_PER_MOVE
            elif token == "infinite":
                ai.search_type = SearchType.INFINITE
            elif token == "startpos":
                self.transpositions.clear()
                self.board.load_startpos()
                if next(tokens, None) == "moves":
                    self._apply_moves(tokens)
        self._say(f"timings: {ai.wtime} {ai.btime} {ai.winc} {ai.binc}")
        best_move, _ = ai.search(self.transpositions)
        self._say(f"bestmove {self.board.to_uci(best_move)}")

    def _display(self, args: list[str]) -> None:
        self.out.write(self.board.render())
        self._say(f"fen: {self.board.to_fen()}")

    def _list_moves(self, moves: list) -> None:
        game = Game()
        game.board = self.board.copy()
        game.movelist = moves
        text = game.format_movelist()
        if text:
            self._say(text)

    def _pseudo(self, args: list[str]) -> None:
        self._list_moves(generate_pseudo_moves(self.board))

    def _legal(self, args: list[str]) -> None:
        self._list_moves(generate_legal_moves(self.board))

    def _perft(self, args: list[str]) -> None:
        depth = _next_int(iter(args))
        if depth is None:
            self._say("info string perft needs a depth")
            return
        counts = divide(self.board, depth)
        for uci, nodes in counts.items():
            self._say(f"{uci}: {nodes}")
        self._say(f"Moves: {len(counts)}")
        self._say(f"Nodes: {sum(counts.values())}")

    def _debugmoves(self, args: list[str]) -> None:
        for token in args:
            if self.board.make_uci_move(token) is None:
                break
            self._display([])
        self.board.load_startpos()

    def _eval(self, args: list[str]) -> None:
        self.ai.print_eval()


def main(argv: list[str] | None = None) -> int:
    """Serve UCI commands from standard input."""
    UciEngine().run(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())