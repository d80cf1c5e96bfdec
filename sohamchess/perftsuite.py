"""Run a suite of perft positions and compare node counts."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterable
from dataclasses import dataclass
from itertools import islice
from typing import TextIO

from sohamchess.board import Board, FenError
from sohamchess.movegen import divide

_VERDICT_GOOD = "\x1b[32mPASS\x1b[0m"
_VERDICT_BAD = "\x1b[31mFAIL\x1b[0m"
_MAX_CASES = 1000
_MAX_NODES = 1_000_000


@dataclass(frozen=True)
class PerftCase:
    """A position with the expected node counts at depths 1, 2, ..."""

    fen: str
    labels: tuple[str, ...]
    expected: tuple[int, ...]


def parse_perft_line(line: str) -> PerftCase:
    """Parse a line of the form 'FEN ;D1 n ;D2 n ...'."""
    fen, *labels = line.rstrip("\r\n").split(" ;")
    expected = tuple(int(label[label.find(" ") + 1:]) for label in labels)
    return PerftCase(fen, tuple(labels), expected)


def run_perft_suite(lines: Iterable[str], out: TextIO | None = None) -> bool:
    """Check every case; stop and return False at the first mismatch."""
    out = out if out is not None else sys.stdout
    total = 0.0
    board = Board()
    cases = (line for line in lines if line.strip())
    for number, line in enumerate(islice(cases, _MAX_CASES), start=1):
        print(f"Case #{number}:", file=out)
        case = parse_perft_line(line)
        try:
            board.load_fen(case.fen)
        except FenError:
            print("Unable to parse FEN", file=out)
            return False
        print(f"fen: {case.fen}", file=out)
        for depth, (label, expected) in enumerate(
            zip(case.labels, case.expected), start=1
        ):
            print(label, file=out)
            out.write(" " * 15)
            if expected > _MAX_NODES:
                print("skipped", file=out)
                continue
            began = time.perf_counter()
            found = sum(divide(board, depth).values())
            elapsed = round(time.perf_counter() - began, 3)
            total += elapsed
            verdict = _VERDICT_GOOD if expected == found else _VERDICT_BAD
            print(f"{verdict} [{elapsed}s]", file=out)
            if expected != found:
                print(f"expected '{expected}' but found '{found}'", file=out)
                return False
    print(f"Total time taken: {round(total, 3)}", file=out)
    return True


def main(argv: list[str] | None = None) -> int:
    """Run the suite in the file named on the command line."""
    args = sys.argv[1:] if argv is None else argv
    filename = args[0] if args else "perftsuite.epd"
    try:
        handle = open(filename, encoding="utf-8")
    except OSError as exc:
        print(f"cannot open {filename}: {exc}", file=sys.stderr)
        return 1
    with handle:
        return 0 if run_perft_suite(handle) else 1


if __name__ == "__main__":
    sys.exit(main())