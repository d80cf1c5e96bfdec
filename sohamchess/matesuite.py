"""Run the engine over a file of mate puzzles."""

from __future__ import annotations

import io
import sys
import time
from collections.abc import Iterable
from itertools import islice
from typing import TextIO

from sohamchess.ai import AI
from sohamchess.board import Board, FenError
from sohamchess.types import SearchType

_MAX_CASES = 2000


def run_mate_suite(lines: Iterable[str], out: TextIO | None = None) -> list[bool]:
    """Search each position for a mate; return whether each one found it."""
    out = out if out is not None else sys.stdout
    coloured = out.isatty()
    passed_text = "\x1b[32mPASS\x1b[0m" if coloured else "PASS"
    failed_text = "\x1b[31mFAIL\x1b[0m" if coloured else "FAIL"

    ai = AI(Board(), io.StringIO())
    ai.search_type = SearchType.MATE
    results: list[bool] = []
    total = 0.0
    cases = (line.rstrip("\r\n") for line in lines if line.strip())
    for number, line in enumerate(islice(cases, _MAX_CASES)):
        try:
            ai.board.load_fen(line.split(";")[0].strip())
        except FenError:
            print("Unable to parse FEN", file=out)
            results.append(False)
            continue
        print(f"[{number}] in: {line}", file=out)
        ai.out = io.StringIO()
        began = time.perf_counter()
        best_move, _ = ai.search()
        elapsed = round(time.perf_counter() - began, 3)
        total += elapsed

        found = int(ai.debug) > 0
        results.append(found)
        print(f"out: {ai.board.to_san(best_move)} mate {ai.debug}", file=out)
        print(f"{passed_text if found else failed_text} [{elapsed}s]", file=out)

    print(f"total time: {round(total, 3)}s", file=out)
    return results


def main(argv: list[str] | None = None) -> int:
    """Run the suite in the file named on the command line."""
    args = sys.argv[1:] if argv is None else argv
    filename = args[0] if args else "mates.epd"
    try:
        handle = open(filename, encoding="utf-8")
    except OSError as exc:
        print(f"cannot open {filename}: {exc}", file=sys.stderr)
        return 1
    with handle:
        run_mate_suite(handle)
    return 0


if __name__ == "__main__":
    sys.exit(main())