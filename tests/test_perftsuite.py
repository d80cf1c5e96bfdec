import io

from sohamchess.board import STARTPOS
from sohamchess.perftsuite import PerftCase, main, parse_perft_line, run_perft_suite

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
GOOD_LINE = f"{STARTPOS} ;D1 20 ;D2 400"


def test_parse_perft_line():
    case = parse_perft_line("8/8 w ;D1 5 ;D2 7\n")
    assert case == PerftCase("8/8 w", ("D1 5", "D2 7"), (5, 7))


def test_parse_line_without_counts():
    case = parse_perft_line(STARTPOS)
    assert case.fen == STARTPOS
    assert case.expected == ()


def test_suite_passes_on_correct_counts():
    out = io.StringIO()
    assert run_perft_suite([GOOD_LINE], out) is True
    text = out.getvalue()
    assert text.count("PASS") == 2
    assert "Case #1:" in text
    assert f"fen: {STARTPOS}" in text
    assert "Total time taken" in text


def test_suite_stops_on_mismatch():
    out = io.StringIO()
    lines = [f"{FOOLS_MATE} ;D1 5", GOOD_LINE]
    assert run_perft_suite(lines, out) is False
    text = out.getvalue()
    assert "FAIL" in text
    assert "expected '5' but found" in text
    assert "Case #2:" not in text


def test_large_counts_are_skipped():
    out = io.StringIO()
    assert run_perft_suite([f"{STARTPOS} ;D1 2000000"], out) is True
    assert "skipped" in out.getvalue()
    assert "PASS" not in out.getvalue()


def test_bad_fen_reported():
    out = io.StringIO()
    assert run_perft_suite(["nonsense ;D1 5"], out) is False
    assert "Unable to parse FEN" in out.getvalue()


def test_main_reads_file(tmp_path, capsys):
    path = tmp_path / "suite.epd"
    path.write_text(GOOD_LINE + "\n", encoding="utf-8")
    assert main([str(path)]) == 0
    assert "PASS" in capsys.readouterr().out


def test_main_failing_file(tmp_path):
    path = tmp_path / "suite.epd"
    path.write_text(f"{FOOLS_MATE} ;D1 5\n", encoding="utf-8")
    assert main([str(path)]) == 1


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.epd")]) == 1
    assert "absent.epd" in capsys.readouterr().err