import io

from sohamchess import uci
from sohamchess.board import STARTPOS, Board
from sohamchess.movegen import generate_legal_moves, generate_pseudo_moves
from sohamchess.uci import UciEngine


def make_engine():
    out = io.StringIO()
    return UciEngine(out), out


def test_uci_handshake():
    engine, out = make_engine()
    assert engine.handle("uci") is True
    lines = out.getvalue().splitlines()
    assert lines[-1] == "uciok"
    assert lines[0].startswith("id name ")


def test_isready():
    engine, out = make_engine()
    engine.handle("isready")
    assert out.getvalue() == "readyok\n"


def test_quit_stops_run():
    engine, out = make_engine()
    engine.run(["isready\n", "quit\n", "isready\n"])
    assert out.getvalue().count("readyok") == 1
    assert engine.handle("quit") is False


def test_invalid_command_is_reported():
    engine, out = make_engine()
    engine.handle("frobnicate now")
    assert out.getvalue() == "Invalid command: frobnicate now\n"


def test_empty_line_is_ignored():
    engine, out = make_engine()
    assert engine.handle("   ") is True
    assert out.getvalue() == ""


def test_position_startpos_with_moves():
    engine, _ = make_engine()
    engine.handle("position startpos moves e2e4 e7e5")
    expected = Board()
    expected.make_uci_move("e2e4")
    expected.make_uci_move("e7e5")
    assert engine.board.to_fen() == expected.to_fen()


def test_position_fen_with_moves():
    engine, _ = make_engine()
    fen = "4k3/8/8/8/8/8/4P3/4K3 w - - 0 1"
    engine.handle(f"position fen {fen} moves e2e4")
    expected = Board()
    expected.load_fen(fen)
    expected.make_uci_move("e2e4")
    assert engine.board.to_fen() == expected.to_fen()


def test_position_counts_repetitions():
    engine, _ = make_engine()
    engine.handle("position startpos moves g1f3 g8f6 f3g1 f6g8")
    assert engine.transpositions[Board().pos_hash()] == 1
    engine.handle("position startpos")
    assert sum(engine.transpositions.values()) == 0


def test_position_stops_at_malformed_move():
    engine, _ = make_engine()
    engine.handle("position startpos moves e2e4 zz e7e5")
    expected = Board()
    expected.make_uci_move("e2e4")
    assert engine.board.to_fen() == expected.to_fen()


def test_bad_fen_keeps_board():
    engine, out = make_engine()
    engine.handle("position fen not/a/fen")
    assert engine.board.to_fen() == STARTPOS
    assert out.getvalue().startswith("info string")


def test_display_shows_fen():
    engine, out = make_engine()
    engine.handle("d")
    assert out.getvalue().endswith(f"fen: {STARTPOS}\n")


def test_go_depth_finds_mate():
    engine, out = make_engine()
    engine.handle("position fen 6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
    engine.handle("go depth 1")
    assert out.getvalue().splitlines()[-1] == "bestmove a1a8"
    assert engine.ai.max_depth == 1


def test_perft_reports_node_count():
    engine, out = make_engine()
    engine.handle("perft 1")
    lines = out.getvalue().splitlines()
    assert lines[-1] == "Nodes: 20"
    assert lines[-2] == f"Moves: {len(generate_legal_moves(Board()))}"
    assert engine.board.to_fen() == STARTPOS


def test_legal_and_pseudo_listings():
    engine, out = make_engine()
    engine.handle("legal")
    assert len(out.getvalue().splitlines()) == len(generate_legal_moves(engine.board))
    out.seek(0)
    out.truncate()
    engine.handle("pseudo")
    assert len(out.getvalue().splitlines()) == len(generate_pseudo_moves(engine.board))


def test_debugmoves_restores_start():
    engine, out = make_engine()
    engine.handle("debugmoves e2e4 e7e5")
    assert out.getvalue().count("fen: ") == 2
    assert engine.board.to_fen() == STARTPOS


def test_debug_flag():
    engine, _ = make_engine()
    engine.handle("debug on")
    assert engine.debug_mode is True
    engine.handle("debug off")
    assert engine.debug_mode is False


def test_eval_of_start_is_balanced():
    engine, out = make_engine()
    engine.handle("eval")
    lines = out.getvalue().splitlines()
    assert "material: 0" in lines
    assert f"fen: {STARTPOS}" in lines


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("isready\nquit\nuci\n"))
    assert uci.main([]) == 0
    captured = capsys.readouterr().out
    assert captured == "readyok\n"