"""Chess engine: board, move generation, search, game tracking, test suites and UCI."""

__version__ = "0.1.0"
__all__ = ["types", "board", "movegen", "perftsuite", "knowledge", "ai", "matesuite", "game", "uci"]