# sohamchess

A compact chess engine in pure Python. It provides:

- a mailbox board (`sohamchess.board.Board`) with FEN loading and saving,
  UCI and long algebraic move notation, and a coloured text rendering;
- pseudo-legal and legal move generation (`sohamchess.movegen`), with
  `perft` and `divide` for checking the generator;
- an alpha-beta search (`sohamchess.ai.AI`) with quiescence, null-move
  pruning, late-move reductions and iterative deepening, driven by
  piece-square tables (`sohamchess.knowledge`);
- a `Game` object (`sohamchess.game`) that keeps move history and detects
  checkmate, stalemate, the fifty-move rule, bare-king material draws and
  threefold repetition;
- a UCI front end (`sohamchess.uci`) for use with a chess GUI.

No third-party libraries are needed.

## Installation

```
pip install .
```

## UCI engine

```
sohamchess
```

reads UCI commands on standard input and answers on standard output. It
handles `uci`, `isready`, `ucinewgame`, `position` (`startpos` or `fen`,
optionally followed by `moves`), `go`, `debug`, `quit`, and ignores `stop`,
`ponderhit`, `setoption` and `register`. `go` accepts `wtime`, `btime`,
`winc`, `binc`, `depth`, `movetime`, `mate`, `infinite` and `ponder`.

Extra commands:

- `d` — print the board and its FEN;
- `eval` — print the static evaluation broken into material and position;
- `legal`, `pseudo` — list legal or pseudo-legal moves;
- `perft <depth>` / `divide <depth>` — node counts per move and in total;
- `debugmoves <uci moves...>` — play the moves, printing the board after
  each, then return to the starting position.

Unknown commands are answered with `Invalid command: <line>`.

Example session:

```
uci
position startpos moves e2e4 e7e5
go movetime 1000
```

## Test suites

Check the move generator against an EPD perft suite, lines of the form
`<fen> ;D1 20 ;D2 400 ...`. Depths whose expected count is above one million
are skipped; the run stops at the first mismatch and exits with status 1:

```
sohamchess-perft perftsuite.epd
```

Run the mate finder over a file of FEN positions, one per line (anything
after a `;` is ignored):

```
sohamchess-mates mates.epd
```

Both commands default to those file names when none is given.

## Using it as a library

```python
from sohamchess.board import Board
from sohamchess.movegen import generate_legal_moves, perft
from sohamchess.ai import AI
from sohamchess.types import SearchType

board = Board()
print(len(generate_legal_moves(board)))   # 20
print(perft(board, 3))

board.make_uci_move("e2e4")
print(board.to_fen())

ai = AI(board)                 # searches its own copy of the board
ai.search_type = SearchType.FIXED_DEPTH
ai.max_depth = 2
move, score = ai.search()
print(board.to_uci(move), score)
```

`AI` writes its `info` lines to standard output unless another text stream
is passed as its second argument.

A whole game with history and result tracking:

```python
from sohamchess.game import Game

game = Game()
game.make_move("e2e4")               # UCI or long algebraic text, or a Move
game.make_move(game.random_move())
print(game.pgn())
print(game.get_result())
game.prev()                          # step back through the history
```

`Board.load_fen` and `Game.load_fen` raise `FenError` for a position they
cannot read; `Game.make_move` raises `ValueError` for text that is not a
legal move.

## What it does not do

There is no graphical board and no interactive play mode in the terminal:
play happens through a UCI GUI or through the `Game` class. `Board.render`
returns the position as coloured text for inspection only.