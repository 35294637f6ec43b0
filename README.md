# napoleonchess

A chess position library built on 64-bit bitboards, held as plain Python
integers (bit 0 is a1, bit 63 is h8).

## Modules

- `napoleonchess.bitboard` – square arithmetic and shifts: `square_index`,
  `file_of`, `rank_of`, `square_name`, `parse_square`, `mirror_square`,
  `distance`, `pop_count`, `bit_squares`, the eight compass steps
  (`step_north`, `step_north_east`, …) and the king and knight attack sets
  `king_attacks` and `knight_attacks`.
- `napoleonchess.move` – `Color`, `PieceType`, `Piece` (with `initial()` and
  `Piece.from_initial()`), `MoveType`, and `Move`, a 16-bit packed value of
  origin, destination and flag with castling, en passant and promotion
  queries and `to_algebraic()` for UCI-style output.
- `napoleonchess.fen` – `FenString.parse` reads the piece placement, side to
  move, castling rights, en passant square, and either the half-move clock
  or an EPD `bm` best move (a trailing `+` or `#` is dropped). Malformed
  input raises `FenError`.
- `napoleonchess.hashentry` – `HashEntry` (key, depth, bound, best move,
  score) and `ScoreType` (`EXACT`, `ALPHA`, `BETA`) for a transposition
  table.
- `napoleonchess.movedatabase` – `MoveDatabase`, precomputed pawn, knight and
  king attacks, rook and diagonal slider lookups, squares between two
  squares, distances, king proximity and pawn span tables.
  `get_database()` returns one shared instance built on first use. The
  helpers `king_all_targets`, `knight_all_targets`, `knight_targets_from`,
  `rook_all_targets` and `rook_targets_from` give a piece's target squares
  on a board.
- `napoleonchess.position` – `Position`, a position loaded from FEN and kept
  both as a square list and as bitboards, with piece counts, pawns per file,
  king squares, `fen()`, `to_csv()`, `render()` (a text drawing) and
  `pos_is_ok()`. Inconsistent positions, or positions without both kings,
  raise `PositionError`.
- `napoleonchess.board` – `Board`, a `Position` that plays and takes back
  moves (`make_move`, `undo_move`, `make_null_move`, `undo_null_move`),
  tracks castling rights, the en passant square and the half-move clock,
  answers `is_attacked` and `is_repetition`, and reads UCI moves with
  `parse_move`.
- `napoleonchess.analysis` – `pinned_pieces`, `is_move_legal`,
  `king_attackers`, `attacks_to`, `moves_to`, `least_valuable_attacker`,
  static exchange evaluation with `see`, and standard algebraic notation with
  `to_san` (check marks are not added).

## Installation

```
pip install napoleonchess
```

## Example

```python
from napoleonchess.board import Board
from napoleonchess.analysis import to_san

board = Board("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
move = board.parse_move("e2e4")
print(to_san(board, move))   # e4
board.make_move(move)
print(board.fen())           # rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1
board.undo_move(move)
```

Moves are compact values:

```python
from napoleonchess.move import Move, MoveType

m = Move(12, 28)
print(m.to_algebraic())      # e2e4
promo = Move(52, 60, MoveType.QUEEN_PROMOTION)
print(promo.to_algebraic())  # e7e8q
```

## What it does not do

The package models positions; it does not play chess. There is no move
generator listing the legal moves of a position, no position evaluation, no
search, no engine protocol and no command-line program. `fen()` always writes
the move counters as `0 1`, and draws are detected only by repetition
(`Board.is_repetition`), not by insufficient material.

## Running the tests

```
pip install "napoleonchess[test]"
pytest
```