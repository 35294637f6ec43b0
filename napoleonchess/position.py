"""Board state: piece placement, bitboards and side-to-move information."""

from __future__ import annotations

from enum import IntFlag

from napoleonchess.bitboard import (
    FULL,
    bit_squares,
    file_of,
    square_index,
    square_name,
)
from napoleonchess.fen import FenString
from napoleonchess.move import EMPTY, Color, Move, Piece, PieceType

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_RANK_TWO = 0x000000000000FF00
_RANK_SEVEN = 0x00FF000000000000
_SIDES = (Color.WHITE, Color.BLACK)
_TYPES = tuple(t for t in PieceType if t is not PieceType.NONE)


class PositionError(ValueError):
    """Raised when a position is inconsistent or lacks a king."""


class CastlingRights(IntFlag):
    NONE = 0
    WHITE_OO = 1
    WHITE_OOO = 2
    BLACK_OO = 4
    BLACK_OOO = 8


def _check_square(square: int) -> None:
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")


class Position:
    """A chess position kept both as a square list and as bitboards."""

    def __init__(self, fen: str = START_FEN) -> None:
        self.load(fen)

    def _clear(self) -> None:
        self._piece_set: list[Piece] = [EMPTY] * 64
        self._bitboards = [[0] * len(_TYPES) for _ in _SIDES]
        self._pieces = [0, 0]
        self._num = [[0] * len(_TYPES) for _ in _SIDES]
        self._pawns_on_file = [[0] * 8 for _ in _SIDES]
        self._king_square: list[int | None] = [None, None]
        self.side_to_move = Color.WHITE
        self.castling_status = CastlingRights.NONE
        self.en_passant_square: int | None = None
        self.half_move_clock = 0
        self.current_ply = 0
        self.allow_null_move = True
        self.is_check = False
        self.castled = [False, False]

    def load(self, fen: str = START_FEN) -> None:
        """Replace the position with the one described by a FEN string."""
        parsed = FenString.parse(fen)
        self._clear()

        rights = CastlingRights.NONE
        if parsed.can_white_short_castle:
            rights |= CastlingRights.WHITE_OO
        if parsed.can_white_long_castle:
            rights |= CastlingRights.WHITE_OOO
        if parsed.can_black_short_castle:
            rights |= CastlingRights.BLACK_OO
        if parsed.can_black_long_castle:
            rights |= CastlingRights.BLACK_OOO
        self.castling_status = rights
        self.side_to_move = parsed.side_to_move

        for square, piece in enumerate(parsed.piece_placement):
            if not piece.is_empty:
                self.add_piece(piece, square)

        self.en_passant_square = parsed.en_passant_square
        self.half_move_clock = parsed.half_move

        if not self.pos_is_ok():
            raise PositionError(f"position not ok: {fen!r}")

    def _remove_piece(self, square: int) -> None:
        piece = self._piece_set[square]
        if piece.is_empty:
            return
        mask = 1 << square
        self._bitboards[piece.color][piece.piece_type] &= ~mask
        self._pieces[piece.color] &= ~mask
        self._num[piece.color][piece.piece_type] -= 1
        if piece.piece_type is PieceType.PAWN:
            self._pawns_on_file[piece.color][file_of(square)] -= 1
        if piece.piece_type is PieceType.KING and self._king_square[piece.color] == square:
            self._king_square[piece.color] = None
        self._piece_set[square] = EMPTY

    def add_piece(self, piece: Piece, square: int) -> None:
        """Put a piece on a square, replacing whatever stood there."""
        _check_square(square)
        self._remove_piece(square)
        if piece.is_empty:
            return
        if piece.color is Color.NONE:
            raise ValueError("a piece must have a colour")
        mask = 1 << square
        self._piece_set[square] = piece
        self._bitboards[piece.color][piece.piece_type] |= mask
        self._pieces[piece.color] |= mask
        self._num[piece.color][piece.piece_type] += 1
        if piece.piece_type is PieceType.PAWN:
            self._pawns_on_file[piece.color][file_of(square)] += 1
        elif piece.piece_type is PieceType.KING:
            self._king_square[piece.color] = square

    @property
    def occupied(self) -> int:
        return self._pieces[Color.WHITE] | self._pieces[Color.BLACK]

    @property
    def empty(self) -> int:
        return ~self.occupied & FULL

    def piece_on(self, square: int) -> Piece:
        _check_square(square)
        return self._piece_set[square]

    def pieces(self, color: Color, piece_type: PieceType) -> int:
        return self._bitboards[color][piece_type]

    def color_pieces(self, color: Color) -> int:
        return self._pieces[color]

    def player_pieces(self) -> int:
        return self._pieces[self.side_to_move]

    def enemy_pieces(self) -> int:
        return self._pieces[self.side_to_move.opposite()]

    def king_square(self, color: Color) -> int:
        square = self._king_square[color]
        if square is None:
            raise PositionError(f"no {color.name.lower()} king on the board")
        return square

    def num_of_pieces(self, color: Color, piece_type: PieceType) -> int:
        return self._num[color][piece_type]

    def pawns_on_file(self, color: Color, file: int) -> int:
        return self._pawns_on_file[color][file]

    def is_capture(self, move: Move) -> bool:
        return not self._piece_set[move.to_square()].is_empty or move.is_en_passant()

    def is_promoting_pawn(self) -> bool:
        """True when the side to move has a pawn one step from promotion."""
        rank = _RANK_SEVEN if self.side_to_move is Color.WHITE else _RANK_TWO
        return bool(self._bitboards[self.side_to_move][PieceType.PAWN] & rank)

    def is_on_square(self, color: Color, piece_type: PieceType, square: int) -> bool:
        _check_square(square)
        return bool(self._bitboards[color][piece_type] >> square & 1)

    def _castling_text(self) -> str:
        rights = self.castling_status
        return "".join(
            letter
            for flag, letter in (
                (CastlingRights.WHITE_OO, "K"),
                (CastlingRights.WHITE_OOO, "Q"),
                (CastlingRights.BLACK_OO, "k"),
                (CastlingRights.BLACK_OOO, "q"),
            )
            if rights & flag
        )

    def fen(self) -> str:
        """Return the FEN of the position; the move counters are always ``0 1``."""
        rows = []
        for rank in range(7, -1, -1):
            row = ""
            empty = 0
            for file in range(8):
                piece = self._piece_set[square_index(file, rank)]
                if piece.is_empty:
                    empty += 1
                    continue
                if empty:
                    row += str(empty)
                    empty = 0
                row += piece.initial()
            if empty:
                row += str(empty)
            rows.append(row)
        side = "w" if self.side_to_move is Color.WHITE else "b"
        castling = self._castling_text() or "-"
        en_passant = "-" if self.en_passant_square is None else square_name(self.en_passant_square)
        return f"{'/'.join(rows)} {side} {castling} {en_passant} 0 1"

    def to_csv(self) -> str:
        """Return the twelve piece bitboards, side, en passant square and castling rights."""
        fields = [str(self._bitboards[c][t]) for c in _SIDES for t in _TYPES]
        fields.append(str(int(self.side_to_move)))
        fields.append("-" if self.en_passant_square is None else str(self.en_passant_square))
        fields.append(str(int(self.castling_status)))
        return ",".join(fields)

    def render(self) -> str:
        """Return a text drawing of the board followed by its state."""
        separator = "   ------------------------"
        lines = []
        for rank in range(7, -1, -1):
            lines.append(separator)
            cells = "".join(
                f"[{self._piece_set[square_index(file, rank)].initial()}]" for file in range(8)
            )
            lines.append(f" {rank + 1} {cells}")
        lines.append("")
        lines.append("    A  B  C  D  E  F  G  H")
        en_passant = "-" if self.en_passant_square is None else square_name(self.en_passant_square)
        lines.append(f"FEN: {self.fen()}")
        lines.append(f"Enpassant Square: {en_passant}")
        lines.append(f"Side To Move: {'White' if self.side_to_move is Color.WHITE else 'Black'}")
        lines.append(f"Castling Rights: {self._castling_text()}")
        lines.append(f"HalfMove Clock: {self.half_move_clock}")
        lines.append(f"Ply: {self.current_ply}")
        return "\n".join(lines)

    def pos_is_ok(self) -> bool:
        """Check that the bitboards, square list and kings agree."""
        if self.side_to_move not in _SIDES:
            return False
        us, them = self.side_to_move, self.side_to_move.opposite()
        player = 0
        enemy = 0
        for piece_type in _TYPES:
            player |= self._bitboards[us][piece_type]
            enemy |= self._bitboards[them][piece_type]
        if self.player_pieces() & self.enemy_pieces():
            return False
        if player & enemy:
            return False
        if player != self.player_pieces() or enemy != self.enemy_pieces():
            return False
        if (player | enemy) != self.occupied:
            return False
        for color in _SIDES:
            square = self._king_square[color]
            if square is None or self._piece_set[square].color is not color:
                return False
        for color in _SIDES:
            for piece_type in _TYPES:
                for square in bit_squares(self._bitboards[color][piece_type]):
                    if self._piece_set[square] != Piece(color, piece_type):
                        return False
        return True