"""Colours, pieces and the 16-bit move encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from napoleonchess.bitboard import parse_square, square_name


class Color(IntEnum):
    WHITE = 0
    BLACK = 1
    NONE = 2

    def opposite(self) -> Color:
        """Return the other side; NONE stays NONE."""
        if self is Color.NONE:
            return Color.NONE
        return Color(1 - self)


class PieceType(IntEnum):
    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5
    NONE = 6


_INITIALS = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_TYPES_BY_INITIAL = {v: k for k, v in _INITIALS.items()}


@dataclass(frozen=True)
class Piece:
    """A coloured piece; the empty square is Piece(Color.NONE, PieceType.NONE)."""

    color: Color = Color.NONE
    piece_type: PieceType = PieceType.NONE

    @property
    def is_empty(self) -> bool:
        return self.piece_type is PieceType.NONE

    def initial(self) -> str:
        """Return the FEN letter: upper case for white, a space when empty."""
        if self.is_empty:
            return " "
        letter = _INITIALS[self.piece_type]
        return letter.upper() if self.color is Color.WHITE else letter

    @classmethod
    def from_initial(cls, char: str) -> Piece:
        """Build a piece from its FEN letter."""
        piece_type = _TYPES_BY_INITIAL.get(char.lower()) if len(char) == 1 else None
        if piece_type is None:
            raise ValueError(f"not a piece letter: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, piece_type)


EMPTY = Piece()


class MoveType(IntEnum):
    KING_CASTLE = 0x2
    QUEEN_CASTLE = 0x3
    EN_PASSANT = 0x5
    KNIGHT_PROMOTION = 0x8
    BISHOP_PROMOTION = 0x9
    ROOK_PROMOTION = 0xA
    QUEEN_PROMOTION = 0xB


class Move:
    """A move packed as from (6 bits), to (6 bits) and flag (4 bits)."""

    __slots__ = ("_code",)

    def __init__(self, from_square: int, to_square: int, flag: int = 0) -> None:
        if not (0 <= from_square < 64 and 0 <= to_square < 64):
            raise ValueError(f"squares out of range: {from_square}, {to_square}")
        if not 0 <= flag < 16:
            raise ValueError(f"flag out of range: {flag}")
        self._code = from_square | (to_square << 6) | (flag << 12)

    @property
    def code(self) -> int:
        return self._code

    def from_square(self) -> int:
        return self._code & 0x3F

    def to_square(self) -> int:
        return (self._code >> 6) & 0x3F

    def flag(self) -> int:
        return self._code >> 12

    def promoted_piece(self) -> PieceType:
        if not self.is_promotion():
            return PieceType.NONE
        return PieceType((self.flag() & 0x3) + 1)

    def butterfly_index(self) -> int:
        """Index into from/to tables."""
        return self._code & 0xFFF

    def is_null(self) -> bool:
        return self.from_square() == self.to_square()

    def is_castle(self) -> bool:
        return self.flag() in (MoveType.KING_CASTLE, MoveType.QUEEN_CASTLE)

    def is_castle_oo(self) -> bool:
        return self.flag() == MoveType.KING_CASTLE

    def is_castle_ooo(self) -> bool:
        return self.flag() == MoveType.QUEEN_CASTLE

    def is_promotion(self) -> bool:
        return bool(self.flag() & 0x8)

    def is_en_passant(self) -> bool:
        return self.flag() == MoveType.EN_PASSANT

    def to_algebraic(self) -> str:
        """Return the long algebraic (UCI) form of the move."""
        if self.is_null():
            return "0000"
        if self.is_castle():
            white = self.from_square() == parse_square("e1")
            if self.is_castle_oo():
                return "e1g1" if white else "e8g8"
            return "e1c1" if white else "e8c8"
        text = square_name(self.from_square()) + square_name(self.to_square())
        if self.is_promotion():
            text += _INITIALS[self.promoted_piece()]
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __repr__(self) -> str:
        return f"Move({self.from_square()}, {self.to_square()}, {self.flag()})"

    def __str__(self) -> str:
        return self.to_algebraic()