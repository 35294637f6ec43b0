"""Parsing of FEN and EPD position strings."""

from __future__ import annotations

from dataclasses import dataclass

from napoleonchess.bitboard import parse_square, square_index
from napoleonchess.move import EMPTY, Color, Piece


class FenError(ValueError):
    """Raised when a FEN or EPD string cannot be parsed."""


@dataclass(frozen=True)
class FenString:
    """The fields of a FEN string, or of an EPD line with a ``bm`` operation."""

    full_string: str
    piece_placement: tuple[Piece, ...]
    side_to_move: Color
    can_white_short_castle: bool
    can_white_long_castle: bool
    can_black_short_castle: bool
    can_black_long_castle: bool
    en_passant_square: int | None
    half_move: int = 0
    best_move: str = ""

    @classmethod
    def parse(cls, text: str) -> FenString:
        fields = text.split()
        if len(fields) < 4:
            raise FenError(f"incomplete position string: {text!r}")
        placement, side, castling, en_passant = fields[:4]
        rest = fields[4:]

        half_move = 0
        best_move = ""
        if rest and rest[0] == "bm":
            if len(rest) < 2:
                raise FenError("missing best move after 'bm'")
            best_move = rest[1]
            if best_move[-1] in "+#":
                best_move = best_move[:-1]
        elif rest:
            try:
                half_move = int(rest[0])
            except ValueError:
                raise FenError(f"bad half-move clock: {rest[0]!r}") from None

        return cls(
            full_string=text,
            piece_placement=_parse_placement(placement),
            side_to_move=_parse_side(side),
            can_white_short_castle="K" in castling,
            can_white_long_castle="Q" in castling,
            can_black_short_castle="k" in castling,
            can_black_long_castle="q" in castling,
            en_passant_square=_parse_en_passant(en_passant),
            half_move=half_move,
            best_move=best_move,
        )


def _parse_placement(field: str) -> tuple[Piece, ...]:
    board = [EMPTY] * 64
    ranks = field.split("/")
    if len(ranks) > 8:
        raise FenError(f"too many ranks: {field!r}")
    for row, rank_text in enumerate(ranks):
        rank = 7 - row
        file = 0
        for char in rank_text:
            if char in "0123456789":
                file += int(char)
                continue
            try:
                piece = Piece.from_initial(char)
            except ValueError:
                raise FenError(f"bad piece letter {char!r} in {field!r}") from None
            if file > 7:
                raise FenError(f"rank too long: {rank_text!r}")
            board[square_index(file, rank)] = piece
            file += 1
        if file > 8:
            raise FenError(f"rank too long: {rank_text!r}")
    return tuple(board)


def _parse_side(field: str) -> Color:
    if field.startswith("w"):
        return Color.WHITE
    if field.startswith("b"):
        return Color.BLACK
    raise FenError(f"bad side to move: {field!r}")


def _parse_en_passant(field: str) -> int | None:
    if field == "-":
        return None
    try:
        return parse_square(field)
    except ValueError:
        raise FenError(f"bad en passant square: {field!r}") from None