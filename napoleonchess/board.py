"""A position that can play and take back moves."""

from __future__ import annotations

from dataclasses import dataclass

from napoleonchess.bitboard import bit_squares, parse_square
from napoleonchess.move import Color, Move, MoveType, Piece, PieceType
from napoleonchess.movedatabase import get_database
from napoleonchess.position import CastlingRights, Position, PositionError

_A1, _D1, _F1, _H1 = 0, 3, 5, 7
_A8, _D8, _F8, _H8 = 56, 59, 61, 63

_CASTLING_MOVES = {
    "e1g1": Move(4, 6, MoveType.KING_CASTLE),
    "e8g8": Move(60, 62, MoveType.KING_CASTLE),
    "e1c1": Move(4, 2, MoveType.QUEEN_CASTLE),
    "e8c8": Move(60, 58, MoveType.QUEEN_CASTLE),
}

_CORNER_RIGHTS = {
    _A1: CastlingRights.WHITE_OOO,
    _H1: CastlingRights.WHITE_OO,
    _A8: CastlingRights.BLACK_OOO,
    _H8: CastlingRights.BLACK_OO,
}

_SIDE_RIGHTS = {
    Color.WHITE: CastlingRights.WHITE_OO | CastlingRights.WHITE_OOO,
    Color.BLACK: CastlingRights.BLACK_OO | CastlingRights.BLACK_OOO,
}


@dataclass(frozen=True)
class _State:
    """What is needed to take a move back, and the key of the position before it."""

    castling: CastlingRights
    en_passant: int | None
    half_move_clock: int
    key: tuple
    captured: PieceType = PieceType.NONE
    null: bool = False


def _rook_squares(color: Color, from_square: int, to_square: int) -> tuple[int, int]:
    """Return the rook's origin and destination for a castling king move."""
    king_side = from_square < to_square
    if color is Color.WHITE:
        return (_H1, _F1) if king_side else (_A1, _D1)
    return (_H8, _F8) if king_side else (_A8, _D8)


def _captured_pawn_square(color: Color, en_passant: int) -> int:
    return en_passant - 8 if color is Color.WHITE else en_passant + 8


class Board(Position):
    """A position with move making, taking back and attack detection."""

    def load(self, fen: str | None = None) -> None:
        self._history: list[_State] = []
        if fen is None:
            super().load()
        else:
            super().load(fen)

    def _key(self) -> tuple:
        return (
            tuple(self._piece_set),
            self.side_to_move,
            self.castling_status,
            self.en_passant_square,
        )

    def is_attacked(self, target: int, side: Color) -> bool:
        """True when any square in ``target`` is attacked by the opponent of ``side``."""
        db = get_database()
        enemy = side.opposite()
        occupied = self.occupied
        queens = self.pieces(enemy, PieceType.QUEEN)
        straight = queens | self.pieces(enemy, PieceType.ROOK)
        diagonal = queens | self.pieces(enemy, PieceType.BISHOP)
        for square in bit_squares(target):
            if self.pieces(enemy, PieceType.PAWN) & db.pawn_attacks[side][square]:
                return True
            if self.pieces(enemy, PieceType.KNIGHT) & db.knight_attacks[square]:
                return True
            if self.pieces(enemy, PieceType.KING) & db.king_attacks[square]:
                return True
            if straight and db.rook_attacks(occupied, square) & straight:
                return True
            if diagonal and db.bishop_attacks(occupied, square) & diagonal:
                return True
        return False

    def is_repetition(self) -> bool:
        """True when the position already occurred with the same side to move."""
        if self.half_move_clock < 4:
            return False
        key = self._key()
        start = 0 if self.side_to_move is Color.WHITE else 1
        return any(
            self._history[i].key == key for i in range(start, self.current_ply, 2)
        )

    def make_move(self, move: Move) -> None:
        """Play a move for the side to move."""
        from_square, to_square = move.from_square(), move.to_square()
        moved = self._piece_set[from_square]
        if moved.is_empty:
            raise ValueError(f"no piece on the origin square of {move}")
        us = self.side_to_move
        them = us.opposite()
        en_passant_capture = move.is_en_passant()
        if en_passant_capture and self.en_passant_square is None:
            raise ValueError(f"en passant move {move} without an en passant square")
        captured = (
            PieceType.PAWN if en_passant_capture else self._piece_set[to_square].piece_type
        )

        self._history.append(
            _State(
                castling=self.castling_status,
                en_passant=self.en_passant_square,
                half_move_clock=self.half_move_clock,
                key=self._key(),
                captured=captured,
            )
        )

        self._remove_piece(from_square)
        if en_passant_capture:
            self._remove_piece(_captured_pawn_square(us, self.en_passant_square))

        placed = moved
        if moved.piece_type is PieceType.KING:
            if move.is_castle():
                rook_from, rook_to = _rook_squares(us, from_square, to_square)
                self._remove_piece(rook_from)
                self.add_piece(Piece(us, PieceType.ROOK), rook_to)
                self.castled[us] = True
            self.castling_status &= ~_SIDE_RIGHTS[us]
        elif moved.piece_type is PieceType.ROOK:
            corner = _CORNER_RIGHTS.get(from_square)
            if corner is not None and corner & _SIDE_RIGHTS[us]:
                self.castling_status &= ~corner
        elif move.is_promotion():
            placed = Piece(us, move.promoted_piece())
        self.add_piece(placed, to_square)

        if captured is PieceType.ROOK and not en_passant_capture:
            corner = _CORNER_RIGHTS.get(to_square)
            if corner is not None and corner & _SIDE_RIGHTS[them]:
                self.castling_status &= ~corner

        self.en_passant_square = None
        if moved.piece_type is PieceType.PAWN:
            step = to_square - from_square
            if step in (16, -16):
                self.en_passant_square = to_square - step // 2

        if captured is not PieceType.NONE or moved.piece_type is PieceType.PAWN:
            self.half_move_clock = 0
        else:
            self.half_move_clock += 1

        self.side_to_move = them
        self.current_ply += 1

        if not self.pos_is_ok():
            raise PositionError(f"position not ok after {move}")

    def undo_move(self, move: Move) -> None:
        """Take back the last move played with :meth:`make_move`."""
        if not self._history:
            raise PositionError("no move to take back")
        if self._history[-1].null:
            raise PositionError("the last move was a null move")
        state = self._history.pop()
        self.current_ply -= 1

        from_square, to_square = move.from_square(), move.to_square()
        them = self.side_to_move
        us = them.opposite()
        self.side_to_move = us

        piece = self._piece_set[to_square]
        self._remove_piece(to_square)
        if move.is_promotion():
            self.add_piece(Piece(us, PieceType.PAWN), from_square)
        else:
            self.add_piece(piece, from_square)
            if piece.piece_type is PieceType.KING and move.is_castle():
                rook_from, rook_to = _rook_squares(us, from_square, to_square)
                self._remove_piece(rook_to)
                self.add_piece(Piece(us, PieceType.ROOK), rook_from)
                self.castled[us] = False

        if state.captured is not PieceType.NONE:
            if move.is_en_passant():
                square = _captured_pawn_square(us, state.en_passant)
                self.add_piece(Piece(them, PieceType.PAWN), square)
            else:
                self.add_piece(Piece(them, state.captured), to_square)

        self.castling_status = state.castling
        self.en_passant_square = state.en_passant
        self.half_move_clock = state.half_move_clock

        if not self.pos_is_ok():
            raise PositionError(f"position not ok after taking back {move}")

    def make_null_move(self) -> None:
        """Pass the turn to the opponent."""
        self._history.append(
            _State(
                castling=self.castling_status,
                en_passant=self.en_passant_square,
                half_move_clock=self.half_move_clock,
                key=self._key(),
                null=True,
            )
        )
        self.side_to_move = self.side_to_move.opposite()
        self.en_passant_square = None
        self.allow_null_move = False
        self.current_ply += 1

    def undo_null_move(self) -> None:
        """Take back a null move."""
        if not self._history or not self._history[-1].null:
            raise PositionError("the last move was not a null move")
        state = self._history.pop()
        self.current_ply -= 1
        self.side_to_move = self.side_to_move.opposite()
        self.en_passant_square = state.en_passant
        self.allow_null_move = True

    def parse_move(self, text: str) -> Move:
        """Parse a move in long algebraic (UCI) notation for this position."""
        if len(text) not in (4, 5):
            raise ValueError(f"not a move: {text!r}")
        from_square = parse_square(text[0:2])
        to_square = parse_square(text[2:4])

        if (
            to_square == self.en_passant_square
            and self._piece_set[from_square].piece_type is PieceType.PAWN
        ):
            return Move(from_square, to_square, MoveType.EN_PASSANT)
        if text in _CASTLING_MOVES:
            return _CASTLING_MOVES[text]
        if len(text) == 5:
            promoted = Piece.from_initial(text[4]).piece_type
            if promoted in (PieceType.PAWN, PieceType.KING):
                raise ValueError(f"cannot promote to {promoted.name.lower()}: {text!r}")
            return Move(from_square, to_square, 0x8 | (promoted - 1))
        return Move(from_square, to_square)