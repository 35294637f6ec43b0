"""Precomputed attack tables and the slider, knight and king target helpers."""

from __future__ import annotations

from functools import cache

from napoleonchess.bitboard import (
    distance as square_distance,
    file_of,
    king_attacks as king_attack_set,
    knight_attacks as knight_attack_set,
    rank_of,
    square_index,
    step_east,
    step_north,
    step_north_east,
    step_north_west,
    step_south,
    step_south_east,
    step_south_west,
    step_west,
)
from napoleonchess.move import Color

_FILE_A = 0x0101010101010101

_LINE_DIRECTIONS = {
    "rank": ((1, 0), (-1, 0)),
    "file": ((0, 1), (0, -1)),
    "a1h8": ((1, 1), (-1, -1)),
    "h1a8": ((-1, 1), (1, -1)),
}


def _ray(square: int, df: int, dr: int) -> list[int]:
    """Squares reached from ``square`` stepping by (df, dr) up to the edge."""
    file, rank = file_of(square) + df, rank_of(square) + dr
    squares = []
    while 0 <= file < 8 and 0 <= rank < 8:
        squares.append(square_index(file, rank))
        file += df
        rank += dr
    return squares


def _slide(rays: list[list[int]], occupied: int) -> int:
    targets = 0
    for ray in rays:
        for square in ray:
            targets |= 1 << square
            if occupied >> square & 1:
                break
    return targets


def _line_table(square: int, directions) -> tuple[int, dict[int, int]]:
    """Map every occupancy of the line's inner squares to the attacked squares."""
    rays = [_ray(square, df, dr) for df, dr in directions]
    inner = 0
    for ray in rays:
        for sq in ray[:-1]:
            inner |= 1 << sq
    table = {}
    subset = 0
    while True:
        table[subset] = _slide(rays, subset)
        subset = (subset - inner) & inner
        if subset == 0:
            break
    return inner, table


def _check_square(square: int) -> None:
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")


class MoveDatabase:
    """Attack and pawn-structure tables for every square."""

    def __init__(self) -> None:
        squares = range(64)
        masks = [1 << sq for sq in squares]

        self._lines = {
            name: tuple(_line_table(sq, dirs) for sq in squares)
            for name, dirs in _LINE_DIRECTIONS.items()
        }

        self.pawn_attacks = (
            tuple(step_north_east(m) | step_north_west(m) for m in masks),
            tuple(step_south_east(m) | step_south_west(m) for m in masks),
        )
        self.knight_attacks = tuple(knight_attack_set(m) for m in masks)
        self.king_attacks = tuple(king_attack_set(m) for m in masks)

        self.pseudo_rook_attacks = tuple(self.rook_attacks(0, sq) for sq in squares)
        self.pseudo_bishop_attacks = tuple(self.bishop_attacks(0, sq) for sq in squares)
        self.obstructed = tuple(
            tuple(self._between(s1, s2) for s2 in squares) for s1 in squares
        )
        self.distance = tuple(
            tuple(square_distance(s1, s2) for s2 in squares) for s1 in squares
        )

        self.king_proximity = (
            tuple(self.king_attacks[sq] | step_north(self.king_attacks[sq]) for sq in squares),
            tuple(self.king_attacks[sq] | step_south(self.king_attacks[sq]) for sq in squares),
        )
        self.side_files = tuple(
            step_west(_FILE_A << f) | step_east(_FILE_A << f) for f in range(8)
        )

        white_spans = []
        black_spans = []
        for mask in masks:
            wspan = mask
            wspan |= wspan << 8
            wspan |= wspan << 16
            wspan |= wspan << 32
            white_spans.append(step_north(wspan))
            bspan = mask
            bspan |= bspan >> 8
            bspan |= bspan >> 16
            bspan |= bspan >> 32
            black_spans.append(step_south(bspan))

        spans = (tuple(white_spans), tuple(black_spans))
        self.front_span = spans
        self.rear_span = (spans[1], spans[0])
        self.attack_front_span = tuple(
            tuple(step_west(span) | step_east(span) for span in side) for side in spans
        )
        self.passer_span = tuple(
            tuple(span | flank for span, flank in zip(side, flanks))
            for side, flanks in zip(spans, self.attack_front_span)
        )
        self.candidate_defenders = (
            tuple(self.pawn_attacks[Color.BLACK][sq] | step_west(m) | step_east(m)
                  for sq, m in enumerate(masks)),
            tuple(self.pawn_attacks[Color.WHITE][sq] | step_west(m) | step_east(m)
                  for sq, m in enumerate(masks)),
        )
        self.pawn_stop = (
            tuple(step_north(m) for m in masks),
            tuple(step_south(m) for m in masks),
        )

    def _lookup(self, kind: str, occupied: int, square: int) -> int:
        _check_square(square)
        mask, table = self._lines[kind][square]
        return table[occupied & mask]

    def _between(self, s1: int, s2: int) -> int:
        if not (self.pseudo_rook_attacks[s1] | self.pseudo_bishop_attacks[s1]) >> s2 & 1:
            return 0
        steps = max(abs(file_of(s1) - file_of(s2)), abs(rank_of(s1) - rank_of(s2)))
        delta = (s2 - s1) // steps
        between = 0
        for sq in range(s1 + delta, s2, delta):
            between |= 1 << sq
        return between

    def rook_attacks(self, occupied: int, square: int) -> int:
        """Squares a rook on ``square`` attacks given the occupied squares."""
        return self._lookup("rank", occupied, square) | self._lookup("file", occupied, square)

    def a1h8_diagonal_attacks(self, occupied: int, square: int) -> int:
        """Attacks along the a1-h8 direction diagonal through ``square``."""
        return self._lookup("a1h8", occupied, square)

    def h1a8_diagonal_attacks(self, occupied: int, square: int) -> int:
        """Attacks along the h1-a8 direction diagonal through ``square``."""
        return self._lookup("h1a8", occupied, square)

    def bishop_attacks(self, occupied: int, square: int) -> int:
        """Squares a bishop on ``square`` attacks given the occupied squares."""
        return self.a1h8_diagonal_attacks(occupied, square) | self.h1a8_diagonal_attacks(
            occupied, square
        )

    def are_aligned(self, s1: int, s2: int, s3: int) -> bool:
        """True when one of the three squares lies between the other two."""
        for sq in (s1, s2, s3):
            _check_square(sq)
        between = self.obstructed[s1][s2] | self.obstructed[s1][s3] | self.obstructed[s2][s3]
        return bool(between & ((1 << s1) | (1 << s2) | (1 << s3)))


@cache
def get_database() -> MoveDatabase:
    """Return the shared, lazily built move database."""
    return MoveDatabase()


def _lowest_square(bitboard: int, what: str) -> int:
    if not bitboard:
        raise ValueError(f"no {what} on the bitboard")
    return (bitboard & -bitboard).bit_length() - 1


def _occupied(board) -> int:
    return board.color_pieces(Color.WHITE) | board.color_pieces(Color.BLACK)


def king_all_targets(king: int, board) -> int:
    """Squares the king may move to, excluding the mover's own pieces."""
    square = _lowest_square(king, "king")
    return get_database().king_attacks[square] & ~board.player_pieces()


def knight_all_targets(knights: int, board) -> int:
    """Targets of the lowest knight in ``knights``, excluding own pieces."""
    square = _lowest_square(knights, "knight")
    return get_database().knight_attacks[square] & ~board.player_pieces()


def knight_targets_from(square: int, color: Color, board) -> int:
    """Targets of a knight of ``color`` on ``square``."""
    _check_square(square)
    return get_database().knight_attacks[square] & ~board.color_pieces(color)


def rook_all_targets(rooks: int, board) -> int:
    """Targets of the lowest rook in ``rooks``, excluding own pieces."""
    square = _lowest_square(rooks, "rook")
    return get_database().rook_attacks(_occupied(board), square) & ~board.player_pieces()


def rook_targets_from(square: int, color: Color, board) -> int:
    """Targets of a rook of ``color`` on ``square``."""
    return get_database().rook_attacks(_occupied(board), square) & ~board.color_pieces(color)