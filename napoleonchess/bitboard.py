"""Square arithmetic and bitboard shifts on 64-bit square sets."""

from __future__ import annotations

from collections.abc import Iterator

FULL = (1 << 64) - 1
_NOT_A_FILE = 0xFEFEFEFEFEFEFEFE
_NOT_H_FILE = 0x7F7F7F7F7F7F7F7F
_FILES = "abcdefgh"
_RANKS = "12345678"


def square_index(file: int, rank: int) -> int:
    """Return the square index (0 = a1, 63 = h8) of a file and rank."""
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"file and rank must be in 0..7, got {file}, {rank}")
    return rank * 8 + file


def file_of(square: int) -> int:
    """Return the file (0 = a) of a square."""
    return square & 7


def rank_of(square: int) -> int:
    """Return the rank (0 = first rank) of a square."""
    return square >> 3


def square_name(square: int) -> str:
    """Return the algebraic name of a square, such as ``e4``."""
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")
    return _FILES[file_of(square)] + _RANKS[rank_of(square)]


def parse_square(text: str) -> int:
    """Parse an algebraic square name such as ``e4``."""
    if len(text) != 2 or text[0] not in _FILES or text[1] not in _RANKS:
        raise ValueError(f"not a square: {text!r}")
    return square_index(_FILES.index(text[0]), _RANKS.index(text[1]))


def mirror_square(square: int) -> int:
    """Return the square reflected across the board's horizontal midline."""
    return square ^ 56


def distance(a: int, b: int) -> int:
    """Return the king-move distance between two squares."""
    return max(abs(file_of(a) - file_of(b)), abs(rank_of(a) - rank_of(b)))


def pop_count(bitboard: int) -> int:
    """Return the number of set squares."""
    return bitboard.bit_count()


def bit_squares(bitboard: int) -> Iterator[int]:
    """Yield the set squares from lowest to highest."""
    while bitboard:
        low = bitboard & -bitboard
        yield low.bit_length() - 1
        bitboard ^= low


def step_north(bitboard: int) -> int:
    return (bitboard << 8) & FULL


def step_south(bitboard: int) -> int:
    return bitboard >> 8


def step_east(bitboard: int) -> int:
    return (bitboard << 1) & _NOT_A_FILE


def step_west(bitboard: int) -> int:
    return (bitboard >> 1) & _NOT_H_FILE


def step_north_east(bitboard: int) -> int:
    return (bitboard << 9) & _NOT_A_FILE & FULL


def step_north_west(bitboard: int) -> int:
    return (bitboard << 7) & _NOT_H_FILE & FULL


def step_south_east(bitboard: int) -> int:
    return (bitboard >> 7) & _NOT_A_FILE


def step_south_west(bitboard: int) -> int:
    return (bitboard >> 9) & _NOT_H_FILE


def king_attacks(king: int) -> int:
    """Return the squares a king (or set of kings) attacks."""
    attacks = step_east(king) | step_west(king)
    king |= attacks
    return attacks | step_north(king) | step_south(king)


def knight_attacks(knights: int) -> int:
    """Return the squares a knight (or set of knights) attacks."""
    east = step_east(knights)
    west = step_west(knights)
    sides = east | west
    attacks = ((sides << 16) & FULL) | (sides >> 16)
    east = step_east(east)
    west = step_west(west)
    sides = east | west
    attacks |= ((sides << 8) & FULL) | (sides >> 8)
    return attacks