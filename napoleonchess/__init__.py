"""Bitboard chess position model: FEN parsing, move encoding, attack tables, make/undo and SAN."""

__version__ = "1.0.0"

__all__ = ["analysis", "bitboard", "board", "fen", "hashentry", "move", "movedatabase", "position"]