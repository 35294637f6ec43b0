"""Entries stored in the transposition table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from napoleonchess.move import Move


class ScoreType(IntEnum):
    """Whether a stored score is exact or an alpha/beta bound."""

    EXACT = 0
    ALPHA = 1
    BETA = 2


@dataclass
class HashEntry:
    """A searched position: its key, depth, bound kind, best move and score."""

    key: int = 0
    depth: int = 0
    bound: ScoreType = ScoreType.EXACT
    best_move: Move | None = None
    score: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.key < (1 << 64):
            raise ValueError(f"key must be a 64-bit unsigned value, got {self.key}")
        if not 0 <= self.depth < 256:
            raise ValueError(f"depth must fit in a byte, got {self.depth}")
        self.bound = ScoreType(self.bound)