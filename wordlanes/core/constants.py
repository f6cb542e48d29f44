"""Shared constants and enumerations for the puzzle generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


MIN_WORD_LEN = 4
MAX_WORD_LEN = 11
WORD_COUNT = 11
WORD_COUNT_HEADROOM = 8


class Difficulty(str, Enum):
    """Controls which lane claims a border slot first during matching."""

    EASY = "easy"
    BALANCED = "balanced"
    HARD = "hard"


class Direction(str, Enum):
    """Word directions supported by the board."""

    HORIZONTAL = "H"
    VERTICAL = "V"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.HORIZONTAL else (1, 0)

    @property
    def crossing(self) -> "Direction":
        return Direction.VERTICAL if self is Direction.HORIZONTAL else Direction.HORIZONTAL


class Side(str, Enum):
    """Border sides hosting outside slots."""

    TOP = "T"
    BOTTOM = "B"
    LEFT = "L"
    RIGHT = "R"

    @property
    def is_row_lane(self) -> bool:
        return self in (Side.LEFT, Side.RIGHT)


@dataclass(frozen=True)
class SizePreset:
    """Board size preset used by the batch and daily generators."""

    n: int
    max_word_len: int
    word_count: int
    min_word_len: int = MIN_WORD_LEN


SIZE_PRESETS: Dict[str, SizePreset] = {
    "small": SizePreset(n=8, max_word_len=5, word_count=7),
    "medium": SizePreset(n=11, max_word_len=8, word_count=10),
    "large": SizePreset(n=16, max_word_len=11, word_count=15),
}
