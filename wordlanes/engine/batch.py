"""Preset-driven batch and daily puzzle generation."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date as Date
from typing import List, Optional

from ..core.constants import SIZE_PRESETS, Difficulty
from ..core.models import Puzzle
from ..data.seeding import daily_seed, rng_for
from ..utils.logger import get_logger
from .generator import GeneratorConfig, PuzzleGenerator, WordSource
from .layout import pad_puzzle


LOGGER = get_logger(__name__)


@dataclass
class DailyPuzzle:
    day: str
    size_key: str
    difficulty: Difficulty
    seed_str: str
    seed_num: int
    puzzle: Puzzle


def generate_padded(
    dictionary: WordSource,
    size_key: str,
    difficulty: Difficulty | str,
    rng: random.Random,
    **overrides,
) -> Puzzle:
    """Generate one puzzle that fits the preset board and center it there."""

    config = GeneratorConfig.from_preset(size_key, difficulty, **overrides)
    puzzle = PuzzleGenerator(config, dictionary, rng=rng).generate()
    return pad_puzzle(puzzle, SIZE_PRESETS[size_key].n)


def generate_batch(
    dictionary: WordSource,
    size_key: str,
    difficulty: Difficulty | str,
    count: int,
    seed: Optional[int] = None,
    **overrides,
) -> List[Puzzle]:
    if count < 1:
        raise ValueError("count must be at least 1")
    rng = random.Random(seed)
    puzzles: List[Puzzle] = []
    for index in range(count):
        puzzles.append(generate_padded(dictionary, size_key, difficulty, rng, **overrides))
        if (index + 1) % 5 == 0:
            LOGGER.info("[%s/%s] %d/%d generated", size_key, Difficulty(difficulty).value, index + 1, count)
    return puzzles


def generate_daily(
    dictionary: WordSource,
    day: Date | str,
    size_key: str,
    difficulty: Difficulty | str,
    **overrides,
) -> DailyPuzzle:
    """Generate the puzzle for ``day``; the same inputs always give the same puzzle."""

    seed_str, seed_num = daily_seed(day, size_key, difficulty)
    puzzle = generate_padded(dictionary, size_key, difficulty, rng_for(seed_num), **overrides)
    return DailyPuzzle(
        day=seed_str.split(":", 1)[0],
        size_key=size_key,
        difficulty=Difficulty(difficulty),
        seed_str=seed_str,
        seed_num=seed_num,
        puzzle=puzzle,
    )


__all__ = ["DailyPuzzle", "generate_batch", "generate_daily", "generate_padded"]
