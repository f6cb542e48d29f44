"""Puzzle assembly with retries.

Each attempt runs the whole pipeline on fresh state:
  1. Selection: draw a letter-connected set of words.
  2. Packing: interlock them on a board by backtracking.
  3. Finalize: normalize to a square grid, enforcing density and size limits.
  4. Assignment: route every letter cell to a border slot.
Any stage failure discards the attempt and starts over from selection.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

from ..core.constants import (
    MAX_WORD_LEN,
    MIN_WORD_LEN,
    SIZE_PRESETS,
    WORD_COUNT,
    WORD_COUNT_HEADROOM,
    Difficulty,
)
from ..core.exceptions import (
    AssignmentError,
    GenerationError,
    PackingError,
    SelectionError,
    ValidationError,
    WaveStallError,
)
from ..core.models import Assignment, FinalizedGrid, Puzzle
from ..data.dictionary import WordDictionary
from ..utils.logger import get_logger
from .finalize import finalize
from .matching import assign_outside_slots, assign_outside_slots_in_waves
from .overlaps import build_overlap_map
from .packer import pack_words
from .selector import pick_connected_words
from .validator import PuzzleValidator


LOGGER = get_logger(__name__)

WordSource = Union[WordDictionary, Iterable[str]]


@dataclass
class GeneratorConfig:
    difficulty: Difficulty = Difficulty.BALANCED
    min_word_len: int = MIN_WORD_LEN
    max_word_len: int = MAX_WORD_LEN
    word_count: int = WORD_COUNT
    min_letters: int = 0
    max_word_count_cap: Optional[int] = None
    waves: bool = True
    seed: Optional[int] = None
    max_attempts: Optional[int] = None
    max_grid_size: Optional[int] = None
    max_pack_steps: Optional[int] = 50_000
    yield_every: int = 25
    validate: bool = True

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)

    @property
    def word_count_cap(self) -> int:
        if self.max_word_count_cap is not None:
            return self.max_word_count_cap
        return self.word_count + WORD_COUNT_HEADROOM

    def check(self) -> None:
        """Reject settings no dictionary could ever satisfy."""

        if self.min_word_len < 1 or self.min_word_len > self.max_word_len:
            raise ValueError(
                f"Invalid word length range [{self.min_word_len}, {self.max_word_len}]"
            )
        if self.word_count < 1:
            raise ValueError("word_count must be at least 1")
        if self.min_letters < 0:
            raise ValueError("min_letters cannot be negative")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_grid_size is not None and self.max_grid_size < self.min_word_len:
            raise ValueError("max_grid_size cannot hold a single word")
        if self.max_pack_steps is not None and self.max_pack_steps < 1:
            raise ValueError("max_pack_steps must be at least 1")
        if self.yield_every < 1:
            raise ValueError("yield_every must be at least 1")

    @classmethod
    def from_preset(
        cls,
        size_key: str,
        difficulty: Difficulty | str = Difficulty.BALANCED,
        seed: Optional[int] = None,
        **overrides,
    ) -> "GeneratorConfig":
        try:
            preset = SIZE_PRESETS[size_key]
        except KeyError as exc:
            raise ValueError(f"Unknown size preset: {size_key}") from exc
        fields = {
            "min_word_len": preset.min_word_len,
            "max_word_len": preset.max_word_len,
            "word_count": preset.word_count,
            "max_grid_size": preset.n,
        }
        fields.update(overrides)
        return cls(difficulty=Difficulty(difficulty), seed=seed, **fields)


class PuzzleGenerator:
    """Retries selection, packing and slot assignment until a puzzle survives."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        dictionary: Optional[WordSource] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.config.check()
        if dictionary is None:
            dictionary = WordDictionary()
        elif not isinstance(dictionary, WordDictionary):
            dictionary = WordDictionary.from_words(dictionary)
        self.dictionary = dictionary
        self.rng = rng or random.Random(self.config.seed)
        self.validator = PuzzleValidator()
        self._pool: List[str] = dictionary.words(self.config.min_word_len, self.config.max_word_len)
        if self.config.word_count > len(self._pool):
            raise ValueError(
                f"word_count {self.config.word_count} exceeds the {len(self._pool)} words of "
                f"length {self.config.min_word_len}-{self.config.max_word_len} in the dictionary"
            )

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate(self) -> Puzzle:
        for puzzle in self._iter_attempts():
            if puzzle is not None:
                return puzzle
        raise GenerationError("Attempt loop ended without a puzzle")  # pragma: no cover

    async def generate_async(self) -> Puzzle:
        """Same as :meth:`generate`, yielding to the event loop periodically."""

        failures = 0
        for puzzle in self._iter_attempts():
            if puzzle is not None:
                return puzzle
            failures += 1
            if failures % self.config.yield_every == 0:
                await asyncio.sleep(0)
        raise GenerationError("Attempt loop ended without a puzzle")  # pragma: no cover

    # ------------------------------------------------------------------
    # Attempt loop
    # ------------------------------------------------------------------
    def _iter_attempts(self) -> Iterator[Optional[Puzzle]]:
        """Yield ``None`` per failed attempt and finally the puzzle."""

        config = self.config
        word_count = max(1, config.word_count)
        attempt = 0
        while True:
            attempt += 1
            if config.max_attempts is not None and attempt > config.max_attempts:
                raise GenerationError(f"No puzzle after {config.max_attempts} attempts")
            try:
                words = pick_connected_words(
                    self._pool,
                    min_word_len=config.min_word_len,
                    max_word_len=config.max_word_len,
                    word_count=word_count,
                    rng=self.rng,
                )
                board = pack_words(words, build_overlap_map(words), max_steps=config.max_pack_steps)
                out = finalize(board)

                if self._below_density(out, word_count):
                    word_count += 1
                    LOGGER.debug(
                        "Attempt %d: %d letters below target %d, raising word count to %d",
                        attempt, len(out.letters), config.min_letters, word_count,
                    )
                    yield None
                    continue
                if config.max_grid_size is not None and out.size > config.max_grid_size:
                    LOGGER.debug(
                        "Attempt %d: grid %d exceeds %d", attempt, out.size, config.max_grid_size
                    )
                    yield None
                    continue

                puzzle = Puzzle(
                    grid=out.grid,
                    letters=out.letters,
                    words=out.words,
                    slot_assignment=self._assign(out),
                    attempts=attempt,
                )
                if config.validate:
                    result = self.validator.validate_puzzle(puzzle)
                    if not result.ok:
                        raise ValidationError(f"Puzzle validation failed: {result.messages}")
            except WaveStallError:
                raise
            except (SelectionError, PackingError, AssignmentError, ValidationError) as exc:
                LOGGER.debug("Attempt %d failed: %s", attempt, exc)
                yield None
                continue

            LOGGER.info(
                "Puzzle ready after %d attempts: %dx%d, %d letters, %d words",
                attempt, puzzle.size, puzzle.size, len(puzzle.letters), len(puzzle.words),
            )
            yield puzzle
            return

    def _below_density(self, out: FinalizedGrid, word_count: int) -> bool:
        """True when the board is too sparse and the word count may still grow."""

        if self.config.min_letters <= 0:
            return False
        target = min(self.config.min_letters, 16 * out.size)
        if len(out.letters) >= target:
            return False
        cap = min(self.config.word_count_cap, len(self._pool))
        if word_count >= cap:
            LOGGER.debug(
                "Density target %d unreachable at word count cap %d; accepting %d letters",
                target, cap, len(out.letters),
            )
            return False
        return True

    def _assign(self, out: FinalizedGrid) -> Assignment:
        if self.config.waves:
            return assign_outside_slots_in_waves(
                out.grid, out.letters, difficulty=self.config.difficulty
            )
        assignment = assign_outside_slots(out.grid, out.letters, difficulty=self.config.difficulty)
        if assignment is None:
            raise AssignmentError(
                f"No perfect matching for {len(out.letters)} cells on {out.size}x{out.size}"
            )
        return assignment


# ----------------------------------------------------------------------
# Functional wrappers
# ----------------------------------------------------------------------
def generate_feasible_puzzle(
    dictionary: WordSource,
    rng: Optional[random.Random] = None,
    **options,
) -> Puzzle:
    """Generate one puzzle; ``options`` are :class:`GeneratorConfig` fields."""

    return PuzzleGenerator(GeneratorConfig(**options), dictionary, rng=rng).generate()


async def generate_feasible_puzzle_async(
    dictionary: WordSource,
    rng: Optional[random.Random] = None,
    **options,
) -> Puzzle:
    return await PuzzleGenerator(GeneratorConfig(**options), dictionary, rng=rng).generate_async()


__all__ = [
    "GeneratorConfig",
    "PuzzleGenerator",
    "generate_feasible_puzzle",
    "generate_feasible_puzzle_async",
]
