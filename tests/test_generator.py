import asyncio
import random
import unittest
from datetime import date

from wordlanes.core.constants import SIZE_PRESETS, Difficulty
from wordlanes.core.exceptions import GenerationError
from wordlanes.core.models import MultiWaveAssignment, SingleWaveAssignment
from wordlanes.data.dictionary import WordDictionary
from wordlanes.data.seeding import daily_seed, fnv1a_32
from wordlanes.engine.batch import generate_batch, generate_daily
from wordlanes.engine.generator import (
    GeneratorConfig,
    PuzzleGenerator,
    generate_feasible_puzzle,
    generate_feasible_puzzle_async,
)
from wordlanes.engine.validator import PuzzleValidator


BIRDS = ["crane", "raven", "eagle", "nurse"]


class GeneratorConfigTests(unittest.TestCase):
    def test_difficulty_strings_are_coerced(self) -> None:
        self.assertIs(GeneratorConfig(difficulty="hard").difficulty, Difficulty.HARD)
        with self.assertRaises(ValueError):
            GeneratorConfig(difficulty="brutal")

    def test_word_count_cap_defaults_to_headroom(self) -> None:
        self.assertEqual(GeneratorConfig(word_count=7).word_count_cap, 15)
        self.assertEqual(GeneratorConfig(word_count=7, max_word_count_cap=9).word_count_cap, 9)

    def test_invalid_settings_are_rejected_eagerly(self) -> None:
        for bad in (
            GeneratorConfig(min_word_len=6, max_word_len=4),
            GeneratorConfig(word_count=0),
            GeneratorConfig(max_attempts=0),
            GeneratorConfig(yield_every=0),
        ):
            with self.assertRaises(ValueError):
                PuzzleGenerator(bad, BIRDS)

    def test_from_preset(self) -> None:
        config = GeneratorConfig.from_preset("small", "easy", seed=4)
        self.assertEqual(config.max_grid_size, 8)
        self.assertEqual(config.max_word_len, 5)
        self.assertEqual(config.word_count, 7)
        self.assertEqual(config.seed, 4)
        self.assertEqual(GeneratorConfig.from_preset("large", word_count=12).word_count, 12)
        with self.assertRaises(ValueError):
            GeneratorConfig.from_preset("huge")


class PuzzleGeneratorTests(unittest.TestCase):
    def test_birds_puzzle_uses_every_word(self) -> None:
        puzzle = generate_feasible_puzzle(BIRDS, word_count=4, max_word_len=5, seed=5)

        self.assertEqual(sorted(puzzle.words), ["CRANE", "EAGLE", "NURSE", "RAVEN"])
        self.assertIsInstance(puzzle.slot_assignment, MultiWaveAssignment)
        self.assertGreaterEqual(puzzle.attempts, 1)
        self.assertTrue(PuzzleValidator().validate_puzzle(puzzle).ok)

    def test_single_wave_mode(self) -> None:
        puzzle = generate_feasible_puzzle(BIRDS, word_count=4, max_word_len=5, seed=9, waves=False)
        self.assertIsInstance(puzzle.slot_assignment, SingleWaveAssignment)
        self.assertEqual(len(puzzle.slot_assignment.by_slot), len(puzzle.letters))

    def test_same_seed_same_puzzle(self) -> None:
        first = generate_feasible_puzzle(BIRDS, word_count=4, max_word_len=5, seed=21)
        second = generate_feasible_puzzle(BIRDS, rng=random.Random(21), word_count=4, max_word_len=5)
        self.assertEqual(first, second)

    def test_unreachable_density_stops_at_word_count_cap(self) -> None:
        dictionary = WordDictionary()
        config = GeneratorConfig(
            word_count=4,
            max_word_len=5,
            min_letters=1000,
            max_word_count_cap=5,
            seed=8,
        )
        puzzle = PuzzleGenerator(config, dictionary).generate()
        self.assertEqual(len(puzzle.words), 5)

    def test_density_growth_stops_when_the_pool_runs_out(self) -> None:
        puzzle = generate_feasible_puzzle(
            BIRDS, word_count=4, max_word_len=5, min_letters=1000, seed=1, max_attempts=50
        )
        self.assertEqual(sorted(puzzle.words), ["CRANE", "EAGLE", "NURSE", "RAVEN"])

    def test_word_count_larger_than_pool_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PuzzleGenerator(GeneratorConfig(word_count=5, max_word_len=5), BIRDS)
        with self.assertRaises(ValueError):
            generate_feasible_puzzle(BIRDS, word_count=4, min_word_len=6)

    def test_attempt_cap_raises(self) -> None:
        config = GeneratorConfig(word_count=2, min_word_len=4, max_word_len=4, max_attempts=3, seed=1)
        generator = PuzzleGenerator(config, ["abcd", "efgh"])
        with self.assertRaises(GenerationError):
            generator.generate()

    def test_async_generation(self) -> None:
        config = GeneratorConfig(word_count=4, max_word_len=5, seed=13, yield_every=1)
        puzzle = asyncio.run(PuzzleGenerator(config, BIRDS).generate_async())
        self.assertEqual(len(puzzle.words), 4)

        other = asyncio.run(generate_feasible_puzzle_async(BIRDS, word_count=4, max_word_len=5, seed=13))
        self.assertEqual(other, puzzle)


class SeedingTests(unittest.TestCase):
    def test_fnv1a_reference_values(self) -> None:
        self.assertEqual(fnv1a_32(""), 0x811C9DC5)
        self.assertEqual(fnv1a_32("a"), 0xE40C292C)
        self.assertEqual(fnv1a_32("foobar"), 0xBF9CF968)

    def test_daily_seed_string(self) -> None:
        seed_str, seed_num = daily_seed(date(2024, 1, 2), "small", Difficulty.EASY)
        self.assertEqual(seed_str, "2024-01-02:small:easy")
        self.assertEqual(seed_num, fnv1a_32("2024-01-02:small:easy"))
        self.assertEqual(daily_seed("2024-01-02", "small", "easy"), (seed_str, seed_num))


class BatchTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.dictionary = WordDictionary()

    def test_batch_puzzles_are_padded_to_preset(self) -> None:
        puzzles = generate_batch(self.dictionary, "small", "easy", 2, seed=11)
        self.assertEqual(len(puzzles), 2)
        validator = PuzzleValidator()
        for puzzle in puzzles:
            self.assertEqual(puzzle.size, SIZE_PRESETS["small"].n)
            self.assertEqual(len(puzzle.words), 7)
            self.assertTrue(all(len(word) <= 5 for word in puzzle.words))
            self.assertTrue(validator.validate_puzzle(puzzle).ok)

    def test_batch_count_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            generate_batch(self.dictionary, "small", "easy", 0)

    def test_daily_puzzle_is_reproducible(self) -> None:
        first = generate_daily(self.dictionary, date(2025, 3, 14), "small", "hard")
        second = generate_daily(self.dictionary, "2025-03-14", "small", "hard")

        self.assertEqual(first.day, "2025-03-14")
        self.assertEqual(first.seed_str, "2025-03-14:small:hard")
        self.assertEqual(first.seed_num, second.seed_num)
        self.assertEqual(first.puzzle, second.puzzle)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
