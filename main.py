"""CLI entrypoint for the word-lanes puzzle generator."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import List

from wordlanes.core.constants import SIZE_PRESETS, Difficulty
from wordlanes.data.dictionary import DEFAULT_WORDS_PATH, DictionaryConfig, WordDictionary
from wordlanes.engine.batch import generate_batch, generate_daily
from wordlanes.engine.generator import GeneratorConfig, PuzzleGenerator
from wordlanes.io.serialization import puzzle_to_jsonable
from wordlanes.io.store import DEFAULT_STORE_DIR, PuzzleStore
from wordlanes.utils.logger import configure_logging, get_logger
from wordlanes.utils.pretty import print_puzzle_stats


LOGGER = get_logger("wordlanes.cli")

DIFFICULTIES = [d.value for d in Difficulty]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate word-lanes puzzles: crossword grids whose letters start on the borders",
    )
    parser.add_argument(
        "--dictionary",
        type=Path,
        default=DEFAULT_WORDS_PATH,
        help="Word list, one word per line (# comments and blank lines ignored)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a single puzzle")
    gen.add_argument("--size", choices=sorted(SIZE_PRESETS), help="Use a size preset and pad to its board")
    gen.add_argument("--difficulty", choices=DIFFICULTIES, default=Difficulty.BALANCED.value)
    gen.add_argument("--min-word-len", type=int, default=None)
    gen.add_argument("--max-word-len", type=int, default=None)
    gen.add_argument("--word-count", type=int, default=None)
    gen.add_argument("--min-letters", type=int, default=0, help="Density target in letter cells (0 disables)")
    gen.add_argument("--single-wave", action="store_true", help="Require one letter per border slot")
    gen.add_argument("--max-attempts", type=int, default=None, help="Give up after this many attempts")
    gen.add_argument("--output", type=Path, help="Write the puzzle as JSON instead of printing it")

    pool = sub.add_parser("pool", help="Append puzzles to the per-size pool files")
    pool.add_argument("--size", choices=sorted(SIZE_PRESETS), default="medium")
    pool.add_argument("--difficulty", choices=DIFFICULTIES, default=Difficulty.BALANCED.value)
    pool.add_argument("--count", type=int, default=10, help="Puzzles per size/difficulty pair")
    pool.add_argument("--all", action="store_true", help="Every size and difficulty")
    pool.add_argument("--out", type=Path, default=DEFAULT_STORE_DIR, help="Pool directory")

    daily = sub.add_parser("daily", help="Generate the seeded daily puzzles")
    daily.add_argument("--date", type=date.fromisoformat, default=None, help="First day (YYYY-MM-DD, default today)")
    daily.add_argument("--days", type=int, default=1, help="Number of consecutive days")
    daily.add_argument("--out", type=Path, default=DEFAULT_STORE_DIR, help="Store directory")
    return parser


def load_dictionary(path: Path) -> WordDictionary:
    dictionary = WordDictionary(DictionaryConfig(path=path))
    by_length = ", ".join(f"{length}:{count}" for length, count in dictionary.count_by_length().items())
    LOGGER.info("Loaded %d words from %s (by length %s)", len(dictionary), path, by_length)
    return dictionary


def run_generate(args: argparse.Namespace, dictionary: WordDictionary) -> None:
    overrides = {
        "min_letters": args.min_letters,
        "waves": not args.single_wave,
        "max_attempts": args.max_attempts,
    }
    for field_name in ("min_word_len", "max_word_len", "word_count"):
        value = getattr(args, field_name)
        if value is not None:
            overrides[field_name] = value

    if args.size:
        puzzle = generate_batch(dictionary, args.size, args.difficulty, 1, seed=args.seed, **overrides)[0]
    else:
        config = GeneratorConfig(difficulty=args.difficulty, seed=args.seed, **overrides)
        puzzle = PuzzleGenerator(config, dictionary).generate()

    if args.output:
        args.output.write_text(
            json.dumps(puzzle_to_jsonable(puzzle), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        LOGGER.info("Puzzle written to %s", args.output)
    else:
        print_puzzle_stats(puzzle)


def run_pool(args: argparse.Namespace, dictionary: WordDictionary) -> None:
    if args.count < 1:
        raise SystemExit("--count must be at least 1")
    sizes: List[str] = list(SIZE_PRESETS) if args.all else [args.size]
    difficulties: List[str] = DIFFICULTIES if args.all else [args.difficulty]
    store = PuzzleStore(args.out)
    for size_key in sizes:
        for difficulty in difficulties:
            seed = None if args.seed is None else args.seed + len(store.load_pool(size_key, difficulty))
            puzzles = generate_batch(dictionary, size_key, difficulty, args.count, seed=seed)
            store.save_pool(size_key, difficulty, puzzles)


def run_daily(args: argparse.Namespace, dictionary: WordDictionary) -> None:
    if args.days < 1:
        raise SystemExit("--days must be at least 1")
    first = args.date or date.today()
    store = PuzzleStore(args.out)
    for offset in range(args.days):
        day = first + timedelta(days=offset)
        for size_key in SIZE_PRESETS:
            for difficulty in DIFFICULTIES:
                result = generate_daily(dictionary, day, size_key, difficulty)
                store.save_daily(
                    result.day, size_key, difficulty, result.puzzle, result.seed_str, result.seed_num
                )


COMMANDS = {
    "generate": run_generate,
    "pool": run_pool,
    "daily": run_daily,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    dictionary = load_dictionary(args.dictionary)
    COMMANDS[args.command](args, dictionary)


if __name__ == "__main__":  # pragma: no cover
    main()
