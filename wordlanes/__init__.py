"""Word-lanes puzzle generator.

Crossword-style boards whose letters are moved out to the four borders; the
player routes every letter back along its row or column.

This package exposes the public API surface via:

- ``wordlanes.engine.generator.PuzzleGenerator``: retries selection, packing and slot assignment.
- ``wordlanes.engine.batch``: preset-driven pool and daily generation.
- ``wordlanes.data.dictionary.WordDictionary``: loads and filters candidate words.
- ``wordlanes.game.session.PlaySession``: token routing rules for a generated puzzle.
"""

from .data.dictionary import DictionaryConfig, WordDictionary
from .engine.generator import GeneratorConfig, PuzzleGenerator, generate_feasible_puzzle

__all__ = [
    "DictionaryConfig",
    "GeneratorConfig",
    "PuzzleGenerator",
    "WordDictionary",
    "generate_feasible_puzzle",
]

__version__ = "0.1.0"
