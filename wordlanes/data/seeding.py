"""Deterministic seeds for daily puzzles."""

from __future__ import annotations

import random
from datetime import date as Date
from typing import Tuple, Union

from ..core.constants import Difficulty

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
_MASK32 = 0xFFFFFFFF


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of ``text``."""

    value = FNV_OFFSET_BASIS
    encoded = text.encode("utf-16-le")
    for index in range(0, len(encoded), 2):
        value ^= encoded[index] | (encoded[index + 1] << 8)
        value = (value * FNV_PRIME) & _MASK32
    return value


def daily_seed_string(day: Union[Date, str], size_key: str, difficulty: Difficulty | str) -> str:
    day_text = day.isoformat() if isinstance(day, Date) else str(day)
    return f"{day_text}:{size_key}:{Difficulty(difficulty).value}"


def daily_seed(day: Union[Date, str], size_key: str, difficulty: Difficulty | str) -> Tuple[str, int]:
    """Return the seed string for a day's puzzle and its numeric hash."""

    seed_str = daily_seed_string(day, size_key, difficulty)
    return seed_str, fnv1a_32(seed_str)


def rng_for(seed: int) -> random.Random:
    return random.Random(seed)


__all__ = ["daily_seed", "daily_seed_string", "fnv1a_32", "rng_for"]
