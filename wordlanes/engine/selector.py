"""Connected word selection.

Words are drawn from a shuffled pool so that each new word shares at least
one letter with a word already chosen. Sharing is by character set, not by
position; whether the set actually packs onto a board is decided later by
the packer.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

from ..core.constants import MAX_WORD_LEN, MIN_WORD_LEN, WORD_COUNT
from ..core.exceptions import SelectionError


def shares_letter(a: str, b: str) -> bool:
    return not set(a).isdisjoint(b)


def pick_connected_words(
    words: Iterable[str],
    *,
    min_word_len: int = MIN_WORD_LEN,
    max_word_len: int = MAX_WORD_LEN,
    word_count: int = WORD_COUNT,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Return ``word_count`` distinct words forming a letter-sharing chain.

    Raises :class:`SelectionError` when the range holds no words or when the
    shuffled pool runs dry before ``word_count`` words are connected.
    """

    rng = rng or random.Random()
    pool = [w for w in dict.fromkeys(words) if min_word_len <= len(w) <= max_word_len]
    if not pool:
        raise SelectionError(f"No words between {min_word_len} and {max_word_len} letters")
    rng.shuffle(pool)

    chosen = [pool.pop()]
    while len(chosen) < word_count and pool:
        index = next(
            (i for i, candidate in enumerate(pool) if any(shares_letter(c, candidate) for c in chosen)),
            None,
        )
        if index is None:
            break
        chosen.append(pool.pop(index))

    if len(chosen) < word_count:
        raise SelectionError(f"Insufficient overlap: connected {len(chosen)}/{word_count} words")
    return chosen


__all__ = ["pick_connected_words", "shares_letter"]
