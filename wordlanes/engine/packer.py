"""Backtracking packer that interlocks the selected words on a board."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.exceptions import PackingError
from .board import Board
from .overlaps import OverlapMap, build_overlap_map, overlap_degree
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def solve(
    board: Board,
    remaining: Sequence[str],
    overlaps: OverlapMap,
    *,
    max_steps: Optional[int] = None,
) -> bool:
    """Place every word in ``remaining`` by crossing an earlier placement.

    Words with the fewest overlap partners go first. Each candidate crossing
    is committed, recursed on, and undone if the rest cannot be placed. When
    ``max_steps`` is set, more than that many placement attempts raise
    :class:`PackingError`; the board is then left mid-search.
    """

    steps = 0

    def _descend(words: List[str]) -> bool:
        nonlocal steps
        if not words:
            return True

        words = sorted(words, key=lambda w: overlap_degree(w, overlaps))
        word, rest = words[0], words[1:]
        shared_with = overlaps.get(word, {})

        # Placements appended deeper in the recursion are undone before the
        # next candidate, so the log prefix iterated here stays fixed.
        for placed in list(board.placements):
            shared = shared_with.get(placed.word)
            if not shared:
                continue
            direction = placed.direction.crossing
            for i, j in shared:
                steps += 1
                if max_steps is not None and steps > max_steps:
                    raise PackingError(f"Search budget of {max_steps} placements exhausted")
                if not board.try_place(word, placed, i, j, direction):
                    continue
                if _descend(rest):
                    return True
                board.undo()
        return False

    return _descend(list(remaining))


def pack_words(
    words: Sequence[str],
    overlaps: Optional[OverlapMap] = None,
    *,
    max_steps: Optional[int] = None,
) -> Board:
    """Anchor the first word and pack the rest, raising when no layout exists."""

    if not words:
        raise PackingError("No words to pack")
    overlaps = overlaps if overlaps is not None else build_overlap_map(words)
    board = Board()
    board.place_anchor(words[0])
    if not solve(board, words[1:], overlaps, max_steps=max_steps):
        raise PackingError(f"No interlocking layout for {len(words)} words")
    LOGGER.debug("Packed %d words into %d cells", len(words), len(board))
    return board


__all__ = ["pack_words", "solve"]
