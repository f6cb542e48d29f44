"""Outside-slot assignment via difficulty-biased Hopcroft-Karp matching.

Every letter cell can be fed from four border slots: the Left and Right slots
of its row and the Top and Bottom slots of its column. The single-wave
assigner looks for a perfect matching of cells to slots; the multi-wave
assigner repeats the matching on the cells left over, so each slot serves a
queue of cells, one per wave.

The difficulty only reorders each cell's candidate list. Hopcroft-Karp walks
candidates in list order, so the order decides which maximum matching comes
out, never whether one exists.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import Difficulty, Side
from ..core.exceptions import ValidationError, WaveStallError
from ..core.models import (
    CellPos,
    Grid,
    MultiWaveAssignment,
    OutsideSlot,
    SingleWaveAssignment,
    SlotRef,
    build_slots,
)
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

UNMATCHED = -1
_INF = float("inf")


# ----------------------------------------------------------------------
# Hopcroft-Karp
# ----------------------------------------------------------------------
def hopcroft_karp(adjacency: Sequence[Sequence[int]], right_size: int) -> Tuple[int, List[int]]:
    """Maximum bipartite matching.

    ``adjacency[u]`` lists right vertices for left vertex ``u`` in preference
    order. Returns the matching size and, per left vertex, its partner or
    ``UNMATCHED``.
    """

    left_size = len(adjacency)
    pair_left = [UNMATCHED] * left_size
    pair_right = [UNMATCHED] * right_size
    dist: List[float] = [0] * left_size

    def bfs() -> bool:
        queue = deque()
        for u in range(left_size):
            if pair_left[u] == UNMATCHED:
                dist[u] = 0
                queue.append(u)
            else:
                dist[u] = _INF
        found = False
        while queue:
            u = queue.popleft()
            for v in adjacency[u]:
                partner = pair_right[v]
                if partner == UNMATCHED:
                    found = True
                elif dist[partner] == _INF:
                    dist[partner] = dist[u] + 1
                    queue.append(partner)
        return found

    def dfs(u: int) -> bool:
        for v in adjacency[u]:
            partner = pair_right[v]
            if partner == UNMATCHED or (dist[partner] == dist[u] + 1 and dfs(partner)):
                pair_left[u] = v
                pair_right[v] = u
                return True
        dist[u] = _INF
        return False

    size = 0
    while bfs():
        for u in range(left_size):
            if pair_left[u] == UNMATCHED and dfs(u):
                size += 1
    return size, pair_left


# ----------------------------------------------------------------------
# Candidate ordering
# ----------------------------------------------------------------------
def lane_lengths(grid: Grid) -> Tuple[List[int], List[int]]:
    """Count fillable cells per row and per column."""

    n = len(grid)
    row_len = [0] * n
    col_len = [0] * n
    for r in range(n):
        for c in range(n):
            if grid[r][c] == 1:
                row_len[r] += 1
                col_len[c] += 1
    return row_len, col_len


def prefers_row(difficulty: Difficulty, row_len: int, col_len: int, index: int) -> bool:
    """Whether a cell should try its row's slots before its column's."""

    if difficulty is Difficulty.HARD:
        return row_len >= col_len
    if difficulty is Difficulty.EASY:
        return row_len <= col_len
    return index % 2 == 0


def _build_adjacency(
    grid: Grid,
    cells: Sequence[CellPos],
    slot_index: Mapping[OutsideSlot, int],
    difficulty: Difficulty,
) -> Optional[List[List[int]]]:
    n = len(grid)
    row_len, col_len = lane_lengths(grid)
    adjacency: List[List[int]] = []
    for u, (r, c) in enumerate(cells):
        if not (0 <= r < n and 0 <= c < n):
            return None
        row_slots = [OutsideSlot(Side.LEFT, r), OutsideSlot(Side.RIGHT, r)]
        col_slots = [OutsideSlot(Side.TOP, c), OutsideSlot(Side.BOTTOM, c)]
        if prefers_row(difficulty, row_len[r], col_len[c], u):
            ordered = row_slots + col_slots
        else:
            ordered = col_slots + row_slots
        adjacency.append([slot_index[slot] for slot in ordered if slot in slot_index])
    return adjacency


# ----------------------------------------------------------------------
# Public assigners
# ----------------------------------------------------------------------
def assign_outside_slots(
    grid: Grid,
    letters: Mapping[CellPos, str],
    *,
    difficulty: Difficulty | str = Difficulty.BALANCED,
) -> Optional[SingleWaveAssignment]:
    """Match every letter cell to its own slot, or return ``None``."""

    difficulty = Difficulty(difficulty)
    slots = build_slots(len(grid))
    cells = list(letters)
    if len(cells) > len(slots):
        LOGGER.debug("Single wave impossible: %d cells for %d slots", len(cells), len(slots))
        return None

    slot_index = {slot: v for v, slot in enumerate(slots)}
    adjacency = _build_adjacency(grid, cells, slot_index, difficulty)
    if adjacency is None:
        LOGGER.debug("Letter cell outside the %dx%d grid", len(grid), len(grid))
        return None

    size, pair_left = hopcroft_karp(adjacency, len(slots))
    if size != len(cells):
        LOGGER.debug("Matching covers %d/%d cells", size, len(cells))
        return None

    by_cell: Dict[CellPos, SlotRef] = {}
    by_slot: Dict[str, CellPos] = {}
    for u, cell in enumerate(cells):
        slot = slots[pair_left[u]]
        by_cell[cell] = SlotRef.for_slot(slot)
        by_slot[slot.id] = cell
    return SingleWaveAssignment(by_cell=by_cell, by_slot=by_slot, slots=slots)


def assign_outside_slots_in_waves(
    grid: Grid,
    letters: Mapping[CellPos, str],
    *,
    difficulty: Difficulty | str = Difficulty.BALANCED,
) -> MultiWaveAssignment:
    """Assign cells in successive matchings until every cell has a slot.

    Each wave is a maximum matching over the cells still unassigned, so a
    slot gains at most one cell per wave. A wave that matches nothing while
    cells remain raises :class:`WaveStallError`.
    """

    difficulty = Difficulty(difficulty)
    slots = build_slots(len(grid))
    cells = list(letters)
    slot_index = {slot: v for v, slot in enumerate(slots)}
    adjacency = _build_adjacency(grid, cells, slot_index, difficulty)
    if adjacency is None:
        raise ValidationError("Letter cell lies outside the grid")

    by_cell: Dict[CellPos, SlotRef] = {}
    slot_queues: Dict[str, List[CellPos]] = {slot.id: [] for slot in slots}
    remaining = list(range(len(cells)))
    wave = 0

    while remaining:
        size, pair_left = hopcroft_karp([adjacency[u] for u in remaining], len(slots))
        if size == 0:
            LOGGER.error("Wave %d matched none of %d remaining cells", wave, len(remaining))
            raise WaveStallError(f"Wave {wave} made no progress with {len(remaining)} cells left")

        leftover: List[int] = []
        for local, u in enumerate(remaining):
            v = pair_left[local]
            if v == UNMATCHED:
                leftover.append(u)
                continue
            slot = slots[v]
            slot_queues[slot.id].append(cells[u])
            by_cell[cells[u]] = SlotRef.for_slot(slot, wave=wave)
        LOGGER.debug("Wave %d assigned %d cells, %d left", wave, size, len(leftover))
        remaining = leftover
        wave += 1

    return MultiWaveAssignment(by_cell=by_cell, slot_queues=slot_queues, slots=slots)


__all__ = [
    "assign_outside_slots",
    "assign_outside_slots_in_waves",
    "hopcroft_karp",
    "lane_lengths",
    "prefers_row",
]
