"""Pretty-print helpers for puzzles and their border slots."""

from __future__ import annotations

import sys
from collections import Counter
from typing import Dict, List

from ..core.constants import Side
from ..core.models import MultiWaveAssignment, Puzzle


BLOCKED = "#"
EMPTY_SLOT = "."


def _slot_letters(puzzle: Puzzle) -> Dict[str, str]:
    """Letter shown in each slot: its cell's letter, or the queue head for waves."""

    letters = puzzle.letters
    return {slot_id: letters[pos] for slot_id, pos in puzzle.slot_assignment.by_slot.items()}


def format_puzzle(puzzle: Puzzle, *, show_letters: bool = True) -> str:
    """Render the grid framed by its four rows/columns of border slots."""

    n = puzzle.size
    shown = _slot_letters(puzzle)

    def slot(side: Side, index: int) -> str:
        return shown.get(f"{side.value}:{index}", EMPTY_SLOT)

    def cell(r: int, c: int) -> str:
        if puzzle.grid[r][c] != 1:
            return BLOCKED
        return puzzle.letters.get((r, c), "?") if show_letters else "_"

    pad = "    "
    lines = [pad + " ".join(f"{slot(Side.TOP, c):>2}" for c in range(n))]
    lines.append(pad + "-" * (3 * n - 1))
    for r in range(n):
        body = " ".join(f"{cell(r, c):>2}" for c in range(n))
        lines.append(f"{slot(Side.LEFT, r):>2} |{body} | {slot(Side.RIGHT, r)}")
    lines.append(pad + "-" * (3 * n - 1))
    lines.append(pad + " ".join(f"{slot(Side.BOTTOM, c):>2}" for c in range(n)))
    return "\n".join(lines)


def print_puzzle_stats(puzzle: Puzzle, *, stream=None) -> None:
    """Print the grid followed by board, word and slot statistics."""

    stream = stream or sys.stdout
    print(format_puzzle(puzzle), file=stream)

    n = puzzle.size
    total_cells = n * n
    letter_cells = len(puzzle.letters)

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {n} x {n} ({total_cells} cells)", file=stream)
    print(f"  Letters:       {letter_cells} ({letter_cells / total_cells * 100:.0f}%)", file=stream)
    print(f"  Attempts:      {puzzle.attempts}", file=stream)

    lengths = [len(w) for w in puzzle.words]
    print(file=stream)
    print("--- Words ---", file=stream)
    print(f"  Count:         {len(puzzle.words)}", file=stream)
    if lengths:
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        dist_parts = [f"{l}:{c}" for l, c in sorted(Counter(lengths).items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
        print(f"  Words:         {', '.join(puzzle.words)}", file=stream)

    assignment = puzzle.slot_assignment
    print(file=stream)
    print("--- Slots ---", file=stream)
    if isinstance(assignment, MultiWaveAssignment):
        depths: List[int] = [len(q) for q in assignment.slot_queues.values() if q]
        print("  Mode:          waves", file=stream)
        print(f"  Waves:         {assignment.wave_count}", file=stream)
        print(f"  Busy slots:    {len(depths)}/{len(assignment.slots)}", file=stream)
        if depths:
            print(f"  Deepest queue: {max(depths)}", file=stream)
    else:
        print("  Mode:          single", file=stream)
        print(f"  Used slots:    {len(assignment.by_slot)}/{len(assignment.slots)}", file=stream)

    rows = sum(1 for ref in assignment.by_cell.values() if ref.side.is_row_lane)
    print(f"  Row lanes:     {rows}", file=stream)
    print(f"  Column lanes:  {len(assignment.by_cell) - rows}", file=stream)


__all__ = ["format_puzzle", "print_puzzle_stats"]
