"""Center a generated puzzle on a larger board."""

from __future__ import annotations

from typing import Dict, List

from ..core.models import (
    Assignment,
    CellPos,
    MultiWaveAssignment,
    OutsideSlot,
    Puzzle,
    SingleWaveAssignment,
    SlotRef,
    build_slots,
)


def _shift_ref(ref: SlotRef, pad: int) -> SlotRef:
    return SlotRef.for_slot(ref.slot.shifted(pad), wave=ref.wave)


def shift_assignment(assignment: Assignment, pad: int, target_n: int) -> Assignment:
    """Move every cell key and slot lane by ``pad`` on both axes."""

    slots = build_slots(target_n)
    by_cell: Dict[CellPos, SlotRef] = {
        (r + pad, c + pad): _shift_ref(ref, pad) for (r, c), ref in assignment.by_cell.items()
    }
    if isinstance(assignment, SingleWaveAssignment):
        by_slot = {ref.slot_id: pos for pos, ref in by_cell.items()}
        return SingleWaveAssignment(by_cell=by_cell, by_slot=by_slot, slots=slots)

    queues: Dict[str, List[CellPos]] = {slot.id: [] for slot in slots}
    for slot_id, queue in assignment.slot_queues.items():
        new_id = OutsideSlot.from_id(slot_id).shifted(pad).id
        queues[new_id] = [(r + pad, c + pad) for r, c in queue]
    return MultiWaveAssignment(by_cell=by_cell, slot_queues=queues, slots=slots)


def pad_puzzle(puzzle: Puzzle, target_n: int) -> Puzzle:
    """Pad ``puzzle`` to ``target_n`` with equal top and left margins.

    The margin is ``(target_n - n) // 2`` on both axes, so any odd spare
    row or column lands at the bottom and right.
    """

    n = puzzle.size
    if target_n < n:
        raise ValueError(f"Cannot pad a {n}x{n} grid down to {target_n}")
    pad = (target_n - n) // 2

    grid = [[0] * target_n for _ in range(target_n)]
    for r in range(n):
        for c in range(n):
            grid[r + pad][c + pad] = puzzle.grid[r][c]
    letters = {(r + pad, c + pad): ch for (r, c), ch in puzzle.letters.items()}

    return Puzzle(
        grid=grid,
        letters=letters,
        words=list(puzzle.words),
        slot_assignment=shift_assignment(puzzle.slot_assignment, pad, target_n),
        attempts=puzzle.attempts,
    )


__all__ = ["pad_puzzle", "shift_assignment"]
