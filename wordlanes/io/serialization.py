"""JSON-ready conversion of puzzles.

Maps keyed by cell or slot are stored as arrays of ``[key, value]`` pairs,
with cells written as ``"r,c"`` strings and slots as ``"<side>:<index>"``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..core.constants import Side
from ..core.exceptions import ValidationError
from ..core.models import (
    Assignment,
    CellPos,
    MultiWaveAssignment,
    OutsideSlot,
    Puzzle,
    SingleWaveAssignment,
    SlotRef,
    build_slots,
    cell_key,
    parse_cell_key,
)


KIND_SINGLE = "single"
KIND_WAVES = "waves"


def _ref_to_jsonable(ref: SlotRef) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"side": ref.side.value, "index": ref.index, "id": ref.slot_id}
    if ref.wave is not None:
        payload["wave"] = ref.wave
    return payload


def _slot_to_jsonable(slot: OutsideSlot) -> Dict[str, Any]:
    return {"id": slot.id, "side": slot.side.value, "index": slot.index}


def assignment_to_jsonable(assignment: Assignment) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "kind": KIND_WAVES if isinstance(assignment, MultiWaveAssignment) else KIND_SINGLE,
        "byCell": [[cell_key(*pos), _ref_to_jsonable(ref)] for pos, ref in assignment.by_cell.items()],
        "bySlot": [[slot_id, cell_key(*pos)] for slot_id, pos in assignment.by_slot.items()],
        "slots": [_slot_to_jsonable(slot) for slot in assignment.slots],
    }
    if isinstance(assignment, MultiWaveAssignment):
        payload["slotQueues"] = [
            [slot_id, [cell_key(*pos) for pos in queue]]
            for slot_id, queue in assignment.slot_queues.items()
        ]
    return payload


def puzzle_to_jsonable(puzzle: Puzzle) -> Dict[str, Any]:
    return {
        "N": puzzle.size,
        "grid": [list(row) for row in puzzle.grid],
        "letters": [[cell_key(*pos), letter] for pos, letter in puzzle.letters.items()],
        "words": list(puzzle.words),
        "slotAssignment": assignment_to_jsonable(puzzle.slot_assignment),
    }


# ----------------------------------------------------------------------
# Reading
# ----------------------------------------------------------------------
def _pairs(raw: Any, label: str) -> List[List[Any]]:
    if not isinstance(raw, list) or not all(isinstance(p, list) and len(p) == 2 for p in raw):
        raise ValidationError(f"'{label}' must be a list of [key, value] pairs")
    return raw


def _ref_from_jsonable(raw: Any) -> SlotRef:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Malformed slot reference: {raw!r}")
    try:
        side = Side(raw["side"])
        index = int(raw["index"])
        wave = raw.get("wave")
        wave = int(wave) if wave is not None else None
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed slot reference: {raw!r}") from exc
    return SlotRef.for_slot(OutsideSlot(side, index), wave=wave)


def _slots_from_jsonable(raw: Any, n: int) -> List[OutsideSlot]:
    if raw is None:
        return build_slots(n)
    if not isinstance(raw, list) or not all(isinstance(s, Mapping) and isinstance(s.get("id"), str) for s in raw):
        raise ValidationError("'slots' must be a list of objects with a string 'id'")
    return [OutsideSlot.from_id(s["id"]) for s in raw] or build_slots(n)


def assignment_from_jsonable(raw: Mapping[str, Any], n: int) -> Assignment:
    if not isinstance(raw, Mapping):
        raise ValidationError("'slotAssignment' must be an object")
    kind = raw.get("kind") or (KIND_WAVES if raw.get("slotQueues") is not None else KIND_SINGLE)
    by_cell: Dict[CellPos, SlotRef] = {
        parse_cell_key(key): _ref_from_jsonable(value)
        for key, value in _pairs(raw.get("byCell"), "byCell")
    }
    slots = _slots_from_jsonable(raw.get("slots"), n)

    if kind == KIND_WAVES:
        queues: Dict[str, List[CellPos]] = {slot.id: [] for slot in slots}
        for slot_id, keys in _pairs(raw.get("slotQueues"), "slotQueues"):
            if not isinstance(keys, list):
                raise ValidationError(f"Queue for slot {slot_id!r} must be a list of cell keys")
            queues[slot_id] = [parse_cell_key(key) for key in keys]
        if any(ref.wave is None for ref in by_cell.values()):
            # Older files only ordered queues; recover waves from queue position.
            by_cell = {
                pos: SlotRef.for_slot(by_cell[pos].slot, wave=position)
                for queue in queues.values()
                for position, pos in enumerate(queue)
                if pos in by_cell
            }
        return MultiWaveAssignment(by_cell=by_cell, slot_queues=queues, slots=slots)
    if kind != KIND_SINGLE:
        raise ValidationError(f"Unknown assignment kind: {kind!r}")

    by_slot = {slot_id: parse_cell_key(key) for slot_id, key in _pairs(raw.get("bySlot"), "bySlot")}
    return SingleWaveAssignment(by_cell=by_cell, by_slot=by_slot, slots=slots)


def puzzle_from_jsonable(raw: Mapping[str, Any]) -> Puzzle:
    if not isinstance(raw, Mapping):
        raise ValidationError("Puzzle payload must be an object")
    grid = raw.get("grid")
    if not isinstance(grid, list) or not all(isinstance(row, list) for row in grid):
        raise ValidationError("'grid' must be a list of rows")
    letters = {parse_cell_key(key): str(value) for key, value in _pairs(raw.get("letters"), "letters")}
    words = raw.get("words") or []
    return Puzzle(
        grid=[[int(v) for v in row] for row in grid],
        letters=letters,
        words=[str(w) for w in words],
        slot_assignment=assignment_from_jsonable(raw.get("slotAssignment"), len(grid)),
    )


__all__ = [
    "assignment_from_jsonable",
    "assignment_to_jsonable",
    "puzzle_from_jsonable",
    "puzzle_to_jsonable",
]
