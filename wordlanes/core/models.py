"""Data models supporting the puzzle generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Union

from .constants import Direction, Side
from .exceptions import ValidationError


CellPos = Tuple[int, int]
Grid = List[List[int]]


def cell_key(row: int, col: int) -> str:
    """Return the ``"r,c"`` form used by the persisted puzzle format."""

    return f"{row},{col}"


def parse_cell_key(key: str) -> CellPos:
    parts = str(key).split(",")
    if len(parts) != 2:
        raise ValidationError(f"Malformed cell key: {key!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ValidationError(f"Malformed cell key: {key!r}") from exc


@dataclass
class Cell:
    """A live board cell and the words currently occupying it."""

    row: int
    col: int
    letter: str
    words: Set[str] = field(default_factory=set)

    @property
    def pos(self) -> CellPos:
        return (self.row, self.col)


@dataclass
class Placement:
    """One accepted word on the board, with its ordered cells."""

    word: str
    direction: Direction
    cells: List[Cell]


@dataclass(frozen=True)
class OutsideSlot:
    """A border slot; its lane is the row (L/R) or column (T/B) it feeds."""

    side: Side
    index: int

    @property
    def id(self) -> str:
        return f"{self.side.value}:{self.index}"

    def serves(self, row: int, col: int) -> bool:
        lane = row if self.side.is_row_lane else col
        return lane == self.index

    def shifted(self, offset: int) -> "OutsideSlot":
        return OutsideSlot(self.side, self.index + offset)

    @classmethod
    def from_id(cls, slot_id: str) -> "OutsideSlot":
        side, _, index = str(slot_id).partition(":")
        try:
            return cls(Side(side), int(index))
        except ValueError as exc:
            raise ValidationError(f"Malformed slot id: {slot_id!r}") from exc


def build_slots(n: int) -> List[OutsideSlot]:
    """All 4N slots of an N x N board: L/R per row, then T/B per column."""

    slots: List[OutsideSlot] = []
    for row in range(n):
        slots.append(OutsideSlot(Side.LEFT, row))
        slots.append(OutsideSlot(Side.RIGHT, row))
    for col in range(n):
        slots.append(OutsideSlot(Side.TOP, col))
        slots.append(OutsideSlot(Side.BOTTOM, col))
    return slots


@dataclass(frozen=True)
class SlotRef:
    """Where a letter cell's token starts. ``wave`` is set for multi-wave plans."""

    side: Side
    index: int
    slot_id: str
    wave: Optional[int] = None

    @classmethod
    def for_slot(cls, slot: OutsideSlot, wave: Optional[int] = None) -> "SlotRef":
        return cls(side=slot.side, index=slot.index, slot_id=slot.id, wave=wave)

    @property
    def slot(self) -> OutsideSlot:
        return OutsideSlot(self.side, self.index)


@dataclass
class SingleWaveAssignment:
    """Perfect matching: every cell owns exactly one slot, one cell per slot."""

    by_cell: Dict[CellPos, SlotRef]
    by_slot: Dict[str, CellPos]
    slots: List[OutsideSlot]


@dataclass
class MultiWaveAssignment:
    """Repeated matchings; each slot serves its queue one wave at a time."""

    by_cell: Dict[CellPos, SlotRef]
    slot_queues: Dict[str, List[CellPos]]
    slots: List[OutsideSlot]

    @property
    def by_slot(self) -> Dict[str, CellPos]:
        return {slot_id: queue[0] for slot_id, queue in self.slot_queues.items() if queue}

    @property
    def wave_count(self) -> int:
        waves = [ref.wave for ref in self.by_cell.values() if ref.wave is not None]
        return max(waves) + 1 if waves else 0


Assignment = Union[SingleWaveAssignment, MultiWaveAssignment]


@dataclass
class FinalizedGrid:
    """Dense square grid normalized from a packed board."""

    grid: Grid
    letters: Dict[CellPos, str]
    words: List[str]

    @property
    def size(self) -> int:
        return len(self.grid)


@dataclass
class Puzzle:
    """A generated puzzle ready for a presentation layer."""

    grid: Grid
    letters: Dict[CellPos, str]
    words: List[str]
    slot_assignment: Assignment
    attempts: int = 1

    @property
    def size(self) -> int:
        return len(self.grid)
