"""Sparse placement board with reference-counted cells and an undo log."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from ..core.constants import Direction
from ..core.exceptions import PackingError
from ..core.models import Cell, CellPos, Placement
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class Board:
    """Live cells keyed by signed coordinates plus the ordered placement log.

    A cell exists while at least one placed word covers it. Backtracking pops
    the most recent placement with :meth:`undo`; there is no other rollback
    structure.
    """

    def __init__(self) -> None:
        self.cells: Dict[CellPos, Cell] = {}
        self.placements: List[Placement] = []
        self._directions: Dict[str, Direction] = {}

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, row: int, col: int) -> Optional[Cell]:
        return self.cells.get((row, col))

    def has(self, row: int, col: int) -> bool:
        return (row, col) in self.cells

    def __len__(self) -> int:
        return len(self.cells)

    def iter_cells(self) -> Iterable[Cell]:
        return self.cells.values()

    def direction_of(self, word: str) -> Optional[Direction]:
        return self._directions.get(word)

    @property
    def words(self) -> List[str]:
        return list(dict.fromkeys(p.word for p in self.placements))

    # ------------------------------------------------------------------
    # Word placement
    # ------------------------------------------------------------------
    def place_anchor(self, word: str) -> Placement:
        """Seed the board with ``word`` running horizontally from the origin."""

        if self.placements:
            raise PackingError("Anchor must be the first placement")
        cells = [Cell(0, index, letter) for index, letter in enumerate(word)]
        return self._commit(word, Direction.HORIZONTAL, cells)

    def try_place(self, word: str, base: Placement, i: int, j: int, direction: Direction) -> bool:
        """Place ``word`` so its ``i``-th letter lands on ``base``'s ``j``-th cell.

        Returns ``False`` without touching the board when the placement would
        clash with a letter, run collinearly over another word, touch an
        unrelated cell sideways, or butt against a cell at either end.
        """

        anchor = base.cells[j]
        dr, dc = direction.step
        start_row = anchor.row - dr * i
        start_col = anchor.col - dc * i

        new_cells: List[Cell] = []
        for k, letter in enumerate(word):
            row, col = start_row + dr * k, start_col + dc * k
            existing = self.get(row, col)
            if existing is not None:
                if existing.letter != letter:
                    return False
                if any(self._directions.get(w) == direction for w in existing.words):
                    return False
                new_cells.append(existing)
            else:
                if self.touches_invalid(row, col, direction):
                    return False
                new_cells.append(Cell(row, col, letter))

        end_row = start_row + dr * (len(word) - 1)
        end_col = start_col + dc * (len(word) - 1)
        if not self.end_caps_clear(start_row, start_col, end_row, end_col, direction):
            return False

        self._commit(word, direction, new_cells)
        return True

    def touches_invalid(self, row: int, col: int, direction: Direction) -> bool:
        """True when a fresh cell would sit beside an existing cell across the run."""

        if direction is Direction.HORIZONTAL:
            neighbours: Tuple[CellPos, ...] = ((row - 1, col), (row + 1, col))
        else:
            neighbours = ((row, col - 1), (row, col + 1))
        return any(pos in self.cells for pos in neighbours)

    def end_caps_clear(
        self, start_row: int, start_col: int, end_row: int, end_col: int, direction: Direction
    ) -> bool:
        dr, dc = direction.step
        if self.has(start_row - dr, start_col - dc):
            return False
        if self.has(end_row + dr, end_col + dc):
            return False
        return True

    def undo(self) -> Placement:
        """Pop the latest placement, dropping cells no other word still covers."""

        if not self.placements:
            raise PackingError("Nothing to undo")
        placement = self.placements.pop()
        for cell in placement.cells:
            cell.words.discard(placement.word)
            if not cell.words:
                self.cells.pop(cell.pos, None)
        self._directions.pop(placement.word, None)
        return placement

    def _commit(self, word: str, direction: Direction, cells: List[Cell]) -> Placement:
        for cell in cells:
            cell.words.add(word)
            self.cells[cell.pos] = cell
        placement = Placement(word=word, direction=direction, cells=cells)
        self.placements.append(placement)
        self._directions[word] = direction
        return placement

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def bounds(self) -> Tuple[int, int, int, int]:
        """Return ``(min_row, min_col, max_row, max_col)`` over live cells."""

        if not self.cells:
            raise PackingError("Board is empty")
        rows = [row for row, _ in self.cells]
        cols = [col for _, col in self.cells]
        return min(rows), min(cols), max(rows), max(cols)
