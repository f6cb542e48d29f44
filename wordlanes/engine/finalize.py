"""Normalize a packed board into a dense square grid."""

from __future__ import annotations

from typing import Dict

from ..core.models import CellPos, FinalizedGrid
from .board import Board


def finalize(board: Board) -> FinalizedGrid:
    """Shift live cells to the origin and size the grid to the larger side.

    The board is not mutated, so repeated calls yield equal results.
    """

    min_row, min_col, max_row, max_col = board.bounds()
    size = max(max_row - min_row + 1, max_col - min_col + 1)

    grid = [[0] * size for _ in range(size)]
    letters: Dict[CellPos, str] = {}
    for cell in board.iter_cells():
        row, col = cell.row - min_row, cell.col - min_col
        grid[row][col] = 1
        letters[(row, col)] = cell.letter

    return FinalizedGrid(grid=grid, letters=letters, words=board.words)


__all__ = ["finalize"]
