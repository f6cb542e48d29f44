"""Deterministic rule validation for generated puzzles."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set

from ..core.constants import Direction
from ..core.exceptions import ValidationError
from ..core.models import (
    Assignment,
    CellPos,
    Grid,
    MultiWaveAssignment,
    Puzzle,
    SingleWaveAssignment,
    build_slots,
)
from ..utils.logger import get_logger
from .matching import lane_lengths


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


@dataclass(frozen=True)
class Run:
    """A maximal line of fillable cells, two or more long."""

    start: CellPos
    direction: Direction
    text: str


def iter_runs(grid: Grid, letters: Mapping[CellPos, str]) -> Iterator[Run]:
    """Yield every maximal horizontal and vertical run of length >= 2."""

    n = len(grid)
    for direction in (Direction.HORIZONTAL, Direction.VERTICAL):
        dr, dc = direction.step
        for r in range(n):
            for c in range(n):
                if grid[r][c] != 1:
                    continue
                pr, pc = r - dr, c - dc
                if 0 <= pr < n and 0 <= pc < n and grid[pr][pc] == 1:
                    continue
                chars: List[str] = []
                row, col = r, c
                while 0 <= row < n and 0 <= col < n and grid[row][col] == 1:
                    chars.append(letters.get((row, col), "?"))
                    row += dr
                    col += dc
                if len(chars) >= 2:
                    yield Run(start=(r, c), direction=direction, text="".join(chars))


class PuzzleValidator:
    """Runs deterministic validation over a finalized grid and its slot plan."""

    def validate(
        self,
        grid: Grid,
        letters: Mapping[CellPos, str],
        words: Sequence[str],
        assignment: Optional[Assignment] = None,
    ) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_square(grid)
            self._check_letters_match_grid(grid, letters)
            self._check_letters_valid(letters)
            self._check_runs(grid, letters, words)
            if assignment is not None:
                self._check_assignment(grid, letters, assignment)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def validate_puzzle(self, puzzle: Puzzle) -> ValidationResult:
        return self.validate(puzzle.grid, puzzle.letters, puzzle.words, puzzle.slot_assignment)

    # ------------------------------------------------------------------
    # Grid checks
    # ------------------------------------------------------------------
    @staticmethod
    def _check_square(grid: Grid) -> None:
        n = len(grid)
        if n == 0:
            raise ValidationError("Grid is empty")
        for r, row in enumerate(grid):
            if len(row) != n:
                raise ValidationError(f"Row {r} has {len(row)} cells, expected {n}")

    @staticmethod
    def _check_letters_match_grid(grid: Grid, letters: Mapping[CellPos, str]) -> None:
        n = len(grid)
        for (r, c) in letters:
            if not (0 <= r < n and 0 <= c < n):
                raise ValidationError(f"Letter at {(r, c)} lies outside the grid")
            if grid[r][c] != 1:
                raise ValidationError(f"Letter at {(r, c)} sits on a blocked cell")
        for r in range(n):
            for c in range(n):
                if grid[r][c] == 1 and (r, c) not in letters:
                    raise ValidationError(f"Fillable cell {(r, c)} has no letter")
                if grid[r][c] not in (0, 1):
                    raise ValidationError(f"Grid value {grid[r][c]!r} at {(r, c)}")

    @staticmethod
    def _check_letters_valid(letters: Mapping[CellPos, str]) -> None:
        for pos, letter in letters.items():
            if len(letter) != 1 or not letter.isalpha() or not letter.isupper():
                raise ValidationError(f"Invalid letter {letter!r} at {pos}")

    @staticmethod
    def _check_runs(grid: Grid, letters: Mapping[CellPos, str], words: Sequence[str]) -> None:
        # Every adjacency must come from a placed word, and every placed word
        # must read off the grid as exactly one maximal run.
        expected = Counter(words)
        if any(count > 1 for count in expected.values()):
            raise ValidationError("Duplicate word in word list")
        found: Counter = Counter()
        for run in iter_runs(grid, letters):
            if run.text not in expected:
                raise ValidationError(
                    f"Unplaced letter run '{run.text}' at {run.start} ({run.direction.value})"
                )
            found[run.text] += 1
        for word in words:
            if found[word] != 1:
                raise ValidationError(f"Word '{word}' appears {found[word]} times on the grid")

    # ------------------------------------------------------------------
    # Assignment checks
    # ------------------------------------------------------------------
    def _check_assignment(
        self, grid: Grid, letters: Mapping[CellPos, str], assignment: Assignment
    ) -> None:
        expected_slots = build_slots(len(grid))
        if list(assignment.slots) != expected_slots:
            raise ValidationError("Slot list does not match the grid size")
        if set(assignment.by_cell) != set(letters):
            raise ValidationError("Assignment does not cover exactly the letter cells")
        for (r, c), ref in assignment.by_cell.items():
            if ref.slot_id != ref.slot.id:
                raise ValidationError(f"Slot id {ref.slot_id} disagrees with {ref.side.value}:{ref.index}")
            if not ref.slot.serves(r, c):
                raise ValidationError(f"Slot {ref.slot_id} is not in the lane of {(r, c)}")

        if isinstance(assignment, SingleWaveAssignment):
            self._check_single(assignment)
        elif isinstance(assignment, MultiWaveAssignment):
            self._check_waves(assignment)
        else:
            raise ValidationError(f"Unknown assignment type {type(assignment).__name__}")

    @staticmethod
    def _check_single(assignment: SingleWaveAssignment) -> None:
        used: Set[str] = set()
        for pos, ref in assignment.by_cell.items():
            if ref.slot_id in used:
                raise ValidationError(f"Slot {ref.slot_id} serves more than one cell")
            used.add(ref.slot_id)
            if assignment.by_slot.get(ref.slot_id) != pos:
                raise ValidationError(f"by_slot does not invert by_cell at {ref.slot_id}")
        if set(assignment.by_slot) != used:
            raise ValidationError("by_slot lists slots no cell uses")

    @staticmethod
    def _check_waves(assignment: MultiWaveAssignment) -> None:
        seen: Dict[CellPos, str] = {}
        per_wave: Dict[int, Set[str]] = defaultdict(set)
        for slot_id, queue in assignment.slot_queues.items():
            previous = -1
            for pos in queue:
                if pos in seen:
                    raise ValidationError(f"Cell {pos} queued in {seen[pos]} and {slot_id}")
                seen[pos] = slot_id
                ref = assignment.by_cell.get(pos)
                if ref is None or ref.slot_id != slot_id or ref.wave is None:
                    raise ValidationError(f"Queue {slot_id} disagrees with by_cell at {pos}")
                if ref.wave <= previous:
                    raise ValidationError(f"Waves do not increase along queue {slot_id}")
                previous = ref.wave
                if slot_id in per_wave[ref.wave]:
                    raise ValidationError(f"Slot {slot_id} used twice in wave {ref.wave}")
                per_wave[ref.wave].add(slot_id)
        if set(seen) != set(assignment.by_cell):
            raise ValidationError("Some assigned cells are missing from every queue")


def lane_preference_ratio(grid: Grid, assignment: Assignment) -> float:
    """Fraction of cells routed through their longer lane (ties count as longer)."""

    if not assignment.by_cell:
        return 0.0
    row_len, col_len = lane_lengths(grid)
    longer = 0
    for (r, c), ref in assignment.by_cell.items():
        row_is_longer = row_len[r] >= col_len[c]
        col_is_longer = col_len[c] >= row_len[r]
        if (ref.side.is_row_lane and row_is_longer) or (not ref.side.is_row_lane and col_is_longer):
            longer += 1
    return longer / len(assignment.by_cell)


__all__ = ["PuzzleValidator", "ValidationResult", "Run", "iter_runs", "lane_preference_ratio"]
