"""Token routing rules for playing a generated puzzle.

Every letter of the puzzle becomes a token that starts in the border slot
chosen by the slot assignment. A token may only travel along its slot's
lane: row tokens (L/R) into cells of that row, column tokens (T/B) into
cells of that column. With a multi-wave assignment each slot shows one
token at a time and emits the next one from its queue once the shown token
has been placed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.exceptions import PlacementError
from ..core.models import CellPos, MultiWaveAssignment, OutsideSlot, Puzzle
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class Token:
    id: int
    letter: str
    home: CellPos
    slot: OutsideSlot
    wave: int = 0

    @property
    def slot_id(self) -> str:
        return self.slot.id


class PlaySession:
    """Mutable play state over an immutable :class:`Puzzle`."""

    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self.tokens: Dict[int, Token] = {}
        self._queues: Dict[str, List[int]] = {s.id: [] for s in puzzle.slot_assignment.slots}
        self._emitted: Dict[str, int] = {slot_id: 0 for slot_id in self._queues}
        self._placed: Dict[CellPos, int] = {}
        self._location: Dict[int, CellPos] = {}
        self._build_tokens()
        for slot_id in self._queues:
            self._emit_next(slot_id)

    def _build_tokens(self) -> None:
        assignment = self.puzzle.slot_assignment
        if isinstance(assignment, MultiWaveAssignment):
            ordered = [pos for queue in assignment.slot_queues.values() for pos in queue]
        else:
            ordered = list(assignment.by_cell)
        for token_id, pos in enumerate(ordered):
            ref = assignment.by_cell[pos]
            token = Token(
                id=token_id,
                letter=self.puzzle.letters[pos],
                home=pos,
                slot=ref.slot,
                wave=ref.wave or 0,
            )
            self.tokens[token_id] = token
            self._queues.setdefault(token.slot_id, []).append(token_id)
            self._emitted.setdefault(token.slot_id, 0)
        if isinstance(assignment, MultiWaveAssignment):
            return
        # A single-wave slot holds at most one token, so everything is visible.
        for slot_id, queue in self._queues.items():
            self._emitted[slot_id] = len(queue)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def tray(self, slot_id: str) -> List[Token]:
        """Tokens currently waiting in ``slot_id``, oldest first."""

        queue = self._queues.get(slot_id, [])
        return [
            self.tokens[token_id]
            for token_id in queue[: self._emitted[slot_id]]
            if token_id not in self._location
        ]

    def visible_tokens(self) -> List[Token]:
        return [token for slot_id in self._queues for token in self.tray(slot_id)]

    def token_at(self, cell: CellPos) -> Optional[Token]:
        token_id = self._placed.get(cell)
        return self.tokens[token_id] if token_id is not None else None

    def is_complete(self) -> bool:
        return len(self._placed) == len(self.tokens)

    def is_solved(self) -> bool:
        if not self.is_complete():
            return False
        return all(
            self.tokens[token_id].letter == self.puzzle.letters[cell]
            for cell, token_id in self._placed.items()
        )

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def place(self, token_id: int, cell: CellPos) -> None:
        token = self.tokens.get(token_id)
        if token is None:
            raise PlacementError(f"Unknown token {token_id}")
        if token_id in self._location:
            raise PlacementError(f"Token {token_id} is already on the board")
        if token not in self.tray(token.slot_id):
            raise PlacementError(f"Token {token_id} has not left slot {token.slot_id} yet")
        if cell not in self.puzzle.letters:
            raise PlacementError(f"Cell {cell} is not fillable")
        if cell in self._placed:
            raise PlacementError(f"Cell {cell} is already occupied")
        if not token.slot.serves(*cell):
            raise PlacementError(f"Cell {cell} is outside the lane of slot {token.slot_id}")

        self._placed[cell] = token_id
        self._location[token_id] = cell
        if not self.tray(token.slot_id):
            self._emit_next(token.slot_id)
        LOGGER.debug("Token %d (%s) placed at %s", token_id, token.letter, cell)

    def take_back(self, cell: CellPos) -> Token:
        """Return the token on ``cell`` to its slot."""

        token_id = self._placed.pop(cell, None)
        if token_id is None:
            raise PlacementError(f"Cell {cell} holds no token")
        del self._location[token_id]
        return self.tokens[token_id]

    def _emit_next(self, slot_id: str) -> None:
        queue = self._queues[slot_id]
        while self._emitted[slot_id] < len(queue):
            token_id = queue[self._emitted[slot_id]]
            self._emitted[slot_id] += 1
            if token_id not in self._location:
                return


__all__ = ["PlaySession", "Token"]
