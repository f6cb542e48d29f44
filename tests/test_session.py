import unittest

from wordlanes.core.exceptions import PlacementError
from wordlanes.core.models import Puzzle
from wordlanes.engine.finalize import finalize
from wordlanes.engine.matching import assign_outside_slots, assign_outside_slots_in_waves
from wordlanes.engine.packer import pack_words
from wordlanes.game.session import PlaySession


def birds_puzzle() -> Puzzle:
    out = finalize(pack_words(["CRANE", "RAVEN", "EAGLE", "NURSE"]))
    return Puzzle(
        grid=out.grid,
        letters=out.letters,
        words=out.words,
        slot_assignment=assign_outside_slots(out.grid, out.letters, difficulty="hard"),
    )


def dense_puzzle() -> Puzzle:
    """A full 5x5 board with distinct letters; it needs two waves."""

    grid = [[1] * 5 for _ in range(5)]
    letters = {(r, c): chr(ord("A") + r * 5 + c) for r in range(5) for c in range(5)}
    return Puzzle(
        grid=grid,
        letters=letters,
        words=[],
        slot_assignment=assign_outside_slots_in_waves(grid, letters, difficulty="balanced"),
    )


def place_all_home(session: PlaySession) -> None:
    while session.visible_tokens():
        for token in session.visible_tokens():
            session.place(token.id, token.home)


class SingleWaveSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = birds_puzzle()
        self.session = PlaySession(self.puzzle)

    def test_every_token_starts_visible(self) -> None:
        self.assertEqual(len(self.session.visible_tokens()), len(self.puzzle.letters))
        self.assertFalse(self.session.is_complete())

    def test_placing_every_token_home_solves(self) -> None:
        place_all_home(self.session)
        self.assertTrue(self.session.is_complete())
        self.assertTrue(self.session.is_solved())

    def test_cell_outside_lane_is_rejected(self) -> None:
        token = self.session.tokens[0]
        target = next(cell for cell in self.puzzle.letters if not token.slot.serves(*cell))
        with self.assertRaises(PlacementError):
            self.session.place(token.id, target)

    def test_blocked_cell_is_rejected(self) -> None:
        token = self.session.tokens[0]
        n = self.puzzle.size
        lane = [(r, c) for r in range(n) for c in range(n) if token.slot.serves(r, c)]
        blocked = next(cell for cell in lane if cell not in self.puzzle.letters)
        with self.assertRaises(PlacementError):
            self.session.place(token.id, blocked)

    def test_occupied_cell_is_rejected(self) -> None:
        mover, cell = next(
            (token, cell)
            for token in self.session.tokens.values()
            for cell in self.puzzle.letters
            if cell != token.home and token.slot.serves(*cell)
        )
        occupant = next(t for t in self.session.tokens.values() if t.home == cell)
        self.session.place(occupant.id, cell)
        with self.assertRaises(PlacementError):
            self.session.place(mover.id, cell)

    def test_take_back_returns_token_to_its_slot(self) -> None:
        token = self.session.tokens[3]
        self.session.place(token.id, token.home)
        self.assertNotIn(token, self.session.tray(token.slot_id))
        with self.assertRaises(PlacementError):
            self.session.place(token.id, token.home)

        returned = self.session.take_back(token.home)
        self.assertEqual(returned, token)
        self.assertIn(token, self.session.tray(token.slot_id))
        self.assertIsNone(self.session.token_at(token.home))
        with self.assertRaises(PlacementError):
            self.session.take_back(token.home)


class MultiWaveSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = dense_puzzle()
        self.session = PlaySession(self.puzzle)

    def test_only_queue_heads_are_visible(self) -> None:
        queues = self.puzzle.slot_assignment.slot_queues
        self.assertEqual(len(self.session.visible_tokens()), sum(1 for q in queues.values() if q))
        self.assertTrue(all(token.wave == 0 for token in self.session.visible_tokens()))

    def test_slot_emits_next_token_after_placement(self) -> None:
        slot_id, queue = next((s, q) for s, q in self.puzzle.slot_assignment.slot_queues.items() if len(q) > 1)
        head = self.session.tray(slot_id)[0]
        self.assertEqual(head.home, queue[0])

        hidden = next(t for t in self.session.tokens.values() if t.home == queue[1])
        with self.assertRaises(PlacementError):
            self.session.place(hidden.id, hidden.home)

        self.session.place(head.id, head.home)
        self.assertEqual([t.home for t in self.session.tray(slot_id)], [queue[1]])

        self.session.take_back(head.home)
        self.assertEqual([t.home for t in self.session.tray(slot_id)], [queue[0], queue[1]])

    def test_swapped_letters_are_complete_but_not_solved(self) -> None:
        place_all_home(self.session)
        self.assertTrue(self.session.is_solved())

        first, second = next(
            (a, b)
            for a in self.session.tokens.values()
            for b in self.session.tokens.values()
            if a.id != b.id and a.slot.serves(*b.home) and b.slot.serves(*a.home)
        )
        self.session.take_back(first.home)
        self.session.take_back(second.home)
        self.session.place(first.id, second.home)
        self.session.place(second.id, first.home)

        self.assertTrue(self.session.is_complete())
        self.assertFalse(self.session.is_solved())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
