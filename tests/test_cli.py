import io
import json
import tempfile
import unittest
from pathlib import Path

import main
from wordlanes.core.models import Puzzle
from wordlanes.engine.finalize import finalize
from wordlanes.engine.matching import assign_outside_slots_in_waves
from wordlanes.engine.packer import pack_words
from wordlanes.io.serialization import puzzle_from_jsonable
from wordlanes.utils.pretty import format_puzzle, print_puzzle_stats


def birds_puzzle() -> Puzzle:
    out = finalize(pack_words(["CRANE", "RAVEN", "EAGLE", "NURSE"]))
    return Puzzle(
        grid=out.grid,
        letters=out.letters,
        words=out.words,
        slot_assignment=assign_outside_slots_in_waves(out.grid, out.letters),
    )


class PrettyTests(unittest.TestCase):
    def test_grid_is_framed_by_slots(self) -> None:
        puzzle = birds_puzzle()
        lines = format_puzzle(puzzle).splitlines()
        self.assertEqual(len(lines), puzzle.size + 4)
        self.assertIn("C", lines[2])
        self.assertNotIn("C", format_puzzle(puzzle, show_letters=False).splitlines()[2].split("|")[1])

    def test_stats_report_slot_mode(self) -> None:
        stream = io.StringIO()
        print_puzzle_stats(birds_puzzle(), stream=stream)
        text = stream.getvalue()
        self.assertIn("--- Slots ---", text)
        self.assertIn("Mode:          waves", text)
        self.assertIn("Size:          8 x 8", text)


class CliTests(unittest.TestCase):
    def test_generate_writes_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "puzzle.json"
            main.main([
                "--seed", "3", "--log-level", "WARNING",
                "generate", "--word-count", "4", "--max-word-len", "5", "--output", str(output),
            ])
            puzzle = puzzle_from_jsonable(json.loads(output.read_text(encoding="utf-8")))
            self.assertEqual(len(puzzle.words), 4)

    def test_pool_command_fills_pool_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            main.main([
                "--seed", "5", "--log-level", "WARNING",
                "pool", "--size", "small", "--difficulty", "hard", "--count", "1", "--out", tmpdir,
            ])
            doc = json.loads((Path(tmpdir) / "pool-small-hard.json").read_text(encoding="utf-8"))
            self.assertEqual(doc["meta"]["count"], 1)
            self.assertEqual(doc["puzzles"][0]["N"], 8)

    def test_dictionary_load_logs_length_breakdown(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            words = Path(tmpdir) / "words.txt"
            words.write_text("crane\nraven\nibis\n", encoding="utf-8")
            with self.assertLogs("wordlanes.cli", level="INFO") as captured:
                dictionary = main.load_dictionary(words)
        self.assertEqual(len(dictionary), 3)
        self.assertIn("by length 4:1, 5:2", captured.output[0])

    def test_subcommand_is_required(self) -> None:
        with self.assertRaises(SystemExit):
            main.build_parser().parse_args(["--seed", "1"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
