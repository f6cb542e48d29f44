"""Persistent puzzle pools and daily puzzles.

Pools live in ``<root>/pool-<size>-<difficulty>.json`` and accumulate across
runs. Daily puzzles live in ``<root>/daily/YYYY-MM-DD/<size>-<difficulty>.json``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..core.constants import Difficulty
from ..core.exceptions import ValidationError
from ..core.models import Puzzle
from ..utils.logger import get_logger
from .serialization import puzzle_from_jsonable, puzzle_to_jsonable

LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/puzzles")


class PuzzleStore:
    """Save generated puzzles as frontend-ready JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def pool_path(self, size_key: str, difficulty: Difficulty | str) -> Path:
        return self.store_dir / f"pool-{size_key}-{Difficulty(difficulty).value}.json"

    def daily_path(self, day: str, size_key: str, difficulty: Difficulty | str) -> Path:
        return self.store_dir / "daily" / day / f"{size_key}-{Difficulty(difficulty).value}.json"

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------
    def save_pool(
        self,
        size_key: str,
        difficulty: Difficulty | str,
        puzzles: Sequence[Puzzle],
    ) -> Path:
        """Append ``puzzles`` to the pool file and return its path."""

        path = self.pool_path(size_key, difficulty)
        existing = self._read_previous_pool(path)
        merged = existing + [puzzle_to_jsonable(p) for p in puzzles]
        doc = {
            "meta": {
                "generatedAt": self._now(),
                "sizeKey": size_key,
                "difficulty": Difficulty(difficulty).value,
                "N": merged[0]["N"] if merged else None,
                "count": len(merged),
            },
            "puzzles": merged,
        }
        self._write(path, doc)
        LOGGER.info("Pool saved: %s (%d puzzles, %d new)", path.name, len(merged), len(puzzles))
        return path

    def load_pool(self, size_key: str, difficulty: Difficulty | str) -> List[Puzzle]:
        path = self.pool_path(size_key, difficulty)
        if not path.exists():
            return []
        doc = self._read(path)
        raw_puzzles = doc.get("puzzles") if isinstance(doc, dict) else None
        if not isinstance(raw_puzzles, list):
            raise ValidationError(f"{path} has no puzzle list")
        return [puzzle_from_jsonable(raw) for raw in raw_puzzles]

    # ------------------------------------------------------------------
    # Daily puzzles
    # ------------------------------------------------------------------
    def save_daily(
        self,
        day: str,
        size_key: str,
        difficulty: Difficulty | str,
        puzzle: Puzzle,
        seed_str: str,
        seed_num: int,
    ) -> Path:
        path = self.daily_path(day, size_key, difficulty)
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = {
            "meta": {
                "date": day,
                "sizeKey": size_key,
                "difficulty": Difficulty(difficulty).value,
                "seedStr": seed_str,
                "seedNum": seed_num,
                "generatedAt": self._now(),
            },
            "puzzle": puzzle_to_jsonable(puzzle),
        }
        self._write(path, doc)
        LOGGER.info("Daily puzzle saved: %s/%s", day, path.name)
        return path

    def load_daily(self, day: str, size_key: str, difficulty: Difficulty | str) -> Puzzle:
        path = self.daily_path(day, size_key, difficulty)
        doc = self._read(path)
        if not isinstance(doc, dict) or "puzzle" not in doc:
            raise ValidationError(f"{path} has no puzzle")
        return puzzle_from_jsonable(doc["puzzle"])

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------
    def _read_previous_pool(self, path: Path) -> List[Dict[str, Any]]:
        if not path.exists():
            return []
        try:
            doc = self._read(path)
        except ValidationError as exc:
            LOGGER.warning("Ignoring unreadable pool %s: %s", path.name, exc)
            return []
        puzzles = doc.get("puzzles") if isinstance(doc, dict) else None
        if not isinstance(puzzles, list):
            LOGGER.warning("Ignoring pool %s without a puzzle list", path.name)
            return []
        return puzzles

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValidationError(f"Cannot read {path}: {exc}") from exc

    @staticmethod
    def _write(path: Path, doc: Dict[str, Any]) -> None:
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()


__all__ = ["DEFAULT_STORE_DIR", "PuzzleStore"]
