"""Word list loading and length filtering."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set

from ..core.exceptions import DictionaryLoadError
from ..utils.logger import get_logger
from .normalization import clean_word


LOGGER = get_logger(__name__)

DEFAULT_WORDS_PATH = Path(__file__).with_name("words.txt")


@dataclass
class DictionaryConfig:
    """Configuration for dictionary loading and filtering."""

    path: Path | str = DEFAULT_WORDS_PATH
    min_length: int = 2
    max_length: int = 24


def parse_word_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yield raw entries, skipping blank lines and ``#`` comments."""

    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        yield line


class WordDictionary:
    """Ordered, de-duplicated uppercase word list grouped by length."""

    def __init__(self, config: Optional[DictionaryConfig] = None, words: Optional[Iterable[str]] = None) -> None:
        self.config = config or DictionaryConfig()
        self._words: List[str] = []
        self._by_length: Dict[int, List[str]] = defaultdict(list)
        self._index: Set[str] = set()
        if words is None:
            words = self._read(Path(self.config.path))
        self._hydrate(words)
        if not self._words:
            raise DictionaryLoadError(
                f"No usable words between {self.config.min_length} and {self.config.max_length} letters"
            )

    @classmethod
    def from_words(cls, words: Iterable[str], min_length: int = 2, max_length: int = 24) -> "WordDictionary":
        return cls(DictionaryConfig(min_length=min_length, max_length=max_length), words=words)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @staticmethod
    def _read(source: Path) -> List[str]:
        if not source.exists():
            raise DictionaryLoadError(f"Missing word list: {source}")
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DictionaryLoadError(str(exc)) from exc
        return list(parse_word_lines(text.splitlines()))

    def _hydrate(self, words: Iterable[str]) -> None:
        skipped = 0
        for raw in words:
            word = clean_word(raw)
            if len(word) < self.config.min_length or len(word) > self.config.max_length:
                skipped += 1
                continue
            if word in self._index:
                continue
            self._index.add(word)
            self._words.append(word)
            self._by_length[len(word)].append(word)
        LOGGER.debug("Loaded %d words (%d outside length range)", len(self._words), skipped)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and clean_word(word) in self._index

    def words(self, min_len: Optional[int] = None, max_len: Optional[int] = None) -> List[str]:
        """Return words whose length lies in ``[min_len, max_len]``, in file order."""

        low = self.config.min_length if min_len is None else min_len
        high = self.config.max_length if max_len is None else max_len
        return [word for word in self._words if low <= len(word) <= high]

    def count_by_length(self) -> Dict[int, int]:
        return {length: len(words) for length, words in sorted(self._by_length.items())}
