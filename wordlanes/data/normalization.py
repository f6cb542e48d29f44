"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Za-z]")


def fold_accents(text: str) -> str:
    """Strip combining marks so accented letters map to their ASCII base."""

    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``."""

    if not text:
        return ""
    ascii_word = WORD_RE.sub("", fold_accents(text))
    return ascii_word.upper()


__all__ = ["clean_word", "fold_accents"]
