"""Pairwise letter overlaps between selected words."""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Sequence


class Overlap(NamedTuple):
    """Character ``i`` of one word equals character ``j`` of another."""

    i: int
    j: int


OverlapMap = Dict[str, Dict[str, List[Overlap]]]


def build_overlap_map(words: Sequence[str]) -> OverlapMap:
    """Map ``a -> b -> [(i, j), ...]`` for every ordered pair sharing a letter.

    Pairs without any shared letter are omitted from the inner map.
    """

    overlaps: OverlapMap = {}
    for a in words:
        inner: Dict[str, List[Overlap]] = {}
        for b in words:
            if a == b:
                continue
            pairs = [
                Overlap(i, j)
                for i, ch_a in enumerate(a)
                for j, ch_b in enumerate(b)
                if ch_a == ch_b
            ]
            if pairs:
                inner[b] = pairs
        overlaps[a] = inner
    return overlaps


def overlap_degree(word: str, overlaps: OverlapMap) -> int:
    return len(overlaps.get(word, {}))


__all__ = ["Overlap", "OverlapMap", "build_overlap_map", "overlap_degree"]
