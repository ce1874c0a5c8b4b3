"""Deterministic ordering of directory candidates by learned usage."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .frequency import FrequencyStore
from .paths import is_directory


@dataclass(frozen=True)
class RankedResult:
    path: str
    count: int
    rank: int


def sort_key(path: str, count: int) -> tuple[int, int, str]:
    """Order by count (desc), then path length (asc), then path text."""
    return (-count, len(path), path)


def _ranked(pairs: Iterable[tuple[str, int]]) -> list[RankedResult]:
    ordered = sorted(pairs, key=lambda pair: sort_key(pair[0], pair[1]))
    return [RankedResult(path=path, count=count, rank=idx) for idx, (path, count) in enumerate(ordered)]


def rank(candidates: Iterable[str], store: FrequencyStore) -> list[RankedResult]:
    """Attach stored counts to ``candidates`` and sort them.

    Repeated candidates collapse to their first occurrence.
    """
    seen: set[str] = set()
    pairs: list[tuple[str, int]] = []
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        pairs.append((path, store.get(path)))
    return _ranked(pairs)


def rank_frequent(
    store: FrequencyStore,
    is_dir: Callable[[str], bool] = is_directory,
) -> list[RankedResult]:
    """Rank every stored path that has been used and still exists."""
    return _ranked((path, count) for path, count in store.entries() if count > 0 and is_dir(path))
