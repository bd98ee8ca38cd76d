"""Helpers for deterministic ordering and grouping."""

from __future__ import annotations

from itertools import groupby
from typing import Callable, Hashable, Iterable, Iterator, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def stable_sorted(items: Iterable[T], key: Callable[[T], object]) -> list[T]:
    # sorted() is stable, so equal keys keep their input order.
    return sorted(items, key=key)


def consecutive_runs(items: Iterable[T], key: Callable[[T], K]) -> Iterator[tuple[K, list[T]]]:
    """Split ``items`` into maximal runs of neighbours sharing ``key``.

    Runs are produced lazily: a run is yielded only once the first item of the
    next run (or the end of input) has been seen. A key that reappears after a
    different key starts a new run rather than rejoining the earlier one.
    """
    for run_key, run in groupby(items, key=key):
        yield run_key, list(run)
