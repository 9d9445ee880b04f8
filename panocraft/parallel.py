"""
parallel.py — Split per-row / per-face pixel work across worker threads.

Each task writes a disjoint region of the page, so tasks need no locking.
numpy releases the GIL inside its array kernels, which is where the time
goes.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

T = TypeVar('T')


def row_bands(total: int, band: int) -> list[tuple[int, int]]:
    """Half-open [start, stop) row ranges of at most *band* rows covering 0..total."""
    return [(start, min(start + band, total)) for start in range(0, total, band)]


def run_parallel(func: Callable[[T], None], items: Iterable[T], workers: int = 1) -> None:
    """
    Call func(item) for every item, on *workers* threads when workers > 1.

    Returns only after every task has finished; the first task exception is
    re-raised in the caller.
    """
    if workers <= 1:
        for item in items:
            func(item)
        return

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        for future in futures:
            future.result()
