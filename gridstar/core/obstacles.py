# gridstar/core/obstacles.py
#!/usr/bin/env python3
"""Barrier placement. Runs once at setup, before any search step."""

from typing import Iterable, Optional
import logging
import random

from gridstar.core.errors import ValidationError
from gridstar.core.grid import Grid
from gridstar.core.types import CellState, Coord

logger = logging.getLogger(__name__)


def free_cells(grid: Grid) -> int:
    return grid.count(CellState.EMPTY)


def generate_barriers(grid: Grid, count: int, rng: Optional[random.Random] = None) -> int:
    """Turn ``count`` distinct random empty cells into barriers.

    Uses rejection sampling over the whole grid: start, target and existing
    barriers are resampled. ``rng`` only needs ``randrange``; pass a seeded
    ``random.Random`` for a reproducible layout.
    """
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        raise ValidationError(f"barrier count must be a non-negative integer, got {count!r}")
    available = free_cells(grid)
    if count > available:
        raise ValidationError(
            f"cannot place {count} barriers: only {available} free cells on a "
            f"{grid.size}x{grid.size} grid")
    rng = rng or random.Random()

    remaining = count
    samples = 0
    while remaining > 0:
        samples += 1
        x, y = rng.randrange(grid.size), rng.randrange(grid.size)
        if grid.get(x, y).state is CellState.EMPTY:
            grid.place_barrier((x, y))
            remaining -= 1

    logger.debug("Placed %d random barriers in %d samples", count, samples)
    return count


def place_barriers(grid: Grid, coords: Iterable[Coord]) -> int:
    """Mark explicit coordinates as barriers. Returns how many were new."""
    placed = 0
    for c in coords:
        if grid.place_barrier(c):
            placed += 1
    return placed
