# gridstar/core/path.py
#!/usr/bin/env python3
from typing import List

from gridstar.core.errors import PathCorruptionError
from gridstar.core.grid import Grid
from gridstar.core.types import CellState, Coord, NO_PARENT


def reconstruct_path(grid: Grid, end: Coord) -> List[Coord]:
    """Walk parent links from ``end`` back to the start, marking the chain.

    Every cell on the way except the start becomes PATH. Returns the chain
    ordered start -> end. A walk longer than the cell count, or a parent
    outside the grid, means the parent links are corrupt.
    """
    path: List[Coord] = []
    cur = end
    limit = grid.capacity
    while True:
        if len(path) >= limit:
            raise PathCorruptionError(
                f"parent chain from {end} did not reach the start within {limit} steps")
        if not grid.in_bounds(*cur):
            raise PathCorruptionError(f"parent chain from {end} left the grid at {cur}")

        cell = grid.get(*cur)
        path.append(cur)
        if cell.parent == NO_PARENT:
            break
        if cell.state is not CellState.START:
            cell.state = CellState.PATH
        cur = cell.parent

    if cur != grid.start:
        raise PathCorruptionError(f"parent chain from {end} ended at {cur}, not at the start {grid.start}")
    path.reverse()
    return path
