# gridstar/core/grid.py
#!/usr/bin/env python3
"""
Square grid of Cell records.

The grid owns every cell. Start, target and barriers are fixed at setup;
afterwards only the search stepper (scores, state) and the path
reconstructor (state -> PATH) write to it.

Cells are stored column-major, ``cells[x][y]``.
"""

from dataclasses import dataclass, field
from typing import Iterator, List

from gridstar.core.errors import BoundsError, ValidationError
from gridstar.core.types import Cell, CellState, Coord, FIXED_STATES, NO_PARENT


@dataclass
class Grid:
    size: int
    start: Coord
    target: Coord
    _cells: List[List[Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.size, int) or self.size <= 0:
            raise ValidationError(f"grid size must be a positive integer, got {self.size!r}")
        self.start = _as_coord(self.start, "start")
        self.target = _as_coord(self.target, "target")
        for label, c in (("start", self.start), ("target", self.target)):
            if not self.in_bounds(*c):
                raise ValidationError(f"{label} {c} is outside a {self.size}x{self.size} grid")
        if self.start == self.target:
            raise ValidationError(f"start and target are both {self.start}")

        self._cells = [[Cell((x, y)) for y in range(self.size)] for x in range(self.size)]
        self._cells[self.start[0]][self.start[1]].state = CellState.START
        self._cells[self.target[0]][self.target[1]].state = CellState.TARGET

    # -------------------- access --------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise BoundsError(x, y, self.size)
        return self._cells[x][y]

    def set(self, x: int, y: int, cell: Cell) -> None:
        if not self.in_bounds(x, y):
            raise BoundsError(x, y, self.size)
        if cell.coord != (x, y):
            raise ValueError(f"cell at {cell.coord} cannot be stored at {(x, y)}")
        self._cells[x][y] = cell

    def cell_state(self, x: int, y: int) -> CellState:
        return self.get(x, y).state

    def cells(self) -> Iterator[Cell]:
        for column in self._cells:
            yield from column

    def count(self, state: CellState) -> int:
        return sum(1 for c in self.cells() if c.state is state)

    def barriers(self) -> List[Coord]:
        return [c.coord for c in self.cells() if c.state is CellState.BARRIER]

    @property
    def capacity(self) -> int:
        return self.size * self.size

    # -------------------- setup --------------------

    def place_barrier(self, coord: Coord) -> bool:
        """Mark ``coord`` impassable. Returns False if it already was."""
        x, y = _as_coord(coord, "barrier")
        if not self.in_bounds(x, y):
            raise ValidationError(f"barrier {(x, y)} is outside a {self.size}x{self.size} grid")
        cell = self._cells[x][y]
        if cell.state in (CellState.START, CellState.TARGET):
            raise ValidationError(f"barrier {(x, y)} overlaps the {cell.state.value} cell")
        if cell.state is CellState.BARRIER:
            return False
        cell.state = CellState.BARRIER
        return True

    def clear_search(self) -> None:
        """Drop all search scoring and marks, keeping start/target/barriers."""
        for cell in self.cells():
            cell.g_cost = 0
            cell.h_cost = 0
            cell.parent = NO_PARENT
            if cell.state not in FIXED_STATES:
                cell.state = CellState.EMPTY


def _as_coord(value, label: str) -> Coord:
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be an (x, y) pair, got {value!r}") from None
    if not (isinstance(x, int) and isinstance(y, int)) or isinstance(x, bool) or isinstance(y, bool):
        raise ValidationError(f"{label} must hold integers, got {value!r}")
    return (x, y)
