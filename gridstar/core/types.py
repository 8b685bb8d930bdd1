# gridstar/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

Coord = Tuple[int, int]  # (x, y)

NO_PARENT: Coord = (-1, -1)  # parent of the start cell only


class CellState(Enum):
    EMPTY = "empty"
    START = "start"
    BARRIER = "barrier"
    VISITED = "visited"
    FRONTIER = "frontier"
    PATH = "path"
    TARGET = "target"


# States fixed at setup; the search never rewrites them.
FIXED_STATES = frozenset({CellState.START, CellState.TARGET, CellState.BARRIER})


class SearchStatus(Enum):
    READY = "ready"
    SEARCHING = "searching"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class StepStatus(Enum):
    CONTINUING = "continuing"
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass
class Cell:
    coord: Coord
    state: CellState = CellState.EMPTY
    g_cost: int = 0
    h_cost: int = 0
    parent: Coord = NO_PARENT

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost

    def snapshot(self) -> "Entry":
        return Entry(self.coord, self.g_cost, self.h_cost, self.parent)


@dataclass(frozen=True)
class Entry:
    """Value copy of a cell's scoring fields, taken when it enters the
    frontier or the explored set."""
    coord: Coord
    g_cost: int
    h_cost: int
    parent: Coord = NO_PARENT

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost


@dataclass
class StepResult:
    status: StepStatus
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
