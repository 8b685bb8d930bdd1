# gridstar/core/astar.py
#!/usr/bin/env python3
"""
A* on an 8-connected grid, one expansion per step() for animation.

API expected by the viewer:
- initialize(...) -> AStarEngine - reset() - step() -> StepResult
- cell_state(x, y) / status() for drawing

Movement: orthogonal 10, diagonal 14. Heuristic: the same octile distance
to the target, so h never overestimates.

The search stops as soon as an expanded cell touches the target; the target
itself is never queued.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import logging
import random

from gridstar.core.config import SearchConfig
from gridstar.core.costs import distance, heuristic, start_distance
from gridstar.core.errors import CapacityExceededError, PathCorruptionError, ValidationError
from gridstar.core.explored import ExploredSet
from gridstar.core.frontier import Frontier
from gridstar.core.grid import Grid
from gridstar.core.obstacles import generate_barriers, place_barriers
from gridstar.core.path import reconstruct_path
from gridstar.core.types import (
    CellState, Coord, Entry, NO_PARENT, SearchStatus, StepResult, StepStatus,
)

logger = logging.getLogger(__name__)

# Fixed expansion order: NW, SE, NE, SW, E, W, N, S (y grows downwards).
NEIGHBOR_OFFSETS = (
    (-1, -1), (1, 1), (1, -1), (-1, 1),
    (1, 0), (-1, 0), (0, -1), (0, 1),
)


@dataclass
class AStarEngine:
    grid: Grid
    legacy_admission: bool = False  # compare against straight-line start distance
    capacity: Optional[int] = None  # defaults to the cell count
    name: str = "A*"

    # Internal state
    frontier: Frontier = field(init=False, repr=False)
    explored: ExploredSet = field(init=False, repr=False)
    path: Optional[List[Coord]] = field(default=None, init=False)
    total_cost: Optional[int] = field(default=None, init=False)
    popped_count: int = field(default=0, init=False)
    steps: int = field(default=0, init=False)
    failure: Optional[Exception] = field(default=None, init=False, repr=False)
    _status: SearchStatus = field(default=SearchStatus.READY, init=False)

    def __post_init__(self) -> None:
        cap = self.grid.capacity if self.capacity is None else self.capacity
        self.frontier = Frontier(cap)
        self.explored = ExploredSet(cap)
        self.reset()

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Clear all search state and seed the frontier with the start cell."""
        self.grid.clear_search()
        self.frontier.clear()
        self.explored.clear()
        self.path = None
        self.total_cost = None
        self.popped_count = 0
        self.steps = 0
        self.failure = None
        self._status = SearchStatus.READY

        s = self.grid.get(*self.grid.start)
        s.g_cost = 0
        s.h_cost = heuristic(s.coord, self.grid.target)
        s.parent = NO_PARENT
        self.frontier.push(s.snapshot())

    # -------------------- read access --------------------

    def status(self) -> SearchStatus:
        return self._status

    def cell_state(self, x: int, y: int) -> CellState:
        return self.grid.cell_state(x, y)

    @property
    def finished(self) -> bool:
        return self._status in (SearchStatus.FOUND, SearchStatus.EXHAUSTED)

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE expansion:
          - Pop the lowest-f entry and close it.
          - If a neighbour is the target, rebuild the path and finish.
          - Else admit or improve the open neighbours.
        Terminal states return the same result again without touching the grid.
        """
        if self.failure is not None:
            raise self.failure
        if self._status is SearchStatus.FOUND:
            return StepResult(status=StepStatus.FOUND, path=list(self.path), metrics=self._metrics())
        if self._status is SearchStatus.EXHAUSTED:
            return StepResult(status=StepStatus.EXHAUSTED, metrics=self._metrics())

        try:
            return self._expand()
        except (CapacityExceededError, PathCorruptionError) as ex:
            self.failure = ex
            logger.error("Search aborted after %d expansions: %s", self.popped_count, ex)
            raise

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step until a terminal state (or ``max_steps``) and return the last result."""
        res = self.step()
        taken = 1
        while res.status is StepStatus.CONTINUING and (max_steps is None or taken < max_steps):
            res = self.step()
            taken += 1
        return res

    def _expand(self) -> StepResult:
        self.steps += 1
        current = self._pop_unexplored()
        if current is None:
            self._status = SearchStatus.EXHAUSTED
            logger.info("Frontier exhausted after %d expansions: no path to %s",
                        self.popped_count, self.grid.target)
            return StepResult(status=StepStatus.EXHAUSTED, metrics=self._metrics())

        self._status = SearchStatus.SEARCHING
        self.popped_count += 1
        self.explored.add(current)
        cell = self.grid.get(*current.coord)
        if cell.state is not CellState.START:
            cell.state = CellState.VISITED
        logger.debug("Expanding %s (g=%d, h=%d)", current.coord, current.g_cost, current.h_cost)

        x, y = current.coord
        opened: List[Coord] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            n = (x + dx, y + dy)
            if not self.grid.in_bounds(*n):
                continue
            ncell = self.grid.get(*n)
            if ncell.state is CellState.TARGET:
                return self._finish(current, n, opened)
            if ncell.state is CellState.BARRIER:
                continue
            if self.explored.contains(n):
                continue

            tentative_g = current.g_cost + distance(current.coord, n)
            if not self._admits(n, ncell.g_cost, tentative_g):
                continue
            ncell.g_cost = tentative_g
            ncell.h_cost = heuristic(n, self.grid.target)
            ncell.parent = current.coord
            if ncell.state is CellState.EMPTY:
                ncell.state = CellState.FRONTIER
            self.frontier.push(ncell.snapshot())
            opened.append(n)

        return StepResult(status=StepStatus.CONTINUING, opened=opened, closed=[current.coord],
                          current=current.coord, metrics=self._metrics())

    def _pop_unexplored(self) -> Optional[Entry]:
        while not self.frontier.is_empty():
            entry = self.frontier.pop_best()
            if not self.explored.contains(entry.coord):
                return entry
        return None

    def _admits(self, n: Coord, stored_g: int, tentative_g: int) -> bool:
        if not self.frontier.contains(n):
            return True
        if self.legacy_admission:
            return tentative_g <= start_distance(n, self.grid.start)
        return tentative_g <= stored_g

    def _finish(self, current: Entry, target: Coord, opened: List[Coord]) -> StepResult:
        self.path = reconstruct_path(self.grid, current.coord) + [target]
        self.total_cost = current.g_cost + distance(current.coord, target)
        self._status = SearchStatus.FOUND
        logger.info("Reached %s after %d expansions: %d cells, cost %d",
                    target, self.popped_count, len(self.path), self.total_cost)
        return StepResult(status=StepStatus.FOUND, opened=opened, closed=[current.coord],
                          current=current.coord, path=list(self.path), metrics=self._metrics())

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.frontier),
            "closed_count": len(self.explored),
            "path_len": len(self.path) if self.path else 0,
            "total_cost": self.total_cost,
            "steps": self.steps,
        }


def initialize(grid_size: int, start: Coord, target: Coord, barrier_count: int,
               rng_seed: Optional[int] = None, *, barriers: Iterable[Coord] = (),
               legacy_admission: bool = False,
               rng: Optional[random.Random] = None) -> AStarEngine:
    """Build a grid, place barriers and return an engine ready to step.

    ``barriers`` are placed first; ``barrier_count`` more are then drawn at
    random from ``rng`` (or ``random.Random(rng_seed)``).
    """
    if isinstance(grid_size, bool) or not isinstance(grid_size, int) or grid_size <= 0:
        raise ValidationError(f"grid size must be a positive integer, got {grid_size!r}")
    if isinstance(barrier_count, bool) or not isinstance(barrier_count, int) or barrier_count < 0:
        raise ValidationError(f"barrier count must be a non-negative integer, got {barrier_count!r}")
    if barrier_count > grid_size * grid_size - 2:
        raise ValidationError(
            f"barrier count {barrier_count} leaves no room for start and target on a "
            f"{grid_size}x{grid_size} grid")

    grid = Grid(grid_size, start, target)
    fixed = place_barriers(grid, barriers)
    generate_barriers(grid, barrier_count, rng or random.Random(rng_seed))

    engine = AStarEngine(grid, legacy_admission=legacy_admission)
    logger.info("Initialized %dx%d grid: start %s, target %s, %d barriers (%d fixed)",
                grid_size, grid_size, grid.start, grid.target, fixed + barrier_count, fixed)
    return engine


def initialize_from_config(config: SearchConfig, rng: Optional[random.Random] = None) -> AStarEngine:
    return initialize(config.size, config.start, config.target, config.barrier_count,
                      config.seed, barriers=config.barriers,
                      legacy_admission=config.legacy_admission, rng=rng)
