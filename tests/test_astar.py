import heapq
import itertools
import logging

import pytest

from gridstar.core.astar import AStarEngine, initialize, initialize_from_config
from gridstar.core.config import SearchConfig
from gridstar.core.costs import distance, heuristic
from gridstar.core.errors import BoundsError, CapacityExceededError, ValidationError
from gridstar.core.grid import Grid
from gridstar.core.types import CellState, SearchStatus, StepStatus


def _maze():
    # vertical wall at x=5 with a single gap at the bottom row
    wall = [(5, y) for y in range(9)]
    return initialize(10, (1, 1), (8, 1), 0, barriers=wall)


def _pocket(legacy_admission=False):
    # target sealed off; start reaches column 0 and the two bottom rows only
    wall = [(1, 0), (1, 1), (1, 2), (1, 3), (2, 3), (3, 3), (4, 3), (5, 3)]
    return initialize(6, (0, 0), (4, 1), 0, barriers=wall, legacy_admission=legacy_admission)


def _shortest_costs(grid):
    """Dijkstra from the start over the free cells of ``grid``."""
    best = {grid.start: 0}
    pq = [(0, grid.start)]
    while pq:
        d, (x, y) = heapq.heappop(pq)
        if d > best[(x, y)]:
            continue
        for dx, dy in itertools.product((-1, 0, 1), repeat=2):
            n = (x + dx, y + dy)
            if (dx == dy == 0) or not grid.in_bounds(*n) or grid.cell_state(*n) is CellState.BARRIER:
                continue
            nd = d + (14 if dx and dy else 10)
            if nd < best.get(n, 1 << 30):
                best[n] = nd
                heapq.heappush(pq, (nd, n))
    return best


def test_scenario_a_diagonal_chain():
    engine = initialize(3, (0, 0), (2, 2), 0)
    assert engine.status() is SearchStatus.READY

    first = engine.step()
    assert first.status is StepStatus.CONTINUING
    assert first.closed == [(0, 0)]
    assert set(first.opened) == {(1, 1), (1, 0), (0, 1)}
    assert engine.status() is SearchStatus.SEARCHING

    second = engine.step()
    assert second.status is StepStatus.FOUND
    assert second.path == [(0, 0), (1, 1), (2, 2)]
    assert engine.total_cost == 28
    assert second.metrics["total_cost"] == 28
    assert engine.status() is SearchStatus.FOUND
    assert engine.cell_state(1, 1) is CellState.PATH
    assert engine.cell_state(0, 0) is CellState.START
    assert engine.cell_state(2, 2) is CellState.TARGET


def test_scenario_b_wall_with_gap():
    wall = [(1, 2), (2, 2), (3, 2), (4, 2)]
    engine = initialize(5, (0, 0), (0, 4), 0, barriers=wall)
    res = engine.run()
    assert res.status is StepStatus.FOUND
    assert (0, 2) in res.path
    assert res.path[0] == (0, 0) and res.path[-1] == (0, 4)
    assert engine.cell_state(0, 2) is CellState.PATH


def test_scenario_c_enclosed_target_exhausts():
    ring = [(1, 1), (2, 1), (3, 1), (1, 2), (3, 2), (1, 3), (2, 3), (3, 3)]
    engine = initialize(5, (0, 0), (2, 2), 0, barriers=ring)
    res = engine.run()
    assert res.status is StepStatus.EXHAUSTED
    assert engine.status() is SearchStatus.EXHAUSTED
    assert engine.path is None
    assert engine.grid.count(CellState.PATH) == 0


def test_scenario_d_start_equals_target():
    with pytest.raises(ValidationError):
        initialize(5, (2, 2), (2, 2), 0)


@pytest.mark.parametrize("size, start, target, count", [
    (0, (0, 0), (1, 1), 0),
    (-3, (0, 0), (1, 1), 0),
    (5, (5, 0), (1, 1), 0),
    (5, (0, 0), (1, -1), 0),
    (5, (0, 0), (1, 1), -1),
    (5, (0, 0), (1, 1), 24),
    (5, (0, 0), (1, 1), 100),
])
def test_initialize_validates(size, start, target, count):
    with pytest.raises(ValidationError):
        initialize(size, start, target, count)


def test_initialize_rejects_barrier_on_start():
    with pytest.raises(ValidationError):
        initialize(5, (0, 0), (4, 4), 0, barriers=[(0, 0)])


def test_initialize_places_random_and_fixed_barriers():
    engine = initialize(10, (0, 0), (9, 9), 20, rng_seed=3, barriers=[(5, 5)])
    assert engine.grid.count(CellState.BARRIER) == 21
    assert engine.cell_state(5, 5) is CellState.BARRIER


def test_terminal_state_is_idempotent():
    engine = initialize(3, (0, 0), (2, 2), 0)
    engine.run()
    states = [c.state for c in engine.grid.cells()]
    again = engine.step()
    assert again.status is StepStatus.FOUND
    assert again.path == [(0, 0), (1, 1), (2, 2)]
    assert [c.state for c in engine.grid.cells()] == states
    assert again.metrics["popped"] == 2


def test_exhausted_is_terminal():
    ring = [(1, 0), (0, 1), (1, 1)]
    engine = initialize(4, (0, 0), (3, 3), 0, barriers=ring)
    assert engine.step().status is StepStatus.CONTINUING
    assert engine.step().status is StepStatus.EXHAUSTED
    assert engine.step().status is StepStatus.EXHAUSTED
    assert engine.popped_count == 1


def test_start_adjacent_to_target():
    engine = initialize(4, (1, 1), (2, 1), 0)
    res = engine.step()
    assert res.status is StepStatus.FOUND
    assert res.path == [(1, 1), (2, 1)]
    assert engine.total_cost == 10


def test_each_cell_expanded_once():
    engine = initialize(15, (0, 0), (14, 14), 60, rng_seed=9)
    engine.run()
    order = engine.explored.order()
    assert len(order) == len(set(order))


def test_expansion_marks_visited_and_frontier():
    engine = _maze()
    for _ in range(5):
        engine.step()
    for coord in engine.explored.order():
        expected = CellState.START if coord == (1, 1) else CellState.VISITED
        assert engine.cell_state(*coord) is expected
    for entry in engine.frontier.entries():
        assert engine.cell_state(*entry.coord) is CellState.FRONTIER


def test_search_is_deterministic():
    runs = []
    for _ in range(2):
        engine = initialize(20, (2, 3), (17, 18), 80, rng_seed=5)
        engine.run()
        runs.append((engine.explored.order(), engine.path, engine.status()))
    assert runs[0] == runs[1]


def test_path_is_contiguous_and_priced_consistently():
    engine = _maze()
    res = engine.run()
    assert res.status is StepStatus.FOUND
    path = res.path
    assert path[0] == (1, 1)
    assert path[-1] == (8, 1)
    assert (5, 9) in path
    steps = [distance(a, b) for a, b in zip(path, path[1:])]
    assert all(s in (10, 14) for s in steps)
    assert sum(steps) == engine.total_cost
    for coord in path[1:-1]:
        assert engine.cell_state(*coord) is CellState.PATH


def test_parents_have_lower_cost():
    engine = _maze()
    engine.run()
    for cell in engine.grid.cells():
        if cell.state in (CellState.VISITED, CellState.FRONTIER, CellState.PATH):
            parent = engine.grid.get(*cell.parent)
            assert parent.g_cost <= cell.g_cost


@pytest.mark.parametrize("start, target", [((0, 0), (9, 9)), ((1, 2), (8, 6)), ((7, 0), (0, 4))])
def test_open_grid_path_is_optimal(start, target):
    engine = initialize(10, start, target, 0)
    assert engine.run().status is StepStatus.FOUND
    assert engine.total_cost == distance(start, target)
    assert engine.total_cost >= heuristic(start, target)


def test_legacy_admission_still_finds_path():
    engine = initialize(10, (1, 1), (8, 1), 0, barriers=[(5, y) for y in range(9)],
                        legacy_admission=True)
    res = engine.run()
    assert res.status is StepStatus.FOUND
    assert (5, 9) in res.path


def test_reset_replays_same_search():
    engine = _maze()
    engine.run()
    first = (engine.explored.order(), engine.path)
    engine.reset()
    assert engine.status() is SearchStatus.READY
    assert engine.grid.count(CellState.PATH) == 0
    assert engine.grid.count(CellState.BARRIER) == 9
    engine.run()
    assert (engine.explored.order(), engine.path) == first


def test_capacity_overflow_aborts_search(caplog):
    grid = Grid(5, (0, 0), (4, 4))
    engine = AStarEngine(grid, capacity=2)
    with caplog.at_level(logging.ERROR):
        with pytest.raises(CapacityExceededError) as exc:
            engine.step()
    assert engine.frontier.rejected == 1
    assert "capacity" in caplog.text
    with pytest.raises(CapacityExceededError) as again:
        engine.step()
    assert again.value is exc.value


def test_cell_state_rejects_out_of_bounds():
    engine = initialize(3, (0, 0), (2, 2), 0)
    with pytest.raises(BoundsError):
        engine.cell_state(3, 0)


def test_run_respects_max_steps():
    engine = _maze()
    res = engine.run(max_steps=3)
    assert res.status is StepStatus.CONTINUING
    assert engine.popped_count == 3


def test_initialize_from_config():
    config = SearchConfig(size=6, start=(0, 0), target=(5, 5), barrier_count=4,
                          barriers=[(2, 2)], seed=1)
    engine = initialize_from_config(config)
    assert engine.grid.count(CellState.BARRIER) == 5
    assert engine.grid.size == 6


def test_cheaper_route_lowers_queued_cost():
    engine = _pocket()
    engine.run(max_steps=6)
    queued = engine.frontier.get((0, 5))
    assert (queued.g_cost, queued.parent) == (58, (1, 4))

    res = engine.step()
    assert res.current == (0, 4)
    assert (0, 5) in res.opened
    cell = engine.grid.get(0, 5)
    assert (cell.g_cost, cell.parent) == (50, (0, 4))
    assert engine.frontier.get((0, 5)).g_cost == 50


def test_equal_cost_route_replaces_parent():
    engine = _pocket()
    engine.run(max_steps=9)
    assert engine.grid.get(3, 5).parent == (2, 4)
    res = engine.step()
    assert res.current == (2, 5)
    assert res.opened == [(3, 5)]
    assert engine.grid.get(3, 5).parent == (2, 5)


def test_legacy_admission_diverges_from_default():
    default, legacy = _pocket(), _pocket(legacy_admission=True)
    assert default.run().status is StepStatus.EXHAUSTED
    assert legacy.run().status is StepStatus.EXHAUSTED
    assert len(default.explored) == len(legacy.explored) == 16
    assert default.grid.get(3, 5).parent == (2, 5)
    assert legacy.grid.get(3, 5).parent == (2, 4)
    assert default.grid.get(3, 5).g_cost == legacy.grid.get(3, 5).g_cost == 68


def test_legacy_admission_compares_against_start_distance():
    engine = _pocket(legacy_admission=True)
    engine.run(max_steps=9)
    res = engine.step()
    assert res.current == (2, 5)
    assert res.opened == []
    assert engine.grid.get(3, 5).parent == (2, 4)


def test_explored_costs_are_shortest():
    engine = _pocket()
    engine.run()
    best = _shortest_costs(engine.grid)
    assert len(best) == len(engine.explored)
    for entry in engine.explored:
        assert entry.g_cost == best[entry.coord]


def test_zero_capacity_is_rejected():
    with pytest.raises(ValueError):
        AStarEngine(Grid(3, (0, 0), (2, 2)), capacity=0)
