# gridstar/core/costs.py
#!/usr/bin/env python3
"""
Octile-style grid distance scaled to integers.

An orthogonal move costs 10 and a diagonal move 14 (about 10 * sqrt(2)).
Ignoring barriers this is the exact cost of the cheapest 8-connected walk,
so as a heuristic it never overestimates and is consistent.
"""

from gridstar.core.types import Coord

ORTHOGONAL_COST = 10
DIAGONAL_COST = 14


def distance(a: Coord, b: Coord) -> int:
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    lo, hi = min(dx, dy), max(dx, dy)
    return DIAGONAL_COST * lo + ORTHOGONAL_COST * (hi - lo)


def start_distance(p: Coord, start: Coord) -> int:
    """Straight-line estimate of the cost from ``start`` to ``p``."""
    return distance(p, start)


def heuristic(p: Coord, target: Coord) -> int:
    """Admissible estimate of the remaining cost from ``p`` to ``target``."""
    return distance(p, target)
