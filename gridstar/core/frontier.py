# gridstar/core/frontier.py
#!/usr/bin/env python3
"""
Open list for the stepper, backed by a binary heap.

Tie-breaking in the PQ: (f, h, -seq) -> lower f, then lower h, then the most
recently admitted entry wins.

A coordinate has at most one live entry. Pushing a coordinate that is already
queued replaces the old entry, which stays in the heap marked dead and is
skipped when it surfaces.
"""

from typing import Dict, List, Optional
import heapq
import logging

from gridstar.core.errors import CapacityExceededError
from gridstar.core.types import Coord, Entry

logger = logging.getLogger(__name__)


class Frontier:
    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.rejected = 0  # pushes refused for lack of room
        self._heap: List[list] = []  # [f, h, -seq, entry or None]
        self._live: Dict[Coord, list] = {}
        self._seq = 0

    def __len__(self) -> int:
        return len(self._live)

    def is_empty(self) -> bool:
        return not self._live

    def contains(self, coord: Coord) -> bool:
        return coord in self._live

    def get(self, coord: Coord) -> Optional[Entry]:
        item = self._live.get(coord)
        return item[3] if item else None

    def push(self, entry: Entry) -> None:
        old = self._live.pop(entry.coord, None)
        if old is not None:
            old[3] = None
        elif len(self._live) >= self.capacity:
            self.rejected += 1
            logger.error("Frontier full (%d entries); cannot admit %s", self.capacity, entry.coord)
            raise CapacityExceededError(
                f"frontier capacity {self.capacity} exceeded while admitting {entry.coord}")

        self._seq += 1
        item = [entry.f_cost, entry.h_cost, -self._seq, entry]
        self._live[entry.coord] = item
        heapq.heappush(self._heap, item)

    def pop_best(self) -> Entry:
        while self._heap:
            *_, entry = heapq.heappop(self._heap)
            if entry is not None:
                del self._live[entry.coord]
                return entry
        raise IndexError("pop from an empty frontier")

    def entries(self) -> List[Entry]:
        """Live entries in pop order. Does not modify the frontier."""
        return [item[3] for item in sorted(self._live.values())]

    def clear(self) -> None:
        self._heap.clear()
        self._live.clear()
        self._seq = 0
        self.rejected = 0
