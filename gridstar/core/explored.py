# gridstar/core/explored.py
#!/usr/bin/env python3
from typing import Iterator, List, Set
import logging

from gridstar.core.errors import CapacityExceededError
from gridstar.core.types import Coord, Entry

logger = logging.getLogger(__name__)


class ExploredSet:
    """Append-only log of expanded cells with O(1) membership."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._log: List[Entry] = []
        self._coords: Set[Coord] = set()

    def __len__(self) -> int:
        return len(self._log)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._log)

    def contains(self, coord: Coord) -> bool:
        return coord in self._coords

    def add(self, entry: Entry) -> None:
        if entry.coord in self._coords:
            raise ValueError(f"{entry.coord} was already expanded")
        if len(self._log) >= self.capacity:
            logger.error("Explored set full (%d entries); cannot record %s", self.capacity, entry.coord)
            raise CapacityExceededError(
                f"explored-set capacity {self.capacity} exceeded while recording {entry.coord}")
        self._log.append(entry)
        self._coords.add(entry.coord)

    def order(self) -> List[Coord]:
        return [e.coord for e in self._log]

    def clear(self) -> None:
        self._log.clear()
        self._coords.clear()
