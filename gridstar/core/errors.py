# gridstar/core/errors.py
#!/usr/bin/env python3
"""Error taxonomy for the search engine.

ValidationError and BoundsError are raised at the boundary (setup and grid
access). CapacityExceededError and PathCorruptionError mean an invariant was
breached mid-search; the engine treats both as fatal.
"""


class GridstarError(Exception):
    """Base class for every error raised by gridstar."""


class ValidationError(GridstarError, ValueError):
    """Invalid setup parameters or a malformed scenario file."""


class BoundsError(GridstarError, IndexError):
    """A coordinate outside ``[0, size)`` was used to access the grid."""

    def __init__(self, x: int, y: int, size: int):
        super().__init__(f"({x}, {y}) is outside a {size}x{size} grid")
        self.x = x
        self.y = y
        self.size = size


class CapacityExceededError(GridstarError):
    """A frontier or explored-set push went past its fixed capacity."""


class PathCorruptionError(GridstarError):
    """The parent chain is cyclic, too long, or leaves the grid."""
