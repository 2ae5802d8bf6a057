# bolt.py
"""
State containers for lightning bolts and the trails they leave behind.

A Bolt is mutable and grows by one path point per tick while active. When it
retires, its path is frozen into a TrailSegment which only ages until it
expires.
"""
import logging
import numpy as np
from typing import List, Sequence, Tuple

Point = Tuple[float, float]

# --- Data Contracts ---
#
# class Bolt:
#   - __init__(self, origin, direction, path_limit, speed, turniness,
#              line_width, edge):
#     - Inputs:
#       - origin: (x, y) start point; becomes path[0].
#       - direction: (vx, vy) initial direction. Need not be unit length.
#       - path_limit: int >= 1, maximum number of path points.
#       - speed, turniness, line_width: per-bolt scalars.
#       - edge: name of the surface edge the bolt is associated with.
#     - Invariants:
#       - self.direction is a float64 NumPy array of shape (2,).
#       - self.path is append-only and len(self.path) <= self.path_limit.
#
# class TrailSegment:
#   - __init__(self, path, line_width):
#     - Inputs: path points of a retired bolt (copied) and its line width.
#     - Invariants: self.path is an immutable tuple; self.age starts at 0.

class Bolt:
    """
    A single growing lightning path.
    """
    def __init__(self, origin: Point, direction: Sequence[float], path_limit: int,
                 speed: float, turniness: float, line_width: float, edge: str = "top"):
        self.origin = (float(origin[0]), float(origin[1]))
        self.direction = np.array(direction, dtype=np.float64)
        self.path: List[Point] = [self.origin]
        self.path_limit = int(path_limit)
        self.speed = float(speed)
        self.turniness = float(turniness)
        self.line_width = float(line_width)
        self.edge = edge

    @property
    def last_point(self) -> Point:
        return self.path[-1]

    @property
    def is_complete(self) -> bool:
        """True once the path has reached its point budget."""
        return len(self.path) >= self.path_limit

    def to_trail(self) -> "TrailSegment":
        return TrailSegment(self.path, self.line_width)

    def __repr__(self):
        return (
            f"Bolt(origin={self.origin}, edge={self.edge}, points={len(self.path)}/"
            f"{self.path_limit}, speed={self.speed:.1f})"
        )


class TrailSegment:
    """
    A frozen, fading snapshot of a retired bolt's path.
    """
    def __init__(self, path: Sequence[Point], line_width: float):
        self.path: Tuple[Point, ...] = tuple(path)
        self.line_width = float(line_width)
        self.age = 0
        logging.debug(f"Trail created with {len(self.path)} points.")

    def __repr__(self):
        return f"TrailSegment(points={len(self.path)}, age={self.age})"
