# trails.py
"""
Ages and expires the trails left behind by retired bolts.
"""
import numpy as np
from typing import List

from bolt import TrailSegment

# --- Data Contracts ---
#
# class TrailManager:
#   - __init__(self, trail_length: int)
#
#   - tick(self, trails: List[TrailSegment]) -> int
#     - Outputs: number of trails expired this tick.
#     - Side Effects: Increments every trail's age in place and removes the
#       trails whose age reached trail_length.
#     - Invariants: every remaining trail has age < trail_length.
#
#   - fade_opacity(self, trail: TrailSegment) -> float
#     - Outputs: 1 - age / trail_length, clipped to [0, 1].

class TrailManager:
    def __init__(self, trail_length: int):
        self.trail_length = trail_length

    def tick(self, trails: List[TrailSegment]) -> int:
        for trail in trails:
            trail.age += 1
        before = len(trails)
        trails[:] = [trail for trail in trails if trail.age < self.trail_length]
        return before - len(trails)

    def fade_opacity(self, trail: TrailSegment) -> float:
        return float(np.clip(1.0 - trail.age / self.trail_length, 0.0, 1.0))
