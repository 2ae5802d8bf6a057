# simulation.py
"""
Handles the core simulation logic of the lightning effect.

This module defines the PhysicsUpdater, which grows every active bolt by
one jittered segment per tick, and the LightningSimulation controller,
which owns all per-effect state (surface size, active bolts, trails and the
storm countdown) and advances it one tick at a time. Nothing here knows how
or when ticks are scheduled.
"""
import logging
import numpy as np
from typing import Dict, Any, List, Optional

from bolt import Bolt, TrailSegment
from config import LightningConfig
from factory import BoltFactory
from rng import RandomSource
from scheduler import SpawnScheduler
from trails import TrailManager

# --- Data Contracts ---
#
# class PhysicsUpdater:
#   - advance(self, bolts, trails, width, height) -> int
#     - Inputs: the active-bolt list and the trail list, both mutated in place.
#     - Outputs: number of bolts retired this tick.
#     - Side Effects: Each bolt's direction is perturbed and renormalized and
#       at most one point is appended to its path. Retired bolts are removed
#       from `bolts` and appended to `trails` as age-0 TrailSegments.
#     - Invariants: len(bolt.path) <= bolt.path_limit; no point outside
#       [0, width] x [0, height] is ever appended.
#
# class LightningSimulation:
#   - __init__(self, config: LightningConfig, width, height,
#              rng: Optional[RandomSource] = None)
#   - tick(self) -> None: age trails, advance bolts, maybe spawn a storm.
#   - resize(self, width, height) -> None: record size, drop all bolts/trails.
#   - clear(self) -> None: drop all bolts/trails.


def renormalize(direction: np.ndarray) -> np.ndarray:
    """Scales a direction vector to unit length in place; zero vectors are left unchanged."""
    magnitude = np.linalg.norm(direction)
    if magnitude > 0:
        direction /= magnitude
    return direction


class PhysicsUpdater:
    """
    Perturb, renormalize, advance with jitter.

    The renormalization keeps repeated additive perturbation from growing the
    direction vector without bound, so the base direction keeps dominating
    long-run displacement.
    """
    def __init__(self, rng: RandomSource):
        self.rng = rng

    def step_bolt(self, bolt: Bolt, width: float, height: float) -> bool:
        """
        Advances a single bolt by one tick.

        Returns:
            bool: True if the bolt should retire.
        """
        if bolt.is_complete:
            return True

        uniform = self.rng.uniform

        # 1. Perturb the heading
        bolt.direction[0] += uniform(-bolt.turniness, bolt.turniness)
        bolt.direction[1] += uniform(-bolt.turniness, bolt.turniness)

        # 2. Renormalize
        renormalize(bolt.direction)

        # 3. Jittered step along the heading
        segment_length = uniform(bolt.speed * 0.5, bolt.speed * 1.5)
        jitter_amount = bolt.speed * 1.5
        last_x, last_y = bolt.last_point
        next_x = last_x + bolt.direction[0] * segment_length + uniform(-jitter_amount, jitter_amount)
        next_y = last_y + bolt.direction[1] * segment_length + uniform(-jitter_amount, jitter_amount)

        # 4. Leaving the surface ends the bolt without the outside point
        if next_x < 0 or next_x > width or next_y < 0 or next_y > height:
            return True

        # 5. Grow, and stop at the point budget
        bolt.path.append((float(next_x), float(next_y)))
        return bolt.is_complete

    def advance(self, bolts: List[Bolt], trails: List[TrailSegment],
                width: float, height: float) -> int:
        survivors = []
        retired = 0
        for bolt in bolts:
            if self.step_bolt(bolt, width, height):
                trails.append(bolt.to_trail())
                retired += 1
            else:
                survivors.append(bolt)
        bolts[:] = survivors
        return retired


class LightningSimulation:
    """
    Explicit simulation state for one mounted lightning effect.
    """
    def __init__(self, config: LightningConfig, width: float, height: float,
                 rng: Optional[RandomSource] = None):
        self.config = config
        self.rng = rng if rng is not None else RandomSource(config.seed)
        self.width = width
        self.height = height

        self.bolts: List[Bolt] = []
        self.trails: List[TrailSegment] = []

        self.scheduler = SpawnScheduler(config.min_delay, config.max_delay, self.rng)
        self.factory = BoltFactory(config, self.rng)
        self.physics = PhysicsUpdater(self.rng)
        self.trail_manager = TrailManager(config.trail_length)

        self.tick_count = 0
        self.storm_count = 0

        logging.info(
            f"LightningSimulation initialized for a {width}x{height} surface. "
            f"First storm in {self.scheduler.ticks_until_next_storm:.1f} ticks."
        )

    def tick(self):
        """
        Executes one simulation step.

        Trails age first so bolts retired during this tick keep age 0 until
        the next one. A storm spawned this tick starts moving on the next.
        """
        # 1. Age and expire trails
        self.trail_manager.tick(self.trails)

        # 2. Grow bolts, spilling retired ones into trails
        self.physics.advance(self.bolts, self.trails, self.width, self.height)

        # 3. Spawn a new storm when due
        if self.scheduler.tick():
            storm = self.factory.create_storm(self.width, self.height)
            self.bolts.extend(storm)
            self.storm_count += 1

        self.tick_count += 1

    def resize(self, width: float, height: float):
        """
        Adopts a new surface size. In-flight bolts and trails refer to the
        old frame and are discarded rather than rescaled.
        """
        self.width = width
        self.height = height
        self.clear()
        logging.info(f"Surface resized to {width}x{height}. Bolts and trails cleared.")

    def clear(self):
        self.bolts.clear()
        self.trails.clear()

    def stats(self) -> Dict[str, Any]:
        """Aggregated counters for throttled logging."""
        return {
            "tick": self.tick_count,
            "storms": self.storm_count,
            "active_bolts": len(self.bolts),
            "trails": len(self.trails),
        }
