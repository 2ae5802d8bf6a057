# factory.py
"""
Creates new lightning bolts from the configured geometry policy.

The geometry policy has three independent parts, each a `Mode` from the
configuration:
- start position: where on (or inside) the surface a storm strikes,
- position bias: how the strike point is distributed along an edge,
- start velocity: the initial direction of the bolts.

Each part is resolved through a handler table keyed by `Mode.kind`, so
adding a mode means adding one handler.
"""
import logging
import math
import numpy as np
from typing import Callable, Dict, List, Tuple

from bolt import Bolt
from config import LightningConfig, Mode, ConfigError, CUSTOM, ANGLE
from constants import EDGES
from rng import RandomSource

# --- Data Contracts ---
#
# class BoltFactory:
#   - __init__(self, config: LightningConfig, rng: RandomSource)
#
#   - create_storm(self, width: float, height: float) -> List[Bolt]
#     - Outputs: between min_create_count and max_create_count bolts
#       (inclusive) sharing one start point, edge and initial direction.
#     - Side Effects: Consumes random draws.
#     - Errors: ConfigError if a custom geometry callable returns a
#       malformed value.
#
#   - start_point(self, width, height) -> Tuple[str, float, float]
#     - Outputs: (edge, x, y). For edge-based modes the point lies on the
#       named edge; for custom positions the edge is the nearest one.
#
#   - start_velocity(self, edge, x, y, width, height) -> np.ndarray
#     - Outputs: float64 array of shape (2,).


def nearest_edge(x: float, y: float, width: float, height: float) -> str:
    """Classifies a point to the closest surface edge (ties: top, right, bottom, left)."""
    distances = (y, width - x, height - y, x)
    return EDGES[int(np.argmin(distances))]


def point_on_edge(edge: str, t: float, width: float, height: float) -> Tuple[float, float]:
    """Maps a position t in [0, 1] along an edge to surface coordinates."""
    if edge == "top":
        return t * width, 0.0
    if edge == "right":
        return float(width), t * height
    if edge == "bottom":
        return t * width, float(height)
    return 0.0, t * height


def _as_vector(name: str, value) -> Tuple[float, float]:
    """Validates a 2-component numeric value returned by a custom callable."""
    try:
        x, y = value
        x, y = float(x), float(y)
    except (TypeError, ValueError) as e:
        msg = f"Custom {name} must return two numbers, got {value!r}: {e}"
        logging.error(msg)
        raise ConfigError(msg) from e
    if not (math.isfinite(x) and math.isfinite(y)):
        msg = f"Custom {name} returned a non-finite value: {value!r}"
        logging.error(msg)
        raise ConfigError(msg)
    return x, y


class BoltFactory:
    """
    Builds storms of bolts for a surface of a given size.
    """
    def __init__(self, config: LightningConfig, rng: RandomSource):
        self.config = config
        self.rng = rng

        self._bias_handlers: Dict[str, Callable[[Mode], float]] = {
            "uniform": self._bias_uniform,
            "center": self._bias_center,
            "corners": self._bias_corners,
            CUSTOM: self._bias_custom,
        }
        self._velocity_handlers: Dict[str, Callable] = {
            "inward": self._velocity_inward,
            "outward": self._velocity_outward,
            "random": self._velocity_random,
            ANGLE: self._velocity_angle,
            CUSTOM: self._velocity_custom,
        }

    # --- Storms ---

    def create_storm(self, width: float, height: float) -> List[Bolt]:
        cfg = self.config
        count = self.rng.integer(cfg.min_create_count, cfg.max_create_count)
        if count == 0:
            return []

        edge, x, y = self.start_point(width, height)
        direction = self.start_velocity(edge, x, y, width, height)

        bolts = [
            Bolt(
                origin=(x, y),
                direction=direction,
                path_limit=self.rng.integer(cfg.min_path_length, cfg.max_path_length),
                speed=self.rng.uniform(cfg.min_speed, cfg.max_speed),
                turniness=self.rng.uniform(cfg.min_turniness, cfg.max_turniness),
                line_width=self.rng.uniform(cfg.min_line_width, cfg.max_line_width),
                edge=edge,
            )
            for _ in range(count)
        ]
        logging.debug(f"Storm of {count} bolts from {edge} edge at ({x:.1f}, {y:.1f}).")
        return bolts

    # --- Start position ---

    def start_point(self, width: float, height: float) -> Tuple[str, float, float]:
        mode = self.config.start_position
        if mode.kind == CUSTOM:
            x, y = _as_vector("start_position", mode.value(width, height))
            return nearest_edge(x, y, width, height), x, y

        if mode.kind == "edges":
            edge = EDGES[self.rng.integer(0, len(EDGES) - 1)]
        else:
            edge = mode.kind
        t = self.position_along_edge()
        x, y = point_on_edge(edge, t, width, height)
        return edge, x, y

    def position_along_edge(self) -> float:
        mode = self.config.start_position_bias
        return self._bias_handlers[mode.kind](mode)

    def _bias_uniform(self, mode: Mode) -> float:
        return self.rng.uniform(0.0, 1.0)

    def _bias_center(self, mode: Mode) -> float:
        # Mean of two uniforms: triangular, peaked at the midpoint.
        return (self.rng.uniform(0.0, 1.0) + self.rng.uniform(0.0, 1.0)) / 2

    def _bias_corners(self, mode: Mode) -> float:
        if self.rng.uniform(0.0, 1.0) < 0.5:
            return self.rng.uniform(0.0, 0.2)
        return self.rng.uniform(0.8, 1.0)

    def _bias_custom(self, mode: Mode) -> float:
        value = mode.value(self.rng.uniform(0.0, 1.0))
        try:
            t = float(value)
        except (TypeError, ValueError) as e:
            msg = f"Custom start_position_bias must return a number, got {value!r}."
            logging.error(msg)
            raise ConfigError(msg) from e
        if not math.isfinite(t):
            msg = f"Custom start_position_bias returned a non-finite value: {value!r}"
            logging.error(msg)
            raise ConfigError(msg)
        return float(np.clip(t, 0.0, 1.0))

    # --- Start velocity ---

    def start_velocity(self, edge: str, x: float, y: float,
                       width: float, height: float) -> np.ndarray:
        mode = self.config.start_velocity
        vx, vy = self._velocity_handlers[mode.kind](mode, edge, x, y, width, height)
        return np.array([vx, vy], dtype=np.float64)

    def _velocity_inward(self, mode, edge, x, y, width, height):
        uniform = self.rng.uniform
        if edge == "top":
            return uniform(-1.0, 1.0), uniform(0.5, 1.0)
        if edge == "right":
            return uniform(-1.0, -0.5), uniform(-1.0, 1.0)
        if edge == "bottom":
            return uniform(-1.0, 1.0), uniform(-1.0, -0.5)
        return uniform(0.5, 1.0), uniform(-1.0, 1.0)

    def _velocity_outward(self, mode, edge, x, y, width, height):
        dx, dy = x - width / 2, y - height / 2
        magnitude = math.hypot(dx, dy)
        if magnitude == 0:
            # Start point is the centre: every direction is outward.
            return self._velocity_random(mode, edge, x, y, width, height)
        return dx / magnitude, dy / magnitude

    def _velocity_random(self, mode, edge, x, y, width, height):
        angle = self.rng.uniform(0.0, 2 * math.pi)
        return math.cos(angle), math.sin(angle)

    def _velocity_angle(self, mode, edge, x, y, width, height):
        return math.cos(mode.value), math.sin(mode.value)

    def _velocity_custom(self, mode, edge, x, y, width, height):
        return _as_vector("start_velocity", mode.value(edge, x, y, width, height))
