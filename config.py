# config.py
"""
Validated, immutable configuration for one lightning simulation run.

User options (from config.json or from Python callers) are merged over a
named preset, which is itself merged over the documented defaults. The
result is checked once, here, so the rest of the engine can trust every
numeric range and geometry mode it reads.

The geometry options (start position, position bias, start velocity) accept
either a mode name, a number (velocity only) or a callable. They are parsed
into a closed `Mode(kind, value)` variant so the factory can dispatch on
`kind` without inspecting types again.
"""
import logging
import math
import time
from collections import namedtuple
from typing import Dict, Any, Optional, Callable

import pygame

from constants import (
    EDGES, BACKGROUND_COLOR, DEFAULT_STROKE_COLOR, DEFAULT_BLUR_COLOR,
    DEFAULT_FADE_ALPHA
)

# --- Data Contracts ---
#
# class LightningConfig (immutable namedtuple):
#   - from_options(options: Optional[Dict[str, Any]] = None,
#                  preset: Optional[str] = None) -> LightningConfig
#     - Inputs:
#       - options: Partial overrides. Unknown keys are rejected.
#       - preset: Name of an entry in PRESETS. Defaults to "default".
#     - Outputs: A fully populated configuration.
#     - Side Effects: Logs and raises ConfigError on any invalid value.
#     - Invariants:
#       - Every min_*/max_* pair satisfies min <= max.
#       - Colors are (r, g, b, a) tuples; background_color is (r, g, b).
#       - start_position, start_position_bias and start_velocity are Mode
#         instances with a kind from their closed set.

Mode = namedtuple('Mode', ['kind', 'value'])

CUSTOM = "custom"
ANGLE = "angle"

START_POSITION_KINDS = ("edges",) + EDGES
POSITION_BIAS_KINDS = ("uniform", "center", "corners")
START_VELOCITY_KINDS = ("inward", "outward", "random")
RENDER_MODES = ("trails", "fade")


class ConfigError(ValueError):
    """Raised when a lightning configuration value is invalid."""


DEFAULT_OPTIONS: Dict[str, Any] = {
    # Timing, in ticks
    "min_delay": 15,
    "max_delay": 40,
    # Bolt creation
    "min_create_count": 1,
    "max_create_count": 4,
    # Bolt physics
    "min_path_length": 80,
    "max_path_length": 150,
    "min_speed": 30,
    "max_speed": 50,
    "min_turniness": 0.1,
    "max_turniness": 0.5,
    # Aesthetics
    "min_line_width": 1,
    "max_line_width": 4,
    "blur": 20,
    "blur_color": DEFAULT_BLUR_COLOR,
    "stroke_color": DEFAULT_STROKE_COLOR,
    "trail_length": 30,
    "render_mode": "trails",
    "fade_alpha": DEFAULT_FADE_ALPHA,
    "background_color": BACKGROUND_COLOR,
    # Geometry
    "start_position": "edges",
    "start_position_bias": "uniform",
    "start_velocity": "inward",
    # Randomness
    "seed": None,
}

RANGE_KEYS = (
    ("min_delay", "max_delay"),
    ("min_create_count", "max_create_count"),
    ("min_path_length", "max_path_length"),
    ("min_speed", "max_speed"),
    ("min_turniness", "max_turniness"),
    ("min_line_width", "max_line_width"),
)

INTEGER_KEYS = (
    "min_delay", "max_delay",
    "min_create_count", "max_create_count",
    "min_path_length", "max_path_length",
    "trail_length", "fade_alpha",
)


def _center_start(width: float, height: float):
    return width / 2, height / 2


def _spiral_start(width: float, height: float):
    """Start point circling the surface centre, one radian per second."""
    angle = time.monotonic()
    radius = min(width, height) * 0.3
    return (
        width / 2 + math.cos(angle) * radius,
        height / 2 + math.sin(angle) * radius,
    )


def _spiral_velocity(edge: str, x: float, y: float, width: float, height: float):
    # Tangent to the circle around the centre.
    angle = math.atan2(y - height / 2, x - width / 2) + math.pi / 2
    return math.cos(angle), math.sin(angle)


PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {},
    "top_down": {
        "start_position": "top",
        "start_velocity": math.pi / 2,
    },
    "corners_inward": {
        "start_position_bias": "corners",
        "start_velocity": "inward",
    },
    "center_burst": {
        "start_position": _center_start,
        "start_velocity": "outward",
    },
    "spiral": {
        "start_position": _spiral_start,
        "start_velocity": _spiral_velocity,
    },
}


def _fail(msg: str):
    logging.critical(f"Configuration error: {msg}")
    raise ConfigError(msg)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_start_position(raw) -> Mode:
    """Parses 'edges', a specific edge name, or a callable (width, height) -> (x, y)."""
    if isinstance(raw, Mode):
        raw = raw.value if raw.kind == CUSTOM else raw.kind
    if callable(raw):
        return Mode(CUSTOM, raw)
    if raw in START_POSITION_KINDS:
        return Mode(raw, None)
    _fail(f"start_position must be one of {START_POSITION_KINDS} or a callable, got {raw!r}.")


def parse_position_bias(raw) -> Mode:
    """Parses 'uniform', 'center', 'corners', or a callable (u) -> t."""
    if isinstance(raw, Mode):
        raw = raw.value if raw.kind == CUSTOM else raw.kind
    if callable(raw):
        return Mode(CUSTOM, raw)
    if raw in POSITION_BIAS_KINDS:
        return Mode(raw, None)
    _fail(f"start_position_bias must be one of {POSITION_BIAS_KINDS} or a callable, got {raw!r}.")


def parse_start_velocity(raw) -> Mode:
    """Parses 'inward', 'outward', 'random', an angle in radians, or a callable."""
    if isinstance(raw, Mode):
        raw = raw.value if raw.kind in (CUSTOM, ANGLE) else raw.kind
    if callable(raw):
        return Mode(CUSTOM, raw)
    if _is_number(raw):
        if not math.isfinite(raw):
            _fail(f"start_velocity angle must be finite, got {raw!r}.")
        return Mode(ANGLE, float(raw))
    if raw in START_VELOCITY_KINDS:
        return Mode(raw, None)
    _fail(
        f"start_velocity must be one of {START_VELOCITY_KINDS}, an angle in radians, "
        f"or a callable, got {raw!r}."
    )


def _parse_color(key: str, raw, with_alpha: bool = True) -> tuple:
    try:
        color = pygame.Color(raw) if isinstance(raw, str) else pygame.Color(*raw)
    except (ValueError, TypeError) as e:
        _fail(f"{key} could not be parsed as a color ({raw!r}): {e}")
    if with_alpha:
        return (color.r, color.g, color.b, color.a)
    return (color.r, color.g, color.b)


class LightningConfig(namedtuple('LightningConfig', list(DEFAULT_OPTIONS.keys()))):
    """
    Immutable tunables for one simulation run. Build with `from_options`.
    """
    __slots__ = ()

    @classmethod
    def from_options(cls, options: Optional[Dict[str, Any]] = None,
                     preset: Optional[str] = None) -> "LightningConfig":
        options = dict(options or {})
        preset = options.pop("preset", None) if preset is None else preset
        preset = preset or "default"
        if preset not in PRESETS:
            _fail(f"Unknown preset {preset!r}. Available presets: {sorted(PRESETS)}.")

        unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
        if unknown:
            _fail(f"Unknown lightning options: {unknown}.")

        merged = dict(DEFAULT_OPTIONS)
        merged.update(PRESETS[preset])
        merged.update(options)

        # Numeric ranges
        for key in INTEGER_KEYS:
            if not isinstance(merged[key], int) or isinstance(merged[key], bool):
                _fail(f"{key} must be an integer, got {merged[key]!r}.")
        for min_key, max_key in RANGE_KEYS:
            low, high = merged[min_key], merged[max_key]
            if not (_is_number(low) and _is_number(high)):
                _fail(f"{min_key}/{max_key} must be numbers, got {low!r}/{high!r}.")
            if low < 0:
                _fail(f"{min_key} must be non-negative, got {low}.")
            if low > high:
                _fail(f"{min_key} ({low}) must not exceed {max_key} ({high}).")
        if merged["min_delay"] < 1:
            _fail(f"min_delay must be at least 1, got {merged['min_delay']}.")
        if merged["min_path_length"] < 1:
            _fail(f"min_path_length must be at least 1, got {merged['min_path_length']}.")
        if merged["trail_length"] < 1:
            _fail(f"trail_length must be at least 1, got {merged['trail_length']}.")
        if not _is_number(merged["blur"]) or merged["blur"] < 0:
            _fail(f"blur must be a non-negative number, got {merged['blur']!r}.")
        if not 0 <= merged["fade_alpha"] <= 255:
            _fail(f"fade_alpha must be within 0-255, got {merged['fade_alpha']}.")
        if merged["render_mode"] not in RENDER_MODES:
            _fail(f"render_mode must be one of {RENDER_MODES}, got {merged['render_mode']!r}.")
        if merged["seed"] is not None and (not isinstance(merged["seed"], int) or isinstance(merged["seed"], bool)):
            _fail(f"seed must be an integer or null, got {merged['seed']!r}.")

        # Aesthetics
        merged["blur_color"] = _parse_color("blur_color", merged["blur_color"])
        merged["stroke_color"] = _parse_color("stroke_color", merged["stroke_color"])
        merged["background_color"] = _parse_color(
            "background_color", merged["background_color"], with_alpha=False
        )

        # Geometry
        merged["start_position"] = parse_start_position(merged["start_position"])
        merged["start_position_bias"] = parse_position_bias(merged["start_position_bias"])
        merged["start_velocity"] = parse_start_velocity(merged["start_velocity"])

        config = cls(**merged)
        logging.info(
            f"Lightning configuration built (preset={preset}, "
            f"start_position={config.start_position.kind}, "
            f"bias={config.start_position_bias.kind}, "
            f"velocity={config.start_velocity.kind}, "
            f"render_mode={config.render_mode})."
        )
        return config
