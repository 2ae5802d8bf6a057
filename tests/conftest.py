"""Shared fixtures for the lightning test suite.

pygame runs against SDL's dummy drivers so every test is headless.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import logging

import pygame
import pytest

from config import LightningConfig
from rng import RandomSource


class MidpointRandom(RandomSource):
    """Always returns the middle of the requested range."""

    def uniform(self, low, high):
        return (low + high) / 2


class ScriptedRandom(RandomSource):
    """Returns queued values in order, then falls back to range midpoints."""

    def __init__(self, values):
        super().__init__(seed=0)
        self.values = list(values)

    def uniform(self, low, high):
        if self.values:
            return self.values.pop(0)
        return (low + high) / 2


@pytest.fixture(autouse=True)
def pygame_headless():
    pygame.init()
    yield


@pytest.fixture
def midpoint_rng():
    return MidpointRandom()


@pytest.fixture
def seeded_rng():
    return RandomSource(seed=1234)


@pytest.fixture
def make_config():
    """Builds a LightningConfig from keyword overrides."""

    def _make(**options):
        return LightningConfig.from_options(options)

    return _make


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def scripted_rng():
    """Factory for a RandomSource that replays the given values."""
    return ScriptedRandom
