# effect.py
"""
Attaches a lightning simulation to a drawing surface.

`attach` wires a LightningSimulation and a Renderer to a surface adapter:
every frame the simulation ticks once and the frame is redrawn, and every
surface resize resets the simulation to the new size. The returned effect
is the teardown handle; calling it stops everything synchronously.
"""
import logging
from typing import Dict, Any, Optional, Union

from config import LightningConfig
from rng import RandomSource
from simulation import LightningSimulation
from visualization import Renderer, SurfaceAdapter

# --- Data Contracts ---
#
# attach(adapter, options=None, rng=None, preset=None) -> Optional[LightningEffect]
#   - Inputs:
#     - adapter: a SurfaceAdapter (or anything with the same methods).
#     - options: partial option overrides, or a ready LightningConfig.
#     - rng: optional RandomSource; defaults to one seeded from the config.
#     - preset: optional preset name (see config.PRESETS).
#   - Outputs: the running effect, or None if the surface is not ready.
#   - Side Effects: registers a resize listener and requests a frame.
#   - Errors: ConfigError for invalid options.
#
# class LightningEffect:
#   - __call__() / detach(): cancels the pending frame, removes the resize
#     listener and clears all simulation state. Idempotent.

class LightningEffect:
    """
    A lightning simulation bound to one surface adapter.
    """
    def __init__(self, adapter: SurfaceAdapter, config: LightningConfig,
                 rng: Optional[RandomSource] = None):
        self.adapter = adapter
        self.config = config
        width, height = adapter.get_size()
        self.simulation = LightningSimulation(config, width, height, rng)
        self.renderer = Renderer(config)
        self.attached = False
        self._frame_handle = None

    def start(self):
        self.adapter.add_resize_listener(self._on_resize)
        self._frame_handle = self.adapter.request_frame(self._on_frame)
        self.attached = True
        logging.info("Lightning effect attached.")

    def _on_frame(self):
        self._frame_handle = None
        if not self.attached:
            return

        self.simulation.tick()
        context = self.adapter.get_context()
        if context is not None:
            self.renderer.render(context, self.simulation.bolts, self.simulation.trails)

        self._frame_handle = self.adapter.request_frame(self._on_frame)

    def _on_resize(self, width: int, height: int):
        self.simulation.resize(width, height)

    def detach(self):
        if not self.attached:
            return
        self.attached = False
        if self._frame_handle is not None:
            self.adapter.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self.adapter.remove_resize_listener(self._on_resize)
        self.simulation.clear()
        logging.info(f"Lightning effect detached after {self.simulation.tick_count} ticks.")

    def __call__(self):
        self.detach()


def attach(adapter: Optional[SurfaceAdapter],
           options: Union[Dict[str, Any], LightningConfig, None] = None,
           rng: Optional[RandomSource] = None,
           preset: Optional[str] = None) -> Optional[LightningEffect]:
    """
    Starts a lightning effect on `adapter`.

    Returns None without doing any work when the surface or its drawing
    context is not ready yet; the caller may retry later.
    """
    if adapter is None or adapter.get_context() is None:
        logging.warning("Lightning effect not attached: drawing surface is not ready.")
        return None

    width, height = adapter.get_size()
    if width <= 0 or height <= 0:
        logging.warning(f"Lightning effect not attached: surface size is {width}x{height}.")
        return None

    if isinstance(options, LightningConfig):
        config = options
    else:
        config = LightningConfig.from_options(options, preset=preset)

    effect = LightningEffect(adapter, config, rng)
    effect.start()
    return effect
