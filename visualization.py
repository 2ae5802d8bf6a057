# visualization.py
"""
Handles the visualization of the lightning simulation using Pygame.

The Renderer projects simulation state onto any pygame Surface. Surface
adapters own the surface itself: they report its size, announce size
changes, and run "next frame" callbacks, which is everything the effect
needs from its host.
"""
import logging
import pygame
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bolt import Bolt, TrailSegment
from config import LightningConfig
from constants import (
    FPS, FULLSCREEN, TITLE, WINDOW_WIDTH, WINDOW_HEIGHT,
    BLOOM_INTENSITY, BLOOM_MIN_SCALE
)
from trails import TrailManager

# --- Data Contracts ---
#
# class Renderer:
#   - __init__(self, config: LightningConfig)
#   - render(self, surface: pygame.Surface, bolts, trails) -> None
#     - Side Effects: Draws one frame onto `surface`. Never mutates the
#       bolts or trails it is given.
#
# class SurfaceAdapter:
#   - get_size() -> (width, height)
#   - get_context() -> Optional[pygame.Surface]; None when not ready.
#   - add_resize_listener(cb) / remove_resize_listener(cb)
#       cb(width, height) is called after the surface changes size.
#   - request_frame(cb) -> int handle / cancel_frame(handle)
#       cb() runs once, on the next frame.
#
# class PygameSurfaceAdapter(SurfaceAdapter): a pygame display window.
#   - run_frame() -> bool: one paced refresh; False on quit or when idle.
#
# class OffscreenSurfaceAdapter(SurfaceAdapter): an in-memory surface,
#   stepped explicitly with run_frame(). Used for headless runs and tests.


def stroke_path(surface: pygame.Surface, color: Sequence[int],
                path: Sequence[Tuple[float, float]], width: float):
    """Strokes a polyline with rounded joins. One-pixel strokes have no visible join to round."""
    if len(path) < 2:
        return
    line_width = max(1, int(round(width)))
    pygame.draw.lines(surface, color, False, path, line_width)
    if line_width >= 2:
        # pygame leaves notches at thick joins; cap each vertex with a disc.
        radius = line_width / 2
        for point in path:
            pygame.draw.circle(surface, color, point, radius)


class Renderer:
    """
    Draws trails, then active bolts, with a bloom glow under both.
    """
    def __init__(self, config: LightningConfig):
        self.config = config
        self.trail_manager = TrailManager(config.trail_length)

        # Scratch layers, reallocated when the target size changes.
        self._size: Optional[Tuple[int, int]] = None
        self._glow_layer: Optional[pygame.Surface] = None
        self._stroke_layer: Optional[pygame.Surface] = None
        self._fade_overlay: Optional[pygame.Surface] = None

        self.bloom_scale = max(BLOOM_MIN_SCALE, int(config.blur / 2))

        logging.info(
            f"Renderer initialized (mode={config.render_mode}, blur={config.blur}, "
            f"bloom scale={self.bloom_scale})."
        )

    def _ensure_layers(self, size: Tuple[int, int]):
        if size == self._size:
            return
        self._size = size
        self._glow_layer = pygame.Surface(size, 0, 32)
        self._stroke_layer = pygame.Surface(size, pygame.SRCALPHA, 32)
        self._fade_overlay = pygame.Surface(size, pygame.SRCALPHA, 32)
        r, g, b = self.config.background_color
        self._fade_overlay.fill((r, g, b, self.config.fade_alpha))
        logging.debug(f"Renderer layers allocated for {size[0]}x{size[1]}.")

    def render(self, surface: pygame.Surface, bolts: List[Bolt], trails: List[TrailSegment]):
        self._ensure_layers(surface.get_size())
        cfg = self.config

        # 1. Clear, or fade the previous frames
        if cfg.render_mode == "fade":
            surface.blit(self._fade_overlay, (0, 0))
            # Previous frames already hold the trails.
            visible_trails = []
        else:
            surface.fill(cfg.background_color)
            visible_trails = trails

        faded = [(trail, self.trail_manager.fade_opacity(trail)) for trail in visible_trails]

        # 2. Glow pass
        if cfg.blur > 0:
            self._draw_glow(surface, bolts, faded)

        # 3. Crisp pass: trails underneath active bolts
        r, g, b, a = cfg.stroke_color
        layer = self._stroke_layer
        layer.fill((0, 0, 0, 0))
        for trail, opacity in faded:
            if opacity <= 0:
                continue
            stroke_path(layer, (r, g, b, int(a * opacity)), trail.path, trail.line_width * opacity)
        for bolt in bolts:
            stroke_path(layer, cfg.stroke_color, bolt.path, bolt.line_width)
        surface.blit(layer, (0, 0))

    def _draw_glow(self, surface: pygame.Surface, bolts: List[Bolt], faded):
        """
        Bloom: strokes in the glow colour on a black layer, blurred by a
        down/up smoothscale and added onto the frame.
        """
        cfg = self.config
        r, g, b, a = cfg.blur_color
        spread = cfg.blur / 2
        layer = self._glow_layer
        layer.fill((0, 0, 0))

        def premultiplied(opacity: float):
            k = a / 255 * opacity
            return (int(r * k), int(g * k), int(b * k))

        for trail, opacity in faded:
            if opacity <= 0:
                continue
            stroke_path(layer, premultiplied(opacity), trail.path, trail.line_width * opacity + spread)
        for bolt in bolts:
            stroke_path(layer, premultiplied(1.0), bolt.path, bolt.line_width + spread)

        width, height = self._size
        scaled_size = (max(1, width // self.bloom_scale), max(1, height // self.bloom_scale))
        scaled = pygame.transform.smoothscale(layer, scaled_size)
        blurred = pygame.transform.smoothscale(scaled, (width, height))
        if BLOOM_INTENSITY < 255:
            blurred.fill((BLOOM_INTENSITY,) * 3, special_flags=pygame.BLEND_RGB_MULT)
        surface.blit(blurred, (0, 0), special_flags=pygame.BLEND_RGB_ADD)


class SurfaceAdapter:
    """
    Host-side bookkeeping shared by every adapter: resize listeners and
    pending frame callbacks.
    """
    def __init__(self):
        self._resize_listeners: List[Callable[[int, int], None]] = []
        self._frame_callbacks: Dict[int, Callable[[], None]] = {}
        self._next_frame_handle = 1

    def get_size(self) -> Tuple[int, int]:
        raise NotImplementedError

    def get_context(self) -> Optional[pygame.Surface]:
        raise NotImplementedError

    def add_resize_listener(self, callback: Callable[[int, int], None]):
        self._resize_listeners.append(callback)

    def remove_resize_listener(self, callback: Callable[[int, int], None]):
        if callback in self._resize_listeners:
            self._resize_listeners.remove(callback)

    @property
    def resize_listener_count(self) -> int:
        return len(self._resize_listeners)

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_frame_handle
        self._next_frame_handle += 1
        self._frame_callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._frame_callbacks.pop(handle, None)

    @property
    def pending_frame_count(self) -> int:
        return len(self._frame_callbacks)

    def _notify_resize(self, width: int, height: int):
        for callback in list(self._resize_listeners):
            callback(width, height)

    def _run_frame_callbacks(self) -> int:
        # Callbacks requested while running belong to the next frame.
        due = self._frame_callbacks
        self._frame_callbacks = {}
        for callback in due.values():
            callback()
        return len(due)


class OffscreenSurfaceAdapter(SurfaceAdapter):
    """
    An in-memory drawing surface driven by explicit `run_frame()` calls.
    """
    def __init__(self, width: int, height: int):
        super().__init__()
        self.surface: Optional[pygame.Surface] = None
        self._allocate(width, height)

    def _allocate(self, width: int, height: int):
        if width > 0 and height > 0:
            self.surface = pygame.Surface((width, height), 0, 32)
        else:
            self.surface = None

    def get_size(self) -> Tuple[int, int]:
        return self.surface.get_size() if self.surface is not None else (0, 0)

    def get_context(self) -> Optional[pygame.Surface]:
        return self.surface

    def resize(self, width: int, height: int):
        self._allocate(width, height)
        self._notify_resize(width, height)

    def run_frame(self) -> bool:
        """
        Runs the frame callbacks that are due.

        Returns:
            bool: False once nothing is left to run.
        """
        return self._run_frame_callbacks() > 0

    def close(self):
        self.surface = None


class PygameSurfaceAdapter(SurfaceAdapter):
    """
    A pygame display window. Frames are paced by a pygame Clock.
    """
    def __init__(self, width: int = WINDOW_WIDTH, height: int = WINDOW_HEIGHT,
                 fullscreen: bool = FULLSCREEN, title: str = TITLE, fps: int = FPS):
        super().__init__()
        pygame.init()

        if fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.running = True

        logging.info(f"PygameSurfaceAdapter initialized with display ({width}x{height}).")

    def get_size(self) -> Tuple[int, int]:
        return self.screen.get_size() if self.screen is not None else (0, 0)

    def get_context(self) -> Optional[pygame.Surface]:
        return self.screen

    def _handle_events(self) -> bool:
        """Processes pending events. Returns False if the user has quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down.")
                return False

            if event.type == pygame.VIDEORESIZE:
                # SDL2 resizes the display surface itself; pick up the new one.
                self.screen = pygame.display.get_surface()
                width, height = self.screen.get_size()
                logging.debug(f"Window resized to {width}x{height}.")
                self._notify_resize(width, height)
        return True

    def run_frame(self) -> bool:
        """
        Runs one display refresh: events, due frame callbacks, flip.

        Returns:
            bool: False if the loop should stop.
        """
        if not self._handle_events():
            self.running = False
            return False
        ran = self._run_frame_callbacks()
        pygame.display.flip()
        self.clock.tick(self.fps)
        return ran > 0

    def close(self):
        """Shuts down Pygame."""
        self.screen = None
        pygame.quit()
