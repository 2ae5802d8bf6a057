"""Tests for visualization.py: the Renderer and the surface adapters.

Rendering is checked on small in-memory pygame surfaces by sampling
pixels well inside and well away from the stroked paths.
"""

import pygame
import pytest

from bolt import Bolt, TrailSegment
from visualization import (
    OffscreenSurfaceAdapter,
    PygameSurfaceAdapter,
    Renderer,
    stroke_path,
)

BLACK = (0, 0, 0)


def _surface(width=200, height=100, fill=BLACK):
    surface = pygame.Surface((width, height), 0, 32)
    surface.fill(fill)
    return surface


def _rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


def _horizontal_bolt(y=50.0, width=3.0):
    bolt = Bolt((10.0, y), (1.0, 0.0), 10, 30.0, 0.1, width)
    bolt.path.append((190.0, y))
    return bolt


@pytest.mark.unit
class TestStrokePath:
    def test_single_point_draws_nothing(self):
        surface = _surface()
        stroke_path(surface, (255, 255, 255), [(50.0, 50.0)], 4)
        assert pygame.transform.average_color(surface)[:3] == BLACK

    def test_thick_stroke_covers_the_line(self):
        surface = _surface()
        stroke_path(surface, (255, 0, 0), [(20.0, 20.0), (180.0, 20.0), (180.0, 80.0)], 6)
        assert _rgb(surface, (100, 20)) == (255, 0, 0)
        assert _rgb(surface, (180, 50)) == (255, 0, 0)
        assert _rgb(surface, (100, 60)) == BLACK

    @pytest.mark.parametrize("width,caps", [(1, 0), (1.4, 0), (2, 3), (1.6, 3), (5, 3)])
    def test_joins_are_capped_from_width_two(self, monkeypatch, width, caps):
        drawn = []
        monkeypatch.setattr(pygame.draw, "circle", lambda *args, **kwargs: drawn.append(args))
        stroke_path(_surface(), (255, 0, 0), [(20.0, 20.0), (180.0, 20.0), (180.0, 80.0)], width)
        assert len(drawn) == caps


@pytest.mark.unit
class TestRenderer:
    def test_bolt_drawn_in_stroke_color(self, make_config):
        renderer = Renderer(make_config(blur=0, stroke_color=(255, 255, 255, 255)))
        surface = _surface()
        renderer.render(surface, [_horizontal_bolt()], [])
        assert _rgb(surface, (100, 50)) == (255, 255, 255)
        assert _rgb(surface, (100, 10)) == BLACK

    def test_clears_previous_frame(self, make_config):
        renderer = Renderer(make_config(blur=0))
        surface = _surface(fill=(200, 10, 10))
        renderer.render(surface, [], [])
        assert _rgb(surface, (5, 5)) == BLACK

    def test_trail_fades_with_age(self, make_config):
        renderer = Renderer(make_config(blur=0, trail_length=10, stroke_color=(255, 255, 255, 255)))
        young, old = _surface(), _surface()
        trail = TrailSegment(_horizontal_bolt(width=4.0).path, 4.0)

        renderer.render(young, [], [trail])
        trail.age = 7
        renderer.render(old, [], [trail])

        assert _rgb(young, (100, 50))[0] > _rgb(old, (100, 50))[0] > 0

    def test_fully_faded_trail_is_invisible(self, make_config):
        renderer = Renderer(make_config(blur=0, trail_length=10))
        surface = _surface()
        trail = TrailSegment(_horizontal_bolt().path, 3.0)
        trail.age = 10
        renderer.render(surface, [], [trail])
        assert pygame.transform.average_color(surface)[:3] == BLACK

    def test_glow_spreads_beyond_the_stroke(self, make_config):
        sharp, glowing = _surface(), _surface()
        bolt = _horizontal_bolt(width=1.0)

        Renderer(make_config(blur=0)).render(sharp, [bolt], [])
        Renderer(make_config(blur=20)).render(glowing, [bolt], [])

        assert _rgb(sharp, (100, 54)) == BLACK
        assert sum(_rgb(glowing, (100, 54))) > 0

    def test_render_does_not_mutate_state(self, make_config):
        renderer = Renderer(make_config())
        bolt = _horizontal_bolt()
        trail = TrailSegment(bolt.path, 2.0)
        trail.age = 4
        bolts, trails = [bolt], [trail]

        renderer.render(_surface(), bolts, trails)

        assert bolts == [bolt] and trails == [trail]
        assert len(bolt.path) == 2
        assert trail.age == 4

    def test_fade_mode_dims_instead_of_clearing(self, make_config):
        renderer = Renderer(make_config(blur=0, render_mode="fade", fade_alpha=64))
        surface = _surface(fill=(255, 255, 255))
        renderer.render(surface, [], [])
        r, g, b = _rgb(surface, (5, 5))
        assert 0 < r < 255

    def test_fade_mode_skips_trail_segments(self, make_config):
        renderer = Renderer(make_config(blur=0, render_mode="fade", fade_alpha=255))
        surface = _surface()
        renderer.render(surface, [], [TrailSegment(_horizontal_bolt().path, 3.0)])
        assert _rgb(surface, (100, 50)) == BLACK

    def test_layers_follow_surface_size(self, make_config):
        renderer = Renderer(make_config())
        renderer.render(_surface(200, 100), [], [])
        renderer.render(_surface(64, 48), [_horizontal_bolt(y=20.0)], [])
        assert renderer._size == (64, 48)


@pytest.mark.unit
class TestOffscreenSurfaceAdapter:
    def test_reports_size_and_context(self):
        adapter = OffscreenSurfaceAdapter(320, 240)
        assert adapter.get_size() == (320, 240)
        assert adapter.get_context().get_size() == (320, 240)

    def test_zero_size_is_not_ready(self):
        adapter = OffscreenSurfaceAdapter(0, 240)
        assert adapter.get_context() is None
        assert adapter.get_size() == (0, 0)

    def test_frame_callbacks_run_once(self):
        adapter = OffscreenSurfaceAdapter(10, 10)
        calls = []
        adapter.request_frame(lambda: calls.append(1))
        assert adapter.run_frame()
        assert not adapter.run_frame()
        assert calls == [1]

    def test_callback_requested_during_frame_runs_next_frame(self):
        adapter = OffscreenSurfaceAdapter(10, 10)
        calls = []

        def again():
            calls.append(len(calls))
            if len(calls) < 3:
                adapter.request_frame(again)

        adapter.request_frame(again)
        adapter.run_frame()
        assert calls == [0]
        adapter.run_frame()
        adapter.run_frame()
        assert calls == [0, 1, 2]

    def test_cancelled_frame_never_runs(self):
        adapter = OffscreenSurfaceAdapter(10, 10)
        calls = []
        handle = adapter.request_frame(lambda: calls.append(1))
        adapter.cancel_frame(handle)
        adapter.cancel_frame(handle)
        assert not adapter.run_frame()
        assert calls == []

    def test_resize_notifies_listeners(self):
        adapter = OffscreenSurfaceAdapter(10, 10)
        seen = []
        listener = lambda w, h: seen.append((w, h))
        adapter.add_resize_listener(listener)
        adapter.resize(30, 20)
        adapter.remove_resize_listener(listener)
        adapter.resize(40, 40)
        assert seen == [(30, 20)]
        assert adapter.get_size() == (40, 40)
        assert adapter.resize_listener_count == 0


@pytest.mark.unit
class TestPygameSurfaceAdapter:
    def test_window_lifecycle(self):
        adapter = PygameSurfaceAdapter(width=160, height=120, title="test")
        try:
            assert adapter.get_size() == (160, 120)
            assert adapter.get_context() is not None

            calls = []
            adapter.request_frame(lambda: calls.append(1))
            assert adapter.run_frame()
            assert calls == [1]
            assert not adapter.run_frame()
        finally:
            adapter.close()
        assert adapter.get_context() is None

    def test_resize_event_notifies_listeners(self):
        adapter = PygameSurfaceAdapter(width=160, height=120)
        try:
            seen = []
            adapter.add_resize_listener(lambda w, h: seen.append((w, h)))
            pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, w=200, h=150, size=(200, 150)))
            adapter.run_frame()
            assert seen
            assert all(size == adapter.get_size() for size in seen)
        finally:
            adapter.close()

    def test_quit_event_stops_the_loop(self):
        adapter = PygameSurfaceAdapter(width=160, height=120)
        try:
            adapter.request_frame(lambda: None)
            pygame.event.post(pygame.event.Event(pygame.QUIT))
            assert not adapter.run_frame()
            assert not adapter.running
        finally:
            adapter.close()
