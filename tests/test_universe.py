import itertools

import pygame
import pytest

from constants import Mode
from universe import FrameScheduler, Universe


class FakeClock:
    def __init__(self):
        self.ticks = []

    def tick(self, fps):
        self.ticks.append(fps)
        return 0


def _universe(surface, sim_params, **vis):
    vis.setdefault("trail_alpha", 0.2)
    return Universe(surface, sim_params, vis, now=0.0, clock=FakeClock())


def test_hover_collapses_and_leave_restores(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    assert universe.state is Mode.NORMAL
    universe.pointer_enter()
    assert universe.state is Mode.COLLAPSED
    universe.pointer_leave()
    assert universe.state is Mode.NORMAL
    universe.pointer_leave()
    assert universe.state is Mode.NORMAL


def test_expanded_takes_priority_over_hover(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.pointer_enter()
    universe.activate()
    assert universe.state is Mode.EXPANDED

    universe.pointer_leave()
    assert universe.state is Mode.EXPANDED
    assert universe.hovering is False
    universe.pointer_enter()
    assert universe.state is Mode.EXPANDED
    assert universe.hovering is True

    universe.cancel()
    assert universe.state is Mode.NORMAL
    universe.cancel()
    assert universe.state is Mode.NORMAL


def test_activate_from_any_state(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.activate()
    assert universe.state is Mode.EXPANDED
    universe.activate()
    assert universe.state is Mode.EXPANDED


def test_signal_reaches_field_on_next_frame(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.pointer_enter()
    assert universe.field.mode is Mode.NORMAL
    universe.frame(now=1 / 60.0)
    assert universe.field.mode is Mode.COLLAPSED


def test_frame_clears_with_trail_alpha_then_draws(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params, trail_alpha=0.35)
    recording_surface.calls.clear()
    assert universe.frame(now=1 / 60.0) is True

    assert recording_surface.calls[0] == ("clear", 0.35)
    segments = recording_surface.segments()
    assert len(segments) == 3
    # Stars draw inside the device-scale transform, which is released afterwards.
    assert all(seg[4] == 1 for seg in segments)
    assert recording_surface.depth == 0


def test_transform_is_restored_when_drawing_fails(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    recording_surface.fail_on_draw = True
    with pytest.raises(RuntimeError):
        universe.frame(now=1 / 60.0)
    assert recording_surface.depth == 0


def test_dpi_sets_device_scale(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params, dpi=192)
    assert universe.device_scale == pytest.approx(2.0)


def test_resize_moves_field_center(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.frame(now=1 / 60.0)
    universe.resize(400, 300)
    assert recording_surface.width == 400
    assert universe.field.center == (200.0, 150.0)
    universe.frame(now=2 / 60.0)
    assert all(star.is_finite() for star in universe.field.stars)


def test_frame_skips_surface_without_area(recording_surface, sim_params) -> None:
    surface = recording_surface
    surface.width = 0
    surface.height = 0
    universe = _universe(surface, sim_params)
    assert universe.frame(now=1 / 60.0) is False
    assert surface.segments() == []


def test_handle_event_translates_pygame_events(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)

    universe.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(410, 305), rel=(0, 0), buttons=(0, 0, 0)))
    assert universe.state is Mode.COLLAPSED

    universe.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(5, 5), rel=(0, 0), buttons=(0, 0, 0)))
    assert universe.state is Mode.NORMAL

    universe.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(5, 5), button=1))
    assert universe.state is Mode.NORMAL
    universe.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(400, 300), button=1))
    assert universe.state is Mode.EXPANDED

    universe.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert universe.state is Mode.NORMAL

    universe.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=640, h=480, size=(640, 480)))
    assert universe.field.center == (320.0, 240.0)

    universe.handle_event(pygame.event.Event(pygame.QUIT))
    assert universe.scheduler.stopped


def test_window_leave_releases_hover(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.pointer_enter()
    universe.handle_event(pygame.event.Event(pygame.WINDOWLEAVE))
    assert universe.state is Mode.NORMAL


def test_start_runs_until_max_frames(recording_surface, sim_params) -> None:
    clock = itertools.count()
    universe = Universe(
        recording_surface,
        sim_params,
        {},
        clock=FakeClock(),
        time_source=lambda: next(clock) / 60.0,
    )
    assert universe.start(max_frames=4) == 4
    assert universe.frame_count == 4
    assert universe.scheduler.stopped
    with pytest.raises(RuntimeError):
        universe.start(max_frames=1)


def test_stop_is_idempotent(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params)
    universe.stop()
    universe.stop()
    assert universe.scheduler.stopped


def test_scheduler_ticks_clock_between_frames() -> None:
    calls = []
    clock = FakeClock()
    scheduler = FrameScheduler(lambda: calls.append(1), 30, clock)
    assert scheduler.run(max_frames=5) == 5
    assert len(calls) == 5
    assert clock.ticks == [30] * 4


def test_scheduler_stops_from_inside_callback() -> None:
    clock = FakeClock()
    scheduler = None
    count = []

    def callback():
        count.append(1)
        if len(count) == 3:
            scheduler.stop()

    scheduler = FrameScheduler(callback, 60, clock)
    assert scheduler.run() == 3
    assert scheduler.stop() is False
    with pytest.raises(RuntimeError, match="restarted"):
        scheduler.run()


def test_invalid_visualization_params(recording_surface, sim_params) -> None:
    with pytest.raises(ValueError, match="trail_alpha"):
        _universe(recording_surface, sim_params, trail_alpha=1.5)
    with pytest.raises(ValueError, match="target_frame_rate"):
        _universe(recording_surface, sim_params, target_frame_rate=0)


def test_scheduler_with_zero_frame_limit_produces_nothing() -> None:
    calls = []
    clock = FakeClock()
    scheduler = FrameScheduler(lambda: calls.append(1), 60, clock)
    assert scheduler.run(max_frames=0) == 0
    assert calls == []
    assert clock.ticks == []
    assert scheduler.stopped


def test_resize_recomputes_device_pixel_scaling(recording_surface, sim_params) -> None:
    universe = _universe(recording_surface, sim_params, dpi=192)
    recording_surface.calls.clear()
    universe.resize(640, 480)
    assert recording_surface.calls == [("resize", 640, 480), ("scale", 2.0)]
    assert universe.device_scale == pytest.approx(2.0)
