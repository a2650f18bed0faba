# universe.py
"""
The controller that ties the star field to a surface and a render loop.

Universe owns the BlackHole, the drawing surface, the interaction state
machine and the frame scheduler. External signals (hover, click, escape,
resize) only change controller state; the field observes the new mode at
the start of the next frame.
"""
import logging
import math
import time
from typing import Any, Callable, Dict, Optional

import pygame

from constants import Mode, LOG_THROTTLE_FRAMES
from simulation import BlackHole
from utils import validate_visualization_params

# --- Data Contracts ---
#
# class FrameScheduler:
#   - __init__(self, callback: Callable[[], None], fps: float, clock=None):
#     - Inputs:
#       - callback: Invoked once per frame.
#       - fps: Target frame rate.
#       - clock: Object with a tick(fps) method. Defaults to pygame.time.Clock().
#   - run(self, max_frames: Optional[int] = None) -> int:
#     - Outputs: Number of frames produced.
#     - Invariants: Never re-entered; cannot be restarted after stop().
#
# class Universe:
#   - __init__(self, surface, sim_params, vis_params, display=None, now=None,
#              clock=None, time_source=time.perf_counter, log_throttle=...):
#     - Inputs:
#       - surface: Anything with clear/draw_segment/draw_segments/
#         scoped_transform/device_pixel_scale/resize and width/height
#         attributes.
#       - sim_params / vis_params: Config sections, validated here.
#       - display: Optional pygame window the surface is presented to.
#     - Side Effects: Builds the field sized to the surface.


class FrameScheduler:
    """
    A single periodic loop with explicit start and stop.
    """
    def __init__(self, callback: Callable[[], None], fps: float, clock=None):
        self.callback = callback
        self.fps = fps
        self.clock = clock if clock is not None else pygame.time.Clock()
        self.running = False
        self.stopped = False
        self.frames = 0

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        Calls the callback once per frame until stopped or max_frames is hit.

        Returns:
            int: The number of frames produced by this run.
        """
        if self.stopped:
            raise RuntimeError("FrameScheduler cannot be restarted after stop().")
        if self.running:
            raise RuntimeError("FrameScheduler is already running.")

        self.running = True
        produced = 0
        try:
            while self.running:
                if max_frames is not None and produced >= max_frames:
                    logging.info(f"Reached max_frames ({max_frames}). Stopping render loop.")
                    self.stop()
                    break
                self.callback()
                produced += 1
                self.frames += 1
                if self.running and (max_frames is None or produced < max_frames):
                    self.clock.tick(self.fps)
        finally:
            self.running = False
        return produced

    def stop(self) -> bool:
        """
        Stops the loop after the current frame. Safe to call more than once.

        Returns:
            bool: True on the first call, False when already stopped.
        """
        if self.stopped:
            return False
        self.stopped = True
        self.running = False
        return True


class Universe:
    """
    Owns the field, the surface and the render loop, and reacts to signals.
    """
    def __init__(
        self,
        surface,
        sim_params: Dict[str, Any],
        vis_params: Optional[Dict[str, Any]] = None,
        display: Optional[pygame.Surface] = None,
        now: Optional[float] = None,
        clock=None,
        time_source: Callable[[], float] = time.perf_counter,
        log_throttle: int = LOG_THROTTLE_FRAMES,
    ):
        self.vis_params = validate_visualization_params(vis_params or {})
        self.surface = surface
        self.display = display
        self.time_source = time_source
        self.log_throttle = max(1, int(log_throttle))

        self.state = Mode.NORMAL
        self.hovering = False
        self.frame_count = 0

        self.device_scale = self.surface.device_pixel_scale(self.vis_params['dpi'])
        self.field = BlackHole(
            sim_params,
            self.surface.width,
            self.surface.height,
            now=self.time_source() if now is None else now,
            frame_rate=self.vis_params['target_frame_rate'],
        )
        hover_radius = self.vis_params['hover_radius']
        self.hover_radius = self.field.radius if hover_radius is None else hover_radius
        self.scheduler = FrameScheduler(self.frame, self.vis_params['target_frame_rate'], clock)

        logging.info(
            f"Universe ready: {len(self.field.stars)} stars at "
            f"{self.vis_params['target_frame_rate']:.0f} Hz, trail alpha {self.vis_params['trail_alpha']:.2f}."
        )

    # --- Signals ---

    def pointer_enter(self) -> None:
        self.hovering = True
        if self.state is Mode.NORMAL:
            self._transition(Mode.COLLAPSED)

    def pointer_leave(self) -> None:
        self.hovering = False
        if self.state is Mode.COLLAPSED:
            self._transition(Mode.NORMAL)

    def activate(self) -> None:
        self._transition(Mode.EXPANDED)

    def cancel(self) -> None:
        if self.state is Mode.EXPANDED:
            self._transition(Mode.NORMAL)

    def resize(self, width: int, height: int) -> None:
        """Resizes the surface and moves the field center; stars keep their phases."""
        self.surface.resize(width, height)
        self.device_scale = self.surface.device_pixel_scale(self.vis_params['dpi'])
        self.field.resize(self.surface.width, self.surface.height)

    def _transition(self, new_state: Mode) -> None:
        if new_state is not self.state:
            logging.debug(f"Interaction state {self.state.value} -> {new_state.value}.")
        self.state = new_state

    def in_hover_region(self, pos) -> bool:
        center = self.field.center
        return math.hypot(pos[0] - center.x, pos[1] - center.y) <= self.hover_radius

    def handle_event(self, event: pygame.event.Event) -> None:
        """Translates a Pygame event into one of the controller signals."""
        if event.type == pygame.QUIT:
            logging.info("Quit event received. Stopping render loop.")
            self.stop()
        elif event.type == pygame.MOUSEMOTION:
            inside = self.in_hover_region(event.pos)
            if inside and not self.hovering:
                self.pointer_enter()
            elif not inside and self.hovering:
                self.pointer_leave()
        elif event.type == pygame.WINDOWLEAVE:
            if self.hovering:
                self.pointer_leave()
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1 and self.in_hover_region(event.pos):
                self.activate()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.cancel()
        elif event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)

    # --- Render loop ---

    def frame(self, now: Optional[float] = None) -> bool:
        """
        Produces one frame: fade the surface, then tick and draw every star.

        Returns:
            bool: False if the surface was not ready and no star moved.
        """
        if self.display is not None:
            for event in pygame.event.get():
                self.handle_event(event)

        now = self.time_source() if now is None else now
        self.field.set_mode(self.state)
        self.surface.clear(self.vis_params['trail_alpha'])
        with self.surface.scoped_transform(scale=self.device_scale):
            ticked = self.field.tick(now, self.surface)

        if self.display is not None:
            self.surface.present(self.display, self.vis_params['center_label'])
            pygame.display.flip()

        self.frame_count += 1
        # Rule 2.4: Hot loops must throttle logs
        if self.frame_count % self.log_throttle == 0:
            logging.info(f"Frame {self.frame_count} ({self.state.value}).")
            stats = self.field.stats()
            logging.debug(
                f"Frame {self.frame_count} | Mean distance: {stats['mean_distance']:.2f} "
                f"| Range: [{stats['min_distance']:.2f}, {stats['max_distance']:.2f}]"
            )
        return ticked

    def start(self, max_frames: Optional[int] = None) -> int:
        """Runs the render loop until stop() or max_frames."""
        logging.info("Render loop starting.")
        return self.scheduler.run(max_frames)

    def stop(self) -> None:
        if self.scheduler.stop():
            logging.info("Render loop stopped.")
