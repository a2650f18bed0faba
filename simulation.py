# simulation.py
"""
Handles the shared state of the star field.

This module defines the BlackHole class, which owns the star arrays, the
field center, the interaction mode and the simulation clock, and advances
every star once per tick.
"""
import logging
import time
from typing import Dict, Any, List, Optional

import numpy as np

from constants import Mode, FPS
from orbital_math import Vector2, TWO_PI
from particle import (
    Star, advance_stars, collapse_targets, expansion_targets, positions_at,
    sample_orbital_distances, star_colors,
)
from utils import validate_simulation_params

# --- Data Contracts ---
#
# class BlackHole:
#   - __init__(self, params: Dict[str, Any], width: float, height: float,
#              now: Optional[float] = None, frame_rate: float = FPS):
#     - Inputs:
#       - params: Simulation parameters from config.json (validated here).
#         - "seed": int or None
#         - "particle_count": int
#         - "horizon_radius", "orbit_radius_min", "orbit_radius_max": float
#         - "smoothing_factor": float
#       - width, height: Logical size of the drawing surface.
#       - now: Clock reading (seconds) used as the epoch. Defaults to
#         time.perf_counter().
#       - frame_rate: Target frame rate, used to size the star seed step.
#     - Side Effects: Samples particle_count stars in index order.
#     - Invariants:
#       - Every per-star array has particle_count rows; position and
#         next_position are float64 arrays of shape (N, 2), colors is
#         uint8 of shape (N, 4).
#       - orbital_distance, speed and start_rotation only change through
#         place_star().
#       - center is plain data and only changes through resize().
#
#   - tick(self, now: float, surface=None) -> bool:
#     - Side Effects: Advances (and draws, if a surface is given) every star.
#     - Outputs: False when the surface is not ready and the tick was skipped.


class BlackHole:
    """
    The shared center, radius, mode and clock that every star orbits.
    """
    def __init__(
        self,
        params: Dict[str, Any],
        width: float,
        height: float,
        now: Optional[float] = None,
        frame_rate: float = FPS,
    ):
        """
        Initializes the field and samples its stars.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): Logical width of the drawing surface.
            height (float): Logical height of the drawing surface.
            now (Optional[float]): Clock epoch in seconds.
            frame_rate (float): Target frame rate of the render loop.
        """
        # Rule 7: Enforce data contracts. Validate config on initialization.
        self.params = validate_simulation_params(params)
        if frame_rate <= 0:
            msg = f"Configuration error: frame_rate must be positive, got {frame_rate}."
            logging.critical(msg)
            raise ValueError(msg)
        self.frame_rate = float(frame_rate)
        self.radius = self.params['horizon_radius']
        self.band_min = self.params['orbit_radius_min']
        self.band_max = self.params['orbit_radius_max']

        # Rule 12: All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(self.params['seed'])

        self.width = float(width)
        self.height = float(height)
        self.center = self._compute_center()
        self.mode = Mode.NORMAL
        self.clock_start = time.perf_counter() if now is None else float(now)

        count = self.params['particle_count']
        # Fixed per-star parameters
        self.orbital_distance = sample_orbital_distances(self.rng, self.band_min, self.band_max, count)
        # If not random, all stars would be generated in a single line.
        self.start_rotation = self.rng.uniform(0.0, TWO_PI, size=count)
        self.speed = self.rng.uniform(self.params['speed_min'], self.params['speed_max'], size=count)
        self.expansion_distance = expansion_targets(
            count, self.params['expansion_rows'], self.params['expansion_row_spacing']
        )
        self._derive_star_parameters()

        # Mutable kinematic state
        self.current_distance = np.zeros(count, dtype=np.float64)
        self.angular_rate = np.zeros(count, dtype=np.float64)
        self.current_rotation = np.zeros(count, dtype=np.float64)
        self.last_elapsed = np.zeros(count, dtype=np.float64)
        self.position = np.zeros((count, 2), dtype=np.float64)
        self.next_position = np.zeros((count, 2), dtype=np.float64)
        self._seed_kinematics(slice(None))

        self.stars: List[Star] = [Star(self, i) for i in range(count)]

        logging.info(
            f"BlackHole initialized with {count} stars, horizon radius "
            f"{self.radius:.1f}, orbit band [{self.band_min:.1f}, {self.band_max:.1f}]."
        )
        logging.debug(
            f"Star arrays created. Positions shape: {self.position.shape}, "
            f"Colors shape: {self.colors.shape}. Center at ({self.center.x:.1f}, {self.center.y:.1f})."
        )

    def _derive_star_parameters(self) -> None:
        self.collapse_bonus, self.hover_distance = collapse_targets(
            self.orbital_distance, self.band_min, self.band_max, self.params['collapse_threshold']
        )
        self.colors = star_colors(self.orbital_distance, self.params['star_color'], self.band_max)

    def _seed_kinematics(self, selection) -> None:
        # Start one nominal frame behind the starting phase and put the first
        # segment end on it, so the first drawn segment already has a direction.
        seed_dt = 1.0 / self.frame_rate
        cx, cy = self.center
        start = self.start_rotation[selection]
        distance = self.orbital_distance[selection]
        self.current_distance[selection] = distance
        self.angular_rate[selection] = self.speed[selection]
        self.current_rotation[selection] = start
        self.last_elapsed[selection] = 0.0
        self.position[selection] = positions_at(cx, cy, distance, start - self.speed[selection] * seed_dt)
        self.next_position[selection] = positions_at(cx, cy, distance, start)

    def place_star(self, index: int, orbital_distance: float) -> Star:
        """
        Gives star `index` an explicit resting distance and reseeds it.

        Raises:
            ValueError: If the distance lies outside the orbit band.
        """
        if not self.band_min <= orbital_distance <= self.band_max:
            raise ValueError(
                f"orbital_distance {orbital_distance} lies outside the orbit band "
                f"[{self.band_min}, {self.band_max}]."
            )
        self.orbital_distance[index] = orbital_distance
        self._derive_star_parameters()
        self._seed_kinematics(index)
        return self.stars[index]

    @property
    def ready(self) -> bool:
        """False while the surface has no drawable area."""
        return self.width > 0 and self.height > 0

    def _compute_center(self) -> Vector2:
        if self.width <= 0 or self.height <= 0:
            return Vector2(0.0, 0.0)
        return Vector2(self.width / 2.0, self.height / 2.0)

    def spin_factor(self, mode: Mode) -> float:
        """Multiplier applied to every star's angular speed in the given mode."""
        if mode is Mode.COLLAPSED:
            return self.params['collapsed_spin_factor']
        if mode is Mode.EXPANDED:
            return self.params['expanded_spin_factor']
        return 1.0

    def targets(self, mode: Mode) -> np.ndarray:
        """Target distance per star in the given mode."""
        if mode is Mode.COLLAPSED:
            return self.hover_distance
        if mode is Mode.EXPANDED:
            return self.expansion_distance
        return self.orbital_distance

    def set_mode(self, mode: Mode) -> None:
        if mode is not self.mode:
            logging.info(f"Field mode changed: {self.mode.value} -> {mode.value}.")
        self.mode = mode

    def resize(self, width: float, height: float) -> None:
        """
        Recomputes the center for a new surface size.

        Stars keep their phases; their stored segment endpoints are moved by
        the same offset as the center so no streak is drawn across the jump.
        While the surface has no area the last good center is kept.
        """
        self.width = float(width)
        self.height = float(height)
        if not self.ready:
            logging.warning(f"Surface resized to {width}x{height}; skipping ticks until it has area.")
            return

        new_center = self._compute_center()
        offset = np.array([new_center.x - self.center.x, new_center.y - self.center.y])
        self.center = new_center
        self.position += offset
        self.next_position += offset
        logging.info(f"Field resized to {width}x{height}, center now ({self.center.x:.1f}, {self.center.y:.1f}).")

    def elapsed(self, now: float) -> float:
        return now - self.clock_start

    def advance(self, elapsed: float, lo: int = 0, hi: Optional[int] = None) -> None:
        """Runs the star kernel over stars [lo, hi) at the current mode."""
        hi = len(self.stars) if hi is None else hi
        if hi <= lo:
            return
        advance_stars(
            lo, hi, float(elapsed), float(self.center.x), float(self.center.y),
            self.targets(self.mode), float(self.spin_factor(self.mode)),
            float(self.params['smoothing_factor']),
            self.speed, self.last_elapsed, self.current_distance, self.angular_rate,
            self.current_rotation, self.position, self.next_position,
        )

    def tick(self, now: float, surface=None) -> bool:
        """
        Advances every star to `now`, drawing them when a surface is given.

        Returns:
            bool: False if the surface is not ready and nothing was done.
        """
        if not self.ready:
            return False

        self.advance(self.elapsed(now))
        if surface is not None and self.stars:
            surface.draw_segments(self.position, self.next_position, self.colors)
        return True

    def distances(self) -> np.ndarray:
        return self.current_distance.copy()

    def stats(self) -> Dict[str, float]:
        """Aggregated star metrics for throttled debug logging."""
        if not self.stars:
            return {'mean_distance': 0.0, 'min_distance': 0.0, 'max_distance': 0.0}
        return {
            'mean_distance': float(np.mean(self.current_distance)),
            'min_distance': float(np.min(self.current_distance)),
            'max_distance': float(np.max(self.current_distance)),
        }
