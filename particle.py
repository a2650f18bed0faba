# particle.py
"""
The stars orbiting the black hole.

Star state lives in NumPy arrays owned by the field (one row per star):
fixed orbital parameters (distance, speed, starting phase, color) and
the mutable kinematic state (current distance, angular rate, rotation
and the two endpoints of the segment drawn this frame). This module
samples and derives the fixed parameters, and advances the kinematic
state with a single Numba kernel. `Star` is a lightweight view of one
row for code that works with individual stars.
"""
import math
from typing import Tuple, TYPE_CHECKING

import numpy as np
from numba import jit

from constants import Mode, MIN_STAR_ALPHA
from orbital_math import Vector2, lerp, rotate_xy, wrap_angle

if TYPE_CHECKING:
    from simulation import BlackHole

# --- Data Contracts ---
#
# advance_stars(lo, hi, elapsed, cx, cy, targets, spin_factor, smoothing,
#               speed, last_elapsed, current_distance, angular_rate,
#               current_rotation, position, next_position) -> None:
#   - Inputs:
#     - lo, hi: Half-open index range of stars to advance.
#     - elapsed: Seconds since the field's clock started.
#     - cx, cy: Field center.
#     - targets: (N,) target distance per star for the current mode.
#     - spin_factor: Angular speed multiplier for the current mode.
#   - Side Effects: For every star in range, the previous segment end
#     becomes the new start, distance and angular rate ease toward their
#     targets, and the new segment end is computed about the center.
#   - Invariants: The fixed parameter arrays are never written.
#
# class Star:
#   - __init__(self, field: BlackHole, index: int)
#     - A view of row `index` of the field's arrays. Holds no state itself.


@jit(nopython=True)
def advance_stars(
    lo, hi, elapsed, cx, cy, targets, spin_factor, smoothing,
    speed, last_elapsed, current_distance, angular_rate,
    current_rotation, position, next_position
):
    """
    Numba-jitted kinematic step for a range of stars.
    """
    for i in range(lo, hi):
        dt = elapsed - last_elapsed[i]
        if dt < 0.0:
            dt = 0.0
        last_elapsed[i] = elapsed

        # Last frame's end position is this frame's start.
        position[i, 0] = next_position[i, 0]
        position[i, 1] = next_position[i, 1]

        distance = lerp(current_distance[i], targets[i], smoothing)
        rate = lerp(angular_rate[i], speed[i] * spin_factor, smoothing)
        rotation = wrap_angle(current_rotation[i] + rate * dt)
        current_distance[i] = distance
        angular_rate[i] = rate
        current_rotation[i] = rotation

        x, y = rotate_xy(cx, cy, cx, cy + distance, rotation)
        next_position[i, 0] = x
        next_position[i, 1] = y


def sample_orbital_distances(rng: np.random.Generator, band_min: float, band_max: float, count: int) -> np.ndarray:
    """
    Averages one inner-half and one outer-half sample per star, which
    clusters stars around the middle of the band.
    """
    band_mid = (band_min + band_max) / 2.0
    inner = rng.uniform(band_min, band_mid, size=count)
    outer = rng.uniform(band_mid, band_max, size=count)
    return (inner + outer) / 2.0


def collapse_targets(
    orbital_distance: np.ndarray, band_min: float, band_max: float, threshold: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Returns (collapse_bonus, hover_distance) per star.

    Stars inside the threshold collapse onto the innermost ring the
    sampling can produce; stars beyond it keep their excess, so the
    collapse is layered. No star is pushed outward.
    """
    collapse_floor = (band_min + (band_min + band_max) / 2.0) / 2.0
    bonus = np.maximum(0.0, orbital_distance - threshold * band_max)
    hover = np.minimum(orbital_distance, collapse_floor + bonus)
    return bonus, hover


def expansion_targets(count: int, rows: int, spacing: float) -> np.ndarray:
    """Row distance per star index. Row 0 sits one spacing out, never on the center."""
    return (np.arange(count) % rows + 1) * float(spacing)


def star_colors(orbital_distance: np.ndarray, rgb: Tuple[int, int, int], band_max: float) -> np.ndarray:
    """RGBA per star; farther stars are more transparent."""
    alpha = np.maximum(MIN_STAR_ALPHA, 1.0 - orbital_distance / band_max)
    colors = np.empty((orbital_distance.shape[0], 4), dtype=np.uint8)
    colors[:, 0] = int(rgb[0])
    colors[:, 1] = int(rgb[1])
    colors[:, 2] = int(rgb[2])
    colors[:, 3] = np.rint(alpha * 255).astype(np.uint8)
    return colors


def positions_at(cx: float, cy: float, distance, rotation) -> np.ndarray:
    """Points `distance` below the center, rotated by `rotation`. Shape (..., 2)."""
    x = cx - np.sin(rotation) * distance
    y = cy + np.cos(rotation) * distance
    return np.stack([x, y], axis=-1)


class Star:
    """
    One star of the field, read through the field's arrays.
    """
    __slots__ = ('field', 'index')

    def __init__(self, field: "BlackHole", index: int):
        self.field = field
        self.index = index

    @property
    def orbital_distance(self) -> float:
        """The resting distance from the center. Fixed at creation."""
        return float(self.field.orbital_distance[self.index])

    @property
    def speed(self) -> float:
        return float(self.field.speed[self.index])

    @property
    def start_rotation(self) -> float:
        return float(self.field.start_rotation[self.index])

    @property
    def collapse_bonus(self) -> float:
        return float(self.field.collapse_bonus[self.index])

    @property
    def hover_distance(self) -> float:
        return float(self.field.hover_distance[self.index])

    @property
    def expansion_distance(self) -> float:
        return float(self.field.expansion_distance[self.index])

    @property
    def current_distance(self) -> float:
        return float(self.field.current_distance[self.index])

    @property
    def current_rotation(self) -> float:
        return float(self.field.current_rotation[self.index])

    @property
    def angular_rate(self) -> float:
        return float(self.field.angular_rate[self.index])

    @property
    def position(self) -> Vector2:
        x, y = self.field.position[self.index]
        return Vector2(float(x), float(y))

    @property
    def next_position(self) -> Vector2:
        x, y = self.field.next_position[self.index]
        return Vector2(float(x), float(y))

    @property
    def color(self) -> Tuple[int, int, int, int]:
        r, g, b, a = self.field.colors[self.index]
        return int(r), int(g), int(b), int(a)

    def target_distance(self, mode: Mode) -> float:
        """The distance this star eases toward in the given mode."""
        return float(self.field.targets(mode)[self.index])

    def tick(self, elapsed: float) -> None:
        """Advances only this star to the given time on the field's clock."""
        self.field.advance(elapsed, self.index, self.index + 1)

    def draw(self, surface) -> None:
        """Draws the segment travelled this frame."""
        surface.draw_segment(self.position, self.next_position, self.color)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (*self.position, *self.next_position, self.current_distance))
