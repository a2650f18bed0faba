# orbital_math.py
"""
Small 2D math helpers shared by the star field.

All angles are in radians. The scalar kernels are compiled with Numba so
the star kernel in `particle.py` can call them from nopython code.
"""
import math
from typing import NamedTuple

import numpy as np
from numba import jit

TWO_PI = 2.0 * math.pi


class Vector2(NamedTuple):
    """An immutable 2D point."""
    x: float
    y: float


@jit(nopython=True)
def rotate_xy(cx, cy, x, y, angle):
    """Numba-jitted rotation of (x, y) about (cx, cy) by `angle` radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = x - cx
    dy = y - cy
    return cx + cos_a * dx - sin_a * dy, cy + sin_a * dx + cos_a * dy


@jit(nopython=True)
def lerp(a, b, t):
    """Linear interpolation: returns `a` at t=0 and `b` at t=1."""
    return a * (1.0 - t) + b * t


@jit(nopython=True)
def wrap_angle(angle):
    """Reduces an angle to the range [0, 2*pi)."""
    wrapped = np.fmod(angle, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    # Tiny negative inputs round up to exactly 2*pi.
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def rotate(center: Vector2, point: Vector2, angle: float) -> Vector2:
    """Rotates `point` about `center` by `angle` radians."""
    x, y = rotate_xy(float(center[0]), float(center[1]), float(point[0]), float(point[1]), float(angle))
    return Vector2(x, y)


def random_range(rng: np.random.Generator, low: float, high: float) -> float:
    """Uniform sample in [low, high) drawn from the given generator."""
    return float(rng.uniform(low, high))
