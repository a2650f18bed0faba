import math

import numpy as np
import pytest

from orbital_math import TWO_PI, Vector2, lerp, random_range, rotate, wrap_angle


def test_rotate_by_zero_is_identity() -> None:
    center = Vector2(400.0, 300.0)
    point = Vector2(430.5, 120.25)
    rotated = rotate(center, point, 0.0)
    assert rotated.x == pytest.approx(point.x)
    assert rotated.y == pytest.approx(point.y)


def test_rotate_full_turn_returns_to_start() -> None:
    center = Vector2(10.0, -5.0)
    point = Vector2(60.0, 35.0)
    rotated = rotate(center, point, TWO_PI)
    assert rotated.x == pytest.approx(point.x, abs=1e-9)
    assert rotated.y == pytest.approx(point.y, abs=1e-9)


def test_rotate_quarter_turn_uses_radians() -> None:
    rotated = rotate(Vector2(0.0, 0.0), Vector2(1.0, 0.0), math.pi / 2)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(1.0)


def test_rotate_preserves_distance_from_center() -> None:
    center = Vector2(200.0, 150.0)
    point = Vector2(200.0, 370.0)
    for angle in (0.3, 1.7, 4.0, -2.5):
        rotated = rotate(center, point, angle)
        assert math.hypot(rotated.x - center.x, rotated.y - center.y) == pytest.approx(220.0)


def test_lerp_endpoints() -> None:
    assert lerp(3.0, 11.0, 0.0) == 3.0
    assert lerp(3.0, 11.0, 1.0) == 11.0
    assert lerp(3.0, 11.0, 0.25) == pytest.approx(5.0)


def test_lerp_is_monotonic_in_t() -> None:
    values = [lerp(-4.0, 9.0, t) for t in np.linspace(0.0, 1.0, 50)]
    assert all(a <= b for a, b in zip(values, values[1:]))
    descending = [lerp(9.0, -4.0, t) for t in np.linspace(0.0, 1.0, 50)]
    assert all(a >= b for a, b in zip(descending, descending[1:]))


def test_random_range_is_bounded_and_seeded() -> None:
    first = [random_range(np.random.default_rng(5), 2.0, 3.0) for _ in range(3)]
    assert first[0] == first[1] == first[2]
    rng = np.random.default_rng(11)
    samples = [random_range(rng, -1.0, 1.0) for _ in range(200)]
    assert all(-1.0 <= s < 1.0 for s in samples)


def test_wrap_angle() -> None:
    assert wrap_angle(0.0) == 0.0
    assert wrap_angle(TWO_PI + 0.5) == pytest.approx(0.5)
    assert wrap_angle(-0.5) == pytest.approx(TWO_PI - 0.5)


def test_wrap_angle_never_returns_full_turn() -> None:
    for angle in (-1e-17, -1e-300, -TWO_PI, TWO_PI):
        wrapped = wrap_angle(angle)
        assert 0.0 <= wrapped < TWO_PI
    assert wrap_angle(-1e-17) == 0.0
