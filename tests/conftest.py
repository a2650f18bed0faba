import contextlib
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest


class RecordingSurface:
    """A surface that records every call instead of drawing."""

    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.scale = 1.0
        self.depth = 0
        self.calls = []
        self.fail_on_draw = False

    def device_pixel_scale(self, dpi):
        self.scale = dpi / 96.0
        self.calls.append(("scale", self.scale))
        return self.scale

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.calls.append(("resize", width, height))

    def clear(self, alpha):
        self.calls.append(("clear", alpha))

    def draw_segment(self, start, end, color):
        if self.fail_on_draw:
            raise RuntimeError("draw failed")
        self.calls.append(("segment", tuple(start), tuple(end), color, self.depth))

    def draw_segments(self, starts, ends, colors):
        for start, end, color in zip(starts, ends, colors):
            self.draw_segment(
                tuple(float(v) for v in start),
                tuple(float(v) for v in end),
                tuple(int(c) for c in color),
            )

    @contextlib.contextmanager
    def scoped_transform(self, scale=1.0, offset=(0.0, 0.0)):
        self.depth += 1
        try:
            yield self
        finally:
            self.depth -= 1

    def segments(self):
        return [call for call in self.calls if call[0] == "segment"]


@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def sim_params():
    return {
        "seed": 7,
        "particle_count": 3,
        "horizon_radius": 100.0,
        "orbit_radius_min": 100.0,
        "orbit_radius_max": 350.0,
        "smoothing_factor": 0.05,
    }
