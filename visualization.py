# visualization.py
"""
Handles drawing the star field using Pygame.

CanvasSurface is the drawable the engine renders into: it owns an
off-screen backing store sized for the device pixel density, fades the
previous frame instead of hard-clearing it (motion trails), and draws
anti-aliased line segments in logical coordinates.
"""
import contextlib
import logging
import math
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
import pygame

from constants import (
    BACKGROUND_COLOR, BASE_DPI, DEFAULT_DPI, LABEL_COLOR, LABEL_FONT_SIZE,
)

# --- Data Contracts ---
#
# class CanvasSurface:
#   - __init__(self, width: int, height: int, dpi: float = DEFAULT_DPI,
#              background_color: Tuple[int, int, int] = BACKGROUND_COLOR):
#     - Inputs:
#       - width, height: Logical size in CSS-style pixels.
#       - dpi: Device pixel density; the backing store is dpi / 96 times larger.
#     - Side Effects: Allocates the backing store and the trail overlay.
#
#   - clear(self, alpha: float) -> None
#   - draw_segment(self, start, end, color) -> None
#   - draw_segments(self, starts, ends, colors) -> None
#     - Inputs: (N, 2) float arrays of endpoints and an (N, 3|4) color array.
#   - resize(self, width: int, height: int) -> None
#     - Side Effects: Records the logical size only; device_pixel_scale()
#       reallocates the backing store.
#   - scoped_transform(self, scale: float = 1.0, offset=(0, 0)) -> context manager
#     - Invariants: The transform stack has the same depth on exit as on
#       entry, whether or not the body raised.


class CanvasSurface:
    """
    A 2D drawing surface backed by an off-screen Pygame surface.
    """
    def __init__(
        self,
        width: int,
        height: int,
        dpi: float = DEFAULT_DPI,
        background_color: Tuple[int, int, int] = BACKGROUND_COLOR,
    ):
        self.width = int(width)
        self.height = int(height)
        self.background_color = pygame.Color(*background_color)
        self.dpi = float(dpi)
        self.scale = 1.0
        # Each entry is (scale, offset_x, offset_y) mapping logical to backing pixels.
        self._transforms = [(1.0, 0.0, 0.0)]
        self._trail_alpha: Optional[int] = None
        self._label_font: Optional[pygame.font.Font] = None
        self.device_pixel_scale(dpi)

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.canvas.get_size()

    @property
    def transform_depth(self) -> int:
        return len(self._transforms)

    def device_pixel_scale(self, dpi: float) -> float:
        """
        Sizes the backing store for the given pixel density.

        Returns:
            float: The logical-to-device scale factor.
        """
        self.dpi = float(dpi)
        self.scale = self.dpi / BASE_DPI
        pixel_w = max(0, math.ceil(self.width * self.scale))
        pixel_h = max(0, math.ceil(self.height * self.scale))

        self.canvas = pygame.Surface((pixel_w, pixel_h), 0, 32)
        self.canvas.fill(self.background_color)
        # Blitted every frame to fade the previous one, leaving trails.
        self._trail_layer = pygame.Surface((pixel_w, pixel_h), pygame.SRCALPHA, 32)
        self._trail_alpha = None

        logging.debug(
            f"Surface sized {self.width}x{self.height} logical, "
            f"{pixel_w}x{pixel_h} device (scale {self.scale:.2f})."
        )
        return self.scale

    def resize(self, width: int, height: int) -> None:
        """Records the new logical size. Call device_pixel_scale() to reallocate."""
        self.width = int(width)
        self.height = int(height)

    def clear(self, alpha: float) -> None:
        """
        Overwrites the surface with the background color at the given opacity.

        An alpha of 1 is a hard clear; lower values let earlier frames show
        through as trails.
        """
        alpha_byte = int(round(max(0.0, min(alpha, 1.0)) * 255))
        if alpha_byte != self._trail_alpha:
            bg = self.background_color
            self._trail_layer.fill((bg.r, bg.g, bg.b, alpha_byte))
            self._trail_alpha = alpha_byte
        self.canvas.blit(self._trail_layer, (0, 0))

    def _to_device(self, point: Sequence[float]) -> Tuple[float, float]:
        scale, offset_x, offset_y = self._transforms[-1]
        return point[0] * scale + offset_x, point[1] * scale + offset_y

    def _blend(self, color: Sequence[int]) -> Tuple[int, int, int]:
        # The canvas is opaque, so RGBA colors are mixed against the background.
        if len(color) < 4:
            return int(color[0]), int(color[1]), int(color[2])
        alpha = color[3] / 255.0
        bg = self.background_color
        return (
            int(round(bg.r + (color[0] - bg.r) * alpha)),
            int(round(bg.g + (color[1] - bg.g) * alpha)),
            int(round(bg.b + (color[2] - bg.b) * alpha)),
        )

    def draw_segment(self, start: Sequence[float], end: Sequence[float], color: Sequence[int]) -> None:
        """Draws an anti-aliased line from `start` to `end` in logical coordinates."""
        pygame.draw.aaline(self.canvas, self._blend(color), self._to_device(start), self._to_device(end))

    def draw_segments(self, starts: np.ndarray, ends: np.ndarray, colors: np.ndarray) -> None:
        """
        Draws one segment per row of `starts`/`ends` (shape (N, 2)) with the
        matching row of `colors` (RGB or RGBA).
        """
        scale, offset_x, offset_y = self._transforms[-1]
        offset = np.array([offset_x, offset_y])
        device_starts = (np.asarray(starts, dtype=np.float64) * scale + offset).tolist()
        device_ends = (np.asarray(ends, dtype=np.float64) * scale + offset).tolist()

        colors = np.asarray(colors)
        rgb = colors[:, :3].astype(np.float64)
        if colors.shape[1] >= 4:
            bg = np.array([self.background_color.r, self.background_color.g, self.background_color.b], dtype=np.float64)
            rgb = bg + (rgb - bg) * (colors[:, 3:4] / 255.0)
        rgb = np.rint(rgb).astype(np.int64).tolist()

        for start, end, color in zip(device_starts, device_ends, rgb):
            pygame.draw.aaline(self.canvas, color, start, end)

    @contextlib.contextmanager
    def scoped_transform(self, scale: float = 1.0, offset: Tuple[float, float] = (0.0, 0.0)) -> Iterator["CanvasSurface"]:
        """
        Pushes a scale/offset onto the transform stack for the duration of the block.

        The transform is popped even if drawing inside the block raises.
        """
        current_scale, current_x, current_y = self._transforms[-1]
        self._transforms.append((
            current_scale * scale,
            current_x + offset[0] * current_scale,
            current_y + offset[1] * current_scale,
        ))
        try:
            yield self
        finally:
            self._transforms.pop()

    def present(self, display: pygame.Surface, label: Optional[str] = None) -> None:
        """
        Copies the backing store onto the window, scaling down for high dpi,
        and draws the optional center label on top.
        """
        display_size = display.get_size()
        if 0 in display_size or 0 in self.pixel_size:
            return

        if self.pixel_size == display_size:
            display.blit(self.canvas, (0, 0))
        else:
            display.blit(pygame.transform.smoothscale(self.canvas, display_size), (0, 0))

        if label:
            if self._label_font is None:
                if not pygame.font.get_init():
                    pygame.font.init()
                self._label_font = pygame.font.SysFont(None, LABEL_FONT_SIZE)
            text_surf = self._label_font.render(label, True, LABEL_COLOR)
            text_rect = text_surf.get_rect(center=(display_size[0] // 2, display_size[1] // 2))
            display.blit(text_surf, text_rect)


def create_window(width: int, height: int, caption: str = "Black Hole") -> pygame.Surface:
    """Initializes Pygame and opens a resizable window."""
    pygame.init()
    display = pygame.display.set_mode((width, height), pygame.RESIZABLE)
    pygame.display.set_caption(caption)
    logging.info(f"Window opened ({width}x{height}).")
    return display


def close_window() -> None:
    """Shuts down Pygame."""
    pygame.font.quit()
    pygame.quit()
