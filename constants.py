# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults the configuration layer falls back to when
`config.json` leaves an option out, plus the interaction modes shared
by every part of the engine.
"""
import enum


class Mode(enum.Enum):
    """The three interaction states the star field can be in."""
    NORMAL = "normal"
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


# --- Field Defaults ---
PARTICLE_COUNT = 2500
HORIZON_RADIUS = 100.0
ORBIT_RADIUS_MAX = 350.0
# Fraction of the max orbit beyond which stars stay outside the collapse ring.
COLLAPSE_THRESHOLD = 0.7
SMOOTHING_FACTOR = 0.05
# Angular speed range in radians per second (roughly 30-70 degrees/s).
SPEED_MIN = 0.5
SPEED_MAX = 1.25
# Spin multipliers applied while hovered / expanded.
COLLAPSED_SPIN_FACTOR = 1.6
EXPANDED_SPIN_FACTOR = 0.5
# Expansion fans stars out into this many rows.
EXPANSION_ROWS = 100
EXPANSION_ROW_SPACING = 10.0

# --- Visualization settings ---
FPS = 60
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
# CSS reference pixel density. A dpi of 192 renders at 2x.
BASE_DPI = 96
DEFAULT_DPI = 96
BACKGROUND_COLOR = (25, 25, 25)
STAR_COLOR = (255, 255, 255)
# Opacity of the per-frame clear (0-1). Lower is a longer trail.
TRAIL_ALPHA = 0.2
# Faintest a star is ever drawn, however far out it orbits.
MIN_STAR_ALPHA = 0.05
CENTER_LABEL = "Null Pointer Studios"
LABEL_COLOR = (235, 235, 235)
LABEL_FONT_SIZE = 22

# --- Run control ---
LOG_THROTTLE_FRAMES = 300
