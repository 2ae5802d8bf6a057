# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties and default window sizes, and are not part of the tunable
lightning configuration.
"""

# Window settings
# Set to True to run in borderless fullscreen mode.
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
TITLE = "Lightning Storm"
BACKGROUND_COLOR = (0, 0, 0)

# Edges of the surface, in the order used for nearest-edge tie breaking.
EDGES = ("top", "right", "bottom", "left")

# --- Default aesthetics ---
# Pale blue-white core at 80% opacity.
DEFAULT_STROKE_COLOR = (220, 235, 255, 204)
# Blue glow at 50% opacity.
DEFAULT_BLUR_COLOR = (120, 180, 255, 128)

# --- Bloom effect ---
# Multiplier (0-255) applied to the blurred glow layer before it is added
# to the frame. 255 keeps the glow colour as configured.
BLOOM_INTENSITY = 255
# Smallest downscale factor used by the blur. Below this the glow is
# indistinguishable from the crisp stroke.
BLOOM_MIN_SCALE = 2

# --- Fade render mode ---
# Overlay alpha (0-255) for the "fade" render mode. Lower is a longer trail.
DEFAULT_FADE_ALPHA = 13
