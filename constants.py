# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They are the
fallbacks for anything `config.json` does not override, plus the physics
tuning of the credit particles, which is not meant to be configured.
"""

# Visualization settings
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 800)
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
PARTICLE_COLOR = (255, 255, 255)
WINDOW_TITLE = "Credit Field"

# --- Credit Text ---
CREDIT_TEXT = "Jonas Kjeldmand Jensen"
REDIRECT_URL = "https://jonaskjeldmand.vercel.app/"
FONT_FAMILY = "Poppins, Arial, sans-serif"
# Stands in for the semi-bold (550) weight the credit is set in.
FONT_BOLD = True
# Font size is canvas_width / FONT_SIZE_DIVISOR, capped at MAX_FONT_SIZE.
FONT_SIZE_DIVISOR = 20
MAX_FONT_SIZE = 28
# Distance of the text's right edge and baseline from the canvas edges (px).
TEXT_MARGIN = 20
# Hit-box height as a multiple of the font size.
TEXT_HEIGHT_FACTOR = 1.2

# --- Sampling ---
SAMPLE_STRIDE_MULTIPLIER = 3
# Minimum alpha (0-255) for a rasterized pixel to spawn a particle.
COVERAGE_THRESHOLD = 200

# --- Particle Physics ---
PARTICLE_SIZE = 1.25
INTERACTION_RADIUS = 35.0
ATTRACTION_SCALE = 0.1
RETURN_SPRING = 0.05
VELOCITY_DAMPING = 0.9
NOISE_FREQUENCY = 0.002
NOISE_AMPLITUDE = 0.25
NOISE_OFFSET_RANGE = 1000.0
DENSITY_RANGE = (1.0, 11.0)
EXPLOSION_SPEED_RANGE = (2.0, 7.0)

# --- Explosion Timing (milliseconds) ---
EXPLOSION_DURATION = 1500
FADE_OUT_DURATION = 500

# --- Earth Sphere ---
EARTH_GRID_N = 75
EARTH_NOISE_RADIUS = 3.0
# Fraction of the smaller window dimension used by the sphere canvas.
EARTH_CANVAS_RATIO = 0.95
EARTH_ROTATION_SPEED = 0.05
# Contrast exponent at the top and bottom of the sphere canvas.
EARTH_CONTRAST_RANGE = (5.0, 0.0)
EARTH_NOISE_OFFSET = 10.0
EARTH_NOISE_OCTAVES = 4
EARTH_NOISE_FALLOFF = 0.5
EARTH_NOISE_TABLE_SIZE = 4096
