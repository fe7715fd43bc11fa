# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They describe the
look of the effect (glow profile, line width, particle sizes) and the
defaults used when config.json leaves a tunable out.
"""

# Window settings used when the "display" config section is incomplete.
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 720)
FPS = 60
WINDOW_BACKGROUND_COLOR = (10, 10, 10)
WINDOW_CAPTION = "Network Background"

# --- Particle Shape ---
# Radius is drawn uniformly from [MIN, MIN + SPREAD).
PARTICLE_RADIUS_MIN = 0.5
PARTICLE_RADIUS_SPREAD = 1.5

# --- Connections ---
# pygame strokes whole pixels only.
CONNECTION_LINE_WIDTH = 1

# --- Glow ---
# (offset, alpha) stops of the radial glow, from centre (0) to edge (1).
GLOW_ALPHA_STOPS = (
    (0.0, 0.8),
    (0.2, 0.4),
    (0.5, 0.1),
    (1.0, 0.0),
)

# --- Mouse Repulsion ---
# Distance a particle is pushed per tick at full force.
REPEL_DISPLACEMENT = 2.0

# The connection search is O(n^2) in time and memory.
MAX_PARTICLE_COUNT = 1000

# Resize behaviours for particles left outside a shrunken viewport.
RESIZE_POLICIES = ("keep", "clamp", "regenerate")

# Named colors accepted anywhere config.json expects an RGB triple.
COLOR_PRESETS = {
    "blue": (59, 130, 246),
    "green": (16, 185, 129),
    "red": (239, 68, 68),
    "purple": (168, 85, 247),
    "pink": (236, 72, 153),
    "yellow": (251, 191, 36),
    "orange": (249, 115, 22),
    "cyan": (6, 182, 212),
    "white": (255, 255, 255),
}

# Defaults for the "network" config section.
DEFAULT_NETWORK_SETTINGS = {
    "node_colors": [COLOR_PRESETS["blue"], COLOR_PRESETS["white"]],
    "line_color": COLOR_PRESETS["white"],
    "background_color": None,
    "particle_count": 100,
    "max_distance": 150.0,
    "particle_speed": 0.8,
    "line_opacity": 2.0,
    "glow_size": 10.0,
    "mouse_repel_distance": 100.0,
    "resize_policy": "keep",
    "seed": None,
}
