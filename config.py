"""
Simulation tuning knobs.
"""

# Population controls
TARGET_POP = 80
MIN_SURVIVORS = 20

# Breeding
BREED_FACTOR = 4.0
MUTATION_RATE = 1 / 3

# Mutation neighborhood (ring of color codes)
COLOR_COUNT = 35
MUTATION_RANGE = 2

# Fitness
BASE_CATCH_WEIGHT = 0.5

# Runtime pacing (seconds)
AUTO_TICK_INTERVAL = 0.5
CAPTURE_COMMIT_FRACTION = 0.4  # commit point inside an auto tick
MANUAL_CAPTURE_DELAY = 0.3

# Viewer
SCREEN_W, SCREEN_H = 980, 720
ORGANISM_RADIUS = 7
MOVEMENT_INTERVAL = 1.0
MAX_MOVEMENT = 15.0

# Environment
DEFAULT_ENV_COLOR = "#8B7D5B"

# Default starting mix: the tracked colors, 16 each
TRACKED_COLORS = (15, 1, 10, 22, 29)
DEFAULT_START_CONFIG = {code: 16 for code in TRACKED_COLORS}
