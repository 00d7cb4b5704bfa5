import math


# --- Screen / play field ---
SCREEN_WIDTH = 900
SCREEN_HEIGHT = 600
FIELD_MARGIN = 50  # ceiling sits this far below the top, ground this far above the bottom
FPS = 60
FRAME_MS = 16.67  # reference frame time for obstacle motion

# --- Player ---
PLAYER_X = 150
PLAYER_SIZE = 35
VERTICAL_SPEED = 6
RENDER_LERP = 0.25
ROTATION_LERP = 0.12
ROTATION_GAIN = 0.2
BASE_ARROW_SIZE = 36
MIN_ARROW_SIZE = 12
TRAIL_LENGTH = 25

# --- Level layout ---
BASE_LEVEL_LENGTH = 15000
LEVEL_START_X = 700
MIN_H_SPACING = 180  # minimum horizontal spacing between obstacle clusters
SAFE_GAP = 140  # minimum free vertical space through any cluster
MIN_GAP_HEIGHT = 140
MIN_MARGIN = 80  # clearance from ceiling/ground for moving parts
SAW_MARGIN = 60
WALL_GAP_MARGIN = 60
CLUSTER_BUCKET = 20
OFF_SCREEN_X = -200

# --- Obstacle shapes ---
SPIKE_WIDTH = 40
SPIKE_INSET = 5
SAW_RADIUS = 35
MOVING_SAW_RADIUS = 30
WALL_WIDTH = 30
COLLISION_FORGIVENESS = 5

# --- Cluster repair ---
SPIKE_SHRINK_STEP = 30
SPIKE_MIN_HEIGHT = 20
SAW_WALL_MARGIN = 10
SAW_WALL_PUSH = 60

# --- Progression ---
BASE_SPEED = 6.0
SPEED_CURVE = 0.9
INFINITE_LENGTH_FACTOR = 5  # infinite mode ramps speed over this many base lengths
SPAWN_CHANCE_CAP = 0.08
SPAWN_CHANCE_FACTOR = 0.1
SPAWN_OFFSET = 120
SPAWN_JITTER = 200
SPAWN_GAP_START = 160
SPAWN_GAP_SHRINK = 80
REVEAL_DELAY_MS = 500

# Generation rules and their selection weights, walked in order.
GENERATION_WEIGHTS = (
    ("bottom_spike", 0.25),
    ("top_spike", 0.20),
    ("saw", 0.15),
    ("wall", 0.15),
    ("moving_saw", 0.15),
    ("spike_corridor", 0.10),
)

# Mid-run spawn kinds and their weights.
SPAWN_WEIGHTS = (
    ("saw", 0.40),
    ("bottom_spike", 0.35),
    ("wall", 0.25),
)

# Difficulty Definitions
DIFFICULTY_SPECS = {
    "easy": {
        "target_percent": 100, "level_multiplier": 1, "speed_ramp": 6,
        "label": "EASY", "color": (0, 255, 0),
    },
    "medium": {
        "target_percent": 250, "level_multiplier": 2.5, "speed_ramp": 6,
        "label": "MEDIUM", "color": (255, 255, 0),
    },
    "hard": {
        "target_percent": 500, "level_multiplier": 5, "speed_ramp": 6,
        "label": "HARD", "color": (255, 136, 0),
    },
    "infinite": {
        "target_percent": math.inf, "level_multiplier": 1, "speed_ramp": 8,
        "label": "INFINITE", "color": (0, 255, 255),
    },
    "impossible": {
        "target_percent": 1000, "level_multiplier": 10, "speed_ramp": 10,
        "label": "IMPOSSIBLE", "color": (255, 0, 0),
    },
}
DIFFICULTIES = tuple(DIFFICULTY_SPECS)


def get_difficulty(name):
    try:
        return DIFFICULTY_SPECS[name]
    except KeyError:
        raise ValueError(
            f"Unknown difficulty {name!r}; expected one of {', '.join(DIFFICULTIES)}"
        ) from None


def pick_weighted(table, roll):
    """Return the name in a (name, weight) table selected by a uniform roll in [0, 1)."""
    threshold = 0.0
    for name, weight in table:
        threshold += weight
        if roll < threshold:
            return name
    return table[-1][0]
