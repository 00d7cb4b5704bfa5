import math

from geo_wave.config import (
    GENERATION_WEIGHTS,
    LEVEL_START_X,
    MIN_GAP_HEIGHT,
    MIN_H_SPACING,
    MIN_MARGIN,
    SAFE_GAP,
    SAW_MARGIN,
    WALL_GAP_MARGIN,
    pick_weighted,
)
from geo_wave.obstacles import make_moving_saw, make_saw, make_spike, make_wall
from geo_wave.validator import validate_and_fix_obstacles


def _phase(rng):
    return rng.uniform(0, 2 * math.pi)


def _spike_height(rng, field):
    max_height = max(0.0, field.playable_height - SAFE_GAP)
    return min(max_height * 0.5, rng.random() * 70 + 50)


def _bottom_spike(rng, field, x, out):
    height = _spike_height(rng, field)
    out.append(make_spike(x, field.ground_y, height, from_top=False, phase=_phase(rng)))

    # Sometimes add a matching top spike, keeping the safe gap open
    if rng.random() > 0.5:
        top_max = field.playable_height - height - SAFE_GAP
        if top_max > 30:
            top_height = min(top_max, rng.random() * 50 + 30)
            out.append(make_spike(x, field.ceiling_y, top_height, from_top=True, phase=_phase(rng)))
    return rng.random() * 180 + 120


def _top_spike(rng, field, x, out):
    height = _spike_height(rng, field)
    out.append(make_spike(x, field.ceiling_y, height, from_top=True, phase=_phase(rng)))
    return rng.random() * 180 + 120


def _saw(rng, field, x, out):
    span = max(0.0, field.playable_height - SAW_MARGIN * 2)
    y = field.ceiling_y + SAW_MARGIN + rng.random() * span
    out.append(make_saw(x, y, phase=_phase(rng)))
    return rng.random() * 220 + 180


def _wall(rng, field, x, out):
    # Generous gap for fairness
    gap_height = max(MIN_GAP_HEIGHT + 20, rng.random() * 60 + MIN_GAP_HEIGHT)
    gap_min_y = field.ceiling_y + WALL_GAP_MARGIN
    gap_max_y = field.ground_y - WALL_GAP_MARGIN - gap_height
    if gap_max_y > gap_min_y:
        gap_y = gap_min_y + rng.random() * (gap_max_y - gap_min_y)
        out.append(make_wall(x, gap_y, gap_height, field, phase=_phase(rng)))
    return rng.random() * 250 + 180


def _moving_saw(rng, field, x, out):
    start_y = field.ceiling_y + MIN_MARGIN
    end_y = field.ground_y - MIN_MARGIN
    speed = rng.random() * 2 + 1.5
    out.append(make_moving_saw(x, start_y, end_y, speed, phase=_phase(rng)))
    return rng.random() * 250 + 180


def _spike_corridor(rng, field, x, out):
    max_total = max(0.0, field.playable_height - SAFE_GAP - 40)
    for i in range(2):
        bottom = min(max_total * 0.4, rng.random() * 50 + 40)
        top = min(max_total - bottom, rng.random() * 50 + 40)
        out.append(make_spike(x + i * 100, field.ground_y, bottom, from_top=False, phase=_phase(rng)))
        out.append(make_spike(x + i * 100, field.ceiling_y, top, from_top=True, phase=_phase(rng)))
    return 320


GENERATION_RULES = {
    "bottom_spike": _bottom_spike,
    "top_spike": _top_spike,
    "saw": _saw,
    "wall": _wall,
    "moving_saw": _moving_saw,
    "spike_corridor": _spike_corridor,
}


def generate_obstacles(rng, field, level_length, start_x=LEVEL_START_X):
    """Lay out obstacles over [start_x, level_length) and repair the result.

    ``rng`` is a numpy Generator (the env's ``np_random``).
    """
    obstacles = []
    x = start_x
    last_x = x - MIN_H_SPACING

    while x < level_length:
        rule = GENERATION_RULES[pick_weighted(GENERATION_WEIGHTS, rng.random())]
        x += rule(rng, field, x, obstacles)
        if x < last_x + MIN_H_SPACING:
            x = last_x + MIN_H_SPACING
        last_x = x

        # Denser obstacles late in the level
        progress = x / level_length
        if progress > 0.3:
            x -= 20
        if progress > 0.6:
            x -= 20

    validate_and_fix_obstacles(obstacles, field)
    return obstacles
