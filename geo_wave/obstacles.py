from geo_wave.config import (
    FRAME_MS,
    MIN_GAP_HEIGHT,
    MOVING_SAW_RADIUS,
    OFF_SCREEN_X,
    SAW_RADIUS,
    SPIKE_INSET,
    SPIKE_WIDTH,
    WALL_WIDTH,
)
from geo_wave.geometry import Bounds, circle_hits_rect, rect_intersect


SPIKE = "spike"
SAW = "saw"
WALL = "wall"
MOVING_SAW = "movingSaw"

OBSTACLE_KINDS = (SPIKE, SAW, WALL, MOVING_SAW)
SAW_KINDS = (SAW, MOVING_SAW)


def frame_factor(elapsed_ms):
    # Scale against a 60 Hz frame; a missing delta counts as one frame.
    return elapsed_ms / FRAME_MS if elapsed_ms else 1.0


class Obstacle:
    """A hazard scrolling toward the player.

    ``kind`` picks the behaviour and ``config`` carries the per-kind shape:

    * spike: ``y`` (anchor edge), ``height``, ``from_top``
    * saw: ``y`` (center)
    * wall: ``gap_y``, ``gap_height``
    * movingSaw: ``start_y``, ``end_y``, ``speed``, ``current_y``, ``direction``
    """

    def __init__(self, x, kind, config, width=0.0, radius=0.0, phase=0.0):
        if kind not in OBSTACLE_KINDS:
            raise ValueError(f"Unknown obstacle kind {kind!r}")
        self.x = float(x)
        self.kind = kind
        self.config = config
        self.width = width
        self.radius = radius
        self.passed = False
        self.pulse_phase = phase
        self.rotation = 0.0

    def __repr__(self):
        return f"Obstacle({self.kind!r}, x={self.x:.1f}, config={self.config!r})"

    def update(self, speed, elapsed_ms=None):
        factor = frame_factor(elapsed_ms)
        self.x -= speed * factor
        self.pulse_phase += 0.1 * factor

        if self.kind == SAW:
            self.rotation += 0.15 * factor
        elif self.kind == MOVING_SAW:
            self.rotation += 0.2 * factor
            cfg = self.config
            cfg["current_y"] += cfg["speed"] * cfg["direction"] * factor
            if cfg["current_y"] >= cfg["end_y"] or cfg["current_y"] <= cfg["start_y"]:
                cfg["direction"] *= -1

    def check_collision(self, bounds):
        if self.kind == SPIKE:
            return rect_intersect(bounds, self.spike_bounds())
        if self.kind == WALL:
            gap_y = self.config["gap_y"]
            gap_bottom = gap_y + self.config["gap_height"]
            if bounds.x + bounds.width > self.x and bounds.x < self.x + self.width:
                return bounds.y < gap_y or bounds.y + bounds.height > gap_bottom
            return False
        return circle_hits_rect(self.x, self.center_y, self.radius, bounds)

    def is_off_screen(self):
        return self.x < OFF_SCREEN_X

    @property
    def center_y(self):
        if self.kind == MOVING_SAW:
            return self.config["current_y"]
        return self.config["y"]

    @property
    def right_edge(self):
        if self.kind in SAW_KINDS:
            return self.x + self.radius
        return self.x + self.width

    def spike_bounds(self):
        # Triangle approximated by a rect inset from both sides.
        height = self.config["height"]
        top = self.config["y"] if self.config["from_top"] else self.config["y"] - height
        return Bounds(self.x + SPIKE_INSET, top, self.width - 2 * SPIKE_INSET, height)

    def blocked_span(self, field):
        """Vertical occlusion as (from ceiling, from ground)."""
        if self.kind == SPIKE:
            height = self.config["height"]
            return (height, 0.0) if self.config["from_top"] else (0.0, height)
        if self.kind == WALL:
            gap_y = self.config["gap_y"]
            top = max(0.0, gap_y - field.ceiling_y)
            bottom = max(0.0, field.ground_y - (gap_y + self.config["gap_height"]))
            return top, bottom
        return 0.0, 0.0

    def danger_spans(self, field):
        """Solid vertical intervals at this obstacle's column, top to bottom."""
        if self.kind == SPIKE:
            b = self.spike_bounds()
            return [(b.y, b.y + b.height)]
        if self.kind == WALL:
            gap_y = self.config["gap_y"]
            return [
                (field.ceiling_y, gap_y),
                (gap_y + self.config["gap_height"], field.ground_y),
            ]
        cy = self.center_y
        return [(cy - self.radius, cy + self.radius)]

    def open_interval(self, field):
        """Widest free vertical interval between the ceiling and the ground."""
        best = (field.ceiling_y, field.ceiling_y)
        cursor = field.ceiling_y
        for lo, hi in sorted(self.danger_spans(field)) + [(field.ground_y, field.ground_y)]:
            lo = max(lo, field.ceiling_y)
            if lo - cursor > best[1] - best[0]:
                best = (cursor, lo)
            cursor = max(cursor, min(hi, field.ground_y))
        return best


def make_spike(x, edge_y, height, from_top=False, phase=0.0):
    config = {"y": edge_y, "height": max(0.0, float(height)), "from_top": from_top}
    return Obstacle(x, SPIKE, config, width=SPIKE_WIDTH, phase=phase)


def make_saw(x, y, phase=0.0):
    return Obstacle(x, SAW, {"y": float(y)}, radius=SAW_RADIUS, phase=phase)


def make_wall(x, gap_y, gap_height, field, phase=0.0):
    # The gap is never stored below the minimum and always sits inside the field.
    gap_height = max(float(MIN_GAP_HEIGHT), float(gap_height))
    gap_y = max(field.ceiling_y, min(float(gap_y), field.ground_y - gap_height))
    config = {"gap_y": gap_y, "gap_height": gap_height}
    return Obstacle(x, WALL, config, width=WALL_WIDTH, phase=phase)


def make_moving_saw(x, start_y, end_y, speed, phase=0.0):
    if end_y < start_y:
        start_y, end_y = end_y, start_y
    config = {
        "start_y": float(start_y),
        "end_y": float(end_y),
        "speed": float(speed),
        "current_y": float(start_y),
        "direction": 1,
    }
    return Obstacle(x, MOVING_SAW, config, radius=MOVING_SAW_RADIUS, phase=phase)
