from collections import deque

from geo_wave.config import (
    BASE_ARROW_SIZE,
    PLAYER_SIZE,
    PLAYER_X,
    RENDER_LERP,
    ROTATION_GAIN,
    ROTATION_LERP,
    TRAIL_LENGTH,
    VERTICAL_SPEED,
)
from geo_wave.geometry import Bounds


class Player:
    def __init__(self, field, arrow_size=BASE_ARROW_SIZE):
        self.x = PLAYER_X
        self.y = field.height / 2
        self.width = PLAYER_SIZE
        self.height = PLAYER_SIZE
        self.velocity = 0.0
        self.rotation = 0.0
        self.trail = deque(maxlen=TRAIL_LENGTH)
        self.glow_intensity = 0.0
        self.pulse_phase = 0.0
        self.render_y = self.y  # smoothed, drawing only
        self.arrow_size = arrow_size

    def update(self, thrust_held, field):
        """Move one tick. Returns the boundary touched ("ceiling"/"ground") or None."""
        # Instant vertical movement: velocity is set, not accelerated
        if thrust_held:
            self.velocity = -VERTICAL_SPEED
            self.glow_intensity = min(self.glow_intensity + 0.08, 1.0)
        else:
            self.velocity = VERTICAL_SPEED
            self.glow_intensity = max(self.glow_intensity - 0.05, 0.3)

        self.y += self.velocity
        self.render_y += (self.y - self.render_y) * RENDER_LERP

        target_rotation = self.velocity * ROTATION_GAIN
        self.rotation += (target_rotation - self.rotation) * ROTATION_LERP

        impact = None
        top, bottom = self.y_limits(field)
        if self.y <= top:
            self.y = top
            self.velocity = VERTICAL_SPEED
            impact = "ceiling"
        if self.y >= bottom:
            self.y = bottom
            self.velocity = -VERTICAL_SPEED
            impact = "ground"

        self.trail.appendleft((self.x - self.arrow_size * 0.3, self.render_y))
        self.pulse_phase += 0.15
        return impact

    def y_limits(self, field):
        half = self.height / 2
        return field.ceiling_y + half, field.ground_y - half

    def trail_points(self):
        for i, (x, y) in enumerate(self.trail):
            yield x, y, 1 - i / TRAIL_LENGTH

    def get_bounds(self):
        # Two thirds of the sprite, centered: deliberately forgiving.
        return Bounds(
            self.x - self.width / 3,
            self.y - self.height / 3,
            self.width / 1.5,
            self.height / 1.5,
        )
