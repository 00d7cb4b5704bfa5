import math
from collections import namedtuple

from geo_wave.config import COLLISION_FORGIVENESS, FIELD_MARGIN


Bounds = namedtuple("Bounds", ["x", "y", "width", "height"])


class PlayField(namedtuple("PlayField", ["width", "height", "ceiling_y", "ground_y"])):
    __slots__ = ()

    @classmethod
    def from_screen(cls, width, height, margin=FIELD_MARGIN):
        return cls(width, height, margin, height - margin)

    @property
    def playable_height(self):
        return self.ground_y - self.ceiling_y


def rect_intersect(a, b):
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


def circle_hits_rect(cx, cy, radius, rect, forgiveness=COLLISION_FORGIVENESS):
    # Distance from the rect center, padded by half its smaller side.
    dx = rect.x + rect.width / 2 - cx
    dy = rect.y + rect.height / 2 - cy
    reach = radius + min(rect.width, rect.height) / 2 - forgiveness
    return math.hypot(dx, dy) < reach
