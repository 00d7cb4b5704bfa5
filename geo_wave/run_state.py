import math

from geo_wave.config import (
    BASE_LEVEL_LENGTH,
    BASE_SPEED,
    INFINITE_LENGTH_FACTOR,
    get_difficulty,
)


MENU = "menu"
PLAYING = "playing"
GAME_OVER = "game_over"
WIN = "win"
TERMINAL_STATES = (GAME_OVER, WIN)


class RunState:
    """Progress of the current run plus the counters kept between runs."""

    def __init__(self, difficulty="easy"):
        self.state = MENU
        self.distance = 0.0
        self.game_speed = BASE_SPEED
        self.best_score = 0
        self.attempt = 1
        self.result = None
        self.difficulty = None
        self.spec = None
        self.level_length = BASE_LEVEL_LENGTH
        self.select_difficulty(difficulty)

    def select_difficulty(self, name):
        self.spec = get_difficulty(name)
        self.difficulty = name
        self.level_length = BASE_LEVEL_LENGTH * self.spec["level_multiplier"]
        self.best_score = 0

    @property
    def infinite(self):
        return math.isinf(self.spec["target_percent"])

    def begin(self):
        self.state = PLAYING
        self.distance = 0.0
        self.game_speed = BASE_SPEED
        self.result = None

    def progress(self):
        # Infinite mode only uses this fraction to ramp speed and spawns.
        if self.infinite:
            return min(1.0, self.distance / (BASE_LEVEL_LENGTH * INFINITE_LENGTH_FACTOR))
        return min(1.0, self.distance / self.level_length)

    def raw_percent(self):
        return self.distance / BASE_LEVEL_LENGTH * 100

    def score(self):
        percent = math.floor(self.raw_percent())
        if self.infinite:
            return percent
        return min(self.spec["target_percent"], percent)

    def progress_bar(self):
        raw = self.raw_percent()
        if self.infinite:
            return min(100.0, raw) / 100
        return min(1.0, raw / self.spec["target_percent"])

    def speed_multiplier(self):
        return self.game_speed / BASE_SPEED

    def goal_reached(self):
        return not self.infinite and self.raw_percent() >= self.spec["target_percent"]
