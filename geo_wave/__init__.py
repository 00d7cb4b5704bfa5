from gymnasium.envs.registration import register

from geo_wave.config import DIFFICULTIES, DIFFICULTY_SPECS
from geo_wave.geometry import PlayField
from geo_wave.level_gen import generate_obstacles
from geo_wave.validator import validate_and_fix_obstacles

register(
    id="GeoWave-v0",
    entry_point="geo_wave.env:GameEnv",
)

__all__ = [
    "DIFFICULTIES",
    "DIFFICULTY_SPECS",
    "PlayField",
    "generate_obstacles",
    "validate_and_fix_obstacles",
]
