import numpy as np
import pytest

from geo_wave.env import GameEnv
from geo_wave.geometry import PlayField


@pytest.fixture
def field():
    return PlayField.from_screen(900, 600)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def env():
    env = GameEnv(render_mode=None, obs_mode="state")
    yield env
    env.close()
