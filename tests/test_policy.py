import numpy as np

from geo_wave.obstacles import make_wall
from geo_wave.policy import policy


def test_climbs_toward_gap_above(env):
    env.reset(seed=0)
    env.obstacles = [make_wall(500, 80, 150, env.field)]
    assert env.player.y > 155
    assert policy(env) == [0, 1, 0]


def test_dives_toward_gap_below(env):
    env.reset(seed=0)
    env.obstacles = [make_wall(500, 380, 150, env.field)]
    assert env.player.y < 455
    assert policy(env) == [0, 0, 0]


def test_ignores_obstacles_behind(env):
    env.reset(seed=0)
    env.obstacles = [make_wall(0, 80, 150, env.field), make_wall(600, 380, 150, env.field)]
    assert policy(env) == [0, 0, 0]


def test_actions_are_valid(env):
    env.reset(seed=2)
    for _ in range(200):
        action = policy(env)
        assert env.action_space.contains(np.array(action))
        _, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            break
