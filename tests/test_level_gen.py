import numpy as np
import pytest

from geo_wave.config import MIN_GAP_HEIGHT, MIN_H_SPACING
from geo_wave.geometry import PlayField
from geo_wave.level_gen import generate_obstacles
from geo_wave.obstacles import MOVING_SAW, WALL
from geo_wave.validator import allowed_occlusion, cluster_occlusion, group_clusters


@pytest.fixture(params=[(900, 600), (1280, 720), (450, 300)])
def any_field(request):
    return PlayField.from_screen(*request.param)


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_every_cluster_leaves_a_safe_gap(any_field, seed):
    obstacles = generate_obstacles(np.random.default_rng(seed), any_field, 15000)
    allowed = allowed_occlusion(any_field)
    for cluster in group_clusters(obstacles).values():
        top, bottom = cluster_occlusion(cluster, any_field)
        assert top + bottom <= allowed


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_obstacles_are_spaced_and_sorted(field, seed):
    obstacles = generate_obstacles(np.random.default_rng(seed), field, 37500)
    assert obstacles
    for prev, cur in zip(obstacles, obstacles[1:]):
        assert cur.x >= prev.x + MIN_H_SPACING


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_wall_gaps_fit_the_field(any_field, seed):
    obstacles = generate_obstacles(np.random.default_rng(seed), any_field, 15000)
    for wall in (o for o in obstacles if o.kind == WALL):
        gap_y = wall.config["gap_y"]
        assert wall.config["gap_height"] >= MIN_GAP_HEIGHT
        assert any_field.ceiling_y <= gap_y
        assert gap_y + wall.config["gap_height"] <= any_field.ground_y


def test_moving_saws_travel_inside_margins(field, rng):
    obstacles = generate_obstacles(rng, field, 30000)
    saws = [o for o in obstacles if o.kind == MOVING_SAW]
    assert saws
    for saw in saws:
        assert saw.config["start_y"] == field.ceiling_y + 80
        assert saw.config["end_y"] == field.ground_y - 80


def test_level_starts_off_screen(field, rng):
    obstacles = generate_obstacles(rng, field, 15000)
    assert min(o.x for o in obstacles) >= 700


def test_same_seed_same_level(field):
    def layout(seed):
        obstacles = generate_obstacles(np.random.default_rng(seed), field, 15000)
        return [(o.kind, o.x, o.config, o.pulse_phase) for o in obstacles]

    assert layout(42) == layout(42)
    assert layout(42) != layout(43)


def test_short_level_is_empty(field, rng):
    assert generate_obstacles(rng, field, 500) == []
