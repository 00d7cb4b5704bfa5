import pytest

from geo_wave.config import MIN_GAP_HEIGHT
from geo_wave.geometry import Bounds
from geo_wave.obstacles import (
    MOVING_SAW,
    Obstacle,
    make_moving_saw,
    make_saw,
    make_spike,
    make_wall,
)


def test_unknown_kind_raises():
    with pytest.raises(ValueError):
        Obstacle(0, "laser", {})


def test_wall_gap_is_clamped_to_minimum(field):
    wall = make_wall(500, 200, MIN_GAP_HEIGHT - 1, field)
    assert wall.config["gap_height"] >= MIN_GAP_HEIGHT


def test_wall_gap_is_kept_inside_field(field):
    wall = make_wall(500, 520, 160, field)
    gap_y = wall.config["gap_y"]
    assert gap_y >= field.ceiling_y
    assert gap_y + wall.config["gap_height"] <= field.ground_y

    wall = make_wall(500, 0, 160, field)
    assert wall.config["gap_y"] == field.ceiling_y


def test_wall_collision_inside_and_outside_gap(field):
    wall = make_wall(500, 200, 160, field)  # gap 200..360

    inside = Bounds(505, 210, 20, 140)
    assert not wall.check_collision(inside)

    above = Bounds(505, 199, 20, 100)
    below = Bounds(505, 261, 20, 100)
    assert wall.check_collision(above)
    assert wall.check_collision(below)

    # No horizontal overlap means no hit regardless of height
    assert not wall.check_collision(Bounds(400, 0, 20, 50))


def test_spike_collision_uses_inset_bounds(field):
    spike = make_spike(300, field.ground_y, 60)
    b = spike.spike_bounds()
    assert (b.x, b.y, b.width, b.height) == (305, 490, 30, 60)

    assert spike.check_collision(Bounds(310, 480, 20, 20))
    # Overlaps the spike's column but only its inset margin
    assert not spike.check_collision(Bounds(296, 500, 8, 20))


def test_top_spike_hangs_from_ceiling(field):
    spike = make_spike(300, field.ceiling_y, 70, from_top=True)
    assert spike.spike_bounds().y == field.ceiling_y
    assert spike.blocked_span(field) == (70, 0.0)


def test_negative_spike_height_is_clamped(field):
    assert make_spike(0, field.ground_y, -5).config["height"] == 0


def test_saw_collision(field):
    saw = make_saw(400, 300)
    assert saw.check_collision(Bounds(390, 290, 20, 20))
    assert not saw.check_collision(Bounds(390, 100, 20, 20))


def test_update_scrolls_by_speed_and_frame_time():
    saw = make_saw(400, 300)
    saw.update(6)
    assert saw.x == 394
    saw.update(6, elapsed_ms=16.67 * 2)
    assert saw.x == pytest.approx(382)
    assert saw.rotation == pytest.approx(0.45)


def test_moving_saw_bounces_between_bounds():
    saw = make_moving_saw(400, 130, 140, 4)
    assert saw.kind == MOVING_SAW
    seen = []
    for _ in range(10):
        saw.update(6)
        seen.append(saw.config["current_y"])
    assert max(seen) <= 140 + 4
    assert min(seen) >= 130 - 4
    assert saw.config["direction"] in (1, -1)


def test_moving_saw_swaps_reversed_bounds():
    saw = make_moving_saw(0, 400, 100, 2)
    assert saw.config["start_y"] == 100
    assert saw.config["end_y"] == 400
    assert saw.center_y == 100


def test_off_screen_threshold():
    saw = make_saw(-199, 300)
    assert not saw.is_off_screen()
    saw.x = -201
    assert saw.is_off_screen()


def test_open_interval(field):
    wall = make_wall(500, 200, 160, field)
    assert wall.open_interval(field) == (200, 360)

    spike = make_spike(0, field.ground_y, 100)
    assert spike.open_interval(field) == (field.ceiling_y, 450)

    saw = make_saw(0, 200)  # blocks 165..235
    assert saw.open_interval(field) == (235, field.ground_y)
