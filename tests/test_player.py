import pytest

from geo_wave.player import Player


def test_starts_centered(field):
    player = Player(field)
    assert player.x == 150
    assert player.y == 300
    assert player.velocity == 0


def test_thrust_pins_player_at_ceiling(field):
    player = Player(field)
    top, bottom = player.y_limits(field)
    impacts = [player.update(True, field) for _ in range(100)]

    assert player.y == top
    assert impacts[-1] == "ceiling"
    # Contact reverses the velocity
    assert player.velocity == 6


def test_release_drops_player_to_ground(field):
    player = Player(field)
    for _ in range(100):
        player.update(False, field)
        top, bottom = player.y_limits(field)
        assert top <= player.y <= bottom
    assert player.y == bottom
    assert player.velocity == -6


def test_bounds_hold_while_alternating(field):
    player = Player(field)
    top, bottom = player.y_limits(field)
    for i in range(500):
        player.update((i // 37) % 2 == 0, field)
        assert top <= player.y <= bottom


def test_glow_rises_and_decays(field):
    player = Player(field)
    for _ in range(20):
        player.update(True, field)
    assert player.glow_intensity == 1.0
    for _ in range(50):
        player.update(False, field)
    assert player.glow_intensity == 0.3


def test_collision_bounds_are_two_thirds_of_sprite(field):
    player = Player(field)
    bounds = player.get_bounds()
    assert bounds.width == player.width / 1.5
    assert bounds.height == player.height / 1.5
    assert bounds.x + bounds.width / 2 == pytest.approx(player.x)
    assert bounds.y + bounds.height / 2 == pytest.approx(player.y)


def test_trail_is_capped(field):
    player = Player(field)
    for _ in range(40):
        player.update(True, field)
    points = list(player.trail_points())
    assert len(points) == 25
    assert points[0][2] == 1
    assert points[-1][2] > 0
