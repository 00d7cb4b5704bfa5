from geo_wave.obstacles import make_saw, make_spike, make_wall
from geo_wave.validator import (
    _clear_saws_from_walls,
    _repair_cluster,
    allowed_occlusion,
    cluster_key,
    cluster_occlusion,
    group_clusters,
    validate_and_fix_obstacles,
)


def test_cluster_key_rounds_to_bucket():
    assert cluster_key(300) == 300
    assert cluster_key(309) == 300
    assert cluster_key(310) == 320
    assert cluster_key(-11) == -20


def test_removes_tallest_spike_from_blocked_cluster(field):
    short = make_spike(300, field.ground_y, 200)
    tall = make_spike(305, field.ceiling_y, 250, from_top=True)
    obstacles = [short, tall]

    changes = validate_and_fix_obstacles(obstacles, field)

    assert changes >= 1
    assert tall not in obstacles
    assert short in obstacles
    for cluster in group_clusters(obstacles).values():
        top, bottom = cluster_occlusion(cluster, field)
        assert top + bottom <= allowed_occlusion(field)


def test_removes_wall_when_no_spike_to_drop(field):
    walls = [make_wall(600, 60, 140, field), make_wall(605, 350, 140, field)]
    obstacles = list(walls)

    validate_and_fix_obstacles(obstacles, field)

    assert obstacles == [walls[1]]


def test_enforces_horizontal_spacing(field):
    obstacles = [make_saw(400, 300), make_saw(100, 200), make_spike(150, field.ground_y, 60)]

    validate_and_fix_obstacles(obstacles, field)

    xs = [o.x for o in obstacles]
    assert xs == sorted(xs)
    assert xs == [100, 280, 460]


def test_saws_are_pushed_out_of_wall_columns(field):
    wall = make_wall(1000, 200, 160, field)
    saw = make_saw(1015, 300)

    assert _clear_saws_from_walls([wall, saw]) == 1
    assert saw.x == 1000 + wall.width + 60

    far_saw = make_saw(1200, 300)
    assert _clear_saws_from_walls([wall, far_saw]) == 0
    assert far_saw.x == 1200


def test_valid_set_is_left_untouched(field):
    obstacles = [
        make_spike(700, field.ground_y, 100),
        make_wall(900, 200, 160, field),
        make_saw(1100, 300),
    ]
    snapshot = [(o.kind, o.x, dict(o.config)) for o in obstacles]

    assert validate_and_fix_obstacles(obstacles, field) == 0
    assert [(o.kind, o.x, o.config) for o in obstacles] == snapshot


def test_second_pass_is_a_no_op(field, rng):
    from geo_wave.level_gen import generate_obstacles

    obstacles = generate_obstacles(rng, field, 15000)
    snapshot = [(o.kind, o.x, dict(o.config)) for o in obstacles]

    assert validate_and_fix_obstacles(obstacles, field) == 0
    assert [(o.kind, o.x, o.config) for o in obstacles] == snapshot


def test_repair_falls_back_to_shrinking_without_spikes_or_walls():
    saws = [make_saw(300, 200), make_saw(305, 400)]
    obstacles = list(saws)

    assert _repair_cluster(obstacles, saws) == "shrunk spikes"
    assert obstacles == saws
