"""Post-generation repair of obstacle layouts.

Runs after the level generator and after every mid-run spawn. Each pass
fixes at most one problem per cluster, then enforces horizontal spacing and
keeps saws out of wall columns.
"""
import logging
import math

from geo_wave.config import (
    CLUSTER_BUCKET,
    MIN_H_SPACING,
    SAFE_GAP,
    SAW_WALL_MARGIN,
    SAW_WALL_PUSH,
    SPIKE_MIN_HEIGHT,
    SPIKE_SHRINK_STEP,
)
from geo_wave.obstacles import SAW_KINDS, SPIKE, WALL

logger = logging.getLogger(__name__)


def cluster_key(x):
    # Round half up onto the bucket grid.
    return math.floor(x / CLUSTER_BUCKET + 0.5) * CLUSTER_BUCKET


def group_clusters(obstacles):
    groups = {}
    for obstacle in obstacles:
        groups.setdefault(cluster_key(obstacle.x), []).append(obstacle)
    return groups


def cluster_occlusion(cluster, field):
    blocked_top = 0.0
    blocked_bottom = 0.0
    for obstacle in cluster:
        top, bottom = obstacle.blocked_span(field)
        blocked_top += top
        blocked_bottom += bottom
    return blocked_top, blocked_bottom


def allowed_occlusion(field):
    return max(0.0, field.playable_height - SAFE_GAP)


def _repair_cluster(obstacles, cluster):
    spikes = [o for o in cluster if o.kind == SPIKE]
    if spikes:
        # max() keeps the first of equal heights
        tallest = max(spikes, key=lambda o: o.config["height"])
        obstacles.remove(tallest)
        return "removed spike"

    walls = [o for o in cluster if o.kind == WALL]
    if walls:
        obstacles.remove(walls[0])
        return "removed wall"

    # Unreachable with the current kinds: only spikes and walls occlude.
    for obstacle in cluster:
        if obstacle.kind == SPIKE:
            obstacle.config["height"] = max(
                SPIKE_MIN_HEIGHT, obstacle.config["height"] - SPIKE_SHRINK_STEP
            )
    return "shrunk spikes"


def _enforce_spacing(obstacles):
    shifted = 0
    obstacles.sort(key=lambda o: o.x)
    for prev, cur in zip(obstacles, obstacles[1:]):
        if cur.x < prev.x + MIN_H_SPACING:
            cur.x = prev.x + MIN_H_SPACING
            shifted += 1
    return shifted


def _clear_saws_from_walls(obstacles):
    moved = 0
    walls = [o for o in obstacles if o.kind == WALL]
    for saw in (o for o in obstacles if o.kind in SAW_KINDS):
        for wall in walls:
            wall_right = wall.x + wall.width
            if wall.x - SAW_WALL_MARGIN < saw.x < wall_right + SAW_WALL_MARGIN:
                saw.x = wall_right + SAW_WALL_PUSH
                moved += 1
    return moved


def validate_and_fix_obstacles(obstacles, field):
    """Repair ``obstacles`` in place and return how many changes were made."""
    allowed = allowed_occlusion(field)
    repairs = 0

    for key, cluster in group_clusters(obstacles).items():
        blocked_top, blocked_bottom = cluster_occlusion(cluster, field)
        if blocked_top + blocked_bottom > allowed:
            action = _repair_cluster(obstacles, cluster)
            logger.debug(
                "Cluster at x=%s blocks %.1f of %.1f allowed: %s",
                key, blocked_top + blocked_bottom, allowed, action,
            )
            repairs += 1

    shifted = _enforce_spacing(obstacles)
    moved = _clear_saws_from_walls(obstacles)
    if shifted or moved:
        logger.debug("Spacing pass shifted %d obstacles, moved %d saws off walls", shifted, moved)

    return repairs + shifted + moved
