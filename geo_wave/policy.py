def policy(env):
    # Strategy: Look at the nearest obstacle still ahead of the arrow and aim for the middle
    # of its widest opening. Thrust (climb) while below that point and release (dive) while
    # above it, so the wave zig-zags around the target. With nothing ahead, hold mid-corridor.
    player = env.player
    field = env.field
    ahead = env.obstacles_ahead()

    if ahead:
        low, high = ahead[0].open_interval(field)
        target_y = (low + high) / 2
    else:
        target_y = (field.ceiling_y + field.ground_y) / 2

    if player.y > target_y:
        return [0, 1, 0]  # Thrust up
    return [0, 0, 0]  # Dive
