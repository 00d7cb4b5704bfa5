import logging
import math
import os
from functools import partial

import gymnasium as gym
import numpy as np
import pygame
from gymnasium.spaces import Box, MultiDiscrete

from geo_wave.config import (
    BASE_ARROW_SIZE,
    BASE_SPEED,
    DIFFICULTIES,
    FPS,
    FRAME_MS,
    MIN_ARROW_SIZE,
    MIN_GAP_HEIGHT,
    MIN_MARGIN,
    REVEAL_DELAY_MS,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SPAWN_CHANCE_CAP,
    SPAWN_CHANCE_FACTOR,
    SPAWN_GAP_SHRINK,
    SPAWN_GAP_START,
    SPAWN_JITTER,
    SPAWN_OFFSET,
    SPAWN_WEIGHTS,
    SPEED_CURVE,
    pick_weighted,
)
from geo_wave.geometry import PlayField
from geo_wave.level_gen import generate_obstacles
from geo_wave.obstacles import OBSTACLE_KINDS, make_saw, make_spike, make_wall
from geo_wave.player import Player
from geo_wave.render import WaveRenderer
from geo_wave.run_state import GAME_OVER, MENU, PLAYING, TERMINAL_STATES, WIN, RunState
from geo_wave.timers import DeferredCall
from geo_wave.validator import validate_and_fix_obstacles

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

logger = logging.getLogger(__name__)

OBS_MODES = ("pixels", "state")
STATE_OBSTACLES = 3
STATE_SIZE = 4 + STATE_OBSTACLES * 4
KIND_IDS = {kind: i + 1 for i, kind in enumerate(OBSTACLE_KINDS)}


def arrow_size_for(width):
    return max(MIN_ARROW_SIZE, round(BASE_ARROW_SIZE * width / SCREEN_WIDTH))


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": FPS}

    user_guide = (
        "Controls: Hold Space (or ↑) to fly up, release to dive. "
        "Weave through spikes, saws and walls to reach the goal."
    )

    game_description = (
        "A neon wave runner. Your arrow zig-zags through a procedurally generated corridor "
        "of spikes, spinning saws and gapped walls that scrolls faster the further you get. "
        "Every layout is repaired so a path always stays open."
    )

    auto_advance = True

    def __init__(self, render_mode="rgb_array", difficulty="easy", width=SCREEN_WIDTH,
                 height=SCREEN_HEIGHT, obs_mode="pixels", max_steps=None):
        super().__init__()
        if obs_mode not in OBS_MODES:
            raise ValueError(f"Unknown obs_mode {obs_mode!r}; expected one of {', '.join(OBS_MODES)}")
        self.render_mode = render_mode
        self.obs_mode = obs_mode
        self.max_steps = max_steps
        self.frame_ms = FRAME_MS

        self.field = PlayField.from_screen(width, height)
        self.arrow_size = arrow_size_for(width)

        self.action_space = MultiDiscrete([5, 2, 2])
        self.observation_space = self._make_observation_space()

        self.renderer = None
        if obs_mode == "pixels" or render_mode == "rgb_array":
            self.renderer = WaveRenderer(width, height)

        # --- State Variables ---
        self.run = RunState(difficulty)
        self.reveal = DeferredCall()
        self.on_run_end = None
        self.revealed_result = None
        self.player = Player(self.field, self.arrow_size)
        self.obstacles = []
        self.events = []
        self.steps = 0

    def _make_observation_space(self):
        if self.obs_mode == "pixels":
            return Box(low=0, high=255, shape=(self.field.height, self.field.width, 3), dtype=np.uint8)
        return Box(low=-np.inf, high=np.inf, shape=(STATE_SIZE,), dtype=np.float32)

    # --- Run control ---

    def select_difficulty(self, name):
        self.run.select_difficulty(name)

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}
        if "difficulty" in options:
            self.select_difficulty(options["difficulty"])
        self.start_run()
        return self._get_observation(), self._get_info()

    def start_run(self):
        # A reveal left over from the previous run must not land on this one
        self.reveal.cancel()
        self.revealed_result = None
        self.run.begin()
        self.steps = 0
        self.events = []
        self.player = Player(self.field, self.arrow_size)
        self.obstacles = generate_obstacles(self.np_random, self.field, self.run.level_length)
        if self.renderer is not None:
            self.renderer.clear_effects()
        logger.debug(
            "Run %d on %s: %d obstacles over %.0f px",
            self.run.attempt, self.run.difficulty, len(self.obstacles), self.run.level_length,
        )

    def return_to_menu(self):
        self.reveal.cancel()
        self.revealed_result = None
        self.run.state = MENU

    def resize(self, width, height):
        self.field = PlayField.from_screen(width, height)
        self.arrow_size = arrow_size_for(width)
        self.observation_space = self._make_observation_space()
        if self.renderer is not None:
            self.renderer.resize(width, height)

        player = self.player
        player.arrow_size = self.arrow_size
        player.x = max(120, round(width * 0.15))
        player.y = min(max(player.y, self.field.ceiling_y + 60), self.field.ground_y - 60)
        player.render_y = player.y
        player.trail.clear()

        # Regenerate so clusters are repaired against the new field
        self.obstacles = generate_obstacles(self.np_random, self.field, self.run.level_length)

    # --- Simulation ---

    def step(self, action):
        movement, space_held = action[0], action[1] == 1
        thrust_held = bool(space_held or movement == 1)

        if self.run.state == MENU and thrust_held:
            # Thrust on the menu starts a run
            self.start_run()
            return self._get_observation(), 0.0, False, False, self._get_info()

        if self.run.state != PLAYING:
            self.reveal.advance(self.frame_ms)
            terminated = self.run.state in TERMINAL_STATES
            return self._get_observation(), 0.0, terminated, False, self._get_info()

        self.steps += 1
        self.events = []
        reward = self._tick(thrust_held, self.frame_ms)
        if self.renderer is not None:
            self.renderer.consume(self.events)

        terminated = self.run.state in TERMINAL_STATES
        truncated = bool(not terminated and self.max_steps is not None and self.steps >= self.max_steps)
        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _tick(self, thrust_held, elapsed_ms):
        run = self.run
        run.distance += run.game_speed
        progress = run.progress()
        run.game_speed = BASE_SPEED + progress ** SPEED_CURVE * run.spec["speed_ramp"]

        impact = self.player.update(thrust_held, self.field)
        if impact is not None:
            # sfx: boundary tick
            self.events.append({"type": "impact", "edge": impact, "x": self.player.x, "y": self.player.y})

        # Every obstacle moves this tick even after the first hit
        bounds = self.player.get_bounds()
        crashed = False
        for obstacle in self.obstacles:
            obstacle.update(run.game_speed, elapsed_ms)
            if not crashed and obstacle.check_collision(bounds):
                crashed = True

        self.obstacles = [o for o in self.obstacles if not o.is_off_screen()]

        if crashed:
            self._end_run(win=False)
            return -100.0

        if self.np_random.random() < min(SPAWN_CHANCE_CAP, progress * SPAWN_CHANCE_FACTOR):
            self._spawn_obstacle(progress)

        run.best_score = max(run.best_score, run.score())
        if run.goal_reached():
            self._end_run(win=True)
            return 100.0
        return 0.1

    def _spawn_obstacle(self, progress):
        rng = self.np_random
        field = self.field
        x = field.width + SPAWN_OFFSET + rng.random() * SPAWN_JITTER
        phase = rng.uniform(0, 2 * math.pi)
        kind = pick_weighted(SPAWN_WEIGHTS, rng.random())

        if kind == "saw":
            span = max(0.0, field.playable_height - MIN_MARGIN * 2)
            obstacle = make_saw(x, field.ceiling_y + MIN_MARGIN + rng.random() * span, phase=phase)
        elif kind == "bottom_spike":
            obstacle = make_spike(x, field.ground_y, rng.random() * 80 + 40, phase=phase)
        else:
            gap_height = max(MIN_GAP_HEIGHT, SPAWN_GAP_START - progress * SPAWN_GAP_SHRINK)
            gap_min_y = field.ceiling_y + MIN_MARGIN
            gap_max_y = field.ground_y - MIN_MARGIN - gap_height
            gap_y = gap_min_y + rng.random() * max(0.0, gap_max_y - gap_min_y)
            obstacle = make_wall(x, gap_y, gap_height, field, phase=phase)

        self.obstacles.append(obstacle)
        validate_and_fix_obstacles(self.obstacles, field)

    def _end_run(self, win):
        run = self.run
        run.state = WIN if win else GAME_OVER
        score = run.spec["target_percent"] if win else run.score()
        run.best_score = max(run.best_score, score)
        run.result = {
            "score": score,
            "best_score": run.best_score,
            "win": win,
            "attempt": run.attempt,
            "difficulty": run.difficulty,
            "label": run.spec["label"],
            "color": run.spec["color"],
        }
        if not win:
            # sfx: crash
            self.events.append({"type": "death", "x": self.player.x, "y": self.player.y})
        logger.info(
            "Attempt %d on %s %s at %s%% (best %s%%)",
            run.attempt, run.difficulty, "won" if win else "crashed", score, run.best_score,
        )
        run.attempt += 1
        self.reveal.schedule(REVEAL_DELAY_MS, partial(self._reveal_result, run.result))

    def _reveal_result(self, result):
        self.revealed_result = result
        if self.on_run_end is not None:
            self.on_run_end(result)

    # --- Observation / info ---

    def obstacles_ahead(self):
        """Obstacles not yet fully behind the player, nearest first."""
        left = self.player.get_bounds().x
        return sorted((o for o in self.obstacles if o.right_edge >= left), key=lambda o: o.x)

    def _get_observation(self):
        if self.obs_mode == "pixels":
            return self.renderer.draw(self)
        return self._get_state_observation()

    def _get_state_observation(self):
        field = self.field
        player = self.player
        span = max(1.0, field.playable_height)

        obs = np.zeros(STATE_SIZE, dtype=np.float32)
        obs[0] = (player.y - field.ceiling_y) / span
        obs[1] = np.sign(player.velocity)
        obs[2] = self.run.progress()
        obs[3] = self.run.speed_multiplier()
        for i, obstacle in enumerate(self.obstacles_ahead()[:STATE_OBSTACLES]):
            low, high = obstacle.open_interval(field)
            base = 4 + i * 4
            obs[base:base + 4] = (
                (obstacle.x - player.x) / field.width,
                KIND_IDS[obstacle.kind],
                (low - field.ceiling_y) / span,
                (high - field.ceiling_y) / span,
            )
        return obs

    def _get_info(self):
        run = self.run
        return {
            "score": run.score(),
            "progress": run.progress_bar(),
            "speed_multiplier": run.speed_multiplier(),
            "best_score": run.best_score,
            "attempt": run.attempt,
            "distance": run.distance,
            "state": run.state,
            "difficulty": run.difficulty,
            "steps": self.steps,
            "obstacles": len(self.obstacles),
            "result": run.result,
        }

    def render(self):
        if self.render_mode == "rgb_array":
            return self.renderer.draw(self)
        return None

    def close(self):
        if self.renderer is not None:
            self.renderer.close()

    def validate_implementation(self):
        '''
        Call this to verify the env contract:
        '''
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        obs, info = self.reset(seed=0)
        assert obs.shape == self.observation_space.shape
        assert obs.dtype == self.observation_space.dtype
        assert isinstance(info, dict)
        assert info["state"] == PLAYING

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == self.observation_space.shape
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert isinstance(trunc, bool)
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")


if __name__ == '__main__':
    # The interactive window needs a real video driver, not the dummy one
    if "SDL_VIDEODRIVER" in os.environ:
        del os.environ["SDL_VIDEODRIVER"]

    logging.basicConfig(level=logging.INFO)

    env = GameEnv(render_mode="rgb_array")
    env.return_to_menu()
    obs, info = env.step([0, 0, 0])

    pygame.display.set_caption("Geo Wave")
    screen = pygame.display.set_mode((env.field.width, env.field.height))
    clock = pygame.time.Clock()
    difficulty_keys = {getattr(pygame, f"K_{i + 1}"): name for i, name in enumerate(DIFFICULTIES)}

    print("--- Human Controls ---")
    print(env.user_guide)
    print("Menu: Space or click to start, 1-5 to pick a difficulty. R: retry, M: menu")
    print("----------------------")

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r:
                    env.reset()
                elif event.key == pygame.K_m:
                    env.return_to_menu()
                elif event.key in difficulty_keys and env.run.state == MENU:
                    env.reset(options={"difficulty": difficulty_keys[event.key]})
                    print(f"Difficulty: {env.run.spec['label']}")

        keys = pygame.key.get_pressed()
        space = 1 if keys[pygame.K_SPACE] or pygame.mouse.get_pressed()[0] else 0
        movement = 1 if keys[pygame.K_UP] else 0
        action = [movement, space, 0]

        obs, reward, terminated, truncated, info = env.step(action)

        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()

        env.frame_ms = clock.tick(FPS)

    env.close()
