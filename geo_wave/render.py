import math
import random

import numpy as np
import pygame
import pygame.gfxdraw

from geo_wave.obstacles import MOVING_SAW, SAW, SPIKE, WALL
from geo_wave.run_state import MENU, PLAYING, WIN


class WaveRenderer:
    """Draws a GameEnv onto an off-screen surface; never mutates the env."""

    # Colors
    COLOR_BG_TOP = (10, 10, 42)
    COLOR_BG_MID = (26, 10, 58)
    COLOR_BG_BOTTOM = (10, 26, 42)
    COLOR_GRID = (0, 40, 50)
    COLOR_CEILING = (0, 255, 255)
    COLOR_GROUND = (255, 0, 255)
    COLOR_SPIKE = (255, 68, 68)
    COLOR_SPIKE_EDGE = (255, 255, 255)
    COLOR_SAW = (255, 68, 0)
    COLOR_SAW_RIM = (255, 204, 0)
    COLOR_SAW_HUB = (51, 17, 0)
    COLOR_MOVING_SAW = (0, 170, 0)
    COLOR_MOVING_SAW_HUB = (0, 51, 0)
    COLOR_MOVING_SAW_TRACK = (0, 90, 0)
    COLOR_WALL = (153, 0, 255)
    COLOR_WALL_EDGE = (204, 102, 255)
    COLOR_GAP_MARK = (0, 160, 160)
    COLOR_PLAYER = (0, 255, 255)
    COLOR_PLAYER_EDGE = (255, 255, 255)
    COLOR_TRAIL = (0, 200, 220)
    COLOR_UI_TEXT = (220, 220, 220)
    COLOR_PROGRESS_BAR = (0, 255, 255)
    COLOR_PROGRESS_BAR_BG = (50, 50, 50)
    COLOR_CRASH = (255, 68, 68)
    COLOR_DEATH_PARTICLES = [(255, 0, 0), (255, 102, 0), (255, 255, 0), (255, 255, 255)]

    def __init__(self, width, height):
        pygame.init()
        pygame.font.init()
        self.font_large = pygame.font.Font(None, 40)
        self.font_small = pygame.font.Font(None, 24)
        self.font_banner = pygame.font.Font(None, 72)
        self.particles = []
        self._rng = random.Random()
        self.resize(width, height)

    def resize(self, width, height):
        self.W, self.H = width, height
        self.screen = pygame.Surface((width, height))
        self._background = self._build_background()

    def close(self):
        pygame.quit()

    def _build_background(self):
        surf = pygame.Surface((self.W, self.H))
        half = self.H / 2
        for y in range(self.H):
            if y < half:
                a, b, t = self.COLOR_BG_TOP, self.COLOR_BG_MID, y / half
            else:
                a, b, t = self.COLOR_BG_MID, self.COLOR_BG_BOTTOM, (y - half) / half
            color = tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))
            pygame.draw.line(surf, color, (0, y), (self.W, y))
        return surf

    # --- Effects ---

    def clear_effects(self):
        self.particles = []

    def consume(self, events):
        """Advance effect particles one frame and spawn new ones for this tick's events."""
        for p in self.particles:
            p['pos'][0] += p['vel'][0]
            p['pos'][1] += p['vel'][1]
            p['vel'][0] *= 0.98
            p['vel'][1] *= 0.98
            p['life'] -= 0.02
        self.particles = [p for p in self.particles if p['life'] > 0]

        for event in events:
            if event['type'] == 'impact':
                color = self.COLOR_CEILING if event['edge'] == 'ceiling' else self.COLOR_GROUND
                for _ in range(10):
                    self._spawn_particle(event['x'], event['y'], color, 1, 4, 0.5)
            elif event['type'] == 'death':
                for _ in range(50):
                    color = self._rng.choice(self.COLOR_DEATH_PARTICLES)
                    self._spawn_particle(event['x'], event['y'], color, 2, 10, 1.5)

    def _spawn_particle(self, x, y, color, min_speed, max_speed, life):
        angle = self._rng.uniform(0, 2 * math.pi)
        speed = self._rng.uniform(min_speed, max_speed)
        self.particles.append({
            'pos': [x, y],
            'vel': [math.cos(angle) * speed, math.sin(angle) * speed],
            'color': color,
            'life': life,
            'max_life': life,
            'size': self._rng.uniform(2, 7),
        })

    # --- Frame ---

    def draw(self, env):
        self.screen.blit(self._background, (0, 0))
        self._render_grid(env)
        self._render_boundaries(env.field)
        for obstacle in env.obstacles:
            self._render_obstacle(obstacle, env.field)
        self._render_particles()
        if env.run.state == PLAYING:
            self._render_player(env.player)
        self._render_ui(env)

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _render_grid(self, env):
        field = env.field
        offset = env.run.distance % 50
        x = -offset
        while x < self.W + 50:
            pygame.draw.line(self.screen, self.COLOR_GRID, (x, field.ceiling_y), (x, field.ground_y))
            x += 50
        for y in range(int(field.ceiling_y), int(field.ground_y) + 1, 50):
            pygame.draw.line(self.screen, self.COLOR_GRID, (0, y), (self.W, y))

    def _render_boundaries(self, field):
        pygame.draw.rect(self.screen, self.COLOR_BG_MID, (0, 0, self.W, field.ceiling_y))
        pygame.draw.rect(self.screen, self.COLOR_BG_MID, (0, field.ground_y, self.W, self.H - field.ground_y))
        pygame.draw.line(self.screen, self.COLOR_CEILING, (0, field.ceiling_y), (self.W, field.ceiling_y), 3)
        pygame.draw.line(self.screen, self.COLOR_GROUND, (0, field.ground_y), (self.W, field.ground_y), 3)

    def _render_obstacle(self, obstacle, field):
        if obstacle.x > self.W + 100 or obstacle.right_edge < -100:
            return
        if obstacle.kind == SPIKE:
            self._render_spike(obstacle)
        elif obstacle.kind == WALL:
            self._render_wall(obstacle, field)
        elif obstacle.kind == SAW:
            self._render_saw(obstacle, 8, 15, 0.2, self.COLOR_SAW, self.COLOR_SAW_HUB)
        elif obstacle.kind == MOVING_SAW:
            cfg = obstacle.config
            x = int(obstacle.x)
            for y in range(int(cfg['start_y']), int(cfg['end_y']), 15):
                pygame.draw.line(self.screen, self.COLOR_MOVING_SAW_TRACK, (x, y), (x, min(y + 5, cfg['end_y'])))
            self._render_saw(obstacle, 6, 12, 0.25, self.COLOR_MOVING_SAW, self.COLOR_MOVING_SAW_HUB)

    def _render_spike(self, obstacle):
        cfg = obstacle.config
        pulse = math.sin(obstacle.pulse_phase) * 3
        x, w, edge = obstacle.x, obstacle.width, cfg['y']
        tip = edge + cfg['height'] + pulse if cfg['from_top'] else edge - cfg['height'] - pulse
        points = [(x, edge), (x + w / 2, tip), (x + w, edge)]
        pygame.draw.polygon(self.screen, self.COLOR_SPIKE, points)
        pygame.draw.polygon(self.screen, self.COLOR_SPIKE_EDGE, points, 2)

    def _render_wall(self, obstacle, field):
        gap_y = obstacle.config['gap_y']
        gap_bottom = gap_y + obstacle.config['gap_height']
        top_rect = pygame.Rect(obstacle.x, field.ceiling_y, obstacle.width, gap_y - field.ceiling_y)
        bottom_rect = pygame.Rect(obstacle.x, gap_bottom, obstacle.width, field.ground_y - gap_bottom)
        for rect in (top_rect, bottom_rect):
            pygame.draw.rect(self.screen, self.COLOR_WALL, rect)
            pygame.draw.rect(self.screen, self.COLOR_WALL_EDGE, rect, 2)

        # Gap indicator
        for y in (gap_y, gap_bottom):
            pygame.draw.line(
                self.screen, self.COLOR_GAP_MARK,
                (obstacle.x - 10, y), (obstacle.x + obstacle.width + 10, y),
            )

    def _render_saw(self, obstacle, teeth, tooth_length, tooth_spread, color, hub_color):
        cx, cy, r = int(obstacle.x), int(obstacle.center_y), int(obstacle.radius)
        pygame.gfxdraw.filled_circle(self.screen, cx, cy, r, color)
        pygame.gfxdraw.aacircle(self.screen, cx, cy, r, self.COLOR_SAW_RIM)
        for i in range(teeth):
            angle = obstacle.rotation + (i / teeth) * 2 * math.pi
            points = [
                (cx + math.cos(angle) * r, cy + math.sin(angle) * r),
                (cx + math.cos(angle + tooth_spread) * (r + tooth_length),
                 cy + math.sin(angle + tooth_spread) * (r + tooth_length)),
                (cx + math.cos(angle + 2 * tooth_spread) * r, cy + math.sin(angle + 2 * tooth_spread) * r),
            ]
            pygame.draw.polygon(self.screen, color, points)
        pygame.gfxdraw.filled_circle(self.screen, cx, cy, max(1, r // 3), hub_color)

    def _render_particles(self):
        for p in self.particles:
            alpha = p['life'] / p['max_life']
            size = int(p['size'] * alpha)
            if size > 0:
                pygame.gfxdraw.filled_circle(self.screen, int(p['pos'][0]), int(p['pos'][1]), size, p['color'])

    def _render_player(self, player):
        points = list(player.trail_points())
        if len(points) >= 2:
            trail = [(x - i * 1.5, y) for i, (x, y, _) in enumerate(points)]
            pygame.draw.lines(self.screen, self.COLOR_TRAIL, False, trail, 4)

        # Glow effect
        glow_size = int(60 + math.sin(player.pulse_phase) * 10)
        glow_surf = pygame.Surface((glow_size * 2, glow_size * 2), pygame.SRCALPHA)
        alpha = int(100 * player.glow_intensity)
        pygame.draw.circle(glow_surf, (*self.COLOR_PLAYER, alpha), (glow_size, glow_size), glow_size)
        self.screen.blit(glow_surf, (player.x - glow_size, player.render_y - glow_size))

        # Arrow pointing right, rotated with the climb
        s = player.arrow_size
        cos_r, sin_r = math.cos(player.rotation), math.sin(player.rotation)
        shape = [(s * 0.5, 0), (-s * 0.35, -s * 0.4), (-s * 0.15, 0), (-s * 0.35, s * 0.4)]
        points = [
            (player.x + px * cos_r - py * sin_r, player.render_y + px * sin_r + py * cos_r)
            for px, py in shape
        ]
        pygame.draw.polygon(self.screen, self.COLOR_PLAYER, points)
        pygame.draw.polygon(self.screen, self.COLOR_PLAYER_EDGE, points, 2)

    def _render_ui(self, env):
        run = env.run
        spec = run.spec

        score_text = self.font_large.render(f"{run.score()}%", True, self.COLOR_UI_TEXT)
        self.screen.blit(score_text, (self.W / 2 - score_text.get_width() / 2, 8))

        stats = f"BEST {run.best_score}%   ATTEMPT {run.attempt}   SPEED {run.speed_multiplier():.2f}x"
        stats_text = self.font_small.render(stats, True, self.COLOR_UI_TEXT)
        self.screen.blit(stats_text, (10, self.H - stats_text.get_height() - 10))

        label_text = self.font_small.render(spec['label'], True, spec['color'])
        self.screen.blit(label_text, (self.W - label_text.get_width() - 10, self.H - label_text.get_height() - 10))

        # Progress Bar
        bar_w = self.W * 0.4
        bar_x = self.W / 2 - bar_w / 2
        pygame.draw.rect(self.screen, self.COLOR_PROGRESS_BAR_BG, (bar_x, 38, bar_w, 6))
        pygame.draw.rect(self.screen, self.COLOR_PROGRESS_BAR, (bar_x, 38, bar_w * run.progress_bar(), 6))

        if run.state == MENU:
            goal = "Survive as long as you can!" if run.infinite else f"Goal: {spec['target_percent']}%"
            self._render_banner("GEO WAVE", self.COLOR_PLAYER, goal, spec['color'])
        elif env.revealed_result is not None:
            result = env.revealed_result
            if run.state == WIN:
                self._render_banner("VICTORY!", spec['color'], f"{result['score']}%", self.COLOR_UI_TEXT)
            else:
                self._render_banner(
                    "CRASH!", self.COLOR_CRASH,
                    f"{result['score']}%  (best {result['best_score']}%)", self.COLOR_UI_TEXT,
                )

    def _render_banner(self, title, title_color, subtitle, subtitle_color):
        title_surf = self.font_banner.render(title, True, title_color)
        self.screen.blit(title_surf, (self.W / 2 - title_surf.get_width() / 2, self.H / 2 - title_surf.get_height()))
        sub_surf = self.font_small.render(subtitle, True, subtitle_color)
        self.screen.blit(sub_surf, (self.W / 2 - sub_surf.get_width() / 2, self.H / 2 + 10))
