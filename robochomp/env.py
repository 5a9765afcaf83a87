import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw
import math
import os

from .engine import GameSession
from .entities import Direction, GameStatus
from .levels import LEVELS

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    user_guide = (
        "Controls: Use arrow keys to steer through the maze and press space to fire. Eat every pellet to win!"
    )

    game_description = (
        "A retro maze chomper. Clear the pellets while wandering ghosts roam the halls. "
        "Power pellets make the ghosts edible, and a small supply of shots sends them back home."
    )

    auto_advance = True

    # --- Constants ---
    SCREEN_WIDTH = 640
    SCREEN_HEIGHT = 400
    CELL_SIZE = 20
    MAX_STEPS = 3000

    # Colors
    COLOR_BG = (0, 0, 0)
    COLOR_WALL = (30, 60, 200)
    COLOR_WALL_LEVEL_2 = (30, 150, 60)
    COLOR_PELLET = (255, 220, 150)
    COLOR_POWER_PELLET = (255, 255, 255)
    COLOR_PLAYER = (255, 255, 0)
    COLOR_PROJECTILE = (255, 120, 0)
    COLOR_GHOST_FRIGHTENED = (50, 50, 255)
    COLOR_UI_TEXT = (220, 220, 220)
    COLOR_UI_SCORE = (255, 230, 80)

    # Movement action -> direction intent
    ACTION_TO_DIRECTION = {
        1: Direction.UP,
        2: Direction.DOWN,
        3: Direction.LEFT,
        4: Direction.RIGHT,
    }

    def __init__(self, render_mode="rgb_array", levels=None):
        super().__init__()

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])
        self.render_mode = render_mode
        self.levels = list(levels) if levels is not None else list(LEVELS)

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.font_ui = pygame.font.Font(None, 24)
        self.font_large = pygame.font.Font(None, 48)

        self.session = None
        self.steps = 0
        self.game_over = False
        self.space_pressed_last_frame = False

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}

        # Ghosts draw from the env's seeded generator
        self.session = GameSession(self.levels, rng=self.np_random)
        self.session.load_level(int(options.get("level", 0)))

        self.steps = 0
        self.game_over = False
        self.space_pressed_last_frame = False

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0, True, False, self._get_info()

        movement = action[0]
        space_held = action[1] == 1
        self.steps += 1
        reward = 0

        # --- Input ---
        if movement in self.ACTION_TO_DIRECTION:
            self.session.queue_direction(self.ACTION_TO_DIRECTION[movement])
        if space_held and not self.space_pressed_last_frame:
            self.session.fire()
        self.space_pressed_last_frame = space_held

        # --- Tick ---
        score_before = self.session.snapshot.score
        snapshot = self.session.tick()
        reward += (snapshot.score - score_before) * 0.1

        # --- Termination ---
        terminated = False
        if snapshot.status == GameStatus.WON:
            reward += 100
            terminated = True
        elif snapshot.status == GameStatus.LOST:
            reward -= 100
            terminated = True

        if self.steps >= self.MAX_STEPS:
            terminated = True

        self.game_over = terminated
        return self._get_observation(), float(reward), terminated, False, self._get_info()

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _get_info(self):
        snapshot = self.session.snapshot
        return {
            "score": snapshot.score,
            "steps": self.steps,
            "level": self.session.level_index + 1,
            "pellets_left": snapshot.pellets_left,
            "power_up_timer": snapshot.power_up.timer,
            "projectiles": len(snapshot.projectiles),
            "status": snapshot.status.value,
        }

    def _board_offset(self):
        grid = self.session.grid
        ox = (self.SCREEN_WIDTH - grid.width * self.CELL_SIZE) // 2
        oy = (self.SCREEN_HEIGHT - grid.height * self.CELL_SIZE) // 2 + 12
        return ox, oy

    def _cell_center(self, pos):
        ox, oy = self._board_offset()
        return (
            int(ox + (pos[0] + 0.5) * self.CELL_SIZE),
            int(oy + (pos[1] + 0.5) * self.CELL_SIZE),
        )

    def _render_game(self):
        snapshot = self.session.snapshot
        grid = self.session.grid
        ox, oy = self._board_offset()
        wall_color = self.COLOR_WALL if self.session.level_index == 0 else self.COLOR_WALL_LEVEL_2

        # Draw Maze
        for y in range(grid.height):
            for x in range(grid.width):
                if grid.is_wall((x, y)):
                    rect = pygame.Rect(ox + x * self.CELL_SIZE, oy + y * self.CELL_SIZE, self.CELL_SIZE, self.CELL_SIZE)
                    pygame.draw.rect(self.screen, wall_color, rect)

        # Draw Pellets
        for pos in snapshot.pellets:
            pygame.draw.circle(self.screen, self.COLOR_PELLET, self._cell_center(pos), 2)

        is_flashing = (snapshot.ticks // 4) % 2 == 0
        for pos in snapshot.power_pellets:
            pygame.draw.circle(self.screen, self.COLOR_POWER_PELLET, self._cell_center(pos), 6 if is_flashing else 4)

        # Draw Projectiles
        for projectile in snapshot.projectiles:
            pygame.draw.circle(self.screen, self.COLOR_PROJECTILE, self._cell_center(projectile.position), 4)

        # Draw Ghosts
        for ghost in snapshot.ghosts:
            color = self.COLOR_GHOST_FRIGHTENED if ghost.frightened else ghost.color
            self._draw_ghost(ghost, color)

        # Draw Player
        if snapshot.player is not None:
            self._draw_player(snapshot.player)

    def _draw_player(self, player):
        px, py = self._cell_center(player.position)
        radius = self.CELL_SIZE // 2 - 2

        if player.direction == Direction.STOP or not player.mouth_open:
            pygame.gfxdraw.aacircle(self.screen, px, py, radius, self.COLOR_PLAYER)
            pygame.gfxdraw.filled_circle(self.screen, px, py, radius, self.COLOR_PLAYER)
            return

        angle = math.atan2(player.direction.delta[1], player.direction.delta[0])
        mouth = math.pi / 4
        points = [(px, py)]
        for i in range(16):
            a = angle + mouth + (math.pi * 2 - 2 * mouth) * i / 15
            points.append((int(px + radius * math.cos(a)), int(py + radius * math.sin(a))))
        pygame.gfxdraw.aapolygon(self.screen, points, self.COLOR_PLAYER)
        pygame.gfxdraw.filled_polygon(self.screen, points, self.COLOR_PLAYER)

    def _draw_ghost(self, ghost, color):
        px, py = self._cell_center(ghost.position)
        w = h = self.CELL_SIZE - 4
        body_rect = pygame.Rect(px - w // 2, py - h // 2, w, h)

        pygame.draw.circle(self.screen, color, (body_rect.centerx, body_rect.y + h // 3), w // 2)
        pygame.draw.rect(self.screen, color, (body_rect.x, body_rect.y + h // 3, w, h - h // 3))

        eye_l = (px - w // 4, py - h // 8)
        eye_r = (px + w // 4, py - h // 8)
        pygame.draw.circle(self.screen, (255, 255, 255), eye_l, 3)
        pygame.draw.circle(self.screen, (255, 255, 255), eye_r, 3)
        dx, dy = ghost.direction.delta
        pygame.draw.circle(self.screen, (0, 0, 0), (eye_l[0] + dx, eye_l[1] + dy), 1)
        pygame.draw.circle(self.screen, (0, 0, 0), (eye_r[0] + dx, eye_r[1] + dy), 1)

    def _render_ui(self):
        snapshot = self.session.snapshot
        score_text = self.font_ui.render(f"SCORE: {snapshot.score}", True, self.COLOR_UI_SCORE)
        self.screen.blit(score_text, (10, 8))

        level_text = self.font_ui.render(f"LEVEL: {self.session.level_index + 1}", True, self.COLOR_UI_TEXT)
        self.screen.blit(level_text, level_text.get_rect(topright=(self.SCREEN_WIDTH - 10, 8)))

        if snapshot.status in (GameStatus.WON, GameStatus.LOST):
            overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
            overlay.fill((0, 0, 0, 180))
            self.screen.blit(overlay, (0, 0))
            message = "YOU WIN!" if snapshot.status == GameStatus.WON else "GAME OVER"
            text = self.font_large.render(message, True, self.COLOR_UI_TEXT)
            self.screen.blit(text, text.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2)))

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        '''
        Quick self-check of spaces, reset and step.
        '''
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        obs, info = self.reset(seed=0)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), f"Obs shape is {obs.shape}"
        assert obs.dtype == np.uint8
        assert isinstance(info, dict)

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")


if __name__ == '__main__':
    env = GameEnv(render_mode="rgb_array")

    # --- Manual Play ---
    # Requires a display; the environment itself runs headless.
    try:
        screen = pygame.display.set_mode((GameEnv.SCREEN_WIDTH, GameEnv.SCREEN_HEIGHT))
        pygame.display.set_caption("ROBO-CHOMP")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        terminated = False

        print("--- Manual Play ---")
        print(env.user_guide)

        while True:
            action = [0, 0, 0]

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    raise SystemExit
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_r:
                        obs, info = env.reset()
                        terminated = False
                    if event.key == pygame.K_n and env.session.status == GameStatus.WON and not env.session.is_last_level:
                        env.session.next_level()
                        env.game_over = False
                        obs = env._get_observation()
                        terminated = False
                    if event.key == pygame.K_q:
                        raise SystemExit

            keys = pygame.key.get_pressed()
            if keys[pygame.K_UP]:
                action[0] = 1
            elif keys[pygame.K_DOWN]:
                action[0] = 2
            elif keys[pygame.K_LEFT]:
                action[0] = 3
            elif keys[pygame.K_RIGHT]:
                action[0] = 4
            if keys[pygame.K_SPACE]:
                action[1] = 1

            if not terminated:
                obs, reward, terminated, truncated, info = env.step(action)
                if terminated:
                    print(f"{info['status']} - score {info['score']}")

            surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
            screen.blit(surf, (0, 0))
            pygame.display.flip()

            clock.tick(1000 // env.session.level.tick_interval_ms)

    except pygame.error as e:
        print(f"Pygame display error: {e}")
        print("Manual play requires a display. The environment itself is headless and should work.")
    finally:
        env.close()
