"""
Human Play Mode
===============

Play Tap Jump interactively. The simulation ticks at the configured fixed
rate; rendering runs at the display frame rate and samples the latest state.

Controls:
    - Click/Space: Tap (start, jump, restart after game over)
    - R: Back to title screen
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

import pygame

from tapjump.core.config_loader import load_config, GameConfig
from tapjump.core.game import CoreGame, GamePhase


class TapJumpRenderer:
    """Draws the field, player, obstacles and session overlays with pygame."""

    def __init__(self, config: GameConfig, scale: float = 1.0):
        self._config = config
        self._scale = scale

        self._sky = (135, 206, 235)
        self._ground = (139, 69, 19)
        self._grass = (85, 107, 47)
        self._player_fill = (255, 99, 71)
        self._player_border = (216, 67, 21)
        self._obstacle_border = (51, 51, 51)
        self._text_dark = (51, 51, 51)
        self._panel = (255, 255, 255, 180)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 56)
        self._font_large = pygame.font.Font(None, 36)
        self._font_medium = pygame.font.Font(None, 28)

    @property
    def window_size(self):
        return (
            int(self._config.screen.width * self._scale),
            int(self._config.screen.height * self._scale),
        )

    def _rect(self, left: float, top: float, width: float, height: float) -> pygame.Rect:
        s = self._scale
        return pygame.Rect(int(left * s), int(top * s), int(width * s), int(height * s))

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        """Render the complete scene."""
        screen.fill(self._sky)

        ground_y = render_data["ground_y"]
        screen_w = render_data["screen_width"]
        screen_h = render_data["screen_height"]
        pygame.draw.rect(screen, self._ground, self._rect(0, ground_y, screen_w, screen_h - ground_y))
        pygame.draw.rect(screen, self._grass, self._rect(0, ground_y, screen_w, 5))

        for obstacle in render_data["obstacles"]:
            rect = self._rect(
                obstacle["x"], obstacle["top"],
                obstacle["width"], obstacle["bottom"] - obstacle["top"]
            )
            pygame.draw.rect(screen, obstacle["color"], rect,
                             border_top_left_radius=10, border_top_right_radius=10)
            pygame.draw.rect(screen, self._obstacle_border, rect, 2,
                             border_top_left_radius=10, border_top_right_radius=10)

        player = render_data["player"]
        player_rect = self._rect(player["x"], player["y"], player["width"], player["height"])
        radius = int(player["width"] * self._scale / 2)
        pygame.draw.rect(screen, self._player_fill, player_rect, border_radius=radius)
        pygame.draw.rect(screen, self._player_border, player_rect, 2, border_radius=radius)

        phase = render_data["phase"]
        if phase == GamePhase.IDLE.value:
            self._draw_centered(screen, [
                (self._font_huge, "Tap Jump Game"),
                (self._font_medium, "Tap to Start"),
            ])
        elif phase == GamePhase.ENDED.value:
            self._draw_centered(screen, [
                (self._font_huge, "Game Over"),
                (self._font_large, f"Score: {render_data['score']}"),
                (self._font_large, f"High Score: {render_data['high_score']}"),
                (self._font_medium, "Tap to Restart"),
            ])
        else:
            self._draw_score(screen, render_data)

    def _draw_score(self, screen: pygame.Surface, render_data: dict) -> None:
        """Score and speed panel in the top right."""
        score = self._font_large.render(f"Score: {render_data['score']}", True, self._text_dark)
        speed = self._font_medium.render(f"Speed: x{render_data['difficulty']:.1f}", True, self._text_dark)

        width = max(score.get_width(), speed.get_width()) + 20
        height = score.get_height() + speed.get_height() + 20
        x = screen.get_width() - width - 20

        panel = pygame.Surface((width, height), pygame.SRCALPHA)
        panel.fill(self._panel)
        screen.blit(panel, (x, 50))
        screen.blit(score, (x + width - score.get_width() - 10, 58))
        screen.blit(speed, (x + width - speed.get_width() - 10, 62 + score.get_height()))

    def _draw_centered(self, screen: pygame.Surface, lines) -> None:
        y = int(screen.get_height() * 0.3)
        for font, text in lines:
            surface = font.render(text, True, self._text_dark)
            screen.blit(surface, ((screen.get_width() - surface.get_width()) // 2, y))
            y += surface.get_height() + 16


class HumanPlayer:
    """Real-time game loop: fixed-rate simulation ticks, free-running rendering."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: float = 1.0,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps
        self._tick_seconds = config.tick_seconds

        self._game = CoreGame(config=config, seed=seed)
        self._game.reset(seed=seed)

        pygame.init()
        self._renderer = TapJumpRenderer(config, scale)
        self._screen = pygame.display.set_mode(self._renderer.window_size)
        pygame.display.set_caption("Tap Jump")
        self._clock = pygame.time.Clock()

        self._running = True
        self._accumulator = 0.0
        self._last_time = time.time()

    def run(self) -> int:
        """Run the game loop. Returns the session high score."""
        print("=== Tap Jump ===")
        print("Click or Space to tap, R for title screen, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            self._update()
            self._renderer.render(self._screen, self._game.get_render_data())
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.high_score

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._game.reset()
                elif event.key == pygame.K_SPACE:
                    self._tap()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._tap()

    def _tap(self) -> None:
        if self._game.tap() == "start":
            print(f"=== Session {self._game.sessions_played} ===")
            self._accumulator = 0.0
            self._last_time = time.time()

    def _update(self) -> None:
        """Run as many fixed ticks as real time allows."""
        now = time.time()
        self._accumulator += now - self._last_time
        self._last_time = now

        # Limit to prevent spiral
        if self._accumulator > 0.2:
            self._accumulator = 0.2

        while self._accumulator >= self._tick_seconds:
            self._accumulator -= self._tick_seconds
            result = self._game.tick()

            for event in result.score_events:
                if event.difficulty_raised:
                    print(f"  Score {event.score} - speed x{event.difficulty:.1f}")

            if result.collided:
                print(f"\nGAME OVER - Score: {self._game.score} (High: {self._game.high_score})")
                self._accumulator = 0.0
                break


def main():
    parser = argparse.ArgumentParser(description="Play Tap Jump interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scale factor (default: 1.0)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")

    args = parser.parse_args()

    config = load_config(args.config)
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        scale=args.scale,
        target_fps=args.fps
    )
    high_score = player.run()
    print(f"\nHigh Score: {high_score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
