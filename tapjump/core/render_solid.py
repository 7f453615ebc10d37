"""
Solid Renderer
==============

Fast numpy-based renderer that draws the player and obstacles as solid
rectangles. pygame is only needed for render_to_screen().
"""

from __future__ import annotations

from typing import Dict, Any, Optional, Tuple
import numpy as np

from tapjump.core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the play field as solid-color rectangles.

    Uses numpy for fast CPU-based rendering; the human window blits the same
    array through pygame.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        self._sky_color = np.array([135, 206, 235], dtype=np.uint8)
        self._ground_color = np.array([139, 69, 19], dtype=np.uint8)
        self._grass_color = np.array([85, 107, 47], dtype=np.uint8)
        self._player_color = np.array([255, 99, 71], dtype=np.uint8)
        self._ended_tint = np.array([90, 90, 90], dtype=np.uint8)

        # pygame state (lazy)
        self._screen = None
        self._clock = None

    @staticmethod
    def _fill_rect(
        img: np.ndarray,
        left: float,
        top: float,
        right: float,
        bottom: float,
        color: np.ndarray,
        scale: float
    ) -> None:
        """Fill a world-space rectangle, clipped to the image."""
        h, w = img.shape[:2]
        x0 = max(0, int(round(left * scale)))
        x1 = min(w, int(round(right * scale)))
        y0 = max(0, int(round(top * scale)))
        y1 = min(h, int(round(bottom * scale)))
        if x0 < x1 and y0 < y1:
            img[y0:y1, x0:x1] = color

    def render(
        self,
        render_data: Dict[str, Any],
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width. Defaults to screen width.
            height: Output image height. Defaults to screen height.

        Returns:
            (height, width, 3) uint8 array.
        """
        screen_w = render_data["screen_width"]
        screen_h = render_data["screen_height"]
        width = width or screen_w
        height = height or screen_h
        scale = min(width / screen_w, height / screen_h)

        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._sky_color

        # Ground with grass line
        ground_y = render_data["ground_y"]
        self._fill_rect(img, 0, ground_y, screen_w, screen_h, self._ground_color, scale)
        self._fill_rect(img, 0, ground_y, screen_w, ground_y + 5, self._grass_color, scale)

        for obstacle in render_data["obstacles"]:
            self._fill_rect(
                img,
                obstacle["x"],
                obstacle["top"],
                obstacle["x"] + obstacle["width"],
                obstacle["bottom"],
                np.array(obstacle["color"], dtype=np.uint8),
                scale
            )

        player = render_data["player"]
        self._fill_rect(
            img,
            player["x"],
            player["y"],
            player["x"] + player["width"],
            player["y"] + player["height"],
            self._player_color,
            scale
        )

        if render_data["ended"]:
            img = (img // 2 + self._ended_tint // 2).astype(np.uint8)

        return img

    def render_to_screen(self, render_data: Dict[str, Any], fps: int = 60) -> None:
        """Draw to a pygame window, creating it on first use."""
        import pygame

        width = render_data["screen_width"]
        height = render_data["screen_height"]

        if self._screen is None:
            pygame.init()
            pygame.display.set_caption("Tap Jump")
            self._screen = pygame.display.set_mode((width, height))
            self._clock = pygame.time.Clock()

        pygame.event.pump()
        img = self.render(render_data, width, height)
        # pygame surfaces are (width, height, 3)
        surface = pygame.surfarray.make_surface(np.transpose(img, (1, 0, 2)))
        self._screen.blit(surface, (0, 0))
        pygame.display.flip()
        self._clock.tick(fps)

    def close(self) -> None:
        """Close the window if one was opened."""
        if self._screen is not None:
            import pygame
            pygame.display.quit()
            self._screen = None
            self._clock = None

    @property
    def size(self) -> Tuple[int, int]:
        return (self._config.screen.width, self._config.screen.height)
