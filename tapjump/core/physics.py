"""
Player Physics
==============

Fixed-step vertical integrator for the player. One call to tick() is one
simulation step; there is no wall-clock delta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from tapjump.core.config_loader import GameConfig, get_config


@dataclass
class PlayerState:
    """Mutable player kinematics. X never changes during a session."""
    x: float
    y: float
    velocity: float = 0.0
    width: float = 50.0
    height: float = 50.0

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) in screen coordinates."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class PlayerPhysics:
    """
    Applies gravity, integrates position and lands the player on the ground.

    Semi-implicit Euler: velocity is updated first, then position uses the
    new velocity. There is no ceiling.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._gravity = config.physics.gravity
        self._jump_force = config.physics.jump_force
        self._ground_line = config.ground_line

    @property
    def gravity(self) -> float:
        return self._gravity

    @property
    def jump_force(self) -> float:
        return self._jump_force

    @property
    def ground_line(self) -> float:
        """Y of the player's top edge when standing on the ground."""
        return self._ground_line

    def new_player(self) -> PlayerState:
        """Player at the configured start position, at rest."""
        return PlayerState(
            x=self._config.player_x,
            y=self._config.player_start_y,
            velocity=0.0,
            width=self._config.player.width,
            height=self._config.player.height
        )

    def reset(self, state: PlayerState) -> None:
        """Put an existing player back at the start position, at rest."""
        state.x = self._config.player_x
        state.y = self._config.player_start_y
        state.velocity = 0.0

    def tick(self, state: PlayerState) -> bool:
        """
        Advance the player by one fixed step.

        Args:
            state: Player to mutate.

        Returns:
            True if the player was clamped to the ground this step.
        """
        state.velocity += self._gravity
        new_y = state.y + state.velocity

        if new_y > self._ground_line:
            state.y = self._ground_line
            state.velocity = 0.0
            return True

        state.y = new_y
        return False

    def jump(self, state: PlayerState) -> None:
        """Overwrite velocity with the jump impulse, whatever it was."""
        state.velocity = self._jump_force

    def is_grounded(self, state: PlayerState) -> bool:
        return state.y >= self._ground_line
