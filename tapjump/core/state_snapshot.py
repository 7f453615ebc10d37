"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for renderers and Gymnasium
observations. Snapshots are copies; holding one never aliases live state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, TYPE_CHECKING
import numpy as np

from tapjump.core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from tapjump.core.physics import PlayerState
    from tapjump.core.spawner import ObstacleInstance

# Phase codes used in observations
PHASE_IDLE = 0
PHASE_RUNNING = 1
PHASE_ENDED = 2


@dataclass
class GameSnapshot:
    """
    Complete game state at the end of a tick.

    Obstacle arrays are fixed-size with masking for variable object counts.
    """
    # Session
    phase: int
    score: int
    high_score: int
    difficulty: float
    tick: int
    time_ms: float

    # Player
    player_x: float
    player_y: float
    player_velocity: float

    # Board info (for normalization)
    screen_width: float
    screen_height: float
    ground_y: float

    # Derived
    obstacles_count: int
    nearest_obstacle_dx: float      # Left edge of nearest unpassed obstacle minus player right edge
    nearest_obstacle_top: float     # Top of that obstacle, ground_y if none

    # Obstacle arrays (fixed size, padded)
    obs_type_idx: np.ndarray        # (MAX_OBS,) int16, -1 for empty slots
    obs_x: np.ndarray               # (MAX_OBS,) float32
    obs_top: np.ndarray             # (MAX_OBS,) float32
    obs_bottom: np.ndarray          # (MAX_OBS,) float32
    obs_width: np.ndarray           # (MAX_OBS,) float32
    obs_passed: np.ndarray          # (MAX_OBS,) bool
    obs_mask: np.ndarray            # (MAX_OBS,) bool

    @property
    def started(self) -> bool:
        return self.phase != PHASE_IDLE

    @property
    def ended(self) -> bool:
        return self.phase == PHASE_ENDED

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "phase": np.array(self.phase, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "high_score": np.array(self.high_score, dtype=np.int64),
            "difficulty": np.array(self.difficulty, dtype=np.float32),

            "player_y": np.array(self.player_y, dtype=np.float32),
            "player_velocity": np.array(self.player_velocity, dtype=np.float32),

            "obstacles_count": np.array(self.obstacles_count, dtype=np.int32),
            "nearest_obstacle_dx": np.array(self.nearest_obstacle_dx, dtype=np.float32),
            "nearest_obstacle_top": np.array(self.nearest_obstacle_top, dtype=np.float32),

            "obs_type_idx": self.obs_type_idx,
            "obs_x": self.obs_x,
            "obs_top": self.obs_top,
            "obs_bottom": self.obs_bottom,
            "obs_width": self.obs_width,
            "obs_passed": self.obs_passed,
            "obs_mask": self.obs_mask,
        }


class SnapshotBuilder:
    """Builds game state snapshots into fresh arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = config.caps.max_obstacles
        self._ground_y = config.ground_y
        self._screen_width = float(config.screen.width)
        self._screen_height = float(config.screen.height)

    @property
    def max_obstacles(self) -> int:
        return self._max_obstacles

    def build(
        self,
        phase: int,
        player: "PlayerState",
        obstacles: Sequence["ObstacleInstance"],
        score: int,
        high_score: int,
        difficulty: float,
        tick: int,
        time_ms: float
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        n = self._max_obstacles
        obs_type_idx = np.full(n, -1, dtype=np.int16)
        obs_x = np.zeros(n, dtype=np.float32)
        obs_top = np.zeros(n, dtype=np.float32)
        obs_bottom = np.zeros(n, dtype=np.float32)
        obs_width = np.zeros(n, dtype=np.float32)
        obs_passed = np.zeros(n, dtype=bool)
        obs_mask = np.zeros(n, dtype=bool)

        player_right = player.x + player.width
        nearest_dx = self._screen_width
        nearest_top = self._ground_y

        count = min(len(obstacles), n)
        for i, obstacle in enumerate(obstacles[:count]):
            top, bottom = obstacle.archetype.vertical_span(self._ground_y)
            obs_type_idx[i] = obstacle.archetype.index
            obs_x[i] = obstacle.x
            obs_top[i] = top
            obs_bottom[i] = bottom
            obs_width[i] = obstacle.width
            obs_passed[i] = obstacle.passed
            obs_mask[i] = True

        # Nearest obstacle whose right edge is still ahead of the player's left edge
        for obstacle in obstacles:
            if obstacle.x + obstacle.width <= player.x:
                continue
            dx = obstacle.x - player_right
            if dx < nearest_dx:
                nearest_dx = dx
                nearest_top = obstacle.archetype.vertical_span(self._ground_y)[0]

        return GameSnapshot(
            phase=phase,
            score=score,
            high_score=high_score,
            difficulty=difficulty,
            tick=tick,
            time_ms=time_ms,
            player_x=player.x,
            player_y=player.y,
            player_velocity=player.velocity,
            screen_width=self._screen_width,
            screen_height=self._screen_height,
            ground_y=self._ground_y,
            obstacles_count=len(obstacles),
            nearest_obstacle_dx=nearest_dx,
            nearest_obstacle_top=nearest_top,
            obs_type_idx=obs_type_idx,
            obs_x=obs_x,
            obs_top=obs_top,
            obs_bottom=obs_bottom,
            obs_width=obs_width,
            obs_passed=obs_passed,
            obs_mask=obs_mask
        )
