"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Tap Jump game.
One environment step is one simulation tick.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from tapjump.core.config_loader import GameConfig, load_config
from tapjump.core.game import CoreGame, GamePhase
from tapjump.core.state_snapshot import GameSnapshot

ACTION_WAIT = 0
ACTION_TAP = 1


class TapJumpEnv(gym.Env):
    """
    Tap Jump reflex game as a Gymnasium environment.

    Action Space:
        Discrete(2). 0 = wait, 1 = tap (jump).

    Observation Space:
        Dict containing player kinematics, session scalars and fixed-size
        obstacle arrays.

    Reward:
        Points scored during the tick (0 or more).

    Info:
        Contains score, high_score, difficulty, tick, delta_score, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        max_ticks: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize Tap Jump environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            max_ticks: Override episode truncation length.
            debug: If True, prints diagnostic lines for agent development.
        """
        super().__init__()

        # Load config
        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._debug = debug
        self._max_ticks = max_ticks or self._config.caps.max_ticks

        # Initialize game
        self._game = CoreGame(config=self._config)

        # Created on first render() call
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] TapJumpEnv initialized")
            print(f"[DEBUG]   Screen: {self._config.screen.width}x{self._config.screen.height}")
            print(f"[DEBUG]   Ground line: {self._config.ground_line}")
            print(f"[DEBUG]   Max ticks: {self._max_ticks}")

    def _build_observation_space(self) -> spaces.Dict:
        """Observation space matching GameSnapshot.to_obs_dict()."""
        max_obs = self._config.caps.max_obstacles
        screen = self._config.screen
        num_types = len(self._game.catalog)

        return spaces.Dict({
            # Session
            "phase": spaces.Discrete(3),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "high_score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "difficulty": spaces.Box(
                low=self._config.difficulty.initial,
                high=self._config.difficulty.max,
                shape=(),
                dtype=np.float32
            ),

            # Player
            "player_y": spaces.Box(low=-np.inf, high=screen.height, shape=(), dtype=np.float32),
            "player_velocity": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Derived
            "obstacles_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "nearest_obstacle_dx": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "nearest_obstacle_top": spaces.Box(low=0, high=screen.height, shape=(), dtype=np.float32),

            # Obstacle arrays
            "obs_type_idx": spaces.Box(low=-1, high=num_types, shape=(max_obs,), dtype=np.int16),
            "obs_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obs,), dtype=np.float32),
            "obs_top": spaces.Box(low=0, high=screen.height, shape=(max_obs,), dtype=np.float32),
            "obs_bottom": spaces.Box(low=0, high=screen.height, shape=(max_obs,), dtype=np.float32),
            "obs_width": spaces.Box(low=0, high=screen.width, shape=(max_obs,), dtype=np.float32),
            "obs_passed": spaces.MultiBinary(max_obs),
            "obs_mask": spaces.MultiBinary(max_obs),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a fresh session.

        Args:
            seed: Reseeds obstacle selection. Keeps the current stream if None.
            options: Ignored.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.start()

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 0 to wait, 1 to tap.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        if action == ACTION_TAP:
            self._game.jump()
            if self._debug:
                print(f"[DEBUG] Tap at tick {self._game.tick_count}, y={self._game.player.y:.1f}")

        result = self._game.tick()

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = float(result.delta_score)

        terminated = result.phase == GamePhase.ENDED
        truncated = not terminated and self._game.tick_count >= self._max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["spawned"] = sum(len(event.instances) for event in result.spawned)

        if self._debug and terminated:
            print(f"[DEBUG] TERMINATED: collision at tick {self._game.tick_count}, score={self._game.score}")

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Snapshot arrays are fresh per tick, so no copy is needed."""
        return snapshot.to_obs_dict()

    def _init_renderer(self) -> None:
        from tapjump.core.render_solid import SolidRenderer
        self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode is None:
            return None

        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        if self.render_mode == "rgb_array":
            return self._renderer.render(render_data)

        self._renderer.render_to_screen(render_data, fps=self.metadata["render_fps"])
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Underlying CoreGame, for tools that need more than observations."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
