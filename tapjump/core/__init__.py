"""
Tap Jump Core - the deterministic game simulation.

Main exports:
- CoreGame: Session state machine and fixed-rate tick loop
- TapJumpEnv: Gymnasium environment (one step = one tick)
- ObstacleCatalog: Archetypes and spawn patterns from config
- GameConfig: Configuration loaded from game_config.yaml
"""

from tapjump.core.config_loader import GameConfig, load_config
from tapjump.core.obstacle_catalog import ObstacleArchetype, ObstaclePattern, ObstacleCatalog
from tapjump.core.game import CoreGame, GamePhase, TickResult
from tapjump.core.env_gym import TapJumpEnv

__all__ = [
    "GameConfig",
    "load_config",
    "ObstacleArchetype",
    "ObstaclePattern",
    "ObstacleCatalog",
    "CoreGame",
    "GamePhase",
    "TickResult",
    "TapJumpEnv",
]
