"""
Collision & Pass Detection
==========================

Per-frame pass scoring and axis-aligned bounding-box collision between the
player and live obstacles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from tapjump.core.config_loader import GameConfig, get_config
from tapjump.core.physics import PlayerState
from tapjump.core.scoring import ScoreEvent, ScoreTracker
from tapjump.core.spawner import ObstacleInstance


@dataclass(frozen=True)
class Box:
    """Axis-aligned box in screen coordinates (y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float

    def overlaps(self, other: "Box") -> bool:
        """Strict overlap on both axes. Touching edges do not collide."""
        return (
            self.right > other.left
            and self.left < other.right
            and self.bottom > other.top
            and self.top < other.bottom
        )

    def overlaps_x(self, other: "Box") -> bool:
        return self.right > other.left and self.left < other.right

    def overlaps_y(self, other: "Box") -> bool:
        return self.bottom > other.top and self.top < other.bottom


def player_box(player: PlayerState) -> Box:
    """Bounding box of the player."""
    left, top, right, bottom = player.bounds
    return Box(left, top, right, bottom)


def obstacle_box(obstacle: ObstacleInstance, ground_y: float) -> Box:
    """Bounding box of an obstacle at its last sampled position."""
    top, bottom = obstacle.archetype.vertical_span(ground_y)
    return Box(obstacle.x, top, obstacle.x + obstacle.width, bottom)


@dataclass
class FrameResult:
    """What check_frame found."""
    score_events: List[ScoreEvent] = field(default_factory=list)
    collided_with: Optional[ObstacleInstance] = None

    @property
    def collided(self) -> bool:
        return self.collided_with is not None


class CollisionEngine:
    """
    Checks every live obstacle once per frame.

    For each obstacle pass scoring runs first, then the collision test. The
    first collision latches the engine: later frames do nothing until reset().
    """

    def __init__(self, scorer: ScoreTracker, config: Optional[GameConfig] = None):
        """
        Initialize collision engine.

        Args:
            scorer: Score tracker that receives pass events.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scorer = scorer
        self._ground_y = config.ground_y
        self._collided = False

    @property
    def collided(self) -> bool:
        """True once a collision has been detected since the last reset."""
        return self._collided

    def pass_line(self, player: PlayerState) -> float:
        """X an obstacle's left edge must cross to count as passed."""
        return player.x - player.width / 2

    def check_pass(self, player: PlayerState, obstacle: ObstacleInstance) -> Optional[ScoreEvent]:
        """Flag and score the obstacle if it just crossed the pass line."""
        if obstacle.passed:
            return None
        if obstacle.x < self.pass_line(player):
            obstacle.passed = True
            return self._scorer.apply_pass(obstacle.uid)
        return None

    def check_collision(self, player: PlayerState, obstacle: ObstacleInstance) -> bool:
        return player_box(player).overlaps(obstacle_box(obstacle, self._ground_y))

    def check_frame(
        self,
        player: PlayerState,
        obstacles: Iterable[ObstacleInstance]
    ) -> FrameResult:
        """
        Run pass scoring and collision for every obstacle.

        Args:
            player: Current player state.
            obstacles: Live obstacles (positions already sampled).

        Returns:
            FrameResult with score events and the obstacle hit, if any.
        """
        result = FrameResult()
        if self._collided:
            return result

        for obstacle in obstacles:
            event = self.check_pass(player, obstacle)
            if event is not None:
                result.score_events.append(event)

            if self.check_collision(player, obstacle) and result.collided_with is None:
                result.collided_with = obstacle

        # Latched after the full frame; outcome is independent of obstacle order
        if result.collided_with is not None:
            self._collided = True

        return result

    def reset(self) -> None:
        """Clear the collision latch for a new session."""
        self._collided = False
