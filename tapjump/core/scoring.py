"""
Scoring System
==============

Tracks score, session high score and the difficulty multiplier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tapjump.core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a passed obstacle."""
    obstacle_uid: int
    score: int
    difficulty: float
    difficulty_raised: bool = False
    new_high_score: bool = False

    def __repr__(self) -> str:
        if self.difficulty_raised:
            return f"ScoreEvent(score={self.score}, difficulty->{self.difficulty:.1f})"
        return f"ScoreEvent(score={self.score})"


class ScoreTracker:
    """
    One point per passed obstacle.

    Every ``interval`` points the difficulty rises by ``increment``, capped at
    ``max``. The high score survives reset() for the life of the tracker.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._difficulty_cfg = config.difficulty
        self._score: int = 0
        self._high_score: int = 0
        self._difficulty: float = config.difficulty.initial

    @property
    def score(self) -> int:
        """Current session score."""
        return self._score

    @property
    def high_score(self) -> int:
        """Best score seen by this tracker."""
        return self._high_score

    @property
    def difficulty(self) -> float:
        """Current speed multiplier in [initial, max]."""
        return self._difficulty

    def apply_pass(self, obstacle_uid: int = 0) -> ScoreEvent:
        """
        Award a point for a passed obstacle.

        Args:
            obstacle_uid: UID of the obstacle, recorded on the event.

        Returns:
            ScoreEvent describing the new totals.
        """
        self._score += 1

        new_high = self._score > self._high_score
        if new_high:
            self._high_score = self._score

        raised = False
        if self._score % self._difficulty_cfg.interval == 0:
            raised_to = min(self._difficulty + self._difficulty_cfg.increment, self._difficulty_cfg.max)
            raised = raised_to > self._difficulty
            self._difficulty = raised_to

        return ScoreEvent(
            obstacle_uid=obstacle_uid,
            score=self._score,
            difficulty=self._difficulty,
            difficulty_raised=raised,
            new_high_score=new_high
        )

    def reset(self) -> None:
        """Reset score and difficulty. High score is kept."""
        self._score = 0
        self._difficulty = self._difficulty_cfg.initial

    def reset_high_score(self) -> None:
        """Forget the high score."""
        self._high_score = 0
