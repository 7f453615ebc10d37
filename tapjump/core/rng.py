"""
RNG - Weighted Spawn Selection
==============================

Deterministic weighted selection for obstacle archetypes and patterns.
"""

from __future__ import annotations

import random
from typing import Any, Optional, Sequence, TypeVar

T = TypeVar("T")


def weighted_choice(candidates: Sequence[T], weights: Sequence[float], draw: float) -> T:
    """
    Pick a candidate by walking cumulative weights.

    Returns the first candidate whose cumulative weight meets or exceeds
    ``draw``. If float rounding leaves the walk without a match, the first
    candidate is returned.

    Args:
        candidates: Items to choose from.
        weights: Non-negative relative weights, same length as candidates.
        draw: Value in [0, sum(weights)).

    Returns:
        The selected candidate.

    Raises:
        ValueError: If there are no candidates or lengths differ.
    """
    if not candidates:
        raise ValueError("Cannot choose from an empty candidate list")
    if len(candidates) != len(weights):
        raise ValueError(
            f"Got {len(candidates)} candidates but {len(weights)} weights"
        )

    cumulative = 0.0
    for candidate, weight in zip(candidates, weights):
        cumulative += weight
        if cumulative >= draw:
            return candidate
    return candidates[0]


class SpawnRng:
    """
    Seeded random source for spawn decisions.

    Two draws per spawn event: one to decide pattern vs. single, one for the
    weighted pick itself.
    """

    def __init__(self, pattern_probability: float = 0.3, seed: Optional[int] = None):
        """
        Initialize spawn RNG.

        Args:
            pattern_probability: Chance that a spawn event uses a pattern.
            seed: Random seed for reproducibility. Random if None.
        """
        self._pattern_probability = pattern_probability
        self._rng = random.Random(seed)

    @property
    def pattern_probability(self) -> float:
        return self._pattern_probability

    def wants_pattern(self) -> bool:
        """Decide whether the next spawn event uses a pattern."""
        return self._rng.random() < self._pattern_probability

    def draw(self, total_weight: float) -> float:
        """Uniform draw in [0, total_weight)."""
        return self._rng.random() * total_weight

    def pick(self, candidates: Sequence[T], weights: Sequence[float]) -> T:
        """Weighted pick using a fresh draw."""
        return weighted_choice(candidates, weights, self.draw(sum(weights)))

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator.

        Args:
            seed: New random seed. Keeps current state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)

    def get_state(self) -> Any:
        """Get generator state for replay/checkpointing."""
        return self._rng.getstate()

    def set_state(self, state: Any) -> None:
        """Restore generator state."""
        self._rng.setstate(state)
