"""
Motion
======

Time-parameterized linear motion. Position is a pure function of the
simulation clock, so it can be sampled any number of times per tick.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class LinearMotion:
    """
    Straight-line travel from start_x to end_x over duration_ms.

    A frozen motion holds the position it had at frozen_at_ms forever.
    """
    start_x: float
    end_x: float
    start_ms: float
    duration_ms: float
    frozen_at_ms: Optional[float] = None

    def progress(self, now_ms: float) -> float:
        """Fraction of travel completed at now_ms, clamped to [0, 1]."""
        if self.frozen_at_ms is not None:
            now_ms = min(now_ms, self.frozen_at_ms)
        if self.duration_ms <= 0:
            return 1.0
        t = (now_ms - self.start_ms) / self.duration_ms
        return max(0.0, min(1.0, t))

    def position_at(self, now_ms: float) -> float:
        """X position at now_ms."""
        return self.start_x + (self.end_x - self.start_x) * self.progress(now_ms)

    def is_complete(self, now_ms: float) -> bool:
        """True once the motion reached end_x. Frozen motions never complete early."""
        return self.progress(now_ms) >= 1.0

    @property
    def is_frozen(self) -> bool:
        return self.frozen_at_ms is not None

    @property
    def end_ms(self) -> float:
        return self.start_ms + self.duration_ms

    def frozen(self, now_ms: float) -> "LinearMotion":
        """Copy of this motion stopped at now_ms."""
        if self.frozen_at_ms is not None:
            return self
        return replace(self, frozen_at_ms=now_ms)
