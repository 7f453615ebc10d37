"""
Obstacle Catalog
================

Provides convenient access to obstacle archetypes and spawn patterns loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Optional

from tapjump.core.config_loader import (
    GameConfig,
    ArchetypeConfig,
    PatternConfig,
    get_config
)


@dataclass(frozen=True)
class ObstacleArchetype:
    """
    Runtime representation of an obstacle archetype.

    Wraps ArchetypeConfig with the default width resolved and ground-relative geometry.
    """
    config: ArchetypeConfig
    index: int
    default_width: float

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def height(self) -> float:
        return self.config.height

    @property
    def width(self) -> float:
        """Body width, falling back to the standard obstacle width."""
        if self.config.width is None:
            return self.default_width
        return self.config.width

    @property
    def float_height(self) -> float:
        return self.config.float_height

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.config.color

    @property
    def weight(self) -> float:
        return self.config.weight

    @property
    def is_floating(self) -> bool:
        """True if the body hovers above the ground."""
        return self.config.float_height > 0

    def vertical_span(self, ground_y: float) -> Tuple[float, float]:
        """
        Top and bottom Y of this obstacle for a given ground level.

        Args:
            ground_y: Y coordinate of the top of the ground strip.

        Returns:
            (top, bottom) tuple, top < bottom in screen coordinates.
        """
        bottom = ground_y - self.float_height
        return (bottom - self.height, bottom)

    def __repr__(self) -> str:
        return f"ObstacleArchetype({self.index}: {self.id})"


@dataclass(frozen=True)
class PatternEntry:
    """An archetype placed at a horizontal offset from the pattern origin."""
    archetype: ObstacleArchetype
    offset_x: float


@dataclass(frozen=True)
class ObstaclePattern:
    """Multi-obstacle arrangement spawned in a single event."""
    config: PatternConfig
    entries: Tuple[PatternEntry, ...]

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def weight(self) -> float:
        return self.config.weight

    @property
    def span(self) -> float:
        """Distance from the first obstacle's left edge to the last one's right edge."""
        return max(e.offset_x + e.archetype.width for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"ObstaclePattern({self.id}, n={len(self.entries)})"


class ObstacleCatalog:
    """
    Collection of all obstacle archetypes and patterns.

    Archetypes are indexed by position (stable across runs) and by string ID.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        default_width = config.obstacles.default_width
        self._archetypes: Tuple[ObstacleArchetype, ...] = tuple(
            ObstacleArchetype(archetype_config, index, default_width)
            for index, archetype_config in enumerate(config.archetypes)
        )
        self._by_id: Dict[str, ObstacleArchetype] = {a.id: a for a in self._archetypes}
        self._patterns: Tuple[ObstaclePattern, ...] = tuple(
            ObstaclePattern(
                config=pattern_config,
                entries=tuple(
                    PatternEntry(self._by_id[entry.archetype_id], entry.offset_x)
                    for entry in pattern_config.entries
                )
            )
            for pattern_config in config.patterns
        )

    def __len__(self) -> int:
        """Total number of archetypes."""
        return len(self._archetypes)

    def __getitem__(self, index: int) -> ObstacleArchetype:
        """Get archetype by index."""
        if 0 <= index < len(self._archetypes):
            return self._archetypes[index]
        raise IndexError(f"Archetype index {index} out of range [0, {len(self._archetypes)})")

    def __iter__(self):
        """Iterate over all archetypes."""
        return iter(self._archetypes)

    @property
    def archetypes(self) -> Tuple[ObstacleArchetype, ...]:
        return self._archetypes

    @property
    def patterns(self) -> Tuple[ObstaclePattern, ...]:
        return self._patterns

    @property
    def archetype_weights(self) -> Tuple[float, ...]:
        return tuple(a.weight for a in self._archetypes)

    @property
    def pattern_weights(self) -> Tuple[float, ...]:
        return tuple(p.weight for p in self._patterns)

    def get(self, archetype_id: str) -> ObstacleArchetype:
        """Get archetype by string ID."""
        try:
            return self._by_id[archetype_id]
        except KeyError:
            raise KeyError(f"Unknown archetype ID: {archetype_id}") from None

    def get_pattern(self, pattern_id: str) -> ObstaclePattern:
        """Get pattern by string ID."""
        for pattern in self._patterns:
            if pattern.id == pattern_id:
                return pattern
        raise KeyError(f"Unknown pattern ID: {pattern_id}")

    def get_by_name(self, name: str) -> Optional[ObstacleArchetype]:
        """Get archetype by ID (case-insensitive)."""
        name_lower = name.lower()
        for archetype in self._archetypes:
            if archetype.id.lower() == name_lower:
                return archetype
        return None


# Module-level singleton
_cached_catalog: Optional[ObstacleCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> ObstacleCatalog:
    """
    Get the obstacle catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        ObstacleCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = ObstacleCatalog(config)
    return _cached_catalog
