"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


RESPAWN_TRIGGERS = ("group", "instance")


@dataclass(frozen=True)
class ScreenConfig:
    """Play field geometry."""
    width: int           # Field width in pixels
    height: int          # Field height in pixels
    ground_height: int   # Thickness of the ground strip at the bottom


@dataclass(frozen=True)
class PlayerConfig:
    """Player body size and placement."""
    width: float
    height: float
    x_fraction: float        # Horizontal position as fraction of field width
    start_y_fraction: float  # Vertical start position as fraction of field height


@dataclass(frozen=True)
class PhysicsConfig:
    """Fixed-step physics parameters (per tick, not per second)."""
    gravity: float
    jump_force: float
    tick_ms: int


@dataclass(frozen=True)
class ObstacleConfig:
    """Shared obstacle settings."""
    default_width: float
    base_speed_ms: float  # Travel time at difficulty 1.0


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty progression."""
    initial: float
    increment: float
    interval: int
    max: float


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn selection and cadence."""
    pattern_probability: float
    initial_delay_ms: float
    base_delay_ms: float
    min_delay_ms: float
    delay_scale_ms: float
    respawn_trigger: str


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_obstacles: int  # Fixed size of observation arrays
    max_ticks: int      # Episode truncation for the env wrapper


@dataclass(frozen=True)
class ArchetypeConfig:
    """Configuration for a single obstacle archetype."""
    id: str
    height: float
    color: Tuple[int, int, int]
    weight: float
    width: Optional[float] = None   # Falls back to obstacles.default_width
    float_height: float = 0.0       # Lift above the ground line


@dataclass(frozen=True)
class PatternEntryConfig:
    """One obstacle within a pattern."""
    archetype_id: str
    offset_x: float


@dataclass(frozen=True)
class PatternConfig:
    """Configuration for a multi-obstacle spawn pattern."""
    id: str
    entries: Tuple[PatternEntryConfig, ...]
    weight: float


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    screen: ScreenConfig
    player: PlayerConfig
    physics: PhysicsConfig
    obstacles: ObstacleConfig
    difficulty: DifficultyConfig
    spawn: SpawnConfig
    caps: CapsConfig
    archetypes: Tuple[ArchetypeConfig, ...]
    patterns: Tuple[PatternConfig, ...]

    @property
    def ground_y(self) -> float:
        """Y coordinate of the top of the ground strip."""
        return float(self.screen.height - self.screen.ground_height)

    @property
    def ground_line(self) -> float:
        """Lowest Y the player's top edge can reach (standing on the ground)."""
        return self.ground_y - self.player.height

    @property
    def player_x(self) -> float:
        """Fixed left edge of the player."""
        return self.screen.width * self.player.x_fraction

    @property
    def player_start_y(self) -> float:
        return self.screen.height * self.player.start_y_fraction

    @property
    def kill_x(self) -> float:
        """Obstacles are removed once they travel past this X."""
        return -self.player.width

    @property
    def tick_seconds(self) -> float:
        return self.physics.tick_ms / 1000.0

    def get_archetype(self, archetype_id: str) -> ArchetypeConfig:
        """Get archetype config by ID."""
        for archetype in self.archetypes:
            if archetype.id == archetype_id:
                return archetype
        raise ValueError(f"Unknown archetype ID: {archetype_id}")


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_archetype(data: dict) -> ArchetypeConfig:
    """Parse a single archetype configuration from YAML."""
    width = data.get("width")
    return ArchetypeConfig(
        id=str(data["id"]),
        height=float(data["height"]),
        color=_parse_color(data["color"]),
        weight=float(data["weight"]),
        width=float(width) if width is not None else None,
        float_height=float(data.get("float_height", 0.0))
    )


def _parse_pattern(data: dict) -> PatternConfig:
    """Parse a pattern and its entries from YAML."""
    entries = tuple(
        PatternEntryConfig(
            archetype_id=str(entry["type"]),
            offset_x=float(entry.get("offset_x", 0.0))
        )
        for entry in data["obstacles"]
    )
    return PatternConfig(
        id=str(data["id"]),
        entries=entries,
        weight=float(data["weight"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not config.archetypes:
        raise ValueError("At least one obstacle archetype is required")

    # Archetype IDs must be unique so patterns can reference them
    archetype_ids = [a.id for a in config.archetypes]
    if len(set(archetype_ids)) != len(archetype_ids):
        raise ValueError(f"Duplicate archetype IDs: {archetype_ids}")

    pattern_ids = [p.id for p in config.patterns]
    if len(set(pattern_ids)) != len(pattern_ids):
        raise ValueError(f"Duplicate pattern IDs: {pattern_ids}")

    for archetype in config.archetypes:
        if archetype.weight < 0:
            raise ValueError(f"Archetype '{archetype.id}' has negative weight {archetype.weight}")
        if archetype.height <= 0:
            raise ValueError(f"Archetype '{archetype.id}' must have positive height")
        if archetype.width is not None and archetype.width <= 0:
            raise ValueError(f"Archetype '{archetype.id}' must have positive width")
        if archetype.float_height < 0:
            raise ValueError(f"Archetype '{archetype.id}' has negative float_height")

    if sum(a.weight for a in config.archetypes) <= 0:
        raise ValueError("Archetype weights must not all be zero")

    for pattern in config.patterns:
        if pattern.weight < 0:
            raise ValueError(f"Pattern '{pattern.id}' has negative weight {pattern.weight}")
        if not pattern.entries:
            raise ValueError(f"Pattern '{pattern.id}' has no obstacles")
        for entry in pattern.entries:
            if entry.archetype_id not in archetype_ids:
                raise ValueError(
                    f"Pattern '{pattern.id}' references unknown archetype '{entry.archetype_id}'"
                )
            if entry.offset_x < 0:
                raise ValueError(f"Pattern '{pattern.id}' has negative offset {entry.offset_x}")

    # Patterns can only be drawn if there is weight to draw from
    if config.spawn.pattern_probability > 0 and sum(p.weight for p in config.patterns) <= 0:
        raise ValueError("pattern_probability > 0 requires at least one weighted pattern")

    if not 0.0 <= config.spawn.pattern_probability <= 1.0:
        raise ValueError(
            f"pattern_probability must be in [0, 1], got {config.spawn.pattern_probability}"
        )

    if config.spawn.respawn_trigger not in RESPAWN_TRIGGERS:
        raise ValueError(
            f"respawn_trigger must be one of {RESPAWN_TRIGGERS}, "
            f"got '{config.spawn.respawn_trigger}'"
        )

    if config.difficulty.initial < 1.0 or config.difficulty.max < config.difficulty.initial:
        raise ValueError(
            f"Difficulty must satisfy 1.0 <= initial ({config.difficulty.initial}) "
            f"<= max ({config.difficulty.max})"
        )

    if config.difficulty.interval <= 0:
        raise ValueError(f"difficulty.interval must be positive, got {config.difficulty.interval}")

    if config.physics.tick_ms <= 0:
        raise ValueError(f"physics.tick_ms must be positive, got {config.physics.tick_ms}")

    if config.screen.ground_height + config.player.height > config.screen.height:
        raise ValueError("Player does not fit between ground and top of screen")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    return config_from_dict(raw)


def config_from_dict(raw: dict) -> GameConfig:
    """
    Build and validate a GameConfig from an already-parsed mapping.

    Args:
        raw: Mapping with the same layout as game_config.yaml.

    Returns:
        Validated GameConfig instance.
    """
    screen_data = raw["screen"]
    screen = ScreenConfig(
        width=int(screen_data["width"]),
        height=int(screen_data["height"]),
        ground_height=int(screen_data["ground_height"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        x_fraction=float(player_data.get("x_fraction", 0.25)),
        start_y_fraction=float(player_data.get("start_y_fraction", 0.5))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        jump_force=float(physics_data["jump_force"]),
        tick_ms=int(physics_data.get("tick_ms", 16))
    )

    obstacle_data = raw["obstacles"]
    obstacles = ObstacleConfig(
        default_width=float(obstacle_data["default_width"]),
        base_speed_ms=float(obstacle_data["base_speed_ms"])
    )

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        initial=float(difficulty_data.get("initial", 1.0)),
        increment=float(difficulty_data["increment"]),
        interval=int(difficulty_data["interval"]),
        max=float(difficulty_data["max"])
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        pattern_probability=float(spawn_data.get("pattern_probability", 0.3)),
        initial_delay_ms=float(spawn_data["initial_delay_ms"]),
        base_delay_ms=float(spawn_data["base_delay_ms"]),
        min_delay_ms=float(spawn_data["min_delay_ms"]),
        delay_scale_ms=float(spawn_data["delay_scale_ms"]),
        respawn_trigger=str(spawn_data.get("respawn_trigger", "group"))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_obstacles=int(caps_data.get("max_obstacles", 16)),
        max_ticks=int(caps_data.get("max_ticks", 20000))
    )

    archetypes = tuple(_parse_archetype(a) for a in raw["archetypes"])
    patterns = tuple(_parse_pattern(p) for p in raw.get("patterns") or [])

    config = GameConfig(
        screen=screen,
        player=player,
        physics=physics,
        obstacles=obstacles,
        difficulty=difficulty,
        spawn=spawn,
        caps=caps,
        archetypes=archetypes,
        patterns=patterns
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
