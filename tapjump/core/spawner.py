"""
Obstacle Spawner
================

Decides what to spawn, creates obstacle instances with their motion, and
removes them once their motion completes.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tapjump.core.config_loader import GameConfig, get_config
from tapjump.core.obstacle_catalog import (
    ObstacleArchetype,
    ObstacleCatalog,
    ObstaclePattern,
    get_catalog
)
from tapjump.core.motion import LinearMotion
from tapjump.core.rng import SpawnRng


@dataclass
class ObstacleInstance:
    """
    A live obstacle.

    ``x`` is the left edge sampled at the last sweep. ``group_id`` is shared by
    every instance created in the same spawn event.
    """
    uid: int
    archetype: ObstacleArchetype
    motion: LinearMotion
    group_id: int
    x: float
    passed: bool = False
    active: bool = True

    @property
    def width(self) -> float:
        return self.archetype.width

    def position_at(self, now_ms: float) -> float:
        return self.motion.position_at(now_ms)

    def __repr__(self) -> str:
        return f"ObstacleInstance({self.uid}: {self.archetype.id} @ {self.x:.1f})"


@dataclass
class SpawnEvent:
    """What a single spawn event produced."""
    group_id: int
    instances: List[ObstacleInstance]
    pattern_id: Optional[str] = None

    @property
    def is_pattern(self) -> bool:
        return self.pattern_id is not None


@dataclass
class SweepResult:
    """Outcome of one per-tick sweep."""
    removed: List[ObstacleInstance] = field(default_factory=list)
    respawn_triggers: int = 0


class ObstacleSpawner:
    """
    Owns the live obstacle collection.

    Every obstacle travels from the right edge (plus its pattern offset) to the
    kill boundary over ``base_speed_ms / difficulty`` milliseconds. Removal
    happens in sweep(), once per tick, for every obstacle whose motion has
    completed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[SpawnRng] = None,
        catalog: Optional[ObstacleCatalog] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            rng: Spawn RNG. A fresh unseeded one if None.
            catalog: Obstacle catalog. Built from config if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = catalog if catalog is not None else get_catalog(config)
        self._rng = rng if rng is not None else SpawnRng(config.spawn.pattern_probability)

        self._field_right = float(config.screen.width)
        self._kill_x = config.kill_x
        self._respawn_trigger = config.spawn.respawn_trigger

        self._live: List[ObstacleInstance] = []
        self._uid_counter = itertools.count(1)
        self._group_counter = itertools.count(1)
        self._spawned_total = 0

    @property
    def live(self) -> List[ObstacleInstance]:
        """Live obstacles in spawn order. Callers must not mutate the list."""
        return self._live

    @property
    def count(self) -> int:
        return len(self._live)

    @property
    def spawned_total(self) -> int:
        """Number of instances spawned since the last clear()."""
        return self._spawned_total

    @property
    def catalog(self) -> ObstacleCatalog:
        return self._catalog

    @property
    def rng(self) -> SpawnRng:
        return self._rng

    def travel_duration(self, difficulty: float) -> float:
        """Milliseconds an obstacle takes to cross the field."""
        return self._config.obstacles.base_speed_ms / difficulty

    def respawn_delay(self, difficulty: float) -> float:
        """Milliseconds between an obstacle leaving and the next spawn."""
        spawn = self._config.spawn
        return max(spawn.min_delay_ms, spawn.base_delay_ms - difficulty * spawn.delay_scale_ms)

    def choose(self) -> Tuple[Optional[ObstaclePattern], Optional[ObstacleArchetype]]:
        """
        Draw what the next spawn event creates.

        Returns:
            (pattern, None) or (None, archetype).
        """
        if self._catalog.patterns and self._rng.wants_pattern():
            pattern = self._rng.pick(self._catalog.patterns, self._catalog.pattern_weights)
            return pattern, None
        archetype = self._rng.pick(self._catalog.archetypes, self._catalog.archetype_weights)
        return None, archetype

    def spawn_event(self, now_ms: float, difficulty: float) -> SpawnEvent:
        """
        Choose and spawn a pattern or a single obstacle.

        Args:
            now_ms: Current simulation time (motion start).
            difficulty: Current difficulty multiplier.

        Returns:
            SpawnEvent with the created instances.
        """
        pattern, archetype = self.choose()
        if pattern is not None:
            return self.spawn_pattern(pattern, now_ms, difficulty)
        return self.spawn_single(archetype, now_ms, difficulty)

    def spawn_single(
        self,
        archetype: ObstacleArchetype,
        now_ms: float,
        difficulty: float
    ) -> SpawnEvent:
        """Spawn exactly one obstacle at the right edge."""
        group_id = next(self._group_counter)
        instance = self._spawn_instance(archetype, 0.0, group_id, now_ms, difficulty)
        return SpawnEvent(group_id=group_id, instances=[instance])

    def spawn_pattern(
        self,
        pattern: ObstaclePattern,
        now_ms: float,
        difficulty: float
    ) -> SpawnEvent:
        """Spawn one obstacle per pattern entry, staggered by entry offset."""
        group_id = next(self._group_counter)
        instances = [
            self._spawn_instance(entry.archetype, entry.offset_x, group_id, now_ms, difficulty)
            for entry in pattern.entries
        ]
        return SpawnEvent(group_id=group_id, instances=instances, pattern_id=pattern.id)

    def _spawn_instance(
        self,
        archetype: ObstacleArchetype,
        offset_x: float,
        group_id: int,
        now_ms: float,
        difficulty: float
    ) -> ObstacleInstance:
        start_x = self._field_right + offset_x
        motion = LinearMotion(
            start_x=start_x,
            end_x=self._kill_x,
            start_ms=now_ms,
            duration_ms=self.travel_duration(difficulty)
        )
        instance = ObstacleInstance(
            uid=next(self._uid_counter),
            archetype=archetype,
            motion=motion,
            group_id=group_id,
            x=start_x
        )
        self._live.append(instance)
        self._spawned_total += 1
        return instance

    def sweep(self, now_ms: float) -> SweepResult:
        """
        Resample every live obstacle and drop those whose motion completed.

        With respawn_trigger "instance" every removed obstacle counts as a
        respawn trigger. With "group" only the removal of the last live member
        of a spawn group does.

        Args:
            now_ms: Current simulation time.

        Returns:
            SweepResult listing removed instances and respawn trigger count.
        """
        result = SweepResult()
        survivors: List[ObstacleInstance] = []

        for instance in self._live:
            instance.x = instance.motion.position_at(now_ms)
            if instance.motion.is_complete(now_ms):
                instance.active = False
                result.removed.append(instance)
            else:
                survivors.append(instance)

        self._live = survivors

        if not result.removed:
            return result

        if self._respawn_trigger == "instance":
            result.respawn_triggers = len(result.removed)
        else:
            remaining_groups = {instance.group_id for instance in survivors}
            finished_groups = {
                instance.group_id for instance in result.removed
                if instance.group_id not in remaining_groups
            }
            result.respawn_triggers = len(finished_groups)

        return result

    def freeze(self, now_ms: float) -> None:
        """Stop all obstacle motion at the current position."""
        for instance in self._live:
            instance.motion = instance.motion.frozen(now_ms)
            instance.x = instance.motion.position_at(now_ms)

    def clear(self) -> None:
        """Remove every live obstacle."""
        for instance in self._live:
            instance.active = False
        self._live = []
        self._spawned_total = 0

    def group_sizes(self) -> Dict[int, int]:
        """Number of live obstacles per spawn group."""
        sizes: Dict[int, int] = {}
        for instance in self._live:
            sizes[instance.group_id] = sizes.get(instance.group_id, 0) + 1
        return sizes
