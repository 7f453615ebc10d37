"""
Tests for obstacle spawning, motion sampling and removal.
"""

from pathlib import Path

import pytest
import yaml

import tapjump
from tapjump.core.config_loader import load_config, config_from_dict
from tapjump.core.obstacle_catalog import ObstacleCatalog
from tapjump.core.rng import SpawnRng
from tapjump.core.spawner import ObstacleSpawner


DEFAULT_CONFIG_PATH = Path(tapjump.__file__).parent / "game_config.yaml"


def _config_with_trigger(trigger):
    with open(DEFAULT_CONFIG_PATH, "r") as f:
        raw = yaml.safe_load(f)
    raw["spawn"]["respawn_trigger"] = trigger
    return config_from_dict(raw)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def catalog(config):
    return ObstacleCatalog(config)


@pytest.fixture
def spawner(config, catalog):
    return ObstacleSpawner(config, rng=SpawnRng(0.3, seed=42), catalog=catalog)


class TestSpawnPlacement:
    """Instances start at the right edge plus their offset."""

    def test_single_at_right_edge(self, spawner, catalog):
        event = spawner.spawn_single(catalog.get("wide"), now_ms=0.0, difficulty=1.0)

        assert not event.is_pattern
        assert len(event.instances) == 1
        instance = event.instances[0]
        assert instance.x == pytest.approx(400.0)
        assert instance.width == pytest.approx(80.0)
        assert not instance.passed
        assert instance.active
        assert spawner.live == [instance]

    def test_pattern_offsets(self, spawner, catalog):
        event = spawner.spawn_pattern(catalog.get_pattern("tripleObstacle"), 0.0, 1.0)

        assert event.is_pattern
        assert event.pattern_id == "tripleObstacle"
        assert [i.x for i in event.instances] == pytest.approx([400.0, 550.0, 700.0])
        assert {i.group_id for i in event.instances} == {event.group_id}
        assert spawner.count == 3

    def test_uids_unique(self, spawner, catalog):
        spawner.spawn_pattern(catalog.get_pattern("double"), 0.0, 1.0)
        spawner.spawn_single(catalog.get("basic"), 0.0, 1.0)
        uids = [i.uid for i in spawner.live]
        assert len(set(uids)) == len(uids)

    def test_spawn_event_uses_rng(self, config, catalog):
        s1 = ObstacleSpawner(config, rng=SpawnRng(0.3, seed=5), catalog=catalog)
        s2 = ObstacleSpawner(config, rng=SpawnRng(0.3, seed=5), catalog=catalog)
        for t in range(20):
            e1 = s1.spawn_event(t * 100.0, 1.0)
            e2 = s2.spawn_event(t * 100.0, 1.0)
            assert e1.pattern_id == e2.pattern_id
            assert [i.archetype.id for i in e1.instances] == [i.archetype.id for i in e2.instances]

    def test_always_pattern(self, config, catalog):
        spawner = ObstacleSpawner(config, rng=SpawnRng(1.0, seed=1), catalog=catalog)
        for _ in range(10):
            assert spawner.spawn_event(0.0, 1.0).is_pattern

    def test_never_pattern(self, config, catalog):
        spawner = ObstacleSpawner(config, rng=SpawnRng(0.0, seed=1), catalog=catalog)
        for _ in range(10):
            event = spawner.spawn_event(0.0, 1.0)
            assert not event.is_pattern
            assert len(event.instances) == 1


class TestMotionAndRemoval:
    """Obstacles move left and are swept once their motion completes."""

    def test_linear_travel(self, spawner, catalog):
        instance = spawner.spawn_single(catalog.get("basic"), 0.0, 1.0).instances[0]

        spawner.sweep(1000.0)
        # Halfway from 400 to -50
        assert instance.x == pytest.approx(175.0)
        assert spawner.count == 1

    def test_duration_scales_with_difficulty(self, spawner):
        assert spawner.travel_duration(1.0) == pytest.approx(2000.0)
        assert spawner.travel_duration(2.0) == pytest.approx(1000.0)
        assert spawner.travel_duration(3.0) == pytest.approx(2000.0 / 3.0)

    def test_faster_at_higher_difficulty(self, spawner, catalog):
        slow = spawner.spawn_single(catalog.get("basic"), 0.0, 1.0).instances[0]
        fast = spawner.spawn_single(catalog.get("basic"), 0.0, 2.0).instances[0]
        spawner.sweep(500.0)
        assert fast.x < slow.x

    def test_removed_at_kill_boundary(self, spawner, catalog):
        instance = spawner.spawn_single(catalog.get("basic"), 0.0, 1.0).instances[0]

        result = spawner.sweep(1999.0)
        assert result.removed == []
        assert spawner.count == 1

        result = spawner.sweep(2000.0)
        assert result.removed == [instance]
        assert instance.x == pytest.approx(-50.0)
        assert not instance.active
        assert spawner.count == 0

    def test_freeze_stops_motion(self, spawner, catalog):
        instance = spawner.spawn_single(catalog.get("basic"), 0.0, 1.0).instances[0]
        spawner.freeze(500.0)
        frozen_x = instance.x

        result = spawner.sweep(5000.0)
        assert result.removed == []
        assert instance.x == pytest.approx(frozen_x)
        assert instance.x == pytest.approx(400.0 - 450.0 * 0.25)

    def test_clear(self, spawner, catalog):
        spawner.spawn_pattern(catalog.get_pattern("double"), 0.0, 1.0)
        spawner.clear()
        assert spawner.count == 0
        assert spawner.spawned_total == 0


class TestRespawnTriggers:
    """Respawn trigger counting per configured mode."""

    def test_group_mode_counts_finished_groups(self):
        config = _config_with_trigger("group")
        spawner = ObstacleSpawner(config, rng=SpawnRng(0.3, seed=1), catalog=ObstacleCatalog(config))
        spawner.spawn_pattern(spawner.catalog.get_pattern("tripleObstacle"), 0.0, 1.0)

        result = spawner.sweep(2000.0)
        assert len(result.removed) == 3
        assert result.respawn_triggers == 1

    def test_instance_mode_counts_every_removal(self):
        config = _config_with_trigger("instance")
        spawner = ObstacleSpawner(config, rng=SpawnRng(0.3, seed=1), catalog=ObstacleCatalog(config))
        spawner.spawn_pattern(spawner.catalog.get_pattern("tripleObstacle"), 0.0, 1.0)

        result = spawner.sweep(2000.0)
        assert len(result.removed) == 3
        assert result.respawn_triggers == 3

    def test_group_waits_for_last_member(self):
        config = _config_with_trigger("group")
        spawner = ObstacleSpawner(config, rng=SpawnRng(0.3, seed=1), catalog=ObstacleCatalog(config))
        event = spawner.spawn_pattern(spawner.catalog.get_pattern("double"), 0.0, 1.0)

        # Freeze only the trailing member so the group finishes unevenly
        trailing = event.instances[1]
        trailing.motion = trailing.motion.frozen(100.0)

        result = spawner.sweep(2000.0)
        assert len(result.removed) == 1
        assert result.respawn_triggers == 0
        assert spawner.group_sizes() == {event.group_id: 1}

    def test_respawn_delay(self, spawner):
        # max(500, 1500 - d * 300)
        assert spawner.respawn_delay(1.0) == pytest.approx(1200.0)
        assert spawner.respawn_delay(3.0) == pytest.approx(600.0)
        assert spawner.respawn_delay(4.0) == pytest.approx(500.0)
