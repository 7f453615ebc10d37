"""
Tests for configuration loading and the obstacle catalog.
"""

import copy
from pathlib import Path

import pytest
import yaml

import tapjump
from tapjump.core.config_loader import load_config, config_from_dict
from tapjump.core.obstacle_catalog import ObstacleCatalog


DEFAULT_CONFIG_PATH = Path(tapjump.__file__).parent / "game_config.yaml"


@pytest.fixture
def raw_config():
    with open(DEFAULT_CONFIG_PATH, "r") as f:
        return yaml.safe_load(f)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def catalog(config):
    return ObstacleCatalog(config)


class TestConfigLoading:
    """Test YAML loading and derived geometry."""

    def test_default_config_loads(self, config):
        assert config.physics.gravity == pytest.approx(0.8)
        assert config.physics.jump_force == pytest.approx(-15.0)
        assert config.difficulty.max == pytest.approx(3.0)
        assert config.spawn.pattern_probability == pytest.approx(0.3)

    def test_derived_geometry(self, config):
        """Ground line is screen height minus ground minus player height."""
        assert config.ground_y == 800 - 60
        assert config.ground_line == 800 - 60 - 50
        assert config.player_x == pytest.approx(100.0)
        assert config.kill_x == pytest.approx(-50.0)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_load_from_explicit_path(self, raw_config, tmp_path):
        raw_config["difficulty"]["interval"] = 3
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(raw_config))

        config = load_config(str(path))
        assert config.difficulty.interval == 3

    def test_archetype_without_width_has_none(self, config):
        assert config.get_archetype("basic").width is None
        assert config.get_archetype("wide").width == pytest.approx(80.0)


class TestConfigValidation:
    """Malformed configuration fails at load time."""

    def test_unknown_pattern_reference(self, raw_config):
        raw_config["patterns"][0]["obstacles"][0]["type"] = "ghost"
        with pytest.raises(ValueError, match="unknown archetype"):
            config_from_dict(raw_config)

    def test_negative_weight(self, raw_config):
        raw_config["archetypes"][0]["weight"] = -1
        with pytest.raises(ValueError, match="negative weight"):
            config_from_dict(raw_config)

    def test_all_zero_weights(self, raw_config):
        for archetype in raw_config["archetypes"]:
            archetype["weight"] = 0
        with pytest.raises(ValueError):
            config_from_dict(raw_config)

    def test_negative_offset(self, raw_config):
        raw_config["patterns"][0]["obstacles"][1]["offset_x"] = -10
        with pytest.raises(ValueError, match="negative offset"):
            config_from_dict(raw_config)

    def test_duplicate_archetype_ids(self, raw_config):
        raw_config["archetypes"].append(copy.deepcopy(raw_config["archetypes"][0]))
        with pytest.raises(ValueError, match="Duplicate"):
            config_from_dict(raw_config)

    def test_invalid_respawn_trigger(self, raw_config):
        raw_config["spawn"]["respawn_trigger"] = "sometimes"
        with pytest.raises(ValueError, match="respawn_trigger"):
            config_from_dict(raw_config)

    def test_patterns_required_when_probability_positive(self, raw_config):
        raw_config["patterns"] = []
        with pytest.raises(ValueError):
            config_from_dict(raw_config)

        raw_config["spawn"]["pattern_probability"] = 0.0
        config = config_from_dict(raw_config)
        assert config.patterns == ()

    def test_difficulty_bounds(self, raw_config):
        raw_config["difficulty"]["max"] = 0.5
        with pytest.raises(ValueError):
            config_from_dict(raw_config)


class TestObstacleCatalog:
    """Test archetype and pattern lookup."""

    def test_all_archetypes_present(self, catalog, config):
        assert len(catalog) == len(config.archetypes)
        assert [a.id for a in catalog] == [a.id for a in config.archetypes]

    def test_default_width_applied(self, catalog):
        assert catalog.get("basic").width == pytest.approx(50.0)
        assert catalog.get("extraWide").width == pytest.approx(120.0)

    def test_vertical_span_on_ground(self, catalog, config):
        top, bottom = catalog.get("tall").vertical_span(config.ground_y)
        assert bottom == pytest.approx(740.0)
        assert top == pytest.approx(620.0)

    def test_vertical_span_floating(self, catalog, config):
        floating = catalog.get("floating")
        assert floating.is_floating
        top, bottom = floating.vertical_span(config.ground_y)
        assert bottom == pytest.approx(640.0)
        assert top == pytest.approx(600.0)

    def test_patterns_resolve_archetypes(self, catalog):
        triple = catalog.get_pattern("tripleObstacle")
        assert len(triple) == 3
        assert [e.archetype.id for e in triple.entries] == ["short", "tall", "short"]
        assert [e.offset_x for e in triple.entries] == [0, 150, 300]

    def test_unknown_ids_raise(self, catalog):
        with pytest.raises(KeyError):
            catalog.get("ghost")
        with pytest.raises(KeyError):
            catalog.get_pattern("ghost")
        with pytest.raises(IndexError):
            catalog[len(catalog)]

    def test_get_by_name_case_insensitive(self, catalog):
        assert catalog.get_by_name("VERYTALL").id == "veryTall"
        assert catalog.get_by_name("ghost") is None

    def test_weights_follow_order(self, catalog):
        assert catalog.archetype_weights[0] == pytest.approx(0.25)
        assert len(catalog.pattern_weights) == len(catalog.patterns)
