"""
Tests for the fixed-step player integrator.
"""

import pytest

from tapjump.core.config_loader import load_config
from tapjump.core.physics import PlayerPhysics, PlayerState


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def physics(config):
    return PlayerPhysics(config)


@pytest.fixture
def player(physics):
    return physics.new_player()


class TestIntegration:
    """Gravity and position update per tick."""

    def test_new_player_at_start_position(self, player, config):
        assert player.x == pytest.approx(config.player_x)
        assert player.y == pytest.approx(config.player_start_y)
        assert player.velocity == 0.0

    def test_velocity_then_position(self, physics, player):
        """velocity' = velocity + g, position' = position + velocity'."""
        y0 = player.y
        physics.tick(player)
        assert player.velocity == pytest.approx(0.8)
        assert player.y == pytest.approx(y0 + 0.8)

        physics.tick(player)
        assert player.velocity == pytest.approx(1.6)
        assert player.y == pytest.approx(y0 + 0.8 + 1.6)

    def test_property_holds_every_tick_until_landing(self, physics, player):
        for _ in range(200):
            y_before, v_before = player.y, player.velocity
            landed = physics.tick(player)
            expected_v = v_before + physics.gravity
            expected_y = y_before + expected_v
            if expected_y > physics.ground_line:
                assert landed
                assert player.y == physics.ground_line
                assert player.velocity == 0.0
            else:
                assert not landed
                assert player.velocity == pytest.approx(expected_v)
                assert player.y == pytest.approx(expected_y)

    def test_deterministic_given_tick_count(self, physics):
        a = physics.new_player()
        b = physics.new_player()
        for _ in range(37):
            physics.tick(a)
            physics.tick(b)
        assert (a.y, a.velocity) == (b.y, b.velocity)


class TestGround:
    """Landing clamps position and zeroes velocity."""

    def test_lands_on_ground_line(self, physics, player):
        for _ in range(100):
            physics.tick(player)
        assert player.y == physics.ground_line
        assert player.velocity == 0.0
        assert physics.is_grounded(player)

    def test_resting_player_stays_put(self, physics, player):
        player.y = physics.ground_line
        player.velocity = 0.0
        for _ in range(10):
            assert physics.tick(player)
            assert player.y == physics.ground_line
            assert player.velocity == 0.0

    def test_above_ground_is_not_clamped(self, physics):
        player = PlayerState(x=100, y=physics.ground_line - 5.0, velocity=0.0)
        landed = physics.tick(player)
        assert not landed
        assert player.y == pytest.approx(physics.ground_line - 4.2)
        assert player.velocity == pytest.approx(0.8)

    def test_no_ceiling(self, physics):
        player = PlayerState(x=100, y=5.0, velocity=-30.0)
        physics.tick(player)
        assert player.y < 0


class TestJump:
    """Jump overwrites velocity."""

    @pytest.mark.parametrize("initial_velocity", [-20.0, -3.0, 0.0, 7.5, 40.0])
    def test_jump_sets_jump_force(self, physics, player, initial_velocity):
        player.velocity = initial_velocity
        physics.jump(player)
        assert player.velocity == pytest.approx(-15.0)

    def test_jump_from_ground_rises(self, physics, player):
        player.y = physics.ground_line
        physics.jump(player)
        physics.tick(player)
        assert player.velocity == pytest.approx(-14.2)
        assert player.y == pytest.approx(physics.ground_line - 14.2)

    def test_reset_restores_start(self, physics, player, config):
        player.y = 12.0
        player.velocity = 9.0
        physics.reset(player)
        assert player.y == pytest.approx(config.player_start_y)
        assert player.velocity == 0.0
