"""
Tests for time-parameterized motion and the simulation scheduler.
"""

import pytest

from tapjump.core.motion import LinearMotion
from tapjump.core.scheduler import SimScheduler


class TestLinearMotion:
    """Position is a pure function of time."""

    def test_endpoints_and_midpoint(self):
        motion = LinearMotion(start_x=400.0, end_x=-50.0, start_ms=1000.0, duration_ms=2000.0)
        assert motion.position_at(1000.0) == pytest.approx(400.0)
        assert motion.position_at(2000.0) == pytest.approx(175.0)
        assert motion.position_at(3000.0) == pytest.approx(-50.0)

    def test_clamped_outside_interval(self):
        motion = LinearMotion(400.0, -50.0, 1000.0, 2000.0)
        assert motion.position_at(0.0) == pytest.approx(400.0)
        assert motion.position_at(10_000.0) == pytest.approx(-50.0)

    def test_repeated_sampling_is_stable(self):
        motion = LinearMotion(400.0, -50.0, 0.0, 2000.0)
        assert motion.position_at(777.0) == motion.position_at(777.0)

    def test_completion(self):
        motion = LinearMotion(400.0, -50.0, 0.0, 2000.0)
        assert not motion.is_complete(1999.0)
        assert motion.is_complete(2000.0)
        assert motion.end_ms == pytest.approx(2000.0)

    def test_frozen_holds_position(self):
        motion = LinearMotion(400.0, -50.0, 0.0, 2000.0).frozen(1000.0)
        assert motion.is_frozen
        assert motion.position_at(5000.0) == pytest.approx(175.0)
        assert not motion.is_complete(5000.0)

    def test_freezing_twice_keeps_first(self):
        motion = LinearMotion(400.0, -50.0, 0.0, 2000.0).frozen(500.0).frozen(1500.0)
        assert motion.frozen_at_ms == pytest.approx(500.0)

    def test_zero_duration_is_immediately_complete(self):
        motion = LinearMotion(10.0, 0.0, 0.0, 0.0)
        assert motion.is_complete(0.0)
        assert motion.position_at(0.0) == pytest.approx(0.0)


class TestSimScheduler:
    """Deferred one-shot timers on the simulation clock."""

    def test_fires_when_due(self):
        scheduler = SimScheduler()
        fired = []
        scheduler.call_later(100.0, lambda: fired.append(scheduler.now_ms))

        scheduler.advance(96.0)
        assert fired == []
        scheduler.advance(16.0)
        assert fired == [100.0]
        assert scheduler.now_ms == pytest.approx(112.0)

    def test_order_by_due_then_insertion(self):
        scheduler = SimScheduler()
        order = []
        scheduler.call_later(50.0, lambda: order.append("b"))
        scheduler.call_later(10.0, lambda: order.append("a"))
        scheduler.call_later(50.0, lambda: order.append("c"))

        scheduler.advance(100.0)
        assert order == ["a", "b", "c"]

    def test_cancel(self):
        scheduler = SimScheduler()
        fired = []
        handle = scheduler.call_later(10.0, lambda: fired.append(1))
        handle.cancel()

        assert scheduler.advance(100.0) == 0
        assert fired == []
        assert not handle.pending

    def test_cancel_all(self):
        scheduler = SimScheduler()
        fired = []
        handles = [scheduler.call_later(d, lambda: fired.append(1)) for d in (5.0, 10.0, 15.0)]
        assert scheduler.pending_count == 3

        scheduler.cancel_all()
        scheduler.advance(100.0)
        assert fired == []
        assert scheduler.pending_count == 0
        assert all(h.cancelled for h in handles)

    def test_callback_can_schedule(self):
        scheduler = SimScheduler()
        fired = []

        def first():
            fired.append("first")
            scheduler.call_later(5.0, lambda: fired.append("second"))

        scheduler.call_later(10.0, first)
        scheduler.advance(20.0)
        assert fired == ["first", "second"]

    def test_reset_rewinds_clock(self):
        scheduler = SimScheduler()
        scheduler.call_later(10.0, lambda: None)
        scheduler.advance(5.0)
        scheduler.reset()
        assert scheduler.now_ms == 0.0
        assert scheduler.pending_count == 0
