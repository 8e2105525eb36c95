import pytest

from mains_scope.engine import ClockModel


def test_first_tick_only_anchors_wall_clock():
    clock = ClockModel()
    assert clock.tick(100.0) == 0.0
    assert clock.time == 0.0


def test_tick_scales_elapsed_time_by_speed():
    clock = ClockModel(speed=0.5)
    clock.tick(10.0)
    clock.tick(10.2)
    assert clock.time == pytest.approx(0.1)


def test_speed_is_clamped():
    clock = ClockModel()
    assert clock.set_speed(3.0) == 1.0
    assert clock.set_speed(0.0) == pytest.approx(0.001)
    assert clock.set_speed(0.25) == 0.25


def test_paused_interval_is_excluded():
    clock = ClockModel()
    clock.tick(0.0)
    clock.tick(1.0)
    clock.pause(1.0)
    clock.tick(5.0)
    assert clock.time == pytest.approx(1.0)

    clock.resume(10.0)
    clock.tick(10.5)
    assert clock.time == pytest.approx(1.5)


def test_wall_clock_going_backwards_does_not_rewind():
    clock = ClockModel()
    clock.tick(5.0)
    clock.tick(6.0)
    clock.tick(4.0)
    assert clock.time == pytest.approx(1.0)
