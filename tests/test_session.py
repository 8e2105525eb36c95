import math
from dataclasses import replace

import numpy as np
import pytest

from mains_scope import SimulationParameters, SimulationSession
from mains_scope.engine import FaultType, TransientEvent, TriggerMode, classify

NOMINAL = 170 / math.sqrt(2)


@pytest.fixture
def session():
    return SimulationSession(SimulationParameters(frequency=60.0, amplitude=170.0), seed=1)


def run(session, *walls):
    for wall in walls:
        session.tick(wall)


def test_defaults(session):
    assert session.time == 0.0
    assert session.speed == 1.0
    assert session.playing
    assert session.trigger.config.mode is TriggerMode.AUTO
    assert session.fault_intensity == 0.5


def test_tick_advances_time_and_records(session):
    run(session, 10.0, 10.5)
    assert session.time == pytest.approx(0.5)
    assert session.tick_count == 2
    assert len(session.trail) == 2
    assert session.trail[-1] == pytest.approx(0.5 - 0.016)
    assert len(session.get_transient_history()) == 2


def test_fault_starts_at_current_time(session):
    run(session, 0.0, 0.75)
    fault_id = session.trigger_fault("ground-fault")
    assert session.registry.get(fault_id).start_time == pytest.approx(0.75)


def test_unknown_fault_is_a_no_op(session):
    assert session.trigger_fault("gremlins") is None
    assert len(session.registry) == 0


def test_fault_intensity_is_clamped_and_applied(session):
    assert session.set_fault_intensity(2.0) == 1.0
    fault_id = session.trigger_fault(FaultType.DC_INJECTION)
    assert session.registry.get(fault_id).intensity == 1.0
    assert session.set_fault_intensity(-1.0) == 0.0


def test_fault_is_kept_until_it_expires(session):
    run(session, 0.0, 1.0)
    fault_id = session.trigger_fault("motor-start-l1")

    session.tick(1.4)
    assert fault_id in session.registry
    assert session.get_transient_history()[-1].active_fault_count == 1


def test_expired_fault_is_pruned_before_statistics(session):
    session.set_fault_intensity(1.0)
    run(session, 0.0, 1.0)
    fault_id = session.trigger_fault("motor-start-l1")

    session.tick(1.6)
    assert fault_id not in session.registry

    recorded = session.get_transient_history()[-1]
    assert recorded.simulated_time == pytest.approx(1.6)
    assert recorded.active_fault_count == 0
    assert recorded.rms_estimate == pytest.approx(NOMINAL)
    assert classify(recorded) is TransientEvent.NORMAL
    assert session.statistics.last_rms == pytest.approx(NOMINAL)
    assert session.get_statistics_snapshot().min_rms == pytest.approx(NOMINAL)


def test_persistent_fault_survives_until_cleared(session):
    run(session, 0.0)
    session.trigger_fault("neutral-loss")
    run(session, 20.0, 40.0)
    assert len(session.active_faults()) == 1
    assert session.active_faults()[0]["status"] == "PERSISTENT"

    session.clear_all_faults()
    assert session.active_faults() == []


def test_triggered_trace_is_stationary(session):
    session.set_trigger_config("auto", 60.0)
    run(session, 0.0, 0.1234)
    first = session.sample_window()
    run(session, 0.1234 + 1 / 60)
    second = session.sample_window()

    assert second.window_start - first.window_start == pytest.approx(1 / 60)
    assert second.trigger_level == 60.0
    np.testing.assert_allclose(first.samples, second.samples, atol=1e-6)


def test_zero_level_trace_is_stationary(session):
    session.set_trigger_config("auto", 0.0)
    run(session, 0.0, 0.1234)
    first = session.sample_window()
    run(session, 0.1234 + 1 / 60)
    second = session.sample_window()

    assert second.window_start - first.window_start == pytest.approx(1 / 60)
    assert first.trigger_level == 0.0
    np.testing.assert_allclose(first.samples, second.samples, atol=1e-6)


def test_free_running_window(session):
    session.set_trigger_config("none")
    run(session, 0.0, 1.0)
    window = session.sample_window()
    assert window.trigger_time is None
    assert window.window_start == pytest.approx(1.0 - 4 / 60)


def test_sample_window_for_trail_time(session):
    session.set_trigger_config("none")
    run(session, 0.0, 1.0)
    window = session.sample_window(0.5)
    assert window.window_start == pytest.approx(0.5 - 4 / 60)


def test_sample_legs(session):
    legs = session.sample_legs()
    assert set(legs) == {"L1", "L2"}
    np.testing.assert_allclose(legs["L2"].samples, -legs["L1"].samples, atol=1e-9)

    session.configure(replace(session.params, split_phase_mode=False))
    assert set(session.sample_legs()) == {"L1"}


def test_slow_motion_increases_resolution(session):
    assert len(session.sample_window()) == 800
    session.set_speed_preset("ultra-slow")
    assert session.speed == pytest.approx(0.01)
    assert len(session.sample_window()) == 4000


def test_speed_is_capped_at_real_time(session):
    assert session.set_speed(5.0) == 1.0
    assert session.set_speed_preset("slow") == pytest.approx(0.1)
    run(session, 0.0, 1.0)
    assert session.time == pytest.approx(0.1)


def test_pause_freezes_time_and_statistics(session):
    run(session, 0.0, 1.0)
    session.pause(1.0)
    trail = len(session.trail)
    history = len(session.get_transient_history())

    run(session, 5.0, 9.0)
    assert session.time == pytest.approx(1.0)
    assert len(session.trail) == trail
    assert len(session.get_transient_history()) == history

    assert session.toggle_play(10.0) is True
    session.tick(10.5)
    assert session.time == pytest.approx(1.5)


def test_rms_stays_in_band_for_every_fault(session):
    session.set_fault_intensity(1.0)
    run(session, 0.0)
    for fault_type in FaultType:
        session.trigger_fault(fault_type)
    run(session, *np.linspace(0.01, 0.5, 30))

    stats = session.get_statistics_snapshot()
    assert 0.5 * NOMINAL <= stats.min_rms <= stats.max_rms <= 1.5 * NOMINAL
    assert session.statistics.last_rms >= 0.3 * NOMINAL


def test_peak_tracks_faulted_leg(session):
    session.trigger_fault("neutral-loss")
    # L1 crest at a quarter period: 170 + 0.6 * 85
    run(session, 0.0, 1 / 240)
    stats = session.get_statistics_snapshot()
    assert stats.peak_high == pytest.approx(221.0)
    assert stats.peak_high_time == pytest.approx(1 / 240)


def test_amplitude_change_resets_statistics(session):
    session.trigger_fault("neutral-loss")
    run(session, 0.0, 1 / 240)

    session.configure(replace(session.params, frequency=50.0))
    assert session.get_statistics_snapshot().peak_high == pytest.approx(221.0)

    session.configure(replace(session.params, amplitude=230.0))
    stats = session.get_statistics_snapshot()
    assert stats.peak_high == 230.0
    assert stats.max_rms == pytest.approx(230 / math.sqrt(2))


def test_configure_floors_parameters_mutated_in_place(session):
    params = session.params
    params.frequency = 0.0
    params.amplitude = -10.0
    session.configure(params)

    assert session.params.frequency == pytest.approx(0.1)
    assert session.params.amplitude == pytest.approx(0.001)
    assert session.synthesizer.params is session.params
    window = session.sample_window()
    assert window.time_window == pytest.approx(40.0)


def test_in_place_amplitude_change_resets_statistics(session):
    params = session.params
    params.amplitude = 50.0
    session.configure(params)
    run(session, 0.0, 0.5)

    nominal = 50 / math.sqrt(2)
    stats = session.get_statistics_snapshot()
    assert stats.max_rms == pytest.approx(nominal)
    assert stats.max_rms <= 1.5 * nominal
    assert stats.peak_high == 50.0


def test_configure_does_not_alias_caller_parameters(session):
    params = SimulationParameters(frequency=50.0, amplitude=230.0)
    session.configure(params)
    params.frequency = 0.0
    assert session.params.frequency == 50.0


def test_trail_is_bounded(session):
    run(session, *np.arange(450) * 0.016)
    assert len(session.trail) == 400


def test_reset(session):
    session.configure(replace(session.params, dc_offset=40.0, chassis_grounded=False))
    session.trigger_fault("neutral-loss")
    run(session, 0.0, 0.5, 1.0)

    session.reset()
    assert session.time == 0.0
    assert session.tick_count == 0
    assert len(session.registry) == 0
    assert len(session.trail) == 0
    assert session.get_transient_history() == []
    assert session.params.dc_offset == 0.0
    assert session.params.chassis_grounded
    assert session.params.amplitude == 170.0
    assert session.get_statistics_snapshot().peak_high == 170.0

    # Wall clock is re-anchored on the next tick
    session.tick(100.0)
    assert session.time == 0.0


def test_seeded_sessions_replay_identically():
    def record(seed):
        session = SimulationSession(seed=seed)
        session.set_fault_intensity(1.0)
        run(session, 0.0, 0.01)
        session.trigger_fault("arc-fault-l1")
        run(session, 0.02)
        return session.sample_window().samples

    np.testing.assert_array_equal(record(7), record(7))
