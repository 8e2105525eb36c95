import math

import numpy as np
import pytest

from mains_scope.engine import L1_PHASE, L2_PHASE, SimulationParameters


def test_clean_signal_is_pure_sinusoid(synth):
    t = np.linspace(0.0, 0.1, 257)
    expected = 170 * np.sin(2 * np.pi * 60 * t)
    np.testing.assert_allclose(synth.value(t, L1_PHASE), expected, atol=1e-9)


def test_scalar_time_returns_float(synth):
    value = synth.value(1 / 240, L1_PHASE)
    assert isinstance(value, float)
    assert value == pytest.approx(170.0)


def test_legs_are_in_antiphase(synth):
    t = np.linspace(0.0, 0.05, 101)
    np.testing.assert_allclose(synth.value(t, L2_PHASE), -synth.value(t, L1_PHASE), atol=1e-9)


def test_dc_offset_only_applies_when_floating(synth, params):
    params.dc_offset = 40.0
    params.chassis_grounded = True
    assert synth.value(0.0) == pytest.approx(0.0)

    params.chassis_grounded = False
    assert synth.value(0.0) == pytest.approx(40.0)
    assert synth.value(1 / 240) == pytest.approx(210.0)


def test_parameters_are_floored():
    params = SimulationParameters(frequency=0.0, amplitude=-5.0)
    assert params.frequency == pytest.approx(0.1)
    assert params.amplitude == pytest.approx(0.001)
    assert math.isfinite(params.period)


def test_faults_superpose_linearly(synth, make_fault):
    t = 0.3
    neutral = make_fault("neutral-loss", fault_id=0)
    dc = make_fault("dc-injection", fault_id=1)
    base = synth.value(t, L1_PHASE, faults=())
    # 0.6 * 85 + 0.4 * 85
    combined = synth.value(t, L1_PHASE, faults=(neutral, dc))
    assert combined - base == pytest.approx(85.0)


def test_value_dependent_fault_sees_unfaulted_base(synth, make_fault):
    saturation = make_fault("transformer-saturation", fault_id=0)
    dc = make_fault("dc-injection", fault_id=1)
    # Base of 120 V sits below the 144.5 V saturation level, 120 + 34 would not
    t = np.array([math.asin(120 / 170) / (2 * math.pi * 60), 1 / 240, 0.3])

    base = synth.value(t, L1_PHASE, faults=())
    combined = synth.value(t, L1_PHASE, faults=(saturation, dc))
    separate = (
        synth.value(t, L1_PHASE, faults=(saturation,))
        + synth.value(t, L1_PHASE, faults=(dc,))
        - base
    )
    np.testing.assert_allclose(combined, separate, atol=1e-9)
    np.testing.assert_allclose(combined - base, [34.0, 102.0, 34.0], atol=1e-9)


def test_registry_faults_used_by_default(synth, registry):
    t = 0.2
    clean = synth.value(t)
    registry.trigger("neutral-loss", 0.0, 0.5)
    assert synth.value(t) - clean == pytest.approx(51.0)
    assert synth.value(t, L2_PHASE) + clean == pytest.approx(51.0)

    # Persistent faults never expire on their own
    registry.prune_expired(1000.0)
    assert synth.value(1000.0) == pytest.approx(synth.value(1000.0, faults=()) + 51.0)

    registry.clear()
    assert synth.value(t) == pytest.approx(clean)


def test_evaluation_has_no_side_effects(synth, registry):
    registry.trigger("motor-start-l1", 0.0, 0.5)
    before = registry.snapshot()
    synth.value(np.linspace(0.0, 2.0, 100))
    synth.value(-1.0)
    assert registry.snapshot() == before


def test_expired_fault_contributes_nothing_before_pruning(synth, registry):
    registry.trigger("motor-start-l2", 0.0, 1.0)
    assert len(registry) == 1
    assert synth.value(0.75, L2_PHASE) == pytest.approx(synth.value(0.75, L2_PHASE, faults=()))
