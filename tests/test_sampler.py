import numpy as np
import pytest

from mains_scope.engine import AdaptiveSampler, SampleWindow, resolution_multiplier


@pytest.mark.parametrize(
    "speed, multiplier",
    [(1.0, 1), (0.5, 1), (0.25, 2), (0.1, 2), (0.05, 5), (0.01, 5), (0.005, 10), (0.001, 10)],
)
def test_resolution_multiplier(speed, multiplier):
    assert resolution_multiplier(speed) == multiplier


def test_sample_count_full_speed(synth):
    sampler = AdaptiveSampler(synth, viewport_width=800)
    assert sampler.sample_count(4 / 60, 1.0) == 800


def test_sample_count_slow_motion(synth):
    sampler = AdaptiveSampler(synth, viewport_width=800)
    assert sampler.sample_count(4 / 60, 0.001) == 8000


def test_sample_count_is_capped(synth):
    sampler = AdaptiveSampler(synth, viewport_width=5000)
    # Budget of 2000 samples at real time
    assert sampler.sample_count(4 / 60, 1.0) == 2000
    # 2000 / 0.05 = 40000, hard ceiling of 20000
    assert sampler.sample_count(4 / 60, 0.05) == 20000


def test_sample_returns_uniform_window(synth):
    sampler = AdaptiveSampler(synth, viewport_width=800)
    window = sampler.sample(0.5, 4 / 60, 0.0, 1.0)

    assert len(window) == 800
    assert window.effective_time_step == pytest.approx(4 / 60 / 800)
    assert window.times[0] == pytest.approx(0.5)
    np.testing.assert_allclose(window.samples, 170 * np.sin(2 * np.pi * 60 * window.times), atol=1e-9)


def test_index_at_is_nearest_preceding_and_clamped():
    window = SampleWindow(np.arange(10.0), 0.1, 0.0, 1.0)
    assert window.index_at(0.0) == 0
    assert window.index_at(0.35) == 3
    assert window.index_at(0.399) == 3
    assert window.index_at(-1.0) == 0
    assert window.index_at(5.0) == 9
    np.testing.assert_array_equal(window.index_at([0.05, 0.95, 2.0]), [0, 9, 9])


def test_lookup_does_not_interpolate():
    window = SampleWindow(np.array([0.0, 10.0, 20.0]), 1.0, 0.0, 3.0)
    assert window.lookup(1.9) == 10.0


def test_render_produces_one_value_per_pixel(synth):
    sampler = AdaptiveSampler(synth, viewport_width=800)
    window = sampler.sample(0.0, 4 / 60, 0.0, 0.001)
    assert len(window) == 8000

    pixels = window.render(400)
    assert pixels.shape == (400,)
    assert pixels[0] == window.samples[0]


def test_render_picks_preceding_sample_per_pixel():
    window = SampleWindow(np.arange(8.0), 0.25, 0.0, 2.0)
    np.testing.assert_array_equal(window.render(4), [0.0, 2.0, 4.0, 6.0])


def test_sample_uses_given_fault_snapshot(synth, registry):
    registry.trigger("neutral-loss", 0.0, 0.5)
    sampler = AdaptiveSampler(synth, viewport_width=100)
    faulted = sampler.sample(0.1, 0.01, 0.0, 1.0)
    clean = sampler.sample(0.1, 0.01, 0.0, 1.0, faults=())
    np.testing.assert_allclose(faulted.samples - clean.samples, 51.0)
