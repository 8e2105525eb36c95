"""Speed-adaptive sampling of the displayed time window."""

import math
from dataclasses import dataclass

import numpy as np

from ..config import SAMPLER
from .synthesis import WaveformSynthesizer


@dataclass
class SampleWindow:
    """
    Uniformly spaced voltage samples covering one displayed window.

    Attributes:
        samples: Voltage samples (V)
        effective_time_step: Spacing between samples (s)
        window_start: Time of the first sample (s)
        time_window: Span of the window (s)
        phase_offset: Leg phase offset (radians)
        trigger_time: Trigger crossing inside the window (s), None if free-running
        trigger_level: Trigger target voltage (V), None if free-running
    """

    samples: np.ndarray
    effective_time_step: float
    window_start: float
    time_window: float
    phase_offset: float = 0.0
    trigger_time: float | None = None
    trigger_level: float | None = None

    def __len__(self):
        return len(self.samples)

    @property
    def times(self) -> np.ndarray:
        return self.window_start + np.arange(len(self.samples)) * self.effective_time_step

    def index_at(self, offset):
        """
        Nearest-preceding sample index for a time offset from window_start.

        Accepts a scalar or an array of offsets; indices are clamped to the
        buffer bounds.
        """
        index = np.floor(np.asarray(offset, dtype=float) / self.effective_time_step)
        index = np.clip(index, 0, len(self.samples) - 1).astype(int)
        return int(index) if index.ndim == 0 else index

    def lookup(self, offset):
        """Sample value for a time offset from window_start (no interpolation)"""
        return self.samples[self.index_at(offset)]

    def render(self, width: int) -> np.ndarray:
        """One value per output pixel across the window"""
        pixel_offsets = np.arange(width) * (self.time_window / width)
        return self.lookup(pixel_offsets)


def resolution_multiplier(speed: float, steps=SAMPLER["resolution_steps"]) -> int:
    """Samples per output pixel for the given playback speed"""
    for lower_bound, multiplier in steps:
        if speed >= lower_bound:
            return multiplier
    return steps[-1][1]


class AdaptiveSampler:
    """
    Sizes the sample buffer from viewport width and playback speed.

    Slower playback leaves more real compute time per simulated second, so
    the buffer grows with 1/speed up to a hard ceiling.
    """

    def __init__(
        self,
        synthesizer: WaveformSynthesizer,
        viewport_width: int = SAMPLER["viewport_width"],
        sample_budget: int = SAMPLER["sample_budget"],
        max_samples: int = SAMPLER["max_samples"],
    ):
        self.synthesizer = synthesizer
        self.viewport_width = viewport_width
        self.sample_budget = sample_budget
        self.max_samples = max_samples

    def sample_count(self, time_window: float, speed: float) -> int:
        pixel_time_step = time_window / self.viewport_width
        desired = round(time_window / (pixel_time_step / resolution_multiplier(speed)))
        cap = math.floor(min(self.sample_budget / speed, self.max_samples))
        return max(1, min(desired, cap))

    def sample(
        self,
        window_start: float,
        time_window: float,
        phase_offset: float,
        speed: float,
        faults=None,
    ) -> SampleWindow:
        count = self.sample_count(time_window, speed)
        step = time_window / count
        times = window_start + np.arange(count) * step
        samples = np.asarray(self.synthesizer.value(times, phase_offset, faults), dtype=float)
        return SampleWindow(samples, step, window_start, time_window, phase_offset)
