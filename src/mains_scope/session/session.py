"""Simulation session controller for split-phase mains visualization"""

import logging
import time
from collections import deque
from dataclasses import replace

import numpy as np

from ..config import DISPLAY, FAULTS, SAMPLER, SPEED_PRESETS
from ..engine import (
    L1_PHASE,
    L2_PHASE,
    AdaptiveSampler,
    ClockModel,
    FaultEffectModel,
    FaultRegistry,
    SampleWindow,
    SimulationParameters,
    StatisticsTracker,
    TriggerEngine,
    VoltageStatistics,
    WaveformSynthesizer,
)

logger = logging.getLogger(__name__)


class SimulationSession:
    """
    Owns the clock, fault registry and statistics, and sequences one tick.

    Each tick advances the clock, runs a maintenance pass that prunes faults
    expired at the new time, then evaluates against a frozen snapshot of the
    fault set. The registry is otherwise only mutated by explicit
    trigger/clear commands.
    """

    def __init__(
        self,
        params: SimulationParameters | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        viewport_width: int = SAMPLER["viewport_width"],
    ):
        self.params = replace(params) if params is not None else SimulationParameters.from_config()
        self._amplitude = self.params.amplitude
        self.clock = ClockModel()
        self.registry = FaultRegistry()
        self.effects = FaultEffectModel(rng if rng is not None else np.random.default_rng(seed))
        self.synthesizer = WaveformSynthesizer(self.params, self.registry, self.effects)
        self.trigger = TriggerEngine()
        self.sampler = AdaptiveSampler(self.synthesizer, viewport_width=viewport_width)
        self.statistics = StatisticsTracker(self.params)

        self.fault_intensity = FAULTS["default_intensity"]
        self.trail = deque(maxlen=DISPLAY["trail_length"])
        self.tick_count = 0

    @property
    def time(self) -> float:
        """Current simulated time (s)"""
        return self.clock.time

    @property
    def speed(self) -> float:
        return self.clock.speed

    @property
    def playing(self) -> bool:
        return self.clock.playing

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def configure(self, params: SimulationParameters):
        """Replace the supply parameters; effective from the next evaluation"""
        # Copy so floors are re-applied to instances mutated in place
        params = replace(params)
        amplitude_changed = params.amplitude != self._amplitude
        self._amplitude = params.amplitude
        self.params = params
        self.synthesizer.params = params
        self.statistics.params = params
        if amplitude_changed:
            self.statistics.reset(params)
        logger.debug("Configured %s", params)

    def set_fault_intensity(self, intensity: float) -> float:
        """Intensity (0.0-1.0) applied to faults triggered from now on"""
        self.fault_intensity = min(max(float(intensity), 0.0), 1.0)
        return self.fault_intensity

    def trigger_fault(self, fault_type):
        """Returns the new fault id, or None when the call is a no-op"""
        return self.registry.trigger(fault_type, self.time, self.fault_intensity)

    def clear_all_faults(self):
        self.registry.clear()

    def set_trigger_config(self, mode, level: float | None = None):
        self.trigger.set_config(mode, level)

    def set_speed(self, multiplier: float) -> float:
        return self.clock.set_speed(multiplier)

    def set_speed_preset(self, name: str) -> float:
        return self.set_speed(SPEED_PRESETS[name])

    def pause(self, wall_now: float | None = None):
        self.clock.pause(_wall(wall_now))

    def resume(self, wall_now: float | None = None):
        self.clock.resume(_wall(wall_now))

    def toggle_play(self, wall_now: float | None = None) -> bool:
        if self.playing:
            self.pause(wall_now)
        else:
            self.resume(wall_now)
        return self.playing

    def reset(self):
        """Back to t=0 with no faults, a bonded chassis and no DC offset"""
        self.clock.reset()
        self.registry.clear()
        self.trail.clear()
        self.configure(replace(self.params, dc_offset=0.0, chassis_grounded=True))
        self.statistics.reset(self.params)
        self.statistics.clear_history()
        self.tick_count = 0
        logger.info("Simulation reset")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def maintain(self) -> list:
        """Prune expired faults; never called mid-frame"""
        return self.registry.prune_expired(self.time)

    def tick(self, wall_now: float | None = None):
        """
        Advance the session to the given wall-clock instant.

        Args:
            wall_now: Wall-clock timestamp (s), defaults to time.monotonic()
        """
        wall_now = _wall(wall_now)
        self.clock.tick(wall_now)
        self.maintain()
        self.tick_count += 1

        if not self.playing:
            return

        self.trail.append(self.time - DISPLAY["frame_interval"])

        faults = self.registry.snapshot()
        l1 = self.synthesizer.value(self.time, L1_PHASE, faults)
        l2 = self.synthesizer.value(self.time, L2_PHASE, faults) if self.params.split_phase_mode else None
        self.statistics.update(self.time, l1, l2, faults, wall_now)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def value(self, t, phase_offset: float = L1_PHASE):
        return self.synthesizer.value(t, phase_offset)

    def sample_window(self, reference_time: float | None = None, phase_offset: float = L1_PHASE) -> SampleWindow:
        """
        Sample buffer for one displayed trace.

        Args:
            reference_time: Simulated time the trace is drawn for, defaults to
                the current time (pass older trail times for faded frames)
            phase_offset: Leg phase offset (radians)
        """
        if reference_time is None:
            reference_time = self.time

        window = self.trigger.window(reference_time, self.params)
        samples = self.sampler.sample(
            window.window_start,
            window.time_window,
            phase_offset,
            self.speed,
            faults=self.registry.snapshot(),
        )
        samples.trigger_time = window.trigger_time
        samples.trigger_level = window.trigger_level
        return samples

    def sample_legs(self, reference_time: float | None = None) -> dict:
        """Sample windows for every modelled leg, keyed "L1"/"L2"."""
        legs = {"L1": self.sample_window(reference_time, L1_PHASE)}
        if self.params.split_phase_mode:
            legs["L2"] = self.sample_window(reference_time, L2_PHASE)
        return legs

    def get_statistics_snapshot(self) -> VoltageStatistics:
        return self.statistics.snapshot()

    def get_transient_history(self, timebase_ms: float | None = None, now: float | None = None) -> list:
        return self.statistics.recent(timebase_ms, now)

    def active_faults(self) -> list:
        return self.registry.describe(self.time)


def _wall(wall_now):
    return time.monotonic() if wall_now is None else wall_now
