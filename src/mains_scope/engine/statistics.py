"""
Running voltage statistics and transient event history.

The RMS figure is a heuristic: nominal amplitude/sqrt(2) adjusted per active
fault type, not an integral over the synthesized samples. Peak extrema are
filtered so that arcing noise does not redefine the recorded peak unless it
is extreme.
"""

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum

from ..config import STATISTICS
from .faults import ARC_FAULTS, MOTOR_FAULTS, FaultType
from .parameters import SimulationParameters


class TransientEvent(str, Enum):
    NORMAL = "normal"
    SAG = "sag"
    SWELL = "swell"


@dataclass
class VoltageStatistics:
    peak_high: float
    peak_high_time: float
    peak_low: float
    peak_low_time: float
    max_rms: float
    max_rms_time: float
    min_rms: float
    min_rms_time: float

    @classmethod
    def nominal(cls, params: SimulationParameters) -> "VoltageStatistics":
        rms = params.nominal_rms
        return cls(
            peak_high=params.amplitude,
            peak_high_time=0.0,
            peak_low=-params.amplitude,
            peak_low_time=0.0,
            max_rms=rms,
            max_rms_time=0.0,
            min_rms=rms,
            min_rms_time=0.0,
        )


@dataclass(frozen=True)
class TransientSample:
    simulated_time: float  # s
    rms_estimate: float  # V
    peak_magnitude_l1: float  # V
    peak_magnitude_l2: float  # V
    active_fault_count: int
    wall_clock_timestamp: float  # s


# Fraction of nominal RMS added per unit intensity
RMS_ADJUSTMENTS = {
    FaultType.NEUTRAL_LOSS: 0.5,
    FaultType.PHASE_IMBALANCE: -0.2,
    FaultType.HARMONIC_DISTORTION: 0.1,
    **{fault_type: -0.3 for fault_type in MOTOR_FAULTS},
}
DEFAULT_RMS_ADJUSTMENT = 0.05


def stable_rms(faults, params: SimulationParameters, floor: float = STATISTICS["rms_floor"]) -> float:
    """
    Heuristic RMS estimate for the current fault set.

    Args:
        faults: Iterable of active faults
        params: Current supply parameters
        floor: Lower bound as a fraction of nominal RMS

    Returns:
        Estimated RMS voltage (V)
    """
    nominal = params.nominal_rms
    rms = nominal
    for fault in faults:
        adjustment = RMS_ADJUSTMENTS.get(fault.type, DEFAULT_RMS_ADJUSTMENT)
        rms += adjustment * fault.intensity * nominal
    return max(rms, floor * nominal)


def classify(sample: TransientSample, reference: float = STATISTICS["nominal_rms_reference"]) -> TransientEvent:
    """Power-quality classification against a fixed nominal reference"""
    if sample.rms_estimate < STATISTICS["sag_threshold"] * reference:
        return TransientEvent.SAG
    if sample.rms_estimate > STATISTICS["swell_threshold"] * reference:
        return TransientEvent.SWELL
    return TransientEvent.NORMAL


class StatisticsTracker:
    """Consumes one pair of instantaneous leg voltages per tick"""

    def __init__(
        self,
        params: SimulationParameters,
        capacity: int = STATISTICS["history_capacity"],
        record_interval: float = STATISTICS["record_interval"],
    ):
        self.params = params
        self.record_interval = record_interval
        self.history = deque(maxlen=capacity)
        self.stats = VoltageStatistics.nominal(params)
        self.last_rms = params.nominal_rms
        self._last_record_wall = None

    def reset(self, params: SimulationParameters | None = None):
        if params is not None:
            self.params = params
        self.stats = VoltageStatistics.nominal(self.params)
        self.last_rms = self.params.nominal_rms

    def clear_history(self):
        self.history.clear()
        self._last_record_wall = None

    def update(self, sim_time: float, l1: float, l2, faults, wall_now: float):
        """
        Fold one tick of measurements into the running statistics.

        Args:
            sim_time: Simulated time of the measurement (s)
            l1: Instantaneous L1 voltage (V)
            l2: Instantaneous L2 voltage (V), None in single-phase mode
            faults: Frozen snapshot of the active faults
            wall_now: Wall-clock timestamp (s)
        """
        faults = tuple(faults)
        arcing = any(fault.type in ARC_FAULTS for fault in faults)

        for value in (l1, l2):
            if value is not None:
                self._update_peaks(value, sim_time, arcing)

        rms = stable_rms(faults, self.params)
        self.last_rms = rms
        self._update_rms(rms, sim_time)

        if self._last_record_wall is None or wall_now - self._last_record_wall >= self.record_interval:
            self._last_record_wall = wall_now
            self.history.append(
                TransientSample(
                    simulated_time=sim_time,
                    rms_estimate=rms,
                    peak_magnitude_l1=abs(l1),
                    peak_magnitude_l2=abs(l2) if l2 is not None else 0.0,
                    active_fault_count=len(faults),
                    wall_clock_timestamp=wall_now,
                )
            )

    def _update_peaks(self, value: float, sim_time: float, arcing: bool):
        amplitude = self.params.amplitude
        stats = self.stats

        if arcing:
            # Arc noise only counts when it is extreme
            limit = STATISTICS["arc_peak_limit"] * amplitude
            accept_high = value > limit
            accept_low = value < -limit
        else:
            limit = STATISTICS["peak_limit"] * amplitude
            accept_high = value <= limit
            accept_low = value >= -limit

        if value > stats.peak_high and accept_high:
            stats.peak_high = value
            stats.peak_high_time = sim_time
        if value < stats.peak_low and accept_low:
            stats.peak_low = value
            stats.peak_low_time = sim_time

    def _update_rms(self, rms: float, sim_time: float):
        nominal = self.params.nominal_rms
        low, high = STATISTICS["rms_band"]
        if not low * nominal <= rms <= high * nominal:
            return

        stats = self.stats
        if rms > stats.max_rms:
            stats.max_rms = rms
            stats.max_rms_time = sim_time
        if rms < stats.min_rms:
            stats.min_rms = rms
            stats.min_rms_time = sim_time

    def snapshot(self) -> VoltageStatistics:
        return replace(self.stats)

    def recent(self, timebase_ms: float | None = None, now: float | None = None) -> list:
        """
        Transient samples within timebase_ms of now.

        Args:
            timebase_ms: Window length (ms), None for the whole history
            now: Wall-clock reference (s), defaults to the newest sample
        """
        samples = list(self.history)
        if timebase_ms is None or not samples:
            return samples
        if now is None:
            now = samples[-1].wall_clock_timestamp
        cutoff = now - timebase_ms / 1000.0
        return [s for s in samples if s.wall_clock_timestamp >= cutoff]

    def events(self, samples=None) -> list:
        """(sample, event) pairs for every sag or swell"""
        if samples is None:
            samples = self.history
        classified = [(sample, classify(sample)) for sample in samples]
        return [(s, e) for s, e in classified if e is not TransientEvent.NORMAL]
