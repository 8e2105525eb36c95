"""
Fault catalogue, active-fault registry and the fault effect model.

Every fault type perturbs the synthesized voltage as a function of the time
elapsed since the fault was triggered. Effects are evaluated against a frozen
view of the registry; expired faults are only removed by an explicit
maintenance pass between frames.
"""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .parameters import SimulationParameters, leg_of

logger = logging.getLogger(__name__)


class FaultType(str, Enum):
    MOTOR_START_L1 = "motor-start-l1"
    MOTOR_START_L2 = "motor-start-l2"
    MOTOR_START_240V = "motor-start-240v"
    AC_COMPRESSOR = "ac-compressor"
    RESISTIVE_SWITCH_L1 = "resistive-switch-l1"
    RESISTIVE_SWITCH_L2 = "resistive-switch-l2"
    ARC_FAULT_L1 = "arc-fault-l1"
    ARC_FAULT_L2 = "arc-fault-l2"
    ARC_FAULT_240V = "arc-fault-240v"
    IMBALANCED_240V = "imbalanced-240v"
    NEUTRAL_LOSS = "neutral-loss"
    PHASE_IMBALANCE = "phase-imbalance"
    GROUND_FAULT = "ground-fault"
    HARMONIC_DISTORTION = "harmonic-distortion"
    MOSFET_FAILURE = "mosfet-failure"
    TRANSFORMER_SATURATION = "transformer-saturation"
    DC_INJECTION = "dc-injection"
    FEEDBACK_OSCILLATION = "feedback-oscillation"

    @classmethod
    def parse(cls, value):
        """Return the matching FaultType, or None for unknown names"""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class FaultSpec:
    display_name: str
    description: str
    duration: float  # s
    persistent: bool
    legs: tuple  # Legs the effect is applied to
    severity: str  # "danger" or "warning"


BOTH = ("L1", "L2")

FAULT_CATALOGUE = {
    FaultType.MOTOR_START_L1: FaultSpec(
        "Motor Start (L1)",
        "Motor startup transient - High inrush current detected",
        0.5, False, ("L1",), "warning",
    ),
    FaultType.MOTOR_START_L2: FaultSpec(
        "Motor Start (L2)",
        "Motor startup transient - High inrush current detected",
        0.5, False, ("L2",), "warning",
    ),
    FaultType.MOTOR_START_240V: FaultSpec(
        "Heavy Motor (240V)",
        "Heavy 240V motor startup - Voltage sag on both phases",
        0.5, False, BOTH, "warning",
    ),
    FaultType.AC_COMPRESSOR: FaultSpec(
        "A/C Compressor",
        "Heavy 240V motor startup - Voltage sag on both phases",
        0.5, False, BOTH, "warning",
    ),
    FaultType.RESISTIVE_SWITCH_L1: FaultSpec(
        "Switch (L1)",
        "Resistive load switching transient",
        0.05, False, ("L1",), "warning",
    ),
    FaultType.RESISTIVE_SWITCH_L2: FaultSpec(
        "Switch (L2)",
        "Resistive load switching transient",
        0.05, False, ("L2",), "warning",
    ),
    FaultType.ARC_FAULT_L1: FaultSpec(
        "Arc Fault (L1)",
        "ARC FAULT DETECTED - Fire hazard present!",
        0.3, False, ("L1",), "danger",
    ),
    FaultType.ARC_FAULT_L2: FaultSpec(
        "Arc Fault (L2)",
        "ARC FAULT DETECTED - Fire hazard present!",
        0.3, False, ("L2",), "danger",
    ),
    FaultType.ARC_FAULT_240V: FaultSpec(
        "Arc Fault (240V)",
        "ARC FAULT DETECTED - Fire hazard present!",
        0.3, False, BOTH, "danger",
    ),
    FaultType.IMBALANCED_240V: FaultSpec(
        "Imbalanced 240V",
        "Phase imbalance detected - Uneven loading",
        10.0, False, ("L2",), "warning",
    ),
    FaultType.NEUTRAL_LOSS: FaultSpec(
        "NEUTRAL LOSS",
        "NEUTRAL LOSS - EXTREME DANGER! 240V on 120V circuits!",
        10.0, True, BOTH, "danger",
    ),
    FaultType.PHASE_IMBALANCE: FaultSpec(
        "Phase Imbalance",
        "Phase imbalance detected - Uneven loading",
        10.0, True, ("L2",), "warning",
    ),
    FaultType.GROUND_FAULT: FaultSpec(
        "Ground Fault",
        "Ground fault detected - Protective device should trip",
        2.0, False, BOTH, "danger",
    ),
    FaultType.HARMONIC_DISTORTION: FaultSpec(
        "Harmonics",
        "Harmonic distortion - Non-linear loads affecting power quality",
        5.0, False, BOTH, "warning",
    ),
    FaultType.MOSFET_FAILURE: FaultSpec(
        "MOSFET Failure",
        "MOSFET failure - Inverter malfunction detected",
        10.0, True, ("L1",), "danger",
    ),
    FaultType.TRANSFORMER_SATURATION: FaultSpec(
        "Transformer Sat.",
        "Transformer saturation - Core overflux condition",
        10.0, True, BOTH, "warning",
    ),
    FaultType.DC_INJECTION: FaultSpec(
        "DC Injection",
        "DC injection detected - Transformer heating risk",
        10.0, True, BOTH, "warning",
    ),
    FaultType.FEEDBACK_OSCILLATION: FaultSpec(
        "Feedback Osc.",
        "Control feedback oscillation - System instability",
        0.8, False, BOTH, "warning",
    ),
}

ARC_FAULTS = frozenset(
    {FaultType.ARC_FAULT_L1, FaultType.ARC_FAULT_L2, FaultType.ARC_FAULT_240V}
)

MOTOR_FAULTS = frozenset(
    {
        FaultType.MOTOR_START_L1,
        FaultType.MOTOR_START_L2,
        FaultType.MOTOR_START_240V,
        FaultType.AC_COMPRESSOR,
    }
)


@dataclass(frozen=True)
class Fault:
    id: int
    type: FaultType
    start_time: float  # Simulated time at creation (s)
    duration: float  # s, ignored when persistent
    intensity: float  # 0.0-1.0
    persistent: bool

    @property
    def spec(self) -> FaultSpec:
        return FAULT_CATALOGUE[self.type]

    def elapsed(self, t: float) -> float:
        return t - self.start_time

    def is_expired(self, t: float) -> bool:
        return not self.persistent and self.elapsed(t) > self.duration

    def status(self, t: float) -> str:
        if self.persistent:
            return "PERSISTENT"
        return f"{self.elapsed(t):.1f}s / {self.duration:.1f}s"


class FaultRegistry:
    """Insertion-ordered mapping of fault id -> Fault"""

    def __init__(self):
        self._faults = {}
        self._ids = itertools.count()

    def __len__(self):
        return len(self._faults)

    def __iter__(self):
        return iter(self._faults.values())

    def __contains__(self, fault_id):
        return fault_id in self._faults

    def get(self, fault_id):
        return self._faults.get(fault_id)

    def snapshot(self) -> tuple:
        """Frozen view of the active faults for one frame of evaluations"""
        return tuple(self._faults.values())

    def has_type(self, fault_type: FaultType) -> bool:
        return any(fault.type == fault_type for fault in self._faults.values())

    def count_type(self, fault_type: FaultType) -> int:
        return sum(1 for fault in self._faults.values() if fault.type == fault_type)

    def trigger(self, fault_type, now: float, intensity: float):
        """
        Create a new fault starting at the given simulated time.

        Args:
            fault_type: FaultType or its string name
            now: Current simulated time (s)
            intensity: Scale factor applied to every magnitude (0.0-1.0)

        Returns:
            The new fault id, or None if the type is unknown or a persistent
            fault of that type is already active
        """
        parsed = FaultType.parse(fault_type)
        if parsed is None:
            logger.warning("Rejected unknown fault type %r", fault_type)
            return None

        spec = FAULT_CATALOGUE[parsed]
        if spec.persistent and self.has_type(parsed):
            logger.debug("Persistent fault %s already active", parsed.value)
            return None

        fault = Fault(
            id=next(self._ids),
            type=parsed,
            start_time=now,
            duration=spec.duration,
            intensity=min(max(float(intensity), 0.0), 1.0),
            persistent=spec.persistent,
        )
        self._faults[fault.id] = fault
        logger.info(
            "Fault %d triggered: %s at t=%.4fs (intensity %.0f%%)",
            fault.id,
            parsed.value,
            now,
            fault.intensity * 100,
        )
        return fault.id

    def clear(self):
        if self._faults:
            logger.info("Cleared %d active fault(s)", len(self._faults))
        self._faults.clear()

    def prune_expired(self, now: float) -> list:
        """Remove non-persistent faults whose duration has elapsed"""
        expired = [fault for fault in self._faults.values() if fault.is_expired(now)]
        for fault in expired:
            del self._faults[fault.id]
            logger.debug("Fault %d expired: %s", fault.id, fault.type.value)
        return expired

    def describe(self, now: float) -> list:
        """Active fault list entries for display"""
        return [
            {
                "id": fault.id,
                "name": fault.spec.display_name,
                "severity": fault.spec.severity,
                "status": fault.status(now),
                "intensity": fault.intensity,
            }
            for fault in self._faults.values()
        ]


class FaultEffectModel:
    """
    Maps (time, phase offset, base value, fault) to a voltage perturbation.

    Pseudo-random fault shapes draw from the injected numpy Generator, so a
    seeded generator gives reproducible waveforms.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self._shapes = {
            FaultType.MOTOR_START_L1: self._motor_start,
            FaultType.MOTOR_START_L2: self._motor_start,
            FaultType.MOTOR_START_240V: self._heavy_motor_start,
            FaultType.AC_COMPRESSOR: self._heavy_motor_start,
            FaultType.RESISTIVE_SWITCH_L1: self._resistive_switch,
            FaultType.RESISTIVE_SWITCH_L2: self._resistive_switch,
            FaultType.ARC_FAULT_L1: self._arc_fault,
            FaultType.ARC_FAULT_L2: self._arc_fault,
            FaultType.ARC_FAULT_240V: self._arc_fault_240v,
            FaultType.IMBALANCED_240V: self._constant(-0.5),
            FaultType.NEUTRAL_LOSS: self._constant(0.6),
            FaultType.PHASE_IMBALANCE: self._constant(-0.3),
            FaultType.GROUND_FAULT: self._constant(0.2),
            FaultType.HARMONIC_DISTORTION: self._harmonic_distortion,
            FaultType.MOSFET_FAILURE: self._mosfet_failure,
            FaultType.TRANSFORMER_SATURATION: self._transformer_saturation,
            FaultType.DC_INJECTION: self._constant(0.4),
            FaultType.FEEDBACK_OSCILLATION: self._feedback_oscillation,
        }

    def effect(
        self,
        t,
        phase_offset: float,
        base,
        fault: Fault,
        params: SimulationParameters,
    ):
        """
        Voltage perturbation caused by one fault.

        Args:
            t: Simulated time (s), scalar or np.ndarray
            phase_offset: Leg phase offset (radians), 0 for L1 and pi for L2
            base: Unfaulted signal value(s) at t (sinusoid + effective offset)
            fault: Fault to evaluate
            params: Current supply parameters

        Returns:
            Perturbation (V) with the same shape as t; zero before onset,
            after expiry, or on legs the fault does not affect
        """
        t = np.asarray(t, dtype=float)
        if leg_of(phase_offset) not in fault.spec.legs:
            return _like(t, np.zeros_like(t))

        base = np.broadcast_to(np.asarray(base, dtype=float), t.shape)
        elapsed = t - fault.start_time
        active = elapsed >= 0
        if not fault.persistent:
            active &= elapsed <= fault.duration

        # Shapes are evaluated on clipped elapsed time so inactive samples
        # never overflow the exponentials
        scale = params.amplitude * fault.intensity
        shape = self._shapes[fault.type]
        value = shape(np.clip(elapsed, 0.0, None), t, phase_offset, base, scale, params)
        return _like(t, np.where(active, value, 0.0))

    @staticmethod
    def _motor_start(e, t, phase_offset, base, scale, params):
        # Damped 180Hz inrush ringing
        return scale * np.exp(-e * 5) * np.sin(2 * np.pi * 180 * e)

    @staticmethod
    def _heavy_motor_start(e, t, phase_offset, base, scale, params):
        damping = np.exp(-e * 3)
        sag = -scale * 0.3 * damping
        oscillation = scale * 0.5 * damping * np.sin(2 * np.pi * 120 * e)
        return sag + oscillation

    @staticmethod
    def _resistive_switch(e, t, phase_offset, base, scale, params):
        burst = scale * 0.3 * np.exp(-e * 40) * np.sin(2 * np.pi * 1000 * e)
        return np.where(e < 0.05, burst, 0.0)

    def _arc_noise(self, shape):
        # Bounded to +/-0.5 whatever the injected generator returns
        return np.clip(self.rng.random(shape) - 0.5, -0.5, 0.5)

    def _arc_fault(self, e, t, phase_offset, base, scale, params):
        noise = self._arc_noise(e.shape)
        return scale * 0.4 * noise * np.sin(2 * np.pi * 500 * e)

    def _arc_fault_240v(self, e, t, phase_offset, base, scale, params):
        noise = self._arc_noise(e.shape)
        return scale * 0.3 * noise * np.sin(2 * np.pi * 300 * e)

    @staticmethod
    def _constant(fraction):
        def shape(e, t, phase_offset, base, scale, params):
            return np.full_like(e, scale * fraction)

        return shape

    @staticmethod
    def _harmonic_distortion(e, t, phase_offset, base, scale, params):
        w = 2 * np.pi * params.frequency
        third = np.sin(w * 3 * t + phase_offset) * 0.6
        fifth = np.sin(w * 5 * t + phase_offset) * 0.4
        return scale * 0.3 * (third + fifth)

    @staticmethod
    def _mosfet_failure(e, t, phase_offset, base, scale, params):
        # Negative half-cycle of the ideal sinusoid is clamped upwards
        ideal = np.sin(2 * np.pi * params.frequency * t)
        return scale * 0.5 + np.where(ideal < 0, scale * 0.8, 0.0)

    @staticmethod
    def _transformer_saturation(e, t, phase_offset, base, scale, params):
        intensity = scale / params.amplitude
        saturation_level = params.amplitude * (1 - intensity * 0.3)
        return np.where(np.abs(base) > saturation_level, scale * 0.8 * np.sign(base), 0.0)

    def _feedback_oscillation(self, e, t, phase_offset, base, scale, params):
        frequency = self.rng.uniform(800, 1000, e.shape)
        return scale * 0.3 * np.sin(2 * np.pi * frequency * e) * np.exp(-e * 2)


def _like(t: np.ndarray, value: np.ndarray):
    """Return a float for scalar input, an array otherwise"""
    if t.ndim == 0:
        return float(value)
    return value
