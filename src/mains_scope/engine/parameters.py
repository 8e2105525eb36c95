"""Mains supply parameters shared by every engine component."""

import math
from dataclasses import dataclass

from ..config import LIMITS, MAINS

L1_PHASE = 0.0
L2_PHASE = math.pi


@dataclass
class SimulationParameters:
    """
    Split-phase supply description.

    Attributes:
        frequency: Mains frequency (Hz), floored at LIMITS["min_frequency"]
        amplitude: Peak voltage per leg (V), floored at LIMITS["min_amplitude"]
        dc_offset: DC offset (V), only effective when the chassis is floating
        chassis_grounded: Bonded chassis, removes the DC offset
        split_phase_mode: Model L2 as L1 shifted by 180°
    """

    frequency: float = MAINS["frequency"]
    amplitude: float = MAINS["amplitude"]
    dc_offset: float = MAINS["dc_offset"]
    chassis_grounded: bool = MAINS["chassis_grounded"]
    split_phase_mode: bool = MAINS["split_phase_mode"]

    def __post_init__(self):
        self.frequency = max(float(self.frequency), LIMITS["min_frequency"])
        self.amplitude = max(float(self.amplitude), LIMITS["min_amplitude"])
        self.dc_offset = float(self.dc_offset)

    @classmethod
    def from_config(cls) -> "SimulationParameters":
        return cls(**MAINS)

    @property
    def period(self) -> float:
        return 1.0 / self.frequency

    @property
    def effective_offset(self) -> float:
        """DC offset actually present on the signal"""
        return 0.0 if self.chassis_grounded else self.dc_offset

    @property
    def nominal_rms(self) -> float:
        return self.amplitude / math.sqrt(2)

    @property
    def phase_offsets(self) -> tuple:
        """Phase offsets of every modelled leg"""
        if self.split_phase_mode:
            return (L1_PHASE, L2_PHASE)
        return (L1_PHASE,)


def leg_of(phase_offset: float):
    """Return "L1", "L2" or None for an arbitrary phase offset (radians)"""
    wrapped = math.remainder(phase_offset, 2 * math.pi)
    if math.isclose(wrapped, 0.0, abs_tol=1e-9):
        return "L1"
    if math.isclose(abs(wrapped), math.pi, abs_tol=1e-9):
        return "L2"
    return None
