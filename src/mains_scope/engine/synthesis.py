"""Instantaneous split-phase voltage synthesis."""

import numpy as np

from .faults import FaultEffectModel, FaultRegistry
from .parameters import SimulationParameters


class WaveformSynthesizer:
    """
    Composes the ideal sinusoid, the DC offset policy and the linear
    superposition of every active fault perturbation.

    Evaluation has no side effects and may be called for any time in any
    order; the registry is only read.
    """

    def __init__(
        self,
        params: SimulationParameters,
        registry: FaultRegistry,
        effects: FaultEffectModel | None = None,
    ):
        self.params = params
        self.registry = registry
        self.effects = effects if effects is not None else FaultEffectModel()

    def base_value(self, t, phase_offset: float = 0.0):
        """Unfaulted signal: sinusoid plus the effective DC offset"""
        t = np.asarray(t, dtype=float)
        p = self.params
        base = p.amplitude * np.sin(2 * np.pi * p.frequency * t + phase_offset)
        base = base + p.effective_offset
        return float(base) if base.ndim == 0 else base

    def value(self, t, phase_offset: float = 0.0, faults=None):
        """
        Instantaneous voltage of one leg.

        Args:
            t: Simulated time (s), scalar or np.ndarray
            phase_offset: Leg phase offset (radians), 0 for L1 and pi for L2
            faults: Optional frozen fault snapshot, defaults to the registry

        Returns:
            Voltage (V) as a float for scalar t, np.ndarray otherwise
        """
        base = self.base_value(t, phase_offset)
        if faults is None:
            faults = self.registry.snapshot()

        total = base
        for fault in faults:
            total = total + self.effects.effect(t, phase_offset, base, fault, self.params)
        return total
