"""
Signal synthesis and timing engine for split-phase mains visualization.
"""

from .clock import ClockModel
from .faults import (
    ARC_FAULTS,
    FAULT_CATALOGUE,
    MOTOR_FAULTS,
    Fault,
    FaultEffectModel,
    FaultRegistry,
    FaultSpec,
    FaultType,
)
from .parameters import L1_PHASE, L2_PHASE, SimulationParameters, leg_of
from .sampler import AdaptiveSampler, SampleWindow, resolution_multiplier
from .statistics import (
    StatisticsTracker,
    TransientEvent,
    TransientSample,
    VoltageStatistics,
    classify,
    stable_rms,
)
from .synthesis import WaveformSynthesizer
from .trigger import TriggerConfig, TriggerEngine, TriggerMode, TriggerWindow

__all__ = [
    "ClockModel",
    "ARC_FAULTS",
    "FAULT_CATALOGUE",
    "MOTOR_FAULTS",
    "Fault",
    "FaultEffectModel",
    "FaultRegistry",
    "FaultSpec",
    "FaultType",
    "L1_PHASE",
    "L2_PHASE",
    "SimulationParameters",
    "leg_of",
    "AdaptiveSampler",
    "SampleWindow",
    "resolution_multiplier",
    "StatisticsTracker",
    "TransientEvent",
    "TransientSample",
    "VoltageStatistics",
    "classify",
    "stable_rms",
    "WaveformSynthesizer",
    "TriggerConfig",
    "TriggerEngine",
    "TriggerMode",
    "TriggerWindow",
]
