# Mains Scope - split-phase AC waveform and fault-injection simulator
#
# Usage:
#   from mains_scope import SimulationSession, SimulationParameters
#
#   session = SimulationSession(seed=1)
#   session.trigger_fault("neutral-loss")
#   session.tick()
#   window = session.sample_window()

from .engine import (
    FaultType,
    SampleWindow,
    SimulationParameters,
    TransientSample,
    TriggerMode,
    VoltageStatistics,
)
from .session import SimulationSession

__all__ = [
    "FaultType",
    "SampleWindow",
    "SimulationParameters",
    "SimulationSession",
    "TransientSample",
    "TriggerMode",
    "VoltageStatistics",
]
__version__ = "1.0.0"
