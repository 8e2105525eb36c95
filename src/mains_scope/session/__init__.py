"""
Simulation session: sequences the engine components once per tick.
"""

from .session import SimulationSession

__all__ = ["SimulationSession"]
