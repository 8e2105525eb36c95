import pytest

from mains_scope.engine import (
    FAULT_CATALOGUE,
    Fault,
    FaultRegistry,
    FaultType,
    SimulationParameters,
    WaveformSynthesizer,
)


@pytest.fixture
def params() -> SimulationParameters:
    return SimulationParameters(frequency=60.0, amplitude=170.0)


@pytest.fixture
def registry() -> FaultRegistry:
    return FaultRegistry()


@pytest.fixture
def synth(params, registry) -> WaveformSynthesizer:
    return WaveformSynthesizer(params, registry)


@pytest.fixture
def make_fault():
    """Build a Fault with catalogue duration and persistence"""

    def factory(fault_type, start_time=0.0, intensity=0.5, fault_id=0) -> Fault:
        fault_type = FaultType(fault_type)
        spec = FAULT_CATALOGUE[fault_type]
        return Fault(
            id=fault_id,
            type=fault_type,
            start_time=start_time,
            duration=spec.duration,
            intensity=intensity,
            persistent=spec.persistent,
        )

    return factory
