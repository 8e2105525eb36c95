"""
Derived display values: parameter readouts, safety alerts and measured
window analysis. None of these feed back into the engine.
"""

import numpy as np

from ..config import VOLTAGE_STANDARDS
from ..engine import FaultRegistry, SampleWindow, SimulationParameters


def voltage_standard(amplitude: float) -> str:
    """Label of the voltage standard matching a peak amplitude"""
    for standard_amplitude, label in VOLTAGE_STANDARDS.items():
        if np.isclose(amplitude, standard_amplitude):
            return label
    return "Custom Voltage Level"


def calculate_readouts(params: SimulationParameters, sim_time: float, speed: float) -> dict:
    """
    Nominal parameter readouts for the current configuration.

    Args:
        params: Current supply parameters
        sim_time: Simulated time (s)
        speed: Playback speed multiplier

    Returns:
        Dictionary of readout values (volts unless noted)
    """
    offset = params.effective_offset

    return {
        "peak_to_peak": params.amplitude * 2,
        "rms_voltage": params.nominal_rms,
        "zero_crossing": offset,
        "max_positive": params.amplitude + offset,
        "max_negative": -params.amplitude + offset,
        "ground_state": "Bonded" if params.chassis_grounded else "Floating",
        "sim_time": sim_time,  # s
        "time_rate": speed,  # x real time
        "voltage_standard": voltage_standard(params.amplitude),
    }


def safety_alerts(params: SimulationParameters, registry: FaultRegistry) -> list:
    """
    Safety alerts for the current configuration and active faults.

    Returns:
        List of {"severity": "danger" | "warning", "message": str}
    """
    alerts = []
    offset = params.effective_offset

    if abs(offset) > 30:
        alerts.append(
            {
                "severity": "danger",
                "message": f"DANGER: Zero crossing elevated to {offset:g}V - Electrical hazard!",
            }
        )

    if not params.chassis_grounded and abs(params.dc_offset) > 10:
        alerts.append(
            {
                "severity": "warning",
                "message": "WARNING: Floating ground may cause waveform instability",
            }
        )

    for fault in registry:
        alerts.append({"severity": fault.spec.severity, "message": fault.spec.description})

    return alerts


def analyze_harmonics(
    signal: np.ndarray,
    sampling_freq: float,
    fundamental_freq: float,
    max_harmonic: int = 15,
) -> dict[int, float]:
    """
    Analyze harmonics in a signal using FFT.

    Args:
        signal: Time-domain signal samples
        sampling_freq: Sampling frequency (Hz)
        fundamental_freq: Fundamental frequency (Hz)
        max_harmonic: Maximum harmonic number to extract (capped at Nyquist)

    Returns:
        Dictionary {harmonic_number: amplitude} for harmonics 1 to max_harmonic
    """
    fft_result = np.fft.rfft(signal)
    fft_magnitude = np.abs(fft_result) * 2 / len(signal)
    freqs = np.fft.rfftfreq(len(signal), 1 / sampling_freq)

    harmonics = {}
    for harmonic_num in range(1, max_harmonic + 1):
        target_freq = fundamental_freq * harmonic_num
        if target_freq > freqs[-1]:
            break
        # Find closest frequency bin
        idx = np.argmin(np.abs(freqs - target_freq))
        harmonics[harmonic_num] = float(fft_magnitude[idx])

    return harmonics


def calculate_thd(harmonics: dict[int, float]) -> float:
    """
    Calculate Total Harmonic Distortion (THD).

    Args:
        harmonics: Dictionary {harmonic_number: amplitude} from analyze_harmonics

    Returns:
        THD as a ratio (multiply by 100 for percentage)
    """
    if 1 not in harmonics or harmonics[1] == 0:
        return 0.0

    fundamental = harmonics[1]
    harmonic_sum_squared = sum(
        amp**2 for harm_num, amp in harmonics.items() if harm_num > 1
    )
    return float(np.sqrt(harmonic_sum_squared) / fundamental)


def measure_window(window: SampleWindow, frequency: float) -> dict:
    """
    Measured values of a displayed sample window.

    The window always spans a whole number of cycles, so FFT bins land on
    the harmonics without leakage.

    Args:
        window: Sample window from SimulationSession.sample_window
        frequency: Fundamental frequency (Hz)

    Returns:
        Dictionary with true RMS, crest factor, DC component, harmonics and THD
    """
    samples = np.asarray(window.samples, dtype=np.float64)
    true_rms = float(np.sqrt(np.mean(samples**2)))
    peak = float(np.max(np.abs(samples)))

    harmonics = analyze_harmonics(samples, 1 / window.effective_time_step, frequency)

    return {
        "true_rms": true_rms,
        "crest_factor": peak / true_rms if true_rms > 0 else 0.0,
        "dc_component": float(np.mean(samples)),
        "harmonics": harmonics,
        "thd": calculate_thd(harmonics),
    }
