"""Oscilloscope-style time base and triggering."""

import math
from dataclasses import dataclass
from enum import Enum

from ..config import TRIGGER
from .parameters import SimulationParameters


class TriggerMode(str, Enum):
    NONE = "none"  # Free-running
    AUTO = "auto"  # Level trigger
    MANUAL = "manual"  # Fixed voltage trigger


@dataclass
class TriggerConfig:
    mode: TriggerMode = TriggerMode(TRIGGER["mode"])
    level: float = TRIGGER["level"]  # V, used in auto mode
    manual_voltage: float = TRIGGER["manual_voltage"]  # V, used in manual mode

    @property
    def target_voltage(self):
        """Voltage the trigger locks onto, None when free-running"""
        if self.mode is TriggerMode.AUTO:
            return self.level
        if self.mode is TriggerMode.MANUAL:
            return self.manual_voltage
        return None


@dataclass(frozen=True)
class TriggerWindow:
    window_start: float  # s
    time_window: float  # s
    trigger_time: float | None  # s, None when free-running
    trigger_level: float | None  # V


class TriggerEngine:
    """
    Selects the displayed time window.

    In auto and manual modes the window is centred on the rising-edge crossing
    of the target voltage within the current cycle, so consecutive frames show
    the same phase of the waveform. In free-running mode the window trails
    the reference time.
    """

    def __init__(self, config: TriggerConfig | None = None, cycles: int = TRIGGER["cycles_displayed"]):
        self.config = config if config is not None else TriggerConfig()
        self.cycles = cycles

    def set_config(self, mode, level: float | None = None):
        """Switch mode; level applies to the selected mode when given"""
        mode = TriggerMode(mode)
        self.config.mode = mode
        if level is not None:
            if mode is TriggerMode.AUTO:
                self.config.level = float(level)
            elif mode is TriggerMode.MANUAL:
                self.config.manual_voltage = float(level)

    def time_window(self, params: SimulationParameters) -> float:
        return self.cycles / params.frequency

    def crossing_time(self, reference_time: float, target: float, params: SimulationParameters) -> float:
        """
        Rising-edge crossing of target voltage in the cycle holding reference_time.

        Falls back to the cycle's zero crossing when the target lies outside
        the amplitude envelope.
        """
        period = params.period
        cycle_index = math.floor(reference_time / period)
        cycle_start = cycle_index * period

        adjusted = target - params.effective_offset
        if abs(adjusted) <= params.amplitude:
            # Principal branch of asin is the rising-edge solution
            phase = math.asin(adjusted / params.amplitude)
            return cycle_start + phase / (2 * math.pi * params.frequency)
        return cycle_start

    def window(self, reference_time: float, params: SimulationParameters) -> TriggerWindow:
        time_window = self.time_window(params)
        target = self.config.target_voltage

        if target is None:
            return TriggerWindow(reference_time - time_window, time_window, None, None)

        trigger_time = self.crossing_time(reference_time, target, params)
        return TriggerWindow(
            trigger_time - time_window / 2,
            time_window,
            trigger_time,
            target,
        )
