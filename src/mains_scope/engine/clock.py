"""Simulated time base driven by wall-clock ticks."""

import logging

from ..config import LIMITS

logger = logging.getLogger(__name__)


class ClockModel:
    """
    Maps elapsed real time and a speed multiplier to simulated time.

    Each tick advances simulated time by the real time elapsed since the
    previous tick, scaled by the speed multiplier. While paused the wall-clock
    anchor keeps moving so that resuming never produces a time jump.
    """

    def __init__(self, speed: float = 1.0):
        self.time = 0.0
        self.speed = self.clamp_speed(speed)
        self.playing = True
        self._last_wall = None

    @staticmethod
    def clamp_speed(speed: float) -> float:
        """Clamp a speed multiplier to the supported range"""
        return min(max(float(speed), LIMITS["min_speed"]), LIMITS["max_speed"])

    def set_speed(self, speed: float) -> float:
        self.speed = self.clamp_speed(speed)
        return self.speed

    def tick(self, wall_now: float) -> float:
        """
        Advance simulated time to match the given wall-clock instant.

        Args:
            wall_now: Wall-clock timestamp (s)

        Returns:
            Simulated seconds added by this tick
        """
        if self._last_wall is None or not self.playing:
            self._last_wall = wall_now
            return 0.0

        # Non-monotonic wall clocks never move simulated time backwards
        elapsed = max(0.0, wall_now - self._last_wall)
        self._last_wall = wall_now

        delta = elapsed * self.speed
        self.time += delta
        return delta

    def pause(self, wall_now: float):
        if self.playing:
            self.playing = False
            self._last_wall = wall_now
            logger.debug("Clock paused at t=%.4fs", self.time)

    def resume(self, wall_now: float):
        if not self.playing:
            self.playing = True
            self._last_wall = wall_now
            logger.debug("Clock resumed at t=%.4fs", self.time)

    def reset(self):
        self.time = 0.0
        self._last_wall = None
