"""Simulation clock decoupled from wall-clock callbacks.

One GameTimeManager is shared by everything that runs in a scene, so all
frame-driven systems agree on elapsed time. Pausing freezes simulation time.
"""

from typing import Callable, Optional
import time


def _perf_counter_ms() -> float:
    return time.perf_counter() * 1000.0


class ManualClock:
    """A millisecond clock that only moves when told to.

    Used for headless runs and tests in place of the real-time clock.
    """

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, milliseconds: float) -> None:
        self.now += milliseconds

    def __call__(self) -> float:
        return self.now


class GameTimeManager:
    """Frame clock measuring simulation time in milliseconds."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """Initialize the time manager.

        Args:
            clock: Callable returning the current real time in milliseconds
        """
        self._clock = clock or _perf_counter_ms
        self._accumulated_time = 0.0
        self._last_update_time = 0.0
        self._paused = False
        self._time_scale = 1.0
        self.reset()

    def reset(self) -> None:
        """Zero the accumulated time and anchor to the current moment."""
        now = self._clock()
        self._accumulated_time = 0.0
        self._last_update_time = now
        self._paused = False

    def update(self) -> None:
        """Advance simulation time to the current moment."""
        if self._paused:
            return

        now = self._clock()
        self._accumulated_time += (now - self._last_update_time) * self._time_scale
        self._last_update_time = now

    def get_delta_time(self) -> float:
        """Scaled milliseconds since the last update(); 0 while paused."""
        if self._paused:
            return 0.0
        return (self._clock() - self._last_update_time) * self._time_scale

    def get_total_time(self) -> float:
        """Accumulated simulation milliseconds since the last reset()."""
        return self._accumulated_time

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        # Re-anchor so the paused interval is never counted
        if self._paused:
            self._last_update_time = self._clock()
            self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    def set_time_scale(self, scale: float) -> None:
        self._time_scale = max(0.0, scale)

    def get_time_scale(self) -> float:
        return self._time_scale
