# utils/clock.py
"""
Time sources used by commands to measure elapsed run time.

A clock is any zero-argument callable returning milliseconds as a float.
Commands default to the monotonic clock; simulations and tests drive a
``ManualClock``. Keeping milliseconds end to end means elapsed time is a
single subtraction, so whole-millisecond boundaries compare exactly.
"""
import time
from typing import Callable

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default clock: monotonic milliseconds, immune to wall-clock jumps."""
    return time.monotonic_ns() / 1_000_000


def elapsed_ms(clock: Clock, since_ms: float) -> float:
    return clock() - since_ms


class ManualClock:
    """A clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self._now_ms = float(start_ms)

    def __call__(self) -> float:
        return self._now_ms

    def advance_ms(self, millis: float) -> float:
        """Move the clock forward and return the new time in milliseconds."""
        if millis < 0:
            raise ValueError("ManualClock cannot move backwards.")
        self._now_ms += millis
        return self._now_ms

    def set_ms(self, millis: float):
        self._now_ms = float(millis)

    def now_ms(self) -> float:
        return self._now_ms
