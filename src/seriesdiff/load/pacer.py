"""Constant-rate permit scheduler for load generation."""

import math
import threading
import time
from typing import Callable, Iterator, Optional


class Pacer:
    """Emit ``floor(rate * duration)`` permits, one every ``1 / rate`` seconds.

    Permit ``i`` is due at ``start + i / rate``. Iteration sleeps until each
    permit is due and ends early once stop() is called. Consumers must hand
    the actual work off elsewhere so a slow request never delays the next
    permit.
    """

    def __init__(
        self,
        rate: float,
        duration: float,
        clock: Callable[[], float] = time.monotonic,
        stop_event: Optional[threading.Event] = None,
    ):
        if rate <= 0:
            raise ValueError(f"Rate must be positive (got {rate})")
        if duration < 0:
            raise ValueError(f"Duration cannot be negative (got {duration})")

        self.rate = rate
        self.duration = duration
        self.clock = clock
        self._stop = stop_event or threading.Event()
        self.start: Optional[float] = None

    @property
    def ticks(self) -> int:
        # Tolerate float noise such as 10 * 0.3 == 2.9999999999999996
        return int(math.floor(self.rate * self.duration + 1e-9))

    @property
    def interval(self) -> float:
        return 1.0 / self.rate

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def due(self, tick: int) -> float:
        """Clock reading at which permit ``tick`` is scheduled."""
        if self.start is None:
            raise RuntimeError("Pacer has not started")
        return self.start + tick * self.interval

    def __iter__(self) -> Iterator[int]:
        self.start = self.clock()
        for tick in range(self.ticks):
            wait = self.due(tick) - self.clock()
            if wait > 0 and self._stop.wait(wait):
                return
            if self._stop.is_set():
                return
            yield tick
