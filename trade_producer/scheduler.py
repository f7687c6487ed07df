"""
Fixed-period tick source
"""
import logging
import threading
import time
from typing import Callable


class Ticker:
    """Fires on fixed deadlines measured from a monotonic start time.

    Deadlines are ``start + n * period``, so a slow consumer does not push the
    schedule back. Ticks missed while the consumer was busy are dropped rather
    than delivered in a burst.
    """

    def __init__(self, period: float = 1.0, clock: Callable[[], float] = time.monotonic):
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")

        self.logger = logging.getLogger(self.__class__.__name__)
        self.period = period
        self._clock = clock
        self._start = None
        self._ticks = 0
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of ticks skipped because the consumer fell behind"""
        return self._dropped

    def start(self) -> None:
        self._start = self._clock()
        self._ticks = 0
        self._dropped = 0

    def stop(self) -> None:
        if self._dropped:
            self.logger.info(f"Ticker stopped, {self._dropped:,} ticks dropped")
        self._start = None

    def wait(self, cancel_event: threading.Event) -> bool:
        """Block until the next tick; return False if cancelled first"""
        if self._start is None:
            self.start()

        now = self._clock()
        next_tick = self._ticks + 1
        deadline = self._start + next_tick * self.period

        if now >= deadline + self.period:
            # Behind by at least one full period: skip to the next future deadline
            skip_to = int((now - self._start) // self.period) + 1
            self._dropped += skip_to - next_tick
            next_tick = skip_to
            deadline = self._start + next_tick * self.period

        if cancel_event.wait(timeout=max(0.0, deadline - now)):
            return False

        self._ticks = next_tick
        return True
