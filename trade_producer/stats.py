"""
Throughput statistics for the trade producer
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import humanize


def natural_bytes(num_bytes: int) -> str:
    """humanize.naturalsize, rounded to its displayed digits first so 999.95 kB reads 1.0 MB"""
    return humanize.naturalsize(float(f"{num_bytes:.4g}"))


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the producer counters"""
    messages_sent: int
    errors: int
    bytes_sent: int
    start_time: float
    elapsed: float

    @property
    def elapsed_seconds(self) -> int:
        """Elapsed time truncated to whole seconds"""
        return int(self.elapsed)

    @property
    def rate(self) -> float:
        """Messages per second over the truncated elapsed time"""
        if self.messages_sent == 0 or self.elapsed_seconds == 0:
            return 0.0
        return self.messages_sent / self.elapsed_seconds

    def report_line(self) -> str:
        """Single-line human-readable status"""
        rate = f"{humanize.intcomma(round(self.rate))}/sec"
        return (
            f"duration={str(self.elapsed_seconds) + 's':<10} | "
            f"rate={rate:<10} | "
            f"sent={humanize.intcomma(self.messages_sent):<10} | "
            f"bytes={natural_bytes(self.bytes_sent):<10} | "
            f"errors={humanize.intcomma(self.errors):<10}"
        )


class StatsAggregator:
    """Running totals of sent messages, errors and bytes"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._messages_sent = 0
        self._errors = 0
        self._bytes_sent = 0
        self._start_time = clock()

    @property
    def start_time(self) -> float:
        return self._start_time

    def restart(self, start_time: Optional[float] = None) -> None:
        """Reset the start time used for duration and rate"""
        with self._lock:
            self._start_time = self._clock() if start_time is None else start_time

    def record(self, messages_delta: int = 0, errors_delta: int = 0, bytes_delta: int = 0) -> None:
        """Fold deltas into the running totals"""
        if messages_delta < 0 or errors_delta < 0 or bytes_delta < 0:
            raise ValueError(
                f"Counter deltas must not be negative: messages={messages_delta}, "
                f"errors={errors_delta}, bytes={bytes_delta}"
            )

        with self._lock:
            self._messages_sent += messages_delta
            self._errors += errors_delta
            self._bytes_sent += bytes_delta

    def snapshot(self) -> StatsSnapshot:
        """Return the current totals and elapsed duration"""
        with self._lock:
            messages_sent = self._messages_sent
            errors = self._errors
            bytes_sent = self._bytes_sent
            start_time = self._start_time

        return StatsSnapshot(
            messages_sent=messages_sent,
            errors=errors,
            bytes_sent=bytes_sent,
            start_time=start_time,
            elapsed=max(0.0, self._clock() - start_time),
        )

    def report(self) -> str:
        return self.snapshot().report_line()
