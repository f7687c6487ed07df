"""Pytest configuration and shared fixtures."""

import random
import threading
from typing import List, Optional

import pytest

from trade_producer.config import ProducerConfig
from trade_producer.errors import PublishError
from trade_producer.generator import TradeRecord
from trade_producer.producer import BatchProducer
from trade_producer.publisher import PublisherStats
from trade_producer.stats import StatsAggregator


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePublisher:
    """In-memory publish capability; fails on the given 1-based call."""

    def __init__(self, fail_on: Optional[int] = None, on_publish=None):
        self.fail_on = fail_on
        self.on_publish = on_publish
        self.batches: List[List[TradeRecord]] = []
        self.acked = 0
        self.errors = 0
        self.bytes_written = 0
        self.closed = False

    def publish(self, batch):
        self.batches.append(list(batch))
        if self.on_publish is not None:
            self.on_publish(len(self.batches))
        if self.fail_on == len(self.batches):
            self.errors += len(batch)
            raise PublishError("broker unavailable", failed=len(batch))
        self.acked += len(batch)
        self.bytes_written += sum(len(record.serialize()) for record in batch)

    def stats(self) -> PublisherStats:
        return PublisherStats(
            messages_acked=self.acked,
            errors=self.errors,
            bytes_written=self.bytes_written,
        )

    def close(self):
        self.closed = True


class FakeTicker:
    """Fires a fixed number of ticks without sleeping, then reports cancellation."""

    def __init__(self, ticks: int, on_tick=None):
        self.ticks = ticks
        self.on_tick = on_tick
        self.fired = 0
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def wait(self, cancel_event: threading.Event) -> bool:
        if cancel_event.is_set() or self.fired >= self.ticks:
            return False
        self.fired += 1
        if self.on_tick is not None:
            self.on_tick(self.fired)
        return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_config() -> ProducerConfig:
    """Create test configuration."""
    return ProducerConfig(
        broker_address="localhost:9092",
        topic_name="test-stocks",
        partition_count=3,
        message_rate=2,
        publish_timeout=1.0,
        admin_timeout=1.0,
    )


@pytest.fixture
def fake_publisher():
    """Factory for in-memory publishers."""
    return FakePublisher


@pytest.fixture
def fake_ticker():
    """Factory for tickers that fire without sleeping."""
    return FakeTicker


@pytest.fixture
def make_producer(clock):
    """Build a BatchProducer wired to a fake publisher and ticker."""

    def _make(config, publisher, ticker, seed=42):
        return BatchProducer(
            config,
            rng=random.Random(seed),
            publisher_factory=lambda cfg: publisher,
            ticker=ticker,
            stats=StatsAggregator(clock=clock),
        )

    return _make
