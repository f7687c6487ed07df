"""
Rate-paced batch producer of synthetic trade events
"""
import enum
import logging
import random
import threading
from typing import Callable, List, Optional

from .admin import KafkaTopicManager
from .config import ProducerConfig
from .errors import PublishError
from .generator import TradeRecord, TradeRecordGenerator
from .publisher import KafkaPublisher, PublisherStats
from .scheduler import Ticker
from .stats import StatsAggregator


class ProducerState(enum.Enum):
    IDLE = 'idle'
    TICKING = 'ticking'
    PUBLISHING = 'publishing'
    STOPPED = 'stopped'
    FAILED = 'failed'


class BatchProducer:
    """Publishes one batch of ``message_rate`` trade records per tick.

    The publisher is opened when :meth:`run` starts and closed on every exit
    path. Each tick the producer synthesizes a fresh batch, hands it to the
    publisher in a single call and folds the publisher's counter delta into
    its :class:`StatsAggregator`. A failed publish stops the loop and the
    :class:`PublishError` propagates to the caller; there is no retry here.
    """

    def __init__(
            self,
            config: ProducerConfig,
            rng: Optional[random.Random] = None,
            publisher_factory: Callable[[ProducerConfig], KafkaPublisher] = KafkaPublisher,
            admin_factory: Callable[[ProducerConfig], KafkaTopicManager] = KafkaTopicManager,
            ticker: Optional[Ticker] = None,
            stats: Optional[StatsAggregator] = None
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = config
        self.generator = TradeRecordGenerator(rng if rng is not None else random.Random())
        self.publisher_factory = publisher_factory
        self.admin_factory = admin_factory
        self.ticker = ticker if ticker is not None else Ticker(period=1.0)
        self.stats = stats if stats is not None else StatsAggregator()

        self.state = ProducerState.IDLE
        self._batch: List[TradeRecord] = []
        self._last_publisher_stats = PublisherStats()
        self._publish_calls = 0

    @property
    def publish_calls(self) -> int:
        """Number of publish calls issued so far"""
        return self._publish_calls

    def run(self, cancel_event: threading.Event) -> None:
        """Produce until cancel_event is set or a publish fails"""
        if self.state is not ProducerState.IDLE:
            raise RuntimeError(f"BatchProducer cannot run from state {self.state.value}")

        self.logger.info(
            f"Producing {self.config.message_rate:,} messages/second "
            f"to '{self.config.topic_name}' at {self.config.broker_address}"
        )

        publisher = None

        try:
            publisher = self.publisher_factory(self.config)
            self._last_publisher_stats = publisher.stats()
            self.stats.restart()
            self.ticker.start()
            self.state = ProducerState.TICKING

            while self.ticker.wait(cancel_event):
                self._tick(publisher)
            self.state = ProducerState.STOPPED
            self.logger.info("Cancellation requested, producer stopped")
        except Exception:
            self.state = ProducerState.FAILED
            raise
        finally:
            self.ticker.stop()
            if publisher is not None:
                publisher.close()

    def _tick(self, publisher: KafkaPublisher) -> None:
        self.generator.fill_batch(self._batch, self.config.message_rate)

        try:
            if self._batch:
                self.state = ProducerState.PUBLISHING
                self._publish_calls += 1
                publisher.publish(self._batch)
        except PublishError as e:
            self._fold(publisher)
            self.logger.error(f"Publish failed, stopping producer: {e}")
            raise
        finally:
            self._batch.clear()

        self._fold(publisher)
        self.state = ProducerState.TICKING

    def _fold(self, publisher: KafkaPublisher) -> None:
        """Fold the publisher counters accumulated since the previous read"""
        current = publisher.stats()
        last = self._last_publisher_stats
        self.stats.record(
            messages_delta=max(0, current.messages_acked - last.messages_acked),
            errors_delta=max(0, current.errors - last.errors),
            bytes_delta=max(0, current.bytes_written - last.bytes_written),
        )
        self._last_publisher_stats = current

    def create_topic(self) -> None:
        """Create the configured topic with replication factor 1"""
        topic_manager = self.admin_factory(self.config)
        topic_manager.create_topic(self.config.topic_config())

    def report(self) -> str:
        """Single-line throughput status"""
        return self.stats.report()
