"""
Kafka publisher that writes a whole batch of trade records per call
"""
import logging
from dataclasses import dataclass
from typing import Sequence

from confluent_kafka import KafkaException, Producer

from .config import ProducerConfig
from .errors import PublishError
from .generator import TradeRecord


@dataclass(frozen=True)
class PublisherStats:
    """Cumulative client-level counters since the publisher was opened"""
    messages_acked: int = 0
    errors: int = 0
    bytes_written: int = 0


class KafkaPublisher:
    """Synchronous batch publisher on top of the confluent-kafka producer"""

    def __init__(self, config: ProducerConfig):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = config
        self.topic = config.topic_name
        self.publish_timeout = config.publish_timeout

        # Statistics
        self.success_count = 0
        self.error_count = 0
        self.bytes_written = 0
        self._batch_errors = 0

        try:
            self.producer = Producer(config.to_dict())
            self.logger.info(f"Publisher initialized for topic '{self.topic}'")
        except Exception as e:
            self.logger.error(f"Failed to initialize producer: {e}")
            raise

    def _delivery_callback(self, err, msg):
        """Delivery report callback, served from poll() and flush()"""
        if err:
            self.error_count += 1
            self._batch_errors += 1
            self.logger.error(f"Delivery failed: {err}")
        else:
            self.success_count += 1
            self.bytes_written += len(msg.value())

    def _produce(self, value: bytes) -> None:
        try:
            self.producer.produce(self.topic, value=value, callback=self._delivery_callback)
        except BufferError:
            # Queue is full - serve delivery reports and retry once
            self.logger.warning("Producer queue full, polling...")
            self.producer.poll(1)
            self.producer.produce(self.topic, value=value, callback=self._delivery_callback)

    def publish(self, batch: Sequence[TradeRecord]) -> None:
        """Write the batch and block until every record is acknowledged or failed"""
        self._batch_errors = 0

        try:
            for record in batch:
                self._produce(record.serialize())
                self.producer.poll(0)
            pending = self.producer.flush(self.publish_timeout)
        except (KafkaException, BufferError) as e:
            self.logger.error(f"Failed to publish batch of {len(batch):,} records: {e}")
            # Drop the records already queued for this batch; their purge reports count as errors
            self.producer.purge(in_queue=True, in_flight=True)
            self.producer.poll(0)
            raise PublishError(f"Failed to publish batch: {e}", failed=len(batch)) from e

        if self._batch_errors or pending:
            message = (
                f"Batch of {len(batch):,} records not fully delivered: "
                f"{self._batch_errors:,} failed, {pending:,} still pending"
            )
            self.logger.error(message)
            raise PublishError(message, failed=self._batch_errors + pending)

    def stats(self) -> PublisherStats:
        """Get cumulative publisher statistics"""
        return PublisherStats(
            messages_acked=self.success_count,
            errors=self.error_count,
            bytes_written=self.bytes_written,
        )

    def close(self) -> None:
        """Flush outstanding records and release the producer"""
        pending = self.producer.flush(self.publish_timeout)

        if pending > 0:
            self.logger.warning(f"{pending} messages still pending after flush")

        self.logger.info(
            f"Publisher closed: "
            f"Success={self.success_count:,}, "
            f"Errors={self.error_count:,}"
        )
