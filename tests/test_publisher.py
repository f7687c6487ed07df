"""Tests for the Kafka batch publisher."""

from unittest.mock import Mock, patch

import pytest
from confluent_kafka import KafkaException

from trade_producer.errors import PublishError
from trade_producer.generator import TradeRecord
from trade_producer.publisher import KafkaPublisher


def make_records(count):
    return [
        TradeRecord(symbol="ZTEST", price=100 + i, side="SELL", quantity=10, account="XYZ789")
        for i in range(count)
    ]


def delivering(error_for=()):
    """produce() side effect that reports delivery immediately."""
    calls = {'n': 0}

    def _produce(topic, value=None, callback=None, **kwargs):
        calls['n'] += 1
        msg = Mock()
        msg.value.return_value = value
        err = "Broker: Not enough in-sync replicas" if calls['n'] in error_for else None
        callback(err, msg)

    return _produce


class TestKafkaPublisher:
    """Test KafkaPublisher functionality."""

    @pytest.fixture
    def mock_producer(self):
        with patch('trade_producer.publisher.Producer') as producer_cls:
            producer = producer_cls.return_value
            producer.flush.return_value = 0
            yield producer

    @pytest.fixture
    def publisher(self, test_config, mock_producer):
        return KafkaPublisher(test_config)

    def test_init_uses_config_dict(self, test_config):
        with patch('trade_producer.publisher.Producer') as producer_cls:
            KafkaPublisher(test_config)

        producer_cls.assert_called_once_with(test_config.to_dict())

    def test_publish_counts_acked_records(self, publisher, mock_producer):
        mock_producer.produce.side_effect = delivering()
        records = make_records(3)

        publisher.publish(records)

        stats = publisher.stats()
        assert stats.messages_acked == 3
        assert stats.errors == 0
        assert stats.bytes_written == sum(len(r.serialize()) for r in records)
        assert mock_producer.produce.call_count == 3
        mock_producer.flush.assert_called_once_with(publisher.publish_timeout)

    def test_publish_writes_to_configured_topic(self, publisher, mock_producer):
        mock_producer.produce.side_effect = delivering()
        record = make_records(1)[0]

        publisher.publish([record])

        args, kwargs = mock_producer.produce.call_args
        assert args[0] == "test-stocks"
        assert kwargs['value'] == record.serialize()

    def test_delivery_failure_raises(self, publisher, mock_producer):
        mock_producer.produce.side_effect = delivering(error_for={2})

        with pytest.raises(PublishError) as exc_info:
            publisher.publish(make_records(3))

        assert exc_info.value.failed == 1
        stats = publisher.stats()
        assert stats.messages_acked == 2
        assert stats.errors == 1

    def test_pending_after_flush_raises(self, publisher, mock_producer):
        mock_producer.flush.return_value = 2

        with pytest.raises(PublishError, match="2 still pending"):
            publisher.publish(make_records(2))

    def test_kafka_exception_wrapped(self, publisher, mock_producer):
        mock_producer.produce.side_effect = KafkaException("Local: Unknown topic")

        with pytest.raises(PublishError) as exc_info:
            publisher.publish(make_records(4))

        assert exc_info.value.failed == 4
        assert isinstance(exc_info.value.__cause__, KafkaException)

    def test_buffer_full_retries_once(self, publisher, mock_producer):
        deliver = delivering()
        attempts = {'n': 0}

        def _produce(*args, **kwargs):
            attempts['n'] += 1
            if attempts['n'] == 1:
                raise BufferError("Local: Queue full")
            deliver(*args, **kwargs)

        mock_producer.produce.side_effect = _produce

        publisher.publish(make_records(1))

        mock_producer.poll.assert_any_call(1)
        assert publisher.stats().messages_acked == 1

    def test_queue_full_mid_batch_purges_queued_records(self, publisher, mock_producer):
        queued = []

        def _produce(topic, value=None, callback=None, **kwargs):
            if len(queued) == 2:
                raise BufferError("Local: Queue full")
            queued.append(callback)

        def _purge(in_queue=True, in_flight=True, blocking=True):
            for callback in queued:
                callback("Local: Purged in queue", Mock())
            queued.clear()

        mock_producer.produce.side_effect = _produce
        mock_producer.purge.side_effect = _purge

        with pytest.raises(PublishError) as exc_info:
            publisher.publish(make_records(5))

        assert exc_info.value.failed == 5
        mock_producer.purge.assert_called_once_with(in_queue=True, in_flight=True)
        mock_producer.flush.assert_not_called()

        # Nothing from the aborted batch is left to be delivered by close()
        publisher.close()
        stats = publisher.stats()
        assert stats.messages_acked == 0
        assert stats.errors == 2

    def test_close_flushes(self, publisher, mock_producer):
        publisher.close()

        mock_producer.flush.assert_called_once()