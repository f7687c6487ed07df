"""
Synthetic trade event producer for Kafka
Publishes one batch of randomized trades per second and reports throughput
"""

__version__ = "1.0.0"

from .config import ProducerConfig, TopicConfig, LogConfig
from .errors import ProducerError, PublishError, AdminError, BrokerConnectionError
from .admin import KafkaTopicManager
from .publisher import KafkaPublisher, PublisherStats
from .generator import TradeRecord, TradeRecordGenerator
from .scheduler import Ticker
from .stats import StatsAggregator, StatsSnapshot
from .producer import BatchProducer, ProducerState

__all__ = [
    'ProducerConfig',
    'TopicConfig',
    'LogConfig',
    'ProducerError',
    'PublishError',
    'AdminError',
    'BrokerConnectionError',
    'KafkaTopicManager',
    'KafkaPublisher',
    'PublisherStats',
    'TradeRecord',
    'TradeRecordGenerator',
    'Ticker',
    'StatsAggregator',
    'StatsSnapshot',
    'BatchProducer',
    'ProducerState'
]
