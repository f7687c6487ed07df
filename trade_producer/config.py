"""
Configuration classes for the trade producer
"""
import logging
import os
from dataclasses import dataclass
from typing import Dict, Any, Mapping, Optional


@dataclass(frozen=True)
class ProducerConfig:
    """Producer configuration, immutable once constructed"""

    # Target
    broker_address: str = "localhost:9092"
    topic_name: str = "stocks"
    partition_count: int = 4

    # Pacing
    message_rate: int = 1000  # Records per tick (one tick per second)

    # Client
    client_id: str = "trade-producer-demo"
    acks: str = 'all'
    compression_type: str = 'none'
    linger_ms: int = 5
    request_timeout_ms: int = 30000

    # Timeouts (seconds)
    publish_timeout: float = 30.0  # Max time to wait for a batch to flush
    admin_timeout: float = 10.0

    def __post_init__(self):
        if not self.broker_address:
            raise ValueError("broker_address must not be empty")
        if not self.topic_name:
            raise ValueError("topic_name must not be empty")
        if self.partition_count < 1:
            raise ValueError(f"partition_count must be positive, got {self.partition_count}")
        if self.message_rate < 0:
            raise ValueError(f"message_rate must not be negative, got {self.message_rate}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to Kafka producer config dict"""
        return {
            'bootstrap.servers': self.broker_address,
            'client.id': self.client_id,
            'acks': self.acks,
            'compression.type': self.compression_type,
            'linger.ms': self.linger_ms,
            'request.timeout.ms': self.request_timeout_ms,
        }

    def admin_dict(self) -> Dict[str, Any]:
        """Convert config to Kafka admin client config dict"""
        return {
            'bootstrap.servers': self.broker_address,
            'client.id': self.client_id,
        }

    def topic_config(self) -> 'TopicConfig':
        """Topic settings derived from this producer config"""
        return TopicConfig(name=self.topic_name, num_partitions=self.partition_count)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ProducerConfig':
        """Build a config from environment variables, falling back to defaults"""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            broker_address=env.get('BROKER_URL', defaults.broker_address),
            topic_name=env.get('TOPIC_NAME', defaults.topic_name),
            partition_count=int(env.get('TOPIC_PARTITIONS', defaults.partition_count)),
            message_rate=int(env.get('MESSAGE_RATE', defaults.message_rate)),
        )


@dataclass(frozen=True)
class TopicConfig:
    """Topic configuration"""
    name: str
    num_partitions: int = 4
    replication_factor: int = 1


class LogConfig:
    """Logging configuration"""

    @staticmethod
    def setup_logging(level=logging.INFO):
        """Setup logging configuration"""
        logging.basicConfig(
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            level=level,
            datefmt='%Y-%m-%d %H:%M:%S'
        )
