"""
Kafka topic administration
"""
import logging
from typing import List

from confluent_kafka import KafkaException
from confluent_kafka.admin import AdminClient, NewTopic

from .config import ProducerConfig, TopicConfig
from .errors import AdminError, BrokerConnectionError


class KafkaTopicManager:
    """Manages Kafka topic operations"""

    def __init__(self, config: ProducerConfig):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.bootstrap_servers = config.broker_address
        self.timeout = config.admin_timeout

        try:
            self.admin_client = AdminClient(config.admin_dict())
            self.logger.info("AdminClient initialized successfully")
        except KafkaException as e:
            self.logger.error(f"Failed to initialize AdminClient: {e}")
            raise BrokerConnectionError(
                f"Cannot connect to broker at {self.bootstrap_servers}: {e}"
            ) from e

    def list_topics(self) -> List[str]:
        """List all topics"""
        try:
            topic_metadata = self.admin_client.list_topics(timeout=self.timeout)
        except KafkaException as e:
            self.logger.error(f"Broker {self.bootstrap_servers} unreachable: {e}")
            raise BrokerConnectionError(
                f"Cannot connect to broker at {self.bootstrap_servers}: {e}"
            ) from e
        return list(topic_metadata.topics.keys())

    def ensure_connected(self) -> None:
        """Fail fast if the broker does not answer a metadata request"""
        self.list_topics()

    def create_topic(self, topic_config: TopicConfig) -> None:
        """Create a topic; an existing topic is reported as an error"""
        self.ensure_connected()

        new_topic = NewTopic(
            topic_config.name,
            num_partitions=topic_config.num_partitions,
            replication_factor=topic_config.replication_factor,
        )

        fs = self.admin_client.create_topics([new_topic], request_timeout=self.timeout)

        try:
            fs[topic_config.name].result()
        except KafkaException as e:
            self.logger.error(f"Failed to create topic '{topic_config.name}': {e}")
            raise AdminError(f"Failed to create topic '{topic_config.name}': {e}") from e

        self.logger.info(
            f"Topic '{topic_config.name}' created successfully "
            f"(partitions={topic_config.num_partitions}, "
            f"replication={topic_config.replication_factor})"
        )
