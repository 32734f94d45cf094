"""
Synchronous Kafka producer session.
"""

import logging
from typing import Optional, Tuple

from confluent_kafka import KafkaException, Producer

from kafka_producer_tui.common.exceptions import (
    ConnectError,
    PublishError,
    SecurityError,
    ValidationError,
)
from kafka_producer_tui.config import ConnectionSettings

from .config import KafkaConfig
from .security import build_transport_security
from .serde import encode_key, encode_value

logger = logging.getLogger(__name__)


class KafkaSession:
    """An open producer connection publishing one message at a time."""

    def __init__(self, settings: ConnectionSettings, producer: Producer, config: Optional[KafkaConfig] = None):
        """
        Wrap an already-created producer. Use :meth:`open` to connect.

        Args:
            settings: Settings the session was opened with (topic and serdes)
            producer: confluent-kafka producer
            config: Kafka tuning, uses default if None
        """
        self.settings = settings
        self.config = config or KafkaConfig()
        self._producer: Optional[Producer] = producer
        self._success_count = 0
        self._error_count = 0

    @classmethod
    def open(cls, settings: ConnectionSettings, config: Optional[KafkaConfig] = None) -> "KafkaSession":
        """
        Connect to the brokers named in ``settings``.

        Cluster metadata is fetched before returning so that unreachable
        brokers or TLS failures surface here rather than on the first send.

        Raises:
            ValidationError: If the broker list is empty
            ConnectError: If TLS material is unusable or the cluster is unreachable
        """
        config = config or KafkaConfig()
        if not settings.brokers:
            raise ValidationError("broker list is empty")

        security = None
        if settings.use_auth:
            try:
                security = build_transport_security(settings.cert_file, settings.key_file, settings.ca_file)
            except SecurityError as e:
                raise ConnectError(f"failed to create TLS config: {e}") from e

        producer_config = config.get_producer_config(settings, security)
        try:
            producer = Producer(producer_config)
            metadata = producer.list_topics(timeout=config.connect_timeout)
        except KafkaException as e:
            logger.error(f"Failed to connect to Kafka brokers {settings.bootstrap_servers}: {e}")
            raise ConnectError(f"failed to connect to {settings.bootstrap_servers}: {e}") from e

        logger.info(
            f"Connected to Kafka brokers: {settings.bootstrap_servers} "
            f"({len(metadata.brokers)} brokers, tls={security is not None})"
        )
        return cls(settings.model_copy(deep=True), producer, config)

    @property
    def is_open(self) -> bool:
        return self._producer is not None

    @property
    def topic(self) -> str:
        return self.settings.topic

    def publish(self, key: str, value: str, topic: Optional[str] = None) -> Tuple[int, int]:
        """
        Send one message and wait for its delivery report.

        Args:
            key: Message key; the empty string sends no key
            value: Message value
            topic: Destination topic, defaults to the session's topic

        Returns:
            Tuple of (partition, offset)

        Raises:
            PublishError: If the session is closed or delivery fails
        """
        topic = topic or self.settings.topic
        if self._producer is None:
            raise PublishError("session is closed")
        if not topic:
            raise PublishError("no topic configured")

        delivery_report = {"error": None, "partition": None, "offset": None}

        def delivery_callback(err, msg):
            """Callback for delivery reports."""
            if err is not None:
                delivery_report["error"] = str(err)
                logger.error(f"Message delivery failed: {err}")
                self._error_count += 1
            else:
                delivery_report["partition"] = msg.partition()
                delivery_report["offset"] = msg.offset()
                logger.debug(f"Message delivered to {msg.topic()} [{msg.partition()}] @ {msg.offset()}")
                self._success_count += 1

        try:
            self._producer.produce(
                topic=topic,
                key=encode_key(key, self.settings.key_serde),
                value=encode_value(value, self.settings.value_serde),
                callback=delivery_callback,
            )
            # Blocks until the message is delivered or the timeout expires
            remaining = self._producer.flush(timeout=self.config.flush_timeout)
        except (KafkaException, BufferError) as e:
            logger.error(f"Kafka exception sending to {topic}: {e}")
            raise PublishError(f"failed to send message to {topic}: {e}") from e

        if remaining > 0:
            raise PublishError(f"delivery to {topic} timed out after {self.config.flush_timeout}s")
        if delivery_report["error"] is not None:
            raise PublishError(f"failed to send message to {topic}: {delivery_report['error']}")

        return delivery_report["partition"], delivery_report["offset"]

    def close(self) -> None:
        """Flush and release the producer. Safe to call more than once."""
        if self._producer is None:
            return

        remaining = self._producer.flush(timeout=self.config.flush_timeout)
        if remaining > 0:
            logger.warning(f"Closed producer with {remaining} messages still in queue")
        self._producer = None

        logger.info(f"Kafka session closed. Sent: {self._success_count}, Failed: {self._error_count}")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
