"""
Mock implementations for the broker client and sessions.
"""

from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

from kafka_producer_tui.common.exceptions import PublishError
from kafka_producer_tui.config import ConnectionSettings


class MockMessage:
    """Stand-in for confluent_kafka.Message in delivery callbacks."""

    def __init__(self, topic: str, partition: int, offset: int):
        self._topic = topic
        self._partition = partition
        self._offset = offset

    def topic(self):
        return self._topic

    def partition(self):
        return self._partition

    def offset(self):
        return self._offset


class MockProducer:
    """Mock confluent_kafka.Producer with configurable delivery results."""

    def __init__(
        self,
        config: Optional[Dict] = None,
        partition: int = 0,
        start_offset: int = 0,
        delivery_error: Optional[str] = None,
        flush_remaining: int = 0,
        list_topics_error: Optional[Exception] = None,
        broker_count: int = 1,
    ):
        """
        Initialize mock producer.

        Args:
            config: librdkafka configuration passed by the code under test
            partition: Partition reported for delivered messages
            start_offset: Offset of the first delivered message
            delivery_error: Error string passed to delivery callbacks
            flush_remaining: Value returned by flush (messages left in queue)
            list_topics_error: Exception raised by list_topics
            broker_count: Number of brokers in returned metadata
        """
        self.config = config or {}
        self.partition = partition
        self.next_offset = start_offset
        self.delivery_error = delivery_error
        self.flush_remaining = flush_remaining
        self.list_topics_error = list_topics_error
        self.broker_count = broker_count
        self.produced: List[Dict] = []
        self.flush_calls = 0
        self._pending = []

    def list_topics(self, timeout: float = -1):
        if self.list_topics_error is not None:
            raise self.list_topics_error
        metadata = MagicMock()
        metadata.brokers = {i: MagicMock() for i in range(self.broker_count)}
        return metadata

    def produce(self, topic, value=None, key=None, callback=None, **kwargs):
        self.produced.append({"topic": topic, "key": key, "value": value})
        self._pending.append((topic, callback))

    def flush(self, timeout: float = -1) -> int:
        self.flush_calls += 1
        if self.flush_remaining:
            return self.flush_remaining
        for topic, callback in self._pending:
            if callback is None:
                continue
            if self.delivery_error is not None:
                callback(self.delivery_error, None)
            else:
                callback(None, MockMessage(topic, self.partition, self.next_offset))
                self.next_offset += 1
        self._pending = []
        return 0


class FakeSession:
    """In-memory broker session recording publishes."""

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        partition: int = 0,
        start_offset: int = 0,
        fail_with: Optional[str] = None,
    ):
        self.settings = settings or ConnectionSettings()
        self.partition = partition
        self.next_offset = start_offset
        self.fail_with = fail_with
        self.published: List[Tuple[str, str]] = []
        self.close_calls = 0

    @property
    def topic(self) -> str:
        return self.settings.topic

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def publish(self, key: str, value: str, topic: Optional[str] = None) -> Tuple[int, int]:
        if self.fail_with is not None:
            raise PublishError(self.fail_with)
        self.published.append((key, value))
        offset = self.next_offset
        self.next_offset += 1
        return self.partition, offset

    def close(self) -> None:
        self.close_calls += 1


class SessionFactory:
    """Callable session factory recording every open request."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[ConnectionSettings] = []
        self.sessions: List[FakeSession] = []

    def __call__(self, settings: ConnectionSettings) -> FakeSession:
        self.calls.append(settings)
        if self.error is not None:
            raise self.error
        session = FakeSession(settings)
        self.sessions.append(session)
        return session
