"""
Kafka producer tuning settings.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from pydantic import Field
from pydantic_settings import BaseSettings

from kafka_producer_tui.config import ConnectionSettings

if TYPE_CHECKING:
    from .security import SecureContext


class KafkaConfig(BaseSettings):
    """Client-side tuning applied to every producer session."""

    # Producer configuration for single synchronous sends
    producer_config: Dict[str, Any] = Field(
        default_factory=lambda: {
            "acks": "all",  # Wait for all in-sync replicas
            "message.timeout.ms": 10000,  # 10 second delivery timeout
            "retries": 3,  # Retry on transient failure
            "retry.backoff.ms": 100,  # Backoff between retries
            "linger.ms": 0,  # Send immediately
            "socket.timeout.ms": 10000,
        },
        description="librdkafka producer configuration",
    )

    connect_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for cluster metadata when opening a session",
    )

    flush_timeout: float = Field(
        default=10.0,
        description="Timeout for producer flush operations in seconds",
    )

    client_id: str = Field(
        default="kafka-producer-tui",
        description="Client identifier reported to the brokers",
    )

    model_config = {
        "case_sensitive": False,
        "env_prefix": "KAFKA_",
        "extra": "ignore",
    }

    def get_producer_config(
        self,
        settings: ConnectionSettings,
        security: Optional["SecureContext"] = None,
    ) -> Dict[str, Any]:
        """
        Get producer configuration for a connection.

        Args:
            settings: Connection settings providing the bootstrap servers
            security: Validated mutual-TLS context, if authentication is enabled

        Returns:
            Complete producer configuration dict
        """
        config = self.producer_config.copy()
        config["bootstrap.servers"] = settings.bootstrap_servers
        config["client.id"] = self.client_id
        if security is not None:
            config.update(security.producer_config())
        return config
