"""
Kafka module for opening producer sessions and publishing messages.
"""

from .config import KafkaConfig
from .producer import KafkaSession
from .security import SecureContext, build_transport_security
from .serde import decode, encode_key, encode_value, get_serde

__all__ = [
    "KafkaConfig",
    "KafkaSession",
    "SecureContext",
    "build_transport_security",
    "decode",
    "encode_key",
    "encode_value",
    "get_serde",
]
