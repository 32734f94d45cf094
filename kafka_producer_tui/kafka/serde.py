"""
Key and value serdes.

None of the serdes transform the text: ``string`` goes through
confluent-kafka's UTF-8 string serializer, while ``json`` and ``bytearray``
hand over the UTF-8 bytes of the text as-is. JSON is not validated here;
the Format command is the only place JSON is parsed.
"""

from typing import Dict, Optional

from confluent_kafka.serialization import StringDeserializer, StringSerializer

from kafka_producer_tui.config import SERDE_BYTEARRAY, SERDE_JSON, SERDE_STRING


class Serde:
    """Pass-through serde: the wire bytes are the UTF-8 encoding of the text."""

    name = SERDE_BYTEARRAY

    def serialize(self, text: str) -> bytes:
        return text.encode("utf-8")

    def deserialize(self, data: bytes) -> str:
        return data.decode("utf-8")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class JsonSerde(Serde):
    name = SERDE_JSON


class StringSerde(Serde):
    name = SERDE_STRING

    def __init__(self, codec: str = "utf_8"):
        self._serializer = StringSerializer(codec)
        self._deserializer = StringDeserializer(codec)

    def serialize(self, text: str) -> bytes:
        return self._serializer(text)

    def deserialize(self, data: bytes) -> str:
        return self._deserializer(data)


_SERDES: Dict[str, Serde] = {
    SERDE_STRING: StringSerde(),
    SERDE_JSON: JsonSerde(),
    SERDE_BYTEARRAY: Serde(),
}


def get_serde(name: str) -> Serde:
    """Look up a serde by name; unknown names behave like ``bytearray``."""
    return _SERDES.get(name, _SERDES[SERDE_BYTEARRAY])


def encode_value(text: str, serde_name: str) -> bytes:
    return get_serde(serde_name).serialize(text)


def encode_key(text: str, serde_name: str) -> Optional[bytes]:
    """Encode a message key; the empty key means "no key" and maps to None."""
    if text == "":
        return None
    return get_serde(serde_name).serialize(text)


def decode(data: bytes, serde_name: str) -> str:
    return get_serde(serde_name).deserialize(data)
