"""
Application settings and persisted broker connection settings.

The connection settings live in a JSON file in the user's home directory and
are edited through the configuration view. Process-level knobs (file
locations, log level, history size) come from ``KAFKA_PRODUCER_*``
environment variables.
"""

import logging
import os
from pathlib import Path
from typing import List

import orjson
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from kafka_producer_tui.common.exceptions import ConfigLoadError, PersistError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".kafka-producer.json"
DEFAULT_LOG_PATH = Path.home() / ".kafka-producer.log"

SERDE_STRING = "string"
SERDE_JSON = "json"
SERDE_BYTEARRAY = "bytearray"
KNOWN_SERDES = (SERDE_STRING, SERDE_JSON, SERDE_BYTEARRAY)


def parse_brokers(text: str) -> List[str]:
    """
    Split a comma-separated broker string into trimmed host:port entries.

    Blank entries are dropped, so an empty or all-comma string yields an
    empty list.
    """
    return [token.strip() for token in text.split(",") if token.strip()]


class ConnectionSettings(BaseModel):
    """Parameters needed to open a broker session."""

    brokers: List[str] = Field(
        default_factory=lambda: ["localhost:9092"],
        description="Bootstrap broker addresses (host:port)",
    )
    topic: str = Field(default="test-topic", description="Destination topic")
    cert_file: str = Field(default="", description="Client certificate path (PEM)")
    key_file: str = Field(default="", description="Client private key path (PEM)")
    ca_file: str = Field(default="", description="CA certificate path (PEM)")
    key_serde: str = Field(default=SERDE_JSON, description="Key serde: string, json or bytearray")
    value_serde: str = Field(default=SERDE_JSON, description="Value serde: string, json or bytearray")
    use_auth: bool = Field(default=False, description="Enable mutual TLS")

    model_config = {"extra": "ignore"}

    @property
    def bootstrap_servers(self) -> str:
        return ",".join(self.brokers)

    def compute_use_auth(self) -> bool:
        """Recompute ``use_auth``: true iff cert, key and CA paths are all set."""
        self.use_auth = bool(self.cert_file and self.key_file and self.ca_file)
        return self.use_auth


class AppSettings(BaseSettings):
    """Process-level settings read from the environment."""

    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Location of the persisted connection settings",
    )
    log_file: Path = Field(
        default=DEFAULT_LOG_PATH,
        description="Log destination (the terminal belongs to the UI)",
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    history_limit: int = Field(
        default=1000,
        ge=5,
        description="Maximum number of send records kept in memory",
    )

    model_config = {
        "case_sensitive": False,
        "env_prefix": "KAFKA_PRODUCER_",
        "extra": "ignore",
    }

    @field_validator("config_path", "log_file")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> ConnectionSettings:
    """
    Load connection settings from ``path``.

    Args:
        path: JSON settings file

    Returns:
        The stored settings, or the defaults if the file does not exist

    Raises:
        ConfigLoadError: If the file exists but cannot be read or parsed
    """
    path = Path(path).expanduser()
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.info(f"No settings file at {path}, using defaults")
        return ConnectionSettings()
    except OSError as e:
        raise ConfigLoadError(f"cannot read {path}: {e}") from e

    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ConfigLoadError(f"invalid JSON in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigLoadError(f"invalid settings in {path}: expected a JSON object")

    try:
        settings = ConnectionSettings.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigLoadError(f"invalid settings in {path}: {e}") from e

    logger.info(f"Loaded settings from {path}")
    return settings


def save_settings(settings: ConnectionSettings, path: Path = DEFAULT_CONFIG_PATH) -> Path:
    """
    Persist connection settings as indented JSON readable only by the owner.

    The file is written to a temporary sibling and renamed into place.

    Raises:
        PersistError: If serialization or any filesystem step fails
    """
    path = Path(path).expanduser()
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        payload = orjson.dumps(settings.model_dump(), option=orjson.OPT_INDENT_2)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        # O_CREAT mode is ignored for a pre-existing temp file
        os.chmod(tmp_path, 0o600)
        tmp_path.replace(path)
    except (OSError, orjson.JSONEncodeError) as e:
        raise PersistError(f"failed to save settings to {path}: {e}") from e

    logger.info(f"Saved settings to {path}")
    return path
