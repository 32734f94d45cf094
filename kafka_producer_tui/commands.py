"""
Deferred units of work dispatched by the interaction state.

A command is built on the event loop from a snapshot of the state it needs,
then :meth:`Command.execute` runs the blocking part (network, disk, parsing)
in a worker thread. ``execute`` never raises: every outcome, including
unexpected exceptions, comes back as exactly one result event.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import orjson

from kafka_producer_tui.common.exceptions import FormatError, KafkaProducerTuiError
from kafka_producer_tui.config import ConnectionSettings, save_settings
from kafka_producer_tui.kafka.producer import KafkaSession

logger = logging.getLogger(__name__)

FORMAT_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


@dataclass
class ConnectResult:
    seq: int
    session: Optional[Any] = None
    error: Optional[Exception] = None


@dataclass
class SaveResult:
    path: Path
    settings: ConnectionSettings
    error: Optional[Exception] = None


@dataclass
class SendResult:
    key: str
    value: str
    timestamp: datetime
    partition: Optional[int] = None
    offset: Optional[int] = None
    error: Optional[Exception] = None


@dataclass
class FormatResult:
    source: str
    formatted: Optional[str] = None
    message: str = ""
    error: Optional[Exception] = None


@dataclass
class CloseResult:
    error: Optional[Exception] = None


class Command:
    """Base class: ``_run`` does the work, ``_failed`` wraps an error."""

    name = "command"

    def execute(self):
        try:
            return self._run()
        except KafkaProducerTuiError as e:
            logger.warning(f"{self.name} failed: {e}")
            return self._failed(e)
        except Exception as e:
            logger.exception(f"Unexpected error in {self.name} command")
            return self._failed(e)

    def _run(self):
        raise NotImplementedError

    def _failed(self, error: Exception):
        raise NotImplementedError


@dataclass
class ConnectCommand(Command):
    seq: int
    settings: ConnectionSettings
    session_factory: Callable[[ConnectionSettings], Any] = KafkaSession.open

    name = "connect"

    def _run(self) -> ConnectResult:
        session = self.session_factory(self.settings)
        return ConnectResult(seq=self.seq, session=session)

    def _failed(self, error: Exception) -> ConnectResult:
        return ConnectResult(seq=self.seq, error=error)


@dataclass
class SaveCommand(Command):
    settings: ConnectionSettings
    path: Path
    saver: Callable[[ConnectionSettings, Path], Any] = save_settings

    name = "save"

    def _run(self) -> SaveResult:
        self.saver(self.settings, self.path)
        return SaveResult(path=self.path, settings=self.settings)

    def _failed(self, error: Exception) -> SaveResult:
        return SaveResult(path=self.path, settings=self.settings, error=error)


@dataclass
class SendCommand(Command):
    session: Any
    key: str
    value: str
    clock: Callable[[], datetime] = datetime.now

    name = "send"

    def _run(self) -> SendResult:
        partition, offset = self.session.publish(self.key, self.value)
        return SendResult(
            key=self.key,
            value=self.value,
            timestamp=self.clock(),
            partition=partition,
            offset=offset,
        )

    def _failed(self, error: Exception) -> SendResult:
        return SendResult(key=self.key, value=self.value, timestamp=self.clock(), error=error)


@dataclass
class FormatCommand(Command):
    """
    Pretty-print the value field as JSON.

    orjson refuses documents nested deeper than its recursion limit; those
    are reported as too deeply nested rather than as invalid JSON.
    """

    source: str

    name = "format"

    def _run(self) -> FormatResult:
        if not self.source:
            return FormatResult(source=self.source, message="Nothing to format")
        try:
            parsed = orjson.loads(self.source)
            formatted = orjson.dumps(parsed, option=FORMAT_OPTIONS).decode("utf-8")
        except (orjson.JSONDecodeError, orjson.JSONEncodeError) as e:
            if "recursion limit" in str(e).lower():
                raise FormatError(f"JSON is nested too deeply to format: {e}") from e
            raise FormatError(f"invalid JSON: {e}") from e
        return FormatResult(source=self.source, formatted=formatted, message="JSON formatted successfully")

    def _failed(self, error: Exception) -> FormatResult:
        return FormatResult(source=self.source, error=error)


@dataclass
class CloseSessionCommand(Command):
    session: Any
    reason: str = field(default="replaced")

    name = "close"

    def _run(self) -> CloseResult:
        logger.info(f"Closing previous session ({self.reason})")
        self.session.close()
        return CloseResult()

    def _failed(self, error: Exception) -> CloseResult:
        return CloseResult(error=error)
