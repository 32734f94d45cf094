"""
Interaction state machine for the producer TUI.

``InteractionState`` owns the connection settings, the broker session, the
send ledger and all view/focus state. The terminal layer feeds it events
through :meth:`InteractionState.update`, which mutates the state and may
return a :class:`~kafka_producer_tui.commands.Command` for the executor.
Command results come back through ``update`` as well, so every mutation
happens on the event loop, one event at a time.
"""

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from kafka_producer_tui.commands import (
    CloseResult,
    CloseSessionCommand,
    Command,
    ConnectCommand,
    ConnectResult,
    FormatCommand,
    FormatResult,
    SaveCommand,
    SaveResult,
    SendCommand,
    SendResult,
)
from kafka_producer_tui.common.exceptions import KafkaProducerTuiError, ValidationError
from kafka_producer_tui.config import (
    DEFAULT_CONFIG_PATH,
    SERDE_JSON,
    ConnectionSettings,
    parse_brokers,
)
from kafka_producer_tui.kafka.producer import KafkaSession
from kafka_producer_tui.ledger import SendFailure, SendLedger, SendRecord, SendSuccess

from .events import KEY_BINDINGS, Action, KeyPress, Paste, Resize
from .fields import CONFIG_FIELDS, MESSAGE_FIELDS, FieldId, TextArea, TextInput

logger = logging.getLogger(__name__)

CONNECT_HINT = "Please connect to Kafka first (F5)"


class View(str, Enum):
    CONFIG = "config"
    MESSAGE = "message"


VIEW_FIELDS: Dict[View, Tuple[FieldId, ...]] = {
    View.CONFIG: CONFIG_FIELDS,
    View.MESSAGE: MESSAGE_FIELDS,
}


def _build_fields(settings: ConnectionSettings) -> Dict[FieldId, TextInput]:
    return {
        FieldId.BROKERS: TextInput(",".join(settings.brokers), placeholder="localhost:9092"),
        FieldId.TOPIC: TextInput(settings.topic, placeholder="my-topic"),
        FieldId.CERT: TextInput(settings.cert_file, placeholder="/path/to/cert.pem"),
        FieldId.KEY: TextInput(settings.key_file, placeholder="/path/to/key.pem"),
        FieldId.CA: TextInput(settings.ca_file, placeholder="/path/to/ca.pem"),
        FieldId.KEY_SERDE: TextInput(settings.key_serde or SERDE_JSON, placeholder="string, json, bytearray"),
        FieldId.VALUE_SERDE: TextInput(settings.value_serde or SERDE_JSON, placeholder="string, json, bytearray"),
        FieldId.MESSAGE_KEY: TextInput(placeholder="optional-key"),
        FieldId.MESSAGE_VALUE: TextArea(placeholder='{"example": "json"}'),
    }


class InteractionState:
    """Single authoritative state of an interactive session."""

    def __init__(
        self,
        settings: ConnectionSettings,
        config_path: Path = DEFAULT_CONFIG_PATH,
        session_factory: Callable[[ConnectionSettings], Any] = KafkaSession.open,
        history_limit: int = 1000,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the state in the configuration view.

        Args:
            settings: Settings loaded at startup; edited in place by Connect/Save
            config_path: Where Save persists the settings
            session_factory: Opens a broker session from settings
            history_limit: Maximum send records kept in the ledger
            clock: Timestamp source for send records
        """
        self.settings = settings
        self.config_path = config_path
        self.session_factory = session_factory
        self.clock = clock
        self.ledger = SendLedger(history_limit)
        self.fields = _build_fields(settings)

        self.view = View.CONFIG
        self.focus: Dict[View, int] = {View.CONFIG: 0, View.MESSAGE: 0}
        self.session: Optional[Any] = None
        self.status_message = ""
        self.width = 0
        self.height = 0
        self.should_quit = False

        self._connect_seq = 0
        self._send_pending = False
        self._format_pending = False

        self.focused_field.focus()

    # ---- derived state -------------------------------------------------

    @property
    def connected(self) -> bool:
        return self.session is not None

    @property
    def active_fields(self) -> Tuple[FieldId, ...]:
        return VIEW_FIELDS[self.view]

    @property
    def focus_index(self) -> int:
        return self.focus[self.view]

    @property
    def focused_field_id(self) -> FieldId:
        return self.active_fields[self.focus_index]

    @property
    def focused_field(self) -> TextInput:
        return self.fields[self.focused_field_id]

    def value_of(self, field_id: FieldId) -> str:
        return self.fields[field_id].value

    # ---- event entry point ---------------------------------------------

    def update(self, event) -> Optional[Command]:
        """
        Apply one event.

        Args:
            event: Input event or command result

        Returns:
            A command to execute asynchronously, or None
        """
        if isinstance(event, KeyPress):
            return self._handle_key(event)
        if isinstance(event, Paste):
            self.focused_field.insert(event.text)
            return None
        if isinstance(event, Resize):
            self.width, self.height = event.width, event.height
            return None
        if isinstance(event, ConnectResult):
            return self._on_connect_result(event)
        if isinstance(event, SaveResult):
            return self._on_save_result(event)
        if isinstance(event, SendResult):
            return self._on_send_result(event)
        if isinstance(event, FormatResult):
            return self._on_format_result(event)
        if isinstance(event, CloseResult):
            return self._on_close_result(event)

        logger.warning(f"Ignoring unknown event {event!r}")
        return None

    def _handle_key(self, event: KeyPress) -> Optional[Command]:
        action = KEY_BINDINGS.get(event.key)
        if action is None:
            self.focused_field.handle_key(event)
            return None

        if action is Action.QUIT:
            self.shutdown()
            return None
        if action is Action.FOCUS_NEXT:
            self.move_focus(1)
            return None
        if action is Action.FOCUS_PREVIOUS:
            self.move_focus(-1)
            return None
        if action is Action.TOGGLE_VIEW:
            self.toggle_view()
            return None
        if action is Action.CONNECT:
            return self._dispatch(self.connect)
        if action is Action.SAVE:
            return self._dispatch(self.save)
        if action is Action.SEND:
            if self.view is View.MESSAGE:
                return self._dispatch(self.send)
            return None
        if action is Action.FORMAT:
            if self.view is View.MESSAGE and self.focused_field_id is FieldId.MESSAGE_VALUE:
                return self._dispatch(self.format_value)
            return None
        return None

    def _dispatch(self, build: Callable[[], Command]) -> Optional[Command]:
        try:
            return build()
        except ValidationError as e:
            self._report_error(e)
            return None

    def _report_error(self, error: Exception) -> None:
        self.status_message = f"Error: {error}"

    # ---- navigation ----------------------------------------------------

    def move_focus(self, step: int) -> None:
        """Move focus within the current view, wrapping at both ends."""
        count = len(self.active_fields)
        self.focused_field.blur()
        self.focus[self.view] = (self.focus[self.view] + step + count) % count
        self.focused_field.focus()

    def toggle_view(self) -> None:
        """Switch views; entering the message view requires a session."""
        if self.view is View.CONFIG and not self.connected:
            self.status_message = CONNECT_HINT
            return

        self.focused_field.blur()
        self.view = View.MESSAGE if self.view is View.CONFIG else View.CONFIG
        self.focused_field.focus()

    # ---- command builders ----------------------------------------------

    def snapshot_settings(self) -> ConnectionSettings:
        """Copy the configuration fields into the settings and recompute ``use_auth``."""
        settings = self.settings
        settings.brokers = parse_brokers(self.value_of(FieldId.BROKERS))
        settings.topic = self.value_of(FieldId.TOPIC)
        settings.cert_file = self.value_of(FieldId.CERT)
        settings.key_file = self.value_of(FieldId.KEY)
        settings.ca_file = self.value_of(FieldId.CA)
        settings.key_serde = self.value_of(FieldId.KEY_SERDE)
        settings.value_serde = self.value_of(FieldId.VALUE_SERDE)
        settings.compute_use_auth()
        return settings

    def connect(self) -> ConnectCommand:
        """
        Build a Connect command from the current fields.

        The existing session stays installed until a newer one replaces it.

        Raises:
            ValidationError: If the broker list is empty
        """
        settings = self.snapshot_settings()
        if not settings.brokers:
            raise ValidationError("broker list is empty")

        self._connect_seq += 1
        self.status_message = f"Connecting to {settings.bootstrap_servers}..."
        logger.info(f"Connect #{self._connect_seq} to {settings.bootstrap_servers} (mTLS={settings.use_auth})")
        return ConnectCommand(
            seq=self._connect_seq,
            settings=settings.model_copy(deep=True),
            session_factory=self.session_factory,
        )

    def save(self) -> SaveCommand:
        settings = self.snapshot_settings()
        self.status_message = "Saving configuration..."
        return SaveCommand(settings=settings.model_copy(deep=True), path=self.config_path)

    def send(self) -> SendCommand:
        """
        Build a Send command for the current key and value.

        Raises:
            ValidationError: If not connected, the value is empty, or a send is pending
        """
        if self.session is None:
            raise ValidationError("not connected to Kafka")
        value = self.value_of(FieldId.MESSAGE_VALUE)
        if value == "":
            raise ValidationError("message value cannot be empty")
        if self._send_pending:
            raise ValidationError("a message is already being sent")

        self._send_pending = True
        self.status_message = "Sending message..."
        return SendCommand(
            session=self.session,
            key=self.value_of(FieldId.MESSAGE_KEY),
            value=value,
            clock=self.clock,
        )

    def format_value(self) -> FormatCommand:
        if self._format_pending:
            raise ValidationError("formatting already in progress")
        self._format_pending = True
        return FormatCommand(source=self.value_of(FieldId.MESSAGE_VALUE))

    # ---- result handlers -----------------------------------------------

    def _on_connect_result(self, result: ConnectResult) -> Optional[Command]:
        if result.seq != self._connect_seq:
            logger.info(f"Discarding stale connect result #{result.seq} (latest #{self._connect_seq})")
            if result.session is not None:
                return CloseSessionCommand(session=result.session, reason="stale connect")
            return None

        if result.error is not None:
            self._report_error(result.error)
            return None

        if self.should_quit:
            logger.info(f"Connect #{result.seq} finished after quit, closing its session")
            return CloseSessionCommand(session=result.session, reason="shutdown")

        previous = self.session
        self.session = result.session
        self.status_message = "Successfully connected to Kafka"
        if previous is not None:
            return CloseSessionCommand(session=previous)
        return None

    def _on_save_result(self, result: SaveResult) -> None:
        if result.error is not None:
            self._report_error(result.error)
        else:
            self.status_message = "Configuration saved successfully"

    def _on_send_result(self, result: SendResult) -> None:
        self._send_pending = False
        if result.error is not None:
            outcome = SendFailure(reason=str(result.error))
            self._report_error(result.error)
        else:
            outcome = SendSuccess(partition=result.partition, offset=result.offset)
            self.fields[FieldId.MESSAGE_KEY].set_value("")
            self.fields[FieldId.MESSAGE_VALUE].set_value("")
            self.status_message = f"Message sent (partition {result.partition}, offset {result.offset})"

        self.ledger.append(SendRecord(timestamp=result.timestamp, key=result.key, value=result.value, outcome=outcome))

    def _on_format_result(self, result: FormatResult) -> None:
        self._format_pending = False
        if result.error is not None:
            self._report_error(result.error)
            return
        if result.formatted is None:
            self.status_message = result.message
            return

        value_field = self.fields[FieldId.MESSAGE_VALUE]
        if value_field.value != result.source:
            self.status_message = "Value changed while formatting; not applied"
            return
        value_field.set_value(result.formatted)
        self.status_message = result.message

    def _on_close_result(self, result: CloseResult) -> None:
        if result.error is not None:
            self.status_message = f"Error closing previous session: {result.error}"

    # ---- teardown ------------------------------------------------------

    def shutdown(self) -> None:
        """Close the session if one is open and mark the state for exit."""
        self.should_quit = True
        session, self.session = self.session, None
        if session is None:
            return
        try:
            session.close()
        except KafkaProducerTuiError as e:
            logger.error(f"Error closing session on exit: {e}")
