"""
Text rendering of the interaction state.

``render`` is a pure function of the state and returns one plain-text frame.
"""

from typing import Dict, List

from kafka_producer_tui.ledger import HISTORY_DISPLAY_LIMIT, SendRecord, SendSuccess, truncate_key

from .events import HELP_LINE
from .fields import FieldId
from .model import InteractionState, View

LOADING = "Loading..."

FIELD_LABELS: Dict[FieldId, str] = {
    FieldId.BROKERS: "Brokers (comma-separated)",
    FieldId.TOPIC: "Topic",
    FieldId.CERT: "Client Certificate Path",
    FieldId.KEY: "Client Key Path",
    FieldId.CA: "CA Certificate Path",
    FieldId.KEY_SERDE: "Key Serde",
    FieldId.VALUE_SERDE: "Value Serde",
    FieldId.MESSAGE_KEY: "Message Key (optional)",
    FieldId.MESSAGE_VALUE: "Message Value (JSON)",
}

STATUS_CONNECTED = "● Connected to Kafka"
STATUS_DISCONNECTED = "○ Not connected"
MTLS_ENABLED = "🔒 mTLS Enabled"
MTLS_DISABLED = "🔓 mTLS Disabled"


def _render_field(state: InteractionState, field_id: FieldId) -> List[str]:
    label = FIELD_LABELS[field_id]
    if field_id is state.focused_field_id:
        header = f"› {label} ›"
    else:
        header = f"  {label}:"
    body = state.fields[field_id].render()
    return [header] + [f"    {line}" for line in body.split("\n")]


def _render_config_view(state: InteractionState) -> List[str]:
    rows = ["⚡ Kafka Producer Configuration", ""]
    for field_id in state.active_fields:
        rows.extend(_render_field(state, field_id))
    rows.append("")
    rows.append(MTLS_ENABLED if state.settings.use_auth else MTLS_DISABLED)
    return rows


def render_record(record: SendRecord) -> str:
    line = f"  {record.timestamp:%H:%M:%S} "
    if isinstance(record.outcome, SendSuccess):
        line += f"✓ SUCCESS │ Key: {truncate_key(record.key)}"
        line += f" │ P:{record.outcome.partition} O:{record.outcome.offset}"
    else:
        line += f"✗ FAILED │ Key: {truncate_key(record.key)} │ {record.outcome.reason}"
    return line


def _render_message_view(state: InteractionState) -> List[str]:
    topic = state.session.topic if state.session is not None else state.settings.topic
    rows = [f"✉ Send Message │ {topic}", ""]
    for field_id in state.active_fields:
        rows.extend(_render_field(state, field_id))
    rows.append("")
    rows.append("Message History")

    records = state.ledger.recent(HISTORY_DISPLAY_LIMIT)
    if not records:
        rows.append("  No messages sent yet")
    rows.extend(render_record(record) for record in records)
    return rows


def status_line(state: InteractionState) -> str:
    if state.status_message:
        return state.status_message
    return STATUS_CONNECTED if state.connected else STATUS_DISCONNECTED


def render(state: InteractionState) -> str:
    """Render the current state as a single text frame."""
    if state.width == 0:
        return LOADING

    if state.view is View.CONFIG:
        rows = _render_config_view(state)
    else:
        rows = _render_message_view(state)

    rows.extend(["", status_line(state), HELP_LINE])
    return "\n".join(rows)
