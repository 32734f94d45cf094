"""
Unit tests for frame rendering.
"""

from datetime import datetime

import pytest

from kafka_producer_tui.config import ConnectionSettings
from kafka_producer_tui.ledger import SendFailure, SendRecord, SendSuccess
from kafka_producer_tui.ui.fields import FieldId
from kafka_producer_tui.ui.model import InteractionState, View
from kafka_producer_tui.ui.render import (
    LOADING,
    MTLS_DISABLED,
    MTLS_ENABLED,
    STATUS_CONNECTED,
    STATUS_DISCONNECTED,
    render,
    render_record,
)
from tests.utils.helpers import press, run_command, set_field


def record(index: int, key: str = "k", success: bool = True) -> SendRecord:
    outcome = SendSuccess(partition=1, offset=100 + index) if success else SendFailure(reason="broker down")
    return SendRecord(timestamp=datetime(2024, 5, 17, 9, 0, index), key=key, value="v", outcome=outcome)


@pytest.mark.unit
class TestRenderBasics:
    def test_placeholder_before_first_resize(self, default_settings):
        state = InteractionState(default_settings)
        state.status_message = "ignored"

        assert render(state) == LOADING

    def test_config_view(self, state):
        frame = render(state)

        assert "Kafka Producer Configuration" in frame
        assert "› Brokers (comma-separated) ›" in frame
        assert "  Topic:" in frame
        assert "localhost:9092" in frame
        assert MTLS_DISABLED in frame
        assert STATUS_DISCONNECTED in frame
        assert "F5: Connect" in frame

    def test_focus_marker_follows_focus(self, state):
        press(state, "tab")
        frame = render(state)

        assert "› Topic ›" in frame
        assert "  Brokers (comma-separated):" in frame

    def test_mtls_badge_tracks_use_auth(self, state):
        set_field(state, FieldId.CERT, "c.pem")
        set_field(state, FieldId.KEY, "k.pem")
        set_field(state, FieldId.CA, "ca.pem")
        assert MTLS_DISABLED in render(state)

        press(state, "f9")
        assert MTLS_ENABLED in render(state)

    def test_status_message_overrides_indicator(self, state):
        press(state, "f2")
        frame = render(state)

        assert "Please connect to Kafka first (F5)" in frame
        assert STATUS_DISCONNECTED not in frame

    def test_connected_indicator(self, state):
        run_command(state, press(state, "f5"))
        state.status_message = ""

        assert STATUS_CONNECTED in render(state)


@pytest.mark.unit
class TestRenderMessageView:
    def test_empty_history(self, connected_state):
        frame = render(connected_state)

        assert "Send Message │ test-topic" in frame
        assert "› Message Key (optional) ›" in frame
        assert "No messages sent yet" in frame

    def test_history_shows_last_five_in_order(self, connected_state):
        state = connected_state
        for i in range(7):
            state.ledger.append(record(i, key=f"key-{i}"))

        frame = render(state)

        assert "key-0" not in frame
        assert "key-1" not in frame
        positions = [frame.index(f"key-{i}") for i in range(2, 7)]
        assert positions == sorted(positions)
        assert frame.count("✓ SUCCESS") == 5

    def test_multiline_value_is_indented(self, connected_state):
        set_field(connected_state, FieldId.MESSAGE_VALUE, '{\n  "a": 1\n}')

        frame = render(connected_state)

        assert '    {\n      "a": 1\n    }' in frame

    def test_message_view_without_session_uses_settings_topic(self):
        state = InteractionState(ConnectionSettings(topic="fallback"))
        state.width = 80
        state.view = View.MESSAGE

        assert "Send Message │ fallback" in render(state)


@pytest.mark.unit
class TestRenderRecord:
    def test_success_line(self):
        line = render_record(record(3, key="user-1"))
        assert line == "  09:00:03 ✓ SUCCESS │ Key: user-1 │ P:1 O:103"

    def test_failure_line(self):
        line = render_record(record(4, key="", success=False))
        assert line == "  09:00:04 ✗ FAILED │ Key: (empty) │ broker down"

    def test_long_key_truncated(self):
        line = render_record(record(1, key="k" * 30))
        assert "k" * 20 + "..." in line
        assert "k" * 21 not in line
