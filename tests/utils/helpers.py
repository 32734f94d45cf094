"""
Helpers for driving the interaction state from tests.
"""

from datetime import datetime
from typing import Optional

from kafka_producer_tui.ui.events import KeyPress
from kafka_producer_tui.ui.fields import FieldId
from kafka_producer_tui.ui.model import InteractionState

FIXED_TIME = datetime(2024, 5, 17, 14, 30, 5)


def press(state: InteractionState, key: str, character: Optional[str] = None):
    """Feed one key press and return the resulting command (if any)."""
    return state.update(KeyPress(key, character))


def type_text(state: InteractionState, text: str) -> None:
    for char in text:
        state.update(KeyPress(char, char))


def run_command(state: InteractionState, command):
    """Execute a command synchronously and feed its result back in."""
    return state.update(command.execute())


def set_field(state: InteractionState, field_id: FieldId, value: str) -> None:
    state.fields[field_id].set_value(value)
