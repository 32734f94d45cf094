"""
Editable form fields.

Fields are addressed by :class:`FieldId`; each view lists its fields in
focus order. ``TextInput`` is a single-line editor and ``TextArea`` adds
line breaks and vertical movement. Only a focused field accepts edits.
"""

from enum import Enum
from typing import Tuple

from .events import KeyPress

CURSOR = "▌"


class FieldId(str, Enum):
    BROKERS = "brokers"
    TOPIC = "topic"
    CERT = "cert"
    KEY = "key"
    CA = "ca"
    KEY_SERDE = "key_serde"
    VALUE_SERDE = "value_serde"
    MESSAGE_KEY = "message_key"
    MESSAGE_VALUE = "message_value"


CONFIG_FIELDS: Tuple[FieldId, ...] = (
    FieldId.BROKERS,
    FieldId.TOPIC,
    FieldId.CERT,
    FieldId.KEY,
    FieldId.CA,
    FieldId.KEY_SERDE,
    FieldId.VALUE_SERDE,
)

MESSAGE_FIELDS: Tuple[FieldId, ...] = (
    FieldId.MESSAGE_KEY,
    FieldId.MESSAGE_VALUE,
)


class TextInput:
    """Single-line text field with a cursor."""

    multiline = False

    def __init__(self, value: str = "", placeholder: str = ""):
        self.placeholder = placeholder
        self.focused = False
        self._value = ""
        self._cursor = 0
        self.set_value(value)

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_value(self, value: str) -> None:
        self._value = ""
        self._cursor = 0
        self.insert(value)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def _clean(self, text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if not self.multiline:
            text = text.replace("\n", " ")
        return text

    def insert(self, text: str) -> None:
        text = self._clean(text)
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._cursor += len(text)

    def _delete_back(self) -> None:
        if self._cursor > 0:
            self._value = self._value[: self._cursor - 1] + self._value[self._cursor :]
            self._cursor -= 1

    def _delete_forward(self) -> None:
        self._value = self._value[: self._cursor] + self._value[self._cursor + 1 :]

    def _line_bounds(self) -> Tuple[int, int]:
        start = self._value.rfind("\n", 0, self._cursor) + 1
        end = self._value.find("\n", self._cursor)
        return start, len(self._value) if end == -1 else end

    def handle_key(self, event: KeyPress) -> bool:
        """
        Apply an editing key.

        Returns:
            True if the key was consumed
        """
        if not self.focused:
            return False

        key = event.key
        if key == "backspace":
            self._delete_back()
        elif key == "delete":
            self._delete_forward()
        elif key == "left":
            self._cursor = max(0, self._cursor - 1)
        elif key == "right":
            self._cursor = min(len(self._value), self._cursor + 1)
        elif key in ("home", "ctrl+a"):
            self._cursor = self._line_bounds()[0]
        elif key in ("end", "ctrl+e"):
            self._cursor = self._line_bounds()[1]
        elif key == "ctrl+u":
            start = self._line_bounds()[0]
            self._value = self._value[:start] + self._value[self._cursor :]
            self._cursor = start
        elif key == "ctrl+k":
            end = self._line_bounds()[1]
            self._value = self._value[: self._cursor] + self._value[end:]
        elif event.is_printable:
            self.insert(event.character)
        else:
            return False
        return True

    def render(self) -> str:
        if not self.focused:
            return self._value if self._value else self.placeholder
        return self._value[: self._cursor] + CURSOR + self._value[self._cursor :]


class TextArea(TextInput):
    """Multi-line text field; ``ctrl+j`` breaks the line."""

    multiline = True

    def _move_vertical(self, step: int) -> None:
        lines = self._value.split("\n")
        row = self._value.count("\n", 0, self._cursor)
        column = self._cursor - self._line_bounds()[0]
        target = row + step
        if target < 0 or target >= len(lines):
            return
        column = min(column, len(lines[target]))
        self._cursor = sum(len(line) + 1 for line in lines[:target]) + column

    def handle_key(self, event: KeyPress) -> bool:
        if not self.focused:
            return False
        if event.key in ("ctrl+j", "newline"):
            self.insert("\n")
            return True
        if event.key == "up":
            self._move_vertical(-1)
            return True
        if event.key == "down":
            self._move_vertical(1)
            return True
        return super().handle_key(event)
