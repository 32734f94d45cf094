"""
Input events delivered by the terminal layer and the keys bound to actions.

Key names follow Textual's naming (``tab``, ``shift+tab``, ``f2``...), so a
Textual key event maps onto :class:`KeyPress` without translation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


@dataclass(frozen=True)
class KeyPress:
    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()


@dataclass(frozen=True)
class Paste:
    text: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


class Action(str, Enum):
    """Control actions bound to named keys."""

    QUIT = "quit"
    FOCUS_NEXT = "focus_next"
    FOCUS_PREVIOUS = "focus_previous"
    TOGGLE_VIEW = "toggle_view"
    CONNECT = "connect"
    SAVE = "save"
    SEND = "send"
    FORMAT = "format"


KEY_BINDINGS: Dict[str, Action] = {
    "ctrl+c": Action.QUIT,
    "escape": Action.QUIT,
    "tab": Action.FOCUS_NEXT,
    "shift+tab": Action.FOCUS_PREVIOUS,
    "f2": Action.TOGGLE_VIEW,
    "f5": Action.CONNECT,
    "f9": Action.SAVE,
    "enter": Action.SEND,
    "f10": Action.FORMAT,
}

HELP_LINE = "F2: Switch │ F5: Connect │ F9: Save │ F10: Format │ Enter: Send │ Esc: Quit"
