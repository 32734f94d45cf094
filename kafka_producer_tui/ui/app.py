"""Textual front end: paints frames and feeds keys into the interaction state."""

import logging

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from kafka_producer_tui.executor import CommandExecutor

from .events import KEY_BINDINGS, KeyPress, Paste, Resize
from .model import InteractionState
from .render import render

logger = logging.getLogger(__name__)


class FrameView(Static, can_focus=True):
    """Single widget holding the rendered frame."""


class ProducerApp(App):
    """Kafka producer TUI."""

    CSS = """
    FrameView {
        height: 1fr;
        padding: 0 1;
    }
    """

    # Control keys are bound with priority so Textual's own focus and quit
    # bindings never see them.
    BINDINGS = [
        Binding(key, f"feed_key('{key}')", show=False, priority=True)
        for key in KEY_BINDINGS
    ]

    def __init__(self, state: InteractionState):
        super().__init__()
        self.state = state
        self.executor = CommandExecutor(self.feed)
        self._quit_requested = False

    def compose(self) -> ComposeResult:
        yield FrameView(id="frame")

    def on_mount(self) -> None:
        self.title = "Kafka Producer"
        self.query_one(FrameView).focus()
        self.feed(Resize(self.size.width, self.size.height))

    async def on_unmount(self) -> None:
        # Commands still in flight may hand back a session that must be closed
        await self.executor.drain()
        self.state.shutdown()

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resize(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        if event.key in KEY_BINDINGS:
            return
        event.stop()
        event.prevent_default()
        character = event.character if event.is_printable else None
        self.feed(KeyPress(event.key, character))

    def on_paste(self, event: events.Paste) -> None:
        if not event.text:
            return
        event.stop()
        self.feed(Paste(event.text))

    def action_feed_key(self, key: str) -> None:
        self.feed(KeyPress(key))

    def feed(self, event) -> None:
        """Apply an event to the state, dispatch any command, repaint."""
        command = self.state.update(event)
        if command is not None:
            self.executor.submit(command)

        if self.state.should_quit:
            if not self._quit_requested:
                logger.info("Exiting")
                self._quit_requested = True
                self.exit()
            return

        self.query_one(FrameView).update(Text(render(self.state)))
