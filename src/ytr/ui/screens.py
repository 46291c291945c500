from __future__ import annotations

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, Static


class NoticeScreen(ModalScreen[None]):
    """Blocking error notice; any key closes it and is not passed on."""

    CSS = """
    NoticeScreen {
        align: center middle;
        background: $surface 80%;
    }

    #notice_dialog {
        width: 70%;
        max-width: 80;
        height: auto;
        padding: 1 2;
        border: heavy $error;
        background: $panel;
    }

    #notice_text {
        width: 100%;
        color: $error;
    }

    #notice_hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="notice_dialog"):
            yield Static(f"Error: {self._message}", id="notice_text", markup=False)
            yield Label("Press any key to continue.", id="notice_hint")

    @property
    def message(self) -> str:
        return self._message

    def set_message(self, message: str) -> None:
        self._message = message
        if self.is_mounted:
            self.query_one("#notice_text", Static).update(f"Error: {message}")

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.dismiss(None)
