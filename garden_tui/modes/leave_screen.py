"""
Leave Screen - "are you sure?" before quitting

Shown when someone tries to quit the app. Stay is focused, so a child
mashing Enter stays in the garden.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class LeaveScreen(ModalScreen[bool]):
    """Dismisses with True to quit, False to stay"""

    BINDINGS = [
        Binding("escape", "stay", "Stay"),
    ]

    DEFAULT_CSS = """
    LeaveScreen {
        align: center middle;
        background: rgba(0, 0, 0, 0.7);
    }

    #leave-dialog {
        width: 50;
        height: auto;
        padding: 1 4;
        background: $surface;
        border: heavy $primary;
    }

    #leave-dialog Label {
        width: 100%;
        text-align: center;
        margin-bottom: 1;
    }

    #leave-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #leave-buttons Button {
        margin: 0 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="leave-dialog"):
            yield Label("Leave the video player?")
            with Horizontal(id="leave-buttons"):
                yield Button("Stay", id="leave-no", variant="primary")
                yield Button("Leave", id="leave-yes")

    def on_mount(self) -> None:
        self.query_one("#leave-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "leave-yes")

    def action_stay(self) -> None:
        self.dismiss(False)
