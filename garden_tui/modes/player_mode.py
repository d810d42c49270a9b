"""
Player Mode - watching one video

The video itself plays in its own locked-down window. This view is the
control surface: a big Back button, the video's title, and a friendly
message while loading or if the video can't be played.
"""

from typing import Callable

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.message import Message
from textual.widgets import Button, Static

from ..constants import ICON_BACK, ICON_SAD
from ..library import VideoEntry
from ..playback import PlaybackController, PlaybackSession, SourceMode

# (entry, on_change) -> PlaybackController
ControllerFactory = Callable[[VideoEntry, Callable[[PlaybackSession], None]], PlaybackController]


class PlayerStatus(Static):
    """Loading / playing / unavailable"""

    DEFAULT_CSS = """
    PlayerStatus {
        width: 100%;
        height: auto;
        content-align: center middle;
        text-align: center;
        color: $text-muted;
        margin-top: 2;
    }

    PlayerStatus.error {
        color: $error;
        text-style: bold;
    }
    """

    def show_session(self, session: PlaybackSession) -> None:
        self.remove_class("error")
        if session.errored:
            self.add_class("error")
            self.update(f"{ICON_SAD}  Oops! Video unavailable")
        elif session.loading:
            self.update("Loading video...")
        elif session.source_mode == SourceMode.LOCAL:
            self.update("Playing (saved copy)")
        else:
            self.update("Playing")


class PlayerMode(Container):
    """Control surface for the current PlaybackSession"""

    DEFAULT_CSS = """
    PlayerMode {
        width: 100%;
        height: 100%;
        align: center top;
    }

    #player-top {
        width: 100%;
        height: 3;
    }

    #back-button {
        width: 16;
        height: 3;
        text-style: bold;
    }

    #player-title {
        width: 1fr;
        height: 3;
        content-align: center middle;
        text-style: bold;
        color: $primary;
    }

    #error-back-button {
        display: none;
        margin-top: 1;
    }

    #error-back-button.visible {
        display: block;
    }
    """

    class BackRequested(Message, bubble=True):
        """Back button (or the error screen's Go Back) was pressed"""

    def __init__(self, entry: VideoEntry, controller_factory: ControllerFactory, **kwargs):
        super().__init__(**kwargs)
        self.entry = entry
        self.controller = controller_factory(entry, self._on_session_change)

    def compose(self) -> ComposeResult:
        with Horizontal(id="player-top"):
            yield Button(f"{ICON_BACK} Back", id="back-button", variant="primary")
            yield Static(f"{self.entry.emoji}  {self.entry.title}", id="player-title")
        yield PlayerStatus("Loading video...", id="player-status")
        yield Button("Go Back", id="error-back-button")

    def on_mount(self) -> None:
        self.query_one("#back-button").focus()
        self.controller.start()

    def on_unmount(self) -> None:
        """Leaving the player always stops playback"""
        self.controller.stop()

    def _on_session_change(self, session: PlaybackSession) -> None:
        if not self.is_mounted:
            return
        self.query_one("#player-status", PlayerStatus).show_session(session)
        go_back = self.query_one("#error-back-button", Button)
        if session.errored:
            go_back.add_class("visible")
            go_back.focus()
        else:
            go_back.remove_class("visible")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id in ("back-button", "error-back-button"):
            self.post_message(self.BackRequested())
