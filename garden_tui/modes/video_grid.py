"""
Video Grid - the child's home screen

Big colorful cards, one per approved video. Pick one to watch it.
The settings cog in the corner asks the parent gate first.
"""

from textual.app import ComposeResult
from textual.color import Color, ColorParseError
from textual.containers import Container, Grid, Horizontal
from textual.message import Message
from textual.widgets import Button, Static

from ..constants import ICON_MOVIE, ICON_SETTINGS
from ..library import VideoEntry


class VideoCard(Button):
    """One video: emoji, title, and the video's own color"""

    DEFAULT_CSS = """
    VideoCard {
        width: 100%;
        height: 5;
        text-style: bold;
        color: #1e1033;
        border: none;
    }

    VideoCard:focus {
        text-style: bold reverse;
    }
    """

    def __init__(self, entry: VideoEntry, **kwargs):
        super().__init__(f"{entry.emoji}  {entry.title}", **kwargs)
        self.entry = entry

    def on_mount(self) -> None:
        try:
            self.styles.background = Color.parse(self.entry.color)
        except ColorParseError:
            pass  # Bad color in a hand-edited library; keep the theme color


class VideoGrid(Container):
    """Home screen: the library as a grid of cards"""

    DEFAULT_CSS = """
    VideoGrid {
        width: 100%;
        height: 100%;
    }

    #grid-header {
        width: 100%;
        height: 3;
    }

    #grid-title {
        width: 1fr;
        height: 3;
        content-align: left middle;
        text-style: bold;
        color: $primary;
    }

    #settings-button {
        width: 8;
        min-width: 8;
        height: 3;
    }

    #video-grid {
        grid-size: 3;
        grid-gutter: 1 2;
        grid-rows: 5;
        height: 1fr;
        overflow-y: auto;
    }

    #grid-empty {
        width: 100%;
        content-align: center middle;
        color: $text-muted;
    }
    """

    class VideoSelected(Message, bubble=True):
        """Child picked a video"""
        def __init__(self, entry: VideoEntry) -> None:
            self.entry = entry
            super().__init__()

    class SettingsRequested(Message, bubble=True):
        """Someone tapped the settings cog"""

    def __init__(self, videos: list[VideoEntry], **kwargs):
        super().__init__(**kwargs)
        self.videos = list(videos)

    def compose(self) -> ComposeResult:
        with Horizontal(id="grid-header"):
            yield Static(f"{ICON_MOVIE} My Videos", id="grid-title")
            yield Button(ICON_SETTINGS, id="settings-button")

        if not self.videos:
            yield Static("No videos yet. Ask a grown-up!", id="grid-empty")
            return

        with Grid(id="video-grid"):
            for entry in self.videos:
                yield VideoCard(entry)

    def on_mount(self) -> None:
        cards = self.query(VideoCard)
        if cards:
            cards.first().focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if isinstance(event.button, VideoCard):
            self.post_message(self.VideoSelected(event.button.entry))
        elif event.button.id == "settings-button":
            self.post_message(self.SettingsRequested())
