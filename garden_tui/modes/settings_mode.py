"""
Settings Mode - library management for parents

Only reachable through the parent gate. Add a video by id or URL, remove
videos, or go back to the built-in set. Every change is saved right away.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Input, Select, Static

from ..constants import (
    COLOR_CHOICES, EMOJI_CHOICES, TITLE_MAX_LENGTH,
    ICON_BACK, ICON_SETTINGS, ICON_TRASH,
)
from ..library import VideoEntry, extract_video_id, thumbnail_url
from ..navigation import NavigationController


class RemoveButton(Button):
    """Trash button for one library row"""

    DEFAULT_CSS = """
    RemoveButton {
        width: 8;
        min-width: 8;
    }
    """

    def __init__(self, video_id: str, **kwargs):
        super().__init__(ICON_TRASH, variant="error", **kwargs)
        self.video_id = video_id


class VideoRow(Horizontal):
    """One library entry in the list"""

    DEFAULT_CSS = """
    VideoRow {
        width: 100%;
        height: 3;
    }

    VideoRow .row-label {
        width: 1fr;
        height: 3;
        content-align: left middle;
    }
    """

    def __init__(self, entry: VideoEntry, **kwargs):
        super().__init__(**kwargs)
        self.entry = entry

    def compose(self) -> ComposeResult:
        label = Text.assemble(f"{self.entry.emoji}  {self.entry.title}  ", (self.entry.id, "dim"))
        yield Static(label, classes="row-label")
        yield RemoveButton(self.entry.id)

    def on_mount(self) -> None:
        self.tooltip = thumbnail_url(self.entry.id)


class SettingsMode(Container):
    """Parent settings panel"""

    DEFAULT_CSS = """
    SettingsMode {
        width: 100%;
        height: 100%;
    }

    #settings-header, #settings-actions, #form-buttons {
        width: 100%;
        height: 3;
    }

    #settings-title {
        width: 1fr;
        height: 3;
        content-align: center middle;
        text-style: bold;
        color: $primary;
    }

    #settings-actions Button, #form-buttons Button {
        margin-right: 2;
    }

    #add-form {
        display: none;
        height: auto;
        border: round $primary;
        padding: 0 1;
    }

    #add-form.visible {
        display: block;
    }

    #add-form Select {
        width: 30;
    }

    #form-error {
        color: $error;
        height: 1;
    }

    #list-title {
        margin-top: 1;
        text-style: bold;
    }

    #video-list {
        height: 1fr;
    }
    """

    class CloseRequested(Message, bubble=True):
        """Back to the grid"""

    def __init__(self, nav: NavigationController, **kwargs):
        super().__init__(**kwargs)
        self.nav = nav
        self.error_message = ""

    def compose(self) -> ComposeResult:
        with Horizontal(id="settings-header"):
            yield Button(f"{ICON_BACK} Back", id="settings-back")
            yield Static(f"{ICON_SETTINGS} Parent Settings", id="settings-title")

        with Horizontal(id="settings-actions"):
            yield Button("➕ Add Video", id="show-add-form", variant="primary")
            yield Button("🔄 Reset to Defaults", id="reset-library")

        with Container(id="add-form"):
            yield Static("YouTube Video ID or URL")
            yield Input(placeholder="e.g., dQw4w9WgXcQ or full YouTube URL", id="new-video-id")
            yield Static("Video Title (for child to see)")
            yield Input(placeholder="e.g., Fun Dance Song", id="new-video-title",
                        max_length=TITLE_MAX_LENGTH)
            with Horizontal(id="form-pickers", classes="pickers"):
                yield Select([(e, e) for e in EMOJI_CHOICES], value=EMOJI_CHOICES[0],
                             allow_blank=False, id="emoji-select")
                yield Select([(c, c) for c in COLOR_CHOICES], value=COLOR_CHOICES[0],
                             allow_blank=False, id="color-select")
            yield Static("", id="form-error")
            with Horizontal(id="form-buttons"):
                yield Button("Cancel", id="form-cancel")
                yield Button("Add Video", id="form-submit", variant="success")

        yield Static("", id="list-title")
        yield VerticalScroll(id="video-list")

    async def on_mount(self) -> None:
        await self.refresh_list()

    async def refresh_list(self) -> None:
        """Rebuild the library list from the controller"""
        videos = self.nav.library
        self.query_one("#list-title", Static).update(f"Video Library ({len(videos)} videos)")
        video_list = self.query_one("#video-list", VerticalScroll)
        await video_list.remove_children()
        await video_list.mount_all([VideoRow(entry) for entry in videos])

    # ------------------------------------------------------------------

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button = event.button

        if isinstance(button, RemoveButton):
            if self.nav.remove_video(button.video_id):
                await self.refresh_list()
            return

        if button.id == "settings-back":
            self.post_message(self.CloseRequested())
        elif button.id == "show-add-form":
            self._show_form(True)
        elif button.id == "reset-library":
            self.nav.reset_library()
            await self.refresh_list()
            self.app.notify("Library reset to defaults")
        elif button.id == "form-cancel":
            self._show_form(False)
        elif button.id == "form-submit":
            await self._submit_form()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        await self._submit_form()

    async def _submit_form(self) -> None:
        """Validate the form, hand the entry to the controller"""
        raw_id = self.query_one("#new-video-id", Input).value
        title = self.query_one("#new-video-title", Input).value.strip()

        video_id = extract_video_id(raw_id)
        if not video_id:
            self._set_error("Invalid YouTube video ID or URL")
            return
        if not title:
            self._set_error("Please enter a title")
            return

        entry = VideoEntry(
            id=video_id,
            title=title,
            emoji=self.query_one("#emoji-select", Select).value,
            color=self.query_one("#color-select", Select).value,
        )

        # The controller checks again, including duplicates
        ok, message = self.nav.add_video(entry)
        if not ok:
            self._set_error(message)
            return

        self._show_form(False)
        await self.refresh_list()
        self.app.notify(message)

    def _set_error(self, message: str) -> None:
        self.error_message = message
        self.query_one("#form-error", Static).update(message)

    def _show_form(self, visible: bool) -> None:
        form = self.query_one("#add-form")
        form.set_class(visible, "visible")
        self._set_error("")
        if visible:
            self.query_one("#new-video-id", Input).focus()
        else:
            self.query_one("#new-video-id", Input).value = ""
            self.query_one("#new-video-title", Input).value = ""
