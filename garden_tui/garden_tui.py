#!/usr/bin/env python3
"""
Garden - Main Textual TUI Application

A walled-garden video player for kids. The child only ever sees the
videos a parent approved, one at a time, looping.

Controls:
- Arrow keys / Tab / mouse: Pick a video
- Enter or click: Play it
- Escape or Backspace: Back from the player to the grid
- Settings cog: Parent settings (behind the parent gate)
- Ctrl+Q / Ctrl+C: Asks before leaving
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.logging import TextualHandler
from textual.theme import Theme

from .config import get_library_path, get_log_file, get_mpv_path, get_videos_dir
from .library import LibraryStore, VideoEntry
from .modes import LeaveScreen, ParentGateScreen, PlayerMode, SettingsMode, VideoGrid
from .modes.player_mode import ControllerFactory
from .mpv_player import LOCAL_ARGS, MpvSource, remote_mpv_args
from .navigation import NavigationController, NavigationState, View
from .playback import PlaybackController, PlaybackSession, RemoteOptions

logger = logging.getLogger(__name__)


class GardenApp(App):
    """
    Garden - the walled-garden video player.

    Args:
        library_path: Library file (defaults to config)
        videos_dir: Local fallback videos (defaults to config)
        controller_factory: Builds the PlaybackController for each video
            (defaults to mpv-backed sources)
    """

    CSS = """
    Screen {
        background: $background;
    }

    #outer-container {
        width: 100%;
        height: 100%;
        padding: 1 2;
        background: $background;
    }

    #content-area {
        width: 100%;
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
        Binding("backspace", "back", "Back", show=False),
        Binding("ctrl+q", "request_leave", "Leave", show=False, priority=True),
        Binding("ctrl+c", "request_leave", "Leave", show=False, priority=True),
    ]

    def __init__(
        self,
        library_path: Optional[Path] = None,
        videos_dir: Optional[Path] = None,
        controller_factory: Optional[ControllerFactory] = None,
    ):
        super().__init__()
        self.videos_dir = Path(videos_dir) if videos_dir else get_videos_dir()
        self.controller_factory = controller_factory or self._make_mpv_controller
        self.nav = NavigationController(LibraryStore(library_path or get_library_path()))
        self.nav.on_change(self._on_nav_change)

        self._rendered_view: Optional[View] = None
        self._leave_prompt_open = False

        self.register_theme(
            Theme(
                name="garden",
                primary="#4ECDC4",
                secondary="#45B7D1",
                warning="#F7DC6F",
                error="#FF6B6B",
                success="#96CEB4",
                accent="#FFEAA7",
                background="#1b2a3a",
                surface="#24384d",
                panel="#24384d",
                dark=True,
            )
        )
        self.theme = "garden"

    def compose(self) -> ComposeResult:
        """Create the UI layout"""
        with Container(id="outer-container"):
            yield Container(id="content-area")

    async def on_mount(self) -> None:
        self._rendered_view = self.nav.view
        await self._render_view()

    # ------------------------------------------------------------------
    # View rendering
    # ------------------------------------------------------------------

    def _on_nav_change(self, state: NavigationState) -> None:
        if state.view == self._rendered_view:
            return
        self._rendered_view = state.view
        self.call_later(self._render_view)

    def _create_view_widget(self):
        """Widget for the controller's current view"""
        state = self.nav.state
        if state.view == View.PLAYER and state.selected is not None:
            return PlayerMode(state.selected, self.controller_factory, id="view-player")
        if state.view == View.SETTINGS:
            return SettingsMode(self.nav, id="view-settings")
        return VideoGrid(self.nav.library, id="view-grid")

    async def _render_view(self) -> None:
        """Swap the content area to whatever the controller says is showing"""
        content_area = self.query_one("#content-area")
        # Unmounting the player stops its playback
        await content_area.remove_children()
        await content_area.mount(self._create_view_widget())

    def _make_mpv_controller(
        self, entry: VideoEntry, on_change: Callable[[PlaybackSession], None],
    ) -> PlaybackController:
        options = RemoteOptions()
        mpv_path = get_mpv_path()

        def remote_source(on_ready, on_error, on_end):
            return MpvSource(
                on_ready, on_error, on_end,
                extra_args=remote_mpv_args(options),
                mpv_path=mpv_path,
                dispatch=self.call_from_thread,
            )

        def local_source(on_ready, on_error, on_end):
            return MpvSource(
                on_ready, on_error, on_end,
                extra_args=LOCAL_ARGS,
                mpv_path=mpv_path,
                dispatch=self.call_from_thread,
                check_exists=True,
            )

        return PlaybackController(
            entry,
            remote_factory=remote_source,
            local_factory=local_source,
            videos_dir=self.videos_dir,
            options=options,
            on_change=on_change,
        )

    # ------------------------------------------------------------------
    # Messages from the views
    # ------------------------------------------------------------------

    def on_video_grid_video_selected(self, event: VideoGrid.VideoSelected) -> None:
        self.nav.select_video(event.entry)

    def on_video_grid_settings_requested(self, event: VideoGrid.SettingsRequested) -> None:
        if not self.nav.request_settings():
            return

        def handle_gate_result(passed: bool) -> None:
            if passed:
                logger.info("Parent gate passed")
                self.nav.on_gate_success()
            else:
                self.nav.on_gate_cancel()

        self.push_screen(ParentGateScreen(), handle_gate_result)

    def on_player_mode_back_requested(self, event: PlayerMode.BackRequested) -> None:
        self.nav.back()

    def on_settings_mode_close_requested(self, event: SettingsMode.CloseRequested) -> None:
        self.nav.close_settings()

    # ------------------------------------------------------------------
    # Exit interception
    # ------------------------------------------------------------------

    def action_back(self) -> None:
        """Escape/Backspace: back to the grid from the player, ignored elsewhere"""
        self.nav.handle_back_gesture()

    def action_request_leave(self) -> None:
        if not self.nav.confirm_leave_required():
            self.exit()
            return
        if self._leave_prompt_open:
            return
        self._leave_prompt_open = True

        def handle_leave_result(leave: bool) -> None:
            self._leave_prompt_open = False
            if leave:
                logger.info("Leaving Garden")
                self.exit()

        self.push_screen(LeaveScreen(), handle_leave_result)


def setup_logging() -> None:
    """Log to the Textual devtools console, and to a file if configured"""
    handlers: list[logging.Handler] = [TextualHandler()]
    log_file = get_log_file()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)
    logging.basicConfig(level=logging.INFO, handlers=handlers)


def main():
    """Entry point for Garden"""
    setup_logging()
    app = GardenApp()
    app.run()


if __name__ == "__main__":
    main()
