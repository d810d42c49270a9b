"""
Garden: Navigation

One controller owns everything that decides what the child can see:
- which view is showing (grid, player, settings)
- which video is selected
- whether the parent gate is up
- the video library, and writing it to disk

Views never change state themselves; they call the operations here.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from .library import LibraryStore, VideoEntry, DEFAULT_LIBRARY, validate_entry

logger = logging.getLogger(__name__)


class View(Enum):
    """The 3 views"""
    GRID = 1      # Pick a video
    PLAYER = 2    # Watch it
    SETTINGS = 3  # Grown-ups only


@dataclass(frozen=True)
class NavigationState:
    view: View = View.GRID
    selected: Optional[VideoEntry] = None  # Set only while view is PLAYER
    gate_open: bool = False


class NavigationController:
    """
    Mediates every transition and library change.

    Listeners registered with on_change() get the new NavigationState
    after each change.
    """

    def __init__(self, store: LibraryStore):
        self.store = store
        self.state = NavigationState()
        self._library: list[VideoEntry] = store.load()
        self._listeners: list[Callable[[NavigationState], None]] = []

    @property
    def library(self) -> list[VideoEntry]:
        """Copy of the library - mutate through add/remove/reset only"""
        return list(self._library)

    @property
    def view(self) -> View:
        return self.state.view

    def on_change(self, callback: Callable[[NavigationState], None]) -> None:
        """Register callback for state or library changes."""
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # View transitions
    # ------------------------------------------------------------------

    def select_video(self, entry: VideoEntry) -> bool:
        """Grid -> Player"""
        if self.state.view != View.GRID or self.state.gate_open:
            return False
        if entry not in self._library:
            logger.warning(f"Ignoring selection of unknown video {entry.id}")
            return False
        self._set_state(view=View.PLAYER, selected=entry)
        return True

    def back(self) -> bool:
        """Player -> Grid"""
        if self.state.view != View.PLAYER:
            return False
        self._set_state(view=View.GRID, selected=None)
        return True

    def request_settings(self) -> bool:
        """Put the parent gate up. The view underneath doesn't change."""
        if self.state.gate_open or self.state.view == View.SETTINGS:
            return False
        self._set_state(gate_open=True)
        return True

    def on_gate_success(self) -> None:
        """Gate passed: close it and go to settings"""
        if not self.state.gate_open:
            return
        self._set_state(view=View.SETTINGS, selected=None, gate_open=False)

    def on_gate_cancel(self) -> None:
        """Gate dismissed: close it, stay where we were"""
        if not self.state.gate_open:
            return
        self._set_state(gate_open=False)

    def close_settings(self) -> bool:
        """Settings -> Grid"""
        if self.state.view != View.SETTINGS:
            return False
        self._set_state(view=View.GRID)
        return True

    # ------------------------------------------------------------------
    # Exit interception
    # ------------------------------------------------------------------

    def handle_back_gesture(self) -> bool:
        """
        The child pressed "back". In the player that means back to the grid.
        Anywhere else it's swallowed and nothing changes.

        Returns True if it caused a transition.
        """
        if self.state.view == View.PLAYER and not self.state.gate_open:
            return self.back()
        return False

    def confirm_leave_required(self) -> bool:
        """Quitting always asks first. Best effort: a terminal can still be killed."""
        return True

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    def add_video(self, entry: VideoEntry) -> tuple[bool, str]:
        """
        Append a video and save.

        Re-checks the id, title and duplicates even if the caller already did.

        Returns:
            Tuple of (success, message)
        """
        entry = replace(entry, title=entry.title.strip())
        ok, message = validate_entry(entry, self._library)
        if not ok:
            return False, message

        self._library.append(entry)
        self._persist()
        logger.info(f"Added video {entry.id} ({entry.title})")
        return True, f"Added {entry.title}"

    def remove_video(self, video_id: str) -> bool:
        """Remove a video by id and save. Returns False if it wasn't there."""
        remaining = [v for v in self._library if v.id != video_id]
        if len(remaining) == len(self._library):
            return False
        self._library = remaining
        self._persist()
        logger.info(f"Removed video {video_id}")
        return True

    def reset_library(self) -> None:
        """Back to the built-in videos and save"""
        self._library = list(DEFAULT_LIBRARY)
        self._persist()
        logger.info("Library reset to defaults")

    def _persist(self) -> None:
        # Always the whole list, never a delta
        self.store.save(self._library)
        self._notify()

    # ------------------------------------------------------------------

    def _set_state(self, **changes) -> None:
        self.state = replace(self.state, **changes)
        self._notify()

    def _notify(self) -> None:
        for callback in self._listeners:
            callback(self.state)
