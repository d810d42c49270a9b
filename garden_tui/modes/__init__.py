"""
Garden Views

Textual widgets for each view, plus the modal screens (parent gate,
leave confirmation). Views only post messages; GardenApp turns those into
NavigationController calls.
"""

from .video_grid import VideoGrid
from .player_mode import PlayerMode
from .settings_mode import SettingsMode
from .parent_gate import ParentGateScreen
from .leave_screen import LeaveScreen

__all__ = ["VideoGrid", "PlayerMode", "SettingsMode", "ParentGateScreen", "LeaveScreen"]
