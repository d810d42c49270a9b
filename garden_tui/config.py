"""
Garden - Configuration

Everything is driven by environment variables with safe defaults, so the
app runs with no config file at all.

Demo mode: Set GARDEN_GATE_DEMO=1 to shorten the hold-to-unlock time.
"""

import os
from pathlib import Path

from .constants import HOLD_DURATION


def get_data_dir() -> Path:
    """Directory holding the library file and local videos."""
    override = os.environ.get("GARDEN_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".garden"


def get_library_path() -> Path:
    """Where the video library is persisted."""
    override = os.environ.get("GARDEN_LIBRARY")
    if override:
        return Path(override).expanduser()
    return get_data_dir() / "library.json"


def get_videos_dir() -> Path:
    """Base directory for locally downloaded fallback videos."""
    override = os.environ.get("GARDEN_VIDEOS_DIR")
    if override:
        return Path(override).expanduser()
    return get_data_dir() / "videos"


def get_mpv_path() -> str:
    """mpv binary to launch (resolved from PATH unless overridden)."""
    return os.environ.get("GARDEN_MPV", "mpv")


def get_log_file() -> Path | None:
    """Optional log file. Textual owns the terminal, so stderr is not an option."""
    override = os.environ.get("GARDEN_LOG_FILE")
    if override:
        return Path(override).expanduser()
    return None


def get_hold_duration() -> float:
    """Hold-to-unlock duration - shortened if GARDEN_GATE_DEMO is set."""
    if os.environ.get("GARDEN_GATE_DEMO"):
        return 1.0
    return HOLD_DURATION
