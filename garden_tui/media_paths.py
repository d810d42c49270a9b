"""
Local video file naming.

The player's local fallback and scripts/download_videos.py must agree on
where a video lives. Both call local_video_path(); nothing else builds
these paths.
"""

import re
from pathlib import Path

from .constants import LOCAL_VIDEO_EXTENSION

# Characters not allowed in filenames on common filesystems
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")


def sanitize_title(title: str) -> str:
    """Strip filename-illegal characters, collapse whitespace, trim."""
    cleaned = _ILLEGAL_CHARS.sub("", title)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    return cleaned.strip()


def local_video_path(title: str, base_dir: Path) -> Path:
    """Path of the local copy of the video with this title."""
    return Path(base_dir) / f"{sanitize_title(title)}{LOCAL_VIDEO_EXTENSION}"
