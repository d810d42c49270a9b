"""
Video Library for Garden

The library is the complete, ordered list of videos a child can reach.
It lives in a single JSON file (~/.garden/library.json) and is rewritten in
full on every change. A missing or damaged file means the built-in defaults.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .constants import THUMBNAIL_HOST, VIDEO_ID_LENGTH

logger = logging.getLogger(__name__)


VIDEO_ID_RE = re.compile(r"[A-Za-z0-9_-]{%d}" % VIDEO_ID_LENGTH)

# URL shapes a parent might paste. Each captures the 11-char id.
_URL_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=)([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:youtu\.be/)([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:youtube\.com/embed/)([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:youtube\.com/v/)([A-Za-z0-9_-]{11})"),
]


@dataclass(frozen=True)
class VideoEntry:
    """One approved video"""
    id: str
    title: str
    emoji: str = "🎵"
    color: str = "#FF6B6B"

    def to_dict(self) -> dict:
        return asdict(self)


# Built-in library - used on first run, after a reset, or if the saved
# library can't be read
DEFAULT_LIBRARY: tuple[VideoEntry, ...] = (
    VideoEntry("XqZsoesa55w", "Baby Shark", "🦈", "#4ECDC4"),
    VideoEntry("e_04ZrNroTo", "Wheels on the Bus", "🚌", "#FFE66D"),
    VideoEntry("yCjJyiqpAuU", "Twinkle Twinkle", "⭐", "#A78BFA"),
    VideoEntry("hq3yfQnllfQ", "Phonics Song", "🔤", "#FF6B6B"),
    VideoEntry("75NQK-Sm1YY", "Old MacDonald", "🐮", "#95E1D3"),
    VideoEntry("l4WNrvVjiTw", "If You're Happy", "😊", "#FDCB6E"),
    VideoEntry("QkHQ0CYwjaI", "Head Shoulders Knees", "🙆", "#FF85A2"),
    VideoEntry("D0Ajq682yrA", "Five Little Ducks", "🦆", "#67B7DC"),
)


def is_valid_video_id(video_id: str) -> bool:
    """Exactly 11 URL-safe characters"""
    return isinstance(video_id, str) and bool(VIDEO_ID_RE.fullmatch(video_id))


def extract_video_id(raw: str) -> Optional[str]:
    """
    Pull a video id out of whatever a parent pasted.

    Accepts a bare id or a watch?v=, youtu.be/, embed/ or /v/ URL.
    Returns None if nothing usable was found.
    """
    if not raw:
        return None

    raw = raw.strip()
    if is_valid_video_id(raw):
        return raw

    for pattern in _URL_PATTERNS:
        match = pattern.search(raw)
        if match:
            return match.group(1)

    return None


def thumbnail_url(video_id: str, quality: str = "mqdefault") -> str:
    """Conventional thumbnail location for a video id"""
    return f"{THUMBNAIL_HOST}/vi/{video_id}/{quality}.jpg"


def validate_entry(entry: VideoEntry, library: list[VideoEntry]) -> tuple[bool, str]:
    """
    Check a new entry against the library.

    Returns:
        Tuple of (ok, message) - message explains the rejection
    """
    if not is_valid_video_id(entry.id):
        return False, "Invalid YouTube video ID or URL"

    if not entry.title or not entry.title.strip():
        return False, "Please enter a title"

    if any(v.id == entry.id for v in library):
        return False, "This video is already in the library"

    return True, ""


def _parse_entries(payload) -> list[VideoEntry]:
    """
    Turn decoded JSON into entries. Raises ValueError on anything malformed,
    including duplicate ids.
    """
    if not isinstance(payload, list):
        raise ValueError("library must be a list")

    entries = []
    seen = set()
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError("library item must be an object")

        fields = {}
        for key in ("id", "title", "emoji", "color"):
            value = item.get(key)
            if not isinstance(value, str):
                raise ValueError(f"library item field {key!r} missing or not a string")
            fields[key] = value

        if not is_valid_video_id(fields["id"]):
            raise ValueError(f"bad video id {fields['id']!r}")
        if not fields["title"].strip():
            raise ValueError(f"empty title for {fields['id']}")
        if fields["id"] in seen:
            raise ValueError(f"duplicate video id {fields['id']}")

        seen.add(fields["id"])
        entries.append(VideoEntry(**fields))

    return entries


class LibraryStore:
    """
    Reads and writes the persisted library.

    The store keeps no copy of its own; NavigationController owns the
    in-memory list and hands the whole thing back on every save.
    """

    def __init__(self, path: Optional[Path] = None):
        if path is None:
            from .config import get_library_path
            path = get_library_path()
        self.path = Path(path)

    def load(self) -> list[VideoEntry]:
        """Load the saved library, or the defaults if missing or damaged"""
        if not self.path.exists():
            return list(DEFAULT_LIBRARY)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            return _parse_entries(payload)
        except (OSError, ValueError, RecursionError) as e:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting recurses
            logger.warning(f"Saved library unreadable, using defaults: {e}")
            return list(DEFAULT_LIBRARY)

    def save(self, entries: list[VideoEntry]) -> bool:
        """Write the full library. Returns True on success."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in entries], f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"Could not save library to {self.path}: {e}")
            return False
