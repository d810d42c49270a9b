"""
Garden: Playback Controller

Plays one video on a loop, trying the remote source first and falling back
to a local copy exactly once if the remote source fails.

    start()  ->  REMOTE (loading)
      remote ready   -> playing
      remote error   -> LOCAL (loading)  -- only ever once
        local loaded -> playing
        local error  -> errored          -- final, nothing else to try
      end of media   -> seek to 0, play  -- forever, on whichever source

The controller does no I/O itself. Sources are MediaSource objects; their
callbacks (ready/error/end) are routed back into the on_* methods below by
whoever owns the event loop.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlencode

from .constants import PRIVACY_HOST
from .library import VideoEntry
from .media_paths import local_video_path

logger = logging.getLogger(__name__)


class SourceMode(Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass
class PlaybackSession:
    """Lives exactly as long as the player view"""
    entry: VideoEntry
    source_mode: SourceMode = SourceMode.REMOTE
    loading: bool = True
    errored: bool = False


@dataclass(frozen=True)
class RemoteOptions:
    """
    Everything the remote player is told so it stays inside the garden.

    player_vars() gives the YouTube embed parameters
    (https://developers.google.com/youtube/player_parameters).
    """
    suppress_related: bool = True       # rel=0
    suppress_branding: bool = True      # modestbranding=1
    disable_keyboard: bool = True       # disablekb=1
    disable_fullscreen: bool = True     # fs=0
    hide_annotations: bool = True       # iv_load_policy=3
    inline: bool = True                 # playsinline=1
    autoplay: bool = True
    privacy_host: bool = True           # youtube-nocookie.com
    show_controls: bool = True

    def player_vars(self) -> dict[str, int]:
        return {
            "rel": 0 if self.suppress_related else 1,
            "modestbranding": 1 if self.suppress_branding else 0,
            "controls": 1 if self.show_controls else 0,
            "disablekb": 1 if self.disable_keyboard else 0,
            "fs": 0 if self.disable_fullscreen else 1,
            "iv_load_policy": 3 if self.hide_annotations else 1,
            "playsinline": 1 if self.inline else 0,
            "cc_load_policy": 0,
            "autoplay": 1 if self.autoplay else 0,
        }

    def embed_url(self, video_id: str) -> str:
        host = PRIVACY_HOST if self.privacy_host else "https://www.youtube.com"
        return f"{host}/embed/{video_id}?{urlencode(self.player_vars())}"


class MediaSource:
    """
    A thing that can play one video.

    Implementations report back through the callbacks given at construction:
    on_ready(), on_error(code), on_end(). They may be called from any thread
    the owner arranges; PlaybackController expects them on its own thread.
    """

    def __init__(
        self,
        on_ready: Callable[[], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ):
        self.on_ready = on_ready
        self.on_error = on_error
        self.on_end = on_end

    def load(self, target: str) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def seek_to_start(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


# (on_ready, on_error, on_end) -> MediaSource
SourceFactory = Callable[[Callable[[], None], Callable[[str], None], Callable[[], None]], MediaSource]


class PlaybackController:
    """
    Drives one PlaybackSession.

    Args:
        entry: The video to play
        remote_factory: Builds the remote MediaSource
        local_factory: Builds the local MediaSource (only on fallback)
        videos_dir: Base directory for local copies
        options: Remote player configuration
        on_change: Called with the session after every state change
    """

    def __init__(
        self,
        entry: VideoEntry,
        remote_factory: SourceFactory,
        local_factory: SourceFactory,
        videos_dir: Path,
        options: Optional[RemoteOptions] = None,
        on_change: Optional[Callable[[PlaybackSession], None]] = None,
    ):
        self.entry = entry
        self._remote_factory = remote_factory
        self._local_factory = local_factory
        self.videos_dir = Path(videos_dir)
        self.options = options or RemoteOptions()
        self._on_change = on_change

        self.session: Optional[PlaybackSession] = None
        self._remote: Optional[MediaSource] = None
        self._local: Optional[MediaSource] = None

    @property
    def active_source(self) -> Optional[MediaSource]:
        if self.session is None:
            return None
        if self.session.source_mode == SourceMode.LOCAL:
            return self._local
        return self._remote

    @property
    def local_path(self) -> Path:
        return local_video_path(self.entry.title, self.videos_dir)

    def start(self) -> None:
        """Begin a new session on the remote source"""
        if self.session is not None:
            return
        self.session = PlaybackSession(entry=self.entry)
        self._remote = self._remote_factory(
            self.on_remote_ready, self.on_remote_error, self._on_remote_end,
        )
        logger.info(f"Playing {self.entry.id} ({self.entry.title}) from remote")
        self._notify()
        self._remote.load(self.options.embed_url(self.entry.id))

    # -- remote signals --

    def on_remote_ready(self) -> None:
        if not self._is_mode(SourceMode.REMOTE):
            return
        self.session.loading = False
        self._notify()
        self._remote.play()

    def on_remote_error(self, code: str = "") -> None:
        """Remote failed (blocked, restricted, gone). Switch to local, once."""
        if not self._is_mode(SourceMode.REMOTE):
            return

        logger.warning(f"Remote playback failed for {self.entry.id} ({code}), trying local copy")
        self._remote.stop()

        self.session.source_mode = SourceMode.LOCAL
        self.session.loading = True
        self.session.errored = False
        self._local = self._local_factory(
            self.on_local_loaded, self.on_local_error, self._on_local_end,
        )
        self._notify()
        self._local.load(str(self.local_path))

    # -- local signals --

    def on_local_loaded(self) -> None:
        if not self._is_mode(SourceMode.LOCAL):
            return
        self.session.loading = False
        self._notify()
        self._local.play()

    def on_local_error(self, code: str = "") -> None:
        """Local copy failed too. Nothing left to try."""
        if not self._is_mode(SourceMode.LOCAL) or self.session.errored:
            return
        logger.warning(f"Local playback failed for {self.local_path} ({code})")
        self.session.errored = True
        self.session.loading = False
        self._notify()

    # -- end of media --

    def on_media_end(self) -> None:
        """Kids love repetition: back to the start, keep playing."""
        if self.session is None or self.session.errored:
            return
        source = self.active_source
        source.seek_to_start()
        source.play()

    def _on_remote_end(self) -> None:
        if self._is_mode(SourceMode.REMOTE):
            self.on_media_end()

    def _on_local_end(self) -> None:
        if self._is_mode(SourceMode.LOCAL):
            self.on_media_end()

    def stop(self) -> None:
        """Leaving the player: stop whatever is playing, drop the session"""
        if self.session is None:
            return
        for source in (self._remote, self._local):
            if source is not None:
                source.stop()
        self._remote = None
        self._local = None
        self.session = None
        logger.debug(f"Playback of {self.entry.id} stopped")

    def _is_mode(self, mode: SourceMode) -> bool:
        return self.session is not None and self.session.source_mode == mode

    def _notify(self) -> None:
        if self._on_change and self.session is not None:
            self._on_change(self.session)
