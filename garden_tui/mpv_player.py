"""
Garden: mpv media source

Plays a video in an mpv window controlled over mpv's JSON IPC socket.
Used for both the remote source (embed URL, resolved by mpv's yt-dlp hook)
and the local fallback (a file under the videos directory).

The mpv window accepts no input at all: no keyboard shortcuts, no mouse,
no on-screen controller. The Back button in the terminal is the only way
out of a video.

Threading: mpv is launched and read on a daemon thread. Every callback is
handed to `dispatch`, which the app sets to App.call_from_thread so the
playback controller only ever runs on the UI thread.
"""

import json
import logging
import os
import socket
import subprocess
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, Callable, Optional

from .playback import MediaSource, RemoteOptions

logger = logging.getLogger(__name__)

IPC_CONNECT_TIMEOUT = 5.0   # seconds to wait for mpv to create its socket

# Always applied: lock the video surface down
MPV_BASE_ARGS = [
    "--no-terminal",
    "--really-quiet",
    "--force-window=yes",
    "--keep-open=yes",        # Pause on the last frame instead of unloading (loop via IPC)
    "--pause",                # Wait for the controller to say play
    "--no-input-default-bindings",
    "--input-vo-keyboard=no",
    "--input-cursor=no",      # Mouse clicks on the video do nothing
    "--no-osc",
    "--osd-level=0",
    "--cursor-autohide=always",
]

LOCAL_ARGS = ["--ytdl=no"]


def remote_mpv_args(options: RemoteOptions) -> list[str]:
    """mpv flags matching the remote player configuration"""
    args = ["--ytdl=yes", "--ytdl-format=best[ext=mp4]/best"]
    if options.disable_fullscreen or options.inline:
        args.append("--fullscreen=no")
    if options.hide_annotations:
        args.append("--sub-auto=no")
    return args


def translate_event(message: dict[str, Any]) -> Optional[tuple[str, str]]:
    """
    Map one mpv IPC message to a source signal.

    Returns ("ready", ""), ("error", code), ("end", "") or None for
    messages we don't care about.
    """
    event = message.get("event")
    if event == "file-loaded":
        return ("ready", "")
    if event == "end-file" and message.get("reason") == "error":
        return ("error", str(message.get("file_error") or "error"))
    if (
        event == "property-change"
        and message.get("name") == "eof-reached"
        and message.get("data") is True
    ):
        return ("end", "")
    return None


def _default_ipc_path() -> str:
    name = f"garden-mpv-{os.getpid()}-{time.monotonic_ns()}.sock"
    return os.path.join(tempfile.gettempdir(), name)


class MpvSource(MediaSource):
    """
    One mpv process playing one target.

    Args:
        on_ready, on_error, on_end: Source callbacks (see MediaSource)
        extra_args: Source-specific mpv flags (remote_mpv_args() or LOCAL_ARGS)
        mpv_path: mpv binary
        dispatch: Runs a callback on the UI thread (defaults to calling it directly)
        check_exists: Report a missing target file as an error without launching mpv
    """

    def __init__(
        self,
        on_ready: Callable[[], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
        extra_args: Optional[list[str]] = None,
        mpv_path: str = "mpv",
        dispatch: Optional[Callable[..., Any]] = None,
        check_exists: bool = False,
    ):
        super().__init__(on_ready, on_error, on_end)
        self.extra_args = list(extra_args or [])
        self.mpv_path = mpv_path
        self.check_exists = check_exists
        self._dispatch = dispatch or (lambda fn, *args: fn(*args))

        self.ipc_path = _default_ipc_path()
        self._proc: Optional[subprocess.Popen] = None
        self._sock: Optional[socket.socket] = None
        self._tx_lock = threading.Lock()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def build_command(self, target: str) -> list[str]:
        return [
            self.mpv_path,
            *MPV_BASE_ARGS,
            *self.extra_args,
            f"--input-ipc-server={self.ipc_path}",
            target,
        ]

    # -- MediaSource --

    def load(self, target: str) -> None:
        self._thread = threading.Thread(
            target=self._run, args=(target,), name="garden-mpv", daemon=True,
        )
        self._thread.start()

    def play(self) -> None:
        self._send(["set_property", "pause", False])

    def seek_to_start(self) -> None:
        self._send(["seek", 0, "absolute"])

    def stop(self) -> None:
        if self._stopping.is_set():
            return
        self._stopping.set()
        self._send(["quit"])
        self._terminate()
        self._close_socket()

    def _terminate(self) -> None:
        if self._proc is not None and self._proc.poll() is None:
            try:
                self._proc.terminate()
            except (OSError, ProcessLookupError):
                pass  # Already gone

    # -- worker thread --

    def _run(self, target: str) -> None:
        if self._stopping.is_set():
            return
        if self.check_exists and not Path(target).exists():
            logger.info(f"No local copy at {target}")
            self._signal(self.on_error, "file-not-found")
            return

        try:
            self._proc = subprocess.Popen(
                self.build_command(target),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Could not launch mpv ({self.mpv_path}): {e}")
            self._signal(self.on_error, "mpv-missing")
            return

        if self._stopping.is_set():
            # stop() raced the launch
            self._terminate()
            self._reap()
            return

        if not self._connect():
            if self._stopping.is_set():
                self._reap()
                return
            logger.error(f"mpv IPC socket never appeared at {self.ipc_path}")
            self._terminate()
            self._reap()
            self._signal(self.on_error, "ipc-failed")
            return

        self._send(["observe_property", 1, "eof-reached"])
        self._read_loop()

        # Socket closed: either we stopped mpv, or it went away on its own
        self._reap()
        if not self._stopping.is_set():
            logger.warning("mpv exited unexpectedly")
            self._signal(self.on_error, "mpv-exited")

    def _connect(self) -> bool:
        deadline = time.monotonic() + IPC_CONNECT_TIMEOUT
        while time.monotonic() < deadline and not self._stopping.is_set():
            if self._proc.poll() is not None:
                return False
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(self.ipc_path)
                self._sock = sock
                return True
            except OSError:
                sock.close()
                time.sleep(0.05)
        return False

    def _read_loop(self) -> None:
        buf = b""
        while not self._stopping.is_set() and self._sock is not None:
            try:
                chunk = self._sock.recv(4096)
            except OSError:
                break
            if not chunk:
                break

            buf += chunk
            while b"\n" in buf:
                line, buf = buf.split(b"\n", 1)
                if not line.strip():
                    continue
                try:
                    message = json.loads(line.decode("utf-8", errors="replace"))
                except ValueError:
                    continue  # Ignore malformed line
                if isinstance(message, dict):
                    self._handle_message(message)

    def _handle_message(self, message: dict[str, Any]) -> None:
        signal = translate_event(message)
        if signal is None:
            return
        kind, code = signal
        if kind == "ready":
            self._signal(self.on_ready)
        elif kind == "error":
            self._signal(self.on_error, code)
        elif kind == "end":
            self._signal(self.on_end)

    def _signal(self, callback: Callable, *args) -> None:
        if self._stopping.is_set():
            return
        try:
            self._dispatch(callback, *args)
        except RuntimeError as e:
            # App already shut down
            logger.debug(f"Dropped mpv signal: {e}")

    def _send(self, command: list) -> None:
        line = (json.dumps({"command": command}) + "\n").encode("utf-8")
        with self._tx_lock:
            if self._sock is None:
                return
            try:
                self._sock.sendall(line)
            except OSError as e:
                logger.debug(f"mpv IPC send failed: {e}")

    def _close_socket(self) -> None:
        with self._tx_lock:
            if self._sock is not None:
                try:
                    self._sock.close()
                except OSError:
                    pass
                self._sock = None

    def _reap(self) -> None:
        if self._proc is None:
            return
        try:
            self._proc.wait(timeout=2)
        except subprocess.TimeoutExpired:
            self._proc.kill()
            self._proc.wait()
        try:
            os.remove(self.ipc_path)
        except OSError:
            pass
