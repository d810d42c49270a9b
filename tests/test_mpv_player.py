"""
Tests for the mpv media source: IPC event mapping, command lines, and the
failure paths that feed the local fallback.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from garden_tui.mpv_player import (
    LOCAL_ARGS, MPV_BASE_ARGS, MpvSource, remote_mpv_args, translate_event,
)
from garden_tui.playback import RemoteOptions


class Recorder:
    """Collects source callbacks"""

    def __init__(self):
        self.events = []

    def source(self, **kwargs) -> MpvSource:
        return MpvSource(
            lambda: self.events.append(("ready",)),
            lambda code: self.events.append(("error", code)),
            lambda: self.events.append(("end",)),
            **kwargs,
        )


class TestTranslateEvent:

    def test_file_loaded_is_ready(self):
        assert translate_event({"event": "file-loaded"}) == ("ready", "")

    def test_end_file_error(self):
        message = {"event": "end-file", "reason": "error", "file_error": "loading failed"}
        assert translate_event(message) == ("error", "loading failed")

    def test_end_file_error_without_detail(self):
        assert translate_event({"event": "end-file", "reason": "error"}) == ("error", "error")

    def test_end_file_quit_ignored(self):
        assert translate_event({"event": "end-file", "reason": "quit"}) is None

    def test_eof_reached_is_end(self):
        message = {"event": "property-change", "name": "eof-reached", "data": True}
        assert translate_event(message) == ("end", "")

    def test_eof_false_ignored(self):
        message = {"event": "property-change", "name": "eof-reached", "data": False}
        assert translate_event(message) is None

    def test_other_messages_ignored(self):
        assert translate_event({"event": "playback-restart"}) is None
        assert translate_event({"request_id": 0, "error": "success"}) is None


class TestCommandLine:

    def test_remote_args(self):
        args = remote_mpv_args(RemoteOptions())
        assert "--ytdl=yes" in args
        assert "--ytdl-format=best[ext=mp4]/best" in args
        assert "--fullscreen=no" in args

    def test_local_args_skip_ytdl(self):
        assert LOCAL_ARGS == ["--ytdl=no"]

    def test_build_command(self):
        source = Recorder().source(extra_args=LOCAL_ARGS, mpv_path="/usr/bin/mpv")
        cmd = source.build_command("/videos/Baby Shark.mp4")
        assert cmd[0] == "/usr/bin/mpv"
        assert cmd[-1] == "/videos/Baby Shark.mp4"
        assert f"--input-ipc-server={source.ipc_path}" in cmd
        assert "--ytdl=no" in cmd
        for arg in MPV_BASE_ARGS:
            assert arg in cmd

    def test_input_locked_down(self):
        assert "--no-input-default-bindings" in MPV_BASE_ARGS
        assert "--input-vo-keyboard=no" in MPV_BASE_ARGS
        assert "--no-osc" in MPV_BASE_ARGS

    def test_each_source_gets_own_socket(self):
        recorder = Recorder()
        assert recorder.source().ipc_path != recorder.source().ipc_path


class TestFailurePaths:
    """Run the worker body directly; no mpv needed."""

    def test_missing_local_file(self, tmp_path):
        recorder = Recorder()
        source = recorder.source(check_exists=True)
        source._run(str(tmp_path / "nope.mp4"))
        assert recorder.events == [("error", "file-not-found")]

    def test_missing_mpv_binary(self, tmp_path):
        recorder = Recorder()
        source = recorder.source(mpv_path=str(tmp_path / "no-such-mpv"))
        source._run("https://www.youtube-nocookie.com/embed/XqZsoesa55w")
        assert recorder.events == [("error", "mpv-missing")]

    def test_nothing_after_stop(self, tmp_path):
        recorder = Recorder()
        source = recorder.source(check_exists=True)
        source.stop()
        source._run(str(tmp_path / "nope.mp4"))
        assert recorder.events == []

    def test_stop_is_idempotent(self):
        source = Recorder().source()
        source.stop()
        source.stop()

    def test_commands_before_connect_are_dropped(self):
        source = Recorder().source()
        source.play()
        source.seek_to_start()

    def test_dispatch_used_for_callbacks(self, tmp_path):
        recorder = Recorder()
        dispatched = []

        def dispatch(fn, *args):
            dispatched.append(args)
            fn(*args)

        source = recorder.source(check_exists=True, dispatch=dispatch)
        source._run(str(tmp_path / "nope.mp4"))
        assert dispatched == [("file-not-found",)]
        assert recorder.events == [("error", "file-not-found")]

    def test_dispatch_after_app_exit_dropped(self, tmp_path):
        recorder = Recorder()

        def dispatch(fn, *args):
            raise RuntimeError("App is not running")

        source = recorder.source(check_exists=True, dispatch=dispatch)
        source._run(str(tmp_path / "nope.mp4"))
        assert recorder.events == []

    def test_stop_while_connecting_reaps_process(self, monkeypatch):
        """A stop during the socket wait still waits on mpv and removes the socket"""
        # Any real process works as a stand-in; it is terminated immediately
        source = Recorder().source(mpv_path=sys.executable)
        Path(source.ipc_path).touch()

        def stop_then_fail():
            source.stop()
            return False

        monkeypatch.setattr(source, "_connect", stop_then_fail)
        source._run("/videos/Baby Shark.mp4")

        assert source._proc is not None
        assert source._proc.returncode is not None
        assert not Path(source.ipc_path).exists()
