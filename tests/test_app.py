"""
End-to-end checks for GardenApp driven through Textual's test pilot.

Playback uses fake sources, so no mpv is needed. Run with:
    pytest tests/test_app.py -v
"""

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from garden_tui.garden_tui import GardenApp
from garden_tui.library import DEFAULT_LIBRARY, LibraryStore, VideoEntry
from garden_tui.modes import LeaveScreen, ParentGateScreen, PlayerMode, SettingsMode, VideoGrid
from garden_tui.modes.parent_gate import HoldButton
from garden_tui.navigation import View
from garden_tui.playback import MediaSource, PlaybackController


class FakeSource(MediaSource):
    def __init__(self, on_ready, on_error, on_end):
        super().__init__(on_ready, on_error, on_end)
        self.loaded = None
        self.stopped = False

    def load(self, target):
        self.loaded = target

    def play(self):
        pass

    def seek_to_start(self):
        pass

    def stop(self):
        self.stopped = True


class FakePlayback:
    """Controller factory that keeps every controller it builds"""

    def __init__(self, videos_dir: Path):
        self.videos_dir = videos_dir
        self.controllers = []

    def __call__(self, entry, on_change):
        controller = PlaybackController(
            entry,
            remote_factory=FakeSource,
            local_factory=FakeSource,
            videos_dir=self.videos_dir,
            on_change=on_change,
        )
        self.controllers.append(controller)
        return controller


@pytest.fixture
def playback(tmp_path):
    return FakePlayback(tmp_path / "videos")


@pytest.fixture
def make_app(tmp_path, playback, monkeypatch):
    monkeypatch.delenv("GARDEN_GATE_DEMO", raising=False)

    def factory():
        return GardenApp(
            library_path=tmp_path / "library.json",
            videos_dir=tmp_path / "videos",
            controller_factory=playback,
        )
    return factory


async def settle(pilot, times: int = 3) -> None:
    """Let view swaps (call_later + mount) finish"""
    for _ in range(times):
        await pilot.pause()


async def open_gate(app, pilot) -> ParentGateScreen:
    app.query_one("#settings-button").press()
    await settle(pilot)
    assert isinstance(app.screen, ParentGateScreen)
    return app.screen


class TestGrid:

    def test_starts_on_grid_with_all_videos(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                assert app.nav.view == View.GRID
                grid = app.query_one(VideoGrid)
                assert len(grid.query("VideoCard")) == len(DEFAULT_LIBRARY)
        asyncio.run(run())

    def test_empty_library_message(self, make_app, tmp_path):
        LibraryStore(tmp_path / "library.json").save([])

        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                assert app.query_one("#grid-empty")
        asyncio.run(run())


class TestPlayer:

    def test_select_plays_and_back_returns(self, make_app, playback):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                await pilot.press("enter")  # First card has focus
                await settle(pilot)

                assert app.nav.view == View.PLAYER
                assert app.nav.state.selected == DEFAULT_LIBRARY[0]
                assert app.query_one(PlayerMode)
                controller = playback.controllers[0]
                assert controller.session is not None

                await pilot.press("backspace")
                await settle(pilot)
                assert app.nav.view == View.GRID
                assert controller.session is None  # Leaving stopped playback
        asyncio.run(run())

    def test_unavailable_shows_go_back(self, make_app, playback):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                await pilot.press("enter")
                await settle(pilot)

                controller = playback.controllers[0]
                controller.on_remote_error("150")
                controller.on_local_error("file-not-found")
                await settle(pilot)

                go_back = app.query_one("#error-back-button")
                assert go_back.has_class("visible")
                go_back.press()
                await settle(pilot)
                assert app.nav.view == View.GRID
        asyncio.run(run())


class TestParentGate:

    def test_correct_answer_opens_settings(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                assert app.nav.state.gate_open

                await pilot.press(*str(gate.challenge.expected_answer), "enter")
                await settle(pilot)

                assert app.nav.view == View.SETTINGS
                assert not app.nav.state.gate_open
                assert app.query_one(SettingsMode)
        asyncio.run(run())

    def test_escape_cancels(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                await open_gate(app, pilot)
                await pilot.press("escape")
                await settle(pilot)

                assert not isinstance(app.screen, ParentGateScreen)
                assert app.nav.view == View.GRID
                assert not app.nav.state.gate_open
        asyncio.run(run())

    def test_three_misses_close_gate_after_delay(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                wrong = str(gate.challenge.expected_answer + 1)

                for _ in range(3):
                    await pilot.press(*wrong, "enter")
                await settle(pilot)

                # Still up, showing the message, until the delay passes
                assert app.screen is gate
                assert gate.verifier.lockout_armed
                await pilot.pause(2.0)
                await settle(pilot)

                assert not isinstance(app.screen, ParentGateScreen)
                assert app.nav.view == View.GRID
                assert not app.nav.state.gate_open
        asyncio.run(run())

    def test_hold_opens_settings(self, make_app, monkeypatch):
        monkeypatch.setenv("GARDEN_GATE_DEMO", "1")

        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                gate.query_one(HoldButton).post_message(HoldButton.Pressed())
                await pilot.pause(gate.hold_duration + 0.5)
                await settle(pilot)

                assert app.nav.view == View.SETTINGS
        asyncio.run(run())

    def test_escape_during_lockout_delay(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                wrong = str(gate.challenge.expected_answer + 1)
                for _ in range(3):
                    await pilot.press(*wrong, "enter")
                await settle(pilot)
                assert gate.verifier.lockout_armed

                await pilot.press("escape")
                await settle(pilot)
                assert not isinstance(app.screen, ParentGateScreen)
                assert gate._lockout_timer is None
                assert not app.nav.state.gate_open

                # A pending cancel from the first gate must not close a new one
                second = await open_gate(app, pilot)
                await pilot.pause(2.0)
                await settle(pilot)
                assert app.screen is second
                assert app.nav.state.gate_open
        asyncio.run(run())

    def test_hold_during_lockout_delay_wins(self, make_app, monkeypatch):
        monkeypatch.setenv("GARDEN_GATE_DEMO", "1")

        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                wrong = str(gate.challenge.expected_answer + 1)
                for _ in range(3):
                    await pilot.press(*wrong, "enter")
                await settle(pilot)

                # The 1 s demo hold finishes inside the 1.5 s delay
                gate.query_one(HoldButton).post_message(HoldButton.Pressed())
                await pilot.pause(2.0)
                await settle(pilot)

                assert app.nav.view == View.SETTINGS
                assert not isinstance(app.screen, ParentGateScreen)
                assert not app.nav.state.gate_open
        asyncio.run(run())


class TestSettings:

    def test_add_video_through_form(self, make_app, tmp_path):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 50)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                await pilot.press(*str(gate.challenge.expected_answer), "enter")
                await settle(pilot)

                settings = app.query_one(SettingsMode)
                settings.query_one("#new-video-id").value = "https://youtu.be/dQw4w9WgXcQ"
                settings.query_one("#new-video-title").value = "Dance Song"
                await settings._submit_form()
                await settle(pilot)

                assert app.nav.library[-1].id == "dQw4w9WgXcQ"
                assert LibraryStore(tmp_path / "library.json").load() == app.nav.library
        asyncio.run(run())

    def test_duplicate_shows_inline_error(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 50)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                await pilot.press(*str(gate.challenge.expected_answer), "enter")
                await settle(pilot)

                settings = app.query_one(SettingsMode)
                settings.query_one("#new-video-id").value = DEFAULT_LIBRARY[0].id
                settings.query_one("#new-video-title").value = "Shark Again"
                await settings._submit_form()
                await settle(pilot)

                assert settings.error_message == "This video is already in the library"
                assert len(app.nav.library) == len(DEFAULT_LIBRARY)
        asyncio.run(run())

    def test_back_to_grid(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 50)) as pilot:
                await settle(pilot)
                gate = await open_gate(app, pilot)
                await pilot.press(*str(gate.challenge.expected_answer), "enter")
                await settle(pilot)

                app.query_one("#settings-back").press()
                await settle(pilot)
                assert app.nav.view == View.GRID
                assert app.query_one(VideoGrid)
        asyncio.run(run())


class TestLeaving:

    def test_quit_asks_first(self, make_app):
        async def run():
            app = make_app()
            async with app.run_test(size=(120, 40)) as pilot:
                await settle(pilot)
                await pilot.press("ctrl+q")
                await settle(pilot)
                assert isinstance(app.screen, LeaveScreen)

                await pilot.press("escape")
                await settle(pilot)
                assert not isinstance(app.screen, LeaveScreen)
                assert app.is_running
        asyncio.run(run())
