"""
Parent Gate - grown-ups only past this point

Shown before Settings. Two ways through, both always available:
- Solve the math problem (3 tries, then the gate closes itself)
- Hold the big button for 3 seconds (mouse, or hold Space/Enter on it)

Dismisses with True on success, False on cancel. All timers belong to
this screen and stop when it goes away.
"""

import random
import time
from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.message import Message
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Input, Static
from textual import events

from ..config import get_hold_duration
from ..constants import (
    GATE_LOCKOUT_DELAY, HOLD_TICK, HOLD_KEY_RELEASE_GAP,
    ICON_LOCK, ICON_HOLD,
)
from ..gate import GateVerifier, AnswerResult


class HoldButton(Widget, can_focus=True):
    """
    Press and hold. Renders its own progress bar.

    Only reports presses and releases; timing lives in GateVerifier.
    """

    DEFAULT_CSS = """
    HoldButton {
        width: 40;
        height: 3;
        border: round $primary;
        background: $surface;
        content-align: center middle;
    }

    HoldButton:focus {
        border: heavy $accent;
    }

    HoldButton.holding {
        border: heavy $accent;
    }
    """

    BAR_WIDTH = 34

    class Pressed(Message):
        """Mouse went down on the button"""

    class Released(Message):
        """Mouse came up"""

    class KeyHeld(Message):
        """Space/Enter pressed or auto-repeated while focused"""
        def __init__(self, timestamp: float) -> None:
            self.timestamp = timestamp
            super().__init__()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.progress = 0.0
        self.holding = False

    def set_progress(self, progress: float, holding: bool) -> None:
        self.progress = progress
        self.holding = holding
        self.set_class(holding, "holding")
        self.refresh()

    def render(self) -> Text:
        if not self.holding:
            return Text(f"{ICON_HOLD} Hold Here", justify="center")
        filled = int(self.BAR_WIDTH * self.progress)
        bar = Text(justify="center")
        bar.append("█" * filled, style="bold")
        bar.append("░" * (self.BAR_WIDTH - filled), style="dim")
        return bar

    def on_mouse_down(self, event: events.MouseDown) -> None:
        event.stop()
        self.capture_mouse()
        self.post_message(self.Pressed())

    def on_mouse_up(self, event: events.MouseUp) -> None:
        event.stop()
        self.release_mouse()
        self.post_message(self.Released())

    def on_key(self, event: events.Key) -> None:
        if event.key in ("space", "enter"):
            event.stop()
            event.prevent_default()
            self.post_message(self.KeyHeld(time.monotonic()))


class ParentGateScreen(ModalScreen[bool]):
    """
    The parent gate overlay.

    Args:
        rng: Random source for the math problem (tests pass a seeded one)
        hold_duration: Override the hold time (defaults to config)
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    ParentGateScreen {
        align: center middle;
        background: rgba(0, 0, 0, 0.7);
    }

    #gate-dialog {
        width: 60;
        height: auto;
        padding: 1 4;
        background: $surface;
        border: heavy $primary;
    }

    #gate-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    #gate-instructions, #gate-alternative {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }

    #gate-problem {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin: 1 0;
    }

    #gate-error {
        width: 100%;
        height: 1;
        text-align: center;
        color: $error;
    }

    #gate-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #gate-buttons Button {
        margin: 0 2;
    }

    #gate-alternative {
        margin-top: 1;
    }

    #hold-row {
        width: 100%;
        height: 3;
        align: center middle;
    }
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        hold_duration: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if hold_duration is None:
            hold_duration = get_hold_duration()
        self.hold_duration = hold_duration
        self.verifier = GateVerifier(rng=rng, hold_duration=hold_duration)
        self.challenge = self.verifier.open()

        self._hold_ticker = None
        self._lockout_timer = None
        self._key_hold = False
        self._last_key_repeat = 0.0
        self._finished = False

    def compose(self) -> ComposeResult:
        with Container(id="gate-dialog"):
            yield Static(f"{ICON_LOCK} Parent Verification", id="gate-title")
            yield Static("Please solve this math problem to access settings:", id="gate-instructions")
            yield Static(self.challenge.prompt, id="gate-problem")
            yield Input(placeholder="Enter answer", id="gate-input", max_length=6)
            yield Static("", id="gate-error")
            with Horizontal(id="gate-buttons"):
                yield Button("Cancel", id="gate-cancel")
                yield Button("Verify", id="gate-verify", variant="primary")
            yield Static(
                f"Or hold this button for {self.hold_duration:g} seconds:", id="gate-alternative",
            )
            with Horizontal(id="hold-row"):
                yield HoldButton(id="hold-button")

    def on_mount(self) -> None:
        self.query_one("#gate-input", Input).focus()

    def on_unmount(self) -> None:
        """Nothing may fire into a gate that's gone"""
        self._stop_timers()

    # ------------------------------------------------------------------
    # Path A: arithmetic
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        # Typing again hides the error; clearing the box after a miss doesn't
        if event.value:
            self.query_one("#gate-error", Static).update("")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit_answer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "gate-verify":
            self._submit_answer()
        elif event.button.id == "gate-cancel":
            self.action_cancel()

    def _submit_answer(self) -> None:
        answer_input = self.query_one("#gate-input", Input)
        result = self.verifier.submit(answer_input.value)

        if result == AnswerResult.CORRECT:
            self._finish(True)
            return
        if result == AnswerResult.IGNORED:
            return

        answer_input.value = ""
        self.query_one("#gate-error", Static).update(self.verifier.error_message)

        if result == AnswerResult.LOCKED_OUT:
            self._lockout_timer = self.set_timer(GATE_LOCKOUT_DELAY, self._on_lockout_expired)

    def _on_lockout_expired(self) -> None:
        self._lockout_timer = None
        if self.verifier.lockout_expired():
            self._finish(False)

    # ------------------------------------------------------------------
    # Path B: hold
    # ------------------------------------------------------------------

    def on_hold_button_pressed(self, event: HoldButton.Pressed) -> None:
        self._key_hold = False
        self._start_hold(time.monotonic())

    def on_hold_button_released(self, event: HoldButton.Released) -> None:
        self._end_hold()

    def on_hold_button_key_held(self, event: HoldButton.KeyHeld) -> None:
        self._key_hold = True
        self._last_key_repeat = event.timestamp
        self._start_hold(event.timestamp)

    def _start_hold(self, timestamp: float) -> None:
        self.verifier.press(timestamp)
        if self._hold_ticker is None:
            self._hold_ticker = self.set_interval(HOLD_TICK, self._on_hold_tick)
        self._on_hold_tick()

    def _end_hold(self) -> None:
        self.verifier.release()
        self._key_hold = False
        if self._hold_ticker is not None:
            self._hold_ticker.stop()
            self._hold_ticker = None
        if self.is_mounted:
            self.query_one("#hold-button", HoldButton).set_progress(0.0, False)

    def _on_hold_tick(self) -> None:
        now = time.monotonic()

        # Terminals don't report key-up: a gap in auto-repeat means let go
        if self._key_hold and now - self._last_key_repeat > HOLD_KEY_RELEASE_GAP:
            self._end_hold()
            return

        if self.verifier.tick(now):
            self._finish(True)
            return

        self.query_one("#hold-button", HoldButton).set_progress(
            self.verifier.hold_progress(now), self.verifier.hold.holding,
        )

    # ------------------------------------------------------------------

    def action_cancel(self) -> None:
        if self.verifier.cancel():
            self._finish(False)

    def _finish(self, success: bool) -> None:
        if self._finished:
            return
        self._finished = True
        self._stop_timers()
        self.dismiss(success)

    def _stop_timers(self) -> None:
        if self._hold_ticker is not None:
            self._hold_ticker.stop()
            self._hold_ticker = None
        if self._lockout_timer is not None:
            self._lockout_timer.stop()
            self._lockout_timer = None
