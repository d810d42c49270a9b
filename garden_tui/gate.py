"""
Garden: Parent Gate Logic

Two independent ways for a grown-up to prove they're a grown-up:
- Path A: solve an arithmetic problem (3 tries, then the gate closes itself)
- Path B: hold a control down for 3 seconds without letting go

Either path succeeds on its own. Pure logic with no I/O: timestamps and the
random source are injected so tests are deterministic. The Textual screen in
modes/parent_gate.py owns the timers and just feeds events in here.
"""

import random
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    ADD_RANGE, SUBTRACT_RANGE, MULTIPLY_RANGE,
    GATE_MAX_ATTEMPTS, HOLD_DURATION,
)


# ============================================================================
# Challenge
# ============================================================================

class Operator(Enum):
    """Arithmetic operators offered by the gate"""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"

    def apply(self, left: int, right: int) -> int:
        if self is Operator.ADD:
            return left + right
        if self is Operator.SUBTRACT:
            return left - right
        return left * right


OPERAND_RANGES = {
    Operator.ADD: ADD_RANGE,
    Operator.SUBTRACT: SUBTRACT_RANGE,
    Operator.MULTIPLY: MULTIPLY_RANGE,
}


@dataclass(frozen=True)
class GateChallenge:
    """One math problem. Created per gate activation, never saved."""
    left: int
    right: int
    operator: Operator
    expected_answer: int

    @property
    def prompt(self) -> str:
        return f"{self.left} {self.operator.value} {self.right} = ?"


def generate_challenge(rng: Optional[random.Random] = None) -> GateChallenge:
    """Pick an operator uniformly, then operands from its range."""
    rng = rng or random.Random()
    operator = rng.choice(list(Operator))
    (left_lo, left_hi), (right_lo, right_hi) = OPERAND_RANGES[operator]
    left = rng.randint(left_lo, left_hi)
    right = rng.randint(right_lo, right_hi)
    return GateChallenge(left, right, operator, operator.apply(left, right))


_NON_DIGITS = re.compile(r"[^0-9]")


def parse_answer(text: str) -> Optional[int]:
    """Digits only. Everything else is thrown away. None if nothing is left."""
    digits = _NON_DIGITS.sub("", text or "")
    if not digits:
        return None
    return int(digits)


# ============================================================================
# Hold-to-unlock
# ============================================================================

class HoldTimer:
    """
    Tracks one continuous press of the hold control.

    Pure logic, timestamps injected. Releasing early throws away all
    progress - there is no credit carried between separate presses.

    Usage:
        hold = HoldTimer(duration=3.0)
        hold.press(timestamp=0.0)
        hold.progress(timestamp=1.5)   # 0.5
        hold.release()                 # back to 0
    """

    def __init__(self, duration: float = HOLD_DURATION):
        self.duration = duration
        self._pressed_at: Optional[float] = None

    @property
    def holding(self) -> bool:
        return self._pressed_at is not None

    def press(self, timestamp: float = None) -> None:
        """Start a hold. A press while already holding keeps the original start."""
        if timestamp is None:
            timestamp = time.monotonic()
        if self._pressed_at is None:
            self._pressed_at = timestamp

    def release(self) -> None:
        """Let go. Progress resets to zero."""
        self._pressed_at = None

    def progress(self, timestamp: float = None) -> float:
        """Fraction of the hold completed, 0.0 to 1.0"""
        if self._pressed_at is None:
            return 0.0
        if timestamp is None:
            timestamp = time.monotonic()
        if self.duration <= 0:
            return 1.0
        elapsed = max(0.0, timestamp - self._pressed_at)
        return min(1.0, elapsed / self.duration)

    def complete(self, timestamp: float = None) -> bool:
        """True once the control has been held for the full duration"""
        return self.holding and self.progress(timestamp) >= 1.0


# ============================================================================
# Gate state machine
# ============================================================================

class GateState(Enum):
    IDLE = "idle"
    AWAITING = "awaiting"
    VERIFIED = "verified"
    CANCELLED = "cancelled"


class AnswerResult(Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    LOCKED_OUT = "locked_out"  # Wrong, and that was the last allowed try
    IGNORED = "ignored"        # Empty input, or the gate is already decided


class GateVerifier:
    """
    One parent-gate activation.

    IDLE --open()--> AWAITING --(right answer | full hold)--> VERIFIED
                     AWAITING --(cancel | lockout delay)----> CANCELLED

    VERIFIED and CANCELLED are final; anything after them is ignored.
    Make a new verifier for every activation.

    Args:
        rng: Random source for the challenge (None = fresh Random)
        hold_duration: Seconds the hold control must stay pressed
        max_attempts: Wrong answers allowed before lockout
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        hold_duration: float = HOLD_DURATION,
        max_attempts: int = GATE_MAX_ATTEMPTS,
    ):
        self._rng = rng
        self.max_attempts = max_attempts
        self.state = GateState.IDLE
        self.challenge: Optional[GateChallenge] = None
        self.attempts = 0
        self.lockout_armed = False
        self.hold = HoldTimer(hold_duration)

    @property
    def is_open(self) -> bool:
        return self.state == GateState.AWAITING

    def open(self) -> GateChallenge:
        """Start the activation with a brand new challenge."""
        if self.state != GateState.IDLE:
            raise RuntimeError("GateVerifier is single-use; create a new one")
        self.challenge = generate_challenge(self._rng)
        self.state = GateState.AWAITING
        return self.challenge

    def submit(self, text: str) -> AnswerResult:
        """
        Check a typed answer.

        Returns LOCKED_OUT on the wrong answer that uses up the last try.
        The caller is responsible for scheduling lockout_expired() after the
        lockout delay; lockout_armed goes True exactly once.
        """
        if not self.is_open:
            return AnswerResult.IGNORED

        answer = parse_answer(text)
        if answer is None:
            return AnswerResult.IGNORED

        if answer == self.challenge.expected_answer:
            self._verify()
            return AnswerResult.CORRECT

        self.attempts += 1
        if self.attempts >= self.max_attempts and not self.lockout_armed:
            self.lockout_armed = True
            return AnswerResult.LOCKED_OUT
        return AnswerResult.WRONG

    @property
    def error_message(self) -> str:
        """What to show under the answer box after a wrong answer"""
        if self.attempts >= self.max_attempts:
            return "Too many attempts!"
        if self.attempts:
            return "Incorrect, try again"
        return ""

    def press(self, timestamp: float = None) -> None:
        """Hold control went down"""
        if self.is_open:
            self.hold.press(timestamp)

    def release(self) -> None:
        """Hold control came up before (or after) completing"""
        self.hold.release()

    def tick(self, timestamp: float = None) -> bool:
        """
        Sample the hold. Returns True if this tick completed the hold and
        verified the gate.
        """
        if not self.is_open:
            return False
        if self.hold.complete(timestamp):
            self.hold.release()
            self._verify()
            return True
        return False

    def hold_progress(self, timestamp: float = None) -> float:
        return self.hold.progress(timestamp)

    def cancel(self) -> bool:
        """Explicit cancel (close button, Escape). Returns True if it took effect."""
        if not self.is_open:
            return False
        self.hold.release()
        self.state = GateState.CANCELLED
        return True

    def lockout_expired(self) -> bool:
        """
        Lockout delay finished. Cancels only if the gate is still waiting;
        a gate already verified or closed stays as it is.
        """
        if not self.lockout_armed:
            return False
        return self.cancel()

    def _verify(self) -> None:
        self.hold.release()
        self.state = GateState.VERIFIED
