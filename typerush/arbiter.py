# arbiter.py
"""
The per-round race between "the player submitted a line" and "the deadline
passed".

A RoundArbiter is created for every round. Input sources call submit(),
the deadline timer calls expire(); whichever gets there first resolves the
round and the other call becomes a no-op. The winner also disposes of the
losing source: a submission cancels the timer, an expiry disarms the input
listener. The round loop blocks in wait() until that happens.
"""
from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)


class InputClosedError(Exception):
    """The input stream ended; no further rounds can be played."""


class SessionAborted(Exception):
    """The player asked to stop the game early."""


class ArbiterState(enum.Enum):
    PENDING = "pending"
    ANSWERED = "answered"
    EXPIRED = "expired"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class Resolution:
    state: ArbiterState          # ANSWERED or EXPIRED
    text: Optional[str] = None   # the submitted line when ANSWERED
    elapsed: float = 0.0         # seconds from start() to resolution

    @property
    def answered(self):
        return self.state is ArbiterState.ANSWERED

    @property
    def response(self):
        """What the scoring rules receive: the line, or None for an expiry."""
        return self.text if self.answered else None


class RoundArbiter:
    def __init__(self, time_allowed=None, timer_factory=threading.Timer, clock=time.monotonic):
        self.time_allowed = time_allowed
        self._timer_factory = timer_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._state = ArbiterState.PENDING
        self._timer = None
        self._listener = None
        self._started_at = None
        self._resolution = None
        self._error = None

    @property
    def state(self):
        return self._state

    @property
    def resolved(self):
        return self._done.is_set()

    def attach_listener(self, listener):
        """`listener.disarm(arbiter)` is called if the deadline wins."""
        self._listener = listener

    def start(self):
        """Arm the deadline. With time_allowed=None the round waits for input indefinitely."""
        with self._lock:
            if self._started_at is not None:
                raise RuntimeError("arbiter already started")
            self._started_at = self._clock()
            if self.time_allowed is not None and self._state is ArbiterState.PENDING:
                self._timer = self._timer_factory(self.time_allowed, self.expire)
                self._timer.daemon = True
                self._timer.start()
        return self

    def _elapsed(self):
        if self._started_at is None:
            return 0.0
        return max(0.0, self._clock() - self._started_at)

    def remaining(self):
        """Seconds left before the deadline, or None for an unbounded wait."""
        if self.time_allowed is None:
            return None
        return max(0.0, self.time_allowed - self._elapsed())

    def submit(self, text):
        """Returns True if this submission resolved the round."""
        with self._lock:
            if self._state is not ArbiterState.PENDING:
                log.debug("late submission %r ignored (round %s)", text, self._state.value)
                return False
            self._state = ArbiterState.ANSWERED
            self._resolution = Resolution(ArbiterState.ANSWERED, text, self._elapsed())
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        self._done.set()
        return True

    def expire(self):
        """Returns True if the deadline resolved the round."""
        with self._lock:
            if self._state is not ArbiterState.PENDING:
                log.debug("timer fired after round was %s; ignored", self._state.value)
                return False
            self._state = ArbiterState.EXPIRED
            self._resolution = Resolution(ArbiterState.EXPIRED, None, self._elapsed())
            self._timer = None
            listener, self._listener = self._listener, None
        if listener is not None:
            listener.disarm(self)
        self._done.set()
        return True

    def abandon(self, error):
        """
        End the round without an outcome; wait() re-raises `error`.
        Used for a closed input stream and for an early quit.
        """
        with self._lock:
            if self._state is not ArbiterState.PENDING:
                return False
            self._state = ArbiterState.ABANDONED
            self._error = error
            timer, self._timer = self._timer, None
            listener, self._listener = self._listener, None
        if timer is not None:
            timer.cancel()
        if listener is not None:
            listener.disarm(self)
        self._done.set()
        return True

    def wait(self, timeout=None):
        if not self._done.wait(timeout):
            raise TimeoutError("round still pending")
        if self._error is not None:
            raise self._error
        return self._resolution
