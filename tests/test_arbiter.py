import threading

import pytest

from typerush.arbiter import ArbiterState, InputClosedError, RoundArbiter


class RecordingListener:
    def __init__(self):
        self.disarmed = []

    def disarm(self, arbiter):
        self.disarmed.append(arbiter)


def test_submission_beats_deadline(timers):
    arbiter = RoundArbiter(5.0, timer_factory=timers).start()
    assert timers.last.started
    assert timers.last.interval == 5.0

    assert arbiter.submit("apple") is True
    assert timers.last.cancelled

    # the timer thread firing anyway must have no effect
    timers.last.fire()
    assert arbiter.state is ArbiterState.ANSWERED

    resolution = arbiter.wait(timeout=0)
    assert resolution.answered
    assert resolution.response == "apple"


def test_deadline_beats_submission(timers):
    listener = RecordingListener()
    arbiter = RoundArbiter(1.0, timer_factory=timers)
    arbiter.attach_listener(listener)
    arbiter.start()

    timers.last.fire()
    assert arbiter.state is ArbiterState.EXPIRED
    assert listener.disarmed == [arbiter]

    assert arbiter.submit("late") is False
    resolution = arbiter.wait(timeout=0)
    assert not resolution.answered
    assert resolution.response is None


def test_expiry_resolves_once(timers):
    arbiter = RoundArbiter(1.0, timer_factory=timers).start()
    assert arbiter.expire() is True
    assert arbiter.expire() is False
    assert arbiter.wait(timeout=0).state is ArbiterState.EXPIRED


def test_second_submission_ignored(timers):
    arbiter = RoundArbiter(1.0, timer_factory=timers).start()
    assert arbiter.submit("first")
    assert not arbiter.submit("second")
    assert arbiter.wait(timeout=0).text == "first"


def test_pending_wait_times_out(timers):
    arbiter = RoundArbiter(1.0, timer_factory=timers).start()
    with pytest.raises(TimeoutError):
        arbiter.wait(timeout=0.01)


def test_abandon_reraises_in_wait(timers):
    listener = RecordingListener()
    arbiter = RoundArbiter(1.0, timer_factory=timers)
    arbiter.attach_listener(listener)
    arbiter.start()
    assert arbiter.abandon(InputClosedError("stdin closed"))
    assert timers.last.cancelled
    assert listener.disarmed == [arbiter]
    assert not arbiter.submit("x")
    assert not arbiter.expire()
    with pytest.raises(InputClosedError):
        arbiter.wait(timeout=0)


def test_start_twice_is_an_error(timers):
    arbiter = RoundArbiter(1.0, timer_factory=timers).start()
    with pytest.raises(RuntimeError):
        arbiter.start()


def test_unbounded_wait_arms_no_timer(timers):
    arbiter = RoundArbiter(None, timer_factory=timers).start()
    assert timers.timers == []
    assert arbiter.remaining() is None
    arbiter.submit("hard")
    assert arbiter.wait(timeout=0).text == "hard"


def test_elapsed_and_remaining_use_clock(timers):
    ticks = iter([100.0, 100.25, 100.75])
    arbiter = RoundArbiter(2.0, timer_factory=timers, clock=lambda: next(ticks)).start()
    assert arbiter.remaining() == pytest.approx(1.75)
    arbiter.submit("apple")
    assert arbiter.wait(timeout=0).elapsed == pytest.approx(0.75)


def test_real_timer_expires():
    arbiter = RoundArbiter(0.05).start()
    resolution = arbiter.wait(timeout=5)
    assert resolution.state is ArbiterState.EXPIRED
    assert resolution.elapsed >= 0.04


def test_real_timer_cancelled_by_submission():
    arbiter = RoundArbiter(0.2).start()
    assert arbiter.submit("quick")
    threading.Event().wait(0.3)
    assert arbiter.state is ArbiterState.ANSWERED


def test_concurrent_sources_resolve_exactly_once(timers):
    arbiter = RoundArbiter(1.0, timer_factory=timers).start()
    barrier = threading.Barrier(9)
    wins = []

    def submitter(i):
        barrier.wait()
        wins.append(arbiter.submit(f"line {i}"))

    def expirer():
        barrier.wait()
        wins.append(arbiter.expire())

    threads = [threading.Thread(target=submitter, args=(i,)) for i in range(8)]
    threads.append(threading.Thread(target=expirer))
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert wins.count(True) == 1
    assert arbiter.resolved
