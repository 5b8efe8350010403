import random

import pytest

from typerush.arbiter import ArbiterState, Resolution


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        # a real timer thread can already be running when cancel() lands
        self.function()


class TimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]


class ScriptedUI:
    """
    Front end double for the session loop. Each scripted response is a
    string (answered), None (deadline passed) or an exception to raise.
    """

    def __init__(self, responses, elapsed=0.5):
        self.responses = list(responses)
        self.elapsed = elapsed
        self.prompts = []
        self.deadlines = []
        self.outcomes = []
        self.final = None

    def display_prompt(self, round_index, total_rounds, time_allowed, word):
        self.prompts.append((round_index, total_rounds, time_allowed, word))

    def read_line_with_deadline(self, deadline_millis):
        self.deadlines.append(deadline_millis)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return Resolution(ArbiterState.EXPIRED, None, deadline_millis / 1000.0)
        return Resolution(ArbiterState.ANSWERED, response, self.elapsed)

    def render_outcome(self, outcome):
        self.outcomes.append(outcome)

    def render_final_verdict(self, tally, verdict):
        self.final = (tally.score_total, verdict)

    @property
    def words(self):
        return [p[3] for p in self.prompts]


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def timers():
    return TimerFactory()


@pytest.fixture()
def scripted_ui():
    return ScriptedUI
