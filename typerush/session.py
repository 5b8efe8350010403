# session.py
"""
The round loop: pick a word, arm the deadline, score whatever comes back,
add it to the tally. Rounds run strictly one after another.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from typerush.arbiter import InputClosedError, SessionAborted
from typerush.clock import deadline_millis, time_allowed
from typerush.scoring import score
from typerush.tally import SessionTally

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundSpec:
    index: int
    time_allowed: float
    target_word: str


def new_round(profile, index, rng):
    return RoundSpec(index=index,
                     time_allowed=time_allowed(profile, index),
                     target_word=rng.choice(profile.words))


def play_session(profile, ui, rng=None):
    """
    Play `profile.rounds` rounds through `ui` and return the SessionTally.
    An early quit (SessionAborted) stops the loop; the verdict then covers
    the rounds that were actually played. InputClosedError propagates once
    the partial tally has been shown.
    """
    rng = rng or random.Random()
    tally = SessionTally(profile)
    try:
        for index in range(1, profile.rounds + 1):
            rnd = new_round(profile, index, rng)
            ui.display_prompt(rnd.index, profile.rounds, rnd.time_allowed, rnd.target_word)
            resolution = ui.read_line_with_deadline(deadline_millis(rnd.time_allowed))
            outcome = score(rnd.target_word, resolution.response)
            total = tally.add_round(outcome, resolution.elapsed)
            log.debug("round %d word=%r response=%r -> %s (total %d)",
                      index, rnd.target_word, resolution.response, outcome.kind.value, total)
            ui.render_outcome(outcome)
    except SessionAborted:
        log.info("session ended early after %d rounds", tally.rounds_played)
    except InputClosedError:
        log.error("input closed after %d rounds", tally.rounds_played)
        ui.render_final_verdict(tally, tally.verdict())
        raise
    ui.render_final_verdict(tally, tally.verdict())
    return tally
