# tally.py
"""Running score for one game and the final Win/Lose verdict."""
from __future__ import annotations

import enum
import math
from collections import Counter

from typerush.config import PERFECT_POINTS, WIN_RATIO
from typerush.scoring import OutcomeKind


class Verdict(enum.Enum):
    WIN = "win"
    LOSE = "lose"


def win_threshold(rounds_played):
    return math.ceil(rounds_played * PERFECT_POINTS * WIN_RATIO)


def verdict(total_score, rounds_played):
    if total_score >= win_threshold(rounds_played):
        return Verdict.WIN
    return Verdict.LOSE


class SessionTally:
    """
    Owned by the session loop; rounds are added one at a time, in order.
    """

    def __init__(self, profile):
        self.profile = profile
        self.rounds_played = 0
        self.score_total = 0
        self.counts = Counter()
        self.answer_times = []

    def add_round(self, outcome, elapsed=None):
        self.rounds_played += 1
        self.score_total += outcome.points
        self.counts[outcome.kind] += 1
        if elapsed is not None and outcome.kind is not OutcomeKind.TIMEOUT:
            self.answer_times.append(elapsed)
        return self.score_total

    @property
    def max_score(self):
        return self.rounds_played * PERFECT_POINTS

    @property
    def average_answer_time(self):
        if not self.answer_times:
            return None
        return sum(self.answer_times) / len(self.answer_times)

    def verdict(self):
        return verdict(self.score_total, self.rounds_played)

    def summary_lines(self):
        lines = [
            f"Difficulty: {self.profile.name}   Rounds played: {self.rounds_played}",
            f"Score: {self.score_total}/{self.max_score}   (win at {win_threshold(self.rounds_played)})",
            "Perfect: {}   Close: {}   Miss: {}   Timeout: {}".format(
                self.counts[OutcomeKind.PERFECT], self.counts[OutcomeKind.CLOSE],
                self.counts[OutcomeKind.MISS], self.counts[OutcomeKind.TIMEOUT]),
        ]
        avg = self.average_answer_time
        if avg is not None:
            lines.append(f"Average answer time: {avg:0.2f}s")
        return lines
