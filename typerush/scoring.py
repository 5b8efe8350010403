# scoring.py
"""
Classifies a response against the target word.

Rules, in order:
- no response (None) or a blank one            -> TIMEOUT
- trimmed response equals the target exactly   -> PERFECT
- edit distance within max(1, floor(0.3 * len(target))) -> CLOSE
- anything else                                -> MISS
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional

from typerush.config import (
    CLOSE_POINTS, CLOSE_RATIO, MISS_POINTS, PERFECT_POINTS, TIMEOUT_POINTS,
)
from typerush.distance import distance


class OutcomeKind(enum.Enum):
    PERFECT = "perfect"
    CLOSE = "close"
    MISS = "miss"
    TIMEOUT = "timeout"


POINTS = {
    OutcomeKind.PERFECT: PERFECT_POINTS,
    OutcomeKind.CLOSE: CLOSE_POINTS,
    OutcomeKind.MISS: MISS_POINTS,
    OutcomeKind.TIMEOUT: TIMEOUT_POINTS,
}


@dataclass(frozen=True)
class RoundOutcome:
    kind: OutcomeKind
    distance: Optional[int] = None  # set for CLOSE and MISS only

    @property
    def points(self):
        return POINTS[self.kind]

    def describe(self):
        if self.kind is OutcomeKind.PERFECT:
            return f"Perfect! +{self.points}"
        if self.kind is OutcomeKind.CLOSE:
            return f"Close (distance {self.distance}) +{self.points}"
        if self.kind is OutcomeKind.MISS:
            return f"Miss (distance {self.distance}) +{self.points}"
        return "Time! No points this round."


PERFECT = RoundOutcome(OutcomeKind.PERFECT)
TIMEOUT = RoundOutcome(OutcomeKind.TIMEOUT)


def close_threshold(target):
    return max(1, math.floor(len(target) * CLOSE_RATIO))


def score(target, response):
    """`response` is the submitted line, or None when the deadline passed first."""
    if response is None:
        return TIMEOUT
    answer = response.strip()
    if not answer:
        return TIMEOUT
    if answer == target:
        return PERFECT
    d = distance(answer, target)
    if d <= close_threshold(target):
        return RoundOutcome(OutcomeKind.CLOSE, d)
    return RoundOutcome(OutcomeKind.MISS, d)
