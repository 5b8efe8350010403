# difficulty.py
"""
Difficulty tiers: the built-in table of time budgets, decay rates,
word pools and round counts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Optional, Tuple

from typerush.config import DEFAULT_DIFFICULTY

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    start_time: float
    time_decay: float
    words: Tuple[str, ...]
    rounds: int

    def __post_init__(self):
        if not self.words:
            raise ValueError(f"difficulty {self.name!r} has no words")
        if self.start_time <= 0:
            raise ValueError(f"difficulty {self.name!r} needs a positive start time")
        if self.time_decay < 0:
            raise ValueError(f"difficulty {self.name!r} has a negative decay")
        if self.rounds <= 0:
            raise ValueError(f"difficulty {self.name!r} needs at least one round")


# -------------------------
# Word pools
# -------------------------
EASY_WORDS = (
    'cat', 'dog', 'book', 'tree', 'sun', 'moon', 'apple', 'ball', 'car', 'hat',
    'pen', 'cup', 'desk', 'home', 'fish',
)

NORMAL_WORDS = (
    'apple', 'banana', 'cherry', 'dragon', 'elephant', 'flower', 'guitar', 'horizon',
    'island', 'jungle', 'keyboard', 'lemon', 'mountain', 'notebook', 'ocean', 'python',
    'quartz', 'rocket', 'sunset', 'tiger', 'umbrella', 'violet', 'window', 'xylophone',
    'yacht', 'zigzag', 'coffee', 'library', 'algorithm', 'function',
)

HARD_WORDS = (
    'xylophone', 'quartz', 'algorithm', 'synchronous', 'conscientious', 'onomatopoeia',
    'hippopotamus', 'antidisestablishment', 'circumference', 'electroencephalograph',
    'sesquipedalian', 'implementation',
)

CATALOG = MappingProxyType({
    'easy': DifficultyProfile('easy', start_time=10.0, time_decay=0.1, words=EASY_WORDS, rounds=5),
    'normal': DifficultyProfile('normal', start_time=5.0, time_decay=0.2, words=NORMAL_WORDS, rounds=10),
    'hard': DifficultyProfile('hard', start_time=30.0, time_decay=0.1, words=HARD_WORDS, rounds=20),
})

TIER_NAMES = tuple(CATALOG)


def resolve(name: Optional[str]) -> Tuple[DifficultyProfile, bool]:
    """
    Look up a tier by name (case-insensitive). Returns (profile, recognized);
    anything unrecognized yields the default tier with recognized=False.
    """
    key = (name or "").strip().lower()
    profile = CATALOG.get(key)
    if profile is None:
        if key:
            log.info("unknown difficulty %r, falling back to %s", name, DEFAULT_DIFFICULTY)
        return CATALOG[DEFAULT_DIFFICULTY], False
    return profile, True


def lookup(name: Optional[str]) -> DifficultyProfile:
    return resolve(name)[0]


def with_overrides(profile, rounds=None, start_time=None):
    """Apply --rounds / --start. Decay and word pool always stay the tier's."""
    changes = {}
    if rounds is not None:
        changes['rounds'] = rounds
    if start_time is not None:
        changes['start_time'] = start_time
    return replace(profile, **changes) if changes else profile
