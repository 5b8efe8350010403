# clock.py
"""Per-round time budgets."""
from typerush.config import MIN_TIME_ALLOWED


def time_allowed(profile, round_index):
    """
    Seconds allowed for 1-based `round_index`: the starting budget minus one
    decay step per completed round, never below MIN_TIME_ALLOWED.
    """
    if round_index < 1:
        raise ValueError(f"round index is 1-based, got {round_index}")
    raw = profile.start_time - (round_index - 1) * profile.time_decay
    return max(MIN_TIME_ALLOWED, raw)


def deadline_millis(seconds):
    return int(round(seconds * 1000))
