# config.py
"""
Process-wide constants for typerush. Nothing in here is mutated at runtime.
"""

# -------------------------
# Loop timing
# -------------------------
REFRESH_INTERVAL = 0.05   # curses redraw period (seconds)
POLL_SLEEP = 0.01         # sleep between key polls
MIN_TIME_ALLOWED = 1.0    # floor for a round's budget (seconds)

# -------------------------
# Scoring
# -------------------------
PERFECT_POINTS = 5
CLOSE_POINTS = 1
MISS_POINTS = 0
TIMEOUT_POINTS = 0
CLOSE_RATIO = 0.3          # close threshold = max(1, floor(len(target) * CLOSE_RATIO))
WIN_RATIO = 0.6            # win threshold = ceil(max_score * WIN_RATIO)

DEFAULT_DIFFICULTY = "normal"

# -------------------------
# Plain-mode colors (ANSI)
# -------------------------
RESET = "\x1b[0m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
PURPLE = "\x1b[35m"

# -------------------------
# Curses color pair ids
# -------------------------
PAIR_GOOD = 1
PAIR_BAD = 2
PAIR_STATUS = 3
PAIR_WARN = 4
PAIR_WORD = 5

HISTORY_LIMIT = 200       # lines of round history kept for the curses view
