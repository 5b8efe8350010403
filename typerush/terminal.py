# terminal.py
"""
Terminal front ends for the round loop.

- CursesTerminal: full-screen UI with a countdown bar, coloured live input,
  Backspace / Ctrl+W smart delete and ESC to quit early.
- PlainTerminal: line mode with ANSI colours, for pipes and terminals
  without curses. Lines come from a LineFeed reader thread.

Both provide display_prompt / read_line_with_deadline / render_outcome /
render_final_verdict, which is all the session loop uses.
On Windows: pip install windows-curses
"""
import curses
import logging
import sys
import threading
import time
from collections import deque

from typerush.arbiter import InputClosedError, RoundArbiter, SessionAborted
from typerush.config import (
    GREEN, HISTORY_LIMIT, PAIR_BAD, PAIR_GOOD, PAIR_STATUS, PAIR_WARN, PAIR_WORD,
    POLL_SLEEP, PURPLE, RED, REFRESH_INTERVAL, RESET, YELLOW,
)
from typerush.difficulty import TIER_NAMES
from typerush.scoring import OutcomeKind
from typerush.tally import Verdict

log = logging.getLogger(__name__)

OUTCOME_COLORS = {
    OutcomeKind.PERFECT: GREEN,
    OutcomeKind.CLOSE: YELLOW,
    OutcomeKind.MISS: RED,
    OutcomeKind.TIMEOUT: RED,
}

OUTCOME_PAIRS = {
    OutcomeKind.PERFECT: PAIR_GOOD,
    OutcomeKind.CLOSE: PAIR_WARN,
    OutcomeKind.MISS: PAIR_BAD,
    OutcomeKind.TIMEOUT: PAIR_BAD,
}


# -------------------------
# Shared text
# -------------------------
def round_header(round_index, total_rounds, time_allowed):
    return f"Round {round_index}/{total_rounds} - {time_allowed:.1f}s to type:"


def verdict_line(tally, verdict):
    if tally.rounds_played == 0:
        return "Game Over - no rounds played."
    if verdict is Verdict.WIN:
        return f"Game Over - You win! Total score: {tally.score_total}"
    return f"Game Over - total score: {tally.score_total}"


def select_difficulty(ask, default, out=None):
    """Show the welcome text and ask for a tier. Empty answer keeps `default`."""
    out = out or sys.stdout
    out.write("Typing Minigame - type the shown word and press Enter.\n")
    out.write("Perfect match = 5 pts, close spelling = 1 pt, miss = 0 pts.\n")
    out.write(f"Choose difficulty ({'/'.join(TIER_NAMES)}) or press Enter to keep [{default}]:\n")
    out.flush()
    return (ask("> ") or "").strip()


def console_ask(prompt):
    """input() for the menus around a curses session."""
    try:
        return input(prompt)
    except EOFError:
        raise InputClosedError("stdin closed") from None


# -------------------------
# Smart delete
# -------------------------
def is_word_char(ch):
    return ch.isalnum() or ch == '_'


def smart_delete_prev_word(buffer):
    """
    Ctrl+W: drop trailing spaces, then the previous word. A trailing
    punctuation run goes together with the spaces and word in front of it.
    """
    removed = 0
    while buffer and buffer[-1].isspace():
        buffer.pop()
        removed += 1
    if not buffer:
        return removed
    if is_word_char(buffer[-1]):
        while buffer and is_word_char(buffer[-1]):
            buffer.pop()
            removed += 1
    else:
        while buffer and not is_word_char(buffer[-1]) and not buffer[-1].isspace():
            buffer.pop()
            removed += 1
        while buffer and buffer[-1].isspace():
            buffer.pop()
            removed += 1
        while buffer and is_word_char(buffer[-1]):
            buffer.pop()
            removed += 1
    return removed


# -------------------------
# Line mode
# -------------------------
class LineFeed:
    """
    Reads stdin on a daemon thread, one line per request, and hands each line
    to the arbiter that is listening at the moment it arrives. A line that
    arrives after its round expired is dropped.
    """

    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.stdin
        self._lock = threading.Lock()
        self._wanted = threading.Event()
        self._listener = None
        self._thread = None
        self.closed = False

    def listen(self, arbiter):
        arbiter.attach_listener(self)
        with self._lock:
            closed = self.closed
            if not closed:
                self._listener = arbiter
                self._wanted.set()
                if self._thread is None:
                    self._thread = threading.Thread(target=self._run, name="typerush-stdin", daemon=True)
                    self._thread.start()
        if closed:
            arbiter.abandon(InputClosedError("stdin closed"))

    def disarm(self, arbiter):
        with self._lock:
            if self._listener is arbiter:
                self._listener = None

    def _run(self):
        while True:
            self._wanted.wait()
            try:
                line = self._stream.readline()
            except (OSError, ValueError) as e:
                log.warning("stdin read failed: %s", e)
                line = ""
            with self._lock:
                listener, self._listener = self._listener, None
                self._wanted.clear()
                if not line:
                    self.closed = True
            if not line:
                if listener is not None:
                    listener.abandon(InputClosedError("stdin closed"))
                return
            if listener is None:
                log.debug("discarding line typed after the deadline: %r", line)
                continue
            listener.submit(line.rstrip("\r\n"))


class PlainTerminal:
    def __init__(self, feed=None, out=None, color=None, timer_factory=threading.Timer):
        self.feed = feed or LineFeed()
        self.out = out or sys.stdout
        if color is None:
            color = hasattr(self.out, "isatty") and self.out.isatty()
        self.color = color
        self.timer_factory = timer_factory

    def _paint(self, text, color):
        return f"{color}{text}{RESET}" if self.color else text

    def _write(self, text):
        self.out.write(text)
        self.out.flush()

    def _wait(self, arbiter, in_round=True):
        self.feed.listen(arbiter)
        arbiter.start()
        try:
            return arbiter.wait()
        except KeyboardInterrupt:
            arbiter.abandon(SessionAborted("interrupted"))
            self._write("\n")
            if not in_round:
                raise
            raise SessionAborted("interrupted") from None

    def ask(self, prompt):
        """Blocking prompt for the menus; Ctrl+C here propagates as KeyboardInterrupt."""
        self._write(prompt)
        return self._wait(RoundArbiter(None), in_round=False).text

    def display_prompt(self, round_index, total_rounds, time_allowed, word):
        self._write(round_header(round_index, total_rounds, time_allowed) + "\n")
        self._write(f"   {word}\n")

    def read_line_with_deadline(self, deadline_millis):
        self._write("> ")
        arbiter = RoundArbiter(deadline_millis / 1000.0, timer_factory=self.timer_factory)
        resolution = self._wait(arbiter)
        if not resolution.answered:
            self._write("\n")
        return resolution

    def render_outcome(self, outcome):
        self._write(self._paint(f"  -> {outcome.describe()}", OUTCOME_COLORS[outcome.kind]) + "\n\n")

    def render_final_verdict(self, tally, verdict):
        color = PURPLE if verdict is Verdict.WIN else RED
        self._write(self._paint(verdict_line(tally, verdict), color) + "\n")
        for line in tally.summary_lines():
            self._write(f"  {line}\n")


# -------------------------
# Curses UI
# -------------------------
def init_colors():
    curses.use_default_colors()
    try:
        curses.init_pair(PAIR_GOOD, curses.COLOR_GREEN, -1)
        curses.init_pair(PAIR_BAD, curses.COLOR_RED, -1)
        curses.init_pair(PAIR_STATUS, curses.COLOR_CYAN, -1)
        curses.init_pair(PAIR_WARN, curses.COLOR_YELLOW, -1)
        curses.init_pair(PAIR_WORD, curses.COLOR_MAGENTA, -1)
    except curses.error:
        pass


def countdown_bar(fraction, width):
    """`fraction` of time left, drawn as [=====>....]."""
    fraction = max(0.0, min(1.0, fraction))
    filled = int(fraction * width)
    if filled >= width:
        return "[" + ("=" * width) + "]"
    return "[" + ("=" * filled) + ">" + ("." * (width - filled - 1)) + "]"


def handle_key(ch, buffer, arbiter):
    """One get_wch() result: edit the line in `buffer`, or submit / quit the round."""
    if isinstance(ch, str):
        ordch = ord(ch) if ch else None
        if ordch == 27:  # ESC
            arbiter.abandon(SessionAborted("escape pressed"))
        elif ordch == 23:  # Ctrl+W smart delete
            smart_delete_prev_word(buffer)
        elif ordch in (8, 127):  # backspace
            if buffer:
                buffer.pop()
        elif ordch in (10, 13):  # enter
            arbiter.submit("".join(buffer))
        elif ch.isprintable():
            buffer.append(ch)
    elif ch == curses.KEY_BACKSPACE:
        if buffer:
            buffer.pop()
    elif ch == curses.KEY_ENTER:
        arbiter.submit("".join(buffer))
    elif ch == curses.KEY_EXIT:
        arbiter.abandon(SessionAborted("exit key"))


class CursesTerminal:
    def __init__(self, stdscr, timer_factory=threading.Timer):
        self.stdscr = stdscr
        self.timer_factory = timer_factory
        self.history = deque(maxlen=HISTORY_LIMIT)
        self.round_index = 0
        self.total_rounds = 0
        self.word = ""
        self.score = 0
        curses.curs_set(0)
        stdscr.keypad(True)
        init_colors()

    def _log(self, text, attr=0):
        self.history.append((text, attr))

    def _addstr(self, y, x, text, attr=0):
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass

    def draw_top_bar(self, remaining, time_allowed, width):
        status = f" Round: {self.round_index}/{self.total_rounds}   Score: {self.score} "
        if remaining is not None:
            pb_width = min(20, max(8, width // 6))
            status += f"  Time: {remaining:5.1f}s " + countdown_bar(remaining / time_allowed, pb_width)
        self._addstr(0, 0, status[:width].ljust(width), curses.color_pair(PAIR_STATUS) | curses.A_BOLD)

    def draw(self, buffer=None, arbiter=None):
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        remaining = arbiter.remaining() if arbiter is not None else None
        time_allowed = arbiter.time_allowed if arbiter is not None else None
        self.draw_top_bar(remaining, time_allowed, width)
        # history fills the space between the top bar and the input line
        history_top = 2
        history_rows = max(0, height - history_top - 3)
        visible = list(self.history)[-history_rows:] if history_rows else []
        for i, (text, attr) in enumerate(visible):
            self._addstr(history_top + i, 2, text[:max(0, width - 3)], attr)
        if buffer is not None:
            y = height - 2
            self._addstr(y, 2, "> ")
            x = 4
            for i, ch in enumerate(buffer):
                if x >= width - 1:
                    break
                if i < len(self.word) and ch == self.word[i]:
                    self._addstr(y, x, ch, curses.color_pair(PAIR_GOOD))
                else:
                    self._addstr(y, x, ch, curses.color_pair(PAIR_BAD) | curses.A_UNDERLINE)
                x += 1
            self._addstr(y, min(x, width - 2), " ", curses.A_REVERSE)
        footer = " ESC to quit early | Backspace supported | Ctrl+W SmartDel | Enter to submit"
        self._addstr(height - 1, 0, footer[:width].ljust(width - 1), curses.A_DIM)
        self.stdscr.refresh()

    def display_prompt(self, round_index, total_rounds, time_allowed, word):
        self.round_index = round_index
        self.total_rounds = total_rounds
        self.word = word
        self._log(round_header(round_index, total_rounds, time_allowed), curses.color_pair(PAIR_STATUS))
        self._log(f"   {word}", curses.color_pair(PAIR_WORD) | curses.A_BOLD)

    def read_line_with_deadline(self, deadline_millis):
        arbiter = RoundArbiter(deadline_millis / 1000.0, timer_factory=self.timer_factory)
        buffer = []
        self.stdscr.nodelay(True)
        arbiter.start()
        last_draw = 0.0
        try:
            while not arbiter.resolved:
                try:
                    ch = self.stdscr.get_wch()
                except curses.error:
                    ch = None
                if ch is not None:
                    handle_key(ch, buffer, arbiter)
                now = time.monotonic()
                if now - last_draw >= REFRESH_INTERVAL:
                    self.draw(buffer, arbiter)
                    last_draw = now
                time.sleep(POLL_SLEEP)
        except KeyboardInterrupt:
            arbiter.abandon(SessionAborted("interrupted"))
        resolution = arbiter.wait()
        if resolution.answered:
            self._log(f"   > {resolution.text}")
        return resolution

    def render_outcome(self, outcome):
        self.score += outcome.points
        self._log(f"  -> {outcome.describe()}", curses.color_pair(OUTCOME_PAIRS[outcome.kind]))
        self._log("")
        self.draw()

    def render_final_verdict(self, tally, verdict):
        self.stdscr.erase()
        pair = PAIR_WORD if verdict is Verdict.WIN else PAIR_BAD
        self._addstr(2, 2, verdict_line(tally, verdict), curses.color_pair(pair) | curses.A_BOLD)
        for i, line in enumerate(tally.summary_lines()):
            self._addstr(4 + i, 2, line)
        self._addstr(6 + len(tally.summary_lines()), 2, "Press any key to continue...", curses.A_DIM)
        self.stdscr.refresh()
        self.stdscr.nodelay(False)
        self.stdscr.getch()
