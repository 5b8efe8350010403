# cli.py
"""
Command line entry point: argument parsing, the difficulty menu, the
play-again loop and exit codes.

    typerush [--difficulty=easy|normal|hard | -d TIER] [--rounds=N] [--start=SECONDS]
             [--seed=N] [--plain] [--log-file=PATH] [--verbose]
"""
import argparse
import curses
import logging
import math
import random
import sys
from dataclasses import dataclass
from typing import Optional

from typerush.arbiter import InputClosedError
from typerush.config import DEFAULT_DIFFICULTY
from typerush.difficulty import lookup, resolve, with_overrides
from typerush.session import play_session
from typerush.terminal import (
    CursesTerminal, PlainTerminal, console_ask, select_difficulty, verdict_line,
)

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_CLOSED = 1
EXIT_INTERRUPTED = 130


@dataclass
class Settings:
    difficulty: str = DEFAULT_DIFFICULTY
    rounds: Optional[int] = None        # None: use the tier's round count
    start_time: Optional[float] = None  # None: use the tier's starting budget
    seed: Optional[int] = None
    plain: bool = False


# -------------------------
# Arg parsing
# -------------------------
def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="typerush", description="Timed terminal typing challenge.")
    p.add_argument('-d', '--difficulty', nargs='?', const=None, default=None,
                   help='easy, normal or hard (unknown values fall back to normal)')
    p.add_argument('--rounds', help='Number of rounds (overrides the tier default)', type=str)
    p.add_argument('--start', help='Starting time budget in seconds (overrides the tier default)', type=str)
    p.add_argument('--seed', help='Seed for the word picker (repeatable word sequence)', type=int)
    p.add_argument('--plain', help='Line mode without the curses interface', action='store_true')
    p.add_argument('--log-file', help='Write diagnostics to this file', type=str)
    p.add_argument('-v', '--verbose', help='Debug-level diagnostics', action='store_true')
    return p.parse_args(argv)


def parse_positive(raw, convert, flag):
    """Convert a numeric flag; malformed or non-positive values are dropped with a warning."""
    if raw is None:
        return None
    try:
        value = convert(raw)
    except ValueError:
        log.warning("ignoring %s=%r: not a number, using the difficulty default", flag, raw)
        return None
    if not math.isfinite(value) or value <= 0:
        log.warning("ignoring %s=%r: must be a positive finite number, using the difficulty default", flag, raw)
        return None
    return value


def resolve_settings(args):
    profile, recognized = resolve(args.difficulty)
    if args.difficulty and not recognized:
        log.info("difficulty %r not recognized, using %s", args.difficulty, profile.name)
    return Settings(
        difficulty=profile.name,
        rounds=parse_positive(args.rounds, int, '--rounds'),
        start_time=parse_positive(args.start, float, '--start'),
        seed=args.seed,
        plain=args.plain,
    )


def configure_logging(log_file=None, verbose=False):
    if verbose:
        level = logging.DEBUG
    elif log_file:
        level = logging.INFO
    else:
        level = logging.WARNING
    target = {'filename': log_file} if log_file else {'stream': sys.stderr}
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", **target)


# -------------------------
# Menus
# -------------------------
def choose_profile(settings, ask, out=None):
    """Difficulty prompt; CLI overrides for rounds and start time stay in force."""
    out = out or sys.stdout
    answer = select_difficulty(ask, settings.difficulty, out)
    base = lookup(settings.difficulty)
    recognized = False
    if answer:
        chosen, recognized = resolve(answer)
        if recognized:
            base = chosen
        else:
            out.write(f'Invalid difficulty "{answer}", using {base.name}\n\n')
    profile = with_overrides(base, rounds=settings.rounds, start_time=settings.start_time)
    if recognized:
        out.write(f"Difficulty set to {profile.name} - rounds: {profile.rounds}\n\n")
    out.flush()
    return profile


def wants_another_game(ask):
    answer = (ask("Play again? (y/n): ") or "").strip().lower()
    return answer.startswith('y')


# -------------------------
# Front ends
# -------------------------
def run_plain(settings, rng, term=None):
    term = term or PlainTerminal()
    while True:
        try:
            profile = choose_profile(settings, term.ask, term.out)
            play_session(profile, term, rng)
            if not wants_another_game(term.ask):
                break
        except InputClosedError:
            term.out.write("\nInput closed. Exiting.\n")
            return EXIT_INPUT_CLOSED
        term.out.write("\n")
    term.out.write("Exiting program. Goodbye!\n")
    return EXIT_OK


def _curses_session(stdscr, profile, rng):
    return play_session(profile, CursesTerminal(stdscr), rng)


def run_curses(settings, rng):
    while True:
        try:
            profile = choose_profile(settings, console_ask)
        except InputClosedError:
            print("\nInput closed. Exiting.")
            return EXIT_INPUT_CLOSED
        try:
            tally = curses.wrapper(_curses_session, profile, rng)
        except curses.error as e:
            log.error("curses session failed: %s", e)
            print("An error occurred during the terminal UI session.")
            print("If you're on Windows, ensure 'windows-curses' is installed (pip install windows-curses).")
            print("You can also run with --plain.")
            print("Error:", e)
            return EXIT_INPUT_CLOSED
        print(verdict_line(tally, tally.verdict()))
        for line in tally.summary_lines():
            print(f"  {line}")
        print()
        try:
            if not wants_another_game(console_ask):
                break
        except InputClosedError:
            break
    print("Exiting program. Goodbye!")
    return EXIT_OK


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_file, args.verbose)
    settings = resolve_settings(args)
    rng = random.Random(settings.seed)
    plain = settings.plain or not sys.stdout.isatty()
    try:
        if plain:
            return run_plain(settings, rng)
        return run_curses(settings, rng)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return EXIT_INTERRUPTED
