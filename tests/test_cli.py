import io
import logging
import random

import pytest

from typerush.cli import (
    EXIT_INPUT_CLOSED, EXIT_OK, Settings, choose_profile, parse_args, parse_positive, resolve_settings,
    run_plain,
)
from typerush.clock import time_allowed
from typerush.difficulty import CATALOG, with_overrides
from typerush.terminal import LineFeed, PlainTerminal


def test_parse_flags():
    args = parse_args(['--rounds=3', '--start=7.5', '--difficulty=hard'])
    settings = resolve_settings(args)
    assert settings.rounds == 3
    assert settings.start_time == 7.5
    assert settings.difficulty == 'hard'


def test_short_difficulty_flag():
    assert resolve_settings(parse_args(['-d', 'easy'])).difficulty == 'easy'
    # -d followed by another flag keeps the default tier
    settings = resolve_settings(parse_args(['-d', '--rounds=2']))
    assert settings.difficulty == 'normal'
    assert settings.rounds == 2


def test_unknown_difficulty_falls_back():
    assert resolve_settings(parse_args(['--difficulty=nightmare'])).difficulty == 'normal'
    assert resolve_settings(parse_args([])).difficulty == 'normal'


def test_malformed_numbers_warn_and_fall_back(caplog):
    with caplog.at_level(logging.WARNING, logger="typerush.cli"):
        settings = resolve_settings(parse_args(['--rounds=ten', '--start=-2']))
    assert settings.rounds is None
    assert settings.start_time is None
    assert "--rounds" in caplog.text
    assert "--start" in caplog.text


@pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "1e999"])
def test_non_finite_start_falls_back(caplog, raw):
    with caplog.at_level(logging.WARNING, logger="typerush.cli"):
        settings = resolve_settings(parse_args([f'--start={raw}', '--rounds=1']))
    assert settings.start_time is None
    assert "--start" in caplog.text
    profile = with_overrides(CATALOG['normal'], rounds=settings.rounds, start_time=settings.start_time)
    assert time_allowed(profile, 1) == 5.0


def test_parse_positive():
    assert parse_positive(None, int, '--rounds') is None
    assert parse_positive("4", int, '--rounds') == 4
    assert parse_positive("2.5", int, '--rounds') is None
    assert parse_positive("0", float, '--start') is None


def test_choose_profile_keeps_default():
    out = io.StringIO()
    profile = choose_profile(Settings(difficulty='easy'), lambda p: "", out)
    assert profile is CATALOG['easy']


def test_choose_profile_applies_overrides():
    out = io.StringIO()
    profile = choose_profile(Settings(rounds=2, start_time=9.0), lambda p: "HARD", out)
    assert profile.name == 'hard'
    assert profile.rounds == 2
    assert profile.start_time == 9.0
    assert profile.time_decay == CATALOG['hard'].time_decay
    assert "Difficulty set to hard - rounds: 2" in out.getvalue()


def test_choose_profile_invalid_choice():
    out = io.StringIO()
    profile = choose_profile(Settings(), lambda p: "expert", out)
    assert profile is CATALOG['normal']
    assert 'Invalid difficulty "expert", using normal' in out.getvalue()


def plain_terminal(text, timers):
    out = io.StringIO()
    return PlainTerminal(feed=LineFeed(io.StringIO(text)), out=out, color=False, timer_factory=timers), out


def test_run_plain_full_game(timers):
    picker = random.Random(3)
    words = [picker.choice(CATALOG['easy'].words) for _ in range(2)]
    term, out = plain_terminal("easy\n{}\n{}\nn\n".format(*words), timers)
    code = run_plain(Settings(rounds=2), random.Random(3), term)
    text = out.getvalue()
    assert code == EXIT_OK
    assert text.count("Perfect! +5") == 2
    assert "Game Over - You win! Total score: 10" in text
    assert text.rstrip().endswith("Goodbye!")


def test_run_plain_input_closed(timers):
    term, out = plain_terminal("\n", timers)
    code = run_plain(Settings(), random.Random(3), term)
    assert code == EXIT_INPUT_CLOSED
    text = out.getvalue()
    # no round finished, so the tally is empty
    assert "Game Over - no rounds played." in text
    assert "Rounds played: 0" in text
    assert "Input closed" in text
