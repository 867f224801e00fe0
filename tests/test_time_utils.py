"""
Unit tests for session classification and outcome math
"""

from datetime import datetime, UTC

import pytest

from config.catalog import DIRECT_WIN_TEXT, LOSS_STORED_TEXT, MARTINGALE_2_WIN_TEXT
from src.core.enums import Session, StreakKind
from src.utils.time_utils import (
    Accuracy,
    accuracy,
    aggregate_outcomes,
    classify_session,
    current_session,
    current_streak,
    format_day,
    is_valid_currency_pair,
    milestone_status,
    next_time,
    numeral_to_glyphs,
    utc_day_bounds,
)


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, Session.OUTSIDE),
        (359, Session.OUTSIDE),
        (360, Session.OVERNIGHT),
        (660, Session.OVERNIGHT),
        (661, Session.MORNING),
        (1020, Session.MORNING),
        (1021, Session.AFTERNOON),
        (1439, Session.AFTERNOON),
    ],
)
def test_classify_session_boundaries(minutes, expected):
    """Test the inclusive session band edges"""
    assert classify_session(minutes) is expected


def test_current_session_uses_london_offset():
    """Test that UTC instants are shifted one hour before classification"""
    assert current_session(datetime(2024, 3, 5, 10, 0, tzinfo=UTC)) is Session.OVERNIGHT
    assert current_session(datetime(2024, 3, 5, 10, 1, tzinfo=UTC)) is Session.MORNING
    assert current_session(datetime(2024, 3, 5, 22, 59, tzinfo=UTC)) is Session.AFTERNOON
    assert current_session(datetime(2024, 3, 5, 23, 0, tzinfo=UTC)) is Session.OUTSIDE


def test_next_time_wraps_past_midnight():
    """Test minute increments carrying into hours and days"""
    assert next_time(9, 5, 5) == "09:10"
    assert next_time(12, 55, 10) == "13:05"
    assert next_time(23, 55, 10) == "00:05"


def test_accuracy():
    """Test accuracy with and without counted outcomes"""
    assert accuracy(0, 0) == Accuracy(defined=False, percentage="0%")
    assert accuracy(2, 1) == Accuracy(defined=True, percentage="66.67%")
    assert accuracy(3, 0).percentage == "100.00%"


def test_aggregate_outcomes_ignores_open_signals():
    """Test that NULL results are not counted"""
    summary = aggregate_outcomes([DIRECT_WIN_TEXT, LOSS_STORED_TEXT, None, MARTINGALE_2_WIN_TEXT])

    assert summary.wins == 2
    assert summary.losses == 1
    assert summary.total == 3
    assert summary.accuracy == "66.7%"


def test_aggregate_outcomes_empty():
    """Test aggregation over nothing"""
    summary = aggregate_outcomes([None, None])

    assert summary.total == 0
    assert summary.accuracy == "0%"


def test_current_streak():
    """Test streak kind and length from the newest result"""
    wins = current_streak([DIRECT_WIN_TEXT, MARTINGALE_2_WIN_TEXT, LOSS_STORED_TEXT, DIRECT_WIN_TEXT])
    assert wins.kind is StreakKind.WIN
    assert wins.length == 2

    losses = current_streak([LOSS_STORED_TEXT, None, LOSS_STORED_TEXT, DIRECT_WIN_TEXT])
    assert losses.kind is StreakKind.LOSS
    assert losses.length == 2

    empty = current_streak([])
    assert empty.kind is StreakKind.WIN
    assert empty.length == 0


def test_milestone_status():
    """Test last/next milestone lookup"""
    status = milestone_status(120)
    assert (status.last, status.next, status.remaining) == (100, 250, 130)

    fresh = milestone_status(0)
    assert (fresh.last, fresh.next, fresh.remaining) == (0, 50, 50)

    beyond = milestone_status(20000)
    assert (beyond.last, beyond.next, beyond.remaining) == (10000, 20100, 100)


def test_numeral_to_glyphs():
    assert numeral_to_glyphs(0) == "0⃣"
    assert numeral_to_glyphs(12) == "1⃣2⃣"


def test_format_day_ordinals():
    """Test the long date format and ordinal suffixes"""
    assert format_day(datetime(2024, 3, 5)) == "Tuesday, March 5th, 2024"
    assert format_day(datetime(2024, 3, 1)).endswith("March 1st, 2024")
    assert format_day(datetime(2024, 3, 11)).endswith("March 11th, 2024")
    assert format_day(datetime(2024, 3, 22)).endswith("March 22nd, 2024")
    assert format_day(datetime(2024, 3, 23)).endswith("March 23rd, 2024")


@pytest.mark.parametrize(
    "pair, valid",
    [
        ("EUR/USD (OTC)", True),
        ("USD/JPY (OTC)", True),
        ("EUR/USD", False),
        ("eur/usd (OTC)", False),
        ("EUR/USD (OTC) extra", False),
        ("EURO/USD (OTC)", False),
    ],
)
def test_is_valid_currency_pair(pair, valid):
    assert is_valid_currency_pair(pair) is valid


def test_utc_day_bounds():
    """Test the UTC calendar day window"""
    start, end = utc_day_bounds(datetime(2024, 3, 5, 23, 30, tzinfo=UTC))

    assert start == datetime(2024, 3, 5, tzinfo=UTC)
    assert end == datetime(2024, 3, 6, tzinfo=UTC)
