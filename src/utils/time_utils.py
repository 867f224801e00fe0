# coding: utf-8
"""
Time and session helpers

Pure functions: session classification on London time, date formatting,
numeral glyphs, accuracy, outcome aggregation, streaks and milestones.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, UTC
from typing import Iterable, Optional, Sequence

from config.catalog import MILESTONES, WIN_MARKER
from config.config import LONDON_UTC_OFFSET_HOURS
from src.core.enums import Session, StreakKind


# Session bands in minutes since local midnight, inclusive
OVERNIGHT_START = 6 * 60
OVERNIGHT_END = 11 * 60
MORNING_START = 11 * 60 + 1
MORNING_END = 17 * 60
AFTERNOON_START = 17 * 60 + 1
AFTERNOON_END = 23 * 60 + 59

LONDON_TZ = timezone(timedelta(hours=LONDON_UTC_OFFSET_HOURS))

_DIGIT_GLYPHS = {str(digit): f"{digit}⃣" for digit in range(10)}

_PAIR_PATTERN = re.compile(r"^[A-Z]{3}/[A-Z]{3} \(OTC\)$")


@dataclass(frozen=True)
class Accuracy:
    defined: bool
    percentage: str


@dataclass(frozen=True)
class OutcomeSummary:
    wins: int
    losses: int
    total: int
    accuracy: str


@dataclass(frozen=True)
class Streak:
    kind: StreakKind
    length: int


@dataclass(frozen=True)
class MilestoneStatus:
    last: int
    next: int
    remaining: int


def classify_session(minutes: int) -> Session:
    """
    Classify minutes since local midnight into a session band

    0:00-5:59 is OUTSIDE; AFTERNOON does not wrap past midnight.
    """
    if OVERNIGHT_START <= minutes <= OVERNIGHT_END:
        return Session.OVERNIGHT
    if MORNING_START <= minutes <= MORNING_END:
        return Session.MORNING
    if AFTERNOON_START <= minutes <= AFTERNOON_END:
        return Session.AFTERNOON
    return Session.OUTSIDE


def london_now(now: Optional[datetime] = None) -> datetime:
    """Current time shifted to the fixed London offset (UTC+1, no DST)."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(LONDON_TZ)


def current_session(now: Optional[datetime] = None) -> Session:
    """Session active at `now` (defaults to the current instant)."""
    local = london_now(now)
    return classify_session(local.hour * 60 + local.minute)


def accuracy(wins: int, losses: int) -> Accuracy:
    """
    Win percentage with two decimals

    Returns an undefined marker with "0%" when there is nothing to count.
    """
    total = wins + losses
    if total == 0:
        return Accuracy(defined=False, percentage="0%")
    return Accuracy(defined=True, percentage=f"{wins / total * 100:.2f}%")


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_day(date: Optional[datetime] = None) -> str:
    """Render e.g. "Tuesday, March 5th, 2024"."""
    date = date or datetime.now(UTC)
    return f"{date:%A}, {date:%B} {date.day}{_ordinal_suffix(date.day)}, {date.year}"


def pad_zero(value: int) -> str:
    return f"{value:02d}"


def next_time(hour: int, minute: int, increment: int) -> str:
    """Add `increment` minutes and render HH:MM, wrapping past midnight."""
    minute += increment
    hour = (hour + minute // 60) % 24
    minute %= 60
    return f"{pad_zero(hour)}:{pad_zero(minute)}"


def numeral_to_glyphs(count) -> str:
    """Render each decimal digit as its keycap glyph: 12 -> 1⃣2⃣."""
    return "".join(_DIGIT_GLYPHS[digit] for digit in str(count))


def is_win(result: Optional[str]) -> bool:
    return bool(result) and WIN_MARKER in result


def aggregate_outcomes(results: Iterable[Optional[str]]) -> OutcomeSummary:
    """
    Count wins and losses over stored result texts

    Open signals (None) are ignored. Accuracy has one decimal.
    """
    wins = losses = 0
    for result in results:
        if result is None:
            continue
        if WIN_MARKER in result:
            wins += 1
        else:
            losses += 1

    total = wins + losses
    percentage = f"{wins / total * 100:.1f}%" if total else "0%"
    return OutcomeSummary(wins=wins, losses=losses, total=total, accuracy=percentage)


def current_streak(results_newest_first: Sequence[Optional[str]]) -> Streak:
    """
    Length and kind of the run starting at the newest result

    Open signals are skipped; an empty history is a zero win streak.
    """
    results = [result for result in results_newest_first if result is not None]
    if not results:
        return Streak(kind=StreakKind.WIN, length=0)

    newest_is_win = is_win(results[0])
    length = 0
    for result in results:
        if is_win(result) != newest_is_win:
            break
        length += 1

    kind = StreakKind.WIN if newest_is_win else StreakKind.LOSS
    return Streak(kind=kind, length=length)


def milestone_status(total: int, ladder: Sequence[int] = MILESTONES) -> MilestoneStatus:
    """Last reached and next milestone for a total signal count."""
    last = max((step for step in ladder if step <= total), default=0)
    upcoming = min((step for step in ladder if step > total), default=total + 100)
    return MilestoneStatus(last=last, next=upcoming, remaining=upcoming - total)


def is_valid_currency_pair(pair: str) -> bool:
    """Accept "EUR/USD (OTC)" style pair codes only."""
    return bool(_PAIR_PATTERN.fullmatch(pair))


def utc_day_bounds(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Start and end of the UTC calendar day containing `now`."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    start = now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
