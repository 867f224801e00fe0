# coding: utf-8
"""
Report builders

Compose the session, day and week reports and the admin stats/milestone
messages. Everything here is a pure function over already-fetched signals.
"""
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from config.catalog import SESSION_TITLES
from src.core.enums import Session, StreakKind
from src.database.crud import ChannelStats
from src.database.models import Signal
from src.utils.time_utils import (
    MilestoneStatus,
    Streak,
    accuracy,
    aggregate_outcomes,
    format_day,
    numeral_to_glyphs,
)


DAY_DIVIDER = "➖" * 15
WEEK_DIVIDER = "➖" * 13
JOIN_NEXT_SESSION = "<strong>JOIN THE NEXT TRADE SESSION CLICK THE LINK BELOW 👇</strong>"


def signal_line(signal: Signal) -> str:
    """`HH:MM • pair • outcome` (direction while the signal is still open)."""
    outcome = signal.result.split("-")[0] if signal.result is not None else signal.direction
    return f"{signal.initial_time} • {signal.pair} • {outcome}"


def tally_line(wins: int, losses: int) -> str:
    win_word = "WINS" if wins > 1 else "WIN"
    loss_word = "LOSSES" if losses > 1 else "LOSS"
    return (
        f"<strong>{numeral_to_glyphs(wins)} {win_word} - "
        f"{numeral_to_glyphs(losses)} {loss_word}</strong>"
    )


def _results(signals: Sequence[Signal]) -> List[Optional[str]]:
    return [signal.result for signal in signals]


# ===========================
# CHANNEL REPORTS
# ===========================


def build_session_report(session: Session, signals: Sequence[Signal]) -> str:
    """Caption of the session-end photo."""
    summary = aggregate_outcomes(_results(signals))

    text = "<strong>📝 REPORT</strong>\n"
    text += f"<strong>{session.icon} {session.value} SESSION</strong>\n\n"
    text += "<blockquote>"
    for signal in signals:
        text += f"<code><strong>{signal_line(signal)}</strong></code>\n"
    text += "</blockquote>\n"
    text += tally_line(summary.wins, summary.losses) + "\n\n"
    text += f"<strong>❇️ Accuracy: {accuracy(summary.wins, summary.losses).percentage}</strong>\n\n"
    text += JOIN_NEXT_SESSION
    return text


def build_day_report(signals: Sequence[Signal], day: Optional[datetime] = None) -> str:
    """Daily report grouped by session in OVERNIGHT, MORNING, AFTERNOON order."""
    summary = aggregate_outcomes(_results(signals))

    text = "<strong>🧾 DAILY REPORT</strong>\n"
    text += f"<strong>🗓 {format_day(day)}</strong>\n\n"
    text += "<pre>\n"
    for band in Session.trading():
        text += f"<strong>{SESSION_TITLES[band.value]}</strong>\n"
        text += f"<strong><code>{DAY_DIVIDER}</code></strong>\n"
        for signal in signals:
            if signal.session == band.value:
                text += f"<strong><code>{signal_line(signal)}</code></strong>\n"
        text += "\n"
    text += "</pre>\n"
    text += tally_line(summary.wins, summary.losses) + "\n\n"
    text += f"<strong>❇️ Accuracy: {accuracy(summary.wins, summary.losses).percentage}</strong>\n\n"
    text += JOIN_NEXT_SESSION
    return text


def group_by_day(signals: Sequence[Signal]) -> Dict[str, List[Signal]]:
    """Group signals by formatted day, in first-seen order."""
    days: Dict[str, List[Signal]] = OrderedDict()
    for signal in signals:
        days.setdefault(format_day(signal.time_stamp), []).append(signal)
    return days


def build_week_report(signals: Sequence[Signal]) -> Optional[str]:
    """
    Weekly summary over signals sorted oldest first

    Returns None when there is nothing to report.
    """
    days = group_by_day(signals)
    if not days:
        return None

    day_names = list(days)
    total_wins = total_losses = 0

    text = "<strong>🧾 #WEEKLYSUMMARY</strong>\n\n"
    text += f"🗓 FROM: <strong>{day_names[0]}.</strong>\n"
    text += f"🗓 TO: <strong>{day_names[-1]}.</strong>\n\n"
    text += "<pre>"
    for day_name, day_signals in days.items():
        summary = aggregate_outcomes(_results(day_signals))
        total_wins += summary.wins
        total_losses += summary.losses

        text += f"<strong>{day_name}.</strong>\n"
        text += f"<strong>{WEEK_DIVIDER}</strong>\n"
        text += (
            f"<strong>✅ Wins {numeral_to_glyphs(summary.wins)} x "
            f"{numeral_to_glyphs(summary.losses)} Losses ❌</strong>\n"
        )
        text += f"<strong>❇️ Accuracy: {accuracy(summary.wins, summary.losses).percentage}</strong>\n\n"
    text += "</pre>\n"

    text += "<strong>🥇 <u>OVERALL WEEKLY PERFORMANCE</u></strong>\n"
    text += f"<strong>{WEEK_DIVIDER}</strong>\n"
    text += f"✅ Total Wins: {total_wins}\n"
    text += f"❌ Total Losses: {total_losses}\n\n"
    text += f"🎯 Weekly Accuracy: {accuracy(total_wins, total_losses).percentage}"
    return text


# ===========================
# ADMIN MESSAGES
# ===========================


def streak_line(streak: Streak) -> str:
    if streak.length == 0:
        return "➖ No current streak"
    emoji = "🔥" if streak.kind is StreakKind.WIN else "❄️"
    plural = "S" if streak.length > 1 else ""
    return f"{emoji} {streak.length} {streak.kind.value.upper()}{plural} IN A ROW"


def build_stats_message(stats: ChannelStats) -> str:
    text = "<strong>📊 PERFORMANCE STATS</strong>\n\n"
    for title, summary in (
        ("📅 TODAY", stats.today),
        ("📆 THIS WEEK", stats.week),
        ("🗓 THIS MONTH", stats.month),
    ):
        text += f"<strong>{title}</strong>\n"
        text += f"├ ✅ Wins: {summary.wins}\n"
        text += f"├ ❌ Losses: {summary.losses}\n"
        text += f"├ 📈 Total: {summary.total}\n"
        text += f"└ 🎯 Accuracy: {summary.accuracy}\n\n"

    text += f"<strong>🏆 ALL TIME SIGNALS: {stats.all_time}</strong>\n"
    text += f"<strong>{streak_line(stats.streak)}</strong>"
    return text


def build_milestone_status(total: int, status: MilestoneStatus, month_accuracy: str) -> str:
    text = "<strong>🏆 MILESTONE STATUS</strong>\n\n"
    text += f"📊 Total Signals: <strong>{total}</strong>\n"
    text += f"✅ Last Milestone: <strong>{status.last}</strong>\n"
    text += f"🎯 Next Milestone: <strong>{status.next}</strong>\n"
    text += f"📈 Signals to go: <strong>{status.remaining}</strong>\n\n"
    text += f"🎯 Month Accuracy: <strong>{month_accuracy}</strong>"
    return text


def build_milestone_celebration(milestone: int, stats: ChannelStats) -> str:
    streak = stats.streak
    plural = "S" if streak.length > 1 else ""

    text = "<strong>🎉🏆 MILESTONE REACHED! 🏆🎉</strong>\n\n"
    text += f"<strong>We've hit {milestone} SIGNALS!</strong>\n\n"
    text += f"📊 Monthly Accuracy: <strong>{stats.month.accuracy}</strong>\n"
    text += f"🔥 Current Streak: <strong>{streak.length} {streak.kind.value.upper()}{plural}</strong>\n\n"
    text += "<strong>Thank you for trading with us! 🙏</strong>\n"
    text += "<strong>More wins coming your way! 💰</strong>"
    return text
