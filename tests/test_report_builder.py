"""
Tests for report composition
"""

from datetime import datetime

from config.catalog import DIRECT_WIN_TEXT, LOSS_STORED_TEXT, MARTINGALE_1_WIN_TEXT
from src.core.enums import Session, StreakKind
from src.database.crud import ChannelStats
from src.database.models import Signal
from src.services.report_builder import (
    build_day_report,
    build_milestone_celebration,
    build_session_report,
    build_stats_message,
    build_week_report,
    signal_line,
    streak_line,
    tally_line,
)
from src.utils.time_utils import OutcomeSummary, Streak

from conftest import CHANNEL_ID, EUR_USD


def make_signal(session="MORNING", result=None, initial_time="12:00", time_stamp=None, direction="🟩 BUY"):
    return Signal(
        session=session,
        time_stamp=time_stamp or datetime(2024, 3, 5, 12, 0),
        pair=EUR_USD,
        direction=direction,
        result=result,
        initial_time=initial_time,
        telegram_id=CHANNEL_ID,
    )


def test_signal_line():
    """Test the outcome part before the dash, direction while open"""
    closed = make_signal(result=MARTINGALE_1_WIN_TEXT, initial_time="10:05")
    assert signal_line(closed) == f"10:05 • {EUR_USD} • ✅ WIN¹ ✅ "

    loss = make_signal(result=LOSS_STORED_TEXT)
    assert signal_line(loss).endswith("• ❌ LOSS")

    open_signal = make_signal(direction="🟥 SELL")
    assert signal_line(open_signal).endswith("• 🟥 SELL")


def test_tally_line_plurals():
    assert tally_line(1, 1) == "<strong>1⃣ WIN - 1⃣ LOSS</strong>"
    assert tally_line(2, 3) == "<strong>2⃣ WINS - 3⃣ LOSSES</strong>"


def test_build_session_report():
    signals = [
        make_signal(result=DIRECT_WIN_TEXT, initial_time="11:10"),
        make_signal(result=LOSS_STORED_TEXT, initial_time="11:30"),
    ]

    text = build_session_report(Session.MORNING, signals)

    assert "MORNING SESSION" in text
    assert text.index("11:10") < text.index("11:30")
    assert "1⃣ WIN - 1⃣ LOSS" in text
    assert "Accuracy: 50.00%" in text


def test_build_day_report_groups_by_session():
    """Test sessions appear in OVERNIGHT, MORNING, AFTERNOON order"""
    signals = [
        make_signal(session="AFTERNOON", result=DIRECT_WIN_TEXT, initial_time="18:00"),
        make_signal(session="OVERNIGHT", result=DIRECT_WIN_TEXT, initial_time="07:00"),
        make_signal(session="MORNING", result=LOSS_STORED_TEXT, initial_time="12:00"),
    ]

    text = build_day_report(signals, datetime(2024, 3, 5))

    assert "Tuesday, March 5th, 2024" in text
    overnight = text.index("OVERNIGHT SESSION")
    morning = text.index("MORNING SESSION")
    afternoon = text.index("AFTERNOON SESSION")
    assert overnight < text.index("07:00") < morning < text.index("12:00") < afternoon < text.index("18:00")
    assert "2⃣ WINS - 1⃣ LOSS" in text
    assert "Accuracy: 66.67%" in text


def test_build_day_report_without_results():
    """Test an empty day reports an undefined accuracy as 0%"""
    text = build_day_report([], datetime(2024, 3, 5))

    assert "0⃣ WIN - 0⃣ LOSS" in text
    assert "Accuracy: 0%" in text


def test_build_week_report():
    signals = [
        make_signal(result=DIRECT_WIN_TEXT, time_stamp=datetime(2024, 3, 4, 9, 0)),
        make_signal(result=LOSS_STORED_TEXT, time_stamp=datetime(2024, 3, 4, 12, 0)),
        make_signal(result=DIRECT_WIN_TEXT, time_stamp=datetime(2024, 3, 6, 9, 0)),
        make_signal(time_stamp=datetime(2024, 3, 6, 12, 0)),
    ]

    text = build_week_report(signals)

    assert "FROM: <strong>Monday, March 4th, 2024.</strong>" in text
    assert "TO: <strong>Wednesday, March 6th, 2024.</strong>" in text
    assert "Total Wins: 2" in text
    assert "Total Losses: 1" in text
    assert "Weekly Accuracy: 66.67%" in text


def test_build_week_report_empty():
    assert build_week_report([]) is None


def test_streak_line():
    assert streak_line(Streak(kind=StreakKind.WIN, length=0)) == "➖ No current streak"
    assert streak_line(Streak(kind=StreakKind.WIN, length=3)) == "🔥 3 WINS IN A ROW"
    assert streak_line(Streak(kind=StreakKind.LOSS, length=1)) == "❄️ 1 LOSS IN A ROW"


def test_stats_and_milestone_messages():
    summary = OutcomeSummary(wins=3, losses=1, total=4, accuracy="75.0%")
    stats = ChannelStats(
        today=summary,
        week=summary,
        month=summary,
        all_time=100,
        streak=Streak(kind=StreakKind.WIN, length=2),
    )

    stats_text = build_stats_message(stats)
    assert "ALL TIME SIGNALS: 100" in stats_text
    assert "🎯 Accuracy: 75.0%" in stats_text
    assert "2 WINS IN A ROW" in stats_text

    celebration = build_milestone_celebration(100, stats)
    assert "We've hit 100 SIGNALS!" in celebration
    assert "Current Streak: <strong>2 WINS</strong>" in celebration
