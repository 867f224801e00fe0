"""
Tests for callback classification and inline keyboards
"""

import pytest

from config.catalog import PAIR_PAGE_COUNT
from src.bot.callbacks import Action, ResolvedAction, resolve_action
from src.bot.keyboards import (
    hours_keyboard,
    manual_menu_keyboard,
    milestone_keyboard,
    minutes_keyboard,
    pairs_keyboard,
)
from src.database.models import CronJob, CronPost


@pytest.mark.parametrize(
    "data, expected",
    [
        ("cancel_op", ResolvedAction(Action.CANCEL)),
        ("cancel_op_signal", ResolvedAction(Action.CANCEL)),
        ("pairs_2", ResolvedAction(Action.PAIR_PAGE, "2")),
        ("EUR/USD (OTC)", ResolvedAction(Action.PAIR, "EUR/USD (OTC)")),
        ("hour_13", ResolvedAction(Action.HOUR, "13")),
        ("minute_55", ResolvedAction(Action.MINUTE, "55")),
        ("direction_down", ResolvedAction(Action.DIRECTION, "down")),
        ("restep_minute", ResolvedAction(Action.RESTEP, "minute")),
        ("post_signal", ResolvedAction(Action.POST_SIGNAL)),
        ("martingale2", ResolvedAction(Action.RESULT_OUTCOME, "martingale2")),
        ("lossBoth", ResolvedAction(Action.RESULT_OUTCOME, "lossBoth")),
        ("result_image", ResolvedAction(Action.RESULT_IMAGE)),
        ("send_result", ResolvedAction(Action.SEND_RESULT)),
        ("result_without_streak", ResolvedAction(Action.RESULT_STREAK, "without")),
        ("yes", ResolvedAction(Action.SESSION_ANSWER, "yes")),
        ("info_signals", ResolvedAction(Action.INFO, "signals")),
        ("broadcast_confirm", ResolvedAction(Action.BROADCAST, "confirm")),
        ("post_milestone_100", ResolvedAction(Action.MILESTONE, "100")),
        ("confirm_manual_gen_info_night", ResolvedAction(Action.MANUAL_CONFIRM, "gen_info_night")),
        ("manual_day_end", ResolvedAction(Action.MANUAL, "day_end")),
    ],
)
def test_resolve_action(data, expected):
    assert resolve_action(data) == expected


@pytest.mark.parametrize("data", [None, "", "martingale4", "EUR/USD", "hour_", "something_else"])
def test_resolve_action_unknown(data):
    assert resolve_action(data) is None


def _callbacks(markup) -> list:
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_pairs_keyboard_navigation():
    """Test page links and the cancel row"""
    first = _callbacks(pairs_keyboard(0))
    assert "pairs_1" in first
    assert not any(data == "pairs_-1" for data in first)
    assert first[-1] == "cancel_op"

    last = _callbacks(pairs_keyboard(PAIR_PAGE_COUNT - 1))
    assert f"pairs_{PAIR_PAGE_COUNT - 2}" in last
    assert f"pairs_{PAIR_PAGE_COUNT}" not in last


def test_time_keyboards_back_links():
    assert _callbacks(hours_keyboard(2))[-1] == "pairs_2"
    assert len(_callbacks(hours_keyboard())) == 25

    minutes = _callbacks(minutes_keyboard())
    assert minutes[:2] == ["minute_0", "minute_5"]
    assert minutes[-1] == "restep_time"


def test_milestone_keyboard():
    assert _callbacks(milestone_keyboard(0)) == ["cancel_op"]
    assert _callbacks(milestone_keyboard(250))[0] == "post_milestone_250"


def test_manual_menu_skips_report_jobs():
    """Test report jobs get fixed buttons instead of template buttons"""
    jobs = [
        CronJob(name="Session end", cron_id="session_end", schedule=[], timezone="UTC", telegram_id=1),
        CronJob(name="Ready", cron_id="get_ready_morning", schedule=[], timezone="UTC", telegram_id=1),
        CronJob(name="Day end", cron_id="day_end", schedule=[], timezone="UTC", telegram_id=1),
    ]
    posts = [CronPost(name="🔔 Get Ready", message_id="get_ready_morning", telegram_id=1)]

    markup = manual_menu_keyboard(jobs, posts)

    assert _callbacks(markup) == [
        "manual_get_ready_morning",
        "manual_session_end",
        "manual_day_end",
        "manual_week_report",
        "cancel_op",
    ]
    assert markup.inline_keyboard[0][0].text == "🌅 🔔 Get Ready"
