# coding: utf-8
"""
Inline keyboards for the admin conversation
"""
from typing import List, Sequence, Tuple

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from config.catalog import (
    CURRENCY_PAIR_PAGES,
    PAIR_PAGE_COUNT,
    RESULT_BUTTON_LABELS,
    TELEGRAM_CHANNEL_URL,
)
from src.database.models import CronJob, CronPost


CANCEL_BUTTON = ("Cancel Operation", "cancel_op")

INFO_SECTIONS = (
    ("overview", "Overview"),
    ("signals", "Signals"),
    ("scheduled", "Scheduled"),
    ("admin", "Admin"),
    ("channels", "Channels"),
)


def build_keyboard(rows: Sequence[Sequence[Tuple[str, str]]]) -> InlineKeyboardMarkup:
    """Callback keyboard from rows of (text, callback_data)."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=text, callback_data=data) for text, data in row]
            for row in rows
        ]
    )


def _chunk(items: list, size: int) -> List[list]:
    return [items[i:i + size] for i in range(0, len(items), size)]


# ===========================
# SIGNAL WIZARD
# ===========================


def pairs_keyboard(page: int) -> InlineKeyboardMarkup:
    """One page of the pair catalog, two pairs per row, with page navigation."""
    pairs = [(label, value) for value, label in CURRENCY_PAIR_PAGES[page]]
    rows = _chunk(pairs, 2)

    nav = []
    if page > 0:
        nav.append(("◀ Back", f"pairs_{page - 1}"))
    if page < PAIR_PAGE_COUNT - 1:
        nav.append(("More Pairs ▶", f"pairs_{page + 1}"))
    if nav:
        rows.append(nav)

    rows.append([CANCEL_BUTTON])
    return build_keyboard(rows)


def hours_keyboard(back_page: int = 0) -> InlineKeyboardMarkup:
    hours = [(str(hour), f"hour_{hour}") for hour in range(24)]
    rows = _chunk(hours, 6)
    rows.append([("◀ Back", f"pairs_{back_page}")])
    return build_keyboard(rows)


def minutes_keyboard() -> InlineKeyboardMarkup:
    minutes = [(str(minute), f"minute_{minute}") for minute in range(0, 60, 5)]
    rows = _chunk(minutes, 6)
    rows.append([("◀", "restep_time")])
    return build_keyboard(rows)


def direction_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [("🟩 BUY", "direction_up"), ("🟥 SELL", "direction_down")],
        [("◀ Back", "restep_minute")],
    ])


def review_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [("Correct ✅", "post_signal")],
        [
            ("◀ Pairs", "restep_pairs"),
            ("◀ Time", "restep_time"),
            ("◀ Direction", "restep_direction"),
        ],
    ])


# ===========================
# RESULTS
# ===========================


def result_menu_keyboard() -> InlineKeyboardMarkup:
    rows = [[(label, key)] for key, label in RESULT_BUTTON_LABELS.items()]
    rows.append([CANCEL_BUTTON])
    return build_keyboard(rows)


def result_next_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [("🖼 Add Image", "result_image")],
        [("⏫ Just Send", "send_result")],
        [CANCEL_BUTTON],
    ])


def result_image_saved_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [("⏫ Send to Channel", "send_result")],
        [CANCEL_BUTTON],
    ])


def streak_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [
            ("✅ Yes, include streak", "result_with_streak"),
            ("❌ No, just result", "result_without_streak"),
        ]
    ])


# ===========================
# SESSION CLOSE
# ===========================


def yes_no_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([[("Yes", "yes"), ("No", "no")]])


# ===========================
# ADMIN TOOLS
# ===========================


def info_keyboard(section: str) -> InlineKeyboardMarkup:
    buttons = [
        (f"• {title} •" if key == section else title, f"info_{key}")
        for key, title in INFO_SECTIONS
    ]
    rows = _chunk(buttons, 2)
    rows.append([("✖ Close", "cancel_op")])
    return build_keyboard(rows)


def broadcast_keyboard() -> InlineKeyboardMarkup:
    return build_keyboard([
        [("✅ Send to Channel", "broadcast_confirm"), ("❌ Cancel", "broadcast_cancel")]
    ])


def milestone_keyboard(last_milestone: int) -> InlineKeyboardMarkup:
    rows = []
    if last_milestone > 0:
        rows.append([(f'🎉 Post "{last_milestone} Signals" Milestone', f"post_milestone_{last_milestone}")])
    rows.append([("Cancel", "cancel_op")])
    return build_keyboard(rows)


def join_team_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="JOIN THE WINNING TEAM 🚀", url=TELEGRAM_CHANNEL_URL)]]
    )


def manual_post_emoji(cron_id: str) -> str:
    if "night" in cron_id or "overnight" in cron_id:
        return "🌑"
    if "morning" in cron_id:
        return "🌅"
    if "noon" in cron_id or "afternoon" in cron_id:
        return "☀️"
    if "ready" in cron_id:
        return "🔔"
    if "start" in cron_id:
        return "▶️"
    return "📄"


def manual_menu_keyboard(
    jobs: Sequence[CronJob], posts: Sequence[CronPost]
) -> InlineKeyboardMarkup:
    """Every scheduled post except the report jobs, two per row, then report buttons."""
    names = {post.message_id: post.name for post in posts}
    buttons = []
    for job in jobs:
        if job.cron_id in ("session_end", "day_end"):
            continue
        display_name = names.get(job.cron_id) or job.name or job.cron_id.replace("_", " ")
        buttons.append((f"{manual_post_emoji(job.cron_id)} {display_name}", f"manual_{job.cron_id}"))

    rows = _chunk(buttons, 2)
    rows.append([("📝 Session End Report", "manual_session_end"), ("📊 Day End Report", "manual_day_end")])
    rows.append([("📈 Weekly Report", "manual_week_report")])
    rows.append([("Cancel", "cancel_op")])
    return build_keyboard(rows)


def manual_confirm_keyboard(post_type: str) -> InlineKeyboardMarkup:
    return build_keyboard([
        [("✅ Yes, Send", f"confirm_manual_{post_type}"), ("❌ Cancel", "cancel_op")]
    ])
