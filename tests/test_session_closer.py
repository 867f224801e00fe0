"""
Tests for session, day and week close flows
"""

import asyncio
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from aiogram.exceptions import TelegramBadRequest

from config.catalog import DIRECT_WIN_TEXT, LOSS_STORED_TEXT
from src.core.enums import Session
from src.services.session_closer import (
    CLOSE_FAILED,
    MANUAL_REMINDER,
    NOTHING_TO_END,
    OPEN_SIGNAL_BLOCKS,
    POSTED,
    POSTED_AUTOMATICALLY,
    SessionCloser,
)

from conftest import ADMIN_ID, CHANNEL_ID


# 11:30 in London, MORNING session
NOW = datetime(2024, 3, 5, 10, 30, tzinfo=UTC)


@pytest.fixture
def closer(publisher, session_maker):
    return SessionCloser(publisher, session_maker, timeout=0.01)


def edited_texts(bot) -> list:
    return [call.kwargs["text"] for call in bot.edit_message_text.call_args_list]


@pytest.mark.asyncio
async def test_nothing_to_end(closer, sent_texts):
    """Test an empty session only answers when asked explicitly"""
    assert await closer.end_session(ADMIN_ID, now=NOW) is None
    assert sent_texts(ADMIN_ID) == []

    assert await closer.end_session(ADMIN_ID, called=True, now=NOW) is None
    assert sent_texts(ADMIN_ID) == [NOTHING_TO_END]


@pytest.mark.asyncio
async def test_confirmed_close_posts_report(closer, add_signal, bot, conversations, sent_texts):
    """Test answering yes posts the session report photo"""
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    await add_signal(NOW - timedelta(minutes=40), session="OVERNIGHT", result=LOSS_STORED_TEXT)

    pending = await closer.end_session(ADMIN_ID, now=NOW)

    assert pending is not None
    assert pending.session is Session.MORNING
    assert pending.can_close
    assert len(pending.signals) == 1
    assert "MORNING session" in sent_texts(ADMIN_ID)[0]
    assert conversations.get(ADMIN_ID).last_bot_message_id == pending.message_id

    assert await closer.handle_answer(pending.message_id, confirmed=True) is True

    bot.send_photo.assert_awaited_once()
    photo = bot.send_photo.call_args.kwargs
    assert photo["chat_id"] == CHANNEL_ID
    assert "MORNING SESSION" in photo["caption"]
    assert edited_texts(bot) == [POSTED]
    assert conversations.get(ADMIN_ID).last_bot_message_id is None
    assert closer.pending == {}


@pytest.mark.asyncio
async def test_answer_is_consumed_once(closer, add_signal, bot):
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    assert await closer.handle_answer(pending.message_id, confirmed=True) is True
    assert await closer.handle_answer(pending.message_id, confirmed=True) is False

    bot.send_photo.assert_awaited_once()


@pytest.mark.asyncio
async def test_open_signal_blocks_close(closer, add_signal, bot, sent_texts):
    """Test yes is refused while a signal has no result"""
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    await add_signal(NOW - timedelta(minutes=5))

    pending = await closer.end_session(ADMIN_ID, now=NOW)
    assert not pending.can_close

    await closer.handle_answer(pending.message_id, confirmed=True)

    bot.send_photo.assert_not_awaited()
    assert sent_texts(ADMIN_ID)[-1] == OPEN_SIGNAL_BLOCKS


@pytest.mark.asyncio
async def test_failed_report_post_is_not_reported_as_success(
    closer, add_signal, bot, conversations, sent_texts
):
    """Test a channel failure keeps the prompt live and yes retries the post"""
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)
    bot.send_photo.side_effect = [
        TelegramBadRequest(method=MagicMock(), message="Bad Request: chat not found"),
        None,
    ]

    assert await closer.handle_answer(pending.message_id, confirmed=True) is True

    assert POSTED not in edited_texts(bot)
    assert sent_texts(ADMIN_ID)[-1] == CLOSE_FAILED
    assert conversations.get(ADMIN_ID).last_bot_message_id == pending.message_id
    assert pending.message_id in closer.pending

    assert await closer.handle_answer(pending.message_id, confirmed=True) is True

    assert bot.send_photo.await_count == 2
    assert edited_texts(bot) == [POSTED]
    assert closer.pending == {}


@pytest.mark.asyncio
async def test_failed_automatic_close_waits_for_answer(closer, add_signal, bot, sent_texts):
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    bot.send_photo.side_effect = TelegramBadRequest(method=MagicMock(), message="Bad Request: chat not found")
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await pending.task

    assert edited_texts(bot) == []
    assert sent_texts(ADMIN_ID)[-1] == CLOSE_FAILED
    assert pending.message_id in closer.pending


@pytest.mark.asyncio
async def test_declined_close(closer, add_signal, bot):
    """Test no leaves the session open and reminds the admin"""
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await closer.handle_answer(pending.message_id, confirmed=False)

    bot.send_photo.assert_not_awaited()
    assert edited_texts(bot) == [MANUAL_REMINDER]


@pytest.mark.asyncio
async def test_unanswered_prompt_closes_automatically(closer, add_signal, bot):
    """Test the timeout posts the report when the session can be closed"""
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await pending.task

    bot.send_photo.assert_awaited_once()
    assert edited_texts(bot) == [POSTED_AUTOMATICALLY]
    assert await closer.handle_answer(pending.message_id, confirmed=True) is False


@pytest.mark.asyncio
async def test_unanswered_prompt_with_open_signal(closer, add_signal, bot, sent_texts):
    await add_signal(NOW - timedelta(minutes=5))
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await pending.task

    bot.send_photo.assert_not_awaited()
    assert sent_texts(ADMIN_ID)[-1] == OPEN_SIGNAL_BLOCKS


@pytest.mark.asyncio
async def test_answer_cancels_timeout(publisher, session_maker, add_signal, bot):
    closer = SessionCloser(publisher, session_maker, timeout=60)
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await closer.handle_answer(pending.message_id, confirmed=False)
    await asyncio.sleep(0)

    assert pending.task.cancelled()


@pytest.mark.asyncio
async def test_shutdown_cancels_pending(publisher, session_maker, add_signal):
    closer = SessionCloser(publisher, session_maker, timeout=60)
    await add_signal(NOW - timedelta(minutes=20), result=DIRECT_WIN_TEXT)
    pending = await closer.end_session(ADMIN_ID, now=NOW)

    await closer.shutdown()
    await asyncio.sleep(0)

    assert closer.pending == {}
    assert pending.task.cancelled()


@pytest.mark.asyncio
async def test_end_day_posts_report(closer, add_signal, sent_texts, bot):
    await add_signal(NOW - timedelta(hours=4), session="OVERNIGHT", result=DIRECT_WIN_TEXT)
    await add_signal(NOW - timedelta(minutes=20), result=LOSS_STORED_TEXT)

    assert await closer.end_day(ADMIN_ID, now=NOW) is True

    channel_posts = sent_texts(CHANNEL_ID)
    assert len(channel_posts) == 1
    assert "DAILY REPORT" in channel_posts[0]
    assert "1⃣ WIN - 1⃣ LOSS" in channel_posts[0]
    assert sent_texts(ADMIN_ID)[-1] == "Day End Message Sent Successfully!"
    bot.delete_message.assert_awaited()


@pytest.mark.asyncio
async def test_week_report_with_signals(closer, add_signal, sent_texts, bot):
    await add_signal(NOW - timedelta(days=2), result=DIRECT_WIN_TEXT)

    assert await closer.send_week_report(ADMIN_ID, now=NOW) is True

    assert "#WEEKLYSUMMARY" in sent_texts(CHANNEL_ID)[0]
    assert edited_texts(bot) == ["Weekly report sent successfully"]


@pytest.mark.asyncio
async def test_week_report_empty_posts_nothing(closer, sent_texts, bot):
    """Test an empty week is reported to the admin only"""
    assert await closer.send_week_report(ADMIN_ID, now=NOW) is False

    assert sent_texts(CHANNEL_ID) == []
    assert edited_texts(bot) == ["No signals in the last 7 days, nothing to report."]
