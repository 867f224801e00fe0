"""
Tests for bot middleware
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.types import CallbackQuery, Message

from src.bot.middleware import AdminMiddleware, DatabaseMiddleware, LoggingMiddleware
from src.bot.middleware.admin import NOT_AUTHORIZED
from src.bot.middleware.logging import describe_event
from src.database.crud import get_total_signal_count
from src.database.models import Signal

from conftest import ADMIN_ID, CHANNEL_ID


def make_message(user_id: int, text: str = "/signal") -> Message:
    message = MagicMock(spec=Message)
    message.from_user = SimpleNamespace(id=user_id, username="someone")
    message.text = text
    message.caption = None
    message.photo = None
    message.answer = AsyncMock()
    return message


def make_callback(user_id: int, data: str = "yes") -> CallbackQuery:
    callback = MagicMock(spec=CallbackQuery)
    callback.from_user = SimpleNamespace(id=user_id, username="someone")
    callback.data = data
    callback.answer = AsyncMock()
    return callback


@pytest.mark.asyncio
async def test_admin_reaches_handler():
    """Test an admin update is handled with admin_id injected"""
    middleware = AdminMiddleware([ADMIN_ID])
    handler = AsyncMock(return_value="handled")
    data = {}

    assert await middleware(handler, make_message(ADMIN_ID), data) == "handled"
    assert data["admin_id"] == ADMIN_ID


@pytest.mark.asyncio
async def test_non_admin_message_rejected():
    """Test the handler never runs for anyone else"""
    middleware = AdminMiddleware([ADMIN_ID])
    handler = AsyncMock()
    message = make_message(999)

    assert await middleware(handler, message, {}) is None

    handler.assert_not_awaited()
    message.answer.assert_awaited_once_with(NOT_AUTHORIZED)


@pytest.mark.asyncio
async def test_non_admin_callback_rejected():
    middleware = AdminMiddleware([ADMIN_ID])
    handler = AsyncMock()
    callback = make_callback(999)

    await middleware(handler, callback, {})

    handler.assert_not_awaited()
    callback.answer.assert_awaited_once_with(NOT_AUTHORIZED, show_alert=True)


@pytest.mark.asyncio
async def test_database_middleware_commits(session_maker, db_session):
    """Test a successful handler's writes are committed"""
    middleware = DatabaseMiddleware(session_maker)

    async def handler(event, data):
        data["session"].add(
            Signal(session="MORNING", pair="p", direction="d", initial_time="10:00", telegram_id=CHANNEL_ID)
        )

    await middleware(handler, make_message(ADMIN_ID), {})

    assert await get_total_signal_count(db_session, CHANNEL_ID) == 1


@pytest.mark.asyncio
async def test_database_middleware_rolls_back(session_maker, db_session):
    """Test a failing handler's writes are discarded and the error re-raised"""
    middleware = DatabaseMiddleware(session_maker)

    async def handler(event, data):
        data["session"].add(
            Signal(session="MORNING", pair="p", direction="d", initial_time="10:00", telegram_id=CHANNEL_ID)
        )
        raise RuntimeError("handler failed")

    with pytest.raises(RuntimeError):
        await middleware(handler, make_message(ADMIN_ID), {})

    assert await get_total_signal_count(db_session, CHANNEL_ID) == 0


@pytest.mark.asyncio
async def test_logging_middleware_reraises():
    middleware = LoggingMiddleware()
    handler = AsyncMock(side_effect=ValueError("bad"))

    with pytest.raises(ValueError):
        await middleware(handler, make_message(ADMIN_ID), {})


def test_describe_event():
    assert describe_event(make_message(ADMIN_ID, "/result")) == "/result"
    assert describe_event(make_callback(ADMIN_ID, "yes")) == "yes (session_answer)"
    assert describe_event(make_callback(ADMIN_ID, "nonsense")) == "nonsense (unknown)"

    photo = make_message(ADMIN_ID)
    photo.photo = [object()]
    assert describe_event(photo) == "[photo upload]"
