"""
Pytest configuration and fixtures for the Halskey signals bot tests
"""

import itertools
from datetime import datetime
from types import SimpleNamespace
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from src.database.models import Base, Signal
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

CHANNEL_ID = -1001234567890
ADMIN_ID = 111111
EUR_USD = "🇪🇺 EUR / USD 🇺🇸 (OTC)"


@pytest.fixture(scope="function")
async def test_db_engine():
    """
    Create test database engine
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_maker(test_db_engine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the test engine
    """
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """
    Create test database session
    """
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def add_signal(db_session):
    """
    Insert a signal with an explicit timestamp
    """

    async def _add(
        time_stamp: datetime,
        session: str = "MORNING",
        result: Optional[str] = None,
        pair: str = EUR_USD,
        direction: str = "🟩 BUY",
        initial_time: str = "12:00",
        channel_id: int = CHANNEL_ID,
    ) -> Signal:
        signal = Signal(
            session=session,
            time_stamp=time_stamp,
            pair=pair,
            direction=direction,
            result=result,
            initial_time=initial_time,
            telegram_id=channel_id,
        )
        db_session.add(signal)
        await db_session.commit()
        return signal

    return _add


@pytest.fixture
def bot():
    """
    Bot double; every send returns a message with a fresh message_id
    """
    bot = AsyncMock()
    message_ids = itertools.count(1000)

    def _sent(*args, **kwargs):
        return SimpleNamespace(message_id=next(message_ids), chat=SimpleNamespace(id=kwargs.get("chat_id")))

    bot.send_message.side_effect = _sent
    bot.send_photo.side_effect = _sent
    bot.send_video.side_effect = _sent
    return bot


@pytest.fixture
def conversations() -> ConversationStore:
    return ConversationStore([ADMIN_ID])


@pytest.fixture
def publisher(bot, conversations, tmp_path) -> ChannelPublisher:
    return ChannelPublisher(bot, CHANNEL_ID, conversations, media_dir=tmp_path)


@pytest.fixture
def sent_texts(bot):
    """
    Texts sent with send_message to one chat, in order
    """

    def _texts(chat_id: int) -> list:
        return [
            call.kwargs["text"]
            for call in bot.send_message.call_args_list
            if call.kwargs.get("chat_id") == chat_id
        ]

    return _texts
