"""
Database middleware - provides a database session to handlers
"""

from typing import Callable, Dict, Any, Awaitable, Optional

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.database.engine import get_session_maker


class DatabaseMiddleware(BaseMiddleware):
    """
    Middleware that provides a database session to handlers.

    Usage in handler:
        async def my_handler(message: Message, session: AsyncSession):
            # Use session here
            pass
    """

    def __init__(self, session_maker: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_maker = session_maker

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """
        Open a session for the handler, commit on success, roll back on error

        Args:
            handler: Next handler in chain
            event: Update event (Message, CallbackQuery, etc.)
            data: Handler data dict

        Returns:
            Handler result
        """
        session_maker = self.session_maker or get_session_maker()
        async with session_maker() as session:
            data["session"] = session

            try:
                result = await handler(event, data)

                # Commit changes if handler succeeded
                await session.commit()

                return result

            except Exception as e:
                await session.rollback()
                logger.error(f"Database error in handler: {e}")
                raise
