"""
Admin middleware - only configured operators may talk to the bot
"""

from typing import Callable, Dict, Any, Awaitable, Iterable, Optional

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from loguru import logger

from config.config import ADMIN_IDS


NOT_AUTHORIZED = "You are not authorized to use this bot"


class AdminMiddleware(BaseMiddleware):
    """
    Middleware that rejects every message and callback from a non-admin.

    The handler never runs for a rejected update.
    """

    def __init__(self, admin_ids: Optional[Iterable[int]] = None):
        self.admin_ids = set(ADMIN_IDS if admin_ids is None else admin_ids)

    def is_admin(self, user_id: int) -> bool:
        """
        Check if user is admin

        Args:
            user_id: User's Telegram ID

        Returns:
            True if admin, False otherwise
        """
        return user_id in self.admin_ids

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """
        Check admin rights before calling handler

        Args:
            handler: Next handler in chain
            event: Update event
            data: Handler data dict

        Returns:
            Handler result or None if blocked
        """
        if not isinstance(event, (Message, CallbackQuery)):
            return await handler(event, data)

        user = event.from_user
        if user is None:
            logger.warning("Update without user info ignored")
            return None

        if self.is_admin(user.id):
            data["admin_id"] = user.id
            return await handler(event, data)

        logger.warning(f"Unauthorized user {user.id} (@{user.username}) attempted to use the bot")

        if isinstance(event, Message):
            await event.answer(NOT_AUTHORIZED)
        else:
            await event.answer(NOT_AUTHORIZED, show_alert=True)

        return None
