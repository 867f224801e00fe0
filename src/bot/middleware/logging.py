"""
Logging middleware - logs every operator update and handler duration
"""

from typing import Callable, Dict, Any, Awaitable

import time

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from loguru import logger

from src.bot.callbacks import resolve_action


def describe_event(event: TelegramObject) -> str:
    """Short human-readable summary of a message or callback."""
    if isinstance(event, Message):
        if event.photo:
            return "[photo upload]"
        text = event.text or event.caption or f"[{event.content_type}]"
        return text[:100]

    if isinstance(event, CallbackQuery):
        resolved = resolve_action(event.data)
        action = resolved.action.value if resolved else "unknown"
        return f"{event.data} ({action})"

    return type(event).__name__


class LoggingMiddleware(BaseMiddleware):
    """
    Middleware that logs all incoming updates and handler execution time
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        update_type = type(event).__name__
        user = getattr(event, "from_user", None)
        user_id = user.id if user else None

        logger.info(f"{update_type} from {user_id}: {describe_event(event)}")

        start_time = time.time()
        try:
            result = await handler(event, data)
        except Exception as e:
            logger.error(
                f"{update_type} failed after {time.time() - start_time:.3f}s "
                f"(user: {user_id}): {e}"
            )
            raise

        logger.debug(f"{update_type} processed in {time.time() - start_time:.3f}s (user: {user_id})")
        return result
