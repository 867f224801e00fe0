"""
/start command handler
"""

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message
from loguru import logger

from config.config import BOT_NAME


router = Router(name="start")


def build_greeting(first_name: str) -> str:
    text = f"<strong>Hello, {first_name}!</strong>\n\n"
    text += f"I'm <strong>{BOT_NAME}</strong>, your channel bot! 📈🚀\n"
    text += "I can help you with:\n\n"
    text += "<strong>- 📡 Posting signals (i auto-calculate the martingales)</strong>\n"
    text += "<strong>- 📡 Ending a trading session</strong>\n"
    text += "<strong>- 📅 Scheduling posts to be published on your channel</strong>\n"
    text += "<strong>- 📝 Creating posts with buttons (one or multiple)</strong>\n\n"
    text += "<strong>There's a new menu button on your telegram input field, you can find my commands there :)</strong>\n"
    return text


@router.message(CommandStart())
async def cmd_start(message: Message):
    """
    Handle /start command - greet the operator

    Args:
        message: Incoming message
    """
    first_name = message.from_user.first_name if message.from_user else ""
    await message.answer(build_greeting(first_name))
    logger.info(f"Greeting sent to admin {message.from_user.id if message.from_user else None}")
