"""
/info command handler - sectioned operator guide
"""

from typing import Union

from aiogram import Bot, F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from aiogram.exceptions import TelegramAPIError
from loguru import logger

from config.config import BOT_VERSION, CHANNEL_ID, IS_PRODUCTION, TEST_CHANNEL_ID
from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import INFO_SECTIONS, info_keyboard
from src.services.channel_publisher import ChannelPublisher
from src.utils.time_utils import current_session

router = Router(name="info")


async def get_channel_link(bot: Bot, chat_id: Union[int, str, None]) -> str:
    """@username, title, or the bare id when the chat cannot be resolved."""
    if chat_id is None:
        return "Not set"
    try:
        chat = await bot.get_chat(chat_id)
    except TelegramAPIError as e:
        logger.debug(f"Could not resolve chat {chat_id}: {e}")
        return str(chat_id)
    if chat.username:
        return f"@{chat.username}"
    if chat.title:
        return chat.title
    return str(chat_id)


def _overview(posting_channel: str, admin_id: int) -> str:
    mode = "🔴 Production" if IS_PRODUCTION else "🧪 Test Mode"
    session = current_session()

    text = "<strong>🤖 TWM SIGNAL BOT</strong>\n"
    text += f"<i>{BOT_VERSION} • {mode}</i>\n\n"
    text += f"<strong>📡 Posting to:</strong> {posting_channel}\n"
    text += f"<strong>⏰ Session:</strong> {session.value}\n"
    text += f"<strong>👤 Your ID:</strong> <code>{admin_id}</code>\n\n"
    text += "<strong>━━━ QUICK START ━━━</strong>\n\n"
    text += "1️⃣ Use /signal to post a new signal\n"
    text += "2️⃣ Use /result after signal expires\n"
    text += "3️⃣ Bot auto-posts scheduled messages\n\n"
    text += "<i>Select a section below to learn more:</i>"
    return text


SIGNALS_SECTION = (
    "<strong>📊 SIGNAL COMMANDS</strong>\n\n"
    "<strong>/signal</strong> - Post a new signal\n"
    "<blockquote>Flow: Select pair → Hour → Minute → Direction → Confirm → Posted!</blockquote>\n\n"
    "<strong>/result</strong> - Update signal outcome\n"
    "<blockquote>Flow: Select WIN (M0-M3) or LOSS → Optional image → Posted to channel</blockquote>\n\n"
    "<strong>🔄 Signal Flow Example:</strong>\n"
    "<code>/signal</code>\n"
    "  ↓ Pick currency (EUR/USD)\n"
    "  ↓ Pick hour (14)\n"
    "  ↓ Pick minute (30)\n"
    "  ↓ Pick direction (BUY/SELL)\n"
    "  ↓ Confirm ✅\n"
    "  ↓ Signal posted to channel!\n\n"
    "<code>/result</code>\n"
    "  ↓ Pick: WIN M0/M1/M2/M3 or LOSS\n"
    "  ↓ Result posted to channel!"
)

SCHEDULED_SECTION = (
    "<strong>⏰ SCHEDULED POSTS</strong>\n\n"
    "<strong>/manual</strong> - Send scheduled messages manually\n"
    "<blockquote>Sends session starts, get ready alerts, and reports on demand</blockquote>\n\n"
    "<strong>🔄 Manual Post Flow:</strong>\n"
    "<code>/manual</code>\n"
    "  ↓ See list of all scheduled posts\n"
    "  ↓ Select one to send\n"
    "  ↓ Confirm sending\n"
    "  ↓ Posted to channel!\n\n"
    "<strong>📋 Auto-Scheduled Messages:</strong>\n"
    "├ 🌑 Overnight session start\n"
    "├ 🌅 Morning session start\n"
    "├ ☀️ Afternoon session start\n"
    "├ 🔔 Get ready alerts\n"
    "├ 📝 Session end reports\n"
    "└ 📊 Day end reports"
)

ADMIN_SECTION = (
    "<strong>👑 ADMIN COMMANDS</strong>\n\n"
    "<strong>/stats</strong> - View performance stats\n"
    "<blockquote>Shows wins, losses, accuracy for today/week/month + current streak</blockquote>\n\n"
    "<strong>/broadcast</strong> - Send announcement\n"
    "<blockquote>Usage: /broadcast Your message here</blockquote>\n"
    "<code>/broadcast 🎉 Special update!</code>\n"
    "  ↓ Preview shown\n"
    "  ↓ Confirm Yes/No\n"
    "  ↓ Posted to channel!\n\n"
    "<strong>/milestone</strong> - Celebrate milestones\n"
    "  ↓ Shows progress to the next milestone\n"
    "  ↓ Post the last one reached\n\n"
    "<strong>/endsession</strong> · <strong>/endday</strong> · <strong>/reportweek</strong> - Reports\n\n"
    "<strong>/info</strong> - This guide"
)


async def _channels(bot: Bot, publisher: ChannelPublisher) -> str:
    posting_channel = await get_channel_link(bot, publisher.channel_id)
    prod_channel = await get_channel_link(bot, CHANNEL_ID)
    test_channel = await get_channel_link(bot, TEST_CHANNEL_ID)

    text = "<strong>📡 CHANNEL CONFIGURATION</strong>\n\n"
    text += f"<strong>Current Mode:</strong> {'🔴 PRODUCTION' if IS_PRODUCTION else '🧪 DEVELOPMENT'}\n\n"
    text += "<strong>📤 Posting to:</strong>\n"
    text += f"└ {posting_channel} (<code>{publisher.channel_id}</code>)\n\n"
    text += "<strong>🔴 Production Channel:</strong>\n"
    text += f"└ {prod_channel} (<code>{CHANNEL_ID}</code>)\n\n"
    text += "<strong>🧪 Test Channel:</strong>\n"
    text += f"└ {test_channel} (<code>{TEST_CHANNEL_ID or 'Not set'}</code>)\n\n"
    text += "<strong>⚙️ How to switch:</strong>\n"
    text += "<code>ENVIRONMENT=development</code> → Test mode\n"
    text += "<code>ENVIRONMENT=production</code> → Production mode"
    return text


async def build_info_message(
    section: str, bot: Bot, publisher: ChannelPublisher, admin_id: int
) -> str:
    if section == "signals":
        return SIGNALS_SECTION
    if section == "scheduled":
        return SCHEDULED_SECTION
    if section == "admin":
        return ADMIN_SECTION
    if section == "channels":
        return await _channels(bot, publisher)
    return _overview(await get_channel_link(bot, publisher.channel_id), admin_id)


@router.message(Command("info"))
async def cmd_info(message: Message, bot: Bot, publisher: ChannelPublisher, admin_id: int):
    text = await build_info_message("overview", bot, publisher, admin_id)
    await message.answer(text, reply_markup=info_keyboard("overview"))


@router.callback_query(ActionFilter(Action.INFO), F.message)
async def info_section(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    bot: Bot,
    publisher: ChannelPublisher,
    admin_id: int,
):
    section = resolved.argument
    if section not in dict(INFO_SECTIONS):
        section = "overview"

    text = await build_info_message(section, bot, publisher, admin_id)
    await publisher.edit_text(
        callback.message.chat.id, callback.message.message_id, text, info_keyboard(section)
    )
    await callback.answer()
