# coding: utf-8
"""
/broadcast command handler - one-off channel announcements
"""
from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery
from loguru import logger

from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import broadcast_keyboard
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore

router = Router(name="broadcast")

USAGE = "Usage: /broadcast <your message>\n\nExample: /broadcast 🎉 Special announcement for today!"


def build_preview(text: str) -> str:
    return (
        "<strong>📢 BROADCAST PREVIEW</strong>\n\n"
        f"{text}\n\n"
        "<i>Do you want to send this to the channel?</i>"
    )


def build_announcement(text: str) -> str:
    return f"📢 <strong>ANNOUNCEMENT</strong>\n\n{text}"


@router.message(Command("broadcast"))
async def cmd_broadcast(
    message: Message,
    command: CommandObject,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    """
    Handle /broadcast <text> - preview the announcement before posting

    Args:
        message: Incoming message
        command: Parsed command with the announcement as args
    """
    text = (command.args or "").strip()
    if not text:
        await message.answer(USAGE, parse_mode=None)
        return

    conversations.get(admin_id).pending_broadcast = text
    await publisher.send_tracked(admin_id, build_preview(text), broadcast_keyboard())


@router.callback_query(ActionFilter(Action.BROADCAST), F.message)
async def broadcast_decision(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    conversation = conversations.get(admin_id)
    chat_id = callback.message.chat.id
    message_id = callback.message.message_id

    if resolved.argument == "cancel":
        conversation.pending_broadcast = None
        await publisher.edit_text(chat_id, message_id, "❌ Broadcast cancelled.")
        await callback.answer()
        return

    text = conversation.pending_broadcast
    if not text:
        await callback.answer("Nothing to broadcast", show_alert=True)
        return

    if await publisher.post_to_channel(build_announcement(text)) is None:
        await callback.answer("Could not post to the channel, please try again.", show_alert=True)
        return

    conversation.pending_broadcast = None
    logger.info(f"Broadcast sent by admin {admin_id}")
    await publisher.edit_text(chat_id, message_id, "✅ Broadcast sent successfully!")
    await callback.answer()
