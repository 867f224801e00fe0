"""
Cancel handler - shared by every flow
"""

from aiogram import Router, F
from aiogram.types import CallbackQuery
from loguru import logger

from src.bot.callbacks import Action, ActionFilter
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore

router = Router(name="common")


@router.callback_query(ActionFilter(Action.CANCEL), F.message)
async def cancel_operation(
    callback: CallbackQuery,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    """Delete the live bot message and drop the operator's draft and pending result."""
    conversation = conversations.get(admin_id)
    await publisher.delete_message(
        admin_id, conversation.last_bot_message_id or callback.message.message_id
    )
    conversation.last_bot_message_id = None
    conversations.reset(admin_id)

    await publisher.notify(admin_id, "Operation Canceled")
    await callback.answer()
    logger.info(f"Operation cancelled by admin {admin_id}")
