"""
/result command handler - post the outcome of the latest signal
"""

from typing import Optional

from aiogram import Bot, F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import (
    result_image_saved_keyboard,
    result_menu_keyboard,
    result_next_keyboard,
    streak_keyboard,
)
from src.core.enums import ResultOutcome
from src.database.crud import get_current_streak
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore
from src.services.result_posting import (
    attach_image,
    build_dispatch,
    choose_outcome,
    chosen_text,
    request_image,
    streak_question,
    streak_to_offer,
)
from src.services.watermark_service import ImageProcessingError, WatermarkService
from src.utils.time_utils import Streak


router = Router(name="result")

RESULT_MENU_PROMPT = "Choose one of the options below:"
RESULT_IMAGE_PROMPT = "Send me the image of your win/loss."
IMAGE_SAVED = "Photo received and saved, what to do next?:"
IMAGE_FAILED = "Sorry, I couldn't download the picture and save"
POSTED = "Result posted successfully..."
LOSS_SENT = "Result Sent Successfully."


async def dispatch_result(
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
    streak: Optional[Streak] = None,
) -> bool:
    """
    Send the chosen outcome to the channel and clear the pending result

    The pending result is kept when the channel post fails so the admin
    can retry.
    """
    conversation = conversations.get(admin_id)
    state = conversation.result
    dispatch = build_dispatch(state, streak)

    if dispatch.image_path:
        await publisher.delete_message(admin_id, conversation.last_bot_message_id)
        conversation.last_bot_message_id = None
        sent = await publisher.send_photo_to_channel(dispatch.image_path, dispatch.text)
        if sent:
            await publisher.notify(admin_id, POSTED)
        else:
            await publisher.notify(admin_id, "Could not post to the channel, please try again.")
    else:
        success = LOSS_SENT if state.outcome is ResultOutcome.LOSS and streak is None else POSTED
        sent = await publisher.send_to_channel(dispatch.text, admin_id, success)

    if sent:
        logger.info(f"Result {state.outcome.value} dispatched by admin {admin_id}")
        state.clear()
        conversations.set_last_admin(admin_id)
    return sent


@router.message(Command("result"))
async def cmd_result(
    message: Message,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    """
    Handle /result command - show the outcome options

    Args:
        message: Incoming message
        admin_id: Operator id (provided by AdminMiddleware)
    """
    conversations.get(admin_id).result.clear()
    await publisher.send_tracked(admin_id, RESULT_MENU_PROMPT, result_menu_keyboard())


@router.callback_query(ActionFilter(Action.RESULT_OUTCOME), F.message)
async def outcome_selected(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    session: AsyncSession,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    state = conversations.get(admin_id).result
    outcome = ResultOutcome(resolved.argument)

    try:
        await choose_outcome(session, publisher.channel_id, state, outcome)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to store result {outcome.value}: {e}")
        await session.rollback()
        await callback.answer("Could not save the result, please try again.", show_alert=True)
        return

    await publisher.delete_and_send_new(
        admin_id,
        chosen_text(outcome),
        result_next_keyboard(),
        fallback_message_id=callback.message.message_id,
    )
    await callback.answer()


@router.callback_query(ActionFilter(Action.RESULT_IMAGE), F.message)
async def image_requested(
    callback: CallbackQuery,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    request_image(conversations.get(admin_id).result)
    await publisher.delete_and_send_new(
        admin_id, RESULT_IMAGE_PROMPT, fallback_message_id=callback.message.message_id
    )
    await callback.answer()


@router.message(F.photo)
async def result_photo(
    message: Message,
    bot: Bot,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
    watermark: WatermarkService,
):
    """Watermark the uploaded screenshot when a result image is awaited."""
    state = conversations.get(admin_id).result
    if not state.awaiting_image:
        logger.debug(f"Photo from admin {admin_id} ignored, no result image awaited")
        return

    try:
        path = await watermark.watermark_telegram_photo(bot, message.photo[-1].file_id)
    except ImageProcessingError as e:
        logger.error(f"Result image failed for admin {admin_id}: {e}")
        await publisher.notify(admin_id, IMAGE_FAILED)
        return

    attach_image(state, str(path))
    await publisher.delete_and_send_new(
        admin_id, IMAGE_SAVED, result_image_saved_keyboard(), fallback_message_id=message.message_id
    )


@router.callback_query(ActionFilter(Action.SEND_RESULT), F.message)
async def send_result(
    callback: CallbackQuery,
    admin_id: int,
    session: AsyncSession,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    state = conversations.get(admin_id).result
    if not state.has_chosen:
        await callback.answer("Choose a result first with /result", show_alert=True)
        return

    streak = await streak_to_offer(session, publisher.channel_id, state)
    if streak is not None:
        await publisher.send_tracked(admin_id, streak_question(streak), streak_keyboard())
        await callback.answer()
        return

    await dispatch_result(admin_id, publisher, conversations)
    await callback.answer()


@router.callback_query(ActionFilter(Action.RESULT_STREAK), F.message)
async def streak_answer(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    session: AsyncSession,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    if not conversations.get(admin_id).result.has_chosen:
        await callback.answer("Choose a result first with /result", show_alert=True)
        return

    streak = None
    if resolved.argument == "with":
        streak = await get_current_streak(session, publisher.channel_id)

    await dispatch_result(admin_id, publisher, conversations, streak)
    await callback.answer()
