"""
/signal command handler - create-signal conversation
"""

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.catalog import PAIRS_PROMPT
from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import (
    direction_keyboard,
    hours_keyboard,
    minutes_keyboard,
    pairs_keyboard,
    review_keyboard,
)
from src.core.enums import Direction, WizardStep
from src.services.channel_publisher import ChannelPublisher
from src.services.conversation_store import ConversationStore
from src.services.signal_wizard import SignalDraft, confirm_signal


router = Router(name="signal")

HOUR_PROMPT = "🕓 What time (HOUR) would you like to start?\n\n0 is the same as 24 or 12am midnight..."
MINUTE_PROMPT = "🕓 What time (MINUTE) would you like to start?\n\nthe back button is on the last row instead of 60"
DIRECTION_PROMPT = "↕ What direction would you like to go?\nChoose an option below:"


async def _show(
    callback: CallbackQuery, publisher: ChannelPublisher, text: str, reply_markup
) -> None:
    await publisher.delete_and_send_new(
        callback.message.chat.id,
        text,
        reply_markup,
        fallback_message_id=callback.message.message_id,
    )
    await callback.answer()


async def show_pairs(callback: CallbackQuery, publisher: ChannelPublisher, draft: SignalDraft, page: int):
    page = draft.open_pair_page(page)
    await _show(callback, publisher, PAIRS_PROMPT, pairs_keyboard(page))


async def show_hours(callback: CallbackQuery, publisher: ChannelPublisher, draft: SignalDraft):
    draft.restep(WizardStep.HOUR_SELECT)
    await _show(callback, publisher, HOUR_PROMPT, hours_keyboard(draft.pair_page))


async def show_minutes(callback: CallbackQuery, publisher: ChannelPublisher, draft: SignalDraft):
    draft.restep(WizardStep.MINUTE_SELECT)
    await _show(callback, publisher, MINUTE_PROMPT, minutes_keyboard())


async def show_directions(callback: CallbackQuery, publisher: ChannelPublisher, draft: SignalDraft):
    draft.restep(WizardStep.DIRECTION_SELECT)
    await _show(callback, publisher, DIRECTION_PROMPT, direction_keyboard())


@router.message(Command("signal"))
async def cmd_signal(
    message: Message,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    """
    Handle /signal command - open the first page of the pair catalog

    Args:
        message: Incoming message
        admin_id: Operator id (provided by AdminMiddleware)
    """
    draft = conversations.get(admin_id).draft
    page = draft.open_pair_page(0)
    await publisher.send_tracked(admin_id, PAIRS_PROMPT, pairs_keyboard(page))


@router.callback_query(ActionFilter(Action.PAIR_PAGE), F.message)
async def pair_page(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft
    await show_pairs(callback, publisher, draft, int(resolved.argument))


@router.callback_query(ActionFilter(Action.PAIR), F.message)
async def pair_selected(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft
    if not draft.choose_pair(resolved.argument):
        await callback.answer("Unknown currency pair", show_alert=True)
        return
    await show_hours(callback, publisher, draft)


@router.callback_query(ActionFilter(Action.HOUR), F.message)
async def hour_selected(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft
    if not draft.choose_hour(int(resolved.argument)):
        await callback.answer()
        return
    await show_minutes(callback, publisher, draft)


@router.callback_query(ActionFilter(Action.MINUTE), F.message)
async def minute_selected(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft
    if not draft.choose_minute(int(resolved.argument)):
        await callback.answer()
        return
    await show_directions(callback, publisher, draft)


@router.callback_query(ActionFilter(Action.DIRECTION), F.message)
async def direction_selected(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft
    draft.choose_direction(Direction.BUY if resolved.argument == "up" else Direction.SELL)
    await _show(callback, publisher, draft.review_text(), review_keyboard())


@router.callback_query(ActionFilter(Action.RESTEP), F.message)
async def restep(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    """Jump back to an earlier step; drafted fields are kept."""
    draft = conversations.get(admin_id).draft
    target = resolved.argument

    if target == "pairs":
        await show_pairs(callback, publisher, draft, draft.pair_page)
    elif target == "time":
        await show_hours(callback, publisher, draft)
    elif target == "minute":
        await show_minutes(callback, publisher, draft)
    else:
        await show_directions(callback, publisher, draft)


@router.callback_query(ActionFilter(Action.POST_SIGNAL), F.message)
async def post_signal(
    callback: CallbackQuery,
    admin_id: int,
    session: AsyncSession,
    publisher: ChannelPublisher,
    conversations: ConversationStore,
):
    draft = conversations.get(admin_id).draft

    try:
        posted = await confirm_signal(session, publisher.channel_id, draft)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to save signal for admin {admin_id}: {e}")
        await session.rollback()
        await callback.answer("Could not save the signal, please try again.", show_alert=True)
        return

    if posted is None:
        logger.debug(f"Signal confirm ignored for admin {admin_id}: hour or minute missing")
        await callback.answer()
        return

    await publisher.send_to_channel(posted.message, admin_id, "Signal posted successfully.")
    await callback.answer()
