# coding: utf-8
"""
Admin handlers - performance stats and milestones
"""
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import join_team_keyboard, milestone_keyboard
from src.database.crud import get_stats, get_total_signal_count
from src.services.channel_publisher import ChannelPublisher
from src.services.report_builder import (
    build_milestone_celebration,
    build_milestone_status,
    build_stats_message,
)
from src.utils.time_utils import milestone_status

router = Router(name="admin")


# ===========================
# STATS
# ===========================


@router.message(Command("stats"))
async def cmd_stats(message: Message, session: AsyncSession, publisher: ChannelPublisher):
    """
    Handle /stats command - today, week and month performance plus streak

    Args:
        message: Incoming message
        session: Database session
    """
    try:
        stats = await get_stats(session, publisher.channel_id)
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching stats: {e}")
        await message.answer("Error fetching stats. Please try again.")
        return

    await message.answer(build_stats_message(stats))


# ===========================
# MILESTONES
# ===========================


@router.message(Command("milestone"))
async def cmd_milestone(
    message: Message, admin_id: int, session: AsyncSession, publisher: ChannelPublisher
):
    """Handle /milestone command - progress to the next milestone"""
    try:
        total = await get_total_signal_count(session, publisher.channel_id)
        stats = await get_stats(session, publisher.channel_id)
    except SQLAlchemyError as e:
        logger.exception(f"Error checking milestone: {e}")
        await message.answer("Error checking milestone. Please try again.")
        return

    status = milestone_status(total)
    await publisher.send_tracked(
        admin_id,
        build_milestone_status(total, status, stats.month.accuracy),
        milestone_keyboard(status.last),
    )


@router.callback_query(ActionFilter(Action.MILESTONE), F.message)
async def post_milestone(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    session: AsyncSession,
    publisher: ChannelPublisher,
):
    milestone = int(resolved.argument)
    stats = await get_stats(session, publisher.channel_id)

    posted = await publisher.post_to_channel(
        build_milestone_celebration(milestone, stats), reply_markup=join_team_keyboard()
    )
    if posted is None:
        await callback.answer("Could not post to the channel, please try again.", show_alert=True)
        return

    logger.info(f"Milestone {milestone} celebration posted")
    await publisher.edit_text(
        callback.message.chat.id, callback.message.message_id, "✅ Milestone celebration posted!"
    )
    await callback.answer()
