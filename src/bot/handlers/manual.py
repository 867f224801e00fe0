"""
/manual command handler - send scheduled posts and reports on demand
"""

from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.bot.keyboards import manual_confirm_keyboard, manual_menu_keyboard
from src.database.crud import get_channel_cron_posts, get_channel_crons, get_cron_post
from src.services.channel_publisher import ChannelPublisher
from src.services.session_closer import SessionCloser
from src.tasks.cron_scheduler import build_outgoing_post
from src.utils.time_utils import current_session

router = Router(name="manual")


def display_name(post_type: str) -> str:
    return post_type.replace("_", " ").upper()


def build_confirm_text(post_type: str) -> str:
    text = "<strong>⚠️ CONFIRM SEND</strong>\n\n"
    text += f"You're about to send: <strong>{display_name(post_type)}</strong>\n\n"
    text += "This will be posted to the channel immediately.\n"
    text += "Are you sure?"
    return text


@router.message(Command("manual"))
async def cmd_manual(
    message: Message, admin_id: int, session: AsyncSession, publisher: ChannelPublisher
):
    """
    Handle /manual command - menu of every scheduled post plus the reports

    Args:
        message: Incoming message
        admin_id: Operator id (provided by AdminMiddleware)
        session: Database session
    """
    jobs = await get_channel_crons(session, publisher.channel_id)
    posts = await get_channel_cron_posts(session, publisher.channel_id)

    text = "<strong>📋 MANUAL POST MENU</strong>\n\n"
    text += f"Current Session: <strong>{current_session().value}</strong>\n\n"
    text += "Choose a message to send:"

    await publisher.send_tracked(admin_id, text, manual_menu_keyboard(jobs, posts))


@router.callback_query(ActionFilter(Action.MANUAL), F.message)
async def manual_selected(
    callback: CallbackQuery, resolved: ResolvedAction, publisher: ChannelPublisher
):
    post_type = resolved.argument
    await publisher.edit_text(
        callback.message.chat.id,
        callback.message.message_id,
        build_confirm_text(post_type),
        manual_confirm_keyboard(post_type),
    )
    await callback.answer()


@router.callback_query(ActionFilter(Action.MANUAL_CONFIRM), F.message)
async def manual_confirmed(
    callback: CallbackQuery,
    resolved: ResolvedAction,
    admin_id: int,
    session: AsyncSession,
    publisher: ChannelPublisher,
    closer: SessionCloser,
):
    post_type = resolved.argument
    chat_id = callback.message.chat.id
    message_id = callback.message.message_id
    await callback.answer()

    if post_type == "session_end":
        started = await closer.end_session(admin_id, called=True)
        note = "✅ Session end flow started!" if started else "❌ Session end not started."
        await publisher.edit_text(chat_id, message_id, note)
        return

    if post_type == "day_end":
        sent = await closer.end_day(admin_id)
        note = "✅ Day end report sent!" if sent else "❌ Error sending post. Check logs."
        await publisher.edit_text(chat_id, message_id, note)
        return

    if post_type == "week_report":
        sent = await closer.send_week_report(admin_id)
        note = "✅ Weekly report sent!" if sent else "❌ Error sending post. Check logs."
        await publisher.edit_text(chat_id, message_id, note)
        return

    try:
        template = await get_cron_post(session, publisher.channel_id, post_type)
    except SQLAlchemyError as e:
        logger.exception(f"Error loading manual post {post_type}: {e}")
        await publisher.edit_text(chat_id, message_id, "❌ Error sending post. Check logs.")
        return

    if template is None:
        await publisher.edit_text(chat_id, message_id, "❌ Post template not found in database.")
        return

    if await publisher.send_message_by_type(build_outgoing_post(publisher, template)):
        logger.info(f"Manual post {post_type} sent by admin {admin_id}")
        await publisher.edit_text(chat_id, message_id, f"✅ {display_name(post_type)} sent!")
    else:
        await publisher.edit_text(chat_id, message_id, "❌ Error sending post. Check logs.")
