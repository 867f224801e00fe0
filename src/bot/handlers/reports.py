"""
Report command handlers - session close, day report, week report
"""

from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery
from loguru import logger

from src.bot.callbacks import Action, ActionFilter, ResolvedAction
from src.services.session_closer import SessionCloser

router = Router(name="reports")


@router.message(Command("endsession"))
async def cmd_end_session(message: Message, admin_id: int, closer: SessionCloser):
    """Handle /endsession - start the session-close flow for the current band"""
    await closer.end_session(admin_id, called=True)


@router.message(Command("endday"))
async def cmd_end_day(message: Message, admin_id: int, closer: SessionCloser):
    """Handle /endday - post today's report"""
    await closer.end_day(admin_id)


@router.message(Command("reportweek"))
async def cmd_report_week(message: Message, admin_id: int, closer: SessionCloser):
    """Handle /reportweek - post the last 7 days' summary"""
    await closer.send_week_report(admin_id)


@router.callback_query(ActionFilter(Action.SESSION_ANSWER), F.message)
async def session_close_answer(
    callback: CallbackQuery, resolved: ResolvedAction, closer: SessionCloser
):
    handled = await closer.handle_answer(
        callback.message.message_id, confirmed=resolved.argument == "yes"
    )
    if not handled:
        logger.debug(f"Stale session close answer for message {callback.message.message_id}")
        await callback.answer("This prompt is no longer active")
        return
    await callback.answer()
