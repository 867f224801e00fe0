# coding: utf-8
"""
Session, day and week close orchestration

Session close asks the admin for confirmation and arms a timeout keyed by
the prompt message id. Whichever comes first (the answer or the timeout)
consumes the pending close; the other becomes a no-op. A report that
fails to post puts the prompt back so the admin can answer again.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.catalog import BRAND_IMAGES, DAY_END_BUTTONS, SESSION_END_BUTTONS
from config.config import SESSION_END_TIMEOUT_SECONDS
from src.bot.keyboards import yes_no_keyboard
from src.core.enums import Session
from src.database.crud import (
    get_day_signals,
    get_open_session_signals,
    get_session_signals,
    get_week_signals,
)
from src.database.models import Signal
from src.services.channel_publisher import ChannelPublisher, url_keyboard
from src.services.report_builder import (
    build_day_report,
    build_session_report,
    build_week_report,
)
from src.utils.time_utils import current_session


NOTHING_TO_END = "No signal has been sent this session, so there's nothing to end"
OPEN_SIGNAL_BLOCKS = "Session has a signal without a result, can't end session yet..."
CLOSE_FAILED = "Unable to send session end message for some reason. Please try again.."
POSTED = "Session end message successfully posted..."
POSTED_AUTOMATICALLY = "Session end message successfully posted...automatically"
MANUAL_REMINDER = "Okay, but you will need to end the session manually...YOURSELF"


@dataclass
class PendingClose:
    """A session-close prompt waiting for an answer or the timeout."""

    admin_id: int
    message_id: int
    session: Session
    signals: List[Signal] = field(repr=False)
    can_close: bool
    task: Optional[asyncio.Task] = field(default=None, repr=False)


class SessionCloser:
    """
    Runs the session-close, day-report and week-report flows

    Args:
        publisher: Channel publisher (also owns the admin message trail)
        session_maker: Database session factory
        timeout: Seconds before an unanswered close prompt resolves itself
    """

    def __init__(
        self,
        publisher: ChannelPublisher,
        session_maker: async_sessionmaker[AsyncSession],
        timeout: float = SESSION_END_TIMEOUT_SECONDS,
    ):
        self.publisher = publisher
        self.session_maker = session_maker
        self.timeout = timeout
        self.pending: Dict[int, PendingClose] = {}

    @property
    def channel_id(self) -> int:
        return self.publisher.channel_id

    # ===========================
    # SESSION CLOSE
    # ===========================

    async def end_session(
        self, admin_id: int, called: bool = False, now: Optional[datetime] = None
    ) -> Optional[PendingClose]:
        """
        Start the session-close flow for the band active at `now`

        Args:
            admin_id: Admin who gets the confirmation prompt
            called: True when invoked explicitly (command or manual menu)
            now: Reference time, defaults to the current instant

        Returns:
            The pending close, or None when nothing was prompted
        """
        band = current_session(now)

        try:
            async with self.session_maker() as db:
                signals = await get_session_signals(db, self.channel_id, band.value, now)
                open_signals = await get_open_session_signals(db, self.channel_id, band.value, now)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load {band.value} session signals: {e}")
            await self.publisher.notify(admin_id, CLOSE_FAILED)
            return None

        if not signals:
            if called:
                await self.publisher.notify(admin_id, NOTHING_TO_END)
            logger.info(f"No signals in {band.value} session, nothing to close")
            return None

        prompt = await self.publisher.send_tracked(
            admin_id,
            f"Do you want to post the session end message for {band.value} session?",
            reply_markup=yes_no_keyboard(),
        )
        if prompt is None:
            await self.publisher.notify(admin_id, CLOSE_FAILED)
            return None

        pending = PendingClose(
            admin_id=admin_id,
            message_id=prompt.message_id,
            session=band,
            signals=signals,
            can_close=not open_signals,
        )
        pending.task = asyncio.create_task(self._expire_after_timeout(pending))
        self.pending[pending.message_id] = pending

        logger.info(
            f"Session close prompted for {band.value} "
            f"(signals={len(signals)}, open={len(open_signals)}, admin={admin_id})"
        )
        return pending

    async def handle_answer(self, message_id: int, confirmed: bool) -> bool:
        """
        Resolve a close prompt from the admin's yes/no answer

        Returns:
            False when the prompt is unknown or already resolved
        """
        pending = self.pending.pop(message_id, None)
        if pending is None:
            return False

        if pending.task is not None:
            pending.task.cancel()

        if not confirmed:
            await self.publisher.edit_text(pending.admin_id, message_id, MANUAL_REMINDER)
            return True

        if not pending.can_close:
            await self.publisher.notify(pending.admin_id, OPEN_SIGNAL_BLOCKS)
            return True

        await self._close(pending, POSTED)
        return True

    async def _expire_after_timeout(self, pending: PendingClose) -> None:
        await asyncio.sleep(self.timeout)
        if self.pending.pop(pending.message_id, None) is None:
            return

        try:
            if not pending.can_close:
                await self.publisher.notify(pending.admin_id, OPEN_SIGNAL_BLOCKS)
                return
            await self._close(pending, POSTED_AUTOMATICALLY)
        except Exception as e:
            logger.exception(f"Automatic session close failed: {e}")

    async def _close(self, pending: PendingClose, note: str) -> bool:
        if not await self.post_session_report(pending.session, pending.signals):
            logger.error(f"Session report for {pending.session.value} was not posted")
            # back in pending for a retry
            pending.task = None
            self.pending[pending.message_id] = pending
            await self.publisher.notify(pending.admin_id, CLOSE_FAILED)
            return False

        self.publisher.conversations.set_last_bot_message(pending.admin_id, None)
        await self.publisher.edit_text(pending.admin_id, pending.message_id, note)
        logger.info(f"------- SESSION ENDED: {pending.session.value} -------")
        return True

    async def post_session_report(self, session: Session, signals: List[Signal]) -> bool:
        caption = build_session_report(session, signals)
        return await self.publisher.send_photo_to_channel(
            self.publisher.brand_image(BRAND_IMAGES["session_end"]),
            caption,
            reply_markup=url_keyboard(SESSION_END_BUTTONS),
        )

    async def shutdown(self) -> None:
        """Cancel every pending close timer."""
        for pending in self.pending.values():
            if pending.task is not None:
                pending.task.cancel()
        self.pending.clear()

    # ===========================
    # DAY / WEEK REPORTS
    # ===========================

    async def end_day(self, admin_id: int, now: Optional[datetime] = None) -> bool:
        """Post today's report to the channel."""
        wait = await self.publisher.notify(admin_id, "Please wait... curating signals")

        try:
            async with self.session_maker() as db:
                signals = await get_day_signals(db, self.channel_id, now)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load day signals: {e}")
            await self.publisher.notify(admin_id, "Unable to send the day report. Please try again..")
            return False

        text = build_day_report(signals, now)

        if wait is not None:
            await self.publisher.delete_message(admin_id, wait.message_id)

        posted = await self.publisher.post_to_channel(text, reply_markup=url_keyboard(DAY_END_BUTTONS))
        if posted is None:
            await self.publisher.notify(admin_id, "Unable to send the day report. Please try again..")
            return False

        await self.publisher.notify(admin_id, "Day End Message Sent Successfully!")
        logger.info(f"Daily report sent ({len(signals)} signals)")
        return True

    async def send_week_report(self, admin_id: int, now: Optional[datetime] = None) -> bool:
        """Post the last 7 days' summary to the channel."""
        wait = await self.publisher.notify(admin_id, "Please wait...")

        try:
            async with self.session_maker() as db:
                signals = await get_week_signals(db, self.channel_id, now)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load week signals: {e}")
            await self.publisher.notify(admin_id, "Unable to send the weekly report. Please try again..")
            return False

        text = build_week_report(signals)
        if text is None:
            await self._finish_wait(admin_id, wait, "No signals in the last 7 days, nothing to report.")
            return False

        if await self.publisher.post_to_channel(text) is None:
            await self._finish_wait(admin_id, wait, "Unable to send the weekly report. Please try again..")
            return False

        await self._finish_wait(admin_id, wait, "Weekly report sent successfully")
        logger.info(f"Weekly report sent ({len(signals)} signals)")
        return True

    async def _finish_wait(self, admin_id: int, wait, text: str) -> None:
        if wait is None:
            await self.publisher.notify(admin_id, text)
        else:
            await self.publisher.edit_text(admin_id, wait.message_id, text)
