"""
CRUD operations for the signal publishing bot

Async database operations using SQLAlchemy 2.0.
Every query is scoped to one channel (signals.telegram_id).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import List, Optional

from loguru import logger
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from config.config import STREAK_LOOKBACK
from src.database.models import Signal, CronJob, CronPost
from src.utils.time_utils import (
    OutcomeSummary,
    Streak,
    aggregate_outcomes,
    current_streak,
    utc_day_bounds,
)


# ===========================
# CRON OPERATIONS
# ===========================


async def get_channel_crons(session: AsyncSession, channel_id: int) -> List[CronJob]:
    """
    Get all cron job definitions for a channel

    Args:
        session: Database session
        channel_id: Telegram channel ID

    Returns:
        List of CronJob models
    """
    stmt = select(CronJob).where(CronJob.telegram_id == channel_id).order_by(CronJob.id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_channel_cron_posts(session: AsyncSession, channel_id: int) -> List[CronPost]:
    """
    Get all post templates for a channel

    Args:
        session: Database session
        channel_id: Telegram channel ID

    Returns:
        List of CronPost models
    """
    stmt = select(CronPost).where(CronPost.telegram_id == channel_id).order_by(CronPost.id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_cron_post(
    session: AsyncSession, channel_id: int, message_id: str
) -> Optional[CronPost]:
    """Get the template a cron job posts, None if the channel has none"""
    stmt = (
        select(CronPost)
        .where(CronPost.telegram_id == channel_id, CronPost.message_id == message_id)
        .order_by(CronPost.id)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


# ===========================
# SIGNAL QUERIES
# ===========================


async def _signals_between(
    session: AsyncSession, channel_id: int, start: datetime, end: Optional[datetime] = None
) -> List[Signal]:
    stmt = select(Signal).where(Signal.telegram_id == channel_id, Signal.time_stamp >= start)
    if end is not None:
        stmt = stmt.where(Signal.time_stamp < end)
    stmt = stmt.order_by(Signal.time_stamp.asc(), Signal.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_day_signals(
    session: AsyncSession, channel_id: int, now: Optional[datetime] = None
) -> List[Signal]:
    """
    Get today's signals (UTC calendar day), oldest first

    Args:
        session: Database session
        channel_id: Telegram channel ID
        now: Reference time, defaults to the current instant

    Returns:
        List of Signal models
    """
    start, end = utc_day_bounds(now)
    return await _signals_between(session, channel_id, start, end)


async def get_week_signals(
    session: AsyncSession, channel_id: int, now: Optional[datetime] = None
) -> List[Signal]:
    """Get signals from the last 7 days, oldest first"""
    now = now or datetime.now(UTC)
    return await _signals_between(session, channel_id, now - timedelta(days=7))


async def get_month_signals(
    session: AsyncSession, channel_id: int, now: Optional[datetime] = None
) -> List[Signal]:
    """Get signals from the last 30 days, oldest first"""
    now = now or datetime.now(UTC)
    return await _signals_between(session, channel_id, now - timedelta(days=30))


async def get_session_signals(
    session: AsyncSession, channel_id: int, session_name: str, now: Optional[datetime] = None
) -> List[Signal]:
    """
    Get today's signals for one session band, oldest first

    Args:
        session: Database session
        channel_id: Telegram channel ID
        session_name: OVERNIGHT, MORNING or AFTERNOON
        now: Reference time, defaults to the current instant

    Returns:
        List of Signal models
    """
    start, end = utc_day_bounds(now)
    stmt = (
        select(Signal)
        .where(
            Signal.telegram_id == channel_id,
            Signal.session == session_name.upper(),
            Signal.time_stamp >= start,
            Signal.time_stamp < end,
        )
        .order_by(Signal.time_stamp.asc(), Signal.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_open_session_signals(
    session: AsyncSession, channel_id: int, session_name: str, now: Optional[datetime] = None
) -> List[Signal]:
    """
    Get today's signals in a session that still have no result

    A session can only be closed when this is empty.
    """
    start, end = utc_day_bounds(now)
    stmt = (
        select(Signal)
        .where(
            Signal.telegram_id == channel_id,
            Signal.session == session_name.upper(),
            Signal.time_stamp >= start,
            Signal.time_stamp < end,
            Signal.result.is_(None),
        )
        .order_by(Signal.time_stamp.desc(), Signal.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_total_signal_count(session: AsyncSession, channel_id: int) -> int:
    """Count every signal ever posted to the channel"""
    stmt = select(func.count(Signal.id)).where(Signal.telegram_id == channel_id)
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def get_recent_results(
    session: AsyncSession, channel_id: int, limit: int = STREAK_LOOKBACK
) -> List[str]:
    """
    Get the most recent non-null results, newest first

    Args:
        session: Database session
        channel_id: Telegram channel ID
        limit: Maximum number of results

    Returns:
        List of stored result texts
    """
    stmt = (
        select(Signal.result)
        .where(Signal.telegram_id == channel_id, Signal.result.is_not(None))
        .order_by(Signal.time_stamp.desc(), Signal.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


# ===========================
# SIGNAL WRITES
# ===========================


async def create_signal(
    session: AsyncSession,
    channel_id: int,
    session_name: str,
    pair: str,
    direction: str,
    initial_time: str,
) -> Signal:
    """
    Persist a new open signal (result is NULL)

    Args:
        session: Database session
        channel_id: Telegram channel ID
        session_name: Session band at confirmation time
        pair: Pair label
        direction: Direction label
        initial_time: Entry time HH:MM

    Returns:
        Created Signal model
    """
    signal = Signal(
        session=session_name,
        pair=pair,
        direction=direction,
        initial_time=initial_time,
        telegram_id=channel_id,
        result=None,
    )
    session.add(signal)
    await session.commit()
    await session.refresh(signal)

    logger.info(f"Signal created: #{signal.id} {pair} {direction} at {initial_time} ({session_name})")
    return signal


async def update_latest_signal_result(
    session: AsyncSession, channel_id: int, result_text: str
) -> Optional[Signal]:
    """
    Set the result of the channel's most recent signal

    Args:
        session: Database session
        channel_id: Telegram channel ID
        result_text: Stored outcome text

    Returns:
        Updated Signal model, or None if the channel has no signals
    """
    stmt = (
        select(Signal)
        .where(Signal.telegram_id == channel_id)
        .order_by(Signal.time_stamp.desc(), Signal.id.desc())
        .limit(1)
    )
    latest = (await session.execute(stmt)).scalar_one_or_none()
    if latest is None:
        logger.warning(f"No signal to update for channel {channel_id}")
        return None

    await session.execute(
        update(Signal).where(Signal.id == latest.id).values(result=result_text)
    )
    await session.commit()
    await session.refresh(latest)

    logger.info(f"Signal #{latest.id} result set: {result_text}")
    return latest


# ===========================
# STATS
# ===========================


@dataclass
class ChannelStats:
    today: OutcomeSummary
    week: OutcomeSummary
    month: OutcomeSummary
    all_time: int
    streak: Streak


async def get_current_streak(session: AsyncSession, channel_id: int) -> Streak:
    """Current streak over the last STREAK_LOOKBACK results"""
    return current_streak(await get_recent_results(session, channel_id))


async def get_stats(
    session: AsyncSession, channel_id: int, now: Optional[datetime] = None
) -> ChannelStats:
    """
    Performance overview for /stats and milestones

    Returns:
        ChannelStats with today/week/month aggregates, all-time count and streak
    """
    day = await get_day_signals(session, channel_id, now)
    week = await get_week_signals(session, channel_id, now)
    month = await get_month_signals(session, channel_id, now)

    return ChannelStats(
        today=aggregate_outcomes(s.result for s in day),
        week=aggregate_outcomes(s.result for s in week),
        month=aggregate_outcomes(s.result for s in month),
        all_time=await get_total_signal_count(session, channel_id),
        streak=await get_current_streak(session, channel_id),
    )
