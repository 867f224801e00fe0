"""
Seed the default channel schedule

Creates the session-start, get-ready, session-end and day-end crons and the
matching post templates for the posting channel. Safe to run multiple
times - existing cron_ids and templates are left untouched.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from config.catalog import BROKER_URL, SUPPORT_URL
from config.config import POSTING_CHANNEL_ID
from src.database.crud import get_channel_cron_posts, get_channel_crons
from src.database.engine import dispose_engine, get_session_maker
from src.database.models import CronJob, CronPost
from src.tasks.cron_scheduler import is_valid_cron_expression


LONDON = "Europe/London"

BROKER_BUTTONS = {
    "inline_keyboard": [
        [{"text": "CREATE AN ACCOUNT HERE", "url": BROKER_URL}],
        [{"text": "CONTACT SUPPORT HERE", "url": SUPPORT_URL}],
    ]
}

DEFAULT_CRONS = [
    ("Overnight session start", "gen_info_night", ["0 6 * * 1-5"]),
    ("Morning session start", "gen_info_morning", ["1 11 * * 1-5"]),
    ("Afternoon session start", "gen_info_noon", ["1 17 * * 1-5"]),
    ("Get ready (overnight)", "get_ready_night", ["55 5 * * 1-5"]),
    ("Get ready (morning)", "get_ready_morning", ["56 10 * * 1-5"]),
    ("Get ready (afternoon)", "get_ready_noon", ["56 16 * * 1-5"]),
    ("Session end", "session_end", ["0 11 * * 1-5", "0 17 * * 1-5", "59 23 * * 1-5"]),
    ("Day end", "day_end", ["30 23 * * 1-5"]),
]

DEFAULT_POSTS = [
    ("🌑 Overnight Session", "gen_info_night", "<strong>🌑 OVERNIGHT SESSION IS STARTING</strong>", True, False),
    ("🌅 Morning Session", "gen_info_morning", "<strong>🌅 MORNING SESSION IS STARTING</strong>", True, False),
    ("☀️ Afternoon Session", "gen_info_noon", "<strong>☀️ AFTERNOON SESSION IS STARTING</strong>", True, False),
    ("🔔 Get Ready (overnight)", "get_ready_night", "<strong>🔔 GET READY, SIGNALS IN 5 MINUTES</strong>", True, False),
    ("🔔 Get Ready (morning)", "get_ready_morning", "<strong>🔔 GET READY, SIGNALS IN 5 MINUTES</strong>", True, False),
    ("🔔 Get Ready (afternoon)", "get_ready_noon", "<strong>🔔 GET READY, SIGNALS IN 5 MINUTES</strong>", True, False),
]


async def seed_cron_jobs(channel_id: int) -> int:
    """Insert missing default crons and templates, returns the number of rows added"""
    added = 0

    session_maker = get_session_maker()
    async with session_maker() as session:
        existing_crons = {job.cron_id for job in await get_channel_crons(session, channel_id)}
        existing_posts = {post.message_id for post in await get_channel_cron_posts(session, channel_id)}

        for name, cron_id, schedule in DEFAULT_CRONS:
            if cron_id in existing_crons:
                logger.info(f"⏭ Cron {cron_id} already exists")
                continue

            invalid = [expr for expr in schedule if not is_valid_cron_expression(expr)]
            if invalid:
                logger.error(f"❌ Cron {cron_id} has invalid expressions: {invalid}")
                continue

            session.add(
                CronJob(name=name, cron_id=cron_id, schedule=schedule, timezone=LONDON, telegram_id=channel_id)
            )
            added += 1
            logger.info(f"✅ Cron {cron_id} added: {schedule}")

        for name, message_id, text, image, video in DEFAULT_POSTS:
            if message_id in existing_posts:
                logger.info(f"⏭ Template {message_id} already exists")
                continue

            session.add(
                CronPost(
                    name=name,
                    message_id=message_id,
                    text=text,
                    image=image,
                    video=video,
                    reply_markup=BROKER_BUTTONS,
                    telegram_id=channel_id,
                )
            )
            added += 1
            logger.info(f"✅ Template {message_id} added")

        await session.commit()

    return added


async def main():
    if POSTING_CHANNEL_ID is None:
        logger.error("CHANNEL_ID is not configured")
        sys.exit(1)

    try:
        added = await seed_cron_jobs(POSTING_CHANNEL_ID)
        logger.info(f"🎉 Seeding finished: {added} rows added for channel {POSTING_CHANNEL_ID}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
