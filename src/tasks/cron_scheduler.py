# coding: utf-8
"""
Channel Cron Scheduler - scheduled channel posts

One APScheduler job per (cron_id, schedule entry), each in its own timezone:
- session_end: session-close flow addressed to the last admin
- day_end: daily report addressed to the last admin
- anything else: the matching post template, sent by declared type

Missed fires are not replayed.
"""
from pathlib import Path
from typing import Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.catalog import BRAND_IMAGES
from src.database.crud import get_channel_cron_posts, get_channel_crons
from src.database.models import CronJob, CronPost
from src.services.channel_publisher import ChannelPublisher, OutgoingPost
from src.services.conversation_store import ConversationStore
from src.services.session_closer import SessionCloser


SESSION_END_JOB = "session_end"
DAY_END_JOB = "day_end"

# crontab weekday numbers (0 and 7 are Sunday) to APScheduler names
_WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat", "sun")


# ===========================
# CRON EXPRESSIONS
# ===========================


def _translate_weekday_part(part: str) -> str:
    base, _, step = part.partition("/")
    if base == "*" or not any(ch.isdigit() for ch in base):
        return part

    if "-" in base:
        start, _, end = base.partition("-")
        numbers = range(int(start), int(end) + 1, int(step or 1))
    else:
        numbers = [int(base)]

    if not numbers:
        raise ValueError(f"Empty weekday range: {part}")
    for number in numbers:
        if not 0 <= number <= 7:
            raise ValueError(f"Weekday out of range: {number}")

    return ",".join(dict.fromkeys(_WEEKDAY_NAMES[number] for number in numbers))


def translate_weekdays(field: str) -> str:
    """Rewrite a crontab day-of-week field with APScheduler weekday names."""
    return ",".join(_translate_weekday_part(part) for part in field.split(","))


def build_trigger(expression: str, timezone: str = "UTC") -> CronTrigger:
    """
    CronTrigger from a 5-field (or 6-field, seconds first) crontab expression

    Raises:
        ValueError: on a malformed expression or out-of-range field
        KeyError: on an unknown timezone
    """
    fields = expression.split()
    if len(fields) == 5:
        second = "0"
        minute, hour, day, month, day_of_week = fields
    elif len(fields) == 6:
        second, minute, hour, day, month, day_of_week = fields
    else:
        raise ValueError(f"Expected 5 or 6 cron fields, got {len(fields)}: {expression!r}")

    return CronTrigger(
        second=second,
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=translate_weekdays(day_of_week),
        timezone=timezone,
    )


def is_valid_cron_expression(expression: str) -> bool:
    if not expression or not expression.strip():
        return False
    try:
        build_trigger(expression)
        return True
    except (ValueError, KeyError, TypeError):
        return False


# ===========================
# TEMPLATES
# ===========================


def resolve_image_path(publisher: ChannelPublisher, message_id: str) -> Path:
    """Brand image for a template id; every get_ready variant shares one asset."""
    if "get_ready" in message_id:
        filename = BRAND_IMAGES["get_ready"]
    else:
        filename = BRAND_IMAGES.get(message_id, f"{message_id}.jpg")
    return publisher.brand_image(filename)


def build_outgoing_post(publisher: ChannelPublisher, template: CronPost) -> OutgoingPost:
    post = OutgoingPost(
        id=template.message_id,
        name=template.name,
        text=template.text,
        reply_markup=template.reply_markup,
    )
    if template.image:
        post.image_path = resolve_image_path(publisher, template.message_id)
    elif template.video:
        post.video = publisher.instruction_video()
    return post


class ChannelCronScheduler:
    """
    Loads cron definitions for the channel and fires them

    Args:
        publisher: Sends template posts
        closer: Runs the session/day close flows
        conversations: Source of the last admin to report to
        session_maker: Database session factory
    """

    def __init__(
        self,
        publisher: ChannelPublisher,
        closer: SessionCloser,
        conversations: ConversationStore,
        session_maker: async_sessionmaker[AsyncSession],
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.publisher = publisher
        self.closer = closer
        self.conversations = conversations
        self.session_maker = session_maker
        self.scheduler = scheduler or AsyncIOScheduler(timezone="UTC")
        self.templates: Dict[str, CronPost] = {}

    @property
    def channel_id(self) -> int:
        return self.publisher.channel_id

    async def load(self) -> List[str]:
        """
        Register one job per schedule entry of every channel cron

        Returns:
            Ids of the registered jobs
        """
        async with self.session_maker() as session:
            jobs = await get_channel_crons(session, self.channel_id)
            templates = await get_channel_cron_posts(session, self.channel_id)

        self.templates = {template.message_id: template for template in templates}

        registered = []
        for job in jobs:
            registered.extend(self.register(job))

        logger.info(
            f"Channel crons scheduled: {len(registered)} jobs "
            f"from {len(jobs)} definitions, {len(self.templates)} templates"
        )
        return registered

    def register(self, job: CronJob) -> List[str]:
        registered = []
        for idx, expression in enumerate(job.schedule or []):
            job_id = f"{job.cron_id}_{idx}"
            try:
                trigger = build_trigger(expression, job.timezone or "UTC")
            except (ValueError, KeyError) as e:
                logger.error(f"Skipping cron {job_id} ({expression!r}, {job.timezone}): {e}")
                continue

            self.scheduler.add_job(
                self.fire,
                trigger,
                args=[job.cron_id],
                id=job_id,
                name=job.name or job.cron_id,
                replace_existing=True,
            )
            registered.append(job_id)
        return registered

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Channel cron scheduler started")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Channel cron scheduler stopped")

    async def fire(self, cron_id: str) -> None:
        """Job body; failures are logged and never reach APScheduler."""
        logger.info(f"Cron fired: {cron_id}")
        try:
            if cron_id == SESSION_END_JOB:
                await self._with_last_admin(cron_id, self.closer.end_session)
            elif cron_id == DAY_END_JOB:
                await self._with_last_admin(cron_id, self.closer.end_day)
            else:
                await self.send_template(cron_id)
        except Exception as e:
            logger.exception(f"Cron {cron_id} failed: {e}")

    async def _with_last_admin(self, cron_id: str, flow) -> None:
        admin_id = self.conversations.last_admin
        if admin_id is None:
            logger.warning(f"Cron {cron_id} fired but there is no admin to report to")
            return
        await flow(admin_id)

    async def send_template(self, cron_id: str) -> bool:
        template = self.templates.get(cron_id)
        if template is None:
            logger.warning(f"No post template for cron {cron_id}")
            return False
        return await self.publisher.send_message_by_type(build_outgoing_post(self.publisher, template))
