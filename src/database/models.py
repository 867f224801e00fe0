"""
Database models for the signal publishing bot

SQLAlchemy 2.0 models with full type hints
"""

from datetime import datetime, UTC
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    """Base class for all models"""

    pass


# ===========================
# MODELS
# ===========================


class Signal(Base):
    """
    Signal model - one posted trade recommendation

    Created with result=None when the operator confirms the wizard.
    The result is set once by the result flow and rows are never deleted.
    """

    __tablename__ = "signals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    session: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="Session band at confirmation: OVERNIGHT/MORNING/AFTERNOON/OUTSIDE"
    )
    time_stamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        comment="Creation time (UTC)",
    )
    pair: Mapped[str] = mapped_column(String(100), nullable=False, comment="Pair label with flag glyphs")
    direction: Mapped[str] = mapped_column(String(20), nullable=False, comment="Direction label, e.g. 🟩 BUY")
    result: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Stored outcome text, NULL while open"
    )
    initial_time: Mapped[str] = mapped_column(String(5), nullable=False, comment="Entry time HH:MM")
    telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="Channel the signal was posted to")

    __table_args__ = (
        Index("idx_signals_channel_time", "telegram_id", "time_stamp"),
        Index("idx_signals_channel_session", "telegram_id", "session"),
    )

    def __repr__(self) -> str:
        return (
            f"<Signal(id={self.id}, session={self.session}, pair={self.pair}, "
            f"initial_time={self.initial_time}, result={self.result})>"
        )


class CronJob(Base):
    """
    Recurring schedule for a channel

    Each entry in `schedule` is a crontab expression evaluated in `timezone`.
    """

    __tablename__ = "crons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="", comment="Human readable name")
    cron_id: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="session_end, day_end or a cron_posts.message_id"
    )
    schedule: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list, comment="Crontab expressions")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC", comment="IANA timezone")
    telegram_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CronJob(cron_id={self.cron_id}, schedule={self.schedule}, timezone={self.timezone})>"


class CronPost(Base):
    """
    Template posted when a cron job fires

    `image`/`video` only declare the media type; files come from MEDIA_DIR.
    """

    __tablename__ = "cron_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    message_id: Mapped[str] = mapped_column(String(100), nullable=False, comment="Matches crons.cron_id")
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="HTML text or caption")
    image: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    video: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reply_markup: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType, nullable=True, comment='Telegram markup, {"inline_keyboard": [[{text, url}]]}'
    )
    telegram_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CronPost(message_id={self.message_id}, image={self.image}, video={self.video})>"
