# coding: utf-8
"""
Create-signal conversation

PAIR_SELECT -> HOUR_SELECT -> MINUTE_SELECT -> DIRECTION_SELECT -> REVIEW -> POSTED

The draft is mutated one field per operator selection. Going back never
clears fields; only confirm and cancel reset the draft.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from config.catalog import (
    BROKER_URL,
    PAIR_PAGE_COUNT,
    TELEGRAM_CHANNEL_HANDLE,
    TELEGRAM_CHANNEL_URL,
    get_pair_label,
)
from src.core.enums import Direction, WizardStep
from src.database.crud import create_signal
from src.database.models import Signal
from src.utils.time_utils import current_session, next_time, pad_zero


MARTINGALE_OFFSETS = (5, 10, 15)
VALID_MINUTES = tuple(range(0, 60, 5))


@dataclass
class SignalDraft:
    """Fields collected by the create-signal conversation."""

    pair: Optional[str] = None
    hour: Optional[int] = None
    minute: Optional[int] = None
    direction: Optional[Direction] = None
    last_step: WizardStep = WizardStep.PAIR_SELECT
    pair_page: int = 0

    def open_pair_page(self, page: int) -> int:
        """Show a page of the pair catalog; returns the clamped page index."""
        self.pair_page = max(0, min(page, PAIR_PAGE_COUNT - 1))
        self.last_step = WizardStep.PAIR_SELECT
        return self.pair_page

    def choose_pair(self, value: str) -> bool:
        """Store the flagged label for a catalog pair. Unknown pairs are ignored."""
        label = get_pair_label(value)
        if label is None:
            logger.warning(f"Unknown currency pair selected: {value}")
            return False
        self.pair = label
        self.last_step = WizardStep.HOUR_SELECT
        return True

    def choose_hour(self, hour: int) -> bool:
        if not 0 <= hour <= 23:
            return False
        self.hour = hour
        self.last_step = WizardStep.MINUTE_SELECT
        return True

    def choose_minute(self, minute: int) -> bool:
        if minute not in VALID_MINUTES:
            return False
        self.minute = minute
        self.last_step = WizardStep.DIRECTION_SELECT
        return True

    def choose_direction(self, direction: Direction) -> None:
        self.direction = direction
        self.last_step = WizardStep.REVIEW

    def restep(self, step: WizardStep) -> None:
        """Re-enter an earlier step keeping every drafted field."""
        self.last_step = step

    def can_confirm(self) -> bool:
        return self.hour is not None and self.minute is not None

    @property
    def entry_time(self) -> str:
        return f"{pad_zero(self.hour or 0)}:{pad_zero(self.minute or 0)}"

    def review_text(self) -> str:
        direction = self.direction.label if self.direction else ""
        text = "Okay let's review what you've chosen:\n\n"
        text += f"Currency Pair: {self.pair or ''} \n"
        text += f"Start Time: {self.entry_time} \n"
        text += f"Direction: {direction} \n\n"
        text += "<blockquote><strong>Note: i will post the signal immediately you click on correct ✅</strong></blockquote>"
        return text

    def reset(self) -> None:
        self.pair = None
        self.hour = None
        self.minute = None
        self.direction = None
        self.last_step = WizardStep.PAIR_SELECT
        self.pair_page = 0

    def is_empty(self) -> bool:
        return (
            self.pair is None
            and self.hour is None
            and self.minute is None
            and self.direction is None
            and self.last_step is WizardStep.PAIR_SELECT
        )


def martingale_levels(hour: int, minute: int) -> list[str]:
    """Checkpoint times, each offset from the entry time itself."""
    return [next_time(hour, minute, offset) for offset in MARTINGALE_OFFSETS]


def build_signal_message(pair: str, hour: int, minute: int, direction: str) -> str:
    """Render the channel announcement for a signal."""
    entry_time = f"{pad_zero(hour)}:{pad_zero(minute)}"
    levels = martingale_levels(hour, minute)

    text = f"<strong>{pair}</strong>\n\n"
    text += "<strong>🕘 ᴇxᴘɪʀᴀᴛɪᴏɴ 5ᴍ</strong>\n"
    text += f"<strong>⏺ Entry at {entry_time}</strong>\n\n"
    text += f"<strong>{direction}</strong>\n\n"
    text += f'<strong>ᴛᴇʟᴇɢʀᴀᴍ: <a href="{TELEGRAM_CHANNEL_URL}">{TELEGRAM_CHANNEL_HANDLE}</a></strong>\n\n'
    text += "<strong>🔽 ᴍᴀʀᴛɪɴɢᴀʟᴇ ʟᴇᴠᴇʟꜱ</strong>\n"
    text += f"<strong>1️⃣ ʟᴇᴠᴇʟ ᴀᴛ  {levels[0]}</strong>\n"
    text += f"<strong>2️⃣ ʟᴇᴠᴇʟ ᴀᴛ  {levels[1]}</strong>\n"
    text += f"<strong>3️⃣ ʟᴇᴠᴇʟ ᴀᴛ  {levels[2]}</strong>\n\n"
    text += f'<strong><a href="{BROKER_URL}">💹 ᴛʀᴀᴅᴇ ᴛʜɪꜱ ꜱɪɢɴᴀʟ ʜᴇʀᴇ</a></strong>\n\n'
    return text


@dataclass
class PostedSignal:
    message: str
    signal: Signal = field(repr=False)


async def confirm_signal(
    session: AsyncSession,
    channel_id: int,
    draft: SignalDraft,
    now: Optional[datetime] = None,
) -> Optional[PostedSignal]:
    """
    Finalize the draft: render the announcement, persist an open signal, reset

    Returns None without touching anything when hour or minute is missing.
    """
    if not draft.can_confirm():
        return None

    direction = draft.direction.label if draft.direction else ""
    message = build_signal_message(draft.pair or "", draft.hour, draft.minute, direction)
    session_band = current_session(now)

    signal = await create_signal(
        session,
        channel_id,
        session_name=session_band.value,
        pair=draft.pair or "",
        direction=direction,
        initial_time=draft.entry_time,
    )

    draft.reset()
    return PostedSignal(message=message, signal=signal)
