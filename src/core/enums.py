"""
Core Enums - shared types for the signal publishing bot.

Defines:
- Session: trading session band derived from London time
- Direction: trade direction of a signal
- ResultOutcome: the five outcomes an operator can post
- WizardStep: steps of the create-signal conversation
- StreakKind: kind of the current outcome run
"""

from enum import Enum
from typing import Optional

from config.catalog import (
    DIRECT_WIN_TEXT,
    LOSS_IMAGE_CAPTION,
    LOSS_POST_TEXT,
    LOSS_STORED_TEXT,
    MARTINGALE_1_WIN_TEXT,
    MARTINGALE_2_WIN_TEXT,
    MARTINGALE_3_WIN_TEXT,
    SESSION_ICONS,
)


class Session(str, Enum):
    """Trading session band."""

    OVERNIGHT = "OVERNIGHT"
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    OUTSIDE = "OUTSIDE"

    @classmethod
    def trading(cls) -> tuple["Session", ...]:
        """Active sessions in report display order."""
        return (cls.OVERNIGHT, cls.MORNING, cls.AFTERNOON)

    @property
    def icon(self) -> str:
        return SESSION_ICONS.get(self.value, "")


class Direction(str, Enum):
    """Trade direction."""

    BUY = "BUY"
    SELL = "SELL"

    @property
    def label(self) -> str:
        return "🟩 BUY" if self is Direction.BUY else "🟥 SELL"

    @classmethod
    def from_label(cls, value: str) -> Optional["Direction"]:
        """Parse either the bare name or the emoji label."""
        for direction in cls:
            if value in (direction.value, direction.label):
                return direction
        return None


class ResultOutcome(str, Enum):
    """Outcome of a signal, keyed by the /result button value."""

    DIRECT_WIN = "martingale0"
    MARTINGALE_1 = "martingale1"
    MARTINGALE_2 = "martingale2"
    MARTINGALE_3 = "martingale3"
    LOSS = "lossBoth"

    @property
    def is_win(self) -> bool:
        return self is not ResultOutcome.LOSS

    @property
    def stored_text(self) -> str:
        """Text persisted in signals.result."""
        return _STORED_TEXTS[self]

    @property
    def post_text(self) -> str:
        """Text posted to the channel."""
        return LOSS_POST_TEXT if self is ResultOutcome.LOSS else self.stored_text

    def caption(self, with_image: bool) -> str:
        """Caption for the channel post; losses switch label when a screenshot is attached."""
        if self is ResultOutcome.LOSS and with_image:
            return LOSS_IMAGE_CAPTION
        return self.post_text


_STORED_TEXTS = {
    ResultOutcome.DIRECT_WIN: DIRECT_WIN_TEXT,
    ResultOutcome.MARTINGALE_1: MARTINGALE_1_WIN_TEXT,
    ResultOutcome.MARTINGALE_2: MARTINGALE_2_WIN_TEXT,
    ResultOutcome.MARTINGALE_3: MARTINGALE_3_WIN_TEXT,
    ResultOutcome.LOSS: LOSS_STORED_TEXT,
}


class WizardStep(str, Enum):
    """Steps of the create-signal conversation, in order."""

    PAIR_SELECT = "pair_select"
    HOUR_SELECT = "hour_select"
    MINUTE_SELECT = "minute_select"
    DIRECTION_SELECT = "direction_select"
    REVIEW = "review"
    POSTED = "posted"


class StreakKind(str, Enum):
    WIN = "win"
    LOSS = "loss"
