# coding: utf-8
"""
Result posting flow

IDLE -> RESULT_CHOSEN -> (IMAGE_ATTACHED) -> (STREAK_PROMPT) -> DISPATCHED

Choosing an outcome writes it to the latest signal straight away. The
write is not undone when the operator cancels before the post goes out.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from config.config import STREAK_PROMPT_THRESHOLD
from src.core.enums import ResultOutcome, StreakKind
from src.database.crud import get_current_streak, update_latest_signal_result
from src.database.models import Signal
from src.utils.time_utils import Streak


@dataclass
class ResultPostState:
    """Transient state of one operator's pending result post."""

    outcome: Optional[ResultOutcome] = None
    awaiting_image: bool = False
    image_path: Optional[str] = None
    preview_message_id: Optional[int] = None

    @property
    def has_chosen(self) -> bool:
        return self.outcome is not None

    def clear(self) -> None:
        self.outcome = None
        self.awaiting_image = False
        self.image_path = None
        self.preview_message_id = None


@dataclass
class ResultDispatch:
    """What goes to the channel: text or photo+caption."""

    text: str
    image_path: Optional[str] = None


def chosen_text(outcome: ResultOutcome) -> str:
    return (
        "This is what you have chosen:\n"
        f"<blockquote>{outcome.post_text}</blockquote>\n\n"
        "What would you like to do next?"
    )


def streak_question(streak: Streak) -> str:
    return (
        f"🔥 You have a <strong>{streak.length} WIN STREAK!</strong>\n\n"
        "Do you want to include this in the result post?"
    )


def streak_banner(streak: Streak) -> str:
    return f"\n\n🔥 <strong>{streak.length} WINS IN A ROW!</strong> 🔥"


async def choose_outcome(
    session: AsyncSession,
    channel_id: int,
    state: ResultPostState,
    outcome: ResultOutcome,
) -> Optional[Signal]:
    """Record the outcome on the state and persist it on the latest signal."""
    state.outcome = outcome
    updated = await update_latest_signal_result(session, channel_id, outcome.stored_text)
    if updated is None:
        logger.warning(f"Result {outcome.value} chosen but channel {channel_id} has no signal")
    return updated


def request_image(state: ResultPostState) -> None:
    state.awaiting_image = True
    state.image_path = None


def attach_image(state: ResultPostState, image_path: str) -> None:
    state.image_path = image_path


async def streak_to_offer(
    session: AsyncSession, channel_id: int, state: ResultPostState
) -> Optional[Streak]:
    """
    Win streak worth announcing, None when the prompt should be skipped

    Only a win outcome with a current win streak of at least
    STREAK_PROMPT_THRESHOLD qualifies.
    """
    if state.outcome is None or not state.outcome.is_win:
        return None

    streak = await get_current_streak(session, channel_id)
    if streak.kind is StreakKind.WIN and streak.length >= STREAK_PROMPT_THRESHOLD:
        return streak
    return None


def build_dispatch(state: ResultPostState, streak: Optional[Streak] = None) -> ResultDispatch:
    """
    Final channel content for the chosen outcome

    Raises:
        ValueError: if no outcome has been chosen
    """
    if state.outcome is None:
        raise ValueError("No result has been chosen")

    with_image = state.awaiting_image and bool(state.image_path)
    text = state.outcome.caption(with_image)
    if streak is not None:
        text += streak_banner(streak)

    return ResultDispatch(text=text, image_path=state.image_path if with_image else None)
