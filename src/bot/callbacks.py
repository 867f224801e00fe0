# coding: utf-8
"""
Callback action table

Every inline-button callback is classified once, against an ordered list of
patterns, into exactly one action. Handlers subscribe to actions through
ActionFilter instead of matching raw callback data themselves.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Tuple, Union

from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery


class Action(str, Enum):
    CANCEL = "cancel"
    PAIR_PAGE = "pair_page"
    PAIR = "pair"
    HOUR = "hour"
    MINUTE = "minute"
    DIRECTION = "direction"
    RESTEP = "restep"
    POST_SIGNAL = "post_signal"
    RESULT_OUTCOME = "result_outcome"
    RESULT_IMAGE = "result_image"
    SEND_RESULT = "send_result"
    RESULT_STREAK = "result_streak"
    SESSION_ANSWER = "session_answer"
    INFO = "info"
    BROADCAST = "broadcast"
    MILESTONE = "milestone"
    MANUAL_CONFIRM = "manual_confirm"
    MANUAL = "manual"


# Order matters: the first match wins
ACTION_TABLE: Tuple[Tuple[Action, Pattern[str]], ...] = (
    (Action.CANCEL, re.compile(r"^cancel_op(?:_.*)?$")),
    (Action.PAIR_PAGE, re.compile(r"^pairs_(\d+)$")),
    (Action.PAIR, re.compile(r"^([A-Z]{3}/[A-Z]{3} \(OTC\))$")),
    (Action.HOUR, re.compile(r"^hour_(\d{1,2})$")),
    (Action.MINUTE, re.compile(r"^minute_(\d{1,2})$")),
    (Action.DIRECTION, re.compile(r"^direction_(up|down)$")),
    (Action.RESTEP, re.compile(r"^restep_(pairs|time|minute|direction)$")),
    (Action.POST_SIGNAL, re.compile(r"^post_signal$")),
    (Action.RESULT_OUTCOME, re.compile(r"^(martingale[0-3]|lossBoth)$")),
    (Action.RESULT_IMAGE, re.compile(r"^result_image$")),
    (Action.SEND_RESULT, re.compile(r"^send_result$")),
    (Action.RESULT_STREAK, re.compile(r"^result_(with|without)_streak$")),
    (Action.SESSION_ANSWER, re.compile(r"^(yes|no)$")),
    (Action.INFO, re.compile(r"^info_(\w+)$")),
    (Action.BROADCAST, re.compile(r"^broadcast_(confirm|cancel)$")),
    (Action.MILESTONE, re.compile(r"^post_milestone_(\d+)$")),
    (Action.MANUAL_CONFIRM, re.compile(r"^confirm_manual_(\w+)$")),
    (Action.MANUAL, re.compile(r"^manual_(\w+)$")),
)


@dataclass(frozen=True)
class ResolvedAction:
    action: Action
    argument: Optional[str] = None


def resolve_action(data: Optional[str]) -> Optional[ResolvedAction]:
    """Classify raw callback data, None when no action matches."""
    if not data:
        return None
    for action, pattern in ACTION_TABLE:
        match = pattern.match(data)
        if match:
            argument = match.group(1) if match.groups() else None
            return ResolvedAction(action=action, argument=argument)
    return None


class ActionFilter(BaseFilter):
    """
    Pass callbacks resolving to one of `actions`

    On match the handler receives the ResolvedAction as `resolved`.
    """

    def __init__(self, *actions: Action):
        self.actions = actions

    async def __call__(self, callback: CallbackQuery) -> Union[bool, dict]:
        resolved = resolve_action(callback.data)
        if resolved is None or resolved.action not in self.actions:
            return False
        return {"resolved": resolved}
