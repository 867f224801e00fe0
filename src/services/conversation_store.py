# coding: utf-8
"""
Per-operator conversation state

Drafts and pending result posts are keyed by admin id. No locking: one
operator is expected to drive one flow at a time.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from src.services.result_posting import ResultPostState
from src.services.signal_wizard import SignalDraft


@dataclass
class AdminConversation:
    draft: SignalDraft = field(default_factory=SignalDraft)
    result: ResultPostState = field(default_factory=ResultPostState)
    last_bot_message_id: Optional[int] = None
    pending_broadcast: Optional[str] = None

    def reset(self) -> None:
        """Drop the draft, the pending result and any pending broadcast."""
        self.draft.reset()
        self.result.clear()
        self.pending_broadcast = None


class ConversationStore:
    """
    Conversations keyed by admin id, plus the last admin who dispatched a result

    The last admin is who scheduled session/day closes report back to.
    """

    def __init__(self, admin_ids: Iterable[int] = ()):
        self._conversations: Dict[int, AdminConversation] = {}
        self._admin_ids = list(admin_ids)
        self._last_admin: Optional[int] = None

    def get(self, admin_id: int) -> AdminConversation:
        conversation = self._conversations.get(admin_id)
        if conversation is None:
            conversation = AdminConversation()
            self._conversations[admin_id] = conversation
        return conversation

    def reset(self, admin_id: int) -> None:
        self.get(admin_id).reset()

    def set_last_bot_message(self, admin_id: int, message_id: Optional[int]) -> None:
        self.get(admin_id).last_bot_message_id = message_id

    def set_last_admin(self, admin_id: int) -> None:
        self._last_admin = admin_id

    @property
    def last_admin(self) -> Optional[int]:
        """Last dispatching admin, falling back to the first configured admin."""
        if self._last_admin is not None:
            return self._last_admin
        return self._admin_ids[0] if self._admin_ids else None
