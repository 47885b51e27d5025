"""
ConversationService - multi-step flows driven by free-text replies

At most one flow is pending per (user, chat). A reply is interpreted
according to the pending kind; when it can't be interpreted the error
propagates and the pending entry stays so the user can simply try again.
"""

import logging
from typing import Optional

from src.db import queries
from src.models.board import ConversationOutcome
from src.models.conversation import AwaitingCustomStreak, AwaitingName, ConversationKind, PendingConversation
from src.validators import parse_streak_value, validate_display_name

logger = logging.getLogger(__name__)


class ConversationService:
    """Routes free-text replies into the pending flow for (user, chat)"""

    def __init__(self, challenge_service):
        self.challenge_service = challenge_service

    async def handle_reply(
        self,
        user_id: int,
        chat_id: int,
        text: str,
        username: Optional[str] = None
    ) -> Optional[ConversationOutcome]:
        """
        Consume a free-text message if a flow is waiting for it

        Returns:
            None when nothing is pending (the message isn't ours),
            otherwise the outcome of the completed flow

        Raises:
            InvalidInputError: Reply doesn't fit the expected shape; the
                pending flow is left in place
        """
        pending = await queries.get_pending_conversation(user_id, chat_id)
        if pending is None:
            return None

        logger.debug(f"Reply from user {user_id} in chat {chat_id} consumed by {pending.kind.value}")

        if pending.kind == ConversationKind.AWAITING_NAME:
            return await self.handle_name_reply(user_id, chat_id, text, username=username, pending=pending)
        if pending.kind == ConversationKind.AWAITING_CUSTOM_STREAK:
            return await self.handle_custom_streak_reply(user_id, chat_id, text, pending=pending)

        # Unreachable while ConversationKind and the handlers above agree
        raise ValueError(f"Unhandled conversation kind: {pending.kind}")

    async def handle_name_reply(
        self,
        user_id: int,
        chat_id: int,
        text: str,
        username: Optional[str] = None,
        pending: Optional[PendingConversation] = None
    ) -> Optional[ConversationOutcome]:
        """Register the replying user under the given name and finish the join flow"""
        if pending is None:
            pending = await queries.get_pending_conversation(user_id, chat_id)
        if pending is None or not isinstance(pending.state, AwaitingName):
            return None

        name = validate_display_name(text, user_id=user_id)
        participant = await queries.register_participant(
            user_id, chat_id, display_name=name, username=username
        )
        await queries.clear_pending_conversation(user_id, chat_id)

        return ConversationOutcome(
            kind=ConversationKind.AWAITING_NAME.value,
            participant_name=participant.name,
        )

    async def handle_custom_streak_reply(
        self,
        user_id: int,
        chat_id: int,
        text: str,
        pending: Optional[PendingConversation] = None
    ) -> Optional[ConversationOutcome]:
        """Apply a typed streak value to the participant chosen earlier"""
        if pending is None:
            pending = await queries.get_pending_conversation(user_id, chat_id)
        if pending is None or not isinstance(pending.state, AwaitingCustomStreak):
            return None

        days = parse_streak_value(text, user_id=user_id)
        result = await self.challenge_service.handle_admin_set_streak(
            user_id, chat_id, pending.state.target_user_id, days
        )
        await queries.clear_pending_conversation(user_id, chat_id)

        return ConversationOutcome(
            kind=ConversationKind.AWAITING_CUSTOM_STREAK.value,
            set_streak=result,
        )
