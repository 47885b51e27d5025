"""
ChallengeService - Daily Habit Challenge Business Logic

Handles joining, daily completions, undo, the participant board and the
administrative streak tools. Every call re-reads the store; nothing here is
cached between updates.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from src.db import queries
from src.exceptions import AlreadyCompletedError, InvalidInputError, UnknownParticipantError
from src.gamification import (
    check_and_record_achievements,
    get_group_streak,
    get_individual_streak,
    streaks_from_ledger,
)
from src.models.board import BoardRow, ParticipantBoard, ParticipantIndex, SetStreakResult
from src.models.completion import CompletionResult
from src.models.conversation import AwaitingCustomStreak, AwaitingName, PendingConversation
from src.models.participant import Participant
from src.utils.datetime_helpers import today_local, yesterday_local
from src.utils.note_templates import random_congrats_note

logger = logging.getLogger(__name__)


class ChallengeService:
    """
    Service for the daily habit challenge.

    Responsibilities:
    - Starting the join flow
    - Marking today (or yesterday) complete and undoing today
    - Building the participant board and the admin index
    - Administrative streak changes
    """

    def __init__(self, notifier):
        """
        Initialize ChallengeService.

        Args:
            notifier: NotificationSink for achievement congratulations
        """
        self.notifier = notifier
        logger.debug("ChallengeService initialized")

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    async def handle_join_request(self, user_id: int, chat_id: int) -> None:
        """Start the join flow: the next free-text message is the display name"""
        await queries.save_pending_conversation(
            PendingConversation(user_id=user_id, chat_id=chat_id, state=AwaitingName())
        )
        logger.info(f"User {user_id} started joining in chat {chat_id}")

    async def require_participant(self, user_id: int, operation: str, chat_id: Optional[int] = None) -> Participant:
        """Load a participant or raise UnknownParticipantError"""
        participant = await queries.get_participant(user_id)
        if participant is None:
            raise UnknownParticipantError(
                f"User {user_id} is not a participant",
                target_user_id=user_id,
                user_id=user_id,
                chat_id=chat_id,
                operation=operation,
            )
        return participant

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    async def handle_mark_completion(
        self,
        user_id: int,
        chat_id: int,
        day: Optional[date] = None
    ) -> CompletionResult:
        """
        Mark a day complete for the requester

        Args:
            user_id: Requester's Telegram ID
            chat_id: Chat the request came from
            day: Day to mark (defaults to today)

        Returns:
            CompletionResult with the stored note, the new streak and any
            achievements this completion unlocked

        Raises:
            UnknownParticipantError: Requester never joined
            AlreadyCompletedError: The day is already marked
        """
        today = today_local()
        if day is None:
            day = today

        await self.require_participant(user_id, "handle_mark_completion", chat_id)

        # Friendly pre-check; the table's primary key is what actually guarantees uniqueness
        if await queries.has_completed(user_id, day):
            raise AlreadyCompletedError(
                f"User {user_id} already completed {day.isoformat()}",
                day=day,
                user_id=user_id,
                chat_id=chat_id,
                operation="handle_mark_completion",
            )

        note = random_congrats_note()
        await queries.mark_completed(user_id, day, note)

        streak = await get_individual_streak(user_id, today=today)
        unlocked = await check_and_record_achievements(user_id, streak, self.notifier, today=today)

        logger.info(f"User {user_id} completed {day.isoformat()}, streak now {streak}")
        return CompletionResult(
            user_id=user_id,
            day=day,
            note=note,
            streak=streak,
            new_achievements=[tier.value for tier in unlocked],
        )

    async def handle_mark_yesterday(self, user_id: int, chat_id: int) -> CompletionResult:
        """Mark the previous calendar day complete"""
        return await self.handle_mark_completion(user_id, chat_id, day=yesterday_local())

    async def handle_undo(self, user_id: int, chat_id: int) -> date:
        """
        Remove today's completion

        Only today can be undone.

        Returns:
            The day that was unmarked

        Raises:
            UnknownParticipantError: Requester never joined
            NothingToUndoError: Today isn't marked
        """
        await self.require_participant(user_id, "handle_undo", chat_id)
        today = today_local()
        await queries.unmark_completed(user_id, today)
        return today

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    async def build_board(self, viewer_id: Optional[int] = None, today: Optional[date] = None) -> ParticipantBoard:
        """
        Current participant board

        Rows are ordered most recent joiner first. Participants, completions
        and achievements are each read once.
        """
        if today is None:
            today = today_local()

        participants = await queries.list_participants(newest_first=True)
        completions_by_day = await queries.get_completions_by_day(until=today)
        completed_today = completions_by_day.get(today, set())

        streaks = streaks_from_ledger(
            [p.user_id for p in participants], completions_by_day, today
        )
        group = await get_group_streak(
            today=today,
            participants=participants,
            completions_by_day=completions_by_day,
        )
        fame = await queries.get_walk_of_fame()

        rows = [
            BoardRow(
                user_id=p.user_id,
                name=p.name,
                completed=p.user_id in completed_today,
                streak=streaks[p.user_id],
            )
            for p in participants
        ]

        return ParticipantBoard(
            day=today,
            rows=rows,
            group_streak=group,
            viewer_completed=viewer_id in completed_today if viewer_id is not None else False,
            walk_of_fame=fame,
        )

    async def handle_list_request(self, user_id: int, chat_id: int) -> ParticipantBoard:
        """Participant board as seen by ``user_id``"""
        board = await self.build_board(viewer_id=user_id)
        logger.debug(f"Built board for user {user_id} in chat {chat_id}: {len(board.rows)} rows")
        return board

    async def handle_list_participant_ids(self, user_id: int, chat_id: int) -> ParticipantIndex:
        """Administrative (user_id, name) index, oldest joiner first"""
        entries = await queries.list_participant_index()
        return ParticipantIndex(entries=entries)

    # ------------------------------------------------------------------
    # Administrative streak changes
    # ------------------------------------------------------------------

    async def handle_admin_begin_custom_streak(
        self,
        admin_id: int,
        chat_id: int,
        target_user_id: int
    ) -> Participant:
        """
        Start the custom streak flow for ``target_user_id``

        Returns:
            The target participant, so the prompt can name them
        """
        target = await self.require_participant(target_user_id, "handle_admin_begin_custom_streak", chat_id)
        await queries.save_pending_conversation(
            PendingConversation(
                user_id=admin_id,
                chat_id=chat_id,
                state=AwaitingCustomStreak(target_user_id=target_user_id),
            )
        )
        logger.info(f"Admin {admin_id} is entering a custom streak for user {target_user_id}")
        return target

    async def handle_admin_set_streak(
        self,
        admin_id: int,
        chat_id: int,
        target_user_id: int,
        days: int
    ) -> SetStreakResult:
        """
        Rewrite a participant's recent completions so their streak is ``days``

        Days ``today-days+1 .. today`` become complete and the day before them
        is cleared. For 0 both today and yesterday are cleared, so the
        computed streak is exactly 0. Achievements are checked afterwards.

        Raises:
            InvalidInputError: ``days`` is negative
            UnknownParticipantError: Target is not registered
        """
        if days < 0:
            raise InvalidInputError(
                "Streak must be a non-negative integer",
                field="streak_days",
                value=days,
                user_id=admin_id,
                chat_id=chat_id,
                operation="handle_admin_set_streak",
            )

        target = await self.require_participant(target_user_id, "handle_admin_set_streak", chat_id)

        today = today_local()
        clear_from = today - timedelta(days=max(days, 1))
        notes = [random_congrats_note() for _ in range(days)]
        await queries.replace_recent_completions(target_user_id, today, clear_from, notes)

        streak = await get_individual_streak(target_user_id, today=today)
        unlocked = await check_and_record_achievements(target_user_id, streak, self.notifier, today=today)

        logger.info(f"Admin {admin_id} set streak of user {target_user_id} to {days} (computed {streak})")
        return SetStreakResult(
            target_user_id=target_user_id,
            target_name=target.name,
            days=days,
            streak=streak,
            new_achievements=[tier.value for tier in unlocked],
        )
