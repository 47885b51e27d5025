"""
Achievement System

Two permanent milestones, 100 and 365 consecutive days. They are evaluated
every time a participant's streak can change (a new completion or an
administrative streak change) and recorded at most once per (user, type).
"""

from datetime import date
from typing import List, Optional
import logging

from src.db import queries
from src.exceptions import UnknownParticipantError
from src.models.achievement import AchievementType
from src.utils.datetime_helpers import today_local

logger = logging.getLogger(__name__)


def qualifying_tiers(streak: int) -> List[AchievementType]:
    """Tiers whose threshold ``streak`` meets or exceeds, lowest first"""
    return [tier for tier in AchievementType if streak >= tier.threshold]


async def check_and_record_achievements(
    user_id: int,
    streak: int,
    notifier,
    today: Optional[date] = None
) -> List[AchievementType]:
    """
    Record and announce any milestone the streak has reached for the first time

    For each qualifying tier:
    1. Skip it if the user already holds it (no renotification)
    2. Otherwise insert it dated ``today`` and send one congratulation

    Running this repeatedly with the same streak is safe; only the first run
    writes rows or sends messages. Store and notification failures propagate
    to the caller.

    Args:
        user_id: Participant's Telegram ID
        streak: Participant's current individual streak
        notifier: NotificationSink used for the congratulation
        today: Day to stamp on new achievements (defaults to today)

    Returns:
        Tiers newly recorded by this call
    """
    if today is None:
        today = today_local()

    newly_recorded: List[AchievementType] = []

    for tier in qualifying_tiers(streak):
        if await queries.has_achievement(user_id, tier):
            continue

        inserted = await queries.record_achievement(user_id, tier, today)
        if not inserted:
            # A concurrent check recorded it first and owns the notification
            continue

        participant = await queries.get_participant(user_id)
        if participant is None:
            raise UnknownParticipantError(
                f"Achievement recorded for unregistered user {user_id}",
                target_user_id=user_id,
                user_id=user_id,
                operation="check_and_record_achievements",
            )

        await notifier.send_achievement(
            chat_id=participant.chat_id,
            user_id=user_id,
            name=participant.name,
            achievement_type=tier,
        )
        newly_recorded.append(tier)
        logger.info(f"User {user_id} unlocked {tier.value} with a {streak}-day streak")

    return newly_recorded
