"""
Streak computation

Two streaks are tracked:
- individual: consecutive days a participant completed the habit
- group: consecutive days on which every eligible participant completed it

Both are computed from the completion ledger on demand; nothing is cached.
The walk starts at yesterday and moves backwards until the first gap, then
today is added if it already qualifies. An incomplete today therefore never
breaks a streak that is still alive.
"""

from datetime import date, timedelta
from typing import Iterable, Mapping, Optional
import logging

from src.db import queries
from src.utils.datetime_helpers import reference_timezone, today_local

logger = logging.getLogger(__name__)


def individual_streak(completed_days: set[date], today: date) -> int:
    """
    Consecutive-day streak for one participant as of ``today``

    Args:
        completed_days: Days the participant completed
        today: Reference day

    Returns:
        Number of consecutive completed days ending yesterday, plus one if
        today is completed. 0 for a participant who never completed.
    """
    if not completed_days:
        return 0

    # The walk can't go further back than the earliest record
    earliest = min(completed_days)
    streak = 0
    day = today - timedelta(days=1)
    while day >= earliest and day in completed_days:
        streak += 1
        day -= timedelta(days=1)

    if today in completed_days:
        streak += 1
    return streak


def _group_day_complete(
    day: date,
    join_days: Mapping[int, date],
    completions_by_day: Mapping[date, set[int]]
) -> bool:
    """Every participant who had joined by ``day`` completed it (and there was at least one)"""
    eligible = {user_id for user_id, joined in join_days.items() if joined <= day}
    if not eligible:
        return False
    return eligible <= completions_by_day.get(day, set())


def group_streak(
    join_days: Mapping[int, date],
    completions_by_day: Mapping[date, set[int]],
    today: date
) -> int:
    """
    Consecutive days on which the whole group completed, as of ``today``

    A participant counts toward a day only if they joined on or before it,
    so a new member never breaks history. A day with nobody eligible is a gap.

    Args:
        join_days: user_id -> calendar day of joining
        completions_by_day: day -> user_ids that completed
        today: Reference day

    Returns:
        Group streak length, 0 when there are no participants
    """
    if not join_days:
        return 0

    # Before the first join nobody is eligible, so the walk always stops there
    earliest = min(join_days.values())
    streak = 0
    day = today - timedelta(days=1)
    while day >= earliest and _group_day_complete(day, join_days, completions_by_day):
        streak += 1
        day -= timedelta(days=1)

    if _group_day_complete(today, join_days, completions_by_day):
        streak += 1
    return streak


async def get_individual_streak(user_id: int, today: Optional[date] = None) -> int:
    """Load one participant's completions and compute their streak"""
    if today is None:
        today = today_local()

    completed_days = await queries.get_completion_days(user_id, until=today)
    streak = individual_streak(completed_days, today)
    logger.debug(f"Individual streak for user {user_id} as of {today.isoformat()}: {streak}")
    return streak


async def get_group_streak(
    today: Optional[date] = None,
    participants: Optional[Iterable] = None,
    completions_by_day: Optional[Mapping[date, set[int]]] = None
) -> int:
    """
    Load participants and completions and compute the group streak

    Already-loaded participants / completions can be passed in to avoid
    re-reading them when building the board.
    """
    if today is None:
        today = today_local()
    if participants is None:
        participants = await queries.list_participants()
    if completions_by_day is None:
        completions_by_day = await queries.get_completions_by_day(until=today)

    tz = reference_timezone()
    join_days = {p.user_id: p.joined_on(tz) for p in participants}
    streak = group_streak(join_days, completions_by_day, today)
    logger.debug(f"Group streak as of {today.isoformat()}: {streak}")
    return streak


def streaks_from_ledger(
    user_ids: Iterable[int],
    completions_by_day: Mapping[date, set[int]],
    today: date
) -> dict[int, int]:
    """Individual streaks for many users from one day -> users map"""
    days_by_user: dict[int, set[date]] = {user_id: set() for user_id in user_ids}
    for day, users in completions_by_day.items():
        for user_id in users:
            if user_id in days_by_user:
                days_by_user[user_id].add(day)
    return {
        user_id: individual_streak(days, today)
        for user_id, days in days_by_user.items()
    }
