"""Completion ledger queries

The (user_id, completed_on) primary key is what keeps completions unique;
the existence check in the service layer only produces a friendlier reply.
"""
import logging
from datetime import date
from typing import Optional
from src.db.connection import db, store_operation
from src.exceptions import AlreadyCompletedError, NothingToUndoError
from src.utils.datetime_helpers import days_back

logger = logging.getLogger(__name__)


@store_operation("mark_completed")
async def mark_completed(user_id: int, day: date, note: Optional[str] = None) -> None:
    """
    Record that user completed the habit on ``day``

    Raises:
        AlreadyCompletedError: A record for (user_id, day) already exists,
            including when a concurrent insert won the race
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO daily_completions (user_id, completed_on, note)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, completed_on) DO NOTHING
                RETURNING user_id
                """,
                (user_id, day, note)
            )
            inserted = await cur.fetchone()
            await conn.commit()

    if inserted is None:
        raise AlreadyCompletedError(
            f"User {user_id} already completed {day.isoformat()}",
            day=day,
            user_id=user_id,
            operation="mark_completed",
        )
    logger.info(f"Marked {day.isoformat()} complete for user {user_id}")


@store_operation("unmark_completed")
async def unmark_completed(user_id: int, day: date) -> None:
    """
    Delete the completion for (user_id, day)

    Raises:
        NothingToUndoError: No record existed
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                DELETE FROM daily_completions
                WHERE user_id = %s AND completed_on = %s
                RETURNING user_id
                """,
                (user_id, day)
            )
            deleted = await cur.fetchone()
            await conn.commit()

    if deleted is None:
        raise NothingToUndoError(
            f"User {user_id} has no completion on {day.isoformat()}",
            day=day,
            user_id=user_id,
            operation="unmark_completed",
        )
    logger.info(f"Removed completion {day.isoformat()} for user {user_id}")


@store_operation("has_completed")
async def has_completed(user_id: int, day: date) -> bool:
    """Check if user has a completion on ``day``"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT 1 FROM daily_completions WHERE user_id = %s AND completed_on = %s",
                (user_id, day)
            )
            return await cur.fetchone() is not None


@store_operation("completed_users_on")
async def completed_users_on(day: date) -> set[int]:
    """IDs of every user with a completion on ``day``"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT user_id FROM daily_completions WHERE completed_on = %s",
                (day,)
            )
            rows = await cur.fetchall()
            return {row["user_id"] for row in rows}


@store_operation("get_completion_days")
async def get_completion_days(user_id: int, until: date) -> set[date]:
    """All days on or before ``until`` that user completed"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT completed_on FROM daily_completions
                WHERE user_id = %s AND completed_on <= %s
                """,
                (user_id, until)
            )
            rows = await cur.fetchall()
            return {row["completed_on"] for row in rows}


@store_operation("get_completions_by_day")
async def get_completions_by_day(until: date) -> dict[date, set[int]]:
    """Map of day -> completed user IDs for every day on or before ``until``"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT completed_on, user_id FROM daily_completions
                WHERE completed_on <= %s
                """,
                (until,)
            )
            rows = await cur.fetchall()

    by_day: dict[date, set[int]] = {}
    for row in rows:
        by_day.setdefault(row["completed_on"], set()).add(row["user_id"])
    return by_day


@store_operation("replace_recent_completions")
async def replace_recent_completions(
    user_id: int,
    today: date,
    clear_from: date,
    notes: list[str]
) -> None:
    """
    Rewrite a user's completions between ``clear_from`` and ``today``

    Deletes every completion in [clear_from, today], then inserts one
    completion per note for the days ending at ``today``. Runs in one
    transaction so readers never observe a half-rewritten streak.
    """
    async with db.transaction() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                DELETE FROM daily_completions
                WHERE user_id = %s AND completed_on >= %s AND completed_on <= %s
                """,
                (user_id, clear_from, today)
            )
            if notes:
                await cur.executemany(
                    """
                    INSERT INTO daily_completions (user_id, completed_on, note)
                    VALUES (%s, %s, %s)
                    """,
                    [
                        (user_id, day, note)
                        for day, note in zip(days_back(today, len(notes)), notes)
                    ]
                )
    logger.info(
        f"Rewrote completions for user {user_id}: cleared {clear_from.isoformat()}..{today.isoformat()}, "
        f"inserted {len(notes)} days"
    )
