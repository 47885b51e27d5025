"""Achievement queries"""
import logging
from datetime import date
from src.db.connection import db, store_operation
from src.models.achievement import AchievementType, FameEntry

logger = logging.getLogger(__name__)


@store_operation("has_achievement")
async def has_achievement(user_id: int, achievement_type: AchievementType) -> bool:
    """Check if user already holds an achievement"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT 1 FROM achievements
                WHERE user_id = %s AND achievement_type = %s
                """,
                (user_id, achievement_type.value)
            )
            return await cur.fetchone() is not None


@store_operation("record_achievement")
async def record_achievement(
    user_id: int,
    achievement_type: AchievementType,
    achieved_at: date
) -> bool:
    """
    Insert an achievement once

    Returns:
        True if this call inserted the row, False if it already existed
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO achievements (user_id, achievement_type, achieved_at)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, achievement_type) DO NOTHING
                RETURNING user_id
                """,
                (user_id, achievement_type.value, achieved_at)
            )
            inserted = await cur.fetchone()
            await conn.commit()

    if inserted:
        logger.info(f"Recorded achievement {achievement_type.value} for user {user_id}")
    return inserted is not None


@store_operation("get_walk_of_fame")
async def get_walk_of_fame() -> list[FameEntry]:
    """
    Participants holding any achievement

    Ordered with 365-day holders first, then by most recent achievement.
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT
                    COALESCE(p.display_name, p.username, p.user_id::text) AS name,
                    a100.achieved_at AS achieved_at_100,
                    a365.achieved_at AS achieved_at_365
                FROM participants p
                LEFT JOIN achievements a100
                    ON p.user_id = a100.user_id AND a100.achievement_type = %s
                LEFT JOIN achievements a365
                    ON p.user_id = a365.user_id AND a365.achievement_type = %s
                WHERE a100.user_id IS NOT NULL OR a365.user_id IS NOT NULL
                ORDER BY
                    a365.user_id IS NULL,
                    a365.achieved_at DESC,
                    a100.achieved_at DESC
                """,
                (AchievementType.DAYS_100.value, AchievementType.DAYS_365.value)
            )
            rows = await cur.fetchall()
            return [FameEntry(**row) for row in rows]
