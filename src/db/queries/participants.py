"""Participant registry queries"""
import logging
from typing import Optional
from src.db.connection import db, store_operation
from src.exceptions import InvalidInputError
from src.models.participant import Participant, ParticipantIndexEntry

logger = logging.getLogger(__name__)

PARTICIPANT_COLUMNS = "user_id, chat_id, username, display_name, joined_at"


@store_operation("register_participant")
async def register_participant(
    user_id: int,
    chat_id: int,
    display_name: Optional[str] = None,
    username: Optional[str] = None
) -> Participant:
    """
    Create or overwrite a participant

    Re-registering rebinds the participant to ``chat_id`` and replaces the
    display name; ``joined_at`` is set on first registration only.

    Args:
        user_id: Telegram user ID (positive)
        chat_id: Chat the participant joined from
        display_name: Chosen name; falls back to the Telegram handle when empty
        username: Telegram handle

    Returns:
        The stored Participant
    """
    if user_id <= 0:
        raise InvalidInputError(
            "user_id must be a positive identifier",
            field="user_id",
            value=user_id,
            operation="register_participant",
        )

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                INSERT INTO participants (user_id, chat_id, username, display_name)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (user_id) DO UPDATE SET
                    chat_id = EXCLUDED.chat_id,
                    username = EXCLUDED.username,
                    display_name = EXCLUDED.display_name
                RETURNING {PARTICIPANT_COLUMNS}
                """,
                (user_id, chat_id, username, display_name or username)
            )
            row = await cur.fetchone()
            await conn.commit()

    logger.info(f"Registered participant {user_id} in chat {chat_id}")
    return Participant(**row)


@store_operation("participant_exists")
async def participant_exists(user_id: int) -> bool:
    """Check if a user is registered"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT 1 FROM participants WHERE user_id = %s",
                (user_id,)
            )
            return await cur.fetchone() is not None


@store_operation("get_participant")
async def get_participant(user_id: int) -> Optional[Participant]:
    """Fetch one participant, or None if not registered"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {PARTICIPANT_COLUMNS} FROM participants WHERE user_id = %s",
                (user_id,)
            )
            row = await cur.fetchone()
            return Participant(**row) if row else None


@store_operation("list_participants")
async def list_participants(newest_first: bool = True) -> list[Participant]:
    """
    All participants ordered by join time

    Args:
        newest_first: True for display order (most recent joiners first),
            False for the administrative index (oldest first)
    """
    direction = "DESC" if newest_first else "ASC"
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {PARTICIPANT_COLUMNS}
                FROM participants
                ORDER BY joined_at {direction}, user_id {direction}
                """
            )
            rows = await cur.fetchall()
            return [Participant(**row) for row in rows]


async def list_participant_index() -> list[ParticipantIndexEntry]:
    """(user_id, name) pairs, oldest joiner first"""
    participants = await list_participants(newest_first=False)
    return [ParticipantIndexEntry(user_id=p.user_id, name=p.name) for p in participants]
