"""Pending conversation queries

At most one row per (user_id, chat_id); writing a new flow replaces the old one.
"""
import logging
from typing import Optional
from psycopg.types.json import Jsonb
from src.db.connection import db, store_operation
from src.models.conversation import PendingConversation

logger = logging.getLogger(__name__)


@store_operation("save_pending_conversation")
async def save_pending_conversation(pending: PendingConversation) -> None:
    """Persist a pending flow, overwriting any earlier one for the same key"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO pending_conversations (user_id, chat_id, kind, context)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (user_id, chat_id) DO UPDATE SET
                    kind = EXCLUDED.kind,
                    context = EXCLUDED.context,
                    created_at = CURRENT_TIMESTAMP
                """,
                (pending.user_id, pending.chat_id, pending.kind.value, Jsonb(pending.context_payload()))
            )
            await conn.commit()
    logger.debug(f"Saved {pending.kind.value} conversation for user {pending.user_id} in chat {pending.chat_id}")


@store_operation("get_pending_conversation")
async def get_pending_conversation(user_id: int, chat_id: int) -> Optional[PendingConversation]:
    """Current pending flow for (user_id, chat_id), if any"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT user_id, chat_id, kind, context, created_at
                FROM pending_conversations
                WHERE user_id = %s AND chat_id = %s
                """,
                (user_id, chat_id)
            )
            row = await cur.fetchone()
            return PendingConversation.from_row(row) if row else None


@store_operation("clear_pending_conversation")
async def clear_pending_conversation(user_id: int, chat_id: int) -> None:
    """Delete the pending flow for (user_id, chat_id)"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM pending_conversations WHERE user_id = %s AND chat_id = %s",
                (user_id, chat_id)
            )
            await conn.commit()
    logger.debug(f"Cleared conversation for user {user_id} in chat {chat_id}")
