"""Unit tests for database queries (src/db/queries/)"""
import pytest
from datetime import datetime, date, timezone, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg

from src.db import queries
from src.exceptions import (
    AlreadyCompletedError,
    ConnectionError,
    InvalidInputError,
    NothingToUndoError,
    QueryError,
)
from src.models.achievement import AchievementType
from src.models.conversation import AwaitingCustomStreak, AwaitingName, ConversationKind, PendingConversation

TODAY = date(2024, 1, 15)
JOINED = datetime(2024, 1, 1, 6, 0, tzinfo=timezone.utc)


def participant_row(user_id=111, chat_id=-1001, username="anna", display_name="Anna", joined_at=JOINED):
    return {
        "user_id": user_id,
        "chat_id": chat_id,
        "username": username,
        "display_name": display_name,
        "joined_at": joined_at,
    }


# ============================================================================
# Participant Registry Tests
# ============================================================================

@pytest.mark.asyncio
async def test_register_participant_upserts(mock_db_connection, mock_db_cursor):
    """Registering writes an upsert that rebinds chat_id"""
    mock_db_cursor.fetchone.return_value = participant_row()

    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        participant = await queries.register_participant(111, -1001, display_name="Anna", username="anna")

    sql, params = mock_db_cursor.execute.call_args[0]
    assert "INSERT INTO participants" in sql
    assert "ON CONFLICT (user_id) DO UPDATE" in sql
    assert "chat_id = EXCLUDED.chat_id" in sql
    assert "joined_at" not in sql.split("DO UPDATE SET")[1].split("RETURNING")[0]
    assert params == (111, -1001, "anna", "Anna")
    assert participant.name == "Anna"
    mock_db_connection.commit.assert_called_once()


@pytest.mark.asyncio
async def test_register_participant_defaults_name_to_handle(mock_db_connection, mock_db_cursor):
    """Without a display name the Telegram handle is stored"""
    mock_db_cursor.fetchone.return_value = participant_row(display_name="anna")

    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        await queries.register_participant(111, -1001, username="anna")

    params = mock_db_cursor.execute.call_args[0][1]
    assert params[3] == "anna"


@pytest.mark.asyncio
async def test_register_participant_rejects_non_positive_id():
    """User IDs must be positive"""
    with pytest.raises(InvalidInputError):
        await queries.register_participant(0, -1001, display_name="Anna")


@pytest.mark.asyncio
async def test_participant_exists(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchone.return_value = {"?column?": 1}

    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        assert await queries.participant_exists(111) is True

        mock_db_cursor.fetchone.return_value = None
        assert await queries.participant_exists(222) is False


@pytest.mark.asyncio
async def test_list_participants_order(mock_db_connection, mock_db_cursor):
    """Display order is newest first, index order oldest first"""
    mock_db_cursor.fetchall.return_value = [participant_row()]

    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        await queries.list_participants()
        assert "ORDER BY joined_at DESC" in mock_db_cursor.execute.call_args[0][0]

        await queries.list_participants(newest_first=False)
        assert "ORDER BY joined_at ASC" in mock_db_cursor.execute.call_args[0][0]


@pytest.mark.asyncio
async def test_list_participant_index_uses_name_fallback(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchall.return_value = [
        participant_row(user_id=1, display_name=None, username="bob"),
        participant_row(user_id=2, display_name=None, username=None),
    ]

    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        entries = await queries.list_participant_index()

    assert [(e.user_id, e.name) for e in entries] == [(1, "bob"), (2, "2")]


# ============================================================================
# Completion Ledger Tests
# ============================================================================

@pytest.mark.asyncio
async def test_mark_completed_inserts(mock_db_connection, mock_db_cursor):
    """A new (user, day) is inserted with its note"""
    mock_db_cursor.fetchone.return_value = {"user_id": 111}

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        await queries.mark_completed(111, TODAY, "💪")

    sql, params = mock_db_cursor.execute.call_args[0]
    assert "ON CONFLICT (user_id, completed_on) DO NOTHING" in sql
    assert params == (111, TODAY, "💪")
    mock_db_connection.commit.assert_called_once()


@pytest.mark.asyncio
async def test_mark_completed_conflict_raises_already_completed(mock_db_connection, mock_db_cursor):
    """The uniqueness constraint is the authoritative duplicate signal"""
    mock_db_cursor.fetchone.return_value = None

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        with pytest.raises(AlreadyCompletedError) as exc_info:
            await queries.mark_completed(111, TODAY, "💪")

    assert exc_info.value.day == TODAY
    assert exc_info.value.user_id == 111


@pytest.mark.asyncio
async def test_unmark_completed_deletes(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchone.return_value = {"user_id": 111}

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        await queries.unmark_completed(111, TODAY)

    assert "DELETE FROM daily_completions" in mock_db_cursor.execute.call_args[0][0]


@pytest.mark.asyncio
async def test_unmark_completed_nothing_to_undo(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchone.return_value = None

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        with pytest.raises(NothingToUndoError):
            await queries.unmark_completed(111, TODAY)


@pytest.mark.asyncio
async def test_completed_users_on(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchall.return_value = [{"user_id": 1}, {"user_id": 2}]

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        result = await queries.completed_users_on(TODAY)

    assert result == {1, 2}


@pytest.mark.asyncio
async def test_get_completions_by_day_groups_rows(mock_db_connection, mock_db_cursor):
    yesterday = TODAY - timedelta(days=1)
    mock_db_cursor.fetchall.return_value = [
        {"completed_on": yesterday, "user_id": 1},
        {"completed_on": yesterday, "user_id": 2},
        {"completed_on": TODAY, "user_id": 1},
    ]

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        result = await queries.get_completions_by_day(until=TODAY)

    assert result == {yesterday: {1, 2}, TODAY: {1}}


@pytest.mark.asyncio
async def test_replace_recent_completions_single_transaction(mock_db_connection, mock_db_cursor):
    """Delete the range, then insert one row per note ending today"""
    with patch('src.db.queries.completions.db.transaction') as mock_tx:
        mock_tx.return_value.__aenter__.return_value = mock_db_connection

        await queries.replace_recent_completions(
            111, TODAY, TODAY - timedelta(days=3), ["a", "b", "c"]
        )

    delete_sql, delete_params = mock_db_cursor.execute.call_args[0]
    assert "DELETE FROM daily_completions" in delete_sql
    assert delete_params == (111, TODAY - timedelta(days=3), TODAY)

    insert_sql, rows = mock_db_cursor.executemany.call_args[0]
    assert "INSERT INTO daily_completions" in insert_sql
    assert rows == [
        (111, TODAY, "a"),
        (111, TODAY - timedelta(days=1), "b"),
        (111, TODAY - timedelta(days=2), "c"),
    ]


@pytest.mark.asyncio
async def test_replace_recent_completions_zero_days(mock_db_connection, mock_db_cursor):
    """No notes means delete only"""
    with patch('src.db.queries.completions.db.transaction') as mock_tx:
        mock_tx.return_value.__aenter__.return_value = mock_db_connection

        await queries.replace_recent_completions(111, TODAY, TODAY - timedelta(days=1), [])

    mock_db_cursor.execute.assert_called_once()
    mock_db_cursor.executemany.assert_not_called()


# ============================================================================
# Error Wrapping Tests
# ============================================================================

@pytest.mark.asyncio
async def test_driver_error_wrapped_as_query_error(mock_db_connection, mock_db_cursor):
    """psycopg errors leave the query layer as StoreFailureError subclasses"""
    mock_db_cursor.execute.side_effect = psycopg.errors.UndefinedTable("relation does not exist")

    with patch('src.db.queries.completions.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        with pytest.raises(QueryError) as exc_info:
            await queries.has_completed(111, TODAY)

    assert exc_info.value.operation == "has_completed"
    assert exc_info.value.user_id == 111


@pytest.mark.asyncio
async def test_operational_error_wrapped_as_connection_error():
    with patch('src.db.queries.participants.db.connection') as mock_db:
        mock_db.return_value.__aenter__.side_effect = psycopg.OperationalError("server closed the connection")

        with pytest.raises(ConnectionError):
            await queries.get_participant(111)


# ============================================================================
# Achievement Tests
# ============================================================================

@pytest.mark.asyncio
async def test_record_achievement_reports_insert(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchone.return_value = {"user_id": 111}

    with patch('src.db.queries.achievements.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        assert await queries.record_achievement(111, AchievementType.DAYS_100, TODAY) is True

        mock_db_cursor.fetchone.return_value = None
        assert await queries.record_achievement(111, AchievementType.DAYS_100, TODAY) is False

    params = mock_db_cursor.execute.call_args[0][1]
    assert params == (111, "100_days", TODAY)


@pytest.mark.asyncio
async def test_get_walk_of_fame(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchall.return_value = [
        {"name": "Anna", "achieved_at_100": date(2023, 1, 1), "achieved_at_365": date(2023, 10, 1)},
        {"name": "Bob", "achieved_at_100": date(2023, 12, 1), "achieved_at_365": None},
    ]

    with patch('src.db.queries.achievements.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        fame = await queries.get_walk_of_fame()

    assert [f.name for f in fame] == ["Anna", "Bob"]
    assert fame[0].has_365 and fame[0].has_100
    assert fame[1].has_100 and not fame[1].has_365


# ============================================================================
# Conversation State Tests
# ============================================================================

@pytest.mark.asyncio
async def test_save_pending_conversation_stores_kind_and_context(mock_db_connection, mock_db_cursor):
    pending = PendingConversation(
        user_id=111, chat_id=-1001, state=AwaitingCustomStreak(target_user_id=222)
    )

    with patch('src.db.queries.conversation.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        await queries.save_pending_conversation(pending)

    sql, params = mock_db_cursor.execute.call_args[0]
    assert "ON CONFLICT (user_id, chat_id) DO UPDATE" in sql
    assert params[:3] == (111, -1001, "awaiting_custom_streak")
    assert params[3].obj == {"target_user_id": 222}


@pytest.mark.asyncio
async def test_get_pending_conversation_parses_row(mock_db_connection, mock_db_cursor):
    mock_db_cursor.fetchone.return_value = {
        "user_id": 111,
        "chat_id": -1001,
        "kind": "awaiting_name",
        "context": {},
        "created_at": JOINED,
    }

    with patch('src.db.queries.conversation.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        pending = await queries.get_pending_conversation(111, -1001)

    assert pending.kind == ConversationKind.AWAITING_NAME
    assert isinstance(pending.state, AwaitingName)


@pytest.mark.asyncio
async def test_get_pending_conversation_none(mock_db_connection, mock_db_cursor):
    with patch('src.db.queries.conversation.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        assert await queries.get_pending_conversation(111, -1001) is None


@pytest.mark.asyncio
async def test_store_failure_carries_positional_chat(mock_db_connection, mock_db_cursor):
    """Positional user and chat arguments end up on the store error"""
    mock_db_cursor.execute.side_effect = psycopg.errors.UndefinedTable("relation does not exist")

    with patch('src.db.queries.conversation.db.connection') as mock_db:
        mock_db.return_value.__aenter__.return_value = mock_db_connection

        with pytest.raises(QueryError) as exc_info:
            await queries.clear_pending_conversation(111, -1001)

    assert exc_info.value.operation == "clear_pending_conversation"
    assert exc_info.value.user_id == 111
    assert exc_info.value.chat_id == -1001


@pytest.mark.asyncio
async def test_store_failure_carries_identity_of_saved_conversation():
    """User and chat are read from the pending conversation being saved"""
    pending = PendingConversation(user_id=111, chat_id=-1001, state=AwaitingName())

    with patch('src.db.queries.conversation.db.connection') as mock_db:
        mock_db.return_value.__aenter__.side_effect = psycopg.OperationalError("server closed the connection")

        with pytest.raises(ConnectionError) as exc_info:
            await queries.save_pending_conversation(pending)

    assert exc_info.value.user_id == 111
    assert exc_info.value.chat_id == -1001
