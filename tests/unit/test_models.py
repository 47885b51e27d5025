"""Unit tests for Pydantic models"""
import pytest
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo
from pydantic import ValidationError

from src.models.achievement import AchievementType, FameEntry
from src.models.conversation import (
    AwaitingCustomStreak,
    AwaitingName,
    ConversationKind,
    PendingConversation,
    conversation_state_adapter,
)
from src.models.participant import Participant


# ============================================================================
# Participant Tests
# ============================================================================

class TestParticipant:

    def test_name_prefers_display_name(self, participant_factory):
        assert participant_factory(display_name="Anna", username="anna_k").name == "Anna"

    def test_name_falls_back_to_handle_then_id(self, participant_factory):
        assert participant_factory(user_id=5, display_name=None, username="anna_k").name == "anna_k"
        assert participant_factory(user_id=5, display_name=None, username=None).name == "5"

    def test_user_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            Participant(user_id=0, chat_id=1, joined_at=datetime.now(timezone.utc))

    def test_joined_on_uses_reference_timezone(self, participant_factory):
        """22:00 UTC is already the next day at UTC+5"""
        p = participant_factory(joined_at=datetime(2024, 1, 1, 22, 0, tzinfo=timezone.utc))
        assert p.joined_on(ZoneInfo("Asia/Yekaterinburg")) == date(2024, 1, 2)
        assert p.joined_on(ZoneInfo("UTC")) == date(2024, 1, 1)


# ============================================================================
# Achievement Tests
# ============================================================================

class TestAchievementType:

    def test_values_and_thresholds(self):
        assert AchievementType.DAYS_100.value == "100_days"
        assert AchievementType.DAYS_100.threshold == 100
        assert AchievementType.DAYS_365.value == "365_days"
        assert AchievementType.DAYS_365.threshold == 365

    def test_fame_entry_flags(self):
        entry = FameEntry(name="Anna", achieved_at_100=date(2024, 1, 1))
        assert entry.has_100
        assert not entry.has_365


# ============================================================================
# Conversation State Tests
# ============================================================================

class TestConversationState:

    def test_discriminated_union_picks_variant(self):
        state = conversation_state_adapter.validate_python(
            {"kind": "awaiting_custom_streak", "target_user_id": 7}
        )
        assert isinstance(state, AwaitingCustomStreak)
        assert state.target_user_id == 7

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            conversation_state_adapter.validate_python({"kind": "awaiting_pizza"})

    def test_custom_streak_requires_target(self):
        with pytest.raises(ValidationError):
            conversation_state_adapter.validate_python({"kind": "awaiting_custom_streak"})

    def test_pending_kind_and_payload(self):
        pending = PendingConversation(user_id=1, chat_id=2, state=AwaitingCustomStreak(target_user_id=3))
        assert pending.kind == ConversationKind.AWAITING_CUSTOM_STREAK
        assert pending.context_payload() == {"target_user_id": 3}

    def test_name_payload_is_empty(self):
        pending = PendingConversation(user_id=1, chat_id=2, state=AwaitingName())
        assert pending.kind == ConversationKind.AWAITING_NAME
        assert pending.context_payload() == {}

    def test_from_row_round_trip(self):
        row = {
            "user_id": 1,
            "chat_id": 2,
            "kind": "awaiting_custom_streak",
            "context": {"target_user_id": 3},
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        pending = PendingConversation.from_row(row)
        assert pending.state == AwaitingCustomStreak(target_user_id=3)
        assert pending.created_at == row["created_at"]

    def test_from_row_with_null_context(self):
        row = {"user_id": 1, "chat_id": 2, "kind": "awaiting_name", "context": None}
        assert isinstance(PendingConversation.from_row(row).state, AwaitingName)
