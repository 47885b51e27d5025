"""
Database queries - re-export all query functions.

Module organization:
- participants.py: participant registry
- completions.py: day-keyed completion ledger
- achievements.py: one-shot milestone records, walk of fame
- conversation.py: pending multi-step conversation state
"""

# Participant registry
from src.db.queries.participants import (
    register_participant,
    participant_exists,
    get_participant,
    list_participants,
    list_participant_index,
)

# Completion ledger
from src.db.queries.completions import (
    mark_completed,
    unmark_completed,
    has_completed,
    completed_users_on,
    get_completion_days,
    get_completions_by_day,
    replace_recent_completions,
)

# Achievements
from src.db.queries.achievements import (
    has_achievement,
    record_achievement,
    get_walk_of_fame,
)

# Conversation state
from src.db.queries.conversation import (
    save_pending_conversation,
    get_pending_conversation,
    clear_pending_conversation,
)

__all__ = [
    "register_participant",
    "participant_exists",
    "get_participant",
    "list_participants",
    "list_participant_index",
    "mark_completed",
    "unmark_completed",
    "has_completed",
    "completed_users_on",
    "get_completion_days",
    "get_completions_by_day",
    "replace_recent_completions",
    "has_achievement",
    "record_achievement",
    "get_walk_of_fame",
    "save_pending_conversation",
    "get_pending_conversation",
    "clear_pending_conversation",
]
