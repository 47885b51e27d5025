"""
Service Layer Package

This package contains business logic services that separate concerns between
the presentation layer (Telegram handlers) and the data access layer (database queries).

Core Services:
- ChallengeService: joining, completions, undo, participant board, admin streaks
- ConversationService: free-text replies for pending multi-step flows
- TelegramNotifier: achievement congratulations and reminders
"""

from src.services.container import ServiceContainer, get_container, init_container, set_reminder_manager
from src.services.challenge_service import ChallengeService
from src.services.conversation_service import ConversationService
from src.services.notifier import NotificationSink, TelegramNotifier

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "set_reminder_manager",
    "ChallengeService",
    "ConversationService",
    "NotificationSink",
    "TelegramNotifier",
]
