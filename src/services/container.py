"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    The notifier and the reminder manager are injected.
    """

    # Infrastructure dependencies (injected)
    notifier: object  # NotificationSink
    reminder_manager: Optional[object] = None  # ReminderManager (optional, set after bot creation)

    # Services (lazy-loaded via properties)
    _challenge_service: Optional[object] = field(default=None, init=False, repr=False)
    _conversation_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def challenge_service(self):
        """Get ChallengeService instance (lazy-loaded)"""
        if self._challenge_service is None:
            from src.services.challenge_service import ChallengeService
            self._challenge_service = ChallengeService(self.notifier)
            logger.debug("ChallengeService instantiated")
        return self._challenge_service

    @property
    def conversation_service(self):
        """Get ConversationService instance (lazy-loaded)"""
        if self._conversation_service is None:
            from src.services.conversation_service import ConversationService
            self._conversation_service = ConversationService(self.challenge_service)
            logger.debug("ConversationService instantiated")
        return self._conversation_service


# Global container instance (initialized in create_bot_application)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before handling updates."
        )
    return _container


def init_container(
    notifier: object,
    reminder_manager: Optional[object] = None
) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        notifier: NotificationSink used for pushes
        reminder_manager: Optional ReminderManager instance (can be set later)

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(
        notifier=notifier,
        reminder_manager=reminder_manager
    )

    logger.info("Service container initialized")
    return _container


def set_reminder_manager(reminder_manager: object) -> None:
    """
    Set the reminder manager on the global container.

    Args:
        reminder_manager: ReminderManager instance
    """
    if _container is None:
        raise RuntimeError("Service container not initialized")

    _container.reminder_manager = reminder_manager
    logger.info("ReminderManager set on service container")
