"""
Standardized exception hierarchy for the habit streak bot
Provides rich context, consistent logging, and a stable error taxonomy
that the Telegram layer maps to user-facing messages
"""

from datetime import date, datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class HabitTrackerError(Exception):
    """
    Base exception for all habit tracker errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - Structured context (operation, user, chat)
    - Automatic logging

    Example:
        raise HabitTrackerError(
            message="Failed to save completion",
            user_id=123456,
            chat_id=-100200300,
            operation="mark_completed",
            context={"day": "2024-01-15"}
        )
    """

    # Recoverable errors override this so they don't flood the error log
    log_level: int = logging.ERROR

    def __init__(
        self,
        message: str,
        user_id: Optional[int] = None,
        chat_id: Optional[int] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.chat_id = chat_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "chat_id": self.chat_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.log(
                self.log_level,
                f"{self.__class__.__name__}: {self.message}",
                extra=log_data,
                exc_info=self.cause,
            )
        else:
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data)


# ==========================================
# Domain Errors (recoverable, surfaced to the user)
# ==========================================

class AlreadyCompletedError(HabitTrackerError):
    """A completion for (user, day) already exists"""

    log_level = logging.INFO

    def __init__(self, message: str = "Already completed", day: Optional[date] = None, **kwargs):
        self.day = day
        context = kwargs.pop("context", None) or {}
        context["day"] = day.isoformat() if day else None
        super().__init__(message=message, context=context, **kwargs)


class NothingToUndoError(HabitTrackerError):
    """Undo requested but no completion exists for today"""

    log_level = logging.INFO

    def __init__(self, message: str = "Nothing to undo", day: Optional[date] = None, **kwargs):
        self.day = day
        context = kwargs.pop("context", None) or {}
        context["day"] = day.isoformat() if day else None
        super().__init__(message=message, context=context, **kwargs)


class UnknownParticipantError(HabitTrackerError):
    """Operation referenced a user that is not registered"""

    log_level = logging.WARNING

    def __init__(self, message: str = "Unknown participant", target_user_id: Optional[int] = None, **kwargs):
        self.target_user_id = target_user_id
        context = kwargs.pop("context", None) or {}
        context["target_user_id"] = target_user_id
        super().__init__(message=message, context=context, **kwargs)


class InvalidInputError(HabitTrackerError):
    """
    Raised when user input fails validation

    Examples:
    - Empty display name
    - Non-integer or negative streak value

    Example:
        raise InvalidInputError(
            message="Streak must be a non-negative integer",
            field="streak_days",
            value="abc",
            user_id=123456
        )
    """

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        context = kwargs.pop("context", None) or {}
        context.update({"field": field, "value": value})
        super().__init__(message=message, context=context, **kwargs)


# ==========================================
# Store Errors
# ==========================================

class StoreFailureError(HabitTrackerError):
    """
    Base class for persistence failures

    Never recovered locally: propagated to the caller and surfaced
    as a generic failure message.
    """
    pass


class ConnectionError(StoreFailureError):
    """Database connection failed"""

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(message=message, **kwargs)


class QueryError(StoreFailureError):
    """Database query execution failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        context = kwargs.pop("context", None) or {}
        if query:
            context["query"] = query
        super().__init__(message=message, context=context, **kwargs)


# ==========================================
# Transport / Configuration Errors
# ==========================================

class NotificationError(HabitTrackerError):
    """Sending a notification to a chat failed"""
    pass


class ConfigurationError(HabitTrackerError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        context = kwargs.pop("context", None) or {}
        context["config_key"] = config_key
        super().__init__(message=message, context=context, **kwargs)


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[int] = None,
    chat_id: Optional[int] = None,
    context: Optional[Dict[str, Any]] = None
) -> HabitTrackerError:
    """
    Wrap external exceptions (psycopg, telegram) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        chat_id: Chat ID if applicable
        context: Additional context

    Returns:
        Appropriate HabitTrackerError subclass

    Example:
        try:
            await cur.execute(query)
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="mark_completed",
                user_id=123456,
            )
    """
    import psycopg
    import telegram.error

    common = {
        "user_id": user_id,
        "chat_id": chat_id,
        "operation": operation,
        "context": context,
        "cause": error,
    }

    # Database errors
    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(message=f"Database connection failed: {error}", **common)
    elif isinstance(error, psycopg.Error):
        return QueryError(message=f"Database query failed: {error}", **common)

    # Telegram errors
    elif isinstance(error, telegram.error.TelegramError):
        return NotificationError(message=f"Telegram request failed: {error}", **common)

    # Generic fallback
    else:
        return HabitTrackerError(message=f"{operation} failed: {error}", **common)
