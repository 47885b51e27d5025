"""
Centralized Pydantic Input Validation Layer

Validates the free-text replies a pending conversation expects before any
domain operation runs.

Validation Categories:
1. Display Name - non-empty after trimming
2. Streak Value - whole, non-negative number of days
"""

import logging
from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# Upper bound for an administrative streak; keeps a typo from inserting
# millions of rows in one transaction
MAX_STREAK_DAYS = 10000


# ============================================================================
# DISPLAY NAME VALIDATION
# ============================================================================

class DisplayNameInput(BaseModel):
    """
    Validate the name a participant wants to be shown under

    Constraints:
    - At least one non-whitespace character
    - Whitespace is trimmed
    """
    text: str = Field(..., description="Display name")

    @field_validator('text')
    @classmethod
    def strip_and_require(cls, v: str) -> str:
        """Trim whitespace and reject empty names"""
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Name cannot be empty")
        return trimmed


# ============================================================================
# STREAK VALUE VALIDATION
# ============================================================================

class StreakValueInput(BaseModel):
    """
    Validate an administrative streak value typed as free text

    Constraints:
    - Must parse as a whole number (no decimals, no units)
    - 0 <= days <= MAX_STREAK_DAYS
    """
    days: int = Field(..., ge=0, le=MAX_STREAK_DAYS)

    @field_validator('days', mode='before')
    @classmethod
    def parse_text(cls, v: Any) -> Any:
        """Accept surrounding whitespace but nothing else"""
        if isinstance(v, str):
            stripped = v.strip()
            if not stripped.lstrip('-').isdigit():
                raise ValueError("Streak must be a whole number")
            return int(stripped)
        return v


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def format_validation_error(e: Exception) -> str:
    """
    Condense a Pydantic validation error into one line for logs and errors

    Args:
        e: ValidationError from Pydantic

    Returns:
        First error's field and message
    """
    if not isinstance(e, ValidationError):
        return str(e)

    errors = e.errors()
    if not errors:
        return "Validation failed"

    first_error = errors[0]
    loc = first_error.get('loc') or ('input',)
    field = loc[0] if isinstance(loc[0], str) else 'input'
    msg = first_error.get('msg', 'Invalid value')
    return f"{field}: {msg}"


def validate_display_name(text: Optional[str], user_id: Optional[int] = None) -> str:
    """
    Return the trimmed display name

    Raises:
        InvalidInputError: Name is empty or whitespace only
    """
    try:
        return DisplayNameInput(text=text or "").text
    except ValidationError as e:
        raise InvalidInputError(
            message=format_validation_error(e),
            field="display_name",
            value=text,
            user_id=user_id,
            operation="validate_display_name",
        ) from e


def parse_streak_value(text: Optional[str], user_id: Optional[int] = None) -> int:
    """
    Parse a streak value reply

    Raises:
        InvalidInputError: Not a whole number, negative, or above MAX_STREAK_DAYS
    """
    try:
        return StreakValueInput(days=text if text is not None else "").days
    except ValidationError as e:
        raise InvalidInputError(
            message=format_validation_error(e),
            field="streak_days",
            value=text,
            user_id=user_id,
            operation="parse_streak_value",
        ) from e
