"""Telegram authorization utilities"""
import logging
from typing import Optional, Union

from src.config import ADMIN_TELEGRAM_IDS

logger = logging.getLogger(__name__)


def is_admin(telegram_id: Optional[Union[int, str]]) -> bool:
    """
    Check if user may use the administrative streak tools

    Normalizes input to handle type variations (int/str) and whitespace.
    With no ADMIN_TELEGRAM_IDS configured everyone is allowed.
    """
    # Handle None case explicitly
    if telegram_id is None:
        logger.debug("Admin check: telegram_id is None, returning False")
        return False

    if not ADMIN_TELEGRAM_IDS:
        return True

    # Normalize input: convert to string and strip whitespace
    normalized_id = str(telegram_id).strip()
    result = normalized_id in ADMIN_TELEGRAM_IDS

    logger.debug(
        f"Admin check: input='{telegram_id}' (type: {type(telegram_id).__name__}), "
        f"normalized='{normalized_id}', result={result}"
    )

    return result
