"""Helper functions shared by the Telegram handlers"""
import logging
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from src.exceptions import (
    AlreadyCompletedError,
    HabitTrackerError,
    InvalidInputError,
    NothingToUndoError,
    UnknownParticipantError,
)
from src.i18n.translations import t
from src.utils.datetime_helpers import today_local

logger = logging.getLogger(__name__)

INVALID_INPUT_KEYS = {
    "display_name": "empty_name",
    "streak_days": "invalid_streak_value",
}


def error_message(error: HabitTrackerError) -> str:
    """
    User-facing text for a domain error

    Recoverable errors get a specific explanation; everything else
    (store failures, notification failures) gets the generic apology.
    """
    if isinstance(error, AlreadyCompletedError):
        if error.day is not None and error.day < today_local():
            return t("already_completed_yesterday")
        return t("already_completed")
    if isinstance(error, NothingToUndoError):
        return t("no_completion_today")
    if isinstance(error, UnknownParticipantError):
        return t("not_a_participant")
    if isinstance(error, InvalidInputError):
        return t(INVALID_INPUT_KEYS.get(error.field, "error_try_later"))
    return t("error_try_later")


async def reply_error(update: Update, error: HabitTrackerError) -> None:
    """Tell the user what went wrong; the error itself was logged when raised"""
    message = update.effective_message
    if message is None:
        return
    await message.reply_text(error_message(error))


def describe_update(update: Update) -> dict:
    """Fields logged for every inbound update"""
    info = {
        "update_id": update.update_id,
        "chat_id": update.effective_chat.id if update.effective_chat else None,
        "user_id": update.effective_user.id if update.effective_user else None,
    }
    if update.callback_query is not None:
        info["update_type"] = "callback_query"
        info["data"] = update.callback_query.data
    elif update.message is not None:
        info["update_type"] = "message"
        info["text"] = update.message.text
        info["message_id"] = update.message.message_id
    else:
        info["update_type"] = "other"
    if update.effective_user is not None:
        info["from"] = update.effective_user.username
    return info


async def log_update(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Structured log line for each inbound update (runs before all other handlers)"""
    info = describe_update(update)
    logger.info(
        f"Received {info['update_type']} update {info['update_id']} "
        f"from user {info['user_id']} in chat {info['chat_id']}",
        extra={"update": info},
    )


async def error_handler(update: Optional[object], context: ContextTypes.DEFAULT_TYPE) -> None:
    """Last-resort handler for anything a handler let escape"""
    logger.error(f"Unhandled error while processing update: {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message is not None:
        try:
            await update.effective_message.reply_text(t("error_try_later"))
        except Exception as e:
            logger.error(f"Failed to send error message: {e}")
