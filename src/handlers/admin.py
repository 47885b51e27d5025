"""Administrative handlers: participant index and streak adjustment"""
import logging
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes

from src.exceptions import HabitTrackerError
from src.handlers.message_helpers import reply_error
from src.i18n.translations import t, day_word
from src.services import get_container
from src.utils.auth import is_admin
from src.utils.formatters import format_participant_index

logger = logging.getLogger(__name__)

ADJUST_PREFIX = "adjust_streak"
SET_PREFIX = "set_streak"
CUSTOM_PREFIX = "custom_streak"

PRESET_STREAKS = [0, 7, 30, 100]


def participants_keyboard(entries) -> InlineKeyboardMarkup:
    """One button per participant"""
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(f"👤 {entry.name}", callback_data=f"{ADJUST_PREFIX}:{entry.user_id}")]
        for entry in entries
    ])


def presets_keyboard(target_user_id: int) -> InlineKeyboardMarkup:
    """Preset streak values, two per row, plus the custom value button"""
    buttons = [
        InlineKeyboardButton(
            t("btn_days", days=days),
            callback_data=f"{SET_PREFIX}:{target_user_id}:{days}",
        )
        for days in PRESET_STREAKS
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    rows.append([InlineKeyboardButton(t("btn_custom_value"), callback_data=f"{CUSTOM_PREFIX}:{target_user_id}")])
    return InlineKeyboardMarkup(rows)


def parse_callback_ids(data: str, expected_parts: int) -> list[int]:
    """
    Integer fields of ``prefix:id[:value]`` callback data

    Raises:
        ValueError: Wrong number of parts or non-integer fields
    """
    parts = data.split(":")
    if len(parts) != expected_parts:
        raise ValueError(f"Malformed callback data: {data}")
    return [int(part) for part in parts[1:]]


async def _deny_non_admin(update: Update) -> bool:
    """Reply with the admin-only notice; True if the user was refused"""
    if is_admin(update.effective_user.id):
        return False

    logger.warning(f"Non-admin {update.effective_user.id} tried an admin action")
    if update.callback_query is not None:
        await update.callback_query.answer(t("admin_only"), show_alert=True)
    else:
        await update.effective_message.reply_text(t("admin_only"))
    return True


async def list_user_ids(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/listuserids: participant names and IDs, oldest joiner first"""
    if await _deny_non_admin(update):
        return

    try:
        index = await get_container().challenge_service.handle_list_participant_ids(
            update.effective_user.id, update.effective_chat.id
        )
        await update.effective_message.reply_text(format_participant_index(index.entries))
    except HabitTrackerError as e:
        await reply_error(update, e)


async def adjust_streak(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/adjuststreak: pick the participant whose streak to set"""
    if await _deny_non_admin(update):
        return

    try:
        index = await get_container().challenge_service.handle_list_participant_ids(
            update.effective_user.id, update.effective_chat.id
        )
        if not index.entries:
            await update.effective_message.reply_text(t("no_participants"))
            return

        await update.effective_message.reply_text(
            t("choose_participant"),
            reply_markup=participants_keyboard(index.entries),
        )
    except HabitTrackerError as e:
        await reply_error(update, e)


async def adjust_streak_selected(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Participant picked: offer preset values"""
    if await _deny_non_admin(update):
        return

    query = update.callback_query
    await query.answer()

    try:
        (target_user_id,) = parse_callback_ids(query.data, 2)
    except ValueError:
        logger.error(f"Invalid callback data format: {query.data}")
        return

    try:
        target = await get_container().challenge_service.require_participant(
            target_user_id, "adjust_streak_selected", update.effective_chat.id
        )
        await query.edit_message_text(
            t("choose_streak_value", name=target.name),
            reply_markup=presets_keyboard(target_user_id),
        )
    except HabitTrackerError as e:
        await reply_error(update, e)


async def set_streak_preset(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Preset value picked: rewrite the streak immediately"""
    if await _deny_non_admin(update):
        return

    query = update.callback_query
    await query.answer()

    try:
        target_user_id, days = parse_callback_ids(query.data, 3)
    except ValueError:
        logger.error(f"Invalid callback data format: {query.data}")
        return

    try:
        result = await get_container().challenge_service.handle_admin_set_streak(
            update.effective_user.id, update.effective_chat.id, target_user_id, days
        )
        await query.edit_message_text(
            t("streak_set", name=result.target_name, days=result.days, day_word=day_word(result.days))
        )
    except HabitTrackerError as e:
        await query.edit_message_text(t("streak_set_error", error=e.message))


async def custom_streak_selected(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Custom value picked: wait for the admin to type a number"""
    if await _deny_non_admin(update):
        return

    query = update.callback_query
    await query.answer()

    try:
        (target_user_id,) = parse_callback_ids(query.data, 2)
    except ValueError:
        logger.error(f"Invalid callback data format: {query.data}")
        return

    try:
        target = await get_container().challenge_service.handle_admin_begin_custom_streak(
            update.effective_user.id, update.effective_chat.id, target_user_id
        )
        await query.edit_message_text(t("enter_custom_streak", name=target.name))
    except HabitTrackerError as e:
        await reply_error(update, e)


async def setstreak_deprecated(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/setstreak was replaced by the button flow"""
    await update.effective_message.reply_text(t("setstreak_deprecated"))


admin_handlers = [
    CommandHandler("listuserids", list_user_ids),
    CommandHandler("adjuststreak", adjust_streak),
    CommandHandler("setstreak", setstreak_deprecated),
    CallbackQueryHandler(adjust_streak_selected, pattern=f"^{ADJUST_PREFIX}:"),
    CallbackQueryHandler(set_streak_preset, pattern=f"^{SET_PREFIX}:"),
    CallbackQueryHandler(custom_streak_selected, pattern=f"^{CUSTOM_PREFIX}:"),
]
