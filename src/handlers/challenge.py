"""Challenge handlers: joining, daily completion, undo and the participant board"""
import logging
import re
from telegram import (
    ForceReply,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    ReplyKeyboardMarkup,
    Update,
)
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes, MessageHandler, filters

from src.db.queries import participant_exists
from src.exceptions import HabitTrackerError
from src.handlers.message_helpers import reply_error
from src.i18n.translations import t
from src.models.board import ParticipantBoard
from src.services import get_container
from src.utils.formatters import format_board

logger = logging.getLogger(__name__)

JOIN_CALLBACK = "join_challenge"
COMPLETE_CALLBACK = "complete_challenge"
UNDO_CALLBACK = "undo_complete"
REFRESH_CALLBACK = "update_list"


def join_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton(t("btn_join"), callback_data=JOIN_CALLBACK)]])


def board_keyboard() -> ReplyKeyboardMarkup:
    """Persistent reply keyboard shown under the board"""
    return ReplyKeyboardMarkup(
        [
            [t("btn_refresh"), t("btn_mark_yesterday")],
            [t("btn_complete")],
        ],
        resize_keyboard=True,
        selective=True,
    )


def completion_keyboard() -> InlineKeyboardMarkup:
    """Inline actions offered right after marking today"""
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton(t("btn_undo"), callback_data=UNDO_CALLBACK),
            InlineKeyboardButton(t("btn_refresh"), callback_data=REFRESH_CALLBACK),
        ]
    ])


async def send_board(update: Update, board: ParticipantBoard) -> None:
    """Render the board with the challenge reply keyboard"""
    await update.effective_message.reply_text(format_board(board), reply_markup=board_keyboard())


async def _answer_callback(update: Update) -> None:
    """Acknowledge a button press so the client stops its spinner"""
    if update.callback_query is not None:
        await update.callback_query.answer()


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /start: show the board to participants, offer joining to everyone else
    """
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id
    service = get_container().challenge_service

    try:
        if await participant_exists(user_id):
            board = await service.handle_list_request(user_id, chat_id)
            await send_board(update, board)
            return

        await update.effective_message.reply_text(t("want_to_join"), reply_markup=join_keyboard())
    except HabitTrackerError as e:
        await reply_error(update, e)


async def join_challenge(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Join button: ask for a display name and wait for the reply"""
    await _answer_callback(update)
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id

    try:
        await get_container().challenge_service.handle_join_request(user_id, chat_id)
        await update.effective_message.reply_text(
            t("enter_name"),
            reply_markup=ForceReply(selective=True),
        )
    except HabitTrackerError as e:
        await reply_error(update, e)


async def complete_challenge(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mark today complete (inline button or reply-keyboard button)"""
    await _answer_callback(update)
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id
    service = get_container().challenge_service

    try:
        result = await service.handle_mark_completion(user_id, chat_id)
        await update.effective_message.reply_text(result.note, reply_markup=completion_keyboard())

        board = await service.handle_list_request(user_id, chat_id)
        await send_board(update, board)
    except HabitTrackerError as e:
        await reply_error(update, e)


async def mark_yesterday(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mark the previous day complete (reply-keyboard button)"""
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id
    service = get_container().challenge_service

    try:
        await service.handle_mark_yesterday(user_id, chat_id)
        await update.effective_message.reply_text(t("yesterday_marked_success"))

        board = await service.handle_list_request(user_id, chat_id)
        await send_board(update, board)
    except HabitTrackerError as e:
        await reply_error(update, e)


async def undo_complete(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Undo today's completion"""
    await _answer_callback(update)
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id
    service = get_container().challenge_service

    try:
        await service.handle_undo(user_id, chat_id)
        await update.effective_message.reply_text(t("completion_cancelled"))

        board = await service.handle_list_request(user_id, chat_id)
        await send_board(update, board)
    except HabitTrackerError as e:
        await reply_error(update, e)


async def update_list(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Re-send the current board (inline refresh or reply-keyboard button)"""
    await _answer_callback(update)
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id

    try:
        board = await get_container().challenge_service.handle_list_request(user_id, chat_id)
        await send_board(update, board)
    except HabitTrackerError as e:
        await reply_error(update, e)


def button_filter(key: str):
    """Exact match on a localized reply-keyboard label"""
    return filters.TEXT & filters.Regex(f"^{re.escape(t(key))}$")


challenge_handlers = [
    CommandHandler("start", start),
    CallbackQueryHandler(join_challenge, pattern=f"^{JOIN_CALLBACK}$"),
    CallbackQueryHandler(complete_challenge, pattern=f"^{COMPLETE_CALLBACK}$"),
    CallbackQueryHandler(undo_complete, pattern=f"^{UNDO_CALLBACK}$"),
    CallbackQueryHandler(update_list, pattern=f"^{REFRESH_CALLBACK}$"),
    MessageHandler(button_filter("btn_complete"), complete_challenge),
    MessageHandler(button_filter("btn_mark_yesterday"), mark_yesterday),
    MessageHandler(button_filter("btn_refresh"), update_list),
]
