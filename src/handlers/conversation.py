"""Free-text replies feeding pending multi-step flows (name, custom streak)"""
import logging
from telegram import Update
from telegram.ext import ContextTypes, MessageHandler, filters

from src.exceptions import HabitTrackerError, InvalidInputError
from src.handlers.challenge import send_board
from src.handlers.message_helpers import reply_error
from src.i18n.translations import t, day_word
from src.models.conversation import ConversationKind
from src.services import get_container

logger = logging.getLogger(__name__)


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Route a plain text message into the user's pending flow, if any

    Registered after every command and button handler, so it only sees
    text nothing more specific claimed. Without a pending flow the message
    is ignored.
    """
    message = update.effective_message
    if message is None or message.text is None:
        return

    user = update.effective_user
    chat_id = update.effective_chat.id
    container = get_container()

    try:
        outcome = await container.conversation_service.handle_reply(
            user.id, chat_id, message.text, username=user.username
        )
    except InvalidInputError as e:
        # Pending flow is still active; the next reply is another attempt
        await reply_error(update, e)
        return
    except HabitTrackerError as e:
        await reply_error(update, e)
        return

    if outcome is None:
        logger.debug(f"Ignoring text from user {user.id} in chat {chat_id}: nothing pending")
        return

    try:
        if outcome.kind == ConversationKind.AWAITING_NAME.value:
            board = await container.challenge_service.handle_list_request(user.id, chat_id)
            await send_board(update, board)
        elif outcome.kind == ConversationKind.AWAITING_CUSTOM_STREAK.value:
            result = outcome.set_streak
            await message.reply_text(
                t("streak_set", name=result.target_name, days=result.days, day_word=day_word(result.days))
            )
    except HabitTrackerError as e:
        await reply_error(update, e)


conversation_handler = MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text)
