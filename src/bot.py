"""Telegram bot setup"""
import logging
from telegram.ext import Application, TypeHandler
from telegram import Update

from src.config import TELEGRAM_BOT_TOKEN
from src.handlers.admin import admin_handlers
from src.handlers.challenge import challenge_handlers
from src.handlers.conversation import conversation_handler
from src.handlers.message_helpers import error_handler, log_update
from src.scheduler.reminder_manager import ReminderManager
from src.services import TelegramNotifier, init_container, set_reminder_manager

logger = logging.getLogger(__name__)


def create_bot_application() -> Application:
    """Create and configure the bot application"""
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).build()

    # Services
    notifier = TelegramNotifier(app.bot)
    container = init_container(notifier=notifier)

    # Reminder jobs are registered by main once the application runs
    reminder_manager = ReminderManager(app, notifier, container.challenge_service)
    set_reminder_manager(reminder_manager)
    logger.info("ReminderManager initialized")

    # Log every update before anything else sees it
    app.add_handler(TypeHandler(Update, log_update), group=-1)

    # Commands and buttons (MUST be before the free-text handler)
    for handler in challenge_handlers:
        app.add_handler(handler)
    for handler in admin_handlers:
        app.add_handler(handler)
    logger.info("Challenge and admin handlers registered")

    # Free text for pending conversations
    app.add_handler(conversation_handler)

    app.add_error_handler(error_handler)

    logger.info("Bot application created")
    return app
