"""
Outbound notifications

The core only needs two kinds of push messages: a one-time achievement
congratulation and the midday/evening reminders. ``NotificationSink`` is what
the services depend on; ``TelegramNotifier`` is the production implementation.
"""
import logging
from typing import Protocol

import telegram.error
from telegram import Bot

from src.exceptions import wrap_external_exception
from src.i18n.translations import t
from src.models.achievement import AchievementType
from src.models.board import ParticipantBoard
from src.utils.formatters import format_reminder

logger = logging.getLogger(__name__)

ACHIEVEMENT_MESSAGES = {
    AchievementType.DAYS_100: "achievement_100_congrats",
    AchievementType.DAYS_365: "achievement_365_congrats",
}


class NotificationSink(Protocol):
    """Push-notification surface used by the achievement engine and the scheduler"""

    async def send_achievement(
        self,
        chat_id: int,
        user_id: int,
        name: str,
        achievement_type: AchievementType
    ) -> None:
        ...

    async def send_reminder(self, chat_id: int, kind: str, board: ParticipantBoard) -> None:
        ...


class TelegramNotifier:
    """NotificationSink backed by a python-telegram-bot ``Bot``"""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_achievement(
        self,
        chat_id: int,
        user_id: int,
        name: str,
        achievement_type: AchievementType
    ) -> None:
        text = t(ACHIEVEMENT_MESSAGES[achievement_type], name=name)
        await self._send(chat_id, text, operation="send_achievement", user_id=user_id)
        logger.info(f"Sent {achievement_type.value} congratulation to user {user_id} in chat {chat_id}")

    async def send_reminder(self, chat_id: int, kind: str, board: ParticipantBoard) -> None:
        text = format_reminder(kind, board)
        await self._send(chat_id, text, operation=f"send_reminder:{kind}")

    async def _send(self, chat_id: int, text: str, operation: str, user_id: int = None) -> None:
        """Send a message, converting transport failures into NotificationError"""
        try:
            await self.bot.send_message(chat_id=chat_id, text=text)
        except telegram.error.TelegramError as e:
            raise wrap_external_exception(
                e,
                operation=operation,
                user_id=user_id,
                chat_id=chat_id,
            ) from e
