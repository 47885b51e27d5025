"""Congratulatory notes stored with each completion"""
import random
from typing import Optional

from src.config import BOT_LANGUAGE

CONGRATS_NOTES = {
    "en": [
        "💪 Great job! Another day done!",
        "🔥 You're on fire!",
        "🌟 Consistency is your superpower!",
        "🏃 One more step toward the habit!",
        "😊 Your body says thank you!",
        "🎯 Right on target today!",
        "⚡ Energy charged for the day!",
        "🏆 Champions do it every day!",
    ],
    "ru": [
        "💪 Отлично! Ещё один день в копилку!",
        "🔥 Ты в ударе!",
        "🌟 Постоянство - твоя суперсила!",
        "🏃 Ещё один шаг к привычке!",
        "😊 Твоё тело говорит спасибо!",
        "🎯 Сегодня точно в цель!",
        "⚡ Заряд энергии на весь день!",
        "🏆 Чемпионы делают это каждый день!",
    ],
}


def get_congrats_notes(lang: Optional[str] = None) -> list[str]:
    """All congratulatory notes for a language (English fallback)"""
    return CONGRATS_NOTES.get(lang or BOT_LANGUAGE, CONGRATS_NOTES["en"])


def random_congrats_note(lang: Optional[str] = None) -> str:
    """Pick one congratulatory note at random"""
    return random.choice(get_congrats_notes(lang))
