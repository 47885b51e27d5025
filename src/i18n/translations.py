"""
Bot message catalog.

Simple dictionary approach: language_code -> {key: template}. The bot speaks
one language per deployment (BOT_LANGUAGE); missing keys fall back to English.
"""
import logging
from typing import Dict, Optional

from src.config import BOT_LANGUAGE

logger = logging.getLogger(__name__)

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        # Buttons
        "btn_join": "Join the challenge",
        "btn_complete": "Do the exercise",
        "btn_undo": "Undo today",
        "btn_refresh": "Refresh",
        "btn_mark_yesterday": "Mark yesterday",
        "btn_custom_value": "Other value ✏️",
        "btn_days": "{days} days",

        # Join flow
        "want_to_join": "👋 Want to join the daily exercise challenge?",
        "enter_name": "✏️ How should we call you? Reply with your name.",
        "empty_name": "❌ The name can't be empty. Please send your name.",

        # Completion
        "already_completed": "✅ You've already done it today!",
        "already_completed_yesterday": "✅ Yesterday is already marked.",
        "yesterday_marked_success": "👍 Yesterday marked as done.",
        "no_completion_today": "Nothing to undo: today isn't marked yet.",
        "completion_cancelled": "↩️ Today's completion cancelled.",
        "not_a_participant": "You haven't joined yet. Send /start to join.",

        # Board
        "board_header": "{weekday}, {date}",
        "board_row": "- {status} {name} ({streak} {day_word})",
        "group_streak": "🔥 Days in a row together: {streak}",
        "hall_of_fame_separator": "━━━━━━━━━━━━━━━",
        "hall_of_fame": "🏛 Walk of Fame",
        "achievement_100": "💯 100 days in a row:",
        "achievement_365": "👑 365 days in a row:",
        "achievement_reached": "reached",
        "fame_row": "  • {name} - {reached} ({date})",
        "no_achievements": "  nobody yet",
        "status_completed": "✅",
        "status_pending": "⏳",

        # Achievements
        "achievement_100_congrats": "🎉 {name}, 100 days in a row! Welcome to the Walk of Fame!",
        "achievement_365_congrats": "👑 {name}, a whole year without a single miss! Legendary!",

        # Reminders
        "reminder": "⏰ Don't forget today's exercise!",
        "last_chance": "🚨 Last chance to keep your streak today!",
        "participants_heading": "Participants:",

        # Admin
        "admin_only": "⛔ Only admins can change streaks.",
        "participant_ids_header": "📋 Participants and their IDs:",
        "participant_ids_row": "👤 {name} - ID: {user_id}",
        "participant_ids_footer": "Use /adjuststreak to change a streak.",
        "choose_participant": "Choose a participant to set the streak for:",
        "choose_streak_value": "Setting the streak for 👤 {name}\nChoose the number of days:",
        "enter_custom_streak": "Enter a whole number of days for 👤 {name}:",
        "invalid_streak_value": "❌ Please enter a non-negative whole number.",
        "streak_set": "✅ Streak for {name} set to {days} {day_word}",
        "streak_set_error": "❌ Couldn't set the streak: {error}",
        "setstreak_deprecated": "/setstreak is gone. Use /adjuststreak instead.",
        "no_participants": "Nobody has joined yet.",

        # Errors
        "error_try_later": "⚠️ Something went wrong. Please try again later.",
    },
    "ru": {
        "btn_join": "Присоединиться к челленджу",
        "btn_complete": "Сделать зарядочку",
        "btn_undo": "Отменить сегодня",
        "btn_refresh": "Обновить",
        "btn_mark_yesterday": "Отметить за вчера",
        "btn_custom_value": "Другое значение ✏️",
        "btn_days": "{days} дн.",

        "want_to_join": "👋 Хочешь присоединиться к ежедневной зарядке?",
        "enter_name": "✏️ Как тебя называть? Ответь своим именем.",
        "empty_name": "❌ Имя не может быть пустым. Пришли своё имя.",

        "already_completed": "✅ Сегодня ты уже сделал зарядку!",
        "already_completed_yesterday": "✅ Вчерашний день уже отмечен.",
        "yesterday_marked_success": "👍 Вчерашний день отмечен.",
        "no_completion_today": "Нечего отменять: сегодня ещё не отмечено.",
        "completion_cancelled": "↩️ Отметка за сегодня отменена.",
        "not_a_participant": "Ты ещё не участвуешь. Отправь /start, чтобы присоединиться.",

        "board_header": "{weekday}, {date}",
        "board_row": "- {status} {name} ({streak} {day_word})",
        "group_streak": "🔥 Совместных дней подряд: {streak}",
        "hall_of_fame_separator": "━━━━━━━━━━━━━━━",
        "hall_of_fame": "🏛 Аллея славы",
        "achievement_100": "💯 100 дней подряд:",
        "achievement_365": "👑 365 дней подряд:",
        "achievement_reached": "достигнуто",
        "fame_row": "  • {name} - {reached} ({date})",
        "no_achievements": "  пока никого",
        "status_completed": "✅",
        "status_pending": "⏳",

        "achievement_100_congrats": "🎉 {name}, 100 дней подряд! Добро пожаловать на Аллею славы!",
        "achievement_365_congrats": "👑 {name}, целый год без пропусков! Легенда!",

        "reminder": "⏰ Не забудь сделать зарядку сегодня!",
        "last_chance": "🚨 Последний шанс сохранить серию сегодня!",
        "participants_heading": "Участники:",

        "admin_only": "⛔ Менять серии могут только администраторы.",
        "participant_ids_header": "📋 Список участников и их ID:",
        "participant_ids_row": "👤 {name} - ID: {user_id}",
        "participant_ids_footer": "Для установки серии используйте команду /adjuststreak",
        "choose_participant": "Выберите пользователя для установки серии зарядок:",
        "choose_streak_value": "Установка серии для пользователя 👤 {name}\nВыберите количество дней:",
        "enter_custom_streak": "Введите целое число для установки серии зарядок для пользователя 👤 {name}:",
        "invalid_streak_value": "❌ Пожалуйста, введите неотрицательное целое число для серии зарядок.",
        "streak_set": "✅ Серия для {name} установлена на {days} {day_word}",
        "streak_set_error": "❌ Ошибка при установке серии: {error}",
        "setstreak_deprecated": "Команда /setstreak устарела. Пожалуйста, используйте команду /adjuststreak для установки серии зарядок.",
        "no_participants": "Пока никто не присоединился.",

        "error_try_later": "⚠️ Что-то пошло не так. Попробуй позже.",
    },
}

WEEKDAY_NAMES: Dict[str, list[str]] = {
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
    "ru": ["Понедельник", "Вторник", "Среда", "Четверг", "Пятница", "Суббота", "Воскресенье"],
}


def t(key: str, lang: Optional[str] = None, **kwargs) -> str:
    """
    Translate a key to the specified language with optional formatting.

    Args:
        key: Translation key (e.g., 'enter_name', 'streak_set')
        lang: Language code (defaults to BOT_LANGUAGE)
        **kwargs: Format arguments for string formatting

    Returns:
        Translated and formatted string. Falls back to English if key not found.

    Examples:
        t('enter_name')
        t('streak_set', lang='en', name='Anna', days=7, day_word='days')
    """
    lang_dict = TRANSLATIONS.get(lang or BOT_LANGUAGE, TRANSLATIONS["en"])
    translated = lang_dict.get(key, TRANSLATIONS['en'].get(key, f"[MISSING: {key}]"))

    if kwargs:
        try:
            return translated.format(**kwargs)
        except KeyError as e:
            logger.error(f"Translation formatting error for key '{key}': {e}")
            return translated

    return translated


def day_word(count: int, lang: Optional[str] = None) -> str:
    """Correctly inflected word for 'day' after a number"""
    if (lang or BOT_LANGUAGE) != "ru":
        return "day" if count == 1 else "days"

    # Russian: 1 день, 2-4 дня, 5-20 дней, 21 день, 22 дня ...
    last_two = abs(count) % 100
    last = last_two % 10
    if 11 <= last_two <= 14:
        return "дней"
    if last == 1:
        return "день"
    if 2 <= last <= 4:
        return "дня"
    return "дней"


def weekday_name(weekday: int, lang: Optional[str] = None) -> str:
    """Weekday name for date.weekday() (Monday == 0)"""
    return WEEKDAY_NAMES.get(lang or BOT_LANGUAGE, WEEKDAY_NAMES["en"])[weekday]
