"""Formatters turning structured results into Telegram message text"""
from typing import List

from src.i18n.translations import t, day_word, weekday_name
from src.models.board import ParticipantBoard, BoardRow
from src.models.achievement import FameEntry
from src.models.participant import ParticipantIndexEntry

REMINDER_HEADINGS = {
    "midday": "reminder",
    "evening": "last_chance",
}


def format_board_rows(rows: List[BoardRow]) -> str:
    """One line per participant with status icon and streak"""
    lines = []
    for row in rows:
        status = t("status_completed") if row.completed else t("status_pending")
        lines.append(t(
            "board_row",
            status=status,
            name=row.name,
            streak=row.streak,
            day_word=day_word(row.streak),
        ))
    return "\n\n".join(lines)


def format_walk_of_fame(fame: List[FameEntry]) -> str:
    """
    Achievement roll: 100-day holders who haven't reached 365 yet, then legends

    Returns an empty string when nobody holds an achievement.
    """
    if not fame:
        return ""

    lines = [t("hall_of_fame_separator"), t("hall_of_fame"), ""]

    lines.append(t("achievement_100"))
    centurions = [f for f in fame if f.has_100 and not f.has_365]
    for entry in centurions:
        lines.append(t(
            "fame_row",
            name=entry.name,
            reached=t("achievement_reached"),
            date=entry.achieved_at_100.strftime("%d.%m.%Y"),
        ))
    if not centurions:
        lines.append(t("no_achievements"))

    lines.append("")

    lines.append(t("achievement_365"))
    legends = [f for f in fame if f.has_365]
    for entry in legends:
        lines.append(t(
            "fame_row",
            name=entry.name,
            reached=t("achievement_reached"),
            date=entry.achieved_at_365.strftime("%d.%m.%Y"),
        ))
    if not legends:
        lines.append(t("no_achievements"))

    return "\n".join(lines)


def format_board(board: ParticipantBoard) -> str:
    """
    Full participant board shown after every action

    Layout:
        <weekday>, <dd.mm.yyyy>

        - ✅ Name (N days)
        ...

        🔥 Days in a row together: N
        <walk of fame>
    """
    header = t(
        "board_header",
        weekday=weekday_name(board.day.weekday()),
        date=board.day.strftime("%d.%m.%Y"),
    )
    parts = [header, "", format_board_rows(board.rows), "", t("group_streak", streak=board.group_streak)]

    fame = format_walk_of_fame(board.walk_of_fame)
    if fame:
        parts.append(fame)

    return "\n".join(parts)


def format_reminder(kind: str, board: ParticipantBoard) -> str:
    """Reminder text for the midday or evening trigger, followed by the board rows"""
    heading = t(REMINDER_HEADINGS.get(kind, "reminder"))
    return f"{heading}\n\n{t('participants_heading')}\n\n{format_board_rows(board.rows)}"


def format_participant_index(entries: List[ParticipantIndexEntry]) -> str:
    """Administrative list of participant names and IDs"""
    if not entries:
        return t("no_participants")

    lines = [t("participant_ids_header"), ""]
    for entry in entries:
        lines.append(t("participant_ids_row", name=entry.name, user_id=entry.user_id))
    lines.append("")
    lines.append(t("participant_ids_footer"))
    return "\n".join(lines)
