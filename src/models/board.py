"""Structured results handed to the Telegram layer for rendering"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from src.models.achievement import FameEntry
from src.models.participant import ParticipantIndexEntry


class BoardRow(BaseModel):
    """One participant on the daily board"""
    user_id: int
    name: str
    completed: bool
    streak: int


class ParticipantBoard(BaseModel):
    """Daily participant list with streaks and the achievement roll"""
    day: date
    rows: list[BoardRow] = Field(default_factory=list)
    group_streak: int = 0
    viewer_completed: bool = False
    walk_of_fame: list[FameEntry] = Field(default_factory=list)


class SetStreakResult(BaseModel):
    """Outcome of an administrative streak change"""
    target_user_id: int
    target_name: str
    days: int
    streak: int
    new_achievements: list[str] = Field(default_factory=list)


class ConversationOutcome(BaseModel):
    """Result of a consumed free-text reply"""
    kind: str
    participant_name: Optional[str] = None
    set_streak: Optional[SetStreakResult] = None


class ParticipantIndex(BaseModel):
    """Administrative index of participants, oldest joiner first"""
    entries: list[ParticipantIndexEntry] = Field(default_factory=list)
