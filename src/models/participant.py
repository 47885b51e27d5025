"""Participant-related Pydantic models"""
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo
from pydantic import BaseModel, Field


class Participant(BaseModel):
    """Registered member of the habit group"""
    user_id: int = Field(gt=0)
    chat_id: int  # Where notifications for this participant go
    username: Optional[str] = None
    display_name: Optional[str] = None
    joined_at: datetime

    @property
    def name(self) -> str:
        """Display name, falling back to the Telegram handle"""
        return self.display_name or self.username or str(self.user_id)

    def joined_on(self, tz: ZoneInfo) -> date:
        """Calendar day of joining in the reference timezone"""
        return self.joined_at.astimezone(tz).date()


class ParticipantIndexEntry(BaseModel):
    """Row of the administrative participant index"""
    user_id: int
    name: str
