"""Achievement models for streak milestones"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import date


class AchievementType(str, Enum):
    """Fixed milestone tiers, valued by their stored type tag"""
    DAYS_100 = "100_days"
    DAYS_365 = "365_days"

    @property
    def threshold(self) -> int:
        return ACHIEVEMENT_THRESHOLDS[self]


ACHIEVEMENT_THRESHOLDS = {
    AchievementType.DAYS_100: 100,
    AchievementType.DAYS_365: 365,
}


class FameEntry(BaseModel):
    """One row of the achievement roll"""
    name: str
    achieved_at_100: Optional[date] = None
    achieved_at_365: Optional[date] = None

    @property
    def has_100(self) -> bool:
        return self.achieved_at_100 is not None

    @property
    def has_365(self) -> bool:
        return self.achieved_at_365 is not None
