"""
Gamification for the habit group

- Individual and group consecutive-day streaks
- One-shot milestone achievements (100 and 365 days)
"""

from src.gamification.streak_system import (
    individual_streak,
    group_streak,
    get_individual_streak,
    get_group_streak,
    streaks_from_ledger,
)
from src.gamification.achievement_system import check_and_record_achievements, qualifying_tiers

__all__ = [
    "individual_streak",
    "group_streak",
    "get_individual_streak",
    "get_group_streak",
    "streaks_from_ledger",
    "check_and_record_achievements",
    "qualifying_tiers",
]
