"""User progress state owned and persisted by the host application"""
from enum import Enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class StreakType(str, Enum):
    """Streak kinds"""
    DAILY = "daily"
    WEEKLY = "weekly"
    PARTNER = "partner"


class StreakState(BaseModel):
    """Counters for one streak instance"""
    current_count: int = Field(default=0, ge=0)
    longest_count: int = Field(default=0, ge=0)
    last_activity_date: Optional[date] = None  # Calendar day only


def _zeroed_streaks() -> dict[StreakType, StreakState]:
    return {streak_type: StreakState() for streak_type in StreakType}


class UserProgressState(BaseModel):
    """
    Persisted gamification counters for one user

    The level is never stored: it is always recomputed from total_xp.
    """
    user_id: Optional[str] = None
    total_xp: int = Field(default=0, ge=0)
    total_hangouts: int = Field(default=0, ge=0)
    achievement_progress: dict[str, int] = Field(default_factory=dict)
    streaks: dict[StreakType, StreakState] = Field(default_factory=_zeroed_streaks)

    def streak(self, streak_type: StreakType) -> StreakState:
        """Streak counters for a type, zeroed if never recorded"""
        return self.streaks.get(streak_type) or StreakState()
