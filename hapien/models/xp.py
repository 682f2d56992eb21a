"""XP event models"""
from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class XPEventType(str, Enum):
    """Kinds of XP ledger entries"""
    JOIN_HANGOUT = "JOIN_HANGOUT"
    COMPLETE_HANGOUT = "COMPLETE_HANGOUT"
    CREATE_HANGOUT = "CREATE_HANGOUT"
    FIRST_HANGOUT_OF_DAY = "FIRST_HANGOUT_OF_DAY"
    MEET_NEW_PERSON = "MEET_NEW_PERSON"
    REPEAT_MEETUP_SAME_PERSON = "REPEAT_MEETUP_SAME_PERSON"
    REACH_CLOSE_FRIEND_STATUS = "REACH_CLOSE_FRIEND_STATUS"
    DAILY_STREAK_BONUS = "DAILY_STREAK_BONUS"
    WEEKLY_STREAK_BONUS = "WEEKLY_STREAK_BONUS"
    STREAK_MILESTONE = "STREAK_MILESTONE"
    ACTIVITY_MILESTONE = "ACTIVITY_MILESTONE"
    SPORTS_BONUS = "SPORTS_BONUS"
    EARLY_BIRD_BONUS = "EARLY_BIRD_BONUS"
    NIGHT_OWL_BONUS = "NIGHT_OWL_BONUS"
    MYSTERY_BONUS = "MYSTERY_BONUS"
    HAPPY_HOUR_MULTIPLIER = "HAPPY_HOUR_MULTIPLIER"


class HangoutCompletionContext(BaseModel):
    """Context supplied by the host when a hangout is completed"""
    is_first_hangout_of_day: bool = False
    is_new_person: bool = False
    is_repeat_meetup: bool = False  # Ignored when is_new_person is set
    reached_close_friend_status: bool = False
    hangout_category: str = ""
    hangout_time: datetime
    current_streak: int = 0  # Days
    activity_count: int = 0  # Completions so far, including this one
    is_happy_hour: bool = False


class XPLedgerEntry(BaseModel):
    """Transient XP award record; the host decides whether to store it"""
    event_type: XPEventType
    amount: int
    reason: Optional[str] = None
    source_id: Optional[str] = None
    awarded_at: datetime = Field(default_factory=datetime.now)
