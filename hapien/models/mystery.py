"""Mystery reward models"""
from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel


class MysteryEventType(str, Enum):
    """Mystery event kinds"""
    XP_MULTIPLIER = "XP_MULTIPLIER"
    BONUS_DROP = "BONUS_DROP"


class XPMultiplierEvent(BaseModel):
    """Random XP multiplier after a hangout completion"""
    type: Literal[MysteryEventType.XP_MULTIPLIER] = MysteryEventType.XP_MULTIPLIER
    multiplier: float
    message: str


class BonusDropEvent(BaseModel):
    """Bonus XP dropped near a hangout-count milestone"""
    type: Literal[MysteryEventType.BONUS_DROP] = MysteryEventType.BONUS_DROP
    xp_amount: int
    message: str
    milestone: str


class TeaserType(str, Enum):
    """Mystery teaser kinds"""
    NEXT_MILESTONE = "next_milestone"
    HIDDEN_BADGE = "hidden_badge"
    SPECIAL_EVENT = "special_event"


class MysteryTeaser(BaseModel):
    """Hint about an upcoming surprise"""
    type: TeaserType
    title: str
    hint: str
    progress: Optional[int] = None
    progress_max: Optional[int] = None


class MysteryChallenge(BaseModel):
    """Weekly challenge whose reward stays hidden until completion"""
    id: str
    title: str
    description: str
    target_count: int
    reward_xp: int
    category: Literal["time", "social", "activity", "streak"]


class RevealAnimation(str, Enum):
    """Reveal animations, by reward size"""
    FLIP = "flip"
    UNWRAP = "unwrap"
    SPARKLE = "sparkle"
    EXPLOSION = "explosion"
