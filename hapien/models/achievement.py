"""Achievement models for gamification"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator


class AchievementCategory(str, Enum):
    """Achievement categories"""
    ACTIVITY = "activity"
    SOCIAL = "social"
    TIME = "time"
    SPECIAL = "special"


class AchievementTier(str, Enum):
    """Achievement tiers, plus the locked state"""
    LOCKED = "locked"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


# Ascending; the index is the tier index (locked is -1)
TIER_ORDER: tuple[AchievementTier, ...] = (
    AchievementTier.BRONZE,
    AchievementTier.SILVER,
    AchievementTier.GOLD,
    AchievementTier.PLATINUM,
)


class AchievementDefinition(BaseModel):
    """
    Static achievement definition

    Either tiered (4 strictly ascending progress thresholds) or one-time
    (binary locked/unlocked at progress >= 1).
    """
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    emoji: str
    description: str
    category: AchievementCategory
    tiers: Optional[tuple[int, ...]] = None
    is_one_time: bool = False

    @model_validator(mode="after")
    def check_tiers(self) -> "AchievementDefinition":
        if self.is_one_time:
            if self.tiers is not None:
                raise ValueError(f"One-time achievement {self.key} cannot define tiers")
            return self
        if self.tiers is None or len(self.tiers) != len(TIER_ORDER):
            raise ValueError(f"Achievement {self.key} needs exactly {len(TIER_ORDER)} tier thresholds")
        if any(b <= a for a, b in zip(self.tiers, self.tiers[1:])):
            raise ValueError(f"Tier thresholds for {self.key} must be strictly increasing")
        return self
