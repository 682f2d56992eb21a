"""
Game Economy Tables

Every tunable number of the gamification engine lives here as data:
XP awards, level thresholds/titles/unlocks, achievement definitions,
streak milestone rewards and mystery-roll probabilities.

The defaults below are the shipped economy. Operators rebalance it without
code changes by pointing GAMIFICATION_ECONOMY_FILE at a JSON file that
overrides any subset of fields, section by section:

    {
        "xp": {"complete_hangout": 60},
        "mystery": {"multiplier_probability": 0.05}
    }

Leveling Curve (~40% more XP per level):
- Level 1: 0 XP ... Level 10: 5,200 XP ... Level 20: 80,000 XP
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hapien import config
from hapien.exceptions import wrap_external_exception
from hapien.models.achievement import AchievementCategory, AchievementDefinition, AchievementTier
from hapien.models.level import LevelUnlock
from hapien.models.mystery import MysteryChallenge
from hapien.models.progress import StreakType

logger = logging.getLogger(__name__)


def _strictly_ascending(values) -> bool:
    return all(b > a for a, b in zip(values, values[1:]))


# ============================================
# XP Awards
# ============================================

class XPAwards(BaseModel):
    """XP amounts per event and bonus rules"""
    model_config = ConfigDict(frozen=True)

    # Activity participation
    join_hangout: int = 25
    complete_hangout: int = 50
    create_hangout: int = 35
    first_hangout_of_day: int = 20

    # Social growth
    meet_new_person: int = 100
    repeat_meetup_same_person: int = 75
    reach_close_friend_status: int = 200  # 5+ meetups with same person

    # Activity-specific bonuses
    sports_activity: int = 10
    bonus_category: str = "sports"
    early_bird: int = 15
    early_bird_before_hour: int = 8
    night_owl: int = 15
    night_owl_from_hour: int = 21

    # Streaks
    streak_bonus_per_day: int = 10
    streak_bonus_cap: int = 100
    weekly_streak_bonus_per_week: int = 50

    # Exact completion counts only, not thresholds
    activity_milestones: Dict[int, int] = Field(
        default_factory=lambda: {10: 100, 25: 250, 50: 500, 100: 1000}
    )

    happy_hour_multiplier: int = 2


# ============================================
# Levels
# ============================================

DEFAULT_LEVEL_TITLES = {
    1: "Newcomer",
    2: "Explorer",
    3: "Connector",
    4: "Socializer",
    5: "Community Member",
    6: "Active Member",
    7: "Regular",
    8: "Enthusiast",
    9: "Champion",
    10: "Leader",
    11: "Veteran",
    12: "Expert",
    13: "Master",
    14: "Elite",
    15: "Ambassador",
    16: "Legend",
    17: "Icon",
    18: "Hero",
    19: "Guardian",
    20: "Tribe Leader",
}

DEFAULT_LEVEL_UNLOCKS = (
    LevelUnlock(level=3, feature="custom_hangouts", description="Create custom activity types", icon="✏️"),
    LevelUnlock(level=5, feature="private_groups", description="Create private activity groups", icon="🔒"),
    LevelUnlock(level=7, feature="activity_insights", description="See detailed activity analytics", icon="📊"),
    LevelUnlock(level=10, feature="priority_matching", description="Get prioritized in activity matching", icon="⚡"),
    LevelUnlock(level=15, feature="host_events", description="Host community-wide events", icon="🎉"),
    LevelUnlock(level=20, feature="tribe_leader_badge", description="Exclusive Tribe Leader badge", icon="👑"),
)


class LevelTable(BaseModel):
    """Level thresholds (XP to reach level N is thresholds[N-1]), titles and unlocks"""
    model_config = ConfigDict(frozen=True)

    thresholds: tuple[int, ...] = (
        0, 100, 250, 500, 850,
        1300, 1900, 2700, 3800, 5200,
        7000, 9500, 12500, 16500, 21500,
        28000, 36500, 47500, 61500, 80000,
    )
    titles: Dict[int, str] = Field(default_factory=lambda: dict(DEFAULT_LEVEL_TITLES))
    unlocks: tuple[LevelUnlock, ...] = DEFAULT_LEVEL_UNLOCKS

    @model_validator(mode="after")
    def check_thresholds(self) -> "LevelTable":
        if not self.thresholds or self.thresholds[0] != 0:
            raise ValueError("Level thresholds must start at 0")
        if not _strictly_ascending(self.thresholds):
            raise ValueError("Level thresholds must be strictly ascending")
        if not self.titles:
            raise ValueError("At least one level title is required")
        return self

    @property
    def max_level(self) -> int:
        return len(self.thresholds)


# ============================================
# Achievements
# ============================================

def _tiered(key, name, emoji, description, category, tiers) -> AchievementDefinition:
    return AchievementDefinition(
        key=key, name=name, emoji=emoji, description=description,
        category=category, tiers=tiers,
    )


def _one_time(key, name, emoji, description) -> AchievementDefinition:
    return AchievementDefinition(
        key=key, name=name, emoji=emoji, description=description,
        category=AchievementCategory.SPECIAL, is_one_time=True,
    )


_STANDARD_TIERS = (10, 25, 50, 100)
_TIME_TIERS = (5, 15, 30, 50)

DEFAULT_ACHIEVEMENTS = (
    # Activity-specific badges (quantity-based)
    _tiered("BADMINTON_PRO", "Badminton Pro", "🏸", "Play badminton with your community", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("COFFEE_REGULAR", "Coffee Regular", "☕", "Complete coffee meetups", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("FOODIE", "Foodie", "🍕", "Food hangouts completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("WALKER", "Walker", "🚶", "Walking activities completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("GYM_RAT", "Gym Rat", "💪", "Gym sessions completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("MOVIE_BUFF", "Movie Buff", "🎬", "Movie outings completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("SHOPPER", "Shopper", "🛍️", "Shopping trips completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),
    _tiered("GAMER", "Gamer", "🎮", "Gaming sessions completed", AchievementCategory.ACTIVITY, _STANDARD_TIERS),

    # Time-based badges
    _tiered("EARLY_BIRD", "Early Bird", "🌅", "Activities before 8 AM", AchievementCategory.TIME, _TIME_TIERS),
    _tiered("NIGHT_OWL", "Night Owl", "🦉", "Activities after 9 PM", AchievementCategory.TIME, _TIME_TIERS),
    _tiered("WEEKEND_WARRIOR", "Weekend Warrior", "🗓️", "Weekend activities completed", AchievementCategory.TIME, _STANDARD_TIERS),

    # Social badges
    _tiered("SOCIAL_BUTTERFLY", "Social Butterfly", "🦋", "Unique people met", AchievementCategory.SOCIAL, _STANDARD_TIERS),
    _tiered("TRIBE_BUILDER", "Tribe Builder", "👥", "Close friends (5+ meetups each)", AchievementCategory.SOCIAL, (3, 5, 10, 20)),
    _tiered("CONNECTOR", "Connector", "🤝", "Introduce people who become friends", AchievementCategory.SOCIAL, (3, 10, 25, 50)),
    _tiered("HOST_EXTRAORDINAIRE", "Host Extraordinaire", "🎪", "Hangouts hosted", AchievementCategory.SOCIAL, _STANDARD_TIERS),

    # Special one-time achievements
    _one_time("FIRST_STEPS", "First Steps", "🎉", "Complete your first hangout"),
    _one_time("WEEK_WARRIOR", "Week Warrior", "⚔️", "Maintain a 7-day activity streak"),
    _one_time("MONTH_MASTER", "Month Master", "👑", "Maintain a 30-day activity streak"),
    _one_time("COMMUNITY_PILLAR", "Community Pillar", "🏛️", "Host 50 hangouts in your community"),
    _one_time("PERFECT_WEEK", "Perfect Week", "✨", "Complete at least one activity every day for a week"),
)

DEFAULT_TIER_COLORS = {
    AchievementTier.BRONZE: "#CD7F32",
    AchievementTier.SILVER: "#C0C0C0",
    AchievementTier.GOLD: "#FFD700",
    AchievementTier.PLATINUM: "#E5E4E2",
    AchievementTier.LOCKED: "#4A4A4A",
}


# ============================================
# Streaks
# ============================================

class StreakTable(BaseModel):
    """Per streak type: milestone count -> XP reward"""
    model_config = ConfigDict(frozen=True)

    milestone_rewards: Dict[StreakType, Dict[int, int]] = Field(default_factory=lambda: {
        StreakType.DAILY: {3: 50, 7: 100, 14: 200, 30: 500, 60: 1000, 100: 2000, 365: 5000},
        StreakType.WEEKLY: {2: 75, 4: 150, 8: 300, 12: 500, 26: 1000, 52: 2500},
        StreakType.PARTNER: {3: 100, 5: 200, 10: 400, 20: 750, 50: 1500, 100: 3000},
    })
    at_risk_hours: int = 6  # Warn when fewer hours than this remain before midnight

    def milestones(self, streak_type: StreakType) -> tuple[int, ...]:
        """Ascending milestone counts for a streak type"""
        return tuple(sorted(self.milestone_rewards.get(streak_type, {})))

    def reward(self, streak_type: StreakType, count: int) -> int:
        return self.milestone_rewards.get(streak_type, {}).get(count, 0)


# ============================================
# Mystery
# ============================================

class RewardRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="after")
    def check_range(self) -> "RewardRange":
        if self.min > self.max:
            raise ValueError(f"Reward range min {self.min} exceeds max {self.max}")
        return self


DEFAULT_WEEKLY_CHALLENGES = (
    MysteryChallenge(
        id="early_bird_week", title="Mystery Morning Challenge",
        description="Complete a hangout before 7 AM this week",
        target_count=1, reward_xp=150, category="time",
    ),
    MysteryChallenge(
        id="social_sprint", title="Mystery Social Sprint",
        description="Meet 3 new people this week",
        target_count=3, reward_xp=200, category="social",
    ),
    MysteryChallenge(
        id="variety_pack", title="Mystery Variety Pack",
        description="Try 3 different activity types this week",
        target_count=3, reward_xp=175, category="activity",
    ),
    MysteryChallenge(
        id="streak_keeper", title="Mystery Streak Keeper",
        description="Maintain your streak for the entire week",
        target_count=7, reward_xp=250, category="streak",
    ),
    MysteryChallenge(
        id="weekend_warrior", title="Mystery Weekend Warrior",
        description="Complete 3 hangouts over the weekend",
        target_count=3, reward_xp=175, category="time",
    ),
)


class MysteryConfig(BaseModel):
    """Probabilities, weights and ranges for random rewards"""
    model_config = ConfigDict(frozen=True)

    # Random XP multiplier after completing a hangout
    multiplier_probability: float = Field(default=0.1, ge=0, le=1)
    multipliers: tuple[float, ...] = (1.5, 2.0, 3.0)
    multiplier_weights: tuple[int, ...] = (70, 25, 5)
    multiplier_messages: Dict[float, tuple[str, ...]] = Field(default_factory=lambda: {
        1.5: ("Nice! 1.5x XP bonus!", "Lucky you! 1.5x XP!", "Bonus time! 1.5x XP!"),
        2.0: ("Wow! 2x XP multiplier!", "Double XP! You're on fire!", "2x XP - Keep it going!"),
        3.0: ("JACKPOT! 3x XP!!!", "LEGENDARY! Triple XP!", "3x XP - Incredibly lucky!"),
    })

    # Bonus drops near milestone hangout counts, +/- variance so the exact trigger is unpredictable
    bonus_drop_variance_percent: int = 10
    bonus_drop_rewards: Dict[int, RewardRange] = Field(default_factory=lambda: {
        10: RewardRange(min=100, max=150),
        25: RewardRange(min=200, max=300),
        50: RewardRange(min=400, max=600),
        100: RewardRange(min=800, max=1200),
        200: RewardRange(min=1500, max=2000),
        500: RewardRange(min=3000, max=4000),
        1000: RewardRange(min=5000, max=7500),
    })
    bonus_drop_messages: tuple[str, ...] = (
        "{milestone} hangouts milestone! +{xp} XP bonus!",
        "You reached {milestone} hangouts! Here's {xp} bonus XP!",
        "Milestone unlocked: {milestone} hangouts! Enjoy {xp} XP!",
    )

    # Happy hour windows
    happy_hour_probability: float = Field(default=0.1, ge=0, le=1)
    happy_hour_peak_probability: float = Field(default=0.25, ge=0, le=1)
    happy_hour_peak_hours: tuple[int, ...] = (17, 18, 19, 20)

    # Teasers
    teaser_milestone_window: int = 5
    teaser_badge_target: int = 50
    teaser_badge_window: int = 5
    teaser_unlock_levels: tuple[int, ...] = (5, 10, 15, 20)
    teaser_unlock_window: int = 2

    weekly_challenges: tuple[MysteryChallenge, ...] = DEFAULT_WEEKLY_CHALLENGES

    # Reveal animation thresholds (XP)
    reveal_explosion_xp: int = 500
    reveal_sparkle_xp: int = 200
    reveal_unwrap_xp: int = 100

    @model_validator(mode="after")
    def check_weights(self) -> "MysteryConfig":
        if len(self.multipliers) != len(self.multiplier_weights):
            raise ValueError("Each multiplier needs exactly one weight")
        if not self.multipliers or sum(self.multiplier_weights) <= 0:
            raise ValueError("Multiplier weights must sum to a positive number")
        missing = [m for m in self.multipliers if not self.multiplier_messages.get(m)]
        if missing:
            raise ValueError(f"No messages for multipliers {missing}")
        if not self.bonus_drop_messages or not self.weekly_challenges:
            raise ValueError("Bonus drop messages and weekly challenges cannot be empty")
        return self

    @property
    def bonus_drop_triggers(self) -> tuple[int, ...]:
        return tuple(sorted(self.bonus_drop_rewards))


# ============================================
# Whole Economy
# ============================================

class GameEconomy(BaseModel):
    """The complete, immutable game economy"""
    model_config = ConfigDict(frozen=True)

    xp: XPAwards = Field(default_factory=XPAwards)
    levels: LevelTable = Field(default_factory=LevelTable)
    achievements: Dict[str, AchievementDefinition] = Field(
        default_factory=lambda: {a.key: a for a in DEFAULT_ACHIEVEMENTS}
    )
    tier_colors: Dict[AchievementTier, str] = Field(default_factory=lambda: dict(DEFAULT_TIER_COLORS))
    streaks: StreakTable = Field(default_factory=StreakTable)
    mystery: MysteryConfig = Field(default_factory=MysteryConfig)

    @model_validator(mode="after")
    def check_achievement_keys(self) -> "GameEconomy":
        mismatched = [k for k, a in self.achievements.items() if k != a.key]
        if mismatched:
            raise ValueError(f"Achievement keys do not match definitions: {mismatched}")
        return self


def _merge_sections(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Override fields section by section; a field given in override replaces the default wholesale"""
    merged = dict(base)
    for section, values in override.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged


def load_economy(path: Optional[Path] = None) -> GameEconomy:
    """
    Build the game economy, applying a JSON override file if given

    Args:
        path: JSON file overriding any subset of fields, per section

    Returns:
        Validated GameEconomy

    Raises:
        EconomyConfigError: The file is not valid JSON or the merged tables are inconsistent
        ConfigurationError: The file cannot be read
    """
    defaults = GameEconomy()
    if path is None:
        return defaults

    try:
        override = json.loads(Path(path).read_text(encoding="utf-8"))
        economy = GameEconomy.model_validate(
            _merge_sections(defaults.model_dump(mode="json"), override)
        )
    except Exception as e:
        raise wrap_external_exception(e, operation="load_economy", context={"path": str(path)}) from e

    logger.info(f"Loaded game economy overrides from {path}: sections {sorted(override)}")
    return economy


@lru_cache(maxsize=1)
def get_economy() -> GameEconomy:
    """Process-wide economy, loaded once from GAMIFICATION_ECONOMY_FILE (or defaults)"""
    return load_economy(config.GAMIFICATION_ECONOMY_FILE)
