"""
Achievement Tracker

Progressive badges collected by users.
Tiers: Bronze -> Silver -> Gold -> Platinum

Tiered achievements map a progress counter onto 4 ascending thresholds.
One-time achievements are binary: progress >= 1 counts as gold (complete),
anything else is locked.

Progress counters are expected to be non-decreasing; a decrease is a
caller error and is not validated here.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from hapien.gamification.economy import GameEconomy, get_economy
from hapien.models.achievement import AchievementCategory, AchievementDefinition, AchievementTier, TIER_ORDER

logger = logging.getLogger(__name__)


def get_tier_from_progress(progress: int, tiers: Sequence[int]) -> AchievementTier:
    """Highest tier whose threshold progress has reached, else locked"""
    for index in range(len(TIER_ORDER) - 1, -1, -1):
        if progress >= tiers[index]:
            return TIER_ORDER[index]
    return AchievementTier.LOCKED


def get_tier_index(tier: AchievementTier) -> int:
    """0-3 for bronze-platinum, -1 for locked"""
    if tier in TIER_ORDER:
        return TIER_ORDER.index(tier)
    return -1


def get_next_tier_threshold(progress: int, tiers: Sequence[int]) -> Optional[int]:
    """First threshold above progress, or None at platinum"""
    for threshold in tiers:
        if progress < threshold:
            return threshold
    return None


def get_achievement_progress_info(achievement: AchievementDefinition, progress: int) -> Dict[str, Any]:
    """
    Progress toward the next tier

    progress_percent is measured within the current tier band (previous
    threshold to next threshold), not toward platinum.

    Returns:
        {
            'current_tier': AchievementTier,
            'progress_percent': int,
            'next_tier_threshold': int | None,
            'progress_to_next_tier': int,
            'is_complete': bool
        }
    """
    if achievement.is_one_time:
        done = progress >= 1
        return {
            "current_tier": AchievementTier.GOLD if done else AchievementTier.LOCKED,
            "progress_percent": 100 if done else 0,
            "next_tier_threshold": None if done else 1,
            "progress_to_next_tier": 0 if done else 1 - progress,
            "is_complete": done,
        }

    tiers = achievement.tiers
    current_tier = get_tier_from_progress(progress, tiers)
    next_threshold = get_next_tier_threshold(progress, tiers)
    tier_index = get_tier_index(current_tier)

    prev_threshold = tiers[tier_index] if tier_index >= 0 else 0
    band_top = next_threshold if next_threshold is not None else tiers[-1]
    band = band_top - prev_threshold

    if band > 0:
        progress_percent = round((progress - prev_threshold) / band * 100)
    else:
        progress_percent = 100

    return {
        "current_tier": current_tier,
        "progress_percent": max(0, min(100, progress_percent)),
        "next_tier_threshold": next_threshold,
        "progress_to_next_tier": next_threshold - progress if next_threshold is not None else 0,
        "is_complete": current_tier == AchievementTier.PLATINUM,
    }


def check_achievement_unlock(
    achievement_key: str,
    old_progress: int,
    new_progress: int,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Detect a tier-up between two progress values

    Unknown keys never raise; they report nothing unlocked so callers
    iterating a stale achievement list keep working.

    Returns:
        {
            'unlocked': bool,                   # tier index strictly increased
            'new_tier': AchievementTier | None, # set only when unlocked
            'previous_tier': AchievementTier
        }
    """
    achievement = (economy or get_economy()).achievements.get(achievement_key)
    if achievement is None:
        logger.debug(f"Ignoring progress for unknown achievement {achievement_key}")
        return {"unlocked": False, "new_tier": None, "previous_tier": AchievementTier.LOCKED}

    if achievement.is_one_time:
        unlocked = old_progress < 1 <= new_progress
        previous_tier = AchievementTier.GOLD if old_progress >= 1 else AchievementTier.LOCKED
        new_tier = AchievementTier.GOLD if unlocked else None
    else:
        previous_tier = get_tier_from_progress(old_progress, achievement.tiers)
        tier = get_tier_from_progress(new_progress, achievement.tiers)
        unlocked = get_tier_index(tier) > get_tier_index(previous_tier)
        new_tier = tier if unlocked else None

    if unlocked:
        logger.info(
            f"Achievement {achievement_key} ({achievement.name}) unlocked: "
            f"{previous_tier.value} -> {new_tier.value}"
        )

    return {
        "unlocked": unlocked,
        "new_tier": new_tier,
        "previous_tier": previous_tier,
    }


def get_achievements_by_category(
    category: AchievementCategory,
    economy: Optional[GameEconomy] = None
) -> List[AchievementDefinition]:
    """Achievement definitions in a category, in table order"""
    return [a for a in (economy or get_economy()).achievements.values() if a.category == category]


def get_achievement_display_info(
    achievement: AchievementDefinition,
    progress: int,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Achievement card data for UI

    Returns:
        {
            'name', 'emoji', 'description': str,
            'tier': AchievementTier,
            'tier_color': str,
            'progress': int,
            'progress_display': str,   # "12/25", "130 (Max)", "Unlocked"/"Locked"
            'next_milestone': int | None
        }
    """
    economy = economy or get_economy()
    info = get_achievement_progress_info(achievement, progress)

    if achievement.is_one_time:
        progress_display = "Unlocked" if info["is_complete"] else "Locked"
    elif info["next_tier_threshold"] is not None:
        progress_display = f"{progress}/{info['next_tier_threshold']}"
    else:
        progress_display = f"{progress} (Max)"

    return {
        "name": achievement.name,
        "emoji": achievement.emoji,
        "description": achievement.description,
        "tier": info["current_tier"],
        "tier_color": economy.tier_colors.get(info["current_tier"], ""),
        "progress": progress,
        "progress_display": progress_display,
        "next_milestone": info["next_tier_threshold"],
    }
