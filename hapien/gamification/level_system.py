"""
Level Resolver

Maps cumulative XP to a level, a title and unlocked features, and detects
level-up transitions. The level is never stored: it is always recomputed
from total XP.
"""

from typing import Any, Dict, List, Optional
import logging

from hapien.gamification.economy import GameEconomy, get_economy
from hapien.models.level import LevelUnlock

logger = logging.getLogger(__name__)


def get_level_from_xp(xp: int, economy: Optional[GameEconomy] = None) -> int:
    """
    Level (1-indexed) for cumulative XP

    The greatest level whose threshold is <= xp; 1 when below every
    threshold (only possible for negative XP, a caller error).
    """
    thresholds = (economy or get_economy()).levels.thresholds
    for i in range(len(thresholds) - 1, -1, -1):
        if xp >= thresholds[i]:
            return i + 1
    return 1


def get_level_title(level: int, economy: Optional[GameEconomy] = None) -> str:
    """Title for a level; levels past the last defined title keep the highest title"""
    titles = (economy or get_economy()).levels.titles
    if level in titles:
        return titles[level]
    return titles[max(titles)]


def get_xp_for_level(level: int, economy: Optional[GameEconomy] = None) -> int:
    """Cumulative XP needed to reach a level (clamped to the defined range)"""
    thresholds = (economy or get_economy()).levels.thresholds
    if level <= 1:
        return 0
    if level > len(thresholds):
        return thresholds[-1]
    return thresholds[level - 1]


def get_unlocks_for_level(level: int, economy: Optional[GameEconomy] = None) -> List[LevelUnlock]:
    """Unlocks available at or below a level, in table order"""
    return [u for u in (economy or get_economy()).levels.unlocks if u.level <= level]


def get_next_unlock(level: int, economy: Optional[GameEconomy] = None) -> Optional[LevelUnlock]:
    """First unlock in table order above the level, if any"""
    for unlock in (economy or get_economy()).levels.unlocks:
        if unlock.level > level:
            return unlock
    return None


def is_feature_unlocked(level: int, feature: str, economy: Optional[GameEconomy] = None) -> bool:
    """Whether a feature is available; features not bound to a level are always available"""
    for unlock in (economy or get_economy()).levels.unlocks:
        if unlock.feature == feature:
            return level >= unlock.level
    return True


def get_level_progress_info(xp: int, economy: Optional[GameEconomy] = None) -> Dict[str, Any]:
    """
    Level progress for display

    Returns:
        {
            'current_level': int,
            'current_xp': int,
            'xp_for_current_level': int,
            'xp_for_next_level': int,
            'xp_progress': int,        # XP earned within the current level
            'xp_needed': int,          # XP to level up (0 at max level)
            'progress_percent': int,   # 0-100, 100 at max level
            'title': str,
            'next_unlock': LevelUnlock | None
        }
    """
    economy = economy or get_economy()
    current_level = get_level_from_xp(xp, economy)
    xp_for_current_level = get_xp_for_level(current_level, economy)
    xp_for_next_level = get_xp_for_level(current_level + 1, economy)
    xp_progress = xp - xp_for_current_level
    level_range = xp_for_next_level - xp_for_current_level

    if level_range > 0:
        progress_percent = round(xp_progress / level_range * 100)
    else:
        progress_percent = 100

    return {
        "current_level": current_level,
        "current_xp": xp,
        "xp_for_current_level": xp_for_current_level,
        "xp_for_next_level": xp_for_next_level,
        "xp_progress": xp_progress,
        "xp_needed": max(0, xp_for_next_level - xp),
        "progress_percent": max(0, min(100, progress_percent)),
        "title": get_level_title(current_level, economy),
        "next_unlock": get_next_unlock(current_level, economy),
    }


def check_level_up(old_xp: int, new_xp: int, economy: Optional[GameEconomy] = None) -> Dict[str, Any]:
    """
    Detect a level-up between two XP totals

    Returns:
        {
            'leveled_up': bool,
            'old_level': int,
            'new_level': int,
            'new_unlocks': [LevelUnlock]  # unlocks with old_level < level <= new_level
        }
    """
    economy = economy or get_economy()
    old_level = get_level_from_xp(old_xp, economy)
    new_level = get_level_from_xp(new_xp, economy)
    leveled_up = new_level > old_level

    new_unlocks = []
    if leveled_up:
        new_unlocks = [u for u in economy.levels.unlocks if old_level < u.level <= new_level]
        logger.info(
            f"Level up {old_level} -> {new_level} ({get_level_title(new_level, economy)}), "
            f"{len(new_unlocks)} new unlock(s)"
        )

    return {
        "leveled_up": leveled_up,
        "old_level": old_level,
        "new_level": new_level,
        "new_unlocks": new_unlocks,
    }
