"""
Gamification engine for Hapien

Pure computation layer over host-persisted counters:
- XP calculator (hangout completion awards, bonuses, multipliers)
- Level resolver (levels, titles, feature unlocks)
- Achievement tracker (bronze/silver/gold/platinum tiers, one-time badges)
- Streak tracker (daily/weekly/partner calendar-day streaks)
- Mystery/reward roller (multipliers, bonus drops, happy hours, teasers)
"""

from hapien.gamification.xp_system import calculate_hangout_completion_xp, to_ledger_entries
from hapien.gamification.level_system import get_level_from_xp, get_level_progress_info, check_level_up
from hapien.gamification.achievement_system import get_tier_from_progress, check_achievement_unlock
from hapien.gamification.streak_system import update_streak, is_streak_at_risk
from hapien.gamification.mystery_system import roll_for_xp_multiplier, check_for_bonus_drop, is_happy_hour_active
from hapien.gamification.progression import apply_hangout_completion, apply_achievement_progress
from hapien.gamification.economy import GameEconomy, get_economy, load_economy

__all__ = [
    "calculate_hangout_completion_xp",
    "to_ledger_entries",
    "get_level_from_xp",
    "get_level_progress_info",
    "check_level_up",
    "get_tier_from_progress",
    "check_achievement_unlock",
    "update_streak",
    "is_streak_at_risk",
    "roll_for_xp_multiplier",
    "check_for_bonus_drop",
    "is_happy_hour_active",
    "apply_hangout_completion",
    "apply_achievement_progress",
    "GameEconomy",
    "get_economy",
    "load_economy",
]
