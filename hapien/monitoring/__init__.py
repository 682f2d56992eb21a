"""Monitoring infrastructure for the gamification engine"""
from hapien.monitoring.prometheus_metrics import (
    metrics,
    track_xp_award,
    track_level_up,
    track_achievement_tier_up,
    track_streak_event,
    track_mystery_event
)

__all__ = [
    "metrics",
    "track_xp_award",
    "track_level_up",
    "track_achievement_tier_up",
    "track_streak_event",
    "track_mystery_event"
]
