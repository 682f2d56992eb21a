"""Hapien gamification engine: XP, levels, achievements, streaks and mystery rewards"""

__version__ = "0.1.0"
