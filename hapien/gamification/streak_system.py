"""
Streak Tracker

Daily, weekly and partner streaks. The fear of losing a streak motivates
continued engagement.

Rules (per streak instance):
- First activity ever: streak starts at 1
- Same calendar day as the last activity: no change
- Exactly the next calendar day: streak continues (+1), milestones checked
- Any other day (gap of 2+ days, or earlier than the last activity):
  streak restarts at 1, longest streak is kept

Days are local calendar days, never 24-hour windows.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timedelta
import logging

from hapien.gamification.economy import GameEconomy, get_economy
from hapien.models.progress import StreakState, StreakType
from hapien.utils.datetime_helpers import (
    DateLike,
    end_of_day,
    now_local,
    previous_calendar_day,
    to_calendar_date,
    to_local,
)

logger = logging.getLogger(__name__)

STREAK_UNIT_LABELS = {
    StreakType.DAILY: "day",
    StreakType.WEEKLY: "week",
    StreakType.PARTNER: "meetup",
}


def update_streak(
    current_count: int,
    longest_count: int,
    last_activity_date: Optional[DateLike],
    activity_date: Optional[DateLike] = None,
    streak_type: StreakType = StreakType.DAILY,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Update a streak when an activity occurs

    Args:
        current_count: Current streak length
        longest_count: Longest streak so far
        last_activity_date: Day of the last counted activity (None if never)
        activity_date: When the new activity happened (defaults to now)
        streak_type: Selects the milestone table
        economy: Economy tables (defaults to the process-wide economy)

    Returns:
        {
            'new_count': int,
            'new_longest': int,
            'is_new_streak': bool,
            'streak_broken': bool,
            'milestone_reached': int | None,
            'milestone_reward': int   # XP for the milestone, 0 if none
        }
    """
    economy = economy or get_economy()
    activity_day = to_calendar_date(activity_date if activity_date is not None else now_local())
    last_day = to_calendar_date(last_activity_date)

    if last_day is None:
        return _streak_result(1, max(1, longest_count), is_new_streak=True)

    if last_day == activity_day:
        return _streak_result(current_count, longest_count)

    if last_day == previous_calendar_day(activity_day):
        new_count = current_count + 1
        milestone = new_count if new_count in economy.streaks.milestones(streak_type) else None
        reward = economy.streaks.reward(streak_type, milestone) if milestone else 0
        if milestone:
            logger.info(f"{streak_type.value} streak milestone reached: {milestone} (+{reward} XP)")
        return _streak_result(
            new_count,
            max(new_count, longest_count),
            milestone_reached=milestone,
            milestone_reward=reward,
        )

    streak_broken = current_count > 0
    if streak_broken:
        logger.info(
            f"{streak_type.value} streak broken. Was {current_count}, "
            f"last activity {last_day}, now {activity_day}"
        )
    return _streak_result(1, longest_count, is_new_streak=True, streak_broken=streak_broken)


def _streak_result(
    new_count: int,
    new_longest: int,
    is_new_streak: bool = False,
    streak_broken: bool = False,
    milestone_reached: Optional[int] = None,
    milestone_reward: int = 0
) -> Dict[str, Any]:
    return {
        "new_count": new_count,
        "new_longest": new_longest,
        "is_new_streak": is_new_streak,
        "streak_broken": streak_broken,
        "milestone_reached": milestone_reached,
        "milestone_reward": milestone_reward,
    }


def apply_streak_update(
    state: StreakState,
    activity_date: Optional[DateLike] = None,
    streak_type: StreakType = StreakType.DAILY,
    economy: Optional[GameEconomy] = None
) -> tuple[StreakState, Dict[str, Any]]:
    """Run update_streak on a StreakState; returns (new state, update result)"""
    moment = activity_date if activity_date is not None else now_local()
    result = update_streak(
        state.current_count,
        state.longest_count,
        state.last_activity_date,
        moment,
        streak_type,
        economy,
    )

    new_state = StreakState(
        current_count=result["new_count"],
        longest_count=result["new_longest"],
        last_activity_date=to_calendar_date(moment),
    )
    return new_state, result


def is_streak_at_risk(
    last_activity_date: Optional[DateLike],
    now: Optional[datetime] = None,
    economy: Optional[GameEconomy] = None
) -> bool:
    """True when the streak is not renewed today and fewer than at_risk_hours remain before midnight"""
    if last_activity_date is None:
        return False

    now = to_local(now or now_local())
    if to_calendar_date(last_activity_date) == now.date():
        return False

    hours_until_midnight = (end_of_day(now) - now).total_seconds() / 3600
    return hours_until_midnight <= (economy or get_economy()).streaks.at_risk_hours


def get_time_until_streak_expiry(
    last_activity_date: Optional[DateLike],
    now: Optional[datetime] = None
) -> Optional[timedelta]:
    """Time left today to renew the streak; None if never active or already renewed today"""
    if last_activity_date is None:
        return None

    now = to_local(now or now_local())
    if to_calendar_date(last_activity_date) == now.date():
        return None

    return end_of_day(now) - now


def should_streak_continue(last_activity_date: Optional[DateLike], now: Optional[datetime] = None) -> bool:
    """Whether the last activity was today or yesterday"""
    last_day = to_calendar_date(last_activity_date)
    if last_day is None:
        return False

    today = to_calendar_date(now or now_local())
    return last_day in (today, previous_calendar_day(today))


def get_next_milestone(
    current_count: int,
    streak_type: StreakType,
    economy: Optional[GameEconomy] = None
) -> Optional[int]:
    """First milestone above the current count, or None past the last one"""
    for milestone in (economy or get_economy()).streaks.milestones(streak_type):
        if current_count < milestone:
            return milestone
    return None


def get_milestone_progress(
    current_count: int,
    streak_type: StreakType,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Progress from the last reached milestone to the next one

    Returns:
        {
            'next_milestone': int | None,
            'progress': int,          # count since the previous milestone (or the count at max)
            'progress_percent': int
        }
    """
    economy = economy or get_economy()
    next_milestone = get_next_milestone(current_count, streak_type, economy)

    if next_milestone is None:
        return {"next_milestone": None, "progress": current_count, "progress_percent": 100}

    reached = [m for m in economy.streaks.milestones(streak_type) if m <= current_count]
    prev_milestone = reached[-1] if reached else 0

    progress = current_count - prev_milestone
    span = next_milestone - prev_milestone

    return {
        "next_milestone": next_milestone,
        "progress": progress,
        "progress_percent": round(progress / span * 100),
    }


def format_time_remaining(remaining: timedelta, long_minutes: bool = False) -> str:
    """'3h 12m', or '45m' ('45 minutes' with long_minutes) under an hour"""
    total_minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} minutes" if long_minutes else f"{minutes}m"


def get_streak_display_info(
    current_count: int,
    streak_type: StreakType,
    last_activity_date: Optional[DateLike],
    now: Optional[datetime] = None,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Streak badge data for UI

    Returns:
        {
            'count': int,
            'display_text': str,         # "5 days streak"
            'emoji': str,
            'is_at_risk': bool,
            'time_remaining': str | None,
            'next_milestone_text': str
        }
    """
    economy = economy or get_economy()
    now = to_local(now or now_local())
    expiry = get_time_until_streak_expiry(last_activity_date, now)
    milestone_info = get_milestone_progress(current_count, streak_type, economy)

    if current_count >= 100:
        emoji = "💎"
    elif current_count >= 30:
        emoji = "⭐"
    elif current_count >= 7:
        emoji = "🔥"
    elif current_count >= 3:
        emoji = "✨"
    else:
        emoji = "🔥"

    unit = STREAK_UNIT_LABELS[streak_type]
    display_text = f"{current_count} {unit}{'s' if current_count != 1 else ''} streak"

    if milestone_info["next_milestone"] is not None:
        next_milestone_text = (
            f"{milestone_info['next_milestone'] - current_count} more to {milestone_info['next_milestone']}!"
        )
    else:
        next_milestone_text = "Max streak achieved!"

    return {
        "count": current_count,
        "display_text": display_text,
        "emoji": emoji,
        "is_at_risk": is_streak_at_risk(last_activity_date, now, economy),
        "time_remaining": format_time_remaining(expiry) if expiry is not None else None,
        "next_milestone_text": next_milestone_text,
    }


def get_streak_at_risk_message(current_count: int, time_until_expiry: timedelta) -> str:
    """Warning shown while a streak is at risk"""
    time_text = format_time_remaining(time_until_expiry, long_minutes=True)
    return (
        f"Your {current_count}-day streak ends in {time_text}! "
        f"Complete any activity to keep it alive."
    )


def format_streak_display(streaks: Dict[StreakType, StreakState]) -> str:
    """
    Format all of a user's streaks as text

    Args:
        streaks: Streak state per type

    Returns:
        Formatted string for display
    """
    active = {t: s for t, s in streaks.items() if s.current_count > 0}
    if not active:
        return "No active streaks yet. Complete a hangout to start one! 💪"

    lines = ["🔥 YOUR STREAKS\n"]
    for streak_type, streak in sorted(active.items(), key=lambda item: item[1].current_count, reverse=True):
        unit = STREAK_UNIT_LABELS[streak_type]
        line = f"{streak_type.value.capitalize()}: {streak.current_count} {unit}{'s' if streak.current_count != 1 else ''}"
        if streak.longest_count > streak.current_count:
            line += f" (best: {streak.longest_count})"
        lines.append(line)

    return "\n".join(lines)
