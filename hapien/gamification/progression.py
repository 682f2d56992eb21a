"""
Progression

Host-facing orchestration of the gamification data flow for one event:

    hangout completed -> daily streak updated -> XP computed (with the new
    streak) -> mystery rolls -> XP total updated -> level-up detected

Every function takes the user's prior state and returns a new state; the
input state is never mutated. The host persists the returned state
atomically (read-modify-write in one transaction); nothing here does I/O.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

from hapien.gamification.achievement_system import check_achievement_unlock
from hapien.gamification.economy import GameEconomy, get_economy
from hapien.gamification.level_system import check_level_up
from hapien.gamification.mystery_system import (
    calculate_multiplier_bonus,
    check_for_bonus_drop,
    roll_for_xp_multiplier,
)
from hapien.gamification.random_source import RandomSource
from hapien.gamification.streak_system import apply_streak_update
from hapien.gamification.xp_system import calculate_hangout_completion_xp, to_ledger_entries
from hapien.models.mystery import BonusDropEvent, XPMultiplierEvent
from hapien.models.progress import StreakType, UserProgressState
from hapien.models.xp import HangoutCompletionContext, XPEventType, XPLedgerEntry
from hapien.monitoring import (
    track_achievement_tier_up,
    track_level_up,
    track_mystery_event,
    track_streak_event,
    track_xp_award,
)
from hapien.utils.datetime_helpers import DateLike

logger = logging.getLogger(__name__)


@dataclass
class ProgressionResult:
    """Outcome of applying one hangout completion"""
    state: UserProgressState
    xp_breakdown: Dict[str, Any]
    ledger: List[XPLedgerEntry]
    xp_awarded: int
    level_up: Dict[str, Any]
    streak_update: Dict[str, Any]
    multiplier_event: Optional[XPMultiplierEvent] = None
    bonus_drop: Optional[BonusDropEvent] = None
    events: List[str] = field(default_factory=list)


def _streak_event_name(streak_update: Dict[str, Any]) -> str:
    if streak_update["streak_broken"]:
        return "broken"
    if streak_update["is_new_streak"]:
        return "started"
    if streak_update["milestone_reached"]:
        return "milestone"
    return "continued"


def record_streak_activity(
    state: UserProgressState,
    streak_type: StreakType,
    activity_date: Optional[DateLike] = None,
    economy: Optional[GameEconomy] = None
) -> Tuple[UserProgressState, Dict[str, Any]]:
    """
    Record an activity on one streak

    Returns:
        (new state, update_streak result)
    """
    new_streak, result = apply_streak_update(state.streak(streak_type), activity_date, streak_type, economy)
    streaks = {t: s.model_copy() for t, s in state.streaks.items()}
    streaks[streak_type] = new_streak
    new_state = state.model_copy(deep=True, update={"streaks": streaks})

    if new_streak != state.streak(streak_type):
        track_streak_event(streak_type.value, _streak_event_name(result))

    return new_state, result


def apply_hangout_completion(
    state: UserProgressState,
    context: HangoutCompletionContext,
    rng: Optional[RandomSource] = None,
    economy: Optional[GameEconomy] = None,
    hangout_id: Optional[str] = None
) -> ProgressionResult:
    """
    Apply a completed hangout to a user's progress

    The context's current_streak and activity_count are taken from state
    (after the daily streak update and counting this hangout), not from
    the caller.

    Args:
        state: User's persisted progress before the hangout
        context: Hangout completion context from the host
        rng: Random source for mystery rolls; None skips them
        economy: Economy tables (defaults to the process-wide economy)
        hangout_id: Copied onto ledger entries

    Returns:
        ProgressionResult with the new state to persist
    """
    economy = economy or get_economy()
    events: List[str] = []

    state, streak_update = record_streak_activity(state, StreakType.DAILY, context.hangout_time, economy)
    total_hangouts = state.total_hangouts + 1

    context = context.model_copy(update={
        "current_streak": streak_update["new_count"],
        "activity_count": total_hangouts,
    })
    breakdown = calculate_hangout_completion_xp(context, economy)
    ledger = to_ledger_entries(breakdown, source_id=hangout_id)

    if streak_update["milestone_reached"]:
        events.append("streak_milestone")
        ledger.append(XPLedgerEntry(
            event_type=XPEventType.STREAK_MILESTONE,
            amount=streak_update["milestone_reward"],
            reason=f"{streak_update['milestone_reached']}-day streak",
            source_id=hangout_id,
        ))
    if streak_update["streak_broken"]:
        events.append("streak_broken")

    multiplier_event = None
    bonus_drop = None
    if rng is not None:
        multiplier_event = roll_for_xp_multiplier(rng, economy)
        if multiplier_event is not None:
            events.append("xp_multiplier")
            track_mystery_event(multiplier_event.type.value)
            ledger.append(XPLedgerEntry(
                event_type=XPEventType.MYSTERY_BONUS,
                amount=calculate_multiplier_bonus(breakdown["total_xp"], multiplier_event),
                reason=multiplier_event.message,
                source_id=hangout_id,
            ))

        bonus_drop = check_for_bonus_drop(total_hangouts, rng, economy, stable_key=state.user_id)
        if bonus_drop is not None:
            events.append("bonus_drop")
            track_mystery_event(bonus_drop.type.value)
            ledger.append(XPLedgerEntry(
                event_type=XPEventType.MYSTERY_BONUS,
                amount=bonus_drop.xp_amount,
                reason=bonus_drop.message,
                source_id=hangout_id,
            ))

    xp_awarded = sum(entry.amount for entry in ledger)
    new_total_xp = state.total_xp + xp_awarded
    level_up = check_level_up(state.total_xp, new_total_xp, economy)
    if level_up["leveled_up"]:
        events.append("level_up")
        track_level_up(level_up["new_level"])

    for entry in ledger:
        track_xp_award(entry.event_type.value, entry.amount)

    new_state = state.model_copy(update={"total_xp": new_total_xp, "total_hangouts": total_hangouts})

    logger.info(
        f"Hangout completion for user {state.user_id}: +{xp_awarded} XP "
        f"(total {new_total_xp}, level {level_up['new_level']}), "
        f"streak {streak_update['new_count']}, events {events or 'none'}"
    )

    return ProgressionResult(
        state=new_state,
        xp_breakdown=breakdown,
        ledger=ledger,
        xp_awarded=xp_awarded,
        level_up=level_up,
        streak_update=streak_update,
        multiplier_event=multiplier_event,
        bonus_drop=bonus_drop,
        events=events,
    )


def apply_achievement_progress(
    state: UserProgressState,
    achievement_key: str,
    new_progress: int,
    economy: Optional[GameEconomy] = None
) -> Tuple[UserProgressState, Dict[str, Any]]:
    """
    Store a new progress value for one achievement and report a tier-up

    Returns:
        (new state, check_achievement_unlock result)
    """
    old_progress = state.achievement_progress.get(achievement_key, 0)
    result = check_achievement_unlock(achievement_key, old_progress, new_progress, economy)

    progress = dict(state.achievement_progress)
    progress[achievement_key] = new_progress
    new_state = state.model_copy(deep=True, update={"achievement_progress": progress})

    if result["unlocked"]:
        track_achievement_tier_up(achievement_key, result["new_tier"].value)

    return new_state, result
