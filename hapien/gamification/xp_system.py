"""
XP Calculator

Converts gameplay events into XP awards, with all stacking bonuses and
multipliers.

XP Award Rules (default economy):
- Complete hangout: 50 XP (base)
- First hangout of the day: +20 XP
- Meeting a new person: +100 XP, or repeat meetup: +75 XP
- Reaching close-friend status: +200 XP
- Sports category: +10 XP
- Before 8 AM / from 9 PM: +15 XP
- Daily streak: +10 XP per day, capped at 100
- 10th/25th/50th/100th completion: +100/250/500/1000 XP
- Happy hour: whole subtotal doubled
"""

from typing import Any, Dict, List, Optional
import logging

from hapien.gamification.economy import GameEconomy, get_economy
from hapien.models.xp import HangoutCompletionContext, XPEventType, XPLedgerEntry
from hapien.utils.datetime_helpers import local_hour

logger = logging.getLogger(__name__)


def calculate_streak_bonus(days: int, economy: Optional[GameEconomy] = None) -> int:
    """Daily streak bonus: per-day XP, capped"""
    awards = (economy or get_economy()).xp
    return min(days * awards.streak_bonus_per_day, awards.streak_bonus_cap)


def calculate_weekly_streak_bonus(weeks: int, economy: Optional[GameEconomy] = None) -> int:
    """Weekly streak bonus: flat XP per week"""
    return weeks * (economy or get_economy()).xp.weekly_streak_bonus_per_week


def calculate_activity_milestone_bonus(count: int, economy: Optional[GameEconomy] = None) -> int:
    """
    Bonus for hitting an activity milestone exactly

    Only an exact match counts: a counter that skips over a milestone
    (batch import, backfill) never receives that bonus.
    """
    return (economy or get_economy()).xp.activity_milestones.get(count, 0)


def get_xp_for_event(event_type: XPEventType, economy: Optional[GameEconomy] = None) -> int:
    """
    Flat XP amount for a simple event

    Computed events (streak, milestone, mystery, happy hour) have no flat
    amount and return 0.
    """
    awards = (economy or get_economy()).xp
    flat_awards = {
        XPEventType.JOIN_HANGOUT: awards.join_hangout,
        XPEventType.COMPLETE_HANGOUT: awards.complete_hangout,
        XPEventType.CREATE_HANGOUT: awards.create_hangout,
        XPEventType.FIRST_HANGOUT_OF_DAY: awards.first_hangout_of_day,
        XPEventType.MEET_NEW_PERSON: awards.meet_new_person,
        XPEventType.REPEAT_MEETUP_SAME_PERSON: awards.repeat_meetup_same_person,
        XPEventType.REACH_CLOSE_FRIEND_STATUS: awards.reach_close_friend_status,
        XPEventType.SPORTS_BONUS: awards.sports_activity,
        XPEventType.EARLY_BIRD_BONUS: awards.early_bird,
        XPEventType.NIGHT_OWL_BONUS: awards.night_owl,
    }
    return flat_awards.get(event_type, 0)


def calculate_hangout_completion_xp(
    context: HangoutCompletionContext,
    economy: Optional[GameEconomy] = None
) -> Dict[str, Any]:
    """
    Calculate XP for completing a hangout with all bonuses

    Inputs are trusted: negative streaks or counts are a caller error and
    are not guarded.

    Args:
        context: Hangout completion context from the host
        economy: Economy tables (defaults to the process-wide economy)

    Returns:
        {
            'base_xp': int,
            'bonuses': [{'type': XPEventType, 'amount': int}, ...],
            'total_xp': int,
            'multiplier': int
        }
    """
    economy = economy or get_economy()
    awards = economy.xp
    bonuses: List[Dict[str, Any]] = []
    base_xp = awards.complete_hangout

    if context.is_first_hangout_of_day:
        bonuses.append({"type": XPEventType.FIRST_HANGOUT_OF_DAY, "amount": awards.first_hangout_of_day})

    # Social growth: a new person takes precedence over a repeat meetup
    if context.is_new_person:
        bonuses.append({"type": XPEventType.MEET_NEW_PERSON, "amount": awards.meet_new_person})
    elif context.is_repeat_meetup:
        bonuses.append({"type": XPEventType.REPEAT_MEETUP_SAME_PERSON, "amount": awards.repeat_meetup_same_person})

    if context.reached_close_friend_status:
        bonuses.append({"type": XPEventType.REACH_CLOSE_FRIEND_STATUS, "amount": awards.reach_close_friend_status})

    if context.hangout_category == awards.bonus_category:
        bonuses.append({"type": XPEventType.SPORTS_BONUS, "amount": awards.sports_activity})

    hour = local_hour(context.hangout_time)
    if hour < awards.early_bird_before_hour:
        bonuses.append({"type": XPEventType.EARLY_BIRD_BONUS, "amount": awards.early_bird})
    elif hour >= awards.night_owl_from_hour:
        bonuses.append({"type": XPEventType.NIGHT_OWL_BONUS, "amount": awards.night_owl})

    if context.current_streak > 0:
        bonuses.append({
            "type": XPEventType.DAILY_STREAK_BONUS,
            "amount": calculate_streak_bonus(context.current_streak, economy),
        })

    milestone_bonus = calculate_activity_milestone_bonus(context.activity_count, economy)
    if milestone_bonus > 0:
        bonuses.append({"type": XPEventType.ACTIVITY_MILESTONE, "amount": milestone_bonus})

    subtotal = base_xp + sum(b["amount"] for b in bonuses)
    multiplier = awards.happy_hour_multiplier if context.is_happy_hour else 1
    total_xp = subtotal * multiplier

    logger.debug(
        f"Hangout completion XP: base {base_xp} + {len(bonuses)} bonuses = {subtotal} "
        f"x{multiplier} = {total_xp}"
    )

    return {
        "base_xp": base_xp,
        "bonuses": bonuses,
        "total_xp": total_xp,
        "multiplier": multiplier,
    }


def to_ledger_entries(
    breakdown: Dict[str, Any],
    source_id: Optional[str] = None
) -> List[XPLedgerEntry]:
    """
    Split an XP breakdown into ledger entries whose amounts sum to total_xp

    The happy-hour surplus (total minus subtotal) is its own entry.
    """
    entries = [
        XPLedgerEntry(
            event_type=XPEventType.COMPLETE_HANGOUT,
            amount=breakdown["base_xp"],
            reason="Hangout completed",
            source_id=source_id,
        )
    ]
    for bonus in breakdown["bonuses"]:
        entries.append(XPLedgerEntry(event_type=bonus["type"], amount=bonus["amount"], source_id=source_id))

    subtotal = sum(e.amount for e in entries)
    surplus = breakdown["total_xp"] - subtotal
    if surplus > 0:
        entries.append(XPLedgerEntry(
            event_type=XPEventType.HAPPY_HOUR_MULTIPLIER,
            amount=surplus,
            reason=f"Happy hour x{breakdown['multiplier']}",
            source_id=source_id,
        ))
    return entries


def format_xp(xp: int) -> str:
    """Compact XP display: 950 -> '950', 1250 -> '1.2k'"""
    if xp >= 1000:
        return f"{xp / 1000:.1f}k"
    return str(xp)


def calculate_xp_to_next_level(current_xp: int, current_level: int, economy: Optional[GameEconomy] = None) -> int:
    """XP still needed to reach the next level (0 at max level)"""
    thresholds = (economy or get_economy()).levels.thresholds
    if current_level >= len(thresholds):
        return 0
    return thresholds[current_level] - current_xp


def calculate_level_progress(current_xp: int, current_level: int, economy: Optional[GameEconomy] = None) -> int:
    """Percent progress through the current level (100 at max level)"""
    thresholds = (economy or get_economy()).levels.thresholds
    if current_level >= len(thresholds):
        return 100

    current_threshold = thresholds[current_level - 1]
    next_threshold = thresholds[current_level]
    xp_in_level = current_xp - current_threshold
    xp_for_level = next_threshold - current_threshold

    return max(0, min(100, round(xp_in_level / xp_for_level * 100)))
