"""
Mystery/Reward Roller

Random rewards keep users engaged because they don't know what's coming
next: probabilistic XP multipliers, bonus drops near hangout milestones,
happy hours, teasers and weekly mystery challenges.

Randomness always comes from an injected RandomSource. None of these
functions fail; None means "nothing happened this time".
"""

from typing import List, Optional
from datetime import datetime
import hashlib
import logging
import math

from hapien.gamification.economy import GameEconomy, get_economy
from hapien.gamification.random_source import RandomSource, choose, randint_inclusive
from hapien.models.mystery import (
    BonusDropEvent,
    MysteryChallenge,
    MysteryTeaser,
    RevealAnimation,
    TeaserType,
    XPMultiplierEvent,
)
from hapien.utils.datetime_helpers import local_hour, now_local

logger = logging.getLogger(__name__)


def roll_for_xp_multiplier(
    rng: RandomSource,
    economy: Optional[GameEconomy] = None
) -> Optional[XPMultiplierEvent]:
    """
    Roll for a random XP multiplier after a hangout completion

    One draw gates the event (triggers when the draw is <= the configured
    probability); a second draw picks the magnitude by weight and a third
    picks the message.
    """
    config = (economy or get_economy()).mystery

    if rng.next() > config.multiplier_probability:
        return None

    remaining = rng.next() * sum(config.multiplier_weights)
    multiplier = config.multipliers[0]
    for candidate, weight in zip(config.multipliers, config.multiplier_weights):
        remaining -= weight
        if remaining <= 0:
            multiplier = candidate
            break

    message = choose(rng, config.multiplier_messages[multiplier])
    logger.info(f"Mystery XP multiplier triggered: x{multiplier}")

    return XPMultiplierEvent(multiplier=multiplier, message=message)


def calculate_multiplier_bonus(xp: int, event: XPMultiplierEvent) -> int:
    """Extra XP granted by a multiplier event on top of xp (rounded down)"""
    return math.floor(xp * event.multiplier) - xp


def _stable_draw(stable_key: str, trigger: int) -> float:
    """Deterministic value in [0, 1) for a key and milestone"""
    digest = hashlib.sha256(f"{stable_key}:{trigger}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") / 2 ** 64


def check_for_bonus_drop(
    total_hangouts: int,
    rng: RandomSource,
    economy: Optional[GameEconomy] = None,
    stable_key: Optional[str] = None
) -> Optional[BonusDropEvent]:
    """
    Check whether a bonus drop triggers at this hangout count

    Each milestone is shifted by up to +/- the configured variance and
    compared for exact equality with total_hangouts. Without stable_key the
    shift is redrawn on every call, so call at most once per count and read
    None as "no drop this time". With stable_key (e.g. the user id) the
    shift is derived from the key and milestone, so repeated calls agree.
    """
    config = (economy or get_economy()).mystery

    for trigger in config.bonus_drop_triggers:
        variance = trigger * (config.bonus_drop_variance_percent / 100)
        draw = _stable_draw(stable_key, trigger) if stable_key is not None else rng.next()
        actual_trigger = trigger + math.floor((draw - 0.5) * 2 * variance)

        if total_hangouts != actual_trigger:
            continue

        reward = config.bonus_drop_rewards[trigger]
        xp_amount = randint_inclusive(rng, reward.min, reward.max)
        message = choose(rng, config.bonus_drop_messages).format(milestone=trigger, xp=xp_amount)
        logger.info(f"Bonus drop at {total_hangouts} hangouts (milestone {trigger}): +{xp_amount} XP")

        return BonusDropEvent(
            xp_amount=xp_amount,
            message=message,
            milestone=f"{trigger} Hangouts",
        )

    return None


def is_happy_hour_active(
    rng: RandomSource,
    now: Optional[datetime] = None,
    economy: Optional[GameEconomy] = None
) -> bool:
    """
    Probability-gated happy hour, more likely during peak hours

    Stateless: two calls in the same second may disagree. Consistency
    across users needs an external synchronized flag, which also
    owns how long a happy hour lasts.
    """
    config = (economy or get_economy()).mystery
    hour = local_hour(now or now_local())

    if hour in config.happy_hour_peak_hours:
        probability = config.happy_hour_peak_probability
    else:
        probability = config.happy_hour_probability

    return rng.next() < probability


def generate_mystery_teaser(
    total_hangouts: int,
    total_people_met: int,
    current_level: int,
    rng: RandomSource,
    economy: Optional[GameEconomy] = None
) -> Optional[MysteryTeaser]:
    """Pick one teaser among those that apply to the user's progress, or None"""
    config = (economy or get_economy()).mystery
    teasers: List[MysteryTeaser] = []

    next_milestone = next((t for t in config.bonus_drop_triggers if t > total_hangouts), None)
    if next_milestone is not None:
        remaining = next_milestone - total_hangouts
        if remaining <= config.teaser_milestone_window:
            teasers.append(MysteryTeaser(
                type=TeaserType.NEXT_MILESTONE,
                title="??? Something special awaits...",
                hint=f"{remaining} more hangout{'s' if remaining != 1 else ''} to find out!",
                progress=total_hangouts,
                progress_max=next_milestone,
            ))

    badge_target = config.teaser_badge_target
    if badge_target - config.teaser_badge_window <= total_people_met < badge_target:
        teasers.append(MysteryTeaser(
            type=TeaserType.HIDDEN_BADGE,
            title="🦋 A rare badge is within reach...",
            hint=f"{badge_target - total_people_met} more new faces to discover it!",
            progress=total_people_met,
            progress_max=badge_target,
        ))

    next_unlock_level = next((lvl for lvl in config.teaser_unlock_levels if lvl > current_level), None)
    if next_unlock_level is not None and next_unlock_level - current_level <= config.teaser_unlock_window:
        teasers.append(MysteryTeaser(
            type=TeaserType.SPECIAL_EVENT,
            title="🔓 A new feature awaits...",
            hint=f"Reach level {next_unlock_level} to unlock!",
        ))

    if not teasers:
        return None
    return choose(rng, teasers)


def generate_weekly_challenge(rng: RandomSource, economy: Optional[GameEconomy] = None) -> MysteryChallenge:
    """Uniformly pick this week's mystery challenge"""
    return choose(rng, (economy or get_economy()).mystery.weekly_challenges)


def get_reveal_animation(xp_amount: int, economy: Optional[GameEconomy] = None) -> RevealAnimation:
    """Bigger rewards get bigger reveals"""
    config = (economy or get_economy()).mystery
    if xp_amount >= config.reveal_explosion_xp:
        return RevealAnimation.EXPLOSION
    if xp_amount >= config.reveal_sparkle_xp:
        return RevealAnimation.SPARKLE
    if xp_amount >= config.reveal_unwrap_xp:
        return RevealAnimation.UNWRAP
    return RevealAnimation.FLIP
