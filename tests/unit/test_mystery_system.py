"""Unit tests for the mystery/reward roller (hapien/gamification/mystery_system.py)"""
import pytest
from collections import Counter
from datetime import datetime

from hapien.gamification.mystery_system import (
    calculate_multiplier_bonus,
    check_for_bonus_drop,
    generate_mystery_teaser,
    generate_weekly_challenge,
    get_reveal_animation,
    is_happy_hour_active,
    roll_for_xp_multiplier,
)
from hapien.gamification.random_source import SequenceRandomSource, SystemRandomSource
from hapien.models.mystery import MysteryEventType, RevealAnimation, TeaserType, XPMultiplierEvent


# ============================================================================
# XP Multiplier Tests
# ============================================================================

def test_multiplier_not_triggered():
    """Test a draw above the probability yields nothing after one draw"""
    rng = SequenceRandomSource([0.5])

    assert roll_for_xp_multiplier(rng) is None
    assert rng.calls == 1


def test_multiplier_lowest_weight_band():
    """Test the first weight band picks 1.5x"""
    event = roll_for_xp_multiplier(SequenceRandomSource([0.05, 0.0, 0.0]))

    assert event.type == MysteryEventType.XP_MULTIPLIER
    assert event.multiplier == 1.5
    assert event.message == "Nice! 1.5x XP bonus!"


def test_multiplier_gate_is_inclusive():
    """Test a draw equal to the probability still triggers; 2x band"""
    event = roll_for_xp_multiplier(SequenceRandomSource([0.1, 0.8, 0.5]))

    assert event.multiplier == 2.0
    assert event.message == "Double XP! You're on fire!"


def test_multiplier_jackpot_band():
    """Test the last weight band picks 3x"""
    event = roll_for_xp_multiplier(SequenceRandomSource([0.01, 0.99, 0.99]))

    assert event.multiplier == 3.0
    assert event.message == "3x XP - Incredibly lucky!"


def test_multiplier_distribution_converges():
    """Test trigger rate ~10% and magnitudes ~70/25/5 over many seeded rolls"""
    rng = SystemRandomSource(seed=1234)
    rolls = 100_000

    events = [roll_for_xp_multiplier(rng) for _ in range(rolls)]
    triggered = [e for e in events if e is not None]
    shares = Counter(e.multiplier for e in triggered)

    assert 0.09 < len(triggered) / rolls < 0.11
    assert 0.67 < shares[1.5] / len(triggered) < 0.73
    assert 0.22 < shares[2.0] / len(triggered) < 0.28
    assert 0.035 < shares[3.0] / len(triggered) < 0.065


def test_calculate_multiplier_bonus():
    """Test extra XP on top of the award"""
    assert calculate_multiplier_bonus(150, XPMultiplierEvent(multiplier=1.5, message="")) == 75
    assert calculate_multiplier_bonus(150, XPMultiplierEvent(multiplier=3.0, message="")) == 300
    assert calculate_multiplier_bonus(75, XPMultiplierEvent(multiplier=1.5, message="")) == 37


# ============================================================================
# Bonus Drop Tests
# ============================================================================

def test_bonus_drop_at_unperturbed_milestone():
    """Test a centered draw keeps the milestone exact"""
    event = check_for_bonus_drop(10, SequenceRandomSource([0.5, 0.0, 0.0]))

    assert event.type == MysteryEventType.BONUS_DROP
    assert event.xp_amount == 100
    assert event.milestone == "10 Hangouts"
    assert event.message == "10 hangouts milestone! +100 XP bonus!"


def test_bonus_drop_with_negative_variance():
    """Test a low draw moves the 100 milestone down to 95"""
    # 10, 25 and 50 stay centered; 100 shifts by floor((0.26 - 0.5) * 20) = -5
    rng = SequenceRandomSource([0.5, 0.5, 0.5, 0.26, 0.5, 0.5])

    event = check_for_bonus_drop(95, rng)

    assert event.milestone == "100 Hangouts"
    assert event.xp_amount == 1000
    assert event.message == "You reached 100 hangouts! Here's 1000 bonus XP!"


def test_bonus_drop_miss_checks_every_milestone():
    """Test no drop away from milestones, one draw per milestone"""
    rng = SequenceRandomSource([0.5])

    assert check_for_bonus_drop(7, rng) is None
    assert rng.calls == 7


def test_bonus_drop_amount_within_range():
    """Test drop amounts stay inside the configured range"""
    rng = SystemRandomSource(seed=7)
    amounts = []
    for _ in range(2000):
        event = check_for_bonus_drop(25, rng)
        if event is not None and event.milestone == "25 Hangouts":
            amounts.append(event.xp_amount)

    assert amounts
    assert all(200 <= a <= 300 for a in amounts)


def test_bonus_drop_stable_key_is_repeatable():
    """Test a stable key gives the same trigger on every call"""
    first = [check_for_bonus_drop(n, SystemRandomSource(), stable_key="user-1") is not None for n in range(1, 1200)]
    second = [check_for_bonus_drop(n, SystemRandomSource(), stable_key="user-1") is not None for n in range(1, 1200)]

    assert first == second
    # Milestone variance windows do not overlap: exactly one trigger per milestone
    assert sum(first) == 7


def test_bonus_drop_stable_key_uses_rng_only_for_reward():
    """Test stable mode draws only the amount and message"""
    rng = SequenceRandomSource([0.5])

    assert check_for_bonus_drop(3, rng, stable_key="user-1") is None
    assert rng.calls == 0


# ============================================================================
# Happy Hour Tests
# ============================================================================

def test_happy_hour_peak_probability():
    """Test 25% chance during peak hours"""
    peak = datetime(2024, 1, 10, 18, 0)

    assert is_happy_hour_active(SequenceRandomSource([0.2]), now=peak) is True
    assert is_happy_hour_active(SequenceRandomSource([0.3]), now=peak) is False


def test_happy_hour_off_peak_probability():
    """Test 10% chance outside peak hours"""
    morning = datetime(2024, 1, 10, 10, 0)

    assert is_happy_hour_active(SequenceRandomSource([0.2]), now=morning) is False
    assert is_happy_hour_active(SequenceRandomSource([0.05]), now=morning) is True


# ============================================================================
# Teaser Tests
# ============================================================================

def test_teaser_next_milestone():
    """Test teaser close to a hangout milestone"""
    teaser = generate_mystery_teaser(7, 10, 1, SequenceRandomSource([0.0]))

    assert teaser.type == TeaserType.NEXT_MILESTONE
    assert teaser.hint == "3 more hangouts to find out!"
    assert teaser.progress == 7
    assert teaser.progress_max == 10


def test_teaser_singular_hint():
    """Test singular wording for one hangout left"""
    teaser = generate_mystery_teaser(9, 0, 1, SequenceRandomSource([0.0]))

    assert teaser.hint == "1 more hangout to find out!"


def test_teaser_none_when_nothing_close():
    """Test no teaser when nothing is within reach"""
    assert generate_mystery_teaser(0, 0, 1, SequenceRandomSource([0.0])) is None
    assert generate_mystery_teaser(1000, 60, 20, SequenceRandomSource([0.0])) is None


@pytest.mark.parametrize("draw,expected", [
    (0.0, TeaserType.NEXT_MILESTONE),
    (0.5, TeaserType.HIDDEN_BADGE),
    (0.99, TeaserType.SPECIAL_EVENT),
])
def test_teaser_random_pick(draw, expected):
    """Test one teaser is picked uniformly among the applicable ones"""
    teaser = generate_mystery_teaser(9, 47, 4, SequenceRandomSource([draw]))

    assert teaser.type == expected


def test_teaser_texts():
    """Test hidden badge and level teaser wording"""
    badge = generate_mystery_teaser(0, 47, 1, SequenceRandomSource([0.0]))
    level = generate_mystery_teaser(0, 0, 8, SequenceRandomSource([0.0]))

    assert badge.hint == "3 more new faces to discover it!"
    assert level.hint == "Reach level 10 to unlock!"


# ============================================================================
# Weekly Challenge & Reveal Tests
# ============================================================================

@pytest.mark.parametrize("draw,expected_id", [
    (0.0, "early_bird_week"),
    (0.25, "social_sprint"),
    (0.65, "streak_keeper"),
    (0.99, "weekend_warrior"),
])
def test_generate_weekly_challenge(draw, expected_id):
    """Test challenge pick from the pool"""
    assert generate_weekly_challenge(SequenceRandomSource([draw])).id == expected_id


@pytest.mark.parametrize("xp,expected", [
    (50, RevealAnimation.FLIP),
    (100, RevealAnimation.UNWRAP),
    (199, RevealAnimation.UNWRAP),
    (200, RevealAnimation.SPARKLE),
    (500, RevealAnimation.EXPLOSION),
    (7500, RevealAnimation.EXPLOSION),
])
def test_get_reveal_animation(xp, expected):
    """Test animation by reward size"""
    assert get_reveal_animation(xp) == expected
