"""Global test fixtures for the gamification engine tests"""
import pytest
from datetime import date, datetime

from hapien import config
from hapien.gamification.economy import GameEconomy, get_economy
from hapien.models.progress import StreakState, StreakType, UserProgressState
from hapien.models.xp import HangoutCompletionContext


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def process_local_time(monkeypatch):
    """Run every test on naive process-local time with the default economy"""
    monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "")
    monkeypatch.setattr(config, "GAMIFICATION_ECONOMY_FILE", None)
    get_economy.cache_clear()
    yield
    get_economy.cache_clear()


@pytest.fixture
def economy():
    """Default game economy"""
    return GameEconomy()


# ============================================================================
# Progress Fixtures
# ============================================================================

@pytest.fixture
def reference_day():
    """Standard reference day (a Wednesday)"""
    return date(2024, 1, 10)


@pytest.fixture
def fresh_state():
    """Progress of a user who just signed up"""
    return UserProgressState()


@pytest.fixture
def active_state():
    """User on a 2-day streak with 9 hangouts completed"""
    return UserProgressState(
        total_xp=90,
        total_hangouts=9,
        streaks={
            StreakType.DAILY: StreakState(current_count=2, longest_count=2, last_activity_date=date(2024, 1, 9)),
            StreakType.WEEKLY: StreakState(),
            StreakType.PARTNER: StreakState(),
        },
    )


@pytest.fixture
def afternoon_context():
    """Plain 2 PM 'chill' hangout with no bonuses, 10th completion"""
    return HangoutCompletionContext(
        is_first_hangout_of_day=False,
        is_new_person=False,
        is_repeat_meetup=False,
        reached_close_friend_status=False,
        hangout_category="chill",
        hangout_time=datetime(2024, 1, 10, 14, 0),
        current_streak=0,
        activity_count=10,
        is_happy_hour=False,
    )
