"""Unit tests for the level resolver (hapien/gamification/level_system.py)"""
import pytest

from hapien.gamification.economy import GameEconomy, LevelTable
from hapien.gamification.level_system import (
    check_level_up,
    get_level_from_xp,
    get_level_progress_info,
    get_level_title,
    get_next_unlock,
    get_unlocks_for_level,
    get_xp_for_level,
    is_feature_unlocked,
)


# ============================================================================
# Level Calculation Tests
# ============================================================================

@pytest.mark.parametrize("xp,expected", [
    (0, 1),
    (99, 1),
    (100, 2),
    (249, 2),
    (250, 3),
    (849, 4),
    (850, 5),
    (5200, 10),
    (79999, 19),
    (80000, 20),
    (1_000_000, 20),
])
def test_get_level_from_xp(xp, expected):
    """Test level thresholds, including exact boundaries"""
    assert get_level_from_xp(xp) == expected


def test_get_level_from_negative_xp():
    """Test negative XP still resolves to level 1"""
    assert get_level_from_xp(-100) == 1


def test_level_is_monotonic_in_xp():
    """Test more XP never means a lower level"""
    levels = [get_level_from_xp(xp) for xp in range(0, 90_000, 37)]
    assert levels == sorted(levels)


# ============================================================================
# Title & Unlock Tests
# ============================================================================

def test_get_level_title():
    """Test titles and fallback past the last defined level"""
    assert get_level_title(1) == "Newcomer"
    assert get_level_title(10) == "Leader"
    assert get_level_title(20) == "Tribe Leader"
    assert get_level_title(25) == "Tribe Leader"


def test_get_level_title_falls_back_to_highest_defined():
    """Test fallback uses the highest defined title of a custom table"""
    economy = GameEconomy(levels=LevelTable(thresholds=(0, 10, 20), titles={1: "Rookie", 2: "Pro"}))

    assert get_level_title(3, economy) == "Pro"


def test_get_xp_for_level():
    """Test XP needed for a level, clamped to the table"""
    assert get_xp_for_level(0) == 0
    assert get_xp_for_level(1) == 0
    assert get_xp_for_level(5) == 850
    assert get_xp_for_level(21) == 80000


def test_get_unlocks_for_level():
    """Test unlocks at or below a level, in table order"""
    assert get_unlocks_for_level(2) == []
    assert [u.feature for u in get_unlocks_for_level(5)] == ["custom_hangouts", "private_groups"]
    assert len(get_unlocks_for_level(20)) == 6


def test_get_next_unlock():
    """Test the next unlock above a level"""
    assert get_next_unlock(1).feature == "custom_hangouts"
    assert get_next_unlock(10).feature == "host_events"
    assert get_next_unlock(20) is None


def test_is_feature_unlocked():
    """Test feature gating by level"""
    assert is_feature_unlocked(4, "private_groups") is False
    assert is_feature_unlocked(5, "private_groups") is True
    assert is_feature_unlocked(1, "not_a_level_feature") is True


# ============================================================================
# Progress Info Tests
# ============================================================================

def test_level_progress_info_mid_level():
    """Test progress halfway through level 2"""
    info = get_level_progress_info(175)

    assert info["current_level"] == 2
    assert info["xp_for_current_level"] == 100
    assert info["xp_for_next_level"] == 250
    assert info["xp_progress"] == 75
    assert info["xp_needed"] == 75
    assert info["progress_percent"] == 50
    assert info["title"] == "Explorer"
    assert info["next_unlock"].level == 3


def test_level_progress_info_at_max_level():
    """Test final level reports 100% and nothing needed"""
    info = get_level_progress_info(80000)

    assert info["current_level"] == 20
    assert info["progress_percent"] == 100
    assert info["xp_needed"] == 0
    assert info["next_unlock"] is None


def test_level_progress_info_beyond_max_level():
    """Test XP past the final threshold stays clamped"""
    info = get_level_progress_info(95000)

    assert info["current_level"] == 20
    assert info["xp_progress"] == 15000
    assert info["xp_needed"] == 0
    assert info["progress_percent"] == 100


# ============================================================================
# Level-Up Tests
# ============================================================================

def test_check_level_up_single_level():
    """Test crossing one unlock level"""
    result = check_level_up(90, 260)

    assert result["leveled_up"] is True
    assert result["old_level"] == 1
    assert result["new_level"] == 3
    assert [u.feature for u in result["new_unlocks"]] == ["custom_hangouts"]


def test_check_level_up_multiple_unlocks():
    """Test a large award surfaces every unlock in (old, new]"""
    result = check_level_up(0, 5200)

    assert result["new_level"] == 10
    assert [u.level for u in result["new_unlocks"]] == [3, 5, 7, 10]


def test_check_level_up_excludes_already_reached_unlock():
    """Test the unlock at the old level is not reported again"""
    result = check_level_up(850, 5200)

    assert [u.level for u in result["new_unlocks"]] == [7, 10]


@pytest.mark.parametrize("xp", [0, 99, 100, 5000, 80000, 123456])
def test_check_level_up_idempotent(xp):
    """Test same XP never levels up"""
    result = check_level_up(xp, xp)

    assert result["leveled_up"] is False
    assert result["new_unlocks"] == []


def test_check_level_up_no_level_change():
    """Test XP gain within a level"""
    result = check_level_up(100, 200)

    assert result["leveled_up"] is False
    assert result["old_level"] == result["new_level"] == 2
