"""Tests for BMR, TDEE and goal calorie formulas."""

import pytest

from fitvision.domain.profiles import (
    ActivityLevel,
    FitnessGoal,
    Gender,
    WorkoutIntensity,
)
from fitvision.services.energy import (
    compute_bmr,
    compute_step_calories,
    compute_target_calories,
    compute_tdee,
    round_half_up,
)


def test_compute_bmr_mifflin_st_jeor_male() -> None:
    assert compute_bmr(70, 175, 30, Gender.MALE) == pytest.approx(1648.75)


def test_compute_bmr_mifflin_st_jeor_female() -> None:
    assert compute_bmr(70, 175, 30, Gender.FEMALE) == pytest.approx(1482.75)


def test_compute_bmr_katch_mcardle_with_body_fat() -> None:
    bmr = compute_bmr(70, 175, 30, Gender.MALE, body_fat_percentage=20)

    assert bmr == pytest.approx(1579.6)


def test_compute_bmr_zero_body_fat_falls_back_to_mifflin() -> None:
    bmr = compute_bmr(70, 175, 30, Gender.MALE, body_fat_percentage=0)

    assert bmr == pytest.approx(1648.75)


def test_compute_tdee_applies_multiplier_and_workout_bonus() -> None:
    tdee = compute_tdee(
        1648.75, ActivityLevel.MODERATE, 8000, WorkoutIntensity.MEDIUM
    )

    # 1648.75 * 1.55 + 200 = 2755.5625
    assert tdee == 2756


def test_compute_tdee_ignores_step_calories() -> None:
    sedentary_walker = compute_tdee(
        1500, ActivityLevel.SEDENTARY, 0, WorkoutIntensity.LOW
    )
    busy_walker = compute_tdee(
        1500, ActivityLevel.SEDENTARY, 25000, WorkoutIntensity.LOW
    )

    assert sedentary_walker == busy_walker == 1900
    assert compute_step_calories(25000) == pytest.approx(1000)


def test_compute_tdee_very_active_high_intensity() -> None:
    assert (
        compute_tdee(1000, ActivityLevel.VERY_ACTIVE, 0, WorkoutIntensity.HIGH)
        == 2200
    )


def test_compute_tdee_unknown_values_use_defaults() -> None:
    assert compute_tdee(1000, "couch", 0, "extreme") == 1200


def test_compute_tdee_accepts_plain_string_values() -> None:
    assert compute_tdee(1000, "light", 0, "low") == 1475


@pytest.mark.parametrize(
    ("goal", "expected"),
    [
        (FitnessGoal.FAT_LOSS, 1600),
        (FitnessGoal.MAINTENANCE, 2000),
        (FitnessGoal.GAIN, 2200),
    ],
)
def test_compute_target_calories(goal: FitnessGoal, expected: int) -> None:
    assert compute_target_calories(2000, goal) == expected


def test_compute_target_calories_rounds_half_up() -> None:
    # 2002 * 0.8 = 1601.6 and 2005 * 1.1 = 2205.5
    assert compute_target_calories(2002, FitnessGoal.FAT_LOSS) == 1602
    assert compute_target_calories(2005, FitnessGoal.GAIN) == 2206


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.49) == 0
