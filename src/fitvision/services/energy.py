"""Energy expenditure formulas: BMR, TDEE and goal-adjusted calories."""

import math

from fitvision.domain.profiles import (
    ActivityLevel,
    FitnessGoal,
    Gender,
    WorkoutIntensity,
)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

WORKOUT_CALORIES: dict[WorkoutIntensity, int] = {
    WorkoutIntensity.LOW: 100,
    WorkoutIntensity.MEDIUM: 200,
    WorkoutIntensity.HIGH: 300,
}

CALORIES_PER_STEP = 0.04

GOAL_CALORIE_FACTORS: dict[FitnessGoal, float] = {
    FitnessGoal.FAT_LOSS: 0.8,
    FitnessGoal.GAIN: 1.1,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def compute_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: Gender,
    body_fat_percentage: float | None = None,
) -> float:
    """Return basal metabolic rate in kcal/day.

    Uses Katch-McArdle when a non-zero body fat percentage is known,
    otherwise Mifflin-St Jeor.
    """
    if body_fat_percentage:
        lean_body_mass = weight_kg * (1 - body_fat_percentage / 100)
        return 370 + 21.6 * lean_body_mass

    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == Gender.MALE:
        return base + 5
    return base - 161


def compute_step_calories(steps_per_day: int) -> float:
    """Return the estimated calories burned by walking."""
    return steps_per_day * CALORIES_PER_STEP


def compute_tdee(
    bmr: float,
    activity_level: ActivityLevel,
    steps_per_day: int,
    workout_intensity: WorkoutIntensity,
) -> int:
    """Return total daily energy expenditure in kcal/day.

    ``steps_per_day`` is accepted but step calories are not added to the
    total, matching the reference plan figures.
    """
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)
    workout_calories = WORKOUT_CALORIES.get(workout_intensity, 0)
    return round_half_up(bmr * multiplier + workout_calories)


def compute_target_calories(tdee: int, goal: FitnessGoal) -> int:
    """Apply the goal's deficit or surplus to TDEE."""
    factor = GOAL_CALORIE_FACTORS.get(goal)
    if factor is None:
        return tdee
    return round_half_up(tdee * factor)
