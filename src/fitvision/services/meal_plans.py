"""Macro split and per-meal distribution of daily targets."""

from dataclasses import dataclass

from fitvision.domain.errors import ValidationError
from fitvision.domain.profiles import FitnessGoal, Macro, MealPlan, MealType, Profile
from fitvision.services.energy import (
    compute_bmr,
    compute_target_calories,
    compute_tdee,
    round_half_up,
)

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9


@dataclass(frozen=True)
class MacroRatio:
    """Protein grams per kg of body weight and share of calories from fat."""

    protein_per_kg: float
    fat_fraction: float


MACRO_RATIOS: dict[FitnessGoal, MacroRatio] = {
    FitnessGoal.FAT_LOSS: MacroRatio(protein_per_kg=2.2, fat_fraction=0.25),
    FitnessGoal.MAINTENANCE: MacroRatio(protein_per_kg=1.8, fat_fraction=0.30),
    FitnessGoal.GAIN: MacroRatio(protein_per_kg=2.0, fat_fraction=0.25),
}

MEAL_DISTRIBUTION: dict[MealType, float] = {
    MealType.BREAKFAST: 0.25,
    MealType.LUNCH: 0.35,
    MealType.DINNER: 0.30,
    MealType.SNACK: 0.10,
}

# (field, low, high) inclusive bounds accepted by the setup flow.
_PROFILE_BOUNDS: tuple[tuple[str, float, float], ...] = (
    ("age", 15, 100),
    ("height_cm", 100, 250),
    ("weight_kg", 30, 300),
)
_BODY_FAT_BOUNDS = (3, 50)


@dataclass(frozen=True)
class MacroSplit:
    """Daily macro targets in grams."""

    protein: int
    fat: int
    carbs: int


def compute_macros(
    target_calories: int, body_weight_kg: float, goal: FitnessGoal
) -> MacroSplit:
    """Split target calories into protein, fat and carb grams.

    Carbs take whatever calories protein and fat leave over and are not
    floored, so aggressive settings can yield a negative value.
    """
    ratio = MACRO_RATIOS.get(goal, MACRO_RATIOS[FitnessGoal.MAINTENANCE])
    protein = round_half_up(body_weight_kg * ratio.protein_per_kg)
    protein_calories = protein * PROTEIN_KCAL_PER_G
    fat_calories = target_calories * ratio.fat_fraction
    fat = round_half_up(fat_calories / FAT_KCAL_PER_G)
    remaining_calories = target_calories - protein_calories - fat_calories
    carbs = round_half_up(remaining_calories / CARBS_KCAL_PER_G)
    return MacroSplit(protein=protein, fat=fat, carbs=carbs)


def create_meal_plan(calories: int, protein: int, carbs: int, fat: int) -> MealPlan:
    """Distribute daily targets over the meal slots.

    Each quantity is rounded per slot, so slot totals can drift from the
    daily figure by a few units.
    """
    meals = {
        meal_type: Macro(
            calories=round_half_up(calories * weight),
            protein=round_half_up(protein * weight),
            carbs=round_half_up(carbs * weight),
            fat=round_half_up(fat * weight),
        )
        for meal_type, weight in MEAL_DISTRIBUTION.items()
    }
    return MealPlan(
        daily_calories=calories,
        daily_protein=protein,
        daily_carbs=carbs,
        daily_fat=fat,
        meals=meals,
    )


def generate_meal_plan(profile: Profile) -> MealPlan:
    """Compute the complete daily and per-meal plan for a profile."""
    bmr = compute_bmr(
        profile.weight_kg,
        profile.height_cm,
        profile.age,
        profile.gender,
        profile.body_fat_percentage,
    )
    tdee = compute_tdee(
        bmr,
        profile.activity_level,
        profile.steps_per_day,
        profile.workout_intensity,
    )
    target_calories = compute_target_calories(tdee, profile.fitness_goal)
    split = compute_macros(target_calories, profile.weight_kg, profile.fitness_goal)
    return create_meal_plan(target_calories, split.protein, split.carbs, split.fat)


def validate_profile(profile: Profile) -> None:
    """Raise ValidationError when a profile is outside the supported ranges."""
    for field_name, low, high in _PROFILE_BOUNDS:
        value = getattr(profile, field_name)
        if not low <= value <= high:
            raise ValidationError(f"{field_name} must be between {low} and {high}")
    if profile.body_fat_percentage is not None:
        low, high = _BODY_FAT_BOUNDS
        if not low <= profile.body_fat_percentage <= high:
            raise ValidationError(
                f"body_fat_percentage must be between {low} and {high}"
            )
    if profile.steps_per_day < 0:
        raise ValidationError("steps_per_day must not be negative")
