"""Rule-based feedback and verdict for an analyzed meal."""

from fitvision.domain.analysis import MealEvaluation, Verdict
from fitvision.domain.profiles import FitnessGoal, Macro, MealType, Profile
from fitvision.services.energy import round_half_up

ON_TARGET_CALORIE_TOLERANCE = 0.10
MAINTENANCE_CALORIE_TOLERANCE = 0.15
APPROVAL_CALORIE_TOLERANCE = 0.20
APPROVAL_PROTEIN_RATIO = 0.8
PROTEIN_CLOSE_MARGIN_G = 5
MAX_FEEDBACK_ITEMS = 3

MISSING_TARGETS_MESSAGE = (
    "Could not analyze meal: no meal targets found in your profile."
)


def evaluate(
    target: Macro | None,
    dish_name: str,
    estimated: Macro,
    fitness_goal: FitnessGoal,
) -> MealEvaluation:
    """Compare a dish against its meal-slot target.

    Feedback is built in a fixed order (calories, protein, goal advice) and
    cut to the first three entries. The verdict does not depend on which
    entries survive the cut.
    """
    if target is None or target.calories <= 0:
        return MealEvaluation(
            verdict=Verdict.REJECTED, feedback=(MISSING_TARGETS_MESSAGE,)
        )

    calories_diff = estimated.calories - target.calories
    protein_diff = estimated.protein - target.protein
    fat_diff = estimated.fat - target.fat

    feedback = [
        _calorie_message(dish_name, estimated.calories, target.calories),
        _protein_message(estimated.protein, target.protein),
    ]
    feedback.extend(
        _goal_messages(
            fitness_goal, calories_diff, protein_diff, fat_diff, target.calories
        )
    )

    approved = (
        abs(calories_diff) <= target.calories * APPROVAL_CALORIE_TOLERANCE
        and estimated.protein >= target.protein * APPROVAL_PROTEIN_RATIO
    )
    return MealEvaluation(
        verdict=Verdict.APPROVED if approved else Verdict.REJECTED,
        feedback=tuple(feedback[:MAX_FEEDBACK_ITEMS]),
    )


def evaluate_for_profile(
    profile: Profile, meal_type: MealType, dish_name: str, estimated: Macro
) -> MealEvaluation:
    """Evaluate a dish against the profile's target for the meal slot."""
    target = profile.meals.get(meal_type) if profile.meals else None
    return evaluate(target, dish_name, estimated, profile.fitness_goal)


def _calorie_message(dish_name: str, estimated: int, target: int) -> str:
    diff = estimated - target
    percentage = round_half_up(estimated / target * 100)
    if abs(diff) <= target * ON_TARGET_CALORIE_TOLERANCE:
        return (
            f"Great job! Your {dish_name} is within 10% of your calorie target "
            "for this meal."
        )
    if diff > 0:
        return (
            f"This {dish_name} is {percentage}% of your calorie target "
            f"({abs(diff)} calories too high)."
        )
    return (
        f"This {dish_name} is only {percentage}% of your calorie target "
        f"({abs(diff)} calories below target)."
    )


def _protein_message(estimated: int, target: int) -> str:
    if estimated >= target:
        return (
            f"Good protein content! You're getting {estimated}g of protein, "
            f"meeting or exceeding your {target}g target."
        )
    if estimated >= target - PROTEIN_CLOSE_MARGIN_G:
        return (
            f"Protein is close to target. You're getting {estimated}g of "
            f"{target}g target."
        )
    return (
        "This meal is low in protein. Consider adding a protein source to "
        f"reach your {target}g target."
    )


def _goal_messages(
    goal: FitnessGoal,
    calories_diff: int,
    protein_diff: int,
    fat_diff: int,
    target_calories: int,
) -> list[str]:
    messages: list[str] = []
    if goal == FitnessGoal.FAT_LOSS:
        if calories_diff > 0:
            messages.append(
                "For fat loss: consider reducing portion size or choosing "
                "lower-calorie alternatives."
            )
        if fat_diff > 0:
            messages.append(
                "For fat loss: this meal is higher in fat than optimal. "
                "Try leaner protein sources."
            )
    elif goal == FitnessGoal.GAIN:
        if calories_diff < 0:
            messages.append(
                "For muscle gain: try adding more calorie-dense foods to meet "
                "your surplus goal."
            )
        if protein_diff < 0:
            messages.append(
                "For muscle gain: add more protein to support muscle growth "
                "and recovery."
            )
    elif goal == FitnessGoal.MAINTENANCE:
        if abs(calories_diff) > target_calories * MAINTENANCE_CALORIE_TOLERANCE:
            messages.append(
                "For maintenance: try to keep meals closer to your calorie "
                "targets for consistent energy."
            )
    return messages
