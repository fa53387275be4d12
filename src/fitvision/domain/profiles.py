"""Domain models for user profiles and meal plans."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class Gender(str, Enum):
    """Biological sex used by the Mifflin-St Jeor formula."""

    MALE = "male"
    FEMALE = "female"


class FitnessGoal(str, Enum):
    """Goal that drives the calorie adjustment and macro ratios."""

    FAT_LOSS = "fat_loss"
    MAINTENANCE = "maintenance"
    GAIN = "gain"


class ActivityLevel(str, Enum):
    """Daily activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class WorkoutIntensity(str, Enum):
    """Typical workout intensity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MealType(str, Enum):
    """Meal slot a plan target or an analyzed photo belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Macro:
    """Calories plus protein, carbs and fat in grams."""

    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class MealPlan:
    """Daily targets and their split across the four meal slots."""

    daily_calories: int
    daily_protein: int
    daily_carbs: int
    daily_fat: int
    meals: dict[MealType, Macro]

    @property
    def daily(self) -> Macro:
        return Macro(
            calories=self.daily_calories,
            protein=self.daily_protein,
            carbs=self.daily_carbs,
            fat=self.daily_fat,
        )


@dataclass(frozen=True)
class Profile:
    """Biometric and activity profile of a user.

    The ``daily_*`` fields and ``meals`` stay ``None`` until a meal plan has
    been generated; their presence marks the profile setup as complete.
    """

    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    fitness_goal: FitnessGoal
    activity_level: ActivityLevel
    steps_per_day: int
    workout_intensity: WorkoutIntensity
    body_fat_percentage: float | None = None
    daily_calories: int | None = None
    daily_protein: int | None = None
    daily_carbs: int | None = None
    daily_fat: int | None = None
    meals: dict[MealType, Macro] | None = None

    @property
    def is_setup_complete(self) -> bool:
        return bool(self.daily_calories)

    def with_plan(self, plan: MealPlan) -> "Profile":
        """Return a copy of the profile carrying the plan's targets."""
        return replace(
            self,
            daily_calories=plan.daily_calories,
            daily_protein=plan.daily_protein,
            daily_carbs=plan.daily_carbs,
            daily_fat=plan.daily_fat,
            meals=dict(plan.meals),
        )


@dataclass(frozen=True)
class Account:
    """Registered user with credentials, trial state and profile."""

    id: UUID
    name: str
    email: str
    password_hash: str
    created_at: datetime
    trial_ends_at: datetime
    is_subscribed: bool = False
    profile: Profile | None = None
