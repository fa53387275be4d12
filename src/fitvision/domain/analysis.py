"""Domain models for meal analysis and daily progress."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from fitvision.domain.profiles import Macro, MealType


class Verdict(str, Enum):
    """Outcome of comparing a meal against its target."""

    APPROVED = "Approved"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class MealEvaluation:
    """Verdict with ordered, human-readable feedback."""

    verdict: Verdict
    feedback: tuple[str, ...]


@dataclass(frozen=True)
class MealAnalysisRecord:
    """Result of analyzing one meal photo."""

    dish_name: str
    estimated_calories: int
    estimated_protein: int
    estimated_carbs: int
    estimated_fat: int
    verdict: Verdict
    feedback: tuple[str, ...]
    timestamp: datetime
    meal_type: MealType
    image_url: str | None = None

    @property
    def estimated(self) -> Macro:
        return Macro(
            calories=self.estimated_calories,
            protein=self.estimated_protein,
            carbs=self.estimated_carbs,
            fat=self.estimated_fat,
        )


@dataclass(frozen=True)
class MacroProgress:
    """Consumed amount of one quantity against its daily target."""

    consumed: int
    target: int
    percentage: int


@dataclass(frozen=True)
class DailyProgress:
    """Intake for one calendar day compared with the daily targets."""

    day: date
    calories: MacroProgress
    protein: MacroProgress
    carbs: MacroProgress
    fat: MacroProgress
    remaining_calories: int
    meal_counts: dict[MealType, int] = field(default_factory=dict)
    recent_meals: list[MealAnalysisRecord] = field(default_factory=list)
