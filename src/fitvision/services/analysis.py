"""Meal photo analysis: classify, look up nutrition, evaluate."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from fitvision.domain.analysis import MealAnalysisRecord
from fitvision.domain.errors import ClassificationError, UnknownDishError
from fitvision.domain.profiles import MealType, Profile
from fitvision.services.feedback import evaluate_for_profile
from fitvision.services.nutrition import NutritionService
from fitvision.services.vision import DishClassifier

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MealAnalysisService:
    """Turn a meal photo into an immutable analysis record.

    The record is only built here; appending it to the meal history is left
    to the caller.
    """

    classifier: DishClassifier
    nutrition_service: NutritionService
    classifier_timeout_seconds: float | None = 30.0
    clock: Callable[[], datetime] = _utcnow

    async def analyze(
        self,
        profile: Profile,
        meal_type: MealType,
        image_bytes: bytes,
        image_url: str | None = None,
    ) -> MealAnalysisRecord:
        """Classify the photo and judge the dish against the meal target."""
        dish_name = await self._classify(image_bytes)

        facts = await self.nutrition_service.lookup(dish_name)
        if facts is None:
            raise UnknownDishError(dish_name)

        evaluation = evaluate_for_profile(profile, meal_type, dish_name, facts)
        _logger.info(
            "Analyzed meal: dish=%s meal_type=%s verdict=%s",
            dish_name,
            meal_type.value,
            evaluation.verdict.value,
        )
        return MealAnalysisRecord(
            dish_name=dish_name,
            estimated_calories=facts.calories,
            estimated_protein=facts.protein,
            estimated_carbs=facts.carbs,
            estimated_fat=facts.fat,
            verdict=evaluation.verdict,
            feedback=evaluation.feedback,
            timestamp=self.clock(),
            meal_type=meal_type,
            image_url=image_url,
        )

    async def _classify(self, image_bytes: bytes) -> str:
        try:
            label = await asyncio.wait_for(
                self.classifier.classify(image_bytes),
                timeout=self.classifier_timeout_seconds,
            )
        except TimeoutError as exc:
            _logger.warning(
                "Dish classification timed out after %ss",
                self.classifier_timeout_seconds,
            )
            raise ClassificationError("Dish classification timed out") from exc
        except Exception as exc:
            _logger.exception("Dish classification failed")
            raise ClassificationError("Dish classification failed") from exc
        if not label:
            raise ClassificationError("Could not identify the meal from the image")
        return label
