"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitvision.adapters.fdc_client import HttpxFdcClient
from fitvision.adapters.openai_vision_client import OpenAIVisionClient
from fitvision.adapters.stub_dish_classifier import RandomDishClassifier
from fitvision.adapters.supabase_account_repository import SupabaseAccountRepository
from fitvision.adapters.supabase_meal_history_repository import (
    SupabaseMealHistoryRepository,
)
from fitvision.config import Settings, resolve_classifier_backend
from fitvision.services.analysis import MealAnalysisService
from fitvision.services.cache import InMemoryCache
from fitvision.services.history import MealHistoryService
from fitvision.services.nutrition import NutritionService
from fitvision.services.users import UserService
from fitvision.services.vision import DishClassifier, VisionDishClassifier


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    nutrition_service: NutritionService
    meal_analysis_service: MealAnalysisService
    meal_history_service: MealHistoryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend = resolve_classifier_backend(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    fdc_client = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
    nutrition_service = NutritionService(cache=InMemoryCache(), fdc_client=fdc_client)

    classifier: DishClassifier
    if backend == "openai":
        classifier = VisionDishClassifier(
            client=OpenAIVisionClient.create(
                resolved_settings.openai_api_key,
                timeout_seconds=resolved_settings.classifier_timeout_seconds,
            ),
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
            labels=nutrition_service.known_dishes,
            allow_unlisted=fdc_client is not None,
        )
    else:
        classifier = RandomDishClassifier(
            labels=nutrition_service.known_dishes,
            delay_seconds=resolved_settings.classifier_delay_seconds,
        )

    user_service = UserService(
        SupabaseAccountRepository(supabase_client),
        trial_days=resolved_settings.trial_days,
    )
    meal_analysis_service = MealAnalysisService(
        classifier=classifier,
        nutrition_service=nutrition_service,
        classifier_timeout_seconds=resolved_settings.classifier_timeout_seconds,
    )
    meal_history_service = MealHistoryService(
        SupabaseMealHistoryRepository(supabase_client)
    )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        nutrition_service=nutrition_service,
        meal_analysis_service=meal_analysis_service,
        meal_history_service=meal_history_service,
        close_resources=close_resources,
    )
