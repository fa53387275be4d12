"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException, Request, status

from fitvision.api.models import (
    LoginRequest,
    MealAnalysisRequest,
    ProfileRequest,
    RegisterRequest,
)
from fitvision.app_logging import configure_logging
from fitvision.containers import AppContainer
from fitvision.domain.analysis import DailyProgress, MacroProgress, MealAnalysisRecord
from fitvision.domain.errors import (
    AuthError,
    ClassificationError,
    EmailInUseError,
    UnknownDishError,
    ValidationError,
)
from fitvision.domain.profiles import Account, Macro, Profile


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="FitVision", lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/register", status_code=status.HTTP_201_CREATED)
    async def register(body: RegisterRequest, request: Request) -> dict[str, object]:
        """Create an account with a free trial."""
        state_container: AppContainer = request.app.state.container
        try:
            account = state_container.user_service.register(
                body.name, body.email, body.password
            )
        except EmailInUseError as exc:
            raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc
        return _serialize_account(state_container, account)

    @app.post("/auth/login")
    async def login(body: LoginRequest, request: Request) -> dict[str, object]:
        """Check credentials and return the account."""
        state_container: AppContainer = request.app.state.container
        try:
            account = state_container.user_service.validate_credentials(
                body.email, body.password
            )
        except AuthError as exc:
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, str(exc)) from exc
        return _serialize_account(state_container, account)

    @app.get("/users/{user_id}")
    async def get_user(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the account with its profile and plan."""
        state_container: AppContainer = request.app.state.container
        account = _require_account(state_container, user_id)
        return _serialize_account(state_container, account)

    @app.put("/users/{user_id}/profile")
    async def setup_profile(
        user_id: UUID, body: ProfileRequest, request: Request
    ) -> dict[str, object]:
        """Store the profile and compute its daily and per-meal targets."""
        state_container: AppContainer = request.app.state.container
        try:
            account = state_container.user_service.complete_profile(
                user_id, body.to_profile()
            )
        except ValidationError as exc:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc)
            ) from exc
        if account is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Account not found")
        return _serialize_account(state_container, account)

    @app.post("/users/{user_id}/subscription")
    async def subscribe(user_id: UUID, request: Request) -> dict[str, object]:
        """Activate the subscription."""
        state_container: AppContainer = request.app.state.container
        account = state_container.user_service.subscribe(user_id)
        if account is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Account not found")
        return _serialize_account(state_container, account)

    @app.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
    async def analyze_meal(
        user_id: UUID, body: MealAnalysisRequest, request: Request
    ) -> dict[str, object]:
        """Analyze a meal photo and append the result to the history."""
        state_container: AppContainer = request.app.state.container
        account = _require_account(state_container, user_id)
        _require_premium(state_container, account)
        profile = _require_profile(account)
        image_bytes = _decode_image(body.image_base64)
        try:
            record = await state_container.meal_analysis_service.analyze(
                profile, body.meal_type, image_bytes, image_url=body.image_url
            )
        except UnknownDishError as exc:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc)
            ) from exc
        except ClassificationError as exc:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc
        except Exception as exc:
            logger.exception("Meal analysis failed", extra={"user_id": str(user_id)})
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY, "Failed to analyze your meal"
            ) from exc
        state_container.meal_history_service.record(user_id, record)
        return _serialize_record(record)

    @app.get("/users/{user_id}/meals")
    async def list_meals(
        user_id: UUID,
        request: Request,
        day: date | None = None,
        timezone: str = "UTC",
    ) -> dict[str, object]:
        """Return the meals analyzed on a day (today by default)."""
        state_container: AppContainer = request.app.state.container
        _require_account(state_container, user_id)
        tz = _resolve_timezone(timezone)
        resolved_day = day or datetime.now(tz=tz).date()
        records = state_container.meal_history_service.list_for_date(
            user_id, resolved_day, timezone
        )
        return {
            "day": resolved_day.isoformat(),
            "total_calories": sum(record.estimated_calories for record in records),
            "meals": [_serialize_record(record) for record in records],
        }

    @app.get("/users/{user_id}/dashboard")
    async def dashboard(
        user_id: UUID, request: Request, timezone: str = "UTC"
    ) -> dict[str, object]:
        """Return today's intake against the daily targets."""
        state_container: AppContainer = request.app.state.container
        account = _require_account(state_container, user_id)
        _require_premium(state_container, account)
        profile = _require_profile(account)
        if not profile.is_setup_complete:
            raise HTTPException(status.HTTP_409_CONFLICT, "Profile setup incomplete")
        _resolve_timezone(timezone)
        progress = state_container.meal_history_service.get_daily_progress(
            user_id, profile, timezone
        )
        return _serialize_progress(progress)

    return app


def _require_account(container: AppContainer, user_id: UUID) -> Account:
    account = container.user_service.get_account(user_id)
    if account is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Account not found")
    return account


def _require_premium(container: AppContainer, account: Account) -> None:
    if not container.user_service.can_access_premium(account):
        raise HTTPException(
            status.HTTP_402_PAYMENT_REQUIRED,
            "Your trial has ended. Subscribe to keep using this feature.",
        )


def _require_profile(account: Account) -> Profile:
    if account.profile is None:
        raise HTTPException(status.HTTP_409_CONFLICT, "Complete your profile first")
    return account.profile


def _resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, f"Unknown timezone: {name}"
        ) from exc


def _decode_image(payload: str) -> bytes:
    _, _, encoded = payload.rpartition("base64,")
    try:
        image_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "Image is not valid base64"
        ) from exc
    if not image_bytes:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, "Image is empty")
    return image_bytes


def _serialize_macro(macro: Macro) -> dict[str, int]:
    return {
        "calories": macro.calories,
        "protein": macro.protein,
        "carbs": macro.carbs,
        "fat": macro.fat,
    }


def _serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "age": profile.age,
        "gender": profile.gender.value,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "body_fat_percentage": profile.body_fat_percentage,
        "fitness_goal": profile.fitness_goal.value,
        "activity_level": profile.activity_level.value,
        "steps_per_day": profile.steps_per_day,
        "workout_intensity": profile.workout_intensity.value,
        "daily_calories": profile.daily_calories,
        "daily_protein": profile.daily_protein,
        "daily_carbs": profile.daily_carbs,
        "daily_fat": profile.daily_fat,
        "meals": {
            meal_type.value: _serialize_macro(macro)
            for meal_type, macro in profile.meals.items()
        }
        if profile.meals
        else None,
    }


def _serialize_account(container: AppContainer, account: Account) -> dict[str, object]:
    return {
        "id": str(account.id),
        "name": account.name,
        "email": account.email,
        "created_at": account.created_at.isoformat(),
        "trial_ends_at": account.trial_ends_at.isoformat(),
        "trial_days_remaining": container.user_service.trial_days_remaining(account),
        "is_subscribed": account.is_subscribed,
        "can_access_premium": container.user_service.can_access_premium(account),
        "profile": _serialize_profile(account.profile) if account.profile else None,
    }


def _serialize_record(record: MealAnalysisRecord) -> dict[str, object]:
    return {
        "dish_name": record.dish_name,
        "estimated_calories": record.estimated_calories,
        "estimated_protein": record.estimated_protein,
        "estimated_carbs": record.estimated_carbs,
        "estimated_fat": record.estimated_fat,
        "verdict": record.verdict.value,
        "feedback": list(record.feedback),
        "timestamp": record.timestamp.isoformat(),
        "meal_type": record.meal_type.value,
        "image_url": record.image_url,
    }


def _serialize_progress_entry(entry: MacroProgress) -> dict[str, int]:
    return {
        "consumed": entry.consumed,
        "target": entry.target,
        "percentage": entry.percentage,
    }


def _serialize_progress(progress: DailyProgress) -> dict[str, object]:
    return {
        "day": progress.day.isoformat(),
        "calories": _serialize_progress_entry(progress.calories),
        "protein": _serialize_progress_entry(progress.protein),
        "carbs": _serialize_progress_entry(progress.carbs),
        "fat": _serialize_progress_entry(progress.fat),
        "remaining_calories": progress.remaining_calories,
        "meal_counts": {
            meal_type.value: count for meal_type, count in progress.meal_counts.items()
        },
        "recent_meals": [_serialize_record(record) for record in progress.recent_meals],
    }
