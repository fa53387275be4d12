"""Meal history queries and daily progress against targets."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from fitvision.domain.analysis import DailyProgress, MacroProgress, MealAnalysisRecord
from fitvision.domain.profiles import MealType, Profile
from fitvision.services.energy import round_half_up


class MealHistoryRepository(Protocol):
    """Persistence interface for analyzed meals."""

    def append(self, user_id: UUID, record: MealAnalysisRecord) -> UUID:
        """Store a record and return its id."""

    def list_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealAnalysisRecord]:
        """Return records with start <= timestamp < end, oldest first."""


@dataclass
class MealHistoryService:
    """Service for the per-user, append-only meal history."""

    repository: MealHistoryRepository

    def record(self, user_id: UUID, record: MealAnalysisRecord) -> UUID:
        """Append an analysis record to the user's history."""
        return self.repository.append(user_id, record)

    def list_for_date(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[MealAnalysisRecord]:
        """Return the records of one calendar day in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        start = datetime(day.year, day.month, day.day, tzinfo=tz)
        end = start + timedelta(days=1)
        records = self.repository.list_between(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return [
            record
            for record in records
            if record.timestamp.astimezone(tz).date() == day
        ]

    def total_calories_for_date(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> int:
        """Return the calories eaten on a calendar day."""
        records = self.list_for_date(user_id, day, timezone_name)
        return sum(record.estimated_calories for record in records)

    def get_daily_progress(
        self,
        user_id: UUID,
        profile: Profile,
        timezone_name: str = "UTC",
        day: date | None = None,
    ) -> DailyProgress:
        """Compare a day's intake with the profile's daily targets."""
        if day is None:
            day = datetime.now(tz=ZoneInfo(timezone_name)).date()
        records = self.list_for_date(user_id, day, timezone_name)

        calories = sum(record.estimated_calories for record in records)
        protein = sum(record.estimated_protein for record in records)
        carbs = sum(record.estimated_carbs for record in records)
        fat = sum(record.estimated_fat for record in records)
        target_calories = profile.daily_calories or 0

        meal_counts = {meal_type: 0 for meal_type in MealType}
        for record in records:
            meal_counts[record.meal_type] += 1

        return DailyProgress(
            day=day,
            calories=_progress(calories, target_calories),
            protein=_progress(protein, profile.daily_protein or 0),
            carbs=_progress(carbs, profile.daily_carbs or 0),
            fat=_progress(fat, profile.daily_fat or 0),
            remaining_calories=max(0, target_calories - calories),
            meal_counts=meal_counts,
            recent_meals=sorted(
                records, key=lambda record: record.timestamp, reverse=True
            ),
        )


def progress_percentage(consumed: int, target: int) -> int:
    """Share of the target reached, capped at 100."""
    if target <= 0:
        return 0
    return min(round_half_up(consumed / target * 100), 100)


def _progress(consumed: int, target: int) -> MacroProgress:
    return MacroProgress(
        consumed=consumed,
        target=target,
        percentage=progress_percentage(consumed, target),
    )
