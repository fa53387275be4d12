"""Supabase repository for analyzed meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitvision.domain.analysis import MealAnalysisRecord, Verdict
from fitvision.domain.profiles import MealType
from fitvision.services.history import MealHistoryRepository


@dataclass
class SupabaseMealHistoryRepository(MealHistoryRepository):
    """Supabase implementation for the meal history."""

    client: Client

    def append(self, user_id: UUID, record: MealAnalysisRecord) -> UUID:
        """Insert an analysis row and return its id."""
        response = (
            self.client.table("meal_analyses")
            .insert(
                {
                    "user_id": str(user_id),
                    "dish_name": record.dish_name,
                    "estimated_calories": record.estimated_calories,
                    "estimated_protein": record.estimated_protein,
                    "estimated_carbs": record.estimated_carbs,
                    "estimated_fat": record.estimated_fat,
                    "verdict": record.verdict.value,
                    "feedback": list(record.feedback),
                    "meal_type": record.meal_type.value,
                    "image_url": record.image_url,
                    "analyzed_at": record.timestamp.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store meal analysis")
        return UUID(response.data[0]["id"])

    def list_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealAnalysisRecord]:
        """Return analyses in [start, end), oldest first."""
        response = (
            self.client.table("meal_analyses")
            .select(
                "dish_name, estimated_calories, estimated_protein, estimated_carbs, "
                "estimated_fat, verdict, feedback, meal_type, image_url, analyzed_at"
            )
            .eq("user_id", str(user_id))
            .gte("analyzed_at", start.isoformat())
            .lt("analyzed_at", end.isoformat())
            .order("analyzed_at", desc=False)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]


def _parse_record(row: dict[str, object]) -> MealAnalysisRecord:
    return MealAnalysisRecord(
        dish_name=str(row["dish_name"]),
        estimated_calories=int(row.get("estimated_calories", 0)),
        estimated_protein=int(row.get("estimated_protein", 0)),
        estimated_carbs=int(row.get("estimated_carbs", 0)),
        estimated_fat=int(row.get("estimated_fat", 0)),
        verdict=Verdict(row["verdict"]),
        feedback=tuple(row.get("feedback") or ()),
        timestamp=datetime.fromisoformat(row["analyzed_at"]),
        meal_type=MealType(row["meal_type"]),
        image_url=row.get("image_url"),
    )
