"""Supabase-backed account repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitvision.domain.profiles import (
    Account,
    ActivityLevel,
    FitnessGoal,
    Gender,
    Macro,
    MealType,
    Profile,
    WorkoutIntensity,
)
from fitvision.services.users import AccountRepository

_ACCOUNT_COLUMNS = (
    "id, name, email, password_hash, created_at, trial_ends_at, is_subscribed, "
    "profile"
)


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for account persistence."""

    client: Client

    def create_account(
        self,
        name: str,
        email: str,
        password_hash: str,
        created_at: datetime,
        trial_ends_at: datetime,
    ) -> Account:
        """Insert an account row and return it."""
        response = (
            self.client.table("accounts")
            .insert(
                {
                    "name": name,
                    "email": email,
                    "password_hash": password_hash,
                    "created_at": created_at.isoformat(),
                    "trial_ends_at": trial_ends_at.isoformat(),
                    "is_subscribed": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create account in Supabase")
        return _parse_account(response.data[0])

    def find_by_email(self, email: str) -> Account | None:
        """Return the account for an email, if present."""
        response = (
            self.client.table("accounts")
            .select(_ACCOUNT_COLUMNS)
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_account(response.data[0])

    def get_account(self, account_id: UUID) -> Account | None:
        """Return an account by id, if present."""
        response = (
            self.client.table("accounts")
            .select(_ACCOUNT_COLUMNS)
            .eq("id", str(account_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_account(response.data[0])

    def update_profile(self, account_id: UUID, profile: Profile) -> None:
        """Store the profile JSON on the account row."""
        self.client.table("accounts").update({"profile": profile_to_row(profile)}).eq(
            "id", str(account_id)
        ).execute()

    def set_subscribed(self, account_id: UUID, subscribed: bool) -> None:
        """Update the subscription flag."""
        self.client.table("accounts").update({"is_subscribed": subscribed}).eq(
            "id", str(account_id)
        ).execute()


def profile_to_row(profile: Profile) -> dict[str, object]:
    """Serialize a profile into the JSON stored in the ``profile`` column."""
    meals = None
    if profile.meals is not None:
        meals = {
            MealType(meal_type).value: {
                "calories": macro.calories,
                "protein": macro.protein,
                "carbs": macro.carbs,
                "fat": macro.fat,
            }
            for meal_type, macro in profile.meals.items()
        }
    return {
        "age": profile.age,
        "gender": Gender(profile.gender).value,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "body_fat_percentage": profile.body_fat_percentage,
        "fitness_goal": FitnessGoal(profile.fitness_goal).value,
        "activity_level": ActivityLevel(profile.activity_level).value,
        "steps_per_day": profile.steps_per_day,
        "workout_intensity": WorkoutIntensity(profile.workout_intensity).value,
        "daily_calories": profile.daily_calories,
        "daily_protein": profile.daily_protein,
        "daily_carbs": profile.daily_carbs,
        "daily_fat": profile.daily_fat,
        "meals": meals,
    }


def profile_from_row(row: dict[str, object]) -> Profile:
    """Build a profile from its stored JSON."""
    raw_meals = row.get("meals")
    meals = None
    if isinstance(raw_meals, dict):
        meals = {
            MealType(key): Macro(
                calories=int(value["calories"]),
                protein=int(value["protein"]),
                carbs=int(value["carbs"]),
                fat=int(value["fat"]),
            )
            for key, value in raw_meals.items()
        }
    body_fat = row.get("body_fat_percentage")
    return Profile(
        age=int(row["age"]),
        gender=Gender(row["gender"]),
        height_cm=float(row["height_cm"]),
        weight_kg=float(row["weight_kg"]),
        body_fat_percentage=float(body_fat) if body_fat is not None else None,
        fitness_goal=FitnessGoal(row["fitness_goal"]),
        activity_level=ActivityLevel(row["activity_level"]),
        steps_per_day=int(row["steps_per_day"]),
        workout_intensity=WorkoutIntensity(row["workout_intensity"]),
        daily_calories=row.get("daily_calories"),
        daily_protein=row.get("daily_protein"),
        daily_carbs=row.get("daily_carbs"),
        daily_fat=row.get("daily_fat"),
        meals=meals,
    )


def _parse_account(row: dict[str, object]) -> Account:
    profile = row.get("profile")
    return Account(
        id=UUID(row["id"]),
        name=str(row.get("name") or ""),
        email=str(row["email"]),
        password_hash=str(row["password_hash"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        trial_ends_at=datetime.fromisoformat(row["trial_ends_at"]),
        is_subscribed=bool(row.get("is_subscribed")),
        profile=profile_from_row(profile) if isinstance(profile, dict) else None,
    )
