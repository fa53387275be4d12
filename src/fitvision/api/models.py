"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from fitvision.domain.profiles import (
    ActivityLevel,
    FitnessGoal,
    Gender,
    MealType,
    Profile,
    WorkoutIntensity,
)


class RegisterRequest(BaseModel):
    """Sign-up payload."""

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    """Login payload."""

    email: str
    password: str


class ProfileRequest(BaseModel):
    """Profile setup payload."""

    age: int = Field(ge=15, le=100)
    gender: Gender
    height_cm: float = Field(ge=100, le=250)
    weight_kg: float = Field(ge=30, le=300)
    body_fat_percentage: float | None = Field(default=None, ge=3, le=50)
    fitness_goal: FitnessGoal
    activity_level: ActivityLevel
    steps_per_day: int = Field(ge=0)
    workout_intensity: WorkoutIntensity

    def to_profile(self) -> Profile:
        return Profile(
            age=self.age,
            gender=self.gender,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            body_fat_percentage=self.body_fat_percentage,
            fitness_goal=self.fitness_goal,
            activity_level=self.activity_level,
            steps_per_day=self.steps_per_day,
            workout_intensity=self.workout_intensity,
        )


class MealAnalysisRequest(BaseModel):
    """Meal photo upload payload."""

    meal_type: MealType
    image_base64: str = Field(min_length=1)
    image_url: str | None = None
