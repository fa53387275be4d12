"""Models for vision classification results."""

from pydantic import BaseModel, Field


class DishClassification(BaseModel):
    """Structured output of the dish classifier."""

    label: str | None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
