"""Models for food analysis results."""

from pydantic import BaseModel, Field


class FoodEstimate(BaseModel):
    """Calorie and protein estimate for a described or photographed meal."""

    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
