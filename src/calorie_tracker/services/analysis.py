"""Food analysis service that estimates calories and protein with an LLM."""

import base64
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.analysis import FoodEstimate

FOOD_ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
    },
    "required": ["name", "calories", "protein"],
    "additionalProperties": False,
}

ANALYSIS_PROMPT = (
    "Estimate the calories and protein of the meal. "
    "When several items are present, estimate each one and sum them, "
    "and list every item in the name. "
    "Account for cooking oil and sauces. When unsure about a portion, "
    "pick the larger estimate and round to realistic numbers."
)


class FoodAnalysisClient(Protocol):
    """Interface for LLM meal estimation."""

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        description: str | None,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return a structured calorie and protein estimate."""


@dataclass
class FoodAnalysisService:
    """Service that prepares analysis requests and validates results."""

    client: FoodAnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(
        self, *, description: str | None = None, image_bytes: bytes | None = None
    ) -> FoodEstimate:
        """Estimate a meal from a description, a photo, or both."""
        cleaned = description.strip() if description else None
        if not cleaned and not image_bytes:
            raise ValueError("A description or an image is required")
        raw = await self.client.estimate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=ANALYSIS_PROMPT,
            description=cleaned,
            image_data_url=_to_data_url(image_bytes) if image_bytes else None,
            schema=FOOD_ESTIMATE_SCHEMA,
        )
        return FoodEstimate.model_validate(raw)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
