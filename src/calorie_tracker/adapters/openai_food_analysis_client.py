"""OpenAI Responses API client for meal estimation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_tracker.services.analysis import FoodAnalysisClient


@dataclass
class OpenAIFoodAnalysisClient(FoodAnalysisClient):
    """Food analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIFoodAnalysisClient":
        """Create an OpenAI food analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

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
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if description:
            content.append({"type": "input_text", "text": f"Meal: {description}"})
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})

        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_estimate",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)
