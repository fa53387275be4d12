"""OpenAI Responses API client for dish classification."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from fitvision.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    schema_name: str = "dish_classification"

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float | None = None
    ) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        if timeout_seconds is None:
            return cls(client=AsyncOpenAI(api_key=api_key))
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds))

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Send the image and prompt, returning the structured JSON output."""
        request: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": self.schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request)
        if not response.output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(response.output_text)
