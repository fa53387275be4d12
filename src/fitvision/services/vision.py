"""Dish classification from meal photos."""

import base64
from dataclasses import dataclass
from typing import Protocol

from fitvision.domain.vision import DishClassification


class DishClassifier(Protocol):
    """Capability that names the dish shown in a photo."""

    async def classify(self, image_bytes: bytes) -> str | None:
        """Return a dish label, or None when nothing was recognized."""


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

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
        """Return structured vision extraction data."""


def classification_schema(
    labels: tuple[str, ...], allow_unlisted: bool = False
) -> dict[str, object]:
    """JSON schema for the classifier output.

    The label is restricted to the known dish labels unless
    ``allow_unlisted`` is set, in which case any dish name is accepted.
    """
    label_type: dict[str, object] = {"type": "string"}
    if not allow_unlisted:
        label_type["enum"] = list(labels)
    return {
        "type": "object",
        "properties": {
            "label": {"anyOf": [label_type, {"type": "null"}]},
            "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        },
        "required": ["label", "confidence"],
        "additionalProperties": False,
    }


@dataclass
class VisionDishClassifier(DishClassifier):
    """Model-backed classifier naming the dish in a meal photo.

    Answers are limited to ``labels`` unless ``allow_unlisted`` is set, which
    lets the model name other dishes for a nutrition source that can resolve
    them.
    """

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool
    labels: tuple[str, ...]
    allow_unlisted: bool = False

    async def classify(self, image_bytes: bytes) -> str | None:
        """Ask the vision model which dish the photo shows."""
        prompt = _classification_prompt(self.labels, self.allow_unlisted)
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=_to_data_url(image_bytes),
            schema=classification_schema(self.labels, self.allow_unlisted),
            prompt=prompt,
        )
        result = DishClassification.model_validate(raw)
        return result.label


def _classification_prompt(labels: tuple[str, ...], allow_unlisted: bool) -> str:
    known = ", ".join(labels)
    if allow_unlisted:
        return (
            "Identify the main dish in the photo. "
            f"Prefer one of: {known}. "
            "Otherwise give a short, generic English dish name in lowercase. "
            "Use null if the photo shows no food."
        )
    return (
        "Identify the main dish in the photo. "
        f"Answer with exactly one of: {known}. "
        "Use null if none of them match."
    )


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
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
