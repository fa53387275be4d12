"""Tests for dish classifiers."""

import asyncio
import random

import pytest
from pydantic import ValidationError

from fitvision.adapters.stub_dish_classifier import RandomDishClassifier
from fitvision.services.nutrition import DISH_NUTRITION
from fitvision.services.vision import (
    VisionDishClassifier,
    _to_data_url,
    classification_schema,
)
from tests.conftest import FakeVisionClient

LABELS = tuple(DISH_NUTRITION)


def _classifier(client: FakeVisionClient) -> VisionDishClassifier:
    return VisionDishClassifier(
        client=client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
        labels=LABELS,
    )


def test_vision_classifier_returns_label() -> None:
    client = FakeVisionClient()

    label = asyncio.run(_classifier(client).classify(b"image-bytes"))

    assert label == "pasta"
    assert client.requests[0]["model"] == "gpt-5.2"
    schema = client.requests[0]["schema"]
    assert schema == classification_schema(LABELS)


def test_vision_classifier_returns_none_for_unrecognized_photo() -> None:
    client = FakeVisionClient(payload={"label": None, "confidence": 0.1})

    assert asyncio.run(_classifier(client).classify(b"image-bytes")) is None


def test_vision_classifier_rejects_invalid_confidence() -> None:
    client = FakeVisionClient(payload={"label": "pasta", "confidence": 3})

    with pytest.raises(ValidationError):
        asyncio.run(_classifier(client).classify(b"image-bytes"))


def test_classification_schema_restricts_labels() -> None:
    schema = classification_schema(("salad", "steak"))

    label_options = schema["properties"]["label"]["anyOf"]  # type: ignore[index]
    assert label_options[0]["enum"] == ["salad", "steak"]
    assert label_options[1] == {"type": "null"}


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"
    url = _to_data_url(data)

    assert url.startswith("data:image/png;base64,")


def test_to_data_url_detects_webp() -> None:
    url = _to_data_url(b"RIFF\x00\x00\x00\x00WEBPVP8 ")

    assert url.startswith("data:image/webp;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    data = b"unknown"
    url = _to_data_url(data)

    assert url.startswith("data:image/jpeg;base64,")


def test_random_classifier_picks_known_label() -> None:
    classifier = RandomDishClassifier(
        labels=LABELS, delay_seconds=0, rng=random.Random(7)
    )

    labels = {asyncio.run(classifier.classify(b"image")) for _ in range(20)}

    assert labels <= set(LABELS)
    assert len(labels) > 1


def test_random_classifier_without_labels_returns_none() -> None:
    classifier = RandomDishClassifier(labels=(), delay_seconds=0)

    assert asyncio.run(classifier.classify(b"image")) is None


def test_classification_schema_allows_unlisted_labels() -> None:
    schema = classification_schema(("salad", "steak"), allow_unlisted=True)

    label_options = schema["properties"]["label"]["anyOf"]  # type: ignore[index]
    assert label_options[0] == {"type": "string"}


def test_vision_classifier_passes_through_unlisted_label() -> None:
    client = FakeVisionClient(payload={"label": "lentil soup", "confidence": 0.6})
    classifier = VisionDishClassifier(
        client=client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
        labels=LABELS,
        allow_unlisted=True,
    )

    assert asyncio.run(classifier.classify(b"image-bytes")) == "lentil soup"
    assert client.requests[0]["schema"] == classification_schema(
        LABELS, allow_unlisted=True
    )
