"""Random stand-in for a real dish recognition model."""

import asyncio
import random
from dataclasses import dataclass, field

from fitvision.services.vision import DishClassifier


@dataclass
class RandomDishClassifier(DishClassifier):
    """Pick a known dish label uniformly at random after a short delay."""

    labels: tuple[str, ...]
    delay_seconds: float = 1.5
    rng: random.Random = field(default_factory=random.Random)

    async def classify(self, image_bytes: bytes) -> str | None:
        """Return a random label; the image content is ignored."""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        if not self.labels:
            return None
        return self.rng.choice(self.labels)
