"""Nutrition facts for recognized dishes."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fitvision.adapters.fdc_client import FdcClient
from fitvision.domain.profiles import Macro
from fitvision.services.cache import Cache
from fitvision.services.energy import round_half_up

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

DISH_NUTRITION: dict[str, Macro] = {
    "salad": Macro(calories=200, protein=5, carbs=10, fat=15),
    "chicken breast": Macro(calories=300, protein=40, carbs=0, fat=7),
    "steak": Macro(calories=450, protein=35, carbs=0, fat=30),
    "pizza": Macro(calories=700, protein=25, carbs=80, fat=30),
    "smoothie": Macro(calories=250, protein=12, carbs=40, fat=3),
    "burger": Macro(calories=650, protein=30, carbs=45, fat=40),
    "pasta": Macro(calories=550, protein=15, carbs=90, fat=10),
    "salmon": Macro(calories=350, protein=36, carbs=0, fat=20),
    "yogurt bowl": Macro(calories=300, protein=15, carbs=40, fat=8),
    "oatmeal": Macro(calories=250, protein=8, carbs=45, fat=5),
    "eggs and toast": Macro(calories=350, protein=18, carbs=30, fat=15),
    "protein shake": Macro(calories=220, protein=30, carbs=10, fat=5),
    "rice bowl": Macro(calories=480, protein=15, carbs=70, fat=12),
    "stir fry": Macro(calories=400, protein=25, carbs=35, fat=15),
}

_NUTRIENT_IDS = {
    1008: "calories",
    1003: "protein",
    1004: "fat",
    1005: "carbs",
}

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Resolve dish labels to macros.

    The built-in dish table is authoritative. When an FDC client is
    configured, labels missing from the table fall back to the first FDC
    search hit, scaled to its serving size (or 100 g when unknown).
    """

    cache: Cache
    fdc_client: FdcClient | None = None
    table: Mapping[str, Macro] = field(default_factory=lambda: dict(DISH_NUTRITION))
    ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    @property
    def known_dishes(self) -> tuple[str, ...]:
        return tuple(self.table)

    async def lookup(self, dish_name: str) -> Macro | None:
        """Return macros for a dish, or None when it cannot be resolved."""
        key = dish_name.strip().lower()
        known = self.table.get(key)
        if known is not None:
            return known
        if self.fdc_client is None:
            return None

        cache_key = f"fdc:dish:{key}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Macro):
            return cached

        fdc_client = self.fdc_client
        payload = await self._call_with_retry(
            lambda: fdc_client.search_foods(key, page_size=1), action="search"
        )
        foods = payload.get("foods") or []
        if not foods:
            _logger.info("No FDC match for dish %r", key)
            return None
        fdc_id = foods[0]["fdcId"]
        food = await self._call_with_retry(
            lambda: fdc_client.get_food(fdc_id), action=f"get_food:{fdc_id}"
        )
        macros = _portion_macros(food)
        self.cache.set(cache_key, macros, ttl_seconds=self.ttl_seconds)
        return macros

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _portion_macros(food: dict[str, object]) -> Macro:
    """Scale per-100 g FDC nutrients to one serving and round."""
    per_100g = {"calories": 0.0, "protein": 0.0, "fat": 0.0, "carbs": 0.0}
    for nutrient in food.get("foodNutrients") or []:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount")
        name = _NUTRIENT_IDS.get(nutrient_id)
        if name is not None and amount is not None:
            per_100g[name] = float(amount)

    serving_size = food.get("servingSize")
    grams = float(serving_size) if isinstance(serving_size, int | float) else 0.0
    factor = grams / 100.0 if grams > 0 else 1.0
    return Macro(
        calories=round_half_up(per_100g["calories"] * factor),
        protein=round_half_up(per_100g["protein"] * factor),
        carbs=round_half_up(per_100g["carbs"] * factor),
        fat=round_half_up(per_100g["fat"] * factor),
    )
