"""Food analysis contract — the output of the external recognition collaborator."""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

_GRAMS_RE = re.compile(r"\d+(?:\.\d+)?")


class FoodItem(BaseModel):
    name: str
    # [ymin, xmin, ymax, xmax] on a 0-1000 scale; None when absent or malformed
    box_2d: list[float] | None = None
    calories: float | None = None

    @field_validator("box_2d", mode="before")
    @classmethod
    def _drop_malformed_box(cls, value: Any) -> list[float] | None:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            logger.debug("Discarding non-sequence box_2d %r", value)
            return None
        try:
            coords = [float(v) for v in value]
        except (TypeError, ValueError):
            logger.debug("Discarding non-numeric box_2d %r", value)
            return None
        if len(coords) != 4 or not all(math.isfinite(c) for c in coords):
            logger.debug("Discarding malformed box_2d %r", value)
            return None
        return coords

    @property
    def center(self) -> tuple[float, float] | None:
        """Box centre in normalized (x, y), or None without a usable box."""
        if self.box_2d is None:
            return None
        ymin, xmin, ymax, xmax = self.box_2d
        return ((xmin + xmax) / 2 / 1000, (ymin + ymax) / 2 / 1000)


class NutritionInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    calories: float = 0
    carbs: str = "0g"
    protein: str = "0g"
    fat: str = "0g"
    vitamins: list[str] = Field(default_factory=list)
    total_weight: str | None = Field(default=None, alias="totalWeight")

    def grams(self) -> tuple[float, float, float]:
        """Leading numeric value of carbs/protein/fat ("42g" -> 42.0)."""
        return (_leading_number(self.carbs), _leading_number(self.protein), _leading_number(self.fat))


class FoodAnalysis(BaseModel):
    """Complete analysis result for one photo."""

    model_config = ConfigDict(populate_by_name=True)

    is_food: bool = Field(default=True, alias="isFood")
    has_existing_text: bool = Field(default=False, alias="hasExistingText")
    meal_type: str = Field(default="", alias="mealType")
    summary: str = ""
    items: list[FoodItem] = Field(default_factory=list)
    nutrition: NutritionInfo = Field(default_factory=NutritionInfo)

    def item(self, index: int) -> FoodItem | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None


def _leading_number(value: str) -> float:
    match = _GRAMS_RE.search(value or "")
    return float(match.group()) if match else 0.0


def format_calories(value: float | None) -> str:
    if value is None:
        return "--"
    return f"{round(value):d}"
