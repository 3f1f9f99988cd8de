"""Persisted meal history stored as one serialized list per namespace."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from mama_chef.domain.nutrition import (
    Confidence,
    MacroTotals,
    MealItemSnapshot,
    SavedMeal,
)

_logger = logging.getLogger(__name__)


class MealHistoryRepository(Protocol):
    """Key-value persistence for serialized meal lists."""

    def load(self, namespace: str) -> list[dict[str, object]]:
        """Return the stored records, or an empty list."""

    def save(self, namespace: str, records: list[dict[str, object]]) -> None:
        """Replace the stored records."""


@dataclass
class MealHistory:
    """Newest-first list of saved meals with a count-based retention cap."""

    repository: MealHistoryRepository
    namespace: str
    max_meals: int = 500

    def list_meals(self) -> list[SavedMeal]:
        """Return saved meals, newest first."""
        return [meal_from_record(row) for row in self.repository.load(self.namespace)]

    def add(self, meal: SavedMeal) -> None:
        """Prepend a meal and drop the oldest beyond the cap."""
        records = [meal_to_record(meal), *self.repository.load(self.namespace)]
        if len(records) > self.max_meals:
            _logger.info(
                "Meal history over cap: namespace=%s dropped=%s",
                self.namespace,
                len(records) - self.max_meals,
            )
            records = records[: self.max_meals]
        self.repository.save(self.namespace, records)

    def remove(self, meal_id: str) -> bool:
        """Remove a meal by id; return whether anything was removed."""
        records = self.repository.load(self.namespace)
        kept = [row for row in records if row.get("id") != meal_id]
        if len(kept) == len(records):
            return False
        self.repository.save(self.namespace, kept)
        return True


def meal_to_record(meal: SavedMeal) -> dict[str, object]:
    """Serialize a saved meal into a JSON-compatible record."""
    return {
        "id": meal.id,
        "timestamp": meal.timestamp.isoformat(),
        "image": meal.image,
        "items": [
            {
                "id": item.id,
                "name": item.name,
                "portion_grams": item.portion_grams,
                "kcal_per_100g": item.kcal_per_100g,
                "protein_per_100g": item.protein_per_100g,
                "fat_per_100g": item.fat_per_100g,
                "carbs_per_100g": item.carbs_per_100g,
                "confidence": item.confidence.value,
            }
            for item in meal.items
        ],
        "totals": {
            "kcal": meal.totals.kcal,
            "protein_g": meal.totals.protein_g,
            "fat_g": meal.totals.fat_g,
            "carbs_g": meal.totals.carbs_g,
        },
    }


def meal_from_record(row: dict[str, object]) -> SavedMeal:
    """Deserialize a record written by ``meal_to_record``."""
    totals = row.get("totals") or {}
    return SavedMeal(
        id=str(row["id"]),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        image=row.get("image"),
        items=tuple(
            MealItemSnapshot(
                id=str(item["id"]),
                name=str(item.get("name", "")),
                portion_grams=float(item.get("portion_grams", 0.0)),
                kcal_per_100g=float(item.get("kcal_per_100g", 0.0)),
                protein_per_100g=float(item.get("protein_per_100g", 0.0)),
                fat_per_100g=float(item.get("fat_per_100g", 0.0)),
                carbs_per_100g=float(item.get("carbs_per_100g", 0.0)),
                confidence=Confidence(item.get("confidence", "medium")),
            )
            for item in row.get("items") or []
        ),
        totals=MacroTotals(
            kcal=float(totals.get("kcal", 0.0)),
            protein_g=float(totals.get("protein_g", 0.0)),
            fat_g=float(totals.get("fat_g", 0.0)),
            carbs_g=float(totals.get("carbs_g", 0.0)),
        ),
    )
