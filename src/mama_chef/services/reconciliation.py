"""Reconciliation of recognized food items into saved meals."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from uuid import uuid4

from pydantic import ValidationError

from mama_chef.domain.errors import (
    EmptySelection,
    InvalidPortion,
    MalformedPayload,
    UnconfirmedLowConfidence,
    UnknownItem,
)
from mama_chef.domain.nutrition import (
    Confidence,
    EnergySlice,
    MacroProgress,
    MacroTotals,
    MealItemSnapshot,
    RecognizedItem,
    SavedMeal,
)
from mama_chef.domain.profile import DailyTargets
from mama_chef.domain.vision import RecognitionBatch
from mama_chef.services.meal_history import MealHistory

MAX_PORTION_GRAMS = 2000.0

_KCAL_PER_GRAM = {"protein": 4.0, "fat": 9.0, "carbs": 4.0}

_logger = logging.getLogger(__name__)


@dataclass
class ReconciliationEngine:
    """Holds the in-progress batch and commits it to the meal history."""

    history: MealHistory
    items: list[RecognizedItem] = field(default_factory=list)

    def ingest(self, raw_payload: object) -> list[RecognizedItem]:
        """Validate a recognition payload and replace the current batch."""
        if isinstance(raw_payload, list):
            raw_payload = {"items": raw_payload}
        if not isinstance(raw_payload, dict):
            raise MalformedPayload("Recognition payload must be an object")
        try:
            batch = RecognitionBatch.model_validate(raw_payload)
        except ValidationError as exc:
            raise MalformedPayload(str(exc)) from exc
        self.items = [
            RecognizedItem(
                id=uuid4().hex,
                name=entry.name,
                portion_grams=min(entry.portion_grams, MAX_PORTION_GRAMS),
                kcal_per_100g=entry.kcal_per_100g,
                protein_per_100g=entry.protein_per_100g,
                fat_per_100g=entry.fat_per_100g,
                carbs_per_100g=entry.carbs_per_100g,
                confidence=entry.confidence,
            )
            for entry in batch.items
        ]
        _logger.info("Ingested recognition batch: items=%s", len(self.items))
        return self.items

    def set_portion(self, item_id: str, grams: object) -> RecognizedItem:
        """Set an item's portion, clamped to the allowed range."""
        item = self._get(item_id)
        item.portion_grams = clamp_portion(grams)
        return item

    def set_included(self, item_id: str, included: bool) -> RecognizedItem:
        """Include or exclude an item from the meal."""
        item = self._get(item_id)
        item.included = bool(included)
        return item

    def batch_totals(self) -> MacroTotals:
        """Return totals of the included items in the current batch."""
        return compute_totals(self.items)

    def commit(
        self,
        image: str | None = None,
        *,
        confirm_low_confidence: bool = False,
        now: datetime | None = None,
    ) -> SavedMeal:
        """Freeze the included items into a saved meal and clear the batch."""
        active = [item for item in self.items if item.included]
        if not active:
            raise EmptySelection("Select at least one item to save")
        low = [item.name for item in active if item.confidence is Confidence.LOW]
        if low and not confirm_low_confidence:
            raise UnconfirmedLowConfidence(
                "Confirm low-confidence items before saving: " + ", ".join(low)
            )
        meal = SavedMeal(
            id=uuid4().hex,
            timestamp=now or datetime.now(tz=UTC),
            items=tuple(_snapshot(item) for item in active),
            totals=compute_totals(active),
            image=image,
        )
        self.history.add(meal)
        self.items = []
        _logger.info("Saved meal: id=%s items=%s", meal.id, len(meal.items))
        return meal

    def delete(self, meal_id: str) -> None:
        """Delete a saved meal; unknown ids are ignored."""
        if not self.history.remove(meal_id):
            _logger.debug("Delete of unknown meal ignored: id=%s", meal_id)

    def meals(self) -> list[SavedMeal]:
        """Return saved meals, newest first."""
        return self.history.list_meals()

    def daily_totals(self, day: date, tz: tzinfo = UTC) -> MacroTotals:
        """Return totals of all meals saved on ``day`` in timezone ``tz``."""
        snapshots = [
            item
            for meal in self.meals()
            if meal.timestamp.astimezone(tz).date() == day
            for item in meal.items
        ]
        return _sum_portions(snapshots)

    def _get(self, item_id: str) -> RecognizedItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise UnknownItem(f"No item with id {item_id}")


def compute_totals(items: Iterable[RecognizedItem]) -> MacroTotals:
    """Sum per-100g macros scaled by portion over the included items."""
    return _sum_portions(item for item in items if item.included)


def clamp_portion(grams: object) -> float:
    """Validate a portion and clamp it to ``[0, MAX_PORTION_GRAMS]``."""
    if isinstance(grams, bool) or not isinstance(grams, int | float):
        raise InvalidPortion("Portion must be a number of grams")
    value = float(grams)
    if not math.isfinite(value):
        raise InvalidPortion("Portion must be a finite number")
    return min(max(value, 0.0), MAX_PORTION_GRAMS)


def progress(totals: MacroTotals, targets: DailyTargets) -> list[MacroProgress]:
    """Return the share of each daily target, rounded and capped at 100."""
    pairs = (
        ("kcal", totals.kcal, targets.kcal),
        ("protein_g", totals.protein_g, targets.protein_g),
        ("fat_g", totals.fat_g, targets.fat_g),
        ("carbs_g", totals.carbs_g, targets.carbs_g),
    )
    return [
        MacroProgress(
            key=key,
            value=value,
            target=target,
            percent=min(round(value / target * 100), 100) if target > 0 else 0,
        )
        for key, value, target in pairs
    ]


def energy_split(totals: MacroTotals) -> list[EnergySlice]:
    """Return the energy from each macro; empty slices are omitted."""
    slices = [
        EnergySlice("protein", totals.protein_g * _KCAL_PER_GRAM["protein"]),
        EnergySlice("fat", totals.fat_g * _KCAL_PER_GRAM["fat"]),
        EnergySlice("carbs", totals.carbs_g * _KCAL_PER_GRAM["carbs"]),
    ]
    return [entry for entry in slices if entry.kcal > 0]


def _sum_portions(
    items: Iterable[RecognizedItem | MealItemSnapshot],
) -> MacroTotals:
    kcal = protein = fat = carbs = 0.0
    for item in items:
        factor = item.portion_grams / 100.0
        kcal += item.kcal_per_100g * factor
        protein += item.protein_per_100g * factor
        fat += item.fat_per_100g * factor
        carbs += item.carbs_per_100g * factor
    return MacroTotals(kcal=kcal, protein_g=protein, fat_g=fat, carbs_g=carbs)


def _snapshot(item: RecognizedItem) -> MealItemSnapshot:
    return MealItemSnapshot(
        id=item.id,
        name=item.name,
        portion_grams=item.portion_grams,
        kcal_per_100g=item.kcal_per_100g,
        protein_per_100g=item.protein_per_100g,
        fat_per_100g=item.fat_per_100g,
        carbs_per_100g=item.carbs_per_100g,
        confidence=item.confidence,
    )
