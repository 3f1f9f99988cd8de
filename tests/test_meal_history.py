"""Tests for meal history persistence."""

import json
from datetime import UTC, datetime

from mama_chef.adapters.memory_meal_history_repository import (
    InMemoryMealHistoryRepository,
)
from mama_chef.domain.nutrition import (
    Confidence,
    MacroTotals,
    MealItemSnapshot,
    SavedMeal,
)
from mama_chef.services.meal_history import (
    MealHistory,
    meal_from_record,
    meal_to_record,
)


def _meal(meal_id: str) -> SavedMeal:
    return SavedMeal(
        id=meal_id,
        timestamp=datetime(2026, 1, 5, 8, 30, tzinfo=UTC),
        items=(
            MealItemSnapshot(
                id="item-1",
                name="каша",
                portion_grams=150,
                kcal_per_100g=88,
                protein_per_100g=3,
                fat_per_100g=2,
                carbs_per_100g=15,
                confidence=Confidence.MEDIUM,
            ),
        ),
        totals=MacroTotals(kcal=132, protein_g=4.5, fat_g=3, carbs_g=22.5),
    )


def test_record_survives_serialization() -> None:
    meal = _meal("m1")

    restored = meal_from_record(json.loads(json.dumps(meal_to_record(meal))))

    assert restored == meal


def test_history_is_newest_first() -> None:
    history = MealHistory(InMemoryMealHistoryRepository(), namespace="meals")

    history.add(_meal("first"))
    history.add(_meal("second"))

    assert [meal.id for meal in history.list_meals()] == ["second", "first"]


def test_history_drops_oldest_beyond_cap() -> None:
    history = MealHistory(InMemoryMealHistoryRepository(), "meals", max_meals=2)

    for meal_id in ("a", "b", "c"):
        history.add(_meal(meal_id))

    assert [meal.id for meal in history.list_meals()] == ["c", "b"]


def test_remove_reports_whether_anything_changed() -> None:
    repository = InMemoryMealHistoryRepository()
    history = MealHistory(repository, "meals")
    history.add(_meal("a"))

    assert history.remove("missing") is False
    assert history.remove("a") is True
    assert json.loads(repository.values["meals"]) == []


def test_namespaces_are_isolated() -> None:
    repository = InMemoryMealHistoryRepository()
    MealHistory(repository, "one").add(_meal("a"))

    assert MealHistory(repository, "two").list_meals() == []
