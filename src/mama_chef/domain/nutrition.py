"""Nutrition domain models for the meal tracker."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

HIGH_CONFIDENCE_THRESHOLD = 0.75
MEDIUM_CONFIDENCE_THRESHOLD = 0.45


class Confidence(str, Enum):
    """Recognition confidence bucket."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def bucket_confidence(score: float) -> Confidence:
    """Map a numeric confidence score in [0, 1] to its bucket."""
    if score >= HIGH_CONFIDENCE_THRESHOLD:
        return Confidence.HIGH
    if score >= MEDIUM_CONFIDENCE_THRESHOLD:
        return Confidence.MEDIUM
    return Confidence.LOW


@dataclass(frozen=True)
class MacroTotals:
    """Aggregated macros; values are unrounded."""

    kcal: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0


@dataclass
class RecognizedItem:
    """Food item recognized on a photo and awaiting confirmation.

    Only ``portion_grams`` and ``included`` change after ingest.
    """

    id: str
    name: str
    portion_grams: float
    kcal_per_100g: float
    protein_per_100g: float
    fat_per_100g: float
    carbs_per_100g: float
    confidence: Confidence
    included: bool = True


@dataclass(frozen=True)
class MealItemSnapshot:
    """Frozen copy of an included item at commit time."""

    id: str
    name: str
    portion_grams: float
    kcal_per_100g: float
    protein_per_100g: float
    fat_per_100g: float
    carbs_per_100g: float
    confidence: Confidence


@dataclass(frozen=True)
class SavedMeal:
    """Committed meal in the history."""

    id: str
    timestamp: datetime
    items: tuple[MealItemSnapshot, ...]
    totals: MacroTotals
    image: str | None = None


@dataclass(frozen=True)
class MacroProgress:
    """Share of a daily target reached, as shown on progress bars."""

    key: str
    value: float
    target: float
    percent: int


@dataclass(frozen=True)
class EnergySlice:
    """Energy contributed by one macro, in kcal."""

    label: str
    kcal: float
