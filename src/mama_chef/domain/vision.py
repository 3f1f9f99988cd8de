"""Models for validating food recognition payloads."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mama_chef.domain.nutrition import Confidence, bucket_confidence

_CONFIDENCE_ALIASES = {"med": "medium"}


class RecognizedItemPayload(BaseModel):
    """Single food entry as returned by the model."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    portion_grams: float = Field(alias="portionGrams", ge=0.0)
    kcal_per_100g: float = Field(alias="kcalPer100g", ge=0.0)
    protein_per_100g: float = Field(alias="proteinPer100g", ge=0.0)
    fat_per_100g: float = Field(alias="fatPer100g", ge=0.0)
    carbs_per_100g: float = Field(alias="carbsPer100g", ge=0.0)
    confidence: Confidence

    @field_validator(
        "portion_grams",
        "kcal_per_100g",
        "protein_per_100g",
        "fat_per_100g",
        "carbs_per_100g",
    )
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _bucket(cls, value: object) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            if not 0.0 <= value <= 1.0:
                raise ValueError("confidence score must be within [0, 1]")
            return bucket_confidence(float(value))
        if isinstance(value, str):
            cleaned = value.strip().lower()
            return _CONFIDENCE_ALIASES.get(cleaned, cleaned)
        return value


class RecognitionBatch(BaseModel):
    """Structured output of the food recognition call."""

    items: list[RecognizedItemPayload]
