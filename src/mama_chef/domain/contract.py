"""Models for the machine-readable block embedded in chat replies.

The model is asked to append a fenced ``json`` block next to its prose. The
block is informational and loosely followed, so every field is optional and
unknown keys are ignored. An invalid value only loses itself: optional
fields fall back to ``None`` and lists keep their valid entries.
"""

from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


def _or_none(value: object, handler: ValidatorFunctionWrapHandler) -> object:
    try:
        return handler(value)
    except ValidationError:
        return None


def _valid_entries(value: object, handler: ValidatorFunctionWrapHandler) -> object:
    if not isinstance(value, list):
        return _or_none(value, handler) or []
    kept: list[object] = []
    for entry in value:
        try:
            kept.extend(handler([entry]))
        except ValidationError:
            continue
    return kept


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WarningType(str, Enum):
    """Kinds of warnings the model may attach."""

    ESTIMATE = "ESTIMATE"
    ALLERGEN = "ALLERGEN"
    CHOKING = "CHOKING"


class Macros(_Lenient):
    """Macro values for a meal or a share of the daily target."""

    kcal: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None

    @field_validator("kcal", "protein_g", "fat_g", "carbs_g", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)


class Targets(Macros):
    source: str | None = None
    note: str | None = None


class ChildProfileEcho(_Lenient):
    """Profile as understood by the model."""

    age_months: int | None = None
    allergies: list[str] = Field(default_factory=list)
    targets: Targets | None = None

    @field_validator("age_months", "targets", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)

    @field_validator("allergies", mode="wrap")
    @classmethod
    def _entries(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _valid_entries(value, handler)


class VisionLabel(_Lenient):
    label: str
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("confidence", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)


class PortionEstimate(_Lenient):
    estimate: float | None = None
    min: float | None = None
    max: float | None = None

    @field_validator("estimate", "min", "max", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)


class VisionAnalysis(_Lenient):
    """Photo recognition summary."""

    overall_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    items: list[VisionLabel] = Field(default_factory=list)
    portion_g: PortionEstimate | None = None

    @field_validator("overall_confidence", "portion_g", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)

    @field_validator("items", mode="wrap")
    @classmethod
    def _entries(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _valid_entries(value, handler)


class NutritionBlock(_Lenient):
    per_meal: Macros | None = None
    percent_of_daily: Macros | None = None

    @field_validator("per_meal", "percent_of_daily", mode="wrap")
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)


class ProgressEntry(_Lenient):
    key: str
    value: float | None = None
    target: float | None = None
    percent: float | None = None


class DonutSlice(_Lenient):
    label: str
    value: float


class Charts(_Lenient):
    progress: list[ProgressEntry] = Field(default_factory=list)
    donut_bgu_grams: list[DonutSlice] = Field(default_factory=list)

    @field_validator("progress", "donut_bgu_grams", mode="wrap")
    @classmethod
    def _entries(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _valid_entries(value, handler)


class ReplyWarning(_Lenient):
    type: WarningType
    text: str


class SuggestedAction(_Lenient):
    id: str
    label: str


class StructuredReply(_Lenient):
    """Parsed machine-readable block of a chat reply."""

    mode: str | None = None
    child_profile: ChildProfileEcho | None = None
    vision_analysis: VisionAnalysis | None = None
    nutrition: NutritionBlock | None = None
    charts: Charts | None = None
    warnings: list[ReplyWarning] = Field(default_factory=list)
    next_questions: list[str] = Field(default_factory=list)
    actions: list[SuggestedAction] = Field(default_factory=list)

    @field_validator(
        "mode", "child_profile", "vision_analysis", "nutrition", "charts", mode="wrap"
    )
    @classmethod
    def _optional(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _or_none(value, handler)

    @field_validator("warnings", "next_questions", "actions", mode="wrap")
    @classmethod
    def _entries(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        return _valid_entries(value, handler)
