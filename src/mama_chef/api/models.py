"""Pydantic models for the HTTP API."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from mama_chef.domain.contract import StructuredReply
from mama_chef.domain.nutrition import Confidence
from mama_chef.domain.profile import AgeBracket, SubscriptionTier


class ProxyRequest(BaseModel):
    """Body of the model proxy endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    model: str
    contents: list[dict[str, object]]
    system_instruction: str | None = Field(default=None, alias="systemInstruction")
    temperature: float | None = None
    response_schema: dict[str, object] | None = Field(
        default=None, alias="responseSchema"
    )


class ProxyResponse(BaseModel):
    text: str


class ErrorBody(BaseModel):
    error: str
    details: str | None = None


class SessionCreate(BaseModel):
    """Optional client key; sessions with the same key share a meal history."""

    client_key: str | None = Field(
        default=None, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$"
    )


class ProfileOut(BaseModel):
    age_bracket: AgeBracket
    is_sick: bool
    subscription: SubscriptionTier


class ProfileUpdate(BaseModel):
    """Settings changes; omitted fields stay as they are."""

    age_bracket: AgeBracket | None = None
    is_sick: bool | None = None
    subscription: SubscriptionTier | None = None


class TurnOut(BaseModel):
    id: str
    role: str
    text: str
    image: str | None = None
    is_shopping_list: bool = False
    needs_subscription: bool = False
    structured: StructuredReply | None = None


class SessionOut(BaseModel):
    session_id: str
    profile: ProfileOut
    turns: list[TurnOut]


class MessageRequest(BaseModel):
    text: str = ""
    image: str | None = Field(default=None, description="Base64 image data URL")


class AnalyzeRequest(BaseModel):
    image: str = Field(description="Base64 image data URL")


class ItemOut(BaseModel):
    id: str
    name: str
    portion_grams: float
    kcal_per_100g: float
    protein_per_100g: float
    fat_per_100g: float
    carbs_per_100g: float
    confidence: Confidence
    included: bool = True


class ItemUpdate(BaseModel):
    portion_grams: float | None = None
    included: bool | None = None


class CommitRequest(BaseModel):
    confirm_low_confidence: bool = False


class TotalsOut(BaseModel):
    kcal: float
    protein_g: float
    fat_g: float
    carbs_g: float


class BatchOut(BaseModel):
    items: list[ItemOut]
    totals: TotalsOut


class MealOut(BaseModel):
    id: str
    timestamp: datetime
    image: str | None
    items: list[ItemOut]
    totals: TotalsOut


class ProgressOut(BaseModel):
    key: str
    value: float
    target: float
    percent: int


class EnergySliceOut(BaseModel):
    label: str
    kcal: float


class SummaryOut(BaseModel):
    day: date
    today: TotalsOut
    progress: list[ProgressOut]
    energy: list[EnergySliceOut]
    batch: TotalsOut


class TargetsIn(BaseModel):
    kcal: float = Field(gt=0)
    protein_g: float = Field(gt=0)
    fat_g: float = Field(gt=0)
    carbs_g: float = Field(gt=0)


class TrackerProfileIn(BaseModel):
    name: str = Field(min_length=1)
    age: int = Field(ge=0, le=18)
    targets: TargetsIn


class TrackerProfileOut(TrackerProfileIn):
    pass
