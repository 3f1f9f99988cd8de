"""Session profile models."""

from dataclasses import dataclass, field
from enum import Enum


class AgeBracket(str, Enum):
    """Child age range in years."""

    UNDER_ONE = "0-1"
    ONE_TO_TWO = "1-2"
    TWO_TO_THREE = "2-3"
    THREE_TO_FIVE = "3-5"
    FIVE_TO_SEVEN = "5-7"
    SEVEN_TO_TEN = "7-10"


class SubscriptionTier(str, Enum):
    """Subscription state of the session."""

    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass
class Profile:
    """Chat profile that parameterizes outgoing requests."""

    age_bracket: AgeBracket = AgeBracket.ONE_TO_TWO
    is_sick: bool = False
    subscription: SubscriptionTier = SubscriptionTier.TRIAL


@dataclass(frozen=True)
class DailyTargets:
    """Daily macro targets shown on the tracker dashboard."""

    kcal: float = 1400.0
    protein_g: float = 40.0
    fat_g: float = 50.0
    carbs_g: float = 190.0


@dataclass
class TrackerProfile:
    """Child profile for the meal tracker."""

    name: str = "Малыш"
    age: int = 5
    targets: DailyTargets = field(default_factory=DailyTargets)
