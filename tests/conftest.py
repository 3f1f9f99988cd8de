"""Shared test fixtures."""

import base64
from dataclasses import dataclass, field

import pytest

from mama_chef.adapters.memory_meal_history_repository import (
    InMemoryMealHistoryRepository,
)
from mama_chef.config import Settings
from mama_chef.containers import AppContainer
from mama_chef.services.chat import ChatService
from mama_chef.services.gateway import GenerateRequest, ModelClient, ModelGateway
from mama_chef.services.meal_history import MealHistory
from mama_chef.services.reconciliation import ReconciliationEngine
from mama_chef.services.sessions import SessionService
from mama_chef.services.tracker import TrackerService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

BANANA_PAYLOAD: dict[str, object] = {
    "items": [
        {
            "name": "банан",
            "portionGrams": 100,
            "kcalPer100g": 90,
            "proteinPer100g": 1.1,
            "fatPer100g": 0.3,
            "carbsPer100g": 21,
            "confidence": "high",
        }
    ]
}


@dataclass
class FakeModelClient(ModelClient):
    """Fake model client returning queued replies or raising queued errors."""

    replies: list[str | Exception] = field(default_factory=list)
    requests: list[GenerateRequest] = field(default_factory=list)
    default_reply: str = "Готово!"

    async def generate(self, request: GenerateRequest) -> str:
        self.requests.append(request)
        if not self.replies:
            return self.default_reply
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="gemini-key", max_saved_meals=50)


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def history_repository() -> InMemoryMealHistoryRepository:
    return InMemoryMealHistoryRepository()


@pytest.fixture
def history(history_repository: InMemoryMealHistoryRepository) -> MealHistory:
    return MealHistory(repository=history_repository, namespace="test_meals")


@pytest.fixture
def engine(history: MealHistory) -> ReconciliationEngine:
    return ReconciliationEngine(history=history)


@pytest.fixture
def container(
    settings: Settings,
    model_client: FakeModelClient,
    history_repository: InMemoryMealHistoryRepository,
) -> AppContainer:
    gateway = ModelGateway(model_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        gateway=gateway,
        session_service=SessionService(
            repository=history_repository,
            namespace="test_meals",
            max_meals=settings.max_saved_meals,
        ),
        chat_service=ChatService(
            gateway=gateway,
            model=settings.chat_model,
            temperature=settings.chat_temperature,
            history_window=settings.history_window,
        ),
        tracker_service=TrackerService(gateway=gateway, model=settings.tracker_model),
        close_resources=close_resources,
    )
