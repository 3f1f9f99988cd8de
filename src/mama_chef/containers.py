"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from mama_chef.adapters.gemini_client import HttpxGeminiClient
from mama_chef.adapters.memory_meal_history_repository import (
    InMemoryMealHistoryRepository,
)
from mama_chef.adapters.supabase_meal_history_repository import (
    SupabaseMealHistoryRepository,
)
from mama_chef.config import Settings, resolve_api_key
from mama_chef.services.chat import ChatService
from mama_chef.services.gateway import ModelGateway
from mama_chef.services.meal_history import MealHistoryRepository
from mama_chef.services.sessions import SessionService
from mama_chef.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    gateway: ModelGateway
    session_service: SessionService
    chat_service: ChatService
    tracker_service: TrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gemini_client = HttpxGeminiClient.create(
        api_key=resolve_api_key(resolved_settings.gemini_api_key),
        base_url=resolved_settings.gemini_base_url,
        timeout=resolved_settings.gateway_timeout_seconds,
    )
    gateway = ModelGateway(gemini_client)
    session_service = SessionService(
        repository=_build_history_repository(resolved_settings),
        namespace=resolved_settings.meal_history_namespace,
        max_meals=resolved_settings.max_saved_meals,
    )

    async def close_resources() -> None:
        await gemini_client.close()

    return AppContainer(
        settings=resolved_settings,
        gateway=gateway,
        session_service=session_service,
        chat_service=ChatService(
            gateway=gateway,
            model=resolved_settings.chat_model,
            temperature=resolved_settings.chat_temperature,
            history_window=resolved_settings.history_window,
        ),
        tracker_service=TrackerService(
            gateway=gateway,
            model=resolved_settings.tracker_model,
        ),
        close_resources=close_resources,
    )


def _build_history_repository(settings: Settings) -> MealHistoryRepository:
    if settings.supabase_url and settings.supabase_service_key:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseMealHistoryRepository(client)
    return InMemoryMealHistoryRepository()
