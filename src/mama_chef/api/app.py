"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from uuid import UUID

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mama_chef.api.models import (
    AnalyzeRequest,
    BatchOut,
    CommitRequest,
    EnergySliceOut,
    ErrorBody,
    ItemOut,
    ItemUpdate,
    MealOut,
    MessageRequest,
    ProfileOut,
    ProfileUpdate,
    ProgressOut,
    ProxyRequest,
    ProxyResponse,
    SessionCreate,
    SessionOut,
    SummaryOut,
    TotalsOut,
    TrackerProfileIn,
    TrackerProfileOut,
    TurnOut,
)
from mama_chef.app_logging import configure_logging
from mama_chef.containers import AppContainer
from mama_chef.domain.chat import Turn
from mama_chef.domain.errors import (
    ConfigError,
    ConversationBusy,
    EmptyMessage,
    EmptySelection,
    GatewayError,
    InvalidImage,
    InvalidPortion,
    InvalidRequest,
    InvalidTimezone,
    MalformedPayload,
    MamaChefError,
    NetworkError,
    UnconfirmedLowConfidence,
    UnknownItem,
    UnknownQuickAction,
    UnknownSession,
    UpstreamError,
)
from mama_chef.domain.nutrition import MacroTotals, RecognizedItem, SavedMeal
from mama_chef.domain.profile import DailyTargets, Profile, TrackerProfile
from mama_chef.services.gateway import GenerateRequest
from mama_chef.services.inline_data import to_data_url
from mama_chef.services.sessions import Session
from mama_chef.services.tracker import TrackerSummary

UNPROCESSABLE = 422

_ERROR_STATUS: tuple[tuple[type[MamaChefError], int], ...] = (
    (UnknownSession, status.HTTP_404_NOT_FOUND),
    (UnknownItem, status.HTTP_404_NOT_FOUND),
    (UnknownQuickAction, status.HTTP_404_NOT_FOUND),
    (ConversationBusy, status.HTTP_409_CONFLICT),
    (EmptySelection, status.HTTP_409_CONFLICT),
    (UnconfirmedLowConfidence, status.HTTP_409_CONFLICT),
    (MalformedPayload, UNPROCESSABLE),
    (InvalidPortion, UNPROCESSABLE),
    (InvalidImage, UNPROCESSABLE),
    (EmptyMessage, UNPROCESSABLE),
    (InvalidTimezone, UNPROCESSABLE),
    (InvalidRequest, UNPROCESSABLE),
    (GatewayError, status.HTTP_502_BAD_GATEWAY),
)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    code: {"model": ErrorBody}
    for code in (404, 409, UNPROCESSABLE, 500, 502)
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan, responses=_ERROR_RESPONSES)
    app.state.container = container

    @app.exception_handler(MamaChefError)
    async def handle_app_error(request: Request, exc: MamaChefError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request failed: %s %s", request.url.path, exc.code)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "details": _details_for(exc)},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return await handle_app_error(request, InvalidRequest(_describe_errors(exc)))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/gemini", response_model=ProxyResponse)
    async def gemini_proxy(body: ProxyRequest, request: Request) -> object:
        """Forward a prompt to the model service and return its text."""
        state_container: AppContainer = request.app.state.container
        try:
            text = await state_container.gateway.generate(
                GenerateRequest(
                    model=body.model,
                    contents=body.contents,
                    system_instruction=body.system_instruction,
                    temperature=body.temperature,
                    response_schema=body.response_schema,
                )
            )
        except ConfigError as exc:
            return _proxy_error(500, exc.message or "GEMINI_API_KEY is missing")
        except UpstreamError as exc:
            return _proxy_error(500, "Gemini API error", exc.body)
        except NetworkError as exc:
            logger.exception("Proxy call could not reach the model service")
            return _proxy_error(502, "Server error", exc.message)
        return ProxyResponse(text=text)

    @app.post("/sessions", response_model=SessionOut, status_code=201)
    async def create_session(
        request: Request, body: SessionCreate | None = None
    ) -> SessionOut:
        """Start a session seeded with the welcome message."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.create_session(
            body.client_key if body else None
        )
        return _session_out(session)

    @app.get("/sessions/{session_id}", response_model=SessionOut)
    async def get_session(session_id: UUID, request: Request) -> SessionOut:
        """Return the session profile and full transcript."""
        return _session_out(_session(request, session_id))

    @app.delete("/sessions/{session_id}", status_code=204)
    async def drop_session(session_id: UUID, request: Request) -> Response:
        """Forget a session."""
        state_container: AppContainer = request.app.state.container
        state_container.session_service.drop_session(session_id)
        return Response(status_code=204)

    @app.get("/sessions/{session_id}/turns", response_model=list[TurnOut])
    async def list_turns(session_id: UUID, request: Request) -> list[TurnOut]:
        """Return the transcript in order."""
        session = _session(request, session_id)
        return [_turn_out(turn) for turn in session.conversation.turns]

    @app.post("/sessions/{session_id}/messages", response_model=TurnOut)
    async def send_message(
        session_id: UUID, body: MessageRequest, request: Request
    ) -> TurnOut:
        """Send a user message and return the assistant reply."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        reply = await state_container.chat_service.send(session, body.text, body.image)
        return _turn_out(reply)

    @app.post(
        "/sessions/{session_id}/quick-actions/{action}", response_model=TurnOut
    )
    async def quick_action(session_id: UUID, action: str, request: Request) -> TurnOut:
        """Run a quick-action button."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        reply = await state_container.chat_service.quick_action(session, action)
        return _turn_out(reply)

    @app.get("/sessions/{session_id}/profile", response_model=ProfileOut)
    async def get_profile(session_id: UUID, request: Request) -> ProfileOut:
        """Return the chat profile."""
        return _profile_out(_session(request, session_id).profile)

    @app.patch("/sessions/{session_id}/profile", response_model=ProfileOut)
    async def update_profile(
        session_id: UUID, body: ProfileUpdate, request: Request
    ) -> ProfileOut:
        """Apply settings changes to the chat profile."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.session_service.update_profile(
            session_id,
            age_bracket=body.age_bracket,
            is_sick=body.is_sick,
            subscription=body.subscription,
        )
        return _profile_out(profile)

    @app.post("/sessions/{session_id}/subscription", response_model=TurnOut)
    async def subscribe(session_id: UUID, request: Request) -> TurnOut:
        """Activate the subscription."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        return _turn_out(state_container.chat_service.subscribe(session))

    @app.post("/sessions/{session_id}/tracker/analyze", response_model=BatchOut)
    async def analyze_photo(
        session_id: UUID, body: AnalyzeRequest, request: Request
    ) -> BatchOut:
        """Recognize foods on a photo and start a new batch."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        await state_container.tracker_service.analyze(session, body.image)
        return _batch_out(session)

    @app.get("/sessions/{session_id}/tracker/items", response_model=BatchOut)
    async def list_items(session_id: UUID, request: Request) -> BatchOut:
        """Return the in-progress batch."""
        return _batch_out(_session(request, session_id))

    @app.patch(
        "/sessions/{session_id}/tracker/items/{item_id}", response_model=BatchOut
    )
    async def update_item(
        session_id: UUID, item_id: str, body: ItemUpdate, request: Request
    ) -> BatchOut:
        """Edit an item's portion or inclusion."""
        session = _session(request, session_id)
        if body.portion_grams is not None:
            session.engine.set_portion(item_id, body.portion_grams)
        if body.included is not None:
            session.engine.set_included(item_id, body.included)
        return _batch_out(session)

    @app.post(
        "/sessions/{session_id}/tracker/commit",
        response_model=MealOut,
        status_code=201,
    )
    async def commit_meal(
        session_id: UUID, body: CommitRequest, request: Request
    ) -> MealOut:
        """Save the included items as a meal."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        meal = state_container.tracker_service.commit(
            session, confirm_low_confidence=body.confirm_low_confidence
        )
        return _meal_out(meal)

    @app.get("/sessions/{session_id}/tracker/meals", response_model=list[MealOut])
    async def list_meals(session_id: UUID, request: Request) -> list[MealOut]:
        """Return saved meals, newest first."""
        session = _session(request, session_id)
        return [_meal_out(meal) for meal in session.engine.meals()]

    @app.delete("/sessions/{session_id}/tracker/meals/{meal_id}", status_code=204)
    async def delete_meal(session_id: UUID, meal_id: str, request: Request) -> Response:
        """Delete a saved meal; unknown ids succeed as well."""
        _session(request, session_id).engine.delete(meal_id)
        return Response(status_code=204)

    @app.get("/sessions/{session_id}/tracker/summary", response_model=SummaryOut)
    async def tracker_summary(
        session_id: UUID, request: Request, tz: str = "UTC"
    ) -> SummaryOut:
        """Return today's totals, target progress and energy split."""
        state_container: AppContainer = request.app.state.container
        session = _session(request, session_id)
        summary = state_container.tracker_service.summary(session, tz)
        return _summary_out(summary)

    @app.get(
        "/sessions/{session_id}/tracker/profile", response_model=TrackerProfileOut
    )
    async def get_tracker_profile(
        session_id: UUID, request: Request
    ) -> TrackerProfileOut:
        """Return the tracker profile and daily targets."""
        return _tracker_profile_out(_session(request, session_id).tracker_profile)

    @app.put(
        "/sessions/{session_id}/tracker/profile", response_model=TrackerProfileOut
    )
    async def set_tracker_profile(
        session_id: UUID, body: TrackerProfileIn, request: Request
    ) -> TrackerProfileOut:
        """Replace the tracker profile and daily targets."""
        session = _session(request, session_id)
        session.tracker_profile = TrackerProfile(
            name=body.name,
            age=body.age,
            targets=DailyTargets(**body.targets.model_dump()),
        )
        return _tracker_profile_out(session.tracker_profile)

    return app


def _session(request: Request, session_id: UUID) -> Session:
    container: AppContainer = request.app.state.container
    return container.session_service.get_session(session_id)


def _status_for(exc: MamaChefError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _details_for(exc: MamaChefError) -> str:
    if isinstance(exc, UpstreamError):
        return exc.body
    return exc.message


def _describe_errors(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _proxy_error(
    status_code: int, error: str, details: str | None = None
) -> JSONResponse:
    content: dict[str, str] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _profile_out(profile: Profile) -> ProfileOut:
    return ProfileOut(
        age_bracket=profile.age_bracket,
        is_sick=profile.is_sick,
        subscription=profile.subscription,
    )


def _session_out(session: Session) -> SessionOut:
    return SessionOut(
        session_id=str(session.id),
        profile=_profile_out(session.profile),
        turns=[_turn_out(turn) for turn in session.conversation.turns],
    )


def _turn_out(turn: Turn) -> TurnOut:
    return TurnOut(
        id=turn.id,
        role=turn.role.value,
        text=turn.text,
        image=to_data_url(turn.image) if turn.image else None,
        is_shopping_list=turn.is_shopping_list,
        needs_subscription=turn.needs_subscription,
        structured=turn.structured,
    )


def _totals_out(totals: MacroTotals) -> TotalsOut:
    return TotalsOut(**asdict(totals))


def _item_out(item: RecognizedItem) -> ItemOut:
    return ItemOut(**asdict(item))


def _batch_out(session: Session) -> BatchOut:
    return BatchOut(
        items=[_item_out(item) for item in session.engine.items],
        totals=_totals_out(session.engine.batch_totals()),
    )


def _meal_out(meal: SavedMeal) -> MealOut:
    return MealOut(
        id=meal.id,
        timestamp=meal.timestamp,
        image=meal.image,
        items=[ItemOut(**asdict(item)) for item in meal.items],
        totals=_totals_out(meal.totals),
    )


def _summary_out(summary: TrackerSummary) -> SummaryOut:
    return SummaryOut(
        day=summary.day,
        today=_totals_out(summary.today),
        progress=[ProgressOut(**asdict(entry)) for entry in summary.progress],
        energy=[EnergySliceOut(**asdict(entry)) for entry in summary.energy],
        batch=_totals_out(summary.batch),
    )


def _tracker_profile_out(profile: TrackerProfile) -> TrackerProfileOut:
    return TrackerProfileOut(
        name=profile.name,
        age=profile.age,
        targets=asdict(profile.targets),
    )
