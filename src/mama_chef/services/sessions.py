"""In-memory registry of chat and tracker sessions."""

import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from mama_chef.domain.chat import Role, Turn
from mama_chef.domain.errors import UnknownSession
from mama_chef.domain.profile import (
    AgeBracket,
    Profile,
    SubscriptionTier,
    TrackerProfile,
)
from mama_chef.services.conversation import ConversationStore
from mama_chef.services.meal_history import MealHistory, MealHistoryRepository
from mama_chef.services.prompts import WELCOME_MESSAGE
from mama_chef.services.reconciliation import ReconciliationEngine

_logger = logging.getLogger(__name__)


@dataclass
class Session:
    """State of one client session; never shared between sessions."""

    id: UUID
    profile: Profile
    conversation: ConversationStore
    engine: ReconciliationEngine
    tracker_profile: TrackerProfile = field(default_factory=TrackerProfile)
    pending_image: str | None = None
    busy: bool = False


@dataclass
class SessionService:
    """Creates and looks up sessions.

    Each session reads and writes its own meal history namespace, derived
    from the client key when one is given and from the session id otherwise.
    Sessions opened with the same client key share one history.
    """

    repository: MealHistoryRepository
    namespace: str = "mama_chef_meals"
    max_meals: int = 500
    sessions: dict[UUID, Session] = field(default_factory=dict)

    def create_session(self, client_key: str | None = None) -> Session:
        """Create a session seeded with the welcome message."""
        session_id = uuid4()
        history = MealHistory(
            repository=self.repository,
            namespace=f"{self.namespace}:{client_key or session_id.hex}",
            max_meals=self.max_meals,
        )
        conversation = ConversationStore()
        conversation.append(
            Turn(id=uuid4().hex, role=Role.ASSISTANT, text=WELCOME_MESSAGE)
        )
        session = Session(
            id=session_id,
            profile=Profile(),
            conversation=conversation,
            engine=ReconciliationEngine(history=history),
        )
        self.sessions[session.id] = session
        _logger.info(
            "Session created: id=%s namespace=%s", session.id, history.namespace
        )
        return session

    def get_session(self, session_id: UUID) -> Session:
        """Return a session or raise ``UnknownSession``."""
        session = self.sessions.get(session_id)
        if session is None:
            raise UnknownSession(f"No session with id {session_id}")
        return session

    def drop_session(self, session_id: UUID) -> None:
        """Forget a session and its in-memory state."""
        self.sessions.pop(session_id, None)

    def update_profile(
        self,
        session_id: UUID,
        *,
        age_bracket: AgeBracket | None = None,
        is_sick: bool | None = None,
        subscription: SubscriptionTier | None = None,
    ) -> Profile:
        """Apply explicit settings changes to the session profile."""
        profile = self.get_session(session_id).profile
        if age_bracket is not None:
            profile.age_bracket = age_bracket
        if is_sick is not None:
            profile.is_sick = is_sick
        if subscription is not None:
            profile.subscription = subscription
        return profile
