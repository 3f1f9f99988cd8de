"""Chat flow: request building, reply parsing and transcript updates."""

import logging
from dataclasses import dataclass
from uuid import uuid4

from mama_chef.domain.chat import Role, Turn
from mama_chef.domain.errors import (
    ConversationBusy,
    EmptyMessage,
    GatewayError,
    UnknownQuickAction,
)
from mama_chef.domain.profile import SubscriptionTier
from mama_chef.services.conversation import DEFAULT_WINDOW
from mama_chef.services.gateway import GenerateRequest, ModelGateway
from mama_chef.services.inline_data import decode_data_url
from mama_chef.services.prompts import (
    EMPTY_REPLY_MESSAGE,
    ERROR_MESSAGE,
    QUICK_ACTION_PROMPTS,
    SUBSCRIPTION_ACTIVATED_MESSAGE,
    build_system_instruction,
)
from mama_chef.services.reply_parser import parse_reply
from mama_chef.services.sessions import Session

_logger = logging.getLogger(__name__)


@dataclass
class ChatService:
    """Sends user turns to the model and records the replies."""

    gateway: ModelGateway
    model: str
    temperature: float = 0.7
    history_window: int = DEFAULT_WINDOW

    async def send(
        self, session: Session, text: str, image_data_url: str | None = None
    ) -> Turn:
        """Append a user turn, ask the model and append its reply.

        Gateway failures become an apology turn instead of an error.
        """
        if session.busy:
            raise ConversationBusy("A reply is still pending for this session")
        if not text.strip() and not image_data_url:
            raise EmptyMessage("Message is empty")
        image = decode_data_url(image_data_url) if image_data_url else None

        session.busy = True
        try:
            session.conversation.append(
                Turn(id=uuid4().hex, role=Role.USER, text=text, image=image)
            )
            request = GenerateRequest(
                model=self.model,
                contents=session.conversation.build_contents(self.history_window),
                system_instruction=build_system_instruction(session.profile),
                temperature=self.temperature,
            )
            try:
                raw = await self.gateway.generate(request)
            except GatewayError:
                _logger.exception("Chat reply failed", extra={"session": session.id})
                reply = Turn(id=uuid4().hex, role=Role.ASSISTANT, text=ERROR_MESSAGE)
            else:
                parsed = parse_reply(raw)
                reply = Turn(
                    id=uuid4().hex,
                    role=Role.ASSISTANT,
                    text=parsed.display_text or EMPTY_REPLY_MESSAGE,
                    is_shopping_list=parsed.shopping_list_ready,
                    needs_subscription=parsed.needs_subscription,
                    structured=parsed.structured,
                )
            session.conversation.append(reply)
            return reply
        finally:
            session.busy = False

    async def quick_action(self, session: Session, action: str) -> Turn:
        """Send the fixed prompt behind a quick-action button."""
        prompt = QUICK_ACTION_PROMPTS.get(action)
        if prompt is None:
            raise UnknownQuickAction(f"Unknown quick action: {action}")
        return await self.send(session, prompt)

    def subscribe(self, session: Session) -> Turn:
        """Activate the subscription and announce it in the transcript."""
        session.profile.subscription = SubscriptionTier.ACTIVE
        turn = Turn(
            id=uuid4().hex,
            role=Role.ASSISTANT,
            text=SUBSCRIPTION_ACTIVATED_MESSAGE,
        )
        session.conversation.append(turn)
        return turn
