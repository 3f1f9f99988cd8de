"""Domain models for the chat transcript."""

from dataclasses import dataclass
from enum import Enum

from mama_chef.domain.contract import StructuredReply


class Role(str, Enum):
    """Author of a turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class InlineImage:
    """Image payload ready to embed in a model request."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class Turn:
    """One message in a conversation."""

    id: str
    role: Role
    text: str
    image: InlineImage | None = None
    is_shopping_list: bool = False
    needs_subscription: bool = False
    structured: StructuredReply | None = None


@dataclass(frozen=True)
class ParsedReply:
    """Model reply split into display text and control signals."""

    display_text: str
    shopping_list_ready: bool
    needs_subscription: bool
    structured: StructuredReply | None = None
