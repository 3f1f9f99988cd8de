"""Append-only conversation log."""

from dataclasses import dataclass, field

from mama_chef.domain.chat import Role, Turn
from mama_chef.services.inline_data import to_request_part

DEFAULT_WINDOW = 12
IMAGE_ONLY_PROMPT = "Проанализируй это фото еды."


@dataclass
class ConversationStore:
    """Ordered log of turns with a bounded request window."""

    _turns: list[Turn] = field(default_factory=list)

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Return all turns in insertion order."""
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, turn: Turn) -> None:
        """Append a turn to the end of the log."""
        self._turns.append(turn)

    def windowed(self, n: int = DEFAULT_WINDOW) -> tuple[Turn, ...]:
        """Return the last ``n`` turns in order."""
        if n <= 0:
            return ()
        return tuple(self._turns[-n:])

    def build_contents(self, n: int = DEFAULT_WINDOW) -> list[dict[str, object]]:
        """Build request contents from the last ``n`` turns."""
        return [
            {"role": _request_role(turn.role), "parts": to_request_parts(turn)}
            for turn in self.windowed(n)
        ]


def to_request_parts(turn: Turn) -> list[dict[str, object]]:
    """Return the request parts for a turn; never empty."""
    parts: list[dict[str, object]] = []
    if turn.image is not None:
        parts.append(to_request_part(turn.image))
    if turn.text.strip():
        parts.append({"text": turn.text})
    elif turn.image is not None:
        parts.append({"text": IMAGE_ONLY_PROMPT})
    else:
        parts.append({"text": " "})
    return parts


def _request_role(role: Role) -> str:
    return "model" if role is Role.ASSISTANT else "user"
