"""Gateway to the generative language model."""

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol

from mama_chef.domain.errors import GatewayError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateRequest:
    """Everything needed for one model call."""

    model: str
    contents: list[dict[str, object]]
    system_instruction: str | None = None
    temperature: float | None = None
    response_schema: dict[str, object] | None = field(default=None)


class ModelClient(Protocol):
    """Interface for the model service."""

    async def generate(self, request: GenerateRequest) -> str:
        """Return the reply text or raise a ``GatewayError``."""


@dataclass
class ModelGateway:
    """Single failure boundary for model calls. Performs no retries."""

    client: ModelClient

    async def generate(self, request: GenerateRequest) -> str:
        """Call the model and return its reply text."""
        started = time.monotonic()
        try:
            text = await self.client.generate(request)
        except GatewayError as exc:
            _logger.warning(
                "Model call failed: model=%s code=%s error=%s",
                request.model,
                exc.code,
                exc,
            )
            raise
        _logger.info(
            "Model call finished: model=%s chars=%s elapsed=%.2fs",
            request.model,
            len(text),
            time.monotonic() - started,
        )
        return text
