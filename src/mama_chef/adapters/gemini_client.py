"""Google Generative Language API client."""

from dataclasses import dataclass

import httpx

from mama_chef.domain.errors import ConfigError, NetworkError, UpstreamError
from mama_chef.services.gateway import GenerateRequest, ModelClient

EMPTY_REPLY_TEXT = "No response"


@dataclass
class HttpxGeminiClient(ModelClient):
    """HTTPX-backed client for the ``generateContent`` endpoint."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(
        cls, api_key: str | None, base_url: str, timeout: float = 60.0
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def generate(self, request: GenerateRequest) -> str:
        """Call ``generateContent`` and return the first candidate's text."""
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY is missing")
        url = f"{self.base_url}/models/{request.model}:generateContent"
        try:
            response = await self.http_client.post(
                url,
                headers={"x-goog-api-key": self.api_key},
                json=build_payload(request),
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            raise UpstreamError(response.status_code, response.text)
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(response.status_code, response.text) from exc
        return extract_text(data)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def build_payload(request: GenerateRequest) -> dict[str, object]:
    """Translate a request into the API's JSON body."""
    payload: dict[str, object] = {"contents": request.contents}
    if request.system_instruction:
        payload["systemInstruction"] = {
            "parts": [{"text": request.system_instruction}]
        }
    generation_config: dict[str, object] = {}
    if request.temperature is not None:
        generation_config["temperature"] = request.temperature
    if request.response_schema is not None:
        generation_config["responseMimeType"] = "application/json"
        generation_config["responseSchema"] = request.response_schema
    if generation_config:
        payload["generationConfig"] = generation_config
    return payload


def extract_text(data: object) -> str:
    """Join the text parts of the first candidate."""
    if not isinstance(data, dict):
        return EMPTY_REPLY_TEXT
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return EMPTY_REPLY_TEXT
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return EMPTY_REPLY_TEXT
    parts = content.get("parts") or []
    texts = [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    if not texts:
        return EMPTY_REPLY_TEXT
    return "".join(texts)
