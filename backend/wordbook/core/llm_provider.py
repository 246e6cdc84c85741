from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List

import httpx

from ..config import Settings, http_client_options


class LLMError(Exception):
    """Base class for generative-text failures."""


class LLMConfigurationError(LLMError):
    """Provider cannot be built, e.g. the API key is missing."""


class LLMTransportError(LLMError):
    """Request never produced a usable HTTP response."""


class LLMFormatError(LLMError):
    """Response arrived but the expected text field is missing."""


@dataclass
class LLMMessage:
    role: str
    content: str


@dataclass
class LLMResponse:
    content: str
    raw: Any | None = None


class LLMProvider(ABC):
    """Abstract base class for any LLM backend (local or remote)."""

    @abstractmethod
    async def chat(self, messages: List[LLMMessage]) -> LLMResponse:
        ...


class DummyLLMProvider(LLMProvider):
    """Returns a canned reply. Handy for offline development and tests."""

    def __init__(self, reply: str = "petrichor|the pleasant smell of earth after rain"):
        self.reply = reply
        self.calls: List[List[LLMMessage]] = []

    async def chat(self, messages: List[LLMMessage]) -> LLMResponse:
        self.calls.append(list(messages))
        return LLMResponse(content=self.reply, raw=None)


class GeminiProvider(LLMProvider):
    """Google Gemini generateContent over plain REST."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise LLMConfigurationError("GEMINI_API_KEY not set in .env")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @staticmethod
    def build_payload(messages: List[LLMMessage]) -> dict:
        system = [m.content for m in messages if m.role == "system"]
        contents = [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
            if m.role != "system"
        ]
        payload: dict = {"contents": contents}
        if system:
            payload["systemInstruction"] = {"parts": [{"text": "\n".join(system)}]}
        return payload

    @staticmethod
    def extract_text(data: Any) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMFormatError("response has no candidates[0].content.parts[0].text") from exc
        if not isinstance(text, str):
            raise LLMFormatError("response text is not a string")
        return text

    async def chat(self, messages: List[LLMMessage]) -> LLMResponse:
        headers = {"x-goog-api-key": self.api_key}
        try:
            async with httpx.AsyncClient(transport=self.transport, **http_client_options(self.timeout_sec)) as client:
                resp = await client.post(self.endpoint, json=self.build_payload(messages), headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise LLMTransportError(f"Gemini returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise LLMTransportError(f"Gemini request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise LLMFormatError("response is not JSON") from exc

        return LLMResponse(content=self.extract_text(data), raw=data)


def build_llm_provider(settings: Settings) -> LLMProvider:
    if not settings.gemini_api_key:
        raise LLMConfigurationError("GEMINI_API_KEY not set in .env")
    return GeminiProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout_sec=settings.http_timeout_sec,
    )
