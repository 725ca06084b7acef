"""LLM client abstraction with Gemini REST support."""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import requests

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class LLMError(RuntimeError):
    """Raised when the hosted model cannot produce a response."""


class ConversationBusyError(LLMError):
    """Raised when a chat turn is attempted while another is still in flight."""


@dataclass(frozen=True)
class LLMPrompt:
    """Container for a single turn sent to the LLM."""

    role: str
    content: str


class ChatSession:
    """Multi-turn conversation handle bound to one client and one instruction.

    The turn log lives inside the handle and is replayed on every request.
    A turn is only recorded once the service has answered, so a failed call
    leaves the conversation exactly as it was.
    """

    def __init__(
        self,
        client: "LLMClient",
        *,
        system_instruction: str,
        temperature: float,
    ) -> None:
        self._client = client
        self.system_instruction = system_instruction
        self.temperature = temperature
        self._history: List[LLMPrompt] = []
        self._lock = threading.Lock()

    @property
    def history(self) -> Tuple[LLMPrompt, ...]:
        return tuple(self._history)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def send_message(self, message: str) -> str:
        if not self._lock.acquire(blocking=False):
            raise ConversationBusyError("A turn is already in flight on this conversation")
        try:
            turn = LLMPrompt(role="user", content=message)
            text = self._client.complete(
                [*self._history, turn],
                system_instruction=self.system_instruction,
                temperature=self.temperature,
            )
            self._history.append(turn)
            self._history.append(LLMPrompt(role="model", content=text))
            return text
        finally:
            self._lock.release()


class LLMClient:
    """Abstract base class for LLM providers."""

    model: str = ""

    def complete(
        self,
        messages: Iterable[LLMPrompt],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[Mapping[str, Any]] = None,
    ) -> str:
        raise NotImplementedError

    def start_chat(self, *, system_instruction: str, temperature: float = 0.7) -> ChatSession:
        return ChatSession(self, system_instruction=system_instruction, temperature=temperature)

    def generate_json(self, prompt: str, *, response_schema: Mapping[str, Any]) -> str:
        """Single-shot request whose answer is constrained to *response_schema*."""
        return self.complete(
            [LLMPrompt(role="user", content=prompt)],
            response_schema=response_schema,
        )


class StubLLMClient(LLMClient):
    """Offline client that returns deterministic placeholder text."""

    model = "stub-model"

    def complete(
        self,
        messages: Iterable[LLMPrompt],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[Mapping[str, Any]] = None,
    ) -> str:
        last = ""
        for message in messages:
            if message.role == "user":
                last = message.content
        if response_schema is not None:
            return json.dumps(
                {
                    "title": "Offline Draft",
                    "summary": "Placeholder spec produced without contacting the model.",
                    "problemStatement": last[:200],
                    "targetUsers": [],
                    "valueProposition": "",
                    "keyFeatures": [],
                    "userStories": [],
                    "constraintsAndNotes": ["Generated by the offline stub client."],
                }
            )
        return (
            "[stub-model] Unable to contact external LLM. Input summary: "
            f"{last[:200]}"
        )


class GeminiLLMClient(LLMClient):
    """Client that talks to the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float = 120.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def build_payload(
        self,
        messages: Iterable[LLMPrompt],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[Mapping[str, Any]] = None,
    ) -> dict:
        payload: dict = {
            "contents": [
                {"role": prompt.role, "parts": [{"text": prompt.content}]}
                for prompt in messages
            ],
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        generation_config: dict = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = dict(response_schema)
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    def complete(
        self,
        messages: Iterable[LLMPrompt],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[Mapping[str, Any]] = None,
    ) -> str:
        payload = self.build_payload(
            messages,
            system_instruction=system_instruction,
            temperature=temperature,
            response_schema=response_schema,
        )
        try:
            response = requests.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise LLMError(f"Gemini request failed: {exc}") from exc
        return extract_text(data)


def extract_text(data: Mapping[str, Any]) -> str:
    """Concatenate the text parts of the first candidate, skipping thoughts."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    return "".join(
        part.get("text", "")
        for part in parts
        if isinstance(part, Mapping) and not part.get("thought")
    )


def get_default_client(settings: Settings | None = None) -> LLMClient:
    """Return the Gemini client configured from the environment."""
    settings = settings or get_settings()
    logger.debug("Using Gemini model %s", settings.model)
    return GeminiLLMClient(
        api_key=settings.api_key,
        model=settings.model,
        timeout=settings.request_timeout,
    )
