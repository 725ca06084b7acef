"""Gateway wrapping every call to the hosted generation service."""
from __future__ import annotations

import logging
from typing import Iterable

from pydantic import ValidationError

from ..llm import ChatSession, LLMClient, LLMError
from ..memory import Message
from ..phases import ExperienceLevel
from ..schemas import SpecDocument
from .prompts import EMPTY_REPLY, build_document_prompt, build_system_instruction, flatten_history
from .schema import SPEC_RESPONSE_SCHEMA

logger = logging.getLogger(__name__)

INTERVIEW_TEMPERATURE = 0.7


class DocumentGenerationError(LLMError):
    """The model produced no usable spec document."""


class ModelGateway:
    """Open interview conversations and turn transcripts into spec documents."""

    def __init__(self, llm: LLMClient, *, temperature: float = INTERVIEW_TEMPERATURE) -> None:
        self.llm = llm
        self.temperature = temperature

    def open_interview(
        self,
        user_id: str,
        idea: str,
        experience_level: ExperienceLevel | str,
    ) -> ChatSession:
        instruction = build_system_instruction(user_id, idea, experience_level)
        return self.llm.start_chat(system_instruction=instruction, temperature=self.temperature)

    def converse(self, handle: ChatSession, message_text: str) -> str:
        """Send one turn and return the reply; errors propagate to the caller."""
        text = handle.send_message(message_text)
        if not text:
            logger.info("Model returned an empty reply; using fallback text")
            return EMPTY_REPLY
        return text

    def generate_document(self, history: Iterable[Message], original_idea: str) -> SpecDocument:
        prompt = build_document_prompt(flatten_history(history), original_idea)
        try:
            raw = self.llm.generate_json(prompt, response_schema=SPEC_RESPONSE_SCHEMA)
        except LLMError as exc:
            raise DocumentGenerationError(f"Spec request failed: {exc}") from exc
        if not raw:
            raise DocumentGenerationError("No text returned from model")
        try:
            return SpecDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise DocumentGenerationError(f"Model returned an invalid spec document: {exc}") from exc
