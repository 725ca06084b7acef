"""Pytest fixtures for SpecSynk tests."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest

from specsynk.interview import InterviewTimer, ModelGateway, SessionManager
from specsynk.llm import LLMClient
from specsynk.schemas import SpecDocument
from specsynk.sheets import SheetLogger

SAMPLE_DOCUMENT: Dict[str, Any] = {
    "title": "My Cool App",
    "summary": "Helps climbers swap used gear.",
    "problemStatement": "Climbing gear is expensive and rarely resold.",
    "targetUsers": ["Beginner climbers", "Gym owners"],
    "valueProposition": "Cheap, trusted second-hand gear.",
    "keyFeatures": ["Listings", "Gear condition checklist"],
    "userStories": ["As a climber I want to sell my shoes so that I can upgrade."],
    "constraintsAndNotes": ["Safety gear needs an age limit."],
}


class ScriptedLLMClient(LLMClient):
    """Fake model that replays queued replies and records every request."""

    model = "fake-model"

    def __init__(self, replies: Optional[List[Any]] = None, document: Any = None) -> None:
        self.replies = list(replies or [])
        self.document = document
        self.calls: List[Dict[str, Any]] = []

    def complete(self, messages, *, system_instruction=None, temperature=None, response_schema=None):
        self.calls.append(
            {
                "messages": list(messages),
                "system_instruction": system_instruction,
                "temperature": temperature,
                "response_schema": response_schema,
            }
        )
        if response_schema is not None:
            if isinstance(self.document, Exception):
                raise self.document
            if self.document is None:
                return json.dumps(SAMPLE_DOCUMENT)
            return self.document
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return "Tell me more."


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSheetLogger(SheetLogger):
    def __init__(self) -> None:
        super().__init__(url=None)
        self.rows: List[Dict[str, Any]] = []

    def record(self, data):
        self.rows.append(dict(data))
        return None


@pytest.fixture
def sample_document() -> SpecDocument:
    return SpecDocument.model_validate(SAMPLE_DOCUMENT)


@pytest.fixture
def llm() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def gateway(llm: ScriptedLLMClient) -> ModelGateway:
    return ModelGateway(llm)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sheet_logger() -> RecordingSheetLogger:
    return RecordingSheetLogger()


@pytest.fixture
def manager(gateway: ModelGateway, clock: FakeClock, sheet_logger: RecordingSheetLogger) -> SessionManager:
    return SessionManager(
        gateway,
        sheet_logger=sheet_logger,
        timer_factory=lambda: InterviewTimer(clock=clock),
    )


@pytest.fixture
def controller(manager: SessionManager):
    controller = manager.create_session(
        user_id="alex",
        email="alex@example.com",
        idea="A marketplace for used climbing gear",
        experience_level="beginner",
    )
    controller.start()
    return controller
