"""Session state for a single guided interview."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from ..phases import ExperienceLevel, Phase
from ..schemas import SpecDocument, View
from .memory import ConversationMemory, Message, Role


@dataclass
class Session:
    """Per-user interview session."""

    session_id: str
    user_id: str
    email: str
    initial_idea: str
    experience_level: ExperienceLevel
    phase: Phase = Phase.idea
    memory: ConversationMemory = field(default_factory=ConversationMemory)
    generated_document: Optional[SpecDocument] = None
    view: View = "landing"

    @property
    def messages(self) -> Sequence[Message]:
        return self.memory.messages

    def add_message(self, role: Role, text: str) -> Message:
        return self.memory.append(role, text, phase=self.phase)

    def set_phase(self, phase: Phase | str) -> None:
        # no ordering check; the turn heuristic is the only forward-only path
        self.phase = Phase(phase)

    def profile(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "email": self.email,
            "initialIdea": self.initial_idea,
            "experienceLevel": self.experience_level.value,
        }
