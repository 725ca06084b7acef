"""Conversation memory store for an interview session."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List, Literal, Sequence

from ..phases import Phase

Role = Literal["assistant", "user"]


@dataclass(frozen=True)
class Message:
    """Single conversational message."""

    id: str
    role: Role
    text: str
    created_at: datetime
    phase: Phase

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "text": self.text,
            "created_at": self.created_at,
            "phase": self.phase.value,
        }


@dataclass
class ConversationMemory:
    """Append-only log of the interview, in conversation order."""

    _messages: List[Message] = field(default_factory=list)

    def append(self, role: Role, text: str, *, phase: Phase) -> Message:
        if role not in ("assistant", "user"):
            raise ValueError(f"Unsupported message role '{role}'")
        created_at = datetime.now(timezone.utc)
        last = self.last()
        if last is not None and created_at < last.created_at:
            # wall clock stepped back; keep creation order monotonic
            created_at = last.created_at
        message = Message(
            id=uuid.uuid4().hex,
            role=role,
            text=text,
            created_at=created_at,
            phase=phase,
        )
        self._messages.append(message)
        return message

    def last(self) -> Message | None:
        if not self._messages:
            return None
        return self._messages[-1]

    @property
    def messages(self) -> Sequence[Message]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
