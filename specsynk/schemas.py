"""Pydantic schemas for the spec document and the SpecSynk API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .phases import ExperienceLevel, Phase

View = Literal["landing", "chat", "generating", "spec"]


class SpecDocument(BaseModel):
    """Structured product spec extracted from an interview."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    summary: str
    problem_statement: str = Field(..., alias="problemStatement")
    target_users: List[str] = Field(..., alias="targetUsers")
    value_proposition: str = Field(..., alias="valueProposition")
    key_features: List[str] = Field(..., alias="keyFeatures")
    user_stories: List[str] = Field(..., alias="userStories")
    constraints_and_notes: List[str] = Field(default_factory=list, alias="constraintsAndNotes")


class StartSessionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="Display identifier of the interviewee")
    email: str = Field(..., min_length=1, description="Contact address")
    idea: str = Field(..., min_length=1, description="Initial product idea")
    experience_level: ExperienceLevel = ExperienceLevel.intermediate


class MessageRequest(BaseModel):
    text: str = Field(..., min_length=1, description="What the user typed")


class MessagePayload(BaseModel):
    id: str
    role: Literal["assistant", "user"]
    text: str
    created_at: datetime
    phase: Phase


class PhaseDescriptor(BaseModel):
    id: Phase
    label: str
    duration_hint: str


class PhaseListResponse(BaseModel):
    phases: List[PhaseDescriptor]


class SessionResponse(BaseModel):
    session_id: str
    user_id: str
    email: str
    idea: str
    experience_level: ExperienceLevel
    phase: Phase
    phase_label: str
    view: View
    messages: List[MessagePayload]
    seconds_left: int
    countdown: str
    busy: bool
    show_finish: bool
    document: Optional[SpecDocument] = None


class DocumentUpdateRequest(BaseModel):
    field: str = Field(..., description="Document field, camelCase or snake_case")
    value: Union[str, List[str]]


class ErrorResponse(BaseModel):
    detail: str
