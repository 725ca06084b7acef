"""Guided interview: prompts, model gateway, countdown and session control."""

from .controller import InterviewController, SessionBusyError, SessionClosedError, SessionManager
from .gateway import DocumentGenerationError, ModelGateway
from .schema import SPEC_RESPONSE_SCHEMA
from .timer import INTERVIEW_SECONDS, InterviewTimer, format_countdown, show_finish

__all__ = [
    "DocumentGenerationError",
    "INTERVIEW_SECONDS",
    "InterviewController",
    "InterviewTimer",
    "ModelGateway",
    "SPEC_RESPONSE_SCHEMA",
    "SessionBusyError",
    "SessionClosedError",
    "SessionManager",
    "format_countdown",
    "show_finish",
]
