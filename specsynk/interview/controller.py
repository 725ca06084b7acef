"""Interview lifecycle: the session state machine and its owner registry."""
from __future__ import annotations

import logging
import secrets
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from ..llm import ChatSession, LLMError
from ..memory import Message, Session
from ..phases import ExperienceLevel, Phase, next_phase, phase_label, turn_count
from ..report import DocumentEditor
from ..schemas import SpecDocument
from ..sheets import SheetLogger
from .gateway import ModelGateway
from .prompts import (
    CONNECT_FAILED,
    DOCUMENT_FAILED,
    SKIP_MESSAGE,
    TURN_FAILED,
    augment_message,
    kickoff_message,
)
from .timer import InterviewTimer, show_finish

logger = logging.getLogger(__name__)

MAX_SESSIONS = 1000


class SessionBusyError(RuntimeError):
    """Another action on the same session has not finished yet."""


class SessionClosedError(RuntimeError):
    """The spec document has been drafted; the conversation is over."""


class InterviewController:
    """Owns one session, its conversation handle and its countdown.

    Actions run one at a time: a second start, send or finish while one is
    still waiting on the model raises :class:`SessionBusyError` before the
    session is touched.
    Once the spec view is reached, send, skip and finish raise
    :class:`SessionClosedError`.
    """

    def __init__(
        self,
        session: Session,
        gateway: ModelGateway,
        *,
        sheet_logger: Optional[SheetLogger] = None,
        timer: Optional[InterviewTimer] = None,
    ) -> None:
        self.session = session
        self.gateway = gateway
        self.sheet_logger = sheet_logger or SheetLogger()
        self.timer = timer or InterviewTimer()
        self.editor: Optional[DocumentEditor] = None
        self._handle: Optional[ChatSession] = None
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def show_finish(self) -> bool:
        return show_finish(self.session.phase, self.timer.seconds_left)

    @contextmanager
    def _exclusive(self, *, open_only: bool = False) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError(f"Session {self.session.session_id} is waiting on the model")
        try:
            if open_only and self.session.view == "spec":
                raise SessionClosedError(f"Session {self.session.session_id} is already complete")
            yield
        finally:
            self._lock.release()

    def start(self) -> Message:
        with self._exclusive():
            session = self.session
            if session.view != "landing":
                raise RuntimeError(f"Session {session.session_id} has already started")
            self.sheet_logger.record(session.profile())
            session.view = "chat"
            self.timer.start()
            try:
                self._handle = self.gateway.open_interview(
                    session.user_id, session.initial_idea, session.experience_level
                )
                reply = self.gateway.converse(self._handle, kickoff_message(session.initial_idea))
            except Exception:
                logger.exception("Error starting chat for session %s", session.session_id)
                return session.add_message("assistant", CONNECT_FAILED)
            return session.add_message("assistant", reply)

    def send(self, text: str) -> Message:
        """Store *text* as typed, send its augmented form and store the reply."""
        with self._exclusive(open_only=True):
            return self._exchange(text)

    def skip(self) -> Message:
        return self.send(SKIP_MESSAGE)

    def finish(self) -> Optional[SpecDocument]:
        """Draft the spec document; on failure fall back to the chat view."""
        with self._exclusive(open_only=True):
            session = self.session
            session.view = "generating"
            try:
                document = self.gateway.generate_document(session.messages, session.initial_idea)
            except Exception:
                logger.exception("Failed to generate spec for session %s", session.session_id)
                session.view = "chat"
                session.add_message("assistant", DOCUMENT_FAILED)
                return None
            session.generated_document = document
            session.set_phase(Phase.complete)
            self.editor = DocumentEditor(document)
            self.sheet_logger.record(
                {
                    "userId": session.user_id,
                    "email": session.email,
                    "generatedSpec": document.model_dump(by_alias=True),
                }
            )
            session.view = "spec"
            return document

    def _exchange(self, text: str) -> Message:
        session = self.session
        session.add_message("user", text)
        wire_text = augment_message(text, session.phase)
        try:
            if self._handle is None:
                raise LLMError("Chat client not initialized")
            reply = self.gateway.converse(self._handle, wire_text)
        except Exception:
            logger.exception("Error sending message for session %s", session.session_id)
            return session.add_message("assistant", TURN_FAILED)
        message = session.add_message("assistant", reply)
        self._advance_phase()
        return message

    def _advance_phase(self) -> None:
        session = self.session
        target = next_phase(session.phase, turn_count(len(session.memory)))
        if target != session.phase:
            logger.info(
                "Session %s moved to phase %s", session.session_id, phase_label(target)
            )
            session.set_phase(target)


class SessionManager:
    """Simple in-memory registry of interview controllers.

    Sessions live until deleted. When more than ``max_sessions`` exist, the
    oldest ones are dropped first.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        *,
        sheet_logger: Optional[SheetLogger] = None,
        timer_factory: Callable[[], InterviewTimer] = InterviewTimer,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self.gateway = gateway
        self.max_sessions = max_sessions
        self.sheet_logger = sheet_logger or SheetLogger()
        self.timer_factory = timer_factory
        self._controllers: Dict[str, InterviewController] = {}

    def create_session(
        self,
        *,
        user_id: str,
        email: str,
        idea: str,
        experience_level: ExperienceLevel | str = ExperienceLevel.intermediate,
    ) -> InterviewController:
        session = Session(
            session_id=secrets.token_hex(16),
            user_id=user_id,
            email=email,
            initial_idea=idea,
            experience_level=ExperienceLevel(experience_level),
        )
        controller = InterviewController(
            session,
            self.gateway,
            sheet_logger=self.sheet_logger,
            timer=self.timer_factory(),
        )
        self._controllers[session.session_id] = controller
        while len(self._controllers) > self.max_sessions:
            evicted = next(iter(self._controllers))
            logger.info("Dropping oldest session %s", evicted)
            del self._controllers[evicted]
        return controller

    def get_session(self, session_id: str) -> InterviewController:
        if session_id not in self._controllers:
            raise KeyError(f"Session {session_id} not found")
        return self._controllers[session_id]

    def delete_session(self, session_id: str) -> None:
        self._controllers.pop(session_id, None)
