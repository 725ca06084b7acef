"""FastAPI application exposing the guided product interview."""
from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Path, Response
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .interview import (
    InterviewController,
    ModelGateway,
    SessionBusyError,
    SessionClosedError,
    SessionManager,
    format_countdown,
)
from .llm import get_default_client
from .phases import PHASES, phase_label
from .report import DocumentEditor
from .schemas import (
    DocumentUpdateRequest,
    ErrorResponse,
    MessagePayload,
    MessageRequest,
    PhaseDescriptor,
    PhaseListResponse,
    SessionResponse,
    SpecDocument,
    StartSessionRequest,
)
from .sheets import SheetLogger

app = FastAPI(
    title="SpecSynk – Guided Product Interview",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_settings = get_settings()
_session_manager = SessionManager(
    ModelGateway(get_default_client(_settings)),
    sheet_logger=SheetLogger(_settings.sheet_url),
)


def get_manager() -> SessionManager:
    return _session_manager


def get_controller(
    session_id: str = Path(..., description="Session identifier"),
    manager: SessionManager = Depends(get_manager),
) -> InterviewController:
    try:
        return manager.get_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def get_editor(controller: InterviewController = Depends(get_controller)) -> DocumentEditor:
    if controller.editor is None:
        raise HTTPException(status_code=404, detail="No spec document generated yet")
    return controller.editor


def _session_response(controller: InterviewController) -> SessionResponse:
    session = controller.session
    seconds_left = controller.timer.seconds_left
    return SessionResponse(
        session_id=session.session_id,
        user_id=session.user_id,
        email=session.email,
        idea=session.initial_idea,
        experience_level=session.experience_level,
        phase=session.phase,
        phase_label=phase_label(session.phase),
        view=session.view,
        messages=[MessagePayload(**message.as_dict()) for message in session.messages],
        seconds_left=seconds_left,
        countdown=format_countdown(seconds_left),
        busy=controller.busy,
        show_finish=controller.show_finish,
        document=session.generated_document,
    )


def _conflict(exc: RuntimeError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(exc))


@app.get("/phases", response_model=PhaseListResponse)
def list_phases() -> PhaseListResponse:
    """Enumerate the interview phases in order."""
    return PhaseListResponse(
        phases=[
            PhaseDescriptor(id=info.id, label=info.label, duration_hint=info.duration_hint)
            for info in PHASES
        ]
    )


@app.post("/sessions", response_model=SessionResponse, status_code=201)
def start_session(
    request: StartSessionRequest,
    manager: SessionManager = Depends(get_manager),
) -> SessionResponse:
    controller = manager.create_session(
        user_id=request.user_id,
        email=request.email,
        idea=request.idea,
        experience_level=request.experience_level,
    )
    controller.start()
    return _session_response(controller)


@app.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_session_state(controller: InterviewController = Depends(get_controller)) -> SessionResponse:
    return _session_response(controller)


@app.delete("/sessions/{session_id}", status_code=204)
def restart_session(
    session_id: str,
    manager: SessionManager = Depends(get_manager),
) -> None:
    manager.delete_session(session_id)


@app.post(
    "/sessions/{session_id}/messages",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def send_message(
    request: MessageRequest,
    controller: InterviewController = Depends(get_controller),
) -> SessionResponse:
    try:
        controller.send(request.text)
    except (SessionBusyError, SessionClosedError) as exc:
        raise _conflict(exc) from exc
    return _session_response(controller)


@app.post(
    "/sessions/{session_id}/skip",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def skip_question(controller: InterviewController = Depends(get_controller)) -> SessionResponse:
    try:
        controller.skip()
    except (SessionBusyError, SessionClosedError) as exc:
        raise _conflict(exc) from exc
    return _session_response(controller)


@app.post(
    "/sessions/{session_id}/finish",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def finish_interview(controller: InterviewController = Depends(get_controller)) -> SessionResponse:
    try:
        controller.finish()
    except (SessionBusyError, SessionClosedError) as exc:
        raise _conflict(exc) from exc
    return _session_response(controller)


@app.get(
    "/sessions/{session_id}/document",
    response_model=SpecDocument,
    responses={404: {"model": ErrorResponse}},
)
def get_document(editor: DocumentEditor = Depends(get_editor)) -> SpecDocument:
    return editor.document


@app.patch(
    "/sessions/{session_id}/document",
    response_model=SpecDocument,
    responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
)
def edit_document(
    request: DocumentUpdateRequest,
    editor: DocumentEditor = Depends(get_editor),
) -> SpecDocument:
    try:
        return editor.update(request.field, request.value)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0]) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get(
    "/sessions/{session_id}/document/export",
    responses={404: {"model": ErrorResponse}},
)
def export_document(editor: DocumentEditor = Depends(get_editor)) -> Response:
    return Response(
        content=editor.to_markdown().encode("utf-8"),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{editor.filename}"'},
    )
