"""API tests via FastAPI TestClient."""

from __future__ import annotations

import pytest

pytest.importorskip("httpx", reason="TestClient requires httpx")

from fastapi.testclient import TestClient  # noqa: E402

from specsynk.app import app, get_manager  # noqa: E402

START_PAYLOAD = {
    "user_id": "alex",
    "email": "alex@example.com",
    "idea": "A marketplace for used climbing gear",
    "experience_level": "expert",
}


@pytest.fixture
def client(manager):
    app.dependency_overrides[get_manager] = lambda: manager
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def session_id(client) -> str:
    response = client.post("/sessions", json=START_PAYLOAD)
    assert response.status_code == 201
    return response.json()["session_id"]


def test_list_phases(client):
    phases = client.get("/phases").json()["phases"]
    assert [p["id"] for p in phases] == ["idea", "users", "features", "flows"]
    assert phases[0]["label"] == "Idea & Goals"


def test_start_session(client, llm):
    body = client.post("/sessions", json=START_PAYLOAD).json()
    assert body["view"] == "chat"
    assert body["phase"] == "idea"
    assert body["phase_label"] == "Idea & Goals"
    assert body["countdown"] == "3:00"
    assert body["show_finish"] is False
    assert body["busy"] is False
    assert [m["role"] for m in body["messages"]] == ["assistant"]
    assert "concise, technical, and direct" in llm.calls[0]["system_instruction"]


def test_start_requires_idea(client):
    payload = dict(START_PAYLOAD, idea="")
    assert client.post("/sessions", json=payload).status_code == 422


def test_send_and_skip(client, session_id):
    body = client.post(f"/sessions/{session_id}/messages", json={"text": "Students"}).json()
    assert [m["text"] for m in body["messages"]][1] == "Students"
    body = client.post(f"/sessions/{session_id}/skip").json()
    assert body["messages"][-2]["text"] == "I'm not sure, let's skip this part and use your best judgment."
    assert len(body["messages"]) == 5


def test_timer_reveals_finish(client, session_id, clock):
    clock.advance(181)
    body = client.get(f"/sessions/{session_id}").json()
    assert body["seconds_left"] == 0
    assert body["countdown"] == "0:00"
    assert body["show_finish"] is True


def test_finish_edit_and_export(client, session_id):
    body = client.post(f"/sessions/{session_id}/finish").json()
    assert body["view"] == "spec"
    assert body["phase"] == "complete"
    assert body["document"]["problemStatement"].startswith("Climbing gear")

    edited = client.patch(
        f"/sessions/{session_id}/document", json={"field": "title", "value": "Gear Loop"}
    ).json()
    assert edited["title"] == "Gear Loop"
    assert client.get(f"/sessions/{session_id}").json()["document"]["title"] == "My Cool App"
    assert client.get(f"/sessions/{session_id}/document").json()["title"] == "Gear Loop"

    exported = client.get(f"/sessions/{session_id}/document/export")
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("text/markdown")
    assert 'filename="gear_loop_spec.md"' in exported.headers["content-disposition"]
    assert exported.text.startswith("# Gear Loop\n\n## Summary")


def test_finish_failure_returns_to_chat(client, session_id, llm):
    llm.document = "{broken"
    body = client.post(f"/sessions/{session_id}/finish").json()
    assert body["view"] == "chat"
    assert body["document"] is None
    assert body["messages"][-1]["text"] == "I couldn't generate the spec just yet. Let's chat a bit more."


def test_invalid_edit(client, session_id):
    client.post(f"/sessions/{session_id}/finish")
    response = client.patch(
        f"/sessions/{session_id}/document", json={"field": "pricing", "value": "free"}
    )
    assert response.status_code == 400
    response = client.patch(
        f"/sessions/{session_id}/document", json={"field": "keyFeatures", "value": "one"}
    )
    assert response.status_code == 400


def test_document_missing_before_finish(client, session_id):
    assert client.get(f"/sessions/{session_id}/document/export").status_code == 404
    assert client.get(f"/sessions/{session_id}/document").status_code == 404


def test_busy_session_conflict(client, session_id, manager):
    controller = manager.get_session(session_id)
    controller._lock.acquire()
    try:
        response = client.post(f"/sessions/{session_id}/messages", json={"text": "overlap"})
    finally:
        controller._lock.release()
    assert response.status_code == 409


def test_unknown_session(client):
    assert client.get("/sessions/nope").status_code == 404
    assert client.post("/sessions/nope/messages", json={"text": "hi"}).status_code == 404


def test_restart_discards_session(client, session_id):
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_finished_session_rejects_further_actions(client, session_id, llm):
    client.post(f"/sessions/{session_id}/finish")
    client.patch(f"/sessions/{session_id}/document", json={"field": "title", "value": "Gear Loop"})
    calls = len(llm.calls)

    assert client.post(f"/sessions/{session_id}/finish").status_code == 409
    assert client.post(f"/sessions/{session_id}/messages", json={"text": "more"}).status_code == 409
    assert client.post(f"/sessions/{session_id}/skip").status_code == 409

    assert len(llm.calls) == calls
    body = client.get(f"/sessions/{session_id}").json()
    assert body["view"] == "spec"
    assert len(body["messages"]) == 1
    assert client.get(f"/sessions/{session_id}/document").json()["title"] == "Gear Loop"
