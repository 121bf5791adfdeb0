"""
Tests for the FastAPI bridge.

The app is built around a runner over a scripted graph. The REST tests
patch the CopilotKit mount out; the AG-UI tests post a real run to it.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from adaptive_rag_copilot.agent.runner import AgentRunner
from adaptive_rag_copilot.server import create_app

MOUNT = "adaptive_rag_copilot.server.app.mount_copilotkit"
QUESTION = "How do LangGraph interrupts work?"


@pytest.fixture
def client(make_graph, settings):
    runner = AgentRunner(make_graph())
    with patch(MOUNT):
        app = create_app(settings, runner=runner)
    with TestClient(app) as client:
        yield client


def start(client, **body) -> dict:
    response = client.post("/threads/runs", json={"question": QUESTION, **body})
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "agent_ready": True}

    def test_not_ready_without_runner(self, settings):
        app = create_app(settings)
        client = TestClient(app)

        assert client.get("/health").json()["agent_ready"] is False
        assert client.post("/threads/runs", json={"question": QUESTION}).status_code == 503


class TestCopilotKitMount:
    def test_mounted_on_runner_graph(self, make_graph, settings):
        runner = AgentRunner(make_graph())

        with patch(MOUNT) as mock_mount:
            app = create_app(settings, runner=runner)

        mock_mount.assert_called_once_with(app, runner.graph, settings)


class TestCopilotKitEndpoint:
    """The AG-UI endpoint and the REST routes share one graph and checkpointer."""

    @pytest.fixture
    def agui_client(self, make_graph, settings):
        app = create_app(settings, runner=AgentRunner(make_graph()))
        with TestClient(app) as client:
            yield client

    def run_agent(self, client, thread_id):
        return client.post(
            "/copilotkit",
            json={
                "threadId": thread_id,
                "runId": f"{thread_id}-run",
                "state": {},
                "messages": [{"id": "m1", "role": "user", "content": QUESTION}],
                "tools": [],
                "context": [],
                "forwardedProps": {},
            },
        )

    def test_run_streams_review_interrupt(self, agui_client):
        response = self.run_agent(agui_client, "agui-thread")

        assert response.status_code == 200
        assert "review_answer" in response.text

        thread = agui_client.get("/threads/agui-thread").json()
        assert thread["interrupt"]["type"] == "review_answer"

    def test_interrupt_raised_over_agui_resolves_over_rest(self, agui_client):
        self.run_agent(agui_client, "agui-thread")
        pending = agui_client.get("/threads/agui-thread").json()["interrupt"]

        response = agui_client.post(
            "/threads/agui-thread/resume",
            json={"value": "approve", "interrupt_id": pending["id"]},
        )

        assert response.status_code == 200
        assert response.json()["final_status"] == "completed"


class TestRuns:
    def test_start_returns_interrupt(self, client):
        data = start(client)

        assert data["status"] == "interrupted"
        assert data["interrupt"]["type"] == "review_answer"
        assert data["interrupt"]["value"]["question"] == QUESTION
        assert data["answer"] is None

    def test_resume_completes(self, client):
        data = start(client)

        response = client.post(
            f"/threads/{data['thread_id']}/resume",
            json={"value": "approve", "interrupt_id": data["interrupt"]["id"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["final_status"] == "completed"
        assert body["answer"]
        assert body["sources"][0]["title"]

    def test_resume_with_edit_object(self, client):
        data = start(client)

        response = client.post(
            f"/threads/{data['thread_id']}/resume",
            json={"value": {"action": "edit", "answer": "Edited."}},
        )

        assert response.json()["answer"] == "Edited."

    def test_get_thread(self, client):
        data = start(client, thread_id="t-42")

        response = client.get("/threads/t-42")

        assert response.status_code == 200
        body = response.json()
        assert body["thread_id"] == "t-42"
        assert body["next"] == ["human_review"]
        assert body["interrupt"]["id"] == data["interrupt"]["id"]
        assert body["values"]["messages"][0] == {"type": "human", "content": QUESTION}


class TestErrors:
    def test_unknown_thread(self, client):
        response = client.get("/threads/nope")

        assert response.status_code == 404
        assert response.json()["error_type"] == "thread_not_found"

    def test_second_resume_conflicts(self, client):
        data = start(client)
        url = f"/threads/{data['thread_id']}/resume"
        client.post(url, json={"value": "approve"})

        response = client.post(url, json={"value": "approve"})

        assert response.status_code == 409
        assert response.json()["error_type"] == "no_pending_interrupt"

    def test_stale_interrupt(self, client):
        data = start(client)

        response = client.post(
            f"/threads/{data['thread_id']}/resume",
            json={"value": "approve", "interrupt_id": "stale"},
        )

        assert response.status_code == 409
        assert response.json()["error_type"] == "stale_interrupt"

    def test_invalid_resume_value(self, client):
        data = start(client)

        response = client.post(f"/threads/{data['thread_id']}/resume", json={"value": ""})

        assert response.status_code == 422
        assert response.json() == {
            "error_type": "invalid_resume_value",
            "detail": "Review decision is empty",
            "thread_id": data["thread_id"],
        }

    def test_busy_thread(self, client):
        data = start(client)

        response = client.post(
            "/threads/runs", json={"question": "Another?", "thread_id": data["thread_id"]}
        )

        assert response.status_code == 409
        assert response.json()["error_type"] == "thread_busy"

    def test_blank_question(self, client):
        response = client.post("/threads/runs", json={"question": "   "})

        assert response.status_code == 422
        assert response.json()["error_type"] == "invalid_question"

    def test_unhandled_error_has_error_id(self, settings):
        runner = MagicMock()
        runner.start = AsyncMock(side_effect=RuntimeError("model down"))
        with patch(MOUNT):
            app = create_app(settings, runner=runner)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/threads/runs", json={"question": QUESTION})

        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
        assert body["error_id"]
