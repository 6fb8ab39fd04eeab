"""
API tests using FastAPI's TestClient with the Gemini client overridden
"""
import json

import pytest
from fastapi.testclient import TestClient

from controller import FALLBACK_CHALLENGE
from llm_client import GeminiServiceError, get_client
from main import app

from conftest import FakeGeminiClient


@pytest.fixture
def api():
    """Returns a function that builds a TestClient bound to a fake Gemini reply."""
    def make(reply="", error=None):
        fake = FakeGeminiClient(reply=reply, error=error)
        app.dependency_overrides[get_client] = lambda: fake
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


def test_root():
    response = TestClient(app).get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_health():
    response = TestClient(app).get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_credential_is_503(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    response = TestClient(app).get("/api/v1/challenge", params={"language": "Python"})

    assert response.status_code == 503
    assert "GEMINI_API_KEY" in response.json()["detail"]


def test_job_links_need_no_credential(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    response = TestClient(app).get("/api/v1/jobs/links", params={"language": "C++"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"General", "Remote"}
    assert body["Remote"][0] == {"name": "RemoteOK", "url": "https://remoteok.com/remote-C%2B%2B-jobs"}


def test_chat(api):
    client = api(reply="Try a list comprehension.")

    response = client.post("/api/v1/chat", json={
        "prompt": "How do I square numbers?",
        "history": [{"role": "user", "parts": [{"text": "hi"}]}],
        "systemInstruction": "You are a Python tutor",
        "thinkingMode": False,
    })

    assert response.status_code == 200
    assert response.json() == {"text": "Try a list comprehension."}


def test_chat_stream(api):
    client = api(reply="chunked  reply\nhere")

    response = client.post("/api/v1/chat/stream", json={"prompt": "hi"})

    assert response.status_code == 200
    assert response.text == "chunked  reply\nhere"


def test_challenge_uses_camel_case(api):
    reply = {"title": "t", "description": "d", "exampleInput": "i", "exampleOutput": "o"}
    client = api(reply=json.dumps(reply))

    response = client.get("/api/v1/challenge", params={"language": "Python"})

    assert response.status_code == 200
    assert response.json() == reply


def test_challenge_fallback_on_failure(api):
    client = api(error=GeminiServiceError("down"))

    response = client.get("/api/v1/challenge", params={"language": "Python"})

    assert response.status_code == 200
    assert response.json() == FALLBACK_CHALLENGE.model_dump(by_alias=True)


def test_evaluate(api):
    client = api(reply='{"isCorrect": false, "simulatedOutput": "NameError", "feedback": "So close!"}')

    response = client.post("/api/v1/challenge/evaluate", json={
        "challenge": {"title": "t", "description": "d", "exampleInput": "i", "exampleOutput": "o"},
        "userCode": "print(x)",
        "language": "Python",
    })

    assert response.status_code == 200
    assert response.json()["isCorrect"] is False


def test_projects_failure_is_empty_list(api):
    client = api(error=GeminiServiceError("down"))

    response = client.post("/api/v1/projects", json={"language": "Rust"})

    assert response.status_code == 200
    assert response.json() == []


def test_run_code(api):
    client = api(reply="42")

    response = client.post("/api/v1/code/run", json={"userCode": "print(6*7)", "language": "Python"})

    assert response.json() == {"output": "42"}


def test_completions_reject_negative_cursor(api):
    client = api(reply='{"suggestions": []}')

    response = client.post("/api/v1/code/completions", json={"userCode": "x", "language": "Python", "cursor": -1})

    assert response.status_code == 422
