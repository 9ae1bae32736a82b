from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from chat_backend import main
from chat_backend.config import Config
from chat_backend.errors import TransportError
from chat_backend.session import ChatSession

from tests.conftest import FakeProvider


def _wait_for_idle(client: TestClient) -> dict:
    for _ in range(200):
        state = client.get("/chat/state").json()
        if state["status"] == "idle":
            return state
        time.sleep(0.01)
    raise AssertionError("session never returned to idle")


@pytest.fixture
def fake_provider(monkeypatch: pytest.MonkeyPatch) -> FakeProvider:
    provider = FakeProvider(lambda request: "Hi there")
    monkeypatch.setattr(main, "build_session", lambda: ChatSession(provider, system_instruction="persona"))
    monkeypatch.setattr(main, "session", None)
    return provider


def test_index_serves_the_chat_page() -> None:
    with TestClient(main.app) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert "Workshop Chat" in response.text


def test_submit_returns_sending_then_settles_with_reply(fake_provider: FakeProvider) -> None:
    with TestClient(main.app) as client:
        fresh = client.post("/chat/session").json()
        assert fresh["transcript"] == []
        assert fresh["system_instruction"] == "persona"

        accepted = client.post("/chat/submit", json={"message": "hello"}).json()
        assert accepted["status"] == "sending"
        assert accepted["transcript"] == [{"role": "user", "content": "hello"}]

        state = _wait_for_idle(client)

    assert state["transcript"] == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "Hi there"},
    ]
    assert state["last_error"] is None
    assert len(fake_provider.requests) == 1


def test_submit_uses_pending_input_when_no_message(fake_provider: FakeProvider) -> None:
    with TestClient(main.app) as client:
        client.post("/chat/session")
        assert client.post("/chat/input", json={"text": "typed"}).json()["pending_input"] == "typed"

        client.post("/chat/submit", json={})
        state = _wait_for_idle(client)

    assert state["transcript"][0] == {"role": "user", "content": "typed"}
    assert state["pending_input"] == ""


def test_blank_submit_is_ignored(fake_provider: FakeProvider) -> None:
    with TestClient(main.app) as client:
        client.post("/chat/session")
        state = client.post("/chat/submit", json={"message": "   "}).json()

    assert state["status"] == "idle"
    assert state["transcript"] == []
    assert state["last_error"] is None


def test_provider_failure_is_reported_inline(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(request):
        raise TransportError("Error: Network connection failed.")

    provider = FakeProvider(fail)
    monkeypatch.setattr(main, "build_session", lambda: ChatSession(provider, system_instruction="persona"))

    with TestClient(main.app) as client:
        client.post("/chat/session")
        client.post("/chat/submit", json={"message": "hello"})
        state = _wait_for_idle(client)

    assert state["transcript"] == [{"role": "user", "content": "hello"}]
    assert state["last_error"] == "Error: Network connection failed."


def test_system_instruction_update(fake_provider: FakeProvider) -> None:
    with TestClient(main.app) as client:
        client.post("/chat/session")
        state = client.post("/chat/system-instruction", json={"text": "You are a pirate."}).json()
        client.post("/chat/submit", json={"message": "hello"})
        _wait_for_idle(client)

    assert state["system_instruction"] == "You are a pirate."
    assert state["transcript"] == []
    assert fake_provider.requests[0].system_instruction.text == "You are a pirate."


def test_missing_credential_via_real_session_builder(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "CHAT_PROVIDER", "gemini")
    monkeypatch.setattr(Config, "GEMINI_API_KEY", None)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with TestClient(main.app) as client:
        client.post("/chat/session")
        state = client.post("/chat/submit", json={"message": "hello"}).json()
        status = client.get("/config/status").json()

    assert state["transcript"] == []
    assert state["last_error"] == "credential missing"
    assert state["status"] == "idle"
    assert status["provider"] == "gemini"
    assert status["configured"] is False
    assert status["missing"] == ["GEMINI_API_KEY (required when CHAT_PROVIDER=gemini)"]


def test_rejected_submit_keeps_the_synced_draft(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "CHAT_PROVIDER", "gemini")
    monkeypatch.setattr(Config, "GEMINI_API_KEY", None)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with TestClient(main.app) as client:
        client.post("/chat/session")
        client.post("/chat/input", json={"text": "hello"})
        state = client.post("/chat/submit", json={}).json()

    assert state["last_error"] == "credential missing"
    assert state["pending_input"] == "hello"
    assert state["transcript"] == []


def test_config_status_flags_unknown_provider_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "CHAT_PROVIDER", "groq")
    monkeypatch.setattr(Config, "GEMINI_API_KEY", None)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with TestClient(main.app) as client:
        client.post("/chat/session")
        status = client.get("/config/status").json()

    assert status["provider"] == "gemini"
    assert status["configured"] is False
    assert "GEMINI_API_KEY (required when CHAT_PROVIDER=gemini)" in status["missing"]
