"""App wiring and configuration tests."""

import pytest
from fastapi.testclient import TestClient

from browser_relay import main
from browser_relay.agent.runner import AgentUnavailableError
from browser_relay.config import Settings
from browser_relay.relay.dispatcher import CommandDispatcher


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda level: None)


def _use_settings(monkeypatch, **values) -> Settings:
    settings = Settings(_env_file=None, **values)
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    return settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = Settings(_env_file=None)
    assert settings.openai_api_key == ""
    assert settings.port == 8788
    assert settings.agent_model == "gpt-4o-mini"
    assert settings.summary_max_tokens == 1000


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("PORT", "9000")
    settings = Settings(_env_file=None)
    assert settings.openai_api_key == "env-key"
    assert settings.port == 9000


def test_startup_aborts_without_agent_credential(monkeypatch):
    _use_settings(monkeypatch, openai_api_key="")

    with pytest.raises(AgentUnavailableError):
        with TestClient(main.app):
            pass


def test_startup_wires_components(monkeypatch):
    _use_settings(monkeypatch, openai_api_key="test-key")

    with TestClient(main.app) as client:
        assert client.get("/health").json() == {"status": "ok"}
        assert isinstance(main.app.state.dispatcher, CommandDispatcher)
        with client.websocket_connect("/") as ws:
            assert ws.receive_json()["type"] == "connected"
