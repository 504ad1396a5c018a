"""Unit tests for server settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from itops_issue_tracker.server.config import ServerSettings

_ENV_VARS = ("ITOPS_HOST", "ITOPS_PORT", "LOG_LEVEL", "ITOPS_ACCESS_LOG", "ITOPS_CORS_ORIGINS")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = ServerSettings()

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.log_level == "INFO"
    assert settings.access_log is True
    assert settings.parsed_cors_origins() == ["*"]


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(["ITOPS_PORT=9090", "LOG_LEVEL=DEBUG", ""]),
        encoding="utf-8",
    )

    settings = ServerSettings()

    assert settings.port == 9090
    assert settings.log_level == "DEBUG"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITOPS_CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("ITOPS_HOST", "127.0.0.1")

    settings = ServerSettings()

    assert settings.host == "127.0.0.1"
    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]


def test_port_must_be_in_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITOPS_PORT", "70000")

    with pytest.raises(ValidationError):
        ServerSettings()


def test_access_log_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITOPS_ACCESS_LOG", "false")

    assert ServerSettings().access_log is False
