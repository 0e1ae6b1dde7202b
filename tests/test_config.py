from __future__ import annotations

import pytest
from pydantic import ValidationError

from studyhub.config import Settings


def test_required_settings_must_be_present(monkeypatch) -> None:
    for name in ("DATABASE_URL", "JWT_SECRET", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValidationError) as excinfo:
        Settings(_env_file=None)

    missing = {err["loc"][0] for err in excinfo.value.errors()}
    assert missing == {"DATABASE_URL", "JWT_SECRET", "OPENAI_API_KEY"}


def test_empty_secret_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///studyhub.db")
    monkeypatch.setenv("JWT_SECRET", "")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///studyhub.db")
    monkeypatch.setenv("JWT_SECRET", "secret")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("AI_MAX_TOKENS", "512")
    monkeypatch.setenv("ENFORCE_ASSIGNMENT_OWNERSHIP", "true")

    settings = Settings(_env_file=None)

    assert settings.AI_MAX_TOKENS == 512
    assert settings.ENFORCE_ASSIGNMENT_OWNERSHIP is True
    assert settings.AI_TEMPERATURE == 0.7
    assert settings.JWT_EXPIRES_SECONDS == 604800
