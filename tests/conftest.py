from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

pytest.importorskip("httpx")

from fastapi.testclient import TestClient
from sqlmodel import Session

from studyhub.config import Settings
from studyhub.core.errors import ProviderError
from studyhub.core.security import create_access_token
from studyhub.database import create_db_engine, init_db
from studyhub.main import create_app
from studyhub.models.assignment import Assignment
from studyhub.models.user import User
from studyhub.services.completion import CompletionProvider


class FakeProvider(CompletionProvider):
    """Records calls and answers with canned text."""

    def __init__(self, reply: str = "Start by outlining your main argument.") -> None:
        self.model = "fake"
        self.client = None
        self.reply = reply
        self.fail = False
        self.calls: List[Dict] = []

    def complete(self, messages, max_tokens, temperature):
        self.calls.append(
            {"messages": messages, "max_tokens": max_tokens, "temperature": temperature}
        )
        if self.fail:
            raise ProviderError("quota exceeded")
        return self.reply


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'studyhub.db'}",
        JWT_SECRET="test-secret",
        OPENAI_API_KEY="sk-test",
        UPLOADS_DIR=tmp_path / "uploads",
        _env_file=None,
    )


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def app(settings: Settings, provider: FakeProvider):
    return create_app(settings, provider)


@pytest.fixture()
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def session(app, client) -> Iterator[Session]:
    # ``client`` runs the lifespan, which creates the tables
    with Session(app.state.engine) as db_session:
        yield db_session


@pytest.fixture()
def engine(settings: Settings):
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    yield engine
    engine.dispose()


def make_user(session: Session, clerk_id: str = "clerk_1", email: str = "ada@example.com") -> User:
    user = User(clerk_id=clerk_id, email=email, first_name="Ada")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_assignment(session: Session, user: User, **overrides) -> Assignment:
    fields = {
        "title": "Essay Draft",
        "description": "Write a five paragraph essay",
        "due_date": datetime(2025, 1, 10),
        "subject": "English",
        "priority": "high",
    }
    fields.update(overrides)
    assignment = Assignment(user_id=user.id, **fields)
    session.add(assignment)
    session.commit()
    session.refresh(assignment)
    return assignment


def auth_headers(user: User, settings: Settings) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user, settings)}"}
