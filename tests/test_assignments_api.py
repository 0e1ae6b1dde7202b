from __future__ import annotations

from datetime import datetime

from sqlmodel import select

from conftest import auth_headers, make_assignment, make_user
from studyhub.models.conversation import Conversation, Message


def test_create_applies_defaults_and_returns_201(client, session, settings) -> None:
    user = make_user(session)

    response = client.post(
        "/api/assignments",
        json={"title": "Lab Report", "dueDate": "2025-02-01T09:00:00", "subject": "Chemistry"},
        headers=auth_headers(user, settings),
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Assignment created successfully"
    data = payload["data"]
    assert data["title"] == "Lab Report"
    assert data["status"] == "not-started"
    assert data["priority"] == "medium"
    assert data["userId"] == user.id
    assert data["dueDate"].startswith("2025-02-01T09:00:00")


def test_create_without_title_is_400(client, session, settings) -> None:
    user = make_user(session)

    response = client.post(
        "/api/assignments",
        json={"dueDate": "2025-02-01T09:00:00"},
        headers=auth_headers(user, settings),
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_is_scoped_and_sorted_by_due_date(client, session, settings) -> None:
    user = make_user(session)
    other = make_user(session, clerk_id="clerk_2", email="grace@example.com")
    make_assignment(session, user, title="Later", due_date=datetime(2025, 3, 1))
    make_assignment(session, user, title="Sooner", due_date=datetime(2025, 1, 1))
    make_assignment(session, other, title="Not mine")

    response = client.get("/api/assignments", headers=auth_headers(user, settings))

    assert response.status_code == 200
    assert [a["title"] for a in response.json()["data"]] == ["Sooner", "Later"]


def test_other_users_assignment_is_404(client, session, settings) -> None:
    owner = make_user(session)
    other = make_user(session, clerk_id="clerk_2", email="grace@example.com")
    assignment = make_assignment(session, owner)
    headers = auth_headers(other, settings)

    assert client.get(f"/api/assignments/{assignment.id}", headers=headers).status_code == 404
    assert client.put(
        f"/api/assignments/{assignment.id}", json={"title": "Mine now"}, headers=headers
    ).status_code == 404
    assert client.delete(f"/api/assignments/{assignment.id}", headers=headers).status_code == 404


def test_partial_update_keeps_other_fields(client, session, settings) -> None:
    user = make_user(session)
    assignment = make_assignment(session, user)

    response = client.put(
        f"/api/assignments/{assignment.id}",
        json={"status": "in-progress"},
        headers=auth_headers(user, settings),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "in-progress"
    assert data["title"] == "Essay Draft"
    assert data["subject"] == "English"


def test_invalid_status_is_400(client, session, settings) -> None:
    user = make_user(session)
    assignment = make_assignment(session, user)

    response = client.put(
        f"/api/assignments/{assignment.id}",
        json={"status": "abandoned"},
        headers=auth_headers(user, settings),
    )

    assert response.status_code == 400


def test_delete_removes_assistant_conversation(client, session, settings) -> None:
    user = make_user(session)
    assignment = make_assignment(session, user)
    headers = auth_headers(user, settings)
    client.post(
        "/api/ai/generate",
        json={"assignmentId": assignment.id, "query": "Where do I begin?"},
        headers=headers,
    )
    assert session.exec(select(Conversation)).all()

    response = client.delete(f"/api/assignments/{assignment.id}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Assignment deleted successfully",
        "data": None,
    }
    assert session.exec(select(Conversation)).all() == []
    assert session.exec(select(Message)).all() == []
    assert client.get(f"/api/assignments/{assignment.id}", headers=headers).status_code == 404
