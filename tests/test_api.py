from __future__ import annotations

import json

from fastapi.testclient import TestClient

from tests.conftest import new_address


def _as(address: str) -> dict[str, str]:
    return {"X-Caller-Address": address}


def test_root_reports_ledger(client: TestClient, admin: str) -> None:
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Learnopoly API"
    assert data["administrator"] == admin
    assert data["course_count"] == 0


# ── Profiles ──────────────────────────────────────────────────────────
def test_profile_lifecycle(client: TestClient, user1: str) -> None:
    response = client.post(
        "/profiles",
        json={"username": "initial", "bio": "Initial bio", "skills": ["Skill1"]},
        headers=_as(user1),
    )
    assert response.status_code == 201
    assert response.json()["reputation"] == 0
    assert response.json()["exists"] is True

    duplicate = client.post(
        "/profiles",
        json={"username": "again", "bio": "", "skills": []},
        headers=_as(user1),
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Profile already exists"

    updated = client.put(
        "/profiles",
        json={"username": "updated", "bio": "Updated bio", "skills": ["Skill1", "Skill2", "Skill3"]},
        headers=_as(user1),
    )
    assert updated.status_code == 200

    profile = client.get(f"/profiles/{user1}").json()
    assert profile["username"] == "updated"
    assert profile["bio"] == "Updated bio"
    assert profile["skills"] == ["Skill1", "Skill2", "Skill3"]


def test_update_missing_profile(client: TestClient, user1: str) -> None:
    response = client.put("/profiles", json={"username": "x"}, headers=_as(user1))
    assert response.status_code == 400
    assert response.json()["detail"] == "Profile does not exist"


def test_unknown_profile_is_404(client: TestClient, user1: str) -> None:
    assert client.get(f"/profiles/{user1}").status_code == 404


def test_caller_header_is_required_and_validated(client: TestClient) -> None:
    body = {"username": "x", "bio": "", "skills": []}
    assert client.post("/profiles", json=body).status_code == 422
    assert client.post("/profiles", json=body, headers=_as("not-an-address")).status_code == 422
    assert client.get("/profiles/not-an-address").status_code == 422


def test_reputation_is_administrator_only(client: TestClient, admin: str, user1: str, user2: str) -> None:
    client.post("/profiles", json={"username": "user1"}, headers=_as(user1))

    denied = client.post(f"/profiles/{user1}/reputation", json={"amount": 10}, headers=_as(user2))
    assert denied.status_code == 403

    granted = client.post(f"/profiles/{user1}/reputation", json={"amount": 10}, headers=_as(admin))
    assert granted.status_code == 200
    assert granted.json()["reputation"] == 10

    negative = client.post(f"/profiles/{user1}/reputation", json={"amount": -5}, headers=_as(admin))
    assert negative.status_code == 422


# ── Courses ───────────────────────────────────────────────────────────
def test_course_and_enrollment(client: TestClient, user1: str, user2: str) -> None:
    created = client.post(
        "/courses",
        json={"title": "Blockchain 101", "description": "Introduction to blockchain technology"},
        headers=_as(user1),
    )
    assert created.status_code == 201
    assert created.json()["id"] == 0
    assert created.json()["creator"] == user1
    assert created.json()["enrollment_count"] == 0

    second = client.post("/courses", json={"title": "Second"}, headers=_as(user2))
    assert second.json()["id"] == 1
    assert client.get("/courses/count").json() == {"count": 2}

    enrolled = client.post("/courses/0/enroll", headers=_as(user2))
    assert enrolled.status_code == 200
    assert enrolled.json()["enrollment_count"] == 1

    assert client.get(f"/enrollments/{user2}").json()["course_ids"] == [0]
    assert [c["id"] for c in client.get("/courses").json()] == [0, 1]


def test_missing_course(client: TestClient, user2: str) -> None:
    assert client.get("/courses/4").status_code == 404
    response = client.post("/courses/4/enroll", headers=_as(user2))
    assert response.status_code == 404
    assert response.json()["detail"] == "Course does not exist"


# ── Social ────────────────────────────────────────────────────────────
def test_post_and_like(client: TestClient, user1: str, user2: str) -> None:
    created = client.post("/posts", json={"content": "Hello Learnopoly!"}, headers=_as(user1))
    assert created.status_code == 201
    assert created.json() == {"id": 0, "author": user1, "content": "Hello Learnopoly!", "likes": 0}
    assert client.get("/posts/count").json() == {"count": 1}

    liked = client.post("/posts/0/like", headers=_as(user2))
    assert liked.json()["likes"] == 1
    assert client.get("/posts/0").json()["likes"] == 1


def test_like_missing_post(client: TestClient, user2: str) -> None:
    response = client.post("/posts/0/like", headers=_as(user2))
    assert response.status_code == 404
    assert response.json()["detail"] == "Post does not exist"


def test_connections(client: TestClient, user1: str, user2: str) -> None:
    response = client.post("/connections", json={"other": user2}, headers=_as(user1))
    assert response.status_code == 201
    assert response.json()["connections"] == [user2]
    assert client.get(f"/connections/{user2}").json()["connections"] == [user1]

    self_connect = client.post("/connections", json={"other": user1}, headers=_as(user1))
    assert self_connect.status_code == 400
    assert self_connect.json()["detail"] == "Cannot connect with yourself"


# ── Persistence & journal ─────────────────────────────────────────────
def test_mutations_are_persisted(client: TestClient, tmp_path, user1: str) -> None:
    client.post("/posts", json={"content": "saved"}, headers=_as(user1))

    snapshot = json.loads((tmp_path / "ledger.json").read_text(encoding="utf-8"))
    assert snapshot["posts"][0]["content"] == "saved"
    assert snapshot["posts"][0]["author"] == user1


def test_failed_snapshot_write_returns_500_and_rolls_back(client: TestClient, tmp_path, user1: str) -> None:
    client.post("/posts", json={"content": "kept"}, headers=_as(user1))
    (tmp_path / "ledger.json.tmp").mkdir()

    response = client.post("/posts", json={"content": "lost"}, headers=_as(user1))
    assert response.status_code == 500
    assert response.json()["detail"].startswith("Could not persist ledger")

    assert client.get("/posts/count").json() == {"count": 1}
    assert [p["content"] for p in client.get("/posts").json()] == ["kept"]


def test_missing_administrator_returns_503(tmp_path, monkeypatch) -> None:
    from backend import config
    from backend.main import app

    monkeypatch.setattr(config, "ADMIN_ADDRESS", "")
    config.configure(tmp_path / "fresh.json")
    client = TestClient(app)

    response = client.get("/")
    assert response.status_code == 503
    assert "LEARNOPOLY_ADMIN" in response.json()["detail"]
    assert client.get("/posts/count").status_code == 503
    assert not (tmp_path / "fresh.json").exists()


def test_events_endpoint(client: TestClient, user1: str) -> None:
    other = new_address()
    client.post("/profiles", json={"username": "user1"}, headers=_as(user1))
    client.post("/connections", json={"other": other}, headers=_as(user1))
    client.post("/connections", json={"other": user1}, headers=_as(user1))

    events = client.get("/events").json()["events"]
    assert [e["kind"] for e in events] == ["profile-created", "connection-added"]
    assert events[1]["subject"] == other

    later = client.get("/events", params={"since": 1}).json()
    assert later["since"] == 1
    assert [e["sequence"] for e in later["events"]] == [1]
