from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from streakkeeper.core.security import create_service_token
from streakkeeper.db.base import Base, SessionLocal, engine
from streakkeeper.flows.manager import ConversationManager
from streakkeeper.main import app
from streakkeeper.ranks.catalog import seed_rank_systems
from streakkeeper.tasks.catalog import seed_task_definitions


client = TestClient(app)
AUTH = {"Authorization": f"Bearer {create_service_token('test-gateway')}"}


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_rank_systems(db)
        seed_task_definitions(db)
    finally:
        db.close()
    app.state.conversations = ConversationManager(app.state.rank_table)
    yield


def _register(user_id=1, username="walker"):
    resp = client.post("/users", data={"user_id": user_id, "username": username}, headers=AUTH)
    assert resp.status_code == 200
    return resp.json()


def _new_journey(user_id=1, days="12", rank="classic"):
    assert client.post(f"/flows/{user_id}/new", headers=AUTH).json()["status"] == "waiting"
    client.post(f"/flows/{user_id}/answer", data={"value": days, "step": "awaiting_streak_days"}, headers=AUTH)
    return client.post(
        f"/flows/{user_id}/answer", data={"value": rank, "step": "awaiting_rank_system"}, headers=AUTH
    ).json()


def test_requests_without_token_are_rejected():
    resp = client.get("/ranks")
    assert resp.status_code == 401

    resp = client.get("/ranks", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_register_then_profile():
    _register(username="@walker")
    saved = _new_journey()
    assert saved["status"] == "done"
    assert saved["data"]["rank"] == "Two Weeks Clean"

    resp = client.get("/users/1/profile", headers=AUTH)
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "walker"
    assert body["days"] == 12
    assert body["current_rank"] == "Two Weeks Clean"
    assert body["next_rank"] == "Monthly Master"

    by_name = client.get("/users/by-username/@walker/profile", headers=AUTH)
    assert by_name.json()["user_id"] == 1


def test_profile_errors_are_json_reasons():
    resp = client.get("/users/42/profile", headers=AUTH)
    assert resp.status_code == 404
    assert resp.json()["reason"] == "NO_ACCOUNT"

    _register(user_id=42)
    resp = client.get("/users/42/account", headers=AUTH)
    assert resp.status_code == 404
    assert resp.json()["reason"] == "NO_JOURNEY"


def test_checkin_over_http_and_entries_listing():
    _register()
    _new_journey()

    step = client.post("/flows/1/check", headers=AUTH).json()
    assert step["prompt"]["options"] == ["relapsed", "survived"]

    for value in ("survived", "9", "felt strong"):
        step = client.post("/flows/1/answer", data={"value": value, "step": step["step"]}, headers=AUTH).json()
    assert step["step"] == "awaiting_privacy_choice"

    retried = client.post("/flows/1/answer", data={"value": "9", "step": "awaiting_note"}, headers=AUTH).json()
    assert retried["status"] == "ignored"
    assert retried["reason"] == "STALE_ANSWER"

    missing_step = client.post("/flows/1/answer", data={"value": "public"}, headers=AUTH)
    assert missing_step.status_code == 422

    done = client.post(
        "/flows/1/answer", data={"value": "public", "step": "awaiting_privacy_choice"}, headers=AUTH
    ).json()
    assert done["status"] == "done"

    page = client.get("/users/1/entries", params={"scope": "public", "page": 1}, headers=AUTH).json()
    assert page["total"] == 1
    assert page["items"][0]["text"] == "felt strong"
    assert page["has_next"] is False

    bad = client.get("/users/1/entries", params={"scope": "friends"}, headers=AUTH)
    assert bad.status_code == 422
    assert bad.json()["reason"] == "INVALID_SCOPE"


def test_checkin_rejection_is_a_flow_reply():
    resp = client.post("/flows/5/check", headers=AUTH)
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"
    assert resp.json()["reason"] == "NO_JOURNEY"

    cancel = client.post("/flows/5/cancel", headers=AUTH).json()
    assert cancel["status"] == "ignored"


def test_task_request_complete_cycle():
    first = client.post("/tasks/1/request", data={"message_ref": 10}, headers=AUTH).json()
    assert first["created"] is True
    assert first["task"]["message_ref"] == 10

    again = client.post("/tasks/1/request", headers=AUTH).json()
    assert again["created"] is False
    assert again["task"]["id"] == first["task"]["id"]

    linked = client.post(f"/tasks/1/{first['task']['id']}/message", data={"message_ref": 11}, headers=AUTH)
    assert linked.json()["message_ref"] == 11

    done = client.post("/tasks/1/complete", headers=AUTH).json()
    assert done["points"] == first["task"]["points"]
    assert done["task"]["is_done"] is True

    missing = client.post("/tasks/1/complete", headers=AUTH)
    assert missing.status_code == 404
    assert missing.json()["reason"] == "NO_TASK"


def test_rank_listing():
    resp = client.get("/ranks", params={"preview": 2}, headers=AUTH).json()
    names = [r["name"] for r in resp["rank_systems"]]
    assert "classic" in names
    assert all(len(r["levels"]) == 2 for r in resp["rank_systems"])

    assert client.get("/ranks/MILITARY", headers=AUTH).json()["levels"][0]["label"] == "Recruit"
    assert client.get("/ranks/unknown", headers=AUTH).status_code == 404


def test_activity_export_and_stats():
    _register()
    _new_journey()
    client.post("/tasks/1/request", headers=AUTH)

    activity = client.get("/users/1/activity", headers=AUTH).json()["activity"]
    assert [a["kind"] for a in activity] == ["journey", "task"]

    export = client.get("/users/1/export", headers=AUTH).json()
    assert len(export["journeys"]) == 1 and len(export["tasks"]) == 1

    stats = client.get("/api/stats", headers=AUTH).json()
    assert stats["tracked_users"] == 1
    assert stats["rank_systems"] >= 3
    datetime.fromisoformat(stats["started_at"])
