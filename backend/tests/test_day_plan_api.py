from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dayforge.db.base import Base
from dayforge.db.deps import get_db
from dayforge.db.models.block import Block
from dayforge.db.models.daily_history import DailyHistory
from dayforge.db.models.user import User
from dayforge.db.models.work_item import WorkItem
from dayforge.main import app
from dayforge.planning.errors import CollaboratorReadError, CollaboratorWriteError
from dayforge.services import day_planner

TARGET = "2025-11-04"


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_fk(conn, record):  # pragma: no cover
        cursor = conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _seed_user(session_factory):
    session = session_factory()
    try:
        user_id = uuid4()
        session.add(User(id=user_id))
        session.commit()
        return user_id
    finally:
        session.close()


def _seed(session_factory, *rows):
    session = session_factory()
    try:
        session.add_all(rows)
        session.commit()
    finally:
        session.close()


def _block_count(session_factory, user_id) -> int:
    session = session_factory()
    try:
        return session.query(Block).filter(Block.user_id == user_id).count()
    finally:
        session.close()


def test_day_plan_run_creates_full_day(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)

    resp = test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET})

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["date"] == TARGET
    assert data["blocks_created"] == 21
    assert data["workout"] == "Push"
    assert data["lunch_meal"] == "auto"
    assert data["dinner_meal"] == "auto"
    assert data["skipped_work_item_ids"] == []
    assert data["request_id"]
    assert _block_count(session_factory, user_id) == 21


def test_day_plan_rerun_replaces_previous_schedule(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    payload = {"user_id": str(user_id), "target_date": TARGET}

    assert test_client.post("/day-plan/run", json=payload).status_code == 200
    resp = test_client.post("/day-plan/run", json={**payload, "workout_type": "skip", "lunch_meal": "Chicken bowl"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["workout"] == "Skip"
    assert data["lunch_meal"] == "Chicken bowl"
    assert data["blocks_created"] == 20
    assert _block_count(session_factory, user_id) == 20


def test_day_plan_uses_history_and_backlog(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    big_id = uuid4()
    big = WorkItem(id=big_id, user_id=user_id, title="Migration plan", est_min=240, priority=3)
    small = WorkItem(id=uuid4(), user_id=user_id, title="Invoices", est_min=45, priority=1)
    done = WorkItem(id=uuid4(), user_id=user_id, title="Old task", est_min=30, status="done")
    _seed(
        session_factory,
        big,
        small,
        done,
        DailyHistory(user_id=user_id, date=date(2025, 11, 3), workout_type="Push", workout_completed=True),
        DailyHistory(user_id=user_id, date=date(2025, 11, 5), workout_type="Legs", workout_completed=True),
    )

    resp = test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET})

    assert resp.status_code == 200
    data = resp.json()
    assert data["workout"] == "Pull"
    assert data["skipped_work_item_ids"] == [str(big_id)]

    schedule = test_client.get("/day-plan", params={"user_id": str(user_id), "date": TARGET})
    assert schedule.status_code == 200
    titles = [block["title"] for block in schedule.json()["blocks"]]
    assert "Invoices" in titles
    assert "Old task" not in titles
    assert "Gym: Pull" in titles


def test_day_plan_get_returns_blocks_in_order(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    test_client.post(
        "/day-plan/run",
        json={"user_id": str(user_id), "target_date": TARGET, "dinner_meal": "Salmon", "notes": "tired"},
    )

    resp = test_client.get("/day-plan", params={"user_id": str(user_id), "date": TARGET})

    assert resp.status_code == 200
    blocks = resp.json()["blocks"]
    assert blocks[0]["title"] == "Morning routine"
    assert blocks[-1]["title"] == "Sleep"
    assert all(block["status"] == "planned" for block in blocks)
    dinner = next(block for block in blocks if block["type"] == "meal" and block["title"].startswith("Dinner"))
    assert dinner["title"] == "Dinner: Salmon"
    assert dinner["meal_details"] == "Salmon"


def test_day_plan_unknown_user_returns_404(client):
    test_client, _ = client

    resp = test_client.post("/day-plan/run", json={"user_id": str(uuid4()), "target_date": TARGET})

    assert resp.status_code == 404


def test_day_plan_rejects_invalid_payload(client):
    test_client, _ = client

    resp = test_client.post("/day-plan/run", json={"user_id": "not-a-uuid"})

    assert resp.status_code == 422


def test_block_status_update(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET})
    blocks = test_client.get("/day-plan", params={"user_id": str(user_id), "date": TARGET}).json()["blocks"]
    gym = next(block for block in blocks if block["title"].startswith("Gym"))

    resp = test_client.patch(f"/blocks/{gym['id']}", json={"user_id": str(user_id), "status": "done"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "done"

    other = test_client.patch(f"/blocks/{gym['id']}", json={"user_id": str(uuid4()), "status": "skipped"})
    assert other.status_code == 403

    missing = test_client.patch(f"/blocks/{uuid4()}", json={"user_id": str(user_id), "status": "done"})
    assert missing.status_code == 404

    invalid = test_client.patch(f"/blocks/{gym['id']}", json={"user_id": str(user_id), "status": "later"})
    assert invalid.status_code == 422


def test_day_plan_read_failure_returns_503_and_keeps_schedule(client, monkeypatch):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    assert test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET}).status_code == 200

    def failing_load(*args, **kwargs):
        raise CollaboratorReadError("Loading planning inputs for 2025-11-04 failed: connection reset")

    monkeypatch.setattr(day_planner, "load_planning_inputs", failing_load)
    resp = test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET})

    assert resp.status_code == 503
    assert resp.json()["detail"] == "Loading planning inputs for 2025-11-04 failed: connection reset"
    assert _block_count(session_factory, user_id) == 21


def test_day_plan_write_failure_returns_500_and_keeps_schedule(client, monkeypatch):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)
    assert test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": TARGET}).status_code == 200

    def failing_replace(*args, **kwargs):
        raise CollaboratorWriteError("Saving the plan for 2025-11-04 failed: disk full")

    monkeypatch.setattr(day_planner, "replace_day_blocks", failing_replace)
    resp = test_client.post(
        "/day-plan/run",
        json={"user_id": str(user_id), "target_date": TARGET, "workout_type": "skip"},
    )

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Saving the plan for 2025-11-04 failed: disk full"
    schedule = test_client.get("/day-plan", params={"user_id": str(user_id), "date": TARGET}).json()["blocks"]
    assert len(schedule) == 21
    assert any(block["title"] == "Gym: Push" for block in schedule)


def test_day_plan_out_of_range_date_returns_422(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)

    run = test_client.post("/day-plan/run", json={"user_id": str(user_id), "target_date": "9999-12-31"})
    get = test_client.get("/day-plan", params={"user_id": str(user_id), "date": "9999-12-31"})

    assert run.status_code == 422
    assert run.json()["detail"] == "Date 9999-12-31 is outside the plannable range"
    assert get.status_code == 422
    assert _block_count(session_factory, user_id) == 0
