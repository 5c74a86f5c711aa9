from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dayforge.api.routes import jobs as jobs_routes
from dayforge.db.base import Base
from dayforge.db.deps import get_db
from dayforge.db.models.block import Block
from dayforge.db.models.user import User
from dayforge.main import app


@pytest.fixture()
def client(monkeypatch):
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
    monkeypatch.setattr(jobs_routes.settings, "debug", True)
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


def test_jobs_config_and_run_now(client):
    test_client, session_factory = client
    user_id = _seed_user(session_factory)

    resp = test_client.get("/jobs")
    assert resp.status_code == 200
    config = resp.json()
    assert "scheduler_enabled" in config
    assert config["schedule"]["day_plan_time"] == "21:00"

    run_resp = test_client.post("/jobs/run-now", json={"job": "day_plan", "target_date": "2025-11-04"})
    assert run_resp.status_code == 200
    data = run_resp.json()
    assert data["users_processed"] == 1
    assert data["days_written"] == 1
    assert data["request_id"]

    completion = test_client.post(
        "/jobs/run-now",
        json={"job": "day_completion", "user_id": str(user_id), "target_date": "2025-11-04"},
    )
    assert completion.status_code == 200
    assert completion.json()["days_written"] == 1

    session = session_factory()
    try:
        assert session.query(Block).filter(Block.user_id == user_id).count() == 21
    finally:
        session.close()


def test_jobs_run_now_unknown_user(client):
    test_client, _ = client

    resp = test_client.post("/jobs/run-now", json={"job": "day_plan", "user_id": str(uuid4())})

    assert resp.status_code == 404


def test_jobs_run_now_forbidden_in_prod(client, monkeypatch):
    test_client, _ = client
    monkeypatch.setattr(jobs_routes.settings, "debug", False)

    resp = test_client.post("/jobs/run-now", json={"job": "day_plan"})

    assert resp.status_code == 403
