from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from freelancehub import config
from freelancehub.database import get_db
from freelancehub.main import app
from freelancehub.models import STATUS_INTERVIEW_SCHEDULED
from freelancehub.services.job_guard import deadline_sweep_guard

ADMIN_TOKEN = "test-admin-token"
HEADERS = {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(config, "SCHEDULER_ADMIN_TOKEN", ADMIN_TOKEN)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_rejects_missing_or_wrong_token(client):
    assert client.get("/deadlines/summary").status_code == 401
    assert client.get("/deadlines/summary", headers={"X-Admin-Token": "nope"}).status_code == 401


def test_disabled_without_configured_token(client, monkeypatch):
    monkeypatch.setattr(config, "SCHEDULER_ADMIN_TOKEN", None)

    response = client.post("/deadlines/sweep/run", headers=HEADERS)

    assert response.status_code == 503


def test_manual_sweep_rejects_expired_applications(client, make_application, mock_emails):
    now = datetime.utcnow()
    make_application(assignment_deadline=now - timedelta(hours=1))
    make_application(
        status=STATUS_INTERVIEW_SCHEDULED,
        interview_scheduled_date=now - timedelta(hours=3),
    )

    response = client.post("/deadlines/sweep/run", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["assignments"]["rejected"] == 1
    assert body["assignments"]["emails_sent"] == 2
    assert body["interviews"]["rejected"] == 1
    assert body["interviews"]["emails_sent"] == 1

    summary = client.get("/deadlines/summary", headers=HEADERS).json()
    assert summary["counts"]["rejected"] == 2
    assert summary["counts"]["assignment-sent"] == 0
    assert summary["total"] == 2


def test_manual_sweep_conflicts_with_running_tick(client):
    with deadline_sweep_guard.hold():
        response = client.post("/deadlines/sweep/run", headers=HEADERS)

    assert response.status_code == 409


def test_manual_reminders(client, make_application, mock_emails):
    make_application(assignment_deadline=datetime.utcnow() + timedelta(hours=12))

    response = client.post("/deadlines/reminders/run", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"matched": 1, "sent": 1, "skipped": 0, "failed": 0}
