"""
HTTP edge tests: gateway webhook, scheduler jobs and health check.
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import json
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from barberbot.application.utils import replies
from barberbot.core.config import settings
from barberbot.domain.entities.appointment import Appointment
from barberbot.main import app
from barberbot.wiring.dependencies import get_handle_incoming_message_use_case, get_reminder_use_case

CLIENT_ID = "5511999990000@c.us"


@pytest.fixture
def client(core):
    app.dependency_overrides[get_handle_incoming_message_use_case] = lambda: core.handle_incoming_message
    app.dependency_overrides[get_reminder_use_case] = lambda: core.reminders
    # No context manager: the lifespan (database, sweeper) is not started
    yield TestClient(app)
    app.dependency_overrides.clear()


def sign(body: bytes, secret: str) -> str:
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def test_health(client):
    """The health endpoint answers ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_webhook_processes_message_and_replies(client, sent_to):
    """A webhook message is routed and answered through the platform."""
    payload = {"id": "wamid.1", "from": CLIENT_ID, "body": "4", "hasMedia": False, "timestamp": 1764594000}

    response = client.post("/webhooks/whatsapp", json=payload)

    assert response.status_code == 200
    assert sent_to(CLIENT_ID) == [replies.with_menu(replies.BUSINESS_HOURS_TEXT)]


def test_webhook_rejects_malformed_body(client):
    """Bodies that are not JSON or lack a sender are refused."""
    response = client.post(
        "/webhooks/whatsapp",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400

    missing_sender = client.post("/webhooks/whatsapp", json={"body": "1"})
    assert missing_sender.status_code == 400


def test_webhook_signature_required_outside_dev(client, monkeypatch, sent_to):
    """Outside dev only correctly signed webhooks are processed."""
    monkeypatch.setattr(settings, "ENV", "production")
    monkeypatch.setattr(settings, "GATEWAY_WEBHOOK_SECRET", "s3cret")
    body = json.dumps({"from": CLIENT_ID, "body": "5"}).encode("utf-8")

    unsigned = client.post("/webhooks/whatsapp", content=body, headers={"Content-Type": "application/json"})
    forged = client.post(
        "/webhooks/whatsapp",
        content=body,
        headers={"Content-Type": "application/json", "X-Gateway-Signature": sign(body, "wrong")},
    )
    signed = client.post(
        "/webhooks/whatsapp",
        content=body,
        headers={"Content-Type": "application/json", "X-Gateway-Signature": sign(body, "s3cret")},
    )

    assert unsigned.status_code == 403
    assert forged.status_code == 403
    assert signed.status_code == 200
    assert sent_to(CLIENT_ID) == [replies.with_menu(replies.ADDRESS_TEXT)]


def test_jobs_require_token_when_configured(client, monkeypatch):
    """Job endpoints demand the configured token."""
    monkeypatch.setattr(settings, "JOBS_API_TOKEN", "jobs-token")

    assert client.post("/jobs/same-day-reminders").status_code == 403
    assert client.post("/jobs/same-day-reminders", headers={"X-Jobs-Token": "nope"}).status_code == 403

    response = client.post("/jobs/same-day-reminders", headers={"X-Jobs-Token": "jobs-token"})
    assert response.status_code == 200
    assert response.json() == {"job": "same-day-reminders", "count": 0}


def test_jobs_refused_in_production_without_token(client, monkeypatch):
    """Production refuses job calls when no token is configured."""
    monkeypatch.setattr(settings, "ENV", "production")
    monkeypatch.setattr(settings, "JOBS_API_TOKEN", None)

    assert client.post("/jobs/retention-sweep").status_code == 403


def test_next_day_job_reports_count(client, repository, monkeypatch):
    """The next-day job reports how many reminders went out."""
    monkeypatch.setattr(settings, "JOBS_API_TOKEN", None)
    appointment = Appointment(
        client_name="Joao",
        date=date(2025, 12, 2),
        time="09:00",
        requester_id=CLIENT_ID,
        created_at=datetime(2025, 11, 30, 9, 0),
    )
    asyncio.run(repository.create(appointment))

    response = client.post("/jobs/next-day-reminders")

    assert response.status_code == 200
    assert response.json() == {"job": "next-day-reminders", "count": 1}
