# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from core import mailer
from main import app
from notifications import repository as notifications_repository
from quiz import repository as quiz_repository
from quiz import service as quiz_service
from registrations import repository as registrations_repository
from tests.fakes import FakeClock, FakeMailer, FakeStore

REGISTRATION_FUNCS = (
    "list_registrations",
    "list_registrations_with_email",
    "get_registration",
    "get_registration_by_phone",
    "create_registration",
    "update_registration",
    "delete_registration",
)

QUIZ_FUNCS = (
    "count_questions",
    "insert_questions",
    "list_active_questions",
    "get_questions_by_ids",
    "get_session",
    "get_session_by_phone",
    "create_session",
    "record_answer",
    "finalize_session",
    "list_finished_sessions",
)

EMAIL_LOG_FUNCS = ("insert_email_log", "list_email_logs")


@pytest.fixture
def clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(quiz_service, "_utc_now", clock)
    return clock


@pytest.fixture
def store(monkeypatch, clock):
    """
    Replaces every SQL repository function with the in-memory fake.
    """
    store = FakeStore(clock)
    for name in REGISTRATION_FUNCS:
        monkeypatch.setattr(registrations_repository, name, getattr(store, name))
    for name in QUIZ_FUNCS:
        monkeypatch.setattr(quiz_repository, name, getattr(store, name))
    for name in EMAIL_LOG_FUNCS:
        monkeypatch.setattr(notifications_repository, name, getattr(store, name))
    return store


@pytest.fixture
def fake_mailer(monkeypatch):
    fake = FakeMailer()
    monkeypatch.setattr(mailer, "send_message", fake.send_message)
    monkeypatch.setattr(mailer, "verify_connection", fake.verify_connection)
    return fake


@pytest.fixture
def smtp_env(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "smtp.example.org")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("SMTP_USERNAME", "events@example.org")
    monkeypatch.setenv("SMTP_PASSWORD", "secret")
    monkeypatch.setenv("MAIL_FROM_NAME", "Youth Camp Team")
    monkeypatch.delenv("MAIL_FROM", raising=False)
    monkeypatch.delenv("SMTP_USE_TLS", raising=False)


@pytest.fixture
def client(store):
    # No `with`: the lifespan (DB pool, schema, seeding) is not started.
    return TestClient(app)


@pytest.fixture
def questions(store):
    """Three active questions with known correct answers, plus an inactive one."""
    return [
        store.add_question("Who built the ark?", ["Moses", "Noah", "Abraham", "David"], 1),
        store.add_question("First book of the Bible?", ["Genesis", "Exodus", "Ruth"], 0),
        store.add_question("Last book of the Bible?", ["Jude", "Acts", "Malachi", "Revelation"], 3),
        store.add_question("Retired question", ["A", "B"], 0, is_active=False),
    ]


def registration_payload(**overrides):
    payload = {
        "fullName": "Grace Mensah",
        "age": 19,
        "gender": "Female",
        "phoneNumber": "0241234567",
        "email": "Grace@Example.org",
        "churchName": "Calvary Chapel",
        "availableAllStages": True,
        "reasonToJoin": "To grow with friends",
        "termsAccepted": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def registered(client):
    response = client.post("/api/registrations", json=registration_payload())
    assert response.status_code == 201
    return response.json()["data"]
