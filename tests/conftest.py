#!/usr/bin/env python3
"""
Shared pytest fixtures: isolated settings, a throwaway SQLite store and a
fake messaging provider so no test touches Twilio.
"""

import os
import sys

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pawsclinic.core.config import Settings
from pawsclinic.core.errors import DeliveryError
from pawsclinic.crud.appointment import AppointmentStore
from pawsclinic.db.session import Database
from pawsclinic.main import create_app

ADMIN_SECRET = "test-admin-secret"
CLINIC_NUMBER = "+15559990000"
SENDER_NUMBER = "+15550001111"


class FakeMessagingClient:
    """Records every message; optionally rejects like the provider would."""

    def __init__(self, sid="SM00000000000000000000000000000001", error=None):
        self.sid = sid
        self.error = error
        self.sent = []

    def send_message(self, *, to, body, from_=None, messaging_service_sid=None):
        self.sent.append({
            "to": to,
            "body": body,
            "from_": from_,
            "messaging_service_sid": messaging_service_sid,
        })
        if self.error is not None:
            raise self.error
        return self.sid


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell and .env out of Settings."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "appointments.db"


@pytest.fixture
def make_settings(db_path):
    def _make(**overrides):
        values = {
            "TWILIO_ACCOUNT_SID": "ACtest123",
            "TWILIO_AUTH_TOKEN": "test_token",
            "TWILIO_FROM_NUMBER": SENDER_NUMBER,
            "CLINIC_SMS_TO": CLINIC_NUMBER,
            "ADMIN_SECRET": ADMIN_SECRET,
            "DATABASE_PATH": db_path,
            "RATE_LIMIT_PER_MINUTE": 0,
            "APP_ENV": "testing",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def fake_messaging():
    return FakeMessagingClient()


@pytest.fixture
def rejecting_messaging():
    return FakeMessagingClient(error=DeliveryError("The 'To' number +15559990000 is not a valid phone number."))


@pytest.fixture
def client(settings, fake_messaging):
    """TestClient with the lifespan running (database created, services wired)."""
    app = create_app(settings, messaging_client=fake_messaging)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}


@pytest.fixture
def valid_submission():
    return {
        "ownerName": "Jane",
        "phone": "555-1000",
        "petName": "Rex",
        "service": "Checkup",
        "agree": True,
    }


@pytest_asyncio.fixture
async def database(db_path):
    db = Database(db_path)
    await db.init()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def store(database):
    return AppointmentStore(database)
