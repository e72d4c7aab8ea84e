# backend/tests/conftest.py
"""
Pytest fixtures: in-memory SQLite store, recording notification sender and a
TestClient over the application factory.
"""
import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.security import issue_token
from app.db.models.medication import Medication
from app.db.store import InventoryStore
from app.main import create_app


class RecordingSender:
    """Stands in for Telegram: keeps every delivered message."""

    def __init__(self):
        self.messages = []
        self.fail = False

    def send(self, message):
        if self.fail:
            return False
        self.messages.append(message)
        return True


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        token_secret="test-token-secret-0123456789abcdef",
        app_password="open-sesame",
        cron_secret="cron-secret",
        telegram_bot_token="",
        telegram_chat_id="",
        timezone="America/Argentina/Buenos_Aires",
        expiry_lookahead_days=30,
        history_limit=50,
    )


@pytest.fixture
def store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    inventory_store = InventoryStore(engine)
    inventory_store.create_schema()
    yield inventory_store
    inventory_store.dispose()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def client(settings, store, sender):
    app = create_app(settings=settings, store=store, sender=sender)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings):
    token = issue_token(settings.token_secret, timedelta(hours=1))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_medication(store):
    """Insert a medication row directly, bypassing the API."""

    def _add(**fields):
        fields.setdefault("name", "Aspirin")
        fields.setdefault("schedule", [])
        with store.session() as db:
            med = Medication(**fields)
            db.add(med)
            db.commit()
            return med.medication_id

    return _add


@pytest.fixture
def load_medication(store):
    def _load(medication_id: uuid.UUID) -> Medication:
        with store.session() as db:
            return db.get(Medication, medication_id)

    return _load
