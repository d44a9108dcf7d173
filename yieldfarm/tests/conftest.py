from __future__ import annotations

from datetime import datetime, timezone

import pytest
from flask.testing import FlaskClient

from yieldfarm.app import create_app
from yieldfarm.config import AppSettings
from yieldfarm.core.ledger import Ledger
from yieldfarm.core.store import MemoryStore

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def ledger(store: MemoryStore) -> Ledger:
    return Ledger(store, clock=lambda: FIXED_NOW)


@pytest.fixture()
def flask_app(ledger: Ledger):
    return create_app(AppSettings(STORE="memory", ENVIRONMENT="test"), ledger=ledger)


@pytest.fixture()
def client(flask_app) -> FlaskClient:
    with flask_app.test_client() as test_client:
        yield test_client
