# tests/conftest.py
"""Shared test fixtures."""
from datetime import datetime, timedelta, timezone

import pytest

from xregister.adapters.persistence import create_store, migrate
from xregister.application.exchange_service import ExchangeRateService


class FakeClock:
    """Deterministic UTC clock advancing one minute per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture
def store(tmp_path):
    """Provide a fresh, migrated SQLite store for each test."""
    db_path = tmp_path / "test.db"
    service = create_store(f"sqlite:///{db_path}")
    service.connect()
    migrate(service)
    yield service
    service.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def exchange_service(store, clock):
    return ExchangeRateService(store, clock=clock)
