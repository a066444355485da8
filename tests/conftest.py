"""Shared fixtures: a throwaway SQLite store per test and an API client around it."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from parking_registry.config import Settings
from parking_registry.main import create_app
from parking_registry.services.registry_service import RegistryService
from parking_registry.store import RecordStore


class FakeClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, start=datetime(2024, 3, 1, 8, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_settings(tmp_path, **overrides):
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
        "SEED_EXAMPLE_DATA": False,
        "MAX_CAPACITY": 3,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def store(tmp_path):
    with RecordStore(f"sqlite:///{tmp_path / 'store.db'}") as s:
        yield s


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(store, clock):
    return RegistryService(store, capacity=3, clock=clock)


@pytest.fixture
def client(tmp_path):
    app = create_app(make_settings(tmp_path))
    with TestClient(app) as c:
        yield c
