# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dashboard.app import create_app
from dashboard.config import DashboardSettings
from database.manager import LocalStore
from services.state_service import StudyStateManager


@pytest.fixture()
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "store.json")


@pytest.fixture()
def manager(store: LocalStore) -> StudyStateManager:
    return StudyStateManager(store)


@pytest.fixture()
def now() -> datetime:
    """Fixed local wall-clock time used by the countdown tests."""
    return datetime(2026, 3, 10, 14, 30)


@pytest.fixture()
def api_settings(tmp_path: Path) -> DashboardSettings:
    return DashboardSettings(
        ENVIRONMENT="testing",
        DB_PATH=tmp_path / "data.sqlite",
        CORS_ORIGINS="*",
    )


@pytest.fixture()
def client(api_settings: DashboardSettings):
    with TestClient(create_app(api_settings)) as test_client:
        yield test_client
