"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from race_telemetry.ingest import IterableSource
from race_telemetry.web.app import app, get_service
from race_telemetry.web.service import RaceService


@pytest.fixture
def service():
    """RaceService with nothing to ingest; fed directly by the tests."""
    return RaceService(source_factory=lambda: IterableSource([]))


@pytest.fixture
def client(service, monkeypatch):
    """FastAPI test client bound to *service*, without a UDP listener."""
    monkeypatch.setenv("RACE_TELEMETRY_LISTEN", "0")
    app.dependency_overrides[get_service] = lambda: service
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
