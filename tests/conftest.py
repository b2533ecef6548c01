"""Shared fixtures for API and client tests."""

import pytest
from fastapi.testclient import TestClient

from veo_studio.app import app
from veo_studio.config import settings


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def instant_jobs(monkeypatch):
    """Make newly started jobs complete on the first status check."""
    monkeypatch.setattr(settings, "ready_after_ms", 0)
    yield settings


@pytest.fixture
def slow_jobs(monkeypatch):
    """Make newly started jobs stay in processing for the whole test."""
    monkeypatch.setattr(settings, "ready_after_ms", 3_600_000)
    yield settings
