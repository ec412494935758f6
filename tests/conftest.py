"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_attempt_store, get_repository
from src.app import app
from src.config.settings import Settings
from src.infrastructure.repository import InMemoryRepository
from src.services.verification import VerificationAttemptStore
from tests.helpers import JPEG_URI, PNG_URI


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings()


@pytest.fixture
def repository():
    """Fresh in-memory ledger."""
    return InMemoryRepository()


@pytest.fixture
def attempts():
    return VerificationAttemptStore()


@pytest.fixture
def client(repository, attempts):
    """TestClient wired to a fresh ledger and attempt store."""
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_attempt_store] = lambda: attempts
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def png_uri():
    return PNG_URI


@pytest.fixture
def jpeg_uri():
    return JPEG_URI
