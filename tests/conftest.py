# tests/conftest.py
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from firebase_token.config import Settings, get_settings
from firebase_token.main import app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        FIREBASE_SECRET="firebase-test-secret",
        SERVICE_JWT_SECRET="service-test-secret",
        ENABLE_DEV_TOKEN=True,
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """
    TestClient with a known configuration.

    Dependency overrides are reset around every test so that tests
    cannot leak settings into each other.
    """
    app.dependency_overrides = {}
    app.dependency_overrides[get_settings] = lambda: settings

    yield TestClient(app)

    # Teardown
    app.dependency_overrides = {}
