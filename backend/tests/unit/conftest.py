"""Unit test configuration.

Unit tests run against stub providers and in-memory repositories, and
never reach the network or MongoDB.
"""

import pytest

from infrastructure.menu.providers.factory import reset_providers
from infrastructure.persistence.factory import reset_repositories


@pytest.fixture(autouse=True)
def _isolated_backends(monkeypatch):
    """Default to stub providers and in-memory storage, whatever .env says."""
    monkeypatch.setenv("VISION_PROVIDER", "stub")
    monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
    monkeypatch.delenv("MONGODB_URI", raising=False)
    yield
    reset_providers()
    reset_repositories()
