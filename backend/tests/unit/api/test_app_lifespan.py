"""Smoke tests for the application lifespan (stub providers, in-memory store)."""

import base64

import pytest
from fastapi.testclient import TestClient

from app import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("VISION_PROVIDER", "stub")
    monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
    for key in ("PEXELS_API_KEY", "PIXABAY_API_KEY", "UNSPLASH_ACCESS_KEY"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NAVER_IMAGE_SEARCH_ENABLED", "false")

    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_version(client):
    assert "version" in client.get("/version").json()


def test_analysis_without_image_providers(client):
    photo = base64.b64encode(b"lifespan menu photo").decode("ascii")

    response = client.post("/api/analyze-menu", json={"imageBase64": photo})

    assert response.status_code == 200
    dishes = response.json()["dishes"]
    assert [d["nameKorean"] for d in dishes] == ["비빔밥", "김치찌개"]
    assert all(d["imageUrl"] is None for d in dishes)


def test_metrics_exposes_counters(client):
    body = client.get("/metrics").json()

    assert "counters" in body
    assert "histograms" in body


def test_container_released_on_shutdown(monkeypatch):
    monkeypatch.setenv("VISION_PROVIDER", "stub")
    monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")

    with TestClient(app):
        assert app.state.container is not None

    assert app.state.container is None
