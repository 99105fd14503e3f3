"""Unit tests for the menu REST API.

The app is assembled from the real container with stub AI providers,
in-memory repositories, an image waterfall without providers and a
mocked image proxy.
"""

import base64
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import api.menu as menu_api
from api.dependencies import build_container, get_container
from api.menu import router
from domain.menu.core.exceptions import ImageValidationError
from domain.menu.images.services.image_waterfall import ImageResolutionWaterfall
from infrastructure.config import AppConfig
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.images.image_proxy import DomainNotAllowedError, ProxiedImage
from infrastructure.menu.providers.stub_menu_provider import (
    StubDishDetailGenerator,
    StubMenuTextExtractor,
)
from infrastructure.persistence.factory import create_repositories
from infrastructure.persistence.in_memory.menu_analysis_repository import (
    InMemoryMenuAnalysisRepository,
)
from metrics.core import registry
from metrics.menu_analysis import reset_all

PHOTO = base64.b64encode(b"fake menu photo").decode("ascii")
OTHER_PHOTO = base64.b64encode(b"another menu photo").decode("ascii")


@pytest.fixture(autouse=True)
def _reset_metrics():
    reset_all()
    yield
    reset_all()


@pytest.fixture
def image_proxy() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def make_client(image_proxy) -> Callable[..., TestClient]:
    def _make(
        extractor: Optional[StubMenuTextExtractor] = None,
        config: Optional[AppConfig] = None,
    ) -> TestClient:
        config = config or AppConfig()
        validator = AsyncMock()
        validator.validate.return_value = False
        container = build_container(
            config=config,
            text_extractor=extractor or StubMenuTextExtractor(),
            detail_generator=StubDishDetailGenerator(),
            waterfall=ImageResolutionWaterfall(None, [], validator),
            repositories=create_repositories(config),
            event_bus=InMemoryEventBus(),
            image_proxy=image_proxy,
        )
        app = FastAPI()
        app.include_router(router)
        app.dependency_overrides[get_container] = lambda: container
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


def _analyze(client: TestClient, photo: str = PHOTO, **kwargs: Any):
    return client.post("/api/analyze-menu", json={"imageBase64": photo}, **kwargs)


class TestAnalyzeMenu:
    def test_json_upload(self, client):
        response = _analyze(client)

        assert response.status_code == 200
        body = response.json()
        assert body["isKoreanMenu"] is True
        assert body["extractedFoodNames"] == ["비빔밥", "김치찌개"]
        assert body["message"] == "Found 2 Korean dishes in the menu"
        assert body["cached"] is False
        dish = body["dishes"][0]
        assert dish["nameKorean"] == "비빔밥"
        assert dish["nameEnglish"] == "Bibimbap"
        assert dish["source"] == "ai"
        assert dish["confidence"] == 0.8
        assert dish["imageUrl"] is None
        assert "cost_usd" in body["tokenUsage"]

    def test_anonymous_caller_gets_session_cookie(self, client):
        response = _analyze(client)

        assert response.cookies.get("session_id")
        assert "httponly" in response.headers["set-cookie"].lower()

    def test_signed_in_caller_gets_no_cookie(self, client):
        response = _analyze(client, headers={"X-User-Id": "user-1"})

        assert response.status_code == 200
        assert "set-cookie" not in response.headers

    def test_multipart_upload(self, client):
        response = client.post(
            "/api/analyze-menu",
            files={"image": ("menu.jpg", b"fake menu photo", "image/jpeg")},
        )

        assert response.status_code == 200
        assert len(response.json()["dishes"]) == 2

    def test_same_photo_is_served_from_cache(self, client):
        first = _analyze(client).json()
        second = _analyze(client).json()

        assert second["cached"] is True
        assert second["id"] == first["id"]
        assert second["cacheDate"] is not None
        assert second["dishes"] == first["dishes"]

    def test_cached_dishes_come_from_the_store(self, client):
        _analyze(client)

        second = _analyze(client, OTHER_PHOTO).json()

        assert [d["source"] for d in second["dishes"]] == ["database", "database"]
        assert second["dishes"][0]["confidence"] == 1.0

    def test_not_korean_menu(self, make_client):
        client = make_client(StubMenuTextExtractor(names=[], is_korean_menu=False))

        body = _analyze(client).json()

        assert body["isKoreanMenu"] is False
        assert body["dishes"] == []
        assert body["message"] == "This doesn't appear to be a Korean menu"

    def test_no_image(self, client):
        response = client.post("/api/analyze-menu", json={})

        assert response.status_code == 400
        assert response.json()["message"].startswith("No image provided")

    def test_invalid_base64(self, client):
        response = _analyze(client, "not base64!!")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid image data"}

    def test_file_too_large(self, client, monkeypatch):
        monkeypatch.setattr(menu_api, "MAX_FILE_SIZE", 4)

        response = client.post(
            "/api/analyze-menu",
            files={"image": ("menu.jpg", b"0123456789", "image/jpeg")},
        )

        assert response.status_code == 413

    def test_too_many_items(self, make_client):
        client = make_client(StubMenuTextExtractor(total_detected=5))

        response = _analyze(client)

        assert response.status_code == 400
        body = response.json()
        assert body["isLimitError"] is True
        assert body["detectedCount"] == 5
        assert registry.counter_value(
            "menu_analysis_requests_total", status="too_many_items"
        ) == 1

    def test_anonymous_usage_limit(self, client):
        for _ in range(3):
            assert _analyze(client).status_code == 200

        response = _analyze(client)

        assert response.status_code == 402
        body = response.json()
        assert body["message"].startswith("USAGE_LIMIT_ERROR")
        assert body["usageCount"] == 3
        assert body["isLimitReached"] is True
        assert body["requiresAuth"] is True
        assert registry.counter_value("menu_analysis_requests_total", status="usage_limit") == 1

    def test_signed_in_usage_limit_requires_payment(self, make_client):
        client = make_client(config=AppConfig(free_usage_limit=1))
        headers = {"X-User-Id": "user-1"}

        assert _analyze(client, headers=headers).status_code == 200
        response = _analyze(client, headers=headers)

        assert response.status_code == 402
        assert response.json()["requiresPayment"] is True

    def test_admin_is_never_limited(self, make_client):
        client = make_client(config=AppConfig(free_usage_limit=0, admin_user_ids=frozenset({"boss"})))

        assert _analyze(client, headers={"X-User-Id": "boss"}).status_code == 200

    def test_unexpected_failure(self, make_client):
        extractor = StubMenuTextExtractor()
        extractor.extract_names = AsyncMock(side_effect=RuntimeError("model down"))  # type: ignore[method-assign]
        client = make_client(extractor)

        response = _analyze(client)

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to analyze menu. Please try again."}
        assert registry.counter_value("menu_analysis_requests_total", status="failed") == 1

    def test_store_failure_is_not_reported_as_bad_image(self, client, monkeypatch):
        monkeypatch.setattr(
            InMemoryMenuAnalysisRepository,
            "find_by_image_hash",
            AsyncMock(side_effect=ValueError("Missing required field in MongoDB document: 'created_at'")),
        )

        response = _analyze(client)

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to analyze menu. Please try again."}


class TestRecentAnalyses:
    def test_lists_newest_first(self, client):
        _analyze(client, PHOTO)
        _analyze(client, OTHER_PHOTO)

        response = client.get("/api/recent-analyses", params={"limit": 1})

        assert response.status_code == 200
        analyses = response.json()
        assert len(analyses) == 1
        assert len(analyses[0]["imageHash"]) == 64

    def test_limit_is_validated(self, client):
        assert client.get("/api/recent-analyses", params={"limit": 0}).status_code == 422


class TestFoods:
    def test_search_and_get(self, client):
        _analyze(client)

        found = client.get("/api/foods", params={"query": "bibim"}).json()
        assert [f["nameKorean"] for f in found] == ["비빔밥"]

        food = client.get("/api/foods/비빔밥").json()
        assert food["nameEnglish"] == "Bibimbap"
        assert food["region"] == "Jeonju"

    def test_get_missing(self, client):
        assert client.get("/api/foods/냉면").status_code == 404

    def test_patch(self, client):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]

        response = client.patch(f"/api/foods/{food_id}", json={"spiciness": 4, "nameEnglish": "Bibim-bap"})

        assert response.status_code == 200
        assert response.json()["spiciness"] == 4
        assert client.get("/api/foods/비빔밥").json()["nameEnglish"] == "Bibim-bap"

    def test_patch_missing(self, client):
        assert client.patch("/api/foods/missing", json={"calories": 10}).status_code == 404

    def test_patch_rejects_out_of_range(self, client):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]

        assert client.patch(f"/api/foods/{food_id}", json={"spiciness": 9}).status_code == 422

    @pytest.mark.parametrize("field", ["nameEnglish", "spiciness", "calories", "ingredients"])
    def test_patch_rejects_null_for_required_fields(self, client, field):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]

        response = client.patch(f"/api/foods/{food_id}", json={field: None})

        assert response.status_code == 422
        assert client.get("/api/foods/비빔밥").json()["nameEnglish"] == "Bibimbap"

    def test_patch_can_clear_image_url(self, client):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]

        response = client.patch(f"/api/foods/{food_id}", json={"imageUrl": None})

        assert response.status_code == 200
        assert response.json()["imageUrl"] is None

    def test_patch_rejects_blank_english_name(self, client):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]

        response = client.patch(f"/api/foods/{food_id}", json={"nameEnglish": "   "})

        assert response.status_code == 400

    def test_analysis_after_rejected_edit(self, client):
        _analyze(client)
        food_id = client.get("/api/foods/비빔밥").json()["id"]
        client.patch(f"/api/foods/{food_id}", json={"nameEnglish": None})

        response = _analyze(client, OTHER_PHOTO)

        assert response.status_code == 200
        assert response.json()["dishes"][0]["nameEnglish"] == "Bibimbap"


class TestProxyImage:
    def test_requires_url(self, client):
        response = client.get("/api/proxy-image")

        assert response.status_code == 400
        assert response.json() == {"message": "Image URL is required"}

    def test_domain_not_allowed(self, client, image_proxy):
        image_proxy.fetch.side_effect = DomainNotAllowedError("evil.com")

        response = client.get("/api/proxy-image", params={"url": "https://evil.com/a.jpg"})

        assert response.status_code == 403
        assert response.json() == {"message": "Domain not allowed"}

    def test_image_not_accessible(self, client, image_proxy):
        url = "https://blogfiles.naver.net/a.jpg"
        image_proxy.fetch.side_effect = ImageValidationError(url, "HTTP 403")

        response = client.get("/api/proxy-image", params={"url": url})

        assert response.status_code == 404
        assert response.json() == {
            "message": "Image not accessible",
            "hostname": "blogfiles.naver.net",
            "error": "HTTP 403",
        }

    def test_streams_image(self, client, image_proxy):
        image_proxy.fetch.return_value = ProxiedImage(
            content=b"jpeg-bytes",
            content_type="image/jpeg",
            source_host="blogfiles.naver.net",
        )

        response = client.get(
            "/api/proxy-image", params={"url": "https://blogfiles.naver.net/a.jpg"}
        )

        assert response.status_code == 200
        assert response.content == b"jpeg-bytes"
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["x-image-source"] == "blogfiles.naver.net"
        assert response.headers["access-control-allow-origin"] == "*"
        assert "max-age=86400" in response.headers["cache-control"]


def test_container_not_ready():
    app = FastAPI()
    app.include_router(router)

    response = TestClient(app).get("/api/foods")

    assert response.status_code == 503
