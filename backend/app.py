from __future__ import annotations

# Standard library
import os
import logging as _logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator

# Third-party
from dotenv import load_dotenv
from fastapi import FastAPI

# Local application imports
from api.dependencies import build_container
from api.menu import router as menu_router
from infrastructure.config import AppConfig
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.images.factory import build_waterfall, open_image_clients
from infrastructure.menu.providers.factory import create_openai_client
from infrastructure.menu.providers.stub_menu_provider import (
    StubDishDetailGenerator,
    StubMenuTextExtractor,
)
from infrastructure.persistence.factory import create_repositories
from metrics.menu_analysis import snapshot

load_dotenv()

# --- Basic logging configuration (minimal) ---
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_logging.basicConfig(
    level=getattr(_logging, _LOG_LEVEL, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

# Version read from env (Docker build ARG -> ENV APP_VERSION)
APP_VERSION = os.getenv("APP_VERSION", "0.0.0-dev")


def _mask(secret: str | None) -> str | None:
    if not secret:
        return None
    return secret[:4] + "..." + secret[-4:] if len(secret) > 8 else "***"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # pragma: no cover
    """Application lifecycle: open every client, wire services, clean up.

    Startup:
    1. Read AppConfig from the environment
    2. Open the AI client (OpenAI or stubs) and the image HTTP sessions
    3. Create repositories (MongoDB indexes ensured when selected)
    4. Build the service container used by the routes

    Shutdown: the exit stack closes HTTP sessions and the Mongo client.
    """
    logger = _logging.getLogger("startup")
    config = AppConfig.from_env()

    logger.info(
        "startup.config",
        extra={
            "vision_provider": config.vision_provider,
            "repository_backend": config.repository_backend,
            "openai_key_masked": _mask(config.openai_api_key),
            "pexels_enabled": bool(config.pexels_api_key),
            "pixabay_enabled": bool(config.pixabay_api_key),
            "unsplash_enabled": bool(config.unsplash_access_key),
        },
    )

    async with AsyncExitStack() as stack:
        openai_client = create_openai_client(config)
        text_extractor: Any
        detail_generator: Any
        if openai_client is not None:
            text_extractor = detail_generator = await stack.enter_async_context(openai_client)
        else:
            text_extractor = StubMenuTextExtractor()
            detail_generator = StubDishDetailGenerator()

        image_clients = await stack.enter_async_context(open_image_clients(config))

        repositories = create_repositories(config)
        stack.callback(repositories.close)
        if config.repository_backend == "mongodb":
            await repositories.ensure_indexes()

        app.state.container = build_container(
            config=config,
            text_extractor=text_extractor,
            detail_generator=detail_generator,
            waterfall=build_waterfall(image_clients, config),
            repositories=repositories,
            event_bus=InMemoryEventBus(),
            image_proxy=image_clients.proxy,
        )

        logger.info(
            "lifespan.ready",
            extra={
                "status": "serving",
                "text_extractor": type(text_extractor).__name__,
                "repositories": type(repositories.foods).__name__,
            },
        )
        yield

        logger.info("lifespan.shutdown", extra={"status": "cleanup"})
        app.state.container = None


app = FastAPI(
    title="Hansik Lens Backend",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
async def version() -> dict[str, str]:
    return {"version": APP_VERSION}


@app.get("/metrics")
async def metrics() -> dict[str, Any]:
    return dict(snapshot())


app.include_router(menu_router)
