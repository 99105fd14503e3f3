"""Repository Factory for Persistence Layer.

Environment-based repository selection with graceful fallback to in-memory.
Strategy:
- .env (runtime): REPOSITORY_BACKEND=mongodb (production persistence)
- .env.test (pytest): REPOSITORY_BACKEND=inmemory (fast, isolated tests)
- Default: inmemory (safe fallback if env vars not set)

Usage:
    from infrastructure.persistence.factory import get_repositories

    repos = get_repositories()      # Singleton set, inmemory or mongodb
    food = await repos.foods.find_by_korean_name("비빔밥")
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient

# Protocol interfaces (Dependency Inversion)
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository
from domain.shared.ports.menu_analysis_repository import IMenuAnalysisRepository
from domain.shared.ports.usage_repository import IUsageRepository

# In-memory repositories (fast, transient)
from infrastructure.persistence.in_memory.korean_food_repository import (
    InMemoryKoreanFoodRepository,
)
from infrastructure.persistence.in_memory.menu_analysis_repository import (
    InMemoryMenuAnalysisRepository,
)
from infrastructure.persistence.in_memory.usage_repository import InMemoryUsageRepository

# MongoDB repositories (persistent, requires connection)
from infrastructure.persistence.mongodb.korean_food_repository import MongoKoreanFoodRepository
from infrastructure.persistence.mongodb.menu_analysis_repository import (
    MongoMenuAnalysisRepository,
)
from infrastructure.persistence.mongodb.usage_repository import MongoUsageRepository

from infrastructure.config import AppConfig, get_mongodb_uri


@dataclass(frozen=True)
class Repositories:
    """Every repository the application needs, from one backend."""

    foods: IKoreanFoodRepository
    analyses: IMenuAnalysisRepository
    usage: IUsageRepository
    mongo_client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None

    async def ensure_indexes(self) -> None:
        """Create MongoDB indexes (no-op for in-memory repositories)."""
        for repo in (self.foods, self.analyses, self.usage):
            ensure = getattr(repo, "ensure_indexes", None)
            if ensure is not None:
                await ensure()

    def close(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()


def create_repositories(config: Optional[AppConfig] = None) -> Repositories:
    """Create repositories based on REPOSITORY_BACKEND env var.

    Environment variable: REPOSITORY_BACKEND
    Values:
        - "inmemory": In-memory repositories (default, fast, transient)
        - "mongodb": MongoDB repositories (persistent, requires MONGODB_URI)

    Returns:
        Repositories: One repository per port, sharing a Mongo client

    Raises:
        ValueError: If mongodb selected but MONGODB_URI not set

    Example:
        # In .env (production):
        REPOSITORY_BACKEND=mongodb
        MONGODB_URI=mongodb://localhost:27017

        # In .env.test (testing):
        REPOSITORY_BACKEND=inmemory
    """
    config = config or AppConfig.from_env()

    if config.repository_backend == "mongodb":
        mongodb_uri = get_mongodb_uri()
        if not mongodb_uri:
            raise ValueError(
                "REPOSITORY_BACKEND=mongodb but MONGODB_URI not set. "
                "Set MONGODB_URI in .env or use REPOSITORY_BACKEND=inmemory"
            )
        client: AsyncIOMotorClient[Dict[str, Any]] = AsyncIOMotorClient(mongodb_uri)
        return Repositories(
            foods=MongoKoreanFoodRepository(client),
            analyses=MongoMenuAnalysisRepository(client),
            usage=MongoUsageRepository(client),
            mongo_client=client,
        )

    # Default: inmemory (safe fallback)
    return Repositories(
        foods=InMemoryKoreanFoodRepository(),
        analyses=InMemoryMenuAnalysisRepository(),
        usage=InMemoryUsageRepository(),
    )


# Singleton instance (lazy initialization)
_repositories: Optional[Repositories] = None


def get_repositories() -> Repositories:
    """Get singleton repository set.

    Returns:
        Repositories: Cached repository instances
    """
    global _repositories
    if _repositories is None:
        _repositories = create_repositories()
    return _repositories


def reset_repositories() -> None:
    """Reset singleton repository set.

    Useful for testing to force re-creation with different env vars.
    """
    global _repositories
    if _repositories is not None:
        _repositories.close()
    _repositories = None
