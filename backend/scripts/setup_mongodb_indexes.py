"""Setup MongoDB indexes for the menu analysis backend.

Collections:
- korean_foods: food catalogue (unique name_korean)
- menu_analyses: stored analyses (image_hash cache lookup, recent list)
- users / sessions: usage counters

Usage:
    uv run python scripts/setup_mongodb_indexes.py

Environment Variables:
    MONGODB_URI: MongoDB connection string (required)
    MONGODB_DATABASE: Database name (default: hansik_lens)
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List

import structlog
from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from infrastructure.config import get_mongodb_database, get_mongodb_uri
from infrastructure.persistence.mongodb import (
    MongoKoreanFoodRepository,
    MongoMenuAnalysisRepository,
    MongoUsageRepository,
)

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)
logger = structlog.get_logger(__name__)

COLLECTIONS = ("korean_foods", "menu_analyses", "users", "sessions")


async def list_existing_indexes(db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
    for coll_name in COLLECTIONS:
        indexes: List[Dict[str, Any]] = await db[coll_name].list_indexes().to_list(length=None)
        for idx in indexes:
            logger.info(
                "index",
                collection=coll_name,
                name=idx.get("name", "unknown"),
                keys=dict(idx.get("key", {})),
                unique=bool(idx.get("unique", False)),
            )


async def setup_all_indexes() -> int:
    uri = get_mongodb_uri()
    if not uri:
        logger.error("mongodb_uri_missing", hint="Set MONGODB_URI with a connection string")
        return 1

    database_name = get_mongodb_database()
    client: AsyncIOMotorClient[Dict[str, Any]] = AsyncIOMotorClient(uri)

    try:
        await client.admin.command("ping")
        logger.info("mongodb_connected", database=database_name)

        for repo in (
            MongoKoreanFoodRepository(client, database_name),
            MongoMenuAnalysisRepository(client, database_name),
            MongoUsageRepository(client, database_name),
        ):
            await repo.ensure_indexes()
            logger.info("indexes_ensured", collection=repo.collection_name)

        await list_existing_indexes(client[database_name])
        return 0
    except Exception as e:
        logger.error("index_setup_failed", error=str(e))
        return 1
    finally:
        client.close()


def main() -> None:
    try:
        sys.exit(asyncio.run(setup_all_indexes()))
    except KeyboardInterrupt:
        logger.warning("interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
