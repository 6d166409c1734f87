"""
GeoFeatures Backend — Database Connection Management
======================================================

What:  MongoDB client lifecycle and the FastAPI dependency that exposes it.
How:   `connect()` builds an AsyncMongoClient, confirms reachability with a
       bounded `ping`, and returns a `Database` handle. The handle lives on
       `app.state` for the process lifetime and is read-only after startup.
Who:   Created by the lifespan in main.py; consumed through `get_database`.

Degraded Mode:
    If the startup ping fails and `database_required` is False, the handle
    is returned with `collection = None`. Reads then answer with an empty
    list and writes fail with DatabaseUnavailableError (500).
    With `database_required` True the failure is raised and startup aborts.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.config import Settings
from app.exceptions import DatabaseUnavailableError

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide persistence handle.

    Attributes:
        client:      The AsyncMongoClient, or None in degraded mode
        collection:  The features collection, or None in degraded mode
    """

    def __init__(
        self,
        client: Optional[AsyncMongoClient] = None,
        collection: Optional[AsyncCollection] = None,
    ):
        self.client = client
        self.collection = collection

    @property
    def connected(self) -> bool:
        return self.collection is not None

    async def ping(self) -> bool:
        """
        Lightweight reachability probe used by the health check.

        Returns False in degraded mode or when the server does not answer.
        """
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def close(self) -> None:
        """Closes the client and its connection pool, if any."""
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB client closed")


def _client_options(settings: Settings) -> Dict[str, Any]:
    timeout_ms = settings.mongo_connect_timeout * 1000
    return {
        "serverSelectionTimeoutMS": timeout_ms,
        "connectTimeoutMS": timeout_ms,
    }


async def connect(settings: Settings) -> Database:
    """
    Connect to MongoDB and return the persistence handle.

    Steps:
        1. Build the client (no network I/O yet; a malformed URI fails here)
        2. `ping` the server, bounded by mongo_connect_timeout
        3. Resolve the database and collection

    Raises:
        DatabaseUnavailableError: steps 1-2 failed and `database_required` is set
    """
    client: Optional[AsyncMongoClient] = None
    try:
        client = AsyncMongoClient(settings.mongo_uri, **_client_options(settings))
        await client.admin.command("ping")
    except PyMongoError as e:
        if client is not None:
            await client.close()
        if settings.database_required:
            logger.error("Could not connect to MongoDB at %s: %s", settings.mongo_uri, str(e))
            raise DatabaseUnavailableError(
                message=f"Could not connect to MongoDB: {e}",
                context={"uri": settings.mongo_uri},
            ) from e
        logger.warning(
            "Could not connect to MongoDB at %s: %s. Running without database.",
            settings.mongo_uri,
            str(e),
        )
        return Database()

    collection = client[settings.mongo_database][settings.mongo_collection]
    logger.info(
        "Connected to MongoDB successfully (%s.%s)",
        settings.mongo_database,
        settings.mongo_collection,
    )
    return Database(client=client, collection=collection)


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the handle created at startup.

    Example usage in a route:
        @router.get("/health")
        async def health(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.database
