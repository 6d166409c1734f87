"""
GeoFeatures Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection: AsyncMock standing in for an AsyncCollection
    ├── memory_collection: In-memory collection double with real ObjectIds
    ├── sample_feature_data: Request body for a feature
    ├── test_client: HTTPX AsyncClient over an app backed by memory_collection
    └── degraded_client: HTTPX AsyncClient over an app with no database
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["MONGO_URI"] = "mongodb://localhost:1"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_REQUIRED"] = "false"

import copy
from types import SimpleNamespace
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from app.database import Database, get_database
from app.main import create_app


class MemoryCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length=None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class MemoryCollection:
    """
    Minimal in-memory double for the AsyncCollection calls FeatureService makes.

    Supports find({}), insert_one, update_one({_id}, {$set}) and
    delete_one({_id}) with the same result attributes pymongo returns.
    """

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []

    def find(self, filter: Dict[str, Any]) -> MemoryCursor:
        return MemoryCursor([copy.deepcopy(d) for d in self.documents])

    async def insert_one(self, document: Dict[str, Any]):
        stored = dict(document)
        stored["_id"] = ObjectId()
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"], acknowledged=True)

    async def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]):
        for document in self.documents:
            if document["_id"] == filter["_id"]:
                changed = {k: v for k, v in update["$set"].items() if document.get(k) != v}
                document.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=int(bool(changed)))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, filter: Dict[str, Any]):
        before = len(self.documents)
        self.documents = [d for d in self.documents if d["_id"] != filter["_id"]]
        return SimpleNamespace(deleted_count=before - len(self.documents))


@pytest.fixture
def mock_collection():
    """
    Provides a mock async collection.

    Usage:
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
        service = FeatureService(mock_collection)
    """
    collection = AsyncMock()
    collection.find = MagicMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[])
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def memory_collection():
    return MemoryCollection()


@pytest.fixture
def sample_feature_data():
    return {"name": "Cafe", "lat": 1.5, "lng": 2.5, "category": "food"}


async def _client_for(database: Database):
    app = create_app()
    app.dependency_overrides[get_database] = lambda: database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def test_client(memory_collection):
    """
    Provides an async HTTP test client backed by the in-memory collection.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/features")
            assert response.status_code == 200
    """
    async for client in _client_for(Database(client=None, collection=memory_collection)):
        yield client


@pytest_asyncio.fixture
async def degraded_client():
    """Provides a client for an app that started without a database."""
    async for client in _client_for(Database()):
        yield client
