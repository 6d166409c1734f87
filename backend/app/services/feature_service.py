"""
GeoFeatures Backend — Feature Service (Repository Operations)
===============================================================

What:  The four CRUD operations over the features collection.
How:   Each operation performs exactly one database call, bounded by
       `pymongo.timeout(operation_timeout)`. Driver failures are wrapped in
       DatabaseError carrying the driver's message.
Who:   Called by route handlers in routes/features.py.

Operation Contract:
    list_features    no handle → []           find({})
    create_feature   no handle → 500          insert_one(fields)
    update_feature   no handle → 500          bad id → 400, update_one($set)
    delete_feature   no handle → 500          bad id → 400, delete_one

    Checks run in that order (handle, then id) and, for routes with a body,
    before the body is parsed; see routes/features.py.

    Update and delete do not check that the id exists; zero matched
    documents is still a success.
"""

import logging
from typing import List, Optional

import pydantic
import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.config import settings
from app.database import Database, get_database
from app.exceptions import DatabaseError, DatabaseUnavailableError, ValidationError
from app.schemas.feature import Feature, FeatureIn

logger = logging.getLogger(__name__)


def parse_object_id(value: str) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Raises:
        ValidationError: value is not a 24-character hex string
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise ValidationError(
            message="Invalid ID format",
            field="id",
            context={"value": value},
        ) from e


class FeatureService:
    """
    Repository operations for geospatial features.

    The collection is injected at construction time; None means the
    application is running in degraded mode.
    """

    def __init__(
        self,
        collection: Optional[AsyncCollection],
        operation_timeout: float = 5,
    ):
        self.collection = collection
        self.operation_timeout = operation_timeout

    def require_collection(self) -> AsyncCollection:
        """Return the collection, or raise DatabaseUnavailableError in degraded mode."""
        if self.collection is None:
            raise DatabaseUnavailableError()
        return self.collection

    async def list_features(self) -> List[Feature]:
        """
        Return every stored feature in database order.

        Degraded mode returns an empty list instead of failing.

        Raises:
            DatabaseError: query failed or a document could not be decoded
        """
        if self.collection is None:
            logger.debug("list_features: no database, returning empty list")
            return []

        try:
            with pymongo.timeout(self.operation_timeout):
                documents = await self.collection.find({}).to_list()
        except PyMongoError as e:
            raise DatabaseError(message=str(e), context={"operation": "find"}) from e

        try:
            return [Feature.from_document(doc) for doc in documents]
        except pydantic.ValidationError as e:
            raise DatabaseError(message=str(e), context={"operation": "decode"}) from e

    async def create_feature(self, payload: FeatureIn) -> Feature:
        """
        Insert a new feature; the database assigns its id.

        Returns:
            The stored feature including the assigned id
        """
        collection = self.require_collection()
        document = payload.to_document()

        try:
            with pymongo.timeout(self.operation_timeout):
                result = await collection.insert_one(document)
        except PyMongoError as e:
            raise DatabaseError(message=str(e), context={"operation": "insert_one"}) from e

        logger.info("Feature created: %s (%s)", result.inserted_id, payload.name)
        return Feature(id=str(result.inserted_id), **payload.to_document())

    async def update_feature(self, feature_id: str, payload: FeatureIn) -> None:
        """Overwrite name/lat/lng/category of the feature with `feature_id`."""
        collection = self.require_collection()
        object_id = parse_object_id(feature_id)

        try:
            with pymongo.timeout(self.operation_timeout):
                result = await collection.update_one(
                    {"_id": object_id},
                    {"$set": payload.to_document()},
                )
        except PyMongoError as e:
            raise DatabaseError(message=str(e), context={"operation": "update_one"}) from e

        logger.info(
            "Feature %s updated (matched=%d, modified=%d)",
            feature_id,
            result.matched_count,
            result.modified_count,
        )

    async def delete_feature(self, feature_id: str) -> None:
        collection = self.require_collection()
        object_id = parse_object_id(feature_id)

        try:
            with pymongo.timeout(self.operation_timeout):
                result = await collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            raise DatabaseError(message=str(e), context={"operation": "delete_one"}) from e

        logger.info("Feature %s deleted (deleted=%d)", feature_id, result.deleted_count)


# ── Dependency ────────────────────────────────────────────────────────────
def get_feature_service(database: Database = Depends(get_database)) -> FeatureService:
    """FastAPI dependency building a FeatureService over the startup handle."""
    return FeatureService(
        collection=database.collection,
        operation_timeout=settings.mongo_operation_timeout,
    )
