"""
GeoFeatures Backend — Feature Route Handlers
==============================================

What:  CRUD endpoints for geospatial point features.
How:   Extracts path/body, delegates to FeatureService, returns JSON.
Who:   Called by the map frontend.

Route Inventory:
    GET    /api/features        list all features
    POST   /api/features        create a feature
    PUT    /api/features/{id}   replace name/lat/lng/category
    DELETE /api/features/{id}   remove a feature

Check order for write routes:
    1. Database handle present      else 500 {"error": "Database not connected"}
    2. Path id is a valid ObjectId  else 400 {"error": "Invalid ID format"}
    3. Body parses into FeatureIn   else 400 {"error": "<field>: <reason>"}

    The body is read from the raw request inside the handler so that steps 1
    and 2 run first; a `payload: FeatureIn` parameter would be validated by
    FastAPI before the handler is entered.
"""

import logging
from typing import Any, Dict, List

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError

from app.schemas.feature import ErrorResponse, Feature, FeatureIn, MessageResponse
from app.services.feature_service import FeatureService, get_feature_service, parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Features"])

# Documents the manually parsed body in the OpenAPI schema
FEATURE_BODY_OPENAPI: Dict[str, Any] = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": FeatureIn.model_json_schema()}},
    }
}


async def read_feature_body(request: Request) -> FeatureIn:
    """
    Parse the request body into FeatureIn.

    Raises:
        RequestValidationError: body is not JSON or has ill-typed fields
            (rendered as 400 by the handler in main.py)
    """
    body = await request.body()
    try:
        return FeatureIn.model_validate_json(body)
    except pydantic.ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


@router.get(
    "/features",
    response_model=List[Feature],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all features",
)
async def list_features(
    service: FeatureService = Depends(get_feature_service),
) -> List[Feature]:
    """
    Return every stored feature, unfiltered and unpaginated.

    When the service runs without a database this is an empty array.
    """
    return await service.list_features()


@router.post(
    "/features",
    response_model=Feature,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Database unavailable or failed", "model": ErrorResponse},
    },
    summary="Create a feature",
    openapi_extra=FEATURE_BODY_OPENAPI,
)
async def create_feature(
    request: Request,
    service: FeatureService = Depends(get_feature_service),
) -> Feature:
    service.require_collection()
    payload = await read_feature_body(request)
    return await service.create_feature(payload)


@router.put(
    "/features/{feature_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid ID format or malformed body", "model": ErrorResponse},
        500: {"description": "Database unavailable or failed", "model": ErrorResponse},
    },
    summary="Replace a feature's fields",
    openapi_extra=FEATURE_BODY_OPENAPI,
)
async def update_feature(
    feature_id: str,
    request: Request,
    service: FeatureService = Depends(get_feature_service),
) -> MessageResponse:
    """
    Full replacement of name/lat/lng/category.

    Fields missing from the body are written as "" or 0.0. Updating an id
    that does not exist still answers with the success message.
    """
    service.require_collection()
    parse_object_id(feature_id)
    payload = await read_feature_body(request)

    await service.update_feature(feature_id, payload)
    return MessageResponse(message="Feature updated successfully")


@router.delete(
    "/features/{feature_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid ID format", "model": ErrorResponse},
        500: {"description": "Database unavailable or failed", "model": ErrorResponse},
    },
    summary="Delete a feature",
)
async def delete_feature(
    feature_id: str,
    service: FeatureService = Depends(get_feature_service),
) -> MessageResponse:
    await service.delete_feature(feature_id)
    return MessageResponse(message="Feature deleted successfully")
