"""
GeoFeatures Backend — Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract for geospatial features.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation.

Stored document shape (collection `features`):
    {"_id": ObjectId, "name": str, "lat": float, "lng": float, "category": str}

JSON shape:
    {"id": "<24 hex chars>", "name": ..., "lat": ..., "lng": ..., "category": ...}
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class FeatureIn(BaseModel):
    """
    What:  The four mutable fields of a feature.
    Who:   Request body of POST /api/features and PUT /api/features/{id}.

    Validation:
        - Strict types: "1.5" is rejected for lat/lng, 7 is rejected for name.
          Integers are accepted for lat/lng.
        - Omitted fields take their zero value ("" or 0.0); an update writes
          those zero values, there is no partial patch.
        - No range check on lat/lng.
        - A client-supplied "id" (and any other unknown key) is ignored.
    """
    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(default="", description="Display label")
    lat: float = Field(default=0.0, description="Latitude (not range checked)")
    lng: float = Field(default=0.0, description="Longitude (not range checked)")
    category: str = Field(default="", description="Free-text classification")

    def to_document(self) -> Dict[str, Any]:
        """Mutable fields as a MongoDB document (no `_id`)."""
        return {
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "category": self.category,
        }


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class Feature(BaseModel):
    """
    What:  Full representation of a stored feature.
    Who:   Returned by GET /api/features (array) and POST /api/features.
    """
    id: str = Field(description="Identifier assigned by the database (ObjectId hex)")
    name: str = Field(default="")
    lat: float = Field(default=0.0)
    lng: float = Field(default=0.0)
    category: str = Field(default="")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Feature":
        """
        Build a Feature from a stored document.

        Missing fields fall back to their zero value. Raises pydantic's
        ValidationError when a stored field has an incompatible type.
        """
        data = {key: document[key] for key in ("name", "lat", "lng", "category") if key in document}
        return cls(id=str(document.get("_id", "")), **data)


class MessageResponse(BaseModel):
    """Success acknowledgement returned by update and delete."""
    message: str = Field(description="Human-readable success message")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {"error": "Invalid ID format"}
    """
    error: str = Field(description="Error description")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health.

    status is "healthy" when the database answers a ping and "degraded"
    when the service is running without one.
    """
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
