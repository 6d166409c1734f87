"""
GeoFeatures Backend — Custom Exception Hierarchy
==================================================

What:  Defines application-specific exceptions for the feature API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": "<message>"}` bodies with the matching status code.
Who:   Raised by the database layer and FeatureService; caught by global handlers.

Exception Hierarchy:
    GeoFeaturesError (base)
    ├── ValidationError            → 400 Bad Request (client can fix)
    ├── DatabaseUnavailableError   → 500 (no database handle established)
    └── DatabaseError              → 500 (driver failure, message passed through)
"""

from typing import Any, Dict, Optional


class GeoFeaturesError(Exception):
    """
    Base exception for all GeoFeatures application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GeoFeaturesError):
    """
    Raised when client input fails validation before any database access.

    When:    Path identifier is not a valid ObjectId string.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Invalid ID format"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseUnavailableError(GeoFeaturesError):
    """
    Raised when an operation needs the database but no handle exists.

    When:    Startup connection failed and the app is running in degraded mode,
             or startup itself when `database_required` is set.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Database not connected",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(GeoFeaturesError):
    """
    Raised when a database call fails (network error, timeout, driver error).

    The driver's message is kept verbatim as `message` and is returned to
    the client; the operation name goes into `context` for the server log.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
