"""
GeoFeatures Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ GET/POST/PUT/DELETE features │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ DB unavailable→500 │ DB→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Connect to MongoDB (degraded mode or fatal, per database_required)
    3. Store the handle on app.state

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import connect
from app.exceptions import (
    DatabaseError,
    DatabaseUnavailableError,
    GeoFeaturesError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import NO_REQUEST_ID, RequestIDLogFilter, RequestIDMiddleware
from app.routes import features, health

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before the database connection.
    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s

    The request_id field is filled by RequestIDLogFilter on the handler, so
    records from third-party loggers carry it too.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Third-party libraries that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the persistence handle on startup and close it on shutdown.

    With `database_required` set, DatabaseUnavailableError propagates out of
    here and the server refuses to start.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("GeoFeatures Backend %s starting up...", __version__)

    app.state.database = await connect(settings)
    if not app.state.database.connected:
        logger.warning("Degraded mode: reads return [], writes return 500")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("GeoFeatures Backend shutting down...")
    await app.state.database.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Collapse pydantic error entries into one message.

    Example:
        [{"loc": ("body", "lat"), "msg": "Input should be a valid number"}]
        → "lat: Input should be a valid number"
    """
    parts = []
    for error in errors:
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request body"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers.

    Handler hierarchy:
        ValidationError           → 400 (bad path id)
        RequestValidationError    → 400 (malformed or ill-typed body)
        DatabaseUnavailableError  → 500 (degraded mode)
        DatabaseError             → 500 (driver message passed through)
        GeoFeaturesError (base)   → 500
        Exception (fallback)      → 500

    Every body has the shape {"error": "<message>"}.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = format_validation_errors(exc.errors())
        logger.warning("Malformed request: %s", message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(DatabaseUnavailableError)
    async def handle_database_unavailable(request: Request, exc: DatabaseUnavailableError):
        logger.error("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(GeoFeaturesError)
    async def handle_app_error(request: Request, exc: GeoFeaturesError):
        logger.error("Application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack, so the ContextVar is already reset
        rid = getattr(request.state, "request_id", NO_REQUEST_ID)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    Tests call this directly to get a fresh instance per test.
    """
    app = FastAPI(
        title="GeoFeatures API",
        description="CRUD API over named geospatial point features stored in MongoDB.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(features.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
