"""
api/main.py -- FastAPI application entry point for the library catalogue.

Run with:      python main.py serve
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- adds CORS headers for allowed browser origins
  2. log_requests    -- one log line per request with status and latency

Lifespan handles startup (database handle, stores, admin seed) and shutdown
(dispose the engine) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse, MessageResponse
from api.routes.v1.auth import router as auth_router
from api.routes.v1.books import router as books_router
from auth.seed import ensure_admin
from auth.store import UserStore
from catalogue.store import CatalogueStore
from core.config import get_settings
from core.database import Database
from core.errors import CatalogueError

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("libcat.api")

# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Startup order matters:
      1. Database handle first -- both stores share its engine.
      2. Stores second -- each creates its own tables if missing.
      3. Admin seed last -- needs the user store.
    """
    settings = get_settings()
    logger.info("Library catalogue API starting up")
    app.state.db = Database(settings.database_url)
    app.state.user_store = UserStore(app.state.db)
    app.state.catalogue = CatalogueStore(app.state.db)
    logger.info("Stores initialized")
    ensure_admin(app.state.user_store, settings.admin_name, settings.admin_email, settings.admin_password)

    yield

    app.state.db.close()
    logger.info("Library catalogue API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Library Catalogue API",
    description="Book catalogue with student/admin accounts.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time around call_next gives latency per response.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
app.include_router(books_router, prefix="/api/v1", tags=["Books"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse body ({"message", "code"}) so
# clients can read errors uniformly.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, code=code, detail=detail).model_dump(exclude_none=True),
    )


@app.exception_handler(CatalogueError)
async def catalogue_error_handler(request: Request, exc: CatalogueError) -> JSONResponse:
    """Map domain errors (validation, conflict, auth, not found) to their status codes."""
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body, path or query params fail validation.

    Only loc, msg and type are echoed back; the submitted value (which may
    be a password) never leaves the server.
    """
    errors = [{key: err[key] for key in ("loc", "msg", "type") if key in err} for err in exc.errors()]
    return _error(400, "validation_error", "Request validation failed.", str(errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes (404) and wrong methods (405) get the same error body."""
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is logged server-side only, never written to the
    response body. The client receives only a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "Server error. Please try again.")


# ---------------------------------------------------------------------------
# Root and health endpoints
#
# Defined directly in main.py (not in a router) so they are always reachable
# regardless of router registration state.
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def root() -> MessageResponse:
    return MessageResponse(message="Digital Library Catalogue API is running")


@app.get("/api/v1/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version and database reachability."""
    db_ok = request.app.state.db.ping()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=API_VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
