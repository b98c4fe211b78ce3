"""
api/main.py -- FastAPI application entry point for ClientDesk.

Exposes user registration/login and token-protected client CRUD over HTTP.

Run with:  python main.py serve
           uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware     -- adds CORS headers for the configured browser origins
  2. log_requests       -- one log line per request with status and latency

Lifespan handles startup (settings, engine, schema step, stores) and shutdown
(engine disposal) symmetrically.
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

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.clients import router as clients_router
from auth.store import UserStore
from core.config import get_settings
from core.database import create_db_engine, migrate, ping
from crm.store import ClientStore

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("clientdesk.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build every application-level resource before the first request.

    Startup order matters:
      1. Settings -- everything below reads from it.
      2. Engine and schema step -- tables must exist before stores are used.
      3. Stores -- share the one engine.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info("ClientDesk API starting up")
    app.state.settings = settings

    engine = create_db_engine(settings)
    if settings.auto_migrate:
        migrate(engine)
    app.state.engine = engine
    app.state.user_store = UserStore(engine)
    app.state.client_store = ClientStore(engine)

    yield

    engine.dispose()
    logger.info("ClientDesk API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="ClientDesk API",
    description="User registration, token login, and client record management.",
    version=__version__,
    lifespan=lifespan,
)

# CORS origins are read at import time because middleware cannot be added
# once the application has started.
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
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

app.include_router(auth_router, tags=["Auth"])
app.include_router(clients_router, tags=["Clients"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _public_errors(exc: RequestValidationError) -> list[dict]:
    # "input" echoes the submitted value (passwords included)
    return [{k: v for k, v in err.items() if k not in ("input", "ctx")} for err in exc.errors()]


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when request body or path params fail validation."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=str(_public_errors(exc)),
            )
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return a structured error for all FastAPI/Starlette HTTP exceptions.

    auth/dependencies.py raises HTTPException with a structured dict detail.
    When detail is already a dict, use it directly as the error field rather
    than stringifying it.
    """
    if isinstance(exc.detail, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=f"http_{exc.status_code}",
                message=str(exc.detail),
            )
        ).model_dump(exclude_none=True),
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors (hashing, token, driver faults).

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(exclude_none=True),
    )


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable and
# never behind the token dependency.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version, and database reachability."""
    db_ok = ping(request.app.state.engine)
    return HealthResponse(
        version=__version__,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
