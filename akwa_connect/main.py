"""
Akwa-Connect — FastAPI Application Entry Point

Stateless HTTP front for the compatibility engine:
- Structured request logging, CORS
- Liveness probe
- Matching API under ``/api/v1``
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from akwa_connect.config import get_settings
from akwa_connect.logging_config import configure_logging

configure_logging()

logger: structlog.stdlib.BoundLogger = structlog.get_logger("akwa_connect")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "startup_complete",
        environment=settings.ENVIRONMENT,
        log_level=settings.LOG_LEVEL,
        weights=settings.weights,
    )
    yield
    logger.info("shutdown_complete")


# ---------------------------------------------------------------------------
# Middleware classes
# ---------------------------------------------------------------------------

def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        log = logger.bind(method=request.method, path=request.url.path)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request_error", duration_ms=_elapsed_ms(start))
            raise

        log.info(
            "request_handled",
            status=response.status_code,
            duration_ms=_elapsed_ms(start),
        )
        return response


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

settings = get_settings()

app = FastAPI(
    title="Akwa-Connect",
    description="Compatibility scoring and match ranking",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- Middleware (applied in reverse order, last added runs first) ---------- #

app.add_middleware(StructuredLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
async def health_liveness() -> dict:
    """Liveness probe: healthy while the process is running."""
    return {"status": "healthy"}


# -- API router ------------------------------------------------------------ #

from akwa_connect.api.router import router as api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
