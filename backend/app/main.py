"""
app/main.py
────────────
FastAPI application factory.

All business logic lives in ``analytics.forecasting``; the HTTP layer in
``app/api/v1/endpoints/``.  This file is intentionally slim — it wires
together middleware, routers, and lifecycle events only.

API Layout
----------
GET  /                     Health check
POST /api/v1/forecast/     Linear-trend price forecast

Run
---
    cd backend
    uvicorn app.main:app --reload

OpenAPI docs
------------
- Swagger UI:  http://localhost:8000/docs
- ReDoc:       http://localhost:8000/redoc
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from core.config import get_settings
from core.logging import configure_logging

logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application startup and shutdown logic.

    Startup:  Configure logging from settings.
    Shutdown: Nothing to release; the engine holds no resources.
    """
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "Starting %s v%s (debug=%s)",
        settings.APP_TITLE,
        settings.APP_VERSION,
        settings.DEBUG,
    )

    yield  # ← application runs here

    logger.info("Shutting down %s", settings.APP_TITLE)


# ── App factory ───────────────────────────────────────────────────────────────

settings = get_settings()

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(api_router, prefix="/api/v1")

# ── Root health-check ─────────────────────────────────────────────────────────


@app.get("/", tags=["health"], summary="Health check")
def health_check() -> dict:
    """
    Lightweight liveness probe.

    Returns:
        Status and current API version.
    """
    return {"status": "ok", "version": settings.APP_VERSION}
