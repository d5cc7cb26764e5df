# src/dispatch_terminal/main.py
"""Main entry point for the Dispatch Terminal application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from dispatch_terminal.api.v1 import (
    auth_router,
    drivers_router,
    exit_logs_router,
    purge_router,
    queues_router,
    realtime_router,
    reports_router,
    snapshot_router,
    system_router,
    tenants_router,
)
from dispatch_terminal.core.logging import add_request_logging, configure_logging
from dispatch_terminal.core.settings import settings
from dispatch_terminal.db.session import create_tables

logger = logging.getLogger(__name__)

configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title="Dispatch Terminal API",
    description="Morning and afternoon dispatch queues for delivery drivers",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

add_request_logging(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(tenants_router, prefix="/api/v1")
app.include_router(snapshot_router, prefix="/api/v1")
app.include_router(drivers_router, prefix="/api/v1")
app.include_router(queues_router, prefix="/api/v1")
app.include_router(exit_logs_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(purge_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Morning and afternoon dispatch queues for delivery drivers",
        "docs": "/docs",
        "redoc": "/redoc",
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("dispatch_terminal.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    run()
