"""Logging configuration and request timing middleware."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

from dispatch_terminal.core.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("dispatch_terminal.requests")


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger hierarchy."""
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger("dispatch_terminal")
    root.setLevel(resolved)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def add_request_logging(app: FastAPI) -> FastAPI:
    """Log method, path, status and duration of every HTTP request."""

    @app.middleware("http")
    async def log_request_time(request: Request, call_next):  # type: ignore[no-untyped-def]
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        client_ip = request.client.host if request.client else "-"
        logger.info(
            "IP=%s | %s %s | Status=%s | Time=%.4fs",
            client_ip,
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        response.headers["X-Process-Time"] = str(round(process_time, 4))
        return response

    return app
