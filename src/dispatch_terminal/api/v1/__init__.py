"""Version 1 API endpoints."""

from .endpoints import (
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

__all__ = [
    "auth_router",
    "drivers_router",
    "exit_logs_router",
    "purge_router",
    "queues_router",
    "realtime_router",
    "reports_router",
    "snapshot_router",
    "system_router",
    "tenants_router",
]
