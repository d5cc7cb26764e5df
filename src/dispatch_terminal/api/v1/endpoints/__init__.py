"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .drivers import router as drivers_router
from .exit_logs import router as exit_logs_router
from .purge import router as purge_router
from .queues import router as queues_router
from .realtime import router as realtime_router
from .reports import router as reports_router
from .snapshot import router as snapshot_router
from .system import router as system_router
from .tenants import router as tenants_router

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
