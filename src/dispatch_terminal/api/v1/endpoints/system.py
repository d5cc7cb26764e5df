"""System endpoints exposing public runtime configuration."""

from __future__ import annotations

from fastapi import APIRouter

from dispatch_terminal.core.settings import settings
from dispatch_terminal.models import Period

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of runtime configuration.

    Excludes secrets and connection strings; the terminal uses it to render
    zone pickers and period tabs.

    Returns:
        Dictionary with app metadata, periods, zones and report defaults
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "timezone": settings.timezone,
            "admin_login_enabled": settings.admin_login_enabled,
        },
        "periods": [{"slug": period.slug, "label": period.value} for period in Period],
        "zones": settings.zones,
        "frequency_companies": settings.frequency_companies,
        "reports": {
            "recent_exits_limit": settings.recent_exits_limit,
            "history_default_days": settings.history_default_days,
            "productivity_default_days": settings.productivity_default_days,
        },
        "purge": {"challenge_ttl_seconds": settings.purge_challenge_ttl_seconds},
    }
