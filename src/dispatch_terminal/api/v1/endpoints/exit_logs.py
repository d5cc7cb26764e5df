"""Exit log endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from dispatch_terminal.api.v1.dependencies import (
    ChangeFeedDep,
    PrincipalDep,
    SessionDep,
    raise_http,
)
from dispatch_terminal.core.settings import settings
from dispatch_terminal.models import ExitLog
from dispatch_terminal.schemas.exit_log import ExitLogResponse, VolumeAdjust
from dispatch_terminal.services.errors import DispatchError
from dispatch_terminal.services.exits import ExitService
from dispatch_terminal.services.reports import resolve_range

router = APIRouter(prefix="/exit-logs", tags=["exit logs"])


@router.get("/recent", response_model=list[ExitLogResponse])
async def recent_exits(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    limit: int | None = Query(None, ge=1, le=500),
) -> list[ExitLog]:
    """Return the latest exits, newest first."""
    return ExitService(db, principal, feed).recent(limit)


@router.get("", response_model=list[ExitLogResponse])
async def exit_history(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    start: str | None = Query(None, description="First day, YYYY-MM-DD"),
    end: str | None = Query(None, description="Last day, YYYY-MM-DD"),
    q: str | None = Query(None, description="Match name, DT number or zone"),
) -> list[ExitLog]:
    """Return exits in an inclusive date range (default: the last 30 days)."""
    try:
        first, last = resolve_range(start, end, settings.history_default_days)
    except ValueError as err:
        raise_http(err)
    return ExitService(db, principal, feed).history(first, last, q)


@router.patch("/{log_id}/volume", response_model=ExitLogResponse)
async def adjust_volume(
    log_id: str,
    payload: VolumeAdjust,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> ExitLog:
    """Add ``delta`` to an exit's order count, flooring at zero."""
    try:
        return ExitService(db, principal, feed).adjust_volume(log_id, payload.delta)
    except DispatchError as err:
        raise_http(err)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exit(
    log_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> None:
    try:
        ExitService(db, principal, feed).delete(log_id)
    except DispatchError as err:
        raise_http(err)
