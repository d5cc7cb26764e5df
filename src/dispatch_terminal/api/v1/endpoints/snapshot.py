"""Full-state snapshot used when the terminal loads."""

from __future__ import annotations

from fastapi import APIRouter

from dispatch_terminal.api.v1.dependencies import ChangeFeedDep, PrincipalDep, SessionDep
from dispatch_terminal.db.time import now_ms
from dispatch_terminal.models import Period
from dispatch_terminal.schemas.driver import DriverResponse
from dispatch_terminal.schemas.exit_log import ExitLogResponse
from dispatch_terminal.schemas.queue import QueueEntryResponse
from dispatch_terminal.schemas.snapshot import SnapshotResponse
from dispatch_terminal.services.drivers import DriverService
from dispatch_terminal.services.exits import ExitService
from dispatch_terminal.services.queues import QueueService

router = APIRouter(prefix="/snapshot", tags=["sync"])


@router.get("", response_model=SnapshotResponse)
async def get_snapshot(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> SnapshotResponse:
    """Return both queues, all drivers and the latest exits in one payload."""
    queues = QueueService(db, principal, feed).list_all()
    drivers = DriverService(db, principal, feed).list_drivers()
    recent = ExitService(db, principal, feed).recent()
    return SnapshotResponse(
        morning=[QueueEntryResponse.model_validate(e) for e in queues[Period.MORNING]],
        afternoon=[QueueEntryResponse.model_validate(e) for e in queues[Period.AFTERNOON]],
        drivers=[DriverResponse.model_validate(d) for d in drivers],
        recent_exits=[ExitLogResponse.model_validate(log) for log in recent],
        server_time=now_ms(),
    )
