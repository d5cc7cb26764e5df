"""Queue endpoints: listing, joining, reordering and exits."""

from __future__ import annotations

from collections.abc import Iterable

from fastapi import APIRouter, Path, status

from dispatch_terminal.api.v1.dependencies import (
    ChangeFeedDep,
    PeriodDep,
    PrincipalDep,
    SessionDep,
    raise_http,
)
from dispatch_terminal.models import ExitLog, Period, QueueEntry
from dispatch_terminal.schemas.exit_log import ExitCreate, ExitLogResponse
from dispatch_terminal.schemas.queue import (
    QueueAdd,
    QueueEntryResponse,
    QueueMove,
    QueueReorder,
    QueuesResponse,
)
from dispatch_terminal.services.errors import DispatchError
from dispatch_terminal.services.exits import ExitService
from dispatch_terminal.services.queues import QueueService

router = APIRouter(prefix="/queues", tags=["queues"])


def _entries(rows: Iterable[QueueEntry]) -> list[QueueEntryResponse]:
    return [QueueEntryResponse.model_validate(row) for row in rows]


@router.get("", response_model=QueuesResponse)
async def list_queues(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> QueuesResponse:
    """Return both queues, head first."""
    queues = QueueService(db, principal, feed).list_all()
    return QueuesResponse(
        morning=_entries(queues[Period.MORNING]),
        afternoon=_entries(queues[Period.AFTERNOON]),
    )


@router.get("/{period}", response_model=list[QueueEntryResponse])
async def list_queue(
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> list[QueueEntryResponse]:
    return _entries(QueueService(db, principal, feed).list_queue(period))


@router.post(
    "/{period}",
    response_model=QueueEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_queue(
    payload: QueueAdd,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> QueueEntryResponse:
    """Put a driver at the tail of the period's queue.

    Raises:
        HTTPException: 404 for an unknown driver, 409 if already queued
    """
    try:
        entry = QueueService(db, principal, feed).add(payload.driver_id, period)
    except DispatchError as err:
        raise_http(err)
    return QueueEntryResponse.model_validate(entry)


@router.delete("/entries/{queue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def leave_queue(
    queue_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> None:
    """Remove a queue row without recording an exit."""
    try:
        QueueService(db, principal, feed).remove(queue_id)
    except DispatchError as err:
        raise_http(err)


@router.delete("/{period}/positions/{position}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_at_position(
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    position: int = Path(..., ge=1, description="1-based position, 1 = head"),
) -> None:
    try:
        QueueService(db, principal, feed).remove_at(period, position)
    except DispatchError as err:
        raise_http(err)


@router.put("/{period}/order", response_model=list[QueueEntryResponse])
async def reorder_queue(
    payload: QueueReorder,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> list[QueueEntryResponse]:
    """Rewrite the queue so the listed rows come first, in the given order."""
    try:
        rows = QueueService(db, principal, feed).reorder(period, payload.queue_ids)
    except (DispatchError, ValueError) as err:
        raise_http(err)
    return _entries(rows)


@router.post("/{period}/move", response_model=list[QueueEntryResponse])
async def move_entry(
    payload: QueueMove,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> list[QueueEntryResponse]:
    """Drag-and-drop: move the row at ``from_index`` to ``to_index``."""
    try:
        rows = QueueService(db, principal, feed).move(
            period, payload.from_index, payload.to_index
        )
    except (DispatchError, ValueError) as err:
        raise_http(err)
    return _entries(rows)


@router.post("/{period}/entries/{queue_id}/top", response_model=list[QueueEntryResponse])
async def move_entry_to_top(
    queue_id: str,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> list[QueueEntryResponse]:
    try:
        rows = QueueService(db, principal, feed).move_to_top(period, queue_id)
    except DispatchError as err:
        raise_http(err)
    return _entries(rows)


@router.post("/{period}/entries/{queue_id}/up", response_model=list[QueueEntryResponse])
async def move_entry_up(
    queue_id: str,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> list[QueueEntryResponse]:
    try:
        rows = QueueService(db, principal, feed).move_up(period, queue_id)
    except DispatchError as err:
        raise_http(err)
    return _entries(rows)


@router.post(
    "/{period}/exit",
    response_model=ExitLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_exit(
    payload: ExitCreate,
    period: PeriodDep,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> ExitLog:
    """Dispatch the driver at the head of the queue to a zone.

    Raises:
        HTTPException: 409 when the queue is empty or ``queue_id`` is not the head
    """
    try:
        return ExitService(db, principal, feed).record_exit(period, payload)
    except DispatchError as err:
        raise_http(err)
