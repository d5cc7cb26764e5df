"""Reporting and export endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Query, Response

from dispatch_terminal.api.v1.dependencies import (
    ChangeFeedDep,
    PrincipalDep,
    SessionDep,
    raise_http,
)
from dispatch_terminal.core.settings import settings
from dispatch_terminal.db.time import today
from dispatch_terminal.schemas.driver import DriverResponse
from dispatch_terminal.schemas.exit_log import ExitLogResponse
from dispatch_terminal.schemas.reports import (
    DailySummary,
    ProductivityReport,
    QueueFrequencyReport,
)
from dispatch_terminal.services import export, reports
from dispatch_terminal.services.drivers import DriverService
from dispatch_terminal.services.errors import DispatchError
from dispatch_terminal.services.export import ExportFormat
from dispatch_terminal.services.exits import ExitService
from dispatch_terminal.services.queues import QueueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _file_response(content: bytes, fmt: ExportFormat, stem: str) -> Response:
    filename = f"{stem}.{fmt.value}"
    return Response(
        content=content,
        media_type=fmt.media_type,
        headers={"Content-Disposition": export.content_disposition(filename)},
    )


@router.get("/daily", response_model=DailySummary)
async def daily_report(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    day: str | None = Query(None, description="Day to summarise, YYYY-MM-DD (default today)"),
) -> DailySummary:
    """Summarise the exits of a single day."""
    target = day or today().isoformat()
    try:
        date.fromisoformat(target)
    except ValueError as err:
        raise_http(err)
    logs = ExitService(db, principal, feed).for_date(target)
    summary = reports.daily_summary(target, logs)
    summary["logs"] = [ExitLogResponse.model_validate(log) for log in logs]
    return DailySummary(**summary)


@router.get("/history/export")
async def export_history(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    fmt: ExportFormat = Query(ExportFormat.XLSX),
    start: str | None = Query(None),
    end: str | None = Query(None),
    q: str | None = Query(None),
) -> Response:
    """Download the filtered exit history as a spreadsheet, CSV or document."""
    try:
        first, last = reports.resolve_range(start, end, settings.history_default_days)
    except ValueError as err:
        raise_http(err)

    logs = ExitService(db, principal, feed).history(first, last, q)
    rows = reports.history_rows(logs)
    content = export.render(
        fmt,
        rows,
        reports.HISTORY_COLUMNS,
        title=export.HISTORY_TITLE,
        doc_header=export.HISTORY_DOC_HEADER,
        doc_rows=export.history_document_rows(rows),
    )
    logger.info("Exported %d history rows as %s", len(rows), fmt.value)
    return _file_response(content, fmt, f"Historico_{first}_a_{last}")


@router.get("/productivity/{driver_id}", response_model=ProductivityReport)
async def driver_productivity(
    driver_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    start: str | None = Query(None),
    end: str | None = Query(None),
) -> ProductivityReport:
    """Exits, volume and zone spread for one driver (default: the last 7 days)."""
    try:
        first, last = reports.resolve_range(start, end, settings.productivity_default_days)
        driver = DriverService(db, principal, feed).get(driver_id)
    except (DispatchError, ValueError) as err:
        raise_http(err)

    logs = ExitService(db, principal, feed).for_driver(driver_id, first, last)
    return ProductivityReport(
        driver=DriverResponse.model_validate(driver),
        start=first,
        end=last,
        stats=reports.productivity_stats(logs),
        zone_frequencies=reports.zone_frequencies(logs),
        daily_volume=reports.daily_volume(logs),
        logs=[ExitLogResponse.model_validate(log) for log in logs],
    )


@router.get("/productivity/{driver_id}/export")
async def export_productivity(
    driver_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    fmt: ExportFormat = Query(ExportFormat.XLSX),
    start: str | None = Query(None),
    end: str | None = Query(None),
) -> Response:
    try:
        first, last = reports.resolve_range(start, end, settings.productivity_default_days)
        driver = DriverService(db, principal, feed).get(driver_id)
    except (DispatchError, ValueError) as err:
        raise_http(err)

    logs = ExitService(db, principal, feed).for_driver(driver_id, first, last)
    rows = reports.productivity_rows(logs)
    content = export.render(
        fmt,
        rows,
        reports.PRODUCTIVITY_COLUMNS,
        title=export.PRODUCTIVITY_TITLE,
        subtitle=f"Entregador: {driver.name}",
        doc_header=export.PRODUCTIVITY_DOC_HEADER,
        doc_rows=export.productivity_document_rows(rows),
    )
    stem = f"Produtividade_{export.safe_filename_part(driver.name)}_{first}_a_{last}"
    return _file_response(content, fmt, stem)


@router.get("/queue-frequency", response_model=QueueFrequencyReport)
async def queue_frequency(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> QueueFrequencyReport:
    """Where today's tracked-company drivers stand in each period."""
    day = today().isoformat()
    queues = QueueService(db, principal, feed).list_all()
    logs = ExitService(db, principal, feed).for_date(day)
    return QueueFrequencyReport(date=day, periods=reports.queue_frequency(queues, logs))
