# src/dispatch_terminal/services/exits.py
"""Recording, adjusting and querying driver exits."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from dispatch_terminal.core.settings import settings
from dispatch_terminal.db.time import local_date, now_ms
from dispatch_terminal.models import ExitLog, Period
from dispatch_terminal.schemas.exit_log import ExitCreate
from dispatch_terminal.services.changefeed import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    TABLE_EXIT_LOGS,
    TABLE_QUEUES,
    ChangeFeed,
    get_change_feed,
)
from dispatch_terminal.services.errors import ConflictError, NotFoundError, QueueEmptyError
from dispatch_terminal.services.queues import QueueService
from dispatch_terminal.services.tenancy import Principal, contains, scoped, tenant_for_new_row

logger = logging.getLogger(__name__)


def adjusted_count(current: int, delta: int) -> int:
    """Apply ``delta`` to an order count, never going below zero."""
    return max(0, current + delta)


class ExitService:
    """Moves drivers from a queue into the exit history."""

    def __init__(
        self,
        db: Session,
        principal: Principal,
        feed: ChangeFeed | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.db = db
        self.principal = principal
        self.feed = feed or get_change_feed()
        self.clock = clock

    def _query(self) -> Query[ExitLog]:
        return scoped(self.db.query(ExitLog), ExitLog, self.principal)

    def record_exit(self, period: Period, payload: ExitCreate) -> ExitLog:
        """Dispatch the driver at the head of ``period``'s queue.

        The log insert and the queue row removal commit together, so a failed
        write leaves the driver in the queue.

        Raises:
            QueueEmptyError: If nobody is waiting.
            ConflictError: If ``payload.queue_id`` is given and is not the head.
        """
        queue = QueueService(self.db, self.principal, self.feed, self.clock).list_queue(period)
        if not queue:
            raise QueueEmptyError(f"The {period.value} queue is empty")
        head = queue[0]
        if payload.queue_id is not None and payload.queue_id != head.id:
            raise ConflictError("Only the driver at the head of the queue can exit")

        driver = head.driver
        if driver is None:
            raise NotFoundError("Driver not found")
        exit_time = self.clock()
        log = ExitLog(
            driver_id=driver.id,
            name=driver.name,
            fleet_number=driver.fleet_number,
            registration=driver.registration,
            company=driver.company,
            zone=payload.zone,
            dt_number=payload.dt_number,
            orders_count=payload.orders_count,
            period=period,
            exit_time=exit_time,
            date=local_date(exit_time),
            tenant_id=tenant_for_new_row(self.principal, head.tenant_id),
        )
        queue_id = head.id
        queue_tenant = head.tenant_id
        try:
            self.db.add(log)
            self.db.delete(head)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Exit for driver %s failed; queue left untouched", driver.id)
            raise
        self.db.refresh(log)

        logger.info(
            "Driver %s left the %s queue for zone %s with %d orders",
            log.name,
            period.value,
            log.zone,
            log.orders_count,
        )
        self.feed.notify(TABLE_EXIT_LOGS, EVENT_INSERT, log.id, log.tenant_id)
        self.feed.notify(TABLE_QUEUES, EVENT_DELETE, queue_id, queue_tenant)
        return log

    def get(self, log_id: str) -> ExitLog:
        log = self._query().filter(ExitLog.id == log_id).first()
        if log is None:
            raise NotFoundError("Exit log not found")
        return log

    def adjust_volume(self, log_id: str, delta: int) -> ExitLog:
        log = self.get(log_id)
        log.orders_count = adjusted_count(log.orders_count, delta)
        self.db.commit()
        self.db.refresh(log)
        self.feed.notify(TABLE_EXIT_LOGS, EVENT_UPDATE, log.id, log.tenant_id)
        return log

    def delete(self, log_id: str) -> None:
        log = self.get(log_id)
        tenant_id = log.tenant_id
        self.db.delete(log)
        self.db.commit()
        self.feed.notify(TABLE_EXIT_LOGS, EVENT_DELETE, log_id, tenant_id)

    def recent(self, limit: int | None = None) -> list[ExitLog]:
        """Return the latest exits, newest first."""
        size = limit if limit is not None else settings.recent_exits_limit
        return (
            self._query()
            .order_by(ExitLog.exit_time.desc(), ExitLog.id)
            .limit(size)
            .all()
        )

    def history(self, start: str, end: str, search: str | None = None) -> list[ExitLog]:
        """Return exits dated within ``[start, end]``, newest first.

        ``search`` matches name, DT number or zone, case-insensitively.
        """
        query = self._query().filter(ExitLog.date >= start, ExitLog.date <= end)
        text = (search or "").strip()
        if text:
            query = query.filter(
                or_(
                    contains(ExitLog.name, text),
                    contains(ExitLog.dt_number, text),
                    contains(ExitLog.zone, text),
                )
            )
        return query.order_by(ExitLog.exit_time.desc(), ExitLog.id).all()

    def for_driver(self, driver_id: str, start: str, end: str) -> list[ExitLog]:
        """Return one driver's exits in ``[start, end]``, oldest first."""
        return (
            self._query()
            .filter(
                ExitLog.driver_id == driver_id,
                ExitLog.date >= start,
                ExitLog.date <= end,
            )
            .order_by(ExitLog.exit_time, ExitLog.id)
            .all()
        )

    def for_date(self, day: str) -> list[ExitLog]:
        return self._query().filter(ExitLog.date == day).order_by(ExitLog.exit_time).all()
