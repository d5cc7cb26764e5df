# src/dispatch_terminal/services/queues.py
"""Persistence and ordering of the two daily queues."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session

from dispatch_terminal.db.time import now_ms
from dispatch_terminal.models import Driver, Period, QueueEntry
from dispatch_terminal.services import queue_ordering
from dispatch_terminal.services.changefeed import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    TABLE_QUEUES,
    ChangeFeed,
    get_change_feed,
)
from dispatch_terminal.services.errors import ConflictError, NotFoundError
from dispatch_terminal.services.tenancy import Principal, scoped, tenant_for_new_row

logger = logging.getLogger(__name__)


class QueueService:
    """Reads and reorders a tenant's queues.

    A queue is never stored as a list. Its order is recovered by sorting rows
    on ``arrival_time``; every manual reorder rewrites those ranks.
    """

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

    def _rows(self, period: Period | None = None) -> list[QueueEntry]:
        query = scoped(self.db.query(QueueEntry), QueueEntry, self.principal)
        if period is not None:
            query = query.filter(QueueEntry.period == period)
        return query.order_by(QueueEntry.arrival_time, QueueEntry.id).all()

    def list_queue(self, period: Period) -> list[QueueEntry]:
        """Return ``period``'s queue head first, skipping rows whose driver is gone."""
        return [entry for entry in self._rows(period) if entry.driver is not None]

    def list_all(self) -> dict[Period, list[QueueEntry]]:
        return {period: self.list_queue(period) for period in Period}

    def get_entry(self, queue_id: str) -> QueueEntry:
        entry = (
            scoped(self.db.query(QueueEntry), QueueEntry, self.principal)
            .filter(QueueEntry.id == queue_id)
            .first()
        )
        if entry is None:
            raise NotFoundError("Queue entry not found")
        return entry

    def add(self, driver_id: str, period: Period) -> QueueEntry:
        """Append a driver to the tail of ``period``'s queue.

        Raises:
            NotFoundError: If the driver is unknown to the caller.
            ConflictError: If the driver is already waiting in that period.
        """
        driver = (
            scoped(self.db.query(Driver), Driver, self.principal)
            .filter(Driver.id == driver_id)
            .first()
        )
        if driver is None:
            raise NotFoundError("Driver not found")

        rows = self._rows(period)
        if any(row.driver_id == driver_id for row in rows):
            raise ConflictError(f"Driver is already in the {period.value} queue")

        rank = queue_ordering.next_tail_rank([row.arrival_time for row in rows], self.clock())
        entry = QueueEntry(
            driver_id=driver.id,
            period=period,
            arrival_time=rank,
            tenant_id=tenant_for_new_row(self.principal, driver.tenant_id),
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Driver %s joined the %s queue", driver.name, period.value)
        self.feed.notify(TABLE_QUEUES, EVENT_INSERT, entry.id, entry.tenant_id)
        return entry

    def remove(self, queue_id: str) -> None:
        """Take a row out of its queue without logging an exit."""
        entry = self.get_entry(queue_id)
        tenant_id = entry.tenant_id
        self.db.delete(entry)
        self.db.commit()
        self.feed.notify(TABLE_QUEUES, EVENT_DELETE, queue_id, tenant_id)

    def remove_at(self, period: Period, position: int) -> str:
        """Remove the entry at 1-based ``position`` and return its row id."""
        entries = self.list_queue(period)
        if not 1 <= position <= len(entries):
            raise NotFoundError(f"No driver at position {position} in the {period.value} queue")
        queue_id = entries[position - 1].id
        self.remove(queue_id)
        return queue_id

    def reorder(self, period: Period, ordered_ids: Sequence[str]) -> list[QueueEntry]:
        """Rewrite ranks so the queue reads ``ordered_ids`` first.

        Current entries not mentioned keep their relative order behind the
        listed ones.

        Raises:
            ValueError: If an id is repeated or is not in this period's queue.
        """
        entries = self.list_queue(period)
        current = [entry.id for entry in entries]
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValueError("Queue ids must not repeat")
        unknown = [queue_id for queue_id in ordered_ids if queue_id not in current]
        if unknown:
            raise ValueError(f"Not in the {period.value} queue: {', '.join(unknown)}")

        listed = set(ordered_ids)
        final = [*ordered_ids, *(queue_id for queue_id in current if queue_id not in listed)]
        return self._apply(period, entries, final)

    def move(self, period: Period, from_index: int, to_index: int) -> list[QueueEntry]:
        entries = self.list_queue(period)
        try:
            final = queue_ordering.move([e.id for e in entries], from_index, to_index)
        except IndexError as err:
            raise ValueError(str(err)) from err
        return self._apply(period, entries, final)

    def move_to_top(self, period: Period, queue_id: str) -> list[QueueEntry]:
        entries = self.list_queue(period)
        ids = [e.id for e in entries]
        if queue_id not in ids:
            raise NotFoundError("Queue entry not found")
        return self._apply(period, entries, queue_ordering.move_to_top(ids, queue_id))

    def move_up(self, period: Period, queue_id: str) -> list[QueueEntry]:
        entries = self.list_queue(period)
        ids = [e.id for e in entries]
        if queue_id not in ids:
            raise NotFoundError("Queue entry not found")
        return self._apply(period, entries, queue_ordering.move_up(ids, queue_id))

    def _apply(
        self,
        period: Period,
        entries: Sequence[QueueEntry],
        final_ids: Sequence[str],
    ) -> list[QueueEntry]:
        by_id = {entry.id: entry for entry in entries}
        changed: list[QueueEntry] = []
        for queue_id, rank in queue_ordering.assign_ranks(final_ids, self.clock()):
            entry = by_id[queue_id]
            if entry.arrival_time != rank:
                entry.arrival_time = rank
                changed.append(entry)
        self.db.commit()
        for entry in changed:
            self.feed.notify(TABLE_QUEUES, EVENT_UPDATE, entry.id, entry.tenant_id)
        logger.debug("Reordered %s queue (%d rows rewritten)", period.value, len(changed))
        return self.list_queue(period)
