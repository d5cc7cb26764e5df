# src/dispatch_terminal/services/drivers.py
"""Driver registry operations."""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from dispatch_terminal.models import Driver, ExitLog, QueueEntry
from dispatch_terminal.schemas.driver import DriverCreate, DriverUpdate
from dispatch_terminal.services.changefeed import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    TABLE_DRIVERS,
    TABLE_EXIT_LOGS,
    TABLE_QUEUES,
    ChangeFeed,
    get_change_feed,
)
from dispatch_terminal.services.errors import NotFoundError
from dispatch_terminal.services.tenancy import Principal, contains, scoped, tenant_for_new_row

logger = logging.getLogger(__name__)


class DriverService:
    """Create, edit, search and delete drivers within the caller's tenant."""

    def __init__(
        self,
        db: Session,
        principal: Principal,
        feed: ChangeFeed | None = None,
    ) -> None:
        self.db = db
        self.principal = principal
        self.feed = feed or get_change_feed()

    def list_drivers(self, search: str | None = None) -> list[Driver]:
        """Return drivers sorted by name, optionally filtered by a substring."""
        query = scoped(self.db.query(Driver), Driver, self.principal)
        text = (search or "").strip()
        if text:
            query = query.filter(
                or_(
                    contains(Driver.name, text),
                    contains(Driver.fleet_number, text),
                    contains(Driver.registration, text),
                    contains(Driver.company, text),
                )
            )
        return query.order_by(Driver.name, Driver.id).all()

    def get(self, driver_id: str) -> Driver:
        driver = (
            scoped(self.db.query(Driver), Driver, self.principal)
            .filter(Driver.id == driver_id)
            .first()
        )
        if driver is None:
            raise NotFoundError("Driver not found")
        return driver

    def create(self, payload: DriverCreate) -> Driver:
        driver = Driver(
            name=payload.name,
            fleet_number=payload.fleet_number,
            registration=payload.registration,
            company=payload.company,
            tenant_id=tenant_for_new_row(self.principal),
        )
        self.db.add(driver)
        self.db.commit()
        self.db.refresh(driver)
        logger.info("Registered driver %s", driver.name)
        self.feed.notify(TABLE_DRIVERS, EVENT_INSERT, driver.id, driver.tenant_id)
        return driver

    def update(self, driver_id: str, payload: DriverUpdate) -> Driver:
        """Replace a driver's fields. Past exit logs keep their snapshot."""
        driver = self.get(driver_id)
        driver.name = payload.name
        driver.fleet_number = payload.fleet_number
        driver.registration = payload.registration
        driver.company = payload.company
        self.db.commit()
        self.db.refresh(driver)
        self.feed.notify(TABLE_DRIVERS, EVENT_UPDATE, driver.id, driver.tenant_id)
        return driver

    def delete(self, driver_id: str) -> dict[str, int]:
        """Delete a driver with their queue rows and exit history.

        All three deletions share one transaction.

        Returns:
            Number of rows removed per table.
        """
        driver = self.get(driver_id)
        tenant_id = driver.tenant_id
        try:
            queues = (
                self.db.query(QueueEntry)
                .filter(QueueEntry.driver_id == driver_id)
                .delete(synchronize_session=False)
            )
            logs = (
                self.db.query(ExitLog)
                .filter(ExitLog.driver_id == driver_id)
                .delete(synchronize_session=False)
            )
            self.db.delete(driver)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Deleted driver %s (%d queue rows, %d exit logs)", driver_id, queues, logs)
        if queues:
            self.feed.notify(TABLE_QUEUES, EVENT_DELETE, None, tenant_id)
        if logs:
            self.feed.notify(TABLE_EXIT_LOGS, EVENT_DELETE, None, tenant_id)
        self.feed.notify(TABLE_DRIVERS, EVENT_DELETE, driver_id, tenant_id)
        return {TABLE_QUEUES: queues, TABLE_EXIT_LOGS: logs, TABLE_DRIVERS: 1}
