# tests/services/test_drivers.py
"""Tests for the driver registry service."""

import pytest

from dispatch_terminal.models import Driver, ExitLog, Period, QueueEntry
from dispatch_terminal.schemas.driver import DriverCreate, DriverUpdate
from dispatch_terminal.schemas.exit_log import ExitCreate
from dispatch_terminal.services.drivers import DriverService
from dispatch_terminal.services.errors import NotFoundError
from dispatch_terminal.services.exits import ExitService


def test_create_stamps_guest_tenant(db_session, guest, feed) -> None:
    driver = DriverService(db_session, guest, feed).create(
        DriverCreate(name="  Ana  ", fleet_number="F-1", company="Navegam")
    )
    assert driver.name == "Ana"
    assert driver.tenant_id == "tenant-a"
    assert feed.events[-1].table == "drivers"


def test_admin_created_driver_has_no_tenant(db_session, admin, feed) -> None:
    driver = DriverService(db_session, admin, feed).create(DriverCreate(name="Admin Row"))
    assert driver.tenant_id is None


def test_list_is_sorted_and_searchable(db_session, guest, feed, make_driver) -> None:
    make_driver("Carla", company="INNOVATIVE")
    make_driver("Ana")
    make_driver("Bruno", fleet_number="77")
    make_driver("Zeca", tenant_id="tenant-b")

    service = DriverService(db_session, guest, feed)
    assert [d.name for d in service.list_drivers()] == ["Ana", "Bruno", "Carla"]
    assert [d.name for d in service.list_drivers("innov")] == ["Carla"]
    assert [d.name for d in service.list_drivers("77")] == ["Bruno"]


def test_search_treats_wildcards_literally(db_session, guest, feed, make_driver) -> None:
    make_driver("Ana")
    make_driver("100% Bruno")
    make_driver("Carla", registration="M_2")

    service = DriverService(db_session, guest, feed)
    assert [d.name for d in service.list_drivers("%")] == ["100% Bruno"]
    assert [d.name for d in service.list_drivers("_")] == ["Carla"]
    assert service.list_drivers("\\") == []


def test_update_keeps_exit_snapshot(db_session, guest, feed, clock, make_driver, enqueue) -> None:
    driver = make_driver("Ana", fleet_number="F-1")
    enqueue(driver, Period.MORNING, 1)
    ExitService(db_session, guest, feed, clock).record_exit(Period.MORNING, ExitCreate(zone="SUL"))

    DriverService(db_session, guest, feed).update(
        driver.id, DriverUpdate(name="Ana Maria", fleet_number="F-2")
    )

    log = db_session.query(ExitLog).one()
    assert (log.name, log.fleet_number) == ("Ana", "F-1")
    assert db_session.get(Driver, driver.id).name == "Ana Maria"


def test_delete_cascades_in_one_go(db_session, guest, feed, clock, make_driver, enqueue) -> None:
    driver = make_driver("Ana")
    keeper = make_driver("Bia")
    enqueue(driver, Period.MORNING, 1)
    ExitService(db_session, guest, feed, clock).record_exit(Period.MORNING, ExitCreate(zone="SUL"))
    enqueue(driver, Period.AFTERNOON, 2)
    enqueue(keeper, Period.AFTERNOON, 3)

    deleted = DriverService(db_session, guest, feed).delete(driver.id)

    assert deleted == {"queues": 1, "exit_logs": 1, "drivers": 1}
    assert db_session.get(Driver, driver.id) is None
    assert [row.driver_id for row in db_session.query(QueueEntry).all()] == [keeper.id]
    assert db_session.query(ExitLog).count() == 0


def test_foreign_driver_is_invisible(db_session, guest, feed, make_driver) -> None:
    theirs = make_driver("Theirs", tenant_id="tenant-b")
    service = DriverService(db_session, guest, feed)
    with pytest.raises(NotFoundError):
        service.get(theirs.id)
    with pytest.raises(NotFoundError):
        service.delete(theirs.id)
