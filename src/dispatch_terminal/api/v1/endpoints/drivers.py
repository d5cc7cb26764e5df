"""Driver registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from dispatch_terminal.api.v1.dependencies import (
    ChangeFeedDep,
    PrincipalDep,
    SessionDep,
    raise_http,
)
from dispatch_terminal.models import Driver
from dispatch_terminal.schemas.driver import DriverCreate, DriverResponse, DriverUpdate
from dispatch_terminal.services.drivers import DriverService
from dispatch_terminal.services.errors import DispatchError

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverResponse])
async def list_drivers(
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
    q: str | None = Query(None, description="Search name, fleet, registration or company"),
) -> list[Driver]:
    """List the caller's drivers ordered by name."""
    return DriverService(db, principal, feed).list_drivers(q)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    payload: DriverCreate,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Driver:
    return DriverService(db, principal, feed).create(payload)


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Driver:
    try:
        return DriverService(db, principal, feed).get(driver_id)
    except DispatchError as err:
        raise_http(err)


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str,
    payload: DriverUpdate,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Driver:
    """Replace a driver's details. Exit history keeps the old snapshot."""
    try:
        return DriverService(db, principal, feed).update(driver_id, payload)
    except DispatchError as err:
        raise_http(err)


@router.delete("/{driver_id}")
async def delete_driver(
    driver_id: str,
    principal: PrincipalDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> dict[str, object]:
    """Delete a driver together with their queue rows and exit history.

    Returns:
        Row counts removed per table
    """
    try:
        deleted = DriverService(db, principal, feed).delete(driver_id)
    except DispatchError as err:
        raise_http(err)
    return {"message": "Driver deleted", "deleted": deleted}
