"""Tenant administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from dispatch_terminal.api.v1.dependencies import AdminDep, SessionDep, raise_http
from dispatch_terminal.models import OperatorAccess
from dispatch_terminal.schemas.tenant import PinUpdate, TenantCreate, TenantResponse
from dispatch_terminal.services.errors import DispatchError
from dispatch_terminal.services.operators import OperatorService

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("", response_model=list[TenantResponse])
async def list_tenants(_admin: AdminDep, db: SessionDep) -> list[OperatorAccess]:
    return OperatorService(db).list_tenants()


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    payload: TenantCreate,
    _admin: AdminDep,
    db: SessionDep,
) -> OperatorAccess:
    """Provision a tenant and the PIN that opens it."""
    try:
        return OperatorService(db).create_tenant(payload.label, payload.pin)
    except DispatchError as err:
        raise_http(err)


@router.patch("/{access_id}/pin", response_model=TenantResponse)
async def rotate_pin(
    access_id: str,
    payload: PinUpdate,
    _admin: AdminDep,
    db: SessionDep,
) -> OperatorAccess:
    try:
        return OperatorService(db).set_pin(access_id, payload.pin)
    except DispatchError as err:
        raise_http(err)
