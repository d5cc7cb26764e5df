"""Authentication endpoints for the Dispatch Terminal API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from dispatch_terminal.api.v1.dependencies import PrincipalDep, SessionDep
from dispatch_terminal.core.security import (
    ROLE_ADMIN,
    ROLE_GUEST,
    create_access_token,
    verify_admin_key,
)
from dispatch_terminal.core.settings import settings
from dispatch_terminal.db.time import now_ms
from dispatch_terminal.schemas.auth import (
    AdminLoginRequest,
    GuestSession,
    LoginResponse,
    PinLoginRequest,
    SessionResponse,
)
from dispatch_terminal.services.operators import (
    OperatorService,
    effective_label,
    effective_tenant,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

PIN_REJECTED = "Acesso negado. Código incorreto."


@router.post("/pin", response_model=LoginResponse)
async def login_with_pin(request: PinLoginRequest, db: SessionDep) -> LoginResponse:
    """Open a guest session scoped to the tenant behind ``pin``.

    Args:
        request: The submitted PIN
        db: Database session

    Returns:
        Bearer token and the guest session record

    Raises:
        HTTPException: 401 when the PIN matches no operator
    """
    access = OperatorService(db).authenticate(request.pin)
    if access is None:
        logger.info("Rejected PIN login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=PIN_REJECTED)

    tenant_id = effective_tenant(access)
    label = effective_label(access)
    token = create_access_token(access.id, role=ROLE_GUEST, tenant_id=tenant_id, label=label)
    logger.info("Guest session opened for %s", label)
    return LoginResponse(
        access_token=token,
        role=ROLE_GUEST,
        session=GuestSession(label=label, tenant_id=tenant_id, login_time=now_ms()),
    )


@router.post("/admin", response_model=LoginResponse)
async def login_as_admin(request: AdminLoginRequest) -> LoginResponse:
    """Open an administrator session with the configured access key."""
    if not settings.admin_login_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator login is disabled",
        )
    if not verify_admin_key(request.access_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid administrator key",
        )
    token = create_access_token("admin", role=ROLE_ADMIN, label="Administrador")
    return LoginResponse(access_token=token, role=ROLE_ADMIN)


@router.get("/session", response_model=SessionResponse)
async def current_session(principal: PrincipalDep) -> SessionResponse:
    return SessionResponse(
        subject=principal.subject,
        role=principal.role,
        label=principal.label,
        tenant_id=principal.tenant_id,
    )
