"""Shared API dependencies for authentication and error translation."""

from typing import Annotated, Any, NoReturn

from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from dispatch_terminal.core.security import ROLE_ADMIN, ROLE_GUEST, decode_access_token
from dispatch_terminal.db.session import get_db
from dispatch_terminal.models import Period
from dispatch_terminal.services.changefeed import ChangeFeed, get_change_feed
from dispatch_terminal.services.errors import ConflictError, DispatchError, NotFoundError
from dispatch_terminal.services.purge import PurgeGuard, get_purge_guard
from dispatch_terminal.services.tenancy import Principal

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a principal from decoded token claims.

    Raises:
        HTTPException: If the claims do not describe an admin or a tenant guest.
    """
    subject = payload.get("sub")
    role = payload.get("role")
    tenant_id = payload.get("tenant_id")
    if not subject or role not in (ROLE_ADMIN, ROLE_GUEST):
        raise _credentials_error()
    if role == ROLE_GUEST and not tenant_id:
        raise _credentials_error("Guest session has no tenant")
    return Principal(
        subject=str(subject),
        role=role,
        tenant_id=tenant_id if role == ROLE_GUEST else None,
        label=payload.get("label"),
    )


def principal_from_token(token: str) -> Principal:
    try:
        payload = decode_access_token(token)
    except JWTError as err:
        raise _credentials_error() from err
    return principal_from_claims(payload)


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> Principal:
    """Resolve the bearer token into the calling principal.

    Raises:
        HTTPException: If the token is missing, expired or malformed.
    """
    return principal_from_token(credentials.credentials)


PrincipalDep = Annotated[Principal, Depends(get_current_principal)]


def require_admin(principal: PrincipalDep) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return principal


AdminDep = Annotated[Principal, Depends(require_admin)]


def get_period(
    period: Annotated[str, Path(description="morning or afternoon")],
) -> Period:
    try:
        return Period.from_slug(period)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown period: {period}",
        ) from err


PeriodDep = Annotated[Period, Depends(get_period)]


def get_change_feed_dep() -> ChangeFeed:
    return get_change_feed()


def get_purge_guard_dep() -> PurgeGuard:
    return get_purge_guard()


ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed_dep)]
PurgeGuardDep = Annotated[PurgeGuard, Depends(get_purge_guard_dep)]


def raise_http(err: Exception) -> NoReturn:
    """Translate a service-layer exception into an HTTP error."""
    if isinstance(err, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    if isinstance(err, ConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    if isinstance(err, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if isinstance(err, DispatchError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(err),
        ) from err
    raise err
