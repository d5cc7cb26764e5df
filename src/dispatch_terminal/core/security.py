"""JWT helpers for administrator and PIN guest sessions."""
from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt

from dispatch_terminal.core.settings import settings

ROLE_ADMIN = "admin"
ROLE_GUEST = "guest"


def create_access_token(
    subject: str,
    *,
    role: str,
    tenant_id: str | None = None,
    label: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        subject: Stable identifier of the principal (operator row id or "admin").
        role: Either ``"admin"`` or ``"guest"``.
        tenant_id: Tenant scope for guests; ``None`` for administrators.
        label: Display label shown by the terminal.
        expires_delta: Optional override of the configured lifetime.

    Returns:
        Encoded JWT string.
    """
    to_encode: dict[str, Any] = {"sub": subject, "role": role}
    if tenant_id is not None:
        to_encode["tenant_id"] = tenant_id
    if label is not None:
        to_encode["label"] = label
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT access token.

    Raises:
        jose.JWTError: If the signature or expiry is invalid.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    return payload


def verify_admin_key(candidate: str) -> bool:
    """Return True if ``candidate`` matches the configured admin access key."""
    expected = settings.admin_access_key
    if not expected:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
