"""Principals and tenant scoping shared by every service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy.orm import Query

from dispatch_terminal.core.security import ROLE_ADMIN, ROLE_GUEST

Q = TypeVar("Q", bound=Query[Any])


@dataclass(frozen=True)
class Principal:
    """The authenticated caller.

    Administrators carry no tenant and see every row. Guests are confined to
    the tenant their PIN resolved to.
    """

    subject: str
    role: str
    tenant_id: str | None = None
    label: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_guest(self) -> bool:
        return self.role == ROLE_GUEST

    @property
    def scope_key(self) -> str:
        """Key identifying this caller's per-session state (e.g. purge challenges)."""
        return f"{self.role}:{self.subject}:{self.tenant_id or '*'}"


ADMIN = Principal(subject="admin", role=ROLE_ADMIN, label="Administrador")


def scoped(query: Q, model: Any, principal: Principal) -> Q:
    """Restrict ``query`` to the rows visible to ``principal``."""
    if principal.is_admin:
        return query
    return query.filter(model.tenant_id == principal.tenant_id)


def tenant_for_new_row(principal: Principal, inherited: str | None = None) -> str | None:
    """Return the tenant identifier to stamp on a row the principal creates.

    Guests always stamp their own tenant. Administrators stamp ``inherited``,
    typically the tenant of the driver the new row refers to.
    """
    if principal.is_guest:
        return principal.tenant_id
    return inherited


def contains(column: Any, text: str) -> Any:
    """Case-insensitive literal substring match; ``%`` and ``_`` are not wildcards."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")
