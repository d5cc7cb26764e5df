# src/dispatch_terminal/services/operators.py
"""PIN access rows: one per tenant."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dispatch_terminal.core.settings import settings
from dispatch_terminal.models import OperatorAccess
from dispatch_terminal.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def effective_tenant(access: OperatorAccess) -> str:
    """Return the tenant a PIN opens, falling back to the row id."""
    return access.tenant_id or access.id


def effective_label(access: OperatorAccess) -> str:
    return access.label or settings.guest_default_label


def clean_pin(pin: str) -> str:
    """Strip surrounding whitespace, the same way ``authenticate`` does.

    Raises:
        ValueError: If nothing is left.
    """
    cleaned = pin.strip()
    if not cleaned:
        raise ValueError("PIN must not be blank")
    return cleaned


class OperatorService:
    """Looks up and provisions operator PINs."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def authenticate(self, pin: str) -> OperatorAccess | None:
        """Return the access row for ``pin`` or ``None`` when it matches nothing."""
        candidate = pin.strip()
        if not candidate:
            return None
        return self.db.query(OperatorAccess).filter(OperatorAccess.pin == candidate).first()

    def list_tenants(self) -> list[OperatorAccess]:
        return self.db.query(OperatorAccess).order_by(OperatorAccess.label, OperatorAccess.id).all()

    def find_by_label(self, label: str) -> OperatorAccess | None:
        return self.db.query(OperatorAccess).filter(OperatorAccess.label == label).first()

    def create_tenant(self, label: str, pin: str) -> OperatorAccess:
        """Provision a new tenant reachable with ``pin``.

        Raises:
            ConflictError: If the PIN is already taken.
            ValueError: If the PIN is blank.
        """
        access = OperatorAccess(label=label.strip(), pin=clean_pin(pin), tenant_id=str(uuid.uuid4()))
        self.db.add(access)
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            raise ConflictError("PIN already in use") from err
        self.db.refresh(access)
        logger.info("Created tenant %s (%s)", access.label, access.tenant_id)
        return access

    def set_pin(self, access_id: str, pin: str) -> OperatorAccess:
        cleaned = clean_pin(pin)
        access = self.db.get(OperatorAccess, access_id)
        if access is None:
            raise NotFoundError("Tenant not found")
        access.pin = cleaned
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            raise ConflictError("PIN already in use") from err
        self.db.refresh(access)
        logger.info("Rotated PIN for tenant %s", effective_tenant(access))
        return access
