# src/dispatch_terminal/scripts/pins.py
"""
Maintenance commands for operator PINs.

Usage:
    dispatch-pins list
    dispatch-pins check "Terminal Principal" --expect 19841984
    dispatch-pins create "Terminal Norte" 4321
    dispatch-pins set-pin "Terminal Principal" 19841984
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from sqlalchemy.orm import Session

from dispatch_terminal.db.session import SessionLocal
from dispatch_terminal.services.errors import ConflictError
from dispatch_terminal.services.operators import OperatorService, effective_tenant


def list_operators(db: Session) -> int:
    """Print every operator access row."""
    rows = OperatorService(db).list_tenants()
    if not rows:
        print("No operators registered")
        return 0
    for access in rows:
        print(f"{access.label or '-'}\ttenant={effective_tenant(access)}\tpin_length={len(access.pin)}")
    return 0


def check_pin(db: Session, label: str, expected: str | None = None) -> int:
    """Show the stored PIN for ``label`` and whether it equals ``expected``."""
    access = OperatorService(db).find_by_label(label)
    if access is None:
        print(f"{label} not found")
        return 1
    print(f"PIN VALUE: {access.pin}")
    print(f"PIN LENGTH: {len(access.pin)}")
    if expected is not None:
        print(f"IS EXACT MATCH: {access.pin == expected}")
        return 0 if access.pin == expected else 2
    return 0


def create_operator(db: Session, label: str, pin: str) -> int:
    try:
        access = OperatorService(db).create_tenant(label, pin)
    except (ConflictError, ValueError) as exc:
        print(f"Create failed: {exc}")
        return 1
    print(f"Created {access.label} with tenant {access.tenant_id}")
    return 0


def set_pin(db: Session, label: str, pin: str) -> int:
    """Replace the PIN of the operator called ``label``."""
    service = OperatorService(db)
    access = service.find_by_label(label)
    if access is None:
        print(f'Record with label "{label}" NOT FOUND.')
        return 1
    try:
        service.set_pin(access.id, pin)
    except (ConflictError, ValueError) as exc:
        print(f"Update failed: {exc}")
        return 1
    print(f'Updated PIN for "{label}"')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dispatch-pins", description="Manage operator PINs")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List operators")

    check = commands.add_parser("check", help="Show an operator's PIN")
    check.add_argument("label")
    check.add_argument("--expect", default=None, help="PIN to compare against")

    create = commands.add_parser("create", help="Create a tenant behind a new PIN")
    create.add_argument("label")
    create.add_argument("pin")

    update = commands.add_parser("set-pin", help="Replace an operator's PIN")
    update.add_argument("label")
    update.add_argument("pin")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    db = SessionLocal()
    try:
        if args.command == "list":
            return list_operators(db)
        if args.command == "check":
            return check_pin(db, args.label, args.expect)
        if args.command == "create":
            return create_operator(db, args.label, args.pin)
        return set_pin(db, args.label, args.pin)
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
