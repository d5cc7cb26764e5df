# src/dispatch_terminal/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from dispatch_terminal.core.settings import settings

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")


def run_upgrade_head() -> None:
    """Apply every Alembic revision to the configured database."""
    cfg = Config(os.path.join(_MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.effective_database_url)
    cfg.set_main_option("script_location", os.path.abspath(_MIGRATIONS_DIR))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
