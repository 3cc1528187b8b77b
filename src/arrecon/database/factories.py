"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from arrecon.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DEFAULT_DB_DIR = Path.home() / ".arrecon"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Resolve the ledger database file.

    Order: explicit argument, ARRECON_DB_PATH environment variable, then
    ~/.arrecon/arrecon.db. The parent directory is created if missing.
    """
    if database_path is None:
        database_path = os.environ.get("ARRECON_DB_PATH")

    if database_path is None:
        path = DEFAULT_DB_DIR / "arrecon.db"
    else:
        path = Path(database_path).expanduser()

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks ARRECON_DB_PATH
            environment variable, then defaults to ~/.arrecon/arrecon.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("Using ledger database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
