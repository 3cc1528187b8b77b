"""Ledger store for arrecon application."""

from arrecon.database.base import Database
from arrecon.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
