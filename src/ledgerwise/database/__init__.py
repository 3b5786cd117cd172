"""Database layer for ledgerwise application."""

from ledgerwise.database.base import Database
from ledgerwise.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
