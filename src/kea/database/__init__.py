"""Database layer for the kea ledger."""

from kea.database.base import Database
from kea.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
