"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from kea.database.sqlalchemy_db import SQLAlchemyDatabase


def default_database_path() -> Path:
    """Return ~/.kea/kea.db, creating the directory if needed."""
    db_dir = Path.home() / ".kea"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "kea.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks KEA_DB_PATH
            environment variable, then defaults to ~/.kea/kea.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("KEA_DB_PATH")

    if database_path is None:
        database_path = str(default_database_path())
    else:
        Path(database_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
        database_path = str(Path(database_path).expanduser())

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
