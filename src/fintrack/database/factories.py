"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINTRACK_DB_PATH
            environment variable, then defaults to ~/.fintrack/fintrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("FINTRACK_DB_PATH")

    if database_path is None:
        # Default to ~/.fintrack/fintrack.db
        home = Path.home()
        db_dir = home / ".fintrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fintrack.db")

    logger.debug("Using SQLite database at %s", database_path)
    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database_from_url(database_url: str) -> SQLAlchemyDatabase:
    """Create a database instance from any SQLAlchemy URL."""
    logger.debug("Using database URL %s", database_url.split("@")[-1])
    return SQLAlchemyDatabase(database_url)


def create_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create the configured database.

    An explicit path wins; otherwise FINTRACK_DATABASE_URL selects any
    SQLAlchemy backend, falling back to the SQLite file database.
    """
    if database_path is None:
        database_url = os.environ.get("FINTRACK_DATABASE_URL")
        if database_url:
            return create_database_from_url(database_url)
    return create_sqlite_database(database_path=database_path)
