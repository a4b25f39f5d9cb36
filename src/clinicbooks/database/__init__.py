"""Database layer for clinicbooks application."""

from clinicbooks.database.base import Database
from clinicbooks.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
