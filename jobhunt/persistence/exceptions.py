"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch database failures with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL
    - Database file or directory not writable
    - Session requested before init_database()
    """
