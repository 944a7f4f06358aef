"""SQLite persistence for the search cache.

Public API:
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - CacheRepository: reads and writes cache_entries rows

Example usage:
    >>> from jobhunt.persistence import init_database, get_session, CacheRepository
    >>> init_database("sqlite:///./data/job_hunt_cache.db")
    >>> with get_session() as session:
    ...     entry = CacheRepository(session).get("python developer", "{}")
"""

from .database import close_database, get_session, init_database, is_initialized
from .exceptions import DatabaseConnectionError, PersistenceError
from .repositories import CacheRepository

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "is_initialized",
    "CacheRepository",
    "PersistenceError",
    "DatabaseConnectionError",
]
