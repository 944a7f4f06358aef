"""Cache store implementations: SQLite-backed and in-memory."""

import json
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from jobhunt.domain.models import CacheEntry
from jobhunt.logging import get_logger
from jobhunt.persistence import CacheRepository, PersistenceError, get_session
from jobhunt.utils.timestamps import utc_now

from .base import CacheError, CacheStore

logger = get_logger(__name__, component="cache")

Clock = Callable[[], datetime]


class SqlCacheStore(CacheStore):
    """Cache persisted in the cache_entries table.

    Requires jobhunt.persistence.init_database() to have been called. Every
    operation runs in its own session, so a failed write never leaves a
    half-applied transaction behind.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock

    def get(self, namespace_key: str, params_key: str, ttl: timedelta) -> Optional[Any]:
        try:
            with get_session() as session:
                entry = CacheRepository(session).get(namespace_key, params_key)
        except (PersistenceError, SQLAlchemyError) as e:
            raise CacheError(str(e)) from e

        if entry is None or entry.is_expired(self._clock(), ttl):
            return None
        return entry.value

    def set(self, namespace_key: str, params_key: str, value: Any) -> None:
        entry = CacheEntry(value=value, stored_at=self._clock())
        try:
            with get_session() as session:
                CacheRepository(session).upsert(namespace_key, params_key, entry)
        except (PersistenceError, SQLAlchemyError) as e:
            raise CacheError(str(e)) from e

    def clear(self) -> int:
        try:
            with get_session() as session:
                removed = CacheRepository(session).delete_all()
        except (PersistenceError, SQLAlchemyError) as e:
            raise CacheError(str(e)) from e

        logger.info(
            f"Cleared {removed} cache entries",
            extra={"event": "cache.cleared", "removed": removed},
        )
        return removed

    def prune(self, ttl: timedelta) -> int:
        cutoff = self._clock() - ttl
        try:
            with get_session() as session:
                removed = CacheRepository(session).delete_stored_before(cutoff)
        except (PersistenceError, SQLAlchemyError) as e:
            raise CacheError(str(e)) from e

        logger.info(
            f"Pruned {removed} expired cache entries",
            extra={"event": "cache.pruned", "removed": removed},
        )
        return removed


class InMemoryCacheStore(CacheStore):
    """Dict-backed cache with the same semantics as SqlCacheStore.

    Values are round-tripped through JSON on write so callers never share
    mutable state with the store and non-serializable values fail the same
    way they would on disk.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._entries: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, namespace_key: str, params_key: str, ttl: timedelta) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get((namespace_key, params_key))
        if entry is None or entry.is_expired(self._clock(), ttl):
            return None
        return json.loads(json.dumps(entry.value))

    def set(self, namespace_key: str, params_key: str, value: Any) -> None:
        try:
            snapshot = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cache value is not JSON-serializable: {e}") from e

        entry = CacheEntry(value=snapshot, stored_at=self._clock())
        with self._lock:
            self._entries[(namespace_key, params_key)] = entry

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def prune(self, ttl: timedelta) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now, ttl)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
