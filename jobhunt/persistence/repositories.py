"""Data access layer for cache entries.

The repository encapsulates SQL for the cache_entries table and returns
CacheEntry domain models rather than ORM rows.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobhunt.domain.models import CacheEntry
from jobhunt.utils.hashing import compute_cache_key
from jobhunt.utils.timestamps import format_timestamp

from .exceptions import PersistenceError
from .schema import CacheEntryModel, format_stored_at

logger = logging.getLogger(__name__)


class CacheRepository:
    """Repository for cache entry operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, namespace_key: str, params_key: str) -> Optional[CacheEntry]:
        """Retrieve an entry regardless of age.

        Returns:
            CacheEntry if found, None otherwise

        Raises:
            PersistenceError: On database errors or an undecodable row
        """
        cache_key = compute_cache_key(namespace_key, params_key)
        try:
            row = self.session.get(CacheEntryModel, cache_key)
        except SQLAlchemyError as e:
            logger.error(f"Error reading cache entry {cache_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to read cache entry: {e}") from e

        if row is None:
            return None

        try:
            return row.to_domain(json.loads(row.value))
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt cache entry {cache_key}: {e}") from e

    def upsert(self, namespace_key: str, params_key: str, entry: CacheEntry) -> None:
        """Insert or overwrite the entry for (namespace_key, params_key).

        Raises:
            PersistenceError: On database errors or a value that is not JSON-serializable
        """
        cache_key = compute_cache_key(namespace_key, params_key)
        try:
            encoded = json.dumps(entry.value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cache value is not JSON-serializable: {e}") from e

        try:
            row = self.session.get(CacheEntryModel, cache_key)
            if row is None:
                row = CacheEntryModel(
                    cache_key=cache_key,
                    namespace_key=namespace_key,
                    params_key=params_key,
                )
                self.session.add(row)
            row.value = encoded
            row.stored_at = format_stored_at(entry)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error writing cache entry {cache_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write cache entry: {e}") from e

    def delete_all(self) -> int:
        """Delete every entry and return how many were removed."""
        try:
            count = self.count()
            self.session.execute(delete(CacheEntryModel))
            self.session.flush()
            return count
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to clear cache entries: {e}") from e

    def delete_stored_before(self, cutoff: datetime) -> int:
        """Delete entries stored strictly before cutoff and return the count."""
        cutoff_str = format_timestamp(cutoff, include_microseconds=True)
        try:
            result = self.session.execute(
                delete(CacheEntryModel).where(CacheEntryModel.stored_at < cutoff_str)
            )
            self.session.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to prune cache entries: {e}") from e

    def count(self) -> int:
        try:
            return self.session.execute(
                select(func.count()).select_from(CacheEntryModel)
            ).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count cache entries: {e}") from e
