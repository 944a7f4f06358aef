"""Key/value cache contract with per-read TTL."""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Optional


class CacheError(Exception):
    """A cache read or write failed (unavailable store, corrupt entry, ...).

    Callers treat this as a miss on read and a no-op on write.
    """


class CacheStore(ABC):
    """Generic key/value store keyed by (namespace_key, params_key).

    Values must be JSON-compatible. Freshness is decided on read: an entry
    is returned iff now - stored_at <= ttl. Expired entries stay in the
    store until prune() or clear() removes them.
    """

    @abstractmethod
    def get(self, namespace_key: str, params_key: str, ttl: timedelta) -> Optional[Any]:
        """Return the fresh value for the key pair, or None.

        Raises:
            CacheError: If the store cannot be read
        """

    @abstractmethod
    def set(self, namespace_key: str, params_key: str, value: Any) -> None:
        """Store value under the key pair, overwriting any previous entry.

        Raises:
            CacheError: If the value cannot be written
        """

    @abstractmethod
    def clear(self) -> int:
        """Remove every entry. Returns the number removed."""

    @abstractmethod
    def prune(self, ttl: timedelta) -> int:
        """Remove expired entries only. Returns the number removed."""
