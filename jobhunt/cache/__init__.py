"""Search result cache.

    from jobhunt.cache import SqlCacheStore, InMemoryCacheStore, CacheError
"""

from .base import CacheError, CacheStore
from .stores import InMemoryCacheStore, SqlCacheStore

__all__ = ["CacheStore", "CacheError", "SqlCacheStore", "InMemoryCacheStore"]
