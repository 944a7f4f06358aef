"""Database schema for the on-disk cache."""

import logging

from sqlalchemy import Column, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from jobhunt.domain.models import CacheEntry
from jobhunt.utils.timestamps import format_timestamp, parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class CacheEntryModel(Base):
    """ORM model for the cache_entries table.

    One row per (namespace_key, params_key) pair. The primary key is a
    SHA256 digest of both keys; the raw keys are kept for inspection.
    """

    __tablename__ = "cache_entries"

    cache_key = Column(String(64), primary_key=True, nullable=False)
    namespace_key = Column(Text, nullable=False)
    params_key = Column(Text, nullable=False)

    # JSON-encoded value
    value = Column(Text, nullable=False)

    # ISO 8601 string with microseconds
    stored_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_cache_entries_stored_at", "stored_at"),)

    def to_domain(self, value) -> CacheEntry:
        """Build a CacheEntry from this row and its already-decoded value."""
        stored_at = parse_iso_datetime(self.stored_at)
        if stored_at is None:
            raise ValueError(f"Invalid stored_at timestamp: {self.stored_at!r}")
        return CacheEntry(value=value, stored_at=stored_at)


def format_stored_at(entry: CacheEntry) -> str:
    """Format a stored_at timestamp so that string order matches time order."""
    return format_timestamp(entry.stored_at, include_microseconds=True)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        logger.debug("Database schema ready")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
