"""SQLAlchemy adapter package for the document store."""

from __future__ import annotations

from .mappings import UTCDateTime, create_all_tables, documents_table, metadata
from .store import (
    SqlAlchemyDocumentStore,
    StartupError,
    build_engine,
    configured_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDocumentStore",
    "StartupError",
    "UTCDateTime",
    "build_engine",
    "configured_engine",
    "create_all_tables",
    "documents_table",
    "metadata",
    "shutdown",
    "startup",
]
