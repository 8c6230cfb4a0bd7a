# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================
# Storage abstraction layer with local fallback
# ==============================================================================

"""
Database Module
===============

Provides the storage layer behind the synchronization facade:
- Local Record Store: key-namespaced JSON records (memory or SQLite medium)
- Adapters: remote REST (PostgREST) and SQL (SQLAlchemy async) backends
- Repositories: per-entity local, remote and write-through implementations
- Factory: one-time strategy selection (``smartcow.database.factory``)
"""

from smartcow.database.local_store import (
    KeyValueMedium,
    LocalRecordStore,
    MemoryMedium,
    SQLiteMedium,
    create_medium,
)

__all__ = [
    "KeyValueMedium",
    "LocalRecordStore",
    "MemoryMedium",
    "SQLiteMedium",
    "create_medium",
]
