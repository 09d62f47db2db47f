"""Persistence adapters for ShoreSquad."""

from .kv_storage import DuckDBStorage, KeyValueStorage, MemoryStorage
from .store import DEFAULT_STORAGE_KEY, PersistentStore, scoped_storage_key

__all__ = [
    "DuckDBStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PersistentStore",
    "DEFAULT_STORAGE_KEY",
    "scoped_storage_key",
]
