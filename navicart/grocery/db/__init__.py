"""Item store interface and its SQLite and in-memory implementations."""

from .base import ItemChange, ItemStore, StoreError
from .items import SQLiteItemStore
from .memory import MemoryItemStore
from .schema import ensure_schema

__all__ = [
    "ItemChange",
    "ItemStore",
    "StoreError",
    "SQLiteItemStore",
    "MemoryItemStore",
    "ensure_schema",
]
