"""Entity store adapters."""

from domainnav.store.base import EntityStore
from domainnav.store.json_file import JsonFileStore
from domainnav.store.memory import MemoryStore

__all__ = ["EntityStore", "JsonFileStore", "MemoryStore"]
