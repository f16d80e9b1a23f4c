from .base import RegistryAdapter
from .memory_adapter import InMemoryRegistryAdapter
from .sqlite_adapter import SQLiteRegistryAdapter

__all__ = [
    "RegistryAdapter",
    "InMemoryRegistryAdapter",
    "SQLiteRegistryAdapter",
]
