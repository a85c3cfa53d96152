"""Storage implementations."""

from parley.state.storage import Storage
from parley.state.stores.inmemory import InMemoryStorage

__all__ = [
    "Storage",
    "InMemoryStorage",
]
