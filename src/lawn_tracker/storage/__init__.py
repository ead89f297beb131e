"""
Persistence layer for the lawn tracker.

Provides key-value stores and the repository built on top of them.
"""

from .store import KeyValueStore, InMemoryStore, JSONFileStore
from .repository import LawnRepository

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "JSONFileStore",
    "LawnRepository",
]
