from .base import Store, matches
from .memory_store import InMemoryStore
from .session_repository import MySQLSessionStore, connection_factory_from_config

__all__ = [
    "Store",
    "matches",
    "InMemoryStore",
    "MySQLSessionStore",
    "connection_factory_from_config",
]
