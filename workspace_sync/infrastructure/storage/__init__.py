from .base import PersistentStore, workspace_key, user_key
from .memory_store import InMemoryStore

__all__ = ["PersistentStore", "InMemoryStore", "workspace_key", "user_key"]
