from abc import ABC, abstractmethod
from typing import Any, Optional


def workspace_key(workspace_id: str) -> str:
    return f"workspace:{workspace_id}"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


class PersistentStore(ABC):
    """Scoped key/value storage

    Values are JSON-compatible structures. Implementations must not hand out
    references to their internal containers. Persistence failures are the
    store's concern; callers treat get/put as infallible.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None when absent"""
        pass

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key; returns whether it existed"""
        pass
