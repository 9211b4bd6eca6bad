from typing import Dict, Any, List, Optional
import asyncio
import copy

from .base import PersistentStore


class InMemoryStore(PersistentStore):
    """In-process key/value store

    Values are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self):
        self.data: Dict[str, Any] = {}
        self.writes: List[str] = []
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        """Get a copy of the stored value"""

        async with self._lock:
            if key not in self.data:
                return None
            return copy.deepcopy(self.data[key])

    async def put(self, key: str, value: Any) -> None:
        """Store a copy of the value"""

        async with self._lock:
            self.data[key] = copy.deepcopy(value)
            self.writes.append(key)

    async def delete(self, key: str) -> bool:
        """Delete a key from the store"""

        async with self._lock:
            if key in self.data:
                del self.data[key]
                return True
            return False

    async def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with prefix"""

        async with self._lock:
            return sorted(key for key in self.data if key.startswith(prefix))

    async def get_stats(self) -> Dict[str, Any]:
        """Get store statistics"""

        async with self._lock:
            return {
                "total_keys": len(self.data),
                "workspace_keys": sum(1 for key in self.data if key.startswith("workspace:")),
                "user_keys": sum(1 for key in self.data if key.startswith("user:")),
                "writes": len(self.writes)
            }
