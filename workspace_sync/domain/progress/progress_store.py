from typing import Any, Dict, Optional
import weakref
import asyncio
import structlog

from workspace_sync.domain.clock import Clock, utc_now
from workspace_sync.domain.errors import NotFound
from workspace_sync.domain.models.metrics import UserMetrics
from workspace_sync.domain.models.progress import ProgressRecord, UserState
from workspace_sync.infrastructure.observability.logging import sync_logger
from workspace_sync.infrastructure.storage.base import PersistentStore, user_key

logger = structlog.get_logger(__name__)

PROGRESS_FIELDS = frozenset({"is_completed", "completed_at", "answers"})
PROFILE_FIELDS = frozenset({"name", "workspace_id", "last_active_view", "last_active_task_id"})


class ProgressStore:
    """Per-user sparse progress records, persisted under user:{uid}"""

    def __init__(self, store: PersistentStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock
        # Entries vanish once no caller holds or waits on the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock(self, uid: str) -> asyncio.Lock:
        lock = self._locks.get(uid)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[uid] = lock
        return lock

    async def get_user(self, uid: str) -> Optional[UserState]:
        """Get a user or None"""

        raw = await self.store.get(user_key(uid))
        if raw is None:
            return None
        return UserState.model_validate(raw)

    async def require_user(self, uid: str) -> UserState:
        """Get a user or raise NotFound"""

        user = await self.get_user(uid)
        if user is None:
            raise NotFound("user", uid)
        return user

    async def _put(self, user: UserState) -> None:
        await self.store.put(user_key(user.uid), user.model_dump(mode="json"))

    async def ensure_user(self, uid: str, email: str, name: Optional[str] = None) -> UserState:
        """Create the user with empty progress, or refresh its last login"""

        async with self._lock(uid):
            now = self.clock()
            user = await self.get_user(uid)
            if user is None:
                user = UserState(
                    uid=uid,
                    email=email,
                    name=name or email.split("@")[0],
                    created_at=now,
                    last_login=now
                )
                logger.info("User created", user_id=uid)
            else:
                user.last_login = now
            await self._put(user)
            return user

    async def get_progress(self, uid: str) -> Dict[str, ProgressRecord]:
        user = await self.require_user(uid)
        return user.progress

    async def update_progress(self, uid: str, task_id: str, **changes: Any) -> UserState:
        """Create or overwrite fields of one progress record

        Records are created lazily and never deleted.
        """

        unknown = set(changes) - PROGRESS_FIELDS
        if unknown:
            raise ValueError(f"Unknown progress fields: {sorted(unknown)}")

        async with self._lock(uid):
            user = await self.require_user(uid)
            current = user.progress.get(task_id) or ProgressRecord(task_id=task_id)
            data = current.model_dump()
            data.update(changes)
            user.progress[task_id] = ProgressRecord.model_validate(data)
            await self._put(user)

        sync_logger.log_progress_update(uid, task_id, changes)
        return user

    async def save_user(self, uid: str, **updates: Any) -> UserState:
        """Update profile and session fields"""

        unknown = set(updates) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        async with self._lock(uid):
            user = await self.require_user(uid)
            data = user.model_dump()
            data.update(updates)
            user = UserState.model_validate(data)
            await self._put(user)
            return user

    async def save_metrics(self, uid: str, metrics: UserMetrics) -> UserState:
        """Replace the stored metrics projection"""

        async with self._lock(uid):
            user = await self.require_user(uid)
            user.metrics = metrics
            await self._put(user)
            return user
