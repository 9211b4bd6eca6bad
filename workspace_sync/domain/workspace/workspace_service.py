from typing import List, Optional
from datetime import datetime, timezone
from zoneinfo import ZoneInfo
import structlog

from workspace_sync.config import Settings, get_settings
from workspace_sync.domain.clock import Clock, utc_now
from workspace_sync.domain.content import ContentCache, FollowUpMutator, DetailWriter
from workspace_sync.domain.errors import GenerationFailed, NotFound
from workspace_sync.domain.graph.traversal import find_node, iter_depth_first
from workspace_sync.domain.metrics import MetricsEngine
from workspace_sync.domain.models.content import ContentGraph, ContentNode, EnvConfig
from workspace_sync.domain.models.metrics import UserMetrics
from workspace_sync.domain.models.progress import ActiveView, ProgressRecord, UserState
from workspace_sync.domain.models.view import MergedViewNode, WorkspaceSummary, WorkspaceView
from workspace_sync.domain.progress import ProgressStore, merge, find_view_node
from workspace_sync.infrastructure.generation.base import ContentGenerator
from workspace_sync.infrastructure.observability.logging import sync_logger
from workspace_sync.infrastructure.storage.base import PersistentStore
from .catalog import WorkspaceCatalog

logger = structlog.get_logger(__name__)


def summarize(graph: ContentGraph, user: UserState) -> WorkspaceSummary:
    """Board and profile figures for one user"""

    nodes = list(iter_depth_first(graph))
    done = [
        node for node in nodes
        if node.id in user.progress and user.progress[node.id].is_completed
    ]

    skills = list(dict.fromkeys(skill for node in done for skill in node.skills))
    never = datetime.min.replace(tzinfo=timezone.utc)
    recent = sorted(
        done,
        key=lambda node: _aware(user.progress[node.id].completed_at) or never,
        reverse=True
    )

    return WorkspaceSummary(
        total_tasks=len(nodes),
        completed_tasks=len(done),
        progress_percent=round(len(done) * 100 / len(nodes)) if nodes else 0,
        skills=skills,
        recent_completions=[node.id for node in recent]
    )


def _aware(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class WorkspaceService:
    """Orchestrates content, progress and metrics for one user at a time"""

    def __init__(
        self,
        cache: ContentCache,
        progress: ProgressStore,
        follow_ups: FollowUpMutator,
        details: DetailWriter,
        engine: MetricsEngine,
        clock: Clock = utc_now
    ):
        self.cache = cache
        self.progress = progress
        self.follow_ups = follow_ups
        self.details = details
        self.engine = engine
        self.clock = clock

    @classmethod
    def build(
        cls,
        store: PersistentStore,
        generator: ContentGenerator,
        catalog: Optional[WorkspaceCatalog] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now
    ) -> "WorkspaceService":
        """Wire every component around one store and one generator"""

        settings = settings or get_settings()
        cache = ContentCache(
            store, generator, catalog or WorkspaceCatalog(),
            spacing_days=settings.due_date_spacing_days,
            clock=clock
        )
        tz = timezone.utc if settings.metrics_timezone.upper() == "UTC" else ZoneInfo(settings.metrics_timezone)
        return cls(
            cache=cache,
            progress=ProgressStore(store, clock=clock),
            follow_ups=FollowUpMutator(cache, limit=settings.max_follow_ups),
            details=DetailWriter(cache),
            engine=MetricsEngine(tz=tz),
            clock=clock
        )

    @property
    def catalog(self) -> WorkspaceCatalog:
        return self.cache.catalog

    async def register_user(self, uid: str, email: str, name: Optional[str] = None) -> UserState:
        return await self.progress.ensure_user(uid, email, name)

    async def open_workspace(self, uid: str, workspace_id: str) -> WorkspaceView:
        """Load shared content (generating once) and overlay the user's progress"""

        with structlog.contextvars.bound_contextvars(user_id=uid, workspace_id=workspace_id):
            user = await self.progress.require_user(uid)
            graph = await self.cache.get_or_create(workspace_id)

            if user.workspace_id != workspace_id:
                user = await self.progress.save_user(uid, workspace_id=workspace_id)
                logger.info("Active workspace changed")

            tasks = merge(graph, user.progress)
            active = None
            if user.last_active_task_id:
                active = find_view_node(tasks, user.last_active_task_id)

            return WorkspaceView(
                workspace_id=workspace_id,
                tasks=tasks,
                metrics=user.metrics,
                summary=summarize(graph, user),
                active_task=active
            )

    async def complete_task(self, uid: str, task_id: str, at: Optional[datetime] = None) -> UserMetrics:
        """Mark a task completed and refresh metrics"""

        await self._require_task(uid, task_id)
        await self.progress.update_progress(uid, task_id, is_completed=True, completed_at=at or self.clock())
        return await self.recompute_metrics(uid)

    async def toggle_task(self, uid: str, task_id: str) -> ProgressRecord:
        """Flip completion; reopening clears the completion time"""

        user, _ = await self._require_task(uid, task_id)
        record = user.progress.get(task_id)
        completed = not (record is not None and record.is_completed)

        user = await self.progress.update_progress(
            uid, task_id,
            is_completed=completed,
            completed_at=self.clock() if completed else None
        )
        await self.recompute_metrics(uid)
        return user.progress[task_id]

    async def answer_question(self, uid: str, task_id: str, question_id: str, answer: str) -> ProgressRecord:
        """Record one quiz answer, keeping the others"""

        user, _ = await self._require_task(uid, task_id)
        record = user.progress.get(task_id)
        answers = dict(record.answers) if record is not None else {}
        answers[question_id] = answer

        user = await self.progress.update_progress(uid, task_id, answers=answers)
        await self.recompute_metrics(uid)
        return user.progress[task_id]

    async def request_follow_up(self, uid: str, task_id: str) -> ContentNode:
        """Generate a follow-up under task_id in the user's active workspace"""

        user, _ = await self._require_task(uid, task_id)
        return await self.follow_ups.create_follow_up(user.workspace_id, task_id)

    async def load_task_detail(self, uid: str, task_id: str) -> MergedViewNode:
        """Ensure detail is cached and return the task with the user's overlay"""

        user, _ = await self._require_task(uid, task_id)
        await self.details.load_detail(user.workspace_id, task_id)
        return await self._view_node(user, task_id)

    async def generate_solution(self, uid: str, task_id: str) -> str:
        user, _ = await self._require_task(uid, task_id)
        return await self.details.write_solution(user.workspace_id, task_id)

    async def generate_env_config(self, workspace_id: str) -> EnvConfig:
        """Generate a local environment bundle; not cached, each call regenerates"""

        workspace = self.catalog.get(workspace_id)
        try:
            config = await self.cache.generator.generate_env_config(workspace)
        except Exception as e:
            sync_logger.log_generation(workspace_id, "env_config", success=False, error=str(e))
            raise GenerationFailed(workspace_id, str(e), cause=e) from e

        sync_logger.log_generation(workspace_id, "env_config", item_count=1)
        return config

    async def record_navigation(self, uid: str, view: ActiveView, task_id: Optional[str] = None) -> UserState:
        """Remember where the user was for session restore"""

        updates = {"last_active_view": view}
        if task_id is not None:
            updates["last_active_task_id"] = task_id
        return await self.progress.save_user(uid, **updates)

    async def update_name(self, uid: str, name: str) -> UserState:
        return await self.progress.save_user(uid, name=name)

    async def get_metrics(self, uid: str) -> UserMetrics:
        user = await self.progress.require_user(uid)
        return user.metrics

    async def recompute_metrics(self, uid: str) -> UserMetrics:
        """Rebuild metrics from the full progress map and the active graph"""

        user = await self.progress.require_user(uid)
        graph = await self.cache.get(user.workspace_id) if user.workspace_id else None
        if graph is None:
            return user.metrics

        today = self.engine.local_date(self.clock())
        metrics = self.engine.recompute(user.progress, graph, today=today)
        await self.progress.save_metrics(uid, metrics)
        return metrics

    async def list_tasks(self, uid: str) -> List[MergedViewNode]:
        user, graph = await self._active_graph(uid)
        return merge(graph, user.progress)

    async def _active_graph(self, uid: str):
        user = await self.progress.require_user(uid)
        if not user.workspace_id:
            raise NotFound("active workspace for user", uid)
        graph = await self.cache.get(user.workspace_id)
        if graph is None:
            raise NotFound("workspace", user.workspace_id)
        return user, graph

    async def _require_task(self, uid: str, task_id: str):
        user, graph = await self._active_graph(uid)
        if find_node(graph, task_id) is None:
            raise NotFound("task", task_id)
        return user, graph

    async def _view_node(self, user: UserState, task_id: str) -> MergedViewNode:
        graph = await self.cache.get(user.workspace_id)
        node = find_view_node(merge(graph, user.progress), task_id)
        if node is None:
            raise NotFound("task", task_id)
        return node
