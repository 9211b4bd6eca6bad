from datetime import timedelta
import time
import structlog

from workspace_sync.domain.errors import GenerationFailed, NotFound, FollowUpLimitExceeded
from workspace_sync.domain.graph.mutations import append_follow_up, MAX_FOLLOW_UPS
from workspace_sync.domain.graph.traversal import find_node
from workspace_sync.domain.models.content import ContentGraph, ContentNode
from workspace_sync.infrastructure.observability.logging import sync_logger, metrics
from .content_cache import ContentCache

logger = structlog.get_logger(__name__)


class FollowUpMutator:
    """Grows the shared graph with generated follow-up tasks

    Every append is a global write, visible to all users of the workspace.
    """

    def __init__(self, cache: ContentCache, limit: int = MAX_FOLLOW_UPS):
        self.cache = cache
        self.limit = limit

    async def append(self, graph: ContentGraph, parent_id: str, draft: ContentNode) -> ContentNode:
        """Append a prepared node under parent_id and persist the graph"""

        updated, follow_up = append_follow_up(graph, parent_id, draft, self.limit)
        await self.cache.save(updated)

        sync_logger.log_content_write(
            graph.workspace_id, "follow_up", follow_up.id,
            {"parent_id": parent_id}
        )
        return follow_up

    async def create_follow_up(self, workspace_id: str, parent_id: str) -> ContentNode:
        """Generate the next task for parent_id and attach it

        The branch cap is checked before the generator is called and again
        when the node is appended.
        """

        graph = await self.cache.get(workspace_id)
        if graph is None:
            raise NotFound("workspace", workspace_id)

        parent = find_node(graph, parent_id)
        if parent is None:
            raise NotFound("task", parent_id)
        if len(parent.children) >= self.limit:
            logger.warning("Follow-up limit reached", workspace_id=workspace_id, parent_id=parent_id)
            raise FollowUpLimitExceeded(parent_id, self.limit)

        workspace = self.cache.catalog.get(workspace_id)
        started = time.perf_counter()
        try:
            drafts = await self.cache.generator.generate_follow_up(workspace, parent.title)
        except Exception as e:
            sync_logger.log_generation(workspace_id, "follow_up", success=False, error=str(e))
            raise GenerationFailed(workspace_id, str(e), cause=e) from e

        duration_ms = (time.perf_counter() - started) * 1000
        metrics.record_latency("generation.follow_up", duration_ms)

        if not drafts:
            sync_logger.log_generation(workspace_id, "follow_up", success=False, error="no tasks returned")
            raise GenerationFailed(workspace_id, "generator returned no follow-up task")

        sync_logger.log_generation(workspace_id, "follow_up", item_count=len(drafts), duration_ms=duration_ms)

        draft = ContentNode.from_generated(
            drafts[0],
            self.cache.clock() + timedelta(days=self.cache.spacing_days)
        )

        async with self.cache.lock(workspace_id):
            # Reload: the graph may have changed while the generator ran
            current = await self.cache.get(workspace_id)
            if current is None:
                raise NotFound("workspace", workspace_id)
            return await self.append(current, parent_id, draft)
