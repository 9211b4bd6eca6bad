import time
import structlog

from workspace_sync.domain.errors import GenerationFailed, NotFound
from workspace_sync.domain.graph.mutations import write_detail
from workspace_sync.domain.graph.traversal import find_node
from workspace_sync.domain.models.content import ContentGraph, ContentNode, DetailPatch
from workspace_sync.infrastructure.observability.logging import sync_logger, metrics
from .content_cache import ContentCache

logger = structlog.get_logger(__name__)


class DetailWriter:
    """Merges late-loaded detail into cached nodes"""

    def __init__(self, cache: ContentCache):
        self.cache = cache

    async def write(
        self,
        workspace_id: str,
        task_id: str,
        patch: DetailPatch,
        mark_loaded: bool = True
    ) -> ContentNode:
        """Apply a patch to the cached graph and persist it"""

        async with self.cache.lock(workspace_id):
            graph = await self._require_graph(workspace_id)
            updated = write_detail(graph, task_id, patch, mark_loaded)
            await self.cache.save(updated)

        sync_logger.log_content_write(
            workspace_id, "detail", task_id,
            {"fields": sorted(patch.model_fields_set)}
        )
        return updated.nodes[task_id]

    async def load_detail(self, workspace_id: str, task_id: str) -> ContentNode:
        """Return the node with detail, generating it on first request"""

        graph = await self._require_graph(workspace_id)
        node = find_node(graph, task_id)
        if node is None:
            raise NotFound("task", task_id)
        if node.detail_loaded:
            return node

        workspace = self.cache.catalog.get(workspace_id)
        started = time.perf_counter()
        try:
            patch = await self.cache.generator.generate_detail(workspace, node)
        except Exception as e:
            sync_logger.log_generation(workspace_id, "detail", success=False, error=str(e))
            raise GenerationFailed(workspace_id, str(e), cause=e) from e

        duration_ms = (time.perf_counter() - started) * 1000
        metrics.record_latency("generation.detail", duration_ms)
        sync_logger.log_generation(workspace_id, "detail", item_count=1, duration_ms=duration_ms)

        return await self.write(workspace_id, task_id, patch)

    async def write_solution(self, workspace_id: str, task_id: str) -> str:
        """Generate and store the reference solution for a task"""

        graph = await self._require_graph(workspace_id)
        node = find_node(graph, task_id)
        if node is None:
            raise NotFound("task", task_id)

        workspace = self.cache.catalog.get(workspace_id)
        try:
            solution = await self.cache.generator.generate_solution(workspace, node)
        except Exception as e:
            sync_logger.log_generation(workspace_id, "solution", success=False, error=str(e))
            raise GenerationFailed(workspace_id, str(e), cause=e) from e

        await self.write(workspace_id, task_id, DetailPatch(solution_writeup=solution), mark_loaded=False)
        return solution

    async def _require_graph(self, workspace_id: str) -> ContentGraph:
        graph = await self.cache.get(workspace_id)
        if graph is None:
            raise NotFound("workspace", workspace_id)
        return graph
