from typing import Dict, List, Optional
import asyncio
import time
from datetime import datetime, timedelta
import structlog

from workspace_sync.domain.clock import Clock, utc_now
from workspace_sync.domain.errors import GenerationFailed
from workspace_sync.domain.graph.mutations import unique_id
from workspace_sync.domain.models.content import ContentGraph, ContentNode, GeneratedTask
from workspace_sync.domain.workspace.catalog import WorkspaceCatalog
from workspace_sync.infrastructure.generation.base import ContentGenerator
from workspace_sync.infrastructure.observability.logging import sync_logger, metrics
from workspace_sync.infrastructure.storage.base import PersistentStore, workspace_key

logger = structlog.get_logger(__name__)


def due_date_for(generated_at: datetime, position: int, spacing_days: int = 2) -> datetime:
    """Due date of the position-th (1-indexed) generated item"""
    return generated_at + timedelta(days=spacing_days * position)


def build_graph(
    workspace_id: str,
    drafts: List[GeneratedTask],
    generated_at: datetime,
    spacing_days: int = 2
) -> ContentGraph:
    """Turn generator drafts into a fresh arena graph"""

    graph = ContentGraph(workspace_id=workspace_id, generated_at=generated_at)

    for position, draft in enumerate(drafts, start=1):
        node = ContentNode.from_generated(draft, due_date_for(generated_at, position, spacing_days))
        node.id = unique_id(graph, node.id, workspace_id)
        graph.nodes[node.id] = node
        graph.roots.append(node.id)

    return graph


class ContentCache:
    """Shared, generate-once content graph per workspace"""

    def __init__(
        self,
        store: PersistentStore,
        generator: ContentGenerator,
        catalog: WorkspaceCatalog,
        spacing_days: int = 2,
        clock: Clock = utc_now
    ):
        self.store = store
        self.generator = generator
        self.catalog = catalog
        self.spacing_days = spacing_days
        self.clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, workspace_id: str) -> asyncio.Lock:
        """Per-workspace writer lock"""
        return self._locks.setdefault(workspace_id, asyncio.Lock())

    async def get(self, workspace_id: str) -> Optional[ContentGraph]:
        """Read the cached graph without generating"""

        raw = await self.store.get(workspace_key(workspace_id))
        if raw is None:
            return None
        return ContentGraph.model_validate(raw)

    async def save(self, graph: ContentGraph) -> None:
        """Persist the whole graph"""

        await self.store.put(workspace_key(graph.workspace_id), graph.model_dump(mode="json"))

    async def get_or_create(self, workspace_id: str) -> ContentGraph:
        """Return the cached graph, generating and storing it on first use

        Raises:
            NotFound: unknown workspace
            GenerationFailed: generator raised or returned nothing
        """

        cached = await self.get(workspace_id)
        if cached is not None and not cached.is_empty():
            metrics.increment_counter("content_cache.hit")
            return cached

        workspace = self.catalog.get(workspace_id)

        async with self.lock(workspace_id):
            # Another caller may have populated the cache while we waited
            cached = await self.get(workspace_id)
            if cached is not None and not cached.is_empty():
                metrics.increment_counter("content_cache.hit")
                return cached

            metrics.increment_counter("content_cache.miss")
            logger.info("Generating workspace roadmap", workspace_id=workspace_id)

            generated_at = self.clock()
            started = time.perf_counter()
            try:
                drafts = await self.generator.generate_roadmap(workspace, generated_at)
            except Exception as e:
                sync_logger.log_generation(workspace_id, "roadmap", success=False, error=str(e))
                raise GenerationFailed(workspace_id, str(e), cause=e) from e

            duration_ms = (time.perf_counter() - started) * 1000
            metrics.record_latency("generation.roadmap", duration_ms)

            if not drafts:
                sync_logger.log_generation(workspace_id, "roadmap", success=False, error="no tasks returned")
                raise GenerationFailed(workspace_id, "generator returned no tasks")

            graph = build_graph(workspace_id, drafts, generated_at, self.spacing_days)
            await self.save(graph)

            sync_logger.log_generation(
                workspace_id, "roadmap",
                item_count=len(graph.roots),
                duration_ms=duration_ms
            )
            return graph
