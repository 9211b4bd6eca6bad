"""
Pure tree mutations over a ContentGraph.

Each function takes a graph and returns a new one. The input graph is never
modified; callers decide whether to persist the result.
"""

from typing import Tuple
import structlog

from workspace_sync.domain.errors import FollowUpLimitExceeded, NotFound
from workspace_sync.domain.models.content import ContentGraph, ContentNode, DetailPatch
from .traversal import find_node

logger = structlog.get_logger(__name__)

MAX_FOLLOW_UPS = 3

_LIST_FIELDS = ("assets", "quiz")


def append_follow_up(
    graph: ContentGraph,
    parent_id: str,
    draft: ContentNode,
    limit: int = MAX_FOLLOW_UPS
) -> Tuple[ContentGraph, ContentNode]:
    """Append ``draft`` as a follow-up of ``parent_id``

    Raises:
        NotFound: parent is not in the tree
        FollowUpLimitExceeded: parent already has ``limit`` follow-ups
    """

    parent = find_node(graph, parent_id)
    if parent is None:
        raise NotFound("task", parent_id)
    if len(parent.children) >= limit:
        raise FollowUpLimitExceeded(parent_id, limit)

    follow_up = draft.model_copy(
        deep=True,
        update={
            "id": unique_id(graph, draft.id, parent_id),
            "children": [],
            "is_follow_up": True,
            "parent_id": parent_id,
            "detail_loaded": False,
        }
    )

    updated = graph.model_copy(deep=True)
    updated.nodes[follow_up.id] = follow_up
    updated.nodes[parent_id].children.append(follow_up.id)

    logger.debug("Follow-up appended",
                 workspace_id=graph.workspace_id,
                 parent_id=parent_id,
                 task_id=follow_up.id,
                 branch_size=len(updated.nodes[parent_id].children))

    return updated, follow_up


def write_detail(
    graph: ContentGraph,
    task_id: str,
    patch: DetailPatch,
    mark_loaded: bool = True
) -> ContentGraph:
    """Shallow-merge the fields set on ``patch`` onto ``task_id``

    Re-applying the same patch yields the same node. ``detail_loaded`` is set
    when ``mark_loaded`` and is never cleared.

    Raises:
        NotFound: task is not in the tree
    """

    if find_node(graph, task_id) is None:
        raise NotFound("task", task_id)

    changes = patch.model_dump(exclude_unset=True)
    for key in _LIST_FIELDS:
        if key in changes and changes[key] is None:
            changes[key] = []

    data = graph.nodes[task_id].model_dump()
    data.update(changes)
    if mark_loaded:
        data["detail_loaded"] = True

    updated = graph.model_copy(deep=True)
    updated.nodes[task_id] = ContentNode.model_validate(data)

    return updated


def unique_id(graph: ContentGraph, candidate: str, prefix: str) -> str:
    """Return ``candidate`` unless another node already owns it"""

    if candidate and candidate not in graph.nodes:
        return candidate

    base = f"{prefix}-{candidate}" if candidate else prefix
    suffix = 1
    while f"{base}-{suffix}" in graph.nodes:
        suffix += 1
    return f"{base}-{suffix}"
