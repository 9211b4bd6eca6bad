from typing import Dict, List, Optional, AbstractSet

from workspace_sync.domain.models.content import ContentGraph
from workspace_sync.domain.models.progress import ProgressRecord
from workspace_sync.domain.models.view import MergedViewNode


def merge(graph: ContentGraph, progress: Dict[str, ProgressRecord]) -> List[MergedViewNode]:
    """Project shared content plus one user's progress into a view tree

    Neither input is modified and no container is shared with the output.
    Order follows the content graph.
    """

    return [
        _merge_node(graph, root_id, progress, frozenset())
        for root_id in graph.roots
        if root_id in graph.nodes
    ]


def _merge_node(
    graph: ContentGraph,
    node_id: str,
    progress: Dict[str, ProgressRecord],
    ancestors: AbstractSet[str]
) -> MergedViewNode:
    node = graph.nodes[node_id]
    data = node.model_dump(exclude={"children"})

    record = progress.get(node_id)
    if record is not None:
        data["is_completed"] = record.is_completed
        data["completed_at"] = record.completed_at
        data["answers"] = dict(record.answers)

    path = ancestors | {node_id}
    data["children"] = [
        _merge_node(graph, child_id, progress, path)
        for child_id in node.children
        if child_id in graph.nodes and child_id not in path
    ]

    return MergedViewNode.model_validate(data)


def find_view_node(tasks: List[MergedViewNode], task_id: str) -> Optional[MergedViewNode]:
    """Depth-first lookup in a merged tree"""

    for task in tasks:
        if task.id == task_id:
            return task
        found = find_view_node(task.children, task_id)
        if found is not None:
            return found
    return None


def iter_view(tasks: List[MergedViewNode]):
    """Yield every merged node, parents before follow-ups"""

    for task in tasks:
        yield task
        yield from iter_view(task.children)
