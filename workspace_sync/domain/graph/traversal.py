from typing import Dict, Iterator, List, Optional

from workspace_sync.domain.models.content import ContentGraph, ContentNode


def iter_depth_first(graph: ContentGraph) -> Iterator[ContentNode]:
    """Yield nodes reachable from the roots, root-to-leaf, in stored order"""

    seen = set()
    stack: List[str] = list(reversed(graph.roots))

    while stack:
        node_id = stack.pop()
        if node_id in seen:
            continue
        node = graph.nodes.get(node_id)
        if node is None:
            continue
        seen.add(node_id)
        yield node
        stack.extend(reversed(node.children))


def find_node(graph: ContentGraph, node_id: str) -> Optional[ContentNode]:
    """Depth-first lookup; first match wins"""

    for node in iter_depth_first(graph):
        if node.id == node_id:
            return node
    return None


def flatten(graph: ContentGraph) -> Dict[str, ContentNode]:
    """Map every reachable node, follow-ups included, by id"""

    return {node.id: node for node in iter_depth_first(graph)}
