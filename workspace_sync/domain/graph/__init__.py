from .traversal import iter_depth_first, find_node, flatten
from .mutations import append_follow_up, write_detail, unique_id, MAX_FOLLOW_UPS

__all__ = [
    "iter_depth_first", "find_node", "flatten",
    "append_follow_up", "write_detail", "unique_id", "MAX_FOLLOW_UPS",
]
