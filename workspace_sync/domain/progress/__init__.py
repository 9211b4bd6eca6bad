from .progress_store import ProgressStore
from .overlay_merger import merge, find_view_node, iter_view

__all__ = ["ProgressStore", "merge", "find_view_node", "iter_view"]
