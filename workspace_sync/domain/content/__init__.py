from .content_cache import ContentCache, build_graph, due_date_for
from .follow_up_mutator import FollowUpMutator
from .detail_writer import DetailWriter

__all__ = [
    "ContentCache", "build_graph", "due_date_for",
    "FollowUpMutator", "DetailWriter",
]
