from .content import (
    Difficulty, SubItem, QuizQuestion, FileAsset, WorkspaceDescriptor,
    GeneratedTask, DetailPatch, ContentNode, ContentGraph, EnvConfig
)
from .metrics import Level, UserMetrics, Achievement
from .progress import ProgressRecord, UserState, ActiveView
from .view import MergedViewNode, WorkspaceSummary, WorkspaceView

__all__ = [
    "Difficulty", "SubItem", "QuizQuestion", "FileAsset", "WorkspaceDescriptor",
    "GeneratedTask", "DetailPatch", "ContentNode", "ContentGraph", "EnvConfig",
    "Level", "UserMetrics", "Achievement",
    "ProgressRecord", "UserState", "ActiveView",
    "MergedViewNode", "WorkspaceSummary", "WorkspaceView",
]
