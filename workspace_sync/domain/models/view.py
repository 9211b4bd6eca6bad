from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from workspace_sync.domain.models.content import (
    Difficulty, SubItem, FileAsset, QuizQuestion
)
from workspace_sync.domain.models.metrics import UserMetrics


class MergedViewNode(BaseModel):
    """Content node with one user's progress overlaid; never persisted"""
    id: str
    title: str
    short_description: str = ""
    difficulty: Difficulty
    skills: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None
    sub_items: List[SubItem] = Field(default_factory=list)
    children: List["MergedViewNode"] = Field(default_factory=list)
    is_follow_up: bool = False
    parent_id: Optional[str] = None

    detail_loaded: bool = False
    sender_name: Optional[str] = None
    sender_role: Optional[str] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = None
    technical_guide: Optional[str] = None
    assets: List[FileAsset] = Field(default_factory=list)
    quiz: List[QuizQuestion] = Field(default_factory=list)
    solution_writeup: Optional[str] = None
    thumbnail_url: Optional[str] = None

    # Overlay
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    answers: Dict[str, str] = Field(default_factory=dict)


MergedViewNode.model_rebuild()


class WorkspaceSummary(BaseModel):
    """Board and profile figures for one user in one workspace"""
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percent: int = 0
    skills: List[str] = Field(default_factory=list, description="Skills of completed tasks")
    recent_completions: List[str] = Field(default_factory=list, description="Completed task ids, newest first")


class WorkspaceView(BaseModel):
    """Response of opening a workspace"""
    workspace_id: str
    tasks: List[MergedViewNode]
    metrics: UserMetrics
    summary: WorkspaceSummary
    active_task: Optional[MergedViewNode] = None
