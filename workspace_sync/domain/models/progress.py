from typing import Dict, Optional, Literal
from pydantic import BaseModel, Field
from datetime import datetime

from workspace_sync.domain.models.metrics import UserMetrics


ActiveView = Literal["board", "detail", "profile", "onboarding"]


class ProgressRecord(BaseModel):
    """Per-user state for one task; never carries content fields"""
    task_id: str = Field(description="Reference into a ContentNode, not ownership")
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    answers: Dict[str, str] = Field(default_factory=dict, description="Question id to answer")


class UserState(BaseModel):
    """Everything persisted under user:{uid}"""
    uid: str
    email: str
    name: Optional[str] = None
    workspace_id: str = Field("", description="Active workspace, empty before onboarding")
    created_at: datetime
    last_login: Optional[datetime] = None
    progress: Dict[str, ProgressRecord] = Field(default_factory=dict)
    metrics: UserMetrics = Field(default_factory=UserMetrics)
    last_active_view: Optional[ActiveView] = None
    last_active_task_id: Optional[str] = None
