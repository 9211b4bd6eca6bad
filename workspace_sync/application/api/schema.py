from typing import Dict, Any, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from workspace_sync.domain.models.progress import ActiveView


class RegisterUserRequest(BaseModel):
    """Create or refresh a user"""
    email: str
    name: Optional[str] = None


class CompleteTaskRequest(BaseModel):
    """Completion event; server time is used when omitted"""
    completed_at: Optional[datetime] = None


class AnswerRequest(BaseModel):
    """Quiz answer event"""
    answer: str


class NavigationRequest(BaseModel):
    """Session restore hint"""
    view: ActiveView
    task_id: Optional[str] = None


class SolutionResponse(BaseModel):
    task_id: str
    solution_writeup: str


class ErrorResponse(BaseModel):
    """Error payload returned for domain failures"""
    error: str
    detail: str
    data: Dict[str, Any] = Field(default_factory=dict)
