from typing import Annotated, Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Request

from workspace_sync.domain.metrics import ACHIEVEMENTS
from workspace_sync.domain.models import (
    Achievement, ContentNode, EnvConfig, MergedViewNode, ProgressRecord, UserMetrics,
    UserState, WorkspaceDescriptor, WorkspaceView
)
from workspace_sync.domain.workspace.workspace_service import WorkspaceService
from workspace_sync.infrastructure.observability.logging import metrics
from ..schema import (
    RegisterUserRequest, CompleteTaskRequest, AnswerRequest, NavigationRequest, SolutionResponse
)

router = APIRouter()


def get_service(request: Request) -> WorkspaceService:
    return request.app.state.service


Service = Annotated[WorkspaceService, Depends(get_service)]


@router.get("/workspaces", response_model=List[WorkspaceDescriptor])
async def list_workspaces(service: Service):
    return service.catalog.list()


@router.get("/achievements", response_model=List[Achievement])
async def list_achievements():
    return ACHIEVEMENTS


@router.put("/users/{uid}", response_model=UserState)
async def register_user(uid: str, body: RegisterUserRequest, service: Service):
    return await service.register_user(uid, body.email, body.name)


@router.get("/users/{uid}/workspaces/{workspace_id}", response_model=WorkspaceView)
async def open_workspace(uid: str, workspace_id: str, service: Service):
    return await service.open_workspace(uid, workspace_id)


@router.get("/users/{uid}/tasks", response_model=List[MergedViewNode])
async def list_tasks(uid: str, service: Service):
    return await service.list_tasks(uid)


@router.post("/users/{uid}/tasks/{task_id}/complete", response_model=UserMetrics)
async def complete_task(uid: str, task_id: str, service: Service, body: Optional[CompleteTaskRequest] = None):
    return await service.complete_task(uid, task_id, at=body.completed_at if body else None)


@router.post("/users/{uid}/tasks/{task_id}/toggle", response_model=ProgressRecord)
async def toggle_task(uid: str, task_id: str, service: Service):
    return await service.toggle_task(uid, task_id)


@router.put("/users/{uid}/tasks/{task_id}/answers/{question_id}", response_model=ProgressRecord)
async def answer_question(uid: str, task_id: str, question_id: str, body: AnswerRequest, service: Service):
    return await service.answer_question(uid, task_id, question_id, body.answer)


@router.post("/users/{uid}/tasks/{task_id}/follow-ups", response_model=ContentNode, status_code=201)
async def request_follow_up(uid: str, task_id: str, service: Service):
    return await service.request_follow_up(uid, task_id)


@router.post("/users/{uid}/tasks/{task_id}/detail", response_model=MergedViewNode)
async def load_task_detail(uid: str, task_id: str, service: Service):
    return await service.load_task_detail(uid, task_id)


@router.post("/users/{uid}/tasks/{task_id}/solution", response_model=SolutionResponse)
async def generate_solution(uid: str, task_id: str, service: Service):
    solution = await service.generate_solution(uid, task_id)
    return SolutionResponse(task_id=task_id, solution_writeup=solution)


@router.put("/users/{uid}/navigation", response_model=UserState)
async def record_navigation(uid: str, body: NavigationRequest, service: Service):
    return await service.record_navigation(uid, body.view, body.task_id)


@router.get("/users/{uid}/metrics", response_model=UserMetrics)
async def get_metrics(uid: str, service: Service):
    return await service.get_metrics(uid)


@router.post("/workspaces/{workspace_id}/environment", response_model=EnvConfig)
async def generate_env_config(workspace_id: str, service: Service):
    return await service.generate_env_config(workspace_id)


@router.get("/ops/metrics")
async def get_ops_metrics() -> Dict[str, Any]:
    return metrics.snapshot()


@router.delete("/ops/metrics", status_code=204)
async def reset_ops_metrics():
    metrics.reset()
