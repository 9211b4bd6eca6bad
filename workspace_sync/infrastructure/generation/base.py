from abc import ABC, abstractmethod
from typing import List
from datetime import datetime

from workspace_sync.domain.models.content import (
    WorkspaceDescriptor, GeneratedTask, ContentNode, DetailPatch, EnvConfig
)


class ContentGenerator(ABC):
    """Asynchronous producer of workspace content; any call may raise"""

    @abstractmethod
    async def generate_roadmap(self, workspace: WorkspaceDescriptor, timestamp: datetime) -> List[GeneratedTask]:
        """Produce the initial task list for a workspace"""
        pass

    @abstractmethod
    async def generate_follow_up(self, workspace: WorkspaceDescriptor, parent_title: str) -> List[GeneratedTask]:
        """Produce the next-step task for a parent task (one item expected)"""
        pass

    @abstractmethod
    async def generate_detail(self, workspace: WorkspaceDescriptor, node: ContentNode) -> DetailPatch:
        """Produce narrative, assets and quiz for a task"""
        pass

    @abstractmethod
    async def generate_solution(self, workspace: WorkspaceDescriptor, node: ContentNode) -> str:
        """Produce the reference solution write-up for a task"""
        pass

    @abstractmethod
    async def generate_env_config(self, workspace: WorkspaceDescriptor) -> EnvConfig:
        """Produce docker-compose and init SQL for a local environment"""
        pass
