"""Pytest configuration and fixtures."""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from workspace_sync.config import Settings
from workspace_sync.domain.content import ContentCache, DetailWriter, FollowUpMutator
from workspace_sync.domain.models import (
    ContentNode, DetailPatch, Difficulty, EnvConfig, FileAsset, GeneratedTask, QuizQuestion,
    SubItem, WorkspaceDescriptor
)
from workspace_sync.domain.workspace.catalog import WorkspaceCatalog
from workspace_sync.domain.workspace.workspace_service import WorkspaceService
from workspace_sync.infrastructure.generation.base import ContentGenerator
from workspace_sync.infrastructure.storage.memory_store import InMemoryStore

FIXED_NOW = datetime(2024, 1, 4, 12, 0, tzinfo=timezone.utc)

WORKSPACE_ID = "acme"


def default_tasks() -> List[GeneratedTask]:
    return [
        GeneratedTask(
            id="t1", title="Clean product catalog", short_description="Normalize SKUs",
            difficulty=Difficulty.EASY, skills=["SQL", "Pandas"],
            sub_items=[SubItem(id="s1", title="Profile nulls")]
        ),
        GeneratedTask(
            id="t2", title="Design pricing A/B test", short_description="Lift revenue",
            difficulty=Difficulty.MEDIUM, skills=["Statistics"]
        ),
        GeneratedTask(
            id="t3", title="Containerize inference API", short_description="Ship the model",
            difficulty=Difficulty.HARD, skills=["Docker", "FastAPI"]
        ),
    ]


class StubGenerator(ContentGenerator):
    """Deterministic generator that records every call"""

    def __init__(
        self,
        tasks: Optional[List[GeneratedTask]] = None,
        fail: bool = False,
        delay: float = 0.0
    ):
        self.tasks = default_tasks() if tasks is None else tasks
        self.fail = fail
        self.delay = delay
        self.calls = Counter()
        self.follow_up_titles: List[str] = []

    async def _call(self, kind: str):
        self.calls[kind] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("generator offline")

    async def generate_roadmap(self, workspace, timestamp):
        await self._call("roadmap")
        return [task.model_copy(deep=True) for task in self.tasks]

    async def generate_follow_up(self, workspace, parent_title):
        await self._call("follow_up")
        self.follow_up_titles.append(parent_title)
        n = self.calls["follow_up"]
        return [GeneratedTask(
            id=f"fu-{n}",
            title=f"Automate: {parent_title}",
            difficulty=Difficulty.MEDIUM,
            skills=["Airflow"]
        )]

    async def generate_detail(self, workspace, node: ContentNode):
        await self._call("detail")
        return sample_patch(node.title)

    async def generate_solution(self, workspace, node: ContentNode):
        await self._call("solution")
        return f"## Solution for {node.title}"

    async def generate_env_config(self, workspace):
        await self._call("env_config")
        return EnvConfig(
            docker_compose=f"services:\n  warehouse:\n    image: postgres:16  # {workspace.label}\n",
            init_sql="CREATE TABLE orders (id SERIAL PRIMARY KEY);"
        )


def sample_patch(title: str = "task") -> DetailPatch:
    return DetailPatch(
        sender_name="Dana",
        sender_role="VP Sales",
        email_subject=f"Re: {title}",
        email_body="Revenue is down 5%.",
        technical_guide="Start with the raw orders table.",
        assets=[FileAsset(name="orders.csv", content="id,total\n1,\n1,10", type="csv")],
        quiz=[QuizQuestion(id="q1", question="Which KPI?", options=["AOV", "CTR"], correct_answer="AOV", explanation="Revenue")]
    )


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def catalog():
    return WorkspaceCatalog([
        WorkspaceDescriptor(id=WORKSPACE_ID, label="Acme", industry="Retail", description="Sell things.")
    ])


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def generator():
    return StubGenerator()


@pytest.fixture
def cache(store, generator, catalog):
    return ContentCache(store, generator, catalog, clock=fixed_clock)


@pytest.fixture
def follow_ups(cache):
    return FollowUpMutator(cache)


@pytest.fixture
def details(cache):
    return DetailWriter(cache)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def service(store, generator, catalog, settings):
    return WorkspaceService.build(store, generator, catalog=catalog, settings=settings, clock=fixed_clock)
