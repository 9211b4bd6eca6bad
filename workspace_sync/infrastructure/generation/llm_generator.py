from typing import Any, List
from datetime import datetime
import time
import re
import structlog
from json_repair import repair_json
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import TypeAdapter

from workspace_sync.domain.models.content import (
    WorkspaceDescriptor, GeneratedTask, ContentNode, DetailPatch, EnvConfig
)
from workspace_sync.infrastructure.observability.logging import metrics
from .base import ContentGenerator
from .prompts import (
    SYSTEM_PROMPT, ROADMAP_PROMPT, FOLLOWUP_PROMPT, DETAIL_PROMPT, SOLUTION_PROMPT,
    ENV_SETUP_PROMPT
)

logger = structlog.get_logger(__name__)

_TASK_LIST = TypeAdapter(List[GeneratedTask])
_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*|\s*```\s*$")


class LLMContentGenerator(ContentGenerator):
    """Content generator backed by a langchain chat model"""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    async def generate_roadmap(self, workspace: WorkspaceDescriptor, timestamp: datetime) -> List[GeneratedTask]:
        prompt = ROADMAP_PROMPT.format(
            company=workspace.label,
            industry=workspace.industry,
            description=workspace.description
        )
        data = parse_json(await self._complete(prompt, "roadmap"))
        return _TASK_LIST.validate_python(_as_task_list(data))

    async def generate_follow_up(self, workspace: WorkspaceDescriptor, parent_title: str) -> List[GeneratedTask]:
        prompt = FOLLOWUP_PROMPT.format(
            company=workspace.label,
            industry=workspace.industry,
            parent_title=parent_title
        )
        data = parse_json(await self._complete(prompt, "follow_up"))
        return _TASK_LIST.validate_python(_as_task_list(data))

    async def generate_detail(self, workspace: WorkspaceDescriptor, node: ContentNode) -> DetailPatch:
        prompt = DETAIL_PROMPT.format(
            company=workspace.label,
            industry=workspace.industry,
            title=node.title,
            short_description=node.short_description
        )
        data = parse_json(await self._complete(prompt, "detail"))
        if not isinstance(data, dict):
            raise ValueError("Detail reply is not a JSON object")
        # Image assets would need an image model; keep the data assets only
        data["assets"] = [
            asset for asset in data.get("assets") or []
            if isinstance(asset, dict) and asset.get("type") != "image"
        ]
        return DetailPatch.model_validate(data)

    async def generate_solution(self, workspace: WorkspaceDescriptor, node: ContentNode) -> str:
        prompt = SOLUTION_PROMPT.format(
            company=workspace.label,
            industry=workspace.industry,
            title=node.title,
            short_description=node.short_description
        )
        text = await self._complete(prompt, "solution")
        if not text.strip():
            raise ValueError("Empty solution write-up")
        return text

    async def generate_env_config(self, workspace: WorkspaceDescriptor) -> EnvConfig:
        prompt = ENV_SETUP_PROMPT.format(company=workspace.label, industry=workspace.industry)
        data = parse_json(await self._complete(prompt, "env_config"))
        if not isinstance(data, dict):
            raise ValueError("Environment reply is not a JSON object")
        # camelCase keys are accepted too
        compose = data.get("docker_compose") or data.get("dockerCompose") or ""
        init_sql = data.get("init_sql") or data.get("initSql") or ""
        if not compose.strip():
            raise ValueError("Environment reply has no docker-compose file")
        return EnvConfig(docker_compose=compose, init_sql=init_sql)

    async def _complete(self, prompt: str, kind: str) -> str:
        """Run one chat completion and return its text"""

        started = time.perf_counter()
        response = await self.llm.ainvoke([
            SystemMessage(content=SYSTEM_PROMPT.strip()),
            HumanMessage(content=prompt.strip())
        ])
        metrics.record_latency(f"llm.{kind}", (time.perf_counter() - started) * 1000)

        content = response.content
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else part.get("text", "")
                for part in content
            )

        logger.debug("LLM reply received", kind=kind, length=len(content))
        return content


def parse_json(text: str) -> Any:
    """Parse a model reply, tolerating fences and minor syntax damage"""

    cleaned = _FENCE.sub("", text.strip())
    if not cleaned:
        raise ValueError("Empty model reply")
    data = repair_json(cleaned, return_objects=True)
    if data == "" or data is None:
        raise ValueError("Model reply is not JSON")
    return data


def _as_task_list(data: Any) -> List[Any]:
    if isinstance(data, dict):
        for key in ("tasks", "items", "roadmap"):
            if isinstance(data.get(key), list):
                return data[key]
        return [data]
    if isinstance(data, list):
        return data
    raise ValueError("Model reply is not a task list")
