from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from enum import Enum


class Difficulty(str, Enum):
    """Task complexity levels"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class SubItem(BaseModel):
    """Checklist entry shown under a task"""
    id: str
    title: str


class QuizQuestion(BaseModel):
    """Validation question attached to a task"""
    id: str = Field(description="Question identifier, key of ProgressRecord.answers")
    question: str
    options: Optional[List[str]] = Field(None, description="Choices; free-text input when absent")
    correct_answer: str
    explanation: str


class FileAsset(BaseModel):
    """Downloadable dummy data bundled with a task"""
    name: str
    content: str
    type: Literal["csv", "sql", "json", "image"]


class WorkspaceDescriptor(BaseModel):
    """Identified content scope sharing one generated task graph"""
    id: str
    label: str
    industry: str
    description: str


class GeneratedTask(BaseModel):
    """Task definition as returned by the content generator"""
    id: str
    title: str
    short_description: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    skills: List[str] = Field(default_factory=list)
    sub_items: List[SubItem] = Field(default_factory=list)

    @field_validator("skills")
    @classmethod
    def _dedupe_skills(cls, skills: List[str]) -> List[str]:
        return list(dict.fromkeys(s.strip() for s in skills if s and s.strip()))


class DetailPatch(BaseModel):
    """Late-loaded detail payload merged onto a cached node"""
    sender_name: Optional[str] = None
    sender_role: Optional[str] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = Field(None, description="Stakeholder narrative")
    technical_guide: Optional[str] = None
    assets: Optional[List[FileAsset]] = None
    quiz: Optional[List[QuizQuestion]] = None
    solution_writeup: Optional[str] = None
    thumbnail_url: Optional[str] = None


class ContentNode(BaseModel):
    """Canonical task definition shared by every user of a workspace"""
    id: str = Field(description="Unique within the workspace, immutable")
    title: str
    short_description: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    skills: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None
    sub_items: List[SubItem] = Field(default_factory=list)

    # Follow-up chain, stored as ids into ContentGraph.nodes
    children: List[str] = Field(default_factory=list)
    is_follow_up: bool = False
    parent_id: Optional[str] = Field(None, description="Lookup only, never ownership")

    # Detail payload, loaded on demand and cached globally
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

    @classmethod
    def from_generated(cls, task: GeneratedTask, due_date: datetime) -> "ContentNode":
        """Build a fresh node from a generator draft"""
        return cls(
            id=task.id,
            title=task.title,
            short_description=task.short_description,
            difficulty=task.difficulty,
            skills=list(task.skills),
            due_date=due_date,
            sub_items=[item.model_copy() for item in task.sub_items],
        )


class ContentGraph(BaseModel):
    """Arena of content nodes for one workspace

    The tree is the set of nodes reachable from ``roots``; each node lists its
    follow-ups in ``children`` by id.
    """
    workspace_id: str
    generated_at: datetime
    roots: List[str] = Field(default_factory=list, description="Top-level task ids in generation order")
    nodes: Dict[str, ContentNode] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.roots

    def node(self, node_id: str) -> Optional[ContentNode]:
        return self.nodes.get(node_id)


class EnvConfig(BaseModel):
    """Local environment bundle for a workspace"""
    docker_compose: str = Field(description="docker-compose.yml contents")
    init_sql: str = Field(description="Schema-only init.sql for the warehouse database")
