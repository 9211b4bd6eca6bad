from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from enum import Enum


class Level(str, Enum):
    """Seniority derived from xp"""
    JUNIOR = "Junior"
    INTERMEDIATE = "Intermediate"
    SENIOR = "Senior"


class UserMetrics(BaseModel):
    """Derived statistics, rebuilt from the full progress map"""
    experience_hours: int = 0
    impact_score: int = 0
    xp: int = 0
    level: Level = Level.JUNIOR
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[str] = Field(None, description="ISO date YYYY-MM-DD")
    contribution_history: Dict[str, int] = Field(default_factory=dict, description="ISO date to completions")
    achievements: List[str] = Field(default_factory=list, description="Unlocked achievement ids")


class Achievement(BaseModel):
    """Catalog entry for an achievement id"""
    id: str
    label: str
    description: str
