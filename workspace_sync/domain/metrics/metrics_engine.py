"""
Gamification metrics, recomputed from scratch on every progress change.

Nothing here is incremental: the full progress map joined with the content
graph is the only source of truth, so the result can be discarded and rebuilt
at any time.
"""

from typing import Dict, List, Optional, Tuple, Iterable
from datetime import date, datetime, timezone, tzinfo

from workspace_sync.domain.graph.traversal import flatten
from workspace_sync.domain.models.content import ContentGraph, ContentNode, Difficulty
from workspace_sync.domain.models.metrics import Achievement, Level, UserMetrics
from workspace_sync.domain.models.progress import ProgressRecord


HOURS = {Difficulty.EASY: 2, Difficulty.MEDIUM: 5, Difficulty.HARD: 10}
IMPACT = {Difficulty.EASY: 5, Difficulty.MEDIUM: 10, Difficulty.HARD: 20}
XP = {Difficulty.EASY: 20, Difficulty.MEDIUM: 40, Difficulty.HARD: 80}

TECH_KEYWORDS = (
    "ml", "machine learning", "ai", "airflow", "docker", "kubernetes",
    "dbt", "pipeline", "engineering", "vision", "nlp",
)
TECH_BONUS = 5
XP_PER_ACTIVE_DAY = 10

SENIOR_XP = 1500
INTERMEDIATE_XP = 500

# Size proxy for "every roadmap item complete"
ROADMAP_SIZE = 19

ACHIEVEMENTS: List[Achievement] = [
    Achievement(id="first_task", label="Onboarding Complete", description="Closed your first ticket"),
    Achievement(id="ten_tasks", label="Core Member", description="Delivered 10 projects"),
    Achievement(id="first_hard", label="Deep End", description="Delivered a Hard project"),
    Achievement(id="seven_day_streak", label="On Fire", description="Shipped work 7 days in a row"),
    Achievement(id="roadmap_complete", label="Staff Engineer", description="Cleared the entire roadmap"),
]


def is_tech_heavy(node: ContentNode) -> bool:
    """Whether any skill mentions one of the engineering keywords"""
    return any(
        keyword in skill.lower()
        for skill in node.skills
        for keyword in TECH_KEYWORDS
    )


def level_for(xp: int) -> Level:
    if xp >= SENIOR_XP:
        return Level.SENIOR
    if xp >= INTERMEDIATE_XP:
        return Level.INTERMEDIATE
    return Level.JUNIOR


def compute_streaks(dates: Iterable[date], today: date) -> Tuple[int, int]:
    """Return (current, longest) streak over distinct activity dates

    Two dates less than two days apart extend the same run. The run ending on
    the latest date is current only when that date is today or yesterday.
    """

    ordered = sorted(set(dates))
    if not ordered:
        return 0, 0

    run = 1
    longest = 0
    for previous, current in zip(ordered, ordered[1:]):
        if (current - previous).days < 2:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    current_streak = run if (today - ordered[-1]).days <= 1 else 0
    return current_streak, longest


class MetricsEngine:
    """Derives UserMetrics from progress and content"""

    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    def local_date(self, moment: datetime) -> date:
        """Calendar date of a timestamp; naive values are taken as local"""

        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self.tz).date()

    def recompute(
        self,
        progress: Dict[str, ProgressRecord],
        graph: Optional[ContentGraph],
        today: Optional[date] = None
    ) -> UserMetrics:
        """Rebuild every metric; unknown task ids are skipped, never raised"""

        lookup = flatten(graph) if graph is not None else {}
        completed_ids = sorted(task_id for task_id, record in progress.items() if record.is_completed)
        completed = [lookup[task_id] for task_id in completed_ids if task_id in lookup]

        experience_hours = sum(HOURS[node.difficulty] for node in completed)
        impact_score = sum(
            IMPACT[node.difficulty] + (TECH_BONUS if is_tech_heavy(node) else 0)
            for node in completed
        )

        history: Dict[str, int] = {}
        activity: List[date] = []
        for task_id in completed_ids:
            completed_at = progress[task_id].completed_at
            if completed_at is None:
                continue
            day = self.local_date(completed_at)
            activity.append(day)
            history[day.isoformat()] = history.get(day.isoformat(), 0) + 1

        if today is None:
            today = datetime.now(self.tz).date()
        current_streak, longest_streak = compute_streaks(activity, today)
        active_days = len(set(activity))

        xp = sum(XP[node.difficulty] for node in completed) + XP_PER_ACTIVE_DAY * active_days

        achievements = []
        if len(completed) >= 1:
            achievements.append("first_task")
        if len(completed) >= 10:
            achievements.append("ten_tasks")
        if any(node.difficulty == Difficulty.HARD for node in completed):
            achievements.append("first_hard")
        if current_streak >= 7:
            achievements.append("seven_day_streak")
        if len(completed) >= ROADMAP_SIZE:
            achievements.append("roadmap_complete")

        return UserMetrics(
            experience_hours=experience_hours,
            impact_score=impact_score,
            xp=xp,
            level=level_for(xp),
            current_streak=current_streak,
            longest_streak=longest_streak,
            last_activity_date=max(activity).isoformat() if activity else None,
            contribution_history=dict(sorted(history.items())),
            achievements=achievements,
        )


def recompute(
    progress: Dict[str, ProgressRecord],
    graph: Optional[ContentGraph],
    today: Optional[date] = None
) -> UserMetrics:
    """Recompute with the default (UTC) engine"""
    return MetricsEngine().recompute(progress, graph, today)
