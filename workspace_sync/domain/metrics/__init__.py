from .metrics_engine import (
    MetricsEngine, recompute, compute_streaks, level_for, is_tech_heavy, ACHIEVEMENTS
)

__all__ = [
    "MetricsEngine", "recompute", "compute_streaks", "level_for", "is_tech_heavy", "ACHIEVEMENTS",
]
