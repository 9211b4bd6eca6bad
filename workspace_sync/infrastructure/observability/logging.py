import structlog
import logging
import sys
from typing import Dict, Any, Optional
import os

from pydantic import BaseModel


_RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    service_name: str = "workspace-sync"
) -> None:
    """Route structlog through stdlib logging with bound request context

    ``user_id`` and ``workspace_id`` bound with
    ``structlog.contextvars.bound_contextvars`` appear on every event logged
    inside the block.
    """

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = _RENDERERS.get(log_format, structlog.dev.ConsoleRenderer)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=os.getenv("ENVIRONMENT", "development"),
    )


class SyncLogger:
    """Logger for content cache and progress events"""

    def __init__(self, name: str):
        self.logger = structlog.get_logger(name)

    def log_generation(
        self,
        workspace_id: str,
        kind: str,
        item_count: int = 0,
        duration_ms: Optional[float] = None,
        success: bool = True,
        error: Optional[str] = None
    ):
        """Log one call to the content generator"""

        log = self.logger.info if success else self.logger.warning
        log(
            "content_generation",
            workspace_id=workspace_id,
            kind=kind,
            item_count=item_count,
            duration_ms=duration_ms,
            success=success,
            error=error
        )

    def log_content_write(
        self,
        workspace_id: str,
        action: str,
        task_id: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Log a write to the shared content graph"""

        self.logger.info(
            "content_write",
            workspace_id=workspace_id,
            action=action,
            task_id=task_id,
            details=details or {}
        )

    def log_progress_update(
        self,
        user_id: str,
        task_id: str,
        changes: Dict[str, Any]
    ):
        """Log a per-user progress mutation"""

        self.logger.info(
            "progress_update",
            user_id=user_id,
            task_id=task_id,
            changes=sorted(changes)
        )


sync_logger = SyncLogger("workspace_sync")


class LatencyStats(BaseModel):
    """Running latency figures for one operation, in milliseconds"""
    count: int = 0
    total_ms: float = 0.0
    min_ms: Optional[float] = None
    max_ms: Optional[float] = None

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def observe(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = duration_ms if self.min_ms is None else min(self.min_ms, duration_ms)
        self.max_ms = duration_ms if self.max_ms is None else max(self.max_ms, duration_ms)


class SyncStats:
    """In-process counters for cache hits and generator latency

    Served by ``GET /ops/metrics``; process-local and lost on restart.
    """

    def __init__(self):
        self.counters: Dict[str, int] = {}
        self.latencies: Dict[str, LatencyStats] = {}

    def record_latency(self, operation: str, duration_ms: float):
        self.latencies.setdefault(operation, LatencyStats()).observe(duration_ms)
        sync_logger.logger.debug("latency_recorded", operation=operation, duration_ms=duration_ms)

    def increment_counter(self, name: str, value: int = 1):
        self.counters[name] = self.counters.get(name, 0) + value

    def snapshot(self) -> Dict[str, Any]:
        """Counters plus per-operation latency with averages"""

        return {
            "counters": dict(sorted(self.counters.items())),
            "latencies": {
                operation: {**stats.model_dump(), "avg_ms": stats.avg_ms}
                for operation, stats in sorted(self.latencies.items())
            },
        }

    def reset(self):
        self.counters.clear()
        self.latencies.clear()


metrics = SyncStats()
