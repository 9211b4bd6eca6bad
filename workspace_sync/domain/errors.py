from typing import Optional


class WorkspaceSyncError(Exception):
    """Base error for workspace content and progress operations"""


class GenerationFailed(WorkspaceSyncError):
    """Content generator failed; nothing was cached"""

    def __init__(self, workspace_id: str, reason: str, cause: Optional[BaseException] = None):
        self.workspace_id = workspace_id
        self.reason = reason
        self.cause = cause
        super().__init__(f"Content generation failed for workspace '{workspace_id}': {reason}")


class FollowUpLimitExceeded(WorkspaceSyncError):
    """Parent node already carries the maximum number of follow-ups"""

    def __init__(self, parent_id: str, limit: int):
        self.parent_id = parent_id
        self.limit = limit
        super().__init__(f"Maximum of {limit} follow-up tasks reached for task '{parent_id}'")


class NotFound(WorkspaceSyncError):
    """Requested workspace, user or task does not exist"""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} '{identifier}' not found")
