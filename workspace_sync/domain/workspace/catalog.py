from typing import Dict, Iterable, List, Optional

from workspace_sync.domain.errors import NotFound
from workspace_sync.domain.models.content import WorkspaceDescriptor


DEFAULT_WORKSPACES: List[WorkspaceDescriptor] = [
    WorkspaceDescriptor(
        id="meta", label="Meta", industry="Social Media",
        description="Optimize ad targeting algorithms, analyze social graph density, and build automated content moderation pipelines at scale."
    ),
    WorkspaceDescriptor(
        id="instagram", label="Instagram", industry="Social Media",
        description="Develop Reels recommendation engines, model creator monetization strategies, and analyze visual engagement trends."
    ),
    WorkspaceDescriptor(
        id="amazon", label="Amazon", industry="E-commerce & Cloud",
        description="Refine supply chain logistics, implement dynamic pricing models, and improve product search relevance."
    ),
    WorkspaceDescriptor(
        id="microsoft", label="Microsoft", industry="Enterprise & Cloud",
        description="Forecast Azure cloud consumption, model enterprise churn risk, and analyze developer productivity metrics for GitHub Copilot."
    ),
    WorkspaceDescriptor(
        id="spotify", label="Spotify", industry="Audio Streaming",
        description="Enhance playlist personalization algorithms, drive podcast discovery, and model subscriber retention curves."
    ),
    WorkspaceDescriptor(
        id="paytm", label="Paytm", industry="Fintech",
        description="Detect real-time transaction fraud, assess credit risk for lending products, and analyze merchant payment behaviors."
    ),
    WorkspaceDescriptor(
        id="netflix", label="Netflix", industry="Streaming",
        description="Calculate content valuation metrics, optimize thumbnail A/B testing, and model binge-watching user behavior."
    ),
    WorkspaceDescriptor(
        id="uber", label="Uber", industry="Ride Sharing",
        description="Optimize real-time surge pricing, improve driver-rider matching algorithms, and refine ETA prediction models."
    ),
    WorkspaceDescriptor(
        id="google", label="Google", industry="Tech & Search",
        description="Improve search ranking signals, optimize real-time ad auctions, and analyze video recommendation latency."
    ),
    WorkspaceDescriptor(
        id="startup", label="Stealth Startup", industry="SaaS / Tech",
        description="Build the initial data stack, define product-market fit metrics, and implement growth hacking analytics from scratch."
    ),
]


class WorkspaceCatalog:
    """Registry of known workspace descriptors"""

    def __init__(self, workspaces: Optional[Iterable[WorkspaceDescriptor]] = None):
        self.workspaces: Dict[str, WorkspaceDescriptor] = {}
        for workspace in DEFAULT_WORKSPACES if workspaces is None else workspaces:
            self.register(workspace)

    def register(self, workspace: WorkspaceDescriptor):
        """Register or replace a workspace"""

        self.workspaces[workspace.id] = workspace

    def get(self, workspace_id: str) -> WorkspaceDescriptor:
        """Return a workspace or raise NotFound"""

        workspace = self.workspaces.get(workspace_id)
        if workspace is None:
            raise NotFound("workspace", workspace_id)
        return workspace

    def list(self) -> List[WorkspaceDescriptor]:
        return list(self.workspaces.values())
