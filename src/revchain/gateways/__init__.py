"""Gateways — the external services the orchestration core talks to.

Public API exports for the gateways module. Concrete adapters
(``revchain.gateways.cursor``, ``revchain.gateways.github``,
``revchain.gateways.reviewer``) are imported where they are wired up.
"""

from revchain.gateways.base import AgentGateway, RepoGateway, ReviewerGateway
from revchain.gateways.errors import (
    AuthorizationError,
    FollowupRejected,
    GatewayError,
    GatewayUnavailable,
)
from revchain.gateways.models import (
    Agent,
    AgentPage,
    AgentSource,
    AgentStatus,
    AgentTarget,
    ApiKeyInfo,
    ChangedFile,
    CheckConclusion,
    CommitState,
    IssueRef,
    LaunchedAgent,
    PullRequest,
    ReviewFindings,
    ReviewSeverity,
)

__all__ = [
    "Agent",
    "AgentGateway",
    "AgentPage",
    "AgentSource",
    "AgentStatus",
    "AgentTarget",
    "ApiKeyInfo",
    "AuthorizationError",
    "ChangedFile",
    "CheckConclusion",
    "CommitState",
    "FollowupRejected",
    "GatewayError",
    "GatewayUnavailable",
    "IssueRef",
    "LaunchedAgent",
    "PullRequest",
    "RepoGateway",
    "ReviewFindings",
    "ReviewSeverity",
    "ReviewerGateway",
]
