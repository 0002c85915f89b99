"""Data shapes exchanged with the external gateways."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AgentStatus(StrEnum):
    """Lifecycle status reported by the agent service."""

    CREATING = "CREATING"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self in (AgentStatus.FINISHED, AgentStatus.ERROR, AgentStatus.EXPIRED)


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AgentSource(_ApiModel):
    repository: str
    ref: str | None = None


class AgentTarget(_ApiModel):
    branch_name: str
    url: str | None = None
    auto_create_pr: bool = False
    pr_url: str | None = None


class Agent(_ApiModel):
    """A background coding agent as reported by the agent service."""

    id: str
    name: str = ""
    status: AgentStatus
    source: AgentSource
    target: AgentTarget
    created_at: datetime | None = None

    @property
    def branch(self) -> str:
        return self.target.branch_name

    @property
    def base_ref(self) -> str:
        return self.source.ref or "main"


class AgentPage(_ApiModel):
    agents: list[Agent] = Field(default_factory=list)
    next_cursor: str | None = None


class LaunchedAgent(_ApiModel):
    """Identity returned by launch and followup calls."""

    id: str
    branch_name: str | None = None


class ApiKeyInfo(_ApiModel):
    api_key_name: str
    created_at: datetime | None = None
    user_email: str | None = None


class ChangedFile(BaseModel):
    """A file-level entry of a branch comparison."""

    model_config = ConfigDict(frozen=True)

    filename: str
    status: str
    changes: int = 0
    additions: int = 0
    deletions: int = 0


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    url: str


class IssueRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    url: str


class CheckConclusion(StrEnum):
    success = "success"
    failure = "failure"
    action_required = "action_required"
    neutral = "neutral"


class CommitState(StrEnum):
    pending = "pending"
    success = "success"
    failure = "failure"


class ReviewSeverity(StrEnum):
    low = "low"
    medium = "medium"
    high = "high"


class ReviewFindings(BaseModel):
    """Structured answer of the AI reviewer."""

    has_critical_issues: bool = Field(
        description="True only for confirmed problems that must block the change"
    )
    feedback: str = Field(
        description="Actionable feedback the coding agent can apply on its next attempt"
    )
    severity: ReviewSeverity = Field(
        default=ReviewSeverity.low, description="Overall severity: low, medium or high"
    )
