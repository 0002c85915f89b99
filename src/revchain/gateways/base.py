"""Gateway abstractions consumed by the orchestration core.

Concrete adapters live beside this module; tests substitute mocks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from revchain.gateways.models import (
    Agent,
    AgentPage,
    ApiKeyInfo,
    ChangedFile,
    CheckConclusion,
    CommitState,
    IssueRef,
    LaunchedAgent,
    PullRequest,
    ReviewFindings,
)


class AgentGateway(ABC):
    """Launches background agents and reports their status."""

    @abstractmethod
    async def list_agents(self, limit: int = 20, cursor: str | None = None) -> AgentPage:
        """List one page of agents."""
        ...

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent:
        """Fetch a single agent by id."""
        ...

    @abstractmethod
    async def launch_agent_with_defaults(
        self,
        prompt_text: str,
        repository: str,
        ref: str | None = None,
        branch_slug: str | None = None,
    ) -> LaunchedAgent:
        """Launch a new agent with the deployment's default model and target branch."""
        ...

    @abstractmethod
    async def send_followup(self, agent_id: str, prompt_text: str) -> LaunchedAgent:
        """Ask an existing agent to continue on its own branch.

        Raises:
            FollowupRejected: If the service refuses the followup for this agent
        """
        ...

    @abstractmethod
    async def get_api_key_info(self) -> ApiKeyInfo:
        """Describe the credential in use."""
        ...


class RepoGateway(ABC):
    """Source-control hosting operations.

    Every method raises ``AuthorizationError`` on 401/403 responses.
    """

    @abstractmethod
    async def get_branch_head_sha(self, owner: str, repo: str, branch: str) -> str: ...

    @abstractmethod
    async def create_check_run(self, owner: str, repo: str, name: str, head_sha: str) -> int:
        """Create an in-progress check run and return its id."""
        ...

    @abstractmethod
    async def update_check_run(
        self,
        owner: str,
        repo: str,
        check_run_id: int,
        *,
        conclusion: CheckConclusion,
        title: str,
        summary: str,
        text: str = "",
    ) -> None:
        """Complete a check run with the given conclusion."""
        ...

    @abstractmethod
    async def set_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        *,
        state: CommitState,
        context: str,
        description: str = "",
    ) -> None: ...

    @abstractmethod
    async def get_compare_files(
        self, owner: str, repo: str, base: str, head: str
    ) -> list[ChangedFile]:
        """Files changed between ``base`` and ``head``."""
        ...

    @abstractmethod
    async def create_pr(
        self, owner: str, repo: str, head: str, base: str, title: str, body: str
    ) -> PullRequest: ...

    @abstractmethod
    async def find_open_pr_for_branch(
        self, owner: str, repo: str, branch: str
    ) -> PullRequest | None: ...

    @abstractmethod
    async def merge_pr(self, owner: str, repo: str, number: int) -> None: ...

    @abstractmethod
    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> IssueRef: ...

    @abstractmethod
    async def create_pr_comment(self, owner: str, repo: str, number: int, body: str) -> None: ...


class ReviewerGateway(ABC):
    """AI reviewer producing a structured judgement of a change."""

    @abstractmethod
    async def review_diff(self, prompt: str) -> ReviewFindings:
        """Review the change described by ``prompt``.

        Network and parse failures propagate to the caller.
        """
        ...
