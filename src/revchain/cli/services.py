"""Build the adapters and core objects for CLI commands from Settings."""

from __future__ import annotations

from typing import cast

from pydantic_ai.models import KnownModelName

from revchain.chains.processed import ProcessedSet
from revchain.chains.store import ChainStore
from revchain.config import Settings
from revchain.gateways.cursor import DEFAULT_BASE_URL, CursorAgentGateway
from revchain.gateways.github import GitHubRepoGateway
from revchain.gateways.reviewer import PydanticAIReviewer
from revchain.orchestrator.orchestrator import Orchestrator
from revchain.review.pipeline import ReviewPipeline


class Services:
    """Adapters configured for one deployment.

    Owns the agent HTTP client; call ``aclose`` when done.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.agents = CursorAgentGateway(
            api_key=settings.cursor_api_key,
            base_url=settings.cursor_base_url or DEFAULT_BASE_URL,
            model=settings.cursor_model,
            target_branch=settings.agent_target_branch,
            webhook_url=settings.webhook_url,
            webhook_secret=settings.webhook_secret,
        )
        self.repos = GitHubRepoGateway(
            token=settings.github_token,
            user_agent=settings.github_username,
        )
        self.reviewer = PydanticAIReviewer(model=cast(KnownModelName, settings.reviewer_model))

    def pipeline(self, safe_review_mode: bool | None = None) -> ReviewPipeline:
        policy = self.settings.policy
        return ReviewPipeline(
            repos=self.repos,
            reviewer=self.reviewer,
            safe_review_mode=(
                policy.safe_review_mode if safe_review_mode is None else safe_review_mode
            ),
            clone_token=self.settings.github_token,
        )

    def orchestrator(self) -> Orchestrator:
        """Open both ledgers and wire the orchestrator.

        Raises:
            ChainStoreError: If the chain ledger on disk is corrupt
        """
        chains = ChainStore(
            self.settings.chains_path, legacy_path=self.settings.legacy_chains_path
        )
        processed = ProcessedSet(self.settings.processed_path)
        return Orchestrator(
            agents=self.agents,
            repos=self.repos,
            pipeline=self.pipeline(),
            chains=chains,
            processed=processed,
            policy=self.settings.policy,
        )

    async def aclose(self) -> None:
        await self.agents.aclose()
