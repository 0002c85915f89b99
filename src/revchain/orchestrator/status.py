"""Review status publishing: check runs, falling back to commit statuses."""

from __future__ import annotations

import logging

from revchain.gateways.base import RepoGateway
from revchain.gateways.errors import AuthorizationError, GatewayError
from revchain.gateways.models import CheckConclusion, CommitState
from revchain.orchestrator.messages import check_run_name
from revchain.review.models import Verdict

logger = logging.getLogger(__name__)


class StatusReporter:
    """Publishes review progress on the agent's head commit.

    Check runs need a GitHub App token. When the token is refused (401/403) the
    reporter sets a plain commit status under the same context instead.
    Other gateway errors are logged and never fail the review, except a
    refused credential outside check runs, which propagates.
    """

    def __init__(self, repos: RepoGateway) -> None:
        self.repos = repos

    async def _commit_status(
        self,
        owner: str,
        repo: str,
        branch: str,
        agent_id: str,
        state: CommitState,
        description: str,
    ) -> None:
        sha = await self.repos.get_branch_head_sha(owner, repo, branch)
        await self.repos.set_commit_status(
            owner,
            repo,
            sha,
            state=state,
            context=check_run_name(agent_id),
            description=description,
        )

    async def start(self, owner: str, repo: str, branch: str, agent_id: str) -> int | None:
        """Open an in-progress check run.

        Returns:
            The check run id, or None if a commit status was used instead or
            publishing failed
        """
        try:
            sha = await self.repos.get_branch_head_sha(owner, repo, branch)
            try:
                return await self.repos.create_check_run(
                    owner, repo, check_run_name(agent_id), sha
                )
            except AuthorizationError:
                logger.info("Check runs not permitted on %s/%s; using commit status", owner, repo)
                await self.repos.set_commit_status(
                    owner,
                    repo,
                    sha,
                    state=CommitState.pending,
                    context=check_run_name(agent_id),
                    description="Agent review in progress",
                )
        except AuthorizationError:
            raise
        except GatewayError as e:
            logger.warning("agent=%s failed to publish review start: %s", agent_id, e)
        return None

    async def finish(
        self,
        owner: str,
        repo: str,
        branch: str,
        agent_id: str,
        check_run_id: int | None,
        verdict: Verdict,
    ) -> None:
        """Publish the verdict on the check run, or as a commit status."""
        try:
            if check_run_id is not None:
                try:
                    await self.repos.update_check_run(
                        owner,
                        repo,
                        check_run_id,
                        conclusion=(
                            CheckConclusion.success
                            if verdict.approved
                            else CheckConclusion.action_required
                        ),
                        title=verdict.conclusion_title,
                        summary=(
                            "All automated checks passed." if verdict.approved else "See feedback"
                        ),
                        text=verdict.feedback,
                    )
                    return
                except AuthorizationError:
                    logger.info("Check run %d not writable; using commit status", check_run_id)
            await self._commit_status(
                owner,
                repo,
                branch,
                agent_id,
                CommitState.success if verdict.approved else CommitState.failure,
                "Agent passed" if verdict.approved else "Agent needs changes",
            )
        except AuthorizationError:
            raise
        except GatewayError as e:
            logger.warning("agent=%s failed to publish review outcome: %s", agent_id, e)

    async def abort(
        self,
        owner: str,
        repo: str,
        branch: str,
        agent_id: str,
        check_run_id: int | None,
        reason: str,
    ) -> None:
        """Close the review status after a pipeline failure."""
        try:
            if check_run_id is not None:
                try:
                    await self.repos.update_check_run(
                        owner,
                        repo,
                        check_run_id,
                        conclusion=CheckConclusion.neutral,
                        title="Agent review failed",
                        summary="The review could not be completed.",
                        text=reason,
                    )
                    return
                except AuthorizationError:
                    logger.info("Check run %d not writable; using commit status", check_run_id)
            await self._commit_status(
                owner, repo, branch, agent_id, CommitState.failure, "Agent review failed"
            )
        except AuthorizationError:
            raise
        except GatewayError as e:
            logger.warning("agent=%s failed to publish review failure: %s", agent_id, e)
