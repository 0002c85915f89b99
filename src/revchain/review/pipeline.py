"""ReviewPipeline — automated checks plus AI review of one branch."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from revchain.gateways.base import RepoGateway, ReviewerGateway
from revchain.gateways.models import ChangedFile
from revchain.review.models import Verdict
from revchain.review.prompts import build_review_prompt
from revchain.validation.models import CheckOutcomes
from revchain.validation.runner import ValidationRunner
from revchain.validation.workspace import ReviewWorkspace, github_clone_url

logger = logging.getLogger(__name__)


class ReviewPipeline:
    """Produces a Verdict for a branch.

    The pipeline holds no state between reviews. Each call with checks enabled
    gets its own temporary checkout, removed before the call returns.
    """

    def __init__(
        self,
        repos: RepoGateway,
        reviewer: ReviewerGateway,
        safe_review_mode: bool = True,
        clone_token: str | None = None,
        workspace_dir: Path | None = None,
        gate_timeout_seconds: int = 600,
    ) -> None:
        """Initialize the pipeline.

        Args:
            repos: Source-control gateway used for the diff
            reviewer: AI reviewer
            safe_review_mode: Skip cloning and running checks; all checks fail
            clone_token: Token embedded in the clone URL for private repositories
            workspace_dir: Parent directory for temporary checkouts
            gate_timeout_seconds: Timeout applied to each check and git command
        """
        self.repos = repos
        self.reviewer = reviewer
        self.safe_review_mode = safe_review_mode
        self.clone_token = clone_token
        self.workspace_dir = workspace_dir
        self.gate_timeout_seconds = gate_timeout_seconds

    def run_checks(self, owner: str, repo: str, branch: str) -> CheckOutcomes:
        """Clone ``branch`` and run build, tests and lint.

        Blocking; callers on the event loop go through ``asyncio.to_thread``.

        Raises:
            WorkspaceError: If the branch cannot be cloned or checked out
        """
        clone_url = github_clone_url(owner, repo, self.clone_token)
        with ReviewWorkspace(
            clone_url,
            branch,
            parent_dir=self.workspace_dir,
            timeout_seconds=self.gate_timeout_seconds,
        ) as checkout:
            runner = ValidationRunner(checkout, timeout_seconds=self.gate_timeout_seconds)
            return runner.run_checks().outcomes

    async def _changed_files(
        self, owner: str, repo: str, head_branch: str, base_branch: str
    ) -> list[ChangedFile]:
        if head_branch == base_branch:
            return []
        return await self.repos.get_compare_files(owner, repo, base_branch, head_branch)

    async def review(
        self, owner: str, repo: str, head_branch: str, base_branch: str
    ) -> Verdict:
        """Review ``head_branch`` against ``base_branch``.

        Returns:
            Verdict; approved only if the build passed and the reviewer found
            no critical issues

        Raises:
            WorkspaceError: If checks are enabled and the clone fails
            Exception: Reviewer and diff failures propagate unchanged
        """
        start = time.time()

        if self.safe_review_mode:
            logger.info("Safe review mode: skipping checks for %s/%s@%s", owner, repo, head_branch)
            checks = CheckOutcomes()
        else:
            checks = await asyncio.to_thread(self.run_checks, owner, repo, head_branch)

        files = await self._changed_files(owner, repo, head_branch, base_branch)
        prompt = build_review_prompt(files, checks)
        findings = await self.reviewer.review_diff(prompt)

        approved = checks.build and not findings.has_critical_issues
        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "Reviewed %s/%s@%s: %s (build=%s tests=%s lint=%s, %d files, %dms)",
            owner,
            repo,
            head_branch,
            "approved" if approved else "changes requested",
            checks.build,
            checks.tests,
            checks.lint,
            len(files),
            duration_ms,
        )
        return Verdict(
            approved=approved,
            feedback=findings.feedback,
            severity=findings.severity,
            has_critical_issues=findings.has_critical_issues,
            checks=checks,
            changed_files=files,
            duration_ms=duration_ms,
        )
