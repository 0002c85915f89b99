"""GitHub adapter built on PyGithub.

PyGithub is synchronous; each call runs in a worker thread so the polling loop
stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from revchain.gateways.base import RepoGateway
from revchain.gateways.errors import AuthorizationError, GatewayError, GatewayUnavailable
from revchain.gateways.models import (
    ChangedFile,
    CheckConclusion,
    CommitState,
    IssueRef,
    PullRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GitHubRepoGateway(RepoGateway):
    """RepoGateway for github.com (or a GitHub Enterprise base URL)."""

    def __init__(
        self,
        token: str,
        user_agent: str | None = None,
        timeout_seconds: int = 20,
        base_url: str | None = None,
        client: Github | None = None,
    ) -> None:
        if client is not None:
            self._github = client
        else:
            kwargs: dict[str, Any] = {
                "auth": Auth.Token(token),
                "timeout": timeout_seconds,
                "user_agent": user_agent or "revchain",
            }
            if base_url:
                kwargs["base_url"] = base_url
            self._github = Github(**kwargs)
        self._repos: dict[str, Repository] = {}

    def _repo(self, owner: str, repo: str) -> Repository:
        full_name = f"{owner}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self._github.get_repo(full_name)
        return self._repos[full_name]

    async def _call(self, operation: str, fn: Callable[[], T]) -> T:
        """Run a blocking PyGithub call in a thread, mapping failures to gateway errors."""
        try:
            return await asyncio.to_thread(fn)
        except GithubException as e:
            message = f"GitHub {operation} failed with HTTP {e.status}: {e.data}"
            if e.status in (401, 403):
                raise AuthorizationError(message, status_code=e.status) from e
            raise GatewayError(message, status_code=e.status) from e
        except requests.exceptions.RequestException as e:
            raise GatewayUnavailable(f"GitHub {operation} failed: {e}") from e

    async def get_branch_head_sha(self, owner: str, repo: str, branch: str) -> str:
        return await self._call(
            "get commit", lambda: self._repo(owner, repo).get_commit(branch).sha
        )

    async def create_check_run(self, owner: str, repo: str, name: str, head_sha: str) -> int:
        def create() -> int:
            check = self._repo(owner, repo).create_check_run(
                name=name,
                head_sha=head_sha,
                status="in_progress",
                started_at=datetime.now(UTC),
            )
            return int(check.id)

        return await self._call("create check run", create)

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
        def update() -> None:
            check = self._repo(owner, repo).get_check_run(check_run_id)
            check.edit(
                status="completed",
                conclusion=conclusion.value,
                completed_at=datetime.now(UTC),
                output={"title": title, "summary": summary, "text": text},
            )

        await self._call("update check run", update)

    async def set_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        *,
        state: CommitState,
        context: str,
        description: str = "",
    ) -> None:
        def create_status() -> None:
            commit = self._repo(owner, repo).get_commit(sha)
            commit.create_status(state=state.value, description=description, context=context)

        await self._call("set commit status", create_status)

    async def get_compare_files(
        self, owner: str, repo: str, base: str, head: str
    ) -> list[ChangedFile]:
        def compare() -> list[ChangedFile]:
            comparison = self._repo(owner, repo).compare(base, head)
            return [
                ChangedFile(
                    filename=f.filename,
                    status=f.status,
                    changes=f.changes,
                    additions=f.additions,
                    deletions=f.deletions,
                )
                for f in comparison.files
            ]

        return await self._call("compare", compare)

    async def create_pr(
        self, owner: str, repo: str, head: str, base: str, title: str, body: str
    ) -> PullRequest:
        def create() -> PullRequest:
            pr = self._repo(owner, repo).create_pull(
                base=base, head=head, title=title, body=body, draft=False
            )
            return PullRequest(number=pr.number, url=pr.html_url)

        return await self._call("create pull request", create)

    async def find_open_pr_for_branch(
        self, owner: str, repo: str, branch: str
    ) -> PullRequest | None:
        def find() -> PullRequest | None:
            pulls = self._repo(owner, repo).get_pulls(state="open", head=f"{owner}:{branch}")
            for pr in pulls:
                return PullRequest(number=pr.number, url=pr.html_url)
            return None

        return await self._call("list pull requests", find)

    async def merge_pr(self, owner: str, repo: str, number: int) -> None:
        await self._call(
            "merge pull request",
            lambda: self._repo(owner, repo).get_pull(number).merge(merge_method="merge"),
        )

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> IssueRef:
        def create() -> IssueRef:
            issue = self._repo(owner, repo).create_issue(title=title, body=body)
            return IssueRef(number=issue.number, url=issue.html_url)

        return await self._call("create issue", create)

    async def create_pr_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        await self._call(
            "create comment",
            lambda: self._repo(owner, repo).get_issue(number).create_comment(body),
        )
