"""Orchestrator — polling control loop driving review chains.

Each tick lists every agent, reviews the ones that finished since the last
tick, and either accepts the work (pull request, optional merge) or sends it
back for revision. Agents are handled one at a time; a failure is logged and
the tick moves on to the next agent.
"""

from __future__ import annotations

import asyncio
import logging

from revchain.chains.models import Chain, IterationStatus
from revchain.chains.processed import ProcessedSet
from revchain.chains.store import ChainStore
from revchain.config import ReviewPolicy
from revchain.gateways.base import AgentGateway, RepoGateway
from revchain.gateways.errors import AuthorizationError, FollowupRejected, GatewayError
from revchain.gateways.models import Agent, AgentStatus, PullRequest
from revchain.orchestrator import messages
from revchain.orchestrator.models import AgentOutcome, TickReport
from revchain.orchestrator.repository import parse_repository
from revchain.orchestrator.status import StatusReporter
from revchain.review.models import Verdict
from revchain.review.pipeline import ReviewPipeline

logger = logging.getLogger(__name__)


def processed_identity(agent_id: str, chain: Chain | None) -> str:
    """Identity under which one review round of ``agent_id`` is recorded.

    The first round uses the bare agent id. Every followup appends the agent
    to its chain again, and round ``n > 1`` is recorded as ``"<id>#<n>"``.
    """
    rounds = chain.rounds_for(agent_id) if chain is not None else 1
    return agent_id if rounds <= 1 else f"{agent_id}#{rounds}"


class Orchestrator:
    """Polls agents and drives each review chain to acceptance."""

    def __init__(
        self,
        agents: AgentGateway,
        repos: RepoGateway,
        pipeline: ReviewPipeline,
        chains: ChainStore,
        processed: ProcessedSet,
        policy: ReviewPolicy | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            agents: Agent service gateway
            repos: Source-control gateway
            pipeline: Review pipeline producing verdicts
            chains: Chain ledger (sole writer)
            processed: At-most-once ledger (sole writer)
            policy: Review switches and limits
        """
        self.agents = agents
        self.repos = repos
        self.pipeline = pipeline
        self.chains = chains
        self.processed = processed
        self.policy = policy or ReviewPolicy()
        self.status = StatusReporter(repos)

    # Loop

    async def run_forever(self, stop: asyncio.Event) -> None:
        """Tick until ``stop`` is set, waiting ``poll_interval_ms`` between ticks.

        Ticks never overlap. Both ledgers are flushed on exit.
        """
        interval = self.policy.poll_interval_ms / 1000
        logger.info("Starting review orchestrator (poll every %.1fs)", interval)
        try:
            while not stop.is_set():
                await self.tick()
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval)
                except TimeoutError:
                    pass
        finally:
            self.chains.flush()
            self.processed.flush()
            logger.info("Review orchestrator stopped")

    async def tick(self) -> TickReport:
        """Run one polling pass over every listed agent."""
        report = TickReport()
        try:
            agents = await self.list_all_agents()
        except Exception as e:
            logger.error("Listing agents failed, skipping tick: %s", e)
            report.listing_failed = True
            return report

        report.listed = len(agents)
        for agent in agents:
            try:
                outcome = await self.process_agent(agent)
            except Exception:
                chain = self.chains.get_chain(agent.id)
                logger.exception(
                    "agent=%s chain=%s review failed",
                    agent.id,
                    chain.original_agent_id if chain else "-",
                )
                outcome = AgentOutcome.failed
            report.outcomes[agent.id] = outcome

        if report.acted:
            logger.info(
                "Tick done: %d listed, %d approved, %d forced, %d revising, %d failed",
                report.listed,
                report.count(AgentOutcome.approved),
                report.count(AgentOutcome.forced),
                report.count(AgentOutcome.revision_requested)
                + report.count(AgentOutcome.relaunched),
                report.count(AgentOutcome.failed),
            )
        return report

    async def list_all_agents(self) -> list[Agent]:
        """Follow ``next_cursor`` until the listing is exhausted."""
        agents: list[Agent] = []
        seen_cursors: set[str] = set()
        cursor: str | None = None
        while True:
            page = await self.agents.list_agents(limit=self.policy.page_size, cursor=cursor)
            agents.extend(page.agents)
            cursor = page.next_cursor
            if not cursor or cursor in seen_cursors:
                return agents
            seen_cursors.add(cursor)

    # Per-agent state machine

    async def process_agent(self, agent: Agent) -> AgentOutcome:
        """Decide what to do with one listed agent."""
        chain = self.chains.get_chain(agent.id)
        identity = processed_identity(agent.id, chain)
        if identity in self.processed:
            return AgentOutcome.already_processed

        if agent.status in (AgentStatus.CREATING, AgentStatus.RUNNING):
            logger.debug("agent=%s is %s on %s", agent.id, agent.status, agent.branch)
            return AgentOutcome.in_progress

        if agent.status == AgentStatus.FINISHED and await self._unchanged_since_review(
            agent, chain
        ):
            logger.debug(
                "agent=%s still at the reviewed commit of %s; waiting for its revision",
                agent.id,
                agent.branch,
            )
            return AgentOutcome.awaiting_changes

        self.processed.add(identity)

        if agent.status != AgentStatus.FINISHED:
            logger.warning(
                "agent=%s ended with status %s on %s; nothing to review",
                agent.id,
                agent.status,
                agent.branch,
            )
            return AgentOutcome.terminal_failure

        return await self._review_finished(agent)

    async def _unchanged_since_review(self, agent: Agent, chain: Chain | None) -> bool:
        """True while a revised agent's branch head is the commit already reviewed.

        The agent service can keep reporting FINISHED for a moment after a
        followup is delivered; the head commit tells the two rounds apart.
        """
        if chain is None:
            return False
        reviewed_sha = chain.previous_head_sha(agent.id)
        parsed = parse_repository(agent.source.repository)
        if reviewed_sha is None or parsed is None:
            return False
        owner, repo = parsed
        head_sha = await self.repos.get_branch_head_sha(owner, repo, agent.branch)
        return head_sha == reviewed_sha

    async def _record_head_sha(self, agent: Agent, owner: str, repo: str) -> None:
        try:
            head_sha = await self.repos.get_branch_head_sha(owner, repo, agent.branch)
        except AuthorizationError:
            raise
        except GatewayError as e:
            logger.warning("agent=%s could not read head of %s: %s", agent.id, agent.branch, e)
            return
        self.chains.set_head_sha(agent.id, head_sha)

    async def _review_finished(self, agent: Agent) -> AgentOutcome:
        parsed = parse_repository(agent.source.repository)
        if parsed is None:
            logger.error(
                "agent=%s has unsupported repository URL %r; skipping",
                agent.id,
                agent.source.repository,
            )
            return AgentOutcome.invalid_repository
        owner, repo = parsed

        chain = self.chains.get_chain(agent.id)
        if chain is None:
            chain = self.chains.create_chain(agent.id, agent.branch)
        chain_key = chain.original_agent_id
        revisions = chain.revision_count
        logger.info(
            "agent=%s chain=%s reviewing %s/%s@%s (revision %d)",
            agent.id,
            chain_key,
            owner,
            repo,
            agent.branch,
            revisions,
        )

        self.chains.set_iteration_status(agent.id, IterationStatus.reviewing)
        await self._record_head_sha(agent, owner, repo)
        check_run_id: int | None = None
        if self.policy.gh_checks_enabled:
            check_run_id = await self.status.start(owner, repo, agent.branch, agent.id)
            if check_run_id is not None:
                self.chains.set_check_run_id(agent.id, check_run_id)

        try:
            verdict = await self.pipeline.review(owner, repo, agent.branch, agent.base_ref)
        except Exception as e:
            if self.policy.gh_checks_enabled:
                await self.status.abort(owner, repo, agent.branch, agent.id, check_run_id, str(e))
            raise

        if self.policy.gh_checks_enabled:
            await self.status.finish(owner, repo, agent.branch, agent.id, check_run_id, verdict)

        forced = not verdict.approved and revisions >= self.policy.max_review_iterations
        if verdict.approved or forced:
            await self._accept(agent, owner, repo, chain_key, revisions, verdict, forced)
            return AgentOutcome.forced if forced else AgentOutcome.approved

        return await self._request_revision(agent, chain_key, verdict)

    # Acceptance

    async def _ensure_pr(
        self, agent: Agent, owner: str, repo: str, title: str, body: str
    ) -> PullRequest:
        pr = await self.repos.find_open_pr_for_branch(owner, repo, agent.branch)
        if pr is not None:
            logger.info("agent=%s reusing open PR #%d for %s", agent.id, pr.number, agent.branch)
            return pr
        pr = await self.repos.create_pr(owner, repo, agent.branch, agent.base_ref, title, body)
        logger.info("agent=%s opened PR %s for %s", agent.id, pr.url, agent.branch)
        return pr

    async def _accept(
        self,
        agent: Agent,
        owner: str,
        repo: str,
        chain_key: str,
        revisions: int,
        verdict: Verdict,
        forced: bool,
    ) -> None:
        if forced:
            logger.warning(
                "agent=%s chain=%s reached %d revisions; accepting without approval",
                agent.id,
                chain_key,
                revisions,
            )

        pr = await self._ensure_pr(
            agent,
            owner,
            repo,
            messages.pr_title(agent, forced),
            messages.pr_body(agent, verdict),
        )

        if self.policy.gh_comments_enabled:
            try:
                await self.repos.create_pr_comment(
                    owner, repo, pr.number, messages.pr_comment(agent, verdict)
                )
            except GatewayError as e:
                logger.warning("agent=%s failed to comment on PR #%d: %s", agent.id, pr.number, e)

        if self.policy.auto_merge_on_approval and verdict.approved and verdict.checks.build:
            try:
                await self.repos.merge_pr(owner, repo, pr.number)
                logger.info("agent=%s auto-merged PR #%d", agent.id, pr.number)
            except GatewayError as e:
                logger.warning("agent=%s failed to merge PR #%d: %s", agent.id, pr.number, e)

        if forced and self.policy.escalation_issues_enabled:
            title, body = messages.escalation_issue(agent, chain_key, revisions, verdict, pr.url)
            try:
                issue = await self.repos.create_issue(owner, repo, title, body)
                logger.info("agent=%s opened escalation issue #%d", agent.id, issue.number)
            except GatewayError as e:
                logger.warning("agent=%s failed to open escalation issue: %s", agent.id, e)

        self.chains.approve_agent(agent.id, pr.url)

    # Revision

    async def _request_revision(
        self, agent: Agent, chain_key: str, verdict: Verdict
    ) -> AgentOutcome:
        feedback = verdict.feedback
        self.chains.set_iteration_status(agent.id, IterationStatus.needs_revision, feedback)

        try:
            await self.agents.send_followup(agent.id, messages.followup_prompt(feedback))
        except FollowupRejected as e:
            logger.warning(
                "agent=%s chain=%s followup rejected (%s); launching a new agent",
                agent.id,
                chain_key,
                e,
            )
            slug = f"{agent.branch}-review"
            launched = await self.agents.launch_agent_with_defaults(
                messages.relaunch_prompt(agent.branch, feedback),
                agent.source.repository,
                ref=agent.branch,
                branch_slug=slug,
            )
            branch = launched.branch_name or slug
            self.chains.add_iteration(chain_key, launched.id, branch, feedback)
            logger.info("agent=%s chain=%s relaunched as %s", agent.id, chain_key, launched.id)
            return AgentOutcome.relaunched

        self.chains.add_iteration(chain_key, agent.id, agent.branch, feedback)
        logger.info("agent=%s chain=%s sent back for revision", agent.id, chain_key)
        return AgentOutcome.revision_requested
