"""Text sent to agents and posted on the repository."""

from revchain.gateways.models import Agent
from revchain.review.models import Verdict


def _mark(passed: bool) -> str:
    return "✅" if passed else "❌"


def check_run_name(agent_id: str) -> str:
    return f"Cursor Agent: {agent_id}"


def followup_prompt(feedback: str) -> str:
    return (
        "Review completed. Here's the feedback from automated analysis:\n\n"
        f"{feedback}\n\n"
        "Please address these issues and improve the implementation.\n"
        "Continue working on the same branch."
    )


def relaunch_prompt(branch: str, feedback: str) -> str:
    return (
        f"Previous work was done on branch: {branch}\n\n"
        f"Review feedback:\n{feedback}\n\n"
        "Please address the feedback and make necessary improvements.\n"
        "Start from the existing branch and create improved changes."
    )


def pr_title(agent: Agent, forced: bool) -> str:
    if forced:
        return f"⚠️ Review cap reached: {agent.branch}"
    return f"✅ Auto-approved: {agent.branch}"


def pr_body(agent: Agent, verdict: Verdict) -> str:
    return (
        "## Automated Review Results\n\n"
        f"- Build: {_mark(verdict.checks.build)}\n"
        f"- Tests: {_mark(verdict.checks.tests)}\n"
        f"- Linting: {_mark(verdict.checks.lint)}\n\n"
        "### Agent Details\n"
        f"- Agent ID: {agent.id}\n"
        f"- Branch: {agent.branch}\n\n"
        f"### Review Feedback\n{verdict.feedback or 'All checks passed'}"
    )


def pr_comment(agent: Agent, verdict: Verdict) -> str:
    summary = "create the PR!" if verdict.approved else (verdict.feedback or "Changes needed")
    return f"AI Review verdict: {summary}\n\nBranch: {agent.branch}\nAgent: {agent.id}"


def escalation_issue(
    agent: Agent, original_agent_id: str, revisions: int, verdict: Verdict, pr_url: str
) -> tuple[str, str]:
    """Title and body of the issue opened when the revision cap forces acceptance."""
    title = f"Review cap reached for {agent.branch}"
    body = (
        f"The review chain started by agent {original_agent_id} was sent back for "
        f"revision {revisions} time(s) without approval. The latest attempt was "
        f"accepted without approval and needs a human reviewer.\n\n"
        f"- Pull request: {pr_url}\n"
        f"- Latest agent: {agent.id}\n"
        f"- Branch: {agent.branch}\n"
        f"- Severity: {verdict.severity}\n\n"
        f"### Last review feedback\n{verdict.feedback or '(none)'}"
    )
    return title, body
