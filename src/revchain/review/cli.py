"""CLI command for ad-hoc branch reviews."""

import asyncio
import json

from rich.console import Console
from rich.panel import Panel

from revchain.config import Settings
from revchain.review.models import Verdict

console = Console()


async def _review(
    settings: Settings, owner: str, repo: str, head: str, base: str, checks: bool | None
) -> Verdict:
    from revchain.cli.services import Services

    services = Services(settings)
    try:
        safe_mode = None if checks is None else not checks
        pipeline = services.pipeline(safe_review_mode=safe_mode)
        return await pipeline.review(owner, repo, head, base)
    finally:
        await services.aclose()


def review_command(
    repository: str,
    head: str,
    base: str = "main",
    checks: bool | None = None,
    format: str = "human",
) -> int:
    """Review one branch without touching the ledgers.

    Args:
        repository: ``OWNER/REPO``
        head: Branch to review
        base: Branch to diff against
        checks: Force checks on or off (None follows SAFE_REVIEW_MODE)
        format: Output format: "human" or "json"

    Returns:
        Exit code (0 = approved, 1 = changes requested or error, 130 = interrupted)
    """
    owner, sep, repo = repository.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        console.print(f"[red]Error:[/red] Expected OWNER/REPO, got {repository!r}")
        return 1

    try:
        settings = Settings.from_env()
        verdict = asyncio.run(_review(settings, owner, repo, head, base, checks))
    except KeyboardInterrupt:
        if format == "human":
            console.print("\n[yellow]Review cancelled by user[/yellow]")
        return 130
    except Exception as e:
        if format == "human":
            console.print(f"[red]Error:[/red] {e}")
        else:
            print(json.dumps({"error": str(e)}))
        return 1

    if format == "json":
        print(verdict.model_dump_json(indent=2))
    else:
        _output_human(verdict, f"{owner}/{repo}@{head}")
    return 0 if verdict.approved else 1


def _mark(passed: bool) -> str:
    return "[green]✓[/green]" if passed else "[red]✗[/red]"


def _output_human(verdict: Verdict, target: str) -> None:
    if verdict.approved:
        console.print(Panel("[green]✓ Approved[/green]", title=target, border_style="green"))
    else:
        console.print(Panel("[red]✗ Changes requested[/red]", title=target, border_style="red"))

    console.print(f"{_mark(verdict.checks.build)} build")
    console.print(f"{_mark(verdict.checks.tests)} tests")
    console.print(f"{_mark(verdict.checks.lint)} lint")
    console.print(f"\n[bold]Severity:[/bold] {verdict.severity}")
    console.print(f"[bold]Changed files:[/bold] {len(verdict.changed_files)}")
    console.print(f"\n{verdict.feedback}")
    console.print(f"\n[dim]Review completed in {verdict.duration_ms / 1000:.2f}s[/dim]")
