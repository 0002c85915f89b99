"""revchain CLI application."""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Annotated

import typer
from rich import print as rprint

import revchain as revchain_pkg


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"


app = typer.Typer(
    name="revchain",
    help="Review-chain orchestration for autonomous coding agents.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"revchain {revchain_pkg.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """revchain: review, revise and merge the work of coding agents."""
    from dotenv import load_dotenv

    load_dotenv()


@app.command("run")
def run(
    once: Annotated[
        bool,
        typer.Option("--once", help="Run a single polling tick and exit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output"),
    ] = False,
) -> None:
    """Poll agents and drive their review chains."""
    from revchain.orchestrator.cli import run_command

    exit_code = run_command(once=once, verbose=verbose)
    raise typer.Exit(exit_code)


@app.command("chains")
def chains(
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
    state_dir: Annotated[
        str | None,
        typer.Option("--state-dir", help="State directory (default: $REVCHAIN_STATE_DIR or logs)"),
    ] = None,
) -> None:
    """Show the review chain ledger."""
    from pathlib import Path

    from revchain.chains.cli import chains_command

    directory = state_dir or os.environ.get("REVCHAIN_STATE_DIR") or "logs"
    exit_code = chains_command(state_dir=Path(directory), format=format.value)
    raise typer.Exit(exit_code)


@app.command("review")
def review(
    repository: Annotated[
        str,
        typer.Argument(help="Repository as OWNER/REPO"),
    ],
    head: Annotated[
        str,
        typer.Argument(help="Branch to review"),
    ],
    base: Annotated[
        str,
        typer.Option("--base", "-b", help="Branch to compare against"),
    ] = "main",
    checks: Annotated[
        bool | None,
        typer.Option(
            "--checks/--no-checks",
            help="Force build/test/lint checks on or off (default: SAFE_REVIEW_MODE)",
        ),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """Review a branch once, without recording it in the ledgers."""
    from revchain.review.cli import review_command

    exit_code = review_command(
        repository=repository,
        head=head,
        base=base,
        checks=checks,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@app.command("wait")
def wait(
    agent_id: Annotated[
        str,
        typer.Argument(help="Agent id"),
    ],
    timeout: Annotated[
        float,
        typer.Option("--timeout", "-t", help="Give up after this many seconds"),
    ] = 600,
    interval: Annotated[
        float,
        typer.Option("--interval", "-i", help="Seconds between status checks"),
    ] = 10,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """Wait for an agent to finish."""
    from revchain.orchestrator.cli import wait_command

    exit_code = wait_command(
        agent_id=agent_id,
        timeout=timeout,
        interval=interval,
        format=format.value,
    )
    raise typer.Exit(exit_code)
