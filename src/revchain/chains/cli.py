"""CLI command for inspecting the chain ledger."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from revchain.chains.models import Chain, IterationStatus
from revchain.chains.store import ChainStore, ChainStoreError

console = Console()

_STATUS_STYLES = {
    IterationStatus.pending: "dim",
    IterationStatus.reviewing: "cyan",
    IterationStatus.approved: "green",
    IterationStatus.needs_revision: "yellow",
}


def chains_command(state_dir: Path, format: str = "human") -> int:
    """Print every chain in the ledger.

    Args:
        state_dir: Directory holding ``agent-chains.json``
        format: Output format: "human" or "json"

    Returns:
        Exit code (0 = success, 1 = unreadable ledger)
    """
    try:
        store = ChainStore(state_dir / "agent-chains.json")
    except ChainStoreError as e:
        if format == "human":
            console.print(f"[red]Error:[/red] {e}")
        else:
            print(json.dumps({"error": str(e)}))
        return 1

    chains = store.get_all_chains()
    if format == "json":
        data = [c.model_dump(mode="json", by_alias=True, exclude_none=True) for c in chains]
        print(json.dumps(data, indent=2))
    else:
        _output_human(chains)
    return 0


def _output_human(chains: list[Chain]) -> None:
    if not chains:
        console.print("[dim]No review chains recorded.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Chain", style="cyan")
    table.add_column("Current agent")
    table.add_column("Iterations", justify="right")
    table.add_column("Latest status", justify="center")
    table.add_column("Branch")
    table.add_column("Pull request")

    for chain in chains:
        latest = chain.iterations[-1]
        style = _STATUS_STYLES[latest.status]
        table.add_row(
            chain.original_agent_id,
            chain.current_agent_id,
            str(len(chain.iterations)),
            f"[{style}]{latest.status.value}[/{style}]",
            latest.branch,
            chain.final_pr_url or "-",
        )

    console.print(table)
    console.print(f"\n[dim]{len(chains)} chain(s)[/dim]")
