"""CLI commands for the review loop and agent waits."""

from __future__ import annotations

import asyncio
import json
import logging
import signal

from rich.console import Console

from revchain.chains.store import ChainStoreError
from revchain.config import Settings
from revchain.gateways.errors import AuthorizationError, GatewayError
from revchain.gateways.models import AgentStatus
from revchain.log import configure_logging
from revchain.orchestrator.waiter import WaitResult, wait_for_finish

logger = logging.getLogger(__name__)

console = Console()


def _install_stop_handlers(stop: asyncio.Event) -> list[signal.Signals]:
    """Set ``stop`` on SIGINT/SIGTERM and return the signals received so far."""
    loop = asyncio.get_running_loop()
    received: list[signal.Signals] = []

    def _handle(sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down after the current tick", sig.name)
        received.append(sig)
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle, sig)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C raises instead
            pass
    return received


async def _run(settings: Settings, once: bool) -> int:
    from revchain.cli.services import Services

    services = Services(settings)
    try:
        orchestrator = services.orchestrator()

        try:
            info = await services.agents.get_api_key_info()
            logger.info("Using Cursor API key %r", info.api_key_name)
        except AuthorizationError as e:
            console.print(f"[red]Error:[/red] Cursor API key rejected: {e}")
            return 1
        except GatewayError as e:
            logger.warning("Could not verify Cursor API key: %s", e)

        if once:
            report = await orchestrator.tick()
            orchestrator.chains.flush()
            orchestrator.processed.flush()
            return 1 if report.listing_failed else 0

        stop = asyncio.Event()
        received = _install_stop_handlers(stop)
        await orchestrator.run_forever(stop)
        return 130 if signal.SIGINT in received else 0
    finally:
        await services.aclose()


def run_command(once: bool = False, verbose: bool = False) -> int:
    """Start the review loop.

    Args:
        once: Run a single tick and exit
        verbose: Show debug output on the console

    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted)
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    log_path = configure_logging(settings.state_dir, verbose=verbose)
    logger.debug("Logging to %s", log_path)

    try:
        return asyncio.run(_run(settings, once))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except ChainStoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


async def _wait(settings: Settings, agent_id: str, timeout: float, interval: float) -> WaitResult:
    from revchain.gateways.cursor import DEFAULT_BASE_URL, CursorAgentGateway

    agents = CursorAgentGateway(
        api_key=settings.cursor_api_key,
        base_url=settings.cursor_base_url or DEFAULT_BASE_URL,
    )
    try:
        return await wait_for_finish(agents, agent_id, timeout, interval)
    finally:
        await agents.aclose()


def wait_command(
    agent_id: str,
    timeout: float = 600,
    interval: float = 10,
    format: str = "human",
) -> int:
    """Wait for an agent to reach a terminal status.

    Returns:
        Exit code (0 = finished, 1 = error or failed agent, 2 = timed out,
        130 = interrupted)
    """
    try:
        settings = Settings.from_env()
        result = asyncio.run(_wait(settings, agent_id, timeout, interval))
    except KeyboardInterrupt:
        if format == "human":
            console.print("\n[yellow]Wait cancelled by user[/yellow]")
        return 130
    except (ValueError, GatewayError) as e:
        if format == "human":
            console.print(f"[red]Error:[/red] {e}")
        else:
            print(json.dumps({"error": str(e)}))
        return 1

    if format == "json":
        print(result.model_dump_json(indent=2))
    else:
        agent = result.agent
        if result.timed_out:
            console.print(
                f"[yellow]⏱ {agent.id} still {agent.status} after {timeout:.0f}s[/yellow]"
            )
        elif agent.status == AgentStatus.FINISHED:
            console.print(f"[green]✓ {agent.id} finished[/green] on {agent.branch}")
        else:
            console.print(f"[red]✗ {agent.id} ended with {agent.status}[/red]")

    if result.timed_out:
        return 2
    return 0 if result.agent.status == AgentStatus.FINISHED else 1
