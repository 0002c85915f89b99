"""Bounded wait for an agent to reach a terminal status."""

from __future__ import annotations

import asyncio
import logging
import time

from pydantic import BaseModel

from revchain.gateways.base import AgentGateway
from revchain.gateways.models import Agent

logger = logging.getLogger(__name__)


class WaitResult(BaseModel):
    """Last observed agent state; ``timed_out`` if it never became terminal."""

    agent: Agent
    timed_out: bool


async def wait_for_finish(
    agents: AgentGateway,
    agent_id: str,
    timeout_seconds: float = 600,
    interval_seconds: float = 10,
) -> WaitResult:
    """Poll ``get_agent`` until the agent is terminal or the deadline passes.

    The agent is fetched at least once; gateway errors propagate.
    """
    deadline = time.monotonic() + timeout_seconds
    while True:
        agent = await agents.get_agent(agent_id)
        if agent.status.is_terminal:
            logger.info("agent=%s reached %s", agent_id, agent.status)
            return WaitResult(agent=agent, timed_out=False)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.warning(
                "agent=%s still %s after %.0fs", agent_id, agent.status, timeout_seconds
            )
            return WaitResult(agent=agent, timed_out=True)
        await asyncio.sleep(min(interval_seconds, remaining))
