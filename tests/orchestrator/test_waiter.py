"""Tests for wait_for_finish."""

from unittest.mock import AsyncMock

import pytest

from revchain.gateways.base import AgentGateway
from revchain.gateways.errors import GatewayUnavailable
from revchain.gateways.models import Agent, AgentSource, AgentStatus, AgentTarget
from revchain.orchestrator.waiter import wait_for_finish


def _agent(status: AgentStatus) -> Agent:
    return Agent(
        id="a1",
        status=status,
        source=AgentSource(repository="https://github.com/acme/app"),
        target=AgentTarget(branch_name="feat/x"),
    )


class TestWaitForFinish:
    """Test bounded waits."""

    @pytest.mark.asyncio
    async def test_returns_when_finished(self) -> None:
        agents = AsyncMock(spec=AgentGateway)
        agents.get_agent.side_effect = [
            _agent(AgentStatus.CREATING),
            _agent(AgentStatus.RUNNING),
            _agent(AgentStatus.FINISHED),
        ]

        result = await wait_for_finish(agents, "a1", timeout_seconds=5, interval_seconds=0)

        assert result.timed_out is False
        assert result.agent.status == AgentStatus.FINISHED
        assert agents.get_agent.await_count == 3

    @pytest.mark.asyncio
    async def test_error_status_is_terminal(self) -> None:
        agents = AsyncMock(spec=AgentGateway)
        agents.get_agent.return_value = _agent(AgentStatus.ERROR)

        result = await wait_for_finish(agents, "a1", timeout_seconds=5, interval_seconds=0)

        assert result.timed_out is False
        assert result.agent.status == AgentStatus.ERROR

    @pytest.mark.asyncio
    async def test_times_out(self) -> None:
        agents = AsyncMock(spec=AgentGateway)
        agents.get_agent.return_value = _agent(AgentStatus.RUNNING)

        result = await wait_for_finish(agents, "a1", timeout_seconds=0, interval_seconds=1)

        assert result.timed_out is True
        assert result.agent.status == AgentStatus.RUNNING
        agents.get_agent.assert_awaited_once_with("a1")

    @pytest.mark.asyncio
    async def test_gateway_errors_propagate(self) -> None:
        agents = AsyncMock(spec=AgentGateway)
        agents.get_agent.side_effect = GatewayUnavailable("timeout")

        with pytest.raises(GatewayUnavailable):
            await wait_for_finish(agents, "a1", timeout_seconds=5, interval_seconds=0)
