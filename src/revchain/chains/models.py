"""Chain ledger models.

A Chain follows one logical task across revision attempts. It is keyed by the
agent that started it and records every attempt as an Iteration.

Persisted JSON uses camelCase keys (``originalAgentId``, ``checkRunId``, ...)
so ledgers written by earlier deployments load unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IterationStatus(StrEnum):
    """Review status of a single iteration."""

    pending = "pending"
    reviewing = "reviewing"
    approved = "approved"
    needs_revision = "needs_revision"


class Iteration(BaseModel):
    """One agent attempt within a chain."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    agent_id: str
    branch: str
    status: IterationStatus = IterationStatus.pending
    feedback: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    check_run_id: int | None = None
    head_sha: str | None = None


class Chain(BaseModel):
    """Revision history of one task, rooted at the first agent that attempted it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_agent_id: str
    current_agent_id: str
    iterations: list[Iteration]
    final_pr_url: str | None = None

    @property
    def participants(self) -> set[str]:
        """Every agent id that belongs to this chain."""
        return {self.original_agent_id} | {i.agent_id for i in self.iterations}

    @property
    def revision_count(self) -> int:
        """Number of times the chain has been sent back for revision."""
        return max(len(self.iterations) - 1, 0)

    def latest_iteration_for(self, agent_id: str) -> Iteration | None:
        """Return the most recent iteration run by ``agent_id``."""
        for iteration in reversed(self.iterations):
            if iteration.agent_id == agent_id:
                return iteration
        return None

    def rounds_for(self, agent_id: str) -> int:
        """Number of iterations ``agent_id`` has run in this chain."""
        return sum(1 for i in self.iterations if i.agent_id == agent_id)

    def previous_head_sha(self, agent_id: str) -> str | None:
        """Head commit recorded when ``agent_id`` was last reviewed.

        The latest iteration of an agent is the round awaiting review, so the
        commit comes from the iteration before it.
        """
        rounds = [i for i in self.iterations if i.agent_id == agent_id]
        if len(rounds) < 2:
            return None
        return rounds[-2].head_sha
