"""Orchestrator result models."""

from enum import StrEnum

from pydantic import BaseModel, Field


class AgentOutcome(StrEnum):
    """What a tick did with one listed agent."""

    already_processed = "already_processed"
    in_progress = "in_progress"
    terminal_failure = "terminal_failure"
    invalid_repository = "invalid_repository"
    awaiting_changes = "awaiting_changes"
    approved = "approved"
    forced = "forced"
    revision_requested = "revision_requested"
    relaunched = "relaunched"
    failed = "failed"


class TickReport(BaseModel):
    """Summary of one polling tick."""

    listed: int = 0
    listing_failed: bool = False
    outcomes: dict[str, AgentOutcome] = Field(default_factory=dict)

    def count(self, outcome: AgentOutcome) -> int:
        return sum(1 for o in self.outcomes.values() if o == outcome)

    @property
    def acted(self) -> bool:
        """True if any agent was reviewed or failed during the tick."""
        idle = {
            AgentOutcome.already_processed,
            AgentOutcome.in_progress,
            AgentOutcome.awaiting_changes,
        }
        return any(o not in idle for o in self.outcomes.values())
