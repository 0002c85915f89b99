"""Orchestrator — polling loop, status publishing and agent waits."""

from revchain.orchestrator.models import AgentOutcome, TickReport
from revchain.orchestrator.orchestrator import Orchestrator, processed_identity
from revchain.orchestrator.repository import parse_repository
from revchain.orchestrator.status import StatusReporter
from revchain.orchestrator.waiter import WaitResult, wait_for_finish

__all__ = [
    "AgentOutcome",
    "Orchestrator",
    "StatusReporter",
    "TickReport",
    "WaitResult",
    "parse_repository",
    "processed_identity",
    "wait_for_finish",
]
