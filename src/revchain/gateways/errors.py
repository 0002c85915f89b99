"""Gateway error taxonomy.

Adapters translate transport and API failures into these types so the
orchestrator can branch on declared conditions instead of arbitrary exceptions.
"""

from __future__ import annotations


class GatewayError(Exception):
    """An external service call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GatewayUnavailable(GatewayError):
    """Network error or timeout talking to an external service."""


class AuthorizationError(GatewayError):
    """The credential was rejected (HTTP 401/403)."""


class FollowupRejected(GatewayError):
    """The agent service refused a followup for an existing agent."""
