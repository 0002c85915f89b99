"""Cursor background-agent adapter over httpx."""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from revchain.gateways.base import AgentGateway
from revchain.gateways.errors import (
    AuthorizationError,
    FollowupRejected,
    GatewayError,
    GatewayUnavailable,
)
from revchain.gateways.models import Agent, AgentPage, ApiKeyInfo, LaunchedAgent

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.cursor.com/v0"
DEFAULT_MODEL = "grok-code-fast-1"


def _random_hex() -> str:
    return secrets.token_hex(2)


class CursorAgentGateway(AgentGateway):
    """AgentGateway backed by the Cursor background agents API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str | None = None,
        target_branch: str | None = None,
        webhook_url: str | None = None,
        webhook_secret: str | None = None,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Cursor API key (sent as a bearer token)
            base_url: API root
            model: Model requested for launched agents
            target_branch: Fixed branch for launched agents (overrides slugs)
            webhook_url: Status webhook attached to launched agents
            webhook_secret: Secret for the status webhook
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.model = model or DEFAULT_MODEL
        self.target_branch = target_branch
        self.webhook_url = webhook_url
        self.webhook_secret = webhook_secret
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "User-Agent": "revchain",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body, mapping failures to gateway errors."""
        try:
            response = await self._client.request(method, path, params=params, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"{method} {path} failed with HTTP {status}: {e.response.text[:200]}"
            if status in (401, 403):
                raise AuthorizationError(message, status_code=status) from e
            raise GatewayError(message, status_code=status) from e
        except (httpx.TimeoutException, httpx.TransportError) as e:
            raise GatewayUnavailable(f"{method} {path} failed: {e}") from e
        return response.json()

    async def list_agents(self, limit: int = 20, cursor: str | None = None) -> AgentPage:
        params: dict[str, Any] = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        data = await self._request("GET", "/agents", params=params)
        page = AgentPage(next_cursor=data.get("nextCursor"))
        # One malformed record must not hide the rest of the page
        for raw in data.get("agents") or []:
            try:
                page.agents.append(Agent.model_validate(raw))
            except ValidationError as e:
                agent_id = raw.get("id", "?") if isinstance(raw, dict) else "?"
                logger.warning("Skipping unreadable agent %s: %s", agent_id, e)
        return page

    async def get_agent(self, agent_id: str) -> Agent:
        data = await self._request("GET", f"/agents/{quote(agent_id, safe='')}")
        return Agent.model_validate(data)

    async def launch_agent(self, request: dict[str, Any]) -> LaunchedAgent:
        """Launch an agent from a raw request body. Pull request creation is always on."""
        body = {**request, "target": {**request.get("target", {}), "autoCreatePr": True}}

        sanitized = dict(body)
        if body.get("webhook"):
            webhook = dict(body["webhook"])
            if webhook.get("secret"):
                webhook["secret"] = "***redacted***"
            sanitized["webhook"] = webhook
        logger.debug("POST /agents payload:\n%s", json.dumps(sanitized, indent=2))

        data = await self._request("POST", "/agents", payload=body)
        return LaunchedAgent(
            id=data["id"],
            branch_name=(data.get("target") or {}).get("branchName"),
        )

    async def launch_agent_with_defaults(
        self,
        prompt_text: str,
        repository: str,
        ref: str | None = None,
        branch_slug: str | None = None,
    ) -> LaunchedAgent:
        if self.target_branch:
            branch = self.target_branch
        elif branch_slug:
            branch = f"{branch_slug}-{_random_hex()}"
        else:
            branch = f"feat/agent-{_random_hex()}"

        request: dict[str, Any] = {
            "prompt": {"text": prompt_text},
            "source": {"repository": repository, "ref": ref or "main"},
            "model": self.model,
            "target": {"autoCreatePr": True, "branchName": branch},
        }
        if self.webhook_url:
            request["webhook"] = {"url": self.webhook_url}
            if self.webhook_secret:
                request["webhook"]["secret"] = self.webhook_secret

        launched = await self.launch_agent(request)
        if launched.branch_name is None:
            launched = LaunchedAgent(id=launched.id, branch_name=branch)
        return launched

    async def send_followup(self, agent_id: str, prompt_text: str) -> LaunchedAgent:
        logger.debug("POST /agents/%s/followup", agent_id)
        try:
            data = await self._request(
                "POST",
                f"/agents/{quote(agent_id, safe='')}/followup",
                payload={"prompt": {"text": prompt_text}},
            )
        except AuthorizationError:
            raise
        except GatewayError as e:
            if e.status_code is not None and 400 <= e.status_code < 500:
                raise FollowupRejected(e.message, status_code=e.status_code) from e
            raise
        return LaunchedAgent(id=data.get("id", agent_id))

    async def get_api_key_info(self) -> ApiKeyInfo:
        data = await self._request("GET", "/me")
        return ApiKeyInfo.model_validate(data)
