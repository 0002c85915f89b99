"""AI reviewer backed by a Pydantic AI agent.

Any model Pydantic AI knows (``"anthropic:..."``, ``"openai:..."``,
``"grok:..."``) can serve as the reviewer. The structured ``ReviewFindings``
output replaces hand-parsed JSON.
"""

from __future__ import annotations

import logging
import time

from pydantic_ai import Agent
from pydantic_ai.models import KnownModelName, Model

from revchain.gateways.base import ReviewerGateway
from revchain.gateways.models import ReviewFindings

logger = logging.getLogger(__name__)

REVIEWER_SYSTEM_PROMPT = """You are a code reviewer for changes made by autonomous coding agents.

You receive the list of changed files and the outcome of the automated build, test and lint
checks. Judge whether the change can be merged.

Rules:
- Set has_critical_issues only for confirmed problems that WILL break behaviour, leak secrets,
  or leave the task unfinished. Style preferences are never critical.
- feedback must be concrete enough for the coding agent to act on without further context.
  When there is nothing to fix, say so in one sentence.
- severity summarizes the worst problem found: low, medium or high.
"""


def _parse_model_name(model: Model | KnownModelName | str) -> tuple[str, str]:
    """Split a model spec into (model_name, provider_name)."""
    if isinstance(model, str):
        if ":" in model:
            provider, model_name = model.split(":", 1)
            return (model_name, provider)
        return (model, "unknown")
    return (model.model_name, model.system)


class PydanticAIReviewer(ReviewerGateway):
    """ReviewerGateway that asks a Pydantic AI agent for ``ReviewFindings``."""

    def __init__(
        self,
        model: Model | KnownModelName | str,
        system_prompt: str = REVIEWER_SYSTEM_PROMPT,
    ) -> None:
        self._agent: Agent[None, ReviewFindings] = Agent(
            model=model, output_type=ReviewFindings, system_prompt=system_prompt
        )
        self.model_name, self.provider_name = _parse_model_name(model)

    async def review_diff(self, prompt: str) -> ReviewFindings:
        start = time.monotonic()
        result = await self._agent.run(prompt)
        duration_ms = int((time.monotonic() - start) * 1000)

        usage = result.usage()
        logger.info(
            "Reviewer %s:%s answered in %dms (input=%d, output=%d tokens)",
            self.provider_name,
            self.model_name,
            duration_ms,
            usage.input_tokens or 0,
            usage.output_tokens or 0,
        )
        return result.output
