"""Runtime configuration: review policy and deployment settings."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_REVIEWER_MODEL = "anthropic:claude-sonnet-4-5"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag; unset means ``default``, empty means False."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false, 1/0, yes/no, on/off), got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_str(name: str) -> str | None:
    return os.environ.get(name, "").strip() or None


class ReviewPolicy(BaseModel):
    """Switches and limits consumed by the orchestrator."""

    max_review_iterations: int = Field(default=3, ge=1)
    safe_review_mode: bool = True
    auto_merge_on_approval: bool = False
    gh_checks_enabled: bool = True
    gh_comments_enabled: bool = True
    escalation_issues_enabled: bool = True
    poll_interval_ms: int = Field(default=15_000, ge=0)
    page_size: int = Field(default=50, ge=1, le=100)

    @classmethod
    def from_env(cls) -> ReviewPolicy:
        """Load the policy from environment variables.

        Raises:
            ValueError: If a value cannot be parsed or is out of range
        """
        return cls(
            max_review_iterations=_env_int("MAX_REVIEW_ITERATIONS", 3),
            safe_review_mode=_env_bool("SAFE_REVIEW_MODE", True),
            auto_merge_on_approval=_env_bool("AUTO_MERGE_ON_APPROVAL", False),
            gh_checks_enabled=_env_bool("GH_CHECKS_ENABLED", True),
            gh_comments_enabled=_env_bool("GH_COMMENTS_ENABLED", True),
            escalation_issues_enabled=_env_bool("ESCALATION_ISSUES_ENABLED", True),
            poll_interval_ms=_env_int("POLL_INTERVAL_MS", 15_000),
            page_size=_env_int("AGENT_PAGE_SIZE", 50),
        )


class Settings(BaseModel):
    """Credentials, endpoints and state locations for one deployment."""

    cursor_api_key: str
    github_token: str
    cursor_model: str | None = None
    cursor_base_url: str | None = None
    agent_target_branch: str | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    github_username: str | None = None
    reviewer_model: str = DEFAULT_REVIEWER_MODEL
    state_dir: Path = Path("logs")
    policy: ReviewPolicy = Field(default_factory=ReviewPolicy)

    @property
    def chains_path(self) -> Path:
        return self.state_dir / "agent-chains.json"

    @property
    def legacy_chains_path(self) -> Path:
        return Path("agent-chains.json")

    @property
    def processed_path(self) -> Path:
        return self.state_dir / "processed-agents.json"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables.

        Raises:
            ValueError: If required environment variables are missing or a
                value is invalid
        """
        cursor_api_key = _env_str("CURSOR_API_KEY")
        github_token = _env_str("GITHUB_TOKEN")

        if not cursor_api_key:
            raise ValueError("CURSOR_API_KEY environment variable is required")
        if not github_token:
            raise ValueError("GITHUB_TOKEN environment variable is required")

        return cls(
            cursor_api_key=cursor_api_key,
            github_token=github_token,
            cursor_model=_env_str("CURSOR_MODEL"),
            cursor_base_url=_env_str("CURSOR_BASE_URL"),
            agent_target_branch=_env_str("AGENT_TARGET_BRANCH"),
            webhook_url=_env_str("WEBHOOK_URL"),
            webhook_secret=_env_str("WEBHOOK_SECRET"),
            github_username=_env_str("GITHUB_USERNAME"),
            reviewer_model=_env_str("REVIEWER_MODEL") or DEFAULT_REVIEWER_MODEL,
            state_dir=Path(_env_str("REVCHAIN_STATE_DIR") or "logs"),
            policy=ReviewPolicy.from_env(),
        )
