"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from revchain.config import DEFAULT_REVIEWER_MODEL, ReviewPolicy, Settings

ENV_VARS = [
    "CURSOR_API_KEY",
    "GITHUB_TOKEN",
    "CURSOR_MODEL",
    "CURSOR_BASE_URL",
    "AGENT_TARGET_BRANCH",
    "WEBHOOK_URL",
    "WEBHOOK_SECRET",
    "GITHUB_USERNAME",
    "REVIEWER_MODEL",
    "REVCHAIN_STATE_DIR",
    "MAX_REVIEW_ITERATIONS",
    "SAFE_REVIEW_MODE",
    "AUTO_MERGE_ON_APPROVAL",
    "GH_CHECKS_ENABLED",
    "GH_COMMENTS_ENABLED",
    "ESCALATION_ISSUES_ENABLED",
    "POLL_INTERVAL_MS",
    "AGENT_PAGE_SIZE",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURSOR_API_KEY", "key_123")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_123")


class TestReviewPolicy:
    """Test policy defaults and parsing."""

    def test_defaults(self) -> None:
        policy = ReviewPolicy.from_env()

        assert policy.max_review_iterations == 3
        assert policy.safe_review_mode is True
        assert policy.auto_merge_on_approval is False
        assert policy.gh_checks_enabled is True
        assert policy.gh_comments_enabled is True
        assert policy.escalation_issues_enabled is True
        assert policy.poll_interval_ms == 15_000
        assert policy.page_size == 50

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1", True),
            ("true", True),
            ("YES", True),
            ("on", True),
            ("0", False),
            ("false", False),
            ("no", False),
            ("off", False),
            ("", False),
        ],
    )
    def test_boolean_values(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
    ) -> None:
        monkeypatch.setenv("AUTO_MERGE_ON_APPROVAL", raw)
        assert ReviewPolicy.from_env().auto_merge_on_approval is expected

    def test_invalid_boolean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAFE_REVIEW_MODE", "maybe")
        with pytest.raises(ValueError, match="SAFE_REVIEW_MODE"):
            ReviewPolicy.from_env()

    def test_invalid_integer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_REVIEW_ITERATIONS", "three")
        with pytest.raises(ValueError, match="MAX_REVIEW_ITERATIONS"):
            ReviewPolicy.from_env()

    def test_iterations_must_be_positive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_REVIEW_ITERATIONS", "0")
        with pytest.raises(ValidationError):
            ReviewPolicy.from_env()


class TestSettings:
    """Test deployment settings."""

    def test_requires_cursor_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_123")
        with pytest.raises(ValueError, match="CURSOR_API_KEY"):
            Settings.from_env()

    def test_requires_github_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CURSOR_API_KEY", "key_123")
        with pytest.raises(ValueError, match="GITHUB_TOKEN"):
            Settings.from_env()

    @pytest.mark.usefixtures("credentials")
    def test_defaults(self) -> None:
        settings = Settings.from_env()

        assert settings.cursor_model is None
        assert settings.reviewer_model == DEFAULT_REVIEWER_MODEL
        assert settings.state_dir == Path("logs")
        assert settings.chains_path == Path("logs/agent-chains.json")
        assert settings.processed_path == Path("logs/processed-agents.json")
        assert settings.legacy_chains_path == Path("agent-chains.json")

    @pytest.mark.usefixtures("credentials")
    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("REVCHAIN_STATE_DIR", str(tmp_path))
        monkeypatch.setenv("AGENT_TARGET_BRANCH", "agents/work")
        monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com")
        monkeypatch.setenv("REVIEWER_MODEL", "openai:gpt-4o")
        monkeypatch.setenv("MAX_REVIEW_ITERATIONS", "5")
        monkeypatch.setenv("SAFE_REVIEW_MODE", "false")

        settings = Settings.from_env()

        assert settings.state_dir == tmp_path
        assert settings.agent_target_branch == "agents/work"
        assert settings.webhook_url == "https://hooks.example.com"
        assert settings.reviewer_model == "openai:gpt-4o"
        assert settings.policy.max_review_iterations == 5
        assert settings.policy.safe_review_mode is False
