"""Tests for ValidationRunner."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from revchain.validation.detector import ProjectType, ToolchainConfig
from revchain.validation.models import GateType
from revchain.validation.runner import ValidationRunner

NODE_TOOLCHAIN = ToolchainConfig(
    project_type=ProjectType.NODE,
    build_command="npm install && npm run build",
    test_command="npm test",
    lint_command="npm run lint",
)


def _completed(returncode: int) -> MagicMock:
    return MagicMock(returncode=returncode, stdout="", stderr="" if returncode == 0 else "boom")


class TestValidationRunner:
    """Test build, test and lint sequencing."""

    def test_auto_detects_toolchain(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"scripts": {"test": "jest"}}')

        runner = ValidationRunner(project_root=tmp_path)

        assert runner.toolchain.project_type == ProjectType.NODE

    @patch("subprocess.run")
    def test_all_checks_pass(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _completed(0)

        result = ValidationRunner(tmp_path, toolchain=NODE_TOOLCHAIN).run_checks()

        assert result.passed is True
        assert result.outcomes.build is True
        assert result.outcomes.tests is True
        assert result.outcomes.lint is True
        assert mock_run.call_count == 3

    @patch("subprocess.run")
    def test_build_failure_skips_tests_and_lint(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = _completed(1)

        result = ValidationRunner(tmp_path, toolchain=NODE_TOOLCHAIN).run_checks()

        assert mock_run.call_count == 1
        assert result.outcomes.build is False
        assert result.outcomes.tests is False
        assert result.outcomes.lint is False
        test_gate = result.result_for(GateType.TEST)
        assert test_gate is not None
        assert test_gate.skipped is True

    @patch("subprocess.run")
    def test_test_failure_still_runs_lint(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [_completed(0), _completed(1), _completed(0)]

        result = ValidationRunner(tmp_path, toolchain=NODE_TOOLCHAIN).run_checks()

        assert result.outcomes.build is True
        assert result.outcomes.tests is False
        assert result.outcomes.lint is True
        assert [g.gate_type for g in result.failed_gates] == [GateType.TEST]

    @patch("subprocess.run")
    def test_missing_command_counts_as_failed(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _completed(0)
        toolchain = ToolchainConfig(project_type=ProjectType.NODE, build_command="npm install")

        result = ValidationRunner(tmp_path, toolchain=toolchain).run_checks()

        assert mock_run.call_count == 1
        assert result.outcomes.build is True
        assert result.outcomes.tests is False
        lint_gate = result.result_for(GateType.LINT)
        assert lint_gate is not None
        assert lint_gate.skipped is True

    def test_unknown_project_fails_build(self, tmp_path: Path) -> None:
        result = ValidationRunner(tmp_path).run_checks()

        assert result.outcomes.build is False
        assert result.passed is False
