"""Validation runner — build, then tests and lint."""

import logging
from pathlib import Path

from revchain.validation.detector import ToolchainConfig, detect_toolchain
from revchain.validation.gates import GateRunner
from revchain.validation.models import GateResult, GateType, ValidationResult

logger = logging.getLogger(__name__)


class ValidationRunner:
    """Runs the automated checks for one checkout.

    Build runs first. Tests and lint need a built tree, so a failed build
    skips both. A failed test run does not stop lint.
    """

    def __init__(
        self,
        project_root: Path,
        toolchain: ToolchainConfig | None = None,
        timeout_seconds: int = 600,
    ) -> None:
        """Initialize validation runner.

        Args:
            project_root: Root directory of the checkout
            toolchain: Optional explicit toolchain config (auto-detected if None)
            timeout_seconds: Per-gate timeout
        """
        self.project_root = project_root
        self.toolchain = toolchain or detect_toolchain(project_root)
        self.timeout_seconds = timeout_seconds

    def _get_gate_command(self, gate_type: GateType) -> str | None:
        if gate_type == GateType.BUILD:
            return self.toolchain.build_command
        elif gate_type == GateType.TEST:
            return self.toolchain.test_command
        elif gate_type == GateType.LINT:
            return self.toolchain.lint_command
        return None

    def run_gate(self, gate_type: GateType) -> GateResult:
        """Run a single gate; an undetected command yields a skipped, failed result."""
        command = self._get_gate_command(gate_type)
        if not command:
            return GateResult(
                gate_type=gate_type,
                passed=False,
                skipped=True,
                message=f"No {gate_type} command detected",
            )

        runner = GateRunner(
            gate_type=gate_type,
            command=command,
            cwd=self.project_root,
            timeout_seconds=self.timeout_seconds,
        )
        result = runner.run()
        logger.info(
            "%s gate %s in %dms (%s)",
            gate_type,
            "passed" if result.passed else "failed",
            result.duration_ms,
            command,
        )
        return result

    def run_checks(self) -> ValidationResult:
        """Run build, then tests and lint if the build passed.

        Returns:
            ValidationResult with one entry per gate
        """
        build = self.run_gate(GateType.BUILD)
        results = [build]

        if build.passed:
            results.append(self.run_gate(GateType.TEST))
            results.append(self.run_gate(GateType.LINT))
        else:
            for gate_type in (GateType.TEST, GateType.LINT):
                results.append(
                    GateResult(
                        gate_type=gate_type,
                        passed=False,
                        skipped=True,
                        message=f"{gate_type} skipped: build failed",
                    )
                )

        return ValidationResult(
            gates=results,
            total_duration_ms=sum(r.duration_ms for r in results),
        )
