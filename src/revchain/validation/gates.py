"""Gate runners for executing validation commands."""

import os
import subprocess
import time
from pathlib import Path

from revchain.validation.models import GateResult, GateType


class GateRunner:
    """Runs a validation gate and captures results."""

    def __init__(
        self,
        gate_type: GateType,
        command: str,
        cwd: Path,
        timeout_seconds: int = 600,
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize gate runner.

        Args:
            gate_type: Type of validation gate
            command: Shell command to execute
            cwd: Working directory for command execution
            timeout_seconds: Command timeout in seconds (default: 600)
            env: Optional extra environment variables
        """
        self.gate_type = gate_type
        self.command = command
        self.cwd = cwd
        self.timeout_seconds = timeout_seconds
        self.env = env

    def _run_env(self) -> dict[str, str]:
        """Environment for the command.

        Strips VIRTUAL_ENV so tools resolve the checkout's own environment
        instead of the orchestrator's.
        """
        run_env = os.environ.copy()
        run_env.pop("VIRTUAL_ENV", None)
        run_env.pop("VIRTUAL_ENV_PROMPT", None)
        if self.env:
            run_env.update(self.env)
        return run_env

    def run(self) -> GateResult:
        """Execute the gate and return result.

        Returns:
            GateResult with execution outcome; never raises
        """
        start_time = time.time()

        try:
            result = subprocess.run(
                self.command,
                shell=True,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                env=self._run_env(),
            )
        except subprocess.TimeoutExpired:
            return GateResult(
                gate_type=self.gate_type,
                passed=False,
                message=f"{self.gate_type} timeout after {self.timeout_seconds}s",
                command=self.command,
                duration_ms=self.timeout_seconds * 1000,
            )
        except OSError as e:
            return GateResult(
                gate_type=self.gate_type,
                passed=False,
                message=f"{self.gate_type} error: {e}",
                command=self.command,
                duration_ms=int((time.time() - start_time) * 1000),
            )

        duration_ms = max(1, int((time.time() - start_time) * 1000))
        passed = result.returncode == 0

        if passed:
            message = f"{self.gate_type} passed"
        elif result.stderr.strip():
            message = result.stderr.strip()[-2000:]
        elif result.stdout.strip():
            message = result.stdout.strip()[-2000:]
        else:
            message = f"{self.gate_type} failed"

        return GateResult(
            gate_type=self.gate_type,
            passed=passed,
            message=message,
            command=self.command,
            duration_ms=duration_ms,
            stdout=result.stdout,
            stderr=result.stderr,
        )
