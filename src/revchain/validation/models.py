"""Validation data models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class GateType(StrEnum):
    """Automated checks run against an agent's branch."""

    BUILD = "build"
    TEST = "test"
    LINT = "lint"


class GateResult(BaseModel):
    """Result from running a single validation gate.

    Records outcome, duration, and output from a validation command.
    """

    gate_type: GateType
    passed: bool
    message: str
    command: str | None = None
    duration_ms: int = 0
    skipped: bool = False
    stdout: str | None = None
    stderr: str | None = None

    model_config = ConfigDict(frozen=True)


class CheckOutcomes(BaseModel):
    """Pass/fail of the three automated checks. Unrun checks count as failed."""

    build: bool = False
    tests: bool = False
    lint: bool = False

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Aggregate result from running the gates in order."""

    gates: list[GateResult]
    total_duration_ms: int

    def result_for(self, gate_type: GateType) -> GateResult | None:
        for gate in self.gates:
            if gate.gate_type == gate_type:
                return gate
        return None

    def _passed(self, gate_type: GateType) -> bool:
        gate = self.result_for(gate_type)
        return gate is not None and gate.passed

    @property
    def outcomes(self) -> CheckOutcomes:
        return CheckOutcomes(
            build=self._passed(GateType.BUILD),
            tests=self._passed(GateType.TEST),
            lint=self._passed(GateType.LINT),
        )

    @property
    def passed(self) -> bool:
        return bool(self.gates) and all(g.passed for g in self.gates)

    @property
    def failed_gates(self) -> list[GateResult]:
        """Get list of gates that failed."""
        return [g for g in self.gates if not g.passed]
