"""Review data models."""

from pydantic import BaseModel, ConfigDict, Field

from revchain.gateways.models import ChangedFile, ReviewSeverity
from revchain.validation.models import CheckOutcomes


class Verdict(BaseModel):
    """Outcome of the review pipeline for one branch.

    ``approved`` is ``checks.build and not has_critical_issues``: a clean AI
    review never overrides a failed build.
    """

    approved: bool = Field(description="Build passed and no blocking findings")
    feedback: str = Field(description="Reviewer feedback, forwarded to the agent on revision")
    severity: ReviewSeverity = ReviewSeverity.low
    has_critical_issues: bool = False
    checks: CheckOutcomes = Field(default_factory=CheckOutcomes)
    changed_files: list[ChangedFile] = Field(default_factory=list)
    duration_ms: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def conclusion_title(self) -> str:
        return "Agent review passed" if self.approved else "Agent review requires changes"
