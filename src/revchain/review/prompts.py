"""Review prompt construction."""

from revchain.gateways.models import ChangedFile
from revchain.validation.models import CheckOutcomes

MAX_LISTED_FILES = 200


def _mark(passed: bool) -> str:
    return "✅ Passed" if passed else "❌ Failed"


def build_review_prompt(files: list[ChangedFile], checks: CheckOutcomes) -> str:
    """Build the user prompt for the AI reviewer.

    Args:
        files: File-level diff between the base and head branch
        checks: Automated check outcomes

    Returns:
        Prompt summarizing changed files and check results
    """
    if files:
        listed = files[:MAX_LISTED_FILES]
        file_lines = [f"- {f.filename}: {f.status} ({f.changes} changes)" for f in listed]
        if len(files) > len(listed):
            file_lines.append(f"- ... and {len(files) - len(listed)} more file(s)")
        file_summary = "\n".join(file_lines)
    else:
        file_summary = "(no changed files)"

    return f"""Please review the following code changes.

## Changed Files
{file_summary}

## Automated Checks
- Build: {_mark(checks.build)}
- Tests: {_mark(checks.tests)}
- Linting: {_mark(checks.lint)}

Assess code quality, likely bugs, security concerns, performance implications, and whether the
changes complete the task. Report has_critical_issues, actionable feedback and an overall
severity.
"""
