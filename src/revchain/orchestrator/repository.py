"""Repository URL parsing."""

import re

_GITHUB_RE = re.compile(r"github\.com[/:]([^/\s]+)/([^/#?\s]+)")


def parse_repository(url: str) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a GitHub repository URL.

    Accepts ``https://github.com/o/r``, ``github.com/o/r``, ``git@github.com:o/r.git``
    and URLs with trailing paths. Returns None for anything else.
    """
    match = _GITHUB_RE.search(url)
    if match is None:
        return None
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        return None
    return owner, repo
