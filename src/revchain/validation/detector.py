"""Toolchain detection for checked-out branches."""

import json
import logging
import tomllib
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ProjectType(StrEnum):
    """Supported project types."""

    PYTHON = "python"
    NODE = "node"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class ToolchainConfig(BaseModel):
    """Commands used to build, test and lint a project.

    A ``None`` command means the check cannot run for this project.
    """

    project_type: ProjectType
    build_command: str | None = None
    test_command: str | None = None
    lint_command: str | None = None


def _detect_python(project_root: Path) -> tuple[str | None, str | None, str | None]:
    prefix = "uv run " if (project_root / "uv.lock").exists() else ""
    build_cmd = "uv sync" if prefix else "pip install -e ."
    test_cmd = None
    lint_cmd = None

    try:
        with open(project_root / "pyproject.toml", "rb") as f:
            pyproject = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        # Malformed TOML: still attempt the build so the failure is visible
        logger.warning("Could not parse pyproject.toml in %s: %s", project_root, e)
        return build_cmd, None, None

    tools = pyproject.get("tool", {})
    if "pytest" in tools:
        test_cmd = f"{prefix}pytest"
    if "ruff" in tools:
        lint_cmd = f"{prefix}ruff check"
    return build_cmd, test_cmd, lint_cmd


def _detect_node(project_root: Path) -> tuple[str | None, str | None, str | None]:
    install_cmd = "npm ci" if (project_root / "package-lock.json").exists() else "npm install"

    try:
        with open(project_root / "package.json") as f:
            package_json = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not parse package.json in %s: %s", project_root, e)
        return install_cmd, None, None

    scripts = package_json.get("scripts", {})
    dev_deps = package_json.get("devDependencies", {})

    build_cmd = f"{install_cmd} && npm run build" if "build" in scripts else install_cmd
    test_cmd = "npm test" if "test" in scripts else None
    if "lint" in scripts:
        lint_cmd: str | None = "npm run lint"
    elif "eslint" in dev_deps:
        lint_cmd = "npx eslint ."
    else:
        lint_cmd = None
    return build_cmd, test_cmd, lint_cmd


def detect_toolchain(project_root: Path) -> ToolchainConfig:
    """Auto-detect build, test and lint commands from project files.

    In mixed projects the Python commands win and the Node commands fill gaps.

    Args:
        project_root: Root directory of the checkout

    Returns:
        ToolchainConfig with detected commands
    """
    if not project_root.exists():
        return ToolchainConfig(project_type=ProjectType.UNKNOWN)

    has_python = (project_root / "pyproject.toml").exists()
    has_node = (project_root / "package.json").exists()

    if has_python and has_node:
        project_type = ProjectType.MIXED
    elif has_python:
        project_type = ProjectType.PYTHON
    elif has_node:
        project_type = ProjectType.NODE
    else:
        return ToolchainConfig(project_type=ProjectType.UNKNOWN)

    build_cmd: str | None = None
    test_cmd: str | None = None
    lint_cmd: str | None = None
    if has_python:
        build_cmd, test_cmd, lint_cmd = _detect_python(project_root)
    if has_node:
        node_build, node_test, node_lint = _detect_node(project_root)
        if build_cmd and node_build:
            build_cmd = f"{build_cmd} && {node_build}"
        else:
            build_cmd = build_cmd or node_build
        test_cmd = test_cmd or node_test
        lint_cmd = lint_cmd or node_lint

    return ToolchainConfig(
        project_type=project_type,
        build_command=build_cmd,
        test_command=test_cmd,
        lint_command=lint_cmd,
    )
