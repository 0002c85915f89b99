"""Validation — automated build, test and lint checks on a cloned branch.

Public API for validation module.
"""

from revchain.validation.detector import ProjectType, ToolchainConfig, detect_toolchain
from revchain.validation.gates import GateRunner
from revchain.validation.models import CheckOutcomes, GateResult, GateType, ValidationResult
from revchain.validation.runner import ValidationRunner
from revchain.validation.workspace import ReviewWorkspace, WorkspaceError, github_clone_url

__all__ = [
    "CheckOutcomes",
    "GateResult",
    "GateRunner",
    "GateType",
    "ProjectType",
    "ReviewWorkspace",
    "ToolchainConfig",
    "ValidationResult",
    "ValidationRunner",
    "WorkspaceError",
    "detect_toolchain",
    "github_clone_url",
]
