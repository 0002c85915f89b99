"""Tests for toolchain detection."""

import json
from pathlib import Path

from revchain.validation.detector import ProjectType, ToolchainConfig, detect_toolchain


def _write_package_json(
    root: Path, scripts: dict[str, str], dev_deps: dict[str, str] | None = None
) -> None:
    (root / "package.json").write_text(
        json.dumps({"name": "app", "scripts": scripts, "devDependencies": dev_deps or {}})
    )


class TestToolchainConfig:
    """Test ToolchainConfig model."""

    def test_commands_default_to_none(self) -> None:
        config = ToolchainConfig(project_type=ProjectType.UNKNOWN)
        assert config.build_command is None
        assert config.test_command is None
        assert config.lint_command is None


class TestDetectNode:
    """Test Node project detection."""

    def test_full_scripts_with_lockfile(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"build": "tsc", "test": "vitest", "lint": "eslint ."})
        (tmp_path / "package-lock.json").write_text("{}")

        config = detect_toolchain(tmp_path)

        assert config.project_type == ProjectType.NODE
        assert config.build_command == "npm ci && npm run build"
        assert config.test_command == "npm test"
        assert config.lint_command == "npm run lint"

    def test_no_build_script_installs_only(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"test": "jest"})

        config = detect_toolchain(tmp_path)

        assert config.build_command == "npm install"
        assert config.test_command == "npm test"
        assert config.lint_command is None

    def test_eslint_dev_dependency(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {}, {"eslint": "^9.0.0"})

        config = detect_toolchain(tmp_path)

        assert config.lint_command == "npx eslint ."

    def test_malformed_package_json(self, tmp_path: Path) -> None:
        """A broken manifest still gets an install, which then fails the build."""
        (tmp_path / "package.json").write_text("{broken")

        config = detect_toolchain(tmp_path)

        assert config.project_type == ProjectType.NODE
        assert config.build_command == "npm install"
        assert config.test_command is None


class TestDetectPython:
    """Test Python project detection."""

    def test_pytest_and_ruff(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.pytest.ini_options]\n\n'
            '[tool.ruff]\nline-length = 99\n'
        )

        config = detect_toolchain(tmp_path)

        assert config.project_type == ProjectType.PYTHON
        assert config.build_command == "pip install -e ."
        assert config.test_command == "pytest"
        assert config.lint_command == "ruff check"

    def test_uv_project(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.pytest]\n')
        (tmp_path / "uv.lock").write_text("")

        config = detect_toolchain(tmp_path)

        assert config.build_command == "uv sync"
        assert config.test_command == "uv run pytest"
        assert config.lint_command is None

    def test_malformed_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project\n")

        config = detect_toolchain(tmp_path)

        assert config.build_command == "pip install -e ."
        assert config.test_command is None


class TestDetectOther:
    """Test mixed and unknown projects."""

    def test_mixed_project(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.ruff]\n')
        _write_package_json(tmp_path, {"build": "vite build", "test": "vitest"})

        config = detect_toolchain(tmp_path)

        assert config.project_type == ProjectType.MIXED
        assert config.build_command == "pip install -e . && npm install && npm run build"
        assert config.test_command == "npm test"
        assert config.lint_command == "ruff check"

    def test_unknown_project(self, tmp_path: Path) -> None:
        (tmp_path / "README.md").write_text("hello")

        config = detect_toolchain(tmp_path)

        assert config.project_type == ProjectType.UNKNOWN
        assert config.build_command is None

    def test_missing_root(self, tmp_path: Path) -> None:
        config = detect_toolchain(tmp_path / "missing")
        assert config.project_type == ProjectType.UNKNOWN
