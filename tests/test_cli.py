"""Tests for the `layerlint` CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from layerlint import __version__
from layerlint.cli import main
from layerlint.syntax import kotlin_available

if TYPE_CHECKING:
    from pathlib import Path

needs_kotlin = pytest.mark.skipif(not kotlin_available(), reason="tree-sitter-kotlin not installed")


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "layerlint.yml"
    path.write_text(body)
    return path


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestLintCommand:
    def test_empty_directory(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["lint", str(tmp_path), "--format", "rich", "--strict"])
        assert result.exit_code == 0, result.output
        assert "No findings" in result.output

    def test_invalid_config_exit_2(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path, "rules: []\n")
        result = CliRunner().invoke(main, ["lint", str(tmp_path), "--config", str(config)])
        assert result.exit_code == 2
        assert "missing required 'version'" in result.output

    @needs_kotlin
    def test_findings_without_strict(self, kotlin_project: Path) -> None:
        result = CliRunner().invoke(main, ["lint", str(kotlin_project), "--format", "rich"])
        assert result.exit_code == 0, result.output
        assert "ForbiddenLayerImport" in result.output
        assert "NoThrowOutsidePresentation" in result.output

    @needs_kotlin
    def test_findings_with_strict(self, kotlin_project: Path) -> None:
        result = CliRunner().invoke(
            main, ["lint", str(kotlin_project), "--format", "porcelain", "--strict"]
        )
        assert result.exit_code == 1
        lines = [line for line in result.output.strip().split("\n") if line]
        assert len(lines) == 2
        assert lines[0].startswith("NoThrowOutsidePresentation:error:")

    @needs_kotlin
    def test_json(self, kotlin_project: Path) -> None:
        result = CliRunner().invoke(main, ["lint", str(kotlin_project), "--format", "json"])
        assert result.exit_code == 0, result.output
        parsed = json.loads(result.output)
        assert parsed["summary"]["findings_count"] == 2
        assert parsed["summary"]["files_scanned"] == 5

    @needs_kotlin
    def test_config_disables_rule(self, kotlin_project: Path) -> None:
        config = _write_config(
            kotlin_project,
            "version: 1\n"
            "architecture-layer-rules:\n"
            "  NoThrowOutsidePresentation:\n"
            "    active: false\n"
            "  ForbiddenLayerImport:\n"
            "    severity: warn\n",
        )
        result = CliRunner().invoke(
            main,
            ["lint", str(kotlin_project), "--config", str(config), "--format", "porcelain"],
        )
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.strip().split("\n") if line]
        assert len(lines) == 1
        assert lines[0].startswith("ForbiddenLayerImport:warn:")

    def test_unreadable_file_strict(self, tmp_path: Path) -> None:
        (tmp_path / "Bad.kt").write_bytes(b"\xff\xfe\x00")
        result = CliRunner().invoke(
            main, ["lint", str(tmp_path), "--format", "porcelain", "--strict"]
        )
        assert result.exit_code == 1
        assert "Bad.kt" in result.output


class TestRulesCommand:
    def test_lists_rules(self, tmp_path: Path) -> None:
        config = _write_config(
            tmp_path,
            "version: 1\narchitecture-layer-rules:\n  ForbiddenLayerImport:\n    active: false\n",
        )
        result = CliRunner().invoke(main, ["rules", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert "NoThrowOutsidePresentation" in result.output
        assert "ForbiddenLayerImport" in result.output
        assert "architecture-layer-rules" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path, "version: 2\n")
        result = CliRunner().invoke(main, ["rules", "--config", str(config)])
        assert result.exit_code == 2
