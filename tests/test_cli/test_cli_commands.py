"""Tests for the autoreset command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from autoreset.cli.main import cli

MARKED = "@auto_resettable\nclass A:\n    a = 1\n    b: int\n"
ENUM = "@auto_resettable\nclass Color(Enum):\n    RED = 1\n"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "model.py").write_text(MARKED)
    return tmp_path


class TestExpand:
    def test_preview_does_not_write(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["expand", str(project)])

        assert result.exit_code == 0
        assert "self.a = 1" in result.output
        assert (project / "model.py").read_text() == MARKED

    def test_write(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["expand", str(project), "--write", "--yes"])

        assert result.exit_code == 0
        content = (project / "model.py").read_text()
        assert "@auto_resettable" not in content
        assert "    def auto_reset(self) -> None:\n        self.a = 1\n" in content
        assert list((project / ".autoreset" / "backups").rglob("*.bak"))

    def test_single_file_target(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["expand", str(project / "model.py"), "--diff"])

        assert result.exit_code == 0
        assert "+    def auto_reset(self) -> None:" in result.output

    def test_errors_set_exit_status(self, runner: CliRunner, project: Path):
        (project / "colors.py").write_text(ENUM)

        result = runner.invoke(cli, ["expand", str(project)])

        assert result.exit_code == 1

    def test_nothing_to_do(self, runner: CliRunner, tmp_path: Path):
        (tmp_path / "plain.py").write_text("x = 1\n")

        result = runner.invoke(cli, ["expand", str(tmp_path)])

        assert result.exit_code == 0
        assert "No @auto_resettable declarations found" in result.output


class TestCheckAndUndo:
    def test_clean_project_passes(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["check", str(project)])

        assert result.exit_code == 0

    def test_reports_misplaced_marker(self, runner: CliRunner, project: Path):
        (project / "colors.py").write_text(ENUM)

        result = runner.invoke(cli, ["check", str(project)])

        assert result.exit_code == 1
        assert "not_a_class_nor_a_struct" in result.output

    def test_fix_then_undo(self, runner: CliRunner, project: Path):
        colors = project / "colors.py"
        colors.write_text(ENUM)

        fixed = runner.invoke(cli, ["check", str(project), "--fix", "--yes"])
        assert fixed.exit_code == 0
        assert colors.read_text() == "class Color(Enum):\n    RED = 1\n"

        undone = runner.invoke(cli, ["undo", "colors.py", "--target", str(project)])
        assert undone.exit_code == 0
        assert colors.read_text() == ENUM

    def test_undo_list_empty(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["undo", "--list", "--target", str(tmp_path)])

        assert result.exit_code == 0
        assert "Nothing to undo" in result.output


def test_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "autoreset" in result.output
