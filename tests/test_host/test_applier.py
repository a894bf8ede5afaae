"""Tests for writing expansions and fix-its, with backups and undo."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from autoreset.core.config import AutoResetConfig
from autoreset.host.applier import ExpansionApplier
from autoreset.host.expander import SourceExpander
from autoreset.host.undo import UndoManager

MARKED = "@auto_resettable\nclass A:\n    a = 1\n"
ENUM = "from enum import Enum\n\n\n@auto_resettable\nclass Color(Enum):\n    RED = 1\n"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def expander(project: Path) -> SourceExpander:
    return SourceExpander(project_path=project, config=AutoResetConfig())


@pytest.fixture
def applier(project: Path) -> ExpansionApplier:
    return ExpansionApplier(project_path=project)


class TestWriteExpansion:
    def test_writes_expanded_source(self, project, expander, applier):
        source_file = project / "model.py"
        source_file.write_text(MARKED)

        report = expander.expand_file(source_file)
        result = applier.write_expansion(report)

        assert result.success is True
        assert source_file.read_text() == report.expanded
        assert "def auto_reset(self) -> None:" in source_file.read_text()

    def test_creates_backup_and_manifest(self, project, expander, applier):
        source_file = project / "model.py"
        source_file.write_text(MARKED)

        result = applier.write_expansion(expander.expand_file(source_file))

        assert result.backup is not None
        assert result.backup.read_text() == MARKED
        manifest = json.loads((result.backup.parent / "manifest.json").read_text())
        assert manifest[0]["action"] == "expand"
        assert manifest[0]["file"].endswith("model.py")

    def test_refuses_stale_report(self, project, expander, applier):
        source_file = project / "model.py"
        source_file.write_text(MARKED)
        report = expander.expand_file(source_file)
        source_file.write_text(MARKED + "\nextra = 1\n")

        result = applier.write_expansion(report)

        assert result.success is False
        assert "changed" in result.message

    def test_unchanged_report_is_not_written(self, project, expander, applier):
        source_file = project / "plain.py"
        source_file.write_text("x = 1\n")

        result = applier.write_expansion(expander.expand_file(source_file))

        assert result.success is False

    def test_no_backup_when_disabled(self, project, expander):
        source_file = project / "model.py"
        source_file.write_text(MARKED)
        applier = ExpansionApplier(project_path=project, backup=False)

        result = applier.write_expansion(expander.expand_file(source_file))

        assert result.success is True
        assert result.backup is None


class TestApplyFixIts:
    def test_removes_marker(self, project, expander, applier):
        source_file = project / "colors.py"
        source_file.write_text(ENUM)
        report = expander.expand_file(source_file)

        result = applier.apply_fix_its(report.file, report.diagnostics)

        assert result.success is True
        assert source_file.read_text() == "from enum import Enum\n\n\nclass Color(Enum):\n    RED = 1\n"

    def test_removes_several_markers_bottom_up(self, project, expander, applier):
        source_file = project / "funcs.py"
        source_file.write_text(
            "@auto_resettable\ndef f():\n    pass\n\n\n@auto_resettable()\ndef g():\n    pass\n"
        )
        report = expander.expand_file(source_file)
        assert len(report.diagnostics) == 2

        result = applier.apply_fix_its(report.file, report.diagnostics)

        assert result.success is True
        assert source_file.read_text() == "def f():\n    pass\n\n\ndef g():\n    pass\n"

    def test_refuses_when_anchor_moved(self, project, expander, applier):
        source_file = project / "colors.py"
        source_file.write_text(ENUM)
        report = expander.expand_file(source_file)
        source_file.write_text("# shifted\n" + ENUM)

        result = applier.apply_fix_its(report.file, report.diagnostics)

        assert result.success is False


class TestUndo:
    def test_undo_restores_file(self, project, expander, applier):
        source_file = project / "model.py"
        source_file.write_text(MARKED)
        applier.write_expansion(expander.expand_file(source_file))

        manager = UndoManager(project)
        assert len(manager.list_undoable()) == 1

        result = manager.undo(Path("model.py"))

        assert result.success is True
        assert source_file.read_text() == MARKED
        assert manager.list_undoable() == []

    def test_undo_last_session(self, project, expander, applier):
        source_file = project / "model.py"
        source_file.write_text(MARKED)
        applier.write_expansion(expander.expand_file(source_file))

        results = UndoManager(project).undo_last_session()

        assert [r.success for r in results] == [True]
        assert source_file.read_text() == MARKED

    def test_undo_picks_latest_backup_first(self, project, expander, applier):
        source_file = project / "mixed.py"
        original = MARKED + "\n\n" + ENUM.split("\n\n\n", 1)[1]
        source_file.write_text(original)
        applier.apply_fix_its(Path("mixed.py"), expander.expand_file(source_file).diagnostics)
        fixed = source_file.read_text()
        applier.write_expansion(expander.expand_file(source_file))

        manager = UndoManager(project)
        assert manager.undo(Path("mixed.py")).success is True
        assert source_file.read_text() == fixed
        assert manager.undo(Path("mixed.py")).success is True
        assert source_file.read_text() == original

    def test_undo_without_history(self, project):
        result = UndoManager(project).undo(Path("nothing.py"))

        assert result.success is False
        assert "No undo history" in result.message
