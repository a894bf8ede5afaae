"""Writing expansions and fix-its to disk, with backup management."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from autoreset.core.config import get_autoreset_dir
from autoreset.core.models import Diagnostic, ExpansionReport, WriteResult

logger = logging.getLogger(__name__)


class ExpansionApplier:
    """Applies expanded sources and fix-its to files with backup support."""

    def __init__(self, project_path: Path, backup: bool = True):
        self.project_path = project_path
        self.backup = backup
        self.autoreset_dir = get_autoreset_dir(project_path)
        self.backup_dir = self.autoreset_dir / "backups"

    def write_expansion(self, report: ExpansionReport) -> WriteResult:
        """Write the expanded source of ``report`` over its file."""
        if report.file is None:
            return WriteResult(success=False, message="Report has no file to write to.")

        file_path = self._resolve_file(report.file)
        if not file_path.exists():
            return WriteResult(success=False, message=f"File not found: {report.file}")

        content = file_path.read_text(encoding="utf-8")
        if content != report.original:
            return WriteResult(
                success=False,
                message="Source file has changed since expansion. Re-run `autoreset expand` first.",
                file=report.file,
            )
        if not report.changed:
            return WriteResult(success=False, message="Nothing to expand.", file=report.file)

        backup = self._create_backup("expand", file_path, content)
        file_path.write_text(report.expanded, encoding="utf-8")
        logger.info("Wrote %d expansion(s) to %s", report.expanded_count, file_path)

        return WriteResult(
            success=True,
            message=f"Expanded {report.expanded_count} declaration(s)",
            file=report.file,
            backup=backup,
        )

    def apply_fix_its(self, file: Path, diagnostics: list[Diagnostic]) -> WriteResult:
        """Apply the fix-its of ``diagnostics`` to ``file`` in one write."""
        file_path = self._resolve_file(file)
        if not file_path.exists():
            return WriteResult(success=False, message=f"File not found: {file}")

        fixable = [d for d in diagnostics if d.fix_it is not None]
        if not fixable:
            return WriteResult(success=False, message="No fix-its to apply.", file=file)

        content = file_path.read_text(encoding="utf-8")
        lines = content.splitlines(keepends=True)

        # Bottom-up so earlier anchors keep their positions.
        ordered = sorted(fixable, key=lambda d: (d.anchor.line, d.anchor.column), reverse=True)
        for diagnostic in ordered:
            if not _replace_span(lines, diagnostic):
                return WriteResult(
                    success=False,
                    message=f"'{diagnostic.anchor.text}' not found at line {diagnostic.anchor.line}. "
                    "Re-run `autoreset check` first.",
                    file=file,
                )

        new_content = "".join(lines)
        backup = self._create_backup("fix-it", file_path, content)
        file_path.write_text(new_content, encoding="utf-8")

        return WriteResult(
            success=True,
            message=f"Applied {len(fixable)} fix-it(s): {fixable[0].fix_it.message}",
            file=file,
            backup=backup,
        )

    def _resolve_file(self, file: Path) -> Path:
        """Resolve a possibly relative file path."""
        if file.is_absolute():
            return file
        return self.project_path / file

    def _create_backup(self, action: str, file_path: Path, content: str) -> Path | None:
        """Create a backup of the file before modifying it."""
        if not self.backup:
            return None

        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        backup_session = self.backup_dir / timestamp
        backup_session.mkdir(parents=True, exist_ok=True)

        backup_file = backup_session / f"{file_path.name}.bak"
        counter = 1
        while backup_file.exists():
            backup_file = backup_session / f"{file_path.name}.{counter}.bak"
            counter += 1
        backup_file.write_text(content, encoding="utf-8")

        manifest_file = backup_session / "manifest.json"
        manifest = []
        if manifest_file.exists():
            manifest = json.loads(manifest_file.read_text())

        manifest.append({
            "action": action,
            "file": str(file_path),
            "backup": str(backup_file),
            "timestamp": timestamp,
        })
        manifest_file.write_text(json.dumps(manifest, indent=2))
        return backup_file


def _replace_span(lines: list[str], diagnostic: Diagnostic) -> bool:
    """Replace the anchor span with the fix-it text; drop lines left blank."""
    anchor = diagnostic.anchor
    first, last = anchor.line - 1, anchor.end_line - 1
    if last >= len(lines):
        return False

    head = lines[first].encode("utf-8")[: anchor.column].decode("utf-8")
    tail = lines[last].encode("utf-8")[anchor.end_column :].decode("utf-8")
    current = "".join(lines[first : last + 1])
    if not current.lstrip().startswith(anchor.text.split("(")[0]):
        return False

    replaced = head + diagnostic.fix_it.replacement + tail
    lines[first : last + 1] = [] if not replaced.strip() else [replaced]
    return True
