"""Undo/rollback support for written expansions and fix-its."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from autoreset.core.config import get_autoreset_dir
from autoreset.core.models import WriteResult


@dataclass
class UndoEntry:
    """An undoable write record."""

    action: str
    file: Path
    backup: Path
    timestamp: str


class UndoManager:
    """Restores files from the backups written by :class:`ExpansionApplier`."""

    def __init__(self, project_path: Path):
        self.project_path = project_path
        self.autoreset_dir = get_autoreset_dir(project_path)
        self.backup_dir = self.autoreset_dir / "backups"

    def list_undoable(self) -> list[UndoEntry]:
        """List all writes that can be undone, newest session first."""
        entries = []
        if not self.backup_dir.exists():
            return entries

        for session_dir in sorted(self.backup_dir.iterdir(), reverse=True):
            manifest_file = session_dir / "manifest.json"
            if manifest_file.exists():
                manifest = json.loads(manifest_file.read_text())
                for entry in reversed(manifest):
                    entries.append(UndoEntry(
                        action=entry["action"],
                        file=Path(entry["file"]),
                        backup=Path(entry["backup"]),
                        timestamp=entry["timestamp"],
                    ))

        return entries

    def undo(self, file: Path) -> WriteResult:
        """Restore the most recent backup of ``file``."""
        target = file if file.is_absolute() else (self.project_path / file)
        target = target.resolve()

        for entry in self.list_undoable():
            if entry.file.resolve() != target:
                continue
            if not entry.backup.exists():
                return WriteResult(
                    success=False,
                    message=f"Backup file not found for {file}",
                    file=file,
                )
            target.write_text(entry.backup.read_text(encoding="utf-8"), encoding="utf-8")
            entry.backup.unlink()
            self._drop_manifest_entry(entry)
            return WriteResult(
                success=True,
                message=f"Reverted {entry.action} — restored {file}",
                file=file,
                backup=entry.backup,
            )

        return WriteResult(success=False, message=f"No undo history for {file}", file=file)

    def undo_last_session(self) -> list[WriteResult]:
        """Undo every write from the most recent session."""
        results = []
        if not self.backup_dir.exists():
            return results

        sessions = sorted(self.backup_dir.iterdir(), reverse=True)
        if not sessions:
            return results

        manifest_file = sessions[0] / "manifest.json"
        if not manifest_file.exists():
            return results

        manifest = json.loads(manifest_file.read_text())
        for entry in reversed(manifest):
            results.append(self.undo(Path(entry["file"])))

        return results

    def _drop_manifest_entry(self, entry: UndoEntry) -> None:
        manifest_file = entry.backup.parent / "manifest.json"
        if not manifest_file.exists():
            return
        manifest = [
            e for e in json.loads(manifest_file.read_text())
            if e["backup"] != str(entry.backup)
        ]
        if manifest:
            manifest_file.write_text(json.dumps(manifest, indent=2))
        else:
            manifest_file.unlink()
            if not any(entry.backup.parent.iterdir()):
                entry.backup.parent.rmdir()
